#!/usr/bin/env python3
"""
FileAnalysis - Main Entry Point
Searches a directory and its subdirectories for files and writes a report
of their size, owner, permissions and last modified time, grouped by owner.
"""
import logging
import sys

import click
from colorama import init, Fore, Style

from fileanalysis import __version__
from fileanalysis.config import Config, REPORT_FORMATS
from fileanalysis.errors import FatalConfigError
from fileanalysis.filters import parse_filters
from fileanalysis.reporter import ReportGenerator
from fileanalysis.scanner import analyze
from fileanalysis.utils import format_file_size, validate_path

# Initialize colorama for cross-platform colored output
init()

LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"

FILTER_HELP = """
\b
Filter options (given after DIRECTORY, applied in order):
  -e EXTENSIONS   extension is one of a comma-separated list, e.g. txt,sh
  +s SIZE         larger than SIZE bytes
  -s SIZE         smaller than SIZE bytes
  -t START:END    last modified between two YYYY-MM-DD dates, inclusive
  -p PERMISSIONS  permission string equals e.g. -rw-rw-r--

\b
Example:
  fileanalysis /path/to/directory -e txt,odt -s 10000
"""


def configure_logging(verbose: bool):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


def fail(message: str):
    click.echo(f"{Fore.RED}Error: {message}{Style.RESET_ALL}", err=True)
    sys.exit(1)


@click.command(
    epilog=FILTER_HELP,
    context_settings={
        'ignore_unknown_options': True,
        'help_option_names': ['-h', '--help'],
    },
)
@click.argument('directory', type=str)
@click.argument('filter_tokens', nargs=-1, type=click.UNPROCESSED)
@click.option('--output', '-o', 'output_path',
              help='Report file to write (default: file_analysis.<ext> in the current directory)',
              default=None,
              type=str)
@click.option('--format', '-f', 'report_format',
              type=click.Choice(REPORT_FORMATS, case_sensitive=False),
              default='text',
              help='Report format')
@click.option('--threads', '-j', 'num_threads',
              help='Number of worker threads reading file metadata',
              default=4,
              type=click.IntRange(min=1))
@click.option('--verbose', '-v',
              is_flag=True,
              help='Log every rejected file and the filter that rejected it')
@click.option('--quiet', '-q',
              is_flag=True,
              help='Only print errors')
@click.version_option(__version__, '--version')
def main(directory, filter_tokens, output_path, report_format, num_threads, verbose, quiet):
    """
    Analyze the files below DIRECTORY.

    Generates a report with file details such as size, owner, permissions
    and last modified timestamp, grouped by owner and sorted by size, followed
    by a summary with the total file count and size.
    """
    configure_logging(verbose)

    def status(message: str, colour: str = Fore.GREEN):
        if not quiet:
            click.echo(f"{colour}{message}{Style.RESET_ALL}")

    # Validate inputs before touching the tree
    if not validate_path(directory):
        fail(f"Directory '{directory}' does not exist.")

    try:
        filters = parse_filters(filter_tokens)
    except FatalConfigError as e:
        fail(str(e))

    config = Config(
        scan_path=directory,
        output_path=output_path,
        report_format=report_format.lower(),
        num_threads=num_threads,
        quiet=quiet,
        filters=filters,
    )

    try:
        status("Performing file analysis...", Fore.CYAN)
        result = analyze(config)

        reporter = ReportGenerator(config)
        report_path = reporter.generate_report(result)

        stats = result.stats
        status(f"Matched {result.summary.total_files} of {stats.files_discovered} files "
               f"({format_file_size(result.summary.total_size_bytes)})", Fore.CYAN)
        if stats.files_skipped:
            status(f"Skipped {stats.files_skipped} unreadable files", Fore.YELLOW)
        status(f"File analysis completed. Report saved in '{report_path}'.")

    except FatalConfigError as e:
        fail(str(e))
    except KeyboardInterrupt:
        click.echo(f"\n{Fore.YELLOW}Analysis interrupted by user.{Style.RESET_ALL}", err=True)
        sys.exit(1)
    except OSError as e:
        fail(f"Could not write report: {e}")


if __name__ == "__main__":
    main()
