"""
Report generation for FileAnalysis
"""
import json
import logging
import os
import tempfile
from pathlib import Path

from jinja2 import Environment

from fileanalysis.config import Config
from fileanalysis.models import AnalysisResult
from fileanalysis.utils import format_file_size, format_timestamp

logger = logging.getLogger(__name__)

REPORT_EXTENSIONS = {
    'text': '.txt',
    'markdown': '.md',
    'json': '.json',
    'html': '.html',
}

TEXT_TEMPLATE = """\
File Analysis Report

{% for group in groups %}

Owner of the files below: {{ "%-10s"|format(group.owner) }}
{% for record in group.records %}
File: {{ "%-30s"|format(record.path) }}
Size: {{ "%10s"|format(record.size_bytes) }} bytes
Permissions: {{ "%-10s"|format(record.permissions) }}
Last Modified: {{ record.last_modified|timestamp }}

{% endfor %}
{% endfor %}
Summary Report

Total Files: {{ summary.total_files }}
Total Size: {{ summary.total_size_bytes }} bytes
"""

MARKDOWN_TEMPLATE = """\
# File Analysis Report

**Generated:** {{ generated_at|timestamp }}
**Scan Path:** `{{ scan_path }}`
{% if filters %}
**Filters:** {% for spec in filters %}`{{ spec.describe() }}`{% if not loop.last %}, {% endif %}{% endfor %}

{% endif %}

{% for group in groups %}
## {{ group.owner }}

| File | Size (bytes) | Permissions | Last Modified |
|------|-------------:|-------------|---------------|
{% for record in group.records %}
| `{{ record.path }}` | {{ record.size_bytes }} | `{{ record.permissions }}` | {{ record.last_modified|timestamp }} |
{% endfor %}

{% endfor %}
## Summary

- **Total Files:** {{ summary.total_files }}
- **Total Size:** {{ summary.total_size_bytes }} bytes ({{ summary.total_size_bytes|filesize }})
"""

HTML_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>File Analysis Report</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 20px; }
        .header { background: #2c3e50; color: white; padding: 20px; border-radius: 5px; }
        .summary { background: #ecf0f1; padding: 15px; border-radius: 5px; margin: 20px 0; }
        table { border-collapse: collapse; width: 100%; margin-bottom: 20px; }
        th, td { border: 1px solid #bdc3c7; padding: 6px 10px; text-align: left; }
        th { background: #3498db; color: white; }
        td.size { text-align: right; font-family: monospace; }
    </style>
</head>
<body>
    <div class="header">
        <h1>File Analysis Report</h1>
        <p>Generated: {{ generated_at|timestamp }}</p>
        <p>Scan Path: {{ scan_path }}</p>
    </div>
{% for group in groups %}
    <h2>Owner: {{ group.owner }}</h2>
    <table>
        <tr><th>File</th><th>Size (bytes)</th><th>Permissions</th><th>Last Modified</th></tr>
{% for record in group.records %}
        <tr>
            <td>{{ record.path }}</td>
            <td class="size">{{ record.size_bytes }}</td>
            <td><code>{{ record.permissions }}</code></td>
            <td>{{ record.last_modified|timestamp }}</td>
        </tr>
{% endfor %}
    </table>
{% endfor %}
    <div class="summary">
        <h2>Summary</h2>
        <ul>
            <li><strong>Total Files:</strong> {{ summary.total_files }}</li>
            <li><strong>Total Size:</strong> {{ summary.total_size_bytes }} bytes ({{ summary.total_size_bytes|filesize }})</li>
        </ul>
    </div>
</body>
</html>
"""


def _environment(autoescape: bool = False) -> Environment:
    env = Environment(autoescape=autoescape, trim_blocks=True,
                      lstrip_blocks=True, keep_trailing_newline=True)
    env.filters['timestamp'] = format_timestamp
    env.filters['filesize'] = format_file_size
    return env


class ReportGenerator:
    """Renders an AnalysisResult and writes it to disk"""

    def __init__(self, config: Config):
        self.config = config

    @property
    def report_path(self) -> Path:
        if self.config.output_path:
            return Path(self.config.output_path)
        return Path(f"file_analysis{REPORT_EXTENSIONS[self.config.report_format]}")

    def render(self, result: AnalysisResult) -> str:
        """Render the report in the configured format"""
        if self.config.report_format == 'text':
            return self._render_template(TEXT_TEMPLATE, result)
        elif self.config.report_format == 'markdown':
            return self._render_template(MARKDOWN_TEMPLATE, result)
        elif self.config.report_format == 'html':
            return self._render_template(HTML_TEMPLATE, result, autoescape=True)
        elif self.config.report_format == 'json':
            return self._render_json(result)
        else:
            raise ValueError(f"Unsupported report format: {self.config.report_format}")

    def generate_report(self, result: AnalysisResult) -> str:
        """Render and write the report, returning its path.

        The content goes to a temporary file next to the destination and is
        renamed into place, so an existing report is only ever replaced by a
        complete one.
        """
        content = self.render(result)
        report_path = self.report_path
        directory = report_path.parent
        directory.mkdir(parents=True, exist_ok=True)

        fd, temp_name = tempfile.mkstemp(dir=str(directory), prefix='.file_analysis-', suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8', errors='surrogateescape') as f:
                f.write(content)
            os.replace(temp_name, report_path)
        except BaseException:
            os.unlink(temp_name)
            raise

        logger.info("Wrote %s report to %s", self.config.report_format, report_path)
        return str(report_path)

    def _render_template(self, source: str, result: AnalysisResult, autoescape: bool = False) -> str:
        template = _environment(autoescape).from_string(source)
        return template.render(
            scan_path=result.scan_path,
            generated_at=result.generated_at,
            filters=result.filters,
            groups=result.groups,
            summary=result.summary,
        )

    def _render_json(self, result: AnalysisResult) -> str:
        report_data = {
            'report_info': {
                'generated_at': result.generated_at.isoformat(),
                'scan_path': result.scan_path,
                'filters': [spec.describe() for spec in result.filters],
                'files_discovered': result.stats.files_discovered,
                'files_skipped': result.stats.files_skipped,
            },
            'groups': [
                {
                    'owner': group.owner,
                    'files': [
                        {
                            'path': record.path,
                            'size_bytes': record.size_bytes,
                            'permissions': record.permissions,
                            'last_modified': record.last_modified.isoformat(),
                        }
                        for record in group.records
                    ],
                }
                for group in result.groups
            ],
            'summary': {
                'total_files': result.summary.total_files,
                'total_size_bytes': result.summary.total_size_bytes,
            },
        }
        return json.dumps(report_data, indent=2) + '\n'
