"""
Core scanning functionality for FileAnalysis
"""
import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from tqdm import tqdm

from fileanalysis.config import Config
from fileanalysis.errors import ExtractionError, InvalidDirectoryError
from fileanalysis.extractor import extract
from fileanalysis.filters import evaluate
from fileanalysis.grouping import group_by_owner, summarize
from fileanalysis.models import AnalysisResult, FileRecord, ScanStats
from fileanalysis.utils import validate_path

logger = logging.getLogger(__name__)


def walk_files(root: str, stats: Optional[ScanStats] = None) -> Iterator[str]:
    """Yield every regular file below ``root``.

    Directory entries are visited in sorted order so repeated runs see files
    in the same order. Symlinks are neither followed nor reported.
    """
    def on_error(error: OSError):
        logger.warning("Cannot read directory %s: %s", error.filename, error.strerror)

    for current, dirs, files in os.walk(root, onerror=on_error):
        dirs.sort()
        if stats is not None:
            stats.directories_scanned += 1
        for filename in sorted(files):
            entry = Path(current) / filename
            try:
                if entry.is_file() and not entry.is_symlink():
                    yield str(entry)
            except OSError:
                continue


class DirectoryScanner:
    """Walks a directory tree and keeps the files that pass every filter"""

    def __init__(self, config: Config):
        self.config = config
        self.lock = threading.Lock()
        self.stats = ScanStats()

    def scan(self) -> List[FileRecord]:
        """Return matching records in discovery order"""
        if not validate_path(self.config.scan_path):
            raise InvalidDirectoryError(self.config.scan_path)

        self.stats = ScanStats()
        start_time = time.time()
        files_to_scan = list(walk_files(self.config.scan_path, self.stats))
        self.stats.files_discovered = len(files_to_scan)
        logger.info("Found %d files under %s", len(files_to_scan), self.config.scan_path)

        accepted: Dict[int, FileRecord] = {}
        if files_to_scan:
            self._evaluate_all(files_to_scan, accepted)

        self.stats.files_matched = len(accepted)
        self.stats.elapsed = time.time() - start_time
        return [accepted[i] for i in sorted(accepted)]

    def _evaluate_all(self, files_to_scan: List[str], accepted: Dict[int, FileRecord]):
        executor = ThreadPoolExecutor(max_workers=self.config.num_threads)
        try:
            with tqdm(total=len(files_to_scan), desc="Analyzing files",
                      unit="file", disable=self.config.quiet) as pbar:
                futures = {
                    executor.submit(self._scan_file, file_path): i
                    for i, file_path in enumerate(files_to_scan)
                }
                for future in as_completed(futures):
                    record = future.result()
                    pbar.update(1)
                    if record is not None:
                        accepted[futures[future]] = record
        except BaseException:
            executor.shutdown(wait=False, cancel_futures=True)
            raise
        executor.shutdown(wait=True)

    def _scan_file(self, file_path: str) -> Optional[FileRecord]:
        """Extract and filter one file; None if it is rejected or unreadable"""
        try:
            record = extract(file_path)
        except ExtractionError as e:
            logger.warning("Skipping %s: %s", file_path, e.cause)
            with self.lock:
                self.stats.files_skipped += 1
                self.stats.skipped_paths.append(file_path)
            return None

        if evaluate(record, self.config.filters):
            logger.debug("Matched %s", file_path)
            return record

        with self.lock:
            self.stats.files_rejected += 1
        return None


def analyze(config: Config) -> AnalysisResult:
    """Scan, group and summarize in one pass"""
    scanner = DirectoryScanner(config)
    records = scanner.scan()
    body = group_by_owner(records)
    return AnalysisResult(
        scan_path=config.scan_path,
        groups=body,
        summary=summarize(body),
        stats=scanner.stats,
        filters=config.filters,
    )
