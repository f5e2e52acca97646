"""
Data models for FileAnalysis
"""
import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, List, Tuple


@dataclass(frozen=True)
class FileRecord:
    """Metadata snapshot of one file taken at scan time"""
    path: str
    size_bytes: int
    owner: str
    permissions: str
    last_modified: datetime

    @property
    def extension(self) -> str:
        """Text after the last '.' of the file name, or '' if there is none"""
        name = os.path.basename(self.path)
        if '.' not in name:
            return ''
        return name.rsplit('.', 1)[1]


class FilterKind(Enum):
    EXTENSION_IN = 'extension_in'
    SIZE_GREATER_THAN = 'size_greater_than'
    SIZE_LESS_THAN = 'size_less_than'
    TIME_RANGE = 'time_range'
    PERMISSIONS_EQUAL = 'permissions_equal'


@dataclass(frozen=True)
class FilterSpec:
    """One parsed filter condition.

    ``operand`` depends on ``kind``: a frozenset of extensions, an integer
    byte threshold, a ``(start, end)`` datetime pair or a permission string.
    ``flag`` and ``raw`` keep the command-line tokens it was parsed from.
    """
    kind: FilterKind
    operand: Any
    flag: str = ''
    raw: str = ''

    def describe(self) -> str:
        if self.flag:
            return f"{self.flag} {self.raw}"
        return f"{self.kind.value}={self.operand!r}"


@dataclass(frozen=True)
class ReportGroup:
    """Consecutive run of same-owner records in the sorted report body"""
    owner: str
    records: Tuple[FileRecord, ...]

    @property
    def total_size(self) -> int:
        return sum(r.size_bytes for r in self.records)

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class SummaryStats:
    total_files: int = 0
    total_size_bytes: int = 0


@dataclass
class ScanStats:
    """Counters collected while walking and evaluating a tree"""
    files_discovered: int = 0
    files_matched: int = 0
    files_rejected: int = 0
    files_skipped: int = 0
    directories_scanned: int = 0
    elapsed: float = 0.0
    skipped_paths: list = field(default_factory=list)


@dataclass
class AnalysisResult:
    """Everything a report is rendered from"""
    scan_path: str
    groups: List[ReportGroup]
    summary: SummaryStats
    stats: ScanStats
    filters: Tuple[FilterSpec, ...] = ()
    generated_at: datetime = field(default_factory=datetime.now)
