"""
Configuration management for FileAnalysis
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from fileanalysis.models import FilterSpec

REPORT_FORMATS = ('text', 'markdown', 'json', 'html')


@dataclass
class Config:
    """Configuration settings for one analysis run"""
    scan_path: str
    output_path: Optional[str] = None
    report_format: str = 'text'
    num_threads: int = 4
    quiet: bool = False
    filters: Tuple[FilterSpec, ...] = ()

    def __post_init__(self):
        if self.report_format not in REPORT_FORMATS:
            raise ValueError(f"Unsupported report format: {self.report_format}")
        if self.num_threads < 1:
            raise ValueError("Thread count must be at least 1")
        self.filters = tuple(self.filters)
