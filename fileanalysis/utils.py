"""
Utility functions for FileAnalysis
"""
import stat
from datetime import datetime
from pathlib import Path

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_file_size(size_bytes: int, use_decimal: bool = True) -> str:
    """
    Format file size in human readable format.

    Args:
        size_bytes: Size in bytes
        use_decimal: If True, use decimal units (1000-based).
                     If False, use binary units (1024-based).
    """
    units = ['B', 'KB', 'MB', 'GB', 'TB']
    divisor = 1000.0 if use_decimal else 1024.0

    size = float(size_bytes)
    for unit in units:
        if size < divisor:
            return f"{size:.1f} {unit}"
        size /= divisor
    return f"{size:.1f} {units[-1]}"


def format_timestamp(value: datetime) -> str:
    """Render a modification time the way reports show it"""
    return value.strftime(TIMESTAMP_FORMAT)


def validate_path(path: str) -> bool:
    """Validate if path exists and is a directory"""
    try:
        path_obj = Path(path)
        return path_obj.exists() and path_obj.is_dir()
    except OSError:
        return False


def render_permissions(mode: int) -> str:
    """Permission string such as ``-rw-r--r--`` for a st_mode value"""
    return stat.filemode(mode)

