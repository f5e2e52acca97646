"""
File metadata extraction for FileAnalysis
"""
import os
from datetime import datetime

from fileanalysis.errors import ExtractionError
from fileanalysis.models import FileRecord
from fileanalysis.utils import render_permissions

try:
    import pwd
except ImportError:  # Windows has no password database
    pwd = None


def resolve_owner(uid: int) -> str:
    """Username owning ``uid``, or the numeric uid when it has no entry"""
    if pwd is None:
        return str(uid)
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return str(uid)


def extract(path: str) -> FileRecord:
    """Build a FileRecord for ``path``.

    Raises ExtractionError when the file disappeared after it was discovered
    or its metadata cannot be read.
    """
    try:
        st = os.lstat(path)
    except OSError as e:
        raise ExtractionError(path, e) from e

    # Truncated to microseconds, never rounded up into the next second
    mtime_ns = st.st_mtime_ns
    last_modified = datetime.fromtimestamp(mtime_ns // 10**9).replace(microsecond=mtime_ns % 10**9 // 1000)

    return FileRecord(
        path=path,
        size_bytes=st.st_size,
        owner=resolve_owner(st.st_uid),
        permissions=render_permissions(st.st_mode),
        last_modified=last_modified,
    )
