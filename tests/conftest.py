import dataclasses
import os
from datetime import datetime
from pathlib import Path

import pytest

from fileanalysis import extractor
from fileanalysis.models import FileRecord


@pytest.fixture
def make_record():
    """Build a FileRecord without touching the filesystem."""
    def _make(path="file.txt", size=100, owner="alice", permissions="-rw-r--r--",
              last_modified=datetime(2024, 1, 15, 12, 0, 0)):
        return FileRecord(path=path, size_bytes=size, owner=owner,
                          permissions=permissions, last_modified=last_modified)
    return _make


def _write_file(path: Path, size: int, mtime: datetime = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    if mtime is not None:
        ts = mtime.timestamp()
        os.utime(path, (ts, ts))
    return path


@pytest.fixture
def write_file():
    """Create a file of `size` bytes, optionally with a fixed mtime."""
    return _write_file


@pytest.fixture
def owned_tree(tmp_path, monkeypatch):
    """a.txt (alice, 500), b.log (bob, 2000), c.txt (alice, 50).

    Ownership is faked by rewriting the owner of extracted records, since a
    test run cannot chown files to arbitrary users.
    """
    root = tmp_path / "root"
    owners = {}
    for name, size, owner in [("a.txt", 500, "alice"),
                              ("sub/b.log", 2000, "bob"),
                              ("c.txt", 50, "alice")]:
        path = _write_file(root / name, size)
        owners[str(path)] = owner

    real_extract = extractor.extract

    def fake_extract(path):
        record = real_extract(path)
        return dataclasses.replace(record, owner=owners[path])

    monkeypatch.setattr("fileanalysis.scanner.extract", fake_extract)
    return root
