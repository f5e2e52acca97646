import os
from unittest.mock import patch

import pytest

from fileanalysis.config import Config
from fileanalysis.errors import ExtractionError, InvalidDirectoryError, UnknownFilterError
from fileanalysis.extractor import extract
from fileanalysis.filters import parse_filters
from fileanalysis.models import FilterSpec, SummaryStats
from fileanalysis.scanner import DirectoryScanner, analyze, walk_files


def test_walk_finds_nested_files_in_sorted_order(tmp_path, write_file):
    for name in ["b.txt", "a.txt", "sub/z.txt", "sub/deeper/y.txt", "aa/x.txt"]:
        write_file(tmp_path / name, 1)
    (tmp_path / "emptydir").mkdir()

    found = [os.path.relpath(p, tmp_path) for p in walk_files(str(tmp_path))]
    assert found == ["a.txt", "b.txt",
                     os.path.join("aa", "x.txt"),
                     os.path.join("sub", "z.txt"),
                     os.path.join("sub", "deeper", "y.txt")]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_walk_skips_symlinks(tmp_path, write_file):
    target = write_file(tmp_path / "real.txt", 1)
    os.symlink(target, tmp_path / "link.txt")
    assert list(walk_files(str(tmp_path))) == [str(target)]


def test_scenario_extension_and_size(owned_tree):
    config = Config(scan_path=str(owned_tree), quiet=True,
                    filters=parse_filters(["-e", "txt", "+s", "100"]))
    result = analyze(config)

    assert [g.owner for g in result.groups] == ["alice"]
    assert [os.path.basename(r.path) for r in result.groups[0].records] == ["a.txt"]
    assert result.summary == SummaryStats(total_files=1, total_size_bytes=500)
    assert result.stats.files_discovered == 3
    assert result.stats.files_matched == 1
    assert result.stats.files_rejected == 2


def test_scenario_no_filters(owned_tree):
    result = analyze(Config(scan_path=str(owned_tree), quiet=True))

    assert [g.owner for g in result.groups] == ["alice", "bob"]
    assert [r.size_bytes for r in result.groups[0].records] == [50, 500]
    assert result.summary == SummaryStats(3, 2550)


def test_empty_directory(tmp_path):
    result = analyze(Config(scan_path=str(tmp_path), quiet=True))
    assert result.groups == []
    assert result.summary == SummaryStats(0, 0)
    assert result.stats.files_discovered == 0


def test_invalid_directory(tmp_path):
    with pytest.raises(InvalidDirectoryError):
        DirectoryScanner(Config(scan_path=str(tmp_path / "missing"), quiet=True)).scan()


def test_file_path_is_not_a_directory(tmp_path, write_file):
    path = write_file(tmp_path / "a.txt", 1)
    with pytest.raises(InvalidDirectoryError):
        analyze(Config(scan_path=str(path), quiet=True))


def test_repeated_runs_are_identical(tmp_path, write_file):
    for i in range(30):
        write_file(tmp_path / f"d{i % 4}" / f"f{i}.dat", 100 * (i % 3))
    config = Config(scan_path=str(tmp_path), quiet=True, num_threads=8)

    first = analyze(config)
    second = analyze(config)
    assert first.groups == second.groups
    assert first.summary == second.summary


def test_equal_sizes_keep_discovery_order(tmp_path, write_file):
    for name in ["c", "a", "b", "d"]:
        write_file(tmp_path / name, 7)
    result = analyze(Config(scan_path=str(tmp_path), quiet=True, num_threads=4))
    assert [os.path.basename(r.path) for r in result.groups[0].records] == ["a", "b", "c", "d"]


def test_unreadable_file_is_skipped(tmp_path, write_file):
    write_file(tmp_path / "keep.txt", 10)
    gone = write_file(tmp_path / "gone.txt", 10)

    def flaky_extract(path):
        if path == str(gone):
            raise ExtractionError(path, FileNotFoundError(2, "No such file"))
        return extract(path)

    with patch("fileanalysis.scanner.extract", side_effect=flaky_extract):
        scanner = DirectoryScanner(Config(scan_path=str(tmp_path), quiet=True))
        records = scanner.scan()

    assert [os.path.basename(r.path) for r in records] == ["keep.txt"]
    assert scanner.stats.files_skipped == 1
    assert scanner.stats.skipped_paths == [str(gone)]


def test_unknown_filter_aborts_scan(tmp_path, write_file):
    write_file(tmp_path / "a.txt", 10)
    bogus = FilterSpec(kind="not-a-kind", operand=None, flag="-z")
    with pytest.raises(UnknownFilterError):
        analyze(Config(scan_path=str(tmp_path), quiet=True, filters=(bogus,)))
