"""
Report body grouping and summary totals for FileAnalysis
"""
from itertools import groupby
from operator import attrgetter
from typing import Iterable, List, Sequence

from fileanalysis.models import FileRecord, ReportGroup, SummaryStats


def sort_key(record: FileRecord):
    return record.owner, record.size_bytes


def group_by_owner(records: Iterable[FileRecord]) -> List[ReportGroup]:
    """Sort records by owner then size and split them into owner groups.

    The sort is stable, so records with the same owner and size keep the
    order they were passed in.
    """
    ordered = sorted(records, key=sort_key)
    return [
        ReportGroup(owner=owner, records=tuple(group))
        for owner, group in groupby(ordered, key=attrgetter('owner'))
    ]


def summarize(body: Sequence[ReportGroup]) -> SummaryStats:
    """Count the entries in a report body and add up their sizes"""
    total_files = 0
    total_size = 0
    for group in body:
        for record in group.records:
            total_files += 1
            total_size += record.size_bytes
    return SummaryStats(total_files=total_files, total_size_bytes=total_size)
