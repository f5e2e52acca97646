"""
Filter parsing and evaluation for FileAnalysis

Filters are given on the command line as ``flag value`` pairs after the
directory argument:

    -e txt,sh                   extension is one of the listed ones
    +s 1000                     larger than 1000 bytes
    -s 1000                     smaller than 1000 bytes
    -t 2024-01-01:2024-03-31    modified between the two days (inclusive)
    -p -rw-r--r--               permission string matches exactly

All filters must pass for a file to be reported. Evaluation stops at the
first filter that fails.
"""
import logging
from datetime import datetime, time
from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple

from fileanalysis.errors import InvalidFilterValueError, UnknownFilterError
from fileanalysis.models import FileRecord, FilterKind, FilterSpec

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"

FILTER_FLAGS = {
    '-e': FilterKind.EXTENSION_IN,
    '+s': FilterKind.SIZE_GREATER_THAN,
    '-s': FilterKind.SIZE_LESS_THAN,
    '-t': FilterKind.TIME_RANGE,
    '-p': FilterKind.PERMISSIONS_EQUAL,
}


def _parse_extensions(flag: str, value: str) -> frozenset:
    return frozenset(value.split(','))


def _parse_size(flag: str, value: str) -> int:
    try:
        size = int(value)
    except ValueError:
        raise InvalidFilterValueError(flag, value, "size must be a whole number of bytes") from None
    if size < 0:
        raise InvalidFilterValueError(flag, value, "size must not be negative")
    return size


def _parse_day(flag: str, raw: str, day: str):
    try:
        return datetime.strptime(day, DATE_FORMAT).date()
    except ValueError:
        raise InvalidFilterValueError(flag, raw, f"'{day}' is not a YYYY-MM-DD date") from None


def _parse_time_range(flag: str, value: str) -> Tuple[datetime, datetime]:
    parts = value.split(':')
    if len(parts) != 2:
        raise InvalidFilterValueError(flag, value, "expected START:END")
    start = datetime.combine(_parse_day(flag, value, parts[0]), time.min)
    end = datetime.combine(_parse_day(flag, value, parts[1]), time.max)
    if start > end:
        raise InvalidFilterValueError(flag, value, "start date is after end date")
    return start, end


def _parse_permissions(flag: str, value: str) -> str:
    return value


_OPERAND_PARSERS: Dict[FilterKind, Callable[[str, str], object]] = {
    FilterKind.EXTENSION_IN: _parse_extensions,
    FilterKind.SIZE_GREATER_THAN: _parse_size,
    FilterKind.SIZE_LESS_THAN: _parse_size,
    FilterKind.TIME_RANGE: _parse_time_range,
    FilterKind.PERMISSIONS_EQUAL: _parse_permissions,
}


def parse_filter(flag: str, value: str) -> FilterSpec:
    """Turn one ``flag value`` pair into a FilterSpec"""
    kind = FILTER_FLAGS.get(flag)
    if kind is None:
        raise UnknownFilterError(flag)
    operand = _OPERAND_PARSERS[kind](flag, value)
    return FilterSpec(kind=kind, operand=operand, flag=flag, raw=value)


def parse_filters(tokens: Sequence[str]) -> Tuple[FilterSpec, ...]:
    """Parse the raw filter tokens that follow the directory argument.

    Tokens are consumed in ``flag value`` pairs and the resulting specs keep
    the order they were given in. The first bad token decides the error.
    """
    specs = []
    tokens = list(tokens)
    for i in range(0, len(tokens), 2):
        flag = tokens[i]
        # Checked here so an unknown trailing flag is blamed before its missing value
        if flag not in FILTER_FLAGS:
            raise UnknownFilterError(flag)
        if i + 1 >= len(tokens):
            raise InvalidFilterValueError(flag, None, "missing value")
        specs.append(parse_filter(flag, tokens[i + 1]))
    return tuple(specs)


def _extension_in(record: FileRecord, extensions) -> bool:
    return record.extension in extensions


def _size_greater_than(record: FileRecord, threshold: int) -> bool:
    return record.size_bytes > threshold


def _size_less_than(record: FileRecord, threshold: int) -> bool:
    return record.size_bytes < threshold


def _time_range(record: FileRecord, bounds: Tuple[datetime, datetime]) -> bool:
    start, end = bounds
    return start <= record.last_modified <= end


def _permissions_equal(record: FileRecord, permissions: str) -> bool:
    return record.permissions == permissions


_PREDICATES: Dict[FilterKind, Callable[[FileRecord, object], bool]] = {
    FilterKind.EXTENSION_IN: _extension_in,
    FilterKind.SIZE_GREATER_THAN: _size_greater_than,
    FilterKind.SIZE_LESS_THAN: _size_less_than,
    FilterKind.TIME_RANGE: _time_range,
    FilterKind.PERMISSIONS_EQUAL: _permissions_equal,
}


def matches(record: FileRecord, spec: FilterSpec) -> bool:
    """Check a single filter against a record"""
    predicate = _PREDICATES.get(spec.kind)
    if predicate is None:
        raise UnknownFilterError(spec.flag or str(spec.kind))
    return predicate(record, spec.operand)


def first_failing(record: FileRecord, filters: Iterable[FilterSpec]) -> Optional[FilterSpec]:
    """Return the first filter that rejects ``record``, or None if all pass"""
    for spec in filters:
        if not matches(record, spec):
            return spec
    return None


def evaluate(record: FileRecord, filters: Iterable[FilterSpec]) -> bool:
    """True when ``record`` passes every filter.

    Filters are checked in order and evaluation stops at the first one that
    fails. An unknown filter kind raises UnknownFilterError rather than
    rejecting the file.
    """
    failed = first_failing(record, filters)
    if failed is not None:
        logger.debug("Rejected %s by %s", record.path, failed.describe())
        return False
    return True
