"""
Legacy ``z`` data import for zipzap.

The legacy format stores one directory per line as ``path|rank|time``.
The whole payload is parsed before anything is written, and the write is a
single transaction, so a malformed line leaves the store untouched.
"""

import logging
import math
import re
from typing import Iterable, Iterator, List

from ..errors import ParseError
from ..models.entry import Entry, ImportResult
from .store import Store


logger = logging.getLogger(__name__)

# SQLite INTEGER range
TIME_MIN = -2 ** 63
TIME_MAX = 2 ** 63 - 1

# ASCII only; Python's float()/int() also take underscores and non-ASCII digits
_RANK_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_TIME_RE = re.compile(r"[+-]?[0-9]+")


def parse_line(line: str, line_number: int, separator: str = "|") -> Entry:
    """
    Parse one legacy record.

    Paths may themselves contain the separator, so rank and time are taken
    from the right-hand end of the line.

    Raises:
        ParseError: If a field is missing or rank/time is not numeric
    """
    parts = line.rsplit(separator, 2)
    if not parts[0].strip():
        raise ParseError("missing path", line_number, line)
    if len(parts) < 2:
        raise ParseError("missing rank", line_number, line)
    if len(parts) < 3:
        raise ParseError("missing time", line_number, line)

    path, raw_rank, raw_time = parts

    if not _RANK_RE.fullmatch(raw_rank):
        raise ParseError(f"invalid rank '{raw_rank}'", line_number, line)
    rank = float(raw_rank)
    if not math.isfinite(rank) or rank < 0:
        raise ParseError(f"invalid rank '{raw_rank}'", line_number, line)

    if not _TIME_RE.fullmatch(raw_time):
        raise ParseError(f"invalid time '{raw_time}'", line_number, line)
    time = int(raw_time)
    if not TIME_MIN <= time <= TIME_MAX:
        raise ParseError(f"invalid time '{raw_time}'", line_number, line)

    return Entry(path=path, rank=rank, last_access=time)


def export_lines(entries: Iterable[Entry], separator: str = "|") -> Iterator[str]:
    """Render entries in the legacy format, one record per line."""
    for entry in entries:
        yield entry.to_line(separator) + "\n"


def parse_lines(raw_lines: Iterable[str], separator: str = "|") -> List[Entry]:
    """Parse every non-empty line of a legacy payload."""
    entries = []
    for line_number, line in enumerate(raw_lines, start=1):
        line = line.rstrip("\r\n")
        if not line.strip():
            continue
        entries.append(parse_line(line, line_number, separator))
    return entries


def import_lines(store: Store, raw_lines: Iterable[str], clear: bool = False, separator: str = "|") -> ImportResult:
    """
    Import legacy records into the store.

    Args:
        store: Destination store
        raw_lines: Lines of the legacy payload
        clear: Whether to delete every existing entry first
        separator: Field separator of the payload

    Returns:
        ImportResult with processed, applied and skipped counts

    Raises:
        ParseError: If any line is malformed; nothing is written
    """
    entries = parse_lines(raw_lines, separator)
    applied, skipped = store.import_entries(entries, clear=clear)
    result = ImportResult(processed=len(entries), applied=applied, skipped=skipped, cleared=clear)
    logger.info(f"Imported {result.processed} rows ({result.applied} applied, {result.skipped} skipped)")
    return result


def import_text(store: Store, text: str, clear: bool = False, separator: str = "|") -> ImportResult:
    """Import a legacy payload given as one string."""
    return import_lines(store, text.splitlines(), clear=clear, separator=separator)
