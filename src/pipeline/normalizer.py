"""Record normalizer: raw CSV rows → typed AttemptRecords.

Never raises on bad field content. Numbers fall back to 0, dates to None.
"""

import logging
import re
from datetime import datetime, tzinfo

from dateutil import parser as date_parser

from src.core.schemas import AttemptRecord, RawRow

logger = logging.getLogger(__name__)

# Leading numeric prefix, so "12 jobs" parses as 12 and "3.5s" as 3.5.
_INT_PATTERN = re.compile(r"\s*\+?(\d+)")
_FLOAT_PATTERN = re.compile(r"\s*\+?(\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def parse_int(value: str | None) -> int:
    """Parse the leading integer of ``value``; 0 when absent or non-numeric."""
    if not value:
        return 0
    match = _INT_PATTERN.match(value)
    if match is None:
        return 0
    return int(match.group(1))


def parse_float(value: str | None) -> float:
    """Parse the leading decimal number of ``value``; 0.0 when absent or non-numeric."""
    if not value:
        return 0.0
    match = _FLOAT_PATTERN.match(value)
    if match is None:
        return 0.0
    return float(match.group(0))


def parse_timestamp(value: str | None, tz: tzinfo | None = None) -> datetime | None:
    """Parse ``value`` into an aware datetime in ``tz`` (system local when None).

    Naive values are taken to be wall-clock time in that zone.
    Returns None when the text is missing, not a date, or falls outside the
    representable range once converted into the zone.
    """
    if not value or not value.strip():
        return None
    try:
        parsed = date_parser.parse(value)
        if parsed.tzinfo is None:
            if tz is not None:
                return parsed.replace(tzinfo=tz)
            return parsed.astimezone()
        return parsed.astimezone(tz)
    except (ValueError, OverflowError, OSError):
        logger.debug("Unparseable createdAt value: %r", value)
        return None


def normalize_record(row: RawRow, tz: tzinfo | None = None) -> AttemptRecord:
    """Convert one raw row into an AttemptRecord."""
    return AttemptRecord(
        timestamp=parse_timestamp(row.get("createdAt"), tz),
        total_jobs=parse_int(row.get("totalJobs")),
        new_jobs=parse_int(row.get("newJobs")),
        time_taken=parse_float(row.get("timeTaken")),
    )
