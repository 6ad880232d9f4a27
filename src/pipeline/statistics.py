"""Per-cohort success statistics.

Records are ordered newest-first. Records with an unparseable timestamp
sort after every dated record (treated as oldest); ties keep input order.
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from src.core.schemas import AttemptRecord, Cohort, CohortStatistics

logger = logging.getLogger(__name__)

RECENT_HISTORY_SIZE = 10


def sort_newest_first(records: Sequence[AttemptRecord]) -> list[AttemptRecord]:
    """Return a new list sorted by timestamp descending (stable)."""
    return sorted(records, key=_timestamp_key, reverse=True)


def is_successful(record: AttemptRecord, success_threshold: int) -> bool:
    return record.total_jobs >= success_threshold


def count_consecutive_failures(records: Sequence[AttemptRecord], success_threshold: int) -> int:
    """Count unsuccessful records from the front, stopping at the first success.

    ``records`` must already be sorted newest-first.
    """
    count = 0
    for record in records:
        if is_successful(record, success_threshold):
            break
        count += 1
    return count


def compute_statistics(
    cohort: Cohort,
    success_threshold: int = 1,
    now: datetime | None = None,
    recent_history_size: int = RECENT_HISTORY_SIZE,
) -> CohortStatistics:
    """Compute aggregate counters for a cohort.

    Args:
        cohort: The cohort whose records are summarized. Not mutated.
        success_threshold: Minimum jobs found for an attempt to count as a success.
        now: Used as ``last_search_time`` when the cohort has no records.
        recent_history_size: How many of the newest records to keep.

    Returns:
        CohortStatistics for the cohort. ``last_search_time`` is None when
        the newest record has no valid timestamp.
    """
    records = sort_newest_first(cohort.records)
    total = len(records)
    successful = sum(1 for r in records if is_successful(r, success_threshold))

    if records:
        last_search_time = records[0].timestamp
    else:
        last_search_time = now or datetime.now().astimezone()

    stats = CohortStatistics(
        total_searches=total,
        total_jobs_found=sum(r.total_jobs for r in records),
        successful_searches=successful,
        success_rate=successful / total if total else 0.0,
        last_search_time=last_search_time,
        consecutive_failures=count_consecutive_failures(records, success_threshold),
        recent_searches=records[:recent_history_size],
    )
    logger.debug(
        "Cohort %s: %d searches, %.2f success rate, %d consecutive failures",
        cohort.key.job_title, stats.total_searches, stats.success_rate,
        stats.consecutive_failures,
    )
    return stats


def _timestamp_key(record: AttemptRecord) -> tuple[int, float]:
    if record.timestamp is None:
        return (0, 0.0)
    return (1, record.timestamp.timestamp())
