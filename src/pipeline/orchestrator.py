"""Orchestrator: wires grouper, statistics, backoff engine, and ranker.

Data flow:
  1. Group raw rows into cohorts (normalizing each row)
  2. Statistics per cohort
  3. Backoff decision → run today?
  4. Priority score
  5. Sort by priority
  6. CSV write (re-sorted by title, location, platform)
"""

import json
import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from src.core.config import Settings
from src.core.csv_store import write_schedule
from src.core.schemas import Cohort, RawRow, ScheduleEntry
from src.pipeline.backoff import BackoffEngine
from src.pipeline.grouper import group_rows
from src.pipeline.normalizer import parse_int
from src.pipeline.ranker import calculate_priority, presentation_order, rank_by_priority
from src.pipeline.statistics import compute_statistics

logger = logging.getLogger(__name__)


def build_entry(
    cohort: Cohort,
    settings: Settings,
    engine: BackoffEngine,
    now: datetime,
) -> ScheduleEntry:
    """Compute the schedule entry for a single cohort."""
    ranking = settings.ranking
    stats = compute_statistics(
        cohort,
        success_threshold=ranking.success_threshold,
        now=now,
        recent_history_size=ranking.recent_history_size,
    )
    decision = engine.decide(stats, now)
    pricing_plan = parse_int(cohort.key.pricing_plan)

    return ScheduleEntry(
        key=cohort.key,
        pricing_plan=pricing_plan,
        run_today=decision.run_today,
        success_rate=stats.success_rate,
        total_searches=stats.total_searches,
        total_jobs_found=stats.total_jobs_found,
        priority=calculate_priority(pricing_plan, stats.success_rate, ranking.priority_plans),
        recent_searches=stats.recent_searches,
    )


def build_schedule(
    rows: Iterable[RawRow],
    settings: Settings,
    now: datetime | None = None,
) -> list[ScheduleEntry]:
    """Run the full pipeline over raw rows.

    Returns one ScheduleEntry per distinct cohort, highest priority first.
    """
    tz = settings.tz
    now = now or datetime.now().astimezone(tz)
    engine = BackoffEngine(settings.backoff, tz=tz)

    cohorts = group_rows(rows, tz)
    entries = [build_entry(cohort, settings, engine, now) for cohort in cohorts.values()]

    run_today = sum(1 for e in entries if e.run_today)
    logger.info(
        "Built schedule: %d cohorts, %d to run today", len(entries), run_today,
    )
    return rank_by_priority(entries)


def export_schedule_json(entries: Iterable[ScheduleEntry]) -> str:
    """Export schedule entries as a JSON string."""
    return json.dumps([e.to_record() for e in entries], indent=2)


def save_schedule(entries: Iterable[ScheduleEntry], path: str | Path) -> Path:
    """Persist the schedule sorted by job title, location, and platform.

    The priority order from build_schedule is not kept in the file, but every
    row still carries its priority score.
    """
    return write_schedule(presentation_order(list(entries)), path)
