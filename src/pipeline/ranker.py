"""Priority ranking for schedule entries.

priority = tier bonus + success_rate * 50, where the tier bonus is
(position in priority_plans + 1) * 100 for listed plans and 0 otherwise.
"""

import logging
from collections.abc import Sequence

from src.core.schemas import ScheduleEntry

logger = logging.getLogger(__name__)

TIER_BONUS_STEP = 100.0
SUCCESS_RATE_WEIGHT = 50.0


def calculate_priority(
    pricing_plan: int,
    success_rate: float,
    priority_plans: Sequence[int] = (1, 2, 3),
) -> float:
    """Score a cohort by subscription tier and success rate.

    The order of ``priority_plans`` decides the bonus, not the plan number:
    later entries are worth more.
    """
    priority = 0.0
    if pricing_plan in priority_plans:
        priority += (list(priority_plans).index(pricing_plan) + 1) * TIER_BONUS_STEP
    priority += success_rate * SUCCESS_RATE_WEIGHT
    return priority


def rank_by_priority(entries: Sequence[ScheduleEntry]) -> list[ScheduleEntry]:
    """Return entries sorted by priority, highest first (stable)."""
    return sorted(entries, key=lambda e: e.priority, reverse=True)


def presentation_order(entries: Sequence[ScheduleEntry]) -> list[ScheduleEntry]:
    """Return entries sorted by job title, then location, then platform.

    Used for the written schedule. Each entry keeps its priority value.
    """
    return sorted(
        entries,
        key=lambda e: (
            collation_key(e.key.job_title),
            collation_key(e.key.job_location),
            collation_key(e.key.platform),
        ),
    )


def collation_key(text: str) -> tuple[str, str]:
    """Sort key approximating a locale compare.

    Case-insensitive first via ``casefold``, then lowercase before uppercase
    on ties. Independent of the process locale.
    """
    return (text.casefold(), text.swapcase())
