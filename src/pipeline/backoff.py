"""Backoff decision engine: when may a cohort search again?

Healthy cohorts (success rate above ``healthy_success_rate``) retry after
``healthy_retry_minutes``. Otherwise the delay starts at
``min_backoff_minutes`` and is multiplied by ``backoff_multiplier`` for each
consecutive failure, capped at ``max_backoff_hours``.
"""

import logging
from datetime import datetime, timedelta, tzinfo

from src.core.config import BackoffConfig
from src.core.schemas import BackoffDecision, CohortStatistics

logger = logging.getLogger(__name__)


class BackoffEngine:
    """Decides the next eligible run time for a cohort.

    Usage::

        engine = BackoffEngine(BackoffConfig(), tz=ZoneInfo("Europe/Berlin"))
        decision = engine.decide(stats, now)
        if decision.run_today:
            ...
    """

    def __init__(self, config: BackoffConfig, tz: tzinfo | None = None) -> None:
        self._config = config
        self._tz = tz

    def backoff_minutes(self, consecutive_failures: int) -> float:
        """Delay after ``consecutive_failures`` failures, capped at the maximum."""
        cap = self._config.max_backoff_hours * 60
        # Float exponentiation overflows on very long failure streaks.
        try:
            delay = self._config.min_backoff_minutes * (
                self._config.backoff_multiplier ** consecutive_failures
            )
        except OverflowError:
            return cap
        return min(delay, cap)

    def next_search_time(self, stats: CohortStatistics) -> datetime | None:
        """Earliest time the cohort should run again.

        None without a valid last run. ``datetime.max`` (in the last run's zone)
        when the delay would carry past the representable range.
        """
        if stats.last_search_time is None:
            return None
        if stats.success_rate > self._config.healthy_success_rate:
            delay = self._config.healthy_retry_minutes
        else:
            delay = self.backoff_minutes(stats.consecutive_failures)
        try:
            return stats.last_search_time + timedelta(minutes=delay)
        except OverflowError:
            logger.debug("Next search after %s is out of range", stats.last_search_time)
            return datetime.max.replace(tzinfo=stats.last_search_time.tzinfo)

    def start_of_tomorrow(self, now: datetime) -> datetime:
        """Midnight at the start of the day after ``now``, in the engine's zone."""
        local = now.astimezone(self._tz)
        tomorrow = local.date() + timedelta(days=1)
        midnight = datetime(tomorrow.year, tomorrow.month, tomorrow.day)
        if self._tz is None:
            return midnight.astimezone()
        return midnight.replace(tzinfo=self._tz)

    def decide(self, stats: CohortStatistics, now: datetime) -> BackoffDecision:
        """Compute the next search time and whether it falls before tomorrow."""
        next_time = self.next_search_time(stats)
        run_today = next_time is not None and next_time < self.start_of_tomorrow(now)
        logger.debug(
            "Next search %s (rate %.2f, failures %d) → run today: %s",
            next_time.isoformat() if next_time else "unknown",
            stats.success_rate, stats.consecutive_failures, run_today,
        )
        return BackoffDecision(next_search_time=next_time, run_today=run_today)
