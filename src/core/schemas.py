"""Core data models for the search schedule optimizer."""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

# One CSV row keyed by header name.
RawRow = dict[str, str]


class AttemptRecord(BaseModel):
    """A single historical search attempt, normalized from a raw row.

    ``timestamp`` is None when ``createdAt`` could not be parsed.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: datetime | None = None
    total_jobs: int = Field(default=0, ge=0, serialization_alias="totalJobs")
    new_jobs: int = Field(default=0, ge=0, serialization_alias="newJobs")
    time_taken: float = Field(default=0.0, ge=0.0, serialization_alias="timeTaken")

    @field_serializer("timestamp", when_used="json")
    def _timestamp_utc(self, value: datetime | None) -> str | None:
        """UTC with millisecond precision, e.g. 2026-10-19T09:00:00.000Z."""
        if value is None:
            return None
        try:
            utc = value.astimezone(timezone.utc)
        except OverflowError:
            return value.isoformat()
        return utc.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"

    @field_serializer("time_taken", when_used="json")
    def _time_taken_number(self, value: float) -> int | float:
        return int(value) if value.is_integer() else value


class CohortKey(BaseModel):
    """Identity of one recurring search profile.

    Frozen and hashable, so it is used directly as a mapping key.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str = ""
    job_title: str = ""
    job_location: str = ""
    job_type: str = ""
    remote: str = ""
    platform: str = ""
    pricing_plan: str = ""


class Cohort(BaseModel):
    """All attempt records sharing one CohortKey, in input order."""

    key: CohortKey
    records: list[AttemptRecord] = Field(default_factory=list)


class CohortStatistics(BaseModel):
    """Aggregate counters for a cohort. ``recent_searches`` is newest-first."""

    model_config = ConfigDict(frozen=True)

    total_searches: int = 0
    total_jobs_found: int = 0
    successful_searches: int = 0
    success_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    last_search_time: datetime | None = None
    consecutive_failures: int = 0
    recent_searches: list[AttemptRecord] = Field(default_factory=list)


class BackoffDecision(BaseModel):
    """Outcome of the backoff rule for one cohort."""

    model_config = ConfigDict(frozen=True)

    next_search_time: datetime | None
    run_today: bool


class ScheduleEntry(BaseModel):
    """One row of the optimized schedule."""

    model_config = ConfigDict(frozen=True)

    key: CohortKey
    pricing_plan: int
    run_today: bool
    success_rate: float
    total_searches: int
    total_jobs_found: int
    priority: float
    recent_searches: list[AttemptRecord] = Field(default_factory=list)

    def to_record(self) -> dict[str, Any]:
        """Flatten into the camelCase record used for CSV and JSON export."""
        k = self.key
        return {
            "userId": k.user_id,
            "jobTitle": k.job_title,
            "jobLocation": k.job_location,
            "jobType": k.job_type,
            "remote": k.remote,
            "platform": k.platform,
            "pricingPlan": self.pricing_plan,
            "runToday": "Yes" if self.run_today else "No",
            "successRate": format_rate(self.success_rate),
            "totalSearches": self.total_searches,
            "totalJobsFound": self.total_jobs_found,
            "priority": self.priority,
            "recentSearches": [
                r.model_dump(mode="json", by_alias=True) for r in self.recent_searches
            ],
        }


class PlatformEfficiency(BaseModel):
    """Zero-result counts for a single platform."""

    platform: str
    total: int = 0
    zero_results: int = 0

    @property
    def zero_percentage(self) -> float:
        return self.zero_results / self.total * 100 if self.total else 0.0


class EfficiencyReport(BaseModel):
    """How many raw searches came back empty, overall and per platform."""

    total_searches: int = 0
    zero_results: int = 0
    platforms: list[PlatformEfficiency] = Field(default_factory=list)

    @property
    def zero_percentage(self) -> float:
        return self.zero_results / self.total_searches * 100 if self.total_searches else 0.0


def format_rate(rate: float) -> str:
    """Two decimals, rounding exact halves up (0.125 → "0.13")."""
    return str(Decimal(rate).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
