"""Configuration models and YAML loader for the search schedule optimizer."""

from datetime import tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, Field, field_validator


class BackoffConfig(BaseModel):
    """Exponential backoff parameters."""

    min_backoff_minutes: float = Field(default=60 * 24, gt=0)
    max_backoff_hours: float = Field(default=3 * 24, gt=0)
    backoff_multiplier: float = Field(default=2.0, ge=1.0)
    healthy_success_rate: float = Field(default=0.7, ge=0.0, le=1.0)
    healthy_retry_minutes: float = Field(default=60, gt=0)


class RankingConfig(BaseModel):
    """Success threshold and subscription tiers used for priority scoring."""

    success_threshold: int = Field(default=1, ge=0)
    # Ordered by priority: later entries get larger bonuses.
    priority_plans: list[int] = Field(default_factory=lambda: [1, 2, 3])
    recent_history_size: int = Field(default=10, ge=0)

    @field_validator("priority_plans")
    @classmethod
    def plans_unique(cls, v: list[int]) -> list[int]:
        if len(set(v)) != len(v):
            msg = "priority_plans must not contain duplicates"
            raise ValueError(msg)
        return v


class IOConfig(BaseModel):
    """Where search history is read from and the schedule is written to."""

    data_dir: str = "data"
    output_filename: str = "optimized_schedule.csv"

    @field_validator("output_filename")
    @classmethod
    def filename_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "output_filename must not be empty"
            raise ValueError(msg)
        return v.strip()


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    backoff: BackoffConfig = Field(default_factory=BackoffConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    io: IOConfig = Field(default_factory=IOConfig)
    timezone: str | None = None

    @field_validator("timezone")
    @classmethod
    def timezone_known(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        try:
            ZoneInfo(v.strip())
        except (ZoneInfoNotFoundError, ValueError) as e:
            msg = f"unknown timezone: {v}"
            raise ValueError(msg) from e
        return v.strip()

    @property
    def tz(self) -> tzinfo | None:
        """Pinned time zone, or None for the system local zone."""
        return ZoneInfo(self.timezone) if self.timezone else None

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
