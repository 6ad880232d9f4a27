"""Cohort grouper: partition raw rows by search profile identity."""

import logging
from collections.abc import Iterable
from datetime import tzinfo

from src.core.schemas import Cohort, CohortKey, RawRow
from src.pipeline.normalizer import normalize_record

logger = logging.getLogger(__name__)


def cohort_key(row: RawRow) -> CohortKey:
    """Build the identity key of a row from its raw string fields."""
    return CohortKey(
        user_id=row.get("userId") or "",
        job_title=row.get("jobTitle") or "",
        job_location=row.get("jobLocation") or "",
        job_type=row.get("jobType") or "",
        remote=row.get("remote") or "",
        platform=row.get("platform") or "",
        pricing_plan=row.get("pricingPlan") or "",
    )


def group_rows(rows: Iterable[RawRow], tz: tzinfo | None = None) -> dict[CohortKey, Cohort]:
    """Group rows into cohorts, preserving first-seen cohort and input record order."""
    cohorts: dict[CohortKey, Cohort] = {}
    count = 0
    for row in rows:
        key = cohort_key(row)
        cohort = cohorts.get(key)
        if cohort is None:
            cohort = Cohort(key=key)
            cohorts[key] = cohort
        cohort.records.append(normalize_record(row, tz))
        count += 1
    logger.debug("Grouped %d records into %d cohorts", count, len(cohorts))
    return cohorts
