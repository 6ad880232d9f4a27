"""Tests for the cohort grouper: key construction and partitioning."""

from datetime import timezone

from src.core.schemas import CohortKey
from src.pipeline.grouper import cohort_key, group_rows

UTC = timezone.utc


def _row(**overrides: str) -> dict[str, str]:
    row = {
        "userId": "u1",
        "jobTitle": "Python Developer",
        "jobLocation": "Berlin",
        "jobType": "full-time",
        "remote": "true",
        "platform": "linkedin",
        "pricingPlan": "2",
        "createdAt": "2026-10-18T09:00:00",
        "totalJobs": "3",
        "newJobs": "1",
        "timeTaken": "4.5",
    }
    row.update(overrides)
    return row


class TestCohortKey:
    def test_extracts_seven_fields(self) -> None:
        assert cohort_key(_row()) == CohortKey(
            user_id="u1",
            job_title="Python Developer",
            job_location="Berlin",
            job_type="full-time",
            remote="true",
            platform="linkedin",
            pricing_plan="2",
        )

    def test_missing_fields_are_empty(self) -> None:
        assert cohort_key({}) == CohortKey()

    def test_measurements_not_part_of_key(self) -> None:
        assert cohort_key(_row(totalJobs="0", createdAt="x")) == cohort_key(_row())


class TestGroupRows:
    def test_empty_input(self) -> None:
        assert group_rows([], UTC) == {}

    def test_same_profile_one_cohort(self) -> None:
        cohorts = group_rows([_row(), _row(totalJobs="0"), _row(totalJobs="7")], UTC)
        assert len(cohorts) == 1
        cohort = cohorts[cohort_key(_row())]
        assert [r.total_jobs for r in cohort.records] == [3, 0, 7]

    def test_records_keep_input_order(self) -> None:
        rows = [
            _row(createdAt="2026-10-18T09:00:00", totalJobs="1"),
            _row(createdAt="2026-10-16T09:00:00", totalJobs="2"),
            _row(createdAt="2026-10-17T09:00:00", totalJobs="3"),
        ]
        cohort = next(iter(group_rows(rows, UTC).values()))
        assert [r.total_jobs for r in cohort.records] == [1, 2, 3]

    def test_cohorts_in_first_seen_order(self) -> None:
        rows = [_row(userId="b"), _row(userId="a"), _row(userId="b")]
        keys = list(group_rows(rows, UTC))
        assert [k.user_id for k in keys] == ["b", "a"]

    def test_separator_in_field_does_not_collide(self) -> None:
        rows = [
            _row(jobTitle="a||b", jobLocation="c"),
            _row(jobTitle="a", jobLocation="b||c"),
        ]
        assert len(group_rows(rows, UTC)) == 2

    def test_case_sensitive_fields(self) -> None:
        rows = [_row(jobTitle="Python"), _row(jobTitle="python")]
        assert len(group_rows(rows, UTC)) == 2

    def test_plan_compared_as_raw_text(self) -> None:
        rows = [_row(pricingPlan="2"), _row(pricingPlan="02")]
        assert len(group_rows(rows, UTC)) == 2

    def test_every_record_assigned_once(self) -> None:
        rows = [_row(userId=str(i % 3)) for i in range(10)]
        cohorts = group_rows(rows, UTC)
        assert sum(len(c.records) for c in cohorts.values()) == 10
        assert len(cohorts) == 3
