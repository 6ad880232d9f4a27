"""CSV layer: read search history from a directory, write the schedule file."""

import csv
import json
import logging
from collections.abc import Iterable
from pathlib import Path

from src.core.schemas import RawRow, ScheduleEntry

logger = logging.getLogger(__name__)

# (record field, column title) in output order.
SCHEDULE_COLUMNS: list[tuple[str, str]] = [
    ("userId", "User ID"),
    ("jobTitle", "Job Title"),
    ("jobLocation", "Job Location"),
    ("jobType", "Job Type"),
    ("remote", "Remote"),
    ("platform", "Platform"),
    ("pricingPlan", "Pricing Plan"),
    ("runToday", "Run Today"),
    ("successRate", "Success Rate"),
    ("totalSearches", "Total Searches"),
    ("totalJobsFound", "Total Jobs Found"),
    ("priority", "Priority Score"),
    ("recentSearches", "Recent Searches"),
]


def list_csv_files(directory: str | Path, exclude: Iterable[str] = ()) -> list[Path]:
    """Return the ``*.csv`` files directly inside ``directory``, sorted by name."""
    directory = Path(directory)
    if not directory.exists():
        msg = f"Data directory not found: {directory}"
        raise FileNotFoundError(msg)
    if not directory.is_dir():
        msg = f"Not a directory: {directory}"
        raise NotADirectoryError(msg)
    excluded = set(exclude)
    return sorted(
        p for p in directory.glob("*.csv")
        if p.is_file() and p.name not in excluded
    )


def read_csv_rows(path: str | Path) -> list[RawRow]:
    """Read one CSV file into a list of header-keyed rows."""
    with open(path, newline="", encoding="utf-8-sig") as f:
        return [
            {k: v or "" for k, v in row.items() if k is not None}
            for row in csv.DictReader(f)
        ]


def read_search_rows(directory: str | Path, exclude: Iterable[str] = ()) -> list[RawRow]:
    """Read and concatenate every search history CSV in ``directory``.

    Files named in ``exclude`` (e.g. a previously written schedule) are skipped.
    """
    files = list_csv_files(directory, exclude)
    logger.info("Found %d CSV files in %s", len(files), directory)
    rows: list[RawRow] = []
    for path in files:
        file_rows = read_csv_rows(path)
        logger.debug("Read %d rows from %s", len(file_rows), path.name)
        rows.extend(file_rows)
    return rows


def schedule_to_rows(entries: Iterable[ScheduleEntry]) -> list[dict[str, str]]:
    """Format entries as titled CSV rows, in the given order."""
    rows = []
    for entry in entries:
        record = entry.to_record()
        record["priority"] = format_number(entry.priority)
        record["recentSearches"] = json.dumps(record["recentSearches"])
        rows.append({title: str(record[field]) for field, title in SCHEDULE_COLUMNS})
    return rows


def write_schedule(entries: Iterable[ScheduleEntry], path: str | Path) -> Path:
    """Write schedule entries to a CSV file in the given order.

    Returns the path written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = schedule_to_rows(entries)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=[title for _, title in SCHEDULE_COLUMNS])
        writer.writeheader()
        writer.writerows(rows)
    logger.info("Wrote %d schedule entries to %s", len(rows), path)
    return path


def format_number(value: float) -> str:
    """Render whole numbers without a decimal point (225.0 → "225")."""
    if value.is_integer():
        return str(int(value))
    return repr(value)
