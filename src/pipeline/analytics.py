"""Search efficiency analysis: how often do searches come back empty?"""

import logging
from collections.abc import Iterable

from src.core.schemas import EfficiencyReport, PlatformEfficiency, RawRow
from src.pipeline.normalizer import parse_int

logger = logging.getLogger(__name__)


def analyze_search_efficiency(rows: Iterable[RawRow]) -> EfficiencyReport:
    """Count zero-result searches overall and per platform (first-seen order)."""
    platforms: dict[str, PlatformEfficiency] = {}
    total = 0
    zeros = 0

    for row in rows:
        platform = row.get("platform") or ""
        stats = platforms.get(platform)
        if stats is None:
            stats = PlatformEfficiency(platform=platform)
            platforms[platform] = stats

        is_zero = parse_int(row.get("totalJobs")) == 0
        total += 1
        stats.total += 1
        if is_zero:
            zeros += 1
            stats.zero_results += 1

    logger.debug("Analyzed %d searches, %d with zero results", total, zeros)
    return EfficiencyReport(
        total_searches=total,
        zero_results=zeros,
        platforms=list(platforms.values()),
    )


def format_efficiency_report(report: EfficiencyReport) -> str:
    """Render the report as console text."""
    lines = [
        "--- Search Efficiency Analysis ---",
        f"Total searches analyzed: {report.total_searches}",
        f"Searches with zero results: {report.zero_results} "
        f"({report.zero_percentage:.2f}%)",
        "",
        "Zero results by platform:",
    ]
    for p in report.platforms:
        lines.append(
            f"{p.platform or '(none)'}: {p.zero_results}/{p.total} ({p.zero_percentage:.2f}%)"
        )
    return "\n".join(lines)
