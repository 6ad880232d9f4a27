"""CLI entry point for the search schedule optimizer."""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from src.core.config import Settings
from src.core.csv_store import read_search_rows
from src.pipeline.analytics import analyze_search_efficiency, format_efficiency_report
from src.pipeline.orchestrator import build_schedule, export_schedule_json, save_schedule


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Search schedule optimizer - decide which recurring searches run today",
    )
    subparsers = parser.add_subparsers(dest="command")

    # --- schedule subcommand (default) ---
    schedule_parser = subparsers.add_parser("schedule", help="Build the optimized schedule")
    _add_common_args(schedule_parser)
    schedule_parser.add_argument(
        "--output",
        help="Output CSV path (default: <data-dir>/optimized_schedule.csv)",
    )
    schedule_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the schedule without writing the output file",
    )
    schedule_parser.add_argument(
        "--export",
        choices=["json"],
        help="Also print the schedule in this format (json)",
    )
    schedule_parser.add_argument(
        "--no-analysis",
        action="store_true",
        help="Skip the search efficiency report",
    )

    # --- analyze subcommand ---
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Print zero-result statistics for the search history",
    )
    _add_common_args(analyze_parser)

    # --- backward compat: top-level flags for schedule ---
    parser.add_argument("--data-dir", help=argparse.SUPPRESS)
    parser.add_argument("--config", help=argparse.SUPPRESS)
    parser.add_argument("--output", help=argparse.SUPPRESS)
    parser.add_argument("--dry-run", action="store_true", help=argparse.SUPPRESS)
    parser.add_argument("--export", choices=["json"], help=argparse.SUPPRESS)
    parser.add_argument("--no-analysis", action="store_true", help=argparse.SUPPRESS)
    parser.add_argument("--verbose", "-v", action="store_true", help=argparse.SUPPRESS)

    args = parser.parse_args(argv)

    # Default to schedule when no subcommand given
    if args.command is None:
        args.command = "schedule"

    return args


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--data-dir",
        help="Directory of search history CSV files (default: io.data_dir from config, or data)",
    )
    parser.add_argument(
        "--config",
        help="Path to settings YAML file (default: built-in defaults)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_settings(args: argparse.Namespace) -> Settings:
    """Load settings from --config (or defaults) and apply --data-dir."""
    settings = Settings.from_yaml(args.config) if args.config else Settings()
    if args.data_dir:
        settings.io.data_dir = args.data_dir
    return settings


def cmd_schedule(args: argparse.Namespace, settings: Settings) -> None:
    """Handle schedule subcommand."""
    data_dir = Path(settings.io.data_dir)
    output = Path(args.output) if args.output else data_dir / settings.io.output_filename

    rows = read_search_rows(data_dir, exclude=[output.name])
    entries = build_schedule(rows, settings)

    if args.dry_run:
        print(f"[DRY RUN] {len(rows)} search records, {len(entries)} cohorts")
        for e in entries:
            status = "RUN" if e.run_today else "WAIT"
            print(f"[DRY RUN] {status} '{e.key.job_title}' ({e.key.job_location}) "
                  f"on {e.key.platform} for user {e.key.user_id}: "
                  f"priority {e.priority:.1f}, success rate {e.success_rate:.2f}")
        print("[DRY RUN] Would write 0 entries (no output in dry-run)")
    else:
        save_schedule(entries, output)
        print(f"Successfully processed {len(rows)} search records.")
        print(f"Generated optimized search schedule with {len(entries)} entries.")
        print(f"Schedule written to {output}")

    if args.export == "json":
        print(f"\n{export_schedule_json(entries)}")

    if not args.no_analysis:
        print(f"\n{format_efficiency_report(analyze_search_efficiency(rows))}")


def cmd_analyze(settings: Settings) -> None:
    """Handle analyze subcommand."""
    rows = read_search_rows(settings.io.data_dir, exclude=[settings.io.output_filename])
    print(format_efficiency_report(analyze_search_efficiency(rows)))


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(args)
    except (FileNotFoundError, ValidationError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.command == "analyze":
            cmd_analyze(settings)
        else:
            cmd_schedule(args, settings)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
