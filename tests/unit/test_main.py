"""Tests for the CLI entry point."""

import csv
from pathlib import Path
from textwrap import dedent

import pytest

from main import main, parse_args

ROWS = dedent("""\
    userId,jobTitle,jobLocation,jobType,remote,platform,pricingPlan,createdAt,totalJobs,newJobs,timeTaken
    u1,Python Developer,Berlin,full-time,true,linkedin,2,2026-10-17T09:00:00,4,2,12.5
    u1,Python Developer,Berlin,full-time,true,linkedin,2,2026-10-18T09:00:00,0,0,8.1
    u2,Data Engineer,Remote,contract,true,indeed,3,2026-10-18T12:00:00,9,3,18.2
""")


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    d = tmp_path / "data"
    d.mkdir()
    (d / "history.csv").write_text(ROWS, encoding="utf-8")
    return d


class TestParseArgs:
    def test_defaults_to_schedule(self) -> None:
        args = parse_args([])
        assert args.command == "schedule"
        assert args.dry_run is False

    def test_top_level_flags(self) -> None:
        args = parse_args(["--data-dir", "x", "--dry-run"])
        assert args.command == "schedule"
        assert args.data_dir == "x"
        assert args.dry_run is True

    def test_analyze_subcommand(self) -> None:
        args = parse_args(["analyze", "--data-dir", "x", "-v"])
        assert args.command == "analyze"
        assert args.verbose is True


class TestScheduleCommand:
    def test_writes_schedule(self, data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["schedule", "--data-dir", str(data_dir)])

        out = data_dir / "optimized_schedule.csv"
        with open(out, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert [r["Job Title"] for r in rows] == ["Data Engineer", "Python Developer"]

        printed = capsys.readouterr().out
        assert "Successfully processed 3 search records." in printed
        assert "Generated optimized search schedule with 2 entries." in printed
        assert "Search Efficiency Analysis" in printed

    def test_rerun_ignores_previous_output(
        self, data_dir: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["--data-dir", str(data_dir)])
        main(["--data-dir", str(data_dir)])
        printed = capsys.readouterr().out
        assert printed.count("Successfully processed 3 search records.") == 2

    def test_custom_output(self, data_dir: Path, tmp_path: Path) -> None:
        target = tmp_path / "out" / "schedule.csv"
        main(["schedule", "--data-dir", str(data_dir), "--output", str(target), "--no-analysis"])
        assert target.exists()
        assert not (data_dir / "optimized_schedule.csv").exists()

    def test_dry_run_writes_nothing(
        self, data_dir: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        main(["schedule", "--data-dir", str(data_dir), "--dry-run", "--no-analysis"])
        assert not (data_dir / "optimized_schedule.csv").exists()
        printed = capsys.readouterr().out
        assert "[DRY RUN] 3 search records, 2 cohorts" in printed
        assert "Search Efficiency Analysis" not in printed

    def test_export_json(self, data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["schedule", "--data-dir", str(data_dir), "--export", "json", "--no-analysis"])
        assert '"jobTitle": "Data Engineer"' in capsys.readouterr().out

    def test_config_file(self, data_dir: Path, tmp_path: Path) -> None:
        config = tmp_path / "settings.yaml"
        config.write_text(f"io:\n  data_dir: {data_dir}\n  output_filename: plan.csv\n")
        main(["schedule", "--config", str(config), "--no-analysis"])
        assert (data_dir / "plan.csv").exists()

    def test_missing_data_dir_exits(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["schedule", "--data-dir", str(tmp_path / "missing")])
        assert exc.value.code == 1
        assert "Data directory not found" in capsys.readouterr().err

    def test_missing_config_exits(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["schedule", "--config", str(tmp_path / "nope.yaml")])
        assert exc.value.code == 1

    def test_invalid_config_exits(self, tmp_path: Path) -> None:
        config = tmp_path / "settings.yaml"
        config.write_text("timezone: Nowhere/Special\n")
        with pytest.raises(SystemExit) as exc:
            main(["schedule", "--config", str(config)])
        assert exc.value.code == 1


class TestAnalyzeCommand:
    def test_prints_report(self, data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["analyze", "--data-dir", str(data_dir)])
        printed = capsys.readouterr().out
        assert "Total searches analyzed: 3" in printed
        assert "Searches with zero results: 1 (33.33%)" in printed
        assert "linkedin: 1/2 (50.00%)" in printed
        assert not (data_dir / "optimized_schedule.csv").exists()
