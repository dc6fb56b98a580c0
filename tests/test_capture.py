"""Tests for version_reports.capture."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from version_reports.capture import with_version_report_capture
from version_reports.errors import CorruptDataError, DecodeError
from version_reports.location import ENV_VAR, v2_location
from version_reports.models import VersionReport, VersionReportV2Target
from version_reports.report_log import add_version_report
from version_reports.report_v2 import add_version_report_v2_target

REPO_ROOT = Path(__file__).resolve().parent.parent


def _append_from_subprocess(i: int, pr_report: str) -> None:
    """Append a report from a child process that inherits the environment."""
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(
        p for p in (str(REPO_ROOT), env.get("PYTHONPATH", "")) if p
    )
    subprocess.run(
        [
            sys.executable,
            "-m",
            "version_reports.cli",
            "add",
            "--key",
            f"subprocess{i + 1}",
            "--priority",
            "2",
            "--must-generate",
            "--pr-report",
            pr_report,
        ],
        env=env,
        check=True,
    )


class TestProvisionedLocation:
    """Scopes that create their own temporary log."""

    def test_collects_reports(self) -> None:
        def work(location: Path) -> str:
            add_version_report(
                VersionReport(
                    key="test",
                    priority=1,
                    must_generate=True,
                    pr_report="Test report",
                    commit_report="Test commit report",
                ),
                location,
            )
            return "done"

        capture, result = with_version_report_capture(work)

        assert result == "done"
        assert [r.key for r in capture.v1.reports] == ["test"]
        assert capture.must_generate() is True
        assert capture.commit_markdown_section() == "Test commit report\n"
        assert capture.v2 is None

    def test_exports_location_to_environment(self) -> None:
        seen: dict[str, str | None] = {}

        def work(location: Path) -> None:
            seen["env"] = os.environ.get(ENV_VAR)
            seen["location"] = str(location)
            add_version_report(VersionReport(key="implicit"))

        capture, _ = with_version_report_capture(work)

        assert seen["env"] == seen["location"]
        assert ENV_VAR not in os.environ
        assert [r.key for r in capture.v1.reports] == ["implicit"]

    def test_no_reports_yields_empty_result(self) -> None:
        capture, result = with_version_report_capture(lambda location: 42)

        assert result == 42
        assert capture.v1.reports == []
        assert capture.must_generate() is False
        assert capture.v2 is None

    def test_collects_v2_targets(self) -> None:
        def work(location: Path) -> None:
            add_version_report_v2_target(
                VersionReportV2Target(target_name="python", new_version="1.0.1")
            )
            add_version_report_v2_target(
                VersionReportV2Target(target_name="python", new_version="1.0.2")
            )

        capture, _ = with_version_report_capture(work)

        assert capture.v2 is not None
        assert [t.new_version for t in capture.v2.targets] == ["1.0.1", "1.0.2"]

    def test_removes_both_files(self) -> None:
        paths: list[Path] = []

        def work(location: Path) -> None:
            paths.append(location)
            add_version_report(VersionReport(key="a"), location)
            add_version_report_v2_target(
                VersionReportV2Target(target_name="go", new_version="1.0.0"),
                location,
            )

        with_version_report_capture(work)

        assert not paths[0].exists()
        assert not v2_location(paths[0]).exists()

    def test_unit_of_work_error_propagates_and_cleans_up(self) -> None:
        paths: list[Path] = []

        def work(location: Path) -> None:
            paths.append(location)
            add_version_report(VersionReport(key="a"), location)
            raise ValueError("generation failed")

        with patch("version_reports.capture.get_merged_version_report") as mock_merge:
            with pytest.raises(ValueError, match="generation failed"):
                with_version_report_capture(work)

        mock_merge.assert_not_called()
        assert not paths[0].exists()
        assert ENV_VAR not in os.environ

    def test_primary_error_takes_precedence_over_v2_error(self) -> None:
        def work(location: Path) -> None:
            location.write_text("{broken\n")
            v2_location(location).write_text("{broken\n")

        with pytest.raises(CorruptDataError) as excinfo:
            with_version_report_capture(work)

        assert not isinstance(excinfo.value, DecodeError)
        assert ENV_VAR not in os.environ

    def test_v2_error_surfaces_and_cleans_up(self) -> None:
        paths: list[Path] = []

        def work(location: Path) -> None:
            paths.append(location)
            add_version_report(VersionReport(key="a"), location)
            v2_location(location).write_text("{broken\n")

        with pytest.raises(DecodeError):
            with_version_report_capture(work)

        assert not paths[0].exists()
        assert not v2_location(paths[0]).exists()

    def test_subprocesses_share_the_log(self) -> None:
        """Child processes inherit the location and their reports merge."""
        paths: list[Path] = []

        def work(location: Path) -> None:
            paths.append(location)
            for i in range(2):
                _append_from_subprocess(i, "original")
            _append_from_subprocess(0, "overridden")

        capture, _ = with_version_report_capture(work)

        assert [r.key for r in capture.v1.reports] == ["subprocess1", "subprocess2"]
        assert capture.v1.reports[0].pr_report == "overridden"
        assert capture.v1.reports[1].pr_report == "original"
        assert capture.must_generate() is True
        assert not paths[0].exists()
        assert not v2_location(paths[0]).exists()


class TestConfiguredLocation:
    """Scopes running against a location the caller already configured."""

    def test_uses_environment_location_and_keeps_files(
        self, report_location: Path
    ) -> None:
        def work(location: Path) -> None:
            assert location == report_location
            add_version_report(VersionReport(key="a", pr_report="X"))

        capture, _ = with_version_report_capture(work)

        assert capture.markdown_section() == "X\n"
        assert report_location.exists()
        assert os.environ[ENV_VAR] == str(report_location)

    def test_explicit_location_is_not_exported(self, tmp_path: Path) -> None:
        location = tmp_path / "explicit.json"

        def work(loc: Path) -> None:
            add_version_report(VersionReport(key="a"), loc)

        capture, _ = with_version_report_capture(work, location)

        assert [r.key for r in capture.v1.reports] == ["a"]
        assert location.exists()
        assert ENV_VAR not in os.environ

    def test_missing_configured_file_raises(self, report_location: Path) -> None:
        """Nothing was appended, so the configured log was never created."""
        with pytest.raises(FileNotFoundError):
            with_version_report_capture(lambda location: None)
