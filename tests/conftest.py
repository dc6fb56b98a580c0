"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from version_reports.location import ENV_VAR


@pytest.fixture(autouse=True)
def clear_report_location(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test with no report location configured."""
    monkeypatch.delenv(ENV_VAR, raising=False)


@pytest.fixture
def report_location(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the environment at a fresh (not yet created) log file."""
    location = tmp_path / "version.json"
    monkeypatch.setenv(ENV_VAR, str(location))
    return location


@pytest.fixture
def write_lines():
    """Write raw lines to a log file, bypassing the library."""

    def _write(path: Path, *lines: str) -> None:
        with open(path, "a", encoding="utf-8") as fh:
            for line in lines:
                fh.write(line + "\n")

    return _write
