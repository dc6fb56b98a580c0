"""Primary report log: append and reduce.

Every report is one line of JSON appended to the log file. Writers in the
same process are serialized by a lock. Writers in different processes rely
on the OS performing small append-mode writes atomically, which holds for
records of a few kilobytes on a single local filesystem. Nothing here
coordinates across machines or network filesystems.

Reading collapses the log to one report per key:
1. Decode every line, remembering its position (read index)
2. Keep the last report seen for each key
3. Sort by priority descending, later read index first on ties
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path

from pydantic import ValidationError

from .errors import ConfigurationError, CorruptDataError, VersionReportError
from .location import ENV_VAR, resolve_location
from .models import MergedVersionReport, VersionReport

logger = logging.getLogger(__name__)

_lock = threading.Lock()


def _require_location(location: str | os.PathLike[str] | None) -> Path:
    path = resolve_location(location)
    if path is None:
        raise ConfigurationError(f"{ENV_VAR} is not set")
    return path


def add_version_report(
    report: VersionReport,
    location: str | os.PathLike[str] | None = None,
) -> None:
    """Append a report to the primary log.

    The file is created if missing and never truncated.

    Args:
        report: The report to append.
        location: Log path; defaults to the environment variable.

    Raises:
        ConfigurationError: If no location is configured.
        OSError: If the file cannot be opened or written.
    """
    path = _require_location(location)
    line = report.model_dump_json() + "\n"

    with _lock:
        with open(path, "a", encoding="utf-8") as fh:
            fh.write(line)
    logger.debug("Appended report %r to %s", report.key, path)


def _decode_reports(contents: str, path: Path) -> list[VersionReport]:
    reports: list[VersionReport] = []
    # Only "\n" terminates a record; other Unicode line breaks may appear
    # raw inside JSON strings
    for lineno, line in enumerate(contents.split("\n"), start=1):
        if not line.strip():
            continue
        try:
            report = VersionReport.model_validate_json(line)
        except ValidationError as exc:
            raise CorruptDataError(
                f"Malformed report on line {lineno} of {path}: {exc}"
            ) from exc
        report._read_index = len(reports)
        reports.append(report)
    return reports


def get_merged_version_report(
    location: str | os.PathLike[str] | None = None,
) -> MergedVersionReport:
    """Read the primary log and reduce it to one report per key.

    A later report with the same key replaces the earlier one outright;
    fields are never merged. The survivors are sorted by priority
    (highest first), and among equal priorities the one read later wins.

    Raises:
        ConfigurationError: If no location is configured.
        OSError: If the file cannot be read. A missing file is an error,
                 not an empty log.
        CorruptDataError: If any record is malformed.
    """
    path = _require_location(location)

    try:
        with _lock:
            contents = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise CorruptDataError(
            f"Report log {path} is not valid UTF-8: {exc}"
        ) from exc

    latest: dict[str, VersionReport] = {}
    for report in _decode_reports(contents, path):
        latest[report.key] = report

    # sorted() is stable; the key gives a total order anyway since read
    # indexes are unique
    ordered = sorted(
        latest.values(), key=lambda r: (-r.priority, -r.read_index)
    )
    logger.debug("Reduced %s to %d reports", path, len(ordered))
    return MergedVersionReport(reports=ordered)


def must_generate(location: str | os.PathLike[str] | None = None) -> bool:
    """Whether the merged log requires regeneration.

    Returns False when the log is not configured, cannot be read, or is
    malformed.
    """
    try:
        merged = get_merged_version_report(location)
    except (VersionReportError, OSError) as exc:
        logger.debug("No merged report available: %s", exc)
        return False
    return merged.must_generate()
