"""Structured (v2) report log.

Runs alongside the primary log at a path derived from it. Each line holds
one target's structured change record. Unlike the primary log nothing is
merged on read: records come back in file order, duplicates included.

Callers that predate this log never configure it explicitly, so an
unconfigured location or a missing file reads as "no data" rather than an
error.
"""

from __future__ import annotations

import logging
import os
import threading

from pydantic import ValidationError

from .errors import DecodeError
from .location import resolve_location, v2_location
from .models import VersionReportV2Data, VersionReportV2Target

logger = logging.getLogger(__name__)

_lock = threading.Lock()


def add_version_report_v2_target(
    target: VersionReportV2Target,
    location: str | os.PathLike[str] | None = None,
) -> None:
    """Append one target's structured record to the v2 log.

    Does nothing if no primary location is configured.

    Args:
        target: The record to append.
        location: Primary log path; the v2 path is derived from it.
                  Defaults to the environment variable.

    Raises:
        OSError: If the file cannot be opened or written.
    """
    path = v2_location(resolve_location(location))
    if path is None:
        logger.debug("No report location configured; skipping v2 target")
        return

    line = target.model_dump_json(exclude_none=True) + "\n"

    with _lock:
        with open(path, "a", encoding="utf-8") as fh:
            fh.write(line)
    logger.debug("Appended v2 target %r to %s", target.target_name, path)


def get_version_report_v2(
    location: str | os.PathLike[str] | None = None,
) -> VersionReportV2Data | None:
    """Read every target from the v2 log, in file order.

    Returns:
        The targets, or None if no location is configured, the file does
        not exist, or it holds no records.

    Raises:
        DecodeError: If a record is malformed.
        OSError: For read failures other than a missing file.
    """
    path = v2_location(resolve_location(location))
    if path is None:
        return None

    try:
        with _lock:
            contents = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except UnicodeDecodeError as exc:
        raise DecodeError(f"V2 report log {path} is not valid UTF-8: {exc}") from exc

    targets: list[VersionReportV2Target] = []
    # Only "\n" terminates a record; other Unicode line breaks may appear
    # raw inside JSON strings
    for lineno, line in enumerate(contents.split("\n"), start=1):
        if not line.strip():
            continue
        try:
            targets.append(VersionReportV2Target.model_validate_json(line))
        except ValidationError as exc:
            raise DecodeError(
                f"Malformed v2 target on line {lineno} of {path}: {exc}"
            ) from exc

    if not targets:
        return None
    logger.debug("Read %d v2 targets from %s", len(targets), path)
    return VersionReportV2Data(targets=targets)
