"""Capture scope: collect reports around a unit of work.

If no report location is configured, the scope provisions a temporary one
and exports it through the environment so that subprocesses spawned by the
unit of work append to the same log. Once the work returns both logs are
read, and the temporary files are removed whatever the outcome.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TypeVar

from .location import ENV_VAR, resolve_location, v2_location
from .models import VersionReportCapture
from .report_log import get_merged_version_report
from .report_v2 import get_version_report_v2

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextmanager
def _provisioned_location() -> Iterator[Path]:
    """Create a temporary log, export it, and tear both down on exit."""
    fd, name = tempfile.mkstemp(prefix="version.buf.", suffix=".json")
    os.close(fd)
    path = Path(name)
    derived = v2_location(path)
    os.environ[ENV_VAR] = str(path)
    logger.debug("Provisioned report location %s", path)
    try:
        yield path
    finally:
        os.environ.pop(ENV_VAR, None)
        path.unlink(missing_ok=True)
        if derived is not None:
            derived.unlink(missing_ok=True)
        logger.debug("Removed report location %s", path)


def _run_and_collect(
    unit_of_work: Callable[[Path], T], location: Path
) -> tuple[VersionReportCapture, T]:
    # An exception from the unit of work skips reading entirely; the
    # primary log is read before the v2 log so its errors surface first
    result = unit_of_work(location)
    merged = get_merged_version_report(location)
    v2 = get_version_report_v2(location)
    return VersionReportCapture(v1=merged, v2=v2), result


def with_version_report_capture(
    unit_of_work: Callable[[Path], T],
    location: str | os.PathLike[str] | None = None,
) -> tuple[VersionReportCapture, T]:
    """Run ``unit_of_work`` and return the reports it produced.

    The unit of work is called with the log path so it can pass it on to
    writers explicitly. Subprocesses find the same path through the
    environment variable.

    Args:
        unit_of_work: Callable taking the log path.
        location: Log path to use; defaults to the environment variable.
                  When neither is set a temporary log is used and deleted
                  afterward, together with its derived v2 file.

    Returns:
        Tuple of (captured reports, the unit of work's return value).

    Raises:
        Whatever the unit of work raises, otherwise the first error from
        reading the primary log, otherwise from reading the v2 log.
    """
    resolved = resolve_location(location)
    if resolved is not None:
        return _run_and_collect(unit_of_work, resolved)

    with _provisioned_location() as provisioned:
        return _run_and_collect(unit_of_work, provisioned)
