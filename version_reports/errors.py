"""Exceptions raised by version-reports.

I/O failures are not wrapped: they surface as the builtin OSError so
callers can tell a missing log file apart from a malformed one.
"""

from __future__ import annotations


class VersionReportError(Exception):
    """Base class for all version-reports errors."""


class ConfigurationError(VersionReportError):
    """No report location is configured where one is required."""


class CorruptDataError(VersionReportError):
    """A primary log record could not be decoded."""


class DecodeError(CorruptDataError):
    """A structured (v2) log record could not be decoded."""
