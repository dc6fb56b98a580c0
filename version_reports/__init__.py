"""Cross-process version report logs.

Units of work append reports to a shared log; a capture scope reduces them
to one merged result once the work is done.
"""

from __future__ import annotations

from .capture import with_version_report_capture
from .errors import (
    ConfigurationError,
    CorruptDataError,
    DecodeError,
    VersionReportError,
)
from .location import ENV_VAR, resolve_location, v2_location
from .models import (
    BumpType,
    FieldChangeType,
    MergedVersionReport,
    OperationType,
    VersionReport,
    VersionReportCapture,
    VersionReportV2Data,
    VersionReportV2FieldChange,
    VersionReportV2Operation,
    VersionReportV2Target,
)
from .report_log import add_version_report, get_merged_version_report, must_generate
from .report_v2 import add_version_report_v2_target, get_version_report_v2

__all__ = [
    "ENV_VAR",
    "BumpType",
    "ConfigurationError",
    "CorruptDataError",
    "DecodeError",
    "FieldChangeType",
    "MergedVersionReport",
    "OperationType",
    "VersionReport",
    "VersionReportCapture",
    "VersionReportError",
    "VersionReportV2Data",
    "VersionReportV2FieldChange",
    "VersionReportV2Operation",
    "VersionReportV2Target",
    "add_version_report",
    "add_version_report_v2_target",
    "get_merged_version_report",
    "get_version_report_v2",
    "must_generate",
    "resolve_location",
    "v2_location",
    "with_version_report_capture",
]
