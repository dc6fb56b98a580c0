"""Data models for version-reports.

These Pydantic models describe the records written to the report logs and
the results handed back once the logs are read. Records are written once
and never modified; the logs holding them are append-only.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator


class BumpType(str, Enum):
    """Semantic-versioning change category attached to a report."""

    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"
    GRADUATE = "graduate"
    PRERELEASE = "prerelease"
    CUSTOM = "custom"


class VersionReport(BaseModel):
    """One fact appended to the primary log.

    Attributes:
        key: Identity used for deduplication. A later report with the same
             key replaces an earlier one when the log is reduced.
        priority: Higher priorities sort first in the merged result.
        bump_type: Change category, "none" when not given.
        new_version: Target version, if the reporter knows it.
        must_generate: Whether this report requires regeneration.
        pr_report: Markdown fragment for pull-request summaries.
        commit_report: Markdown fragment for commit messages.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    priority: int = 0
    bump_type: BumpType = BumpType.NONE
    new_version: str | None = None
    must_generate: bool = False
    pr_report: str | None = None
    commit_report: str | None = None

    # Position in the decoded stream; assigned at read time, never stored.
    _read_index: int = PrivateAttr(default=0)

    @field_validator("bump_type", mode="before")
    @classmethod
    def _default_bump_type(cls, value: object) -> object:
        if value is None or value == "":
            return BumpType.NONE
        return value

    @property
    def read_index(self) -> int:
        return self._read_index


class MergedVersionReport(BaseModel):
    """Reduced view of the primary log: one report per key.

    Reports are ordered by priority descending; among equal priorities the
    report read later comes first.
    """

    reports: list[VersionReport] = Field(default_factory=list)

    def must_generate(self) -> bool:
        """True if any merged report requires regeneration."""
        return any(report.must_generate for report in self.reports)

    def markdown_section(self) -> str:
        """Join the non-empty PR fragments, one per line."""
        return "".join(f"{r.pr_report}\n" for r in self.reports if r.pr_report)

    def commit_markdown_section(self) -> str:
        """Join the non-empty commit fragments, one per line."""
        return "".join(
            f"{r.commit_report}\n" for r in self.reports if r.commit_report
        )


class OperationType(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    DEPRECATED = "deprecated"


class FieldChangeType(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"


class VersionReportV2FieldChange(BaseModel):
    """A single field-level change within an operation.

    Attributes:
        path: Location of the field, e.g. "request.email".
        type: What happened to the field.
        is_breaking: Whether this change alone is breaking.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    type: FieldChangeType
    is_breaking: bool = False


class VersionReportV2Operation(BaseModel):
    """Changes to one SDK operation or method.

    ``changes`` is empty for added and removed operations.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: OperationType
    is_breaking: bool = False
    changes: list[VersionReportV2FieldChange] = Field(default_factory=list)

    @property
    def breaking(self) -> bool:
        """Declared flag, or any field change that is breaking."""
        return self.is_breaking or any(c.is_breaking for c in self.changes)


class VersionReportV2Target(BaseModel):
    """Structured change record for one target in one generation run.

    Attributes:
        target_name: Target language or flavor, e.g. "python".
        package_name: Published package identifier, if any.
        previous_version: Version before this run, if known.
        new_version: Version produced by this run.
        generated_at: ISO 8601 timestamp of the run.
        operations: Changed operations, in reporting order.
    """

    model_config = ConfigDict(frozen=True)

    target_name: str
    package_name: str | None = None
    previous_version: str | None = None
    new_version: str
    generated_at: str | None = None
    operations: list[VersionReportV2Operation] = Field(default_factory=list)


class VersionReportV2Data(BaseModel):
    """All targets read from the structured log, in file order.

    Targets are never deduplicated: appending the same target twice yields
    two entries.
    """

    targets: list[VersionReportV2Target] = Field(default_factory=list)

    @property
    def has_breaking_changes(self) -> bool:
        return any(op.breaking for t in self.targets for op in t.operations)


class VersionReportCapture(BaseModel):
    """Everything collected by a capture scope."""

    v1: MergedVersionReport
    v2: VersionReportV2Data | None = None

    def must_generate(self) -> bool:
        return self.v1.must_generate()

    def markdown_section(self) -> str:
        return self.v1.markdown_section()

    def commit_markdown_section(self) -> str:
        return self.v1.commit_markdown_section()
