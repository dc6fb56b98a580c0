"""Command-line access to the report logs.

Lets units of work running as separate processes append reports without
importing the library, and lets CI scripts inspect a log:

    python -m version_reports.cli add --key docs --priority 1 --pr-report "..."
    python -m version_reports.cli add-target --target '{"target_name": ...}'
    python -m version_reports.cli show --commit

The log location comes from --location or the VERSION_REPORT_LOCATION
environment variable.
"""

from __future__ import annotations

import argparse
import json
import sys
from importlib.metadata import version as pkg_version

from pydantic import ValidationError

from .errors import VersionReportError
from .models import BumpType, VersionReport, VersionReportV2Target
from .report_log import add_version_report, get_merged_version_report
from .report_v2 import add_version_report_v2_target
from .versions import apply_bump

__version__ = pkg_version("version-reports")


def _parse_json(value: str, *, arg_name: str):
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid JSON for {arg_name}: {exc}") from exc


def add(
    *,
    key: str,
    priority: int,
    bump_type: str,
    new_version: str | None,
    current_version: str | None,
    must_generate: bool,
    pr_report: str | None,
    commit_report: str | None,
    location: str | None,
) -> None:
    """Append a report to the primary log."""
    bump = BumpType(bump_type)
    if new_version is None and current_version is not None:
        try:
            new_version = apply_bump(current_version, bump)
        except ValueError as exc:
            raise SystemExit(f"Invalid version for --current-version: {exc}") from exc
    report = VersionReport(
        key=key,
        priority=priority,
        bump_type=bump,
        new_version=new_version,
        must_generate=must_generate,
        pr_report=pr_report,
        commit_report=commit_report,
    )
    add_version_report(report, location)


def add_target(target_json: str, location: str | None) -> None:
    """Append a structured target record to the v2 log."""
    data = _parse_json(target_json, arg_name="--target")
    try:
        target = VersionReportV2Target.model_validate(data)
    except ValidationError as exc:
        raise SystemExit(f"Invalid target for --target: {exc}") from exc
    add_version_report_v2_target(target, location)


def show(*, commit: bool, as_json: bool, location: str | None) -> None:
    """Print the merged primary log."""
    merged = get_merged_version_report(location)
    if as_json:
        print(merged.model_dump_json(indent=2))
    elif commit:
        print(merged.commit_markdown_section(), end="")
    else:
        print(merged.markdown_section(), end="")


def main(argv: list[str] | None = None) -> None:
    """Run a report log command."""
    args = argv if argv is not None else sys.argv[1:]
    parser = argparse.ArgumentParser(
        prog="version-reports",
        description="Append to and inspect version report logs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    add_parser = subparsers.add_parser("add", help="Append a version report.")
    add_parser.add_argument("--key", required=True, help="Deduplication key.")
    add_parser.add_argument(
        "--priority", type=int, default=0, help="Higher sorts first. (default: 0)"
    )
    add_parser.add_argument(
        "--bump-type",
        choices=[b.value for b in BumpType],
        default=BumpType.NONE.value,
        help="Change category. (default: %(default)s)",
    )
    version_group = add_parser.add_mutually_exclusive_group()
    version_group.add_argument("--new-version", default=None, help="Target version.")
    version_group.add_argument(
        "--current-version",
        default=None,
        help="Compute the target version by bumping this one.",
    )
    add_parser.add_argument(
        "--must-generate",
        action="store_true",
        help="Mark the report as requiring regeneration.",
    )
    add_parser.add_argument("--pr-report", default=None, help="PR markdown fragment.")
    add_parser.add_argument(
        "--commit-report", default=None, help="Commit message markdown fragment."
    )

    target_parser = subparsers.add_parser(
        "add-target", help="Append a structured target record."
    )
    target_parser.add_argument(
        "--target", required=True, help="JSON object describing the target."
    )

    show_parser = subparsers.add_parser("show", help="Print the merged report.")
    show_parser.add_argument(
        "--commit", action="store_true", help="Print the commit markdown section."
    )
    show_parser.add_argument(
        "--json", action="store_true", dest="as_json", help="Print merged JSON."
    )

    for sub in (add_parser, target_parser, show_parser):
        sub.add_argument(
            "--location",
            default=None,
            help="Log file path; defaults to $VERSION_REPORT_LOCATION.",
        )

    parsed = parser.parse_args(args)
    try:
        if parsed.command == "add":
            add(
                key=parsed.key,
                priority=parsed.priority,
                bump_type=parsed.bump_type,
                new_version=parsed.new_version,
                current_version=parsed.current_version,
                must_generate=parsed.must_generate,
                pr_report=parsed.pr_report,
                commit_report=parsed.commit_report,
                location=parsed.location,
            )
        elif parsed.command == "add-target":
            add_target(parsed.target, parsed.location)
        elif parsed.command == "show":
            show(commit=parsed.commit, as_json=parsed.as_json, location=parsed.location)
    except (VersionReportError, OSError) as exc:
        raise SystemExit(f"ERROR: {exc}") from exc


if __name__ == "__main__":
    main()
