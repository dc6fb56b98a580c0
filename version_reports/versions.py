"""Version parsing and bumping utilities.

Handles conversion between version strings and semver objects, with
special handling for incomplete version strings (e.g., "1.0" → "1.0.0").
"""

from __future__ import annotations

import semver

from .models import BumpType


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Handles incomplete versions by padding with zeros:
    - "1" → "1.0.0"
    - "1.2" → "1.2.0"
    - "1.2.3-rc.1" → "1.2.3-rc.1"

    A leading "v" is ignored.
    """
    version_str = version_str.removeprefix("v")
    # Split off prerelease/build metadata so padding only touches the core
    cut = min(
        (i for i in (version_str.find("-"), version_str.find("+")) if i >= 0),
        default=len(version_str),
    )
    core, suffix = version_str[:cut], version_str[cut:]
    parts = core.split(".")
    while len(parts) < 3:
        parts.append("0")
    return semver.Version.parse(".".join(parts[:3]) + suffix)


def apply_bump(version_str: str, bump_type: BumpType) -> str:
    """Compute the version that follows ``version_str`` for a bump type.

    Examples:
        ("1.2.3", MINOR) → "1.3.0"
        ("1.2.3", PRERELEASE) → "1.2.4-rc.1"
        ("1.2.4-rc.1", PRERELEASE) → "1.2.4-rc.2"
        ("1.2.4-rc.2", GRADUATE) → "1.2.4"

    NONE and CUSTOM leave the version as given.
    """
    bump_type = BumpType(bump_type)
    if bump_type in (BumpType.NONE, BumpType.CUSTOM):
        return version_str

    v = parse_version(version_str)
    if bump_type is BumpType.PATCH:
        return str(v.bump_patch())
    if bump_type is BumpType.MINOR:
        return str(v.bump_minor())
    if bump_type is BumpType.MAJOR:
        return str(v.bump_major())
    if bump_type is BumpType.GRADUATE:
        return str(v.finalize_version())
    # PRERELEASE: start a new prerelease series, or continue the current one
    if v.prerelease is None:
        return str(v.bump_patch().bump_prerelease())
    return str(v.bump_prerelease())
