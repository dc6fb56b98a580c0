"""Report log locations.

A single environment variable names the primary log. Child processes
inherit it, which is how subprocess-spawned units of work find the log
without being told explicitly. The structured (v2) log path is derived
from the primary one.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

ENV_VAR = "VERSION_REPORT_LOCATION"

_JSON_SUFFIX = ".json"


def resolve_location(
    location: str | os.PathLike[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path | None:
    """Return the primary log path, or None if none is configured.

    An explicit location wins over the environment. Empty values count as
    unset.
    """
    if location:
        return Path(location)
    env = os.environ if environ is None else environ
    value = env.get(ENV_VAR, "")
    return Path(value) if value else None


def v2_location(location: str | os.PathLike[str] | None) -> Path | None:
    """Derive the structured log path from the primary log path.

    Examples:
        "/tmp/version.json" → "/tmp/version.v2.json"
        "/tmp/version.buf" → "/tmp/version.buf.v2"
        None → None (structured logging disabled)
    """
    if not location:
        return None
    raw = os.fspath(location)
    # A bare ".json" has no stem to keep, so it takes the fallback
    if len(raw) > len(_JSON_SUFFIX) and raw.endswith(_JSON_SUFFIX):
        return Path(raw[: -len(_JSON_SUFFIX)] + ".v2" + _JSON_SUFFIX)
    return Path(raw + ".v2")
