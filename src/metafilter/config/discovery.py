"""Locate the metafilter.toml that applies to an invocation.

Sources, first match wins: ``--config``, ``METAFILTER_CONFIG``, then the
nearest ``metafilter.toml`` at or above the working directory.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "metafilter.toml"
CONFIG_ENV_VAR = "METAFILTER_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest metafilter.toml in *start* (default: cwd) or its parents."""
    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_config_path(
    explicit: str | os.PathLike[str] | None = None,
    cwd: Path | None = None,
) -> Path | None:
    """Pick the config file for this invocation, or None for code defaults.

    A file named by ``--config`` or ``METAFILTER_CONFIG`` that does not exist
    means no config at all; the walk-up search is not attempted.
    """
    named = explicit or os.environ.get(CONFIG_ENV_VAR)
    if named:
        path = Path(named).expanduser()
        return path if path.is_file() else None
    return find_config(cwd)
