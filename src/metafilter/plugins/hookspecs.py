"""Pluggy hook specifications for metafilter.

One setup-time hook lets installed packages contribute named rule tables.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from metafilter.domain.rules import RuleSet

PROJECT_NAME = "metafilter"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class MetafilterHookSpec:
    """Hook specifications for the metafilter plugin system."""

    @hookspec
    def register_rule_tables(self) -> dict[str, Callable[[], RuleSet]] | None:
        """Return table name -> factory mappings to extend TABLE_REGISTRY."""
