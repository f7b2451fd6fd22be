"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, metafilter.toml only contains
overrides. An empty file is a valid configuration.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

from metafilter.domain.filters import DEFAULT_MAX_PASSES
from metafilter.domain.rules import Rule, RuleSet

# --- metafilter.toml sections ---


class FilterConfig(BaseModel):
    """[filter] section."""

    model_config = {"frozen": True}

    tables: list[str] = Field(default_factory=lambda: ["youtube", "trim-symbols"])
    until_stable: bool = False
    max_passes: int = Field(default=DEFAULT_MAX_PASSES, ge=1)


class RuleSpec(BaseModel):
    """One entry of a ``[rules.<name>]`` table."""

    model_config = {"frozen": True}

    pattern: str
    replacement: str = ""
    literal: bool = False
    ignore_case: bool = False

    def to_rule(self) -> Rule:
        """Compile into a Rule.

        Raises:
            InvalidPattern: If the pattern does not compile.
        """
        flags = re.IGNORECASE if self.ignore_case else 0
        return Rule.new(self.pattern, self.replacement, flags=flags, literal=self.literal)


class TableSpec(BaseModel):
    """[rules.<name>] section — a user-defined rule table."""

    model_config = {"frozen": True}

    rules: list[RuleSpec] = Field(default_factory=list)

    def to_rule_set(self, name: str) -> RuleSet:
        return RuleSet.from_rules((spec.to_rule() for spec in self.rules), name=name)

