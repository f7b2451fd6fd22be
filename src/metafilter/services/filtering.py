"""FilterService — resolve rule tables and clean metadata strings.

Three read-only surfaces:
- clean: apply the selected (or configured) tables to a batch of strings
- list_tables: every table available by name, with its origin
- show_table: the rules inside one table

Tables come from two places. ``[rules.<name>]`` sections of the settings
are compiled on first use and only visible to this service; everything
else is looked up in the shared table registry.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from metafilter.config.settings import MetafilterSettings
from metafilter.domain.errors import InvalidPattern
from metafilter.domain.filters import apply_rules, apply_rules_until_stable
from metafilter.domain.rules import Rule, RuleSet, combine
from metafilter.domain.tables import get_table, is_builtin_table, list_tables
from metafilter.services.result import ServiceResult

logger = logging.getLogger(__name__)


def _rule_payload(rule: Rule) -> dict[str, Any]:
    return {
        "pattern": rule.pattern,
        "replacement": rule.replacement,
        "flags": rule.flags,
        "literal": rule.literal,
    }


class FilterService:
    """Applies named rule tables to metadata strings."""

    def __init__(self, settings: MetafilterSettings | None = None) -> None:
        self._settings = settings or MetafilterSettings()
        self._user_tables: dict[str, RuleSet] | None = None

    @property
    def settings(self) -> MetafilterSettings:
        return self._settings

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def user_tables(self) -> dict[str, RuleSet]:
        """Compile the ``[rules.<name>]`` tables from settings.

        Raises:
            InvalidPattern: If a configured pattern does not compile.
            ValueError: If a configured table reuses a built-in name.
        """
        if self._user_tables is None:
            tables: dict[str, RuleSet] = {}
            for name, spec in self._settings.rules.items():
                if is_builtin_table(name):
                    msg = f"Config table {name!r} conflicts with a built-in table"
                    raise ValueError(msg)
                tables[name] = spec.to_rule_set(name)
            self._user_tables = tables
        return self._user_tables

    def table_names(self, tables: Sequence[str] | None = None) -> list[str]:
        """Return *tables*, or the configured defaults when None."""
        if tables is None:
            return list(self._settings.filter.tables)
        return list(tables)

    def resolve(self, tables: Sequence[str] | None = None) -> RuleSet:
        """Combine the named tables, in order, into one RuleSet.

        Config tables shadow registry entries of the same name.

        Raises:
            KeyError: If a name is neither a config table nor registered.
            InvalidPattern: If a config table has an invalid pattern.
            TypeError: If a registered factory does not return a RuleSet.
        """
        user = self.user_tables()
        return combine(
            *(user[name] if name in user else get_table(name) for name in self.table_names(tables))
        )

    # ------------------------------------------------------------------
    # clean
    # ------------------------------------------------------------------

    def clean(
        self,
        texts: Iterable[str],
        *,
        tables: Sequence[str] | None = None,
        until_stable: bool | None = None,
    ) -> ServiceResult:
        """Clean every string in *texts*.

        Args:
            texts: Strings to clean, in output order.
            tables: Table names to apply, in order. None uses ``[filter] tables``.
            until_stable: Repeat passes until the text settles. None uses
                ``[filter] until_stable``.
        """
        op = "clean"
        names = self.table_names(tables)
        rule_set = self._resolve_or_fail(op, names)
        if isinstance(rule_set, ServiceResult):
            return rule_set

        stable = self._settings.filter.until_stable if until_stable is None else until_stable
        max_passes = self._settings.filter.max_passes

        items: list[dict[str, str]] = []
        for text in texts:
            if stable:
                output = apply_rules_until_stable(text, rule_set, max_passes=max_passes)
            else:
                output = apply_rules(text, rule_set)
            items.append({"input": text, "output": output})

        logger.debug("Cleaned %d strings with %d rules", len(items), len(rule_set))
        return ServiceResult(
            ok=True,
            op=op,
            data={"items": items, "tables": names},
            meta={"count": len(items), "rules": len(rule_set), "until_stable": stable},
        )

    # ------------------------------------------------------------------
    # list_tables / show_table
    # ------------------------------------------------------------------

    def list_tables(self) -> ServiceResult:
        """List config tables followed by registered tables."""
        op = "list_tables"
        try:
            user = self.user_tables()
        except InvalidPattern as exc:
            return self._invalid_pattern(op, exc)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_TABLE", str(exc))

        items: list[dict[str, Any]] = []
        warnings: list[str] = []
        for name, rule_set in user.items():
            items.append({"name": name, "source": "config", "rules": len(rule_set)})
        for name in list_tables():
            if name in user:
                continue
            source = "builtin" if is_builtin_table(name) else "plugin"
            try:
                count: int | None = len(get_table(name))
            except Exception as exc:
                logger.warning("Rule table %s could not be built", name, exc_info=True)
                warnings.append(f"Rule table {name!r} could not be built: {exc}")
                count = None
            items.append({"name": name, "source": source, "rules": count})

        return ServiceResult(
            ok=True,
            op=op,
            data={"items": items},
            warnings=warnings,
            meta={"count": len(items)},
        )

    def show_table(self, name: str) -> ServiceResult:
        """Return the rules of a single table, in application order."""
        op = "show_table"
        rule_set = self._resolve_or_fail(op, [name])
        if isinstance(rule_set, ServiceResult):
            return rule_set
        return ServiceResult(
            ok=True,
            op=op,
            data={"name": name, "rules": [_rule_payload(rule) for rule in rule_set]},
            meta={"count": len(rule_set)},
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve_or_fail(self, op: str, names: Sequence[str]) -> RuleSet | ServiceResult:
        try:
            return self.resolve(names)
        except InvalidPattern as exc:
            return self._invalid_pattern(op, exc)
        except KeyError as exc:
            message = exc.args[0] if exc.args else str(exc)
            return ServiceResult.failure(op, "UNKNOWN_TABLE", message, tables=list(names))
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_TABLE", str(exc))
        except Exception as exc:
            # Broken registered or plugin factory
            logger.warning("Rule tables %s could not be built", names, exc_info=True)
            return ServiceResult.failure(
                op,
                "INVALID_TABLE",
                f"Rule table could not be built: {exc}",
                tables=list(names),
            )

    @staticmethod
    def _invalid_pattern(op: str, exc: InvalidPattern) -> ServiceResult:
        return ServiceResult.failure(
            op,
            "INVALID_PATTERN",
            str(exc),
            pattern=str(exc.pattern),
            reason=exc.reason,
        )
