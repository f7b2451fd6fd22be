"""Rule and RuleSet — the value types the filter engine works on.

A Rule is one pattern -> replacement transformation. A RuleSet is an ordered
tuple of Rules plus concatenation.

INVARIANT: Rules and RuleSets are immutable. A Rule's pattern is compiled at
construction; an uncompilable pattern never yields a Rule.

Replacement templates accept both ``$``-style and ``re``-style references:

- ``$1``, ``${1}``, ``\\1``, ``\\g<1>`` — positional group (``0`` is the whole match)
- ``$name``, ``${name}``, ``\\g<name>`` — named group
- ``$$`` and ``\\\\`` — a literal ``$`` and a literal backslash

A bare ``$`` reference takes the longest run of ASCII letters, digits and
underscores, so ``$1a`` names a group called ``1a``; write ``${1}a`` to follow
group 1 with text.

A reference to a group that did not take part in the match, or that the
pattern does not define at all, expands to the empty string.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import NamedTuple, overload

from metafilter.domain.errors import InvalidPattern

_TEMPLATE_TOKEN = re.compile(
    r"\$\$"
    r"|\$\{(?P<braced>\w+)\}"
    r"|\$(?P<bare>[0-9A-Za-z_]+)"
    r"|\\g<(?P<named>\w+)>"
    r"|\\(?P<numbered>\d{1,2})"
    r"|\\\\"
)


class _GroupRef(NamedTuple):
    """Resolved group index inside a parsed replacement template."""

    index: int


_Segment = str | _GroupRef


def _compile(pattern: str, flags: int, literal: bool) -> re.Pattern[str]:
    source = re.escape(pattern) if literal else pattern
    try:
        return re.compile(source, flags)
    except (re.error, OverflowError, ValueError) as exc:
        raise InvalidPattern(pattern, str(exc)) from exc


def _parse_template(template: str, regex: re.Pattern[str]) -> tuple[_Segment, ...]:
    """Split *template* into literal text and group references.

    References are resolved against *regex* once, here. References the
    pattern cannot satisfy are dropped, so they expand to nothing.
    """
    segments: list[_Segment] = []
    pos = 0
    for token in _TEMPLATE_TOKEN.finditer(template):
        if token.start() > pos:
            segments.append(template[pos : token.start()])
        pos = token.end()

        text = token.group(0)
        if text == "$$":
            segments.append("$")
            continue
        if text == "\\\\":
            segments.append("\\")
            continue

        key = next(
            g for g in token.group("braced", "bare", "named", "numbered") if g is not None
        )
        index: int | None
        if key.isdecimal():
            index = int(key) if int(key) <= regex.groups else None
        else:
            index = regex.groupindex.get(key)
        if index is not None:
            segments.append(_GroupRef(index))

    if pos < len(template):
        segments.append(template[pos:])
    return tuple(segments)


@dataclass(frozen=True)
class Rule:
    """A single pattern -> replacement transformation.

    Attributes:
        pattern: Regular expression source, or the literal text to match
            when ``literal`` is set. A compiled ``re.Pattern`` is accepted
            and stored as its source plus flags.
        replacement: Template substituted for every match.
        flags: ``re`` flags used when compiling the pattern.
        literal: Match ``pattern`` verbatim instead of as a regex.

    Raises:
        InvalidPattern: If the pattern cannot be compiled.
    """

    pattern: str
    replacement: str = ""
    flags: int = 0
    literal: bool = False
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)
    _template: tuple[_Segment, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        pattern: object = self.pattern
        flags = self.flags
        if isinstance(pattern, re.Pattern):
            if not isinstance(pattern.pattern, str):
                raise InvalidPattern(pattern, "bytes patterns are not supported")
            flags |= pattern.flags & ~re.UNICODE
            pattern = pattern.pattern
        if not isinstance(pattern, str):
            raise InvalidPattern(pattern, f"expected str, got {type(pattern).__name__}")
        if not isinstance(self.replacement, str):
            msg = f"Replacement must be str, got {type(self.replacement).__name__}"
            raise TypeError(msg)

        regex = _compile(pattern, flags, self.literal)
        object.__setattr__(self, "pattern", pattern)
        object.__setattr__(self, "flags", flags)
        object.__setattr__(self, "_regex", regex)
        object.__setattr__(self, "_template", _parse_template(self.replacement, regex))

    @classmethod
    def new(
        cls,
        pattern: str | re.Pattern[str],
        replacement: str = "",
        *,
        flags: int = 0,
        literal: bool = False,
    ) -> Rule:
        """Build and validate a rule.

        Examples:
            >>> Rule.new(r"\\s+$", "").apply("Track  ")
            'Track'
            >>> Rule.new("(", "[", literal=True).apply("a (b")
            'a [b'
        """
        return cls(pattern, replacement, flags=flags, literal=literal)  # type: ignore[arg-type]

    @property
    def regex(self) -> re.Pattern[str]:
        """The compiled pattern."""
        return self._regex

    def apply(self, text: str) -> str:
        """Replace every non-overlapping match in *text*.

        Returns *text* unchanged when nothing matches.
        """
        return self._regex.sub(self._expand, text)

    def _expand(self, match: re.Match[str]) -> str:
        parts: list[str] = []
        for segment in self._template:
            if isinstance(segment, _GroupRef):
                parts.append(match.group(segment.index) or "")
            else:
                parts.append(segment)
        return "".join(parts)


@dataclass(frozen=True)
class RuleSet:
    """An ordered, immutable collection of rules.

    Order is application order; it is never sorted or deduplicated.
    ``name`` is informational and does not take part in equality.
    """

    rules: tuple[Rule, ...] = ()
    name: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        rules = tuple(self.rules)
        for rule in rules:
            if not isinstance(rule, Rule):
                msg = f"RuleSet entries must be Rule, got {type(rule).__name__}"
                raise TypeError(msg)
        object.__setattr__(self, "rules", rules)

    @classmethod
    def from_rules(cls, rules: Iterable[Rule], *, name: str | None = None) -> RuleSet:
        """Build a RuleSet preserving the iteration order of *rules*."""
        return cls(tuple(rules), name=name)

    def combine(self, other: RuleSet) -> RuleSet:
        """Return this set's rules followed by *other*'s.

        Also callable as ``RuleSet.combine(a, b)``.
        """
        return combine(self, other)

    def apply(self, text: str) -> str:
        """Shortcut for :func:`metafilter.domain.filters.apply_rules`."""
        from metafilter.domain.filters import apply_rules

        return apply_rules(text, self)

    def __add__(self, other: object) -> RuleSet:
        if not isinstance(other, RuleSet):
            return NotImplemented
        return combine(self, other)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    @overload
    def __getitem__(self, index: int) -> Rule: ...

    @overload
    def __getitem__(self, index: slice) -> RuleSet: ...

    def __getitem__(self, index: int | slice) -> Rule | RuleSet:
        if isinstance(index, slice):
            return RuleSet(self.rules[index], name=self.name)
        return self.rules[index]


def combine(*rule_sets: RuleSet) -> RuleSet:
    """Concatenate rule sets in argument order.

    No deduplication or reordering happens. With no arguments the result
    is the empty set.

    Examples:
        >>> a = RuleSet.from_rules([Rule.new("a", "b")], name="a")
        >>> b = RuleSet.from_rules([Rule.new("b", "c")], name="b")
        >>> combine(a, b).apply("a")
        'c'
        >>> combine(a, b).name
        'a+b'
    """
    rules: list[Rule] = []
    names: list[str] = []
    for rule_set in rule_sets:
        rules.extend(rule_set.rules)
        if rule_set.name:
            names.append(rule_set.name)
    return RuleSet(tuple(rules), name="+".join(names) or None)
