"""Rule application — fold a text through an ordered rule set.

INVARIANT: Rules run strictly left to right; each rule sees the output of
the one before it. The applier adds no trimming, casing, or Unicode
normalization of its own.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from metafilter.domain.rules import Rule

logger = logging.getLogger(__name__)

DEFAULT_MAX_PASSES = 16


def apply_rules(text: str, rules: Iterable[Rule]) -> str:
    """Apply *rules* to *text* in order and return the result.

    *rules* is usually a :class:`~metafilter.domain.rules.RuleSet`, but any
    iterable of rules works. An empty rule set returns *text* unchanged.

    Examples:
        >>> from metafilter.domain.rules import Rule
        >>> apply_rules("Song Title (feat. Someone)", [
        ...     Rule.new(r"\\(feat\\..*?\\)", ""),
        ...     Rule.new(r"\\s+$", ""),
        ... ])
        'Song Title'
    """
    debug = logger.isEnabledFor(logging.DEBUG)
    result = text
    for rule in rules:
        filtered = rule.apply(result)
        if debug and filtered != result:
            logger.debug("Rule %r rewrote %r -> %r", rule.pattern, result, filtered)
        result = filtered
    return result


def apply_rules_until_stable(
    text: str,
    rules: Iterable[Rule],
    *,
    max_passes: int = DEFAULT_MAX_PASSES,
) -> str:
    """Re-apply *rules* until a full pass leaves the text unchanged.

    Stops after *max_passes* passes even if the output keeps changing, and
    returns the last output.

    Raises:
        ValueError: If *max_passes* is less than 1.
    """
    if max_passes < 1:
        msg = f"max_passes must be at least 1, got {max_passes}"
        raise ValueError(msg)

    ordered = tuple(rules)
    previous = text
    for _ in range(max_passes):
        current = apply_rules(previous, ordered)
        if current == previous:
            return current
        previous = current

    logger.warning("Rules did not settle after %d passes on %r", max_passes, text)
    return previous
