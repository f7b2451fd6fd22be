"""metafilter — clean music metadata with ordered pattern/replacement rules.

Typical use::

    from metafilter import apply_rules, combine, remastered_rules, trim_whitespace_rules

    rules = combine(remastered_rules(), trim_whitespace_rules())
    apply_rules("Here Comes The Sun (Remastered)", rules)  # 'Here Comes The Sun'
"""

from metafilter.domain.errors import InvalidPattern
from metafilter.domain.filters import apply_rules, apply_rules_until_stable
from metafilter.domain.rules import Rule, RuleSet, combine
from metafilter.domain.tables import (
    clean_explicit_rules,
    compose_tables,
    feature_rules,
    get_table,
    list_tables,
    live_rules,
    normalize_feature_rules,
    register_table,
    remastered_rules,
    suffix_rules,
    trim_symbols_rules,
    trim_whitespace_rules,
    version_rules,
    youtube_track_rules,
)

__version__ = "0.1.0"

__all__ = [
    "InvalidPattern",
    "Rule",
    "RuleSet",
    "__version__",
    "apply_rules",
    "apply_rules_until_stable",
    "clean_explicit_rules",
    "combine",
    "compose_tables",
    "feature_rules",
    "get_table",
    "list_tables",
    "live_rules",
    "normalize_feature_rules",
    "register_table",
    "remastered_rules",
    "suffix_rules",
    "trim_symbols_rules",
    "trim_whitespace_rules",
    "version_rules",
    "youtube_track_rules",
]
