"""Predefined rule tables and the table registry.

Each accessor builds its RuleSet on first call and returns the same
immutable object afterwards. The tables are data for the engine; the
engine itself knows nothing about them.

The registry maps short names (used by config files, plugins and the CLI)
to accessors. Built-in names are reserved.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from functools import cache

from metafilter.domain.rules import Rule, RuleSet, combine

TableFactory = Callable[[], RuleSet]

# --- Rule data: (pattern, replacement) pairs, applied top to bottom ---
# End anchors are \Z; $ would also match before a trailing newline.

_YOUTUBE_TRACK: tuple[tuple[str, str], ...] = (
    (r"^\s+", ""),
    (r"\s+\Z", ""),
    # **NEW**
    (r"\*+\s?\S+\s?\*+\Z", ""),
    # [4K], [HD], ...
    (r"\[[^\]]+\]", ""),
    # (Radio Version)
    (r"(?i)\([^)]*version\)\Z", ""),
    # file extensions of uploaded videos
    (r"(?i)\.(avi|wmv|mpg|mpeg|flv)\Z", ""),
    # (Lyric Video), (lyrics)
    (r"(?i)\(.*lyrics?\s*(video)?\)", ""),
    # (Official Track Stream)
    (r"(?i)\((of+icial\s*)?(track\s*)?stream\)", ""),
    # (Official Music Video)
    (r"(?i)\((of+icial\s*)?(music\s*)?video\)", ""),
    # (Official Audio)
    (r"(?i)\((of+icial\s*)?(music\s*)?audio\)", ""),
    (r"(?i)(ALBUM TRACK\s*)?(album track\s*)", ""),
    (r"(?i)(COVER ART\s*)?(Cover Art\s*)", ""),
    # (Official)
    (r"(?i)\(\s*of+icial\s*\)", ""),
    # (1999)
    (r"(?i)\(\s*[0-9]{4}\s*\)", ""),
    (r"(HD|HQ)\s*\Z", ""),
    # vidéo clip officiel
    (r"(?i)(vid[ée]o)?\s?clip\sof+ici[ae]l", ""),
    # offizielles Video
    (r"(?i)of+iziel+es\s*video", ""),
    (r"(?i)vid[ée]o\s?clip", ""),
    (r"(?i)\sclip", ""),
    (r"(?i)full\s*album", ""),
    # (Live at Wembley)
    (r"(?i)\(live.*?\)\Z", ""),
    # everything after a pipe
    (r"(?i)\|.*\Z", ""),
    # Artist - The new "Track Title" with a guest
    (r'^(|.*\s)"(.{5,})"(\s.*|)\Z', "$2"),
    (r"^(|.*\s)'(.{5,})'(\s.*|)\Z", "$2"),
    # (*01/01/1999*)
    (r"(?i)\(.*[0-9]{1,2}/[0-9]{1,2}/[0-9]{2,4}.*\)", ""),
    (r"(?i)sub\s*español", ""),
    (r"(?i)\s\(Letra/Lyrics\)", ""),
    (r"(?i)\s\(Letra\)", ""),
    (r"(?i)\s\(En\svivo\)", ""),
)

_TRIM_SYMBOLS: tuple[tuple[str, str], ...] = (
    # empty brackets left behind by other tables
    (r"\(+\s*\)+", ""),
    (r'^[/,:;~\s"-]+', ""),
    (r'[/,:;~\s"-]+\Z', ""),
)

_REMASTERED: tuple[tuple[str, str], ...] = (
    # Track - Remastered
    (r"-\sRemastered\Z", ""),
    # Track - Remastered 2015
    (r"-\sRemastered\s\d+\Z", ""),
    # Track (Remastered 2009), Track (Remaster 2012)
    (r"\(Remaster(ed)?\s\d+\)\Z", ""),
    # Track [2011 - Remaster]
    (r"\[\d+\s-\sRemaster\]\Z", ""),
    # Track (2011 - Remaster), Track (2012 Remaster)
    (r"\(\d+(\s-)?\sRemaster\)\Z", ""),
    # Track - 2011 - Remaster, Track - 2006 Remaster
    (r"-\s\d+(\s-)?\sRemaster\Z", ""),
    # Track - 2001 Digital Remaster
    (r"-\s\d+\s.+?\sRemaster\Z", ""),
    # Track - 2011 Remastered Version
    (r"-\s\d+\sRemastered Version\Z", ""),
    # Track (Live / Remastered)
    (r"\(Live\s/\sRemastered\)\Z", ""),
    # Track - Live / Remastered
    (r"-\sLive\s/\sRemastered\Z", ""),
    # Track (Remastered), Track [Remastered]
    (r"[(\[]Remastered[)\]]\Z", ""),
    # Track (2014 Remastered Version)
    (r"[(\[]\d{4} Re[Mm]astered Version[)\]]\Z", ""),
    # Track (2009 Re-Mastered Digital Version)
    (r"[(\[]\d{4} Re-?[Mm]astered Digital Version[)\]]\Z", ""),
    # Track (Expanded & Remastered Original Album Mix)
    (r"\([^(]*Remaster[^)]*\)\Z", ""),
)

_LIVE: tuple[tuple[str, str], ...] = (
    # Track - Live
    (r"-\sLive?\Z", ""),
    # Track - Live at Somewhere
    (r"-\sLive\s.+?\Z", ""),
)

_CLEAN_EXPLICIT: tuple[tuple[str, str], ...] = (
    (r"(?i)\s[(\[]Explicit[)\]]", ""),
    (r"(?i)\s[(\[]Clean[)\]]", ""),
)

_FEATURE: tuple[tuple[str, str], ...] = (
    # Track (feat. Artist), Track [feat. Artist]
    (r"(?i)\s[(\[]feat. .+[)\]]", ""),
)

_NORMALIZE_FEATURE: tuple[tuple[str, str], ...] = (
    # Track (feat. Artist) -> Track feat. Artist
    (r"(?i)\s[(\[](feat. .+)[)\]]", " $1"),
)

_VERSION: tuple[tuple[str, str], ...] = (
    (r"[(\[]Album Version[)\]]\Z", ""),
    # (Rerecorded), [Re-Recorded]
    (r"[(\[]Re-?[Rr]ecorded[)\]]\Z", ""),
    (r"[(\[]Single Version[)\]]\Z", ""),
    (r"[(\[]Edit[)\]]\Z", ""),
    (r"-\sMono Version\Z", ""),
    (r"-\sStereo Version\Z", ""),
    (r"\(Deluxe Edition\)\Z", ""),
    (r"(?i)[(\[]Explicit Version[)\]]", ""),
)

_SUFFIX: tuple[tuple[str, str], ...] = (
    # Track - Someone Remix -> Track (Someone Remix)
    (r"(?i)-\s(.+?)\s((Re)?mix|edit|dub|mix|vip|version)\Z", "($1 $2)"),
    # Track - Remix -> Track (Remix)
    (r"(?i)-\s(Remix|VIP)\Z", "($1)"),
)

_TRIM_WHITESPACE: tuple[tuple[str, str], ...] = (
    (r"^\s+", ""),
    (r"\s+\Z", ""),
)


def _build(name: str, pairs: Iterable[tuple[str, str]]) -> RuleSet:
    return RuleSet.from_rules((Rule.new(p, r) for p, r in pairs), name=name)


# --- Accessors ---


@cache
def youtube_track_rules() -> RuleSet:
    """Strip YouTube and video-site boilerplate from a track title.

    Usually followed by :func:`trim_symbols_rules` to remove the leftovers.
    """
    return _build("youtube", _YOUTUBE_TRACK)


@cache
def trim_symbols_rules() -> RuleSet:
    """Remove empty brackets and leading/trailing dashes, quotes and separators."""
    return _build("trim-symbols", _TRIM_SYMBOLS)


@cache
def remastered_rules() -> RuleSet:
    """Remove "Remastered"-style suffixes."""
    return _build("remastered", _REMASTERED)


@cache
def live_rules() -> RuleSet:
    return _build("live", _LIVE)


@cache
def clean_explicit_rules() -> RuleSet:
    """Remove "(Explicit)" and "(Clean)" markers."""
    return _build("clean-explicit", _CLEAN_EXPLICIT)


@cache
def feature_rules() -> RuleSet:
    """Remove bracketed "feat." credits."""
    return _build("feature", _FEATURE)


@cache
def normalize_feature_rules() -> RuleSet:
    """Unwrap bracketed "feat." credits to a plain ``feat. Artist`` suffix."""
    return _build("normalize-feature", _NORMALIZE_FEATURE)


@cache
def version_rules() -> RuleSet:
    """Remove version markers such as "(Album Version)" or "(Deluxe Edition)"."""
    return _build("version", _VERSION)


@cache
def suffix_rules() -> RuleSet:
    """Rewrite "- X Remix" style suffixes to "(X Remix)"."""
    return _build("suffix", _SUFFIX)


@cache
def trim_whitespace_rules() -> RuleSet:
    return _build("trim-whitespace", _TRIM_WHITESPACE)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_BUILTIN_TABLES: dict[str, TableFactory] = {
    "youtube": youtube_track_rules,
    "trim-symbols": trim_symbols_rules,
    "remastered": remastered_rules,
    "live": live_rules,
    "clean-explicit": clean_explicit_rules,
    "feature": feature_rules,
    "normalize-feature": normalize_feature_rules,
    "version": version_rules,
    "suffix": suffix_rules,
    "trim-whitespace": trim_whitespace_rules,
}

TABLE_REGISTRY: dict[str, TableFactory] = dict(_BUILTIN_TABLES)


def get_table(name: str) -> RuleSet:
    """Look up a registered table by name and return its RuleSet.

    Raises:
        KeyError: If no table is registered under *name*.
        TypeError: If the registered factory does not return a RuleSet.
    """
    try:
        factory = TABLE_REGISTRY[name]
    except KeyError:
        msg = f"No rule table registered as {name!r}"
        raise KeyError(msg) from None

    table = factory()
    if not isinstance(table, RuleSet):
        msg = f"Rule table {name!r} returned {type(table).__name__}, expected RuleSet"
        raise TypeError(msg)
    return table


def register_table(name: str, factory: TableFactory) -> None:
    """Register an additional named table.

    Re-registering the same factory under the same name is a no-op.
    Built-in names are reserved and cannot be overridden.
    """
    if not isinstance(name, str):
        msg = f"Rule table name must be str, got {type(name).__name__}"
        raise TypeError(msg)

    normalized_name = name.strip()
    if not normalized_name:
        msg = "Rule table name must not be empty"
        raise ValueError(msg)

    if not callable(factory):
        msg = f"Rule table {normalized_name!r} must be registered with a callable"
        raise TypeError(msg)

    if normalized_name in _BUILTIN_TABLES:
        msg = f"Rule table {normalized_name!r} conflicts with a built-in table"
        raise ValueError(msg)

    existing = TABLE_REGISTRY.get(normalized_name)
    if existing is not None and existing is not factory:
        msg = f"Rule table {normalized_name!r} is already registered"
        raise ValueError(msg)

    TABLE_REGISTRY[normalized_name] = factory


def list_tables() -> list[str]:
    """Return registered table names in registration order."""
    return list(TABLE_REGISTRY)


def is_builtin_table(name: str) -> bool:
    return name in _BUILTIN_TABLES


def compose_tables(names: Iterable[str]) -> RuleSet:
    """Combine the named tables in the order given.

    Raises:
        KeyError: If any name is not registered.
    """
    return combine(*(get_table(name) for name in names))
