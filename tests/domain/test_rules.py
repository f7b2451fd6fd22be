"""Tests for Rule construction, template expansion, and RuleSet composition."""

from __future__ import annotations

import re
import threading

import pytest

from metafilter.domain.errors import InvalidPattern
from metafilter.domain.rules import Rule, RuleSet, combine


class TestRuleConstruction:
    @pytest.mark.parametrize(
        "pattern",
        [
            r"(unclosed",
            r"unopened)",
            r"[abc",
            r"a{2,1}",
            r"(?P<x>a)(?P<x>b)",
            r"*leading",
        ],
    )
    def test_invalid_regex_raises(self, pattern: str) -> None:
        with pytest.raises(InvalidPattern) as exc_info:
            Rule.new(pattern, "")
        assert exc_info.value.pattern == pattern
        assert exc_info.value.reason

    def test_invalid_pattern_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            Rule.new("(", "")

    def test_direct_construction_validates_too(self) -> None:
        with pytest.raises(InvalidPattern):
            Rule("(feat")

    def test_literal_pattern_with_regex_metacharacters(self) -> None:
        rule = Rule.new("(feat", "", literal=True)
        assert rule.apply("Song (feat Someone)") == "Song  Someone)"

    def test_precompiled_pattern_keeps_source_and_flags(self) -> None:
        rule = Rule.new(re.compile(r"official", re.IGNORECASE), "")
        assert rule.pattern == "official"
        assert rule.flags & re.IGNORECASE
        assert rule.apply("OFFICIAL video") == " video"

    def test_bytes_pattern_rejected(self) -> None:
        with pytest.raises(InvalidPattern):
            Rule.new(re.compile(rb"abc"), "")

    def test_non_string_pattern_rejected(self) -> None:
        with pytest.raises(InvalidPattern):
            Rule.new(42, "")  # type: ignore[arg-type]

    def test_incompatible_flag_rejected(self) -> None:
        with pytest.raises(InvalidPattern):
            Rule.new("abc", "", flags=re.LOCALE)

    def test_non_string_replacement_is_type_error(self) -> None:
        with pytest.raises(TypeError):
            Rule.new("abc", None)  # type: ignore[arg-type]

    def test_unknown_group_reference_does_not_fail_construction(self) -> None:
        Rule.new(r"(a)", "$7 ${missing} \\g<other>")

    def test_frozen(self) -> None:
        rule = Rule.new("a", "b")
        with pytest.raises(AttributeError):
            rule.pattern = "c"  # type: ignore[misc]

    def test_value_equality_and_hash(self) -> None:
        assert Rule.new("a", "b") == Rule.new("a", "b")
        assert hash(Rule.new("a", "b")) == hash(Rule.new("a", "b"))
        assert Rule.new("a", "b") != Rule.new("a", "c")
        assert Rule.new("a", "b") != Rule.new("a", "b", literal=True)

    def test_regex_property(self) -> None:
        assert Rule.new(r"\d+", "").regex.pattern == r"\d+"


class TestRuleApply:
    def test_removes_feat_suffix(self) -> None:
        rule = Rule.new(r"\(feat\..*?\)", "")
        assert rule.apply("Song Title (feat. Someone)") == "Song Title "

    def test_official_video_replaced_with_space(self) -> None:
        rule = Rule.new(r"\s*\(Official Video\)\s*", " ")
        assert rule.apply("Artist - Track (Official Video)") == "Artist - Track "

    def test_replaces_every_match(self) -> None:
        assert Rule.new(r"\s{2,}", " ").apply("a  b   c    d") == "a b c d"

    def test_non_match_is_identity(self) -> None:
        text = "Nothing to see here"
        assert Rule.new(r"\[HD\]", "").apply(text) == text

    def test_empty_input_without_zero_width_match(self) -> None:
        assert Rule.new(r"x+", "y").apply("") == ""

    def test_empty_input_with_zero_width_match(self) -> None:
        assert Rule.new(r"^", "> ").apply("") == "> "

    def test_zero_width_pattern_matches_between_characters(self) -> None:
        assert Rule.new(r"", "-").apply("ab") == "-a-b-"

    def test_is_reusable(self) -> None:
        rule = Rule.new(r"\s+$", "")
        assert rule.apply("a  ") == "a"
        assert rule.apply("b ") == "b"


class TestReplacementTemplate:
    @pytest.mark.parametrize(
        "template",
        ["$2 by $1", "${2} by ${1}", "\\2 by \\1", "\\g<2> by \\g<1>"],
    )
    def test_positional_references(self, template: str) -> None:
        rule = Rule.new(r"^(.+?) - (.+)$", template)
        assert rule.apply("Artist - Track") == "Track by Artist"

    @pytest.mark.parametrize(
        "template",
        ["$title ($artist)", "${title} (${artist})", "\\g<title> (\\g<artist>)"],
    )
    def test_named_references(self, template: str) -> None:
        rule = Rule.new(r"^(?P<artist>.+?) - (?P<title>.+)$", template)
        assert rule.apply("Artist - Track") == "Track (Artist)"

    def test_whole_match_reference(self) -> None:
        assert Rule.new(r"\d{4}", "[$0]").apply("Live 1999") == "Live [1999]"

    def test_bare_reference_takes_whole_word(self) -> None:
        rule = Rule.new(r"(a)", "<$1b>")
        assert rule.apply("a") == "<>"

    def test_braces_separate_reference_from_text(self) -> None:
        assert Rule.new(r"(a)", "${1}b").apply("a") == "ab"

    def test_reference_stops_at_punctuation(self) -> None:
        assert Rule.new(r"(a)(b)", "$2-$1.").apply("ab") == "b-a."

    def test_escaped_dollar_and_backslash(self) -> None:
        assert Rule.new(r"x", "$$ \\\\").apply("x") == "$ \\"

    def test_lone_dollar_is_literal(self) -> None:
        assert Rule.new(r"x", "cost: $ -").apply("x") == "cost: $ -"

    def test_non_participating_group_expands_to_empty(self) -> None:
        rule = Rule.new(r"(a)|(b)", "[$1|$2]")
        assert rule.apply("ab") == "[a|][|b]"

    def test_out_of_range_group_expands_to_empty(self) -> None:
        assert Rule.new(r"(a)", "<$1$5>").apply("a") == "<a>"

    def test_unknown_named_group_expands_to_empty(self) -> None:
        assert Rule.new(r"(?P<x>a)", "<${x}${y}\\g<z>>").apply("a") == "<a>"

    def test_backslash_escapes_are_not_interpreted(self) -> None:
        assert Rule.new(r"x", "\\n").apply("x") == "\\n"


class TestRuleSet:
    def test_preserves_order(self) -> None:
        rules = [Rule.new("b", ""), Rule.new("a", ""), Rule.new("b", "")]
        rule_set = RuleSet.from_rules(rules)
        assert list(rule_set) == rules

    def test_accepts_generators(self) -> None:
        rule_set = RuleSet.from_rules(Rule.new(c, "") for c in "abc")
        assert [r.pattern for r in rule_set] == ["a", "b", "c"]

    def test_duplicates_are_kept(self) -> None:
        rule = Rule.new("a", "")
        assert len(RuleSet.from_rules([rule, rule])) == 2

    def test_rejects_non_rules(self) -> None:
        with pytest.raises(TypeError):
            RuleSet.from_rules(["a"])  # type: ignore[list-item]

    def test_empty_set(self) -> None:
        empty = RuleSet()
        assert len(empty) == 0
        assert empty.apply("unchanged") == "unchanged"

    def test_combine_concatenates(self) -> None:
        a = RuleSet.from_rules([Rule.new("1", "")])
        b = RuleSet.from_rules([Rule.new("2", ""), Rule.new("3", "")])
        combined = RuleSet.combine(a, b)
        assert [r.pattern for r in combined] == ["1", "2", "3"]
        assert a.combine(b) == combined
        assert a + b == combined

    def test_combine_leaves_inputs_untouched(self) -> None:
        a = RuleSet.from_rules([Rule.new("1", "")])
        b = RuleSet.from_rules([Rule.new("2", "")])
        combine(a, b)
        assert len(a) == 1
        assert len(b) == 1

    def test_combine_is_associative(self) -> None:
        a = RuleSet.from_rules([Rule.new("a", "b")])
        b = RuleSet.from_rules([Rule.new("b", "c")])
        c = RuleSet.from_rules([Rule.new("c", "d")])
        assert combine(combine(a, b), c) == combine(a, combine(b, c))

    def test_variadic_combine(self) -> None:
        sets = [RuleSet.from_rules([Rule.new(str(i), "")]) for i in range(4)]
        assert [r.pattern for r in combine(*sets)] == ["0", "1", "2", "3"]
        assert combine() == RuleSet()

    def test_combined_name(self) -> None:
        a = RuleSet.from_rules([], name="youtube")
        b = RuleSet.from_rules([], name="trim-symbols")
        assert combine(a, b).name == "youtube+trim-symbols"
        assert combine(RuleSet(), RuleSet()).name is None

    def test_name_does_not_affect_equality(self) -> None:
        rules = [Rule.new("a", "")]
        assert RuleSet.from_rules(rules, name="x") == RuleSet.from_rules(rules, name="y")

    def test_indexing_and_slicing(self) -> None:
        rules = [Rule.new(c, "") for c in "abc"]
        rule_set = RuleSet.from_rules(rules, name="abc")
        assert rule_set[1] == rules[1]
        assert isinstance(rule_set[1:], RuleSet)
        assert list(rule_set[1:]) == rules[1:]
        assert rules[2] in rule_set

    def test_add_rejects_other_types(self) -> None:
        with pytest.raises(TypeError):
            RuleSet() + [Rule.new("a", "")]  # type: ignore[operator]

    def test_shared_across_threads(self) -> None:
        rule_set = RuleSet.from_rules(
            [Rule.new(r"\s*\(Official Video\)", ""), Rule.new(r"\s+$", "")]
        )
        results: list[str] = []
        lock = threading.Lock()

        def worker() -> None:
            for _ in range(200):
                out = rule_set.apply("Track (Official Video) ")
                with lock:
                    results.append(out)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert set(results) == {"Track"}
