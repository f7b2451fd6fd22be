"""Tests for apply_rules and apply_rules_until_stable."""

from __future__ import annotations

import logging

import pytest

from metafilter.domain.filters import apply_rules, apply_rules_until_stable
from metafilter.domain.rules import Rule, RuleSet, combine

FEAT = Rule.new(r"\(feat\..*?\)", "")
TRIM_TRAILING = Rule.new(r"\s+$", "")
DROP_BRACKETS = Rule.new(r"\s*\[[^\]]*\]", "")

SAMPLES = [
    "",
    "Song Title (feat. Someone)",
    "  padded  ",
    "Track [HD] (feat. X) ",
    "Ünïcödé – Tïtle",
]


class TestApplyRules:
    @pytest.mark.parametrize("text", SAMPLES)
    def test_empty_rule_set_is_identity(self, text: str) -> None:
        assert apply_rules(text, RuleSet()) == text

    def test_feat_then_trim(self) -> None:
        rules = RuleSet.from_rules([FEAT, TRIM_TRAILING])
        assert apply_rules("Song Title (feat. Someone)", rules) == "Song Title"

    def test_order_matters(self) -> None:
        text = "Track [Live]"
        assert apply_rules(text, [TRIM_TRAILING, Rule.new(r"\[[^\]]*\]", "")]) == "Track "
        assert apply_rules(text, [Rule.new(r"\[[^\]]*\]", ""), TRIM_TRAILING]) == "Track"

    def test_later_rule_sees_earlier_output(self) -> None:
        rules = [Rule.new(r"\(Official Video\)", ""), Rule.new(r"\s{2,}", " ")]
        assert apply_rules("Artist  (Official Video)  Track", rules) == "Artist Track"

    def test_empty_input_stays_empty(self) -> None:
        rules = RuleSet.from_rules([FEAT, TRIM_TRAILING, DROP_BRACKETS])
        assert apply_rules("", rules) == ""

    def test_accepts_plain_iterables(self) -> None:
        assert apply_rules("a ", (r for r in [TRIM_TRAILING])) == "a"

    @pytest.mark.parametrize("text", SAMPLES)
    def test_associativity_of_composition(self, text: str) -> None:
        a = RuleSet.from_rules([DROP_BRACKETS])
        b = RuleSet.from_rules([FEAT])
        c = RuleSet.from_rules([TRIM_TRAILING])
        left = apply_rules(text, combine(combine(a, b), c))
        right = apply_rules(text, combine(a, combine(b, c)))
        assert left == right

    @pytest.mark.parametrize("text", SAMPLES)
    def test_idempotent_rule_applied_twice(self, text: str) -> None:
        once = apply_rules(text, [TRIM_TRAILING])
        assert apply_rules(once, [TRIM_TRAILING]) == once
        assert apply_rules(text, [TRIM_TRAILING, TRIM_TRAILING]) == once

    def test_deterministic_for_equal_rule_sets(self) -> None:
        first = RuleSet.from_rules([Rule.new(r"\s*\(.*?\)", ""), Rule.new(r"\s+$", "")])
        second = RuleSet.from_rules([Rule.new(r"\s*\(.*?\)", ""), Rule.new(r"\s+$", "")])
        text = "Track (Remix) (2020) "
        assert first == second
        assert apply_rules(text, first) == apply_rules(text, second) == "Track"

    def test_no_hidden_normalization(self) -> None:
        text = "  MiXeD Case and\tTabs  "
        assert apply_rules(text, [Rule.new("nomatch", "")]) == text

    def test_logs_rewrites_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="metafilter.domain.filters"):
            apply_rules("a ", [TRIM_TRAILING, Rule.new("zzz", "")])
        messages = [r.getMessage() for r in caplog.records]
        assert len(messages) == 1
        assert "'a '" in messages[0]


class TestApplyRulesUntilStable:
    def test_reapplies_until_settled(self) -> None:
        # Removing the inner brackets exposes the outer ones.
        rules = [Rule.new(r"\([^()]*\)", "")]
        assert apply_rules("Track ((Live))", rules) == "Track ()"
        assert apply_rules_until_stable("Track ((Live))", rules) == "Track "

    def test_single_pass_result_when_already_stable(self) -> None:
        rules = RuleSet.from_rules([FEAT, TRIM_TRAILING])
        text = "Song Title (feat. Someone)"
        assert apply_rules_until_stable(text, rules) == apply_rules(text, rules)

    def test_empty_rule_set(self) -> None:
        assert apply_rules_until_stable("abc", RuleSet()) == "abc"

    def test_stops_after_max_passes(self, caplog: pytest.LogCaptureFixture) -> None:
        growing = [Rule.new(r"$", "x")]
        with caplog.at_level(logging.WARNING, logger="metafilter.domain.filters"):
            result = apply_rules_until_stable("a", growing, max_passes=3)
        assert result == "axxx"
        assert any("did not settle" in r.getMessage() for r in caplog.records)

    def test_generator_rules_are_reused_across_passes(self) -> None:
        rules = (r for r in [Rule.new(r"\([^()]*\)", "")])
        assert apply_rules_until_stable("((x))", rules) == ""

    @pytest.mark.parametrize("max_passes", [0, -1])
    def test_invalid_max_passes(self, max_passes: int) -> None:
        with pytest.raises(ValueError):
            apply_rules_until_stable("a", [], max_passes=max_passes)
