"""
Tests for rule construction.
"""

import dataclasses
import re

import pytest

from dataknobs_rules import (
    MISSING,
    PatternRule,
    ReplaceRule,
    RuleConfigurationError,
    RulesError,
    StringRule,
)


class TestStringRule:
    """Test StringRule options and validation of those options."""

    def test_defaults(self):
        rule = StringRule()
        assert rule.type_name == "string"
        assert rule.required is False
        assert rule.default is MISSING
        assert rule.has_default is False
        assert rule.min_length is None
        assert rule.max_length is None
        assert rule.length is None
        assert rule.pattern_rule is None
        assert rule.replace_rule is None
        assert rule.included is None
        assert rule.trim is False

    def test_rule_is_immutable(self):
        rule = StringRule(min_length=3)
        with pytest.raises(dataclasses.FrozenInstanceError):
            rule.min_length = 4

    def test_included_is_copied_to_tuple(self):
        names = ["carlos", "benit"]
        rule = StringRule(included=names)
        names.append("ruben")
        assert rule.included == ("carlos", "benit")

    @pytest.mark.parametrize("option", ["min_length", "max_length", "length"])
    def test_negative_lengths_rejected(self, option):
        with pytest.raises(RuleConfigurationError) as exc_info:
            StringRule(**{option: -1})
        assert exc_info.value.option == option
        assert exc_info.value.context == {"option": option, "value": -1}

    @pytest.mark.parametrize("bound", ["3", 3.0, True])
    def test_non_integer_lengths_rejected(self, bound):
        with pytest.raises(RuleConfigurationError, match="must be an integer"):
            StringRule(min_length=bound)

    def test_min_greater_than_max_rejected(self):
        with pytest.raises(RuleConfigurationError, match="cannot be greater than"):
            StringRule(min_length=5, max_length=2)

    def test_included_string_rejected(self):
        with pytest.raises(RuleConfigurationError):
            StringRule(included="carlos")

    @pytest.mark.parametrize("included", [[1, 2], ["a", None], ("a", b"b")])
    def test_included_non_string_items_rejected(self, included):
        with pytest.raises(RuleConfigurationError, match="allowed values must be strings") as exc_info:
            StringRule(included=included)
        assert exc_info.value.option == "included"

    def test_pattern_rule_from_string_or_regex(self):
        assert StringRule(pattern_rule=r"^\d+$").pattern_rule == PatternRule(re.compile(r"^\d+$"))
        assert StringRule(pattern_rule=re.compile("a")).pattern_rule.error_message is None

    def test_configuration_errors_share_base(self):
        with pytest.raises(RulesError):
            StringRule(length=-3)

    def test_default_none_is_a_default(self):
        assert StringRule(default=None).has_default is True


class TestPatternRule:
    """Test PatternRule."""

    def test_string_compiled_once(self):
        rule = PatternRule(r"^[a-z]+$")
        assert isinstance(rule.pattern, re.Pattern)
        assert rule.matches("abc") is True
        assert rule.matches("ab1") is False

    def test_invalid_regex(self):
        with pytest.raises(RuleConfigurationError, match="Invalid rule option 'pattern'"):
            PatternRule("[unclosed")

    def test_invalid_type(self):
        with pytest.raises(RuleConfigurationError):
            PatternRule(42)


class TestReplaceRule:
    """Test ReplaceRule."""

    def test_global_default(self):
        assert ReplaceRule("a", "b").global_ is True

    def test_regex_with_group_reference(self):
        rule = ReplaceRule(re.compile(r"(\d+)-(\d+)"), r"\2-\1")
        assert rule.is_regex is True
        assert rule.apply("10-20") == "20-10"

    def test_literal_keeps_backslashes(self):
        rule = ReplaceRule("/", "\\")
        assert rule.is_regex is False
        assert rule.apply("a/b/c") == "a\\b\\c"

    def test_first_occurrence_left_to_right(self):
        assert ReplaceRule(re.compile("o"), "0", global_=False).apply("foo boo") == "f0o boo"
        assert ReplaceRule("o", "0", global_=False).apply("foo boo") == "f0o boo"

    def test_no_occurrence(self):
        assert ReplaceRule("z", "y").apply("abc") == "abc"

    @pytest.mark.parametrize(
        "pattern,replacement",
        [(1, "x"), ("", "x"), ("a", None)],
    )
    def test_invalid_options(self, pattern, replacement):
        with pytest.raises(RuleConfigurationError):
            ReplaceRule(pattern, replacement)
