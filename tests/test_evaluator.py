"""Tests for the constraint evaluator."""

from __future__ import annotations

import pytest

from rules.evaluator import evaluate
from rules.models import (
    ConstraintKind,
    MaxConstraint,
    MinConstraint,
    RangeConstraint,
    RegexConstraint,
    ValidationVerdict,
)


# ---------------------------------------------------------------------------
# Stub formatter / templates, as a UI would inject them
# ---------------------------------------------------------------------------

def _stub_formatter(msg, values=None):
    message = msg["defaultMessage"]
    if values:
        for key, val in values.items():
            message = message.replace("{" + key + "}", str(val))
    return message


STUB_MESSAGES = {
    "rangeMin": {"defaultMessage": "Value must be at least {min}"},
    "rangeMax": {"defaultMessage": "Value must be at most {max}"},
    "rangeInvalid": {"defaultMessage": "Value must be a number between {min} and {max}"},
    "regexInvalid": {"defaultMessage": "Value must match the required pattern: {pattern}"},
}


def _check(value, constraint):
    return evaluate(value, constraint, _stub_formatter, STUB_MESSAGES)


# ---------------------------------------------------------------------------
# MIN
# ---------------------------------------------------------------------------

class TestMin:
    constraint = {"type": "MIN", "value": {"min": 10}}

    def test_above_min_is_valid(self):
        assert _check("15", self.constraint).valid is True

    def test_equal_to_min_is_valid(self):
        assert _check("10", self.constraint).valid is True

    def test_below_min_reports_message(self):
        result = _check("5", self.constraint)
        assert result.valid is False
        assert result.message == "Value must be at least 10"

    def test_non_numeric_is_invalid_without_message(self):
        result = _check("abc", self.constraint)
        assert result.valid is False
        assert result.message is None

    def test_empty_is_invalid(self):
        assert _check("", self.constraint).valid is False

    def test_negative_bounds(self):
        constraint = {"type": "MIN", "value": {"min": -5}}
        assert _check("-3", constraint).valid is True
        assert _check("-10", constraint).valid is False

    def test_decimal_bounds(self):
        constraint = {"type": "MIN", "value": {"min": 5.5}}
        assert _check("5.6", constraint).valid is True
        assert _check("5.4", constraint).valid is False

    def test_accepts_descriptor_dataclass(self):
        result = _check("5", MinConstraint(min=10))
        assert result == ValidationVerdict(valid=False, message="Value must be at least 10")


# ---------------------------------------------------------------------------
# MAX
# ---------------------------------------------------------------------------

class TestMax:
    constraint = {"type": ConstraintKind.MAX, "value": {"max": 100}}

    def test_below_max_is_valid(self):
        assert _check("50", self.constraint).valid is True

    def test_equal_to_max_is_valid(self):
        assert _check("100", self.constraint) == ValidationVerdict(valid=True)

    def test_above_max_reports_message(self):
        result = _check("150", self.constraint)
        assert result.valid is False
        assert result.message == "Value must be at most 100"

    def test_zero_boundary(self):
        constraint = MaxConstraint(max=0)
        assert _check("-1", constraint).valid is True
        assert _check("0", constraint).valid is True
        assert _check("1", constraint).valid is False

    def test_non_numeric_is_invalid_without_message(self):
        result = _check("1h", self.constraint)
        assert result.valid is False
        assert result.message is None

    def test_string_bound_from_admin_form(self):
        constraint = {"type": "MAX", "value": {"max": "3600"}}
        assert _check("3600", constraint).valid is True
        result = _check("99999999", constraint)
        assert result.valid is False
        assert result.message == "Value must be at most 3600"


# ---------------------------------------------------------------------------
# RANGE
# ---------------------------------------------------------------------------

class TestRange:
    constraint = {"type": "RANGE", "value": {"min": 10, "max": 20}}

    @pytest.mark.parametrize("value", ["15", "10", "20", "10.0", "19.999"])
    def test_inside_range_is_valid(self, value):
        assert _check(value, self.constraint).valid is True

    @pytest.mark.parametrize("value", ["5", "25", "9.99", "20.01"])
    def test_outside_range_reports_both_bounds(self, value):
        result = _check(value, self.constraint)
        assert result.valid is False
        assert result.message == "Value must be a number between 10 and 20"

    def test_non_numeric_uses_range_message(self):
        result = _check("abc", self.constraint)
        assert result.valid is False
        assert result.message == "Value must be a number between 10 and 20"

    def test_range_dataclass(self):
        assert _check("7", RangeConstraint(min=5, max=10)).valid is True


# ---------------------------------------------------------------------------
# REGEX
# ---------------------------------------------------------------------------

class TestRegex:
    constraint = {"type": "REGEX", "value": {"pattern": "^[0-9]+$"}}

    def test_matching_value_is_valid(self):
        assert _check("123", self.constraint).valid is True

    def test_non_matching_value_reports_pattern(self):
        result = _check("abc", self.constraint)
        assert result.valid is False
        assert result.message == "Value must match the required pattern: ^[0-9]+$"

    @pytest.mark.parametrize("pattern", [
        "[",
        "(?P<a>x)(?P<a>y)",
        "a{4294967296}",
        "(" * 2000 + "a" + ")" * 2000,
    ])
    def test_malformed_pattern_is_valid(self, pattern):
        result = _check("any", {"type": "REGEX", "value": {"pattern": pattern}})
        assert result == ValidationVerdict(valid=True)

    def test_unanchored_pattern_must_match_whole_value(self):
        constraint = RegexConstraint(pattern="[0-9]+")
        assert _check("123", constraint).valid is True
        assert _check("abc123", constraint).valid is False
        assert _check("123abc", constraint).valid is False

    def test_empty_value_against_optional_pattern(self):
        assert _check("", RegexConstraint(pattern="[a-z]*")).valid is True


# ---------------------------------------------------------------------------
# No constraint
# ---------------------------------------------------------------------------

class TestNoConstraint:
    @pytest.mark.parametrize("constraint", [
        None,
        {},
        {"type": "UNKNOWN"},
        {"type": "UNKNOWN", "value": {"min": 1}},
        {"type": "MIN"},
        {"type": "MIN", "value": {"min": "ten"}},
        {"type": "RANGE", "value": {"min": 1}},
        {"type": "REGEX", "value": {"pattern": 42}},
    ])
    def test_always_valid(self, constraint):
        for value in ("val", "", "-1", "999"):
            result = _check(value, constraint)
            assert result.valid is True
            assert result.message is None


# ---------------------------------------------------------------------------
# Purity
# ---------------------------------------------------------------------------

class TestPurity:
    def test_repeat_calls_give_identical_verdicts(self):
        constraint = {"type": "RANGE", "value": {"min": 1, "max": 3}}
        assert _check("7", constraint) == _check("7", constraint)
        assert _check("2", constraint) == _check("2", constraint)

    def test_templates_are_not_mutated(self):
        before = {k: dict(v) for k, v in STUB_MESSAGES.items()}
        _check("0", {"type": "MIN", "value": {"min": 1}})
        assert STUB_MESSAGES == before

    def test_formatter_called_once_per_failure(self):
        calls = []

        def counting(msg, values=None):
            calls.append(values)
            return _stub_formatter(msg, values)

        evaluate("0", {"type": "MIN", "value": {"min": 1}}, counting, STUB_MESSAGES)
        evaluate("5", {"type": "MIN", "value": {"min": 1}}, counting, STUB_MESSAGES)
        assert calls == [{"min": 1}]


# ---------------------------------------------------------------------------
# Default English templates
# ---------------------------------------------------------------------------

class TestDefaults:
    def test_default_formatter_and_templates(self):
        result = evaluate("25", {"type": "RANGE", "value": {"min": 10, "max": 20}})
        assert result.message == "Value must be a number between 10 and 20"

    def test_decimal_bound_rendering(self):
        result = evaluate("1", MinConstraint(min=5.5))
        assert result.message == "Value must be at least 5.5"

    def test_to_dict_omits_missing_message(self):
        assert evaluate("100", {"type": "MAX", "value": {"max": 100}}).to_dict() == {"valid": True}
