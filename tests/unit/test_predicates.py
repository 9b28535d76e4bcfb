"""
Unit tests for built-in portable predicates.

Includes property-based testing with hypothesis for predicates.
"""

import re

import pytest
from hypothesis import given
from hypothesis import strategies as st

from formguard.core.predicates.builtin import (
    between,
    email,
    integer,
    length,
    matches,
    numeric,
    one_of,
    present,
)

PASSWORD_PATTERN = r"^(?=.*\d).{4,8}$"


class TestPresent:
    """Tests for present"""

    def test_non_empty_string_passes(self):
        assert present("John") is True

    def test_empty_string_fails(self):
        assert present("") is False

    def test_whitespace_fails(self):
        assert present("   ") is False

    def test_none_fails(self):
        assert present(None) is False

    def test_numbers_are_present(self):
        assert present(0) is True
        assert present(3.5) is True

    @given(st.text(min_size=1).filter(lambda s: s.strip() != ""))
    def test_property_any_nonblank_string_passes(self, value):
        """Property test: any non-blank string is present"""
        assert present(value) is True


class TestEmail:
    """Tests for email"""

    @pytest.mark.parametrize("value", ["x@y.com", "first.last@example.co.uk", "a+tag@b.io"])
    def test_valid_addresses(self, value):
        assert email(value) is True

    @pytest.mark.parametrize("value", ["", "bad", "no-at.example.com", "a@b", "a b@c.com", "@example.com"])
    def test_invalid_addresses(self, value):
        assert email(value) is False

    def test_non_string_does_not_raise(self):
        assert email(42) is False
        assert email(None) is False


class TestMatches:
    """Tests for the matches factory"""

    def test_password_pattern(self):
        predicate = matches(PASSWORD_PATTERN)
        assert predicate("ab12") is True
        assert predicate("") is False
        assert predicate("abcd") is False  # no digit
        assert predicate("abcdefg12") is False  # too long

    def test_full_match_semantics(self):
        """Unanchored patterns still have to match the whole value"""
        predicate = matches(r"\d+")
        assert predicate("123") is True
        assert predicate("123abc") is False

    def test_compiled_pattern(self):
        predicate = matches(re.compile(r"[a-z]+", re.IGNORECASE))
        assert predicate("HeLLo") is True

    def test_flags(self):
        predicate = matches(r"[a-z]+", re.IGNORECASE)
        assert predicate("ABC") is True

    def test_values_converted_to_text(self):
        assert matches(r"\d{3}")(123) is True

    def test_invalid_pattern_raises(self):
        with pytest.raises(ValueError) as exc_info:
            matches("[invalid(")
        assert "invalid regex" in str(exc_info.value).lower()

    def test_missing_pattern_raises(self):
        with pytest.raises(ValueError):
            matches("")
        with pytest.raises(ValueError):
            matches(None)

    def test_pattern_exposed(self):
        assert matches(PASSWORD_PATTERN).pattern == PASSWORD_PATTERN

    @given(st.from_regex(r"[a-z]{3}[0-9]{1,5}", fullmatch=True))
    def test_property_generated_passwords_pass(self, value):
        """Property test: 4-8 chars containing a digit always pass"""
        assert matches(PASSWORD_PATTERN)(value) is True


class TestNumeric:
    """Tests for numeric and integer"""

    @pytest.mark.parametrize("value", [0, 1.5, "42", " -3.25 ", "1e3"])
    def test_numeric_values(self, value):
        assert numeric(value) is True

    @pytest.mark.parametrize("value", ["", "abc", None, True, "nan", "inf"])
    def test_non_numeric_values(self, value):
        assert numeric(value) is False

    def test_integer(self):
        assert integer("10") is True
        assert integer(10) is True
        assert integer("10.0") is True
        assert integer("10.5") is False
        assert integer("") is False

    @given(st.integers())
    def test_property_integers_are_integer(self, value):
        """Property test: ints and their text form are integers"""
        assert integer(value) is True
        assert integer(str(value)) is True


class TestBetween:
    """Tests for the between factory"""

    def test_inclusive_bounds(self):
        predicate = between(min=0, max=120)
        assert predicate(0) is True
        assert predicate(120) is True
        assert predicate("25") is True
        assert predicate(-1) is False
        assert predicate(121) is False

    def test_non_numeric_fails(self):
        predicate = between(min=0)
        assert predicate("") is False
        assert predicate("abc") is False

    def test_single_bound(self):
        assert between(max=10)(-1000) is True
        assert between(min=10)(1000) is True

    def test_requires_a_bound(self):
        with pytest.raises(ValueError) as exc_info:
            between()
        assert "at least one" in str(exc_info.value).lower()

    def test_inverted_bounds(self):
        with pytest.raises(ValueError):
            between(min=10, max=1)

    def test_non_numeric_bounds(self):
        with pytest.raises(ValueError):
            between(min="low")

    @given(st.floats(min_value=0, max_value=100, allow_nan=False))
    def test_property_values_in_range_pass(self, value):
        """Property test: any value in [0, 100] passes"""
        assert between(min=0, max=100)(value) is True


class TestLength:
    """Tests for the length factory"""

    def test_bounds(self):
        predicate = length(min=2, max=4)
        assert predicate("ab") is True
        assert predicate("abcd") is True
        assert predicate("a") is False
        assert predicate("abcde") is False

    def test_empty_value_has_zero_length(self):
        assert length(max=3)("") is True
        assert length(min=1)("") is False

    def test_requires_a_bound(self):
        with pytest.raises(ValueError):
            length()

    def test_inverted_bounds(self):
        with pytest.raises(ValueError):
            length(min=5, max=1)

    @pytest.mark.parametrize("bounds", [{"min": "3"}, {"max": 2.5}, {"min": True}])
    def test_non_integer_bounds_rejected(self, bounds):
        with pytest.raises(ValueError, match="integers"):
            length(**bounds)


class TestOneOf:
    """Tests for the one_of factory"""

    def test_choices(self):
        predicate = one_of(["free", "pro"])
        assert predicate("free") is True
        assert predicate("team") is False
        assert predicate("") is False

    def test_compares_as_text(self):
        assert one_of([1, 2, 3])("2") is True

    def test_empty_choices(self):
        with pytest.raises(ValueError):
            one_of([])

    def test_string_choices_rejected(self):
        with pytest.raises(ValueError):
            one_of("abc")
