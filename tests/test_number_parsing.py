"""
Tests for the safe-parse rule

Run with: pytest tests/test_number_parsing.py -v
"""

import logging

import pytest

from parking_validator.validation.number_parsing import coerce_number, parse_number


class TestParseNumber:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("10", 10),
            ("abc", 0),
            (None, 0),
            (-5, 0),
            ("", 0),
            ("   ", 0),
            (7.4, 7),
            (2.5, 3),
            ("12.5", 13),
            ("-3", 0),
            (True, 1),
        ],
    )
    def test_table(self, value, expected):
        assert parse_number(value) == expected

    def test_custom_default_used_for_blank_and_garbage(self):
        assert parse_number(None, default=4) == 4
        assert parse_number("lots", default=4) == 4

    def test_garbage_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert parse_number("abc") == 0
        assert "Invalid number value: 'abc'" in caplog.text

    def test_blank_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING):
            parse_number(None)
            parse_number("")
        assert caplog.records == []

    @pytest.mark.parametrize("value", ["nan", "inf", float("inf"), [1], {"n": 1}])
    def test_non_finite_and_containers_are_invalid(self, value):
        assert parse_number(value) == 0


class TestCoerceNumber:
    def test_keeps_sign_for_range_checks(self):
        assert coerce_number(-5) == (-5, True)

    def test_blank_is_valid_but_empty(self):
        assert coerce_number(None) == (None, True)

    def test_garbage_is_invalid(self):
        assert coerce_number("x1") == (None, False)


class TestHugeIntegers:
    def test_int_beyond_float_range_kept_exact(self):
        assert parse_number(10**400) == 10**400
        assert coerce_number(-(10**400)) == (-(10**400), True)

    def test_digit_string_beyond_float_range(self):
        assert parse_number("1" + "0" * 400) == 10**400

    def test_float_string_beyond_float_range_is_invalid(self):
        assert coerce_number("1e400") == (None, False)
