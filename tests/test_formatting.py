"""Tests for number and timestamp formatting"""
import math
import pytest

from metrics.formatting import decimal_or_nan, decimal_or_whole, iso_timestamp, is_not_blank


class TestDecimalFormatting:
    """Test numeric rendering for bulk documents"""

    @pytest.mark.parametrize("value,expected", [
        (42.0, "42"),
        (42, "42"),
        (0.1, "0.1"),
        (-2.5, "-2.5"),
        (1.23456789, "1.234568"),
        (1e20, "100000000000000000000"),
        (0.0000001, "0"),
        (-0.0, "0"),
    ])
    def test_finite_values(self, value, expected):
        """Test finite values render without trailing zeros or exponents"""
        assert decimal_or_nan(value) == expected

    def test_non_finite_values_are_quoted(self):
        """Test non-finite values render as quoted sentinels"""
        assert decimal_or_nan(math.nan) == '"NaN"'
        assert decimal_or_nan(math.inf) == '"Infinity"'
        assert decimal_or_nan(-math.inf) == '"-Infinity"'

    def test_decimal_or_whole(self):
        """Test plain string rendering used for phi and le"""
        assert decimal_or_whole(0.95) == "0.95"
        assert decimal_or_whole(1.0) == "1"
        assert decimal_or_whole(0.999) == "0.999"
        assert decimal_or_whole(math.nan) == "NaN"
        assert decimal_or_whole(math.inf) == "Infinity"


class TestTimestamp:
    """Test ISO-8601 timestamp rendering"""

    def test_whole_seconds(self):
        """Test timestamps without a millisecond fraction"""
        assert iso_timestamp(1_000_000) == "1970-01-01T00:16:40Z"
        assert iso_timestamp(0) == "1970-01-01T00:00:00Z"

    def test_milliseconds(self):
        """Test timestamps with a millisecond fraction"""
        assert iso_timestamp(1_000_123) == "1970-01-01T00:16:40.123Z"
        assert iso_timestamp(1_709_251_200_005) == "2024-03-01T00:00:00.005Z"


class TestBlankCheck:
    """Test credential blank check"""

    @pytest.mark.parametrize("value", [None, "", " ", "\t\n  "])
    def test_blank(self, value):
        assert is_not_blank(value) is False

    @pytest.mark.parametrize("value", ["elastic", " x "])
    def test_not_blank(self, value):
        assert is_not_blank(value) is True
