"""
Tests for the clock string codec.
"""

import pytest

from coasters.errors import FormatError
from coasters.utils.clock import MINUTES_PER_DAY, format_clock, parse_clock


class TestParseClock:
    """Test clock string parsing."""

    @pytest.mark.parametrize("value,expected", [
        ("0", 0),
        ("9", 540),
        ("09", 540),
        ("9:00", 540),
        ("9:05", 545),
        ("9:5", 545),
        ("17:30", 1050),
        ("23:59", 1439),
    ])
    def test_valid_shapes(self, value, expected):
        assert parse_clock(value) == expected

    @pytest.mark.parametrize("value", [
        "",
        "9:",
        ":30",
        "930",
        "9:00:00",
        "9h",
        " 9",
        "-1",
        "9:61",
        "24",
        "24:00",
    ])
    def test_rejected_shapes(self, value):
        with pytest.raises(FormatError):
            parse_clock(value)

    def test_non_string_rejected(self):
        with pytest.raises(FormatError):
            parse_clock(None)

    def test_format_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_clock("noon")


class TestFormatClock:
    """Test minute-of-day rendering."""

    def test_hour_unpadded_minutes_padded(self):
        assert format_clock(540) == "9:00"
        assert format_clock(545) == "9:05"
        assert format_clock(0) == "0:00"
        assert format_clock(1439) == "23:59"

    def test_out_of_range(self):
        with pytest.raises(FormatError):
            format_clock(MINUTES_PER_DAY)

    def test_round_trip_whole_day(self):
        for minute in range(MINUTES_PER_DAY):
            assert parse_clock(format_clock(minute)) == minute
