import pytest

from protimer.formatting import format_time, split_duration, to_whole_number


class TestFormatTime:
    @pytest.mark.parametrize("seconds,expected", [
        (0, "00:00:00"),
        (59, "00:00:59"),
        (60, "00:01:00"),
        (3661, "01:01:01"),
        (86399, "23:59:59"),
    ])
    def test_formats_hh_mm_ss(self, seconds, expected):
        assert format_time(seconds) == expected

    def test_hours_widen_past_99(self):
        assert format_time(100 * 3600) == "100:00:00"

    def test_negative_shows_zero(self):
        assert format_time(-5) == "00:00:00"


def test_split_duration():
    assert split_duration(3725) == (1, 2, 5)
    assert split_duration(0) == (0, 0, 0)


class TestToWholeNumber:
    @pytest.mark.parametrize("value,expected", [
        (5, 5),
        ("7", 7),
        (" 12 ", 12),
        ("12abc", 12),
        ("1.5", 1),
        (2.9, 2),
        ("", 0),
        ("abc", 0),
        (None, 0),
        (-3, 0),
        ("-4", 0),
        (float("nan"), 0),
        (True, 0),
    ])
    def test_coerces_edit_input(self, value, expected):
        assert to_whole_number(value) == expected
