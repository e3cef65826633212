"""Tests for time-of-day and calendar helpers."""

from datetime import date, datetime

import pytest

from maintenance_scheduler.timeutils import (
    FormatError,
    add_minutes_to_time,
    format_time_label,
    intervals_overlap,
    is_weekday,
    iso_week_id,
    minutes_to_time,
    month_range,
    time_options,
    time_to_minutes,
    to_date,
    week_range,
)


def test_time_to_minutes():
    assert time_to_minutes("00:00") == 0
    assert time_to_minutes("07:30") == 450
    assert time_to_minutes("18:00:00") == 1080
    assert time_to_minutes("9:05") == 545


@pytest.mark.parametrize("bad", ["", "9", "25:00", "10:60", "ab:cd", "10-30", None])
def test_time_to_minutes_rejects_malformed(bad):
    with pytest.raises(FormatError):
        time_to_minutes(bad)


def test_format_error_is_value_error():
    with pytest.raises(ValueError):
        time_to_minutes("noon")


def test_minutes_to_time():
    assert minutes_to_time(0) == "00:00"
    assert minutes_to_time(545) == "09:05"
    assert minutes_to_time(1080) == "18:00"
    assert minutes_to_time(time_to_minutes("13:45")) == "13:45"


def test_add_minutes_to_time():
    assert add_minutes_to_time("09:30", 90) == "11:00"


def test_back_to_back_intervals_do_not_overlap():
    """Test that touching intervals are free."""
    assert not intervals_overlap(540, 600, 600, 660)
    assert not intervals_overlap(600, 660, 540, 600)


def test_disjoint_intervals_do_not_overlap():
    assert not intervals_overlap(420, 480, 600, 660)


def test_partial_and_contained_intervals_overlap():
    # A starts inside B
    assert intervals_overlap(570, 630, 540, 600)
    # A ends inside B
    assert intervals_overlap(510, 570, 540, 600)
    # A contains B
    assert intervals_overlap(500, 700, 540, 600)
    # B contains A
    assert intervals_overlap(550, 560, 540, 600)
    # identical
    assert intervals_overlap(540, 600, 540, 600)


def test_week_range_starts_monday():
    """Test Monday..Sunday week boundaries."""
    # 2025-09-04 is a Thursday
    assert week_range(date(2025, 9, 4)) == (date(2025, 9, 1), date(2025, 9, 7))
    # Sunday belongs to the week that started the Monday before
    assert week_range(date(2025, 9, 7)) == (date(2025, 9, 1), date(2025, 9, 7))
    assert week_range(date(2025, 9, 8)) == (date(2025, 9, 8), date(2025, 9, 14))


def test_month_range():
    """Test month bounds including leap February."""
    assert month_range(date(2025, 9, 17)) == (date(2025, 9, 1), date(2025, 9, 30))
    assert month_range(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_range(date(2025, 12, 31)) == (date(2025, 12, 1), date(2025, 12, 31))


def test_is_weekday():
    assert is_weekday(date(2025, 9, 5))  # Friday
    assert not is_weekday(date(2025, 9, 6))  # Saturday
    assert not is_weekday(date(2025, 9, 7))  # Sunday


def test_to_date_accepts_common_inputs():
    assert to_date("2025-09-01") == date(2025, 9, 1)
    assert to_date(datetime(2025, 9, 1, 14, 30)) == date(2025, 9, 1)
    assert to_date(date(2025, 9, 1)) == date(2025, 9, 1)


def test_iso_week_id():
    assert iso_week_id(date(2025, 9, 1)) == "2025-W36"


def test_format_time_label():
    assert format_time_label("07:00") == "7:00 AM"
    assert format_time_label("12:00") == "12:00 PM"
    assert format_time_label("13:30") == "1:30 PM"
    assert format_time_label("00:15") == "12:15 AM"


def test_time_options():
    options = time_options()
    assert options[0] == "07:00"
    assert options[-1] == "17:30"
    assert len(options) == 22
