"""Tests for canonical week-window helpers."""

from datetime import date, datetime

from weekplan.utils.calendar import shift_week, today_index, week_days, week_end, week_label, week_start


def test_week_start_returns_monday():
    assert week_start(date(2025, 1, 8)) == date(2025, 1, 6)
    assert week_start(date(2025, 1, 12)) == date(2025, 1, 6)
    assert week_start(date(2025, 1, 6)) == date(2025, 1, 6)


def test_week_start_accepts_datetime():
    assert week_start(datetime(2025, 1, 8, 23, 59)) == date(2025, 1, 6)


def test_week_end_returns_sunday():
    assert week_end(date(2025, 1, 8)) == date(2025, 1, 12)


def test_week_days():
    days = week_days(date(2025, 1, 8))
    assert len(days) == 7
    assert days[0] == date(2025, 1, 6)
    assert days[-1] == date(2025, 1, 12)


def test_shift_week_crosses_year():
    assert shift_week(date(2025, 1, 6), -1) == date(2024, 12, 30)
    assert shift_week(date(2025, 1, 8), 1) == date(2025, 1, 13)


def test_today_index():
    assert today_index(date(2025, 1, 6), date(2025, 1, 8)) == 2
    assert today_index(date(2025, 1, 6), date(2025, 1, 13)) is None
    assert today_index(date(2025, 1, 6), date(2025, 1, 5)) is None


def test_week_label():
    assert week_label(date(2025, 1, 8)) == "Week of 06/01/2025 to 12/01/2025"
