"""Canonical week-window helpers for the weekly planner.

Week boundaries are Monday-Sunday (ISO week). All values are naive local dates.
"""

from datetime import date, datetime, timedelta

DAYS_PER_WEEK = 7


def _as_date(d: date | datetime) -> date:
    if isinstance(d, datetime):
        return d.date()
    return d


def week_start(d: date | datetime) -> date:
    """Return Monday of the calendar week containing d."""
    day = _as_date(d)
    return day - timedelta(days=day.weekday())


def week_end(d: date | datetime) -> date:
    """Return Sunday of the calendar week containing d."""
    return week_start(d) + timedelta(days=DAYS_PER_WEEK - 1)


def week_days(d: date | datetime) -> list[date]:
    """Return the seven dates (Monday first) of the week containing d."""
    start = week_start(d)
    return [start + timedelta(days=offset) for offset in range(DAYS_PER_WEEK)]


def shift_week(d: date | datetime, weeks: int) -> date:
    """Return the Monday `weeks` weeks away from the week containing d."""
    return week_start(d) + timedelta(days=DAYS_PER_WEEK * weeks)


def today_index(start: date | datetime, today: date | datetime) -> int | None:
    """Return the 0-based day index of `today` inside the week, or None.

    Used to highlight the current day column when the displayed week
    contains today.
    """
    offset = (_as_date(today) - week_start(start)).days
    if 0 <= offset < DAYS_PER_WEEK:
        return offset
    return None


def week_label(d: date | datetime) -> str:
    """Human readable label for the week containing d."""
    start = week_start(d)
    end = week_end(d)
    return f"Week of {start:%d/%m/%Y} to {end:%d/%m/%Y}"
