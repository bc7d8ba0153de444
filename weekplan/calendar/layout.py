"""Weekly layout engine.

Turns the sessions of a displayed week into positioned blocks:
1. Keep sessions with week_start <= starts_at < week_start + 7 days
2. Bucket them by day (Monday = 0)
3. Per day, find each session's collision set (half-open overlap, self included)
4. Split the day column by the collision set size
5. Convert (day, time of day, column, duration) into pixels

Pure function of its inputs: recomputed from scratch on every call, never
cached, never raises for sessions outside the week.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from loguru import logger

from weekplan.calendar.models import PositionedSession, Session
from weekplan.utils.calendar import DAYS_PER_WEEK, week_start as monday_of

if TYPE_CHECKING:
    from weekplan.config.settings import Settings

DEFAULT_OPENING_HOUR = 6
DEFAULT_PIXELS_PER_HOUR = 60.0
DEFAULT_BASE_COLUMN_WIDTH = 95.0
BLOCK_MARGIN = 4.0


@dataclass(frozen=True)
class LayoutConfig:
    """Display parameters for one layout pass.

    Attributes:
        opening_hour: Hour shown at the top of the grid (y = 0)
        pixels_per_hour: Vertical pixels for one hour
        base_column_width: Day column width when the panel width is unknown
        panel_width: Total grid width; 0 means use base_column_width per day
        margin: Visual gap removed from every block's width and height
    """

    opening_hour: int = DEFAULT_OPENING_HOUR
    pixels_per_hour: float = DEFAULT_PIXELS_PER_HOUR
    base_column_width: float = DEFAULT_BASE_COLUMN_WIDTH
    panel_width: float = 0.0
    margin: float = BLOCK_MARGIN

    @classmethod
    def from_settings(cls, settings: Settings | None = None, panel_width: float | None = None) -> LayoutConfig:
        if settings is None:
            from weekplan.config.settings import settings as default_settings

            settings = default_settings
        return cls(
            opening_hour=settings.opening_hour,
            pixels_per_hour=settings.pixels_per_hour,
            base_column_width=settings.base_column_width,
            panel_width=settings.panel_width if panel_width is None else panel_width,
        )


def day_index(starts_at: datetime) -> int:
    """Day of week with Monday = 0 ... Sunday = 6."""
    return (starts_at.isoweekday() + 6) % 7


def day_column_width(config: LayoutConfig) -> float:
    """Width of one day column."""
    if config.panel_width and config.panel_width > 0:
        return config.panel_width / DAYS_PER_WEEK
    return config.base_column_width


def select_week_sessions(sessions: Iterable[Session], week_start: date | datetime) -> list[Session]:
    """Sessions starting inside the week, in stable ascending start order."""
    start = datetime.combine(monday_of(week_start), datetime.min.time())
    end = start + timedelta(days=DAYS_PER_WEEK)
    return sorted((s for s in sessions if start <= s.starts_at < end), key=lambda s: s.starts_at)


def sessions_overlap(a: Session, b: Session) -> bool:
    """Half-open interval intersection: touching boundaries do not overlap."""
    return a.starts_at < b.ends_at and a.ends_at > b.starts_at


def collision_set(session: Session, day_sessions: list[Session]) -> list[Session]:
    """Sessions of the same day overlapping `session`, in day order.

    The session itself is kept in its own set on purpose: the set size is
    the number of columns the day is split into, so excluding self here
    would widen every overlapping block. A zero-length session does not
    intersect itself, hence the identity test. Sets are computed per
    session, so in a chain A-B-C the counts of A, B and C can differ.
    """
    return [other for other in day_sessions if other is session or sessions_overlap(session, other)]


def _identity_index(session: Session, sessions: list[Session]) -> int:
    # Equal-valued drafts are distinct blocks, so match by identity
    for idx, other in enumerate(sessions):
        if other is session:
            return idx
    return 0


def position_session(
    session: Session,
    config: LayoutConfig,
    column_index: int = 0,
    column_count: int = 1,
) -> PositionedSession:
    """Convert one session and its column slot into pixel geometry."""
    day = day_index(session.starts_at)
    one_day_width = day_column_width(config)
    column_width = one_day_width / column_count

    decimal_hour = session.starts_at.hour + session.starts_at.minute / 60.0
    y = max(0.0, (decimal_hour - config.opening_hour) * config.pixels_per_hour)
    height = (session.duration_minutes / 60.0) * config.pixels_per_hour - config.margin

    return PositionedSession(
        session=session,
        x=day * one_day_width + column_index * column_width,
        y=y,
        width=column_width - config.margin,
        height=height,
        day_index=day,
        column_index=column_index,
        column_count=column_count,
    )


def compute_week_layout(
    sessions: Iterable[Session],
    week_start: date | datetime,
    config: LayoutConfig | None = None,
) -> list[PositionedSession]:
    """Compute the positioned blocks of every session in the displayed week.

    Args:
        sessions: Full working set (any week)
        week_start: Any day of the displayed week; normalised to its Monday
        config: Display parameters (defaults when omitted)

    Returns:
        Positioned sessions ordered by day, then start time
    """
    config = config or LayoutConfig()
    in_week = select_week_sessions(sessions, week_start)

    by_day: dict[int, list[Session]] = {}
    for session in in_week:
        by_day.setdefault(day_index(session.starts_at), []).append(session)

    result: list[PositionedSession] = []
    for day in sorted(by_day):
        day_sessions = by_day[day]
        for session in day_sessions:
            collisions = collision_set(session, day_sessions)
            result.append(
                position_session(
                    session,
                    config,
                    column_index=_identity_index(session, collisions),
                    column_count=len(collisions),
                )
            )

    logger.debug(
        f"Week layout for {monday_of(week_start)}: {len(result)} sessions across {len(by_day)} days",
    )
    return result
