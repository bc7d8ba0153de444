"""Core immutable data models for the weekly calendar.

This module defines the canonical data structures that represent:
- Categories (display colour + label reference data)
- Sessions (one scheduled, time-boxed activity)
- Positioned sessions (derived on-screen geometry for one layout pass)

All models are frozen (immutable). Edits replace a snapshot with a new one
via `dataclasses.replace`, they never mutate a stored session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

DEFAULT_COLOR = "#808080"
DEFAULT_CATEGORY_LABEL = "Uncategorized"


# -----------------------------
# Reference data
# -----------------------------
@dataclass(frozen=True)
class Category:
    """Reusable label + colour classification attached to sessions.

    Attributes:
        id: Category identifier (0 = not yet persisted)
        display_name: Label shown next to the session
        color_hex: Display colour in #RRGGBB format
    """

    id: int
    display_name: str
    color_hex: str


# -----------------------------
# Sessions
# -----------------------------
@dataclass(frozen=True)
class Session:
    """One scheduled training session.

    Attributes:
        starts_at: Naive local start date-time
        activity_label: Free-text name of the activity
        location: Free-text location
        duration_minutes: Duration in minutes, never negative
        id: Store identifier (0 = not yet persisted)
        category_id: Optional category reference
        category: Optional resolved category
    """

    starts_at: datetime
    activity_label: str = ""
    location: str = ""
    duration_minutes: int = 0
    id: int = 0
    category_id: int | None = None
    category: Category | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        # Malformed durations degrade to an empty block instead of failing
        if self.duration_minutes < 0:
            object.__setattr__(self, "duration_minutes", 0)
        if self.category is not None and self.category_id is None:
            object.__setattr__(self, "category_id", self.category.id)

    @property
    def ends_at(self) -> datetime:
        return self.starts_at + timedelta(minutes=self.duration_minutes)

    @property
    def is_persisted(self) -> bool:
        return self.id != 0

    @property
    def color(self) -> str:
        return self.category.color_hex if self.category is not None else DEFAULT_COLOR

    @property
    def category_label(self) -> str:
        return self.category.display_name if self.category is not None else DEFAULT_CATEGORY_LABEL

    @property
    def description(self) -> str:
        return f"{self.starts_at:%d/%m/%Y %H:%M} - {self.activity_label} @ {self.location}"


@dataclass(frozen=True)
class PositionedSession:
    """A session with its pixel geometry inside the weekly grid.

    Recomputed wholesale on every layout pass and never persisted.

    Attributes:
        session: Wrapped session snapshot
        x: Left offset in pixels from the grid origin (Monday, opening hour)
        y: Top offset in pixels
        width: Block width in pixels (margin already removed)
        height: Block height in pixels (margin already removed)
        day_index: Day of week, Monday = 0
        column_index: Horizontal slot inside the session's collision set
        column_count: Size of the session's collision set
    """

    session: Session
    x: float
    y: float
    width: float
    height: float
    day_index: int
    column_index: int = 0
    column_count: int = 1

    @property
    def activity_label(self) -> str:
        return self.session.activity_label

    @property
    def starts_at(self) -> datetime:
        return self.session.starts_at

    @property
    def duration_minutes(self) -> int:
        return self.session.duration_minutes

    @property
    def location(self) -> str:
        return self.session.location

    @property
    def color(self) -> str:
        return self.session.color

    @property
    def category_label(self) -> str:
        return self.session.category_label
