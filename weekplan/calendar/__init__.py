"""Calendar core - temporal constraints and weekly layout.

This module provides:
- Immutable session / category models
- Opening-hour and midnight constraints on a session's start and duration
- The weekly layout engine (week selection, collisions, pixel geometry)
"""

from weekplan.calendar.constraints import (
    ClampResult,
    ShiftPolicy,
    ShiftResult,
    ValidationOutcome,
    clamp_duration_to_midnight,
    minutes_until_midnight,
    shift_start,
    validate_start_against_opening,
)
from weekplan.calendar.layout import LayoutConfig, compute_week_layout
from weekplan.calendar.models import Category, PositionedSession, Session

__all__ = [
    "Category",
    "ClampResult",
    "LayoutConfig",
    "PositionedSession",
    "Session",
    "ShiftPolicy",
    "ShiftResult",
    "ValidationOutcome",
    "clamp_duration_to_midnight",
    "compute_week_layout",
    "minutes_until_midnight",
    "shift_start",
    "validate_start_against_opening",
]
