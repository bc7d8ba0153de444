"""Temporal constraints for calendar sessions.

Keeps a session's (starts_at, duration_minutes) pair inside the legal daily
window [opening_hour:00, 24:00) of its start day:
- A session never starts before the opening hour
- A session never runs past midnight of its start day

Two edit policies coexist and must not be merged:
- Explicit edits (duration, start picked by the user) clamp the duration
  to midnight and report the clamp so the caller can warn.
- Time shifts (move one hour later / earlier) that would cross a boundary
  are refused entirely under the canonical REJECT policy.

Nothing here raises for a constraint violation; outcomes are returned and
the caller decides how to surface them.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from enum import StrEnum
from typing import NamedTuple

from loguru import logger

from weekplan.calendar.models import Session


class ClampResult(NamedTuple):
    """Result of bounding a duration by the next midnight."""

    clamped_duration: int
    was_clamped: bool


class ValidationOutcome(StrEnum):
    """Verdict on a candidate start.

    Attributes:
        ACCEPTED: Start and end stay inside the daily window
        REJECTED_BEFORE_OPENING: Start is earlier than the opening hour
        REJECTED_CROSSES_MIDNIGHT: Start leaves its day, or the end runs past midnight
    """

    ACCEPTED = "accepted"
    REJECTED_BEFORE_OPENING = "rejected_before_opening"
    REJECTED_CROSSES_MIDNIGHT = "rejected_crosses_midnight"


class ShiftPolicy(StrEnum):
    """How a time shift that would cross midnight is handled.

    REJECT is canonical. CLAMP_AND_MOVE reproduces an older behaviour where
    the session is moved and its duration truncated at midnight.
    """

    REJECT = "reject"
    CLAMP_AND_MOVE = "clamp_and_move"


@dataclass(frozen=True)
class ShiftResult:
    """Outcome of a time-shift operation.

    Attributes:
        session: Resulting snapshot (the original one when rejected)
        outcome: Validation outcome of the candidate start
        was_clamped: True when CLAMP_AND_MOVE truncated the duration
    """

    session: Session
    outcome: ValidationOutcome
    was_clamped: bool = False

    @property
    def accepted(self) -> bool:
        return self.outcome == ValidationOutcome.ACCEPTED


@dataclass(frozen=True)
class DurationEdit:
    """Outcome of an explicit duration edit.

    Attributes:
        session: Edited snapshot with the bounded duration
        was_clamped: True when the requested duration ran past midnight
    """

    session: Session
    was_clamped: bool


@dataclass(frozen=True)
class StartEdit:
    """Outcome of an explicit start edit.

    Attributes:
        session: Edited snapshot (the original one when refused)
        outcome: Validation outcome of the requested start
        was_clamped: True when the duration was truncated at the new midnight
    """

    session: Session
    outcome: ValidationOutcome
    was_clamped: bool = False

    @property
    def accepted(self) -> bool:
        return self.outcome == ValidationOutcome.ACCEPTED


def minutes_until_midnight(starts_at: datetime) -> int:
    """Whole minutes between starts_at and the following midnight, floored at 0."""
    midnight = datetime.combine(starts_at.date() + timedelta(days=1), time.min)
    return max(0, int((midnight - starts_at).total_seconds() // 60))


def clamp_duration_to_midnight(starts_at: datetime, duration_minutes: int) -> ClampResult:
    """Bound a duration so the session ends at or before the next midnight.

    Negative durations are floored to 0 first; that adjustment alone is not
    reported as a midnight clamp.

    Args:
        starts_at: Session start
        duration_minutes: Requested duration

    Returns:
        ClampResult with the bounded duration and whether the bound applied
    """
    duration = max(0, duration_minutes)
    max_minutes = minutes_until_midnight(starts_at)
    if duration > max_minutes:
        return ClampResult(max_minutes, True)
    return ClampResult(duration, False)


def _opening_time(opening_hour: int) -> time:
    return time(hour=max(0, min(23, opening_hour)))


def validate_start_against_opening(
    new_start: datetime,
    opening_hour: int,
    *,
    duration_minutes: int = 0,
    intended_day: date | None = None,
) -> ValidationOutcome:
    """Check a candidate start against the opening hour and midnight bounds.

    Args:
        new_start: Candidate start
        opening_hour: Earliest hour of day a session may start
        duration_minutes: Current duration of the session being moved
        intended_day: Day the session must stay on, if any; a start on any
            other day crosses midnight

    Returns:
        ACCEPTED, REJECTED_BEFORE_OPENING or REJECTED_CROSSES_MIDNIGHT
    """
    if intended_day is not None and new_start.date() != intended_day:
        logger.debug(f"Candidate start {new_start} leaves day {intended_day}")
        return ValidationOutcome.REJECTED_CROSSES_MIDNIGHT

    if new_start.time() < _opening_time(opening_hour):
        return ValidationOutcome.REJECTED_BEFORE_OPENING

    if max(0, duration_minutes) > minutes_until_midnight(new_start):
        return ValidationOutcome.REJECTED_CROSSES_MIDNIGHT

    return ValidationOutcome.ACCEPTED


def shift_start(
    session: Session,
    delta: timedelta,
    opening_hour: int,
    policy: ShiftPolicy = ShiftPolicy.REJECT,
) -> ShiftResult:
    """Move a session by a fixed delta.

    Under REJECT, a shift landing before opening or crossing midnight is
    refused and the original snapshot is returned with the outcome.
    Under CLAMP_AND_MOVE, a start that stays on its day but whose end runs
    past midnight is moved and its duration truncated. A start landing on
    another day is refused under both policies.
    """
    new_start = session.starts_at + delta
    same_day = new_start.date() == session.starts_at.date()
    outcome = validate_start_against_opening(
        new_start,
        opening_hour,
        duration_minutes=session.duration_minutes,
        intended_day=session.starts_at.date(),
    )

    if outcome == ValidationOutcome.ACCEPTED:
        return ShiftResult(replace(session, starts_at=new_start), outcome)

    if (
        outcome == ValidationOutcome.REJECTED_CROSSES_MIDNIGHT
        and same_day
        and policy == ShiftPolicy.CLAMP_AND_MOVE
    ):
        clamp = clamp_duration_to_midnight(new_start, session.duration_minutes)
        moved = replace(session, starts_at=new_start, duration_minutes=clamp.clamped_duration)
        logger.warning(
            f"Shift of session {session.id} crosses midnight, duration truncated "
            f"{session.duration_minutes} -> {clamp.clamped_duration} min"
        )
        return ShiftResult(moved, ValidationOutcome.ACCEPTED, was_clamped=clamp.was_clamped)

    logger.info(f"Shift of session {session.id} by {delta} refused: {outcome}")
    return ShiftResult(session, outcome)


def apply_duration_edit(session: Session, duration_minutes: int) -> DurationEdit:
    """Apply an explicit duration edit, clamping at midnight."""
    clamp = clamp_duration_to_midnight(session.starts_at, duration_minutes)
    if clamp.was_clamped:
        logger.warning(
            f"Duration {duration_minutes} min for session {session.id} runs past midnight, "
            f"clamped to {clamp.clamped_duration} min"
        )
    return DurationEdit(replace(session, duration_minutes=clamp.clamped_duration), clamp.was_clamped)


def apply_start_edit(session: Session, new_start: datetime, opening_hour: int) -> StartEdit:
    """Apply an explicit start edit.

    Refused before the opening hour. Otherwise accepted, with the duration
    clamped to the new midnight bound.
    """
    if new_start.time() < _opening_time(opening_hour):
        logger.info(f"Start {new_start} for session {session.id} is before opening hour {opening_hour}")
        return StartEdit(session, ValidationOutcome.REJECTED_BEFORE_OPENING)

    clamp = clamp_duration_to_midnight(new_start, session.duration_minutes)
    if clamp.was_clamped:
        logger.warning(
            f"New start {new_start} for session {session.id} pushes it past midnight, "
            f"duration clamped to {clamp.clamped_duration} min"
        )
    edited = replace(session, starts_at=new_start, duration_minutes=clamp.clamped_duration)
    return StartEdit(edited, ValidationOutcome.ACCEPTED, was_clamped=clamp.was_clamped)
