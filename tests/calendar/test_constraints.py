"""Tests for opening-hour and midnight constraints on sessions."""

from datetime import date, datetime, timedelta

import pytest

from weekplan.calendar.constraints import (
    ShiftPolicy,
    ValidationOutcome,
    apply_duration_edit,
    apply_start_edit,
    clamp_duration_to_midnight,
    minutes_until_midnight,
    shift_start,
    validate_start_against_opening,
)

OPENING_HOUR = 6


class TestMinutesUntilMidnight:
    def test_evening_start(self):
        assert minutes_until_midnight(datetime(2025, 1, 8, 23, 30)) == 30

    def test_midnight_start_has_full_day(self):
        assert minutes_until_midnight(datetime(2025, 1, 8, 0, 0)) == 24 * 60

    def test_seconds_are_truncated(self):
        """Partial minutes never count as available time."""
        assert minutes_until_midnight(datetime(2025, 1, 8, 23, 30, 30)) == 29


class TestClampDurationToMidnight:
    def test_late_session_is_clamped(self):
        """23:30 + 90 min keeps only the 30 minutes left before midnight."""
        result = clamp_duration_to_midnight(datetime(2025, 1, 8, 23, 30), 90)
        assert result.clamped_duration == 30
        assert result.was_clamped is True

    def test_duration_within_day_unchanged(self):
        result = clamp_duration_to_midnight(datetime(2025, 1, 8, 18, 0), 60)
        assert result == (60, False)

    def test_ending_exactly_at_midnight_is_not_clamped(self):
        result = clamp_duration_to_midnight(datetime(2025, 1, 8, 23, 0), 60)
        assert result == (60, False)

    def test_negative_duration_floored_to_zero(self):
        result = clamp_duration_to_midnight(datetime(2025, 1, 8, 10, 0), -15)
        assert result == (0, False)

    @pytest.mark.parametrize(
        ("start", "duration"),
        [
            (datetime(2025, 1, 8, 23, 30), 90),
            (datetime(2025, 1, 8, 6, 0), 2000),
            (datetime(2025, 1, 8, 12, 15), 45),
            (datetime(2025, 1, 8, 23, 59), 5),
        ],
    )
    def test_idempotent(self, start, duration):
        first = clamp_duration_to_midnight(start, duration)
        second = clamp_duration_to_midnight(start, first.clamped_duration)
        assert second.clamped_duration == first.clamped_duration
        assert second.was_clamped is False


class TestValidateStartAgainstOpening:
    def test_accepted_inside_window(self):
        outcome = validate_start_against_opening(datetime(2025, 1, 8, 9, 0), OPENING_HOUR, duration_minutes=60)
        assert outcome == ValidationOutcome.ACCEPTED

    def test_exactly_at_opening_is_accepted(self):
        outcome = validate_start_against_opening(datetime(2025, 1, 8, 6, 0), OPENING_HOUR)
        assert outcome == ValidationOutcome.ACCEPTED

    def test_day_change_checked_before_opening(self):
        """00:30 the next day is before opening too; the day change wins."""
        outcome = validate_start_against_opening(
            datetime(2025, 1, 9, 0, 30),
            OPENING_HOUR,
            duration_minutes=60,
            intended_day=date(2025, 1, 8),
        )
        assert outcome == ValidationOutcome.REJECTED_CROSSES_MIDNIGHT

    def test_same_day_before_opening_rejected(self):
        outcome = validate_start_against_opening(datetime(2025, 1, 8, 5, 30), OPENING_HOUR)
        assert outcome == ValidationOutcome.REJECTED_BEFORE_OPENING

    def test_end_past_midnight_rejected(self):
        outcome = validate_start_against_opening(datetime(2025, 1, 8, 23, 30), OPENING_HOUR, duration_minutes=60)
        assert outcome == ValidationOutcome.REJECTED_CROSSES_MIDNIGHT

    def test_start_on_other_day_crosses_midnight(self):
        outcome = validate_start_against_opening(datetime(2025, 1, 9, 0, 30), 0, intended_day=date(2025, 1, 8))
        assert outcome == ValidationOutcome.REJECTED_CROSSES_MIDNIGHT

    def test_end_exactly_at_midnight_accepted(self):
        outcome = validate_start_against_opening(datetime(2025, 1, 8, 23, 0), OPENING_HOUR, duration_minutes=60)
        assert outcome == ValidationOutcome.ACCEPTED


class TestShiftStart:
    def test_shift_later_accepted(self, build_session):
        session = build_session("2025-01-08T18:00", 60)
        result = shift_start(session, timedelta(hours=1), OPENING_HOUR)
        assert result.accepted
        assert result.session.starts_at == datetime(2025, 1, 8, 19, 0)
        assert result.session.duration_minutes == 60

    def test_shift_past_midnight_rejected(self, build_session):
        """A move that would cross midnight is refused, not truncated."""
        session = build_session("2025-01-08T22:30", 60)
        result = shift_start(session, timedelta(hours=1), OPENING_HOUR)
        assert result.outcome == ValidationOutcome.REJECTED_CROSSES_MIDNIGHT
        assert result.session is session
        assert result.was_clamped is False

    def test_shift_before_opening_rejected(self, build_session):
        session = build_session("2025-01-08T06:30", 60)
        result = shift_start(session, timedelta(hours=-1), OPENING_HOUR)
        assert result.outcome == ValidationOutcome.REJECTED_BEFORE_OPENING
        assert result.session is session

    def test_shift_onto_next_day_rejected(self, build_session):
        """Leaving the start day reports the midnight crossing, not the opening hour."""
        session = build_session("2025-01-08T23:30", 30)
        result = shift_start(session, timedelta(hours=1), OPENING_HOUR)
        assert result.outcome == ValidationOutcome.REJECTED_CROSSES_MIDNIGHT
        assert result.session is session

    def test_shift_onto_next_day_rejected_with_midnight_opening(self, build_session):
        session = build_session("2025-01-08T23:30", 30)
        result = shift_start(session, timedelta(hours=1), 0)
        assert result.outcome == ValidationOutcome.REJECTED_CROSSES_MIDNIGHT
        assert result.session.starts_at == datetime(2025, 1, 8, 23, 30)

    def test_shift_onto_previous_day_rejected_with_midnight_opening(self, build_session):
        session = build_session("2025-01-08T00:30", 30)
        result = shift_start(session, timedelta(hours=-1), 0)
        assert result.outcome == ValidationOutcome.REJECTED_CROSSES_MIDNIGHT
        assert result.session.starts_at == datetime(2025, 1, 8, 0, 30)

    def test_clamp_and_move_never_changes_day(self, build_session):
        session = build_session("2025-01-08T23:30", 30)
        result = shift_start(session, timedelta(hours=1), 0, ShiftPolicy.CLAMP_AND_MOVE)
        assert result.outcome == ValidationOutcome.REJECTED_CROSSES_MIDNIGHT
        assert result.session is session
        assert result.was_clamped is False

    def test_clamp_and_move_policy_truncates(self, build_session):
        session = build_session("2025-01-08T22:30", 60)
        result = shift_start(session, timedelta(hours=1), OPENING_HOUR, ShiftPolicy.CLAMP_AND_MOVE)
        assert result.accepted
        assert result.was_clamped is True
        assert result.session.starts_at == datetime(2025, 1, 8, 23, 30)
        assert result.session.duration_minutes == 30

    def test_clamp_and_move_still_respects_opening(self, build_session):
        session = build_session("2025-01-08T06:30", 60)
        result = shift_start(session, timedelta(hours=-1), OPENING_HOUR, ShiftPolicy.CLAMP_AND_MOVE)
        assert result.outcome == ValidationOutcome.REJECTED_BEFORE_OPENING


class TestExplicitEdits:
    def test_duration_edit_clamps_and_flags(self, build_session):
        session = build_session("2025-01-08T23:00", 30)
        edit = apply_duration_edit(session, 120)
        assert edit.was_clamped is True
        assert edit.session.duration_minutes == 60
        assert session.duration_minutes == 30

    def test_duration_edit_within_bound(self, build_session):
        edit = apply_duration_edit(build_session("2025-01-08T10:00", 30), 90)
        assert edit.was_clamped is False
        assert edit.session.duration_minutes == 90

    def test_start_edit_clamps_duration(self, build_session):
        """Unlike a shift, a direct start edit is kept and the duration truncated."""
        session = build_session("2025-01-08T18:00", 120)
        edit = apply_start_edit(session, datetime(2025, 1, 8, 23, 15), OPENING_HOUR)
        assert edit.accepted
        assert edit.was_clamped is True
        assert edit.session.starts_at == datetime(2025, 1, 8, 23, 15)
        assert edit.session.duration_minutes == 45

    def test_start_edit_before_opening_refused(self, build_session):
        session = build_session("2025-01-08T18:00", 60)
        edit = apply_start_edit(session, datetime(2025, 1, 8, 4, 0), OPENING_HOUR)
        assert edit.outcome == ValidationOutcome.REJECTED_BEFORE_OPENING
        assert edit.session is session
