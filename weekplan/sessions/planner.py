"""Week planner: the in-memory working set of sessions and its commands.

The planner owns persisted sessions once loaded, holds at most one draft
session being prepared for creation, and keeps the displayed week. Every
edit follows the same path:
- validate the candidate snapshot (weekplan.calendar.constraints)
- persist it and replace the stored snapshot
- let the caller recompute the layout via `week_layout()`
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Protocol

from loguru import logger

from weekplan.calendar.constraints import (
    DurationEdit,
    ShiftPolicy,
    ShiftResult,
    StartEdit,
    ValidationOutcome,
    apply_duration_edit,
    apply_start_edit,
    clamp_duration_to_midnight,
    shift_start,
    validate_start_against_opening,
)
from weekplan.calendar.layout import LayoutConfig, compute_week_layout
from weekplan.calendar.models import Category, PositionedSession, Session
from weekplan.sessions.errors import CategoryNotFoundError, NoDraftError, SessionNotFoundError
from weekplan.sessions.store import SessionStore
from weekplan.utils.calendar import shift_week, today_index, week_days, week_label, week_start

DRAFT_LABEL = "New training"
DRAFT_LOCATION = "Gym"
DRAFT_DURATION_MINUTES = 60
DRAFT_START_TIME = time(18, 0)
SHIFT_STEP = timedelta(hours=1)


class PlannerNotifier(Protocol):
    """User-facing side of the planner (dialogs, toasts, prompts)."""

    def session_added(self, session: Session) -> None: ...

    def confirm_deletion(self, session: Session) -> bool: ...

    def midnight_overrun(self, session: Session) -> None: ...

    def before_opening(self, session: Session) -> None: ...


class LoggingNotifier:
    """Notifier that only logs; deletions are confirmed when assume_yes is set."""

    def __init__(self, assume_yes: bool = True):
        self.assume_yes = assume_yes

    def session_added(self, session: Session) -> None:
        logger.info(f"Session added: {session.description}")

    def confirm_deletion(self, session: Session) -> bool:
        logger.info(f"Deletion of session {session.id} {'confirmed' if self.assume_yes else 'declined'}")
        return self.assume_yes

    def midnight_overrun(self, session: Session) -> None:
        logger.warning(f"Session {session.id} cannot run past midnight ({session.description})")

    def before_opening(self, session: Session) -> None:
        logger.warning(f"Session {session.id} cannot start before opening hour ({session.description})")


class WeekPlanner:
    """Working set of sessions plus the displayed week.

    Args:
        store: Persistence collaborator
        notifier: User-facing warnings and confirmations
        config: Layout parameters (opening hour, pixel ratios, panel width)
        shift_policy: Policy for one-hour moves crossing midnight
        clock: Returns today's date; injectable for tests
    """

    def __init__(
        self,
        store: SessionStore,
        notifier: PlannerNotifier | None = None,
        *,
        config: LayoutConfig | None = None,
        shift_policy: ShiftPolicy = ShiftPolicy.REJECT,
        clock: Callable[[], date] = date.today,
    ):
        self._store = store
        self._notifier: PlannerNotifier = notifier or LoggingNotifier()
        self._config = config or LayoutConfig()
        self._shift_policy = shift_policy
        self._clock = clock

        self._sessions: list[Session] = list(store.load_sessions())
        self._categories: dict[int, Category] = {c.id: c for c in store.load_categories()}
        self._week_start = week_start(clock())
        self.draft: Session | None = None
        self.selected_id: int | None = None

        logger.info(
            f"Planner loaded {len(self._sessions)} sessions and {len(self._categories)} categories, "
            f"week of {self._week_start}"
        )

    # --- Working set ---

    @property
    def sessions(self) -> tuple[Session, ...]:
        return tuple(self._sessions)

    @property
    def categories(self) -> list[Category]:
        return list(self._categories.values())

    @property
    def config(self) -> LayoutConfig:
        return self._config

    def ordered_sessions(self) -> list[Session]:
        return sorted(self._sessions, key=lambda s: s.starts_at)

    def get(self, session_id: int) -> Session:
        for session in self._sessions:
            if session.id == session_id:
                return session
        raise SessionNotFoundError(session_id)

    def _replace(self, updated: Session) -> Session:
        stored = self._store.update_session(updated)
        self._sessions = [stored if s.id == stored.id else s for s in self._sessions]
        return stored

    # --- Displayed week ---

    @property
    def week_start(self) -> date:
        return self._week_start

    @property
    def week_label(self) -> str:
        return week_label(self._week_start)

    @property
    def week_days(self) -> list[date]:
        return week_days(self._week_start)

    @property
    def today_index(self) -> int | None:
        return today_index(self._week_start, self._clock())

    def previous_week(self) -> date:
        self._week_start = shift_week(self._week_start, -1)
        return self._week_start

    def next_week(self) -> date:
        self._week_start = shift_week(self._week_start, 1)
        return self._week_start

    def go_to_today(self) -> date:
        self._week_start = week_start(self._clock())
        return self._week_start

    def show_week(self, day: date | datetime) -> date:
        self._week_start = week_start(day)
        return self._week_start

    def set_panel_width(self, width: float) -> None:
        if width != self._config.panel_width:
            self._config = replace(self._config, panel_width=max(0.0, width))

    def week_layout(self) -> list[PositionedSession]:
        """Positioned blocks of the displayed week, recomputed from scratch."""
        return compute_week_layout(self._sessions, self._week_start, self._config)

    def select(self, target: PositionedSession | int | None) -> Session | None:
        if target is None:
            self.selected_id = None
            return None
        session_id = target.session.id if isinstance(target, PositionedSession) else target
        session = self.get(session_id)
        self.selected_id = session.id
        return session

    # --- Draft creation ---

    def new_draft(self) -> Session:
        """Prepare a transient session without adding it to the working set.

        Placed at 18:00 (or the opening hour, when later) today when today is
        in the displayed week, otherwise on the displayed Monday.
        """
        today = self._clock()
        day = today if self.today_index is not None else self._week_start
        start_time = max(DRAFT_START_TIME, time(self._config.opening_hour))
        self.draft = Session(
            activity_label=DRAFT_LABEL,
            starts_at=datetime.combine(day, start_time),
            location=DRAFT_LOCATION,
            duration_minutes=DRAFT_DURATION_MINUTES,
        )
        return self.draft

    def update_draft(
        self,
        *,
        activity_label: str | None = None,
        location: str | None = None,
        starts_at: datetime | None = None,
        duration_minutes: int | None = None,
    ) -> Session:
        if self.draft is None:
            raise NoDraftError("No draft session to edit")
        draft = self.draft
        if activity_label is not None:
            draft = replace(draft, activity_label=activity_label)
        if location is not None:
            draft = replace(draft, location=location)
        if starts_at is not None:
            edit = apply_start_edit(draft, starts_at, self._config.opening_hour)
            self._report_start_edit(edit)
            draft = edit.session
        if duration_minutes is not None:
            duration_edit = apply_duration_edit(draft, duration_minutes)
            if duration_edit.was_clamped:
                self._notifier.midnight_overrun(duration_edit.session)
            draft = duration_edit.session
        self.draft = draft
        return draft

    def cancel_draft(self) -> None:
        self.draft = None

    def commit_draft(self) -> Session | None:
        """Persist the draft and add it to the working set.

        A draft starting before the opening hour is kept and not persisted.

        Returns:
            The stored session, or None when the draft was refused
        """
        if self.draft is None:
            raise NoDraftError("No draft session to commit")

        outcome = validate_start_against_opening(self.draft.starts_at, self._config.opening_hour)
        if outcome != ValidationOutcome.ACCEPTED:
            logger.info(f"Draft starting {self.draft.starts_at} refused: before opening hour")
            self._notifier.before_opening(self.draft)
            return None

        clamp = clamp_duration_to_midnight(self.draft.starts_at, self.draft.duration_minutes)
        draft = replace(self.draft, duration_minutes=clamp.clamped_duration)
        if clamp.was_clamped:
            self._notifier.midnight_overrun(draft)

        stored = self._store.add_session(draft)
        self._sessions.append(stored)
        self.draft = None
        self._notifier.session_added(stored)
        return stored

    # --- Edits on persisted sessions ---

    def edit_duration(self, session_id: int, duration_minutes: int) -> DurationEdit:
        edit = apply_duration_edit(self.get(session_id), duration_minutes)
        if edit.was_clamped:
            self._notifier.midnight_overrun(edit.session)
        return DurationEdit(self._replace(edit.session), edit.was_clamped)

    def edit_start(self, session_id: int, new_start: datetime) -> StartEdit:
        edit = apply_start_edit(self.get(session_id), new_start, self._config.opening_hour)
        self._report_start_edit(edit)
        if not edit.accepted:
            return edit
        return StartEdit(self._replace(edit.session), edit.outcome, edit.was_clamped)

    def edit_details(
        self,
        session_id: int,
        *,
        activity_label: str | None = None,
        location: str | None = None,
    ) -> Session:
        session = self.get(session_id)
        if activity_label is not None:
            session = replace(session, activity_label=activity_label)
        if location is not None:
            session = replace(session, location=location)
        return self._replace(session)

    def add_category(self, display_name: str, color_hex: str) -> Category:
        category = self._store.add_category(display_name, color_hex)
        self._categories[category.id] = category
        return category

    def assign_category(self, session_id: int, category_id: int | None) -> Session:
        """Attach a category to a session, or detach it with None.

        Detaching never removes the category itself.
        """
        session = self.get(session_id)
        if category_id is None:
            return self._replace(replace(session, category_id=None, category=None))
        category = self._categories.get(category_id)
        if category is None:
            raise CategoryNotFoundError(f"Category {category_id} not found")
        return self._replace(replace(session, category_id=category.id, category=category))

    def move_later(self, session_id: int) -> ShiftResult:
        return self._move(session_id, SHIFT_STEP)

    def move_earlier(self, session_id: int) -> ShiftResult:
        return self._move(session_id, -SHIFT_STEP)

    def _move(self, session_id: int, delta: timedelta) -> ShiftResult:
        result = shift_start(self.get(session_id), delta, self._config.opening_hour, self._shift_policy)
        if result.outcome == ValidationOutcome.REJECTED_CROSSES_MIDNIGHT:
            self._notifier.midnight_overrun(result.session)
            return result
        if result.outcome == ValidationOutcome.REJECTED_BEFORE_OPENING:
            self._notifier.before_opening(result.session)
            return result
        if result.was_clamped:
            self._notifier.midnight_overrun(result.session)
        return ShiftResult(self._replace(result.session), result.outcome, result.was_clamped)

    def delete_session(self, session_id: int) -> bool:
        """Delete a session after user confirmation.

        Returns:
            True when the session was removed
        """
        session = self.get(session_id)
        if not self._notifier.confirm_deletion(session):
            return False
        if session.is_persisted:
            self._store.delete_session(session.id)
        self._sessions = [s for s in self._sessions if s.id != session_id]
        if self.selected_id == session_id:
            self.selected_id = None
        return True

    def _report_start_edit(self, edit: StartEdit) -> None:
        if edit.outcome == ValidationOutcome.REJECTED_BEFORE_OPENING:
            self._notifier.before_opening(edit.session)
        elif edit.was_clamped:
            self._notifier.midnight_overrun(edit.session)
