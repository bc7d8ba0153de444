"""SQLAlchemy-backed session store.

Maps `training_sessions` / `categories` rows to immutable domain snapshots.
Records never leave this module.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from contextlib import AbstractContextManager, contextmanager

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session as DbSession
from sqlalchemy.orm import sessionmaker

from weekplan.calendar.models import Category, Session
from weekplan.db.models import CategoryRecord, SessionRecord
from weekplan.db.session import get_session
from weekplan.sessions.errors import SessionNotFoundError


def _category_from_record(record: CategoryRecord) -> Category:
    return Category(id=record.id, display_name=record.display_name, color_hex=record.color_hex)


def _session_from_record(record: SessionRecord) -> Session:
    return Session(
        id=record.id,
        activity_label=record.activity_label,
        starts_at=record.starts_at,
        location=record.location,
        duration_minutes=record.duration_minutes,
        category_id=record.category_id,
        category=_category_from_record(record.category) if record.category is not None else None,
    )


def _apply_to_record(record: SessionRecord, session: Session) -> None:
    record.activity_label = session.activity_label
    record.starts_at = session.starts_at
    record.location = session.location
    record.duration_minutes = session.duration_minutes
    record.category_id = session.category_id


class SqlSessionStore:
    """Session store over a relational database.

    Args:
        session_factory: Optional sessionmaker; defaults to the application
            engine configured from settings.
    """

    def __init__(self, session_factory: sessionmaker[DbSession] | None = None):
        self._scope: Callable[[], AbstractContextManager[DbSession]]
        if session_factory is None:
            self._scope = get_session
        else:
            self._scope = self._scoped(session_factory)

    @staticmethod
    def _scoped(factory: sessionmaker[DbSession]) -> Callable[[], AbstractContextManager[DbSession]]:
        @contextmanager
        def scope() -> Generator[DbSession, None, None]:
            db = factory()
            try:
                yield db
                db.commit()
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()

        return scope

    def load_sessions(self) -> list[Session]:
        with self._scope() as db:
            records = db.execute(select(SessionRecord).order_by(SessionRecord.starts_at)).unique().scalars().all()
            sessions = [_session_from_record(r) for r in records]
        logger.debug(f"Loaded {len(sessions)} sessions from store")
        return sessions

    def load_categories(self) -> list[Category]:
        with self._scope() as db:
            records = db.execute(select(CategoryRecord).order_by(CategoryRecord.id)).scalars().all()
            return [_category_from_record(r) for r in records]

    def add_session(self, session: Session) -> Session:
        with self._scope() as db:
            record = SessionRecord()
            _apply_to_record(record, session)
            db.add(record)
            db.flush()
            db.expire(record)
            persisted = _session_from_record(record)
        logger.info(f"Stored session {persisted.id}: {persisted.description}")
        return persisted

    def update_session(self, session: Session) -> Session:
        with self._scope() as db:
            record = db.get(SessionRecord, session.id)
            if record is None:
                raise SessionNotFoundError(session.id)
            _apply_to_record(record, session)
            db.flush()
            db.expire(record)
            updated = _session_from_record(record)
        logger.debug(f"Updated session {updated.id}")
        return updated

    def delete_session(self, session_id: int) -> None:
        with self._scope() as db:
            record = db.get(SessionRecord, session_id)
            if record is None:
                raise SessionNotFoundError(session_id)
            db.delete(record)
        logger.info(f"Deleted session {session_id}")

    def add_category(self, display_name: str, color_hex: str) -> Category:
        with self._scope() as db:
            record = CategoryRecord(display_name=display_name, color_hex=color_hex)
            db.add(record)
            db.flush()
            category = _category_from_record(record)
        logger.info(f"Stored category {category.id}: {category.display_name}")
        return category
