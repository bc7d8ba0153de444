"""Store protocol the planner persists through.

The layout core never touches a store; only the host planner does.
"""

from typing import Protocol

from weekplan.calendar.models import Category, Session


class SessionStore(Protocol):
    def load_sessions(self) -> list[Session]: ...

    def load_categories(self) -> list[Category]: ...

    def add_session(self, session: Session) -> Session:
        """Persist a new session and return it with its assigned id."""
        ...

    def update_session(self, session: Session) -> Session: ...

    def delete_session(self, session_id: int) -> None: ...

    def add_category(self, display_name: str, color_hex: str) -> Category: ...
