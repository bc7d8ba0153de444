"""Domain-specific errors for the session planner.

Constraint violations are never raised; they are returned as outcomes by
`weekplan.calendar.constraints`. These errors cover host-side misuse only.
"""


class PlannerError(Exception):
    """Base exception for all planner errors."""

    pass


class SessionNotFoundError(PlannerError):
    """Raised when a session id is not in the working set or the store."""

    def __init__(self, session_id: int, message: str | None = None):
        self.session_id = session_id
        self.message = message or f"Session {session_id} not found"
        super().__init__(self.message)


class NoDraftError(PlannerError):
    """Raised when committing or editing a draft while none is open."""

    pass


class CategoryNotFoundError(PlannerError):
    """Raised when assigning a category id the planner does not know."""

    pass
