from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all database models."""


class CategoryRecord(Base):
    """Activity categories (label + display colour).

    Reference data shared by many sessions. Removing a category from a
    session never deletes the category row.
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    display_name: Mapped[str] = mapped_column(String, nullable=False)
    color_hex: Mapped[str] = mapped_column(String, nullable=False, default="#808080")

    sessions: Mapped[list[SessionRecord]] = relationship(back_populates="category", passive_deletes=True)


class SessionRecord(Base):
    """Training sessions shown on the weekly calendar.

    Stores:
    - starts_at: naive local start date-time
    - duration_minutes: never runs past midnight of the start day
    - category_id: optional category reference (SET NULL on category delete)
    """

    __tablename__ = "training_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    activity_label: Mapped[str] = mapped_column(String, nullable=False, default="")
    starts_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    location: Mapped[str] = mapped_column(String, nullable=False, default="")
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    category: Mapped[CategoryRecord | None] = relationship(back_populates="sessions", lazy="joined")

    __table_args__ = (Index("idx_training_sessions_starts_at_category", "starts_at", "category_id"),)
