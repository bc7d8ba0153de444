"""Tests for immutable calendar models."""

from dataclasses import FrozenInstanceError, replace
from datetime import datetime

import pytest

from weekplan.calendar.models import Category, Session


def test_negative_duration_clamped_to_zero():
    session = Session(starts_at=datetime(2025, 1, 8, 10, 0), duration_minutes=-30)
    assert session.duration_minutes == 0


def test_ends_at():
    session = Session(starts_at=datetime(2025, 1, 8, 10, 0), duration_minutes=90)
    assert session.ends_at == datetime(2025, 1, 8, 11, 30)


def test_default_color_and_label_without_category():
    session = Session(starts_at=datetime(2025, 1, 8, 10, 0))
    assert session.color == "#808080"
    assert session.category_label == "Uncategorized"
    assert session.is_persisted is False


def test_category_drives_color_and_id():
    category = Category(id=3, display_name="Cardio", color_hex="#ff0000")
    session = Session(starts_at=datetime(2025, 1, 8, 10, 0), category=category)
    assert session.category_id == 3
    assert session.color == "#ff0000"
    assert session.category_label == "Cardio"


def test_clearing_category_keeps_category_object():
    category = Category(id=3, display_name="Cardio", color_hex="#ff0000")
    session = Session(starts_at=datetime(2025, 1, 8, 10, 0), category=category)
    cleared = replace(session, category=None, category_id=None)
    assert cleared.category is None
    assert cleared.category_id is None
    assert session.category is category


def test_description():
    session = Session(
        starts_at=datetime(2025, 1, 8, 18, 0),
        activity_label="Swim",
        location="Pool",
    )
    assert session.description == "08/01/2025 18:00 - Swim @ Pool"


def test_sessions_are_frozen():
    session = Session(starts_at=datetime(2025, 1, 8, 10, 0))
    with pytest.raises(FrozenInstanceError):
        session.duration_minutes = 10  # type: ignore[misc]
