"""Test data builders shared across test modules."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sanctuary.models.projects import Project
from sanctuary.models.session import Owner

BASE_TIME = datetime(2026, 3, 1, 9, 30, tzinfo=UTC)
OWNER = Owner(id="user-1", email="ada@example.com")
OTHER_OWNER = Owner(id="user-2", email="grace@example.com")


def make_project(**overrides: Any) -> Project:
    """A valid active project; keyword arguments override fields."""
    fields: dict[str, Any] = {
        "title": "Portfolio Site",
        "type": "Web App",
        "description": "Personal site",
        "user_role": "developer",
        "created_at": BASE_TIME,
        "last_activity": BASE_TIME,
    }
    fields.update(overrides)
    return Project(**fields)
