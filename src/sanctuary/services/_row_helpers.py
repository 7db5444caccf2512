"""Shared row-to-model conversion helpers for service modules."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Any

from sanctuary.models.mood import ActivityStreak, MoodEntry
from sanctuary.models.projects import ArchiveRecord, Project, utc_now


def row_str(row: dict[str, object], key: str, default: str = "") -> str:
    """Extract a string value from a database row dict."""
    v = row.get(key, default)
    return str(v) if v else default


def row_int(row: dict[str, object], key: str) -> int:
    """Extract an integer value from a database row dict."""
    v = row.get(key, 0)
    if isinstance(v, bool):
        return int(v)
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        return int(v)
    if isinstance(v, str):
        try:
            return int(v)
        except ValueError:
            return 0
    return 0


def row_datetime(row: dict[str, object], key: str) -> datetime | None:
    """Parse an ISO-8601 column into an aware UTC datetime."""
    value = row_str(row, key).strip()
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_iso(value: datetime) -> str:
    return value.astimezone(UTC).isoformat()


def project_to_row(project: Project, user_id: str, updated_at: datetime | None = None) -> dict[str, Any]:
    archive = project.archive
    return {
        "id": project.id,
        "user_id": user_id,
        "title": project.title,
        "type": project.type,
        "status": project.status.value,
        "description": project.description,
        "notes": project.notes,
        "user_role": project.user_role,
        "archive_type": archive.kind.value if archive else None,
        "archive_note": archive.farewell_note if archive else None,
        "lessons_learned": archive.lessons_learned if archive else None,
        "archive_reason": archive.reason if archive else None,
        "archived_at": to_iso(archive.archived_at) if archive else None,
        "created_at": to_iso(project.created_at),
        "last_activity": to_iso(project.last_activity),
        "updated_at": to_iso(updated_at or utc_now()),
    }


def row_to_project(row: object) -> Project:
    r: dict[str, object] = dict(row)  # type: ignore[call-overload]
    created_at = row_datetime(r, "created_at") or utc_now()
    last_activity = row_datetime(r, "last_activity") or created_at

    archive: ArchiveRecord | None = None
    if r.get("archive_type"):
        archive = ArchiveRecord(
            kind=row_str(r, "archive_type"),
            farewell_note=row_str(r, "archive_note"),
            lessons_learned=row_str(r, "lessons_learned"),
            reason=row_str(r, "archive_reason"),
            archived_at=(
                row_datetime(r, "archived_at") or row_datetime(r, "updated_at") or last_activity
            ),
        )

    return Project(
        id=row_str(r, "id"),
        title=row_str(r, "title"),
        type=row_str(r, "type"),
        status=row_str(r, "status", "active"),
        description=row_str(r, "description"),
        notes=row_str(r, "notes"),
        user_role=row_str(r, "user_role"),
        created_at=created_at,
        last_activity=max(last_activity, created_at),
        owner_id=row_str(r, "user_id") or None,
        archive=archive,
    )


def mood_to_row(entry: MoodEntry, user_id: str) -> dict[str, Any]:
    return {
        "id": entry.id,
        "user_id": user_id,
        "mood": entry.mood.value,
        "energy": entry.energy,
        "notes": entry.notes,
        "created_at": to_iso(entry.logged_at),
    }


def row_to_mood(row: object) -> MoodEntry:
    r: dict[str, object] = dict(row)  # type: ignore[call-overload]
    return MoodEntry(
        id=row_str(r, "id"),
        mood=row_str(r, "mood", "neutral"),
        energy=min(max(row_int(r, "energy"), 1), 5),
        notes=row_str(r, "notes"),
        logged_at=row_datetime(r, "created_at") or utc_now(),
    )


def row_to_streak(row: object | None) -> ActivityStreak:
    if row is None:
        return ActivityStreak()
    r: dict[str, object] = dict(row)  # type: ignore[call-overload]
    last_active = row_str(r, "last_active_on")
    return ActivityStreak(
        current_streak=row_int(r, "current_streak"),
        longest_streak=row_int(r, "longest_streak"),
        last_active_on=date.fromisoformat(last_active) if last_active else None,
    )
