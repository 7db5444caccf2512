"""Repository layer for the hosted relational store.

Every query is scoped by ``user_id``; rows are plain dicts keyed by column.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from aiosqlite import Row

    from sanctuary.data.protocols import DatabaseProtocol

PROJECT_COLUMNS = (
    "id",
    "user_id",
    "title",
    "type",
    "status",
    "description",
    "notes",
    "user_role",
    "archive_type",
    "archive_note",
    "lessons_learned",
    "archive_reason",
    "archived_at",
    "created_at",
    "last_activity",
    "updated_at",
)

MOOD_COLUMNS = ("id", "user_id", "mood", "energy", "notes", "created_at")


def _insert_sql(table: str, columns: tuple[str, ...]) -> str:
    placeholders = ", ".join("?" for _ in columns)
    return f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"


def _upsert_sql(table: str, columns: tuple[str, ...], key: str) -> str:
    assignments = ", ".join(f"{c} = excluded.{c}" for c in columns if c != key)
    return (
        f"{_insert_sql(table, columns)} "
        f"ON CONFLICT({key}) DO UPDATE SET {assignments} "
        f"WHERE {table}.user_id = excluded.user_id"
    )


def _values(row: dict[str, Any], columns: tuple[str, ...]) -> tuple[Any, ...]:
    return tuple(row.get(c) for c in columns)


class HostedProjectRepository:
    """SQL access to the ``projects`` table."""

    def __init__(self, db: DatabaseProtocol) -> None:
        self._db = db

    async def list_rows(self, user_id: str) -> list[Row]:
        return await self._db.fetch_all(
            "SELECT * FROM projects WHERE user_id = ? ORDER BY last_activity DESC",
            (user_id,),
        )

    async def get_row(self, user_id: str, project_id: str) -> Row | None:
        return await self._db.fetch_one(
            "SELECT * FROM projects WHERE user_id = ? AND id = ?",
            (user_id, project_id),
        )

    async def insert_row(self, row: dict[str, Any]) -> None:
        await self._db.execute(
            _insert_sql("projects", PROJECT_COLUMNS), _values(row, PROJECT_COLUMNS)
        )
        await self._db.commit()

    async def update_row(self, row: dict[str, Any]) -> int:
        """Overwrite an owned row; returns the number of rows changed."""
        columns = tuple(c for c in PROJECT_COLUMNS if c not in ("id", "user_id"))
        assignments = ", ".join(f"{c} = ?" for c in columns)
        cursor = await self._db.execute(
            f"UPDATE projects SET {assignments} WHERE id = ? AND user_id = ?",
            (*_values(row, columns), row["id"], row["user_id"]),
        )
        await self._db.commit()
        return int(cursor.rowcount or 0)

    async def upsert_row(self, row: dict[str, Any]) -> int:
        """Insert or overwrite by id; 0 when the id belongs to another user."""
        cursor = await self._db.execute(
            _upsert_sql("projects", PROJECT_COLUMNS, "id"), _values(row, PROJECT_COLUMNS)
        )
        await self._db.commit()
        return int(cursor.rowcount or 0)

    async def delete_row(self, user_id: str, project_id: str) -> int:
        cursor = await self._db.execute(
            "DELETE FROM projects WHERE id = ? AND user_id = ?",
            (project_id, user_id),
        )
        await self._db.commit()
        return int(cursor.rowcount or 0)


class MoodRepository:
    """SQL access to ``mood_entries``."""

    def __init__(self, db: DatabaseProtocol) -> None:
        self._db = db

    async def list_rows(self, user_id: str, limit: int = 30) -> list[Row]:
        return await self._db.fetch_all(
            "SELECT * FROM mood_entries WHERE user_id = ? ORDER BY created_at DESC LIMIT ?",
            (user_id, limit),
        )

    async def upsert_row(self, row: dict[str, Any]) -> int:
        cursor = await self._db.execute(
            _upsert_sql("mood_entries", MOOD_COLUMNS, "id"), _values(row, MOOD_COLUMNS)
        )
        await self._db.commit()
        return int(cursor.rowcount or 0)


class StreakRepository:
    """SQL access to ``activity_streaks`` (one row per user)."""

    def __init__(self, db: DatabaseProtocol) -> None:
        self._db = db

    async def get_row(self, user_id: str) -> Row | None:
        return await self._db.fetch_one(
            "SELECT * FROM activity_streaks WHERE user_id = ?", (user_id,)
        )

    async def upsert_row(self, row: dict[str, Any]) -> None:
        """Insert or overwrite; the longest streak never decreases."""
        await self._db.execute(
            """INSERT INTO activity_streaks
                   (user_id, current_streak, longest_streak, last_active_on, updated_at)
               VALUES (?, ?, ?, ?, ?)
               ON CONFLICT(user_id) DO UPDATE SET
                   current_streak = excluded.current_streak,
                   longest_streak = MAX(activity_streaks.longest_streak, excluded.longest_streak),
                   last_active_on = excluded.last_active_on,
                   updated_at = excluded.updated_at""",
            (
                row["user_id"],
                row.get("current_streak", 0),
                row.get("longest_streak", 0),
                row.get("last_active_on"),
                row["updated_at"],
            ),
        )
        await self._db.commit()


class UserRepository:
    """SQL access to the ``users`` profile table."""

    def __init__(self, db: DatabaseProtocol) -> None:
        self._db = db

    async def get_row(self, user_id: str) -> Row | None:
        return await self._db.fetch_one("SELECT * FROM users WHERE id = ?", (user_id,))

    async def get_row_by_email(self, email: str) -> Row | None:
        return await self._db.fetch_one(
            "SELECT * FROM users WHERE email = ?", (email.strip().lower(),)
        )

    async def upsert_row(self, row: dict[str, Any]) -> None:
        await self._db.execute(
            """INSERT INTO users (id, email, role, display_name, created_at)
               VALUES (?, ?, ?, ?, ?)
               ON CONFLICT(id) DO UPDATE SET
                   email = excluded.email,
                   role = COALESCE(excluded.role, users.role),
                   display_name = COALESCE(excluded.display_name, users.display_name)""",
            (
                row["id"],
                str(row.get("email", "")).strip().lower(),
                row.get("role"),
                row.get("display_name"),
                row["created_at"],
            ),
        )
        await self._db.commit()
