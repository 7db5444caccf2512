"""Device-local key/value store (the local backend's storage)."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sanctuary.data.db import Database

logger = logging.getLogger(__name__)

PROJECTS_KEY = "projects"
MOOD_HISTORY_KEY = "moodHistory"
ACTIVITY_STREAK_KEY = "activityStreak"
MIGRATED_KEY = "migrated"
SETTINGS_KEY = "settings"
USER_ROLE_KEY = "userRole"
AUTH_SESSION_KEY = "authSession"
CLOUD_TOKENS_KEY = "cloudTokens"

# Keys that hold data eligible for migration to the hosted store.
MIGRATABLE_KEYS = (PROJECTS_KEY, MOOD_HISTORY_KEY, ACTIVITY_STREAK_KEY)


class LocalStorage:
    """String key/value store persisted in the device database.

    Every write is committed immediately; values are opaque text blobs.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    async def get_item(self, key: str) -> str | None:
        row = await self._db.fetch_one("SELECT value FROM local_storage WHERE key = ?", (key,))
        if row is None:
            return None
        return str(row["value"])

    async def set_item(self, key: str, value: str) -> None:
        await self._db.execute(
            "INSERT OR REPLACE INTO local_storage (key, value) VALUES (?, ?)",
            (key, value),
        )
        await self._db.commit()

    async def remove_item(self, key: str) -> None:
        await self._db.execute("DELETE FROM local_storage WHERE key = ?", (key,))
        await self._db.commit()

    async def keys(self) -> list[str]:
        rows = await self._db.fetch_all("SELECT key FROM local_storage ORDER BY key")
        return [str(row["key"]) for row in rows]

    async def get_json(self, key: str, default: Any = None) -> Any:
        """Decode a JSON blob, returning ``default`` when absent or corrupt."""
        raw = await self.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt JSON under local key %r", key)
            return default

    async def set_json(self, key: str, value: Any) -> None:
        await self.set_item(key, json.dumps(value))
