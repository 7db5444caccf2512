"""Mood log and activity streak, stored locally or in the hosted store."""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError
from result import Err, Ok, Result

from sanctuary.data.local_store import ACTIVITY_STREAK_KEY, MOOD_HISTORY_KEY
from sanctuary.models.mood import MAX_LOCAL_MOOD_ENTRIES, ActivityStreak, Mood, MoodEntry
from sanctuary.models.projects import utc_now
from sanctuary.services._row_helpers import mood_to_row, row_to_mood, row_to_streak

if TYPE_CHECKING:
    from sanctuary.data.local_store import LocalStorage
    from sanctuary.data.repositories import MoodRepository, StreakRepository
    from sanctuary.services.backends import BackendSelector

logger = logging.getLogger(__name__)

_MOOD_LIST = TypeAdapter(list[MoodEntry])


async def read_local_mood_history(storage: LocalStorage) -> list[MoodEntry]:
    raw = await storage.get_item(MOOD_HISTORY_KEY)
    if not raw:
        return []
    try:
        return _MOOD_LIST.validate_json(raw)
    except ValidationError:
        logger.warning("Ignoring unreadable local mood history")
        return []


async def read_local_streak(storage: LocalStorage) -> ActivityStreak:
    """Local streak; a bare integer from older clients is accepted."""
    value = await storage.get_json(ACTIVITY_STREAK_KEY)
    if value is None:
        return ActivityStreak()
    if isinstance(value, int) and not isinstance(value, bool):
        count = max(value, 0)
        return ActivityStreak(current_streak=count, longest_streak=count)
    try:
        return ActivityStreak.model_validate(value)
    except ValidationError:
        logger.warning("Ignoring unreadable local activity streak")
        return ActivityStreak()


class MoodService:
    """Service for mood check-ins and the activity streak."""

    def __init__(
        self,
        storage: LocalStorage,
        moods: MoodRepository,
        streaks: StreakRepository,
        selector: BackendSelector,
    ) -> None:
        self._storage = storage
        self._moods = moods
        self._streaks = streaks
        self._selector = selector

    async def history(self) -> Result[list[MoodEntry], str]:
        owner = self._selector.owner
        if owner is None:
            return Ok(await read_local_mood_history(self._storage))
        try:
            rows = await self._moods.list_rows(owner.id, limit=MAX_LOCAL_MOOD_ENTRIES)
        except Exception as exc:
            logger.error("Loading mood history failed: %s", exc)
            return Err("Could not load mood history")
        return Ok([row_to_mood(row) for row in rows])

    async def log_mood(self, mood: Mood, energy: int, notes: str = "") -> Result[MoodEntry, str]:
        try:
            entry = MoodEntry(mood=mood, energy=energy, notes=notes)
        except ValidationError:
            return Err("Energy must be between 1 and 5")

        owner = self._selector.owner
        if owner is None:
            history = await read_local_mood_history(self._storage)
            history = [entry, *history][:MAX_LOCAL_MOOD_ENTRIES]
            await self._storage.set_item(
                MOOD_HISTORY_KEY, _MOOD_LIST.dump_json(history, by_alias=True).decode()
            )
            return Ok(entry)
        try:
            await self._moods.upsert_row(mood_to_row(entry, owner.id))
        except Exception as exc:
            logger.error("Saving mood entry failed: %s", exc)
            return Err("Could not save your mood entry")
        return Ok(entry)

    async def streak(self) -> Result[ActivityStreak, str]:
        owner = self._selector.owner
        if owner is None:
            return Ok(await read_local_streak(self._storage))
        try:
            return Ok(row_to_streak(await self._streaks.get_row(owner.id)))
        except Exception as exc:
            logger.error("Loading activity streak failed: %s", exc)
            return Err("Could not load your activity streak")

    async def record_activity(self, day: date | None = None) -> Result[ActivityStreak, str]:
        current = await self.streak()
        if isinstance(current, Err):
            return current
        updated = current.ok_value.record(day or utc_now().date())
        if updated == current.ok_value:
            return Ok(updated)

        owner = self._selector.owner
        if owner is None:
            await self._storage.set_item(ACTIVITY_STREAK_KEY, updated.model_dump_json(by_alias=True))
            return Ok(updated)
        try:
            await self._streaks.upsert_row(
                {
                    "user_id": owner.id,
                    "current_streak": updated.current_streak,
                    "longest_streak": updated.longest_streak,
                    "last_active_on": (
                        updated.last_active_on.isoformat() if updated.last_active_on else None
                    ),
                    "updated_at": utc_now().isoformat(),
                }
            )
        except Exception as exc:
            logger.error("Saving activity streak failed: %s", exc)
            return Err("Could not save your activity streak")
        return Ok(updated)
