"""One-shot transfer of device-local data into the hosted store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError
from result import Err, Ok, Result

from sanctuary.data.local_store import MIGRATABLE_KEYS, MIGRATED_KEY, PROJECTS_KEY
from sanctuary.models.migration import MigrationReport
from sanctuary.models.projects import utc_now
from sanctuary.services._row_helpers import mood_to_row
from sanctuary.services.backends import HostedProjectBackend, load_projects
from sanctuary.services.mood_service import read_local_mood_history, read_local_streak

if TYPE_CHECKING:
    from sanctuary.data.local_store import LocalStorage
    from sanctuary.data.repositories import (
        HostedProjectRepository,
        MoodRepository,
        StreakRepository,
    )
    from sanctuary.models.session import Owner

logger = logging.getLogger(__name__)


class MigrationService:
    """Offers, performs or declines the local-to-hosted migration.

    Records are upserted by id, so a re-run after a partial failure never
    duplicates rows. The batch is not atomic: local data is cleared and the
    ``migrated`` flag set only when every record made it across.
    """

    def __init__(
        self,
        storage: LocalStorage,
        projects: HostedProjectRepository,
        moods: MoodRepository,
        streaks: StreakRepository,
    ) -> None:
        self._storage = storage
        self._projects = projects
        self._moods = moods
        self._streaks = streaks

    async def is_migrated(self) -> bool:
        return (await self._storage.get_item(MIGRATED_KEY)) == "true"

    async def has_local_data(self) -> bool:
        projects = await self._storage.get_json(PROJECTS_KEY, [])
        if isinstance(projects, list) and projects:
            return True
        if await read_local_mood_history(self._storage):
            return True
        return (await read_local_streak(self._storage)).current_streak > 0

    async def should_offer(self, owner: Owner | None) -> bool:
        if owner is None:
            return False
        if await self.is_migrated():
            return False
        return await self.has_local_data()

    async def skip(self) -> None:
        """Decline: local data stays on the device and is never offered again."""
        await self._storage.set_item(MIGRATED_KEY, "true")
        logger.info("Migration dismissed; local data left in place")

    async def migrate(self, owner: Owner) -> Result[MigrationReport, str]:
        logger.info("Migrating local data for %s", owner.id)
        raw_projects = await self._storage.get_item(PROJECTS_KEY)
        try:
            projects = load_projects(raw_projects) if raw_projects else []
        except ValidationError:
            logger.error("Local projects are unreadable; migration aborted")
            return Err("Local project data is unreadable; nothing was migrated")

        report = MigrationReport()
        hosted = HostedProjectBackend(self._projects, owner.id)
        for project in projects:
            result = await hosted.upsert(project)
            if isinstance(result, Err):
                report.failures.append(result.err_value)
            else:
                report.projects_migrated += 1

        for entry in await read_local_mood_history(self._storage):
            try:
                changed = await self._moods.upsert_row(mood_to_row(entry, owner.id))
            except Exception as exc:
                logger.error("Error migrating mood entry %s: %s", entry.id, exc)
                changed = 0
            if changed:
                report.mood_entries_migrated += 1
            else:
                report.failures.append(f"Could not upload mood entry from {entry.logged_at:%Y-%m-%d}")

        streak = await read_local_streak(self._storage)
        if streak.current_streak > 0:
            try:
                await self._streaks.upsert_row(
                    {
                        "user_id": owner.id,
                        "current_streak": streak.current_streak,
                        "longest_streak": max(streak.longest_streak, streak.current_streak),
                        "last_active_on": (
                            streak.last_active_on.isoformat() if streak.last_active_on else None
                        ),
                        "updated_at": utc_now().isoformat(),
                    }
                )
                report.streak_migrated = True
            except Exception as exc:
                logger.error("Error migrating activity streak: %s", exc)
                report.failures.append("Could not upload activity streak")

        if not report.succeeded:
            logger.warning(
                "Migration incomplete: %d failures; local data kept", len(report.failures)
            )
            return Err(
                f"Migration incomplete ({len(report.failures)} items failed). "
                "Your local data was kept; you can retry later."
            )

        for key in MIGRATABLE_KEYS:
            await self._storage.remove_item(key)
        await self._storage.set_item(MIGRATED_KEY, "true")
        logger.info(
            "Migration complete: %d projects, %d mood entries",
            report.projects_migrated,
            report.mood_entries_migrated,
        )
        return Ok(report)
