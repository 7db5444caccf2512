"""Role selection and the hosted user profile."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from result import Err, Ok, Result

from sanctuary.data.local_store import USER_ROLE_KEY
from sanctuary.models.projects import utc_now
from sanctuary.models.roles import get_role
from sanctuary.models.session import UserProfile
from sanctuary.services._row_helpers import row_str

if TYPE_CHECKING:
    from sanctuary.data.local_store import LocalStorage
    from sanctuary.data.repositories import StreakRepository, UserRepository
    from sanctuary.services.backends import BackendSelector

logger = logging.getLogger(__name__)


class ProfileService:
    """Remembers which role the user works in."""

    def __init__(
        self,
        storage: LocalStorage,
        users: UserRepository,
        streaks: StreakRepository,
        selector: BackendSelector,
    ) -> None:
        self._storage = storage
        self._users = users
        self._streaks = streaks
        self._selector = selector

    async def current_role(self) -> Result[str | None, str]:
        owner = self._selector.owner
        if owner is None:
            return Ok(await self._storage.get_item(USER_ROLE_KEY))
        try:
            row = await self._users.get_row(owner.id)
        except Exception as exc:
            logger.error("Error loading profile for %s: %s", owner.id, exc)
            return Err("Could not load your profile")
        if row is None:
            return Ok(None)
        role = row_str(dict(row), "role").lower()
        return Ok(role or None)

    async def select_role(self, role_id: str) -> Result[str, str]:
        role = get_role(role_id)
        if role is None:
            return Err(f"Unknown role: {role_id}")

        owner = self._selector.owner
        if owner is None:
            await self._storage.set_item(USER_ROLE_KEY, role.id)
            return Ok(role.id)

        now = utc_now().isoformat()
        try:
            await self._users.upsert_row(
                {"id": owner.id, "email": owner.email, "role": role.id, "created_at": now}
            )
            if await self._streaks.get_row(owner.id) is None:
                await self._streaks.upsert_row(
                    {"user_id": owner.id, "current_streak": 0, "longest_streak": 0, "updated_at": now}
                )
        except Exception as exc:
            logger.error("Error saving profile for %s: %s", owner.id, exc)
            return Err("Could not save your role")
        return Ok(role.id)

    async def get_profile(self) -> Result[UserProfile | None, str]:
        owner = self._selector.owner
        if owner is None:
            return Ok(None)
        try:
            row = await self._users.get_row(owner.id)
        except Exception as exc:
            logger.error("Error loading profile for %s: %s", owner.id, exc)
            return Err("Could not load your profile")
        if row is None:
            return Ok(None)
        r = dict(row)
        return Ok(
            UserProfile(
                id=row_str(r, "id"),
                email=row_str(r, "email"),
                role=row_str(r, "role"),
                display_name=row_str(r, "display_name"),
            )
        )
