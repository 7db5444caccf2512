"""In-process auth provider backed by the hosted ``users`` table.

Stands in for an external identity service: it answers ``get_session`` and
pushes sign-in/sign-out notifications to subscribers.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from pydantic import ValidationError
from result import Err, Ok, Result

from sanctuary.data.local_store import AUTH_SESSION_KEY
from sanctuary.models.projects import utc_now
from sanctuary.models.session import AuthEvent, AuthSession, Owner
from sanctuary.services._row_helpers import row_str

if TYPE_CHECKING:
    from sanctuary.data.local_store import LocalStorage
    from sanctuary.data.repositories import UserRepository
    from sanctuary.services.protocols import AuthListener, Unsubscribe

logger = logging.getLogger(__name__)


class LocalAuthProvider:
    """Email sign-in against the hosted user table; the session lives on the device."""

    def __init__(self, users: UserRepository, storage: LocalStorage) -> None:
        self._users = users
        self._storage = storage
        self._listeners: list[AuthListener] = []

    async def get_session(self) -> AuthSession | None:
        value = await self._storage.get_json(AUTH_SESSION_KEY)
        if value is None:
            return None
        try:
            return AuthSession.model_validate(value)
        except ValidationError:
            logger.warning("Discarding unreadable stored session")
            await self._storage.remove_item(AUTH_SESSION_KEY)
            return None

    def subscribe(self, listener: AuthListener) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def sign_in(self, email: str) -> Result[AuthSession, str]:
        normalized = email.strip().lower()
        if "@" not in normalized or normalized.startswith("@") or normalized.endswith("@"):
            return Err("Enter a valid email address")
        try:
            row = await self._users.get_row_by_email(normalized)
            if row is None:
                user_id = str(uuid.uuid4())
                await self._users.upsert_row(
                    {"id": user_id, "email": normalized, "created_at": utc_now().isoformat()}
                )
            else:
                user_id = row_str(dict(row), "id")
        except Exception as exc:
            logger.error("Sign-in failed for %s: %s", normalized, exc)
            return Err("Sign-in failed. Please try again.")

        session = AuthSession(owner=Owner(id=user_id, email=normalized), access_token=uuid.uuid4().hex)
        await self._storage.set_item(AUTH_SESSION_KEY, session.model_dump_json())
        logger.info("User signed in: %s", normalized)
        await self._notify(AuthEvent.SIGNED_IN, session)
        return Ok(session)

    async def sign_out(self) -> None:
        await self._storage.remove_item(AUTH_SESSION_KEY)
        logger.info("User signed out")
        await self._notify(AuthEvent.SIGNED_OUT, None)

    async def _notify(self, event: AuthEvent, session: AuthSession | None) -> None:
        for listener in list(self._listeners):
            try:
                await listener(event, session)
            except Exception:
                logger.exception("Auth listener failed for %s", event)
