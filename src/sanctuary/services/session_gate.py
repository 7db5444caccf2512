"""Session/identity gate: picks the authoritative backend and offers migration."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from result import Err, Ok, Result

from sanctuary.models.session import AuthEvent, AuthSession

if TYPE_CHECKING:
    from sanctuary.models.migration import MigrationReport
    from sanctuary.models.session import Owner
    from sanctuary.services.backends import BackendSelector
    from sanctuary.services.migration_service import MigrationService
    from sanctuary.services.project_service import ProjectService
    from sanctuary.services.protocols import AuthProviderProtocol, Unsubscribe
    from sanctuary.services.settings_service import SettingsService

logger = logging.getLogger(__name__)


class SessionGate:
    """Tracks the signed-in owner for the lifetime of the process.

    ``initialize`` runs once. Each transition into signed-in switches to the
    hosted backend and re-evaluates the migration offer; signing out switches
    back to the device store. Evaluations are serialized by a lock.
    """

    def __init__(
        self,
        auth: AuthProviderProtocol,
        selector: BackendSelector,
        projects: ProjectService,
        migration: MigrationService,
        settings: SettingsService | None = None,
    ) -> None:
        self._auth = auth
        self._selector = selector
        self._projects = projects
        self._migration = migration
        self._settings = settings
        self._lock = asyncio.Lock()
        self._initialized = False
        self._unsubscribe: Unsubscribe | None = None
        self._listeners: list[Callable[[], None]] = []
        self.is_loading = True
        self.migration_offered = False

    @property
    def owner(self) -> Owner | None:
        return self._selector.owner

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a callback fired after every state change."""
        self._listeners.append(callback)

    async def initialize(self) -> None:
        if self._initialized:
            return
        self._initialized = True
        session: AuthSession | None
        try:
            session = await self._auth.get_session()
        except Exception:
            logger.exception("Auth initialization error")
            session = None
        logger.info("Initial session check: %s", session.owner.email if session else "none")
        try:
            await self._apply(session)
        finally:
            self._unsubscribe = self._auth.subscribe(self._on_auth_change)
            self.is_loading = False
            self._emit()

    async def _on_auth_change(self, event: AuthEvent, session: AuthSession | None) -> None:
        logger.info("Auth state change: %s", event)
        if event is AuthEvent.SIGNED_IN and session is not None:
            await self._apply(session)
        else:
            await self._apply(None)
        self._emit()

    async def _apply(self, session: AuthSession | None) -> None:
        async with self._lock:
            owner = session.owner if session is not None else None
            self._selector.use_owner(owner)
            self.migration_offered = await self._migration.should_offer(owner)
            if self.migration_offered:
                logger.info("Migration available for %s", owner.email if owner else "")
            await self._reload()

    async def _reload(self) -> None:
        self._projects.clear()
        result = await self._projects.load()
        if isinstance(result, Err):
            logger.error("Loading projects failed: %s", result.err_value)
            return
        if self._settings is None:
            return
        settings = await self._settings.load()
        if settings.auto_archive:
            await self._projects.auto_archive_inactive(settings.auto_archive_days)

    async def accept_migration(self) -> Result[MigrationReport, str]:
        owner = self._selector.owner
        if owner is None:
            return Err("Sign in to sync your data")
        async with self._lock:
            result = await self._migration.migrate(owner)
            if isinstance(result, Ok):
                self.migration_offered = False
                await self._reload()
        self._emit()
        return result

    async def dismiss_migration(self) -> None:
        await self._migration.skip()
        self.migration_offered = False
        self._emit()

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _emit(self) -> None:
        for callback in list(self._listeners):
            try:
                callback()
            except Exception:
                logger.exception("Session listener failed")
