"""Service container with DI wiring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sanctuary.data.db import HOSTED_SCHEMA, LOCAL_SCHEMA, Database
from sanctuary.data.local_store import LocalStorage
from sanctuary.data.repositories import (
    HostedProjectRepository,
    MoodRepository,
    StreakRepository,
    UserRepository,
)
from sanctuary.services.auth import LocalAuthProvider
from sanctuary.services.backends import BackendSelector, LocalProjectBackend
from sanctuary.services.cloud_storage import CloudStorageService
from sanctuary.services.export_service import ExportService
from sanctuary.services.migration_service import MigrationService
from sanctuary.services.mood_service import MoodService
from sanctuary.services.profile_service import ProfileService
from sanctuary.services.project_service import ProjectService
from sanctuary.services.session_gate import SessionGate
from sanctuary.services.settings_service import SettingsService

if TYPE_CHECKING:
    from sanctuary.config import Config


@dataclass
class ServiceContainer:
    """Holds all application services. Built once at startup, immutable."""

    local_db: Database
    hosted_db: Database
    storage: LocalStorage
    selector: BackendSelector
    auth: LocalAuthProvider
    project_service: ProjectService
    migration_service: MigrationService
    session_gate: SessionGate
    export_service: ExportService
    mood_service: MoodService
    settings_service: SettingsService
    profile_service: ProfileService
    cloud_service: CloudStorageService

    @classmethod
    async def create(cls, config: Config) -> ServiceContainer:
        """Async factory that wires all dependencies."""
        local_db = await Database(config.local_db_path, LOCAL_SCHEMA).connect()
        hosted_db = await Database(config.hosted_db_path, HOSTED_SCHEMA).connect()
        return cls.wire(local_db, hosted_db, config)

    @classmethod
    def wire(cls, local_db: Database, hosted_db: Database, config: Config) -> ServiceContainer:
        """Build the service graph over already-open databases."""
        storage = LocalStorage(local_db)
        hosted_projects = HostedProjectRepository(hosted_db)
        moods = MoodRepository(hosted_db)
        streaks = StreakRepository(hosted_db)
        users = UserRepository(hosted_db)

        selector = BackendSelector(LocalProjectBackend(storage), hosted_projects)
        auth = LocalAuthProvider(users, storage)
        project_service = ProjectService(selector)
        migration_service = MigrationService(storage, hosted_projects, moods, streaks)
        settings_service = SettingsService(storage)
        session_gate = SessionGate(
            auth, selector, project_service, migration_service, settings_service
        )

        return cls(
            local_db=local_db,
            hosted_db=hosted_db,
            storage=storage,
            selector=selector,
            auth=auth,
            project_service=project_service,
            migration_service=migration_service,
            session_gate=session_gate,
            export_service=ExportService(),
            mood_service=MoodService(storage, moods, streaks, selector),
            settings_service=settings_service,
            profile_service=ProfileService(storage, users, streaks, selector),
            cloud_service=CloudStorageService(config.oauth_client),
        )

    async def close(self) -> None:
        """Shut down all services."""
        self.session_gate.close()
        await self.local_db.close()
        await self.hosted_db.close()
