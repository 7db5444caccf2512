"""Shared fixtures for Sanctuary tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from sanctuary.config import Config
from sanctuary.data.db import HOSTED_SCHEMA, LOCAL_SCHEMA, Database
from sanctuary.data.local_store import LocalStorage
from sanctuary.data.repositories import (
    HostedProjectRepository,
    MoodRepository,
    StreakRepository,
    UserRepository,
)
from sanctuary.services.container import ServiceContainer


@pytest.fixture
async def local_db() -> AsyncGenerator[Database]:
    """Device key/value database held in memory."""
    db = Database(Path(":memory:"), LOCAL_SCHEMA)
    await db.__aenter__()
    yield db  # type: ignore[misc]
    await db.__aexit__(None, None, None)


@pytest.fixture
async def hosted_db() -> AsyncGenerator[Database]:
    """Hosted relational database held in memory."""
    db = Database(Path(":memory:"), HOSTED_SCHEMA)
    await db.__aenter__()
    yield db  # type: ignore[misc]
    await db.__aexit__(None, None, None)


@pytest.fixture
def storage(local_db: Database) -> LocalStorage:
    return LocalStorage(local_db)


@pytest.fixture
def project_repo(hosted_db: Database) -> HostedProjectRepository:
    return HostedProjectRepository(hosted_db)


@pytest.fixture
def mood_repo(hosted_db: Database) -> MoodRepository:
    return MoodRepository(hosted_db)


@pytest.fixture
def streak_repo(hosted_db: Database) -> StreakRepository:
    return StreakRepository(hosted_db)


@pytest.fixture
def user_repo(hosted_db: Database) -> UserRepository:
    return UserRepository(hosted_db)


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Config pointing at a temporary data dir with fake OAuth apps."""
    return Config(
        data_dir=tmp_path / "data",
        site_url="https://sanctuary.example",
        google_client_id="google-id",
        google_client_secret="google-secret",
        dropbox_client_id="dropbox-id",
        dropbox_client_secret="dropbox-secret",
        onedrive_client_id="onedrive-id",
        onedrive_client_secret="onedrive-secret",
    )


@pytest.fixture
def services(local_db: Database, hosted_db: Database, test_config: Config) -> ServiceContainer:
    """Fully wired services over the in-memory databases."""
    return ServiceContainer.wire(local_db, hosted_db, test_config)
