"""One-shot local-to-hosted migration tests."""

from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock

import pytest
from result import Err, Ok

from sanctuary.data.local_store import (
    ACTIVITY_STREAK_KEY,
    MIGRATED_KEY,
    MOOD_HISTORY_KEY,
    PROJECTS_KEY,
    SETTINGS_KEY,
    LocalStorage,
)
from sanctuary.data.repositories import (
    HostedProjectRepository,
    MoodRepository,
    StreakRepository,
)
from sanctuary.models.mood import ActivityStreak, Mood, MoodEntry
from sanctuary.models.projects import Project
from sanctuary.services._row_helpers import mood_to_row
from sanctuary.services.backends import HostedProjectBackend, dump_projects
from sanctuary.services.migration_service import MigrationService
from sanctuary.services.mood_service import _MOOD_LIST
from tests.factories import OTHER_OWNER, OWNER, make_project


@pytest.fixture
def migration(
    storage: LocalStorage,
    project_repo: HostedProjectRepository,
    mood_repo: MoodRepository,
    streak_repo: StreakRepository,
) -> MigrationService:
    return MigrationService(storage, project_repo, mood_repo, streak_repo)


async def _seed_local(storage: LocalStorage) -> list[Project]:
    projects = [make_project(title="One"), make_project(title="Two")]
    await storage.set_item(PROJECTS_KEY, dump_projects(projects))
    moods = [MoodEntry(mood=Mood.FOCUSED, energy=4), MoodEntry(mood=Mood.TIRED, energy=2)]
    await storage.set_item(MOOD_HISTORY_KEY, _MOOD_LIST.dump_json(moods, by_alias=True).decode())
    streak = ActivityStreak(current_streak=3, longest_streak=5, last_active_on=date(2026, 3, 1))
    await storage.set_item(ACTIVITY_STREAK_KEY, streak.model_dump_json(by_alias=True))
    return projects


@pytest.mark.asyncio
async def test_offer_requires_owner_local_data_and_no_flag(
    migration: MigrationService, storage: LocalStorage
) -> None:
    assert await migration.should_offer(OWNER) is False
    await _seed_local(storage)
    assert await migration.should_offer(None) is False
    assert await migration.should_offer(OWNER) is True

    await migration.skip()
    assert await migration.should_offer(OWNER) is False
    assert await storage.get_item(PROJECTS_KEY) is not None


@pytest.mark.asyncio
async def test_successful_migration_moves_everything_and_sets_flag(
    migration: MigrationService,
    storage: LocalStorage,
    project_repo: HostedProjectRepository,
    mood_repo: MoodRepository,
    streak_repo: StreakRepository,
) -> None:
    projects = await _seed_local(storage)
    await storage.set_item(SETTINGS_KEY, "{}")

    result = await migration.migrate(OWNER)

    assert isinstance(result, Ok)
    report = result.ok_value
    assert report.projects_migrated == 2
    assert report.mood_entries_migrated == 2
    assert report.streak_migrated is True

    hosted = (await HostedProjectBackend(project_repo, OWNER.id).list()).unwrap()
    assert {p.id for p in hosted} == {p.id for p in projects}
    assert all(p.owner_id == OWNER.id for p in hosted)
    assert len(await mood_repo.list_rows(OWNER.id)) == 2
    streak_row = await streak_repo.get_row(OWNER.id)
    assert streak_row is not None and streak_row["longest_streak"] == 5

    assert await storage.get_item(PROJECTS_KEY) is None
    assert await storage.get_item(MOOD_HISTORY_KEY) is None
    assert await storage.get_item(ACTIVITY_STREAK_KEY) is None
    assert await storage.get_item(MIGRATED_KEY) == "true"
    assert await storage.get_item(SETTINGS_KEY) == "{}"
    assert await migration.should_offer(OWNER) is False


@pytest.mark.asyncio
async def test_rerun_after_partial_failure_does_not_duplicate(
    storage: LocalStorage,
    project_repo: HostedProjectRepository,
    mood_repo: MoodRepository,
    streak_repo: StreakRepository,
) -> None:
    projects = await _seed_local(storage)
    real_upsert = project_repo.upsert_row
    calls = {"n": 0}

    async def flaky_upsert(row):  # type: ignore[no-untyped-def]
        calls["n"] += 1
        if calls["n"] == 2:
            raise RuntimeError("network down")
        return await real_upsert(row)

    flaky_repo = HostedProjectRepository(project_repo._db)
    flaky_repo.upsert_row = flaky_upsert  # type: ignore[method-assign]
    failing = MigrationService(storage, flaky_repo, mood_repo, streak_repo)

    first = await failing.migrate(OWNER)
    assert isinstance(first, Err)
    assert "local data was kept" in first.err_value
    assert await storage.get_item(PROJECTS_KEY) is not None
    assert await storage.get_item(MIGRATED_KEY) is None
    assert await failing.should_offer(OWNER) is True

    retry = MigrationService(storage, project_repo, mood_repo, streak_repo)
    second = await retry.migrate(OWNER)
    assert isinstance(second, Ok)

    hosted = (await HostedProjectBackend(project_repo, OWNER.id).list()).unwrap()
    assert sorted(p.id for p in hosted) == sorted(p.id for p in projects)
    assert len(await mood_repo.list_rows(OWNER.id)) == 2


@pytest.mark.asyncio
async def test_mood_failure_keeps_local_data(
    storage: LocalStorage,
    project_repo: HostedProjectRepository,
    streak_repo: StreakRepository,
) -> None:
    await _seed_local(storage)
    moods = MoodRepository(project_repo._db)
    moods.upsert_row = AsyncMock(side_effect=RuntimeError("timeout"))  # type: ignore[method-assign]
    service = MigrationService(storage, project_repo, moods, streak_repo)

    result = await service.migrate(OWNER)
    assert isinstance(result, Err)
    assert await storage.get_item(MOOD_HISTORY_KEY) is not None
    assert await storage.get_item(MIGRATED_KEY) is None


@pytest.mark.asyncio
async def test_corrupt_local_projects_abort_migration(
    migration: MigrationService, storage: LocalStorage
) -> None:
    await storage.set_item(PROJECTS_KEY, "[{broken")
    result = await migration.migrate(OWNER)
    assert isinstance(result, Err)
    assert await storage.get_item(PROJECTS_KEY) == "[{broken"


@pytest.mark.asyncio
async def test_legacy_integer_streak_is_migrated(
    migration: MigrationService, storage: LocalStorage, streak_repo: StreakRepository
) -> None:
    await storage.set_item(ACTIVITY_STREAK_KEY, "4")
    assert await migration.should_offer(OWNER) is True
    assert isinstance(await migration.migrate(OWNER), Ok)
    row = await streak_repo.get_row(OWNER.id)
    assert row is not None and row["current_streak"] == 4


@pytest.mark.asyncio
async def test_ids_owned_by_another_account_keep_local_data(
    migration: MigrationService,
    storage: LocalStorage,
    project_repo: HostedProjectRepository,
) -> None:
    projects = await _seed_local(storage)
    first_account = HostedProjectBackend(project_repo, OTHER_OWNER.id)
    assert isinstance(await first_account.upsert(projects[0]), Ok)

    result = await migration.migrate(OWNER)

    assert isinstance(result, Err)
    assert await storage.get_item(PROJECTS_KEY) is not None
    assert await storage.get_item(MOOD_HISTORY_KEY) is not None
    assert await storage.get_item(MIGRATED_KEY) is None
    mine = (await HostedProjectBackend(project_repo, OWNER.id).list()).unwrap()
    assert [p.id for p in mine] == [projects[1].id]


@pytest.mark.asyncio
async def test_mood_entry_owned_by_another_account_fails_migration(
    migration: MigrationService, storage: LocalStorage, mood_repo: MoodRepository
) -> None:
    await _seed_local(storage)
    history = await storage.get_item(MOOD_HISTORY_KEY)
    assert history is not None
    entry = _MOOD_LIST.validate_json(history)[0]
    assert await mood_repo.upsert_row(mood_to_row(entry, OTHER_OWNER.id)) == 1

    result = await migration.migrate(OWNER)

    assert isinstance(result, Err)
    assert await storage.get_item(MOOD_HISTORY_KEY) is not None
    assert await storage.get_item(MIGRATED_KEY) is None
    assert len(await mood_repo.list_rows(OWNER.id)) == 1
