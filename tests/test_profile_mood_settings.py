"""Profile, mood log, streak, settings and auth tests."""

from __future__ import annotations

from datetime import date

import pytest
from result import Err, Ok

from sanctuary.data.local_store import (
    ACTIVITY_STREAK_KEY,
    AUTH_SESSION_KEY,
    SETTINGS_KEY,
    USER_ROLE_KEY,
)
from sanctuary.models.mood import MAX_LOCAL_MOOD_ENTRIES, ActivityStreak, Mood
from sanctuary.models.session import AuthEvent, AuthSession
from sanctuary.services.container import ServiceContainer
from tests.factories import OWNER


def test_streak_counts_consecutive_days() -> None:
    streak = ActivityStreak()
    streak = streak.record(date(2026, 3, 1))
    streak = streak.record(date(2026, 3, 2))
    streak = streak.record(date(2026, 3, 2))
    assert streak.current_streak == 2
    streak = streak.record(date(2026, 3, 5))
    assert streak.current_streak == 1
    assert streak.longest_streak == 2


@pytest.mark.asyncio
async def test_local_mood_history_keeps_latest_entries(services: ServiceContainer) -> None:
    moods = services.mood_service
    for _ in range(MAX_LOCAL_MOOD_ENTRIES + 2):
        assert isinstance(await moods.log_mood(Mood.FOCUSED, 4), Ok)
    last = (await moods.log_mood(Mood.CREATIVE, 5, "flow")).unwrap()

    history = (await moods.history()).unwrap()
    assert len(history) == MAX_LOCAL_MOOD_ENTRIES
    assert history[0].id == last.id
    assert isinstance(await moods.log_mood(Mood.TIRED, 9), Err)


@pytest.mark.asyncio
async def test_hosted_mood_and_streak(services: ServiceContainer) -> None:
    services.selector.use_owner(OWNER)
    moods = services.mood_service

    entry = (await moods.log_mood(Mood.ENERGIZED, 5)).unwrap()
    history = (await moods.history()).unwrap()
    assert [e.id for e in history] == [entry.id]

    await moods.record_activity(date(2026, 3, 1))
    streak = (await moods.record_activity(date(2026, 3, 2))).unwrap()
    assert streak.current_streak == 2
    assert (await moods.streak()).unwrap().longest_streak == 2
    assert await services.storage.get_item(ACTIVITY_STREAK_KEY) is None


@pytest.mark.asyncio
async def test_role_selection_local_and_hosted(services: ServiceContainer) -> None:
    profile = services.profile_service
    assert (await profile.current_role()).unwrap() is None
    assert (await profile.select_role("Writer")).unwrap() == "writer"
    assert await services.storage.get_item(USER_ROLE_KEY) == "writer"
    assert isinstance(await profile.select_role("astronaut"), Err)

    session = (await services.auth.sign_in(OWNER.email)).unwrap()
    services.selector.use_owner(session.owner)
    assert (await profile.select_role("student")).unwrap() == "student"
    assert (await profile.current_role()).unwrap() == "student"

    user = (await profile.get_profile()).unwrap()
    assert user is not None
    assert user.email == OWNER.email
    assert user.role == "student"
    streak_row = await services.hosted_db.fetch_one(
        "SELECT * FROM activity_streaks WHERE user_id = ?", (session.owner.id,)
    )
    assert streak_row is not None


@pytest.mark.asyncio
async def test_settings_defaults_update_and_corruption(services: ServiceContainer) -> None:
    settings = services.settings_service
    defaults = await settings.load()
    assert defaults.auto_archive is False
    assert defaults.auto_archive_days == 90

    updated = await settings.update(auto_archive=True, reminder_frequency="daily")
    assert updated.auto_archive is True
    assert '"autoArchive":true' in (await services.storage.get_item(SETTINGS_KEY) or "")
    assert (await settings.load()).reminder_frequency == "daily"

    await services.storage.set_item(SETTINGS_KEY, '{"autoArchiveDays": 0}')
    assert (await settings.load()).auto_archive_days == 90


@pytest.mark.asyncio
async def test_auth_sign_in_persists_and_notifies(services: ServiceContainer) -> None:
    auth = services.auth
    seen: list[tuple[AuthEvent, AuthSession | None]] = []

    async def listener(event: AuthEvent, session: AuthSession | None) -> None:
        seen.append((event, session))

    unsubscribe = auth.subscribe(listener)
    assert isinstance(await auth.sign_in("not-an-email"), Err)

    first = (await auth.sign_in("  Ada@Example.com ")).unwrap()
    again = (await auth.sign_in("ada@example.com")).unwrap()
    assert first.owner.id == again.owner.id
    assert (await auth.get_session()) == again

    await auth.sign_out()
    assert await services.storage.get_item(AUTH_SESSION_KEY) is None
    assert [event for event, _ in seen] == [
        AuthEvent.SIGNED_IN,
        AuthEvent.SIGNED_IN,
        AuthEvent.SIGNED_OUT,
    ]

    unsubscribe()
    await auth.sign_in("ada@example.com")
    assert len(seen) == 3


@pytest.mark.asyncio
async def test_listener_failures_do_not_break_sign_in(services: ServiceContainer) -> None:
    async def broken(_event: AuthEvent, _session: AuthSession | None) -> None:
        raise RuntimeError("listener bug")

    services.auth.subscribe(broken)
    assert isinstance(await services.auth.sign_in("ada@example.com"), Ok)
