"""Schema versioning and device key/value store tests."""

from __future__ import annotations

import pytest

from sanctuary.data.db import HOSTED_SCHEMA, LOCAL_SCHEMA, Database
from sanctuary.data.local_store import LocalStorage


@pytest.mark.asyncio
async def test_schema_upgrade_keeps_existing_rows(tmp_path) -> None:
    db_path = tmp_path / "hosted.db"
    async with Database(db_path, HOSTED_SCHEMA) as db:
        await db.execute(
            "INSERT INTO users (id, email, created_at) VALUES (?, ?, ?)",
            ("u1", "ada@example.com", "2026-03-01T00:00:00+00:00"),
        )
        await db.execute(
            "UPDATE app_meta SET value = '1' WHERE key = 'hosted_schema_version'"
        )
        await db.commit()

    async with Database(db_path, HOSTED_SCHEMA) as db:
        version = await db.fetch_one(
            "SELECT value FROM app_meta WHERE key = 'hosted_schema_version'"
        )
        users = await db.fetch_one("SELECT COUNT(*) AS cnt FROM users")
        assert version is not None and int(version["value"]) == HOSTED_SCHEMA.version
        assert users is not None and int(users["cnt"]) == 1


@pytest.mark.asyncio
async def test_database_requires_connection(tmp_path) -> None:
    db = Database(tmp_path / "never-opened.db", LOCAL_SCHEMA)
    with pytest.raises(RuntimeError):
        await db.fetch_one("SELECT 1")


@pytest.mark.asyncio
async def test_local_storage_items_and_json(storage: LocalStorage) -> None:
    assert await storage.get_item("missing") is None
    await storage.set_item("a", "1")
    await storage.set_item("a", "2")
    assert await storage.get_item("a") == "2"

    await storage.set_json("b", {"x": [1, 2]})
    assert await storage.get_json("b") == {"x": [1, 2]}
    assert await storage.keys() == ["a", "b"]

    await storage.set_item("broken", "{")
    assert await storage.get_json("broken", default=[]) == []

    await storage.remove_item("a")
    assert await storage.get_item("a") is None


@pytest.mark.asyncio
async def test_local_storage_persists_across_connections(tmp_path) -> None:
    path = tmp_path / "device.db"
    async with Database(path, LOCAL_SCHEMA) as db:
        await LocalStorage(db).set_item("projects", "[]")
    async with Database(path, LOCAL_SCHEMA) as db:
        assert await LocalStorage(db).get_item("projects") == "[]"
