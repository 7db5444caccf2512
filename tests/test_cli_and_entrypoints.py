"""CLI and entrypoint tests."""

from __future__ import annotations

import json
import runpy
from pathlib import Path

import pytest
from typer.testing import CliRunner

from sanctuary.cli import app

runner = CliRunner()


def _invoke(data_dir: Path, *args: str):  # type: ignore[no-untyped-def]
    return runner.invoke(app, [*args, "--data-dir", str(data_dir)])


@pytest.fixture
def backup_file(tmp_path: Path) -> Path:
    path = tmp_path / "backup.json"
    path.write_text(
        json.dumps(
            {
                "projects": [
                    {"title": "Garden Planner", "type": "Web App", "status": "active"},
                    {"title": "Zine", "type": "Writing", "status": "paused"},
                ]
            }
        ),
        encoding="utf-8",
    )
    return path


def test_cli_serve_invokes_run_app(monkeypatch, tmp_path: Path) -> None:
    called: dict[str, object] = {}

    def fake_run_app(config) -> None:  # type: ignore[no-untyped-def]
        called["config"] = config

    monkeypatch.setattr("sanctuary.ui.app.run_app", fake_run_app)
    result = runner.invoke(app, ["--data-dir", str(tmp_path), "--port", "9000"])
    assert result.exit_code == 0
    config = called["config"]
    assert config.data_dir == tmp_path  # type: ignore[attr-defined]
    assert config.site_url == "http://127.0.0.1:9000"  # type: ignore[attr-defined]


def test_cli_import_list_and_export(tmp_path: Path, backup_file: Path) -> None:
    data_dir = tmp_path / "data"

    imported = _invoke(data_dir, "import", str(backup_file))
    assert imported.exit_code == 0, imported.output
    assert "Imported 2 projects" in imported.output

    listed = _invoke(data_dir, "list", "--status", "paused")
    assert listed.exit_code == 0
    assert "1 projects (local)" in listed.output
    assert "Zine" in listed.output

    out_dir = tmp_path / "exports"
    out_dir.mkdir()
    exported = _invoke(data_dir, "export", "--format", "csv", "--output", str(out_dir))
    assert exported.exit_code == 0
    files = list(out_dir.glob("projects-backup-*.csv"))
    assert len(files) == 1
    assert "Garden Planner" in files[0].read_text(encoding="utf-8")


def test_cli_import_rejects_bad_file(tmp_path: Path) -> None:
    bad = tmp_path / "notes.md"
    bad.write_text("# Project Backup\n", encoding="utf-8")
    result = _invoke(tmp_path / "data", "import", str(bad))
    assert result.exit_code == 1


def test_cli_sign_in_migrate_and_status(tmp_path: Path, backup_file: Path) -> None:
    data_dir = tmp_path / "data"
    assert _invoke(data_dir, "migrate").exit_code == 1

    _invoke(data_dir, "import", str(backup_file))
    signed_in = _invoke(data_dir, "sign-in", "Ada@Example.com")
    assert signed_in.exit_code == 0
    assert "Signed in as ada@example.com" in signed_in.output
    assert "sanctuary migrate" in signed_in.output

    migrated = _invoke(data_dir, "migrate")
    assert migrated.exit_code == 0
    assert "Migrated 2 projects and 0 mood entries" in migrated.output
    assert "Nothing to migrate" in _invoke(data_dir, "migrate").output

    status = _invoke(data_dir, "status")
    assert "Signed in: ada@example.com" in status.output
    assert "Backend:   hosted" in status.output

    assert "Signed out" in _invoke(data_dir, "sign-out").output
    after = _invoke(data_dir, "list")
    assert "0 projects (local)" in after.output


def test_module_entrypoint_invokes_cli_app(monkeypatch) -> None:
    called = {"count": 0}

    def fake_app() -> None:
        called["count"] += 1

    monkeypatch.setattr("sanctuary.cli.app", fake_app)
    runpy.run_module("sanctuary.__main__", run_name="__main__")
    assert called["count"] == 1
