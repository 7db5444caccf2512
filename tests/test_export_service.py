"""Export/import codec tests."""

from __future__ import annotations

import csv
import io
import json

import pytest
from result import Err, Ok

from sanctuary.models.exchange import ExportFormat, ExportOptions
from sanctuary.models.projects import ArchiveKind, Project
from sanctuary.services import lifecycle
from sanctuary.services.export_service import (
    CSV_HEADERS,
    IMPORT_ERROR,
    ExportService,
    export_filename,
    parse_import,
    render_csv,
    render_markdown,
)
from tests.factories import BASE_TIME, make_project


@pytest.fixture
def collection() -> list[Project]:
    active = make_project(title="Portfolio Site", notes="Use Astro")
    archived = lifecycle.archive(
        make_project(title="Old Game", type="Tool", user_role="developer"),
        ArchiveKind.PERMANENT,
        farewell_note="Thanks",
        lessons_learned="Prototype first",
        reason="Scope",
        now=BASE_TIME,
    ).unwrap()
    return [active, archived]


def test_export_filename_uses_date_and_extension() -> None:
    assert export_filename(ExportFormat.JSON, BASE_TIME) == "projects-backup-2026-03-01.json"
    assert export_filename(ExportFormat.MARKDOWN, BASE_TIME) == "projects-backup-2026-03-01.md"


def test_json_export_round_trips_everything_but_ids(collection: list[Project]) -> None:
    exported = ExportService().export(collection, ExportOptions(), now=BASE_TIME)
    assert isinstance(exported, Ok)
    file = exported.ok_value
    assert file.media_type == "application/json"

    payload = json.loads(file.content)
    assert payload["totalProjects"] == 2
    assert payload["userRole"] == "developer"
    assert payload["projects"][1]["archiveData"]["archiveType"] == "permanent"
    assert payload["projects"][1]["archiveData"]["reasonForArchiving"] == "Scope"

    imported = parse_import(file.content)
    assert isinstance(imported, Ok)
    restored = imported.ok_value
    assert len(restored) == 2
    for original, copy in zip(collection, restored, strict=True):
        assert copy.id != original.id
        assert copy.model_dump(exclude={"id"}) == original.model_dump(exclude={"id"})


def test_export_options_filter_archived_and_notes(collection: list[Project]) -> None:
    options = ExportOptions(include_archived=False, include_notes=False)
    file = ExportService().export(collection, options, now=BASE_TIME).unwrap()
    payload = json.loads(file.content)
    assert [p["title"] for p in payload["projects"]] == ["Portfolio Site"]
    assert payload["projects"][0]["notes"] == ""


def test_csv_export_has_fixed_header_and_quotes_commas() -> None:
    project = make_project(title="Tea, Biscuits", description='She said "hi"')
    text = render_csv([project])
    rows = list(csv.reader(io.StringIO(text)))
    assert rows[0] == CSV_HEADERS
    assert rows[1][:4] == ["Tea, Biscuits", "Web App", "active", 'She said "hi"']
    assert '"Tea, Biscuits"' in text


def test_markdown_export_sections(collection: list[Project]) -> None:
    text = render_markdown(collection, BASE_TIME, include_notes=True)
    assert text.startswith("# Project Backup - ")
    assert "**Total Projects:** 2" in text
    assert "## Portfolio Site" in text
    assert "- **Notes:** Use Astro" in text
    assert "- **Lessons Learned:** Prototype first" in text
    assert text.count("---") == 2

    without_notes = render_markdown(collection, BASE_TIME, include_notes=False)
    assert "Use Astro" not in without_notes


@pytest.mark.parametrize(
    "text",
    [
        "",
        "not json at all",
        '{"projects": "nope"}',
        "Title,Type,Status\nA,B,active\n",
        "# Project Backup - 1/1/26\n\n## A\n",
        '{"projects": [{"title": "Ghost", "status": "archived"}]}',
        '{"projects": [{"title": "Good"}, {"title": ""}]}',
    ],
)
def test_import_rejects_anything_but_valid_json_export(text: str) -> None:
    result = parse_import(text)
    assert isinstance(result, Err)
    assert result.err_value == IMPORT_ERROR


def test_import_accepts_minimal_document() -> None:
    result = ExportService().import_json('{"projects": [{"title": "Just a title"}]}')
    assert isinstance(result, Ok)
    assert result.ok_value[0].title == "Just a title"
