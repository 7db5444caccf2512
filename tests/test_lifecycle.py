"""Lifecycle state machine tests."""

from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError
from result import Err, Ok

from sanctuary.models.projects import ArchiveKind, Project, ProjectStatus
from sanctuary.services import lifecycle
from tests.factories import BASE_TIME, make_project

LATER = BASE_TIME + timedelta(days=2)


@pytest.mark.parametrize(
    ("current", "target", "allowed"),
    [
        (ProjectStatus.ACTIVE, ProjectStatus.PAUSED, True),
        (ProjectStatus.ACTIVE, ProjectStatus.COMPLETED, True),
        (ProjectStatus.PAUSED, ProjectStatus.ACTIVE, True),
        (ProjectStatus.COMPLETED, ProjectStatus.ACTIVE, True),
        (ProjectStatus.ARCHIVED, ProjectStatus.ACTIVE, True),
        (ProjectStatus.ARCHIVED, ProjectStatus.PAUSED, False),
        (ProjectStatus.ARCHIVED, ProjectStatus.COMPLETED, False),
        (ProjectStatus.ACTIVE, ProjectStatus.ACTIVE, False),
    ],
)
def test_transition_table(current: ProjectStatus, target: ProjectStatus, allowed: bool) -> None:
    assert lifecycle.can_transition(current, target) is allowed


def test_change_status_moves_and_touches() -> None:
    project = make_project()
    result = lifecycle.change_status(project, ProjectStatus.PAUSED, now=LATER)
    assert isinstance(result, Ok)
    assert result.ok_value.status is ProjectStatus.PAUSED
    assert result.ok_value.last_activity == LATER
    assert project.status is ProjectStatus.ACTIVE


def test_change_status_rejects_archived_target_and_same_status() -> None:
    project = make_project()
    assert isinstance(lifecycle.change_status(project, ProjectStatus.ARCHIVED), Err)
    same = lifecycle.change_status(project, ProjectStatus.ACTIVE)
    assert isinstance(same, Err)
    assert "already active" in same.err_value


def test_archived_project_must_be_revived_first() -> None:
    archived = lifecycle.archive(make_project(), now=LATER).unwrap()
    result = lifecycle.change_status(archived, ProjectStatus.PAUSED)
    assert isinstance(result, Err)
    assert "revived" in result.err_value


def test_archive_attaches_record_in_same_step() -> None:
    project = make_project(status=ProjectStatus.PAUSED)
    result = lifecycle.archive(
        project,
        ArchiveKind.PERMANENT,
        farewell_note="Thanks for the lessons",
        lessons_learned="Scope smaller",
        reason="Lost interest",
        now=LATER,
    )
    assert isinstance(result, Ok)
    archived = result.ok_value
    assert archived.status is ProjectStatus.ARCHIVED
    assert archived.archive is not None
    assert archived.archive.kind is ArchiveKind.PERMANENT
    assert archived.archive.farewell_note == "Thanks for the lessons"
    assert archived.archive.reason == "Lost interest"
    assert archived.archive.archived_at == LATER
    assert archived.last_activity == LATER


def test_archive_twice_is_rejected() -> None:
    archived = lifecycle.archive(make_project()).unwrap()
    assert isinstance(lifecycle.archive(archived), Err)


def test_revive_keeps_archive_record() -> None:
    archived = lifecycle.archive(make_project(), reason="Busy", now=LATER).unwrap()
    result = lifecycle.revive(archived, now=LATER + timedelta(days=1))
    assert isinstance(result, Ok)
    revived = result.ok_value
    assert revived.status is ProjectStatus.ACTIVE
    assert revived.archive is not None
    assert revived.archive.reason == "Busy"


def test_revive_requires_archived_status() -> None:
    assert isinstance(lifecycle.revive(make_project()), Err)


def test_last_activity_never_moves_backwards() -> None:
    project = make_project(last_activity=LATER)
    touched = lifecycle.touch(project, now=BASE_TIME)
    assert touched.last_activity == LATER


def test_touch_changes_only_last_activity() -> None:
    project = make_project()
    touched = lifecycle.touch(project, now=LATER)
    assert touched.model_dump(exclude={"last_activity"}) == project.model_dump(
        exclude={"last_activity"}
    )
    assert touched.last_activity == LATER


def test_edit_and_append_note() -> None:
    project = make_project(notes="First idea")
    edited = lifecycle.edit(project, title="  Renamed  ", now=LATER).unwrap()
    assert edited.title == "Renamed"
    assert isinstance(lifecycle.edit(project, title="   "), Err)

    noted = lifecycle.append_note(edited, "Second idea").unwrap()
    assert noted.notes == "First idea\n\nSecond idea"
    assert isinstance(lifecycle.append_note(edited, "  "), Err)


def test_model_rejects_archived_without_record_and_blank_title() -> None:
    with pytest.raises(ValidationError):
        Project(title="Orphan", status=ProjectStatus.ARCHIVED)
    with pytest.raises(ValidationError):
        Project(title="   ")
    with pytest.raises(ValidationError):
        make_project(last_activity=BASE_TIME - timedelta(seconds=1))
