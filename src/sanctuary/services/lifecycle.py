"""Project lifecycle state machine.

Pure functions: each takes a project and returns a new copy (or an error)
without touching storage. ``archived`` is entered only through :func:`archive`
so the status and archive record always change together.
"""

from __future__ import annotations

from datetime import datetime

from result import Err, Ok, Result

from sanctuary.models.projects import ArchiveKind, ArchiveRecord, Project, ProjectStatus, utc_now

ALLOWED_TRANSITIONS: dict[ProjectStatus, frozenset[ProjectStatus]] = {
    ProjectStatus.ACTIVE: frozenset(
        {ProjectStatus.PAUSED, ProjectStatus.COMPLETED, ProjectStatus.ARCHIVED}
    ),
    ProjectStatus.PAUSED: frozenset(
        {ProjectStatus.ACTIVE, ProjectStatus.COMPLETED, ProjectStatus.ARCHIVED}
    ),
    ProjectStatus.COMPLETED: frozenset(
        {ProjectStatus.ACTIVE, ProjectStatus.PAUSED, ProjectStatus.ARCHIVED}
    ),
    ProjectStatus.ARCHIVED: frozenset({ProjectStatus.ACTIVE}),
}


def can_transition(current: ProjectStatus, target: ProjectStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def _advance(project: Project, now: datetime | None) -> datetime:
    """A last-activity value that never moves backwards."""
    return max(now or utc_now(), project.last_activity)


def touch(project: Project, now: datetime | None = None) -> Project:
    """Record work on a project without changing anything else."""
    return project.model_copy(update={"last_activity": _advance(project, now)})


def change_status(
    project: Project, target: ProjectStatus, now: datetime | None = None
) -> Result[Project, str]:
    """Move between active, paused and completed."""
    if target is ProjectStatus.ARCHIVED:
        return Err("Use the archive action to archive a project")
    if project.status is ProjectStatus.ARCHIVED:
        return Err("Archived projects must be revived before changing status")
    if target is project.status:
        return Err(f"Project is already {target.value}")
    if not can_transition(project.status, target):
        return Err(f"Cannot move a {project.status.value} project to {target.value}")
    return Ok(
        project.model_copy(update={"status": target, "last_activity": _advance(project, now)})
    )


def archive(
    project: Project,
    kind: ArchiveKind = ArchiveKind.TEMPORARY,
    *,
    farewell_note: str = "",
    lessons_learned: str = "",
    reason: str = "",
    now: datetime | None = None,
) -> Result[Project, str]:
    """Archive a project, attaching the farewell record in the same step."""
    if not can_transition(project.status, ProjectStatus.ARCHIVED):
        return Err(f"Cannot archive a {project.status.value} project")
    stamp = _advance(project, now)
    record = ArchiveRecord(
        kind=kind,
        farewell_note=farewell_note,
        lessons_learned=lessons_learned,
        reason=reason,
        archived_at=stamp,
    )
    return Ok(
        project.model_copy(
            update={"status": ProjectStatus.ARCHIVED, "archive": record, "last_activity": stamp}
        )
    )


def revive(project: Project, now: datetime | None = None) -> Result[Project, str]:
    """Bring an archived project back; its archive record is kept as history."""
    if project.status is not ProjectStatus.ARCHIVED:
        return Err("Only archived projects can be revived")
    return Ok(
        project.model_copy(
            update={"status": ProjectStatus.ACTIVE, "last_activity": _advance(project, now)}
        )
    )


def edit(
    project: Project,
    *,
    title: str | None = None,
    type: str | None = None,
    description: str | None = None,
    notes: str | None = None,
    now: datetime | None = None,
) -> Result[Project, str]:
    """Manual edit of the free-text fields."""
    update: dict[str, object] = {}
    if title is not None:
        if not title.strip():
            return Err("Project title cannot be empty")
        update["title"] = title.strip()
    if type is not None:
        update["type"] = type
    if description is not None:
        update["description"] = description
    if notes is not None:
        update["notes"] = notes
    update["last_activity"] = _advance(project, now)
    return Ok(project.model_copy(update=update))


def append_note(project: Project, text: str, now: datetime | None = None) -> Result[Project, str]:
    """Append a paragraph to the project's notes."""
    if not text.strip():
        return Err("Note cannot be empty")
    notes = f"{project.notes.rstrip()}\n\n{text.strip()}" if project.notes.strip() else text.strip()
    return edit(project, notes=notes, now=now)
