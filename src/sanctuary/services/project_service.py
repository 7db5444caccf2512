"""Project service: the in-memory collection and its mutations.

Every mutation is validated by the lifecycle, written to the active backend,
and only then applied to the in-memory collection. A failed write leaves the
collection exactly as it was.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from result import Err, Ok, Result

from sanctuary.models.projects import (
    ArchiveKind,
    Project,
    ProjectDraft,
    ProjectStatus,
    count_by_status,
    new_project_id,
    sort_by_activity,
    utc_now,
)
from sanctuary.models.roles import QUICK_CAPTURE_TYPE, ProjectTemplate, default_project_type
from sanctuary.services import lifecycle

if TYPE_CHECKING:
    from sanctuary.services.backends import BackendSelector

logger = logging.getLogger(__name__)


class ProjectService:
    """Service for project state and persistence."""

    def __init__(self, selector: BackendSelector) -> None:
        self._selector = selector
        self._projects: tuple[Project, ...] = ()

    @property
    def projects(self) -> tuple[Project, ...]:
        return self._projects

    @property
    def backend_name(self) -> str:
        return self._selector.active.name

    def get(self, project_id: str) -> Project | None:
        return next((p for p in self._projects if p.id == project_id), None)

    def by_status(self, status: ProjectStatus) -> list[Project]:
        return [p for p in self._projects if p.status is status]

    def stats(self) -> dict[ProjectStatus, int]:
        return count_by_status(self._projects)

    async def load(self) -> Result[list[Project], str]:
        """Replace the in-memory collection with the active backend's contents."""
        backend = self._selector.active
        logger.info("Loading projects from %s backend", backend.name)
        result = await backend.list()
        if isinstance(result, Err):
            return result
        self._projects = tuple(result.ok_value)
        return Ok(list(self._projects))

    def clear(self) -> None:
        self._projects = ()

    # -- creation ---------------------------------------------------------

    async def create_project(
        self, draft: ProjectDraft, role_id: str, now: datetime | None = None
    ) -> Result[Project, str]:
        if not draft.title.strip():
            return Err("Project title cannot be empty")
        stamp = now or utc_now()
        owner = self._selector.owner
        project = Project(
            id=new_project_id(),
            title=draft.title,
            type=draft.type or default_project_type(role_id),
            status=ProjectStatus.ACTIVE,
            description=draft.description,
            notes=draft.notes,
            user_role=role_id,
            created_at=stamp,
            last_activity=stamp,
            owner_id=owner.id if owner else None,
        )
        return await self._add(project)

    async def quick_capture(self, text: str, role_id: str) -> Result[Project, str]:
        """Capture a raw idea: first line is the title, the rest the description."""
        if not text.strip():
            return Err("Nothing to capture")
        first_line = text.strip().splitlines()[0].strip()
        draft = ProjectDraft(
            title=first_line or "Quick Capture",
            type=QUICK_CAPTURE_TYPE,
            description=text.strip(),
        )
        return await self.create_project(draft, role_id)

    async def apply_template(self, template: ProjectTemplate, role_id: str) -> Result[Project, str]:
        draft = ProjectDraft(
            title=template.title,
            type=template.type,
            description=template.description,
            notes=template.notes,
        )
        return await self.create_project(draft, role_id)

    async def _add(self, project: Project) -> Result[Project, str]:
        result = await self._selector.active.create(project)
        if isinstance(result, Err):
            return result
        self._projects = (project, *self._projects)
        logger.info("Added project %s (%d total)", project.id, len(self._projects))
        return Ok(project)

    # -- mutation ---------------------------------------------------------

    async def _mutate(
        self,
        project_id: str,
        change: Callable[[Project], Result[Project, str]],
    ) -> Result[Project, str]:
        current = self.get(project_id)
        if current is None:
            return Err(f"Project {project_id} not found")
        changed = change(current)
        if isinstance(changed, Err):
            return changed
        updated = changed.ok_value
        written = await self._selector.active.update(updated)
        if isinstance(written, Err):
            return written
        self._projects = tuple(updated if p.id == project_id else p for p in self._projects)
        return Ok(updated)

    async def edit_project(
        self,
        project_id: str,
        *,
        title: str | None = None,
        type: str | None = None,
        description: str | None = None,
        notes: str | None = None,
    ) -> Result[Project, str]:
        return await self._mutate(
            project_id,
            lambda p: lifecycle.edit(
                p, title=title, type=type, description=description, notes=notes
            ),
        )

    async def append_note(self, project_id: str, text: str) -> Result[Project, str]:
        return await self._mutate(project_id, lambda p: lifecycle.append_note(p, text))

    async def change_status(self, project_id: str, status: ProjectStatus) -> Result[Project, str]:
        return await self._mutate(project_id, lambda p: lifecycle.change_status(p, status))

    async def archive_project(
        self,
        project_id: str,
        kind: ArchiveKind = ArchiveKind.TEMPORARY,
        *,
        farewell_note: str = "",
        lessons_learned: str = "",
        reason: str = "",
        now: datetime | None = None,
    ) -> Result[Project, str]:
        return await self._mutate(
            project_id,
            lambda p: lifecycle.archive(
                p,
                kind,
                farewell_note=farewell_note,
                lessons_learned=lessons_learned,
                reason=reason,
                now=now,
            ),
        )

    async def revive_project(self, project_id: str) -> Result[Project, str]:
        return await self._mutate(project_id, lifecycle.revive)

    async def work_on(self, project_id: str) -> Result[Project, str]:
        """Record work on a project; only last-activity changes."""
        return await self._mutate(project_id, lambda p: Ok(lifecycle.touch(p)))

    async def delete_project(self, project_id: str) -> Result[None, str]:
        """Permanent, irreversible removal."""
        if self.get(project_id) is None:
            return Err(f"Project {project_id} not found")
        result = await self._selector.active.delete(project_id)
        if isinstance(result, Err):
            return result
        self._projects = tuple(p for p in self._projects if p.id != project_id)
        return Ok(None)

    # -- bulk -------------------------------------------------------------

    async def import_projects(self, projects: Iterable[Project]) -> Result[list[Project], str]:
        """Persist already-parsed imports; only successful writes join the collection."""
        owner = self._selector.owner
        added: list[Project] = []
        failed = 0
        for project in projects:
            stored = project.model_copy(update={"owner_id": owner.id if owner else None})
            result = await self._selector.active.create(stored)
            if isinstance(result, Err):
                logger.error("Error importing project %r: %s", project.title, result.err_value)
                failed += 1
                continue
            added.append(stored)
        self._projects = (*added, *self._projects)
        if failed:
            return Err(f"Imported {len(added)} projects; {failed} could not be saved")
        return Ok(added)

    async def auto_archive_inactive(
        self, days: int, now: datetime | None = None
    ) -> list[Project]:
        """Archive active or paused projects idle for more than ``days``."""
        stamp = now or utc_now()
        cutoff = stamp - timedelta(days=days)
        stale = [
            p
            for p in self._projects
            if p.status in (ProjectStatus.ACTIVE, ProjectStatus.PAUSED) and p.last_activity < cutoff
        ]
        archived: list[Project] = []
        for project in stale:
            result = await self.archive_project(
                project.id,
                ArchiveKind.TEMPORARY,
                reason=f"Inactive for {days} days",
                now=stamp,
            )
            if isinstance(result, Ok):
                archived.append(result.ok_value)
        if archived:
            logger.info("Auto-archived %d inactive projects", len(archived))
        self._projects = tuple(sort_by_activity(self._projects))
        return archived
