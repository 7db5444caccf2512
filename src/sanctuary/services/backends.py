"""Local and hosted project backends, and the rule that picks between them."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError
from result import Err, Ok, Result

from sanctuary.data.local_store import PROJECTS_KEY
from sanctuary.models.projects import Project, sort_by_activity
from sanctuary.services._row_helpers import project_to_row, row_to_project

if TYPE_CHECKING:
    from sanctuary.data.local_store import LocalStorage
    from sanctuary.data.repositories import HostedProjectRepository
    from sanctuary.models.session import Owner
    from sanctuary.services.protocols import ProjectBackendProtocol

logger = logging.getLogger(__name__)

PROJECT_LIST_ADAPTER = TypeAdapter(list[Project])


def dump_projects(projects: list[Project]) -> str:
    return PROJECT_LIST_ADAPTER.dump_json(projects, by_alias=True).decode()


def load_projects(raw: str) -> list[Project]:
    """Parse a serialized collection; raises ``ValidationError`` on bad input."""
    return PROJECT_LIST_ADAPTER.validate_json(raw)


class LocalProjectBackend:
    """Whole collection stored as one JSON blob under the ``projects`` key.

    Each mutation reads the blob, modifies it and writes it back in full.
    """

    name = "local"

    def __init__(self, storage: LocalStorage) -> None:
        self._storage = storage

    async def _read(self) -> Result[list[Project], str]:
        try:
            raw = await self._storage.get_item(PROJECTS_KEY)
        except Exception as exc:
            logger.exception("Reading local projects failed")
            return Err(f"Could not read local projects: {exc}")
        if raw is None:
            return Ok([])
        try:
            return Ok(load_projects(raw))
        except ValidationError as exc:
            logger.error("Local project collection is corrupt: %s", exc)
            return Err("Local project data is corrupt")

    async def _write(self, projects: list[Project]) -> Result[None, str]:
        try:
            await self._storage.set_item(PROJECTS_KEY, dump_projects(projects))
        except Exception as exc:
            logger.exception("Writing local projects failed")
            return Err(f"Could not save local projects: {exc}")
        return Ok(None)

    async def list(self) -> Result[list[Project], str]:
        current = await self._read()
        if isinstance(current, Err):
            return current
        return Ok(sort_by_activity(current.ok_value))

    async def create(self, project: Project) -> Result[None, str]:
        current = await self._read()
        if isinstance(current, Err):
            return current
        projects = current.ok_value
        if any(p.id == project.id for p in projects):
            return Err(f"Project {project.id} already exists")
        return await self._write([project.model_copy(update={"owner_id": None}), *projects])

    async def update(self, project: Project) -> Result[None, str]:
        current = await self._read()
        if isinstance(current, Err):
            return current
        projects = current.ok_value
        if not any(p.id == project.id for p in projects):
            return Err(f"Project {project.id} not found")
        stored = project.model_copy(update={"owner_id": None})
        return await self._write([stored if p.id == project.id else p for p in projects])

    async def delete(self, project_id: str) -> Result[None, str]:
        current = await self._read()
        if isinstance(current, Err):
            return current
        projects = current.ok_value
        remaining = [p for p in projects if p.id != project_id]
        if len(remaining) == len(projects):
            return Err(f"Project {project_id} not found")
        return await self._write(remaining)


class HostedProjectBackend:
    """Row-per-project remote table scoped to one owner.

    Failures are logged and reported as ``Err``; nothing is retried.
    """

    name = "hosted"

    def __init__(self, repository: HostedProjectRepository, owner_id: str) -> None:
        self._repo = repository
        self._owner_id = owner_id

    @property
    def owner_id(self) -> str:
        return self._owner_id

    def _owned(self, project: Project) -> Project:
        return project.model_copy(update={"owner_id": self._owner_id})

    async def list(self) -> Result[list[Project], str]:
        try:
            rows = await self._repo.list_rows(self._owner_id)
            return Ok(sort_by_activity(row_to_project(row) for row in rows))
        except Exception as exc:
            logger.error("Loading hosted projects failed: %s", exc)
            return Err("Could not load your projects. Please try again.")

    async def create(self, project: Project) -> Result[None, str]:
        try:
            await self._repo.insert_row(project_to_row(self._owned(project), self._owner_id))
        except Exception as exc:
            logger.error("Error adding project %s to hosted store: %s", project.id, exc)
            return Err("Could not save the project. Please try again.")
        return Ok(None)

    async def update(self, project: Project) -> Result[None, str]:
        try:
            changed = await self._repo.update_row(
                project_to_row(self._owned(project), self._owner_id)
            )
        except Exception as exc:
            logger.error("Error updating project %s: %s", project.id, exc)
            return Err("Could not update the project. Please try again.")
        if changed == 0:
            return Err(f"Project {project.id} not found")
        return Ok(None)

    async def upsert(self, project: Project) -> Result[None, str]:
        """Insert or overwrite by id; safe to repeat."""
        try:
            changed = await self._repo.upsert_row(
                project_to_row(self._owned(project), self._owner_id)
            )
        except Exception as exc:
            logger.error("Error upserting project %s: %s", project.id, exc)
            return Err(f"Could not upload project {project.title!r}")
        if changed == 0:
            logger.error("Project %s is owned by another account", project.id)
            return Err(f"Project {project.title!r} belongs to another account")
        return Ok(None)

    async def delete(self, project_id: str) -> Result[None, str]:
        try:
            changed = await self._repo.delete_row(self._owner_id, project_id)
        except Exception as exc:
            logger.error("Error deleting project %s: %s", project_id, exc)
            return Err("Could not delete the project. Please try again.")
        if changed == 0:
            return Err(f"Project {project_id} not found")
        return Ok(None)


class BackendSelector:
    """Hosted backend when an owner is signed in, local backend otherwise."""

    def __init__(self, local: LocalProjectBackend, hosted_projects: HostedProjectRepository) -> None:
        self._local = local
        self._hosted_projects = hosted_projects
        self._owner: Owner | None = None
        self._hosted: HostedProjectBackend | None = None

    @property
    def owner(self) -> Owner | None:
        return self._owner

    @property
    def is_hosted(self) -> bool:
        return self._owner is not None

    @property
    def local(self) -> LocalProjectBackend:
        return self._local

    def use_owner(self, owner: Owner | None) -> None:
        self._owner = owner
        self._hosted = (
            HostedProjectBackend(self._hosted_projects, owner.id) if owner is not None else None
        )

    def hosted_for(self, owner: Owner) -> HostedProjectBackend:
        return HostedProjectBackend(self._hosted_projects, owner.id)

    @property
    def active(self) -> ProjectBackendProtocol:
        if self._hosted is not None:
            return self._hosted
        return self._local
