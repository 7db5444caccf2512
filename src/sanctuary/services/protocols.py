"""Protocol definitions for services."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeAlias

from result import Result

from sanctuary.models.projects import Project
from sanctuary.models.session import AuthEvent, AuthSession

AuthListener: TypeAlias = Callable[[AuthEvent, AuthSession | None], Awaitable[None]]
Unsubscribe: TypeAlias = Callable[[], None]


class ProjectBackendProtocol(Protocol):
    """Persistence contract shared by the local and hosted backends."""

    @property
    def name(self) -> str: ...

    async def list(self) -> Result[list[Project], str]: ...

    async def create(self, project: Project) -> Result[None, str]: ...

    async def update(self, project: Project) -> Result[None, str]: ...

    async def delete(self, project_id: str) -> Result[None, str]: ...


class AuthProviderProtocol(Protocol):
    """External identity collaborator."""

    async def get_session(self) -> AuthSession | None: ...

    def subscribe(self, listener: AuthListener) -> Unsubscribe: ...
