"""Project entity and archive sub-record."""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class ProjectStatus(StrEnum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class ArchiveKind(StrEnum):
    TEMPORARY = "temporary"
    PERMANENT = "permanent"
    COMPLETED = "completed"


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def new_project_id() -> str:
    """Client-side id for a new project."""
    return str(uuid.uuid4())


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ArchiveRecord(_CamelModel):
    """Farewell, lessons-learned and reason bundle attached on archive."""

    kind: ArchiveKind = Field(default=ArchiveKind.TEMPORARY, alias="archiveType")
    farewell_note: str = ""
    lessons_learned: str = ""
    reason: str = Field(default="", alias="reasonForArchiving")
    archived_at: datetime = Field(default_factory=utc_now)

    @field_validator("archived_at", mode="after")
    @classmethod
    def _normalize_archived_at(cls, value: datetime) -> datetime:
        return _as_utc(value)


class Project(_CamelModel):
    """A tracked project.

    Instances are immutable; every mutation produces a new copy so that an
    in-memory collection is never partially modified.
    """

    id: str = Field(default_factory=new_project_id)
    title: str
    type: str = ""
    status: ProjectStatus = ProjectStatus.ACTIVE
    description: str = ""
    notes: str = ""
    user_role: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    last_activity: datetime = Field(default_factory=utc_now)
    owner_id: str | None = Field(default=None, alias="userId")
    archive: ArchiveRecord | None = Field(default=None, alias="archiveData")

    @field_validator("title", mode="after")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "title must not be empty"
            raise ValueError(msg)
        return value.strip()

    @field_validator("created_at", "last_activity", mode="after")
    @classmethod
    def _normalize_timestamps(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @model_validator(mode="after")
    def _check_invariants(self) -> Project:
        if self.last_activity < self.created_at:
            msg = "last_activity must not precede created_at"
            raise ValueError(msg)
        if self.status is ProjectStatus.ARCHIVED and self.archive is None:
            msg = "archived projects require an archive record"
            raise ValueError(msg)
        return self

    @property
    def is_archived(self) -> bool:
        return self.status is ProjectStatus.ARCHIVED


class ProjectDraft(BaseModel):
    """User-entered fields for a new project."""

    title: str
    type: str = ""
    description: str = ""
    notes: str = ""


def sort_by_activity(projects: Iterable[Project]) -> list[Project]:
    """Newest activity first."""
    return sorted(projects, key=lambda p: p.last_activity, reverse=True)


def count_by_status(projects: Iterable[Project]) -> dict[ProjectStatus, int]:
    counts = dict.fromkeys(ProjectStatus, 0)
    for project in projects:
        counts[project.status] += 1
    return counts
