"""Migration outcome model."""

from __future__ import annotations

from pydantic import BaseModel, Field


class MigrationReport(BaseModel):
    """What a migration attempt transferred and what failed."""

    projects_migrated: int = 0
    mood_entries_migrated: int = 0
    streak_migrated: bool = False
    failures: list[str] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failures
