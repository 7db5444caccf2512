"""Export/import document models."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sanctuary.models.projects import Project, utc_now


class ExportFormat(StrEnum):
    JSON = "json"
    CSV = "csv"
    MARKDOWN = "markdown"

    @property
    def extension(self) -> str:
        return "md" if self is ExportFormat.MARKDOWN else self.value

    @property
    def media_type(self) -> str:
        match self:
            case ExportFormat.JSON:
                return "application/json"
            case ExportFormat.CSV:
                return "text/csv"
            case ExportFormat.MARKDOWN:
                return "text/markdown"


class ExportOptions(BaseModel):
    format: ExportFormat = ExportFormat.JSON
    include_archived: bool = True
    include_notes: bool = True


class ExportDocument(BaseModel):
    """Full-fidelity JSON export shape, also the only accepted import shape."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    exported_at: datetime = Field(default_factory=utc_now)
    user_role: str = "unknown"
    total_projects: int = 0
    projects: list[Project]


class ExportFile(BaseModel):
    """A rendered export ready for download."""

    filename: str
    content: str
    media_type: str
