"""Export service: JSON/CSV/Markdown writers and the JSON importer."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Sequence
from datetime import datetime

from pydantic import ValidationError
from result import Err, Ok, Result

from sanctuary.models.exchange import ExportDocument, ExportFile, ExportFormat, ExportOptions
from sanctuary.models.projects import Project, new_project_id, utc_now

logger = logging.getLogger(__name__)

CSV_HEADERS = ["Title", "Type", "Status", "Description", "Created", "Last Activity"]
IMPORT_ERROR = "Invalid import data. Please check the format and try again."


def _locale_date(value: datetime) -> str:
    return value.astimezone().strftime("%x")


def select_projects(projects: Sequence[Project], options: ExportOptions) -> list[Project]:
    """Apply the include-archived and include-notes switches."""
    chosen = [p for p in projects if options.include_archived or not p.is_archived]
    if not options.include_notes:
        chosen = [p.model_copy(update={"notes": ""}) for p in chosen]
    return chosen


def export_filename(fmt: ExportFormat, now: datetime) -> str:
    return f"projects-backup-{now.date().isoformat()}.{fmt.extension}"


def render_json(projects: Sequence[Project], now: datetime) -> str:
    document = ExportDocument(
        exported_at=now,
        user_role=projects[0].user_role if projects and projects[0].user_role else "unknown",
        total_projects=len(projects),
        projects=list(projects),
    )
    return document.model_dump_json(by_alias=True, indent=2)


def render_csv(projects: Sequence[Project]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for p in projects:
        writer.writerow(
            [
                p.title,
                p.type,
                p.status.value,
                p.description,
                _locale_date(p.created_at),
                _locale_date(p.last_activity),
            ]
        )
    return buffer.getvalue()


def render_markdown(projects: Sequence[Project], now: datetime, include_notes: bool) -> str:
    lines: list[str] = [f"# Project Backup - {_locale_date(now)}", ""]
    lines.append(f"**Total Projects:** {len(projects)}")
    lines.append("")
    for project in projects:
        lines.append(f"## {project.title}")
        lines.append(f"- **Type:** {project.type}")
        lines.append(f"- **Status:** {project.status.value}")
        lines.append(f"- **Created:** {_locale_date(project.created_at)}")
        lines.append(f"- **Last Activity:** {_locale_date(project.last_activity)}")
        if project.description:
            lines.append(f"- **Description:** {project.description}")
        if include_notes and project.notes:
            lines.append(f"- **Notes:** {project.notes}")
        if project.archive is not None:
            lines.append(f"- **Archived:** {project.archive.kind.value}")
            if project.archive.lessons_learned:
                lines.append(f"- **Lessons Learned:** {project.archive.lessons_learned}")
        lines.append("")
        lines.append("---")
        lines.append("")
    return "\n".join(lines)


def parse_import(text: str) -> Result[list[Project], str]:
    """Parse an exported JSON document; all-or-nothing, with fresh ids."""
    if not text.strip():
        return Err(IMPORT_ERROR)
    try:
        document = ExportDocument.model_validate_json(text)
    except ValidationError as exc:
        logger.error("Import error: %s", exc.errors(include_url=False)[:3])
        return Err(IMPORT_ERROR)
    return Ok([p.model_copy(update={"id": new_project_id()}) for p in document.projects])


class ExportService:
    """Service for exporting and importing project collections."""

    def export(
        self,
        projects: Sequence[Project],
        options: ExportOptions,
        now: datetime | None = None,
    ) -> Result[ExportFile, str]:
        stamp = now or utc_now()
        chosen = select_projects(projects, options)
        match options.format:
            case ExportFormat.JSON:
                content = render_json(chosen, stamp)
            case ExportFormat.CSV:
                content = render_csv(chosen)
            case ExportFormat.MARKDOWN:
                content = render_markdown(chosen, stamp, options.include_notes)
            case _:
                return Err(f"Unsupported export format: {options.format}")
        logger.info("Exported %d projects as %s", len(chosen), options.format.value)
        return Ok(
            ExportFile(
                filename=export_filename(options.format, stamp),
                content=content,
                media_type=options.format.media_type,
            )
        )

    def import_json(self, text: str) -> Result[list[Project], str]:
        return parse_import(text)
