"""Dashboard page: role, stats, capture forms and the project lists."""

from __future__ import annotations

from collections.abc import Callable

from nicegui import ui
from result import Err, Ok, Result

from sanctuary.models.mood import Mood
from sanctuary.models.projects import ArchiveKind, Project, ProjectDraft, ProjectStatus
from sanctuary.models.roles import (
    DEFAULT_ROLE_ID,
    USER_ROLES,
    project_types_for,
    templates_for,
)
from sanctuary.services import lifecycle
from sanctuary.services.container import ServiceContainer
from sanctuary.ui.components.migration_prompt import migration_prompt
from sanctuary.ui.deps import get_services
from sanctuary.ui.layout import error_banner, page_layout, stat_card, submit_button
from sanctuary.ui.theme import (
    COLORS,
    STATUS_COLORS,
    STATUS_ICONS,
    archive_kind_label,
    format_datetime,
    format_relative_time,
)


def _notify_result(result: Result[object, str], success: str) -> bool:
    if isinstance(result, Err):
        ui.notify(result.err_value, type="negative")
        return False
    ui.notify(success, type="positive")
    return True


async def _open_archive_dialog(
    svc: ServiceContainer, project: Project, refresh: Callable[[], None]
) -> None:
    with ui.dialog() as dialog, ui.card().classes("w-96"):
        ui.label(f"Archive '{project.title}'").classes("text-lg font-bold")
        kind = ui.select(
            {k.value: archive_kind_label(k) for k in ArchiveKind},
            value=ArchiveKind.TEMPORARY.value,
            label="Why are you setting it aside?",
        ).classes("w-full")
        reason = ui.input("Reason").classes("w-full")
        farewell = ui.textarea("Farewell note").classes("w-full")
        lessons = ui.textarea("Lessons learned").classes("w-full")

        async def confirm() -> None:
            result = await svc.project_service.archive_project(
                project.id,
                ArchiveKind(kind.value),
                farewell_note=farewell.value or "",
                lessons_learned=lessons.value or "",
                reason=reason.value or "",
            )
            if _notify_result(result, "Project archived"):
                dialog.close()
                refresh()

        with ui.row().classes("justify-end w-full gap-2"):
            ui.button("Cancel", on_click=dialog.close).props("flat")
            submit_button("Archive", confirm, icon="inventory_2")
    dialog.open()


def _project_card(svc: ServiceContainer, project: Project, refresh: Callable[[], None]) -> None:
    projects = svc.project_service
    color = STATUS_COLORS[project.status]

    async def set_status(target: ProjectStatus) -> None:
        _notify_result(await projects.change_status(project.id, target), f"Moved to {target.value}")
        refresh()

    async def work_on() -> None:
        if _notify_result(await projects.work_on(project.id), "Nice, progress logged"):
            await svc.mood_service.record_activity()
        refresh()

    async def revive() -> None:
        _notify_result(await projects.revive_project(project.id), "Welcome back")
        refresh()

    async def delete() -> None:
        _notify_result(await projects.delete_project(project.id), "Project deleted")
        refresh()

    async def archive() -> None:
        await _open_archive_dialog(svc, project, refresh)

    with (
        ui.card()
        .classes("w-full p-3")
        .style(f"border-left: 4px solid {color}; background-color: {COLORS['surface']}")
    ):
        with ui.row().classes("w-full items-center justify-between"):
            with ui.column().classes("gap-0"):
                ui.label(project.title).classes("font-bold")
                ui.label(
                    f"{project.type} · active {format_relative_time(project.last_activity)}"
                ).classes("text-xs").style(f"color: {COLORS['text_muted']}")
            with ui.row().classes("gap-1"):
                if project.status is ProjectStatus.ARCHIVED:
                    ui.button(icon="restore", on_click=revive).props("flat dense round").tooltip(
                        "Revive"
                    )
                else:
                    ui.button(icon="bolt", on_click=work_on).props("flat dense round").tooltip(
                        "Worked on it"
                    )
                    for target in (ProjectStatus.ACTIVE, ProjectStatus.PAUSED, ProjectStatus.COMPLETED):
                        if lifecycle.can_transition(project.status, target):
                            ui.button(
                                icon=STATUS_ICONS[target],
                                on_click=lambda _e=None, t=target: set_status(t),
                            ).props("flat dense round").tooltip(f"Mark {target.value}")
                    ui.button(icon="inventory_2", on_click=archive).props(
                        "flat dense round"
                    ).tooltip("Archive")
                ui.button(icon="delete", on_click=delete).props(
                    "flat dense round color=negative"
                ).tooltip("Delete")
        if project.description:
            ui.label(project.description).classes("text-sm")
        if project.archive is not None and project.status is ProjectStatus.ARCHIVED:
            ui.label(
                f"{archive_kind_label(project.archive.kind)} · archived "
                f"{format_datetime(project.archive.archived_at)}"
            ).classes("text-xs italic")


def setup() -> None:
    """Register the dashboard page."""

    @ui.page("/")
    async def dashboard_page() -> None:
        svc = get_services()
        gate = svc.session_gate
        projects = svc.project_service

        with page_layout("Projects", projects.backend_name):
            if gate.is_loading:
                ui.spinner(size="lg")
                return

            migration_prompt(gate, on_done=lambda: ui.navigate.to("/"))

            role_result = await svc.profile_service.current_role()
            if isinstance(role_result, Err):
                error_banner(role_result.err_value)
                role_id = DEFAULT_ROLE_ID
            else:
                role_id = role_result.ok_value or DEFAULT_ROLE_ID

            @ui.refreshable
            def stats_row() -> None:
                counts = projects.stats()
                with ui.row().classes("w-full gap-4 flex-wrap"):
                    for status in ProjectStatus:
                        stat_card(
                            status.value.title(),
                            counts.get(status, 0),
                            STATUS_ICONS[status],
                            STATUS_COLORS[status],
                        )

            @ui.refreshable
            def project_lists() -> None:
                if not projects.projects:
                    ui.label("No projects yet. Capture an idea above to begin.").classes(
                        "opacity-60"
                    )
                    return
                for status in ProjectStatus:
                    group = projects.by_status(status)
                    if not group:
                        continue
                    ui.label(f"{status.value.title()} ({len(group)})").classes("font-bold mt-2")
                    for project in group:
                        _project_card(svc, project, refresh)

            def refresh() -> None:
                stats_row.refresh()
                project_lists.refresh()

            async def choose_role(e) -> None:  # noqa: ANN001
                result = await svc.profile_service.select_role(e.value)
                if _notify_result(result, "Role saved"):
                    ui.navigate.to("/")

            with ui.row().classes("w-full items-center justify-between"):
                ui.label("Your projects").classes("text-2xl font-bold")
                ui.select(
                    {role.id: role.title for role in USER_ROLES},
                    value=role_id,
                    label="I work as a",
                    on_change=choose_role,
                ).classes("min-w-40")

            stats_row()

            with ui.row().classes("w-full gap-4 items-start"):
                with ui.card().classes("flex-1 p-4"):
                    ui.label("New project").classes("font-bold")
                    title = ui.input("Title").classes("w-full")
                    types = project_types_for(role_id)
                    kind = ui.select(types, value=types[0], label="Type").classes("w-full")
                    description = ui.textarea("Description").classes("w-full")

                    async def add_project() -> None:
                        draft = ProjectDraft(
                            title=title.value or "",
                            type=kind.value or "",
                            description=description.value or "",
                        )
                        result = await projects.create_project(draft, role_id)
                        if _notify_result(result, "Project added"):
                            title.value = ""
                            description.value = ""
                            refresh()

                    submit_button("Add", add_project, icon="add").props("dense")

                with ui.card().classes("flex-1 p-4"):
                    ui.label("Quick capture").classes("font-bold")
                    idea = ui.textarea("Jot down an idea").classes("w-full")

                    async def capture() -> None:
                        result = await projects.quick_capture(idea.value or "", role_id)
                        if _notify_result(result, "Idea captured"):
                            idea.value = ""
                            refresh()

                    submit_button("Capture", capture, icon="lightbulb").props("dense")

                    templates = templates_for(role_id)
                    if templates:
                        ui.label("Start from a template").classes("text-sm mt-2")
                        with ui.row().classes("gap-1 flex-wrap"):
                            for template in templates:

                                async def use(t=template) -> None:  # noqa: ANN001
                                    result = await projects.apply_template(t, role_id)
                                    if _notify_result(result, f"Started '{t.title}'"):
                                        refresh()

                                submit_button(template.title, use).props("outline dense")

                with ui.card().classes("flex-1 p-4"):
                    ui.label("How are you feeling?").classes("font-bold")
                    mood = ui.select([m.value for m in Mood], value=Mood.NEUTRAL.value).classes(
                        "w-full"
                    )
                    energy = ui.slider(min=1, max=5, value=3).props("label")

                    async def log_mood() -> None:
                        result = await svc.mood_service.log_mood(Mood(mood.value), int(energy.value))
                        _notify_result(result, "Check-in saved")

                    submit_button("Check in", log_mood, icon="favorite").props("dense")
                    streak = await svc.mood_service.streak()
                    if isinstance(streak, Ok):
                        ui.label(
                            f"Streak: {streak.ok_value.current_streak} days "
                            f"(best {streak.ok_value.longest_streak})"
                        ).classes("text-xs mt-2")

            project_lists()
