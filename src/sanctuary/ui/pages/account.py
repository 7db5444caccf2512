"""Account page: sign in/out, profile and device settings."""

from __future__ import annotations

from nicegui import ui
from pydantic import ValidationError
from result import Err

from sanctuary.models.roles import get_role
from sanctuary.ui.components.migration_prompt import migration_prompt
from sanctuary.ui.deps import get_services
from sanctuary.ui.layout import error_banner, page_layout, submit_button
from sanctuary.ui.theme import COLORS


def setup() -> None:
    """Register the account page."""

    @ui.page("/account")
    async def account_page() -> None:
        svc = get_services()
        gate = svc.session_gate

        with page_layout("Account", svc.project_service.backend_name):
            ui.label("Account").classes("text-2xl font-bold")

            with ui.card().classes("w-full p-4"):
                owner = gate.owner
                if owner is None:
                    ui.label("You are using Sanctuary on this device only.")
                    ui.label(
                        "Sign in to keep your projects in your account across devices."
                    ).classes("text-sm").style(f"color: {COLORS['text_muted']}")
                    email = ui.input("Email").props("type=email").classes("w-80")

                    async def sign_in() -> None:
                        result = await svc.auth.sign_in(email.value or "")
                        if isinstance(result, Err):
                            ui.notify(result.err_value, type="negative")
                            return
                        ui.navigate.to("/account")

                    submit_button("Sign in", sign_in, icon="login").props("dense")
                else:
                    ui.label(f"Signed in as {owner.email}").classes("font-bold")
                    profile = await svc.profile_service.get_profile()
                    if isinstance(profile, Err):
                        error_banner(profile.err_value)
                    elif profile.ok_value is not None and profile.ok_value.role:
                        role = get_role(profile.ok_value.role)
                        ui.label(f"Role: {role.title if role else profile.ok_value.role}")

                    async def sign_out() -> None:
                        await svc.auth.sign_out()
                        ui.navigate.to("/account")

                    ui.button("Sign out", icon="logout", on_click=sign_out).props("outline dense")

            migration_prompt(gate, on_done=lambda: ui.navigate.to("/"))

            settings = await svc.settings_service.load()
            with ui.card().classes("w-full p-4"):
                ui.label("Preferences on this device").classes("font-bold")

                async def save(field: str, value: object) -> None:
                    try:
                        await svc.settings_service.update(**{field: value})
                    except ValidationError:
                        ui.notify("That value is not allowed", type="warning")
                        return
                    ui.notify("Saved", type="positive")

                ui.switch(
                    "Email notifications",
                    value=settings.email_notifications,
                    on_change=lambda e: save("email_notifications", e.value),
                )
                ui.switch(
                    "Weekly digest",
                    value=settings.weekly_digest,
                    on_change=lambda e: save("weekly_digest", e.value),
                )
                ui.switch(
                    "Reflection reminders",
                    value=settings.reflection_reminders,
                    on_change=lambda e: save("reflection_reminders", e.value),
                )
                ui.select(
                    ["daily", "weekly", "monthly"],
                    value=settings.reminder_frequency,
                    label="Reminder frequency",
                    on_change=lambda e: save("reminder_frequency", e.value),
                ).classes("min-w-40")
                with ui.row().classes("items-center gap-4"):
                    ui.switch(
                        "Archive inactive projects",
                        value=settings.auto_archive,
                        on_change=lambda e: save("auto_archive", e.value),
                    )
                    ui.number(
                        "after days",
                        value=settings.auto_archive_days,
                        min=1,
                        format="%d",
                        on_change=lambda e: save("auto_archive_days", int(e.value or 0)),
                    ).classes("w-32")
