"""Offer to move device data into the signed-in account."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from nicegui import ui
from result import Err

from sanctuary.ui.layout import submit_button
from sanctuary.ui.theme import COLORS

if TYPE_CHECKING:
    from sanctuary.services.session_gate import SessionGate


def migration_prompt(gate: SessionGate, on_done: Callable[[], Awaitable[None] | None]) -> None:
    """Render the one-time sync offer when the gate has one pending."""
    if not gate.migration_offered:
        return

    async def finish() -> None:
        outcome = on_done()
        if outcome is not None:
            await outcome

    async def accept() -> None:
        result = await gate.accept_migration()
        if isinstance(result, Err):
            ui.notify(result.err_value, type="negative")
            return
        report = result.ok_value
        ui.notify(
            f"Synced {report.projects_migrated} projects to your account",
            type="positive",
        )
        await finish()

    async def dismiss() -> None:
        await gate.dismiss_migration()
        ui.notify("Your local data stays on this device")
        await finish()

    with (
        ui.card()
        .classes("w-full p-4")
        .style(f"background-color: {COLORS['accent']}18; border: 1px solid {COLORS['accent']}")
    ):
        ui.label("Sync your local data?").classes("font-bold")
        ui.label(
            "Projects, mood check-ins and your streak saved on this device can be moved "
            "into your account. This is offered only once."
        ).classes("text-sm")
        with ui.row().classes("gap-2 mt-2"):
            submit_button("Sync now", accept, icon="cloud_sync").props("dense")
            submit_button("Keep on this device", dismiss).props("outline dense")
