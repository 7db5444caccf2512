"""Shared page layout with header and navigation."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from nicegui import ui

from sanctuary.ui.theme import COLORS

if TYPE_CHECKING:
    from nicegui.elements.mixins.disableable_element import DisableableElement

NAV_ITEMS = [
    ("Projects", "/", "dashboard"),
    ("Backup", "/backup", "cloud_upload"),
    ("Account", "/account", "person"),
]


@contextmanager
def page_layout(title: str = "Sanctuary", backend: str = "") -> Generator[None]:
    """Shared page shell with header and nav buttons."""
    ui.colors(
        primary=COLORS["primary"],
        secondary=COLORS["secondary"],
        accent=COLORS["accent"],
        positive=COLORS["success"],
        warning=COLORS["warning"],
        negative=COLORS["error"],
    )
    ui.page_title(f"{title} · Sanctuary")

    with (
        ui.header()
        .classes("items-center justify-between px-4 q-py-sm")
        .style(f"background-color: {COLORS['surface']}; color: {COLORS['text']}")
    ):
        with ui.row().classes("items-center gap-2"):
            ui.icon("spa").classes("text-2xl").style(f"color: {COLORS['primary']}")
            ui.label("Project Sanctuary").classes("text-lg font-bold")
            if backend:
                ui.badge(backend, color="secondary").props("outline")

        with ui.row().classes("items-center gap-1"):
            for label, path, icon in NAV_ITEMS:
                ui.button(
                    label, icon=icon, on_click=lambda _e=None, p=path: ui.navigate.to(p)
                ).props("flat dense").classes("text-xs")

    with ui.column().classes("w-full max-w-6xl mx-auto p-4 gap-4"):
        yield


def error_banner(message: str) -> None:
    """Display an error banner."""
    with (
        ui.card()
        .classes("w-full")
        .style(f"background-color: {COLORS['error']}22; border: 1px solid {COLORS['error']}")
    ):
        with ui.row().classes("items-center gap-2 p-2"):
            ui.icon("error").style(f"color: {COLORS['error']}")
            ui.label(message).style(f"color: {COLORS['error']}")


def stat_card(label: str, value: str | int, icon: str = "info", color: str = "") -> None:
    """Render a statistic card with icon, value, and label."""
    icon_color = color or COLORS["primary"]
    with (
        ui.card()
        .classes("p-4 flex-1 min-w-40")
        .style(f"background-color: {COLORS['surface']}; border: 1px solid {COLORS['border']}")
    ):
        with ui.row().classes("items-center gap-3"):
            ui.icon(icon).classes("text-3xl").style(f"color: {icon_color}")
            with ui.column().classes("gap-0"):
                ui.label(str(value)).classes("text-2xl font-bold")
                ui.label(label).classes("text-xs").style(f"color: {COLORS['text_muted']}")


async def while_disabled(control: DisableableElement, action: Callable[[], Awaitable[None]]) -> None:
    """Run ``action`` with ``control`` disabled; clicks arriving meanwhile are dropped."""
    if not control.enabled:
        return
    control.disable()
    try:
        await action()
    finally:
        control.enable()


def submit_button(
    text: str, action: Callable[[], Awaitable[None]], *, icon: str | None = None
) -> ui.button:
    """A button that stays disabled while its request is outstanding."""
    button = ui.button(text, icon=icon)
    button.on_click(lambda: while_disabled(button, action))
    return button
