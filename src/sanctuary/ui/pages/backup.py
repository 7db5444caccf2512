"""Backup page: export downloads, JSON import and cloud uploads."""

from __future__ import annotations

from nicegui import ui
from result import Err

from sanctuary.models.cloud import CloudProvider, TokenExchangeRequest
from sanctuary.models.exchange import ExportFormat, ExportOptions
from sanctuary.services.cloud_storage import forget_token, load_token, save_token
from sanctuary.ui.deps import get_services
from sanctuary.ui.layout import error_banner, page_layout, submit_button
from sanctuary.ui.theme import COLORS

FORMAT_LABELS = {
    ExportFormat.JSON.value: "JSON (can be imported)",
    ExportFormat.CSV.value: "CSV (spreadsheet)",
    ExportFormat.MARKDOWN.value: "Markdown (readable)",
}


def _register_callback(provider: CloudProvider) -> None:
    @ui.page(f"/auth/{provider.slug}-callback")
    async def oauth_callback(code: str = "", error: str = "") -> None:
        svc = get_services()
        with page_layout(provider.display_name):
            if error or not code:
                error_banner(f"{provider.display_name} authorization was cancelled")
                ui.button("Back to backups", on_click=lambda: ui.navigate.to("/backup"))
                return
            result = await svc.cloud_service.exchange_code(
                TokenExchangeRequest(provider=provider, code=code)
            )
            if isinstance(result, Err):
                error_banner(result.err_value)
                ui.button("Back to backups", on_click=lambda: ui.navigate.to("/backup"))
                return
            await save_token(svc.storage, result.ok_value)
            ui.label(f"Connected to {provider.display_name}").classes("text-xl font-bold")
            ui.button("Back to backups", on_click=lambda: ui.navigate.to("/backup"))


def setup() -> None:
    """Register the backup page and the OAuth callbacks."""
    for provider in CloudProvider:
        _register_callback(provider)

    @ui.page("/backup")
    async def backup_page() -> None:
        svc = get_services()
        projects = svc.project_service

        with page_layout("Backup", projects.backend_name):
            ui.label("Backup & Restore").classes("text-2xl font-bold")
            ui.label(f"{len(projects.projects)} projects in your collection").style(
                f"color: {COLORS['text_muted']}"
            )

            with ui.card().classes("w-full p-4"):
                ui.label("Export").classes("font-bold")
                fmt = ui.select(FORMAT_LABELS, value=ExportFormat.JSON.value, label="Format").classes(
                    "min-w-48"
                )
                include_archived = ui.checkbox("Include archived projects", value=True)
                include_notes = ui.checkbox("Include notes", value=True)

                def options() -> ExportOptions:
                    return ExportOptions(
                        format=ExportFormat(fmt.value),
                        include_archived=bool(include_archived.value),
                        include_notes=bool(include_notes.value),
                    )

                def download() -> None:
                    result = svc.export_service.export(projects.projects, options())
                    if isinstance(result, Err):
                        ui.notify(result.err_value, type="negative")
                        return
                    exported = result.ok_value
                    ui.download(exported.content.encode(), exported.filename)
                    ui.notify(f"Exported {exported.filename}", type="positive")

                ui.button("Download", icon="download", on_click=download).props("dense")

            with ui.card().classes("w-full p-4"):
                ui.label("Import").classes("font-bold")
                ui.label("Paste the contents of a JSON backup. Projects are added with new ids.").classes(
                    "text-sm"
                )
                pasted = ui.textarea("Backup JSON").classes("w-full").props("autogrow")

                async def do_import() -> None:
                    parsed = svc.export_service.import_json(pasted.value or "")
                    if isinstance(parsed, Err):
                        ui.notify(parsed.err_value, type="negative")
                        return
                    stored = await projects.import_projects(parsed.ok_value)
                    if isinstance(stored, Err):
                        ui.notify(stored.err_value, type="warning")
                        return
                    pasted.value = ""
                    ui.notify(f"Imported {len(stored.ok_value)} projects", type="positive")

                submit_button("Import", do_import, icon="upload").props("dense")

            with ui.card().classes("w-full p-4"):
                ui.label("Cloud backup").classes("font-bold")
                for provider in CloudProvider:
                    token = await load_token(svc.storage, provider)
                    with ui.row().classes("items-center gap-2"):
                        ui.label(provider.display_name).classes("min-w-32")
                        if token is None:

                            def connect(_e=None, p=provider) -> None:  # noqa: ANN001
                                url = svc.cloud_service.auth_url(p)
                                if isinstance(url, Err):
                                    ui.notify(url.err_value, type="warning")
                                    return
                                ui.navigate.to(url.ok_value.auth_url)

                            ui.button("Connect", icon="link", on_click=connect).props(
                                "outline dense"
                            )
                            continue

                        async def upload(p=provider, access=token.access_token) -> None:  # noqa: ANN001
                            exported = svc.export_service.export(
                                projects.projects, ExportOptions(format=ExportFormat.JSON)
                            )
                            if isinstance(exported, Err):
                                ui.notify(exported.err_value, type="negative")
                                return
                            file = exported.ok_value
                            receipt = await svc.cloud_service.upload_backup(
                                p, access, file.filename, file.content
                            )
                            if isinstance(receipt, Err):
                                ui.notify(receipt.err_value, type="negative")
                                return
                            ui.notify(f"Backed up to {p.display_name}", type="positive")

                        async def disconnect(_e=None, p=provider) -> None:  # noqa: ANN001
                            await forget_token(svc.storage, p)
                            ui.navigate.to("/backup")

                        submit_button("Back up now", upload, icon="cloud_upload").props("dense")
                        ui.button("Disconnect", on_click=disconnect).props("flat dense")
