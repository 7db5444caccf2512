"""Typer CLI for Sanctuary: serve the web UI and manage data from a terminal."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated, TypeVar

import typer
from result import Err

from sanctuary.config import Config
from sanctuary.models.exchange import ExportFormat, ExportOptions
from sanctuary.models.projects import ProjectStatus
from sanctuary.services.container import ServiceContainer

T = TypeVar("T")

app = typer.Typer(
    name="sanctuary",
    help="Project Sanctuary: track projects locally and sync them when signed in.",
    invoke_without_command=True,
)

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", envvar="SANCTUARY_DATA_DIR", help="Directory holding the databases"),
]


def _config(data_dir: Path | None, **overrides: object) -> Config:
    if data_dir is None:
        return Config(**overrides)  # type: ignore[arg-type]
    return Config(data_dir=data_dir, **overrides)  # type: ignore[arg-type]


def _run(config: Config, action: Callable[[ServiceContainer], Awaitable[T]]) -> T:
    """Open the services, resolve the session, run ``action`` and close."""

    async def runner() -> T:
        services = await ServiceContainer.create(config)
        try:
            await services.session_gate.initialize()
            return await action(services)
        finally:
            await services.close()

    return asyncio.run(runner())


def _fail(message: str) -> typer.Exit:
    typer.echo(message, err=True)
    return typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def serve(
    ctx: typer.Context,
    data_dir: DataDirOption = None,
    host: Annotated[str, typer.Option("--host", envvar="SANCTUARY_HOST")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", envvar="SANCTUARY_PORT")] = 8420,
    site_url: Annotated[
        str | None,
        typer.Option("--site-url", envvar="SANCTUARY_SITE_URL", help="Public base URL for OAuth redirects"),
    ] = None,
    google_client_id: Annotated[str, typer.Option(envvar="SANCTUARY_GOOGLE_CLIENT_ID", hidden=True)] = "",
    google_client_secret: Annotated[
        str, typer.Option(envvar="SANCTUARY_GOOGLE_CLIENT_SECRET", hidden=True)
    ] = "",
    dropbox_client_id: Annotated[str, typer.Option(envvar="SANCTUARY_DROPBOX_CLIENT_ID", hidden=True)] = "",
    dropbox_client_secret: Annotated[
        str, typer.Option(envvar="SANCTUARY_DROPBOX_CLIENT_SECRET", hidden=True)
    ] = "",
    onedrive_client_id: Annotated[
        str, typer.Option(envvar="SANCTUARY_ONEDRIVE_CLIENT_ID", hidden=True)
    ] = "",
    onedrive_client_secret: Annotated[
        str, typer.Option(envvar="SANCTUARY_ONEDRIVE_CLIENT_SECRET", hidden=True)
    ] = "",
) -> None:
    """Start the Sanctuary web application."""
    if ctx.invoked_subcommand is not None:
        return
    config = _config(
        data_dir,
        host=host,
        port=port,
        site_url=site_url or f"http://{host}:{port}",
        google_client_id=google_client_id,
        google_client_secret=google_client_secret,
        dropbox_client_id=dropbox_client_id,
        dropbox_client_secret=dropbox_client_secret,
        onedrive_client_id=onedrive_client_id,
        onedrive_client_secret=onedrive_client_secret,
    )
    from sanctuary.ui.app import run_app

    run_app(config)


@app.command("list")
def list_projects(
    data_dir: DataDirOption = None,
    status: Annotated[
        ProjectStatus | None, typer.Option("--status", help="Only show projects in this status")
    ] = None,
) -> None:
    """List projects from the active backend, most recently active first."""

    async def action(services: ServiceContainer) -> None:
        svc = services.project_service
        projects = svc.by_status(status) if status else list(svc.projects)
        typer.echo(f"{len(projects)} projects ({svc.backend_name})")
        for project in projects:
            typer.echo(
                f"  [{project.status.value:<9}] {project.title}  "
                f"({project.type}, last active {project.last_activity:%Y-%m-%d})"
            )

    _run(_config(data_dir), action)


@app.command("export")
def export_projects(
    data_dir: DataDirOption = None,
    fmt: Annotated[ExportFormat, typer.Option("--format", "-f")] = ExportFormat.JSON,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Target file or directory")
    ] = None,
    include_archived: Annotated[bool, typer.Option("--include-archived/--skip-archived")] = True,
    include_notes: Annotated[bool, typer.Option("--include-notes/--skip-notes")] = True,
) -> None:
    """Export the project collection as JSON, CSV or Markdown."""
    options = ExportOptions(format=fmt, include_archived=include_archived, include_notes=include_notes)

    async def action(services: ServiceContainer) -> Path:
        result = services.export_service.export(services.project_service.projects, options)
        if isinstance(result, Err):
            raise _fail(result.err_value)
        exported = result.ok_value
        target = output or Path.cwd()
        if target.is_dir():
            target = target / exported.filename
        target.write_text(exported.content, encoding="utf-8")
        return target

    written = _run(_config(data_dir), action)
    typer.echo(f"Wrote {written}")


@app.command("import")
def import_projects(
    source: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="JSON backup file")],
    data_dir: DataDirOption = None,
) -> None:
    """Import projects from a JSON backup; each one gets a fresh id."""
    text = source.read_text(encoding="utf-8")

    async def action(services: ServiceContainer) -> int:
        parsed = services.export_service.import_json(text)
        if isinstance(parsed, Err):
            raise _fail(parsed.err_value)
        stored = await services.project_service.import_projects(parsed.ok_value)
        if isinstance(stored, Err):
            raise _fail(stored.err_value)
        return len(stored.ok_value)

    count = _run(_config(data_dir), action)
    typer.echo(f"Imported {count} projects")


@app.command("sign-in")
def sign_in(
    email: Annotated[str, typer.Argument(help="Account email")],
    data_dir: DataDirOption = None,
) -> None:
    """Sign in; the hosted store becomes authoritative."""

    async def action(services: ServiceContainer) -> bool:
        result = await services.auth.sign_in(email)
        if isinstance(result, Err):
            raise _fail(result.err_value)
        return services.session_gate.migration_offered

    offered = _run(_config(data_dir), action)
    typer.echo(f"Signed in as {email.strip().lower()}")
    if offered:
        typer.echo("Local data found on this device. Run `sanctuary migrate` to sync it.")


@app.command("sign-out")
def sign_out(data_dir: DataDirOption = None) -> None:
    """Sign out; the device store becomes authoritative again."""

    async def action(services: ServiceContainer) -> None:
        await services.auth.sign_out()

    _run(_config(data_dir), action)
    typer.echo("Signed out")


@app.command()
def migrate(
    data_dir: DataDirOption = None,
    skip: Annotated[bool, typer.Option("--skip", help="Keep local data and stop offering")] = False,
) -> None:
    """Move device data into the signed-in account, once."""

    async def action(services: ServiceContainer) -> str:
        gate = services.session_gate
        if gate.owner is None:
            raise _fail("Sign in first")
        if not gate.migration_offered:
            return "Nothing to migrate"
        if skip:
            await gate.dismiss_migration()
            return "Migration skipped; local data left on this device"
        result = await gate.accept_migration()
        if isinstance(result, Err):
            raise _fail(result.err_value)
        report = result.ok_value
        return (
            f"Migrated {report.projects_migrated} projects and "
            f"{report.mood_entries_migrated} mood entries"
        )

    typer.echo(_run(_config(data_dir), action))


@app.command()
def status(data_dir: DataDirOption = None) -> None:
    """Show who is signed in and where projects are stored."""

    async def action(services: ServiceContainer) -> list[str]:
        gate = services.session_gate
        svc = services.project_service
        owner = gate.owner
        lines = [
            f"Signed in: {owner.email if owner else 'no'}",
            f"Backend:   {svc.backend_name}",
            f"Migration: {'offered' if gate.migration_offered else 'not pending'}",
        ]
        counts = svc.stats()
        lines.extend(f"  {key.value:<9} {counts.get(key, 0)}" for key in ProjectStatus)
        return lines

    for line in _run(_config(data_dir), action):
        typer.echo(line)
