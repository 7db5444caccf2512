"""NiceGUI application bootstrap: service init, page registration, run_app()."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nicegui import app, ui

from sanctuary.services.container import ServiceContainer
from sanctuary.ui.deps import get_services, set_services
from sanctuary.ui.pages import account, backup, dashboard

if TYPE_CHECKING:
    from sanctuary.config import Config

logger = logging.getLogger(__name__)


def register_pages() -> None:
    dashboard.setup()
    backup.setup()
    account.setup()


def run_app(config: Config) -> None:
    """Entry point: wire services on startup, register pages and serve."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    async def startup() -> None:
        logger.info("Starting Sanctuary, data in %s", config.data_dir)
        services = await ServiceContainer.create(config)
        set_services(services)
        await services.session_gate.initialize()

    async def shutdown() -> None:
        try:
            await get_services().close()
        except Exception:
            logger.exception("Error while shutting down services")
        finally:
            set_services(None)

    app.on_startup(startup)
    app.on_shutdown(shutdown)
    register_pages()

    ui.run(
        host=config.host,
        port=config.port,
        title="Project Sanctuary",
        favicon="🌿",
        reload=False,
        show=False,
    )
