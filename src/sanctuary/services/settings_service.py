"""Device-local feature settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from sanctuary.data.local_store import SETTINGS_KEY
from sanctuary.models.settings import FeatureSettings

if TYPE_CHECKING:
    from sanctuary.data.local_store import LocalStorage

logger = logging.getLogger(__name__)


class SettingsService:
    """Reads and writes :class:`FeatureSettings` under the ``settings`` key."""

    def __init__(self, storage: LocalStorage) -> None:
        self._storage = storage

    async def load(self) -> FeatureSettings:
        value = await self._storage.get_json(SETTINGS_KEY, {})
        try:
            return FeatureSettings.model_validate(value)
        except ValidationError:
            logger.warning("Resetting unreadable feature settings")
            return FeatureSettings()

    async def save(self, settings: FeatureSettings) -> None:
        await self._storage.set_item(SETTINGS_KEY, settings.model_dump_json(by_alias=True))

    async def update(self, **changes: object) -> FeatureSettings:
        current = await self.load()
        updated = FeatureSettings.model_validate({**current.model_dump(), **changes})
        await self.save(updated)
        return updated
