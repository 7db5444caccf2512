"""Device-local feature settings."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_AUTO_ARCHIVE_DAYS = 90


class FeatureSettings(BaseModel):
    """Preferences persisted under the local ``settings`` key."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email_notifications: bool = True
    weekly_digest: bool = True
    reflection_reminders: bool = True
    reminder_frequency: Literal["daily", "weekly", "monthly"] = "weekly"
    auto_archive: bool = False
    auto_archive_days: int = Field(default=DEFAULT_AUTO_ARCHIVE_DAYS, ge=1)
