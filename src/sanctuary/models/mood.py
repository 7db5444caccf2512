"""Mood log and activity streak models."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sanctuary.models.projects import utc_now

MAX_LOCAL_MOOD_ENTRIES = 30


class Mood(StrEnum):
    ENERGIZED = "energized"
    FOCUSED = "focused"
    CREATIVE = "creative"
    TIRED = "tired"
    STRESSED = "stressed"
    NEUTRAL = "neutral"


class MoodEntry(BaseModel):
    """One mood and energy check-in."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    mood: Mood
    energy: int = Field(ge=1, le=5)
    notes: str = ""
    logged_at: datetime = Field(default_factory=utc_now)


class ActivityStreak(BaseModel):
    """Consecutive-day activity counter."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_active_on: date | None = None

    def record(self, day: date) -> ActivityStreak:
        """Streak after activity on ``day``."""
        if self.last_active_on == day:
            return self
        if self.last_active_on is not None and (day - self.last_active_on).days == 1:
            current = self.current_streak + 1
        else:
            current = 1
        return ActivityStreak(
            current_streak=current,
            longest_streak=max(self.longest_streak, current),
            last_active_on=day,
        )
