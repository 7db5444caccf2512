"""Identity and auth-state models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class AuthEvent(StrEnum):
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"


class Owner(BaseModel):
    """The signed-in identity."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str = ""


class AuthSession(BaseModel):
    """An authenticated session as reported by the auth provider."""

    model_config = ConfigDict(frozen=True)

    owner: Owner
    access_token: str = ""


class UserProfile(BaseModel):
    """Row of the hosted ``users`` table."""

    id: str
    email: str = ""
    role: str = ""
    display_name: str = ""
