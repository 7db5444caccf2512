"""Tagged request/response structs for the cloud-storage OAuth boundary."""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field


class CloudProvider(StrEnum):
    GOOGLE_DRIVE = "google_drive"
    DROPBOX = "dropbox"
    ONEDRIVE = "onedrive"

    @property
    def slug(self) -> str:
        return {"google_drive": "google"}.get(self.value, self.value)

    @property
    def display_name(self) -> str:
        match self:
            case CloudProvider.GOOGLE_DRIVE:
                return "Google Drive"
            case CloudProvider.DROPBOX:
                return "Dropbox"
            case CloudProvider.ONEDRIVE:
                return "OneDrive"


class OAuthClient(BaseModel):
    """Registered OAuth application for one provider."""

    provider: CloudProvider
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str


class AuthUrlResponse(BaseModel):
    kind: Literal["auth_url"] = "auth_url"
    provider: CloudProvider
    auth_url: str


class TokenExchangeRequest(BaseModel):
    kind: Literal["token_exchange"] = "token_exchange"
    provider: CloudProvider
    code: str = Field(min_length=1)


class TokenExchangeResponse(BaseModel):
    """Token payload as returned by a provider's token endpoint."""

    kind: Literal["token"] = "token"
    provider: CloudProvider
    access_token: str = Field(min_length=1)
    refresh_token: str | None = None
    expires_in: int | None = None
    scope: str | None = None
    token_type: str | None = None


class UploadReceipt(BaseModel):
    kind: Literal["upload"] = "upload"
    provider: CloudProvider
    file_id: str
    filename: str
