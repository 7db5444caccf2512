"""OAuth glue and backup uploads for Google Drive, Dropbox and OneDrive."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from collections.abc import Callable
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, urlencode

import requests
from pydantic import ValidationError
from result import Err, Ok, Result

from sanctuary.data.local_store import CLOUD_TOKENS_KEY
from sanctuary.models.cloud import (
    AuthUrlResponse,
    CloudProvider,
    OAuthClient,
    TokenExchangeRequest,
    TokenExchangeResponse,
    UploadReceipt,
)

if TYPE_CHECKING:
    from sanctuary.data.local_store import LocalStorage

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30
BACKUP_FOLDER = "productivity-app"

AUTH_ENDPOINTS = {
    CloudProvider.GOOGLE_DRIVE: "https://accounts.google.com/o/oauth2/v2/auth",
    CloudProvider.DROPBOX: "https://www.dropbox.com/oauth2/authorize",
    CloudProvider.ONEDRIVE: "https://login.microsoftonline.com/common/oauth2/v2.0/authorize",
}

TOKEN_ENDPOINTS = {
    CloudProvider.GOOGLE_DRIVE: "https://oauth2.googleapis.com/token",
    CloudProvider.DROPBOX: "https://api.dropboxapi.com/oauth2/token",
    CloudProvider.ONEDRIVE: "https://login.microsoftonline.com/common/oauth2/v2.0/token",
}

SCOPES = {
    CloudProvider.GOOGLE_DRIVE: (
        "https://www.googleapis.com/auth/drive.file https://www.googleapis.com/auth/userinfo.email"
    ),
    CloudProvider.ONEDRIVE: "Files.ReadWrite offline_access",
}

GOOGLE_UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files?uploadType=multipart"
DROPBOX_UPLOAD_URL = "https://content.dropboxapi.com/2/files/upload"
ONEDRIVE_UPLOAD_URL = "https://graph.microsoft.com/v1.0/me/drive/special/approot:/{name}:/content"


def build_auth_url(client: OAuthClient, state: str | None = None) -> Result[AuthUrlResponse, str]:
    """Authorization URL the user is redirected to for consent."""
    if not client.client_id:
        return Err(f"{client.provider.display_name} is not configured")

    params: dict[str, str] = {
        "client_id": client.client_id,
        "redirect_uri": client.redirect_uri,
        "response_type": "code",
    }
    scope = SCOPES.get(client.provider)
    if scope:
        params["scope"] = scope
    if client.provider is CloudProvider.GOOGLE_DRIVE:
        params["access_type"] = "offline"
        params["prompt"] = "consent"
    if client.provider is CloudProvider.DROPBOX:
        params["token_access_type"] = "offline"
    if state:
        params["state"] = state

    url = f"{AUTH_ENDPOINTS[client.provider]}?{urlencode(params, quote_via=quote)}"
    return Ok(AuthUrlResponse(provider=client.provider, auth_url=url))


def _multipart_related(metadata: dict[str, Any], content: str) -> tuple[str, str]:
    boundary = uuid.uuid4().hex
    body = (
        f"--{boundary}\r\n"
        "Content-Type: application/json; charset=UTF-8\r\n\r\n"
        f"{json.dumps(metadata)}\r\n"
        f"--{boundary}\r\n"
        "Content-Type: application/json\r\n\r\n"
        f"{content}\r\n"
        f"--{boundary}--"
    )
    return body, f"multipart/related; boundary={boundary}"


class CloudStorageService:
    """Talks to the providers' OAuth and file APIs over HTTPS.

    Blocking ``requests`` calls run in a worker thread so the event loop is
    never held up.
    """

    def __init__(
        self,
        clients: Callable[[CloudProvider], OAuthClient],
        http: requests.Session | None = None,
    ) -> None:
        self._clients = clients
        self._http = http or requests.Session()

    def auth_url(self, provider: CloudProvider, state: str | None = None) -> Result[AuthUrlResponse, str]:
        return build_auth_url(self._clients(provider), state)

    async def exchange_code(self, request: TokenExchangeRequest) -> Result[TokenExchangeResponse, str]:
        client = self._clients(request.provider)
        if not client.client_id or not client.client_secret:
            return Err(f"{request.provider.display_name} is not configured")
        form = {
            "code": request.code,
            "client_id": client.client_id,
            "client_secret": client.client_secret,
            "redirect_uri": client.redirect_uri,
            "grant_type": "authorization_code",
        }
        try:
            response = await asyncio.to_thread(
                self._http.post,
                TOKEN_ENDPOINTS[request.provider],
                data=form,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            logger.error("%s token exchange failed: %s", request.provider, exc)
            return Err("Failed to exchange code for token")

        payload = _json_or_empty(response)
        if not response.ok:
            logger.error("%s token exchange error: %s", request.provider, payload)
            return Err(str(payload.get("error_description") or "Failed to exchange code for token"))
        try:
            return Ok(
                TokenExchangeResponse(
                    provider=request.provider,
                    access_token=payload.get("access_token", ""),
                    refresh_token=payload.get("refresh_token"),
                    expires_in=payload.get("expires_in"),
                    scope=payload.get("scope"),
                    token_type=payload.get("token_type"),
                )
            )
        except ValidationError:
            logger.error("%s returned a malformed token payload", request.provider)
            return Err("Failed to exchange code for token")

    async def upload_backup(
        self, provider: CloudProvider, access_token: str, filename: str, content: str
    ) -> Result[UploadReceipt, str]:
        if not access_token:
            return Err(f"Not authenticated with {provider.display_name}")
        try:
            response = await asyncio.to_thread(
                self._send_upload, provider, access_token, filename, content
            )
        except requests.RequestException as exc:
            logger.error("%s upload failed: %s", provider, exc)
            return Err("Upload failed")

        payload = _json_or_empty(response)
        if not response.ok or not payload.get("id"):
            logger.error("%s upload error: %s", provider, payload)
            return Err(str(payload.get("error_summary") or payload.get("error") or "Upload failed"))
        return Ok(UploadReceipt(provider=provider, file_id=str(payload["id"]), filename=filename))

    def _send_upload(
        self, provider: CloudProvider, access_token: str, filename: str, content: str
    ) -> requests.Response:
        auth = {"Authorization": f"Bearer {access_token}"}
        match provider:
            case CloudProvider.GOOGLE_DRIVE:
                body, content_type = _multipart_related(
                    {"name": filename, "mimeType": "application/json"}, content
                )
                return self._http.post(
                    GOOGLE_UPLOAD_URL,
                    data=body.encode(),
                    headers={**auth, "Content-Type": content_type},
                    timeout=REQUEST_TIMEOUT,
                )
            case CloudProvider.DROPBOX:
                api_arg = {"path": f"/{BACKUP_FOLDER}/{filename}", "mode": "overwrite"}
                return self._http.post(
                    DROPBOX_UPLOAD_URL,
                    data=content.encode(),
                    headers={
                        **auth,
                        "Content-Type": "application/octet-stream",
                        "Dropbox-API-Arg": json.dumps(api_arg),
                    },
                    timeout=REQUEST_TIMEOUT,
                )
            case CloudProvider.ONEDRIVE:
                return self._http.put(
                    ONEDRIVE_UPLOAD_URL.format(name=quote(filename)),
                    data=content.encode(),
                    headers={**auth, "Content-Type": "application/json"},
                    timeout=REQUEST_TIMEOUT,
                )


def _json_or_empty(response: requests.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


async def save_token(storage: LocalStorage, token: TokenExchangeResponse) -> None:
    """Remember a provider's tokens on this device."""
    tokens = await storage.get_json(CLOUD_TOKENS_KEY, {})
    if not isinstance(tokens, dict):
        tokens = {}
    tokens[token.provider.value] = token.model_dump(mode="json")
    await storage.set_json(CLOUD_TOKENS_KEY, tokens)


async def load_token(storage: LocalStorage, provider: CloudProvider) -> TokenExchangeResponse | None:
    tokens = await storage.get_json(CLOUD_TOKENS_KEY, {})
    if not isinstance(tokens, dict) or provider.value not in tokens:
        return None
    try:
        return TokenExchangeResponse.model_validate(tokens[provider.value])
    except ValidationError:
        logger.warning("Ignoring unreadable %s token", provider)
        return None


async def forget_token(storage: LocalStorage, provider: CloudProvider) -> None:
    tokens = await storage.get_json(CLOUD_TOKENS_KEY, {})
    if isinstance(tokens, dict) and tokens.pop(provider.value, None) is not None:
        await storage.set_json(CLOUD_TOKENS_KEY, tokens)
