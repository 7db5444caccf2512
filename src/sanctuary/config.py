"""Configuration for Sanctuary."""

from dataclasses import dataclass, field
from pathlib import Path

from sanctuary.models.cloud import CloudProvider, OAuthClient


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    data_dir: Path = field(
        default_factory=lambda: Path.home() / ".local" / "share" / "sanctuary"
    )
    port: int = 8420
    host: str = "127.0.0.1"
    site_url: str = "http://127.0.0.1:8420"
    google_client_id: str = ""
    google_client_secret: str = ""
    dropbox_client_id: str = ""
    dropbox_client_secret: str = ""
    onedrive_client_id: str = ""
    onedrive_client_secret: str = ""

    @property
    def local_db_path(self) -> Path:
        return self.data_dir / "device.db"

    @property
    def hosted_db_path(self) -> Path:
        return self.data_dir / "hosted.db"

    def oauth_client(self, provider: CloudProvider) -> OAuthClient:
        """Credentials and redirect URI for one cloud-storage provider."""
        match provider:
            case CloudProvider.GOOGLE_DRIVE:
                client_id, secret = self.google_client_id, self.google_client_secret
            case CloudProvider.DROPBOX:
                client_id, secret = self.dropbox_client_id, self.dropbox_client_secret
            case CloudProvider.ONEDRIVE:
                client_id, secret = self.onedrive_client_id, self.onedrive_client_secret
        return OAuthClient(
            provider=provider,
            client_id=client_id,
            client_secret=secret,
            redirect_uri=f"{self.site_url.rstrip('/')}/auth/{provider.slug}-callback",
        )
