"""Pydantic models for Sanctuary."""

from sanctuary.models.cloud import (
    AuthUrlResponse,
    CloudProvider,
    OAuthClient,
    TokenExchangeRequest,
    TokenExchangeResponse,
    UploadReceipt,
)
from sanctuary.models.exchange import ExportDocument, ExportFile, ExportFormat, ExportOptions
from sanctuary.models.mood import ActivityStreak, Mood, MoodEntry
from sanctuary.models.projects import (
    ArchiveKind,
    ArchiveRecord,
    Project,
    ProjectDraft,
    ProjectStatus,
)
from sanctuary.models.roles import USER_ROLES, ProjectTemplate, UserRole
from sanctuary.models.session import AuthEvent, AuthSession, Owner, UserProfile
from sanctuary.models.settings import FeatureSettings

__all__ = [
    "ActivityStreak",
    "ArchiveKind",
    "ArchiveRecord",
    "AuthEvent",
    "AuthSession",
    "AuthUrlResponse",
    "CloudProvider",
    "ExportDocument",
    "ExportFile",
    "ExportFormat",
    "ExportOptions",
    "FeatureSettings",
    "Mood",
    "MoodEntry",
    "OAuthClient",
    "Owner",
    "Project",
    "ProjectDraft",
    "ProjectStatus",
    "ProjectTemplate",
    "TokenExchangeRequest",
    "TokenExchangeResponse",
    "UploadReceipt",
    "UserProfile",
    "UserRole",
    "USER_ROLES",
]
