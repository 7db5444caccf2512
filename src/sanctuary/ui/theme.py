"""Color definitions and display formatting utilities."""

from __future__ import annotations

from datetime import UTC, datetime

from sanctuary.models.projects import ArchiveKind, ProjectStatus

# ── Color palette: calm greens with a warm accent ──

COLORS = {
    "primary": "#4F8A6E",
    "secondary": "#7A9CC6",
    "accent": "#E6A157",
    "success": "#27AE60",
    "bg": "#FAFAF7",
    "surface": "#FFFFFF",
    "border": "#E3E6E0",
    "text": "#1F2A24",
    "text_muted": "#8A948E",
    "error": "#D9534F",
    "warning": "#F0AD4E",
}

STATUS_COLORS = {
    ProjectStatus.ACTIVE: COLORS["success"],
    ProjectStatus.PAUSED: COLORS["warning"],
    ProjectStatus.COMPLETED: COLORS["secondary"],
    ProjectStatus.ARCHIVED: COLORS["text_muted"],
}

STATUS_ICONS = {
    ProjectStatus.ACTIVE: "play_circle",
    ProjectStatus.PAUSED: "pause_circle",
    ProjectStatus.COMPLETED: "check_circle",
    ProjectStatus.ARCHIVED: "inventory_2",
}


def archive_kind_label(kind: ArchiveKind) -> str:
    match kind:
        case ArchiveKind.TEMPORARY:
            return "Resting for now"
        case ArchiveKind.PERMANENT:
            return "Letting go"
        case ArchiveKind.COMPLETED:
            return "Done and celebrated"


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_datetime(dt: datetime | None, now: datetime | None = None) -> str:
    """Format a timestamp into a human-friendly display.

    Examples: "Today 14:30", "Yesterday 09:15", "Feb 12 16:45", "2025-11-03 10:00"
    """
    if dt is None:
        return ""
    dt = _as_utc(dt)
    now = _as_utc(now) if now else datetime.now(tz=UTC)
    today = now.date()
    time_part = dt.strftime("%H:%M")

    delta = (today - dt.date()).days
    if delta == 0:
        return f"Today {time_part}"
    if delta == 1:
        return f"Yesterday {time_part}"
    if 1 < delta < 7:
        return f"{dt.strftime('%A')} {time_part}"
    if dt.year == now.year:
        return f"{dt.strftime('%b %d')} {time_part}"
    return f"{dt.strftime('%Y-%m-%d')} {time_part}"


def format_relative_time(dt: datetime | None, now: datetime | None = None) -> str:
    """Format a timestamp as relative time (e.g. '2h ago', '3d ago')."""
    if dt is None:
        return ""
    now = _as_utc(now) if now else datetime.now(tz=UTC)
    seconds = int((now - _as_utc(dt)).total_seconds())
    if seconds < 60:
        return "just now"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 30:
        return f"{days}d ago"
    months = days // 30
    if months < 12:
        return f"{months}mo ago"
    return f"{days // 365}y ago"
