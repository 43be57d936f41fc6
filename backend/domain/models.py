"""Framework-agnostic domain models for the key dashboard.

ApiKeyRecord is what stores hand back. The HTTP layer converts it to the
ApiKeyResponse DTO through mappers at the boundary.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp, accepting a trailing 'Z'."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(value))


def format_timestamp(value: datetime) -> str:
    return ensure_utc(value).isoformat()


@dataclass
class ApiKeyRecord:
    """A named API key with its secret value and lifecycle timestamps."""
    id: str
    name: str
    value: str
    created_at: datetime
    updated_at: datetime


@dataclass
class ApiKeyUpdate:
    """Partial update. Fields left as None keep their stored value."""
    name: Optional[str] = None
    value: Optional[str] = None
