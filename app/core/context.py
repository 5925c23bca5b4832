from dataclasses import dataclass
from typing import Optional
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.config import DEFAULT_TIMEZONE


def resolve_timezone(tz: Optional[str]) -> str:
    """Return a usable IANA zone name, falling back to the default zone."""
    if not tz:
        return DEFAULT_TIMEZONE
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError):
        return DEFAULT_TIMEZONE
    return tz


@dataclass(frozen=True)
class UserContext:
    """Identity and locale every budget operation runs under."""

    user_id: UUID
    timezone: str = DEFAULT_TIMEZONE

    def __post_init__(self):
        object.__setattr__(self, "timezone", resolve_timezone(self.timezone))
