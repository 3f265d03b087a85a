"""Wall-clock helpers: timezone resolution and time formatting."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# Names usable without IANA tzdata (Windows hosts).
_FIXED_FALLBACKS: dict[str, tzinfo] = {
    "UTC": timezone.utc,
    "Etc/UTC": timezone.utc,
}


def resolve_timezone(tz_name: str) -> tzinfo:
    """Resolve an IANA timezone name with safe fallbacks.

    Order:
    1. Host local timezone when the name is empty.
    2. IANA database via ZoneInfo.
    3. Known fixed-offset fallback map.
    4. Host local timezone, then UTC.
    """
    if tz_name:
        try:
            return ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError):
            pass

        if tz_name in _FIXED_FALLBACKS:
            return _FIXED_FALLBACKS[tz_name]

    local_tz = datetime.now().astimezone().tzinfo
    if local_tz is not None:
        return local_tz
    return timezone.utc


def local_now(tz_name: str = "") -> datetime:
    """Current wall-clock time as an aware datetime in the given zone."""
    return datetime.now(resolve_timezone(tz_name))


def format_time_from_seconds(seconds: int) -> str:
    """Render seconds since midnight as ``HH:MM:SS``."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_clock(now: datetime) -> str:
    """Long clock string for the dashboard header, e.g. ``Friday, 17 October 2026 14:03:09``."""
    return now.strftime("%A, %d %B %Y %H:%M:%S")


def format_hms(now: datetime) -> str:
    return now.strftime("%H:%M:%S")
