from __future__ import annotations

import time
from datetime import datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.constants import TIME_SENTINEL

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_DAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def now_utc() -> datetime:
    """Current instant (timezone-aware).

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def now_ms() -> int:
    return int(time.time() * 1000)


def parse_iso_instant(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 instant from the server into an aware datetime.

    A trailing ``Z`` is accepted. Naive values are treated as UTC, which is
    what the server emits. Empty values return None; malformed ones raise
    ValueError.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_device_time(instant: datetime, device_tz: Optional[tzinfo] = None) -> datetime:
    """Convert an instant to the device's wall clock (system zone when None)."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(device_tz) if device_tz else instant.astimezone()


def format_time(instant: Optional[datetime], device_tz: Optional[tzinfo] = None) -> str:
    """Format as ``hh:MM AM`` on the device clock, or the sentinel."""
    if instant is None:
        return TIME_SENTINEL
    return to_device_time(instant, device_tz).strftime("%I:%M %p")


def format_date(value: datetime) -> str:
    """e.g. ``Jan 1, 2024 · Monday``."""
    return f"{_MONTHS[value.month - 1]} {value.day}, {value.year} · {_DAYS[value.weekday()]}"


def calculate_total_hours(check_in: Optional[datetime], check_out: Optional[datetime]) -> str:
    """Worked duration as zero-padded ``HH:MM``.

    Only raw instants are accepted. Returns the sentinel when either side is
    missing or when check_out is not after check_in.
    """
    if check_in is None or check_out is None:
        return TIME_SENTINEL
    diff_ms = (check_out - check_in).total_seconds() * 1000
    if diff_ms <= 0:
        return TIME_SENTINEL
    total_minutes = int(diff_ms // 60000)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"


def greeting_message(now: datetime) -> str:
    hour = now.hour
    if 5 <= hour < 12:
        part = "Good Morning"
    elif 12 <= hour < 17:
        part = "Good Afternoon"
    else:
        part = "Good Evening"
    return f"{part}, mark your Attendance"


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """IANA zone for `name`; None (system local zone) when empty."""
    if not name:
        return None
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)
