"""Date/time formatting for notifications and the admin view (en-US style).

Also registered as Jinja2 filters in web.py.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


def _to_zone(value: datetime | str, time_zone: str) -> datetime:
    """Parse (if needed) and convert a timestamp into the given IANA zone.

    Naive datetimes are treated as UTC. Unknown zones fall back to UTC.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)

    try:
        zone = ZoneInfo(time_zone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown time zone %r, formatting in UTC", time_zone)
        zone = ZoneInfo("UTC")
    return value.astimezone(zone)


def _clock(dt: datetime) -> str:
    """12-hour clock without leading zero: 10:00 AM, 3:05 PM."""
    hour = dt.hour % 12 or 12
    return f"{hour}:{dt.minute:02d} {'AM' if dt.hour < 12 else 'PM'}"


def format_date_time(value: datetime | str, time_zone: str = "UTC") -> dict[str, str]:
    """Format a timestamp four ways for a given time zone.

    >>> format_date_time("2024-01-01T10:00:00Z")["date_time"]
    'Jan 1, 2024, 10:00 AM'
    """
    dt = _to_zone(value, time_zone)
    date_only = f"{dt:%b} {dt.day}, {dt.year}"
    return {
        "date_time": f"{date_only}, {_clock(dt)}",
        "date_day": f"{dt:%a}, {dt:%m/%d/%Y}",
        "date_only": date_only,
        "time_only": _clock(dt),
    }


def format_datetime(value: datetime | str | None, time_zone: str = "UTC") -> str:
    """Jinja2 filter: 'Jan 1, 2024, 10:00 AM', or '-' for missing values."""
    if value is None:
        return "-"
    return format_date_time(value, time_zone)["date_time"]
