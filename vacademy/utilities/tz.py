"""Timezone and display formatting utilities.

Single source of truth for date/time values that end up in templates.
Formats follow the en-US locale the message templates are written for.
"""

from datetime import UTC, datetime

from vacademy.config import get_user_timezone

__all__ = [
    "now_user",
    "now_utc",
    "to_user_tz",
    "parse_datetime",
    "format_locale_date",
    "format_locale_time",
    "format_display_date",
]


def now_user() -> datetime:
    """Get current time in user timezone."""
    return datetime.now(get_user_timezone())


def now_utc() -> datetime:
    """Get current time in UTC."""
    return datetime.now(UTC)


def to_user_tz(dt: datetime) -> datetime:
    """Convert any datetime to user timezone.

    Naive datetimes are assumed to be UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(get_user_timezone())


def parse_datetime(value: object) -> datetime | None:
    """Parse an API date value (ISO string or epoch millis) into a datetime.

    Returns None for anything unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def format_locale_date(dt: datetime) -> str:
    """Short numeric date (e.g., '10/19/2026')."""
    return f"{dt.month}/{dt.day}/{dt.year}"


def format_locale_time(dt: datetime) -> str:
    """12-hour time with seconds (e.g., '7:05:09 PM')."""
    return dt.strftime("%-I:%M:%S %p")


def format_display_date(value: object, fallback: str | None = None) -> str | None:
    """Format an API date value as a locale date in the user timezone.

    Args:
        value: ISO string, epoch millis, or datetime
        fallback: Returned when the value cannot be parsed

    Returns:
        Formatted date string or fallback
    """
    dt = parse_datetime(value)
    if dt is None:
        return fallback
    return format_locale_date(to_user_tz(dt))
