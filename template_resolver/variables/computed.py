"""Computed variables: current date and time.

Pure functions of the clock, formatted in the user's configured timezone.
No context and no I/O, so these always resolve.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from core import VariableContext
from template_resolver.variables.base import BaseResolver
from vacademy.utilities.tz import format_locale_date, format_locale_time, now_user

# Short TTL so current_time does not go stale within a send window
CACHE_TTL_COMPUTED = 60


def _current_date(now: datetime) -> str:
    return format_locale_date(now)


def _current_time(now: datetime) -> str:
    return format_locale_time(now)


def _year(now: datetime) -> str:
    return str(now.year)


def _month(now: datetime) -> str:
    return str(now.month)


def _day(now: datetime) -> str:
    return str(now.day)


def _weekday(now: datetime) -> str:
    return now.strftime("%A")


def _timestamp(now: datetime) -> str:
    return now.isoformat()


_EXTRACTORS: dict[str, Callable[[datetime], str]] = {
    "current_date": _current_date,
    "current_time": _current_time,
    "year": _year,
    "month": _month,
    "day": _day,
    "weekday": _weekday,
    "timestamp": _timestamp,
}


class ComputedResolver(BaseResolver):
    """Resolves clock-derived variables."""

    category = "system"
    source = "computed"
    priority = 100
    cache_ttl = CACHE_TTL_COMPUTED
    supported_variables = tuple(_EXTRACTORS)
    descriptions = {
        "current_date": "Today's date",
        "current_time": "Current time",
        "year": "Current year",
        "month": "Current month (1-12)",
        "day": "Day of the month",
        "weekday": "Day of the week",
        "timestamp": "Current ISO-8601 timestamp",
    }
    examples = {
        "current_date": "1/15/2024",
        "current_time": "10:30:00 AM",
        "year": "2024",
        "month": "1",
        "day": "15",
        "weekday": "Monday",
        "timestamp": "2024-01-15T10:30:00+05:30",
    }

    def __init__(self, clock: Callable[[], datetime] = now_user):
        self._clock = clock

    async def _resolve_value(self, name: str, context: VariableContext | None) -> Any:
        return _EXTRACTORS[name](self._clock())
