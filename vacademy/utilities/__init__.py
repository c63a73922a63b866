"""Utilities - timezone formatting, logging."""

from vacademy.utilities.logging import setup_logging
from vacademy.utilities.tz import (
    format_display_date,
    format_locale_date,
    format_locale_time,
    now_user,
    now_utc,
    parse_datetime,
    to_user_tz,
)

__all__ = [
    "format_display_date",
    "format_locale_date",
    "format_locale_time",
    "now_user",
    "now_utc",
    "parse_datetime",
    "setup_logging",
    "to_user_tz",
]
