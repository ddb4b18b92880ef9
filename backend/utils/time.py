# backend/utils/time.py
# date utilities for the weekly report

from datetime import date, datetime
from zoneinfo import ZoneInfo

from errors import InvalidPayloadError


def today_in(tz_name="UTC"):
    """
    Return today's calendar date in the given IANA timezone.
    The scheduler fires once a week; the lesson lookup is keyed on this date.
    """
    return datetime.now(ZoneInfo(tz_name)).date()


def parse_report_date(value):
    """Parse a YYYY-MM-DD string (or pass through a date). Raises InvalidPayloadError."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat((value or "").strip()[:10])
    except (AttributeError, TypeError, ValueError):
        raise InvalidPayloadError(f"Invalid date: {value!r}")


def format_short_date(d):
    """October 18, 2026"""
    return f"{d:%B} {d.day}, {d.year}"


def format_long_date(d):
    """Sunday, October 18, 2026"""
    return f"{d:%A}, {format_short_date(d)}"
