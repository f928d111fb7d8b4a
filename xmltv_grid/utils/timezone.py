"""
Date and Time utilities

This module handles XMLTV timestamp parsing and window bound parsing.
Centralizes all date parsing logic to maintain consistency across the package.
"""
from datetime import datetime, timedelta, timezone
import logging
import re

from xmltv_grid.errors import XMLTVGridError

logger = logging.getLogger(__name__)

# YYYYMMDD[hh[mm[ss]]] followed by an optional zone
_XMLTV_TIME_RE = re.compile(
    r"^(?P<date>\d{8})(?P<hour>\d{2})?(?P<minute>\d{2})?(?P<second>\d{2})?"
    r"(?:\s*(?P<tz>[+-]\d{4}|UTC|GMT|Z))?$"
)


class DateFormatError(XMLTVGridError, ValueError):
    """Raised when date format is invalid"""
    pass


def _parse_offset(tz_part: str | None) -> timezone:
    """Convert an XMLTV zone ('+0100', 'UTC', ...) into a tzinfo"""
    if tz_part is None or tz_part in ("UTC", "GMT", "Z"):
        return timezone.utc

    # Parse timezone offset (±HHMM)
    tz_sign = 1 if tz_part[0] == '+' else -1
    tz_hours = int(tz_part[1:3])
    tz_mins = int(tz_part[3:5])
    if tz_hours > 23 or tz_mins > 59:
        raise ValueError(f"offset out of range: {tz_part}")

    return timezone(tz_sign * timedelta(hours=tz_hours, minutes=tz_mins))


def parse_xmltv_datetime(time_str: str | None) -> datetime:
    """
    Parse an XMLTV timestamp into a timezone-aware datetime

    Trailing time fields may be omitted; a missing zone means UTC.
    The source offset is preserved rather than converted.

    Args:
        time_str: XMLTV time like '20080715003000 -0600'

    Returns:
        Timezone-aware datetime in the source offset

    Raises:
        DateFormatError: If the string is missing or not in XMLTV format
    """
    if time_str is None:
        raise DateFormatError("Missing XMLTV datetime")

    match = _XMLTV_TIME_RE.match(time_str.strip())
    if match is None:
        raise DateFormatError(f"Invalid XMLTV datetime format: '{time_str}'")

    try:
        dt = datetime.strptime(match.group("date"), '%Y%m%d')
        dt = dt.replace(
            hour=int(match.group("hour") or 0),
            minute=int(match.group("minute") or 0),
            second=int(match.group("second") or 0),
            tzinfo=_parse_offset(match.group("tz")),
        )
    except ValueError as e:
        raise DateFormatError(f"Invalid XMLTV datetime format: '{time_str}'") from e

    return dt


def _normalize_iso8601_string(date_str: str) -> str:
    """Normalize ISO8601 string by replacing 'Z' with '+00:00'"""
    return date_str.replace('Z', '+00:00') if date_str.endswith('Z') else date_str


def parse_iso8601_to_utc(date_str: str) -> datetime:
    """
    Parse ISO8601 date string and convert to UTC datetime

    Args:
        date_str: ISO8601 datetime string (e.g., '2025-10-09T00:00:00Z' or '2025-10-09T00:00:00+01:00')

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        DateFormatError: If the date string format is invalid
    """
    try:
        normalized = _normalize_iso8601_string(date_str)
        dt = datetime.fromisoformat(normalized)
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except (ValueError, AttributeError) as e:
        raise DateFormatError(f"Invalid ISO8601 datetime format: '{date_str}'") from e
