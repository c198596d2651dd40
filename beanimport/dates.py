"""Lenient parsing of statement date and date-time strings."""

from __future__ import annotations

import datetime as _dt
import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

_SIGNED_INT = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_INT = re.compile(r"\+?[0-9]+")


def _parse_signed(text: str) -> Optional[int]:
    return int(text) if _SIGNED_INT.fullmatch(text) else None


def _parse_unsigned(text: str) -> Optional[int]:
    return int(text) if _UNSIGNED_INT.fullmatch(text) else None


def _parse_date_part(text: str) -> Optional[_dt.date]:
    parts = re.split(r"[/-]", text)
    if len(parts) != 3:
        logger.debug("malformed date: %s", text)
        return None
    year = _parse_signed(parts[0])
    month = _parse_unsigned(parts[1])
    day = _parse_unsigned(parts[2])
    if year is None or month is None or day is None:
        return None
    try:
        return _dt.date(year, month, day)
    except ValueError:
        return None


def _parse_time_part(text: str) -> Optional[_dt.time]:
    parts = text.split(":")
    if len(parts) < 2:
        logger.debug("malformed time: %s", text)
        return None
    hour = _parse_unsigned(parts[0])
    minute = _parse_unsigned(parts[1])
    if hour is None or minute is None:
        return None
    second = _parse_unsigned(parts[2]) if len(parts) > 2 else None
    try:
        return _dt.time(hour, minute, second or 0)
    except ValueError:
        return None


def parse_datetime(text: str) -> Optional[_dt.datetime]:
    """Parse `2023/12/31 3:44:00`, `2023-12-31 13:44:00` or a bare date.

    An unreadable time part falls back to midnight; an unreadable date gives None.
    """
    parts = text.split()
    if not parts:
        return None
    date = _parse_date_part(parts[0])
    if date is None:
        return None
    time = (_parse_time_part(parts[1]) if len(parts) > 1 else None) or _dt.time.min
    return _dt.datetime.combine(date, time)


def parse_date(text: str) -> Optional[_dt.date]:
    """Parse only the date portion of a date or date-time string."""
    parsed = parse_datetime(text)
    return parsed.date() if parsed is not None else None