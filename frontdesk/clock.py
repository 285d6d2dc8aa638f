"""Timestamp and identifier sources."""

from __future__ import annotations

from datetime import date, datetime
from uuid import uuid4

_WEEKDAYS_ES = ("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo")


def format_timestamp(moment: datetime) -> str:
    """Format as HH:MM:SS.mmm (24h, zero padded)."""
    return f"{moment:%H:%M:%S}.{moment.microsecond // 1000:03d}"


def now_timestamp() -> str:
    """Current local wall-clock time as HH:MM:SS.mmm."""
    return format_timestamp(datetime.now())


def weekday_name(day: date) -> str:
    """Lowercase Spanish weekday name, as stamped on persisted records."""
    return _WEEKDAYS_ES[day.weekday()]


def new_row_id() -> str:
    return str(uuid4())
