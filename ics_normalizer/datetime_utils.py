"""DateTime conversion and formatting utilities for ICS normalization.

This module renders iCalendar instants as the canonical strings stored on
normalized events:

- dates with offset: ``2024-01-01T09:00:00+00:00``
- times of day: ``09:00``
- calendar dates: ``2024-01-01``
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Optional, Union

from .exceptions import IcsTimeConversionError
from .timezone_utils import TimezoneContext

logger = logging.getLogger(__name__)

DateValue = Union[date, datetime]


def is_date_only(value: Any) -> bool:
    """Check whether a decoded property value is a DATE (no time of day).

    Args:
        value: Decoded iCalendar value

    Returns:
        True for ``date`` instances that are not ``datetime``
    """
    return isinstance(value, date) and not isinstance(value, datetime)


def to_zone(value: Any, context: TimezoneContext) -> datetime:
    """Convert an iCalendar instant into the document timezone.

    - DATE values become midnight in the document zone.
    - Floating (naive) datetimes are read as wall-clock time in the document zone.
    - Aware datetimes are converted to the document zone.

    When the context has no zone the process's local system zone is used.

    Args:
        value: Decoded DTSTART/DTEND/EXDATE value
        context: Document timezone context

    Returns:
        Timezone-aware datetime in the document zone

    Raises:
        IcsTimeConversionError: If the value is not a date/datetime or the
            conversion overflows
    """
    if not isinstance(value, date):
        raise IcsTimeConversionError(
            f"Expected a date or datetime, got {type(value).__name__}: {value!r}"
        )

    try:
        dt = datetime.combine(value, time.min) if is_date_only(value) else value
        if dt.tzinfo is None:
            if context.zone is not None:
                return dt.replace(tzinfo=context.zone)
            return dt.astimezone()
        if context.zone is not None:
            return dt.astimezone(context.zone)
        return dt.astimezone()
    except (OverflowError, ValueError, OSError) as e:
        zone_name = context.tzid or "local"
        raise IcsTimeConversionError(f"Cannot convert {value!r} to {zone_name} zone: {e}") from e


def format_utc_offset(offset: Optional[timedelta]) -> str:
    """Format a UTC offset as ``+HH:MM``/``-HH:MM`` (seconds are dropped)."""
    total_seconds = int((offset or timedelta()).total_seconds())
    sign = "+" if total_seconds >= 0 else "-"
    total_seconds = abs(total_seconds)
    hours, remainder = divmod(total_seconds, 3600)
    minutes = remainder // 60
    return f"{sign}{hours:02d}:{minutes:02d}"


def format_date(value: Any, context: TimezoneContext) -> str:
    """Render an instant as ``YYYY-MM-DDTHH:MM:SS+HH:MM`` in the document zone.

    Args:
        value: Decoded iCalendar value (date, floating or aware datetime)
        context: Document timezone context

    Returns:
        Canonical date-with-offset string
    """
    dt = to_zone(value, context)
    wall_clock = dt.replace(tzinfo=None, microsecond=0).isoformat()
    return f"{wall_clock}{format_utc_offset(dt.utcoffset())}"


def format_time(value: Any) -> str:
    """Render the time of day of an already-zoned instant as ``HH:MM``.

    No timezone conversion happens here; callers pass values that were
    converted with ``to_zone`` first. DATE values have no time of day and
    always yield ``00:00``.
    """
    if is_date_only(value):
        return "00:00"
    return f"{value.hour:02d}:{value.minute:02d}"


def calendar_date(value: Union[str, DateValue]) -> str:
    """Reduce a canonical date string or date/datetime to ``YYYY-MM-DD``."""
    if isinstance(value, str):
        return value[:10]
    if isinstance(value, datetime):
        return value.date().isoformat()
    return value.isoformat()
