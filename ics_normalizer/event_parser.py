"""Event component extraction for ICS normalization.

This module converts one VEVENT component into one normalized event record,
either a SingleEvent or a RecurringEvent, rendered in the document timezone.
"""

import logging
from datetime import date, timedelta, timezone
from typing import Any, Optional

from .component import CalendarComponent
from .datetime_utils import calendar_date, format_date, format_time, is_date_only, to_zone
from .exceptions import IcsTimeConversionError
from .models import EventKind, NormalizedEvent, RecurringEvent, SingleEvent
from .rrule_utils import normalize_rrule
from .timezone_utils import TimezoneContext

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_MARKER = "ics"


def event_uid(component: CalendarComponent) -> str:
    """Return the UID of a VEVENT ("" when missing)."""
    uid = component.get_first_property("UID")
    return str(uid) if uid is not None else ""


def recurrence_id(component: CalendarComponent) -> Optional[Any]:
    """Return the RECURRENCE-ID of a VEVENT, None for non-exception events."""
    return component.get_first_property("RECURRENCE-ID")


def is_recurring(component: CalendarComponent) -> bool:
    """Check whether a VEVENT declares an RRULE."""
    return component.get_first_property("RRULE") is not None


def specifies_end(component: CalendarComponent) -> bool:
    """Check whether a VEVENT carries an explicit DTEND or DURATION."""
    return (
        component.get_first_property("DTEND") is not None
        or component.get_first_property("DURATION") is not None
    )


def event_start(component: CalendarComponent) -> date:
    """Return DTSTART of a VEVENT.

    Raises:
        IcsTimeConversionError: If DTSTART is missing or not a date/datetime
    """
    start = component.get_first_property("DTSTART")
    if start is None:
        raise IcsTimeConversionError("Event missing DTSTART")
    if not isinstance(start, date):
        raise IcsTimeConversionError(f"Malformed DTSTART: {start!r}")
    return start


def event_end(component: CalendarComponent) -> date:
    """Return the effective end of a VEVENT.

    DTEND when present, otherwise DTSTART + DURATION. Without either, timed
    events end when they start and all-day events last one day.

    Raises:
        IcsTimeConversionError: If the end cannot be computed
    """
    start = event_start(component)

    end = component.get_first_property("DTEND")
    if end is not None:
        if not isinstance(end, date):
            raise IcsTimeConversionError(f"Malformed DTEND: {end!r}")
        return end

    duration = component.get_first_property("DURATION")
    if duration is None:
        duration = timedelta(days=1) if is_date_only(start) else timedelta()
    if not isinstance(duration, timedelta):
        raise IcsTimeConversionError(f"Malformed DURATION: {duration!r}")

    try:
        return start + duration
    except OverflowError as e:
        raise IcsTimeConversionError(f"End of event out of range: {e}") from e


class IcsEventExtractor:
    """Converts VEVENT components into NormalizedEvent records."""

    def __init__(self, source_marker: str = DEFAULT_SOURCE_MARKER):
        """Initialize event extractor.

        Args:
            source_marker: First segment of every generated event id
        """
        self.source_marker = source_marker

    def extract(self, component: CalendarComponent, context: TimezoneContext) -> NormalizedEvent:
        """Convert one VEVENT into a normalized event.

        The caller is expected to have probed the start and end instants
        already; conversion errors are not caught here.

        Args:
            component: VEVENT component
            context: Document timezone context

        Returns:
            RecurringEvent when the component has an RRULE, SingleEvent otherwise

        Raises:
            IcsTimeConversionError: If an instant cannot be converted
            IcsRecurrenceRuleError: If the RRULE is rejected
            pydantic.ValidationError: If the record violates the event schema
        """
        if is_recurring(component):
            return self._extract_recurring(component, context)
        return self._extract_single(component, context)

    def event_id(self, uid: str, start: str, kind: EventKind) -> str:
        """Build the deterministic id of an event."""
        return f"{self.source_marker}::{uid}::{start}::{kind.value}"

    def _extract_single(self, component: CalendarComponent, context: TimezoneContext) -> SingleEvent:
        uid = event_uid(component)
        start = event_start(component)
        date_str = format_date(start, context)

        # Events without an end marker never get an end date
        end_date = None
        if specifies_end(component):
            end_str = format_date(event_end(component), context)
            if calendar_date(end_str) != calendar_date(date_str):
                end_date = end_str

        return SingleEvent(
            id=self.event_id(uid, date_str, EventKind.SINGLE),
            title=self._title(component),
            date=date_str,
            end_date=end_date,
            url=self._url(component),
            **self._time_fields(component, context),
        )

    def _extract_recurring(
        self, component: CalendarComponent, context: TimezoneContext
    ) -> RecurringEvent:
        uid = event_uid(component)
        start = event_start(component)
        zoned_start = to_zone(start, context)

        rrule = normalize_rrule(str(component.get_first_property("RRULE")), zoned_start)

        # Anchor the series on an absolute instant so the rendered start date
        # does not shift with DST transitions
        anchor = zoned_start.astimezone(timezone.utc)

        return RecurringEvent(
            id=self.event_id(uid, format_date(start, context), EventKind.RECURRING),
            title=self._title(component),
            rrule=rrule,
            start_date=format_date(anchor, context),
            skip_dates=self._skip_dates(component, context),
            url=self._url(component),
            **self._time_fields(component, context),
        )

    def _skip_dates(self, component: CalendarComponent, context: TimezoneContext) -> list[str]:
        """Collect EXDATE values as calendar dates in the document zone.

        Only the date of an exclusion is kept, so a series excluded several
        times on the same day ends up with a single entry for that day.
        """
        skip_dates: list[str] = []
        for exdate in component.get_all_properties("EXDATE"):
            day = calendar_date(to_zone(exdate, context))
            if day not in skip_dates:
                skip_dates.append(day)
        return skip_dates

    def _time_fields(self, component: CalendarComponent, context: TimezoneContext) -> dict[str, Any]:
        start = event_start(component)
        if is_date_only(start):
            return {"all_day": True}
        return {
            "all_day": False,
            "start_time": format_time(to_zone(start, context)),
            "end_time": format_time(to_zone(event_end(component), context)),
        }

    def _title(self, component: CalendarComponent) -> Optional[str]:
        summary = component.get_first_property("SUMMARY")
        return str(summary) if summary is not None else None

    def _url(self, component: CalendarComponent) -> Optional[str]:
        url = component.get_first_property("URL")
        return str(url) if url else None
