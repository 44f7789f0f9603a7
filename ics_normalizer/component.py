"""Narrow interface over the iCalendar component tree.

The grammar parser (icalendar) exposes a dynamically typed property bag. The
normalization code only needs three lookups, so it talks to the tree through
the CalendarComponent protocol and never touches icalendar objects directly.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from icalendar import Calendar, vDDDLists, vRecur
from icalendar.cal import Component
from icalendar.error import BrokenCalendarProperty

from .exceptions import IcsParseError

logger = logging.getLogger(__name__)


class CalendarComponent(Protocol):
    """Protocol for a parsed calendar component (VCALENDAR, VEVENT, VTIMEZONE...)."""

    @property
    def name(self) -> str:
        """Upper-case component type name."""
        ...

    def get_first_property(self, name: str) -> Optional[Any]:
        """Return the decoded value of the first property called ``name``.

        Args:
            name: Property name, case-insensitive

        Returns:
            Decoded value or None when the property is absent
        """
        ...

    def get_all_properties(self, name: str) -> list[Any]:
        """Return every decoded value of the property called ``name``.

        Args:
            name: Property name, case-insensitive

        Returns:
            List of decoded values (empty when absent)
        """
        ...

    def get_all_subcomponents(self, name: str) -> list[CalendarComponent]:
        """Return the direct child components of type ``name``.

        Args:
            name: Component type name, case-insensitive

        Returns:
            Child components in document order
        """
        ...


def _decode_property(prop: Any) -> list[Any]:
    """Decode one raw icalendar property into plain Python values.

    Date lists (EXDATE, RDATE) expand to one value per listed instant, which is
    why a list is returned. Values the grammar parser could not read come back
    as their raw text, so date checks downstream reject them per event.
    """
    try:
        if isinstance(prop, vDDDLists):
            return [item.dt for item in prop.dts]
        if isinstance(prop, vRecur):
            return [prop.to_ical().decode("utf-8")]
        if hasattr(prop, "dt"):
            return [prop.dt]
        if hasattr(prop, "td"):
            return [prop.td]
    except BrokenCalendarProperty:
        logger.debug("Keeping unparseable property value as text: %r", str(prop))
    return [str(prop)]


class IcalComponent:
    """CalendarComponent backed by an icalendar Component."""

    def __init__(self, component: Component) -> None:
        """Wrap an icalendar component.

        Args:
            component: Parsed icalendar component
        """
        self._component = component

    @property
    def name(self) -> str:
        """Upper-case component type name."""
        return str(self._component.name or "").upper()

    def _raw_properties(self, name: str) -> list[Any]:
        raw = self._component.get(name.upper())
        if raw is None:
            return []
        if isinstance(raw, list):
            return raw
        return [raw]

    def get_first_property(self, name: str) -> Optional[Any]:
        """Return the decoded value of the first property called ``name``."""
        for prop in self._raw_properties(name):
            values = _decode_property(prop)
            if values:
                return values[0]
        return None

    def get_all_properties(self, name: str) -> list[Any]:
        """Return every decoded value of the property called ``name``."""
        values: list[Any] = []
        for prop in self._raw_properties(name):
            values.extend(_decode_property(prop))
        return values

    def get_all_subcomponents(self, name: str) -> list[CalendarComponent]:
        """Return the direct child components of type ``name``."""
        wanted = name.upper()
        return [
            IcalComponent(child)
            for child in self._component.subcomponents
            if str(child.name or "").upper() == wanted
        ]

    def __repr__(self) -> str:
        uid = self._component.get("UID")
        return f"IcalComponent(name={self.name!r}, uid={str(uid) if uid else None!r})"


def parse_calendar(ics_content: str) -> IcalComponent:
    """Parse raw iCalendar text into a component tree.

    Args:
        ics_content: Raw ICS document text

    Returns:
        Root VCALENDAR component

    Raises:
        IcsParseError: If the text is not a parseable calendar document
    """
    if not ics_content or not ics_content.strip():
        raise IcsParseError("Empty ICS content")

    # Check for required ICS markers
    if "BEGIN:VCALENDAR" not in ics_content:
        raise IcsParseError("Missing BEGIN:VCALENDAR marker")
    if "END:VCALENDAR" not in ics_content:
        raise IcsParseError("Missing END:VCALENDAR marker")

    try:
        calendar = Calendar.from_ical(ics_content)
    except Exception as e:
        raise IcsParseError(f"Invalid calendar document: {e}") from e

    root = IcalComponent(calendar)
    if root.name != "VCALENDAR":
        raise IcsParseError(f"Expected VCALENDAR root component, got {root.name or 'nothing'}")

    logger.debug("Parsed ICS content: %d bytes", len(ics_content))
    return root
