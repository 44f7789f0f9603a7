"""Timezone resolution for ICS documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .component import CalendarComponent

logger = logging.getLogger(__name__)

# Windows timezone names to IANA identifier mapping
# Common Windows timezones used in ICS files from Outlook/Exchange
WINDOWS_TZ_MAP: dict[str, str] = {
    "Pacific Standard Time": "America/Los_Angeles",
    "Mountain Standard Time": "America/Denver",
    "Central Standard Time": "America/Chicago",
    "Eastern Standard Time": "America/New_York",
    "Alaskan Standard Time": "America/Anchorage",
    "Hawaiian Standard Time": "Pacific/Honolulu",
    "Arizona Standard Time": "America/Phoenix",
    "GMT Standard Time": "Europe/London",
    "Central European Standard Time": "Europe/Paris",
    "W. Europe Standard Time": "Europe/Berlin",
    "China Standard Time": "Asia/Shanghai",
    "Tokyo Standard Time": "Asia/Tokyo",
    "India Standard Time": "Asia/Kolkata",
    "AUS Eastern Standard Time": "Australia/Sydney",
}


def windows_tz_to_iana(windows_tz: str) -> Optional[str]:
    """Convert Windows timezone name to IANA timezone identifier.

    Args:
        windows_tz: Windows timezone name (e.g., "Mountain Standard Time")

    Returns:
        IANA timezone identifier (e.g., "America/Denver") or None if not found
    """
    return WINDOWS_TZ_MAP.get(windows_tz.strip())


def zone_for_tzid(tzid: str, map_windows_timezones: bool = True) -> Optional[tzinfo]:
    """Look up a tzinfo for a zone identifier.

    Args:
        tzid: IANA identifier, or a Windows zone name when mapping is enabled
        map_windows_timezones: Translate Windows zone names before lookup

    Returns:
        ZoneInfo instance, or None when the identifier is unknown
    """
    key = tzid.strip()
    if map_windows_timezones:
        key = windows_tz_to_iana(key) or key
    if not key:
        return None
    try:
        return ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError):
        return None


@dataclass(frozen=True)
class TimezoneContext:
    """The single effective zone used to render every instant of a document.

    ``zone is None`` means "render in the process's local system zone". That
    covers documents without a VTIMEZONE as well as identifiers that could not
    be resolved.
    """

    tzid: Optional[str] = None
    zone: Optional[tzinfo] = None

    @classmethod
    def local(cls) -> TimezoneContext:
        """Context bound to the local system zone."""
        return cls()

    @classmethod
    def from_tzid(cls, tzid: str, map_windows_timezones: bool = True) -> TimezoneContext:
        """Context bound to an explicit zone identifier.

        Unknown identifiers are kept for reference but render in the local zone.
        """
        zone = zone_for_tzid(tzid, map_windows_timezones=map_windows_timezones)
        if zone is None:
            logger.warning("Unknown timezone %r, rendering in local system zone", tzid)
        return cls(tzid=tzid, zone=zone)

    @property
    def is_local(self) -> bool:
        """True when instants render in the local system zone."""
        return self.zone is None


def resolve_timezone(
    root: CalendarComponent,
    fallback_tzid: Optional[str] = None,
    map_windows_timezones: bool = True,
) -> TimezoneContext:
    """Resolve the effective timezone of a parsed document.

    Only the first VTIMEZONE is honored. Documents that define several zones
    render everything in the first one.

    Args:
        root: Parsed VCALENDAR component
        fallback_tzid: Zone to use when the document declares none
            (None means the local system zone)
        map_windows_timezones: Translate Windows zone names to IANA ids

    Returns:
        TimezoneContext for the document
    """
    vtimezones = root.get_all_subcomponents("VTIMEZONE")
    if vtimezones:
        if len(vtimezones) > 1:
            logger.debug(
                "Document defines %d VTIMEZONE components; only the first is used",
                len(vtimezones),
            )
        tzid = vtimezones[0].get_first_property("TZID")
        if tzid:
            context = TimezoneContext.from_tzid(str(tzid), map_windows_timezones)
            logger.debug("Resolved document timezone %s", context.tzid)
            return context
        logger.debug("First VTIMEZONE has no TZID, using fallback timezone")

    if fallback_tzid:
        return TimezoneContext.from_tzid(fallback_tzid, map_windows_timezones)
    return TimezoneContext.local()
