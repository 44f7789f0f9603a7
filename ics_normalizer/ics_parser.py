"""ICS document conversion pipeline.

parse -> resolve timezone -> drop events with unusable instants -> extract ->
reconcile recurrence exceptions -> validate.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from .component import CalendarComponent, parse_calendar
from .config_loader import Config
from .datetime_utils import to_zone
from .event_merger import RecurrenceReconciler
from .event_parser import IcsEventExtractor, event_end, event_start, event_uid, recurrence_id
from .exceptions import IcsRecurrenceRuleError, IcsTimeConversionError
from .models import (
    ConversionResult,
    Diagnostic,
    DiagnosticKind,
    NormalizedEvent,
    RecurringEvent,
)
from .timezone_utils import TimezoneContext, resolve_timezone
from .validators import describe_validation_error, validate_event_or_raise

logger = logging.getLogger(__name__)


class IcsDocumentConverter:
    """Converts one ICS document into validated normalized events.

    A converter holds configuration only; every call to ``convert`` builds its
    own component tree, timezone context and diagnostics, so one instance can
    be shared between threads.
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        """Initialize converter.

        Args:
            config: Optional configuration, defaults to Config()
        """
        self.config = config or Config()
        self._extractor = IcsEventExtractor(self.config.source_marker)
        self._reconciler = RecurrenceReconciler()

    def convert(self, ics_content: str) -> ConversionResult:
        """Convert ICS text into normalized events.

        Args:
            ics_content: Raw ICS document text

        Returns:
            ConversionResult with validated events and diagnostics for every
            dropped record

        Raises:
            IcsParseError: If the text is not a parseable calendar document
        """
        root = parse_calendar(ics_content)
        context = resolve_timezone(
            root,
            fallback_tzid=self.config.fallback_timezone,
            map_windows_timezones=self.config.map_windows_timezones,
        )

        diagnostics: list[Diagnostic] = []
        components = root.get_all_subcomponents("VEVENT")

        base_events: list[tuple[str, NormalizedEvent]] = []
        exceptions: list[tuple[str, NormalizedEvent]] = []
        for component in components:
            uid = event_uid(component)

            problem = self._probe_times(component, context)
            if problem is not None:
                logger.warning("Skipping event %s with invalid time: %s", uid, problem)
                diagnostics.append(
                    Diagnostic(kind=DiagnosticKind.INVALID_TIME, uid=uid, message=problem)
                )
                continue

            event = self._extract(component, context, diagnostics)
            if event is None:
                continue

            if recurrence_id(component) is None:
                base_events.append((uid, event))
            else:
                exceptions.append((uid, event))

        events, merge_diagnostics = self._reconciler.reconcile(base_events, exceptions)
        diagnostics.extend(merge_diagnostics)

        validated: list[NormalizedEvent] = []
        for event in events:
            try:
                validated.append(validate_event_or_raise(event))
            except ValidationError as e:
                logger.warning("Dropping event %s that failed validation", event.id)
                diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.SCHEMA_INVALID,
                        uid=self._uid_from_id(event.id),
                        message="Event failed schema validation",
                        detail=describe_validation_error(e),
                    )
                )

        result = ConversionResult(
            events=validated,
            diagnostics=diagnostics,
            timezone=context.tzid,
            calendar_name=self._calendar_property(root, "X-WR-CALNAME"),
            prodid=self._calendar_property(root, "PRODID"),
            ics_version=self._calendar_property(root, "VERSION"),
            event_count=len(components),
            recurring_event_count=sum(isinstance(e, RecurringEvent) for e in validated),
        )

        logger.info(
            "Converted %d events from ICS content (%d VEVENTs, %d dropped, timezone=%s)",
            len(result.events),
            result.event_count,
            result.dropped_count,
            context.tzid or "local",
        )
        return result

    def _probe_times(self, component: CalendarComponent, context: TimezoneContext) -> Optional[str]:
        """Try converting start and end into the document zone.

        Returns:
            None when both convert, otherwise a description of the failure
        """
        try:
            to_zone(event_start(component), context)
            to_zone(event_end(component), context)
        except IcsTimeConversionError as e:
            return str(e)
        return None

    def _extract(
        self,
        component: CalendarComponent,
        context: TimezoneContext,
        diagnostics: list[Diagnostic],
    ) -> Optional[NormalizedEvent]:
        uid = event_uid(component)
        try:
            return self._extractor.extract(component, context)
        except IcsTimeConversionError as e:
            logger.warning("Skipping event %s with invalid time: %s", uid, e)
            diagnostics.append(Diagnostic(kind=DiagnosticKind.INVALID_TIME, uid=uid, message=str(e)))
        except IcsRecurrenceRuleError as e:
            logger.warning("Skipping event %s with invalid RRULE: %s", uid, e)
            diagnostics.append(Diagnostic(kind=DiagnosticKind.INVALID_RRULE, uid=uid, message=str(e)))
        except ValidationError as e:
            logger.warning("Skipping event %s that failed validation", uid)
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.SCHEMA_INVALID,
                    uid=uid,
                    message="Event failed schema validation",
                    detail=describe_validation_error(e),
                )
            )
        return None

    def _calendar_property(self, root: CalendarComponent, prop_name: str) -> Optional[str]:
        value = root.get_first_property(prop_name)
        return str(value) if value else None

    def _uid_from_id(self, event_id: str) -> Optional[str]:
        parts = event_id.split("::")
        return parts[1] if len(parts) >= 4 else None


def convert_ics(ics_content: str, config: Optional[Config] = None) -> ConversionResult:
    """Convert ICS text into a ConversionResult (convenience function)."""
    return IcsDocumentConverter(config).convert(ics_content)


def get_events_from_ics(ics_content: str, config: Optional[Config] = None) -> list[NormalizedEvent]:
    """Convert ICS text and return only the validated events (convenience function)."""
    return convert_ics(ics_content, config).events
