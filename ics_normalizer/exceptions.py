"""Exception hierarchy for ICS normalization.

Only IcsParseError and IcsConfigError escape the public API. The event-local
errors are raised by the helpers that convert a single VEVENT and are caught
by the document pipeline, which turns them into diagnostics.
"""


class IcsNormalizerError(Exception):
    """Base exception for all ics_normalizer errors."""


class IcsParseError(IcsNormalizerError):
    """The input text cannot be parsed as a calendar document.

    Raised when:
    - The content is empty or whitespace only
    - BEGIN:VCALENDAR / END:VCALENDAR markers are missing
    - The grammar parser rejects the content
    - The root component is not a VCALENDAR

    Fatal for the whole document: no partial results are produced.
    """


class IcsTimeConversionError(IcsNormalizerError):
    """An event instant cannot be converted into the document timezone.

    Raised when:
    - DTSTART is missing or could not be decoded
    - DTEND/DURATION hold a value that is not a date, datetime or duration
    - The converted value falls outside the supported datetime range
    """


class IcsRecurrenceRuleError(IcsNormalizerError):
    """The RRULE of an event is rejected by the recurrence-rule engine."""


class IcsConfigError(IcsNormalizerError):
    """A configuration file is present but does not hold a valid mapping."""
