"""ics_normalizer - convert iCalendar documents into normalized event records.

The package does not configure logging on import; applications call
``ics_normalizer.ics_logging.configure_logging`` when they want console output.
"""

__version__ = "0.1.0"

from .config_loader import Config, load_config
from .exceptions import (
    IcsConfigError,
    IcsNormalizerError,
    IcsParseError,
    IcsRecurrenceRuleError,
    IcsTimeConversionError,
)
from .ics_parser import IcsDocumentConverter, convert_ics, get_events_from_ics
from .models import (
    ConversionResult,
    Diagnostic,
    DiagnosticKind,
    NormalizedEvent,
    RecurringEvent,
    SingleEvent,
)
from .timezone_utils import TimezoneContext, resolve_timezone

__all__ = [
    "Config",
    "ConversionResult",
    "Diagnostic",
    "DiagnosticKind",
    "IcsConfigError",
    "IcsDocumentConverter",
    "IcsNormalizerError",
    "IcsParseError",
    "IcsRecurrenceRuleError",
    "IcsTimeConversionError",
    "NormalizedEvent",
    "RecurringEvent",
    "SingleEvent",
    "TimezoneContext",
    "__version__",
    "convert_ics",
    "get_events_from_ics",
    "load_config",
    "resolve_timezone",
]
