"""RRULE validation and canonical re-serialization.

Recurrence rules are parsed with dateutil purely to validate them and to
obtain a canonical text form. Occurrences are never expanded here.
"""

import logging
import re
from datetime import datetime

from dateutil.rrule import rrule, rrulestr

from .exceptions import IcsRecurrenceRuleError

logger = logging.getLogger(__name__)

_RRULE_PREFIX = "RRULE:"
_UTC_UNTIL_RE = re.compile(r"UNTIL=\d{8}(T\d{6})?Z", re.IGNORECASE)
_UNTIL_RE = re.compile(r"(UNTIL=\d{8}T\d{6})")
_DATE_UNTIL_RE = re.compile(r"UNTIL=\d{8}(?![TZ\d])", re.IGNORECASE)
_UNTIL_TIME_RE = re.compile(r"(UNTIL=\d{8})T\d{6}")


def normalize_rrule(rule_text: str, dtstart: datetime) -> str:
    """Parse an RRULE value and serialize it back to canonical text.

    Args:
        rule_text: RRULE value as found in the document (with or without the
            ``RRULE:`` prefix)
        dtstart: Series start; only its wall-clock time is used so that the
            rule engine never has to reconcile timezone-aware UNTIL values

    Returns:
        Canonical rule text, e.g. ``FREQ=WEEKLY;BYDAY=MO``

    Raises:
        IcsRecurrenceRuleError: If the rule engine rejects the rule
    """
    text = rule_text.strip()
    if text.upper().startswith(_RRULE_PREFIX):
        text = text[len(_RRULE_PREFIX):]
    if not text:
        raise IcsRecurrenceRuleError("Empty RRULE")

    try:
        parsed = rrulestr(text, dtstart=dtstart.replace(tzinfo=None), ignoretz=True)
    except (ValueError, TypeError, KeyError) as e:
        raise IcsRecurrenceRuleError(f"Invalid RRULE {rule_text!r}: {e}") from e
    if not isinstance(parsed, rrule):
        raise IcsRecurrenceRuleError(f"Expected a single RRULE, got {rule_text!r}")

    # str(rrule) emits a DTSTART line followed by the RRULE line
    rule_lines = [line for line in str(parsed).splitlines() if line.startswith(_RRULE_PREFIX)]
    if not rule_lines:
        raise IcsRecurrenceRuleError(f"RRULE {rule_text!r} did not serialize")
    canonical = rule_lines[0][len(_RRULE_PREFIX):]

    # dateutil drops the UTC marker from UNTIL; keep the source's meaning
    if _UTC_UNTIL_RE.search(text):
        canonical = _UNTIL_RE.sub(r"\1Z", canonical)
    # and a date-only UNTIL stays a date
    elif _DATE_UNTIL_RE.search(text):
        canonical = _UNTIL_TIME_RE.sub(r"\1", canonical)

    logger.debug("Normalized RRULE %r -> %r", rule_text, canonical)
    return canonical
