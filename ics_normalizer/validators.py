"""Schema validation for normalized events."""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from .models import NormalizedEvent

logger = logging.getLogger(__name__)

_EVENT_ADAPTER: TypeAdapter[NormalizedEvent] = TypeAdapter(NormalizedEvent)


def validate_event_or_raise(candidate: Union[BaseModel, dict[str, Any]]) -> NormalizedEvent:
    """Validate one event candidate against the event schema.

    Models are re-validated from their serialized form, which catches
    in-place mutations made after construction (e.g. appended skip dates).

    Args:
        candidate: Event model or camelCase/snake_case mapping

    Returns:
        Freshly validated SingleEvent or RecurringEvent

    Raises:
        pydantic.ValidationError: If the candidate violates the schema
    """
    data = candidate.model_dump(by_alias=True) if isinstance(candidate, BaseModel) else candidate
    return _EVENT_ADAPTER.validate_python(data)


def validate_event(candidate: Union[BaseModel, dict[str, Any]]) -> Optional[NormalizedEvent]:
    """Validate one event candidate, returning None on rejection.

    Args:
        candidate: Event model or mapping

    Returns:
        Validated event, or None when the schema rejects it
    """
    try:
        return validate_event_or_raise(candidate)
    except ValidationError as e:
        logger.debug("Event failed validation: %s", e)
        return None


def describe_validation_error(error: ValidationError) -> str:
    """Summarize a ValidationError as ``field: message`` pairs."""
    parts = []
    for item in error.errors():
        location = ".".join(str(loc) for loc in item.get("loc", ())) or "event"
        parts.append(f"{location}: {item.get('msg', 'invalid')}")
    return "; ".join(parts)
