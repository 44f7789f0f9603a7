"""Unit tests for ics_normalizer.models and ics_normalizer.validators modules."""

import pytest
from pydantic import ValidationError

from ics_normalizer.models import (
    ConversionResult,
    Diagnostic,
    DiagnosticKind,
    RecurringEvent,
    SingleEvent,
)
from ics_normalizer.validators import (
    describe_validation_error,
    validate_event,
    validate_event_or_raise,
)

pytestmark = pytest.mark.unit


SINGLE_PAYLOAD = {
    "type": "single",
    "id": "ics::a::2024-01-01T09:00:00+00:00::single",
    "title": "Standup",
    "date": "2024-01-01T09:00:00+00:00",
    "endDate": None,
    "allDay": False,
    "startTime": "09:00",
    "endTime": "09:15",
}

RECURRING_PAYLOAD = {
    "type": "rrule",
    "id": "ics::b::2024-01-01T00:00:00+00:00::recurring",
    "title": None,
    "rrule": "FREQ=YEARLY",
    "startDate": "2024-01-01T00:00:00+00:00",
    "skipDates": ["2025-01-01"],
    "allDay": True,
}


class TestSingleEvent:
    """Tests for the SingleEvent model."""

    def test_valid_timed_event(self):
        event = SingleEvent.model_validate(SINGLE_PAYLOAD)

        assert event.type == "single"
        assert event.start_time == "09:00"
        assert event.end_date is None

    def test_end_date_on_same_day_rejected(self):
        payload = {**SINGLE_PAYLOAD, "endDate": "2024-01-01T10:00:00+00:00"}

        with pytest.raises(ValidationError, match="endDate must be null"):
            SingleEvent.model_validate(payload)

    def test_end_date_on_other_day_accepted(self):
        payload = {**SINGLE_PAYLOAD, "endDate": "2024-01-02T10:00:00+00:00"}

        assert SingleEvent.model_validate(payload).end_date == "2024-01-02T10:00:00+00:00"

    def test_all_day_with_times_rejected(self):
        payload = {**SINGLE_PAYLOAD, "allDay": True}

        with pytest.raises(ValidationError, match="All-day events"):
            SingleEvent.model_validate(payload)

    def test_timed_event_without_end_time_rejected(self):
        payload = {**SINGLE_PAYLOAD, "endTime": None}

        with pytest.raises(ValidationError, match="Timed events require"):
            SingleEvent.model_validate(payload)

    @pytest.mark.parametrize("value", ["9:00", "24:00", "09:00:00"])
    def test_bad_time_of_day_rejected(self, value):
        with pytest.raises(ValidationError):
            SingleEvent.model_validate({**SINGLE_PAYLOAD, "startTime": value})

    @pytest.mark.parametrize("value", ["2024-01-01", "2024-01-01T09:00:00Z", "2024-01-01 09:00"])
    def test_bad_date_rejected(self, value):
        with pytest.raises(ValidationError):
            SingleEvent.model_validate({**SINGLE_PAYLOAD, "date": value})

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            SingleEvent.model_validate({**SINGLE_PAYLOAD, "location": "Room 1"})

    def test_to_dict_uses_camel_case(self):
        event = SingleEvent.model_validate(SINGLE_PAYLOAD)

        data = event.to_dict()

        assert data["allDay"] is False
        assert data["endDate"] is None
        assert data["startTime"] == "09:00"
        assert "url" not in data

    def test_to_dict_omits_times_for_all_day(self):
        payload = {**SINGLE_PAYLOAD, "allDay": True, "startTime": None, "endTime": None}

        data = SingleEvent.model_validate(payload).to_dict()

        assert "startTime" not in data
        assert "endTime" not in data


class TestRecurringEvent:
    """Tests for the RecurringEvent model."""

    def test_valid_all_day_series(self):
        event = RecurringEvent.model_validate(RECURRING_PAYLOAD)

        assert event.type == "rrule"
        assert event.skip_dates == ["2025-01-01"]
        assert event.title is None

    def test_duplicate_skip_dates_rejected(self):
        payload = {**RECURRING_PAYLOAD, "skipDates": ["2025-01-01", "2025-01-01"]}

        with pytest.raises(ValidationError, match="duplicates"):
            RecurringEvent.model_validate(payload)

    def test_skip_dates_must_be_calendar_dates(self):
        payload = {**RECURRING_PAYLOAD, "skipDates": ["2025-01-01T00:00:00+00:00"]}

        with pytest.raises(ValidationError):
            RecurringEvent.model_validate(payload)

    def test_add_skip_date(self):
        event = RecurringEvent.model_validate(RECURRING_PAYLOAD)

        assert event.add_skip_date("2026-01-01") is True
        assert event.add_skip_date("2026-01-01") is False
        assert event.skip_dates == ["2025-01-01", "2026-01-01"]

    def test_empty_rrule_rejected(self):
        with pytest.raises(ValidationError):
            RecurringEvent.model_validate({**RECURRING_PAYLOAD, "rrule": ""})


class TestValidators:
    """Tests for validate_event and validate_event_or_raise."""

    def test_discriminator_selects_variant(self):
        assert isinstance(validate_event_or_raise(SINGLE_PAYLOAD), SingleEvent)
        assert isinstance(validate_event_or_raise(RECURRING_PAYLOAD), RecurringEvent)

    def test_model_revalidated_from_serialized_form(self):
        event = RecurringEvent.model_validate(RECURRING_PAYLOAD)
        event.skip_dates.append("2025-01-01")

        with pytest.raises(ValidationError):
            validate_event_or_raise(event)

    def test_valid_model_returns_fresh_copy(self):
        event = SingleEvent.model_validate(SINGLE_PAYLOAD)

        result = validate_event_or_raise(event)

        assert result == event
        assert result is not event

    def test_validate_event_returns_none_on_rejection(self):
        assert validate_event({**SINGLE_PAYLOAD, "type": "weekly"}) is None
        assert validate_event({"type": "single"}) is None

    def test_validate_event_accepts_valid_payload(self):
        assert validate_event(SINGLE_PAYLOAD) is not None

    def test_describe_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_event_or_raise({**SINGLE_PAYLOAD, "startTime": "9am"})

        description = describe_validation_error(exc_info.value)

        assert "startTime" in description


class TestConversionResult:
    """Tests for ConversionResult helpers."""

    def test_dropped_count_and_filtering(self):
        result = ConversionResult(
            diagnostics=[
                Diagnostic(kind=DiagnosticKind.INVALID_TIME, uid="a", message="bad"),
                Diagnostic(kind=DiagnosticKind.ORPHAN_EXCEPTION, uid="b", message="orphan"),
                Diagnostic(kind=DiagnosticKind.INVALID_TIME, uid="c", message="bad"),
            ]
        )

        assert result.dropped_count == 3
        assert [d.uid for d in result.diagnostics_of_kind(DiagnosticKind.INVALID_TIME)] == ["a", "c"]
        assert [d.uid for d in result.diagnostics_of_kind("orphan_exception")] == ["b"]

    def test_empty_result(self):
        result = ConversionResult()

        assert result.events == []
        assert result.dropped_count == 0
        assert result.timezone is None
