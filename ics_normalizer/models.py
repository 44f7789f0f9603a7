"""Data models for normalized calendar events."""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

TIME_OF_DAY_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
DATE_WITH_OFFSET_PATTERN = r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}[+-]\d{2}:\d{2}$"
CALENDAR_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

CalendarDate = Annotated[str, StringConstraints(pattern=CALENDAR_DATE_PATTERN)]


class EventKind(str, Enum):
    """Kind discriminator used in generated event ids."""

    SINGLE = "single"
    RECURRING = "recurring"


class _NormalizedEventBase(BaseModel):
    """Fields shared by both event variants."""

    id: str = Field(..., min_length=1, description="Deterministic event id")
    title: Optional[str] = Field(default=None, description="SUMMARY, verbatim")
    all_day: bool = Field(..., alias="allDay", description="All-day event flag")
    start_time: Optional[str] = Field(
        default=None, alias="startTime", pattern=TIME_OF_DAY_PATTERN, description="HH:MM"
    )
    end_time: Optional[str] = Field(
        default=None, alias="endTime", pattern=TIME_OF_DAY_PATTERN, description="HH:MM"
    )
    url: Optional[str] = Field(default=None, description="Event URL")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @model_validator(mode="after")
    def _check_time_fields(self) -> "_NormalizedEventBase":
        has_times = (self.start_time is not None, self.end_time is not None)
        if self.all_day and any(has_times):
            raise ValueError("All-day events must not carry startTime/endTime")
        if not self.all_day and not all(has_times):
            raise ValueError("Timed events require both startTime and endTime")
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase wire form, omitting absent optional fields."""
        data = self.model_dump(by_alias=True)
        for key in ("startTime", "endTime", "url"):
            if data.get(key) is None:
                data.pop(key, None)
        return data


class SingleEvent(_NormalizedEventBase):
    """A one-off event."""

    type: Literal["single"] = "single"
    date: str = Field(..., pattern=DATE_WITH_OFFSET_PATTERN, description="Start, with offset")
    end_date: Optional[str] = Field(
        default=None,
        alias="endDate",
        pattern=DATE_WITH_OFFSET_PATTERN,
        description="End, only when it falls on a different calendar date",
    )

    @model_validator(mode="after")
    def _check_end_date(self) -> "SingleEvent":
        if self.end_date is not None and self.end_date[:10] == self.date[:10]:
            raise ValueError("endDate must be null when it falls on the start date")
        return self


class RecurringEvent(_NormalizedEventBase):
    """A recurring series described by an RRULE."""

    type: Literal["rrule"] = "rrule"
    rrule: str = Field(..., min_length=1, description="Canonical RRULE text")
    start_date: str = Field(
        ..., alias="startDate", pattern=DATE_WITH_OFFSET_PATTERN, description="Series anchor"
    )
    skip_dates: list[CalendarDate] = Field(
        default_factory=list, alias="skipDates", description="Suppressed occurrence dates"
    )

    @model_validator(mode="after")
    def _check_skip_dates(self) -> "RecurringEvent":
        if len(set(self.skip_dates)) != len(self.skip_dates):
            raise ValueError("skipDates must not contain duplicates")
        return self

    def add_skip_date(self, value: str) -> bool:
        """Append a calendar date to skip_dates unless it is already present.

        Returns:
            True if the date was added
        """
        if value in self.skip_dates:
            return False
        self.skip_dates.append(value)
        return True


NormalizedEvent = Annotated[Union[SingleEvent, RecurringEvent], Field(discriminator="type")]


class DiagnosticKind(str, Enum):
    """Why a record was dropped."""

    INVALID_TIME = "invalid_time"
    INVALID_RRULE = "invalid_rrule"
    ORPHAN_EXCEPTION = "orphan_exception"
    MERGE_INVALID = "merge_invalid"
    SCHEMA_INVALID = "schema_invalid"
    DUPLICATE_UID = "duplicate_uid"


class Diagnostic(BaseModel):
    """Structured record of an event or exception dropped during conversion."""

    kind: DiagnosticKind
    uid: Optional[str] = Field(default=None, description="UID of the source VEVENT")
    message: str
    detail: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


class ConversionResult(BaseModel):
    """Result of converting one ICS document."""

    events: list[NormalizedEvent] = Field(default_factory=list, description="Validated events")
    diagnostics: list[Diagnostic] = Field(default_factory=list, description="Dropped records")

    # Document metadata
    timezone: Optional[str] = Field(default=None, description="Resolved TZID, None for local")
    calendar_name: Optional[str] = None
    prodid: Optional[str] = None
    ics_version: Optional[str] = None

    # Statistics
    event_count: int = 0
    recurring_event_count: int = 0

    @property
    def dropped_count(self) -> int:
        """Number of source records that did not make it into ``events``."""
        return len(self.diagnostics)

    def diagnostics_of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        """Return the diagnostics of one kind."""
        return [d for d in self.diagnostics if d.kind == DiagnosticKind(kind).value]
