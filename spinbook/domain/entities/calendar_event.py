from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class EventTime:
    # Exactly one of date_time / all_day_date is set for a well-formed event.
    date_time: datetime | None = None
    all_day_date: date | None = None
    time_zone: str | None = None

    @property
    def is_timed(self) -> bool:
        return self.date_time is not None

    @property
    def is_all_day(self) -> bool:
        return self.date_time is None and self.all_day_date is not None


@dataclass(frozen=True)
class CalendarEvent:
    event_id: str
    status: str
    start: EventTime
    end: EventTime
    summary: str | None = None
    html_link: str | None = None
    private_properties: dict[str, str] = field(default_factory=dict)

    @property
    def is_cancelled(self) -> bool:
        return self.status == "cancelled"


@dataclass(frozen=True)
class EventDraft:
    """Payload for a new calendar event. start/end are naive studio wall-clock times."""

    summary: str
    description: str
    location: str
    start: datetime
    end: datetime
    time_zone: str
    private_properties: dict[str, str]
    color_id: str = "5"
    reminder_minutes: tuple[int, ...] = (60, 15)


@dataclass(frozen=True)
class CreatedEvent:
    event_id: str
    html_link: str | None
    summary: str | None


@dataclass(frozen=True)
class CalendarInfo:
    summary: str | None
    time_zone: str | None
    access_role: str | None
