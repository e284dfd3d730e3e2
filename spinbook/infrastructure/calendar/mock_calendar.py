from __future__ import annotations

import logging
from datetime import datetime, time, timedelta

from spinbook.application.ports.calendar import CalendarPort
from spinbook.application.utils.timezone import attach_zone
from spinbook.domain.entities.calendar_event import CalendarEvent, CalendarInfo, CreatedEvent, EventDraft, EventTime


class MockCalendar(CalendarPort):
    """In-memory calendar for local runs and tests. State lives as long as the instance."""

    def __init__(self, timezone: str = "UTC", events: list[CalendarEvent] | None = None) -> None:
        self._timezone = timezone
        self._events: list[CalendarEvent] = list(events or [])
        self._logger = logging.getLogger(__name__)

    @property
    def events(self) -> list[CalendarEvent]:
        return list(self._events)

    def add_event(self, event: CalendarEvent) -> None:
        self._events.append(event)

    def _bounds(self, event: CalendarEvent, time_zone: str) -> tuple[datetime, datetime] | None:
        if event.start.is_all_day:
            start = attach_zone(datetime.combine(event.start.all_day_date, time(0)), event.start.time_zone, time_zone)
            end_day = event.end.all_day_date or (event.start.all_day_date + timedelta(days=1))
            end = attach_zone(datetime.combine(end_day, time(0)), event.end.time_zone, time_zone)
            return start, end
        if event.start.is_timed and event.end.is_timed:
            return (
                attach_zone(event.start.date_time, event.start.time_zone, time_zone),
                attach_zone(event.end.date_time, event.end.time_zone, time_zone),
            )
        return None

    async def list_events(self, time_min: datetime, time_max: datetime, time_zone: str) -> list[CalendarEvent]:
        found: list[tuple[datetime, CalendarEvent]] = []
        for event in self._events:
            if event.is_cancelled:
                continue
            bounds = self._bounds(event, time_zone)
            if bounds is None:
                # Mirror the provider: malformed events still come back in listings.
                found.append((time_min, event))
                continue
            start, end = bounds
            if start <= time_max and end > time_min:
                found.append((start, event))
        found.sort(key=lambda pair: pair[0])
        return [event for _, event in found]

    async def insert_event(self, draft: EventDraft) -> CreatedEvent:
        event_id = f"mock_event_{len(self._events) + 1}"
        html_link = f"https://calendar.example.invalid/event?eid={event_id}"
        self._events.append(
            CalendarEvent(
                event_id=event_id,
                status="confirmed",
                start=EventTime(date_time=draft.start, time_zone=draft.time_zone),
                end=EventTime(date_time=draft.end, time_zone=draft.time_zone),
                summary=draft.summary,
                html_link=html_link,
                private_properties=dict(draft.private_properties),
            )
        )
        self._logger.info(
            "Mock calendar event created",
            extra={
                "event_id": event_id,
                "start": draft.start.isoformat(),
                "end": draft.end.isoformat(),
            },
        )
        return CreatedEvent(event_id=event_id, html_link=html_link, summary=draft.summary)

    async def get_calendar_info(self) -> CalendarInfo:
        return CalendarInfo(summary="SpinBook (in-memory)", time_zone=self._timezone, access_role="owner")
