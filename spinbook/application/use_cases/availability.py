from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable

from spinbook.application.ports.calendar import CalendarPort
from spinbook.application.utils.timezone import attach_zone, day_window_utc, project_to_zone
from spinbook.domain.entities.calendar_event import CalendarEvent

logger = logging.getLogger(__name__)

HOURS_IN_DAY = 24
ALL_HOURS = frozenset(range(HOURS_IN_DAY))


def occupied_hours(event: CalendarEvent, day: date, zone_name: str) -> frozenset[int]:
    """Hours of ``day`` (studio-local) that ``event`` blocks.

    A partially used hour blocks the whole hour: an event ending at 19:30 blocks 19,
    an event ending at 19:00 does not. Events running past midnight are clipped
    to ``day``.
    """
    if event.start.is_all_day:
        first = event.start.all_day_date
        # All-day end dates are exclusive.
        end = event.end.all_day_date
        if end is None or end <= first:
            end = first + timedelta(days=1)
        return ALL_HOURS if first <= day < end else frozenset()

    if not (event.start.is_timed and event.end.is_timed):
        logger.warning(
            "Event with unknown time format skipped",
            extra={"event_id": event.event_id, "reason": "no dateTime or date"},
        )
        return frozenset()

    start = project_to_zone(attach_zone(event.start.date_time, event.start.time_zone, zone_name), zone_name)
    end = project_to_zone(attach_zone(event.end.date_time, event.end.time_zone, zone_name), zone_name)

    if start.date() > day or end.date() < day:
        return frozenset()

    start_hour = 0 if start.date() < day else start.hour
    if end.date() > day:
        end_hour = HOURS_IN_DAY
    else:
        end_hour = end.hour + 1 if (end.minute or end.second) else end.hour

    return frozenset(h for h in range(start_hour, end_hour) if 0 <= h < HOURS_IN_DAY)


def resolve_busy_hours(day: date, events: Iterable[CalendarEvent], zone_name: str) -> list[int]:
    """Sorted, deduplicated busy hours of ``day``. Pure function of its inputs."""
    busy: set[int] = set()
    for event in events:
        if event.is_cancelled:
            continue
        busy |= occupied_hours(event, day, zone_name)
    return sorted(busy)


class AvailabilityUseCase:
    def __init__(self, calendar: CalendarPort, timezone: str) -> None:
        self._calendar = calendar
        self._timezone = timezone
        self._logger = logging.getLogger(__name__)

    async def fetch_events(self, day: date) -> list[CalendarEvent]:
        time_min, time_max = day_window_utc(day, self._timezone)
        events = await self._calendar.list_events(time_min, time_max, self._timezone)
        self._logger.debug(
            "Calendar events fetched",
            extra={"date": day.isoformat(), "event_count": len(events)},
        )
        return events

    async def busy_hours(self, day: date) -> list[int]:
        events = await self.fetch_events(day)
        busy = resolve_busy_hours(day, events, self._timezone)
        self._logger.info("Busy slots resolved", extra={"date": day.isoformat(), "slots": busy})
        return busy
