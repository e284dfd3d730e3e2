from __future__ import annotations

import logging
from datetime import date

from spinbook.application.exceptions import BookingValidationError
from spinbook.application.ports.calendar import CalendarPort
from spinbook.application.utils.booking_metadata import MetadataDecodeError, decode_booking, is_booking_metadata
from spinbook.application.utils.timezone import attach_zone, day_window_utc, project_to_zone
from spinbook.domain.entities.booking import Booking
from spinbook.domain.entities.calendar_event import CalendarEvent

MAX_RANGE_DAYS = 92


def _event_local_date(event: CalendarEvent, zone_name: str) -> date | None:
    if event.start.is_all_day:
        return event.start.all_day_date
    if event.start.is_timed:
        start = attach_zone(event.start.date_time, event.start.time_zone, zone_name)
        return project_to_zone(start, zone_name).date()
    return None


class ListBookingsUseCase:
    """Rebuilds bookings from the calendar alone; the event metadata block is the booking's state."""

    def __init__(self, calendar: CalendarPort, timezone: str) -> None:
        self._calendar = calendar
        self._timezone = timezone
        self._logger = logging.getLogger(__name__)

    async def execute(self, first_day: date, last_day: date) -> list[Booking]:
        if last_day < first_day:
            raise BookingValidationError("to", "'to' must not be earlier than 'from'.")
        if (last_day - first_day).days > MAX_RANGE_DAYS:
            raise BookingValidationError("to", f"Date range must not exceed {MAX_RANGE_DAYS} days.")

        time_min, _ = day_window_utc(first_day, self._timezone)
        _, time_max = day_window_utc(last_day, self._timezone)
        events = await self._calendar.list_events(time_min, time_max, self._timezone)

        bookings: list[Booking] = []
        for event in events:
            if not is_booking_metadata(event.private_properties):
                continue
            try:
                booking = decode_booking(
                    event.private_properties,
                    event_id=event.event_id,
                    fallback_date=_event_local_date(event, self._timezone),
                    status=event.status,
                )
            except MetadataDecodeError as e:
                self._logger.warning(
                    "Unreadable booking metadata skipped",
                    extra={"event_id": event.event_id, "reason": str(e)},
                )
                continue
            bookings.append(booking)

        bookings.sort(key=lambda b: (b.date, b.slots[:1], b.booking_id))
        return bookings
