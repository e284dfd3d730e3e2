from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from datetime import datetime, time, timedelta

from spinbook.application.exceptions import CalendarProviderError, SlotConflictError
from spinbook.application.ports.calendar import CalendarPort
from spinbook.application.ports.service_catalog import ServiceCatalogPort
from spinbook.application.use_cases.availability import AvailabilityUseCase
from spinbook.application.use_cases.notify_booking import NotifyBookingUseCase
from spinbook.application.utils.booking_id import generate_booking_id
from spinbook.application.utils.booking_metadata import encode_booking
from spinbook.application.utils.booking_text import (
    build_event_description,
    build_event_location,
    build_event_summary,
)
from spinbook.application.utils.timezone import now_utc, project_to_zone
from spinbook.domain.entities.booking import Booking, BookingRequest
from spinbook.domain.entities.calendar_event import CreatedEvent, EventDraft
from spinbook.domain.entities.notification import NotificationOutcome
from spinbook.domain.entities.studio import StudioInfo


@dataclass(frozen=True)
class BookingConfirmation:
    booking: Booking
    event: CreatedEvent
    service_names: list[str]
    notification: NotificationOutcome


def event_bounds(request: BookingRequest) -> tuple[datetime, datetime]:
    """Naive studio wall-clock [min slot:00, (max slot + 1):00). Hour 24 rolls over to the next day."""
    midnight = datetime.combine(request.date, time(0, 0))
    return (
        midnight + timedelta(hours=min(request.slots)),
        midnight + timedelta(hours=max(request.slots) + 1),
    )


def find_conflicts(requested: tuple[int, ...] | list[int], busy: list[int]) -> list[int]:
    return sorted(set(requested) & set(busy))


class CommitBookingUseCase:
    """Moves a validated request to a confirmed calendar event.

    The conflict re-check and the event insert are two separate provider calls.
    The calendar offers no reservation primitive, so a second booking landing
    between them can still double-book the same hours.
    """

    def __init__(
        self,
        calendar: CalendarPort,
        availability: AvailabilityUseCase,
        notifier: NotifyBookingUseCase,
        catalog: ServiceCatalogPort,
        studio: StudioInfo,
        timezone: str,
        rng: random.Random | None = None,
    ) -> None:
        self._calendar = calendar
        self._availability = availability
        self._notifier = notifier
        self._catalog = catalog
        self._studio = studio
        self._timezone = timezone
        self._rng = rng
        self._logger = logging.getLogger(__name__)

    async def _recheck(self, request: BookingRequest) -> None:
        try:
            busy = await self._availability.busy_hours(request.date)
        except CalendarProviderError as e:
            # A failed re-check does not block the booking.
            self._logger.error(
                "Conflict check unavailable, proceeding without it",
                extra={"date": request.date_iso, "error_kind": e.kind.value, "reason": e.detail},
            )
            return

        conflicts = find_conflicts(request.slots, busy)
        if conflicts:
            self._logger.info(
                "Slot conflicts detected",
                extra={"date": request.date_iso, "slots": conflicts},
            )
            raise SlotConflictError(conflicts)

        self._logger.info(
            "Slots free, writing event without a reservation; a concurrent booking can still land first",
            extra={"date": request.date_iso, "slots": list(request.slots), "reason": "check_then_write"},
        )

    def _build_draft(self, booking: Booking, request: BookingRequest, service_names: list[str]) -> EventDraft:
        start, end = event_bounds(request)
        return EventDraft(
            summary=build_event_summary(booking),
            description=build_event_description(
                booking,
                service_names,
                self._studio,
                generated_at=project_to_zone(booking.created_at, self._timezone),
            ),
            location=build_event_location(self._studio),
            start=start,
            end=end,
            time_zone=self._timezone,
            private_properties=encode_booking(booking, self._studio.address),
        )

    async def execute(self, request: BookingRequest) -> BookingConfirmation:
        await self._recheck(request)

        booking = Booking(
            booking_id=generate_booking_id(self._rng),
            date=request.date,
            slots=request.slots,
            services=request.services,
            contact=request.contact,
            created_at=now_utc(),
            studio_address=self._studio.address,
        )
        service_names = self._catalog.display_names(booking.services)
        draft = self._build_draft(booking, request, service_names)

        event = await self._calendar.insert_event(draft)
        booking = replace(booking, event_id=event.event_id)
        self._logger.info(
            "Booking confirmed",
            extra={
                "booking_id": booking.booking_id,
                "event_id": event.event_id,
                "date": request.date_iso,
                "slots": list(request.slots),
            },
        )

        notification = await self._notifier.execute(booking)
        return BookingConfirmation(
            booking=booking,
            event=event,
            service_names=service_names,
            notification=notification,
        )
