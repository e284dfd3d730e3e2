from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from spinbook.api.schemas import (
    CreatedEventSchema,
    CreateEventResponseSchema,
    ErrorResponseSchema,
    NotificationSchema,
)
from spinbook.application.exceptions import BookingValidationError
from spinbook.application.ports.service_catalog import ServiceCatalogPort
from spinbook.application.use_cases.availability import AvailabilityUseCase
from spinbook.application.use_cases.commit_booking import CommitBookingUseCase
from spinbook.application.use_cases.validate_booking import parse_booking_date, validate_booking_payload
from spinbook.wiring.dependencies import (
    get_availability_use_case,
    get_commit_booking_use_case,
    get_service_catalog,
)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponseSchema},
    409: {"model": ErrorResponseSchema},
    500: {"model": ErrorResponseSchema},
    502: {"model": ErrorResponseSchema},
    503: {"model": ErrorResponseSchema},
    504: {"model": ErrorResponseSchema},
}


@router.get("/get-events", response_model=list[int], responses=ERROR_RESPONSES)
async def get_events(
    date: str | None = Query(None),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
) -> list[int]:
    day = parse_booking_date(date)
    return await uc.busy_hours(day)


@router.post("/create-event", status_code=201, response_model=CreateEventResponseSchema, responses=ERROR_RESPONSES)
async def create_event(
    request: Request,
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
    uc: CommitBookingUseCase = Depends(get_commit_booking_use_case),
) -> CreateEventResponseSchema:
    try:
        payload = await request.json()
    except ValueError:
        raise BookingValidationError("body", "Request body must be valid JSON.") from None

    booking_request = validate_booking_payload(payload, catalog)
    confirmation = await uc.execute(booking_request)
    booking = confirmation.booking
    notification = confirmation.notification

    return CreateEventResponseSchema(
        message="Reserva confirmada con éxito! Tu reserva ha sido registrada en el calendario.",
        event=CreatedEventSchema(
            id=booking.booking_id,
            booking_id=booking.booking_id,
            html_link=confirmation.event.html_link,
            summary=confirmation.event.summary,
            services=confirmation.service_names,
            observations=booking.contact.observations,
            studio_address=booking.studio_address or "",
            telegram_notification="Enviada" if notification.sent else "Falló (reserva confirmada igualmente)",
            notification=NotificationSchema(sent=notification.sent, reason=notification.reason),
        ),
    )
