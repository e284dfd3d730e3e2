from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response

from spinbook.api.schemas import (
    AdminConfigSchema,
    BookingSchema,
    ScheduleSchema,
    StudioSchema,
    TelegramStatusSchema,
    TelegramTestResponseSchema,
    UserDataSchema,
)
from spinbook.application.ports.service_catalog import ServiceCatalogPort
from spinbook.application.use_cases.list_bookings import ListBookingsUseCase
from spinbook.application.use_cases.notify_booking import NotifyBookingUseCase
from spinbook.application.use_cases.validate_booking import parse_booking_date
from spinbook.domain.entities.booking import Booking
from spinbook.domain.entities.studio import StudioConfig
from spinbook.wiring.dependencies import (
    get_list_bookings_use_case,
    get_notify_booking_use_case,
    get_service_catalog,
    get_studio_config,
)

router = APIRouter()

NOT_CONFIGURED_REASONS = {"disabled_or_not_configured", "invalid_bot_token_format"}


def to_booking_schema(booking: Booking) -> BookingSchema:
    return BookingSchema(
        id=booking.booking_id,
        date=booking.date,
        slots=list(booking.slots),
        services=list(booking.services),
        user_data=UserDataSchema(
            name=booking.contact.name,
            email=booking.contact.email,
            phone=booking.contact.phone,
            observations=booking.contact.observations,
        ),
        status=booking.status,
        created_at=booking.created_at,
        event_id=booking.event_id,
        studio_address=booking.studio_address,
    )


@router.get("/bookings", response_model=list[BookingSchema])
async def list_bookings(
    from_: str | None = Query(None, alias="from"),
    to: str | None = Query(None),
    uc: ListBookingsUseCase = Depends(get_list_bookings_use_case),
) -> list[BookingSchema]:
    first_day = parse_booking_date(from_)
    last_day = parse_booking_date(to) if to else first_day
    bookings = await uc.execute(first_day, last_day)
    return [to_booking_schema(b) for b in bookings]


@router.get("/config", response_model=AdminConfigSchema)
def get_config(
    config: StudioConfig = Depends(get_studio_config),
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
) -> AdminConfigSchema:
    return AdminConfigSchema(
        studio=StudioSchema(
            name=config.studio.name,
            address=config.studio.address,
            email=config.studio.email,
            phone=config.studio.phone,
        ),
        services={entry.service_key: entry.display_name for entry in catalog.list_services()},
        schedule=ScheduleSchema(
            available_hours=list(config.available_hours),
            working_days=list(config.working_days),
        ),
        telegram=TelegramStatusSchema(enabled=config.telegram.is_configured),
        timezone=config.timezone,
    )


@router.post("/test-telegram", response_model=TelegramTestResponseSchema)
async def send_test_telegram(
    response: Response,
    uc: NotifyBookingUseCase = Depends(get_notify_booking_use_case),
) -> TelegramTestResponseSchema:
    outcome = await uc.send_test()
    if outcome.sent:
        return TelegramTestResponseSchema(message="Mensaje de prueba enviado exitosamente", sent=True)
    if outcome.reason in NOT_CONFIGURED_REASONS:
        response.status_code = 400
        message = "Telegram no está configurado correctamente"
    else:
        response.status_code = 502
        message = "Error al enviar mensaje de prueba"
    return TelegramTestResponseSchema(message=message, sent=False, reason=outcome.reason)
