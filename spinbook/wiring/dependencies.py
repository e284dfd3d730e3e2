from __future__ import annotations

import logging
from functools import lru_cache
from typing import AsyncIterator

import httpx
from fastapi import Depends

from spinbook.application.ports.calendar import CalendarPort
from spinbook.application.ports.notifier import NotifierPort
from spinbook.application.ports.service_catalog import ServiceCatalogPort
from spinbook.application.use_cases.availability import AvailabilityUseCase
from spinbook.application.use_cases.commit_booking import CommitBookingUseCase
from spinbook.application.use_cases.list_bookings import ListBookingsUseCase
from spinbook.application.use_cases.notify_booking import NotifyBookingUseCase
from spinbook.application.utils.studio_config import load_studio_config
from spinbook.core.config import Settings, get_settings
from spinbook.domain.entities.studio import StudioConfig
from spinbook.infrastructure.calendar.google_calendar_client import GoogleCalendar
from spinbook.infrastructure.calendar.google_credentials import ServiceAccountTokenProvider
from spinbook.infrastructure.calendar.mock_calendar import MockCalendar
from spinbook.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from spinbook.infrastructure.telegram.telegram_client import TelegramClient
from spinbook.infrastructure.telegram.telegram_notifier import TelegramNotifier

logger = logging.getLogger(__name__)

_memory_calendar: MockCalendar | None = None


def get_service_catalog() -> ServiceCatalogPort:
    return ServiceCatalogStore()


def get_studio_config(settings: Settings = Depends(get_settings)) -> StudioConfig:
    return load_studio_config(settings)


async def get_http_client(settings: Settings = Depends(get_settings)) -> AsyncIterator[httpx.AsyncClient]:
    # One client per request; closed when the response is done.
    async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
        yield client


@lru_cache(maxsize=4)
def get_token_provider(client_email: str, private_key: str, token_uri: str) -> ServiceAccountTokenProvider:
    return ServiceAccountTokenProvider(client_email, private_key, token_uri)


def get_memory_calendar(timezone: str) -> MockCalendar:
    global _memory_calendar
    if _memory_calendar is None:
        logger.info("Using in-memory calendar (CALENDAR_PROVIDER=memory)")
        _memory_calendar = MockCalendar(timezone=timezone)
    return _memory_calendar


def build_calendar(config: StudioConfig, settings: Settings, http: httpx.AsyncClient) -> CalendarPort:
    if config.calendar_provider == "memory":
        return get_memory_calendar(config.timezone)
    token_provider = get_token_provider(config.client_email, config.private_key, settings.GOOGLE_TOKEN_URI)
    return GoogleCalendar(
        calendar_id=config.calendar_id,
        token_provider=token_provider.get_token,
        http=http,
        base_url=settings.GOOGLE_CALENDAR_BASE_URL,
    )


def build_notifier(config: StudioConfig, settings: Settings, http: httpx.AsyncClient) -> NotifierPort | None:
    if not config.telegram.bot_token:
        return None
    client = TelegramClient(
        bot_token=config.telegram.bot_token,
        http=http,
        api_base_url=settings.TELEGRAM_API_BASE_URL,
    )
    return TelegramNotifier(client=client, settings=config.telegram)


def get_calendar(
    config: StudioConfig = Depends(get_studio_config),
    settings: Settings = Depends(get_settings),
    http: httpx.AsyncClient = Depends(get_http_client),
) -> CalendarPort:
    return build_calendar(config, settings, http)


def get_notifier(
    config: StudioConfig = Depends(get_studio_config),
    settings: Settings = Depends(get_settings),
    http: httpx.AsyncClient = Depends(get_http_client),
) -> NotifierPort | None:
    return build_notifier(config, settings, http)


def get_availability_use_case(
    calendar: CalendarPort = Depends(get_calendar),
    config: StudioConfig = Depends(get_studio_config),
) -> AvailabilityUseCase:
    return AvailabilityUseCase(calendar=calendar, timezone=config.timezone)


def get_notify_booking_use_case(
    notifier: NotifierPort | None = Depends(get_notifier),
    config: StudioConfig = Depends(get_studio_config),
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
) -> NotifyBookingUseCase:
    return NotifyBookingUseCase(
        notifier=notifier,
        telegram=config.telegram,
        studio=config.studio,
        catalog=catalog,
        timezone=config.timezone,
    )


def get_commit_booking_use_case(
    calendar: CalendarPort = Depends(get_calendar),
    availability: AvailabilityUseCase = Depends(get_availability_use_case),
    notify: NotifyBookingUseCase = Depends(get_notify_booking_use_case),
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
    config: StudioConfig = Depends(get_studio_config),
) -> CommitBookingUseCase:
    return CommitBookingUseCase(
        calendar=calendar,
        availability=availability,
        notifier=notify,
        catalog=catalog,
        studio=config.studio,
        timezone=config.timezone,
    )


def get_list_bookings_use_case(
    calendar: CalendarPort = Depends(get_calendar),
    config: StudioConfig = Depends(get_studio_config),
) -> ListBookingsUseCase:
    return ListBookingsUseCase(calendar=calendar, timezone=config.timezone)
