from __future__ import annotations

from datetime import datetime

import pytest

from spinbook.domain.entities.calendar_event import CalendarEvent, EventTime
from spinbook.domain.entities.studio import StudioInfo, TelegramSettings
from spinbook.infrastructure.catalog.service_catalog_store import ServiceCatalogStore

STUDIO_ZONE = "America/Santiago"


@pytest.fixture
def studio_zone() -> str:
    return STUDIO_ZONE


@pytest.fixture
def studio() -> StudioInfo:
    return StudioInfo(
        name="Beraka Studio",
        address="Temuco, Araucanía, Chile",
        email="contacto@example.com",
        phone="+56 9 1234 5678",
    )


@pytest.fixture
def telegram_off() -> TelegramSettings:
    return TelegramSettings(enabled=False, bot_token=None, chat_id=None)


@pytest.fixture
def telegram_on() -> TelegramSettings:
    return TelegramSettings(enabled=True, bot_token="123456:ABC-token", chat_id="-1001234567")


@pytest.fixture
def catalog() -> ServiceCatalogStore:
    return ServiceCatalogStore()


@pytest.fixture
def make_event():
    """Factory for timed events given as naive studio wall-clock strings."""

    def _make(event_id: str, start: str, end: str, status: str = "confirmed", time_zone: str = STUDIO_ZONE):
        return CalendarEvent(
            event_id=event_id,
            status=status,
            start=EventTime(date_time=datetime.fromisoformat(start), time_zone=time_zone),
            end=EventTime(date_time=datetime.fromisoformat(end), time_zone=time_zone),
        )

    return _make
