"""
Tests for the HTTP API, with the calendar replaced by the in-memory adapter.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from spinbook.api.errors import register_error_handlers
from spinbook.application.exceptions import CalendarProviderError, ProviderErrorKind
from spinbook.core.config import Settings, get_settings
from spinbook.infrastructure.calendar.mock_calendar import MockCalendar
from spinbook.main import app
from spinbook.wiring.dependencies import get_calendar

BOOKING = {
    "date": "2025-08-20",
    "slots": [17, 18],
    "services": ["grabacion", "mixmastering"],
    "userData": {
        "name": "Ana",
        "email": "ana@example.com",
        "phone": "+56 9 1111 2222",
        "observations": "Traigo mi guitarra",
    },
}


class TimeoutCalendar(MockCalendar):
    async def list_events(self, time_min, time_max, time_zone):
        raise CalendarProviderError(ProviderErrorKind.timeout, "Request timed out")


def _settings(**overrides) -> Settings:
    values = {"CALENDAR_PROVIDER": "memory", "STUDIO_TIMEZONE": "America/Santiago"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def calendar(studio_zone):
    return MockCalendar(timezone=studio_zone)


@pytest.fixture
def client(calendar):
    app.dependency_overrides[get_settings] = lambda: _settings()
    app.dependency_overrides[get_calendar] = lambda: calendar
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_get_events_requires_date(client):
    response = client.get("/api/get-events")
    assert response.status_code == 400
    assert response.json()["field"] == "date"


def test_get_events_rejects_malformed_date(client):
    assert client.get("/api/get-events", params={"date": "20-08-2025"}).status_code == 400


def test_get_events_returns_busy_hours(client, calendar, make_event):
    calendar.add_event(make_event("x", "2025-08-20T19:00:00", "2025-08-20T20:30:00"))
    response = client.get("/api/get-events", params={"date": "2025-08-20"})
    assert response.status_code == 200
    assert response.json() == [19, 20]


def test_create_event_confirms_booking(client, calendar):
    response = client.post("/api/create-event", json=BOOKING)

    assert response.status_code == 201
    event = response.json()["event"]
    assert event["bookingId"].startswith("SB-")
    assert event["id"] == event["bookingId"]
    assert event["services"] == ["Grabación de Voces/Instrumentos", "Mix/Mastering"]
    assert event["observations"] == "Traigo mi guitarra"
    assert event["notification"] == {"sent": False, "reason": "disabled_or_not_configured"}
    assert len(calendar.events) == 1

    busy = client.get("/api/get-events", params={"date": "2025-08-20"}).json()
    assert busy == [17, 18]


def test_create_event_conflict_returns_409(client, calendar, make_event):
    calendar.add_event(make_event("x", "2025-08-20T18:00:00", "2025-08-20T19:00:00"))

    response = client.post("/api/create-event", json=BOOKING)

    assert response.status_code == 409
    assert response.json()["conflicting_slots"] == [18]
    assert len(calendar.events) == 1


def test_create_event_invalid_slot_makes_no_calendar_call(client, calendar):
    response = client.post("/api/create-event", json={**BOOKING, "slots": [25]})

    assert response.status_code == 400
    assert response.json()["field"] == "slots"
    assert calendar.events == []


def test_create_event_rejects_non_json_body(client):
    response = client.post("/api/create-event", content=b"not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json()["field"] == "body"


def test_provider_timeout_maps_to_504(client, studio_zone):
    app.dependency_overrides[get_calendar] = lambda: TimeoutCalendar(timezone=studio_zone)

    response = client.get("/api/get-events", params={"date": "2025-08-20"})

    assert response.status_code == 504
    body = response.json()
    assert body["error_kind"] == "timeout"
    assert body["retryable"] is True
    assert body["debug"] == "Request timed out"


def test_configuration_error_maps_to_500(client):
    app.dependency_overrides[get_settings] = lambda: _settings(STUDIO_TIMEZONE="Nowhere/Land")

    response = client.get("/api/get-events", params={"date": "2025-08-20"})

    assert response.status_code == 500
    assert response.json()["error_kind"] == "invalid_timezone"


def test_test_config_reports_success_for_memory_calendar(client):
    response = client.get("/api/test-config")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["healthChecks"]["telegramNotifications"] == "disabled"


def test_test_config_reports_missing_credentials(client):
    app.dependency_overrides[get_settings] = lambda: _settings(CALENDAR_PROVIDER="google")

    response = client.get("/api/test-config")

    assert response.status_code == 500
    body = response.json()
    assert body["errorKind"] == "missing_client_email"
    assert body["failedChecks"] == ["Google Service Account Email missing"]


def test_admin_bookings_lists_created_booking(client):
    created = client.post("/api/create-event", json=BOOKING).json()["event"]

    response = client.get("/api/admin/bookings", params={"from": "2025-08-01", "to": "2025-08-31"})

    assert response.status_code == 200
    [booking] = response.json()
    assert booking["id"] == created["bookingId"]
    assert booking["date"] == "2025-08-20"
    assert booking["slots"] == [17, 18]
    assert booking["userData"]["email"] == "ana@example.com"


def test_admin_bookings_rejects_inverted_range(client):
    response = client.get("/api/admin/bookings", params={"from": "2025-08-31", "to": "2025-08-01"})
    assert response.status_code == 400


def test_admin_config_exposes_catalog_and_schedule(client):
    body = client.get("/api/admin/config").json()

    assert body["services"]["produccion"] == "Producción Musical"
    assert body["schedule"] == {"availableHours": [17, 18, 19, 20, 21], "workingDays": [1, 2, 3, 4, 5]}
    assert body["telegram"] == {"enabled": False}


def test_admin_test_telegram_without_configuration(client):
    response = client.post("/api/admin/test-telegram")

    assert response.status_code == 400
    assert response.json()["reason"] == "disabled_or_not_configured"


def test_production_error_bodies_omit_debug():
    production_app = FastAPI()
    register_error_handlers(production_app, include_debug=False)

    @production_app.get("/boom")
    async def boom():
        raise CalendarProviderError(ProviderErrorKind.timeout, "upstream internals")

    response = TestClient(production_app).get("/boom")

    assert response.status_code == 504
    body = response.json()
    assert body["error_kind"] == "timeout"
    assert "debug" not in body
    assert "upstream internals" not in response.text
