from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Awaitable, Callable
from urllib.parse import quote

import httpx

from spinbook.application.exceptions import CalendarProviderError, ProviderErrorKind
from spinbook.application.ports.calendar import CalendarPort
from spinbook.application.utils.timezone import format_utc
from spinbook.domain.entities.calendar_event import CalendarEvent, CalendarInfo, CreatedEvent, EventDraft, EventTime

logger = logging.getLogger(__name__)

MAX_RESULTS = 250
MAX_PAGES = 20

RATE_LIMIT_REASONS = {"rateLimitExceeded", "userRateLimitExceeded", "quotaExceeded", "dailyLimitExceeded"}

TokenProvider = Callable[[], Awaitable[str]]


def _error_reasons(body: Any) -> set[str]:
    if not isinstance(body, dict):
        return set()
    error = body.get("error")
    if not isinstance(error, dict):
        return set()
    reasons = {e.get("reason") for e in error.get("errors") or [] if isinstance(e, dict)}
    if error.get("status"):
        reasons.add(error["status"])
    return {r for r in reasons if r}


def classify_http_error(status_code: int, body: Any) -> ProviderErrorKind:
    reasons = _error_reasons(body)
    if status_code == 400:
        return ProviderErrorKind.malformed_request
    if status_code == 401:
        return ProviderErrorKind.authentication
    if status_code == 403:
        if reasons & RATE_LIMIT_REASONS or "RESOURCE_EXHAUSTED" in reasons:
            return ProviderErrorKind.rate_limit
        return ProviderErrorKind.permission
    if status_code in {404, 410}:
        return ProviderErrorKind.calendar_not_found
    if status_code == 408:
        return ProviderErrorKind.timeout
    if status_code == 409:
        return ProviderErrorKind.conflict
    if status_code == 429:
        return ProviderErrorKind.rate_limit
    if status_code >= 500:
        return ProviderErrorKind.unavailable
    return ProviderErrorKind.malformed_request


def _parse_event_time(raw: Any) -> EventTime:
    if not isinstance(raw, dict):
        return EventTime()
    tz = raw.get("timeZone")
    if raw.get("dateTime"):
        try:
            return EventTime(date_time=datetime.fromisoformat(raw["dateTime"].replace("Z", "+00:00")), time_zone=tz)
        except (ValueError, AttributeError):
            logger.warning("Unparseable event dateTime", extra={"reason": str(raw.get("dateTime"))})
            return EventTime(time_zone=tz)
    if raw.get("date"):
        try:
            return EventTime(all_day_date=date.fromisoformat(raw["date"]), time_zone=tz)
        except (ValueError, TypeError):
            logger.warning("Unparseable event date", extra={"reason": str(raw.get("date"))})
    return EventTime(time_zone=tz)


def parse_event(item: dict[str, Any]) -> CalendarEvent:
    private = ((item.get("extendedProperties") or {}).get("private")) or {}
    return CalendarEvent(
        event_id=str(item.get("id", "")),
        status=item.get("status") or "confirmed",
        start=_parse_event_time(item.get("start")),
        end=_parse_event_time(item.get("end")),
        summary=item.get("summary"),
        html_link=item.get("htmlLink"),
        private_properties={str(k): str(v) for k, v in private.items()},
    )


def draft_to_body(draft: EventDraft) -> dict[str, Any]:
    return {
        "summary": draft.summary,
        "description": draft.description,
        "location": draft.location,
        "start": {"dateTime": draft.start.strftime("%Y-%m-%dT%H:%M:%S"), "timeZone": draft.time_zone},
        "end": {"dateTime": draft.end.strftime("%Y-%m-%dT%H:%M:%S"), "timeZone": draft.time_zone},
        "extendedProperties": {"private": dict(draft.private_properties)},
        "colorId": draft.color_id,
        "reminders": {
            "useDefault": False,
            "overrides": [{"method": "popup", "minutes": m} for m in draft.reminder_minutes],
        },
        "status": "confirmed",
    }


class GoogleCalendar(CalendarPort):
    """Google Calendar v3 over REST."""

    def __init__(
        self,
        calendar_id: str,
        token_provider: TokenProvider,
        http: httpx.AsyncClient,
        base_url: str = "https://www.googleapis.com/calendar/v3",
    ) -> None:
        self._calendar_id = calendar_id
        self._token_provider = token_provider
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._logger = logging.getLogger(__name__)

    @property
    def _calendar_path(self) -> str:
        return f"/calendars/{quote(self._calendar_id, safe='')}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        token = await self._token_provider()
        headers = {"Authorization": f"Bearer {token}"}
        try:
            resp = await self._http.request(method, f"{self._base_url}{path}", params=params, json=json, headers=headers)
        except httpx.TimeoutException as e:
            raise CalendarProviderError(ProviderErrorKind.timeout, f"Request to {path} timed out") from e
        except httpx.HTTPError as e:
            raise CalendarProviderError(ProviderErrorKind.unavailable, f"Connection failed: {e}") from e

        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = None
            kind = classify_http_error(resp.status_code, body)
            error = body.get("error") if isinstance(body, dict) else None
            message = error.get("message") if isinstance(error, dict) else None
            self._logger.error(
                "Google Calendar API error",
                extra={"status": resp.status_code, "error_kind": kind.value, "reason": message},
            )
            raise CalendarProviderError(kind, message or resp.text or f"HTTP {resp.status_code}", resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise CalendarProviderError(ProviderErrorKind.unavailable, "Malformed JSON from calendar API") from e
        if not isinstance(data, dict):
            raise CalendarProviderError(ProviderErrorKind.unavailable, "Malformed JSON from calendar API")
        return data

    async def list_events(self, time_min: datetime, time_max: datetime, time_zone: str) -> list[CalendarEvent]:
        params: dict[str, Any] = {
            "timeMin": format_utc(time_min),
            "timeMax": format_utc(time_max),
            "timeZone": time_zone,
            "singleEvents": "true",
            "orderBy": "startTime",
            "showDeleted": "false",
            "maxResults": MAX_RESULTS,
        }
        events: list[CalendarEvent] = []
        for _ in range(MAX_PAGES):
            data = await self._request("GET", f"{self._calendar_path}/events", params=params)
            events.extend(parse_event(item) for item in data.get("items") or [] if isinstance(item, dict))
            page_token = data.get("nextPageToken")
            if not page_token:
                break
            params["pageToken"] = page_token
        return events

    async def insert_event(self, draft: EventDraft) -> CreatedEvent:
        data = await self._request(
            "POST",
            f"{self._calendar_path}/events",
            params={"sendUpdates": "none"},
            json=draft_to_body(draft),
        )
        event_id = data.get("id")
        if not event_id:
            raise CalendarProviderError(ProviderErrorKind.unavailable, "No event ID returned from Google Calendar API")
        self._logger.info("Calendar event created", extra={"event_id": event_id})
        return CreatedEvent(event_id=str(event_id), html_link=data.get("htmlLink"), summary=data.get("summary"))

    async def get_calendar_info(self) -> CalendarInfo:
        data = await self._request("GET", self._calendar_path)
        access_role = None
        try:
            entry = await self._request("GET", f"/users/me/calendarList/{quote(self._calendar_id, safe='')}")
            access_role = entry.get("accessRole")
        except CalendarProviderError as e:
            # Shared calendars are often missing from the service account's own list.
            if e.kind is not ProviderErrorKind.calendar_not_found:
                raise
        return CalendarInfo(summary=data.get("summary"), time_zone=data.get("timeZone"), access_role=access_role)
