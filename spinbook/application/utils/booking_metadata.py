from __future__ import annotations

import json
from datetime import date, datetime, timezone
from typing import Mapping

from spinbook.domain.entities.booking import Booking, ContactInfo

BOOKING_ID = "spinbook_booking_id"
DATE = "spinbook_date"
CLIENT_NAME = "spinbook_client_name"
CLIENT_EMAIL = "spinbook_client_email"
CLIENT_PHONE = "spinbook_client_phone"
SLOTS = "spinbook_slots"
SERVICES = "spinbook_services"
OBSERVATIONS = "spinbook_observations"
STUDIO_ADDRESS = "spinbook_studio_address"
CREATED_AT = "spinbook_created_at"


class MetadataDecodeError(ValueError):
    """Raised when an event carries a booking id but the rest of the block is unreadable."""


def encode_booking(booking: Booking, studio_address: str) -> dict[str, str]:
    """Private extended properties for a booking event. All values are strings."""
    return {
        CLIENT_NAME: booking.contact.name,
        CLIENT_EMAIL: booking.contact.email,
        CLIENT_PHONE: booking.contact.phone,
        BOOKING_ID: booking.booking_id,
        DATE: booking.date.isoformat(),
        SLOTS: json.dumps(list(booking.slots)),
        SERVICES: json.dumps(list(booking.services)),
        OBSERVATIONS: booking.contact.observations or "",
        STUDIO_ADDRESS: studio_address,
        CREATED_AT: booking.created_at.astimezone(timezone.utc).isoformat(),
    }


def is_booking_metadata(properties: Mapping[str, str]) -> bool:
    return bool(properties.get(BOOKING_ID))


def _json_list(properties: Mapping[str, str], key: str) -> list:
    try:
        value = json.loads(properties.get(key) or "[]")
    except json.JSONDecodeError as e:
        raise MetadataDecodeError(f"{key} is not valid JSON") from e
    if not isinstance(value, list):
        raise MetadataDecodeError(f"{key} must be a JSON list")
    return value


def decode_booking(
    properties: Mapping[str, str],
    *,
    event_id: str | None = None,
    fallback_date: date | None = None,
    status: str = "confirmed",
) -> Booking:
    """Rebuild a Booking from an event's private properties.

    ``fallback_date`` covers events written before the date key existed; their
    date is taken from the event start.
    """
    if not is_booking_metadata(properties):
        raise MetadataDecodeError("event has no booking id")

    raw_date = properties.get(DATE)
    try:
        booking_date = date.fromisoformat(raw_date) if raw_date else fallback_date
    except ValueError as e:
        raise MetadataDecodeError(f"{DATE} is not an ISO date") from e
    if booking_date is None:
        raise MetadataDecodeError("booking date is missing")

    slots = _json_list(properties, SLOTS)
    if not all(isinstance(s, int) and not isinstance(s, bool) for s in slots):
        raise MetadataDecodeError(f"{SLOTS} must contain integers")
    services = _json_list(properties, SERVICES)
    if not all(isinstance(s, str) for s in services):
        raise MetadataDecodeError(f"{SERVICES} must contain strings")

    raw_created = properties.get(CREATED_AT)
    try:
        created_at = (
            datetime.fromisoformat(raw_created.replace("Z", "+00:00"))
            if raw_created
            else datetime.fromtimestamp(0, timezone.utc)
        )
    except ValueError as e:
        raise MetadataDecodeError(f"{CREATED_AT} is not an ISO timestamp") from e

    return Booking(
        booking_id=properties[BOOKING_ID],
        date=booking_date,
        slots=tuple(sorted(slots)),
        services=tuple(services),
        contact=ContactInfo(
            name=properties.get(CLIENT_NAME, ""),
            email=properties.get(CLIENT_EMAIL, ""),
            phone=properties.get(CLIENT_PHONE, ""),
            observations=properties.get(OBSERVATIONS) or None,
        ),
        created_at=created_at,
        status=status,
        event_id=event_id,
        studio_address=properties.get(STUDIO_ADDRESS) or None,
    )
