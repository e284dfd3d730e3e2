from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any, Mapping

from spinbook.application.exceptions import BookingValidationError
from spinbook.application.ports.service_catalog import ServiceCatalogPort
from spinbook.domain.entities.booking import BookingRequest, ContactInfo

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
REQUIRED_CONTACT_FIELDS = ("name", "email", "phone")


def _reject(field: str, reason: str) -> BookingValidationError:
    logger.debug("Booking request rejected", extra={"reason": reason, "field": field})
    return BookingValidationError(field, reason)


def parse_booking_date(value: Any) -> date:
    if not isinstance(value, str) or not value:
        raise _reject("date", "Date is required and must be a string.")
    if not DATE_PATTERN.match(value):
        raise _reject("date", "Date must be in YYYY-MM-DD format.")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise _reject("date", f"Date {value} is not a valid calendar date.") from None


def _as_hour(value: Any) -> int | None:
    # bool is an int subclass; JSON true/false are not hours.
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        hour = value
    elif isinstance(value, float) and value.is_integer():
        hour = int(value)
    else:
        return None
    return hour if 0 <= hour <= 23 else None


def parse_slots(value: Any) -> tuple[int, ...]:
    if not isinstance(value, list) or not value:
        raise _reject("slots", "Slots are required and must be a non-empty array.")
    hours = [_as_hour(item) for item in value]
    valid = [h for h in hours if h is not None]
    if len(valid) != len(value):
        raise _reject("slots", "All slots must be valid hour numbers (0-23).")
    return tuple(sorted(set(valid)))


def parse_services(value: Any, catalog: ServiceCatalogPort) -> tuple[str, ...]:
    if not isinstance(value, list) or not value:
        raise _reject("services", "Services are required and must be a non-empty array.")
    valid = [s for s in value if isinstance(s, str) and catalog.get_service(s) is not None]
    if len(valid) != len(value):
        raise _reject("services", "All services must be valid service identifiers.")
    return tuple(dict.fromkeys(valid))


def parse_contact(value: Any) -> ContactInfo:
    if not isinstance(value, Mapping):
        raise _reject("userData", "User data is incomplete.")
    for key in REQUIRED_CONTACT_FIELDS:
        field_value = value.get(key)
        if not isinstance(field_value, str) or not field_value.strip():
            raise _reject(f"userData.{key}", f"User data is incomplete: {key} is required.")

    observations = value.get("observations")
    if observations is not None and not isinstance(observations, str):
        raise _reject("userData.observations", "Observations must be text.")

    return ContactInfo(
        name=value["name"].strip(),
        email=value["email"].strip(),
        phone=value["phone"].strip(),
        observations=observations.strip() if observations and observations.strip() else None,
    )


def validate_booking_payload(payload: Any, catalog: ServiceCatalogPort) -> BookingRequest:
    """Validate a raw booking body. Raises BookingValidationError naming the first bad field.

    Never touches the calendar.
    """
    if not isinstance(payload, Mapping):
        raise _reject("body", "Request body must be a JSON object.")

    day = parse_booking_date(payload.get("date"))
    slots = parse_slots(payload.get("slots"))
    services = parse_services(payload.get("services"), catalog)
    contact = parse_contact(payload.get("userData"))

    return BookingRequest(date=day, slots=slots, services=services, contact=contact)
