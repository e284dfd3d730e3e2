from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class ContactInfo:
    name: str
    email: str
    phone: str
    observations: str | None = None


@dataclass(frozen=True)
class BookingRequest:
    """A validated booking request. Slots are sorted and unique."""

    date: date
    slots: tuple[int, ...]
    services: tuple[str, ...]
    contact: ContactInfo

    @property
    def date_iso(self) -> str:
        return self.date.isoformat()


@dataclass(frozen=True)
class Booking:
    booking_id: str
    date: date
    slots: tuple[int, ...]
    services: tuple[str, ...]
    contact: ContactInfo
    created_at: datetime
    status: str = "confirmed"
    event_id: str | None = None
    studio_address: str | None = None
