"""
Tests for the booking metadata block stored on calendar events.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from spinbook.application.utils import booking_metadata as meta
from spinbook.application.utils.booking_id import generate_booking_id, is_booking_id
from spinbook.domain.entities.booking import Booking, ContactInfo


def _booking() -> Booking:
    return Booking(
        booking_id="SB-AB12CD34",
        date=date(2025, 8, 20),
        slots=(17, 18),
        services=("grabacion", "mixmastering"),
        contact=ContactInfo(name="Ana", email="ana@example.com", phone="123", observations="Bring mics"),
        created_at=datetime(2025, 8, 1, 12, 0, tzinfo=timezone.utc),
    )


def test_encoded_values_are_strings():
    props = meta.encode_booking(_booking(), "Temuco")
    assert all(isinstance(v, str) for v in props.values())
    assert all(k.startswith("spinbook_") for k in props)
    assert props[meta.SLOTS] == "[17, 18]"


def test_decode_restores_booking():
    original = _booking()
    decoded = meta.decode_booking(meta.encode_booking(original, "Temuco"), event_id="evt1")

    assert decoded.booking_id == original.booking_id
    assert decoded.date == original.date
    assert decoded.slots == original.slots
    assert decoded.services == original.services
    assert decoded.contact == original.contact
    assert decoded.created_at == original.created_at
    assert decoded.event_id == "evt1"
    assert decoded.studio_address == "Temuco"


def test_missing_date_key_uses_fallback():
    props = meta.encode_booking(_booking(), "Temuco")
    del props[meta.DATE]
    decoded = meta.decode_booking(props, fallback_date=date(2025, 8, 21))
    assert decoded.date == date(2025, 8, 21)


def test_corrupt_slots_raise_decode_error():
    props = meta.encode_booking(_booking(), "Temuco")
    props[meta.SLOTS] = "17,18"
    with pytest.raises(meta.MetadataDecodeError):
        meta.decode_booking(props)


def test_foreign_event_is_not_booking_metadata():
    assert not meta.is_booking_metadata({"other": "value"})
    with pytest.raises(meta.MetadataDecodeError):
        meta.decode_booking({"other": "value"})


def test_generated_booking_ids_match_format():
    for _ in range(50):
        assert is_booking_id(generate_booking_id())
