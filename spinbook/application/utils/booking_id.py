from __future__ import annotations

import random
import re
import string

BOOKING_ID_PREFIX = "SB-"
BOOKING_ID_ALPHABET = string.ascii_uppercase + string.digits
BOOKING_ID_LENGTH = 8
BOOKING_ID_PATTERN = re.compile(r"^SB-[A-Z0-9]{8}$")


def generate_booking_id(rng: random.Random | None = None) -> str:
    """Human-readable booking id. Not checked for uniqueness; relies on the 36**8 keyspace."""
    chooser = rng or random
    suffix = "".join(chooser.choice(BOOKING_ID_ALPHABET) for _ in range(BOOKING_ID_LENGTH))
    return f"{BOOKING_ID_PREFIX}{suffix}"


def is_booking_id(value: str) -> bool:
    return bool(BOOKING_ID_PATTERN.match(value))
