from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NotificationOutcome:
    sent: bool
    reason: str | None = None
    message_id: int | None = None
