from __future__ import annotations

from enum import Enum


class ProviderErrorKind(str, Enum):
    authentication = "authentication"
    permission = "permission"
    calendar_not_found = "calendar_not_found"
    rate_limit = "rate_limit"
    timeout = "timeout"
    malformed_request = "malformed_request"
    conflict = "conflict"
    unavailable = "unavailable"

    @property
    def retryable(self) -> bool:
        return self in {ProviderErrorKind.rate_limit, ProviderErrorKind.timeout, ProviderErrorKind.unavailable}


class ConfigErrorKind(str, Enum):
    missing_client_email = "missing_client_email"
    missing_private_key = "missing_private_key"
    malformed_private_key = "malformed_private_key"
    missing_calendar_id = "missing_calendar_id"
    missing_timezone = "missing_timezone"
    invalid_timezone = "invalid_timezone"
    unknown_calendar_provider = "unknown_calendar_provider"


class SpinbookError(Exception):
    """Base class for errors surfaced to API callers."""


class BookingValidationError(SpinbookError):
    """Raised when a booking request is malformed. Client-correctable."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(reason)
        self.field = field
        self.reason = reason


class SlotConflictError(SpinbookError):
    """Raised when requested hours are already busy in the calendar."""

    def __init__(self, conflicting_slots: list[int]) -> None:
        self.conflicting_slots = sorted(conflicting_slots)
        super().__init__(f"Slots no longer available: {self.conflicting_slots}")


class CalendarProviderError(SpinbookError):
    """Raised when the calendar provider fails (auth, quota, network, bad request)."""

    def __init__(self, kind: ProviderErrorKind, detail: str, status_code: int | None = None) -> None:
        super().__init__(f"{kind.value}: {detail}")
        self.kind = kind
        self.detail = detail
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.kind.retryable


class ConfigurationError(SpinbookError):
    """Raised when required configuration is missing or malformed."""

    def __init__(self, kind: ConfigErrorKind, detail: str) -> None:
        super().__init__(detail)
        self.kind = kind
        self.detail = detail


class NotificationDeliveryError(SpinbookError):
    """Raised by notifier adapters when a message cannot be delivered. Never fatal to a booking."""

    def __init__(self, reason: str, detail: str | None = None) -> None:
        super().__init__(detail or reason)
        self.reason = reason
        self.detail = detail
