from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from spinbook.domain.entities.calendar_event import CalendarEvent, CalendarInfo, CreatedEvent, EventDraft


class CalendarPort(ABC):
    """Access to the external calendar that acts as the system of record.

    Implementations raise CalendarProviderError tagged with a ProviderErrorKind.
    """

    @abstractmethod
    async def list_events(self, time_min: datetime, time_max: datetime, time_zone: str) -> list[CalendarEvent]:
        """List non-deleted single events overlapping [time_min, time_max]."""
        raise NotImplementedError

    @abstractmethod
    async def insert_event(self, draft: EventDraft) -> CreatedEvent:
        """Create a calendar event. Returns the provider's id and link."""
        raise NotImplementedError

    @abstractmethod
    async def get_calendar_info(self) -> CalendarInfo:
        """Fetch calendar metadata, used to verify access."""
        raise NotImplementedError
