from __future__ import annotations

from abc import ABC, abstractmethod


class NotifierPort(ABC):
    @abstractmethod
    async def send_text(self, text: str) -> int | None:
        """Post a message. Returns the provider message id. Raises NotificationDeliveryError."""
        raise NotImplementedError
