from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StudioInfo:
    name: str
    address: str
    email: str
    phone: str


@dataclass(frozen=True)
class TelegramSettings:
    enabled: bool
    bot_token: str | None
    chat_id: str | None
    silent: bool = False
    parse_mode: str = "Markdown"

    @property
    def is_configured(self) -> bool:
        return bool(self.enabled and self.bot_token and self.chat_id)


@dataclass(frozen=True)
class StudioConfig:
    """Validated per-request configuration passed explicitly into each component."""

    calendar_provider: str
    client_email: str
    private_key: str
    calendar_id: str
    timezone: str
    studio: StudioInfo
    telegram: TelegramSettings
    available_hours: tuple[int, ...] = (17, 18, 19, 20, 21)
    working_days: tuple[int, ...] = (1, 2, 3, 4, 5)
