from __future__ import annotations

from spinbook.application.ports.notifier import NotifierPort
from spinbook.domain.entities.studio import TelegramSettings
from spinbook.infrastructure.telegram.telegram_client import TelegramClient


class TelegramNotifier(NotifierPort):
    def __init__(self, client: TelegramClient, settings: TelegramSettings) -> None:
        self._client = client
        self._settings = settings

    async def send_text(self, text: str) -> int | None:
        return await self._client.send_message(
            chat_id=self._settings.chat_id or "",
            text=text,
            parse_mode=self._settings.parse_mode,
            disable_notification=self._settings.silent,
        )
