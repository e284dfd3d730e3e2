from __future__ import annotations

import logging
from typing import Any

import httpx

from spinbook.application.exceptions import NotificationDeliveryError


class TelegramClient:
    def __init__(self, bot_token: str, http: httpx.AsyncClient, api_base_url: str = "https://api.telegram.org") -> None:
        self._bot_token = bot_token
        self._http = http
        self._api_base_url = api_base_url.rstrip("/")
        self._logger = logging.getLogger(__name__)

    async def send_message(
        self,
        chat_id: str,
        text: str,
        parse_mode: str | None = None,
        disable_notification: bool = False,
    ) -> int | None:
        url = f"{self._api_base_url}/bot{self._bot_token}/sendMessage"
        payload: dict[str, Any] = {
            "chat_id": chat_id,
            "text": text,
            "disable_notification": disable_notification,
        }
        if parse_mode:
            payload["parse_mode"] = parse_mode

        try:
            resp = await self._http.post(url, json=payload)
        except httpx.TimeoutException as e:
            raise NotificationDeliveryError("timeout", str(e)) from e
        except httpx.HTTPError as e:
            raise NotificationDeliveryError("transport_error", str(e)) from e

        if resp.status_code >= 400:
            try:
                error_json = resp.json()
                error_code = error_json.get("error_code", resp.status_code)
                description = error_json.get("description")
            except ValueError:
                error_code = resp.status_code
                description = resp.text

            hint = {
                400: "Bad Request - check bot token and chat ID",
                401: "Unauthorized - invalid bot token",
                403: "Forbidden - bot was blocked or chat not found",
            }.get(error_code)
            self._logger.error(
                "Telegram send failed",
                extra={
                    "status": resp.status_code,
                    "error_code": error_code,
                    "error_message": description,
                    "reason": hint,
                    "text_length": len(text),
                },
            )
            raise NotificationDeliveryError(f"telegram_error_{error_code}", description)

        try:
            data = resp.json()
        except ValueError as e:
            raise NotificationDeliveryError("malformed_response", resp.text) from e
        return (data.get("result") or {}).get("message_id")
