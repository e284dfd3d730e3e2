from __future__ import annotations

import logging

from spinbook.application.exceptions import NotificationDeliveryError
from spinbook.application.ports.notifier import NotifierPort
from spinbook.application.ports.service_catalog import ServiceCatalogPort
from spinbook.application.utils.booking_text import build_notification_text, build_test_message
from spinbook.application.utils.timezone import now_utc, project_to_zone
from spinbook.domain.entities.booking import Booking
from spinbook.domain.entities.notification import NotificationOutcome
from spinbook.domain.entities.studio import StudioInfo, TelegramSettings


def check_telegram_settings(settings: TelegramSettings) -> str | None:
    """Return the reason notifications cannot be sent, or None if they can."""
    if not settings.is_configured:
        return "disabled_or_not_configured"
    if ":" not in (settings.bot_token or ""):
        return "invalid_bot_token_format"
    return None


class NotifyBookingUseCase:
    """Best-effort booking notification. Never raises; failures come back as an outcome."""

    def __init__(
        self,
        notifier: NotifierPort | None,
        telegram: TelegramSettings,
        studio: StudioInfo,
        catalog: ServiceCatalogPort,
        timezone: str,
    ) -> None:
        self._notifier = notifier
        self._telegram = telegram
        self._studio = studio
        self._catalog = catalog
        self._timezone = timezone
        self._logger = logging.getLogger(__name__)

    async def execute(self, booking: Booking) -> NotificationOutcome:
        text = build_notification_text(
            booking,
            self._catalog.display_names(booking.services),
            self._studio,
            generated_at=project_to_zone(now_utc(), self._timezone),
            markdown=self._telegram.parse_mode.lower() == "markdown",
        )
        return await self._deliver(text, booking_id=booking.booking_id)

    async def send_test(self) -> NotificationOutcome:
        text = build_test_message(self._telegram, project_to_zone(now_utc(), self._timezone))
        return await self._deliver(text, booking_id=None)

    async def _deliver(self, text: str, booking_id: str | None) -> NotificationOutcome:
        reason = check_telegram_settings(self._telegram)
        if reason is None and self._notifier is None:
            reason = "disabled_or_not_configured"
        if reason is not None:
            self._logger.info("Telegram notification skipped", extra={"booking_id": booking_id, "reason": reason})
            return NotificationOutcome(sent=False, reason=reason)

        try:
            message_id = await self._notifier.send_text(text)
        except NotificationDeliveryError as e:
            self._logger.warning(
                "Telegram notification failed",
                extra={"booking_id": booking_id, "reason": e.reason},
            )
            return NotificationOutcome(sent=False, reason=e.reason)
        except Exception as e:
            self._logger.exception("Unexpected error sending Telegram notification", extra={"booking_id": booking_id})
            return NotificationOutcome(sent=False, reason=f"unexpected_error: {type(e).__name__}")

        self._logger.info("Telegram notification sent", extra={"booking_id": booking_id, "message_id": message_id})
        return NotificationOutcome(sent=True, message_id=message_id)
