from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from spinbook.application.exceptions import CalendarProviderError, ConfigErrorKind, ProviderErrorKind
from spinbook.application.ports.calendar import CalendarPort
from spinbook.application.utils.booking_text import format_long_date_es
from spinbook.application.utils.timezone import now_utc, project_to_zone
from spinbook.domain.entities.studio import StudioConfig, TelegramSettings

_CHAT_ID = re.compile(r"^-?\d+$")

CONFIG_TROUBLESHOOTING: dict[ConfigErrorKind, tuple[str, str]] = {
    ConfigErrorKind.missing_client_email: (
        "Google Service Account Email missing",
        "Set the GOOGLE_CLIENT_EMAIL environment variable",
    ),
    ConfigErrorKind.missing_private_key: (
        "Google Service Account Private Key missing",
        "Set the GOOGLE_PRIVATE_KEY environment variable",
    ),
    ConfigErrorKind.malformed_private_key: (
        "Google Service Account Private Key malformed",
        "Ensure the private key includes the BEGIN/END PRIVATE KEY markers",
    ),
    ConfigErrorKind.missing_calendar_id: (
        "Google Calendar ID missing",
        "Set the GOOGLE_CALENDAR_ID environment variable",
    ),
    ConfigErrorKind.missing_timezone: (
        "Studio Timezone missing",
        "Set STUDIO_TIMEZONE to a valid IANA timezone (e.g., America/Santiago)",
    ),
    ConfigErrorKind.invalid_timezone: (
        "Studio Timezone invalid",
        "Set STUDIO_TIMEZONE to a valid IANA timezone (e.g., America/Santiago)",
    ),
    ConfigErrorKind.unknown_calendar_provider: (
        "Calendar provider unknown",
        "Set CALENDAR_PROVIDER to 'google' or 'memory'",
    ),
}

PROVIDER_TROUBLESHOOTING: dict[ProviderErrorKind, list[str]] = {
    ProviderErrorKind.authentication: [
        "Verify service account credentials are correct",
        "Ensure private key format includes BEGIN/END markers",
    ],
    ProviderErrorKind.permission: [
        "Ensure the service account has access to the calendar",
        "Check calendar sharing settings",
    ],
    ProviderErrorKind.calendar_not_found: [
        "Verify calendar ID is correct",
        "Ensure service account has access to the calendar",
    ],
    ProviderErrorKind.rate_limit: ["Check API quotas and limits"],
}

TELEGRAM_HINT = "For Telegram notifications, set TELEGRAM_ENABLED=true, TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID"


@dataclass
class TelegramValidation:
    enabled: bool
    has_token: bool
    has_chat_id: bool
    token_format: str = "invalid"
    chat_id_format: str = "invalid"
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "hasToken": self.has_token,
            "hasChatId": self.has_chat_id,
            "tokenFormat": self.token_format,
            "chatIdFormat": self.chat_id_format,
            "errors": self.errors,
            "warnings": self.warnings,
        }


@dataclass
class DiagnosticsReport:
    ok: bool
    body: dict[str, Any]


def validate_telegram(settings: TelegramSettings) -> TelegramValidation:
    validation = TelegramValidation(
        enabled=settings.enabled,
        has_token=bool(settings.bot_token),
        has_chat_id=bool(settings.chat_id),
    )
    if not settings.enabled:
        validation.warnings.append("Telegram notifications are disabled")
        return validation

    if not settings.bot_token:
        validation.errors.append("TELEGRAM_BOT_TOKEN is not set")
    elif ":" not in settings.bot_token:
        validation.errors.append("Invalid bot token format. Should be: <bot id>:<secret>")
    else:
        validation.token_format = "valid"

    if not settings.chat_id:
        validation.errors.append("TELEGRAM_CHAT_ID is not set")
    elif not _CHAT_ID.match(settings.chat_id):
        validation.warnings.append("Chat ID format may be incorrect. Should be a number (negative for groups)")
    else:
        validation.chat_id_format = "valid"
    return validation


def configuration_error_report(kind: ConfigErrorKind, message: str) -> DiagnosticsReport:
    failed, hint = CONFIG_TROUBLESHOOTING[kind]
    return DiagnosticsReport(
        ok=False,
        body={
            "status": "error",
            "message": "SpinBook configuration validation failed",
            "error": message,
            "errorKind": kind.value,
            "failedChecks": [failed],
            "troubleshooting": [hint, TELEGRAM_HINT],
        },
    )


class CheckConfigurationUseCase:
    def __init__(self, calendar: CalendarPort, config: StudioConfig) -> None:
        self._calendar = calendar
        self._config = config
        self._logger = logging.getLogger(__name__)

    async def execute(self) -> DiagnosticsReport:
        config = self._config
        try:
            info = await self._calendar.get_calendar_info()
        except CalendarProviderError as e:
            self._logger.error("Calendar access test failed", extra={"error_kind": e.kind.value})
            return DiagnosticsReport(
                ok=False,
                body={
                    "status": "error",
                    "message": "SpinBook configuration validation failed",
                    "error": f"Calendar access test failed: {e.detail}",
                    "errorKind": e.kind.value,
                    "failedChecks": ["Calendar access failed"],
                    "troubleshooting": PROVIDER_TROUBLESHOOTING.get(
                        e.kind, ["Confirm Google Calendar API is enabled in Google Cloud Console"]
                    )
                    + [TELEGRAM_HINT],
                },
            )

        telegram = validate_telegram(config.telegram)
        recommendations: list[str] = []
        health_checks: dict[str, str] = {
            "googleAuth": "passed",
            "calendarAccess": "passed",
            "timezoneValidation": "passed",
            "environmentVariables": "all required variables present",
        }

        if not config.telegram.enabled:
            health_checks["telegramNotifications"] = "disabled"
            recommendations.append("Enable Telegram notifications by setting TELEGRAM_ENABLED=true")
        elif telegram.errors:
            health_checks["telegramNotifications"] = "enabled but misconfigured"
        else:
            health_checks["telegramNotifications"] = "configured"
        recommendations += [f"Telegram: {err}" for err in telegram.errors]
        recommendations += [f"Telegram: {warn}" for warn in telegram.warnings]

        if info.time_zone and info.time_zone != config.timezone:
            health_checks["timezoneConsistency"] = "warning - timezone mismatch"
            recommendations.append(
                f"Calendar timezone ({info.time_zone}) differs from studio timezone ({config.timezone}). "
                "This may cause scheduling conflicts."
            )
        else:
            health_checks["timezoneConsistency"] = "timezones aligned"

        if info.access_role in {"owner", "writer"}:
            health_checks["calendarPermissions"] = "sufficient permissions"
        elif info.access_role == "reader":
            health_checks["calendarPermissions"] = "insufficient permissions - needs write access"
            recommendations.append('Service account has read-only access. Grant "Make changes to events" permission.')
        elif info.access_role:
            health_checks["calendarPermissions"] = f"unknown access level: {info.access_role}"

        now_local = project_to_zone(now_utc(), config.timezone)
        self._logger.info("Configuration test completed", extra={"reason": f"{len(recommendations)} recommendations"})
        return DiagnosticsReport(
            ok=True,
            body={
                "status": "success",
                "message": "SpinBook configuration is valid and ready!",
                "configuration": {
                    "calendarProvider": config.calendar_provider,
                    "calendarId": config.calendar_id,
                    "timeZone": config.timezone,
                    "calendarSummary": info.summary,
                    "calendarTimeZone": info.time_zone,
                    "accessRole": info.access_role,
                    "validatedAt": now_utc().isoformat(),
                },
                "telegram": telegram.as_dict(),
                "recommendations": recommendations,
                "healthChecks": health_checks,
                "currentStudioTime": f"{format_long_date_es(now_local.date())}, {now_local:%H:%M}",
            },
        )
