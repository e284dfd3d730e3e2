from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from spinbook.application.exceptions import (
    BookingValidationError,
    CalendarProviderError,
    ConfigurationError,
    ProviderErrorKind,
    SlotConflictError,
)

logger = logging.getLogger(__name__)

PROVIDER_STATUS: dict[ProviderErrorKind, int] = {
    ProviderErrorKind.rate_limit: 503,
    ProviderErrorKind.timeout: 504,
    ProviderErrorKind.unavailable: 502,
    ProviderErrorKind.conflict: 409,
}

PROVIDER_MESSAGES: dict[ProviderErrorKind, str] = {
    ProviderErrorKind.authentication: "Error de autenticación con el calendario. Contacta al administrador.",
    ProviderErrorKind.permission: "Error de permisos del calendario. Contacta al administrador.",
    ProviderErrorKind.calendar_not_found: "Error de configuración del calendario. Contacta al administrador.",
    ProviderErrorKind.rate_limit: "El calendario está saturado. Por favor, inténtalo de nuevo en unos minutos.",
    ProviderErrorKind.timeout: "El calendario no respondió a tiempo. Por favor, inténtalo de nuevo.",
    ProviderErrorKind.malformed_request: "Error en el formato de datos. Por favor, inténtalo de nuevo.",
    ProviderErrorKind.conflict: "Uno de los horarios seleccionados ya no está disponible. Por favor, refresca la página.",
    ProviderErrorKind.unavailable: "El calendario no está disponible. Por favor, inténtalo de nuevo.",
}


def format_slot_ranges(slots: list[int]) -> str:
    return ", ".join(f"{h}:00-{h + 1}:00" for h in slots)


def provider_error_status(kind: ProviderErrorKind) -> int:
    return PROVIDER_STATUS.get(kind, 500)


def register_error_handlers(app: FastAPI, include_debug: bool = True) -> None:
    """Translate domain errors into JSON responses.

    Bodies carry ``message`` and ``error_kind``. ``debug`` holds the raw detail
    and is omitted when ``include_debug`` is false.
    """

    def _body(message: str, error_kind: str, debug: str | None = None, **extra: object) -> dict[str, object]:
        body: dict[str, object] = {"message": message, "error_kind": error_kind, **extra}
        if include_debug and debug:
            body["debug"] = debug
        return body

    @app.exception_handler(BookingValidationError)
    async def handle_validation(request: Request, exc: BookingValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=_body(exc.reason, "validation", field=exc.field),
        )

    @app.exception_handler(SlotConflictError)
    async def handle_conflict(request: Request, exc: SlotConflictError) -> JSONResponse:
        message = (
            f"Los siguientes horarios ya no están disponibles: {format_slot_ranges(exc.conflicting_slots)}. "
            "Por favor, refresca la página y selecciona otros horarios."
        )
        return JSONResponse(
            status_code=409,
            content=_body(message, "slot_conflict", conflicting_slots=exc.conflicting_slots),
        )

    @app.exception_handler(CalendarProviderError)
    async def handle_provider(request: Request, exc: CalendarProviderError) -> JSONResponse:
        status = provider_error_status(exc.kind)
        logger.error(
            "Calendar provider error",
            extra={"error_kind": exc.kind.value, "reason": exc.detail, "path": request.url.path},
        )
        return JSONResponse(
            status_code=status,
            content=_body(
                PROVIDER_MESSAGES[exc.kind],
                exc.kind.value,
                debug=exc.detail,
                retryable=exc.retryable,
            ),
        )

    @app.exception_handler(ConfigurationError)
    async def handle_configuration(request: Request, exc: ConfigurationError) -> JSONResponse:
        logger.error(
            "Server configuration error",
            extra={"error_kind": exc.kind.value, "reason": exc.detail, "path": request.url.path},
        )
        return JSONResponse(
            status_code=500,
            content=_body(
                "Error de configuración del servidor. Contacta al administrador.",
                exc.kind.value,
                debug=exc.detail,
            ),
        )
