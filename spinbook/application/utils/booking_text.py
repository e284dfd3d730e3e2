from __future__ import annotations

import re
from datetime import date, datetime

from spinbook.domain.entities.booking import Booking
from spinbook.domain.entities.studio import StudioInfo, TelegramSettings

WEEKDAYS_ES = ("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo")
MONTHS_ES = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)

SEPARATOR = "─" * 40

_MARKDOWN_SPECIAL = re.compile(r"([_*`\[])")


def escape_markdown(text: str) -> str:
    """Escape Telegram legacy Markdown control characters in user-supplied text."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def format_long_date_es(day: date) -> str:
    return f"{WEEKDAYS_ES[day.weekday()]}, {day.day} de {MONTHS_ES[day.month - 1]} de {day.year}"


def format_timestamp_es(moment: datetime) -> str:
    return f"{moment.day}/{moment.month}/{moment.year}, {moment:%H:%M:%S}"


def format_hour_ranges(slots: tuple[int, ...] | list[int]) -> str:
    return ", ".join(f"{hour}:00-{hour + 1}:00" for hour in slots)


def build_event_summary(booking: Booking) -> str:
    return f"🎵 {booking.contact.name} - Reserva de Estudio"


def build_event_location(studio: StudioInfo) -> str:
    return f"{studio.name} - {studio.address}"


def build_event_description(
    booking: Booking,
    service_names: list[str],
    studio: StudioInfo,
    generated_at: datetime,
) -> str:
    contact = booking.contact
    lines = [
        "🎵 RESERVA DE ESTUDIO - SPINBOOK 🎵",
        "",
        "📋 DETALLES DE LA RESERVA:",
        SEPARATOR,
        "",
        f"👤 Cliente: {contact.name}",
        f"📧 Email: {contact.email}",
        f"📱 Teléfono: {contact.phone}",
        f"📅 Fecha: {format_long_date_es(booking.date)}",
        f"⏰ Horarios: {format_hour_ranges(booking.slots)}",
        f"🎼 Servicios: {', '.join(service_names)}",
        f"📍 Ubicación: {studio.address}",
        f"🎯 ID Reserva: {booking.booking_id}",
    ]
    if contact.observations:
        lines.append(f"💬 Observaciones: {contact.observations}")
    lines += [
        "",
        "⚠️ INSTRUCCIONES IMPORTANTES:",
        "• Llegar 10 minutos antes del horario reservado",
        "• Traer identificación y este número de reserva",
        f"• Dirigirse a: {studio.address}",
        "• Para cancelaciones, avisar con 24h de anticipación",
        f"• Contacto: {studio.phone}",
        f"• Email: {studio.email}",
        "",
        "Reserva generada automáticamente por SpinBook",
        format_timestamp_es(generated_at),
    ]
    return "\n".join(lines)


def build_notification_text(
    booking: Booking,
    service_names: list[str],
    studio: StudioInfo,
    generated_at: datetime,
    markdown: bool = True,
) -> str:
    esc = escape_markdown if markdown else (lambda s: s)
    contact = booking.contact
    lines = [
        "🎵 *NUEVA RESERVA SPINBOOK* 🎵",
        "",
        "📋 *DETALLES DE LA RESERVA:*",
        SEPARATOR,
        "",
        f"👤 *Cliente:* {esc(contact.name)}",
        f"📧 *Email:* {esc(contact.email)}",
        f"📱 *Teléfono:* {esc(contact.phone)}",
        "",
        f"📅 *Fecha:* {format_long_date_es(booking.date)}",
        f"⏰ *Horario:* {format_hour_ranges(booking.slots)}",
        f"🎼 *Servicios:* {esc(', '.join(service_names))}",
        "",
        f"📍 *Ubicación:* {esc(studio.address)}",
    ]
    if contact.observations:
        lines.append(f"💬 *Observaciones:* {esc(contact.observations)}")
    lines += [
        "",
        f"🎯 *ID Reserva:* `{booking.booking_id}`",
        "",
        SEPARATOR,
        f"⏱️ *Reserva generada:* {format_timestamp_es(generated_at)}",
        f"🏢 *Estudio:* {esc(studio.name)}",
        "",
        "✅ *La reserva ha sido confirmada en Google Calendar*",
    ]
    return "\n".join(lines)


def build_test_message(telegram: TelegramSettings, generated_at: datetime) -> str:
    token_preview = (telegram.bot_token or "")[:10]
    return "\n".join(
        [
            "🧪 *TEST SPINBOOK TELEGRAM*",
            "",
            "Este es un mensaje de prueba del sistema de notificaciones.",
            "",
            "✅ La configuración de Telegram está funcionando correctamente.",
            "",
            "⚙️ *Configuración:*",
            f"• Bot Token: {escape_markdown(token_preview)}...",
            f"• Chat ID: {telegram.chat_id}",
            f"• Parse Mode: {telegram.parse_mode}",
            f"• Silent: {str(telegram.silent).lower()}",
            "",
            f"⏱️ {format_timestamp_es(generated_at)}",
        ]
    )
