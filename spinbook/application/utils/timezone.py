from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DAY_START = time(0, 0, 0)
DAY_END = time(23, 59, 59)


def _load_zone(zone_name: str | None) -> ZoneInfo | None:
    if not zone_name:
        return None
    try:
        return ZoneInfo(zone_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.warning("Unknown timezone %r", zone_name, extra={"reason": str(e)})
        return None


def project_to_zone(instant: datetime, zone_name: str) -> datetime:
    """Return the wall-clock time of ``instant`` as seen in ``zone_name``, as a naive datetime.

    Naive instants are taken to be UTC. If the zone is unknown the instant's own
    wall-clock fields are returned unchanged, so a timezone glitch degrades the
    answer instead of failing the request.
    """
    zone = _load_zone(zone_name)
    if zone is None:
        logger.warning("Studio timezone conversion failed, using original instant")
        return instant.replace(tzinfo=None)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(zone).replace(tzinfo=None)


def attach_zone(wall_clock: datetime, *zone_names: str | None) -> datetime:
    """Interpret a naive wall-clock time in the first valid zone; aware values pass through."""
    if wall_clock.tzinfo is not None:
        return wall_clock
    for name in zone_names:
        zone = _load_zone(name)
        if zone is not None:
            return wall_clock.replace(tzinfo=zone)
    return wall_clock.replace(tzinfo=timezone.utc)


def day_window_utc(day: date, zone_name: str) -> tuple[datetime, datetime]:
    """Local [00:00:00, 23:59:59] of ``day`` in the studio zone, as UTC instants."""
    start = attach_zone(datetime.combine(day, DAY_START), zone_name)
    end = attach_zone(datetime.combine(day, DAY_END), zone_name)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def format_utc(instant: datetime) -> str:
    """RFC 3339 timestamp with a trailing Z, the form the calendar query API expects."""
    return instant.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
