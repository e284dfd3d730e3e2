"""
Tests for projecting instants into the studio timezone.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from spinbook.application.utils.timezone import attach_zone, day_window_utc, format_utc, project_to_zone


def test_project_utc_instant_to_studio_wall_clock():
    """August in Santiago is UTC-4."""
    instant = datetime(2025, 8, 20, 21, 0, tzinfo=timezone.utc)
    assert project_to_zone(instant, "America/Santiago") == datetime(2025, 8, 20, 17, 0)


def test_naive_instant_is_treated_as_utc():
    assert project_to_zone(datetime(2025, 8, 20, 21, 0), "America/Santiago") == datetime(2025, 8, 20, 17, 0)


def test_project_keeps_seconds():
    instant = datetime(2025, 8, 20, 23, 30, 15, tzinfo=timezone.utc)
    projected = project_to_zone(instant, "America/Santiago")
    assert (projected.hour, projected.minute, projected.second) == (19, 30, 15)


def test_unknown_zone_falls_back_to_original_fields():
    """An invalid zone degrades to the instant's own wall-clock instead of raising."""
    instant = datetime(2025, 8, 20, 21, 0, tzinfo=timezone.utc)
    assert project_to_zone(instant, "Mars/Olympus_Mons") == datetime(2025, 8, 20, 21, 0)


def test_attach_zone_uses_first_valid_zone():
    wall_clock = datetime(2025, 8, 20, 17, 0)
    aware = attach_zone(wall_clock, None, "Not/AZone", "America/Santiago")
    assert aware.astimezone(timezone.utc) == datetime(2025, 8, 20, 21, 0, tzinfo=timezone.utc)


def test_attach_zone_leaves_aware_values_alone():
    aware = datetime(2025, 8, 20, 17, 0, tzinfo=timezone.utc)
    assert attach_zone(aware, "America/Santiago") is aware


def test_day_window_covers_local_day():
    start, end = day_window_utc(date(2025, 8, 20), "America/Santiago")
    assert start == datetime(2025, 8, 20, 4, 0, tzinfo=timezone.utc)
    assert end == datetime(2025, 8, 21, 3, 59, 59, tzinfo=timezone.utc)


def test_day_window_on_dst_change_uses_each_endpoint_offset():
    """2025-03-09 starts on EST (-5) and ends on EDT (-4) in New York."""
    start, end = day_window_utc(date(2025, 3, 9), "America/New_York")
    assert start == datetime(2025, 3, 9, 5, 0, tzinfo=timezone.utc)
    assert end == datetime(2025, 3, 10, 3, 59, 59, tzinfo=timezone.utc)


def test_format_utc_uses_z_suffix():
    instant = datetime(2025, 8, 20, 17, 0, tzinfo=timezone.utc)
    assert format_utc(instant) == "2025-08-20T17:00:00.000Z"
