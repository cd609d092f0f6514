"""Time helper tests."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone

from kharcha.utils.time import parse_timestamp, this_week_monday, weekday_index, weekday_name


def test_parse_timestamp_handles_z_suffix() -> None:
    """Supabase timestamps ending in Z parse as UTC."""
    parsed = parse_timestamp("2026-02-07T10:30:00Z")
    assert parsed == datetime(2026, 2, 7, 10, 30, tzinfo=UTC)


def test_parse_timestamp_makes_naive_values_utc() -> None:
    """Dates without an offset are treated as UTC."""
    assert parse_timestamp("2026-02-07").tzinfo is UTC


def test_parse_timestamp_keeps_offsets() -> None:
    parsed = parse_timestamp("2026-02-07T10:30:00+05:00")
    assert parsed.utcoffset() == timedelta(hours=5)
    assert parse_timestamp(datetime(2026, 1, 1, tzinfo=timezone.utc)).year == 2026


def test_parse_timestamp_missing_input() -> None:
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None


def test_this_week_monday() -> None:
    """Any day maps back to its week's Monday."""
    assert this_week_monday(date(2026, 2, 8)) == date(2026, 2, 2)
    assert this_week_monday(date(2026, 2, 2)) == date(2026, 2, 2)


def test_weekday_name_and_index() -> None:
    """Menu days sort Monday first and unknown names go last."""
    assert weekday_name(date(2026, 2, 7)) == "Saturday"
    assert weekday_index(" monday ") == 0
    assert weekday_index("Sunday") == 6
    assert weekday_index("Someday") == 7
