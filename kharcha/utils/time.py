"""Time utility helpers."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def now_utc() -> datetime:
    """Return current timezone-aware UTC datetime."""
    return datetime.now(tz=UTC)


def utc_today() -> date:
    """Return current UTC date."""
    return now_utc().date()


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """Parse a store timestamp (ISO string, possibly ``Z``-suffixed) into aware UTC."""
    if value is None or value == "":
        return None

    if isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        parsed = value

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def this_week_monday(base: date | None = None) -> date:
    """Return Monday for the week containing ``base`` (or today)."""
    target = base or utc_today()
    return target - timedelta(days=target.weekday())


def weekday_name(base: date | None = None) -> str:
    """Return the English weekday name used as the menu plan key."""
    target = base or utc_today()
    return WEEKDAYS[target.weekday()]


def weekday_index(name: str) -> int:
    """Return the Monday-first position of ``name``; unknown names sort last."""
    normalized = name.strip().capitalize()
    if normalized in WEEKDAYS:
        return WEEKDAYS.index(normalized)
    return len(WEEKDAYS)
