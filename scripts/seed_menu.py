"""Create the seven weekday rows of the meal menu in Supabase."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from postgrest import APIError

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from kharcha.utils.time import WEEKDAYS  # noqa: E402


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Insert missing weekday rows into public.meal_menu.",
    )
    parser.add_argument(
        "--dish",
        type=str,
        default="",
        help="Placeholder dish for every meal slot (default: empty).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only print which days would be created.",
    )
    return parser.parse_args()


def missing_days(existing: Sequence[str]) -> list[str]:
    """Return weekdays with no menu row yet, Monday first."""
    present = {day.strip().capitalize() for day in existing}
    return [day for day in WEEKDAYS if day not in present]


def seed_menu(dish: str, dry_run: bool) -> list[str]:
    """Insert one row per missing weekday and return the days created."""
    from kharcha.utils.supabase_client import get_service_client

    client = get_service_client()
    rows = client.table("meal_menu").select("day").execute().data or []
    days = missing_days([str(row.get("day") or "") for row in rows])
    if dry_run or not days:
        return days

    try:
        client.table("meal_menu").insert(
            [{"day": day, "breakfast": dish, "lunch": dish, "dinner": dish} for day in days]
        ).execute()
    except APIError as exc:
        raise RuntimeError(f"Failed to seed meal_menu: {getattr(exc, 'message', exc)}") from exc
    return days


def print_days(days: Sequence[str], dry_run: bool) -> None:
    """Print the seeded days in copy-friendly form."""
    verb = "Would create" if dry_run else "Created"
    print(f"{verb} {len(days)} menu day(s):")
    for day in days:
        print(day)


def main() -> None:
    """CLI entry point."""
    args = parse_args()
    days = seed_menu(dish=args.dish, dry_run=args.dry_run)
    print_days(days, args.dry_run)


if __name__ == "__main__":
    main()
