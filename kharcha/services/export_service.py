"""CSV export of the current ledger."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterator
from datetime import datetime

from kharcha.schemas.snapshot import LedgerCollections
from kharcha.utils.money import round_money

HEADER = ("Type", "Details", "Amount", "Date", "Category/Person")


def _date(value: datetime | None) -> str:
    return value.isoformat() if value else ""


def export_rows(collections: LedgerCollections) -> Iterator[tuple[str, ...]]:
    """Yield one flat row per expense, meal, market purchase and friend record."""
    for e in collections.generic_expenses:
        yield (
            "Expense",
            e.title,
            str(round_money(e.amount)),
            _date(e.occurred_at),
            e.category.value,
        )
    for m in collections.meal_records:
        yield (
            "Meal",
            f"{m.meal_type.value} cooked by {m.cooked_by}",
            str(round_money(m.cost)),
            _date(m.occurred_at),
            f"Split: {m.people_count}",
        )
    for p in collections.market_purchases:
        yield (
            "Market",
            p.item_name,
            str(round_money(p.cost)),
            _date(p.occurred_at),
            f"Buyer: {p.buyer}",
        )
    for f in collections.friend_transactions:
        yield (
            "Friend",
            f"{f.name} ({f.direction.value})",
            str(round_money(f.amount)),
            _date(f.occurred_at),
            f.status.value,
        )


def export_csv(collections: LedgerCollections) -> str:
    """Render the ledger as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(HEADER)
    writer.writerows(export_rows(collections))
    return buffer.getvalue()


def export_filename(today: datetime) -> str:
    return f"kharcha_export_{today:%Y-%m-%d}.csv"
