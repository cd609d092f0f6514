"""Dashboard payload assembly."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Any

from kharcha.schemas.records import MarketPurchase, MenuPlanEntry
from kharcha.schemas.snapshot import SnapshotState
from kharcha.utils.time import weekday_name

MARKET_NOTES_PREVIEW = 3


def market_budget_notes(
    purchases: Sequence[MarketPurchase],
    preview: int = MARKET_NOTES_PREVIEW,
) -> dict[str, Any]:
    """Purchases carrying a per-item limit or a note, with over-limit flags."""
    noted = [p for p in purchases if p.budget_limit or p.note]
    items = [
        {
            "id": p.id,
            "item_name": p.item_name,
            "cost": p.cost,
            "budget_limit": p.budget_limit or None,
            "note": p.note,
            "over_budget": p.over_item_budget,
        }
        for p in noted[:preview]
    ]
    return {"items": items, "total": len(noted), "has_more": len(noted) > preview}


def todays_menu(menu: Sequence[MenuPlanEntry], today: date | None = None) -> MenuPlanEntry | None:
    """Return the menu entry for today's weekday, if planned."""
    day = weekday_name(today)
    for entry in menu:
        if entry.day.strip().capitalize() == day:
            return entry
    return None


def dashboard_payload(state: SnapshotState) -> dict[str, Any]:
    """Combine the cached snapshot with the dashboard's preview panels."""
    collections = state.collections
    return {
        "state": state,
        "market_notes": market_budget_notes(collections.market_purchases),
        "todays_menu": todays_menu(collections.menu_plan),
    }
