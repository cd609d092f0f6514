"""Dashboard panels, CSV export and menu seeding tests."""

from __future__ import annotations

from datetime import date, datetime

from kharcha.schemas.records import (
    FriendTransaction,
    GenericExpense,
    MarketPurchase,
    MealRecord,
    MenuPlanEntry,
)
from kharcha.schemas.snapshot import LedgerCollections
from kharcha.services.dashboard_service import market_budget_notes, todays_menu
from kharcha.services.export_service import HEADER, export_filename, export_rows
from scripts.seed_menu import missing_days


def test_market_notes_preview_is_capped() -> None:
    """Only the first few noted purchases are shown, with a more flag."""
    purchases = [MarketPurchase(item_name=f"item {i}", cost=10, note="x") for i in range(5)]
    purchases.append(MarketPurchase(item_name="plain", cost=10))

    notes = market_budget_notes(purchases)

    assert notes["total"] == 5
    assert notes["has_more"] is True
    assert [i["item_name"] for i in notes["items"]] == ["item 0", "item 1", "item 2"]


def test_market_note_over_item_limit() -> None:
    purchase = MarketPurchase(item_name="Oil", cost=600, budget_per_item=500)
    item = market_budget_notes([purchase])["items"][0]
    assert item["over_budget"] is True
    assert item["budget_limit"] == 500


def test_todays_menu_matches_weekday() -> None:
    menu = [MenuPlanEntry(day="monday", lunch="Rice"), MenuPlanEntry(day="Friday", lunch="Daal")]
    assert todays_menu(menu, today=date(2026, 3, 6)).lunch == "Daal"
    assert todays_menu(menu, today=date(2026, 3, 7)) is None


def test_export_rows_cover_each_record_type() -> None:
    """One row per expense, meal, market purchase and friend record."""
    collections = LedgerCollections(
        generic_expenses=[GenericExpense(title="Tea", amount=40, category="Meal")],
        meal_records=[MealRecord(meal_type="Lunch", cooked="Ali", cost=300, people=2)],
        market_purchases=[MarketPurchase(item_name="Oil", buyer="Sara", cost="12.5")],
        friend_transactions=[FriendTransaction(name="Omar", amount=100, type="borrowed")],
    )

    rows = list(export_rows(collections))

    assert len(HEADER) == 5
    assert rows == [
        ("Expense", "Tea", "40.00", "", "Meal"),
        ("Meal", "Lunch cooked by Ali", "300.00", "", "Split: 2"),
        ("Market", "Oil", "12.50", "", "Buyer: Sara"),
        ("Friend", "Omar (borrowed)", "100.00", "", "Pending"),
    ]


def test_export_filename() -> None:
    assert export_filename(datetime(2026, 3, 6, 12)) == "kharcha_export_2026-03-06.csv"


def test_missing_menu_days() -> None:
    """Seeding only creates weekdays that are not planned yet."""
    assert missing_days(["monday", " Tuesday ", "Sunday"]) == [
        "Wednesday",
        "Thursday",
        "Friday",
        "Saturday",
    ]
