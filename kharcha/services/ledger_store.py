"""Supabase-backed ledger store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from kharcha.schemas.records import (
    Budget,
    BudgetCreate,
    CashInflow,
    CashInflowCreate,
    ExpenseCreate,
    FriendCategory,
    FriendTransaction,
    FriendTransactionCreate,
    GenericExpense,
    LedgerRecord,
    MarketPurchase,
    MarketPurchaseCreate,
    MealCreate,
    MealRecord,
    MenuDayUpdate,
    MenuPlanEntry,
)
from kharcha.schemas.snapshot import LedgerCollections
from kharcha.services.change_feed import ChangeFeed
from kharcha.services.common import SupabaseService
from kharcha.utils.errors import InvalidInputError, NotFoundError
from kharcha.utils.time import now_utc, weekday_index
from supabase import Client

logger = logging.getLogger(__name__)

WEEK_CONTRIBUTION_REASON = "Weekly Contribution"


@dataclass(frozen=True)
class Collection:
    """Where one record type lives and how it is read and written."""

    key: str
    table: str
    label: str
    record: type[LedgerRecord]
    create: type[BaseModel]
    date_column: str = "date"


COLLECTIONS: dict[str, Collection] = {
    c.key: c
    for c in (
        Collection(
            "cash", "weekly_money", "Cash inflow", CashInflow, CashInflowCreate, "week_start"
        ),
        Collection("expenses", "expenses", "Expense", GenericExpense, ExpenseCreate),
        Collection("market", "market_items", "Market item", MarketPurchase, MarketPurchaseCreate),
        Collection("meals", "meals", "Meal", MealRecord, MealCreate),
        Collection(
            "friends", "friends", "Friend transaction", FriendTransaction, FriendTransactionCreate
        ),
        Collection("budgets", "budgets", "Budget", Budget, BudgetCreate),
    )
}
MENU_TABLE = "meal_menu"


def get_collection(key: str) -> Collection:
    """Return the collection registered under ``key``."""
    try:
        return COLLECTIONS[key]
    except KeyError:
        raise NotFoundError(f"Collection '{key}'") from None


def _validate_rows(model: type[LedgerRecord], table: str, rows: list[dict[str, Any]]) -> list[Any]:
    records = []
    for row in rows:
        try:
            records.append(model.model_validate(row))
        except ValidationError as exc:
            logger.warning(
                "Skipping malformed %s row %s: %s",
                table,
                row.get("id"),
                exc.error_count(),
            )
    return records


def parse_rows(collection: Collection, rows: list[dict[str, Any]]) -> list[Any]:
    """Build read models from store rows, skipping rows that cannot be parsed."""
    return _validate_rows(collection.record, collection.table, rows)


def build_row(collection: Collection, payload: BaseModel, occurred_at: str) -> dict[str, Any]:
    """Translate a validated request model into the store's column names."""
    data = payload.model_dump(mode="json")

    if collection.key == "cash":
        return {"amount": data["amount"], "notes": data["note"], "week_start": occurred_at}

    if collection.key == "market":
        return {
            "item_name": data["item_name"],
            "quantity": data["quantity"],
            "buyer": data["buyer"],
            "cost": data["cost"],
            "budget_per_item": data["budget_limit"],
            "note": data["note"],
            "date": occurred_at,
        }

    if collection.key == "meals":
        names = [n.strip() for n in data["eaten_by_names"] if n.strip()]
        eaten = ", ".join(names) if names else data["eaten_by"]
        people = data["people_count"] or len(names) or 1
        row = {
            "meal_type": data["meal_type"],
            "cooked": data["cooked_by"],
            "eaten": eaten,
            "cost": data["cost"],
            "people": people,
            "per_person": round(data["cost"] / people, 2),
            "date": occurred_at,
        }
        if data["dish_name"]:
            row["dish_name"] = data["dish_name"]
        return row

    if collection.key == "friends":
        reason = data["reason"]
        if not reason and data["category"] == FriendCategory.WEEK_AMOUNT.value:
            reason = WEEK_CONTRIBUTION_REASON
        return {
            "name": data["name"].strip(),
            "amount": data["amount"],
            "type": data["direction"],
            "category": data["category"],
            "status": data["status"],
            "reason": reason,
            "date": occurred_at,
        }

    # expenses and budgets already use store column names
    return {**data, "date": occurred_at}


def editable_fields(record: LedgerRecord) -> dict[str, Any]:
    """Semantic field values of a stored record, as a request model expects them."""
    data = record.model_dump(exclude={"id", "created_at", "occurred_at", "cost_per_person"})
    if isinstance(record, MealRecord):
        data["eaten_by_names"] = []
    return data


def field_names(collection: Collection, changes: dict[str, Any]) -> dict[str, Any]:
    """Rename store column keys (``type``, ``people``, ...) to model field names."""
    aliases = {
        field.alias: name
        for name, field in collection.record.model_fields.items()
        if field.alias and field.alias != name
    }
    return {aliases.get(key, key): value for key, value in changes.items()}


class LedgerStore:
    """Read and write the household ledger tables."""

    def __init__(self, client: Client, feed: ChangeFeed | None = None) -> None:
        self.db = SupabaseService(client)
        self.feed = feed

    def _notify(self, collection: str) -> None:
        if self.feed is not None:
            self.feed.publish(collection)

    def list_records(self, key: str, limit: int | None = None) -> list[Any]:
        """Return one collection, newest first."""
        collection = get_collection(key)
        rows = self.db.select_many(
            collection.table,
            order_by=collection.date_column,
            descending=True,
            limit=limit,
        )
        return parse_rows(collection, rows)

    def get_record(self, key: str, record_id: str) -> Any:
        """Return one record or raise NotFoundError."""
        collection = get_collection(key)
        row = self.db.select_one(
            collection.table, {"id": record_id}, not_found_label=collection.label
        )
        records = parse_rows(collection, [row])
        if not records:
            raise NotFoundError(collection.label)
        return records[0]

    def list_menu(self) -> list[MenuPlanEntry]:
        """Return the weekly menu ordered Monday to Sunday."""
        rows = self.db.select_many(MENU_TABLE)
        entries = _validate_rows(MenuPlanEntry, MENU_TABLE, rows)
        return sorted(entries, key=lambda entry: weekday_index(entry.day))

    def fetch_collections(self) -> LedgerCollections:
        """Read every collection for one snapshot computation."""
        return LedgerCollections(
            cash_inflows=self.list_records("cash"),
            generic_expenses=self.list_records("expenses"),
            market_purchases=self.list_records("market"),
            meal_records=self.list_records("meals"),
            friend_transactions=self.list_records("friends"),
            budgets=self.list_records("budgets"),
            menu_plan=self.list_menu(),
        )

    def create(self, key: str, payload: BaseModel) -> Any:
        """Insert a new record stamped with the current time."""
        collection = get_collection(key)
        if not isinstance(payload, collection.create):
            raise InvalidInputError(f"Expected {collection.create.__name__} for {key}")

        row = build_row(collection, payload, now_utc().isoformat())
        created = self.db.insert_one(collection.table, row)
        self._notify(key)
        logger.info("Created %s %s", collection.table, created.get("id"))
        return parse_rows(collection, [created])[0]

    def update(self, key: str, record_id: str, changes: dict[str, Any]) -> Any:
        """Apply a partial update, re-validating the merged record."""
        collection = get_collection(key)
        existing = self.get_record(key, record_id)

        changes = field_names(collection, changes)
        if "eaten_by_names" in changes and "people_count" not in changes:
            changes["people_count"] = None

        merged = {**editable_fields(existing), **changes}
        try:
            payload = collection.create.model_validate(merged)
        except ValidationError as exc:
            first = exc.errors()[0]
            raise InvalidInputError(f"{'.'.join(map(str, first['loc']))}: {first['msg']}") from exc

        occurred_at = existing.occurred_at or now_utc()
        row = build_row(collection, payload, occurred_at.isoformat())
        rows = self.db.update(collection.table, {"id": record_id}, row)
        if not rows:
            raise NotFoundError(collection.label)
        self._notify(key)
        return parse_rows(collection, rows)[0]

    def delete(self, key: str, record_id: str) -> None:
        """Delete one record."""
        collection = get_collection(key)
        rows = self.db.delete(collection.table, {"id": record_id})
        if not rows:
            raise NotFoundError(collection.label)
        self._notify(key)

    def update_menu_day(self, day: str, payload: MenuDayUpdate) -> MenuPlanEntry:
        """Replace the planned dishes for one weekday."""
        rows = self.db.update(MENU_TABLE, {"day": day.strip().capitalize()}, payload.model_dump())
        if not rows:
            raise NotFoundError(f"Menu for {day}")
        self._notify("menu")
        return MenuPlanEntry.model_validate(rows[0])
