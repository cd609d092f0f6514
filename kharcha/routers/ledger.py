"""Ledger record endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from kharcha.dependencies import get_current_user, get_ledger_store, require_editor
from kharcha.schemas.records import (
    BudgetCreate,
    CashInflowCreate,
    ExpenseCreate,
    FriendTransactionCreate,
    MarketPurchaseCreate,
    MealCreate,
)
from kharcha.services.ledger_store import LedgerStore

router = APIRouter()


@router.get("/{collection}")
def list_records(
    collection: str,
    limit: int | None = Query(default=None, ge=1, le=500),
    _: Any = Depends(get_current_user),
    store: LedgerStore = Depends(get_ledger_store),
) -> dict:
    """Return one collection, newest first."""
    records = store.list_records(collection, limit=limit)
    return {"records": records, "total": len(records)}


@router.post("/cash")
def add_cash(
    payload: CashInflowCreate,
    _: Any = Depends(require_editor),
    store: LedgerStore = Depends(get_ledger_store),
) -> dict:
    """Add money straight to the communal pool."""
    return {"record": store.create("cash", payload)}


@router.post("/expenses")
def add_expense(
    payload: ExpenseCreate,
    _: Any = Depends(require_editor),
    store: LedgerStore = Depends(get_ledger_store),
) -> dict:
    """Quick-add an expense."""
    return {"record": store.create("expenses", payload)}


@router.post("/market")
def add_market_purchase(
    payload: MarketPurchaseCreate,
    _: Any = Depends(require_editor),
    store: LedgerStore = Depends(get_ledger_store),
) -> dict:
    """Record an itemized market purchase."""
    return {"record": store.create("market", payload)}


@router.post("/meals")
def add_meal(
    payload: MealCreate,
    _: Any = Depends(require_editor),
    store: LedgerStore = Depends(get_ledger_store),
) -> dict:
    """Record a cooked meal."""
    return {"record": store.create("meals", payload)}


@router.post("/friends")
def add_friend_transaction(
    payload: FriendTransactionCreate,
    _: Any = Depends(require_editor),
    store: LedgerStore = Depends(get_ledger_store),
) -> dict:
    """Record a friend loan or deposit."""
    return {"record": store.create("friends", payload)}


@router.post("/budgets")
def add_budget(
    payload: BudgetCreate,
    _: Any = Depends(require_editor),
    store: LedgerStore = Depends(get_ledger_store),
) -> dict:
    """Create a named budget ceiling."""
    return {"record": store.create("budgets", payload)}


@router.patch("/{collection}/{record_id}")
def update_record(
    collection: str,
    record_id: str,
    changes: dict[str, Any] = Body(...),
    _: Any = Depends(require_editor),
    store: LedgerStore = Depends(get_ledger_store),
) -> dict:
    """Partially update one record."""
    return {"record": store.update(collection, record_id, changes)}


@router.delete("/{collection}/{record_id}")
def delete_record(
    collection: str,
    record_id: str,
    _: Any = Depends(require_editor),
    store: LedgerStore = Depends(get_ledger_store),
) -> dict:
    """Delete one record."""
    store.delete(collection, record_id)
    return {"deleted": True}
