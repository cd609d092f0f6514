"""Weekly menu endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from kharcha.dependencies import get_current_user, get_ledger_store, require_editor
from kharcha.schemas.records import MenuDayUpdate
from kharcha.services.ledger_store import LedgerStore

router = APIRouter()


@router.get("")
def get_menu(
    _: Any = Depends(get_current_user),
    store: LedgerStore = Depends(get_ledger_store),
) -> dict:
    """Return the menu plan, Monday first."""
    return {"days": store.list_menu()}


@router.put("/{day}")
def update_menu_day(
    day: str,
    payload: MenuDayUpdate,
    _: Any = Depends(require_editor),
    store: LedgerStore = Depends(get_ledger_store),
) -> dict:
    """Replace one weekday's planned dishes."""
    return {"day": store.update_menu_day(day, payload)}
