"""CSV export endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from kharcha.dependencies import get_current_user, get_ledger_store
from kharcha.services.export_service import export_csv, export_filename
from kharcha.services.ledger_store import LedgerStore
from kharcha.utils.time import now_utc

router = APIRouter()


@router.get("/export.csv")
def export_ledger(
    _: Any = Depends(get_current_user),
    store: LedgerStore = Depends(get_ledger_store),
) -> Response:
    """Download every expense, meal, market and friend record as CSV."""
    content = export_csv(store.fetch_collections())
    filename = export_filename(now_utc())
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
