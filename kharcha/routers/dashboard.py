"""Dashboard endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from kharcha.dependencies import get_current_user, get_snapshot_cache
from kharcha.services.dashboard_service import dashboard_payload
from kharcha.services.snapshot_cache import SnapshotCache

router = APIRouter()


@router.get("")
def get_dashboard(
    _: Any = Depends(get_current_user),
    cache: SnapshotCache = Depends(get_snapshot_cache),
) -> dict:
    """Return the latest snapshot with market notes and today's menu."""
    return dashboard_payload(cache.state)


@router.post("/refresh")
async def refresh_dashboard(
    _: Any = Depends(get_current_user),
    cache: SnapshotCache = Depends(get_snapshot_cache),
) -> dict:
    """Recompute the snapshot now and return it."""
    return dashboard_payload(await cache.refresh())
