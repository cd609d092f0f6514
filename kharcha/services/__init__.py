"""Service package exports with lazy loading."""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS = {
    "AccessService": "kharcha.services.access_service",
    "AssistantClient": "kharcha.services.assistant_service",
    "ChangeFeed": "kharcha.services.change_feed",
    "LedgerStore": "kharcha.services.ledger_store",
    "SnapshotCache": "kharcha.services.snapshot_cache",
    "SupabaseService": "kharcha.services.common",
    "allocate_per_person": "kharcha.services.allocation_service",
    "build_state": "kharcha.services.snapshot_service",
    "compute_snapshot": "kharcha.services.snapshot_service",
    "match_budget_progress": "kharcha.services.budget_service",
}

__all__ = sorted(_EXPORTS.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = import_module(_EXPORTS[name])
    return getattr(module, name)
