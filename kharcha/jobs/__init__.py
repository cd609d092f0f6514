"""Background job modules for periodic ledger tasks."""

from kharcha.jobs.snapshot_poll import snapshot_poll

__all__ = [
    "snapshot_poll",
]
