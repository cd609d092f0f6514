"""API router package."""

from kharcha.routers import (
    assistant,
    dashboard,
    export,
    ledger,
    menu,
    users,
)

__all__ = [
    "assistant",
    "dashboard",
    "export",
    "ledger",
    "menu",
    "users",
]
