"""Pytest fixtures for backend tests."""

from __future__ import annotations

import itertools
import os
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any

import pytest
from fastapi.testclient import TestClient


def _set_default_env() -> None:
    os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
    os.environ.setdefault("SUPABASE_ANON_KEY", "anon-key")
    os.environ.setdefault("SUPABASE_SERVICE_KEY", "service-key")
    os.environ.setdefault("ENABLE_SCHEDULER", "false")
    os.environ.setdefault("ADMIN_EMAILS", "main@main.com")


_set_default_env()


@dataclass
class _Response:
    data: Any


class FakeQuery:
    """Just enough of the PostgREST builder chain for the services under test."""

    def __init__(self, client: FakeSupabaseClient, table: str) -> None:
        self.client = client
        self.table = table
        self.action = "select"
        self.payload: Any = None
        self.filters: list[tuple[str, Any]] = []
        self.order_key: str | None = None
        self.order_desc = False
        self.limit_count: int | None = None

    def select(self, _columns: str = "*", **_kwargs: Any) -> FakeQuery:
        self.action = "select"
        return self

    def insert(self, payload: Any) -> FakeQuery:
        self.action = "insert"
        self.payload = payload
        return self

    def update(self, payload: dict[str, Any]) -> FakeQuery:
        self.action = "update"
        self.payload = payload
        return self

    def delete(self) -> FakeQuery:
        self.action = "delete"
        return self

    def eq(self, key: str, value: Any) -> FakeQuery:
        self.filters.append((key, value))
        return self

    def order(self, key: str, desc: bool = False) -> FakeQuery:
        self.order_key = key
        self.order_desc = desc
        return self

    def limit(self, count: int) -> FakeQuery:
        self.limit_count = count
        return self

    def _matches(self, row: dict[str, Any]) -> bool:
        return all(str(row.get(key)) == str(value) for key, value in self.filters)

    def execute(self) -> _Response:
        if self.client.error is not None:
            raise self.client.error

        rows = self.client.tables.setdefault(self.table, [])
        if self.action == "insert":
            payloads = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for payload in payloads:
                row = {"id": str(next(self.client.ids)), **payload}
                rows.append(row)
                created.append(dict(row))
            return _Response(created)

        matched = [row for row in rows if self._matches(row)]
        if self.action == "update":
            for row in matched:
                row.update(self.payload)
            return _Response([dict(row) for row in matched])
        if self.action == "delete":
            self.client.tables[self.table] = [row for row in rows if not self._matches(row)]
            return _Response([dict(row) for row in matched])

        result = [dict(row) for row in matched]
        if self.order_key:
            result.sort(key=lambda row: str(row.get(self.order_key) or ""), reverse=self.order_desc)
        if self.limit_count:
            result = result[: self.limit_count]
        return _Response(result)


class FakeSupabaseClient:
    """In-memory stand-in for ``supabase.Client``."""

    def __init__(self, tables: dict[str, list[dict[str, Any]]] | None = None) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = tables or {}
        self.ids = itertools.count(1000)
        self.error: Exception | None = None

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


@pytest.fixture
def fake_db() -> FakeSupabaseClient:
    """An empty in-memory Supabase client."""
    from kharcha.services.common import clear_profile_cache

    clear_profile_cache()
    return FakeSupabaseClient(
        {
            "users": [
                {"id": "u-admin", "email": "admin@example.com", "role": "admin"},
                {
                    "id": "u-editor",
                    "email": "ed@example.com",
                    "role": "viewer",
                    "allow_edit": True,
                },
                {"id": "u-viewer", "email": "view@example.com", "role": "viewer"},
            ],
        }
    )


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Create a FastAPI test client."""
    from kharcha.main import app

    return TestClient(app)


@pytest.fixture
def api(fake_db: FakeSupabaseClient):
    """Test client wired to the fake store, with a switchable signed-in user."""
    from kharcha.dependencies import get_current_user, get_db_client
    from kharcha.main import app
    from kharcha.services.change_feed import ChangeFeed
    from kharcha.services.ledger_store import LedgerStore
    from kharcha.services.snapshot_cache import SnapshotCache

    session = SimpleNamespace(user=SimpleNamespace(id="u-editor", email="ed@example.com"))
    store = LedgerStore(fake_db)

    async def fetch():
        return store.fetch_collections()

    app.state.change_feed = ChangeFeed()
    app.state.snapshot_cache = SnapshotCache(fetch)
    app.dependency_overrides[get_db_client] = lambda: fake_db
    app.dependency_overrides[get_current_user] = lambda: session.user

    test_client = TestClient(app)
    test_client.session = session  # type: ignore[attr-defined]
    test_client.db = fake_db  # type: ignore[attr-defined]
    yield test_client
    app.dependency_overrides.clear()
