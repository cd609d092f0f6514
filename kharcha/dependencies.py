"""FastAPI dependency injection helpers."""

from __future__ import annotations

import threading
import time
from typing import Any

from fastapi import Depends, Header, Request

from kharcha.config import settings
from kharcha.services.access_service import AccessService
from kharcha.services.change_feed import ChangeFeed
from kharcha.services.ledger_store import LedgerStore
from kharcha.services.snapshot_cache import SnapshotCache
from kharcha.utils.errors import UnauthorizedError
from kharcha.utils.supabase_client import get_service_client, get_supabase_client
from supabase import Client

_token_cache: dict[str, tuple[float, Any]] = {}
_cache_lock = threading.Lock()


def _cache_get(cache: dict[Any, tuple[float, Any]], key: Any) -> Any | None:
    """Return a cache value when present and not expired."""
    now = time.monotonic()
    with _cache_lock:
        entry = cache.get(key)
        if not entry:
            return None
        expires_at, value = entry
        if expires_at <= now:
            cache.pop(key, None)
            return None
        return value


def _cache_set(
    cache: dict[Any, tuple[float, Any]],
    key: Any,
    value: Any,
    ttl_seconds: int,
    max_entries: int,
) -> None:
    """Store a bounded cache value with TTL."""
    if ttl_seconds <= 0:
        return

    with _cache_lock:
        bounded_max_entries = max(1, max_entries)
        if len(cache) >= bounded_max_entries:
            oldest_key = next(iter(cache))
            cache.pop(oldest_key, None)
        cache[key] = (time.monotonic() + ttl_seconds, value)


def get_current_user(authorization: str = Header(None)) -> Any:
    """Extract and validate a Supabase JWT from the Authorization header.

    Raises:
        UnauthorizedError: 401 if the header is missing, malformed, or
            the token cannot be validated.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Missing authorization header")

    token = authorization.split(" ", 1)[1]
    cached_user = _cache_get(_token_cache, token)
    if cached_user is not None:
        return cached_user

    supabase = get_supabase_client()

    try:
        response = supabase.auth.get_user(token)
        if not response or not response.user:
            raise UnauthorizedError("Invalid token")
        _cache_set(
            _token_cache,
            token,
            response.user,
            settings.auth_token_cache_ttl_seconds,
            settings.auth_token_cache_max_entries,
        )
        return response.user
    except UnauthorizedError:
        raise
    except Exception as exc:
        raise UnauthorizedError("Invalid or expired token") from exc


def get_current_user_id(user: Any) -> str:
    """Extract a stable user id string from the Supabase user object."""
    return str(user.id)


def get_current_user_email(user: Any) -> str | None:
    """Return the authenticated user's normalized email, if any."""
    raw_email = getattr(user, "email", None)
    if not isinstance(raw_email, str) or not raw_email.strip():
        return None
    return raw_email.strip().lower()


def get_db_client() -> Client:
    """Return the privileged Supabase client used by backend services."""
    return get_service_client()


def get_change_feed(request: Request) -> ChangeFeed:
    """Return the application-wide change feed."""
    return request.app.state.change_feed


def get_snapshot_cache(request: Request) -> SnapshotCache:
    """Return the application-wide snapshot cache."""
    return request.app.state.snapshot_cache


def get_ledger_store(
    client: Client = Depends(get_db_client),
    feed: ChangeFeed = Depends(get_change_feed),
) -> LedgerStore:
    """Return a ledger store that publishes its writes to the change feed."""
    return LedgerStore(client, feed)


def require_editor(
    user: Any = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> Any:
    """Return the user when they may edit the ledger, else raise 403."""
    AccessService(client).ensure_can_edit(
        get_current_user_id(user), get_current_user_email(user)
    )
    return user


def require_admin(
    user: Any = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> Any:
    """Return the user when they are an admin, else raise 403."""
    AccessService(client).ensure_admin(get_current_user_id(user), get_current_user_email(user))
    return user
