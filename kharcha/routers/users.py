"""User permission endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from kharcha.dependencies import (
    get_current_user,
    get_current_user_email,
    get_current_user_id,
    get_db_client,
    require_admin,
)
from kharcha.schemas.user import EditAccessUpdate, PermissionsResponse
from kharcha.services.access_service import AccessService
from supabase import Client

router = APIRouter()


@router.get("/me", response_model=PermissionsResponse)
def my_permissions(
    user: Any = Depends(get_current_user),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return the current user's role and edit rights."""
    return AccessService(client).permissions(
        get_current_user_id(user), get_current_user_email(user)
    )


@router.get("")
def list_users(
    _: Any = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return every user profile."""
    return {"users": AccessService(client).list_users()}


@router.patch("/{user_id}/edit-access")
def set_edit_access(
    user_id: str,
    payload: EditAccessUpdate,
    _: Any = Depends(require_admin),
    client: Client = Depends(get_db_client),
) -> dict:
    """Grant or revoke a user's edit rights."""
    return {"user": AccessService(client).set_edit_access(user_id, payload.allow_edit)}
