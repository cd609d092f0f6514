"""User-related schemas."""

from datetime import datetime

from pydantic import BaseModel


class UserProfile(BaseModel):
    """Public user profile with ledger permissions."""

    id: str
    email: str
    role: str = "viewer"
    allow_edit: bool = False
    created_at: datetime | None = None


class EditAccessUpdate(BaseModel):
    """Request body for granting or revoking edit access."""

    allow_edit: bool


class PermissionsResponse(BaseModel):
    """What the current user may do."""

    role: str
    is_admin: bool
    can_edit: bool
