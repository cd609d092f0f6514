"""Role-gated edit rights for household members."""

from __future__ import annotations

from typing import Any

from kharcha.config import settings
from kharcha.services.common import SupabaseService, clear_profile_cache
from kharcha.utils.errors import ForbiddenError, NotFoundError
from supabase import Client

ROLE_ADMIN = "admin"
ROLE_VIEWER = "viewer"


def is_admin(profile: dict[str, Any] | None, email: str | None = None) -> bool:
    """Admins are profiles with the admin role or a configured admin email."""
    if email and email.strip().lower() in settings.admin_emails_set:
        return True
    return bool(profile) and profile.get("role") == ROLE_ADMIN


def can_edit(profile: dict[str, Any] | None, email: str | None = None) -> bool:
    """Editors are admins plus anyone with the ``allow_edit`` flag."""
    if is_admin(profile, email):
        return True
    return bool(profile) and bool(profile.get("allow_edit"))


class AccessService:
    """Look up profiles and enforce edit permissions."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def profile_or_none(self, user_id: str) -> dict[str, Any] | None:
        """Return a user's profile, or None when they have not got one yet."""
        try:
            return self.db.get_profile(user_id)
        except NotFoundError:
            return None

    def permissions(self, user_id: str, email: str | None = None) -> dict[str, Any]:
        """Return the role flags the frontend gates its forms on."""
        profile = self.profile_or_none(user_id)
        return {
            "role": (profile or {}).get("role", ROLE_VIEWER),
            "is_admin": is_admin(profile, email),
            "can_edit": can_edit(profile, email),
        }

    def ensure_can_edit(self, user_id: str, email: str | None = None) -> None:
        """Raise ForbiddenError when the user may only view the ledger."""
        if not can_edit(self.profile_or_none(user_id), email):
            raise ForbiddenError("You don't have edit access to the ledger")

    def ensure_admin(self, user_id: str, email: str | None = None) -> None:
        """Raise ForbiddenError unless the user is an admin."""
        if not is_admin(self.profile_or_none(user_id), email):
            raise ForbiddenError("Only admins can manage users")

    def list_users(self) -> list[dict[str, Any]]:
        """Return all user profiles, oldest first."""
        return self.db.select_many("users", order_by="created_at")

    def set_edit_access(self, target_user_id: str, allow_edit: bool) -> dict[str, Any]:
        """Grant or revoke a user's edit flag."""
        rows = self.db.update("users", {"id": target_user_id}, {"allow_edit": allow_edit})
        if not rows:
            raise NotFoundError("User profile")
        clear_profile_cache(target_user_id)
        return rows[0]
