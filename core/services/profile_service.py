# =============================================================================
# core/services/profile_service.py - User Profile Logic
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import NotFoundError, ValidationError
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

# Never returned to clients
HIDDEN_PROFILE_FIELDS = frozenset({"password_hash"})

# Never writable through the profile endpoint
PROTECTED_PROFILE_FIELDS = frozenset({"id", "role", "is_verified"})


def _public(profile: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in profile.items() if k not in HIDDEN_PROFILE_FIELDS}


class ProfileService:
    """Read, update and delete the caller's own profile."""

    @staticmethod
    def get_profile(user_id: UUID | str) -> dict[str, Any]:
        """
        Raises:
            NotFoundError: If the user has no profile row
        """
        profile = SupabaseClient.fetch_profile(user_id)
        if not profile:
            raise NotFoundError("Profile not found", details={"user_id": normalize_uuid(user_id)})
        return _public(profile)

    @staticmethod
    def update_profile(user_id: UUID | str, updates: dict[str, Any]) -> dict[str, Any]:
        """
        Update the caller's profile. id, role and is_verified are dropped.

        Raises:
            ValidationError: If nothing updatable was sent
            NotFoundError: If the user has no profile row
        """
        safe_updates = {
            k: v for k, v in updates.items()
            if k not in PROTECTED_PROFILE_FIELDS and k not in HIDDEN_PROFILE_FIELDS
        }
        if not safe_updates:
            raise ValidationError("Invalid request body", details={"reason": "no updatable fields"})

        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(str(user_id))

        response = (
            client.table("profiles")
            .update(safe_updates)
            .eq("id", user_id_str)
            .execute()
        )
        if not response.data:
            raise NotFoundError("Profile not found", details={"user_id": user_id_str})

        logger.info(f"Updated profile {user_id_str}")
        return _public(response.data[0])

    @staticmethod
    def delete_profile(user_id: UUID | str) -> None:
        """
        Delete the profile row and then the auth account.

        The two deletes are separate calls; if the second fails the
        profile row is already gone.
        """
        client = SupabaseClient.get_client()
        user_id_str = normalize_uuid(str(user_id))

        client.table("profiles").delete().eq("id", user_id_str).execute()
        client.auth.admin.delete_user(user_id_str)

        logger.info(f"Deleted profile and auth account {user_id_str}")
