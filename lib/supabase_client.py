# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# One client instance is created lazily and shared read-only across
# requests; creation is guarded by a lock so concurrent first requests
# can't build two clients.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   prop = SupabaseClient.fetch_property(property_id)
# =============================================================================

from __future__ import annotations

import logging
import threading
from typing import Any
from uuid import UUID

from supabase import ClientOptions, create_client, Client

from app.config import get_settings
from lib.utils import normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages:
    "Errors should tell HOW to fix, not just WHAT failed."
    These are logged server-side; callers only ever see the normalized
    platform error they are translated into.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def is_no_rows_error(error: Exception) -> bool:
    """True if a PostgREST error means .single() matched nothing."""
    return getattr(error, "code", None) == NO_ROWS_CODE or NO_ROWS_CODE in str(error)


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    All methods are class methods for easy access without instantiation.
    The underlying client is never reassigned once created.

    Example:
        client = SupabaseClient.get_client()
        client.table("properties").select("*").limit(10).execute()

        prop = SupabaseClient.fetch_property("550e8400-...")
    """

    _instance: Client | None = None
    _lock = threading.Lock()

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the shared Supabase client.

        Uses the service_role key when available (bypasses RLS, required
        for admin auth calls) and falls back to the anon key.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If Supabase isn't configured or creation fails
        """
        if cls._instance is not None:
            return cls._instance

        with cls._lock:
            if cls._instance is None:
                cls._instance = cls._create()
        return cls._instance

    @classmethod
    def _create(cls) -> Client:
        config = get_settings()
        key = config.SUPABASE_SERVICE_KEY or config.SUPABASE_ANON_KEY

        if not config.SUPABASE_URL or not key:
            raise SupabaseClientError(
                message="Supabase is not configured",
                code="CLIENT_NOT_CONFIGURED",
                suggestion="Set SUPABASE_URL and SUPABASE_SERVICE_KEY (or SUPABASE_ANON_KEY)",
            )

        try:
            client = create_client(config.SUPABASE_URL, key)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase client: {e}",
                code="CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file",
            ) from e

        logger.info("Supabase client initialized successfully")
        return client

    @classmethod
    def create_auth_client(cls) -> Client:
        """
        Create a short-lived anon client for user auth flows.

        Signing a user in sets that user's token on the client, so these
        flows must never run on the shared service client.

        Raises:
            SupabaseClientError: If Supabase isn't configured
        """
        config = get_settings()
        if not config.SUPABASE_URL or not config.SUPABASE_ANON_KEY:
            raise SupabaseClientError(
                message="Supabase auth is not configured",
                code="CLIENT_NOT_CONFIGURED",
                suggestion="Set SUPABASE_URL and SUPABASE_ANON_KEY",
            )

        return create_client(
            config.SUPABASE_URL,
            config.SUPABASE_ANON_KEY,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_property(
        cls,
        property_id: str | UUID,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """
        Fetch a single property row.

        Args:
            property_id: The property ID
            columns: PostgREST column selection (default: all)

        Returns:
            Property dict, or None if not found

        Raises:
            postgrest.exceptions.APIError: For any failure other than "no rows"
        """
        client = cls.get_client()
        property_id_str = normalize_uuid(property_id)

        try:
            response = (
                client.table("properties")
                .select(columns)
                .eq("id", property_id_str)
                .single()
                .execute()
            )
        except Exception as e:
            if is_no_rows_error(e):
                return None
            raise

        return response.data

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_profile(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a user's profile row.

        Args:
            user_id: The auth user ID (profiles.id)

        Returns:
            Profile dict, or None if the user has no profile yet
        """
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = (
                client.table("profiles")
                .select("*")
                .eq("id", user_id_str)
                .single()
                .execute()
            )
        except Exception as e:
            if is_no_rows_error(e):
                return None
            raise

        return response.data
