# =============================================================================
# core/services/auth_service.py - Auth Code Exchange
# =============================================================================
# Exchanges the one-time code Supabase Auth sends to the callback URL for
# a user session.
# =============================================================================

import logging
from dataclasses import dataclass

from app.exceptions import AuthenticationError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionTokens:
    """Tokens handed back to the browser as cookies."""
    access_token: str
    refresh_token: str
    expires_in: int | None = None


class AuthService:
    """Server side of the Supabase OAuth / magic-link flow."""

    @staticmethod
    def exchange_code(code: str, code_verifier: str | None = None) -> SessionTokens:
        """
        Exchange an auth code for session tokens.

        Args:
            code: The ?code= value from the callback URL
            code_verifier: PKCE verifier stored by the browser, if any

        Returns:
            SessionTokens for the signed-in user

        Raises:
            supabase.AuthError: If Supabase Auth rejects the code
            AuthenticationError: If the exchange yields no session
        """
        client = SupabaseClient.create_auth_client()

        params = {"auth_code": code}
        if code_verifier:
            params["code_verifier"] = code_verifier

        response = client.auth.exchange_code_for_session(params)
        session = response.session
        if session is None:
            raise AuthenticationError("Code exchange returned no session")

        logger.info(f"Exchanged auth code for user {response.user.id if response.user else 'unknown'}")
        return SessionTokens(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_in=session.expires_in,
        )
