# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# Supports both:
# - ES256 (new Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret) as fallback
#
# Failures raise AuthenticationError so they leave the API in the same
# envelope as every other error.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
import threading
import time
from typing import Optional
from uuid import UUID

import httpx
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from app.auth.models import AuthUser
from app.config import get_settings
from app.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor. Missing tokens are reported by us, not FastAPI.
security = HTTPBearer(auto_error=False)

JWKS_CACHE_TTL = 3600  # 1 hour


class _JWKSCache:
    """Signing keys fetched from Supabase, refreshed at most once per TTL."""

    def __init__(self):
        self._keys: dict = {}
        self._fetched_at: float = 0
        self._lock = threading.Lock()

    def get(self) -> dict:
        with self._lock:
            if self._keys and (time.time() - self._fetched_at) < JWKS_CACHE_TTL:
                return self._keys

            try:
                response = httpx.get(_get_jwks_url(), timeout=10)
                response.raise_for_status()
                self._keys = response.json()
                self._fetched_at = time.time()
                logger.debug("Fetched JWKS from Supabase")
            except httpx.HTTPError as e:
                logger.warning(f"Failed to fetch JWKS: {e}")
                # Serve stale keys rather than none
                if not self._keys:
                    return {"keys": []}

            return self._keys


_jwks = _JWKSCache()


def _get_jwks_url() -> str:
    """Get the JWKS URL from Supabase URL."""
    supabase_url = (get_settings().SUPABASE_URL or "").rstrip('/')
    return f"{supabase_url}/auth/v1/.well-known/jwks.json"


def _hs256_secret() -> str:
    """
    The shared HS256 secret.

    Raises:
        AuthenticationError: If no secret is configured. An empty HMAC key
            would accept tokens anyone can sign.
    """
    secret = get_settings().SUPABASE_JWT_SECRET
    if not secret:
        logger.error("SUPABASE_JWT_SECRET is not set, rejecting HS256 token")
        raise AuthenticationError("Invalid token")
    return secret


def _get_signing_key(token: str) -> tuple[str | dict, str]:
    """
    Get the appropriate signing key for a token.

    Returns:
        Tuple of (key, algorithm) to use for verification

    Raises:
        AuthenticationError: If the token needs the HS256 secret and none is set
    """
    try:
        unverified_header = jwt.get_unverified_header(token)
    except JWTError:
        return _hs256_secret(), "HS256"

    alg = unverified_header.get("alg", "HS256")
    kid = unverified_header.get("kid")

    if alg == "HS256":
        return _hs256_secret(), "HS256"

    # For ES256 or other algorithms, use JWKS
    if kid:
        for key in _jwks.get().get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    logger.warning(f"Could not find key for alg={alg}, kid={kid}, falling back to HS256")
    return _hs256_secret(), "HS256"


def decode_access_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and extract the user.

    Raises:
        AuthenticationError: If the token is invalid, expired or malformed
    """
    try:
        signing_key, algorithm = _get_signing_key(token)
        payload = jwt.decode(
            token,
            signing_key,
            algorithms=[algorithm],
            audience="authenticated"
        )
    except ExpiredSignatureError:
        logger.info("JWT token has expired")
        raise AuthenticationError("Token has expired")
    except JWTError as e:
        logger.info(f"JWT validation failed: {e}")
        raise AuthenticationError("Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise AuthenticationError("Invalid token: missing user ID")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise AuthenticationError("Invalid token: malformed user ID")

    return AuthUser(id=user_uuid, email=payload.get("email"), role=payload.get("role"))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthUser:
    """
    Extract and validate user from Supabase JWT token.

    Returns:
        AuthUser: The authenticated user

    Raises:
        AuthenticationError: 401 if the token is missing, invalid or expired
    """
    if credentials is None:
        raise AuthenticationError("Authentication required")

    user = decode_access_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id}")
    return user
