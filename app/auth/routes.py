# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Actual signup/login is handled by Supabase Auth client-side.
# The callback finishes the OAuth / magic-link flow on the server; the
# other routes report on the token the caller already holds.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, Query, Request
from fastapi.responses import RedirectResponse
from supabase import AuthApiError

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, TokenVerification
from app.config import Settings, get_settings
from app.exceptions import AuthenticationError
from core.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

ACCESS_TOKEN_COOKIE = "sb-access-token"
REFRESH_TOKEN_COOKIE = "sb-refresh-token"
CODE_VERIFIER_COOKIE = "sb-code-verifier"
AUTH_ERROR_PATH = "/auth-error"


def safe_next_path(next_path: str | None) -> str:
    """
    Only same-origin relative paths are honoured.

    "//evil.com" and absolute URLs fall back to "/".
    """
    if not next_path or not next_path.startswith("/") or next_path.startswith("//"):
        return "/"
    if "\\" in next_path:
        return "/"
    return next_path


def _origin(request: Request) -> str:
    return str(request.base_url).rstrip("/")


@router.get("/callback")
async def auth_callback(
    request: Request,
    code: Annotated[str | None, Query()] = None,
    next: Annotated[str | None, Query()] = None,
    code_verifier: Annotated[str | None, Query()] = None,
    sb_code_verifier: Annotated[str | None, Cookie(alias=CODE_VERIFIER_COOKIE)] = None,
    config: Settings = Depends(get_settings),
):
    """
    Exchange the Supabase auth code for a session.

    Success redirects to `next` with the session tokens set as cookies.
    If Supabase Auth rejects the code the user is sent to /auth-error.

    Raises:
        AuthenticationError: 401 if no code was provided
    """
    if not code:
        raise AuthenticationError("No authorization code provided")

    origin = _origin(request)

    try:
        tokens = AuthService.exchange_code(code, code_verifier or sb_code_verifier)
    except (AuthApiError, AuthenticationError) as e:
        logger.warning(f"Auth code exchange rejected: {e}")
        return RedirectResponse(f"{origin}{AUTH_ERROR_PATH}")

    response = RedirectResponse(f"{origin}{safe_next_path(next)}")
    cookie_options = {
        "httponly": True,
        "secure": config.is_production,
        "samesite": "lax",
        "path": "/",
    }
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        tokens.access_token,
        max_age=tokens.expires_in,
        **cookie_options,
    )
    response.set_cookie(REFRESH_TOKEN_COOKIE, tokens.refresh_token, **cookie_options)
    if sb_code_verifier:
        response.delete_cookie(CODE_VERIFIER_COOKIE, path="/")
    return response


@router.get("/me")
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Get the identity carried by the current token.

    Raises:
        401: If not authenticated
    """
    return {
        "id": str(user.id),
        "email": user.email,
        "role": user.role,
    }


@router.get("/verify", response_model=TokenVerification)
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> TokenVerification:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.

    Raises:
        401: If token is invalid or expired
    """
    return TokenVerification(
        valid=True,
        user_id=str(user.id),
        email=user.email,
    )
