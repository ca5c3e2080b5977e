# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class AuthUser(BaseModel):
    """
    Authenticated user extracted from Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    id: UUID
    email: Optional[str] = None
    role: Optional[str] = None

    model_config = {"frozen": True}


class TokenVerification(BaseModel):
    """Response for GET /auth/verify."""
    valid: bool
    user_id: str
    email: Optional[str] = None
