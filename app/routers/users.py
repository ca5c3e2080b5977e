# =============================================================================
# app/routers/users.py - User Profile Endpoints
# =============================================================================
# The caller's own profile. All endpoints require authentication.
# =============================================================================

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends

from app.auth import AuthUser, get_current_user
from app.exceptions import ValidationError
from core.services.profile_service import ProfileService

router = APIRouter(prefix="/user", tags=["Users"])


@router.get("/profile")
async def get_profile(user: AuthUser = Depends(get_current_user)):
    """Get the caller's profile."""
    return ProfileService.get_profile(user.id)


@router.put("/profile")
async def update_profile(
    body: Annotated[Any, Body()] = None,
    user: AuthUser = Depends(get_current_user),
):
    """Update the caller's profile. id, role and is_verified can't be changed."""
    if not isinstance(body, dict) or not body:
        raise ValidationError("Invalid request body", details={"reason": "expected a non-empty JSON object"})

    return ProfileService.update_profile(user.id, body)


@router.delete("/profile")
async def delete_profile(user: AuthUser = Depends(get_current_user)):
    """Delete the caller's profile and auth account."""
    ProfileService.delete_profile(user.id)
    return {"success": True, "message": "Profile deleted successfully"}
