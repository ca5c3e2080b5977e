# =============================================================================
# app/routers/properties.py - Property Listing Endpoints
# =============================================================================
# Browsing is public. Creating, editing and deleting listings requires
# authentication, and edits/deletes are limited to the listing's agent.
# =============================================================================

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Query, status

from app.auth import AuthUser, get_current_user
from app.exceptions import ValidationError
from core.models.property import PropertyCreate, PropertyFilters, PropertyList, PropertyType
from core.services.property_service import PropertyService

router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get("", response_model=PropertyList)
async def list_properties(
    location: Annotated[str | None, Query(description="City name (partial match)")] = None,
    min_price: Annotated[int | None, Query(alias="minPrice", ge=0)] = None,
    max_price: Annotated[int | None, Query(alias="maxPrice", ge=0)] = None,
    property_type: Annotated[PropertyType | None, Query(alias="propertyType")] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    """
    List properties with optional filters.

    Returns the page of matching rows plus the total match count.
    """
    filters = PropertyFilters(
        location=location,
        min_price=min_price,
        max_price=max_price,
        property_type=property_type,
        limit=limit,
        offset=offset,
    )
    return PropertyService.list_properties(filters)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_property(
    body: PropertyCreate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create a listing owned by the caller.

    id, agentId, createdAt, updatedAt and isVerified are set by the server.
    """
    return PropertyService.create_property(body, user_id=user.id)


# Declared before /{property_id} so the literal path wins
@router.post("/deal-of-the-day")
async def select_deal_of_the_day(
    user: AuthUser = Depends(get_current_user),
):
    """Flag the most viewed property as the deal of the day."""
    property_id = PropertyService.select_deal_of_the_day()
    return {
        "message": "Deal of the day updated successfully",
        "propertyId": property_id,
    }


@router.get("/{property_id}")
async def get_property(
    property_id: Annotated[UUID, Path(description="Property UUID")],
):
    """Get a single property."""
    return PropertyService.get_property(property_id)


@router.put("/{property_id}")
async def update_property(
    property_id: Annotated[UUID, Path(description="Property UUID")],
    body: Annotated[Any, Body()] = None,
    user: AuthUser = Depends(get_current_user),
):
    """
    Partially update a listing the caller owns.

    The body must be a non-empty JSON object. id, agentId and createdAt
    are ignored; updatedAt is refreshed.
    """
    if not isinstance(body, dict) or not body:
        raise ValidationError("Invalid request body", details={"reason": "expected a non-empty JSON object"})

    return PropertyService.update_property(property_id, body, user_id=user.id)


@router.delete("/{property_id}")
async def delete_property(
    property_id: Annotated[UUID, Path(description="Property UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Delete a listing the caller owns."""
    PropertyService.delete_property(property_id, user_id=user.id)
    return {"success": True, "message": "Property deleted successfully"}
