# =============================================================================
# core/services/property_service.py - Property Business Logic
# =============================================================================
# Handles property listing CRUD and ownership checks.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import (
    AuthorizationError,
    NotFoundError,
    PropertyNotFoundError,
    ValidationError,
)
from core.models.property import (
    IMMUTABLE_FIELDS,
    PropertyCreate,
    PropertyFilters,
    PropertyList,
)
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, utc_now_iso

logger = logging.getLogger(__name__)


class PropertyService:
    """
    Service for property listing operations.

    Database failures are not caught here; they propagate to the route
    boundary and are normalized there.
    """

    @staticmethod
    def list_properties(filters: PropertyFilters) -> PropertyList:
        """
        List properties with optional filters and pagination.

        Args:
            filters: Location / price / type filters and the page window

        Returns:
            PropertyList with the page of rows and the total match count
        """
        client = SupabaseClient.get_client()

        query = client.table("properties").select("*", count="exact")

        if filters.location:
            query = query.ilike("location->>city", f"%{filters.location}%")
        if filters.min_price is not None:
            query = query.gte("price", filters.min_price)
        if filters.max_price is not None:
            query = query.lte("price", filters.max_price)
        if filters.property_type:
            query = query.eq("type", filters.property_type.value)

        query = query.range(filters.offset, filters.offset + filters.limit - 1)
        response = query.execute()

        rows = response.data or []
        return PropertyList(
            properties=rows,
            count=response.count if response.count is not None else len(rows),
            limit=filters.limit,
            offset=filters.offset,
        )

    @staticmethod
    def get_property(property_id: str | UUID) -> dict[str, Any]:
        """
        Get a property by ID.

        Raises:
            PropertyNotFoundError: If the property doesn't exist
        """
        prop = SupabaseClient.fetch_property(property_id)
        if not prop:
            raise PropertyNotFoundError(normalize_uuid(property_id))
        return prop

    @staticmethod
    def _require_owner(property_id: str, user_id: UUID | str) -> None:
        """Raise unless the property exists and belongs to user_id."""
        existing = SupabaseClient.fetch_property(property_id, columns="agentId")
        if not existing:
            raise PropertyNotFoundError(property_id)
        if str(existing.get("agentId")) != str(user_id):
            logger.warning(f"User {user_id} tried to modify property {property_id} they don't own")
            raise AuthorizationError()

    @staticmethod
    def create_property(data: PropertyCreate, user_id: UUID | str) -> dict[str, Any]:
        """
        Create a listing owned by user_id.

        New listings always start unverified.
        """
        client = SupabaseClient.get_client()
        now = utc_now_iso()

        row = {
            **data.to_row(),
            "agentId": str(user_id),
            "createdAt": now,
            "updatedAt": now,
            "isVerified": False,
        }

        response = client.table("properties").insert(row).execute()
        if not response.data:
            raise ValidationError("Property could not be created")

        created = response.data[0]
        logger.info(f"Created property {created.get('id')} for agent {user_id}")
        return created

    @staticmethod
    def update_property(
        property_id: str | UUID,
        updates: dict[str, Any],
        user_id: UUID | str,
    ) -> dict[str, Any]:
        """
        Apply a partial update to a property the user owns.

        id, agentId and createdAt are silently dropped; updatedAt is
        always refreshed.

        Raises:
            ValidationError: If nothing updatable was sent
            PropertyNotFoundError: If the property doesn't exist
            AuthorizationError: If the user doesn't own it
        """
        property_id_str = normalize_uuid(property_id)
        safe_updates = {k: v for k, v in updates.items() if k not in IMMUTABLE_FIELDS}
        if not safe_updates:
            raise ValidationError("Invalid request body", details={"reason": "no updatable fields"})

        PropertyService._require_owner(property_id_str, user_id)

        client = SupabaseClient.get_client()
        safe_updates["updatedAt"] = utc_now_iso()

        response = (
            client.table("properties")
            .update(safe_updates)
            .eq("id", property_id_str)
            .execute()
        )
        if not response.data:
            raise PropertyNotFoundError(property_id_str)

        logger.info(f"Updated property {property_id_str}")
        return response.data[0]

    @staticmethod
    def delete_property(property_id: str | UUID, user_id: UUID | str) -> None:
        """
        Delete a property the user owns.

        Raises:
            PropertyNotFoundError: If the property doesn't exist
            AuthorizationError: If the user doesn't own it
        """
        property_id_str = normalize_uuid(property_id)
        PropertyService._require_owner(property_id_str, user_id)

        client = SupabaseClient.get_client()
        client.table("properties").delete().eq("id", property_id_str).execute()
        logger.info(f"Deleted property {property_id_str}")

    @staticmethod
    def select_deal_of_the_day() -> str:
        """
        Flag the most viewed property as the deal of the day.

        Clears the flag on every property first, then sets it on the one
        with the highest viewcount. Properties that have never been viewed
        (NULL viewcount) are skipped. The two writes are not atomic.

        Returns:
            ID of the selected property

        Raises:
            NotFoundError: If no property has a viewcount
        """
        client = SupabaseClient.get_client()

        reset = (
            client.table("properties")
            .update({"is_deal_of_the_day": False})
            .eq("is_deal_of_the_day", True)
            .execute()
        )
        logger.info(f"Reset {len(reset.data or [])} deal of the day flags")

        top = (
            client.table("properties")
            .select("id, viewcount")
            .not_.is_("viewcount", "null")
            .order("viewcount", desc=True)
            .limit(1)
            .execute()
        )
        if not top.data:
            raise NotFoundError("No properties found for deal of the day")

        selected_id = str(top.data[0]["id"])
        (
            client.table("properties")
            .update({"is_deal_of_the_day": True})
            .eq("id", selected_id)
            .execute()
        )

        logger.info(f"Property {selected_id} is the new deal of the day")
        return selected_id
