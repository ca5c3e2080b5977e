# =============================================================================
# core/models/property.py - Property Schemas
# =============================================================================
# These models define the API contract for property listings:
# - PropertyType / Currency / PropertyStatus: enums shared with the web app
# - PropertyFilters: query parameters for listing properties
# - PropertyCreate: input for creating a listing
# - PropertyList: paginated list response
#
# Property rows are stored in Supabase with camelCase column names
# (agentId, createdAt, updatedAt, isVerified), so rows are passed through
# as dicts rather than re-modelled field by field.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# Columns the server owns. Clients can send them but they are dropped.
SERVER_MANAGED_FIELDS = frozenset({"id", "agentId", "createdAt", "updatedAt", "isVerified"})

# Columns a PUT may never change
IMMUTABLE_FIELDS = frozenset({"id", "agentId", "createdAt"})


class PropertyType(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    VILLA = "villa"
    LAND = "land"
    COMMERCIAL = "commercial"
    OFFICE = "office"
    WAREHOUSE = "warehouse"
    HOTEL = "hotel"


class Currency(str, Enum):
    """Currencies the marketplace lists and charges in."""
    UGX = "UGX"  # Ugandan Shilling
    KES = "KES"  # Kenyan Shilling
    TZS = "TZS"  # Tanzanian Shilling
    NGN = "NGN"  # Nigerian Naira
    GHS = "GHS"  # Ghanaian Cedi
    ZAR = "ZAR"  # South African Rand
    USD = "USD"
    EUR = "EUR"


class PropertyStatus(str, Enum):
    AVAILABLE = "available"
    PENDING = "pending"
    SOLD = "sold"
    RENTED = "rented"
    UNDER_CONSTRUCTION = "under-construction"


class PropertyFilters(BaseModel):
    """
    Filters for GET /properties.

    Example:
        PropertyFilters(location="Nairobi", min_price=50000, limit=20)
    """
    location: str | None = Field(default=None, description="City name (partial match)")
    min_price: int | None = Field(default=None, ge=0)
    max_price: int | None = Field(default=None, ge=0)
    property_type: PropertyType | None = None
    limit: int = Field(default=10, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class PropertyCreate(BaseModel):
    """
    Body for POST /properties.

    Only the title is required; any other listing columns are stored
    as sent. Server-managed fields are stripped by the service.
    """
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    currency: Currency | None = None
    type: PropertyType | None = None
    status: PropertyStatus | None = None

    model_config = ConfigDict(extra="allow")

    def to_row(self) -> dict[str, Any]:
        """Dump to a DB row, dropping unset values and server-owned fields."""
        row = self.model_dump(mode="json", exclude_none=True)
        return {k: v for k, v in row.items() if k not in SERVER_MANAGED_FIELDS}


class PropertyList(BaseModel):
    """Paginated list of properties."""
    properties: list[dict[str, Any]]
    count: int
    limit: int
    offset: int
