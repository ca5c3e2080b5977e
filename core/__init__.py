# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic behind the routes:
# - models/: Pydantic schemas for data validation and the error envelope
# - services/: Property, payment, profile and auth operations
#
# Code in this package should NOT import from FastAPI.
# Services raise taxonomy errors from app.exceptions and let database
# and payment failures propagate to the route boundary.
# =============================================================================
