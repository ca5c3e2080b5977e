# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - properties.py: Property listing CRUD and deal of the day
# - payments.py: Stripe card payments and mobile money
# - users.py: The caller's own profile
#
# Each router is mounted in main.py under /api.
# =============================================================================

from . import health
from . import properties
from . import payments
from . import users

__all__ = [
    "health",
    "properties",
    "payments",
    "users",
]
