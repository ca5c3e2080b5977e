# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - stripe_client.py: Stripe PaymentIntent calls with per-call credentials
# - utils.py: Shared utilities (UUID normalization, timestamps, IDs)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.stripe_client import StripeClient
from lib.utils import make_transaction_id, normalize_uuid, utc_now_iso

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Stripe
    "StripeClient",
    # Utils
    "make_transaction_id",
    "normalize_uuid",
    "utc_now_iso",
]
