# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import random
import string
import time
from datetime import datetime, timezone
from uuid import UUID

_BASE36 = string.digits + string.ascii_lowercase


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Example:
        property_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        property_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Time / ID Utilities
# =============================================================================

def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def random_base36(length: int = 9) -> str:
    """Random lowercase base36 string, e.g. for transaction IDs."""
    return "".join(random.choices(_BASE36, k=length))


def make_transaction_id(prefix: str) -> str:
    """
    Build a transaction ID of the form PREFIX-<epoch ms>-<9 base36 chars>.

    Example:
        make_transaction_id("MM")  # "MM-1718000000000-k3j9x0a2b"
    """
    return f"{prefix}-{int(time.time() * 1000)}-{random_base36()}"
