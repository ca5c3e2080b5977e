# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides a TestClient, an authenticated client and a fluent mock for
#   the Supabase query builder
# =============================================================================

import os
import time
from unittest.mock import MagicMock
from uuid import UUID

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_123")
os.environ.setdefault("STRIPE_PUBLISHABLE_KEY", "pk_test_123")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.auth import AuthUser, get_current_user
from app.main import app


TEST_USER_ID = UUID("11111111-1111-4111-8111-111111111111")
OTHER_USER_ID = UUID("22222222-2222-4222-8222-222222222222")
PROPERTY_ID = "33333333-3333-4333-8333-333333333333"

# Methods on the Supabase query builder that return the builder itself
QUERY_BUILDER_METHODS = (
    "table", "select", "insert", "update", "delete",
    "eq", "is_", "ilike", "gte", "lte", "range", "order", "limit", "single",
)


def make_query(data=None, count=None):
    """
    Mock Supabase client whose builder methods chain back to itself.

    execute() returns a response with the given data and count. Set
    execute.side_effect for calls that need different responses.
    """
    query = MagicMock()
    for name in QUERY_BUILDER_METHODS:
        getattr(query, name).return_value = query
    query.not_ = query
    query.execute.return_value = MagicMock(data=data, count=count)
    return query


def make_token(sub: str = str(TEST_USER_ID), expires_in: int = 3600, key: str | None = None, **claims) -> str:
    """Sign an HS256 access token the way Supabase Auth does."""
    if key is None:
        key = os.environ["SUPABASE_JWT_SECRET"]
    payload = {
        "sub": sub,
        "aud": "authenticated",
        "role": "authenticated",
        "email": "agent@example.com",
        "exp": int(time.time()) + expires_in,
        **claims,
    }
    return jwt.encode(payload, key, algorithm="HS256")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def client():
    """TestClient with the app lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_user():
    return AuthUser(id=TEST_USER_ID, email="agent@example.com", role="authenticated")


@pytest.fixture
def authed_client(client, auth_user):
    """TestClient whose requests are authenticated as auth_user."""
    app.dependency_overrides[get_current_user] = lambda: auth_user
    yield client
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def sample_property():
    return {
        "id": PROPERTY_ID,
        "title": "Three bedroom apartment in Kilimani",
        "price": 85000,
        "currency": "KES",
        "type": "apartment",
        "status": "available",
        "location": {"city": "Nairobi", "country": "Kenya"},
        "agentId": str(TEST_USER_ID),
        "createdAt": "2024-01-15T10:00:00+00:00",
        "updatedAt": "2024-01-15T10:00:00+00:00",
        "isVerified": False,
        "viewcount": 42,
    }


@pytest.fixture
def sample_profile():
    return {
        "id": str(TEST_USER_ID),
        "full_name": "Amina Odhiambo",
        "phone": "+254700000000",
        "role": "agent",
        "is_verified": True,
        "password_hash": "$2b$12$not-for-clients",
    }
