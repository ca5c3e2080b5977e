# =============================================================================
# tests/test_auth.py - Auth Callback and Token Tests
# =============================================================================

from unittest.mock import patch

import httpx
import pytest

from app.auth.routes import safe_next_path
from app.config import Settings
from app.exceptions import AuthenticationError
from core.services.auth_service import AuthService, SessionTokens
from tests.conftest import TEST_USER_ID, make_query, make_token


@pytest.fixture
def mock_auth_service():
    with patch("app.auth.routes.AuthService") as mock:
        mock.exchange_code.return_value = SessionTokens(
            access_token="access-abc",
            refresh_token="refresh-xyz",
            expires_in=3600,
        )
        yield mock


def set_cookies(response) -> str:
    return "; ".join(response.headers.get_list("set-cookie"))


# =============================================================================
# Redirect target
# =============================================================================

class TestSafeNextPath:

    @pytest.mark.parametrize("value, expected", [
        (None, "/"),
        ("", "/"),
        ("/dashboard", "/dashboard"),
        ("/properties?city=Lagos", "/properties?city=Lagos"),
        ("//evil.example.com", "/"),
        ("https://evil.example.com", "/"),
        ("/\\evil.example.com", "/"),
        ("dashboard", "/"),
    ])
    def test_only_relative_paths(self, value, expected):
        assert safe_next_path(value) == expected


# =============================================================================
# GET /api/auth/callback
# =============================================================================

class TestAuthCallback:

    def test_missing_code(self, client, mock_auth_service):
        response = client.get("/api/auth/callback")

        assert response.status_code == 401
        assert response.json() == {"error": "No authorization code provided", "code": "UNAUTHORIZED"}
        mock_auth_service.exchange_code.assert_not_called()

    def test_success_redirects_with_cookies(self, client, mock_auth_service):
        response = client.get(
            "/api/auth/callback",
            params={"code": "auth-code-1", "next": "/dashboard"},
            follow_redirects=False,
        )

        assert response.status_code == 307
        assert response.headers["location"] == "http://testserver/dashboard"
        cookies = set_cookies(response)
        assert "sb-access-token=access-abc" in cookies
        assert "sb-refresh-token=refresh-xyz" in cookies
        assert "HttpOnly" in cookies
        mock_auth_service.exchange_code.assert_called_once_with("auth-code-1", None)

    def test_default_next_is_root(self, client, mock_auth_service):
        response = client.get("/api/auth/callback", params={"code": "c"}, follow_redirects=False)

        assert response.headers["location"] == "http://testserver/"

    def test_open_redirect_blocked(self, client, mock_auth_service):
        response = client.get(
            "/api/auth/callback",
            params={"code": "c", "next": "//evil.example.com/phish"},
            follow_redirects=False,
        )

        assert response.headers["location"] == "http://testserver/"

    def test_code_verifier_cookie_forwarded(self, client, mock_auth_service):
        client.cookies.set("sb-code-verifier", "verifier-123")
        try:
            response = client.get("/api/auth/callback", params={"code": "c"}, follow_redirects=False)
        finally:
            client.cookies.clear()

        assert response.status_code == 307
        mock_auth_service.exchange_code.assert_called_once_with("c", "verifier-123")

    def test_rejected_code_goes_to_error_page(self, client, mock_auth_service):
        mock_auth_service.exchange_code.side_effect = AuthenticationError("Code exchange returned no session")

        response = client.get("/api/auth/callback", params={"code": "stale"}, follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "http://testserver/auth-error"
        assert "sb-access-token" not in set_cookies(response)

    def test_provider_outage_is_platform_error(self, client, mock_auth_service):
        mock_auth_service.exchange_code.side_effect = httpx.ConnectError("auth host unreachable")

        response = client.get("/api/auth/callback", params={"code": "c"}, follow_redirects=False)

        assert response.status_code == 502
        assert response.json()["code"] == "EDGE_NETWORK_ERROR"


class TestAuthService:

    def test_exchange_passes_verifier(self):
        with patch("core.services.auth_service.SupabaseClient") as mock_supabase:
            auth_client = mock_supabase.create_auth_client.return_value
            auth_client.auth.exchange_code_for_session.return_value.session.access_token = "a"
            auth_client.auth.exchange_code_for_session.return_value.session.refresh_token = "r"
            auth_client.auth.exchange_code_for_session.return_value.session.expires_in = 60

            tokens = AuthService.exchange_code("code-1", "verifier-1")

        auth_client.auth.exchange_code_for_session.assert_called_once_with(
            {"auth_code": "code-1", "code_verifier": "verifier-1"}
        )
        assert tokens == SessionTokens(access_token="a", refresh_token="r", expires_in=60)
        mock_supabase.get_client.assert_not_called()

    def test_no_session_raises(self):
        with patch("core.services.auth_service.SupabaseClient") as mock_supabase:
            auth_client = mock_supabase.create_auth_client.return_value
            auth_client.auth.exchange_code_for_session.return_value.session = None

            with pytest.raises(AuthenticationError):
                AuthService.exchange_code("code-1")


# =============================================================================
# Token checks
# =============================================================================

class TestTokenEndpoints:

    def test_verify_valid_token(self, client):
        response = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {make_token()}"})

        assert response.status_code == 200
        assert response.json() == {
            "valid": True,
            "user_id": str(TEST_USER_ID),
            "email": "agent@example.com",
        }

    def test_me(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {make_token()}"})

        assert response.status_code == 200
        assert response.json()["id"] == str(TEST_USER_ID)

    def test_missing_token(self, client):
        response = client.get("/api/auth/verify")

        assert response.status_code == 401
        assert response.json() == {"error": "Authentication required", "code": "UNAUTHORIZED"}

    def test_expired_token(self, client):
        token = make_token(expires_in=-60)

        response = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error"] == "Token has expired"

    def test_garbage_token(self, client):
        response = client.get("/api/auth/verify", headers={"Authorization": "Bearer not.a.jwt"})

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token"

    def test_token_without_uuid_subject(self, client):
        response = client.get(
            "/api/auth/verify",
            headers={"Authorization": f"Bearer {make_token(sub='service-account')}"},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token: malformed user ID"

    def test_protected_route_with_real_token(self, client):
        with patch("core.services.profile_service.SupabaseClient") as mock_supabase:
            mock_supabase.fetch_profile.return_value = {"id": str(TEST_USER_ID)}
            mock_supabase.get_client.return_value = make_query()

            response = client.get("/api/user/profile", headers={"Authorization": f"Bearer {make_token()}"})

        assert response.status_code == 200
        mock_supabase.fetch_profile.assert_called_once_with(TEST_USER_ID)

    def test_token_signed_with_wrong_secret(self, client):
        token = make_token(key="some-other-secret")

        response = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401


class TestMissingJWTSecret:
    """Without a configured secret no HS256 token is accepted."""

    @pytest.fixture
    def no_jwt_secret(self):
        config = Settings(_env_file=None, SUPABASE_JWT_SECRET=None)
        with patch("app.auth.dependencies.get_settings", return_value=config):
            yield config

    def test_empty_key_token_rejected(self, client, no_jwt_secret):
        token = make_token(sub="44444444-4444-4444-8444-444444444444", key="")

        response = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token"
        assert response.json()["code"] == "UNAUTHORIZED"

    def test_empty_key_token_cannot_delete_profile(self, client, no_jwt_secret):
        token = make_token(key="")

        with patch("core.services.profile_service.SupabaseClient") as mock_supabase:
            response = client.delete("/api/user/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        mock_supabase.get_client.assert_not_called()

    def test_unparseable_token_rejected(self, client, no_jwt_secret):
        response = client.get("/api/auth/verify", headers={"Authorization": "Bearer not.a.jwt"})

        assert response.status_code == 401
