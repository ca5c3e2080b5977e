# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the PropertyAfrica API:
# - test_request_validation.py: Pre-handler checks and middleware
# - test_error_handling.py: Error taxonomy, platform translator, handlers
# - test_config.py: Settings and the startup policy
# - test_properties.py / test_payments.py / test_profile.py: Endpoints
# - test_auth.py: Auth callback and token verification
# - test_health.py: Health and liveness checks
#
# Run tests with: pytest
# =============================================================================
