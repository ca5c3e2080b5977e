# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App entry point, middleware setup, router mounting
# - config.py: Environment variable loading and settings
# - exceptions.py / platform_errors.py: The error taxonomy
# - error_handlers.py / request_validation.py: Boundary normalization
# - routers/, auth/: API endpoint definitions organized by feature
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================
