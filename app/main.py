# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the PropertyAfrica API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings, validate_settings
from app.error_handlers import register_exception_handlers
from app.request_validation import RequestValidationMiddleware
from app.routers import health, properties, payments, users
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup validates configuration. Missing settings stop the process in
    development; elsewhere the API starts degraded and says so in the logs
    and the health check.
    """
    logger.info(f"Starting PropertyAfrica API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    app.state.config_valid = validate_settings(settings)
    if not app.state.config_valid:
        logger.warning("Configuration incomplete, running in degraded mode")

    yield

    logger.info("Shutting down PropertyAfrica API")


# Create FastAPI application
app = FastAPI(
    title="PropertyAfrica API",
    description="""
## Property listings, payments and accounts for PropertyAfrica

Data and sign-in are backed by Supabase; card payments by Stripe.

### Errors

Every failure is returned as one JSON envelope:

```json
{"error": "Property not found", "code": "NOT_FOUND", "details": {"property_id": "..."}}
```

The HTTP status always matches the error; `details` is omitted when empty.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Supabase Auth callback and token checks",
        },
        {
            "name": "Properties",
            "description": "Browse and manage property listings",
        },
        {
            "name": "Payments",
            "description": "Stripe card payments and mobile money",
        },
        {
            "name": "Users",
            "description": "The signed-in user's profile",
        },
        {
            "name": "Health",
            "description": "API health and liveness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# Request validation - rejects malformed requests before routing and
# normalizes anything the exception handlers didn't catch
app.add_middleware(RequestValidationMiddleware)

# CORS middleware - added last so it is outermost and answers preflights
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

register_exception_handlers(app)


# =============================================================================
# Routers
# =============================================================================

app.include_router(auth_routes.router, prefix="/api")
app.include_router(health.router, prefix="/api")
app.include_router(properties.router, prefix="/api")
app.include_router(payments.router, prefix="/api")
app.include_router(users.router, prefix="/api")


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "PropertyAfrica API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health-check",
    }
