"""
FastAPI Main Application
========================

Main FastAPI application instance with middleware, routes, and lifespan management.
"""

import logging
from contextlib import asynccontextmanager
from typing import Dict, Any

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

from api.middleware.error_handler import error_handler_middleware, validation_exception_handler
from api.middleware.rate_limiter import setup_rate_limiting
from api.routes import health, users
from api.services.account_repository import MongoAccountRepository, create_client
from config import get_settings


logger = logging.getLogger(__name__)

# Global application state - stores the database client and other singletons
app_state: Dict[str, Any] = {}


def setup_logging(level: str, fmt: str) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(level=level.upper(), format=fmt)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan event handler for startup and shutdown.

    Startup:
    - Configures logging
    - Creates the MongoDB client and ensures the unique email index
    - Stores references in app_state for dependency injection

    Shutdown:
    - Closes the MongoDB client and clears state
    """
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    logger.info("Starting Account Service API...")
    client = create_client(settings)
    app_state["mongo_client"] = client
    app_state["settings"] = settings

    try:
        repository = MongoAccountRepository.from_client(client, settings)
        await repository.ensure_indexes()
        logger.info(f"Connected to MongoDB database '{settings.mongodb_database}'")
    except PyMongoError as e:
        # Keep serving; readiness probe reports the outage
        logger.error(f"Could not prepare MongoDB indexes: {e}")

    yield  # Application runs here

    logger.info("Shutting down Account Service API...")
    client.close()
    app_state.clear()


# Create FastAPI application
app = FastAPI(
    title=get_settings().api_title,
    description="""
    User registration, login and profile retrieval.

    ## Authentication
    `POST /api/users/register` and `POST /api/users/login` return a token.
    Send it as `Authorization: Bearer <token>` (or `x-auth-token`)
    to `GET /api/users/`.
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)


# =============================================================================
# Middleware Setup (order matters - last added = outermost)
# =============================================================================

settings = get_settings()

# Global error handling middleware, wrapped by CORS so error bodies carry CORS headers
app.middleware("http")(error_handler_middleware)

# CORS middleware - allow cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Validation errors -> 400 {"errors": [...]}
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Rate limiting setup
setup_rate_limiting(app)


# =============================================================================
# Router Registration
# =============================================================================

# Health check endpoints (no auth required)
app.include_router(
    health.router,
    prefix="/api",
    tags=["health"]
)

# User endpoints
app.include_router(
    users.router,
    prefix="/api/users",
    tags=["users"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["root"])
async def root():
    """Root endpoint - API information and links."""
    return {
        "message": settings.api_title,
        "version": "1.0.0",
        "docs": "/api/docs",
        "users": "/api/users",
        "health": "/api/health/live"
    }
