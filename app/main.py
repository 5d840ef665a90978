# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Reviews & Ratings API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.cors import allow_any_origin, preflight_response
from app.exceptions import (
    ReviewsAPIException,
    reviews_api_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.routers import docs, health, reviews

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


# Create FastAPI application
app = FastAPI(
    title="Reviews & Ratings API",
    description="""
## App Store Reviews & Ratings

Fetches App Store metadata and customer reviews and returns them in one
stable JSON shape.

### How It Works

1. **Validate** - app ids must be numeric strings, limits 1-200
2. **Fetch** - metadata and reviews are fetched concurrently
3. **Merge** - reviews from the four App Store sort orders are deduplicated
   and ordered newest first
4. **Cap** - at most `limit` reviews per app

### Quick Start

```bash
# Reviews for one app
curl "http://localhost:8000/reviews?app_id=284882215&limit=5"

# Reviews for several apps
curl -X POST http://localhost:8000/reviews/multiple \\
  -H "Content-Type: application/json" \\
  -d '{"app_ids": ["284882215", "389801252"], "limit": 5}'
```
""",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {
            "name": "Reviews",
            "description": "App metadata and customer reviews",
        },
        {
            "name": "Health",
            "description": "API health checks",
        },
        {
            "name": "Docs",
            "description": "Static API description",
        },
    ],
)

logger.info(
    f"Starting Reviews API in {settings.ENVIRONMENT} mode "
    f"(source={settings.REVIEW_SOURCE}, strategy={settings.REVIEW_STRATEGY})"
)


# =============================================================================
# Middleware
# =============================================================================

# Answers browser preflights (OPTIONS with Origin + Access-Control-Request-Method)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
    max_age=86400,
)

# Every other response still gets Access-Control-Allow-Origin: *
app.middleware("http")(allow_any_origin)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(ReviewsAPIException)
async def handle_reviews_api_exception(request: Request, exc: ReviewsAPIException):
    """Handle validation, upstream and internal errors raised by the handler."""
    return await reviews_api_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    return await unhandled_exception_handler(request, exc)


# =============================================================================
# Routers
# =============================================================================

# Review endpoints
app.include_router(
    reviews.router,
    tags=["Reviews"]
)

# Health check endpoints
app.include_router(
    health.router,
    tags=["Health"]
)

# Static API description
app.include_router(
    docs.router,
    tags=["Docs"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": settings.SERVICE_NAME,
        "version": API_VERSION,
        "docs": "/docs",
        "swagger": "/swagger",
        "health": "/health",
    }


@app.options("/", include_in_schema=False)
async def root_options():
    return preflight_response("GET, OPTIONS")
