# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - review.py: AppMetadata and Review (the normalized domain shapes)
# - requests.py: API request/response and error envelope schemas
# - upstream.py: decoders for raw iTunes / ASO Market payloads
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Domain Models - normalized app metadata and reviews
# -----------------------------------------------------------------------------
from .review import (
    AppMetadata,
    Review,
    ReviewSource,
    ReviewStrategy,
    SortOrder,
    app_store_url,
)

# -----------------------------------------------------------------------------
# API Models - request and response bodies
# -----------------------------------------------------------------------------
from .requests import (
    ErrorResponse,
    HealthResponse,
    MultipleAppsRequest,
    MultipleAppsResponse,
    ReviewsRequest,
    ReviewsResponse,
)

# -----------------------------------------------------------------------------
# Upstream Models - raw payload decoders
# -----------------------------------------------------------------------------
from .upstream import (
    AsoMarketApp,
    AsoMarketReviewsResponse,
    ItunesLookupResponse,
    RssFeedResponse,
)

__all__ = [
    # Domain
    "AppMetadata",
    "Review",
    "ReviewSource",
    "ReviewStrategy",
    "SortOrder",
    "app_store_url",
    # API
    "ErrorResponse",
    "HealthResponse",
    "MultipleAppsRequest",
    "MultipleAppsResponse",
    "ReviewsRequest",
    "ReviewsResponse",
    # Upstream
    "AsoMarketApp",
    "AsoMarketReviewsResponse",
    "ItunesLookupResponse",
    "RssFeedResponse",
]
