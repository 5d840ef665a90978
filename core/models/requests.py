# =============================================================================
# core/models/requests.py - Request/Response Schemas
# =============================================================================
# These models define the API contract for review endpoints:
# - ReviewsRequest / MultipleAppsRequest: what callers send
# - ReviewsResponse / MultipleAppsResponse: what callers get back
# - ErrorResponse: the error envelope
# - HealthResponse: the health check body
#
# Request fields are typed loosely. Type problems (a numeric
# app_id, a string limit) are reported by lib.validators as 400 errors
# with readable messages instead of framework 422s.
# =============================================================================

from typing import Any

from pydantic import BaseModel, Field, field_validator

from .review import AppMetadata, Review


def null_as_false(value: Any) -> Any:
    """JSON null for a flag means the flag is off."""
    return False if value is None else value


class ReviewsRequest(BaseModel):
    """
    Reviews for a single app.

    Example:
        {"app_id": "284882215", "limit": 10, "include_metadata": true, "country": "us"}
    """

    app_id: Any = Field(default=None, description="Numeric App Store identifier")
    limit: Any = Field(default=None, description="Maximum reviews to return (1-200)")
    include_metadata: bool = Field(default=False, description="Also fetch app metadata")
    country: Any = Field(default=None, description="Two-letter storefront country")

    @field_validator("include_metadata", mode="before")
    @classmethod
    def null_metadata_flag(cls, value: Any) -> Any:
        return null_as_false(value)


class MultipleAppsRequest(BaseModel):
    """
    Reviews for up to 20 apps in one call.

    Example:
        {"app_ids": ["284882215", "389801252"], "limit": 5}
    """

    app_ids: Any = Field(default=None, description="List of numeric App Store identifiers")
    limit: Any = Field(default=None, description="Maximum reviews per app (1-200)")
    include_metadata: bool = Field(default=False, description="Also fetch app metadata")
    country: Any = Field(default=None, description="Two-letter storefront country")

    @field_validator("include_metadata", mode="before")
    @classmethod
    def null_metadata_flag(cls, value: Any) -> Any:
        return null_as_false(value)


class ReviewsResponse(BaseModel):
    """Reviews (and optionally metadata) for one app."""

    app_id: str
    app_metadata: AppMetadata | None = None
    reviews: list[Review] = Field(default_factory=list)
    total_reviews: int = Field(default=0, ge=0, description="Length of reviews, after the cap")
    generated_at: str


class MultipleAppsResponse(BaseModel):
    """
    Batch result.

    successful_apps counts apps whose review list is non-empty.
    """

    apps: list[ReviewsResponse] = Field(default_factory=list)
    total_apps: int = 0
    successful_apps: int = 0
    generated_at: str


class ErrorResponse(BaseModel):
    """Error envelope returned for every 4xx/5xx."""

    error: str
    message: str | None = None
    app_id: str | None = None
    timestamp: str


class HealthResponse(BaseModel):
    """Basic health check response."""

    status: str
    timestamp: str
    service: str
