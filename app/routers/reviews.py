# =============================================================================
# app/routers/reviews.py - Review Endpoints
# =============================================================================
# - GET  /reviews            single app, query string parameters
# - POST /reviews            single app, JSON body
# - POST /reviews/multiple   batch of up to 20 apps
#
# Routes only parse the request; validation, fetching and error mapping
# live in core.services.reviews_handler.
# =============================================================================

import re
from typing import Annotated, Any

from fastapi import APIRouter, Body, Query

from app.cors import preflight_response
from app.dependencies import ReviewsHandlerDep
from core.models.requests import (
    ErrorResponse,
    MultipleAppsRequest,
    MultipleAppsResponse,
    ReviewsRequest,
    ReviewsResponse,
)
from core.services.reviews_handler import parse_request_body

router = APIRouter()

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Validation error"},
    500: {"model": ErrorResponse, "description": "Unexpected error"},
}

SINGLE_APP_ERROR_RESPONSES = {
    **ERROR_RESPONSES,
    502: {"model": ErrorResponse, "description": "App metadata could not be fetched"},
}


def parse_limit_param(value: str | None) -> Any:
    """
    Read the limit query parameter like an integer prefix.

    "10" -> 10, "5.7" -> 5. Values without a leading integer are passed
    through unchanged so validation rejects them.
    """
    if value is None or value == "":
        return None
    match = _INT_PREFIX.match(value)
    return int(match.group(1)) if match else value


# =============================================================================
# Endpoints
# =============================================================================

@router.get(
    "/reviews",
    response_model=ReviewsResponse,
    response_model_exclude_none=True,
    responses=SINGLE_APP_ERROR_RESPONSES,
)
async def get_reviews(
    handler: ReviewsHandlerDep,
    app_id: Annotated[str | None, Query(description="Numeric App Store identifier")] = None,
    limit: Annotated[str | None, Query(description="Maximum reviews to return (1-200)")] = None,
    include_metadata: Annotated[str | None, Query(description="Set to 'false' to skip metadata")] = None,
    country: Annotated[str | None, Query(description="Two-letter storefront country")] = None,
):
    """
    Get reviews for one app.

    Metadata is included unless include_metadata=false.
    """
    request = ReviewsRequest(
        app_id=app_id,
        limit=parse_limit_param(limit),
        include_metadata=include_metadata != "false",
        country=country,
    )
    return await handler.handle_single(request)


@router.post(
    "/reviews",
    response_model=ReviewsResponse,
    response_model_exclude_none=True,
    responses=SINGLE_APP_ERROR_RESPONSES,
)
async def post_reviews(
    handler: ReviewsHandlerDep,
    body: Annotated[dict[str, Any], Body(
        examples=[{"app_id": "284882215", "limit": 10, "include_metadata": True, "country": "us"}],
    )],
):
    """
    Get reviews for one app (JSON body).

    Metadata is only included when include_metadata is true.
    """
    request = parse_request_body(ReviewsRequest, body)
    return await handler.handle_single(request)


@router.post(
    "/reviews/multiple",
    response_model=MultipleAppsResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def post_multiple_reviews(
    handler: ReviewsHandlerDep,
    body: Annotated[dict[str, Any], Body(
        examples=[{"app_ids": ["284882215", "389801252"], "limit": 5, "include_metadata": False}],
    )],
):
    """
    Get reviews for up to 20 apps.

    One invalid app_id rejects the whole request. After validation each
    app is fetched independently: an app whose upstream fails comes back
    with no reviews and no metadata instead of failing the batch.
    """
    request = parse_request_body(MultipleAppsRequest, body)
    return await handler.handle_multiple(request)


# =============================================================================
# Preflight
# =============================================================================

@router.options("/reviews", include_in_schema=False)
async def reviews_options():
    return preflight_response("GET, POST, OPTIONS")


@router.options("/reviews/multiple", include_in_schema=False)
async def multiple_reviews_options():
    return preflight_response("POST, OPTIONS")
