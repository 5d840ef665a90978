# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for per-request resources.
# These are injected into route handlers using Depends().
#
# Every request gets its own httpx client, source client, aggregator and
# handler - nothing mutable is shared between requests. All components log
# to children of one "reviews_api" logger.
# =============================================================================

import logging
from collections.abc import AsyncIterator
from typing import Annotated

import httpx
from fastapi import Depends

from app.config import settings
from core.models.review import ReviewSource, ReviewStrategy
from core.services.app_store_client import AppStoreClient
from core.services.aso_market_client import AsoMarketClient
from core.services.review_aggregator import ReviewAggregator
from core.services.reviews_handler import ReviewsHandler
from core.services.source_client import ReviewSourceClient

service_logger = logging.getLogger("reviews_api")


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """
    Yield an httpx client scoped to one request.

    Tests override this dependency to plug in a MockTransport.
    """
    async with httpx.AsyncClient(
        timeout=settings.request_timeout_seconds,
        follow_redirects=True,
    ) as client:
        yield client


HttpClientDep = Annotated[httpx.AsyncClient, Depends(get_http_client)]


def build_source_client(http_client: httpx.AsyncClient) -> ReviewSourceClient:
    """Pick the upstream client configured by REVIEW_SOURCE / REVIEW_STRATEGY."""
    if ReviewSource(settings.REVIEW_SOURCE) == ReviewSource.ASO_MARKET:
        return AsoMarketClient(
            http_client,
            timeout_seconds=settings.request_timeout_seconds,
            base_url=settings.ASO_MARKET_API_URL,
            logger=service_logger.getChild("aso_market"),
        )

    return AppStoreClient(
        http_client,
        timeout_seconds=settings.request_timeout_seconds,
        strategy=ReviewStrategy(settings.REVIEW_STRATEGY),
        logger=service_logger.getChild("app_store"),
    )


def get_reviews_handler(http_client: HttpClientDep) -> ReviewsHandler:
    """Wire source client -> aggregator -> handler for one request."""
    aggregator = ReviewAggregator(
        build_source_client(http_client),
        logger=service_logger.getChild("aggregator"),
    )
    return ReviewsHandler(
        aggregator,
        max_reviews_per_app=settings.MAX_REVIEWS_PER_APP,
        default_country=settings.DEFAULT_COUNTRY,
        logger=service_logger.getChild("handler"),
    )


# Type alias for dependency injection
ReviewsHandlerDep = Annotated[ReviewsHandler, Depends(get_reviews_handler)]
