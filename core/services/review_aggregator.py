# =============================================================================
# core/services/review_aggregator.py - Single-App and Batch Aggregation
# =============================================================================
# Orchestrates source client calls and shapes the results:
# - collect(): one app; a metadata failure propagates as UpstreamError
# - collect_many(): many apps concurrently; every app is isolated, so one
#   failing app yields an empty slot instead of failing the batch
#
# Inputs are expected to be validated and sanitized already.
# =============================================================================

import asyncio
import logging

from app.exceptions import UpstreamError
from core.models.requests import MultipleAppsResponse, ReviewsResponse
from core.models.review import AppMetadata
from core.services.source_client import ReviewSourceClient
from lib.utils import utc_now_iso


class ReviewAggregator:
    """
    Collects reviews (and optionally metadata) for one or many apps.

    Example:
        aggregator = ReviewAggregator(AppStoreClient(http, timeout_seconds=10))
        result = await aggregator.collect("284882215", limit=5, include_metadata=True, country="us")
    """

    def __init__(
        self,
        source: ReviewSourceClient,
        logger: logging.Logger | None = None,
    ):
        self.source = source
        self.logger = logger or logging.getLogger(__name__)

    async def collect(
        self,
        app_id: str,
        limit: int,
        include_metadata: bool,
        country: str,
    ) -> ReviewsResponse:
        """
        Reviews for one app.

        Raises:
            UpstreamError: if include_metadata is set and metadata can't be fetched
        """
        metadata: AppMetadata | None = None

        if include_metadata:
            metadata, reviews = await self.source.fetch_both(app_id, limit, country)
        else:
            reviews = await self.source.fetch_reviews(app_id, limit, country)

        return ReviewsResponse(
            app_id=app_id,
            app_metadata=metadata,
            reviews=reviews,
            total_reviews=len(reviews),
            generated_at=utc_now_iso(),
        )

    async def collect_many(
        self,
        app_ids: list[str],
        limit: int,
        include_metadata: bool,
        country: str,
    ) -> MultipleAppsResponse:
        """
        Reviews for several apps, fetched concurrently.

        Results keep the order of app_ids. successful_apps counts apps
        with at least one review.
        """
        apps = await asyncio.gather(
            *(self._collect_isolated(app_id, limit, include_metadata, country) for app_id in app_ids)
        )

        return MultipleAppsResponse(
            apps=list(apps),
            total_apps=len(apps),
            successful_apps=sum(1 for app in apps if app.reviews),
            generated_at=utc_now_iso(),
        )

    async def _collect_isolated(
        self,
        app_id: str,
        limit: int,
        include_metadata: bool,
        country: str,
    ) -> ReviewsResponse:
        """
        One batch slot. Never raises.

        Metadata and reviews are fetched independently here: a metadata
        failure only drops app_metadata from the slot.
        """
        try:
            if include_metadata:
                metadata, reviews = await asyncio.gather(
                    self._metadata_or_none(app_id),
                    self.source.fetch_reviews(app_id, limit, country),
                )
            else:
                metadata = None
                reviews = await self.source.fetch_reviews(app_id, limit, country)
        except Exception:
            self.logger.exception(f"Unexpected failure collecting app_id={app_id}, returning empty slot")
            metadata, reviews = None, []

        return ReviewsResponse(
            app_id=app_id,
            app_metadata=metadata,
            reviews=reviews,
            total_reviews=len(reviews),
            generated_at=utc_now_iso(),
        )

    async def _metadata_or_none(self, app_id: str) -> AppMetadata | None:
        try:
            return await self.source.fetch_metadata(app_id)
        except UpstreamError as e:
            self.logger.warning(f"Metadata unavailable for app_id={app_id}, continuing without it: {e.message}")
            return None
