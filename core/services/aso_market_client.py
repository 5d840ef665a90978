# =============================================================================
# core/services/aso_market_client.py - ASO Market Source Client
# =============================================================================
# Third-party proxy in front of the App Store. One metadata endpoint and
# one reviews endpoint; the proxy already returns a single flat feed, so
# no cross-feed dedup is needed.
# =============================================================================

import logging

import httpx

from app.exceptions import UpstreamError
from core.models.review import AppMetadata, Review
from core.models.upstream import AsoMarketApp, AsoMarketReviewsResponse
from core.services.review_merge import sort_most_recent_first
from core.services.source_client import ReviewSourceClient
from lib.utils import utc_now_iso


DEFAULT_BASE_URL = "https://ios.reviews.aso.market"

REQUEST_HEADERS = {
    "Content-Type": "application/json",
    "User-Agent": "reviews-ratings-api/1.0.0",
}


class AsoMarketClient(ReviewSourceClient):
    """Client for the ASO Market reviews proxy."""

    source_name = "asomarket"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        timeout_seconds: float,
        base_url: str = DEFAULT_BASE_URL,
        logger: logging.Logger | None = None,
    ):
        super().__init__(http_client, timeout_seconds, logger)
        self.base_url = base_url.rstrip("/")

    async def fetch_metadata(self, app_id: str) -> AppMetadata:
        self.logger.info(f"[asomarket] Fetching app metadata: app_id={app_id}")

        try:
            payload = await self._get_json(f"{self.base_url}/api/apps/{app_id}", app_id, headers=REQUEST_HEADERS)
            app: AsoMarketApp = self._decode(AsoMarketApp, payload, app_id, "app response")
        except UpstreamError as e:
            self.logger.error(f"[asomarket] Failed to fetch app metadata: app_id={app_id}: {e.message}")
            raise

        metadata = app.to_metadata(app_id, utc_now_iso())
        self.logger.info(
            f"[asomarket] Fetched app metadata: app_id={app_id} name={metadata.name!r} "
            f"rating={metadata.rating} rating_count={metadata.rating_count}"
        )
        return metadata

    async def fetch_reviews(self, app_id: str, limit: int, country: str) -> list[Review]:
        self.logger.info(f"[asomarket] Fetching reviews: app_id={app_id} limit={limit} country={country}")

        try:
            payload = await self._get_json(
                f"{self.base_url}/api/apps/{app_id}/reviews",
                app_id,
                params={"limit": limit, "country": country},
                headers=REQUEST_HEADERS,
            )
            feed: AsoMarketReviewsResponse = self._decode(AsoMarketReviewsResponse, payload, app_id, "reviews response")
        except UpstreamError as e:
            self.logger.warning(f"[asomarket] Failed to get reviews: app_id={app_id}: {e.message}")
            return []

        fetched_at = utc_now_iso()
        reviews = [
            item.to_review(f"asomarket_{app_id}_{index}", app_id, fetched_at)
            for index, item in enumerate(feed.reviews)
        ]
        # The proxy may ignore the limit parameter
        reviews = sort_most_recent_first(reviews)[:limit]

        self.logger.info(f"[asomarket] Fetched reviews: app_id={app_id} reviews_count={len(reviews)}")
        return reviews
