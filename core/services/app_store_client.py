# =============================================================================
# core/services/app_store_client.py - App Store (iTunes) Source Client
# =============================================================================
# Talks to Apple directly:
# - Metadata: iTunes lookup API
# - Reviews:  iTunes customer-review RSS feed (JSON flavour)
#
# Two review strategies, picked by configuration:
# - SINGLE_SORT: one mostRecent feed, first `limit` entries mapped as-is
# - MULTI_SORT:  all four sort orders fetched concurrently, then merged
#                (see review_merge.py) for wider coverage than one feed
# =============================================================================

import asyncio
import logging

import httpx

from app.exceptions import UpstreamError
from core.models.review import AppMetadata, Review, ReviewStrategy, SortOrder
from core.models.upstream import ItunesLookupResponse, RssFeedResponse
from core.services.review_merge import merge_review_feeds, renumber_reviews
from core.services.source_client import ReviewSourceClient
from lib.utils import utc_now_iso


ITUNES_LOOKUP_URL = "https://itunes.apple.com/lookup"
ITUNES_REVIEWS_URL = "https://itunes.apple.com/{country}/rss/customerreviews/id={app_id}/sortBy={sort}/json"

MULTI_SORT_ORDERS = (
    SortOrder.MOST_RECENT,
    SortOrder.MOST_HELPFUL,
    SortOrder.MOST_FAVORABLE,
    SortOrder.MOST_CRITICAL,
)


class AppStoreClient(ReviewSourceClient):
    """
    Client for the public iTunes APIs.

    Example:
        async with httpx.AsyncClient() as http:
            client = AppStoreClient(http, timeout_seconds=10)
            reviews = await client.fetch_reviews("284882215", limit=5, country="us")
    """

    source_name = "appstore"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        timeout_seconds: float,
        strategy: ReviewStrategy = ReviewStrategy.MULTI_SORT,
        logger: logging.Logger | None = None,
    ):
        super().__init__(http_client, timeout_seconds, logger)
        self.strategy = ReviewStrategy(strategy)

    async def fetch_metadata(self, app_id: str) -> AppMetadata:
        """
        Fetch app metadata from the iTunes lookup API.

        Raises:
            UpstreamError: bad status, empty result set, or malformed payload
        """
        self.logger.info(f"[appstore] Fetching app metadata: app_id={app_id}")

        try:
            payload = await self._get_json(ITUNES_LOOKUP_URL, app_id, params={"id": app_id})
            lookup: ItunesLookupResponse = self._decode(ItunesLookupResponse, payload, app_id, "lookup response")

            if not lookup.results:
                raise UpstreamError("App not found in App Store", app_id=app_id, upstream_status=404)

        except UpstreamError as e:
            self.logger.error(f"[appstore] Failed to fetch app metadata: app_id={app_id}: {e.message}")
            raise

        metadata = lookup.results[0].to_metadata(app_id, utc_now_iso())
        self.logger.info(
            f"[appstore] Fetched app metadata: app_id={app_id} name={metadata.name!r} "
            f"rating={metadata.rating} rating_count={metadata.rating_count}"
        )
        return metadata

    async def fetch_reviews(self, app_id: str, limit: int, country: str) -> list[Review]:
        """
        Fetch up to `limit` reviews, newest first.

        Never raises: upstream failures are logged and yield [].
        """
        self.logger.info(
            f"[appstore] Fetching reviews: app_id={app_id} limit={limit} "
            f"country={country} strategy={self.strategy.value}"
        )

        try:
            if self.strategy == ReviewStrategy.MULTI_SORT:
                reviews = await self._fetch_multi_sort(app_id, limit, country)
            else:
                reviews = await self._fetch_single_sort(app_id, limit, country)
        except Exception as e:
            self.logger.warning(f"[appstore] Failed to get reviews: app_id={app_id}: {e}")
            return []

        self.logger.info(f"[appstore] Fetched reviews: app_id={app_id} reviews_count={len(reviews)}")
        return reviews

    # -------------------------------------------------------------------------
    # Strategies
    # -------------------------------------------------------------------------

    async def _fetch_single_sort(self, app_id: str, limit: int, country: str) -> list[Review]:
        feed = await self._fetch_feed(app_id, country, SortOrder.MOST_RECENT)
        fetched_at = utc_now_iso()
        return [
            entry.to_review(f"appstore_{app_id}_{index}", app_id, fetched_at)
            for index, entry in enumerate(feed.review_entries()[:limit])
        ]

    async def _fetch_multi_sort(self, app_id: str, limit: int, country: str) -> list[Review]:
        feeds = await asyncio.gather(
            *(self._fetch_sort_order(app_id, country, sort) for sort in MULTI_SORT_ORDERS)
        )
        merged = merge_review_feeds(feeds, limit)
        return renumber_reviews(merged, f"appstore_{app_id}")

    async def _fetch_sort_order(self, app_id: str, country: str, sort: SortOrder) -> list[Review]:
        """One sort order. Failures are logged and skipped so the other feeds still count."""
        try:
            feed = await self._fetch_feed(app_id, country, sort)
        except UpstreamError as e:
            self.logger.warning(f"[appstore] Skipping {sort.value} feed: app_id={app_id}: {e.message}")
            return []

        fetched_at = utc_now_iso()
        reviews = [
            entry.to_review(f"appstore_{app_id}_{sort.value}_{index}", app_id, fetched_at)
            for index, entry in enumerate(feed.review_entries())
        ]
        self.logger.debug(f"[appstore] {sort.value} feed: app_id={app_id} entries={len(reviews)}")
        return reviews

    async def _fetch_feed(self, app_id: str, country: str, sort: SortOrder) -> RssFeedResponse:
        url = ITUNES_REVIEWS_URL.format(country=country, app_id=app_id, sort=sort.value)
        payload = await self._get_json(url, app_id)
        return self._decode(RssFeedResponse, payload, app_id, "RSS feed")
