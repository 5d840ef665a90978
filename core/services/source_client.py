# =============================================================================
# core/services/source_client.py - Upstream Source Client Contract
# =============================================================================
# Every upstream (App Store direct, ASO Market proxy) implements the same
# three operations:
#
#   fetch_metadata(app_id)                -> AppMetadata   (raises UpstreamError)
#   fetch_reviews(app_id, limit, country) -> list[Review]  (never raises)
#   fetch_both(app_id, limit, country)    -> (metadata, reviews)
#
# Subclasses implement the first two; fetch_both runs them concurrently.
# No retries anywhere - a failed call is final.
# =============================================================================

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from app.exceptions import UpstreamError
from core.models.review import AppMetadata, Review


class ReviewSourceClient(ABC):
    """
    Base class for upstream clients.

    Holds the shared httpx client, the per-call timeout and the logger
    every subclass writes to.
    """

    #: Short name used in synthetic review ids and log lines
    source_name: str = "source"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        timeout_seconds: float,
        logger: logging.Logger | None = None,
    ):
        self.http_client = http_client
        self.timeout_seconds = timeout_seconds
        self.logger = logger or logging.getLogger(type(self).__module__)

    # -------------------------------------------------------------------------
    # Contract
    # -------------------------------------------------------------------------

    @abstractmethod
    async def fetch_metadata(self, app_id: str) -> AppMetadata:
        """Fetch store metadata. Raises UpstreamError on any failure."""

    @abstractmethod
    async def fetch_reviews(self, app_id: str, limit: int, country: str) -> list[Review]:
        """Fetch up to `limit` reviews, newest first. Returns [] on any failure."""

    async def fetch_both(
        self,
        app_id: str,
        limit: int,
        country: str,
    ) -> tuple[AppMetadata, list[Review]]:
        """
        Fetch metadata and reviews concurrently.

        A metadata failure fails the call. A review failure still yields
        an empty list, since fetch_reviews never raises.
        """
        self.logger.info(f"[{self.source_name}] Fetching app with reviews: app_id={app_id} limit={limit} country={country}")

        try:
            metadata, reviews = await asyncio.gather(
                self.fetch_metadata(app_id),
                self.fetch_reviews(app_id, limit, country),
            )
        except UpstreamError as e:
            self.logger.error(f"[{self.source_name}] Failed to get app with reviews: app_id={app_id}: {e.message}")
            raise UpstreamError(
                f"Failed to get app with reviews: {e.message}",
                app_id=app_id,
                upstream_status=e.upstream_status,
            ) from e

        self.logger.info(f"[{self.source_name}] Fetched app with reviews: app_id={app_id} reviews_count={len(reviews)}")
        return metadata, reviews

    # -------------------------------------------------------------------------
    # HTTP helpers
    # -------------------------------------------------------------------------

    async def _get_json(
        self,
        url: str,
        app_id: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        GET a JSON document with the configured timeout.

        Raises:
            UpstreamError: transport error, timeout, non-2xx status or
                a body that isn't JSON
        """
        try:
            response = await self.http_client.get(
                url,
                params=params,
                headers=headers,
                timeout=self.timeout_seconds,
            )
        except httpx.TimeoutException as e:
            raise UpstreamError(f"Request to {self.source_name} timed out", app_id=app_id) from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Request to {self.source_name} failed: {e}", app_id=app_id) from e

        if not response.is_success:
            raise UpstreamError(
                f"{self.source_name} returned {response.status_code}: {response.reason_phrase}",
                app_id=app_id,
                upstream_status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"{self.source_name} returned invalid JSON", app_id=app_id) from e

    @staticmethod
    def _decode(model: type[BaseModel], payload: Any, app_id: str, what: str) -> Any:
        """Validate an upstream payload, turning schema errors into UpstreamError."""
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise UpstreamError(f"Malformed {what}: {e.error_count()} validation error(s)", app_id=app_id) from e
