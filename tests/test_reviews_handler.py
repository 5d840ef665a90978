# =============================================================================
# tests/test_reviews_handler.py - Aggregator and Handler Tests
# =============================================================================
# Tests for:
# - ReviewAggregator single-app and batch flows (failure isolation)
# - ReviewsHandler validation, sanitization and error mapping
# - parse_request_body
# =============================================================================

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.exceptions import InternalServerError, UpstreamError, ValidationFailedError
from core.models.requests import MultipleAppsRequest, ReviewsRequest
from core.services.app_store_client import AppStoreClient
from core.services.review_aggregator import ReviewAggregator
from core.services.reviews_handler import ReviewsHandler, parse_request_body
from tests.helpers import run_with_http


def run_handler(stub, method, request, max_reviews=200):
    async def call(http):
        handler = ReviewsHandler(
            ReviewAggregator(AppStoreClient(http, timeout_seconds=5)),
            max_reviews_per_app=max_reviews,
            default_country="us",
        )
        return await getattr(handler, method)(request)

    return run_with_http(stub, call)


# =============================================================================
# Aggregator
# =============================================================================

class TestReviewAggregator:
    """Tests for ReviewAggregator."""

    def test_collect_without_metadata_skips_lookup(self, itunes_stub):
        async def call(http):
            aggregator = ReviewAggregator(AppStoreClient(http, timeout_seconds=5))
            return await aggregator.collect("1", 3, include_metadata=False, country="us")

        result = run_with_http(itunes_stub, call)

        assert result.app_metadata is None
        assert result.total_reviews == 3
        assert itunes_stub.lookup_requests() == []

    def test_collect_metadata_failure_propagates(self, itunes_stub):
        itunes_stub.lookup_status = 500

        async def call(http):
            aggregator = ReviewAggregator(AppStoreClient(http, timeout_seconds=5))
            return await aggregator.collect("1", 3, include_metadata=True, country="us")

        with pytest.raises(UpstreamError):
            run_with_http(itunes_stub, call)

    def test_batch_isolates_failing_app(self, itunes_stub):
        itunes_stub.failing_apps = ("2",)

        async def call(http):
            aggregator = ReviewAggregator(AppStoreClient(http, timeout_seconds=5))
            return await aggregator.collect_many(["1", "2", "3"], 5, include_metadata=False, country="us")

        result = run_with_http(itunes_stub, call)

        assert [app.app_id for app in result.apps] == ["1", "2", "3"]
        assert [app.total_reviews for app in result.apps] == [5, 0, 5]
        assert result.total_apps == 3
        assert result.successful_apps == 2

    def test_batch_metadata_failure_keeps_reviews(self, itunes_stub):
        itunes_stub.lookup_status = 404

        async def call(http):
            aggregator = ReviewAggregator(AppStoreClient(http, timeout_seconds=5))
            return await aggregator.collect_many(["1"], 2, include_metadata=True, country="us")

        result = run_with_http(itunes_stub, call)

        assert result.apps[0].app_metadata is None
        assert result.apps[0].total_reviews == 2
        assert result.successful_apps == 1

    def test_batch_unexpected_error_yields_empty_slot(self):
        source = MagicMock()
        source.fetch_reviews = AsyncMock(side_effect=[RuntimeError("bug"), []])

        aggregator = ReviewAggregator(source)
        result = asyncio.run(aggregator.collect_many(["1", "2"], 5, include_metadata=False, country="us"))

        assert [app.reviews for app in result.apps] == [[], []]
        assert result.successful_apps == 0


# =============================================================================
# Handler - Single App
# =============================================================================

class TestHandleSingle:
    """Tests for ReviewsHandler.handle_single."""

    def test_validation_failure_makes_no_requests(self, itunes_stub):
        with pytest.raises(ValidationFailedError) as exc_info:
            run_handler(itunes_stub, "handle_single", ReviewsRequest(app_id="abc", limit=0))

        error = exc_info.value
        assert error.status_code == 400
        assert error.app_id == "abc"
        assert error.message == (
            "app_id must be a valid numeric string, "
            "limit must be a positive integer between 1 and 200"
        )
        assert itunes_stub.requests == []

    def test_missing_app_id_not_echoed(self, itunes_stub):
        with pytest.raises(ValidationFailedError) as exc_info:
            run_handler(itunes_stub, "handle_single", ReviewsRequest())

        assert exc_info.value.app_id is None

    def test_limit_defaults_to_configured_max(self, itunes_stub):
        result = run_handler(itunes_stub, "handle_single", ReviewsRequest(app_id="1"), max_reviews=4)
        assert result.total_reviews == 4

    def test_limit_clamped_to_configured_max(self, itunes_stub):
        result = run_handler(itunes_stub, "handle_single", ReviewsRequest(app_id="1", limit=100), max_reviews=2)
        assert result.total_reviews == 2

    def test_country_defaults_and_normalizes(self, itunes_stub):
        run_handler(itunes_stub, "handle_single", ReviewsRequest(app_id="1", country="GB"))
        assert all(r.url.path.startswith("/gb/") for r in itunes_stub.feed_requests())

    def test_include_metadata(self, itunes_stub):
        result = run_handler(itunes_stub, "handle_single", ReviewsRequest(app_id="1", include_metadata=True, limit=1))

        assert result.app_metadata.name == "Facebook"
        assert result.total_reviews == 1

    def test_unexpected_error_becomes_internal_error(self):
        aggregator = MagicMock()
        aggregator.collect = AsyncMock(side_effect=KeyError("boom"))
        handler = ReviewsHandler(aggregator, max_reviews_per_app=200, default_country="us")

        with pytest.raises(InternalServerError) as exc_info:
            asyncio.run(handler.handle_single(ReviewsRequest(app_id="1")))

        assert exc_info.value.message == "An unexpected error occurred"
        assert "boom" not in exc_info.value.message


# =============================================================================
# Handler - Multiple Apps
# =============================================================================

class TestHandleMultiple:
    """Tests for ReviewsHandler.handle_multiple."""

    def test_one_invalid_id_rejects_batch(self, itunes_stub):
        request = MultipleAppsRequest(app_ids=["1", "2x"])

        with pytest.raises(ValidationFailedError, match="Invalid app_id: 2x"):
            run_handler(itunes_stub, "handle_multiple", request)

        assert itunes_stub.requests == []

    def test_batch_preserves_order(self, itunes_stub):
        result = run_handler(itunes_stub, "handle_multiple", MultipleAppsRequest(app_ids=["1", "2"], limit=1))

        assert [app.app_id for app in result.apps] == ["1", "2"]
        assert result.successful_apps == 2


# =============================================================================
# Body Parsing
# =============================================================================

class TestParseRequestBody:
    """Tests for parse_request_body."""

    def test_parses_dict(self):
        request = parse_request_body(ReviewsRequest, {"app_id": "1", "include_metadata": True})

        assert request.app_id == "1"
        assert request.include_metadata is True

    def test_include_metadata_defaults_false(self):
        assert parse_request_body(ReviewsRequest, {"app_id": "1"}).include_metadata is False

    def test_null_include_metadata_is_false(self):
        request = parse_request_body(MultipleAppsRequest, {"app_ids": ["1"], "include_metadata": None})
        assert request.include_metadata is False

    def test_non_object_rejected(self):
        with pytest.raises(ValidationFailedError, match="JSON object"):
            parse_request_body(ReviewsRequest, ["1"])

    def test_bad_field_type_rejected(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            parse_request_body(ReviewsRequest, {"app_id": "1", "include_metadata": "maybe"})

        assert "include_metadata" in exc_info.value.message
        assert exc_info.value.app_id == "1"
