# =============================================================================
# core/services/reviews_handler.py - Reviews Request Handling
# =============================================================================
# Request lifecycle, shared by GET and POST routes:
#
#   parsed request -> validate -> sanitize -> aggregate -> response
#
# Terminal states:
# - Success: ReviewsResponse / MultipleAppsResponse
# - ValidationFailure: ValidationFailedError (400), raised before any
#   network call
# - UpstreamFailure: UpstreamError (502) for single-app metadata failures,
#   InternalServerError (500) for anything unexpected
# =============================================================================

import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from app.exceptions import InternalServerError, ReviewsAPIException, ValidationFailedError
from core.models.requests import (
    MultipleAppsRequest,
    MultipleAppsResponse,
    ReviewsRequest,
    ReviewsResponse,
)
from core.services.review_aggregator import ReviewAggregator
from lib.validators import (
    sanitize_app_id,
    sanitize_country,
    sanitize_limit,
    validate_multiple_apps_request,
    validate_reviews_request,
)


def parse_request_body(model: type[BaseModel], body: Any) -> Any:
    """
    Build a request model from a decoded JSON body.

    Routes declare the body as a JSON object, so FastAPI rejects other
    shapes first; the object check guards direct callers.

    Raises:
        ValidationFailedError: body isn't an object or a field can't be coerced
    """
    if not isinstance(body, dict):
        raise ValidationFailedError(["request body must be a JSON object"])

    try:
        return model.model_validate(body)
    except ValidationError as e:
        errors = [f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()]
        app_id = body.get("app_id")
        raise ValidationFailedError(errors, app_id=app_id if isinstance(app_id, str) else None) from e


class ReviewsHandler:
    """
    Validates, sanitizes and dispatches review requests.

    Holds no per-request state; one instance is built per request by
    the FastAPI dependency.
    """

    def __init__(
        self,
        aggregator: ReviewAggregator,
        max_reviews_per_app: int,
        default_country: str,
        logger: logging.Logger | None = None,
    ):
        self.aggregator = aggregator
        self.max_reviews_per_app = max_reviews_per_app
        self.default_country = default_country
        self.logger = logger or logging.getLogger(__name__)

    def _resolve_limit(self, limit: Any) -> int:
        # Omitted -> configured default, which is also the ceiling
        if limit is None:
            return self.max_reviews_per_app
        return sanitize_limit(limit, self.max_reviews_per_app)

    # -------------------------------------------------------------------------
    # Single App
    # -------------------------------------------------------------------------

    async def handle_single(self, request: ReviewsRequest) -> ReviewsResponse:
        """
        Reviews for one app.

        Raises:
            ValidationFailedError: invalid input (nothing is fetched)
            UpstreamError: metadata requested but unavailable
            InternalServerError: unexpected failure (logged with stack)
        """
        errors = validate_reviews_request(request.model_dump())
        if errors:
            echoed = None if request.app_id in (None, "") else str(request.app_id)
            self.logger.info(f"Rejected reviews request: app_id={echoed} errors={errors}")
            raise ValidationFailedError(errors, app_id=echoed)

        app_id = sanitize_app_id(request.app_id)
        limit = self._resolve_limit(request.limit)
        country = sanitize_country(request.country, self.default_country)

        self.logger.info(
            f"Processing single app reviews request: app_id={app_id} limit={limit} "
            f"include_metadata={request.include_metadata} country={country}"
        )

        try:
            response = await self.aggregator.collect(app_id, limit, request.include_metadata, country)
        except ReviewsAPIException:
            raise
        except Exception as e:
            self.logger.exception(f"Failed to process single app reviews request: app_id={app_id}")
            raise InternalServerError(app_id=app_id) from e

        self.logger.info(f"Processed single app reviews request: app_id={app_id} reviews_count={response.total_reviews}")
        return response

    # -------------------------------------------------------------------------
    # Multiple Apps
    # -------------------------------------------------------------------------

    async def handle_multiple(self, request: MultipleAppsRequest) -> MultipleAppsResponse:
        """
        Reviews for a batch of apps.

        Validation is all-or-nothing: one invalid identifier rejects the
        whole batch. After validation, failures are isolated per app.

        Raises:
            ValidationFailedError: invalid input (nothing is fetched)
            InternalServerError: unexpected failure (logged with stack)
        """
        errors = validate_multiple_apps_request(request.model_dump())
        if errors:
            self.logger.info(f"Rejected multiple apps request: errors={errors}")
            raise ValidationFailedError(errors)

        app_ids = [sanitize_app_id(app_id) for app_id in request.app_ids]
        limit = self._resolve_limit(request.limit)
        country = sanitize_country(request.country, self.default_country)

        self.logger.info(
            f"Processing multiple apps request: apps={len(app_ids)} limit={limit} "
            f"include_metadata={request.include_metadata} country={country}"
        )

        try:
            response = await self.aggregator.collect_many(app_ids, limit, request.include_metadata, country)
        except ReviewsAPIException:
            raise
        except Exception as e:
            self.logger.exception(f"Failed to process multiple apps request: app_ids={app_ids}")
            raise InternalServerError() from e

        self.logger.info(
            f"Processed multiple apps request: total_apps={response.total_apps} "
            f"successful_apps={response.successful_apps}"
        )
        return response
