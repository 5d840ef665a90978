# =============================================================================
# core/models/review.py - App Metadata and Review Schemas
# =============================================================================
# The common shapes every upstream is normalized into:
# - AppMetadata: store listing data for one app
# - Review: one customer review
#
# Both are immutable and rebuilt on every fetch - nothing is persisted.
# =============================================================================

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


APP_STORE_URL_TEMPLATE = "https://apps.apple.com/app/id{app_id}"


class ReviewSource(str, Enum):
    """Upstream sources a client can talk to."""
    APP_STORE = "app_store"
    ASO_MARKET = "aso_market"


class ReviewStrategy(str, Enum):
    """
    How the App Store client collects reviews.

    - single_sort: one mostRecent feed, first entries mapped directly
    - multi_sort: all four sort orders fetched, deduplicated and merged
    """
    SINGLE_SORT = "single_sort"
    MULTI_SORT = "multi_sort"


class SortOrder(str, Enum):
    """Sort orders supported by the App Store customer-review feed."""
    MOST_RECENT = "mostRecent"
    MOST_HELPFUL = "mostHelpful"
    MOST_FAVORABLE = "mostFavorable"
    MOST_CRITICAL = "mostCritical"


def app_store_url(app_id: str) -> str:
    """Canonical storefront URL for an app."""
    return APP_STORE_URL_TEMPLATE.format(app_id=app_id)


class AppMetadata(BaseModel):
    """
    Store listing data for one app.

    Example:
        {
            "app_id": "284882215",
            "name": "Facebook",
            "rating": 4.5,
            "rating_count": 1200000,
            "reviews_count": 1200000,
            "url": "https://apps.apple.com/app/id284882215",
            "platform": "app_store",
            "last_updated": "2024-01-15T10:30:00+00:00"
        }
    """

    model_config = ConfigDict(frozen=True)

    app_id: str = Field(..., description="App Store identifier")
    name: str = Field(default="Unknown App", description="Display name")
    rating: float = Field(default=0, ge=0, description="Average user rating")
    rating_count: int = Field(default=0, ge=0, description="Number of ratings")
    reviews_count: int = Field(default=0, ge=0, description="Number of reviews")
    url: str = Field(..., description="Canonical storefront URL")
    platform: Literal["app_store"] = Field(default="app_store")

    # Generated at fetch time, never cached
    last_updated: str = Field(..., description="When this metadata was fetched")

    screenshot_urls: list[str] = Field(default_factory=list)
    ipad_screenshot_urls: list[str] = Field(default_factory=list)
    appletv_screenshot_urls: list[str] = Field(default_factory=list)


class Review(BaseModel):
    """
    One customer review.

    The id is synthetic ({source}_{app_id}_{ordinal}); upstreams don't
    provide a usable one.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Synthetic review identifier")
    rating: int = Field(default=0, description="Star rating, 0 when unparseable")
    title: str = Field(default="")
    content: str = Field(default="")
    author: str = Field(default="Anonymous")

    # Upstream string, not validated as a real date
    date: str = Field(..., description="Publication / update timestamp")

    helpful_votes: int = Field(default=0, ge=0)
    app_id: str = Field(..., description="App this review belongs to")
