# =============================================================================
# core/models/upstream.py - Upstream Payload Schemas
# =============================================================================
# Explicit decoders for the untrusted JSON each upstream returns:
# - iTunes lookup API      -> ItunesLookupResponse -> AppMetadata
# - iTunes customer RSS    -> RssFeedResponse      -> list[Review]
# - ASO Market proxy       -> AsoMarketApp / AsoMarketReviewsResponse
#
# Missing or badly typed fields inside a review record get explicit
# defaults here. Only a payload whose overall shape is wrong (no feed, no
# entry list, no reviews list) fails pydantic validation, which the source
# clients turn into an UpstreamError.
# =============================================================================

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .review import AppMetadata, Review, app_store_url


_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Any, default: int = 0) -> int:
    """
    Parse the leading integer of an upstream value.

    "5" -> 5, "4.5" -> 4, "abc" -> default, None -> default.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return int(value)
    match = _INT_PREFIX.match(str(value))
    return int(match.group(1)) if match else default


def scalar_text(value: Any) -> str | None:
    """Text of a scalar upstream value. Containers and booleans give None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


class _UpstreamModel(BaseModel):
    """Shared config: ignore unknown fields, accept numbers where strings are expected."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


# =============================================================================
# iTunes Lookup
# =============================================================================

class ItunesApp(_UpstreamModel):
    """One entry of the lookup API's results array."""

    track_name: str | None = Field(default=None, alias="trackName")
    average_user_rating: float | None = Field(default=None, alias="averageUserRating")
    user_rating_count: int | None = Field(default=None, alias="userRatingCount")
    screenshot_urls: list[str] | None = Field(default=None, alias="screenshotUrls")
    ipad_screenshot_urls: list[str] | None = Field(default=None, alias="ipadScreenshotUrls")
    appletv_screenshot_urls: list[str] | None = Field(default=None, alias="appletvScreenshotUrls")

    def to_metadata(self, app_id: str, fetched_at: str) -> AppMetadata:
        # The lookup API doesn't separate ratings from reviews
        rating_count = max(self.user_rating_count or 0, 0)
        return AppMetadata(
            app_id=app_id,
            name=self.track_name or "Unknown App",
            rating=max(self.average_user_rating or 0, 0),
            rating_count=rating_count,
            reviews_count=rating_count,
            url=app_store_url(app_id),
            last_updated=fetched_at,
            screenshot_urls=self.screenshot_urls or [],
            ipad_screenshot_urls=self.ipad_screenshot_urls or [],
            appletv_screenshot_urls=self.appletv_screenshot_urls or [],
        )


class ItunesLookupResponse(_UpstreamModel):
    result_count: int = Field(default=0, alias="resultCount")
    results: list[ItunesApp] = Field(default_factory=list)


# =============================================================================
# iTunes Customer Reviews RSS
# =============================================================================

class RssLabel(_UpstreamModel):
    """Apple wraps every RSS value as {"label": "..."}."""

    label: str | None = None

    @model_validator(mode="before")
    @classmethod
    def unwrap(cls, value: Any) -> Any:
        # Bare scalars sometimes replace the wrapper; anything else is dropped
        if isinstance(value, dict):
            return {"label": scalar_text(value.get("label"))}
        return {"label": scalar_text(value)}


class RssAuthor(_UpstreamModel):
    name: RssLabel = Field(default_factory=RssLabel)

    @model_validator(mode="before")
    @classmethod
    def wrap_bare_name(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return value
        return {"name": value}


class RssEntry(_UpstreamModel):
    """
    One feed entry.

    The first entry of every feed describes the app itself, not a review;
    callers skip it.
    """

    author: RssAuthor = Field(default_factory=RssAuthor)
    updated: RssLabel = Field(default_factory=RssLabel)
    rating: RssLabel = Field(default_factory=RssLabel, alias="im:rating")
    title: RssLabel = Field(default_factory=RssLabel)
    content: RssLabel = Field(default_factory=RssLabel)
    vote_sum: RssLabel = Field(default_factory=RssLabel, alias="im:voteSum")

    def to_review(self, review_id: str, app_id: str, fetched_at: str) -> Review:
        return Review(
            id=review_id,
            rating=parse_int(self.rating.label),
            title=self.title.label or "",
            content=self.content.label or "",
            author=self.author.name.label or "Anonymous",
            date=self.updated.label or fetched_at,
            helpful_votes=max(parse_int(self.vote_sum.label), 0),
            app_id=app_id,
        )


class RssFeed(_UpstreamModel):
    entry: list[RssEntry]

    @field_validator("entry", mode="before")
    @classmethod
    def wrap_single_entry(cls, value: Any) -> Any:
        # Apple sends a bare object instead of a list when there is one entry
        if isinstance(value, dict):
            return [value]
        return value


class RssFeedResponse(_UpstreamModel):
    feed: RssFeed

    def review_entries(self) -> list[RssEntry]:
        """Entries after the leading app-description entry."""
        return self.feed.entry[1:]


# =============================================================================
# ASO Market Proxy
# =============================================================================

class AsoMarketApp(_UpstreamModel):
    name: str | None = None
    rating: float | None = None
    rating_count: int | None = None
    reviews_count: int | None = None
    screenshot_urls: list[str] | None = Field(default=None, alias="screenshotUrls")
    ipad_screenshot_urls: list[str] | None = Field(default=None, alias="ipadScreenshotUrls")

    def to_metadata(self, app_id: str, fetched_at: str) -> AppMetadata:
        return AppMetadata(
            app_id=app_id,
            name=self.name or "Unknown App",
            rating=max(self.rating or 0, 0),
            rating_count=max(self.rating_count or 0, 0),
            reviews_count=max(self.reviews_count or 0, 0),
            url=app_store_url(app_id),
            last_updated=fetched_at,
            screenshot_urls=self.screenshot_urls or [],
            ipad_screenshot_urls=self.ipad_screenshot_urls or [],
        )


class AsoMarketReview(_UpstreamModel):
    """
    One proxy review. Every field is optional and loosely typed so a bad
    value defaults on its own record instead of failing the whole list.
    """

    rating: Any = None
    title: str | None = None
    content: str | None = None
    author: str | None = None
    date: str | None = None
    helpful_votes: Any = None

    @field_validator("title", "content", "author", "date", mode="before")
    @classmethod
    def loose_text(cls, value: Any) -> str | None:
        return scalar_text(value)

    def to_review(self, review_id: str, app_id: str, fetched_at: str) -> Review:
        return Review(
            id=review_id,
            rating=parse_int(self.rating),
            title=self.title or "",
            content=self.content or "",
            author=self.author or "Anonymous",
            date=self.date or fetched_at,
            helpful_votes=max(parse_int(self.helpful_votes), 0),
            app_id=app_id,
        )


class AsoMarketReviewsResponse(_UpstreamModel):
    reviews: list[AsoMarketReview]
