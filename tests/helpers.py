# =============================================================================
# tests/helpers.py - Upstream Payload Builders and Stubs
# =============================================================================
# Builders for iTunes / ASO Market payloads and an httpx MockTransport
# handler that routes requests the way Apple's endpoints would.
# =============================================================================

import asyncio
import re
from collections.abc import Awaitable, Callable
from typing import Any

import httpx


# The first entry of every real feed describes the app, not a review
APP_ENTRY = {
    "im:name": {"label": "Facebook"},
    "title": {"label": "Facebook - Meta Platforms, Inc."},
    "id": {"label": "https://apps.apple.com/us/app/facebook/id284882215"},
    "im:artist": {"label": "Meta Platforms, Inc."},
}

_RSS_APP_ID = re.compile(r"/id=(\d+)/")
_RSS_SORT = re.compile(r"/sortBy=(\w+)/")


def rss_entry(
    content: str,
    author: str = "reviewer",
    updated: str = "2024-01-15T10:00:00-07:00",
    rating: str = "5",
    title: str = "Title",
    votes: str = "0",
) -> dict:
    """One review entry in Apple's {"label": ...} format."""
    return {
        "author": {"name": {"label": author}, "uri": {"label": "https://itunes.apple.com/us/reviews/id1"}},
        "updated": {"label": updated},
        "im:rating": {"label": rating},
        "im:version": {"label": "450.0"},
        "id": {"label": "10000000000"},
        "title": {"label": title},
        "content": {"label": content, "attributes": {"type": "text"}},
        "im:voteSum": {"label": votes},
        "im:voteCount": {"label": votes},
    }


def rss_feed(*entries: dict) -> dict:
    """A feed payload: app entry first, then the given review entries."""
    return {"feed": {"author": {"name": {"label": "iTunes Store"}}, "entry": [APP_ENTRY, *entries]}}


def lookup_payload(**overrides: Any) -> dict:
    """An iTunes lookup response with one result."""
    result = {
        "trackName": "Facebook",
        "averageUserRating": 4.5,
        "userRatingCount": 1200,
        "screenshotUrls": ["https://example.com/phone.png"],
        "ipadScreenshotUrls": ["https://example.com/ipad.png"],
        "appletvScreenshotUrls": [],
    }
    result.update(overrides)
    return {"resultCount": 1, "results": [result]}


class ItunesStub:
    """
    MockTransport handler imitating the iTunes lookup and RSS endpoints.

    Args:
        default_feed: Feed served for every sort order not in `feeds`
        feeds: Per-sort-order feeds, keyed by "mostRecent", "mostHelpful", ...
        lookup: Lookup payload (defaults to lookup_payload())
        lookup_status: Status code for lookup requests
        failing_sorts: Sort orders answered with 500
        failing_apps: App ids whose every request fails with 503
        timeout_apps: App ids whose every request times out
    """

    def __init__(
        self,
        default_feed: dict | None = None,
        feeds: dict[str, Any] | None = None,
        lookup: dict | None = None,
        lookup_status: int = 200,
        failing_sorts: tuple[str, ...] = (),
        failing_apps: tuple[str, ...] = (),
        timeout_apps: tuple[str, ...] = (),
    ):
        self.default_feed = default_feed if default_feed is not None else rss_feed()
        self.feeds = feeds or {}
        self.lookup = lookup if lookup is not None else lookup_payload()
        self.lookup_status = lookup_status
        self.failing_sorts = failing_sorts
        self.failing_apps = failing_apps
        self.timeout_apps = timeout_apps
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        app_id = self.app_id_of(request)

        if app_id in self.timeout_apps:
            raise httpx.ReadTimeout("timed out", request=request)
        if app_id in self.failing_apps:
            return httpx.Response(503, json={"error": "unavailable"})

        if request.url.path == "/lookup":
            return httpx.Response(self.lookup_status, json=self.lookup)

        sort = self.sort_of(request)
        if sort in self.failing_sorts:
            return httpx.Response(500, json={"error": "boom"})
        return httpx.Response(200, json=self.feeds.get(sort, self.default_feed))

    @staticmethod
    def app_id_of(request: httpx.Request) -> str | None:
        if request.url.path == "/lookup":
            return request.url.params.get("id")
        match = _RSS_APP_ID.search(request.url.path)
        return match.group(1) if match else None

    @staticmethod
    def sort_of(request: httpx.Request) -> str | None:
        match = _RSS_SORT.search(request.url.path)
        return match.group(1) if match else None

    def feed_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if "/rss/" in r.url.path]

    def lookup_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/lookup"]


def run_with_http(handler: Callable[[httpx.Request], httpx.Response],
                  fn: Callable[[httpx.AsyncClient], Awaitable[Any]]) -> Any:
    """Run an async callable against an httpx client backed by `handler`."""
    async def main():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fn(client)

    return asyncio.run(main())
