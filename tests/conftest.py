# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up test environment variables before any imports
# - Provides an ITunesStub-backed TestClient for end-to-end tests
# =============================================================================

import os
from pathlib import Path

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

PROJECT_ROOT = Path(__file__).resolve().parent.parent

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("REVIEW_SOURCE", "app_store")
os.environ.setdefault("REVIEW_STRATEGY", "multi_sort")
os.environ.setdefault("MAX_REVIEWS_PER_APP", "200")
os.environ.setdefault("API_DOCS_PATH", str(PROJECT_ROOT / "swagger.json"))

import httpx
import pytest
from fastapi.testclient import TestClient

from tests.helpers import ItunesStub, rss_entry, rss_feed


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def five_reviews():
    """Five reviews with distinct timestamps, listed oldest first."""
    return [
        rss_entry("First review", author="alice", updated="2024-01-01T10:00:00-07:00"),
        rss_entry("Second review", author="bob", updated="2024-01-02T10:00:00-07:00"),
        rss_entry("Third review", author="carol", updated="2024-01-03T10:00:00-07:00"),
        rss_entry("Fourth review", author="dave", updated="2024-01-04T10:00:00-07:00"),
        rss_entry("Fifth review", author="erin", updated="2024-01-05T10:00:00-07:00"),
    ]


@pytest.fixture
def itunes_stub(five_reviews):
    """Stub upstream serving the same five reviews for every sort order."""
    return ItunesStub(default_feed=rss_feed(*five_reviews))


@pytest.fixture
def api_client():
    """
    Build a TestClient whose upstream HTTP calls go to a stub.

    Usage:
        client = api_client(ItunesStub(...))
        client.get("/reviews?app_id=1")
    """
    from app.dependencies import get_http_client
    from app.main import app

    def make(stub) -> TestClient:
        async def override_http_client():
            async with httpx.AsyncClient(transport=httpx.MockTransport(stub)) as client:
                yield client

        app.dependency_overrides[get_http_client] = override_http_client
        return TestClient(app)

    yield make
    app.dependency_overrides.clear()
