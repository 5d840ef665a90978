# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .source_client import ReviewSourceClient
from .app_store_client import AppStoreClient
from .aso_market_client import AsoMarketClient
from .review_aggregator import ReviewAggregator
from .reviews_handler import ReviewsHandler, parse_request_body

__all__ = [
    "ReviewSourceClient",
    "AppStoreClient",
    "AsoMarketClient",
    "ReviewAggregator",
    "ReviewsHandler",
    "parse_request_body",
]
