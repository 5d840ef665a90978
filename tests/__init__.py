# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Reviews & Ratings API:
# - test_validators.py: Request validation and sanitization
# - test_models.py: Domain models and upstream payload decoders
# - test_review_merge.py: Multi-sort dedup, ordering and capping
# - test_app_store_client.py / test_aso_market_client.py: Upstream clients
# - test_reviews_handler.py: Aggregation and request handling
# - test_api.py: HTTP endpoints through TestClient
#
# Run tests with: pytest
# =============================================================================
