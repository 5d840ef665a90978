# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the review fetching logic:
# - models/: Pydantic schemas (domain, API, upstream payloads)
# - services/: Source clients, review merging, aggregation, request handling
#
# Routing concerns stay in app/; code here is driven through plain async
# calls and is testable without an HTTP server.
# =============================================================================
