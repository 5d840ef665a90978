# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - reviews.py: Single-app and batch review endpoints
# - health.py: Health check endpoint
# - docs.py: Static swagger.json endpoint
#
# Each router is mounted in main.py.
# =============================================================================

from . import docs
from . import health
from . import reviews

__all__ = [
    "docs",
    "health",
    "reviews",
]
