# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - validators.py: Request validation and sanitization (pure functions)
# - utils.py: Shared utilities (timestamps)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.utils import utc_now_iso
from lib.validators import (
    is_valid_app_id,
    is_valid_country,
    is_valid_limit,
    sanitize_app_id,
    sanitize_country,
    sanitize_limit,
    validate_multiple_apps_request,
    validate_reviews_request,
)

__all__ = [
    # Validators
    "is_valid_app_id",
    "is_valid_country",
    "is_valid_limit",
    "sanitize_app_id",
    "sanitize_country",
    "sanitize_limit",
    "validate_multiple_apps_request",
    "validate_reviews_request",
    # Utils
    "utc_now_iso",
]
