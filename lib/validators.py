# =============================================================================
# lib/validators.py - Request Validation and Sanitization
# =============================================================================
# Pure functions that check caller-supplied identifiers and limits.
# No side effects, no I/O - safe to call before any network request.
#
# Usage:
#   errors = validate_reviews_request({"app_id": "284882215", "limit": 10})
#   if errors:
#       raise ValidationFailedError(errors)
# =============================================================================

import math
import re
from typing import Any


MAX_LIMIT = 200
MAX_BATCH_SIZE = 20

_APP_ID_PATTERN = re.compile(r"[0-9]+")
_COUNTRY_PATTERN = re.compile(r"[A-Za-z]{2}")

LIMIT_ERROR = f"limit must be a positive integer between 1 and {MAX_LIMIT}"
COUNTRY_ERROR = "country must be a two-letter country code"


# =============================================================================
# Single Value Checks
# =============================================================================

def is_valid_app_id(app_id: Any) -> bool:
    """
    Check that an App Store identifier is a non-empty string of digits.

    Example:
        is_valid_app_id("284882215")  # True
        is_valid_app_id("12a")        # False
        is_valid_app_id(284882215)    # False (not a string)
    """
    return isinstance(app_id, str) and _APP_ID_PATTERN.fullmatch(app_id) is not None


def is_valid_limit(limit: Any) -> bool:
    """
    Check that a limit is an integer in [1, MAX_LIMIT].

    Integral floats (5.0) count as integers, booleans don't.
    """
    if isinstance(limit, bool):
        return False
    if isinstance(limit, float):
        if not limit.is_integer():
            return False
    elif not isinstance(limit, int):
        return False
    return 1 <= limit <= MAX_LIMIT


def is_valid_country(country: Any) -> bool:
    """Check that a country is a two-letter alphabetic code."""
    return isinstance(country, str) and _COUNTRY_PATTERN.fullmatch(country.strip()) is not None


# =============================================================================
# Request Validation
# =============================================================================

def _validate_common(data: dict[str, Any], errors: list[str]) -> None:
    if data.get("limit") is not None and not is_valid_limit(data["limit"]):
        errors.append(LIMIT_ERROR)

    if data.get("country") is not None and not is_valid_country(data["country"]):
        errors.append(COUNTRY_ERROR)


def validate_reviews_request(data: dict[str, Any]) -> list[str]:
    """
    Validate a single-app reviews request.

    Args:
        data: Raw request fields (app_id, limit, country, ...)

    Returns:
        List of human-readable errors. Empty list means valid.
    """
    errors: list[str] = []

    app_id = data.get("app_id")
    if app_id is None or app_id == "":
        errors.append("app_id is required")
    elif not is_valid_app_id(app_id):
        errors.append("app_id must be a valid numeric string")

    _validate_common(data, errors)
    return errors


def validate_multiple_apps_request(data: dict[str, Any]) -> list[str]:
    """
    Validate a batch request.

    Every invalid identifier gets its own error, so callers can fix them
    all at once. One bad identifier rejects the whole batch.

    Args:
        data: Raw request fields (app_ids, limit, country, ...)

    Returns:
        List of human-readable errors. Empty list means valid.
    """
    errors: list[str] = []

    app_ids = data.get("app_ids")
    if not isinstance(app_ids, list):
        errors.append("app_ids must be an array")
    elif len(app_ids) == 0:
        errors.append("app_ids array cannot be empty")
    elif len(app_ids) > MAX_BATCH_SIZE:
        errors.append(f"app_ids array cannot contain more than {MAX_BATCH_SIZE} items")
    else:
        for app_id in app_ids:
            if not is_valid_app_id(app_id):
                errors.append(f"Invalid app_id: {app_id}")

    _validate_common(data, errors)
    return errors


# =============================================================================
# Sanitization
# =============================================================================

def sanitize_app_id(app_id: str) -> str:
    """Trim surrounding whitespace. No other transformation."""
    return app_id.strip()


def sanitize_limit(limit: int | float, max_limit: int = MAX_LIMIT) -> int:
    """
    Floor toward zero, then clamp into [1, max_limit].

    Example:
        sanitize_limit(250, 200)  # 200
        sanitize_limit(0, 200)    # 1
        sanitize_limit(5.7, 200)  # 5
    """
    return min(max(1, math.trunc(limit)), max_limit)


def sanitize_country(country: str | None, default: str) -> str:
    """Normalize a storefront country, falling back to the default."""
    if not country or not country.strip():
        return default.lower()
    return country.strip().lower()
