# =============================================================================
# core/services/review_merge.py - Review Dedup, Ordering and Capping
# =============================================================================
# The App Store exposes each sort order as a separate feed of ~50 entries.
# Fetching several sort orders gives wider coverage, but the same review
# shows up in more than one feed. This module merges feeds:
#
#   1. Fingerprint every review: (first 50 chars of content, author, date)
#   2. Keep the first review seen for each fingerprint
#   3. Stable sort by parsed date, newest first
#   4. Truncate to the caller's limit
#
# Pure functions - no I/O.
# =============================================================================

from collections.abc import Iterable
from datetime import datetime, timezone

from core.models.review import Review


FINGERPRINT_CONTENT_LENGTH = 50

# Reviews with unparseable dates sort after everything else
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def review_fingerprint(review: Review) -> tuple[str, str, str]:
    """Composite dedup key: content prefix, author, date."""
    return (review.content[:FINGERPRINT_CONTENT_LENGTH], review.author, review.date)


def parse_review_date(value: str) -> datetime:
    """
    Parse an upstream timestamp into an aware datetime.

    Naive timestamps are taken as UTC. Anything unparseable maps to the
    oldest possible time.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return _OLDEST
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_most_recent_first(reviews: Iterable[Review]) -> list[Review]:
    """Stable sort by date, newest first. Equal dates keep their input order."""
    return sorted(reviews, key=lambda review: parse_review_date(review.date), reverse=True)


def dedupe_reviews(feeds: Iterable[Iterable[Review]]) -> list[Review]:
    """
    Union of several feeds without duplicates.

    The first occurrence of each fingerprint wins; later ones are dropped.
    Insertion order is preserved.
    """
    unique: dict[tuple[str, str, str], Review] = {}
    for feed in feeds:
        for review in feed:
            unique.setdefault(review_fingerprint(review), review)
    return list(unique.values())


def merge_review_feeds(feeds: Iterable[Iterable[Review]], limit: int) -> list[Review]:
    """
    Dedupe, order newest first and cap.

    Args:
        feeds: Review lists, in the order they should win dedup ties
        limit: Maximum number of reviews to return

    Returns:
        At most `limit` unique reviews, newest first
    """
    return sort_most_recent_first(dedupe_reviews(feeds))[:limit]


def renumber_reviews(reviews: list[Review], prefix: str) -> list[Review]:
    """
    Reassign synthetic ids as {prefix}_{ordinal}.

    Ordinals from different feeds collide once merged, so merged results
    are renumbered in their final order.
    """
    return [
        review.model_copy(update={"id": f"{prefix}_{index}"})
        for index, review in enumerate(reviews)
    ]
