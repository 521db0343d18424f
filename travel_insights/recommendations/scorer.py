"""
Popularity and rating arithmetic for recommendation ranking.

``popularity_score`` maps raw engagement counters to a bounded 0–100 score:

    raw   = views * 1 + bookmarks * 10 + shares * 5
    score = min(100, round_half_up(raw / 10000 * 100))

The saturation constant 10,000 is fixed: any entity with a weighted raw
score of 10,000 or more scores 100.  Rounding is half-up and done in
integer arithmetic, so ``popularity_score(50, 20, 0) == 3``.

Both functions are pure and cheap; callers compute scores per request.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from travel_insights.models.catalog import Review

VIEW_WEIGHT = 1
BOOKMARK_WEIGHT = 10
SHARE_WEIGHT = 5

SATURATION_RAW_SCORE = 10_000
MAX_SCORE = 100


def popularity_score(view_count: int, bookmark_count: int, share_count: int) -> int:
    """Return the popularity score in ``[0, 100]``.

    Negative counters are treated as zero.  The score is monotonically
    non-decreasing in each argument.

    Args:
        view_count: Number of views.
        bookmark_count: Number of bookmarks.
        share_count: Number of shares.

    Returns:
        Integer score between 0 and 100 inclusive.
    """
    raw = (
        max(0, view_count) * VIEW_WEIGHT
        + max(0, bookmark_count) * BOOKMARK_WEIGHT
        + max(0, share_count) * SHARE_WEIGHT
    )
    # raw / SATURATION * MAX, rounded half-up without floats.
    scaled = (raw * MAX_SCORE * 2 + SATURATION_RAW_SCORE) // (SATURATION_RAW_SCORE * 2)
    return min(MAX_SCORE, scaled)


def round_half_up(value: float, places: int = 1) -> float:
    """Round ``value`` to ``places`` decimals, halves away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def average_pet_rating(reviews: Iterable[Review]) -> tuple[float, int]:
    """Mean pet-friendly rating over reviews that report a pet experience.

    Only reviews with ``pet_friendly_experience`` set and a
    ``pet_friendly_rating`` present count.

    Returns:
        ``(average, count)`` with the average rounded half-up to one
        decimal, or ``(0.0, 0)`` when no review qualifies.
    """
    ratings = [
        r.pet_friendly_rating
        for r in reviews
        if r.pet_friendly_experience and r.pet_friendly_rating is not None
    ]
    if not ratings:
        return 0.0, 0
    return round_half_up(sum(ratings) / len(ratings)), len(ratings)
