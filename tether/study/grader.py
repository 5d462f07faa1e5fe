"""
Review Grader.

Maps the four-valued rating vocabulary onto the 0-3 quality scale used by
the interval calculator. Unknown tokens fall back to "good" (a long-standing
behavior kept for compatibility); strict mode rejects them instead.
"""

from __future__ import annotations

from loguru import logger

from config import get_settings
from tether.core.errors import InvalidRating
from tether.core.models import Quality, Rating

RATING_TO_QUALITY: dict[Rating, Quality] = {
    Rating.AGAIN: Quality.AGAIN,
    Rating.HARD: Quality.HARD,
    Rating.GOOD: Quality.GOOD,
    Rating.EASY: Quality.EASY,
}


def quality_from_rating(rating: Rating | str, strict: bool | None = None) -> int:
    """
    Convert a rating token to a quality score.

    Args:
        rating: "again", "hard", "good" or "easy" (case-insensitive)
        strict: Reject unknown tokens. Defaults to the strict_ratings setting.

    Returns:
        Quality in 0..3

    Raises:
        InvalidRating: Only in strict mode, for an unrecognized token.
    """
    if strict is None:
        strict = get_settings().strict_ratings

    token = rating.value if isinstance(rating, Rating) else str(rating).strip().lower()
    try:
        return int(RATING_TO_QUALITY[Rating(token)])
    except ValueError:
        if strict:
            raise InvalidRating(rating) from None
        logger.warning(f"Unknown rating {rating!r}, grading as 'good'")
        return int(Quality.GOOD)


def is_passing(quality: int) -> bool:
    """A review counts as correct from "good" upwards."""
    return quality >= Quality.GOOD
