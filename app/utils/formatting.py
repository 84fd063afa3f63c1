"""
Read-time shaping helpers for spot listings.
Computes preview image URLs and average ratings, and renders fixed-precision numbers.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence, Union

NO_PREVIEW_IMAGE = "No Preview Image Available"

COORDINATE_PRECISION = 6
RATING_PRECISION = 1

Number = Union[int, float, Decimal]


def _fixed(value: Number, places: int) -> str:
    """Render a number with exactly ``places`` decimals, rounding half up."""
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_coordinate(value: Number) -> str:
    """Latitude/longitude always render with six decimals."""
    return _fixed(value, COORDINATE_PRECISION)


def format_rating(value: Number) -> str:
    """Ratings always render with one decimal."""
    return _fixed(value, RATING_PRECISION)


def average_rating(stars: Sequence[Number]) -> float:
    """
    Arithmetic mean of review star values.

    Returns 0 for a spot without reviews.
    """
    if not stars:
        return 0.0
    return sum(float(s) for s in stars) / len(stars)


def select_preview_url(images: Iterable) -> str:
    """
    URL of the first image flagged as preview, or the no-preview sentinel.

    Accepts anything with ``url`` and ``preview`` attributes.
    """
    for image in images:
        if image.preview:
            return image.url
    return NO_PREVIEW_IMAGE


def preview_or_sentinel(url: Optional[str]) -> str:
    return url if url else NO_PREVIEW_IMAGE
