"""Quantity parsing and rounding helpers."""

import math
import re

from mealplanner.logging_config import get_logger

logger = get_logger(__name__)


# Unicode vulgar fractions accepted in ingredient text
VULGAR_FRACTIONS: dict[str, float] = {
    "½": 0.5,
    "¼": 0.25,
    "¾": 0.75,
    "⅓": 0.333,
    "⅔": 0.667,
}

_FRACTION_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*/\s*(\d+(?:\.\d+)?)$")
_MIXED_RE = re.compile(r"^(\d+)\s+(\S+)$")
_GLYPH_MIXED_RE = re.compile(r"^(\d+)\s*([½¼¾⅓⅔])$")


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round to ``digits`` decimals, ties going up.

    Python's ``round`` uses banker's rounding, which would turn 0.25 into 0.2
    and 2.5 into 2; displayed amounts and nutrition totals round ties up.
    """
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def _parse_simple(token: str) -> float | None:
    """Parse a single token (no mixed numbers). Returns None if unparseable."""
    if token in VULGAR_FRACTIONS:
        return VULGAR_FRACTIONS[token]

    frac_match = _FRACTION_RE.match(token)
    if frac_match:
        denominator = float(frac_match.group(2))
        if denominator == 0:
            return None
        return float(frac_match.group(1)) / denominator

    try:
        return float(token)
    except ValueError:
        return None


def parse_quantity(token: str | None) -> float:
    """
    Parse a numeric quantity token into a non-negative float.

    Handles formats like:
    - "2", "1.5", "1,5" (comma decimal separator)
    - "1/2"
    - "½", "¼", "¾", "⅓", "⅔"
    - "1 1/2", "1½" (mixed numbers are summed)

    Never raises: anything unparseable, negative or non-finite gives 0.
    """
    if not token:
        return 0.0

    text = token.strip().replace(",", ".")
    if not text:
        return 0.0

    value = _parse_simple(text)

    if value is None:
        mixed_match = _MIXED_RE.match(text) or _GLYPH_MIXED_RE.match(text)
        if mixed_match:
            fraction = _parse_simple(mixed_match.group(2))
            if fraction is not None and 0 < fraction < 1:
                value = int(mixed_match.group(1)) + fraction

    if value is None or not math.isfinite(value) or value < 0:
        logger.debug(f"Could not parse quantity {token!r}, defaulting to 0")
        return 0.0

    return value
