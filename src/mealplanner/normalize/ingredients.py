"""Free-text ingredient line parsing (Italian and English)."""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from mealplanner.logging_config import get_logger
from mealplanner.normalize.quantity import parse_quantity
from mealplanner.normalize.units import (
    PARSER_UNIT_TOKENS,
    PIECE,
    TO_TASTE,
    normalize_unit,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class ParsedIngredient:
    """Structured ingredient extracted from one line of text."""

    name: str
    amount: float
    unit: str

    @property
    def is_to_taste(self) -> bool:
        return self.unit == TO_TASTE


# =============================================================================
# Patterns
# =============================================================================

HTML_FRACTION_ENTITIES: dict[str, str] = {
    "&frac12;": "½",
    "&frac14;": "¼",
    "&frac34;": "¾",
    "&#189;": "½",
    "&#188;": "¼",
    "&#190;": "¾",
    "&#xBD;": "½",
    "&#xBC;": "¼",
    "&#xBE;": "¾",
}

_GLYPHS = "½¼¾⅓⅔"

# "1/2", "1 1/2", "1½", "1,5", "150", "½"
_NUMBER = rf"(?:\d+\s*/\s*\d+|\d+(?:[.,]\d+)?(?:\s+\d+/\d+|\s*[{_GLYPHS}])?|[{_GLYPHS}])"

# Alternation order follows PARSER_UNIT_TOKENS (longest first)
_UNITS = "|".join(re.escape(token) for token in PARSER_UNIT_TOKENS)

# A unit must not be followed by a letter ("l" in "limoni", "g" in "gamberi")
_NOT_LETTER = r"(?![^\W\d_])"

_TO_TASTE_RE = re.compile(
    r"(?<![^\W\d_])(?:q\.?\s*b\.?|quanto\s+basta|to\s+taste)" + _NOT_LETTER,
    re.IGNORECASE,
)

# "Burro freddo 150 g"
_END_WITH_UNIT_RE = re.compile(
    rf"^(?P<name>.+?)\s+(?P<amount>{_NUMBER})\s*(?P<unit>{_UNITS}){_NOT_LETTER}\.?\s*$",
    re.IGNORECASE,
)

# "Uova 1"
_END_BARE_RE = re.compile(rf"^(?P<name>.+?)\s+(?P<amount>{_NUMBER})\s*$")

# "150 g di farina", "2 cups of flour", "1 spicchio d'aglio"
_START_WITH_UNIT_RE = re.compile(
    rf"^(?P<amount>{_NUMBER})\s*(?P<unit>{_UNITS}){_NOT_LETTER}\.?\s*"
    r"(?:(?:di|of)\s+|d['’]\s*)?(?P<name>.+)$",
    re.IGNORECASE,
)

# "2 uova"
_START_BARE_RE = re.compile(rf"^(?P<amount>{_NUMBER})\s+(?P<name>.+)$")


def decode_fraction_entities(text: str) -> str:
    """Replace HTML entities for ½, ¼ and ¾ with the glyphs themselves."""
    for entity, glyph in HTML_FRACTION_ENTITIES.items():
        text = text.replace(entity, glyph)
    return text


# =============================================================================
# Parsing
# =============================================================================


def parse_ingredient_line(text: str) -> ParsedIngredient:
    """
    Parse one free-text ingredient line into name, amount and canonical unit.

    Rules are tried in order and the first match wins:
    1. quanto basta marker ("Sale q.b.") -> amount 0, unit "to taste"
    2. name, amount and unit at the end ("Burro freddo 150 g")
    3. name and bare number at the end ("Uova 1")
    4. amount and unit, optional "di"/"of", then name ("150 g di farina")
    5. bare number then name ("2 uova")
    6. the whole line as name, amount 1, unit "pcs"

    Never raises.
    """
    cleaned = " ".join(decode_fraction_entities(text or "").split())

    if _TO_TASTE_RE.search(cleaned):
        remainder = " ".join(_TO_TASTE_RE.sub(" ", cleaned).split()).strip(" ,;:")
        return ParsedIngredient(name=remainder or cleaned, amount=0.0, unit=TO_TASTE)

    match = _END_WITH_UNIT_RE.match(cleaned)
    if match:
        return _from_match(match, unit=match.group("unit"))

    match = _END_BARE_RE.match(cleaned)
    if match and len(match.group("name").strip()) > 1:
        return _from_match(match, unit=PIECE)

    match = _START_WITH_UNIT_RE.match(cleaned)
    if match:
        return _from_match(match, unit=match.group("unit"))

    match = _START_BARE_RE.match(cleaned)
    if match:
        return _from_match(match, unit=PIECE)

    logger.debug(f"No quantity found in ingredient line {cleaned!r}")
    return ParsedIngredient(name=cleaned, amount=1.0, unit=PIECE)


def _from_match(match: re.Match[str], unit: str) -> ParsedIngredient:
    return ParsedIngredient(
        name=match.group("name").strip(),
        amount=parse_quantity(match.group("amount")),
        unit=normalize_unit(unit),
    )


def parse_ingredient_lines(lines: Iterable[str]) -> list[ParsedIngredient]:
    """Parse a list of ingredient lines, skipping blank ones."""
    return [parse_ingredient_line(line) for line in lines if line and line.strip()]
