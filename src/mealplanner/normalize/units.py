"""Unit vocabulary, normalization and metric conversion."""

from types import MappingProxyType
from typing import NamedTuple

from mealplanner.logging_config import get_logger

logger = get_logger(__name__)


# Canonical sentinels
TO_TASTE = "to taste"
PIECE = "pcs"


# =============================================================================
# Unit Alias Table
# =============================================================================

# Every canonical unit also maps to itself so normalization is idempotent.
UNIT_ALIASES: MappingProxyType[str, str] = MappingProxyType(
    {
        # Weight
        "g": "g",
        "gr": "g",
        "gram": "g",
        "grams": "g",
        "grammo": "g",
        "grammi": "g",
        "kg": "kg",
        "kilogram": "kg",
        "kilograms": "kg",
        "chilogrammo": "kg",
        "chilogrammi": "kg",
        # Volume
        "ml": "ml",
        "milliliter": "ml",
        "milliliters": "ml",
        "millilitro": "ml",
        "millilitri": "ml",
        "l": "l",
        "liter": "l",
        "liters": "l",
        "litre": "l",
        "litres": "l",
        "litro": "l",
        "litri": "l",
        "cl": "cl",
        "centilitro": "cl",
        "centilitri": "cl",
        "dl": "dl",
        "decilitro": "dl",
        "decilitri": "dl",
        # Spoons and cups
        "tbsp": "tbsp",
        "tablespoon": "tbsp",
        "tablespoons": "tbsp",
        "cucchiaio": "tbsp",
        "cucchiai": "tbsp",
        "tsp": "tsp",
        "teaspoon": "tsp",
        "teaspoons": "tsp",
        "cucchiaino": "tsp",
        "cucchiaini": "tsp",
        "cup": "cup",
        "cups": "cup",
        "tazza": "cup",
        "tazze": "cup",
        "bicchiere": "cup",
        "bicchieri": "cup",
        # Count-like
        "cloves": "cloves",
        "clove": "cloves",
        "spicchio": "cloves",
        "spicchi": "cloves",
        "leaves": "leaves",
        "leaf": "leaves",
        "foglia": "leaves",
        "foglie": "leaves",
        "slices": "slices",
        "slice": "slices",
        "fetta": "slices",
        "fette": "slices",
        "sprigs": "sprigs",
        "sprig": "sprigs",
        "ciuffo": "sprigs",
        "ciuffi": "sprigs",
        "rametto": "sprigs",
        "rametti": "sprigs",
        "ramo": "sprigs",
        "rami": "sprigs",
        "packets": "packets",
        "packet": "packets",
        "bustina": "packets",
        "bustine": "packets",
        "pinch": "pinch",
        "pinches": "pinch",
        "pizzico": "pinch",
        "pizzichi": "pinch",
        "bunch": "bunch",
        "bunches": "bunch",
        "mazzetto": "bunch",
        "mazzetti": "bunch",
        "jars": "jars",
        "jar": "jars",
        "vasetto": "jars",
        "vasetti": "jars",
        "pcs": PIECE,
        "pc": PIECE,
        "piece": PIECE,
        "pieces": PIECE,
        "pz": PIECE,
        "pezzo": PIECE,
        "pezzi": PIECE,
        # Quanto basta
        "to taste": TO_TASTE,
        "q.b.": TO_TASTE,
        "qb": TO_TASTE,
        "quanto basta": TO_TASTE,
    }
)

# Tokens the ingredient line parser may match as a unit, longest first.
# A token that is a prefix of another (l/litro, cucchiai/cucchiaio, cup/cups)
# must come after it or the alternation stops at the shorter one.
PARSER_UNIT_TOKENS: tuple[str, ...] = tuple(
    sorted(
        (
            token
            for token, canonical in UNIT_ALIASES.items()
            if token.isalpha() and canonical != TO_TASTE
        ),
        key=lambda token: (-len(token), token),
    )
)


# =============================================================================
# Conversion Tables
# =============================================================================


class Conversion(NamedTuple):
    """Factor to turn a larger metric unit into its base unit."""

    base_unit: str
    multiplier: float


class Upscale(NamedTuple):
    """Larger unit to display a base unit in once it reaches the threshold."""

    unit: str
    threshold: float


METRIC_TO_BASE: MappingProxyType[str, Conversion] = MappingProxyType(
    {
        "kg": Conversion("g", 1000.0),
        "l": Conversion("ml", 1000.0),
        "cl": Conversion("ml", 10.0),
        "dl": Conversion("ml", 100.0),
    }
)

DISPLAY_UPSCALE: MappingProxyType[str, Upscale] = MappingProxyType(
    {
        "g": Upscale("kg", 1000.0),
        "ml": Upscale("l", 1000.0),
    }
)


# =============================================================================
# Normalization Functions
# =============================================================================


def normalize_unit(unit: str | None) -> str:
    """
    Map a unit token to its canonical unit.

    Lookup is case-insensitive and tolerates a trailing abbreviation dot
    ("gr.", "cucchiai."). A missing unit is a bare count. Unknown units are
    returned unchanged (stripped) and become their own canonical identity.
    """
    if unit is None or not unit.strip():
        return PIECE

    key = unit.strip().lower()
    canonical = UNIT_ALIASES.get(key) or UNIT_ALIASES.get(key.rstrip("."))
    if canonical is not None:
        return canonical

    logger.debug(f"Unknown unit {unit!r}, keeping as-is")
    return unit.strip()


def is_to_taste(unit: str | None) -> bool:
    """Check whether a unit is the quanto-basta sentinel."""
    return normalize_unit(unit) == TO_TASTE


def to_base_unit(amount: float, unit: str) -> tuple[float, str]:
    """
    Convert a canonical metric amount to its base unit.

    Units without a conversion entry pass through unchanged.
    """
    conversion = METRIC_TO_BASE.get(unit)
    if conversion is None:
        return amount, unit
    return amount * conversion.multiplier, conversion.base_unit


def upscale_for_display(amount: float, unit: str) -> tuple[float, str]:
    """Express a base-unit amount in the larger unit once it crosses the threshold."""
    upscale = DISPLAY_UPSCALE.get(unit)
    if upscale is None or amount < upscale.threshold:
        return amount, unit
    return amount / upscale.threshold, upscale.unit
