"""API routes for ingredient text parsing."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from mealplanner.logging_config import get_logger
from mealplanner.normalize.ingredients import parse_ingredient_line

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/ingredients", tags=["ingredients"])


class ParseIngredientsRequest(BaseModel):
    """Free-text ingredient lines to parse."""

    lines: list[str] = Field(default_factory=list)


class ParsedIngredientResponse(BaseModel):
    """One parsed ingredient line."""

    text: str
    name: str
    amount: float
    unit: str


class ParseIngredientsResponse(BaseModel):
    """Parsed lines, in input order, blank lines omitted."""

    ingredients: list[ParsedIngredientResponse]


@router.post("/parse", response_model=ParseIngredientsResponse)
async def parse_ingredients(request: ParseIngredientsRequest) -> ParseIngredientsResponse:
    """
    Parse ingredient lines into name, amount and canonical unit.

    Unparseable lines never fail the request; they come back as the whole
    line with amount 1 and unit "pcs".
    """
    parsed = []
    for line in request.lines:
        if not line.strip():
            continue
        result = parse_ingredient_line(line)
        parsed.append(
            ParsedIngredientResponse(
                text=line, name=result.name, amount=result.amount, unit=result.unit
            )
        )

    logger.debug(f"Parsed {len(parsed)} ingredient lines")
    return ParseIngredientsResponse(ingredients=parsed)
