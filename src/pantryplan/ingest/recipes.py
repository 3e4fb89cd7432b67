"""Persist parsed recipe ingredient lines."""

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from pantryplan.logging_config import get_logger
from pantryplan.models import RecipeIngredient
from pantryplan.normalize.ingredients import IngredientRecord, parse_ingredient_lines

logger = get_logger(__name__)


def replace_recipe_ingredients(
    session: Session,
    recipe_id: str,
    lines: list[str],
) -> list[IngredientRecord]:
    """
    Parse ingredient lines and store them as the recipe's full ingredient list.

    Existing rows for the recipe are deleted first; ingredient records are only
    ever replaced as a whole, never patched.

    Args:
        session: Database session.
        recipe_id: Recipe the lines belong to.
        lines: Free-text ingredient lines; blank lines are dropped.

    Returns:
        The parsed records, in line order.
    """
    records = parse_ingredient_lines(lines)

    session.execute(delete(RecipeIngredient).where(RecipeIngredient.recipe_id == recipe_id))
    for position, record in enumerate(records):
        session.add(RecipeIngredient(recipe_id=recipe_id, position=position, **record.model_dump()))
    session.commit()

    logger.info(f"Stored {len(records)} ingredients for recipe {recipe_id} ({len(lines)} lines)")
    return records


def load_recipe_ingredients(session: Session, recipe_id: str) -> list[RecipeIngredient]:
    """Fetch a recipe's ingredient rows in their original order."""
    stmt = (
        select(RecipeIngredient)
        .where(RecipeIngredient.recipe_id == recipe_id)
        .order_by(RecipeIngredient.position)
    )
    return list(session.execute(stmt).scalars().all())
