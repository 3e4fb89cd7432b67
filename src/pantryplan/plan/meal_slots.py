"""Plan and unplan meal slots, keeping pantry stock in step."""

import math
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from pantryplan.ingest.recipes import load_recipe_ingredients
from pantryplan.logging_config import LoggingContext, get_logger
from pantryplan.models import PlanMealIngredient
from pantryplan.normalize.quantity import parse_quantity_text
from pantryplan.normalize.units import canonical_unit
from pantryplan.pantry.engine import PantryEngine
from pantryplan.pantry.storage import SqlPantryStore
from pantryplan.schemas import IngredientRequirement, MealAssignment, MealSlotRequest

logger = get_logger(__name__)


class MealSlotPlanner:
    """
    Applies pantry deductions when a recipe is planned into a slot.

    Every deduction is written to the plan_meal_ingredients ledger so that
    replacing or clearing the slot can restock exactly what was taken.
    Each call runs as one transaction on the given session.
    """

    def __init__(self, session: Session, engine: PantryEngine):
        self.session = session
        self.engine = engine

    @classmethod
    def for_session(cls, session: Session) -> "MealSlotPlanner":
        """Build a planner whose engine works on the session's pantry table."""
        return cls(session, PantryEngine(SqlPantryStore.for_session(session)))

    def ledger_for(self, plan_date: date, slot: str) -> list[PlanMealIngredient]:
        """Get the recorded deductions of one slot."""
        stmt = (
            select(PlanMealIngredient)
            .where(
                PlanMealIngredient.plan_date == plan_date.isoformat(),
                PlanMealIngredient.slot == slot,
            )
            .order_by(PlanMealIngredient.ingredient_norm, PlanMealIngredient.base_unit)
        )
        return list(self.session.execute(stmt).scalars().all())

    def recipe_requirements(self, recipe_id: str) -> dict[tuple[str, str], float]:
        """
        Sum a recipe's ingredient quantities per (normalized key, canonical unit).

        Ingredients without a positive quantity or without a unit consume no
        pantry stock and are left out.
        """
        needs: dict[tuple[str, str], float] = {}

        for ing in load_recipe_ingredients(self.session, recipe_id):
            key = (ing.normalized_key or ing.raw_text or "").strip().lower()
            if not key:
                continue

            quantity = ing.quantity_number
            unit = canonical_unit(ing.unit)
            if (quantity is None or not math.isfinite(quantity) or quantity <= 0) and ing.quantity_text:
                parsed = parse_quantity_text(ing.quantity_text)
                if parsed.quantity_number is not None:
                    quantity = parsed.quantity_number
                if not unit:
                    unit = canonical_unit(parsed.unit)

            if quantity is None or not math.isfinite(quantity) or quantity <= 0 or not unit:
                continue

            needs[(key, unit)] = needs.get((key, unit), 0.0) + quantity

        return needs

    def assign_meal(self, request: MealSlotRequest) -> MealAssignment:
        """
        Put a recipe into a slot (or clear it when ``recipe_id`` is None).

        Prior deductions for the slot are restocked first. Leftover meals
        consume nothing.
        """
        date_id = request.plan_date.isoformat()

        with LoggingContext(plan_date=date_id, slot=request.slot, recipe_id=request.recipe_id):
            try:
                restored = self._revert(request.plan_date, request.slot)
                requirements: list[IngredientRequirement] = []
                if request.recipe_id and not request.use_leftovers:
                    requirements = self._deduct_recipe(date_id, request.slot, request.recipe_id)
                self.session.commit()
            except Exception:
                self.session.rollback()
                logger.exception("Meal slot update failed; rolled back")
                raise

            short = [r for r in requirements if r.is_short]
            logger.info(
                f"Slot planned: restored={len(restored)}, deducted={len(requirements)}, "
                f"short={len(short)}"
            )

        return MealAssignment(
            plan_date=request.plan_date,
            slot=request.slot,
            recipe_id=request.recipe_id,
            restored=restored,
            requirements=requirements,
        )

    def clear_meal(self, plan_date: date, slot: str) -> list[IngredientRequirement]:
        """Remove whatever is planned in a slot and restock its deductions."""
        assignment = self.assign_meal(MealSlotRequest(plan_date=plan_date, slot=slot))
        return assignment.restored

    def _revert(self, plan_date: date, slot: str) -> list[IngredientRequirement]:
        restored = []
        for entry in self.ledger_for(plan_date, slot):
            if entry.deducted_base > 0:
                self.engine.add_back_to_pantry(
                    entry.ingredient_norm, entry.deducted_base, entry.base_unit
                )
            restored.append(
                IngredientRequirement(
                    normalized_key=entry.ingredient_norm,
                    unit=entry.base_unit,
                    required=entry.required_base,
                    deducted=entry.deducted_base,
                )
            )
            self.session.delete(entry)
        self.session.flush()
        return restored

    def _deduct_recipe(self, date_id: str, slot: str, recipe_id: str) -> list[IngredientRequirement]:
        requirements = []
        now = datetime.utcnow()

        for (key, unit), required in self.recipe_requirements(recipe_id).items():
            deducted = self.engine.deduct_from_pantry(key, required, unit)
            self.session.add(
                PlanMealIngredient(
                    plan_date=date_id,
                    slot=slot,
                    ingredient_norm=key,
                    base_unit=unit,
                    recipe_id=recipe_id,
                    required_base=required,
                    deducted_base=deducted,
                    updated_at=now,
                )
            )
            requirements.append(
                IngredientRequirement(
                    normalized_key=key, unit=unit, required=required, deducted=deducted
                )
            )

        self.session.flush()
        return requirements
