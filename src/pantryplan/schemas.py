"""Request and result schemas for meal-slot planning."""

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

MealSlot = Literal["Breakfast", "Lunch", "Dinner"]


class MealSlotRequest(BaseModel):
    """Put a recipe into (or clear) one meal slot of a day."""

    plan_date: date
    slot: MealSlot
    recipe_id: str | None = Field(None, description="Recipe ID or null to clear the slot")
    use_leftovers: bool = Field(False, description="Leftovers consume no pantry stock")

    @field_validator("slot", mode="before")
    @classmethod
    def normalize_slot(cls, v: Any) -> Any:
        """Accept "dinner", " DINNER " and the like."""
        if isinstance(v, str):
            return v.strip().capitalize()
        return v

    @field_validator("recipe_id", mode="before")
    @classmethod
    def blank_recipe_is_none(cls, v: Any) -> str | None:
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class IngredientRequirement(BaseModel):
    """How much of one ingredient a meal needed and how much the pantry gave."""

    normalized_key: str
    unit: str
    required: float
    deducted: float

    @property
    def shortfall(self) -> float:
        """Amount the pantry could not cover."""
        return max(0.0, self.required - self.deducted)

    @property
    def is_short(self) -> bool:
        return self.shortfall > 1e-9


class MealAssignment(BaseModel):
    """Outcome of planning a meal slot."""

    plan_date: date
    slot: MealSlot
    recipe_id: str | None = None
    restored: list[IngredientRequirement] = Field(default_factory=list)
    requirements: list[IngredientRequirement] = Field(default_factory=list)

    @property
    def shortfalls(self) -> list[IngredientRequirement]:
        """Requirements the pantry could not fully cover."""
        return [r for r in self.requirements if r.is_short]
