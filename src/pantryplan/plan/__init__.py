"""Meal planning on top of the pantry engine."""

from pantryplan.plan.meal_slots import MealSlotPlanner

__all__ = ["MealSlotPlanner"]
