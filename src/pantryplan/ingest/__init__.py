"""Import recipe data into the planner's tables."""

from pantryplan.ingest.recipes import load_recipe_ingredients, replace_recipe_ingredients

__all__ = ["load_recipe_ingredients", "replace_recipe_ingredients"]
