"""Pydantic models defining shared data contracts."""

from julienned.models.meal_plan import MealPlan, MealSlot, PlannedMeal
from julienned.models.recipe import IngredientLine, Recipe
from julienned.models.shopping import (
    Category,
    CustomItem,
    GeneratedShoppingList,
    ShoppingItem,
    ShoppingListRecord,
)
from julienned.models.user import User

__all__ = [
    "MealPlan",
    "MealSlot",
    "PlannedMeal",
    "IngredientLine",
    "Recipe",
    "Category",
    "CustomItem",
    "GeneratedShoppingList",
    "ShoppingItem",
    "ShoppingListRecord",
    "User",
]
