"""Meal plan models."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MealSlot(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class PlannedMeal(BaseModel):
    """Recipe scheduled into one slot of a day."""

    slot: MealSlot
    recipe_id: int = Field(ge=1)
    servings: Optional[int] = Field(default=None, ge=1)

    model_config = ConfigDict(frozen=True)


class MealPlan(BaseModel):
    """All meals planned by a user for a single date."""

    date: date
    meals: list[PlannedMeal] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


__all__ = ["MealSlot", "PlannedMeal", "MealPlan"]
