"""Shopping list models."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from julienned.ingredients.keys import item_key


class Category(str, Enum):
    """Store section an ingredient is shopped from."""

    PRODUCE = "produce"
    MEAT_SEAFOOD = "meat_seafood"
    DAIRY = "dairy"
    BAKERY = "bakery"
    PANTRY = "pantry"
    FROZEN = "frozen"
    CANNED = "canned"
    SPICES = "spices"
    CONDIMENTS = "condiments"
    BEVERAGES = "beverages"
    OTHER = "other"


class CustomItem(BaseModel):
    """User-added or recipe-derived entry persisted on a weekly shopping list."""

    ingredient: str = Field(min_length=1)
    quantity: Optional[float] = Field(default=None, ge=0)
    unit: Optional[str] = Field(default=None)
    category: Category = Field(default=Category.OTHER)
    recipe_id: Optional[int] = Field(default=None)
    recipe_title: Optional[str] = Field(default=None)
    added_at: datetime

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> str:
        return item_key(self.ingredient, self.unit)


class ShoppingItem(BaseModel):
    """Rendered, aggregated line of a generated shopping list."""

    id: int
    key: str
    ingredient: str
    quantity: Optional[float] = Field(default=None)
    unit: Optional[str] = Field(default=None)
    category: Category
    recipes: list[str] = Field(default_factory=list)
    checked: bool = Field(default=False)

    model_config = ConfigDict(frozen=True)


class ShoppingListRecord(BaseModel):
    """Persisted checked state and custom items for one user and week."""

    id: Optional[int] = Field(default=None)
    user_id: int
    week_start: date
    checked_items: list[str] = Field(default_factory=list)
    custom_items: list[CustomItem] = Field(default_factory=list)
    updated_at: datetime

    model_config = ConfigDict(frozen=True)


class GeneratedShoppingList(BaseModel):
    """Shopping list derived from the meals planned in a date range."""

    week_start: date
    items: list[ShoppingItem] = Field(default_factory=list)
    recipe_count: int = Field(default=0, ge=0)
    meal_count: int = Field(default=0, ge=0)
    custom_item_count: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)


__all__ = [
    "Category",
    "CustomItem",
    "ShoppingItem",
    "ShoppingListRecord",
    "GeneratedShoppingList",
]
