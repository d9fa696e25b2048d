"""Recipe and ingredient line models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class IngredientLine(BaseModel):
    """One ingredient entry of a recipe, possibly partially structured."""

    text: str = Field(min_length=1)
    quantity: Optional[float] = Field(default=None, ge=0)
    unit: Optional[str] = Field(default=None)
    item: Optional[str] = Field(default=None)
    preparation: Optional[str] = Field(default=None)
    category: Optional[str] = Field(default=None)

    model_config = ConfigDict(frozen=True)

    @property
    def name(self) -> str:
        """Item name used for aggregation, falling back to the raw text."""
        return (self.item or self.text or "").strip()


class Recipe(BaseModel):
    """Stored recipe owned by a single user."""

    id: int
    user_id: int
    title: str
    source_url: Optional[str] = Field(default=None)
    description: Optional[str] = Field(default=None)
    ingredients: list[IngredientLine] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    servings: Optional[int] = Field(default=None, ge=1)
    user_modified: bool = Field(default=False)
    created_at: datetime

    model_config = ConfigDict(frozen=True)


__all__ = ["IngredientLine", "Recipe"]
