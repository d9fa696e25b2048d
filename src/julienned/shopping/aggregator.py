"""Fold recipe ingredient lines and custom items into keyed shopping entries."""

from __future__ import annotations

import dataclasses
from typing import Dict, Iterable, Optional, Sequence, Tuple

from julienned.ingredients.categories import Classifier, classify_ingredient, resolve_category
from julienned.ingredients.keys import ingredient_key
from julienned.ingredients.units import normalize_unit
from julienned.models.recipe import IngredientLine
from julienned.models.shopping import Category, CustomItem

RecipeIngredientGroup = Tuple[str, Sequence[IngredientLine]]


@dataclasses.dataclass
class AggregatedEntry:
    ingredient: str
    quantity: float
    unit: str
    category: Category
    # dict keys keep provenance ordered and unique
    recipes: Dict[str, None] = dataclasses.field(default_factory=dict)

    def add_source(self, title: Optional[str]) -> None:
        if title:
            self.recipes.setdefault(title, None)

    @property
    def sources(self) -> list[str]:
        return list(self.recipes)


def _merge(
    accumulator: Dict[str, AggregatedEntry],
    *,
    name: str,
    quantity: Optional[float],
    unit: Optional[str],
    declared_category: Optional[str],
    source: Optional[str],
    classifier: Classifier,
) -> None:
    name = name.strip()
    if not name:
        return

    normalized_unit = normalize_unit(unit)
    key = ingredient_key(name, normalized_unit)
    # Missing quantities ("salt to taste") count as one.
    amount = quantity or 1

    existing = accumulator.get(key)
    if existing is not None:
        existing.quantity += amount
        existing.add_source(source)
        return

    entry = AggregatedEntry(
        ingredient=name,
        quantity=amount,
        unit=normalized_unit,
        category=resolve_category(declared_category, name, classifier),
    )
    entry.add_source(source)
    accumulator[key] = entry


def aggregate(
    recipe_groups: Iterable[RecipeIngredientGroup],
    custom_items: Iterable[CustomItem] = (),
    *,
    classifier: Classifier = classify_ingredient,
) -> Dict[str, AggregatedEntry]:
    """Merge ingredient occurrences sharing an ingredient key.

    Quantities are summed only when the normalized unit matches exactly; the
    same ingredient in different units stays on separate entries.
    """

    accumulator: Dict[str, AggregatedEntry] = {}

    for title, lines in recipe_groups:
        for line in lines:
            _merge(
                accumulator,
                name=line.name,
                quantity=line.quantity,
                unit=line.unit,
                declared_category=line.category,
                source=title,
                classifier=classifier,
            )

    for item in custom_items:
        _merge(
            accumulator,
            name=item.ingredient,
            quantity=item.quantity,
            unit=item.unit,
            declared_category=item.category.value,
            source=item.recipe_title,
            classifier=classifier,
        )

    return accumulator


__all__ = ["AggregatedEntry", "RecipeIngredientGroup", "aggregate"]
