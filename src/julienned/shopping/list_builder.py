"""Render aggregated entries as an ordered, categorized shopping list."""

from __future__ import annotations

from typing import Iterable, List, Mapping

from julienned.ingredients.categories import category_rank
from julienned.models.shopping import ShoppingItem

from .aggregator import AggregatedEntry


def build_shopping_list(
    aggregated: Mapping[str, AggregatedEntry],
    *,
    checked_keys: Iterable[str] = (),
) -> List[ShoppingItem]:
    """Number entries in aggregation order, then sort by section and name.

    ``sorted`` is stable, so entries with equal section and name keep their
    aggregation order.
    """

    checked = set(checked_keys)
    items: List[ShoppingItem] = []
    for index, (key, entry) in enumerate(aggregated.items(), start=1):
        items.append(
            ShoppingItem(
                id=index,
                key=key,
                ingredient=entry.ingredient,
                quantity=entry.quantity if entry.quantity > 0 else None,
                unit=entry.unit or None,
                category=entry.category,
                recipes=entry.sources,
                checked=key in checked,
            )
        )

    # Names compare case-insensitively; exact ties put lowercase first.
    return sorted(
        items,
        key=lambda item: (
            category_rank(item.category),
            item.ingredient.casefold(),
            item.ingredient.swapcase(),
        ),
    )


__all__ = ["build_shopping_list"]
