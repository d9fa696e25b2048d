"""Plain-text rendering of a shopping list for sharing."""

from __future__ import annotations

from itertools import groupby
from typing import Iterable, Optional

from julienned.ingredients.categories import CATEGORY_LABELS
from julienned.models.shopping import ShoppingItem

TITLE = "Shopping List"


def format_quantity(quantity: Optional[float], unit: Optional[str]) -> str:
    if not quantity:
        return ""
    text = str(int(quantity)) if float(quantity).is_integer() else f"{quantity:.1f}"
    return f"{text} {unit}" if unit else text


def format_item(item: ShoppingItem) -> str:
    amount = format_quantity(item.quantity, item.unit)
    return f"  {amount} {item.ingredient}" if amount else f"  {item.ingredient}"


def render_text(items: Iterable[ShoppingItem], *, include_checked: bool = False) -> str:
    """Render items grouped under section labels, skipping checked items by default.

    ``items`` are expected in list-builder order so each section is contiguous.
    """

    visible = [item for item in items if include_checked or not item.checked]
    sections = []
    for category, group in groupby(visible, key=lambda item: item.category):
        lines = "\n".join(format_item(item) for item in group)
        sections.append(f"{CATEGORY_LABELS[category]}:\n{lines}")

    if not sections:
        return TITLE
    return f"{TITLE}\n\n" + "\n\n".join(sections)


__all__ = ["format_quantity", "format_item", "render_text"]
