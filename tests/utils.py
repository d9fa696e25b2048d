"""Shared builders for tests."""

from __future__ import annotations

from typing import Optional

from julienned.models.recipe import IngredientLine


def ingredient_lines(*entries: tuple[str, Optional[float], Optional[str]]) -> list[IngredientLine]:
    """Build ingredient lines from ``(item, quantity, unit)`` tuples."""

    built = []
    for item, quantity, unit in entries:
        text = " ".join(str(part) for part in (quantity, unit, item) if part)
        built.append(IngredientLine(text=text, item=item, quantity=quantity, unit=unit))
    return built
