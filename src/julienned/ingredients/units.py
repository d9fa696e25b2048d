"""Unit normalization for ingredient aggregation."""

from __future__ import annotations

from typing import Optional

UNIT_ALIASES: dict[str, str] = {
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tbsps": "tbsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tsps": "tsp",
    "cup": "cups",
    "ounce": "oz",
    "ounces": "oz",
    "pound": "lbs",
    "pounds": "lbs",
    "lb": "lbs",
    "clove": "cloves",
}


def normalize_unit(unit: Optional[str]) -> str:
    """Return the canonical spelling of ``unit`` ("" when absent).

    Unknown units are only lowercased and trimmed.
    """
    if not unit:
        return ""
    normalized = unit.strip().lower()
    return UNIT_ALIASES.get(normalized, normalized)


__all__ = ["UNIT_ALIASES", "normalize_unit"]
