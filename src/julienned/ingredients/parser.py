"""Heuristic parser turning a free-text ingredient line into structured fields."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Union

from julienned.models.recipe import IngredientLine

from .categories import Classifier, classify_ingredient

_UNIT_PATTERN = re.compile(
    r"^(cups?|tbsp|tsp|tablespoons?|teaspoons?|oz|ounces?|lbs?|pounds?|g|grams?|kg|"
    r"kilograms?|ml|milliliters?|l|liters?|pinch|dash|cloves?|cans?|packages?|bunche?s?|"
    r"slices?|pieces?|heads?|stalks?|sprigs?|leaves?)\.?$",
    re.IGNORECASE,
)

_QUANTITY_PATTERN = re.compile(
    r"^(\d+/\d+|\d+(?:\.\d+)?(?:\s*[-–]\s*\d+(?:\.\d+)?)?(?:\s+\d+/\d+)?)\s*"
)

_UNICODE_FRACTIONS = {
    "½": 0.5,
    "⅓": 0.333,
    "⅔": 0.667,
    "¼": 0.25,
    "¾": 0.75,
    "⅛": 0.125,
    "⅜": 0.375,
    "⅝": 0.625,
    "⅞": 0.875,
}


def _replace_fractions(text: str) -> str:
    for glyph, value in _UNICODE_FRACTIONS.items():
        if glyph in text:
            # "1½" reads as one and a half
            text = re.sub(rf"(\d+)\s*{glyph}", lambda m: str(int(m.group(1)) + value), text)
            text = text.replace(glyph, str(value))
    return text


def _parse_quantity(raw: str) -> Optional[float]:
    if re.search(r"[-–]", raw):
        first = re.search(r"\d+(?:\.\d+)?", raw)
        return float(first.group(0)) if first else None

    total = 0.0
    for part in raw.split():
        if "/" in part:
            numerator, denominator = part.split("/", 1)
            if float(denominator) == 0:
                return None
            total += float(numerator) / float(denominator)
        else:
            total += float(part)
    return total


def parse_ingredient(text: str, *, classifier: Classifier = classify_ingredient) -> IngredientLine:
    """Parse lines such as ``"2 1/2 cups flour, sifted"``.

    Ranges keep their lower bound and the text after the last comma becomes
    the preparation note.
    """

    remaining = text.strip()
    preparation: Optional[str] = None

    comma = remaining.rfind(",")
    if comma > 0:
        preparation = remaining[comma + 1 :].strip() or None
        remaining = remaining[:comma].strip()

    remaining = _replace_fractions(remaining)

    quantity: Optional[float] = None
    match = _QUANTITY_PATTERN.match(remaining)
    if match:
        quantity = _parse_quantity(match.group(1))
        remaining = remaining[match.end() :].strip()

    unit: Optional[str] = None
    words = remaining.split()
    if words and _UNIT_PATTERN.match(words[0]):
        unit = words[0].lower().rstrip(".")
        remaining = " ".join(words[1:]).strip()

    item = remaining or None
    category = classifier(item or text)

    return IngredientLine(
        text=text,
        quantity=quantity,
        unit=unit,
        item=item,
        preparation=preparation,
        category=category.value,
    )


def parse_ingredients(
    entries: Iterable[Union[str, IngredientLine]],
    *,
    classifier: Classifier = classify_ingredient,
) -> List[IngredientLine]:
    """Parse free-text entries and pass structured ones through; blank text is dropped."""

    lines: List[IngredientLine] = []
    for entry in entries:
        if isinstance(entry, IngredientLine):
            lines.append(entry)
        elif entry and entry.strip():
            lines.append(parse_ingredient(entry, classifier=classifier))
    return lines


__all__ = ["parse_ingredient", "parse_ingredients"]
