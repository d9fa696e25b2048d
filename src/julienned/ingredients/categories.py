"""Keyword-based ingredient category classification."""

from __future__ import annotations

import logging
from functools import partial
from typing import Callable, Optional

from julienned.models.shopping import Category

logger = logging.getLogger(__name__)

Classifier = Callable[[str], Category]

# Display/sort order of shopping list sections. Categories missing here sort last.
CATEGORY_ORDER: tuple[Category, ...] = (
    Category.PRODUCE,
    Category.MEAT_SEAFOOD,
    Category.DAIRY,
    Category.BAKERY,
    Category.PANTRY,
    Category.FROZEN,
    Category.SPICES,
    Category.CONDIMENTS,
    Category.BEVERAGES,
    Category.OTHER,
)

CATEGORY_LABELS: dict[Category, str] = {
    Category.PRODUCE: "Produce",
    Category.MEAT_SEAFOOD: "Meat & Seafood",
    Category.DAIRY: "Dairy",
    Category.BAKERY: "Bakery",
    Category.PANTRY: "Pantry",
    Category.FROZEN: "Frozen",
    Category.CANNED: "Canned",
    Category.SPICES: "Spices",
    Category.CONDIMENTS: "Condiments",
    Category.BEVERAGES: "Beverages",
    Category.OTHER: "Other",
}

CATEGORY_KEYWORDS: dict[Category, tuple[str, ...]] = {
    Category.PRODUCE: (
        "lettuce", "tomato", "onion", "garlic", "carrot", "potato", "celery",
        "pepper", "cucumber", "spinach", "kale", "broccoli", "cauliflower",
        "mushroom", "zucchini", "squash", "corn", "peas", "beans", "lemon",
        "lime", "orange", "apple", "banana", "berry", "avocado", "herb",
        "basil", "cilantro", "parsley", "mint", "rosemary", "thyme", "ginger",
    ),
    Category.MEAT_SEAFOOD: (
        "chicken", "beef", "pork", "lamb", "turkey", "bacon", "sausage",
        "ham", "steak", "ground", "salmon", "tuna", "shrimp", "fish",
        "crab", "lobster", "scallop", "cod", "tilapia", "anchovy",
    ),
    Category.DAIRY: (
        "milk", "cheese", "butter", "cream", "yogurt", "sour cream",
        "cottage cheese", "ricotta", "mozzarella", "parmesan", "cheddar",
        "egg", "eggs",
    ),
    Category.BAKERY: (
        "bread", "roll", "bun", "bagel", "croissant", "tortilla", "pita",
        "naan", "baguette",
    ),
    Category.PANTRY: (
        "flour", "sugar", "salt", "oil", "vinegar", "rice", "pasta",
        "noodle", "cereal", "oat", "quinoa", "lentil", "chickpea",
        "bean", "nut", "seed", "honey", "syrup", "vanilla", "baking",
    ),
    Category.FROZEN: ("frozen", "ice cream"),
    Category.CANNED: ("canned", "tomato sauce", "tomato paste", "broth", "stock", "coconut milk"),
    Category.SPICES: (
        "black pepper", "white pepper", "pepper flakes", "peppercorn",
        "garlic powder", "onion powder", "chipotle powder", "chili powder",
        "cumin", "paprika", "cinnamon", "nutmeg", "oregano", "cayenne",
        "basil", "thyme", "rosemary", "bay leaf", "curry", "turmeric",
        "seasoning", "spice", "powder",
    ),
    Category.CONDIMENTS: (
        "ketchup", "mustard", "mayo", "mayonnaise", "soy sauce", "hot sauce",
        "worcestershire", "bbq", "salsa", "sriracha", "ranch", "dressing",
    ),
    Category.BEVERAGES: ("juice", "wine", "beer", "coffee", "tea", "water", "soda"),
}

# Specific sections are tried before generic ones so "onion powder" is a spice, not produce.
_CLASSIFY_PRIORITY: tuple[Category, ...] = (
    Category.SPICES,
    Category.CANNED,
    Category.CONDIMENTS,
    Category.DAIRY,
    Category.MEAT_SEAFOOD,
    Category.BAKERY,
    Category.FROZEN,
    Category.BEVERAGES,
    Category.PANTRY,
    Category.PRODUCE,
)

_SORTED_KEYWORDS: dict[Category, tuple[str, ...]] = {
    category: tuple(sorted(keywords, key=len, reverse=True))
    for category, keywords in CATEGORY_KEYWORDS.items()
}


def classify_ingredient(name: str, *, include_canned: bool = False) -> Category:
    """Classify an ingredient name into a shopping category by keyword match."""

    lower = name.lower()
    for category in _CLASSIFY_PRIORITY:
        if category is Category.CANNED and not include_canned:
            continue
        for keyword in _SORTED_KEYWORDS[category]:
            if keyword in lower:
                return category
    return Category.OTHER


def make_classifier(include_canned: bool = False) -> Classifier:
    return partial(classify_ingredient, include_canned=include_canned)


def coerce_category(value: Optional[str]) -> Optional[Category]:
    """Map a declared category string onto the enumeration, ``None`` if unknown."""
    if value is None:
        return None
    if isinstance(value, Category):
        return value
    try:
        return Category(value.strip().lower())
    except ValueError:
        logger.debug("Ignoring unrecognised ingredient category %r", value)
        return None


def resolve_category(declared: Optional[str], name: str, classifier: Classifier) -> Category:
    """Return the declared category, classifying only when it is absent or generic."""

    category = coerce_category(declared)
    if category is None or category is Category.OTHER:
        return classifier(name)
    return category


def category_rank(category: Category) -> int:
    try:
        return CATEGORY_ORDER.index(category)
    except ValueError:
        return len(CATEGORY_ORDER)


__all__ = [
    "Classifier",
    "CATEGORY_ORDER",
    "CATEGORY_LABELS",
    "CATEGORY_KEYWORDS",
    "classify_ingredient",
    "make_classifier",
    "coerce_category",
    "resolve_category",
    "category_rank",
]
