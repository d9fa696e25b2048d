"""Tests for unit normalization."""

from __future__ import annotations

import pytest

from julienned.ingredients.units import UNIT_ALIASES, normalize_unit


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Tablespoons", "tbsp"),
        ("teaspoon", "tsp"),
        ("TSPS", "tsp"),
        ("cup", "cups"),
        ("CUPS", "cups"),
        ("ounces", "oz"),
        ("lb", "lbs"),
        ("Pound", "lbs"),
        ("clove", "cloves"),
        ("  g ", "g"),
        ("Pinch", "pinch"),
    ],
)
def test_normalize_unit_folds_aliases(raw, expected):
    assert normalize_unit(raw) == expected


@pytest.mark.parametrize("raw", [None, ""])
def test_missing_unit_normalizes_to_empty_string(raw):
    assert normalize_unit(raw) == ""


@pytest.mark.parametrize("raw", [*UNIT_ALIASES, "Cups", "bunch", "ml", ""])
def test_normalize_unit_is_idempotent(raw):
    once = normalize_unit(raw)
    assert normalize_unit(once) == once
