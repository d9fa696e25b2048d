"""Tests for rendering aggregated entries into an ordered list."""

from __future__ import annotations

import pytest

from julienned.models.shopping import Category
from julienned.shopping.aggregator import AggregatedEntry
from julienned.shopping.list_builder import build_shopping_list


def _entry(name: str, category: Category, quantity: float = 1.0, unit: str = "") -> AggregatedEntry:
    return AggregatedEntry(ingredient=name, quantity=quantity, unit=unit, category=category)


def test_items_sorted_by_category_then_name_with_ids_in_aggregation_order():
    aggregated = {
        "milk|": _entry("milk", Category.DAIRY),
        "apple|": _entry("apple", Category.PRODUCE),
        "eggs|": _entry("eggs", Category.DAIRY, 12),
    }

    items = build_shopping_list(aggregated)

    assert [item.ingredient for item in items] == ["apple", "eggs", "milk"]
    assert [item.id for item in items] == [2, 3, 1]
    assert items[1].quantity == pytest.approx(12.0)


def test_names_compare_case_insensitively_with_lowercase_first_on_ties():
    aggregated = {
        "basil|bunch": _entry("Basil", Category.PRODUCE, unit="bunch"),
        "Avocado|": _entry("Avocado", Category.PRODUCE),
        "basil|": _entry("basil", Category.PRODUCE),
    }

    items = build_shopping_list(aggregated)

    assert [item.key for item in items] == ["Avocado|", "basil|", "basil|bunch"]


def test_identical_names_keep_aggregation_order():
    aggregated = {
        "rice|cups": _entry("rice", Category.PANTRY, 2, "cups"),
        "rice|": _entry("rice", Category.PANTRY),
        "rice|g": _entry("rice", Category.PANTRY, 500, "g"),
    }

    items = build_shopping_list(aggregated)

    assert [item.key for item in items] == ["rice|cups", "rice|", "rice|g"]


def test_categories_outside_display_order_sort_last():
    aggregated = {
        "tomato paste|": _entry("tomato paste", Category.CANNED),
        "napkins|": _entry("napkins", Category.OTHER),
        "rice|": _entry("rice", Category.PANTRY),
    }

    items = build_shopping_list(aggregated)

    assert [item.category for item in items] == [Category.PANTRY, Category.OTHER, Category.CANNED]


def test_checked_flag_and_empty_unit():
    entry = _entry("salt", Category.PANTRY)
    entry.add_source("Soup")
    entry.add_source("Soup")
    aggregated = {"salt|": entry, "rice|cups": _entry("rice", Category.PANTRY, 2, "cups")}

    items = {item.key: item for item in build_shopping_list(aggregated, checked_keys=["salt|", "stale|"])}

    assert items["salt|"].checked is True
    assert items["salt|"].unit is None
    assert items["salt|"].recipes == ["Soup"]
    assert items["rice|cups"].checked is False
    assert items["rice|cups"].unit == "cups"


def test_empty_aggregation_builds_empty_list():
    assert build_shopping_list({}) == []
