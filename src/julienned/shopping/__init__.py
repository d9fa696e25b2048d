"""Shopping list aggregation engine."""

from julienned.shopping.aggregator import AggregatedEntry, aggregate
from julienned.shopping.list_builder import build_shopping_list
from julienned.shopping.service import ShoppingListService

__all__ = ["AggregatedEntry", "aggregate", "build_shopping_list", "ShoppingListService"]
