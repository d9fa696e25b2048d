"""Basic smoke tests for the shopping list engine."""

from julienned.shopping import aggregate, build_shopping_list
from tests.utils import ingredient_lines


def test_aggregate_and_build_list() -> None:
    aggregated = aggregate([("Omelette", ingredient_lines(("eggs", 3, None)))])
    items = build_shopping_list(aggregated)

    assert [item.key for item in items] == ["eggs|"]
    assert items[0].recipes == ["Omelette"]
