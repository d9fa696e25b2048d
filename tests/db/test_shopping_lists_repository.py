"""Unit tests for the weekly shopping list record helpers."""

from __future__ import annotations

from datetime import date, datetime

from julienned.db.repository import get_engine
from julienned.db.shopping_lists import get_shopping_list, upsert_shopping_list
from julienned.models.shopping import Category, CustomItem, ShoppingListRecord

WEEK = date(2024, 3, 4)


def _record(user_id: int, checked: list[str], custom: list[CustomItem], week: date = WEEK) -> ShoppingListRecord:
    return ShoppingListRecord(
        user_id=user_id,
        week_start=week,
        checked_items=checked,
        custom_items=custom,
        updated_at=datetime(2024, 3, 4, 8, 0, 0),
    )


def test_missing_record_returns_none(user):
    assert get_shopping_list(user.id, WEEK) is None


def test_upsert_creates_then_replaces_whole_record(user):
    item = CustomItem(
        ingredient="coffee",
        quantity=1,
        unit="bag",
        category=Category.BEVERAGES,
        added_at=datetime(2024, 3, 4, 8, 0, 0),
    )
    created = upsert_shopping_list(_record(user.id, ["eggs|"], [item]))
    assert created.id is not None
    assert created.custom_items == [item]

    replaced = upsert_shopping_list(_record(user.id, ["milk|cups"], []))

    assert replaced.id == created.id
    fetched = get_shopping_list(user.id, WEEK)
    assert fetched.checked_items == ["milk|cups"]
    assert fetched.custom_items == []


def test_records_are_scoped_to_week(user):
    upsert_shopping_list(_record(user.id, ["eggs|"], []))
    upsert_shopping_list(_record(user.id, ["salt|"], [], week=date(2024, 3, 11)))

    assert get_shopping_list(user.id, WEEK).checked_items == ["eggs|"]
    assert get_shopping_list(user.id, date(2024, 3, 11)).checked_items == ["salt|"]


def test_corrupt_json_columns_load_as_empty(user):
    saved = upsert_shopping_list(_record(user.id, ["eggs|"], []))
    with get_engine().begin() as connection:
        connection.exec_driver_sql(
            "UPDATE shopping_lists SET checked_items = 'not json' WHERE id = ?", (saved.id,)
        )

    assert get_shopping_list(user.id, WEEK).checked_items == []
