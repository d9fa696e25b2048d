"""Unit tests for the meal plan repository helpers."""

from __future__ import annotations

from datetime import date

import pytest

from julienned.db.meal_plans import (
    clear_meal_plans,
    copy_day,
    get_meal_plan,
    query_meal_plans,
    remove_meal,
    set_meal,
)
from julienned.db.users import get_or_create_user
from julienned.errors import NotFoundError
from julienned.models.meal_plan import MealSlot

MONDAY = date(2024, 3, 4)


def test_set_meal_replaces_slot(user, pancakes, waffles):
    set_meal(user.id, MONDAY, MealSlot.BREAKFAST, pancakes.id)
    plan = set_meal(user.id, MONDAY, MealSlot.BREAKFAST, waffles.id, servings=2)

    assert [(meal.slot, meal.recipe_id) for meal in plan.meals] == [(MealSlot.BREAKFAST, waffles.id)]
    assert plan.meals[0].servings == 2


def test_set_meal_requires_owned_recipe(user, pancakes):
    other = get_or_create_user(token_identifier="issuer|eve", email="eve@example.com")

    with pytest.raises(NotFoundError):
        set_meal(other.id, MONDAY, MealSlot.DINNER, pancakes.id)
    with pytest.raises(NotFoundError):
        set_meal(user.id, MONDAY, MealSlot.DINNER, 9999)


def test_query_meal_plans_is_inclusive_and_ordered(user, pancakes):
    for day in (date(2024, 3, 10), MONDAY, date(2024, 3, 11), date(2024, 3, 3)):
        set_meal(user.id, day, MealSlot.LUNCH, pancakes.id)

    plans = query_meal_plans(user.id, MONDAY, date(2024, 3, 10))

    assert [plan.date for plan in plans] == [MONDAY, date(2024, 3, 10)]


def test_remove_meal_deletes_empty_day(user, pancakes, waffles):
    assert remove_meal(user.id, MONDAY, MealSlot.LUNCH) is None

    set_meal(user.id, MONDAY, MealSlot.BREAKFAST, pancakes.id)
    set_meal(user.id, MONDAY, MealSlot.DINNER, waffles.id)

    remaining = remove_meal(user.id, MONDAY, MealSlot.BREAKFAST)
    assert [meal.slot for meal in remaining.meals] == [MealSlot.DINNER]

    emptied = remove_meal(user.id, MONDAY, MealSlot.DINNER)
    assert emptied.meals == []
    assert query_meal_plans(user.id, MONDAY, MONDAY) == []


def test_copy_day_overwrites_target(user, pancakes, waffles):
    set_meal(user.id, MONDAY, MealSlot.BREAKFAST, pancakes.id)
    set_meal(user.id, date(2024, 3, 5), MealSlot.DINNER, waffles.id)

    copied = copy_day(user.id, MONDAY, date(2024, 3, 5))

    assert [(meal.slot, meal.recipe_id) for meal in copied.meals] == [(MealSlot.BREAKFAST, pancakes.id)]
    assert get_meal_plan(user.id, date(2024, 3, 5)) == copied
    assert copy_day(user.id, date(2024, 3, 20), MONDAY) is None


def test_clear_meal_plans_counts_deleted_days(user, pancakes):
    set_meal(user.id, MONDAY, MealSlot.BREAKFAST, pancakes.id)
    set_meal(user.id, date(2024, 3, 5), MealSlot.BREAKFAST, pancakes.id)

    assert clear_meal_plans(user.id) == 2
    assert clear_meal_plans(user.id) == 0
    assert get_meal_plan(user.id, MONDAY).meals == []
