"""Data access helpers for meal plans."""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from julienned.errors import NotFoundError
from julienned.models.meal_plan import MealPlan, MealSlot, PlannedMeal

from .models import MealPlanORM, RecipeORM
from .repository import dump_json, load_json_list, session_scope

logger = logging.getLogger(__name__)


def _to_model(row: MealPlanORM) -> MealPlan:
    return MealPlan.model_validate({"date": row.date, "meals": load_json_list(row.meals)})


def _dump_meals(meals: List[PlannedMeal]) -> str:
    return dump_json([meal.model_dump(mode="json", exclude_none=True) for meal in meals])


def _find_plan(session: Session, user_id: int, day: date) -> Optional[MealPlanORM]:
    return session.execute(
        select(MealPlanORM).where(MealPlanORM.user_id == user_id, MealPlanORM.date == day)
    ).scalar_one_or_none()


def query_meal_plans(user_id: int, start_date: date, end_date: date) -> List[MealPlan]:
    """Return the user's meal plans with ``start_date <= date <= end_date``."""

    with session_scope() as session:
        rows = (
            session.execute(
                select(MealPlanORM)
                .where(
                    MealPlanORM.user_id == user_id,
                    MealPlanORM.date >= start_date,
                    MealPlanORM.date <= end_date,
                )
                .order_by(MealPlanORM.date.asc())
            )
            .scalars()
            .all()
        )
        return [_to_model(row) for row in rows]


def get_meal_plan(user_id: int, day: date) -> MealPlan:
    with session_scope() as session:
        row = _find_plan(session, user_id, day)
        if row is None:
            return MealPlan(date=day, meals=[])
        return _to_model(row)


def set_meal(
    user_id: int,
    day: date,
    slot: MealSlot,
    recipe_id: int,
    servings: Optional[int] = None,
) -> MealPlan:
    """Place a recipe in a slot, replacing whatever the slot held."""

    with session_scope() as session:
        recipe = session.get(RecipeORM, recipe_id)
        if recipe is None or recipe.user_id != user_id:
            raise NotFoundError(f"Recipe {recipe_id} not found")

        new_meal = PlannedMeal(slot=slot, recipe_id=recipe_id, servings=servings)
        row = _find_plan(session, user_id, day)
        if row is None:
            row = MealPlanORM(user_id=user_id, date=day, meals=_dump_meals([new_meal]))
            session.add(row)
        else:
            meals = [meal for meal in _to_model(row).meals if meal.slot != slot]
            meals.append(new_meal)
            row.meals = _dump_meals(meals)
        session.flush()
        return _to_model(row)


def remove_meal(user_id: int, day: date, slot: MealSlot) -> Optional[MealPlan]:
    """Clear a slot; the day's plan is deleted once it holds no meals."""

    with session_scope() as session:
        row = _find_plan(session, user_id, day)
        if row is None:
            return None

        meals = [meal for meal in _to_model(row).meals if meal.slot != slot]
        if not meals:
            session.delete(row)
            return MealPlan(date=day, meals=[])
        row.meals = _dump_meals(meals)
        session.flush()
        return _to_model(row)


def copy_day(user_id: int, source_date: date, target_date: date) -> Optional[MealPlan]:
    """Replace the target day's meals with the source day's meals."""

    with session_scope() as session:
        source = _find_plan(session, user_id, source_date)
        if source is None or not load_json_list(source.meals):
            return None

        target = _find_plan(session, user_id, target_date)
        if target is None:
            target = MealPlanORM(user_id=user_id, date=target_date, meals=source.meals)
            session.add(target)
        else:
            target.meals = source.meals
        session.flush()
        return _to_model(target)


def clear_meal_plans(user_id: int) -> int:
    with session_scope() as session:
        rows = (
            session.execute(select(MealPlanORM).where(MealPlanORM.user_id == user_id))
            .scalars()
            .all()
        )
        for row in rows:
            session.delete(row)
    logger.info("Cleared %s meal plan(s) for user %s", len(rows), user_id)
    return len(rows)


__all__ = [
    "query_meal_plans",
    "get_meal_plan",
    "set_meal",
    "remove_meal",
    "copy_day",
    "clear_meal_plans",
]
