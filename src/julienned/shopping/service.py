"""Shopping list generation and weekly record mutations."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Callable, Iterable, List, Optional, Sequence

from julienned import metrics
from julienned.db.meal_plans import query_meal_plans
from julienned.db.recipes import get_recipe
from julienned.db.shopping_lists import get_shopping_list, upsert_shopping_list
from julienned.errors import NotFoundError
from julienned.ingredients.categories import Classifier, classify_ingredient, resolve_category
from julienned.ingredients.keys import canonical_key
from julienned.models.meal_plan import MealPlan
from julienned.models.recipe import Recipe
from julienned.models.shopping import (
    CustomItem,
    GeneratedShoppingList,
    ShoppingListRecord,
)

from .aggregator import RecipeIngredientGroup, aggregate
from .export import render_text
from .list_builder import build_shopping_list

logger = logging.getLogger(__name__)

MealPlanQuery = Callable[[int, date, date], List[MealPlan]]
RecipeFetcher = Callable[[int], Optional[Recipe]]
ShoppingListFetcher = Callable[[int, date], Optional[ShoppingListRecord]]
ShoppingListUpserter = Callable[[ShoppingListRecord], ShoppingListRecord]


def _utcnow() -> datetime:
    # SQLite DateTime columns are naive; store UTC.
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ShoppingListService:
    """Derive shopping lists from meal plans and maintain weekly list records.

    Every operation takes the resolved ``user_id`` of the caller. Record
    mutations are read-modify-write cycles against the storage collaborators
    and the final write replaces the record (last-writer-wins).
    """

    def __init__(
        self,
        *,
        meal_plan_query: MealPlanQuery = query_meal_plans,
        recipe_fetcher: RecipeFetcher = get_recipe,
        list_fetcher: ShoppingListFetcher = get_shopping_list,
        list_upserter: ShoppingListUpserter = upsert_shopping_list,
        classifier: Classifier = classify_ingredient,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._meal_plan_query = meal_plan_query
        self._recipe_fetcher = recipe_fetcher
        self._list_fetcher = list_fetcher
        self._list_upserter = list_upserter
        self._classifier = classifier
        self._clock = clock

    # ------------------------------------------------------------------ reads

    def generate_from_meal_plans(
        self, user_id: int, start_date: date, end_date: date
    ) -> GeneratedShoppingList:
        """Aggregate the ingredients of every recipe planned between the dates.

        Custom items and checked state come from the record anchored at
        ``start_date``. Recipes that cannot be loaded are logged and skipped.
        """

        plans = self._meal_plan_query(user_id, start_date, end_date)
        meal_count = sum(len(plan.meals) for plan in plans)

        recipe_ids: dict[int, None] = {}
        for plan in plans:
            for meal in plan.meals:
                recipe_ids.setdefault(meal.recipe_id, None)

        groups: List[RecipeIngredientGroup] = []
        for recipe_id in recipe_ids:
            recipe = self._load_recipe(recipe_id)
            if recipe is not None:
                groups.append((recipe.title, recipe.ingredients))

        record = self._list_fetcher(user_id, start_date)
        custom_items: Sequence[CustomItem] = record.custom_items if record else ()
        checked = record.checked_items if record else ()

        aggregated = aggregate(groups, custom_items, classifier=self._classifier)
        items = build_shopping_list(aggregated, checked_keys=checked)

        metrics.SHOPPING_LISTS_GENERATED.inc()
        logger.info(
            "Generated shopping list user=%s range=%s..%s items=%s recipes=%s meals=%s",
            user_id,
            start_date,
            end_date,
            len(items),
            len(groups),
            meal_count,
        )
        return GeneratedShoppingList(
            week_start=start_date,
            items=items,
            recipe_count=len(groups),
            meal_count=meal_count,
            custom_item_count=len(custom_items),
        )

    def export_text(
        self,
        user_id: int,
        start_date: date,
        end_date: date,
        *,
        include_checked: bool = False,
    ) -> str:
        generated = self.generate_from_meal_plans(user_id, start_date, end_date)
        return render_text(generated.items, include_checked=include_checked)

    def get_saved(self, user_id: int, week_start: date) -> Optional[ShoppingListRecord]:
        return self._list_fetcher(user_id, week_start)

    # -------------------------------------------------------------- mutations

    def save_checked_items(self, user_id: int, week_start: date, keys: Iterable[str]) -> int:
        """Replace the checked keys of the week's record, creating it when absent."""

        existing = self._list_fetcher(user_id, week_start)
        custom_items = existing.custom_items if existing else []
        saved = self._write(user_id, week_start, list(keys), custom_items, "save_checked")
        return saved.id

    def add_recipe_to_list(self, user_id: int, week_start: date, recipe_id: int) -> int:
        """Append every ingredient line of a recipe as custom items."""

        recipe = self._recipe_fetcher(recipe_id)
        if recipe is None or recipe.user_id != user_id:
            raise NotFoundError(f"Recipe {recipe_id} not found")

        added_at = self._clock()
        new_items = [
            CustomItem(
                ingredient=line.name,
                quantity=line.quantity,
                unit=line.unit,
                category=resolve_category(line.category, line.name, self._classifier),
                recipe_id=recipe.id,
                recipe_title=recipe.title,
                added_at=added_at,
            )
            for line in recipe.ingredients
            if line.name
        ]

        existing = self._list_fetcher(user_id, week_start)
        checked = existing.checked_items if existing else []
        custom_items = [*(existing.custom_items if existing else []), *new_items]
        saved = self._write(user_id, week_start, checked, custom_items, "add_recipe")
        logger.info(
            "Added %s item(s) from recipe %s to list user=%s week=%s",
            len(new_items),
            recipe_id,
            user_id,
            week_start,
        )
        return saved.id

    def add_custom_item(
        self,
        user_id: int,
        week_start: date,
        *,
        ingredient: str,
        quantity: Optional[float] = None,
        unit: Optional[str] = None,
        category: Optional[str] = None,
    ) -> int:
        """Append an ad-hoc entry typed in by the user.

        Raises ``ValueError`` when the name is blank after trimming.
        """

        name = ingredient.strip()
        if not name:
            raise ValueError("Custom item name must not be blank")
        item = CustomItem(
            ingredient=name,
            quantity=quantity,
            unit=unit.strip() if unit else None,
            category=resolve_category(category, name, self._classifier),
            added_at=self._clock(),
        )
        existing = self._list_fetcher(user_id, week_start)
        checked = existing.checked_items if existing else []
        custom_items = [*(existing.custom_items if existing else []), item]
        saved = self._write(user_id, week_start, checked, custom_items, "add_item")
        return saved.id

    def remove_item(self, user_id: int, week_start: date, key: str) -> Optional[int]:
        """Drop custom items and the checked flag matching ``key``.

        Missing records and malformed keys are no-ops so removal stays idempotent.
        """

        existing = self._list_fetcher(user_id, week_start)
        if existing is None:
            return None

        target = canonical_key(key)
        if target is None:
            logger.debug("Ignoring malformed shopping item key %r", key)
            return existing.id

        custom_items = [item for item in existing.custom_items if item.key != target]
        checked = [
            entry
            for entry in existing.checked_items
            if entry != key and canonical_key(entry) != target
        ]
        saved = self._write(user_id, week_start, checked, custom_items, "remove_item")
        return saved.id

    def clear_custom_items(self, user_id: int, week_start: date) -> Optional[int]:
        """Drop all custom items, keeping the checked state."""

        existing = self._list_fetcher(user_id, week_start)
        if existing is None:
            return None
        saved = self._write(user_id, week_start, existing.checked_items, [], "clear_custom")
        return saved.id

    # ---------------------------------------------------------------- helpers

    def _load_recipe(self, recipe_id: int) -> Optional[Recipe]:
        try:
            recipe = self._recipe_fetcher(recipe_id)
        except Exception:
            logger.exception("Failed to fetch recipe %s; skipping", recipe_id)
            metrics.RECIPE_FETCH_FAILURES.labels(reason="error").inc()
            return None
        if recipe is None:
            logger.warning("Planned recipe %s no longer exists; skipping", recipe_id)
            metrics.RECIPE_FETCH_FAILURES.labels(reason="missing").inc()
        return recipe

    def _write(
        self,
        user_id: int,
        week_start: date,
        checked_items: Iterable[str],
        custom_items: Iterable[CustomItem],
        operation: str,
    ) -> ShoppingListRecord:
        record = ShoppingListRecord(
            user_id=user_id,
            week_start=week_start,
            checked_items=list(checked_items),
            custom_items=list(custom_items),
            updated_at=self._clock(),
        )
        saved = self._list_upserter(record)
        metrics.SHOPPING_LIST_MUTATIONS.labels(operation=operation).inc()
        return saved


__all__ = ["ShoppingListService"]
