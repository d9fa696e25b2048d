"""Recipe persistence helpers."""

from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import select

from julienned.errors import NotFoundError
from julienned.models.recipe import IngredientLine, Recipe

from .models import RecipeORM
from .repository import dump_json, load_json_list, session_scope


def _to_model(row: RecipeORM) -> Recipe:
    return Recipe.model_validate(
        {
            "id": row.id,
            "user_id": row.user_id,
            "title": row.title,
            "source_url": row.source_url,
            "description": row.description,
            "ingredients": load_json_list(row.ingredients),
            "instructions": load_json_list(row.instructions),
            "servings": row.servings,
            "user_modified": row.user_modified,
            "created_at": row.created_at,
        }
    )


def create_recipe(
    *,
    user_id: int,
    title: str,
    ingredients: Iterable[IngredientLine],
    instructions: Iterable[str] = (),
    servings: Optional[int] = None,
    source_url: Optional[str] = None,
    description: Optional[str] = None,
) -> Recipe:
    with session_scope() as session:
        row = RecipeORM(
            user_id=user_id,
            title=title.strip(),
            source_url=source_url,
            description=description,
            ingredients=dump_json(
                [line.model_dump(mode="json", exclude_none=True) for line in ingredients]
            ),
            instructions=dump_json([step for step in instructions if step.strip()]),
            servings=servings,
        )
        session.add(row)
        session.flush()
        session.refresh(row)
        return _to_model(row)


def get_recipe(recipe_id: int) -> Optional[Recipe]:
    with session_scope() as session:
        row = session.get(RecipeORM, recipe_id)
        if row is None:
            return None
        return _to_model(row)


def list_recipes(user_id: int) -> List[Recipe]:
    """Return a user's recipes, newest first."""

    with session_scope() as session:
        rows = (
            session.execute(
                select(RecipeORM)
                .where(RecipeORM.user_id == user_id)
                .order_by(RecipeORM.created_at.desc(), RecipeORM.id.desc())
            )
            .scalars()
            .all()
        )
        return [_to_model(row) for row in rows]


def search_recipes(user_id: int, query: str) -> List[Recipe]:
    """Return the user's recipes whose title contains ``query``, ignoring case."""

    needle = query.strip()
    if not needle:
        return list_recipes(user_id)
    with session_scope() as session:
        rows = (
            session.execute(
                select(RecipeORM)
                .where(RecipeORM.user_id == user_id)
                .where(RecipeORM.title.icontains(needle, autoescape=True))
                .order_by(RecipeORM.created_at.desc(), RecipeORM.id.desc())
            )
            .scalars()
            .all()
        )
        return [_to_model(row) for row in rows]


def update_recipe(
    user_id: int,
    recipe_id: int,
    *,
    title: Optional[str] = None,
    ingredients: Optional[Iterable[IngredientLine]] = None,
    instructions: Optional[Iterable[str]] = None,
    servings: Optional[int] = None,
) -> Recipe:
    """Patch the given fields and flag the recipe as edited by its owner.

    ``None`` leaves a field unchanged. The next generated shopping list picks
    up edited ingredients; lines already copied onto a saved list are not
    touched.
    """

    with session_scope() as session:
        row = session.get(RecipeORM, recipe_id)
        if row is None or row.user_id != user_id:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        if title is not None:
            row.title = title.strip()
        if ingredients is not None:
            row.ingredients = dump_json(
                [line.model_dump(mode="json", exclude_none=True) for line in ingredients]
            )
        if instructions is not None:
            row.instructions = dump_json([step for step in instructions if step.strip()])
        if servings is not None:
            row.servings = servings
        row.user_modified = True
        session.flush()
        session.refresh(row)
        return _to_model(row)


def delete_recipe(user_id: int, recipe_id: int) -> None:
    with session_scope() as session:
        row = session.get(RecipeORM, recipe_id)
        if row is None or row.user_id != user_id:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        session.delete(row)


__all__ = [
    "create_recipe",
    "get_recipe",
    "list_recipes",
    "search_recipes",
    "update_recipe",
    "delete_recipe",
]
