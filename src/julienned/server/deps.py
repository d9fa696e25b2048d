"""Dependency definitions for the Julienned API server."""

from __future__ import annotations

from datetime import date
from typing import Callable, List, Optional

from fastapi import Depends, Header, HTTPException, Request, status

from julienned.config import Settings, get_settings
from julienned.errors import AuthenticationError
from julienned.db.meal_plans import (
    clear_meal_plans,
    copy_day,
    query_meal_plans,
    remove_meal,
    set_meal,
)
from julienned.db.recipes import (
    create_recipe,
    delete_recipe,
    get_recipe,
    list_recipes,
    search_recipes,
    update_recipe,
)
from julienned.db.users import get_or_create_user, get_user_by_token
from julienned.ingredients.categories import Classifier, make_classifier
from julienned.models.meal_plan import MealPlan, MealSlot
from julienned.models.recipe import Recipe
from julienned.models.user import User
from julienned.shopping.service import ShoppingListService

USER_TOKEN_HEADER = "X-User-Token"

UserRegistrar = Callable[[dict], User]
UserResolver = Callable[[str], Optional[User]]
RecipeCreator = Callable[[dict], Recipe]
RecipeListProvider = Callable[[int], List[Recipe]]
RecipeFetcher = Callable[[int], Optional[Recipe]]
RecipeDeleter = Callable[[int, int], None]
RecipeSearcher = Callable[[int, str], List[Recipe]]
RecipeUpdater = Callable[[int, int, dict], Recipe]
MealPlanRangeProvider = Callable[[int, date, date], List[MealPlan]]
MealSetter = Callable[[int, date, MealSlot, int, Optional[int]], MealPlan]
MealRemover = Callable[[int, date, MealSlot], Optional[MealPlan]]
MealDayCopier = Callable[[int, date, date], Optional[MealPlan]]
MealPlanClearer = Callable[[int], int]


def get_user_registrar() -> UserRegistrar:
    return lambda payload: get_or_create_user(**payload)


def get_user_resolver() -> UserResolver:
    return get_user_by_token


def get_classifier(settings: Settings = Depends(get_settings)) -> Classifier:
    return make_classifier(include_canned=settings.enable_canned_category)


def get_recipe_creator() -> RecipeCreator:
    return lambda payload: create_recipe(**payload)


def get_recipe_list_provider() -> RecipeListProvider:
    return list_recipes


def get_recipe_fetcher() -> RecipeFetcher:
    return get_recipe


def get_recipe_searcher() -> RecipeSearcher:
    return search_recipes


def get_recipe_updater() -> RecipeUpdater:
    return lambda user_id, recipe_id, changes: update_recipe(user_id, recipe_id, **changes)


def get_recipe_deleter() -> RecipeDeleter:
    return delete_recipe


def get_meal_plan_range_provider() -> MealPlanRangeProvider:
    return query_meal_plans


def get_meal_setter() -> MealSetter:
    return set_meal


def get_meal_remover() -> MealRemover:
    return remove_meal


def get_meal_day_copier() -> MealDayCopier:
    return copy_day


def get_meal_plan_clearer() -> MealPlanClearer:
    return clear_meal_plans


def get_shopping_list_service(
    classifier: Classifier = Depends(get_classifier),
) -> ShoppingListService:
    """Return the shopping list service wired to the SQLite storage helpers."""

    return ShoppingListService(classifier=classifier)


def require_api_token(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """Ensure requests carry the configured API token when required."""

    token = settings.api_token
    if not token:
        return

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.split("Bearer ")[-1].strip() == token:
        return

    if request.headers.get("X-API-Key") == token:
        return

    if request.query_params.get("api_token") == token:
        return

    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def get_current_user(
    auth: None = Depends(require_api_token),
    user_token: Optional[str] = Header(default=None, alias=USER_TOKEN_HEADER),
    resolver: UserResolver = Depends(get_user_resolver),
) -> User:
    """Resolve the calling user; unknown identities are rejected, never created."""

    if not user_token or not user_token.strip():
        raise AuthenticationError(f"Missing {USER_TOKEN_HEADER} header")
    user = resolver(user_token.strip())
    if user is None:
        raise AuthenticationError("Unknown user. Register before using the API.")
    return user
