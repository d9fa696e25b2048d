"""ASGI application for Julienned."""
# mypy: ignore-errors

from __future__ import annotations

import logging
from datetime import date, timedelta
from time import perf_counter
from typing import Any, Optional, Union
from uuid import uuid4

from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, ConfigDict, Field

from julienned import __version__, metrics
from julienned.config import Settings, get_settings
from julienned.errors import AuthenticationError, NotFoundError
from julienned.ingredients.categories import Classifier
from julienned.ingredients.parser import parse_ingredients
from julienned.logging_utils import configure_logging as configure_app_logging
from julienned.logging_utils import log_context
from julienned.models.meal_plan import MealPlan, MealSlot
from julienned.models.recipe import IngredientLine, Recipe
from julienned.models.shopping import Category, GeneratedShoppingList, ShoppingListRecord
from julienned.models.user import User
from julienned.server import deps
from julienned.shopping.service import ShoppingListService
from julienned.shopping.weeks import week_bounds

logger = logging.getLogger(__name__)


def _json_safe(value: Any) -> Any:
    """Convert non-serializable values into JSON-safe representations."""

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, (list, tuple)):
        return [_json_safe(entry) for entry in value]
    if isinstance(value, dict):
        return {key: _json_safe(sub_value) for key, sub_value in value.items()}
    return repr(value)


def _configure_logging(settings: Settings) -> None:
    configure_app_logging(settings.log_level, settings.log_format, [settings.api_token or ""])


def _resolve_range(
    start_date: Optional[date], end_date: Optional[date], settings: Settings
) -> tuple[date, date]:
    if start_date is None:
        return week_bounds(date.today(), settings.week_starts_on)
    if end_date is None:
        return start_date, start_date + timedelta(days=6)
    if end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_date must not be before start_date",
        )
    return start_date, end_date


def create_app() -> FastAPI:
    """Create and configure a FastAPI application instance."""

    settings = get_settings()
    _configure_logging(settings)

    application = FastAPI(title="Julienned Recipes", version=__version__)
    logger.debug("Application created with log level %s", settings.log_level)

    if settings.log_requests:
        access_logger = logging.getLogger("julienned.access")

        @application.middleware("http")
        async def log_request_response(request: Request, call_next):
            """Log request/response details and record request metrics."""

            request_id = request.headers.get("X-Request-ID") or uuid4().hex
            request.state.request_id = request_id
            start = perf_counter()
            method = request.method
            try:
                with log_context(request_id=request_id):
                    response: Response = await call_next(request)
            except Exception:
                duration_ms = (perf_counter() - start) * 1000
                access_logger.exception(
                    "HTTP %s %s status=500 duration_ms=%.2f",
                    method,
                    request.url.path,
                    duration_ms,
                    extra={"request_id": request_id},
                )
                metrics.REQUEST_COUNT.labels(method=method, path=request.url.path, status="500").inc()
                raise

            duration_ms = (perf_counter() - start) * 1000
            route = request.scope.get("route")
            path = getattr(route, "path", request.url.path)
            response.headers.setdefault("X-Request-ID", request_id)
            access_logger.info(
                "HTTP %s %s status=%s duration_ms=%.2f",
                method,
                request.url.path,
                response.status_code,
                duration_ms,
                extra={"request_id": request_id},
            )
            metrics.REQUEST_COUNT.labels(
                method=method, path=path, status=str(response.status_code)
            ).inc()
            metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000.0)
            return response

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        body_preview: str | None = None
        try:
            raw_body = await request.body()
            if raw_body:
                decoded = raw_body.decode("utf-8", errors="replace")
                if len(decoded) > 2048:
                    decoded = decoded[:2048] + "...(truncated)"
                body_preview = decoded
        except Exception:  # pragma: no cover - body already consumed
            body_preview = "<unable to read body>"

        log_kwargs: dict[str, Any] = {}
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            log_kwargs["extra"] = {"request_id": request_id}

        logger.warning(
            "Validation error on %s %s: %s | body=%s",
            request.method,
            request.url.path,
            exc.errors(),
            body_preview,
            **log_kwargs,
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": [_json_safe(error) for error in exc.errors()]},
        )

    @application.exception_handler(AuthenticationError)
    async def authentication_exception_handler(request: Request, exc: AuthenticationError):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": str(exc)},
        )

    # ----------------------------------------------------------------- users

    @application.post(
        "/users",
        response_model=User,
        summary="Register or refresh a user for an identity token",
    )
    def users_register(
        payload: UserRegisterRequest,
        auth: None = Depends(deps.require_api_token),
        registrar: deps.UserRegistrar = Depends(deps.get_user_registrar),
    ) -> User:
        return registrar(payload.model_dump())

    @application.get("/users/me", response_model=User, summary="Current user")
    def users_me(user: User = Depends(deps.get_current_user)) -> User:
        return user

    # --------------------------------------------------------------- recipes

    @application.get("/recipes", response_model=list[Recipe], summary="List recipes")
    def recipes_list(
        query: Optional[str] = Query(default=None, description="Case-insensitive title filter."),
        user: User = Depends(deps.get_current_user),
        provider: deps.RecipeListProvider = Depends(deps.get_recipe_list_provider),
        searcher: deps.RecipeSearcher = Depends(deps.get_recipe_searcher),
    ) -> list[Recipe]:
        if query and query.strip():
            return searcher(user.id, query)
        return provider(user.id)

    @application.post(
        "/recipes",
        response_model=Recipe,
        status_code=status.HTTP_201_CREATED,
        summary="Store a recipe",
    )
    def recipes_create(
        payload: RecipeCreateRequest = Body(...),
        user: User = Depends(deps.get_current_user),
        classifier: Classifier = Depends(deps.get_classifier),
        creator: deps.RecipeCreator = Depends(deps.get_recipe_creator),
    ) -> Recipe:
        return creator(
            {
                "user_id": user.id,
                "title": payload.title,
                "ingredients": parse_ingredients(payload.ingredients, classifier=classifier),
                "instructions": payload.instructions,
                "servings": payload.servings,
                "source_url": payload.source_url,
                "description": payload.description,
            }
        )

    @application.get("/recipes/{recipe_id}", response_model=Recipe, summary="Get a recipe")
    def recipes_get(
        recipe_id: int,
        user: User = Depends(deps.get_current_user),
        fetcher: deps.RecipeFetcher = Depends(deps.get_recipe_fetcher),
    ) -> Recipe:
        recipe = fetcher(recipe_id)
        if recipe is None or recipe.user_id != user.id:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")
        return recipe

    @application.patch("/recipes/{recipe_id}", response_model=Recipe, summary="Edit a recipe")
    def recipes_update(
        recipe_id: int,
        payload: RecipeUpdateRequest = Body(...),
        user: User = Depends(deps.get_current_user),
        classifier: Classifier = Depends(deps.get_classifier),
        updater: deps.RecipeUpdater = Depends(deps.get_recipe_updater),
    ) -> Recipe:
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if payload.ingredients is not None:
            changes["ingredients"] = parse_ingredients(payload.ingredients, classifier=classifier)
        try:
            return updater(user.id, recipe_id, changes)
        except NotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    @application.delete(
        "/recipes/{recipe_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete a recipe",
    )
    def recipes_delete(
        recipe_id: int,
        user: User = Depends(deps.get_current_user),
        deleter: deps.RecipeDeleter = Depends(deps.get_recipe_deleter),
    ) -> None:
        try:
            deleter(user.id, recipe_id)
        except NotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    # ------------------------------------------------------------ meal plans

    @application.get(
        "/meal-plans",
        response_model=list[MealPlan],
        summary="List meal plans in a date range",
    )
    def meal_plans_list(
        start_date: Optional[date] = Query(default=None),
        end_date: Optional[date] = Query(default=None),
        user: User = Depends(deps.get_current_user),
        settings: Settings = Depends(get_settings),
        provider: deps.MealPlanRangeProvider = Depends(deps.get_meal_plan_range_provider),
    ) -> list[MealPlan]:
        start, end = _resolve_range(start_date, end_date, settings)
        return provider(user.id, start, end)

    @application.put(
        "/meal-plans/{plan_date}/{slot}",
        response_model=MealPlan,
        summary="Set the recipe for a meal slot",
    )
    def meal_plans_set(
        plan_date: date,
        slot: MealSlot,
        payload: MealSetRequest = Body(...),
        user: User = Depends(deps.get_current_user),
        setter: deps.MealSetter = Depends(deps.get_meal_setter),
    ) -> MealPlan:
        try:
            return setter(user.id, plan_date, slot, payload.recipe_id, payload.servings)
        except NotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    @application.delete(
        "/meal-plans/{plan_date}/{slot}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Remove the meal in a slot",
    )
    def meal_plans_remove(
        plan_date: date,
        slot: MealSlot,
        user: User = Depends(deps.get_current_user),
        remover: deps.MealRemover = Depends(deps.get_meal_remover),
    ) -> None:
        remover(user.id, plan_date, slot)

    @application.post(
        "/meal-plans/{plan_date}/copy",
        response_model=MealPlan,
        summary="Copy a day's meals to another day",
    )
    def meal_plans_copy(
        plan_date: date,
        payload: CopyDayRequest = Body(...),
        user: User = Depends(deps.get_current_user),
        copier: deps.MealDayCopier = Depends(deps.get_meal_day_copier),
    ) -> MealPlan:
        copied = copier(user.id, plan_date, payload.target_date)
        if copied is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No meals planned on {plan_date}",
            )
        return copied

    @application.delete("/meal-plans", summary="Clear all meal plans")
    def meal_plans_clear(
        user: User = Depends(deps.get_current_user),
        clearer: deps.MealPlanClearer = Depends(deps.get_meal_plan_clearer),
    ) -> dict[str, int]:
        return {"deleted": clearer(user.id)}

    # --------------------------------------------------------- shopping list

    @application.get(
        "/shopping-list",
        response_model=GeneratedShoppingList,
        summary="Generate the shopping list for planned meals",
    )
    def shopping_list_generate(
        start_date: Optional[date] = Query(default=None),
        end_date: Optional[date] = Query(default=None),
        user: User = Depends(deps.get_current_user),
        settings: Settings = Depends(get_settings),
        service: ShoppingListService = Depends(deps.get_shopping_list_service),
    ) -> GeneratedShoppingList:
        start, end = _resolve_range(start_date, end_date, settings)
        return service.generate_from_meal_plans(user.id, start, end)

    @application.get(
        "/shopping-list/export",
        response_class=PlainTextResponse,
        summary="Shopping list as shareable text",
    )
    def shopping_list_export(
        start_date: Optional[date] = Query(default=None),
        end_date: Optional[date] = Query(default=None),
        include_checked: bool = Query(default=False),
        user: User = Depends(deps.get_current_user),
        settings: Settings = Depends(get_settings),
        service: ShoppingListService = Depends(deps.get_shopping_list_service),
    ) -> str:
        start, end = _resolve_range(start_date, end_date, settings)
        return service.export_text(user.id, start, end, include_checked=include_checked)

    @application.get(
        "/shopping-list/{week_start}",
        response_model=Optional[ShoppingListRecord],
        summary="Saved checked state and custom items for a week",
    )
    def shopping_list_saved(
        week_start: date,
        user: User = Depends(deps.get_current_user),
        service: ShoppingListService = Depends(deps.get_shopping_list_service),
    ) -> Optional[ShoppingListRecord]:
        return service.get_saved(user.id, week_start)

    @application.put(
        "/shopping-list/{week_start}/checked",
        response_model=ShoppingListMutationResponse,
        summary="Replace the checked items of a week",
    )
    def shopping_list_save_checked(
        week_start: date,
        payload: CheckedItemsRequest = Body(...),
        user: User = Depends(deps.get_current_user),
        service: ShoppingListService = Depends(deps.get_shopping_list_service),
    ) -> ShoppingListMutationResponse:
        record_id = service.save_checked_items(user.id, week_start, payload.checked_items)
        return ShoppingListMutationResponse(id=record_id)

    @application.post(
        "/shopping-list/{week_start}/recipes/{recipe_id}",
        response_model=ShoppingListMutationResponse,
        status_code=status.HTTP_201_CREATED,
        summary="Add every ingredient of a recipe as custom items",
    )
    def shopping_list_add_recipe(
        week_start: date,
        recipe_id: int,
        user: User = Depends(deps.get_current_user),
        service: ShoppingListService = Depends(deps.get_shopping_list_service),
    ) -> ShoppingListMutationResponse:
        try:
            record_id = service.add_recipe_to_list(user.id, week_start, recipe_id)
        except NotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        return ShoppingListMutationResponse(id=record_id)

    @application.post(
        "/shopping-list/{week_start}/items",
        response_model=ShoppingListMutationResponse,
        status_code=status.HTTP_201_CREATED,
        summary="Add an ad-hoc custom item",
    )
    def shopping_list_add_item(
        week_start: date,
        payload: CustomItemCreateRequest = Body(...),
        user: User = Depends(deps.get_current_user),
        service: ShoppingListService = Depends(deps.get_shopping_list_service),
    ) -> ShoppingListMutationResponse:
        try:
            record_id = service.add_custom_item(
                user.id,
                week_start,
                ingredient=payload.ingredient,
                quantity=payload.quantity,
                unit=payload.unit,
                category=payload.category.value if payload.category else None,
            )
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        return ShoppingListMutationResponse(id=record_id)

    @application.delete(
        "/shopping-list/{week_start}/items",
        response_model=ShoppingListMutationResponse,
        summary="Remove custom items and checked state for an item key",
    )
    def shopping_list_remove_item(
        week_start: date,
        key: str = Query(..., min_length=1, max_length=512),
        user: User = Depends(deps.get_current_user),
        service: ShoppingListService = Depends(deps.get_shopping_list_service),
    ) -> ShoppingListMutationResponse:
        return ShoppingListMutationResponse(id=service.remove_item(user.id, week_start, key))

    @application.delete(
        "/shopping-list/{week_start}/custom-items",
        response_model=ShoppingListMutationResponse,
        summary="Remove all custom items of a week",
    )
    def shopping_list_clear_custom(
        week_start: date,
        user: User = Depends(deps.get_current_user),
        service: ShoppingListService = Depends(deps.get_shopping_list_service),
    ) -> ShoppingListMutationResponse:
        return ShoppingListMutationResponse(id=service.clear_custom_items(user.id, week_start))

    @application.get("/metrics", include_in_schema=False)
    def metrics_endpoint() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return application


class UserRegisterRequest(BaseModel):
    token_identifier: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255)
    name: Optional[str] = Field(default=None, max_length=255)


class RecipeCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    ingredients: list[Union[str, IngredientLine]] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    servings: Optional[int] = Field(default=None, ge=1)
    source_url: Optional[str] = Field(default=None, max_length=2048)
    description: Optional[str] = Field(default=None, max_length=5000)

    model_config = ConfigDict(str_strip_whitespace=True)


class RecipeUpdateRequest(BaseModel):
    """Partial recipe edit; omitted fields keep their stored values."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    ingredients: Optional[list[Union[str, IngredientLine]]] = Field(default=None)
    instructions: Optional[list[str]] = Field(default=None)
    servings: Optional[int] = Field(default=None, ge=1)

    model_config = ConfigDict(str_strip_whitespace=True)


class MealSetRequest(BaseModel):
    recipe_id: int = Field(ge=1)
    servings: Optional[int] = Field(default=None, ge=1)


class CopyDayRequest(BaseModel):
    target_date: date


class CheckedItemsRequest(BaseModel):
    checked_items: list[str] = Field(default_factory=list)


class CustomItemCreateRequest(BaseModel):
    ingredient: str = Field(min_length=1, max_length=255)
    quantity: Optional[float] = Field(default=None, gt=0)
    unit: Optional[str] = Field(default=None, max_length=64)
    category: Optional[Category] = Field(default=None)

    model_config = ConfigDict(str_strip_whitespace=True)


class ShoppingListMutationResponse(BaseModel):
    id: Optional[int] = None


app = create_app()

__all__ = ["app", "create_app"]
