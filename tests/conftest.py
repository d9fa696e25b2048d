"""Shared pytest fixtures for the Julienned test suite."""

from __future__ import annotations

from datetime import date
from typing import Dict, Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from julienned.config import get_settings
from julienned.db.recipes import create_recipe
from julienned.db.repository import reset_repository_state
from julienned.db.users import get_or_create_user
from julienned.models.recipe import Recipe
from julienned.models.user import User
from julienned.server.app import create_app
from tests.utils import ingredient_lines

USER_TOKEN = "identity|alice"


@pytest.fixture()
def app() -> Generator[FastAPI, None, None]:
    """Create a new FastAPI app instance for each test and reset overrides."""

    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    """Return a test client bound to the FastAPI app."""

    return TestClient(app)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Ensure each test uses an isolated SQLite database location."""

    db_path = tmp_path / "test_julienned.db"
    monkeypatch.setenv("JULIENNED_DATABASE_PATH", str(db_path))
    monkeypatch.delenv("JULIENNED_API_TOKEN", raising=False)
    monkeypatch.delenv("JULIENNED_ENABLE_CANNED_CATEGORY", raising=False)
    monkeypatch.delenv("JULIENNED_WEEK_STARTS_ON", raising=False)
    get_settings.cache_clear()
    reset_repository_state()
    yield
    reset_repository_state()
    monkeypatch.delenv("JULIENNED_DATABASE_PATH", raising=False)
    get_settings.cache_clear()


@pytest.fixture()
def user() -> User:
    """Register the default test user."""

    return get_or_create_user(token_identifier=USER_TOKEN, email="alice@example.com", name="Alice")


@pytest.fixture()
def user_headers(user) -> Dict[str, str]:
    return {"X-User-Token": user.token_identifier}


@pytest.fixture()
def week_start() -> date:
    return date(2024, 3, 4)


@pytest.fixture()
def pancakes(user) -> Recipe:
    return create_recipe(
        user_id=user.id,
        title="Pancakes",
        ingredients=ingredient_lines(("flour", 2, "cups"), ("milk", 1, "cup"), ("eggs", 2, None)),
        instructions=["Mix", "Fry"],
        servings=4,
    )


@pytest.fixture()
def waffles(user) -> Recipe:
    return create_recipe(
        user_id=user.id,
        title="Waffles",
        ingredients=ingredient_lines(("Flour", 1, "cup"), ("salt", None, None)),
        instructions=["Mix", "Bake in waffle iron"],
    )
