"""Integration tests for the shopping list endpoints."""

from __future__ import annotations

import pytest
from fastapi import status

from julienned.models.shopping import Category
from julienned.server import deps
from tests.integration.utils import auth_headers

RANGE = {"start_date": "2024-03-04", "end_date": "2024-03-10"}


def _plan(client, headers, day, slot, recipe_id):
    response = client.put(f"/meal-plans/{day}/{slot}", json={"recipe_id": recipe_id}, headers=headers)
    assert response.status_code == status.HTTP_200_OK


def test_generate_shopping_list_from_meal_plans(client, user, pancakes, waffles):
    headers = auth_headers(user.token_identifier)
    _plan(client, headers, "2024-03-04", "breakfast", pancakes.id)
    _plan(client, headers, "2024-03-09", "breakfast", waffles.id)
    _plan(client, headers, "2024-03-11", "breakfast", waffles.id)

    response = client.get("/shopping-list", params=RANGE, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    payload = response.json()
    assert payload["week_start"] == "2024-03-04"
    assert payload["recipe_count"] == 2
    assert payload["meal_count"] == 2

    items = {item["key"]: item for item in payload["items"]}
    assert items["flour|cups"]["quantity"] == pytest.approx(3.0)
    assert items["flour|cups"]["recipes"] == ["Pancakes", "Waffles"]
    assert items["salt|"]["unit"] is None
    assert [item["category"] for item in payload["items"]] == ["dairy", "dairy", "pantry", "pantry"]
    assert sorted(item["id"] for item in payload["items"]) == [1, 2, 3, 4]


def test_saved_record_round_trip(client, user, pancakes, week_start):
    headers = auth_headers(user.token_identifier)
    base = f"/shopping-list/{week_start.isoformat()}"

    response = client.get(base, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() is None

    response = client.put(f"{base}/checked", json={"checked_items": ["eggs|"]}, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    record_id = response.json()["id"]

    response = client.post(f"{base}/recipes/{pancakes.id}", headers=headers)
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["id"] == record_id

    response = client.post(
        f"{base}/items",
        json={"ingredient": "Paper towels", "quantity": 2, "category": "other"},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED

    record = client.get(base, headers=headers).json()
    assert record["checked_items"] == ["eggs|"]
    assert [item["ingredient"] for item in record["custom_items"]] == ["flour", "milk", "eggs", "Paper towels"]

    response = client.delete(f"{base}/items", params={"key": "paper towels|"}, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    record = client.get(base, headers=headers).json()
    assert len(record["custom_items"]) == 3

    response = client.get("/shopping-list", params=RANGE, headers=headers)
    items = {item["key"]: item for item in response.json()["items"]}
    assert items["eggs|"]["checked"] is True
    assert items["flour|cups"]["quantity"] == pytest.approx(2.0)

    response = client.delete(f"{base}/custom-items", headers=headers)
    assert response.json() == {"id": record_id}
    record = client.get(base, headers=headers).json()
    assert record["custom_items"] == []
    assert record["checked_items"] == ["eggs|"]


def test_mutations_without_record_are_noops(client, user_headers, week_start):
    base = f"/shopping-list/{week_start.isoformat()}"

    response = client.delete(f"{base}/items", params={"key": "milk|cups"}, headers=user_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"id": None}

    response = client.delete(f"{base}/custom-items", headers=user_headers)
    assert response.json() == {"id": None}


def test_add_unknown_recipe_returns_404(client, user_headers, week_start):
    response = client.post(f"/shopping-list/{week_start.isoformat()}/recipes/999", headers=user_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_export_plain_text(client, user, waffles):
    headers = auth_headers(user.token_identifier)
    _plan(client, headers, "2024-03-05", "dinner", waffles.id)
    client.put("/shopping-list/2024-03-04/checked", json={"checked_items": ["salt|"]}, headers=headers)

    response = client.get("/shopping-list/export", params=RANGE, headers=headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "Shopping List\n\nPantry:\n  1 cups Flour"


def test_classifier_dependency_can_be_overridden(app, client, user, pancakes):
    headers = auth_headers(user.token_identifier)
    _plan(client, headers, "2024-03-04", "lunch", pancakes.id)
    app.dependency_overrides[deps.get_classifier] = lambda: (lambda _name: Category.OTHER)

    response = client.get("/shopping-list", params=RANGE, headers=headers)

    assert {item["category"] for item in response.json()["items"]} == {"other"}


def test_invalid_custom_item_is_rejected(client, user_headers, week_start):
    response = client.post(
        f"/shopping-list/{week_start.isoformat()}/items",
        json={"ingredient": "", "category": "deli"},
        headers=user_headers,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.parametrize("ingredient", ["", "   "])
def test_add_item_rejects_blank_names(client, user_headers, week_start, ingredient):
    base = f"/shopping-list/{week_start.isoformat()}"

    response = client.post(f"{base}/items", json={"ingredient": ingredient}, headers=user_headers)

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert client.get(base, headers=user_headers).json() is None


def test_add_recipe_with_long_lines_to_list(client, user_headers, week_start):
    long_line = "fresh " * 60 + "basil"
    payload = {
        "title": "Pesto",
        "ingredients": [
            long_line,
            {"text": "2 handfuls pine nuts", "item": "pine nuts", "quantity": 2, "unit": "u" * 80},
        ],
    }
    recipe = client.post("/recipes", json=payload, headers=user_headers).json()
    base = f"/shopping-list/{week_start.isoformat()}"

    response = client.post(f"{base}/recipes/{recipe['id']}", headers=user_headers)

    assert response.status_code == status.HTTP_201_CREATED
    record = client.get(base, headers=user_headers).json()
    assert len(record["custom_items"]) == 2
    assert record["custom_items"][1]["unit"] == "u" * 80
