"""Integration tests for user registration and resolution."""

from __future__ import annotations

from fastapi import status

from tests.integration.utils import auth_headers


def test_register_and_resolve_current_user(client):
    payload = {"token_identifier": "issuer|carol", "email": "carol@example.com", "name": "Carol"}
    response = client.post("/users", json=payload, headers=auth_headers())
    assert response.status_code == status.HTTP_200_OK
    registered = response.json()
    assert registered["email"] == "carol@example.com"

    response = client.post("/users", json=payload, headers=auth_headers())
    assert response.json()["id"] == registered["id"]

    response = client.get("/users/me", headers=auth_headers("issuer|carol"))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == registered["id"]


def test_missing_user_token_is_unauthorized(client):
    response = client.get("/users/me", headers=auth_headers())
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert "X-User-Token" in response.json()["detail"]


def test_unknown_user_is_not_created_implicitly(client):
    response = client.get("/shopping-list", headers=auth_headers("issuer|stranger"))
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

    response = client.get("/users/me", headers=auth_headers("issuer|stranger"))
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_register_validates_payload(client):
    response = client.post("/users", json={"token_identifier": ""}, headers=auth_headers())
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
