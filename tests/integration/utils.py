"""Shared helpers for integration tests."""

from __future__ import annotations

from typing import Optional

from julienned.config import get_settings
from julienned.server.deps import USER_TOKEN_HEADER


def auth_headers(user_token: Optional[str] = None) -> dict[str, str]:
    headers: dict[str, str] = {}
    token = get_settings().api_token
    if token:
        headers["Authorization"] = f"Bearer {token}"
    if user_token:
        headers[USER_TOKEN_HEADER] = user_token
    return headers
