"""Application configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))


class Settings(BaseModel):
    """Global application settings loaded from environment variables or .env files."""

    database_path: Path = Field(
        default=Path("./data/julienned.db"),
        description="SQLite database location.",
    )
    api_token: Optional[str] = Field(
        default=None,
        description="Bearer token required for authenticated endpoints.",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        default="plain",
        description="Logging format (plain/json).",
    )
    log_requests: bool = Field(
        default=True,
        description="Emit request access logs when true.",
    )
    week_starts_on: Literal["monday", "sunday"] = Field(
        default="monday",
        description="First day of the shopping week used for default date ranges.",
    )
    enable_canned_category: bool = Field(
        default=False,
        description="Let the ingredient classifier return the 'canned' category.",
    )

    model_config = ConfigDict(frozen=True)


ENV_PREFIX = "JULIENNED_"
WEEK_START_DAYS = frozenset({"monday", "sunday"})


def _coerce_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _coerce_week_start(value: str) -> Optional[str]:
    normalized = value.strip().lower()
    return normalized if normalized in WEEK_START_DAYS else None


# env suffix -> (settings field, converter returning None to ignore the value)
_ENV_FIELDS: dict[str, tuple[str, Callable[[str], Any]]] = {
    "DATABASE_PATH": ("database_path", Path),
    "API_TOKEN": ("api_token", str),
    "LOG_LEVEL": ("log_level", str),
    "LOG_FORMAT": ("log_format", str),
    "LOG_REQUESTS": ("log_requests", _coerce_bool),
    "WEEK_STARTS_ON": ("week_starts_on", _coerce_week_start),
    "ENABLE_CANNED_CATEGORY": ("enable_canned_category", _coerce_bool),
}


def _parse_env_file(path: Path) -> dict[str, str]:
    """Read ``KEY=value`` pairs, ignoring comments and surrounding quotes."""

    if not path.is_file():
        return {}
    payload: dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, raw_value = line.split("=", 1)
        payload[key.strip()] = raw_value.strip().strip("\"'")
    return payload


def _load_from_env() -> dict[str, Any]:
    """Collect settings overrides; process env vars win over .env files."""

    file_values: dict[str, str] = {}
    for candidate in ENV_FILE_CANDIDATES:
        file_values.update(_parse_env_file(candidate))

    payload: dict[str, Any] = {}
    for suffix, (field, convert) in _ENV_FIELDS.items():
        key = ENV_PREFIX + suffix
        raw = os.environ.get(key) or file_values.get(key)
        if not raw:
            continue
        value = convert(raw)
        if value is not None:
            payload[field] = value
    return payload


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())
