"""User account model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """Authenticated account that owns recipes, meal plans and shopping lists."""

    id: int
    token_identifier: str
    email: str
    name: Optional[str] = Field(default=None)
    created_at: datetime

    model_config = ConfigDict(frozen=True)


__all__ = ["User"]
