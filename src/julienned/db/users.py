"""Data access helpers for user accounts."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select

from julienned.models.user import User

from .models import UserORM
from .repository import session_scope

logger = logging.getLogger(__name__)


def _to_model(row: UserORM) -> User:
    return User.model_validate(
        {
            "id": row.id,
            "token_identifier": row.token_identifier,
            "email": row.email,
            "name": row.name,
            "created_at": row.created_at,
        }
    )


def get_or_create_user(
    *,
    token_identifier: str,
    email: str,
    name: Optional[str] = None,
) -> User:
    """Register a user for an identity token, refreshing the profile when it exists."""

    with session_scope() as session:
        row = session.execute(
            select(UserORM).where(UserORM.token_identifier == token_identifier)
        ).scalar_one_or_none()
        if row is None:
            row = UserORM(token_identifier=token_identifier, email=email, name=name)
            session.add(row)
            logger.info("Registered user email=%s", email)
        else:
            row.email = email or row.email
            row.name = name or row.name
        session.flush()
        session.refresh(row)
        return _to_model(row)


def get_user_by_token(token_identifier: str) -> Optional[User]:
    with session_scope() as session:
        row = session.execute(
            select(UserORM).where(UserORM.token_identifier == token_identifier)
        ).scalar_one_or_none()
        if row is None:
            return None
        return _to_model(row)


__all__ = ["get_or_create_user", "get_user_by_token"]
