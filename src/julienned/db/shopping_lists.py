"""Shopping list record persistence helpers."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from julienned.models.shopping import ShoppingListRecord

from .models import ShoppingListORM
from .repository import dump_json, load_json_list, session_scope


def _to_model(row: ShoppingListORM) -> ShoppingListRecord:
    return ShoppingListRecord.model_validate(
        {
            "id": row.id,
            "user_id": row.user_id,
            "week_start": row.week_start,
            "checked_items": load_json_list(row.checked_items),
            "custom_items": load_json_list(row.custom_items),
            "updated_at": row.updated_at,
        }
    )


def _find_list(session: Session, user_id: int, week_start: date) -> Optional[ShoppingListORM]:
    return session.execute(
        select(ShoppingListORM).where(
            ShoppingListORM.user_id == user_id,
            ShoppingListORM.week_start == week_start,
        )
    ).scalar_one_or_none()


def get_shopping_list(user_id: int, week_start: date) -> Optional[ShoppingListRecord]:
    with session_scope() as session:
        row = _find_list(session, user_id, week_start)
        if row is None:
            return None
        return _to_model(row)


def upsert_shopping_list(record: ShoppingListRecord) -> ShoppingListRecord:
    """Replace or create the record for ``(record.user_id, record.week_start)``.

    The whole record is written, so concurrent writers resolve last-writer-wins.
    """

    checked = dump_json(list(record.checked_items))
    custom = dump_json([item.model_dump(mode="json") for item in record.custom_items])

    with session_scope() as session:
        row = _find_list(session, record.user_id, record.week_start)
        if row is None:
            row = ShoppingListORM(
                user_id=record.user_id,
                week_start=record.week_start,
                checked_items=checked,
                custom_items=custom,
                updated_at=record.updated_at,
            )
            session.add(row)
        else:
            row.checked_items = checked
            row.custom_items = custom
            row.updated_at = record.updated_at
        session.flush()
        return _to_model(row)


__all__ = ["get_shopping_list", "upsert_shopping_list"]
