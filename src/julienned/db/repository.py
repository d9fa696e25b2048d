"""Database engine and session management."""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from julienned.config import get_settings
from julienned.db.models import Base

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None
logger = logging.getLogger(__name__)


def _enable_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(database_path: Path | None = None) -> Engine:
    """Return the shared SQLite engine, creating the schema on first use."""
    global _engine, _session_factory

    if _engine is not None:
        return _engine

    db_path = database_path or get_settings().database_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
        future=True,
        echo=False,
    )
    event.listen(engine, "connect", _enable_foreign_keys)
    try:
        Base.metadata.create_all(engine)
    except OperationalError as exc:
        if "already exists" not in str(exc).lower():
            raise
        logger.debug("Database schema already initialized: %s", exc)

    logger.debug("SQLite engine ready at %s", db_path)
    _engine = engine
    _session_factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    return _engine


def get_session() -> Session:
    if _session_factory is None:
        get_engine()
    assert _session_factory is not None  # for mypy
    return _session_factory()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Yield a session that commits on success and rolls back on error."""
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def dump_json(value: Any) -> str:
    """Serialize a JSON column payload."""
    return json.dumps(value, separators=(",", ":"))


def load_json_list(payload: str | None) -> list[Any]:
    """Decode a JSON array column, tolerating empty or corrupt values."""
    if not payload:
        return []
    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError:
        logger.warning("Discarding undecodable JSON column payload: %.80s", payload)
        return []
    return parsed if isinstance(parsed, list) else []


def reset_repository_state() -> None:
    """Reset cached engine/session state (intended for testing)."""

    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


__all__ = [
    "get_engine",
    "get_session",
    "session_scope",
    "dump_json",
    "load_json_list",
    "reset_repository_state",
]
