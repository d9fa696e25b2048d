"""Aggregation keys shared by list generation, checked state and removal."""

from __future__ import annotations

from typing import Optional, Tuple

from .units import normalize_unit

KEY_SEPARATOR = "|"


def ingredient_key(name: str, normalized_unit: str) -> str:
    """Build the ``"<name>|<unit>"`` identity for an already-normalized unit."""
    return f"{name.strip().lower()}{KEY_SEPARATOR}{normalized_unit}"


def item_key(name: str, unit: Optional[str]) -> str:
    """Build the key for a raw (unnormalized) unit."""
    return ingredient_key(name, normalize_unit(unit))


def parse_ingredient_key(key: str) -> Optional[Tuple[str, str]]:
    """Split a key back into ``(name, unit)``; ``None`` when malformed."""
    if not key or KEY_SEPARATOR not in key:
        return None
    name, _, unit = key.rpartition(KEY_SEPARATOR)
    if not name.strip():
        return None
    return name, unit


def canonical_key(key: str) -> Optional[str]:
    """Re-derive ``key`` through the builder so case and unit aliases fold together."""
    parsed = parse_ingredient_key(key)
    if parsed is None:
        return None
    name, unit = parsed
    return item_key(name, unit)


__all__ = [
    "KEY_SEPARATOR",
    "ingredient_key",
    "item_key",
    "parse_ingredient_key",
    "canonical_key",
]
