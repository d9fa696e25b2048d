"""Domain exceptions shared by the service and HTTP layers."""

from __future__ import annotations


class NotFoundError(ValueError):
    """Raised when an operation addresses a record that does not exist."""


class AuthenticationError(Exception):
    """Raised when a request carries no resolvable user context."""


__all__ = ["NotFoundError", "AuthenticationError"]
