"""ASGI application factory and dependencies for the Julienned server."""

from julienned.server.app import app, create_app

__all__ = ["app", "create_app"]
