"""Helper for running the Julienned ASGI application."""

from __future__ import annotations

import os
from typing import Optional

import uvicorn

APP_PATH = "julienned.server.app:app"


def serve(host: Optional[str] = None, port: Optional[int] = None, reload: bool = False) -> None:
    """Run the API with uvicorn, falling back to JULIENNED_SERVER_* env vars."""

    resolved_host = host or os.environ.get("JULIENNED_SERVER_HOST", "127.0.0.1")
    raw_port = port or os.environ.get("JULIENNED_SERVER_PORT", "8000")
    try:
        resolved_port = int(raw_port)
    except ValueError as exc:
        raise SystemExit(f"Invalid JULIENNED_SERVER_PORT '{raw_port}': {exc}") from exc

    uvicorn.run(APP_PATH, host=resolved_host, port=resolved_port, reload=reload)


def main() -> None:
    serve(reload=os.environ.get("RELOAD") == "1")


if __name__ == "__main__":
    main()
