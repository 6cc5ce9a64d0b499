"""
ASGI Entry Point for the taskstate API.

This module exposes the `app` object required by ASGI servers (Uvicorn/Gunicorn).
It loads environment variables from `.env` before the application factory runs,
so settings read at import time see them.

Usage
-----
Run via the module entry point:
    $ python -m taskstate.api.server

Or via uvicorn directly:
    $ uvicorn taskstate.api.server:app --reload
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(".env"))

from taskstate.api.app import create_app  # noqa: E402
from taskstate.core.settings import load_settings  # noqa: E402

# Factory invocation
app = create_app()


def main(host: str | None = None, port: int | None = None, reload: bool = False) -> None:
    """Run the API server with uvicorn; host/port default to settings."""
    cfg = load_settings()
    uvicorn.run(
        "taskstate.api.server:app",
        host=host or cfg.host,
        port=port or cfg.port,
        reload=reload,
        log_level=cfg.log_level.lower(),
    )


if __name__ == "__main__":
    main()
