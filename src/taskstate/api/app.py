"""
FastAPI Application Factory & Configuration.

This module initializes the FastAPI application instance. It is responsible for:
1.  **Middleware Setup**: CORS, plus request tracking (every request becomes a user task).
2.  **Exception Handling**: Global handlers to ensure all errors return structured JSON.
3.  **Routing**: Mounting the API routers (user tasks, health).
4.  **Lifecycle**: Initializing the task manager on startup.

Design Pattern
--------------
We use an **Application Factory** pattern (`create_app`). This allows for:
-   Easy testing (a fresh app, and optionally a private task manager, per test).
-   Configuration injection (passing distinct settings for Dev/Prod).
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskstate import __version__
from taskstate.api.routers import user_tasks
from taskstate.api.task_manager import UserTaskManager, get_task_manager
from taskstate.core.settings import get_logger

logger = get_logger("taskstate.api")

# Requests to these paths are not recorded as user tasks.
UNTRACKED_PATHS: frozenset[str] = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


def request_url_of(request: Request) -> str:
    """Return the request path plus its query string, if any."""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    ASGI Lifespan context manager.

    - **Startup**: Report the task manager the app tracks requests in.
    - **Shutdown**: Nothing to release; the manager is in-memory.
    """
    logger.info("Starting up...")
    logger.info(
        "Task manager ready (max completed tasks: %d).", app.state.task_manager.max_completed
    )

    yield

    logger.info("Shutting down...")


def create_app(manager: UserTaskManager | None = None) -> FastAPI:
    """
    Construct and configure the taskstate FastAPI application.

    Parameters
    ----------
    manager:
        Task manager to track requests in. Defaults to the process-wide one.

    Returns
    -------
    FastAPI
        The configured ASGI application ready to be served by Uvicorn.
    """
    app = FastAPI(
        title="taskstate API",
        description="User task status (active and completed requests)",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.task_manager = manager if manager is not None else get_task_manager()

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def track_user_task(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Record the request as an active task until its response is produced."""
        if request.url.path in UNTRACKED_PATHS:
            return await call_next(request)

        tasks: UserTaskManager = request.app.state.task_manager
        client = request.client.host if request.client else "unknown"
        task_id = tasks.create_task(request_url_of(request), client)
        try:
            return await call_next(request)
        finally:
            tasks.mark_completed(task_id)
            logger.debug("User task %s completed.", task_id)

    # -----------------------------------------------------------------------
    # Global Exception Handlers
    # -----------------------------------------------------------------------
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler so unhandled exceptions return structured JSON."""
        logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        """Map Python ValueErrors to HTTP 400 Bad Request."""
        return JSONResponse(
            status_code=400,
            content={
                "error": "Bad Request",
                "detail": str(exc),
            },
        )

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    app.include_router(user_tasks.router)

    @app.get("/health", tags=["System"])
    async def health_check() -> dict[str, str]:
        """Simple liveness check."""
        return {"status": "ok", "version": __version__}

    return app


__all__ = ["UNTRACKED_PATHS", "create_app", "request_url_of"]
