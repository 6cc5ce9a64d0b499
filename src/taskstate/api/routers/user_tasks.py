"""
API Routes for User Task Status.

This module exposes the current user-task snapshot over HTTP.

Endpoints
---------
- `GET /user_tasks`: Render active and completed tasks as a plain-text table
  (default) or, with `json=true`, as the JSON user-task document.

Query Parameters
----------------
- `user_task_ids`: comma-separated task UUIDs; may be repeated. When absent
  or empty every task is shown.
- `json`: switch from the table to the JSON document.
"""

from __future__ import annotations

import io
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from taskstate.api.task_manager import UserTaskManager
from taskstate.core.settings import get_logger, load_settings
from taskstate.core.state import parse_user_task_ids

router = APIRouter(tags=["User Tasks"])

logger = get_logger("taskstate.api")


def get_manager(request: Request) -> UserTaskManager:
    """Dependency: the task manager attached to the running app."""
    manager: UserTaskManager = request.app.state.task_manager
    return manager


@router.get(
    "/user_tasks",
    summary="Show active and completed user tasks",
    responses={
        200: {
            "content": {"text/plain": {}, "application/json": {}},
            "description": "Plain-text table, or the JSON document when `json=true`.",
        }
    },
)
async def get_user_tasks(
    manager: Annotated[UserTaskManager, Depends(get_manager)],
    user_task_ids: Annotated[list[str] | None, Query()] = None,
    as_json: Annotated[bool, Query(alias="json")] = False,
) -> Response:
    """
    Render the current user-task snapshot.

    The snapshot is captured once per request; the request rendering it is
    itself tracked and shows up as an active task.
    """
    ids = parse_user_task_ids(user_task_ids)
    state = manager.snapshot()

    if as_json:
        body = state.get_json_string(load_settings().json_version, ids)
        return Response(content=body, media_type="application/json")

    buf = io.BytesIO()
    state.write_output_stream(buf, ids, logger)
    return Response(content=buf.getvalue(), media_type="text/plain")


__all__ = ["get_manager", "router"]
