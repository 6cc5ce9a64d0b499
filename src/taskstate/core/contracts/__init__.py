"""Pydantic contracts shared by the renderer, the API, and the CLI."""

from __future__ import annotations

from .task import ACTIVE_TASK_LABEL, COMPLETED_TASK_LABEL, SnapshotFile, TaskRecord
from .user_tasks import UserTaskEntry, UserTasksPayload

__all__ = [
    "ACTIVE_TASK_LABEL",
    "COMPLETED_TASK_LABEL",
    "SnapshotFile",
    "TaskRecord",
    "UserTaskEntry",
    "UserTasksPayload",
]
