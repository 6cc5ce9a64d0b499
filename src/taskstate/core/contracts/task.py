"""TaskRecord: the read-only view of one tracked user task.

Records are owned by :class:`taskstate.api.task_manager.UserTaskManager`;
everything downstream (renderers, API, CLI) only reads them. The model is
frozen so a record shared between a snapshot and the manager cannot drift.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

ACTIVE_TASK_LABEL = "Active"
COMPLETED_TASK_LABEL = "Completed"


class TaskRecord(BaseModel):
    """Identity and metadata of a single user task."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(description="Unique task id, rendered in canonical hyphenated form")
    request_url: str = Field(description="Request path plus parameters, used verbatim")
    client_identity: str = Field(description="Client address or identity string")
    start_ms: int = Field(description="Epoch milliseconds (UTC) when the task started")


class SnapshotFile(BaseModel):
    """On-disk snapshot layout read by ``taskstate show``."""

    active: list[TaskRecord] = Field(default_factory=list)
    completed: list[TaskRecord] = Field(default_factory=list)


__all__ = ["ACTIVE_TASK_LABEL", "COMPLETED_TASK_LABEL", "SnapshotFile", "TaskRecord"]
