"""
In-Memory User Task Manager.

This module owns the task records that the status views render. Every
tracked request becomes a user task: it is registered as *active* when the
request starts and moved to *completed* once, when it finishes.

Responsibilities
----------------
- **Create**: Generate UUIDs for new tasks and register them as active.
- **Complete**: Move a task from the active sequence to the completed one.
- **Retain**: Keep at most ``max_completed`` completed tasks (oldest evicted).
- **Snapshot**: Hand out a :class:`UserTaskState` built from copies, so
  renderers never observe a sequence being mutated.

Note on Persistence
-------------------
This is a volatile memory store. If the server restarts, all task history is
lost.
"""

from __future__ import annotations

import threading
import time
import uuid
from collections import OrderedDict, deque
from typing import ClassVar

from taskstate.core.contracts import TaskRecord
from taskstate.core.settings import load_settings
from taskstate.core.state import UserTaskState


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class UserTaskManager:
    """
    A lock-guarded store of active and completed TaskRecords.

    Attributes
    ----------
    _active : OrderedDict[uuid.UUID, TaskRecord]
        Active tasks in registration order.
    _completed : deque[TaskRecord]
        Completed tasks in completion order, bounded by ``max_completed``.
    """

    # Singleton instance placeholder (initialized in app startup)
    _instance: ClassVar[UserTaskManager | None] = None

    def __init__(self, max_completed: int | None = None) -> None:
        if max_completed is None:
            max_completed = load_settings().max_completed_tasks
        self._lock = threading.Lock()
        self._active: OrderedDict[uuid.UUID, TaskRecord] = OrderedDict()
        self._completed: deque[TaskRecord] = deque(maxlen=max_completed)

    @classmethod
    def get_instance(cls) -> UserTaskManager:
        """Accessor for the global singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def max_completed(self) -> int:
        return self._completed.maxlen or 0

    def create_task(
        self,
        request_url: str,
        client_identity: str,
        start_ms: int | None = None,
    ) -> uuid.UUID:
        """
        Register a new active task.

        Parameters
        ----------
        request_url:
            Request path plus parameters, stored verbatim.
        client_identity:
            Client address or identity.
        start_ms:
            Start time in epoch milliseconds; defaults to now.

        Returns
        -------
        uuid.UUID
            The generated UUID4 of the new task.
        """
        task_id = uuid.uuid4()
        record = TaskRecord(
            id=task_id,
            request_url=request_url,
            client_identity=client_identity,
            start_ms=_now_ms() if start_ms is None else start_ms,
        )
        with self._lock:
            self._active[task_id] = record
        return task_id

    def mark_completed(self, task_id: uuid.UUID) -> bool:
        """Move an active task to completed. Return False if it was not active."""
        with self._lock:
            record = self._active.pop(task_id, None)
            if record is None:
                return False
            self._completed.append(record)
            return True

    def get_task(self, task_id: uuid.UUID) -> TaskRecord | None:
        """Retrieve a task record (active or completed), or None if not found."""
        with self._lock:
            if record := self._active.get(task_id):
                return record
            for record in self._completed:
                if record.id == task_id:
                    return record
        return None

    def snapshot(self) -> UserTaskState:
        """Capture the current active and completed tasks."""
        with self._lock:
            return UserTaskState(list(self._active.values()), list(self._completed))

    def clear(self) -> None:
        """Drop every tracked task."""
        with self._lock:
            self._active.clear()
            self._completed.clear()


# Global accessor for convenience
def get_task_manager() -> UserTaskManager:
    return UserTaskManager.get_instance()


__all__ = ["UserTaskManager", "get_task_manager"]
