"""
Immutable snapshot of user-task state.

A :class:`UserTaskState` pairs the active and completed task sequences
captured from the task manager at one instant. The snapshot copies both
sequences into tuples on construction, so later changes in the manager are
never visible through it. Records themselves are shared (they are frozen).
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable
from typing import BinaryIO
from uuid import UUID

from taskstate.core.contracts import ACTIVE_TASK_LABEL, COMPLETED_TASK_LABEL, TaskRecord

from .render import render_json, write_table


class UserTaskState:
    """Active and completed user tasks, with JSON and table renderers."""

    __slots__ = ("_active", "_completed")

    def __init__(
        self,
        active_user_tasks: Iterable[TaskRecord],
        completed_user_tasks: Iterable[TaskRecord],
    ) -> None:
        self._active: tuple[TaskRecord, ...] = tuple(active_user_tasks)
        self._completed: tuple[TaskRecord, ...] = tuple(completed_user_tasks)

    @property
    def active_user_tasks(self) -> tuple[TaskRecord, ...]:
        return self._active

    @property
    def completed_user_tasks(self) -> tuple[TaskRecord, ...]:
        return self._completed

    def buckets(self) -> list[tuple[str, tuple[TaskRecord, ...]]]:
        """Return ``(status label, records)`` pairs sorted by label."""
        pairs = [
            (ACTIVE_TASK_LABEL, self._active),
            (COMPLETED_TASK_LABEL, self._completed),
        ]
        return sorted(pairs, key=lambda pair: pair[0])

    def get_json_string(self, version: int, ids: Collection[UUID] | None = None) -> str:
        """Return the compact JSON document (see :func:`render_json`)."""
        return render_json(self, version, ids)

    def write_output_stream(
        self,
        out: BinaryIO,
        ids: Collection[UUID] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Write the plain-text table to ``out`` (see :func:`write_table`)."""
        write_table(self, out, ids, logger)

    def __len__(self) -> int:
        return len(self._active) + len(self._completed)


__all__ = ["UserTaskState"]
