"""User-task snapshot and its JSON / table renderers."""

from __future__ import annotations

from .render import (
    format_start_time,
    matches_filter,
    parse_user_task_ids,
    render_json,
    write_table,
)
from .snapshot import UserTaskState

__all__ = [
    "UserTaskState",
    "format_start_time",
    "matches_filter",
    "parse_user_task_ids",
    "render_json",
    "write_table",
]
