"""
Renderers for user-task snapshots.

This module turns a :class:`~taskstate.core.state.snapshot.UserTaskState`
into one of two outputs:

- **JSON** (:func:`render_json`): a compact document for tools and clients.
- **Table** (:func:`write_table`): a column-aligned plain-text view written
  as UTF-8 bytes to a binary sink.

Both apply the same id filter (:func:`matches_filter`). An empty or missing
filter means "render everything"; it never means "render nothing".

Table layout
------------
Column widths are computed over the *whole* snapshot before filtering, so
the header does not move when the caller narrows the view. Each width is the
longest cell in that column (in UTF-16 code units), floored at the column
minimum, plus :data:`PADDING`. Every line, the header included, starts with ``"\\n"``.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable
from typing import TYPE_CHECKING, BinaryIO
from uuid import UUID

from taskstate.core.contracts import (
    ACTIVE_TASK_LABEL,
    COMPLETED_TASK_LABEL,
    TaskRecord,
    UserTaskEntry,
    UserTasksPayload,
)
from taskstate.core.settings import get_logger

if TYPE_CHECKING:
    from .snapshot import UserTaskState

PADDING = 2
TABLE_HEADER: tuple[str, ...] = (
    "USER TASK ID",
    "CLIENT ADDRESS",
    "START TIME",
    "STATUS",
    "REQUEST URL",
)
# Same column order as TABLE_HEADER.
MIN_COLUMN_WIDTHS: tuple[int, ...] = (20, 20, 20, 10, 20)


# --------------------------------------------------------------------------- #
# Shared helpers
# --------------------------------------------------------------------------- #


def matches_filter(record: TaskRecord, ids: Collection[UUID] | None) -> bool:
    """Return True if ``record`` passes the id filter (empty filter = all)."""
    return not ids or record.id in ids


def parse_user_task_ids(values: Iterable[str] | None) -> set[UUID]:
    """
    Parse comma-separated UUID strings into a filter set.

    Blank items are skipped, so ``[""]`` yields an empty set (no filtering).

    Raises
    ------
    ValueError
        If any non-blank item is not a valid UUID.
    """
    ids: set[UUID] = set()
    for value in values or ():
        for item in value.split(","):
            item = item.strip()
            if not item:
                continue
            try:
                ids.add(UUID(item))
            except ValueError as exc:
                raise ValueError(f"Invalid user task id: {item!r}") from exc
    return ids


def _civil_from_days(days: int) -> tuple[int, int, int]:
    """Proleptic Gregorian (year, month, day) for a day count since 1970-01-01."""
    z = days + 719_468
    era = z // 146_097
    doe = z - era * 146_097
    yoe = (doe - doe // 1460 + doe // 36_524 - doe // 146_096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def format_start_time(start_ms: int) -> str:
    """
    Render epoch milliseconds as ``YYYY-MM-dd_hh:mm:ss UTC``.

    The hour is on a 12-hour clock and no AM/PM marker follows it, so
    ``00:30`` and ``12:30`` both print as ``12:30``. The year is the calendar
    year. Any integer is accepted; years past 9999 print in full.
    """
    days, second_of_day = divmod(start_ms // 1000, 86_400)
    year, month, day = _civil_from_days(days)
    hour, rest = divmod(second_of_day, 3600)
    minute, second = divmod(rest, 60)
    return (
        f"{year:04d}-{month:02d}-{day:02d}"
        f"_{hour % 12 or 12:02d}:{minute:02d}:{second:02d} UTC"
    )


def _text_width(text: str) -> int:
    """Length in UTF-16 code units; characters outside the BMP count twice."""
    return len(text.encode("utf-16-le")) // 2


def _table_cells(record: TaskRecord, status: str) -> tuple[str, ...]:
    return (
        str(record.id),
        record.client_identity,
        format_start_time(record.start_ms),
        status,
        record.request_url,
    )


def _table_line(cells: tuple[str, ...], widths: tuple[int, ...]) -> str:
    return "\n" + "".join(
        cell + " " * (width - _text_width(cell)) for cell, width in zip(cells, widths, strict=True)
    )


# --------------------------------------------------------------------------- #
# JSON
# --------------------------------------------------------------------------- #


def _entries(
    records: Collection[TaskRecord], status: str, ids: Collection[UUID] | None
) -> list[UserTaskEntry]:
    return [
        UserTaskEntry(
            user_task_id=str(record.id),
            request_url=record.request_url,
            client_identity=record.client_identity,
            start_ms=str(record.start_ms),
            status=status,
        )
        for record in records
        if matches_filter(record, ids)
    ]


def build_payload(
    state: UserTaskState, version: int, ids: Collection[UUID] | None = None
) -> UserTasksPayload:
    """Build the JSON document model: active entries first, then completed."""
    entries = _entries(state.active_user_tasks, ACTIVE_TASK_LABEL, ids)
    entries += _entries(state.completed_user_tasks, COMPLETED_TASK_LABEL, ids)
    return UserTasksPayload(user_tasks=entries, version=version)


def render_json(state: UserTaskState, version: int, ids: Collection[UUID] | None = None) -> str:
    """
    Return the snapshot as a compact JSON string.

    Parameters
    ----------
    state:
        Snapshot to render.
    version:
        Non-negative document version, copied into the ``version`` key.
    ids:
        Optional id filter. ``None`` or empty renders every task.
    """
    return build_payload(state, version, ids).model_dump_json(by_alias=True)


# --------------------------------------------------------------------------- #
# Table
# --------------------------------------------------------------------------- #


def column_widths(state: UserTaskState) -> tuple[int, ...]:
    """Return padded print widths for each column, over the unfiltered snapshot."""
    widths = list(MIN_COLUMN_WIDTHS)
    for label, records in state.buckets():
        for record in records:
            for i, cell in enumerate(_table_cells(record, label)):
                widths[i] = max(widths[i], _text_width(cell))
    return tuple(width + PADDING for width in widths)


def format_table(state: UserTaskState, ids: Collection[UUID] | None = None) -> str:
    """Return the table text: header line, then one line per matching task."""
    widths = column_widths(state)
    lines = [_table_line(TABLE_HEADER, widths)]
    for label, records in state.buckets():
        for record in records:
            if matches_filter(record, ids):
                lines.append(_table_line(_table_cells(record, label), widths))
    return "".join(lines)


def write_table(
    state: UserTaskState,
    out: BinaryIO,
    ids: Collection[UUID] | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """
    Write the table to ``out`` as UTF-8 bytes.

    This view is best effort: if the sink refuses the bytes (``OSError``, or
    ``ValueError`` from a closed stream) the failure is logged at ERROR level
    through ``logger`` and not re-raised.
    """
    data = format_table(state, ids).encode("utf-8")
    try:
        out.write(data)
    except (OSError, ValueError):
        (logger or get_logger("taskstate.state")).error(
            "Failed to write output stream.", exc_info=True
        )


__all__ = [
    "MIN_COLUMN_WIDTHS",
    "PADDING",
    "TABLE_HEADER",
    "build_payload",
    "column_widths",
    "format_start_time",
    "format_table",
    "matches_filter",
    "parse_user_task_ids",
    "render_json",
    "write_table",
]
