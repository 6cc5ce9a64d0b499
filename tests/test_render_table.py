"""Unit tests for the plain-text table renderer.

These pin down the exact byte layout: a leading newline before every line,
left-justified columns, widths taken from the unfiltered snapshot, and the
12-hour start-time format (no AM/PM marker).
"""

from __future__ import annotations

import io
from datetime import UTC, datetime
from unittest.mock import MagicMock
from uuid import UUID

from taskstate.core.contracts import TaskRecord
from taskstate.core.state import UserTaskState, format_start_time, write_table
from taskstate.core.state.render import column_widths, format_table

ID_1 = UUID("11111111-1111-1111-1111-111111111111")
ID_2 = UUID("22222222-2222-2222-2222-222222222222")

HEADER_TITLES = ("USER TASK ID", "CLIENT ADDRESS", "START TIME", "STATUS", "REQUEST URL")


def _task(
    task_id: UUID, url: str = "/tasks?x=1", client: str = "10.0.0.1", start: int = 0
) -> TaskRecord:
    return TaskRecord(id=task_id, request_url=url, client_identity=client, start_ms=start)


def _line(cells: tuple[str, ...], widths: tuple[int, ...]) -> str:
    return "\n" + "".join(f"{cell:<{width}}" for cell, width in zip(cells, widths))


def _render(state: UserTaskState, ids: set[UUID] | None = None) -> str:
    buf = io.BytesIO()
    write_table(state, buf, ids)
    return buf.getvalue().decode("utf-8")


def _epoch_ms(*args: int) -> int:
    return int(datetime(*args, tzinfo=UTC).timestamp() * 1000)


# --------------------------------------------------------------------------- #
# Start time formatting
# --------------------------------------------------------------------------- #


def test_format_start_time_epoch() -> None:
    """Midnight prints as 12 on the 12-hour clock."""
    assert format_start_time(0) == "1970-01-01_12:00:00 UTC"


def test_format_start_time_afternoon_has_no_am_pm() -> None:
    """13:05:09 and 01:05:09 render identically; the format has no AM/PM marker."""
    afternoon = format_start_time(_epoch_ms(2024, 3, 5, 13, 5, 9))
    morning = format_start_time(_epoch_ms(2024, 3, 5, 1, 5, 9))
    assert afternoon == "2024-03-05_01:05:09 UTC"
    assert morning == afternoon


def test_format_start_time_ignores_millis_and_handles_pre_epoch() -> None:
    assert format_start_time(_epoch_ms(2023, 12, 31, 23, 59, 59) + 999) == "2023-12-31_11:59:59 UTC"
    assert format_start_time(-1000) == "1969-12-31_11:59:59 UTC"


# --------------------------------------------------------------------------- #
# Layout
# --------------------------------------------------------------------------- #


def test_empty_snapshot_writes_header_only() -> None:
    expected = _line(HEADER_TITLES, (22, 22, 22, 12, 22))
    assert _render(UserTaskState([], [])) == expected
    assert expected.startswith("\nUSER TASK ID")
    assert expected.count("\n") == 1


def test_single_active_task_exact_table() -> None:
    state = UserTaskState([_task(ID_1)], [])
    widths = (38, 22, 25, 12, 22)

    expected = _line(HEADER_TITLES, widths) + _line(
        (str(ID_1), "10.0.0.1", "1970-01-01_12:00:00 UTC", "Active", "/tasks?x=1"), widths
    )
    assert _render(state) == expected


def test_rows_follow_bucket_then_snapshot_order() -> None:
    state = UserTaskState(
        [_task(ID_2, url="/second-active"), _task(ID_1, url="/first-active")],
        [_task(UUID(int=5), url="/done")],
    )
    rows = _render(state).split("\n")[2:]

    assert [row.split()[4] for row in rows] == ["Active", "Active", "Completed"]
    assert [row.split()[5] for row in rows] == ["/second-active", "/first-active", "/done"]


def test_widths_ignore_filter() -> None:
    """A long value in a filtered-out row still widens its column."""
    long_client = "client-identity-of-25-chr"
    assert len(long_client) == 25
    state = UserTaskState([_task(ID_1, client=long_client)], [_task(ID_2)])

    assert column_widths(state)[1] == 27
    text = _render(state, {ID_2})
    header = text.split("\n")[1]
    assert header.startswith(f"{'USER TASK ID':<38}{'CLIENT ADDRESS':<27}START TIME")
    assert long_client not in text
    assert str(ID_2) in text


def test_filter_semantics_match_json() -> None:
    state = UserTaskState([_task(ID_1)], [_task(ID_2)])
    assert _render(state, None) == _render(state, set())
    assert format_table(state, {UUID(int=9)}).count("\n") == 1
    assert str(ID_1) not in _render(state, {ID_2})


def test_long_values_are_not_truncated() -> None:
    url = "/kafkacruisecontrol/rebalance?" + "x" * 60
    state = UserTaskState([], [_task(ID_1, url=url)])
    assert _render(state).endswith(url + "  ")


def test_output_is_utf8() -> None:
    state = UserTaskState([_task(ID_1, client="hôte")], [])
    buf = io.BytesIO()
    write_table(state, buf)
    assert "hôte".encode() in buf.getvalue()


# --------------------------------------------------------------------------- #
# Write failures
# --------------------------------------------------------------------------- #


def test_write_failure_is_logged_not_raised() -> None:
    sink = MagicMock()
    sink.write.side_effect = OSError("broken pipe")
    logger = MagicMock()

    state = UserTaskState([_task(ID_1)], [])
    assert state.write_output_stream(sink, None, logger) is None

    logger.error.assert_called_once()
    args, kwargs = logger.error.call_args
    assert args[0] == "Failed to write output stream."
    assert kwargs["exc_info"] is True


def test_closed_sink_is_logged_not_raised() -> None:
    sink = io.BytesIO()
    sink.close()
    logger = MagicMock()

    write_table(UserTaskState([], []), sink, None, logger)

    logger.error.assert_called_once()
    assert logger.error.call_args.args[0] == "Failed to write output stream."


# --------------------------------------------------------------------------- #
# Edge values
# --------------------------------------------------------------------------- #


def test_format_start_time_late_december_uses_calendar_year() -> None:
    """The year is the calendar year, not the week-based year."""
    assert format_start_time(_epoch_ms(2024, 12, 30, 13, 0, 0)) == "2024-12-30_01:00:00 UTC"
    assert format_start_time(_epoch_ms(2025, 12, 31, 0, 0, 0)) == "2025-12-31_12:00:00 UTC"


def test_format_start_time_beyond_year_9999() -> None:
    assert format_start_time(253_402_300_800_000) == "10000-01-01_12:00:00 UTC"
    assert format_start_time(2**63 - 1) == "292278994-08-17_07:12:55 UTC"


def test_table_renders_extreme_start_times() -> None:
    state = UserTaskState([_task(ID_1, start=2**63 - 1)], [_task(ID_2, start=-(2**63))])

    widths = column_widths(state)
    text = _render(state)

    assert "292278994-08-17_07:12:55 UTC" in text
    assert widths[2] >= len("292278994-08-17_07:12:55 UTC") + 2
    assert text.count("\n") == 3


def test_widths_count_utf16_units() -> None:
    """Characters outside the BMP take two units, as a UTF-16 length would count them."""
    rockets = "\U0001f680" * 11
    state = UserTaskState([_task(ID_1, client=rockets)], [])

    assert column_widths(state)[1] == 24
    row = _render(state).split("\n")[2]
    assert f"{str(ID_1):<38}{rockets}  1970-01-01_12:00:00 UTC" in row

