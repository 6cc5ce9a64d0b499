# src/taskstate/cli.py
"""
taskstate Command Line Interface (CLI).

This module implements the terminal interface using `typer` and `rich`.

Features
--------
- **show**: Render a saved user-task snapshot as the aligned table or as JSON.
- **serve**: Run the HTTP status API under uvicorn.

Usage
-----
    # Table of every task in a snapshot file
    $ taskstate show snapshot.json

    # JSON document, restricted to two tasks
    $ taskstate show snapshot.json --json --id <uuid> --id <uuid>

Snapshot files look like ``{"active": [...], "completed": [...]}`` where each
item has ``id``, ``request_url``, ``client_identity`` and ``start_ms``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from taskstate.core.contracts import SnapshotFile
from taskstate.core.settings import get_logger, load_settings
from taskstate.core.state import UserTaskState, parse_user_task_ids

load_dotenv()

app = typer.Typer(
    help="taskstate: show active and completed user tasks.",
    rich_markup_mode="markdown",
)
err_console = Console(stderr=True)


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _load_snapshot(path: Path) -> UserTaskState:
    """Read and validate a snapshot file into a :class:`UserTaskState`."""
    data = SnapshotFile.model_validate_json(path.read_text(encoding="utf-8"))
    return UserTaskState(data.active, data.completed)


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def show(
    snapshot_file: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Path to a JSON snapshot of active and completed tasks.",
        ),
    ],
    as_json: Annotated[
        bool,
        typer.Option("--json", "-j", help="Print the JSON document instead of the table."),
    ] = False,
    ids: Annotated[
        list[str] | None,
        typer.Option(
            "--id",
            "-i",
            help="Only show these task ids (repeatable, or comma-separated).",
        ),
    ] = None,
    version: Annotated[
        int | None,
        typer.Option(
            "--version", "-V", min=0, help="JSON document version (default from settings)."
        ),
    ] = None,
) -> None:
    """Render a user-task snapshot file."""
    try:
        task_ids = parse_user_task_ids(ids)
        state = _load_snapshot(snapshot_file)
    except (OSError, ValidationError, ValueError) as e:
        err_console.print(f"[bold red]❌ Snapshot Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    if as_json:
        doc_version = load_settings().json_version if version is None else version
        typer.echo(state.get_json_string(doc_version, task_ids))
        return

    stdout = typer.get_binary_stream("stdout")
    state.write_output_stream(stdout, task_ids, get_logger("taskstate.cli"))
    stdout.write(b"\n")
    stdout.flush()


@app.command()  # type: ignore[misc]
def serve(
    host: Annotated[str | None, typer.Option("--host", help="Bind address.")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Bind port.")] = None,
    reload: Annotated[bool, typer.Option("--reload", help="Auto-reload on code changes.")] = False,
) -> None:
    """Run the HTTP status API."""
    from taskstate.api.server import main

    main(host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
