"""
Smoke tests for package structure and availability.

Scope
-----
These tests verify that the package is installed correctly in the
environment and that top-level modules are importable.
"""

from __future__ import annotations

import importlib

from fastapi.testclient import TestClient

from taskstate import __version__
from taskstate.api.app import create_app
from taskstate.api.task_manager import UserTaskManager


def test_package_importable() -> None:
    mod = importlib.import_module("taskstate")
    assert mod is not None


def test_version_is_set() -> None:
    assert isinstance(__version__, str)
    assert len(__version__) > 0


def test_cli_module_exposes_app() -> None:
    """`taskstate.cli:app` is the console-script entry point."""
    cli = importlib.import_module("taskstate.cli")
    assert hasattr(cli, "app"), "taskstate.cli must expose an 'app' Typer object."


def test_health_endpoint_contract() -> None:
    """`GET /health` returns a stable shape and the package version."""
    client = TestClient(create_app(UserTaskManager(max_completed=1)))

    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "version": __version__}
