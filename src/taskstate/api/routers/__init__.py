"""API routers."""

from __future__ import annotations

from . import user_tasks

__all__ = ["user_tasks"]
