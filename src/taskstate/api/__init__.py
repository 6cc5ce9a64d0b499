"""HTTP surface for taskstate: app factory, task manager, and routers."""

from __future__ import annotations

__all__ = ["__doc__"]
