"""taskstate: user-task status reporting (JSON and plain-text views)."""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.1.0"
