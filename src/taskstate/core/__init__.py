"""Core package initializer for taskstate.

Settings and logging live in ``taskstate.core.settings``; the task record
contract in ``taskstate.core.contracts``; snapshot rendering in
``taskstate.core.state``.
"""

from __future__ import annotations

__all__ = ["__doc__"]
