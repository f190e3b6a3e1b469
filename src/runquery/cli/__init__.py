"""
runquery CLI - Command line tools for running and serving queries.
"""

from __future__ import annotations

from .main import app, main

__all__ = ["main", "app"]
