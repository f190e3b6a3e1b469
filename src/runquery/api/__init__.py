"""
API module - FastAPI endpoints.
"""

from __future__ import annotations

from .router import create_graphql_router

__all__ = [
    "create_graphql_router",
]
