"""
Custom exceptions for the runquery package.

GraphQL-facing errors (syntax, validation, field errors) are graphql-core's
GraphQLError; these cover the runner's own failure modes.
"""

from __future__ import annotations

from typing import Optional


class RunQueryError(Exception):
    """Base exception for all runquery errors."""
    pass


class ConfigError(RunQueryError):
    """Raised when runner configuration is invalid."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(f"Invalid configuration{f' for {key!r}' if key else ''}: {message}")


class CostEvaluationError(RunQueryError):
    """Raised when a cost evaluator produces a fragment that cannot be reconciled."""

    def __init__(self, message: str, fragment: Optional[str] = None):
        self.fragment = fragment
        super().__init__(f"Cost evaluation failed: {message}")
