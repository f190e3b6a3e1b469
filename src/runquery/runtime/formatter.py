"""
Error formatter - turns errors into their wire representation.

A caller-supplied format_error hook is applied per error. If the hook raises,
the failure is logged and that one error is replaced by a generic
"Internal server error"; the rest of the batch is unaffected.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional

from graphql import GraphQLError

logger = logging.getLogger(__name__)

INTERNAL_SERVER_ERROR = "Internal server error"


def as_graphql_error(error: Any) -> GraphQLError:
    """Wrap non-GraphQL errors so they share GraphQLError's formatting."""
    if isinstance(error, GraphQLError):
        return error
    if isinstance(error, Exception):
        return GraphQLError(str(error), original_error=error)
    return GraphQLError(str(error))


def default_format_error(error: Any) -> dict[str, Any]:
    return as_graphql_error(error).formatted


class ErrorFormatter:
    """
    Formats batches of errors.

    Usage:
        formatter = ErrorFormatter(descriptor.format_error)
        response["errors"] = formatter.format(errors)
    """

    def __init__(self, format_error: Optional[Callable[[Any], Any]] = None):
        self.format_error = format_error

    def format(self, errors: Iterable[Any]) -> list[Any]:
        return [self.format_one(error) for error in errors]

    def format_one(self, error: Any) -> Any:
        if self.format_error is None:
            return default_format_error(error)
        try:
            return self.format_error(error)
        except Exception as e:
            logger.error(f"Error in format_error function: {e}", exc_info=e)
            return default_format_error(GraphQLError(INTERNAL_SERVER_ERROR))


def log_error_trace(error: Any) -> None:
    """Write an error's diagnostic trace to the error log."""
    original = getattr(error, "original_error", None) or error
    if isinstance(original, BaseException):
        logger.error(f"{error}", exc_info=original)
    else:
        logger.error(f"{error}")
