"""
Core module - request definitions, query types, configuration and errors.
"""

from __future__ import annotations

from .config import (
    DEFAULT_COST_LIMIT,
    RunnerConfig,
    debug_from_environment,
    default_config,
    load_config,
)
from .context import EXTENSION_STACK_KEY, attach_extension_stack, get_extension_stack
from .defs import ExecutionOutcome, RequestDescriptor
from .errors import ConfigError, CostEvaluationError, RunQueryError
from .query_types import (
    CacheControlConfig,
    GraphQLRequest,
    LogAction,
    LogEvent,
    LogStep,
    QueryDocument,
    QuerySource,
    QueryText,
    as_query_source,
)

__all__ = [
    # Definitions
    "RequestDescriptor",
    "ExecutionOutcome",
    # Context
    "EXTENSION_STACK_KEY",
    "attach_extension_stack",
    "get_extension_stack",
    # Errors
    "RunQueryError",
    "ConfigError",
    "CostEvaluationError",
    # Query types
    "QueryText",
    "QueryDocument",
    "QuerySource",
    "as_query_source",
    "LogAction",
    "LogStep",
    "LogEvent",
    "CacheControlConfig",
    "GraphQLRequest",
    # Config
    "RunnerConfig",
    "DEFAULT_COST_LIMIT",
    "debug_from_environment",
    "default_config",
    "load_config",
]
