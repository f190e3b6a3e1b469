"""
runquery - GraphQL request orchestration.

Drives a query through parse, validation, optional cost evaluation and
execution, notifying extensions at every phase boundary and answering every
outcome with one response shape: {data?, errors?, extensions?}.

Usage:
    from runquery import run_query

    response = await run_query(query="{ hello }", schema=schema, tracing=True)
"""

from __future__ import annotations

from .api import create_graphql_router
from .core import (
    CacheControlConfig,
    ConfigError,
    CostEvaluationError,
    DEFAULT_COST_LIMIT,
    ExecutionOutcome,
    GraphQLRequest,
    LogAction,
    LogEvent,
    LogStep,
    QueryDocument,
    QuerySource,
    QueryText,
    RequestDescriptor,
    RunnerConfig,
    RunQueryError,
    load_config,
)
from .extensions import (
    CacheControlExtension,
    ExtensionStack,
    GraphQLExtension,
    TracingExtension,
    enable_extensions,
)
from .runtime import (
    CostBoundedExecutionPath,
    CostEvaluation,
    CostEvaluator,
    CostValidationContext,
    DirectExecutionPath,
    ErrorFormatter,
    LogEmitter,
    QueryRunner,
    ResponseAssembler,
    run_query,
)

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "run_query",
    "QueryRunner",
    "create_graphql_router",
    # Definitions
    "RequestDescriptor",
    "ExecutionOutcome",
    "QueryText",
    "QueryDocument",
    "QuerySource",
    "GraphQLRequest",
    # Logging
    "LogAction",
    "LogStep",
    "LogEvent",
    "LogEmitter",
    # Errors
    "RunQueryError",
    "ConfigError",
    "CostEvaluationError",
    "ErrorFormatter",
    # Config
    "RunnerConfig",
    "DEFAULT_COST_LIMIT",
    "load_config",
    # Extensions
    "GraphQLExtension",
    "ExtensionStack",
    "TracingExtension",
    "CacheControlExtension",
    "CacheControlConfig",
    "enable_extensions",
    # Execution paths
    "CostEvaluator",
    "CostEvaluation",
    "CostValidationContext",
    "CostBoundedExecutionPath",
    "DirectExecutionPath",
    "ResponseAssembler",
]
