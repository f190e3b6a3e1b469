"""
Core dataclass definitions for a single query run.

RequestDescriptor is the immutable input of one orchestration run;
ExecutionOutcome is the shape both execution paths normalize to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence, Union

from graphql import GraphQLError, GraphQLSchema

from .query_types import CacheControlConfig, LogEvent, QuerySource, as_query_source

if TYPE_CHECKING:
    from ..extensions.base import GraphQLExtension
    from ..runtime.cost_path import CostEvaluator


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Everything one run needs to know about a request.

    The schema is shared and read-only for the run. The context is owned by
    the caller; the runner only adds the extension stack back-reference to it.
    """
    query: QuerySource
    schema: GraphQLSchema
    root_value: Any = None
    context: Any = None
    variables: Optional[dict[str, Any]] = None
    operation_name: Optional[str] = None
    field_resolver: Optional[Callable[..., Any]] = None
    validation_rules: Sequence[type] = ()  # appended to graphql's specified_rules
    format_error: Optional[Callable[[GraphQLError], Any]] = None
    format_response: Optional[Callable[[dict, "RequestDescriptor"], Any]] = None
    debug: Optional[bool] = None  # None -> RunnerConfig.debug
    tracing: Optional[bool] = None  # None -> RunnerConfig.tracing
    cache_control: Union[bool, CacheControlConfig, dict, None] = None  # None -> RunnerConfig.cache_control
    log_function: Optional[Callable[[LogEvent], Any]] = None
    extensions: Sequence[Callable[[], "GraphQLExtension"]] = field(default_factory=tuple)
    cost_evaluator: Optional["CostEvaluator"] = None
    loaders: Optional[Callable[[], Any]] = None  # per-request loaders for the cost evaluator

    def __post_init__(self):
        """Normalize the query into its tagged variant."""
        object.__setattr__(self, "query", as_query_source(self.query))
        if not isinstance(self.schema, GraphQLSchema):
            raise TypeError(f"Expected a GraphQLSchema, got {type(self.schema).__name__}")

    @classmethod
    def from_options(cls, **options: Any) -> "RequestDescriptor":
        """
        Build a descriptor from keyword options.

        Accepts cost_control as an alias of cache_control.
        """
        if "cost_control" in options:
            cost_control = options.pop("cost_control")
            options.setdefault("cache_control", cost_control)
        return cls(**options)


@dataclass
class ExecutionOutcome:
    """Normalized result of either execution path."""
    data: Optional[dict[str, Any]] = None
    errors: Optional[list[Any]] = None
