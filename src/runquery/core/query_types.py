"""
Query input variants and pydantic models used across the runner.

QueryText / QueryDocument form the tagged query source: a request carries
either raw GraphQL text or an already parsed document, and one resolution
step turns either into a DocumentNode.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from graphql import DocumentNode, parse, print_ast
from pydantic import BaseModel, ConfigDict, Field


# --- Query source (tagged variant) ---

@dataclass(frozen=True)
class QueryText:
    """Raw query text; resolving it parses it and may raise GraphQLSyntaxError."""
    text: str

    def to_text(self) -> str:
        return self.text

    def resolve(self) -> DocumentNode:
        return parse(self.text)


@dataclass(frozen=True)
class QueryDocument:
    """Pre-parsed query document; resolving it is the identity."""
    document: DocumentNode

    def to_text(self) -> str:
        return print_ast(self.document)

    def resolve(self) -> DocumentNode:
        return self.document


QuerySource = Union[QueryText, QueryDocument]


def as_query_source(value: Union[str, DocumentNode, QueryText, QueryDocument]) -> QuerySource:
    """
    Wrap a raw query value into its QuerySource variant.

    Examples:
        "{ hello }"        -> QueryText("{ hello }")
        parse("{ hello }") -> QueryDocument(<DocumentNode>)
    """
    if isinstance(value, (QueryText, QueryDocument)):
        return value
    if isinstance(value, str):
        return QueryText(value)
    if isinstance(value, DocumentNode):
        return QueryDocument(value)
    raise TypeError(f"Query must be a string or DocumentNode, got {type(value).__name__}")


# --- Structured log events ---

class LogAction(str, Enum):
    """Phase a log event belongs to."""
    request = "request"
    parse = "parse"
    validation = "validation"
    execute = "execute"


class LogStep(str, Enum):
    """Position of a log event within its phase."""
    start = "start"
    end = "end"
    status = "status"


class LogEvent(BaseModel):
    """
    Structured event handed to a request's log function.

    Example:
        LogEvent(action=LogAction.request, step=LogStep.status, key="query", data="{ hello }")
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    action: LogAction
    step: LogStep
    key: Optional[str] = None
    data: Any = None


# --- Extension configuration ---

class CacheControlConfig(BaseModel):
    """
    Configuration for the cache-control extension.

    Input: {"defaultMaxAge": 60}
    Normalized: CacheControlConfig(default_max_age=60)
    """
    model_config = ConfigDict(populate_by_name=True)

    default_max_age: int = Field(0, ge=0, alias="defaultMaxAge")


# --- HTTP request body ---

class GraphQLRequest(BaseModel):
    """
    One GraphQL request as sent over HTTP.

    Example:
    {
        "query": "query Hello($name: String) { hello(name: $name) }",
        "variables": {"name": "world"},
        "operationName": "Hello"
    }
    """
    model_config = ConfigDict(populate_by_name=True)

    query: Optional[str] = None
    variables: Optional[dict[str, Any]] = None
    operation_name: Optional[str] = Field(None, alias="operationName")
