"""
Cache-control extension - collects per-field cache hints.

A hint is recorded for every root field and every field returning a
composite type, using the configured default max age. A @cacheControl
directive on the returned type or on the field definition overrides it:

    type Post @cacheControl(maxAge: 240) { ... }
    type Query { latest: Post @cacheControl(maxAge: 30, scope: PRIVATE) }

Response contribution:
    "cacheControl": {"version": 1, "hints": [{"path": ["latest"], "maxAge": 30, "scope": "PRIVATE"}]}
"""

from __future__ import annotations

from typing import Any, Optional, Union

from graphql import (
    GraphQLResolveInfo,
    get_named_type,
    is_composite_type,
    value_from_ast_untyped,
)

from ..core.query_types import CacheControlConfig
from .base import GraphQLExtension


DIRECTIVE_NAME = "cacheControl"


def _directive_hint(node: Any) -> dict[str, Any]:
    """Read maxAge/scope from a @cacheControl directive on an AST node."""
    hint: dict[str, Any] = {}
    if node is None:
        return hint
    for directive in getattr(node, "directives", None) or ():
        if directive.name.value != DIRECTIVE_NAME:
            continue
        for argument in directive.arguments or ():
            value = value_from_ast_untyped(argument.value)
            if argument.name.value == "maxAge":
                hint["maxAge"] = value
            elif argument.name.value == "scope":
                hint["scope"] = value
    return hint


class CacheControlExtension(GraphQLExtension):
    """Accumulates cache hints while fields resolve."""

    def __init__(self, config: Union[CacheControlConfig, dict, None] = None):
        if config is None:
            config = CacheControlConfig()
        elif isinstance(config, dict):
            config = CacheControlConfig.model_validate(config)
        self.config = config
        self.hints: list[dict[str, Any]] = []

    def will_resolve_field(
        self,
        source: Any,
        args: dict[str, Any],
        context: Any,
        info: GraphQLResolveInfo,
    ) -> None:
        hint: dict[str, Any] = {}

        target_type = get_named_type(info.return_type)
        if is_composite_type(target_type) or info.path.prev is None:
            hint["maxAge"] = self.config.default_max_age

        hint.update(_directive_hint(getattr(target_type, "ast_node", None)))
        field_def = info.parent_type.fields.get(info.field_name)
        hint.update(_directive_hint(getattr(field_def, "ast_node", None)))

        if hint:
            self.add_hint(info.path.as_list(), hint.get("maxAge"), hint.get("scope"))
        return None

    def add_hint(self, path: list[Union[str, int]], max_age: Optional[int], scope: Optional[str] = None) -> None:
        entry: dict[str, Any] = {"path": path}
        if max_age is not None:
            entry["maxAge"] = max_age
        if scope is not None:
            entry["scope"] = scope
        self.hints.append(entry)

    def format(self) -> tuple[str, Any]:
        return ("cacheControl", {"version": 1, "hints": self.hints})
