"""
Extension lifecycle contract and the per-request extension stack.

An extension observes a request at fixed points:

    request_did_start
      calculation_did_start / calculation_did_end
      execution_did_start
        will_resolve_field (once per resolved field)
      execution_did_end
    request_did_end
    format -> (key, value) contributed to response["extensions"]

Every capability is optional; the base class implements each as a no-op.
"""

from __future__ import annotations

import logging
from inspect import isawaitable
from typing import Any, Callable, Optional, Sequence

from graphql import GraphQLResolveInfo, GraphQLSchema

from ..core.context import get_extension_stack

logger = logging.getLogger(__name__)

# Called as did_resolve(error, result) once the field has resolved.
EndHandler = Callable[[Optional[Exception], Any], None]

SCHEMA_MARKER = "_runquery_extensions_enabled"


class GraphQLExtension:
    """
    Base class for request lifecycle observers.

    Subclasses override only the capabilities they need.
    """

    def request_did_start(self) -> None:
        pass

    def calculation_did_start(self) -> None:
        pass

    def calculation_did_end(self) -> None:
        pass

    def execution_did_start(self) -> None:
        pass

    def will_resolve_field(
        self,
        source: Any,
        args: dict[str, Any],
        context: Any,
        info: GraphQLResolveInfo,
    ) -> Optional[EndHandler]:
        return None

    def execution_did_end(self) -> None:
        pass

    def request_did_end(self) -> None:
        pass

    def format(self) -> Optional[tuple[str, Any]]:
        return None


class ExtensionStack:
    """
    Ordered set of extensions for one request.

    Usage:
        stack = ExtensionStack([TracingExtension()])
        stack.request_did_start()
        ...
        response["extensions"] = stack.format()

    Extension failures are not caught here; they propagate to the caller.
    """

    def __init__(self, extensions: Sequence[GraphQLExtension]):
        self.extensions = list(extensions)

    def request_did_start(self) -> None:
        for extension in self.extensions:
            extension.request_did_start()

    def calculation_did_start(self) -> None:
        for extension in self.extensions:
            extension.calculation_did_start()

    def calculation_did_end(self) -> None:
        for extension in self.extensions:
            extension.calculation_did_end()

    def execution_did_start(self) -> None:
        for extension in self.extensions:
            extension.execution_did_start()

    def will_resolve_field(
        self,
        source: Any,
        args: dict[str, Any],
        context: Any,
        info: GraphQLResolveInfo,
    ) -> EndHandler:
        """
        Notify every extension that a field is about to resolve.

        Returns one handler that runs the extensions' end handlers in reverse
        registration order.
        """
        handlers = []
        for extension in self.extensions:
            handler = extension.will_resolve_field(source, args, context, info)
            if handler is not None:
                handlers.append(handler)

        def did_resolve(error: Optional[Exception], result: Any) -> None:
            for handler in reversed(handlers):
                handler(error, result)

        return did_resolve

    def execution_did_end(self) -> None:
        for extension in self.extensions:
            extension.execution_did_end()

    def request_did_end(self) -> None:
        for extension in self.extensions:
            extension.request_did_end()

    def format(self) -> dict[str, Any]:
        """Merge each extension's (key, value) contribution into one dict."""
        formatted: dict[str, Any] = {}
        for extension in self.extensions:
            contribution = extension.format()
            if contribution is None:
                continue
            key, value = contribution
            formatted[key] = value
        return formatted


def build_extension_stack(factories: Sequence[Callable[[], GraphQLExtension]]) -> ExtensionStack:
    """Instantiate a fresh extension from each factory."""
    return ExtensionStack([factory() for factory in factories])


def enable_extensions(schema: GraphQLSchema) -> GraphQLSchema:
    """
    Mark a schema as extension-enabled.

    Field notifications are delivered by extension_middleware, which the
    direct execution path installs for requests that carry a stack, so the
    shared schema's resolvers are never rewritten. Idempotent.
    """
    if not getattr(schema, SCHEMA_MARKER, False):
        setattr(schema, SCHEMA_MARKER, True)
        logger.debug("Extensions enabled for schema")
    return schema


def extensions_enabled(schema: GraphQLSchema) -> bool:
    return bool(getattr(schema, SCHEMA_MARKER, False))


def extension_middleware(next_, root, info: GraphQLResolveInfo, **args):
    """
    graphql-core field middleware bracketing each resolver with
    will_resolve_field and its end handler.

    Introspection fields and requests without a stack pass straight through.
    """
    stack = get_extension_stack(info.context)
    if stack is None or info.field_name.startswith("__") or info.parent_type.name.startswith("__"):
        return next_(root, info, **args)

    did_resolve = stack.will_resolve_field(root, args, info.context, info)
    try:
        result = next_(root, info, **args)
    except Exception as error:
        did_resolve(error, None)
        raise

    if isawaitable(result):
        async def await_result():
            try:
                value = await result
            except Exception as error:
                did_resolve(error, None)
                raise
            did_resolve(None, value)
            return value

        return await_result()

    did_resolve(None, result)
    return result
