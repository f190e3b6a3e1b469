"""
Direct execution path - runs a validated document with graphql-core.

Used whenever the cost-bounded path declines.
"""

from __future__ import annotations

from inspect import isawaitable
from typing import Any

from graphql import DocumentNode, execute

from ..core.defs import ExecutionOutcome, RequestDescriptor
from ..extensions.base import extension_middleware


class DirectExecutionPath:
    """
    Thin pass-through to graphql.execute.

    Usage:
        outcome = await DirectExecutionPath().execute(descriptor, document, context)
    """

    async def execute(
        self,
        descriptor: RequestDescriptor,
        document: DocumentNode,
        context: Any,
        with_extensions: bool = False,
    ) -> ExecutionOutcome:
        """
        Execute the document against the descriptor's schema.

        Args:
            descriptor: Request whose schema, root value, variables,
                operation name and field resolver are forwarded
            document: Validated document
            context: Per-request context value
            with_extensions: Install the extension field middleware

        Returns:
            ExecutionOutcome with data and errors exactly as executed
        """
        result = execute(
            descriptor.schema,
            document,
            descriptor.root_value,
            context,
            descriptor.variables,
            descriptor.operation_name,
            descriptor.field_resolver,
            middleware=[extension_middleware] if with_extensions else None,
        )
        if isawaitable(result):
            result = await result

        return ExecutionOutcome(data=result.data, errors=result.errors)
