"""
Query runner - drives one request through its phases.

    request/start
      parse/start .. parse/end            (text queries only)
      validation/start .. validation/end
      cost evaluation                      (declines without an evaluator)
      execute/start .. execute/end         (fragment merge or direct execution)
    request/end

Every caller-facing failure becomes a response; nothing is raised for
syntax, validation or execution errors.

Parse and validation failures return before request/end is logged and before
request_did_end reaches the extensions. Consumers may rely on this, so it is
kept as is.
"""

from __future__ import annotations

import functools
import logging
from inspect import isawaitable
from typing import Any, Callable, Optional

from graphql import DocumentNode, GraphQLSyntaxError, specified_rules, validate

from ..core.config import RunnerConfig, default_config
from ..core.context import attach_extension_stack
from ..core.defs import RequestDescriptor
from ..core.query_types import LogAction, QueryText
from ..extensions.base import (
    ExtensionStack,
    GraphQLExtension,
    build_extension_stack,
    enable_extensions,
)
from ..extensions.cache_control import CacheControlExtension
from ..extensions.tracing import TracingExtension
from .assembler import ResponseAssembler
from .cost_path import CostBoundedExecutionPath, CostEvaluation, CostValidationContext
from .executor import DirectExecutionPath
from .formatter import ErrorFormatter
from .log import LogEmitter

logger = logging.getLogger(__name__)


class QueryRunner:
    """
    Coordinates parse, validation, cost evaluation and execution.

    Usage:
        runner = QueryRunner(RunnerConfig(debug=False))
        response = await runner.run(RequestDescriptor(query="{ hello }", schema=schema))
    """

    def __init__(self, config: Optional[RunnerConfig] = None):
        self.config = config or default_config
        self.assembler = ResponseAssembler()
        self.direct_path = DirectExecutionPath()

    def extension_factories(self, descriptor: RequestDescriptor) -> list[Callable[[], GraphQLExtension]]:
        """Built-in extensions selected by the request flags, then the request's own."""
        factories: list[Callable[[], GraphQLExtension]] = []

        tracing = descriptor.tracing if descriptor.tracing is not None else self.config.tracing
        if tracing:
            factories.append(TracingExtension)

        cache_control = descriptor.cache_control
        if cache_control is None:
            cache_control = self.config.cache_control
        if cache_control is True:
            factories.append(CacheControlExtension)
        elif cache_control:
            factories.append(functools.partial(CacheControlExtension, cache_control))

        factories.extend(descriptor.extensions)
        return factories

    async def run(self, descriptor: RequestDescriptor) -> Any:
        log = LogEmitter(descriptor.log_function)
        formatter = ErrorFormatter(descriptor.format_error)
        debug = descriptor.debug if descriptor.debug is not None else self.config.debug

        log.start(LogAction.request)
        context = descriptor.context if descriptor.context is not None else {}

        stack: Optional[ExtensionStack] = None
        factories = self.extension_factories(descriptor)
        if factories:
            stack = build_extension_stack(factories)
            attach_extension_stack(context, stack)
            enable_extensions(descriptor.schema)
            stack.request_did_start()

        source = descriptor.query
        log.status("query", source.to_text())
        log.status("variables", descriptor.variables)
        log.status("operationName", descriptor.operation_name)

        if isinstance(source, QueryText):
            log.start(LogAction.parse)
            try:
                document = source.resolve()
            except GraphQLSyntaxError as syntax_error:
                log.end(LogAction.parse)
                return {"errors": formatter.format([syntax_error])}
            log.end(LogAction.parse)
        else:
            document = source.resolve()

        rules = list(specified_rules)
        rules.extend(descriptor.validation_rules)

        log.start(LogAction.validation)
        validation_errors = validate(descriptor.schema, document, rules)
        log.end(LogAction.validation)
        if validation_errors:
            return {"errors": formatter.format(validation_errors)}

        # Only exceptions raised while starting the cost evaluation are caught
        # here; failures of the awaited stages below propagate to the caller.
        cost_path = CostBoundedExecutionPath(descriptor.cost_evaluator, limit=self.config.cost_limit)
        try:
            if stack is not None:
                stack.calculation_did_start()
            validation_context = CostValidationContext(descriptor.schema, document)
            loaders = cost_path.create_loaders(descriptor)
            pending = cost_path.evaluate(loaders, validation_context, descriptor)
        except Exception as execution_error:
            logger.debug(f"Execution setup failed: {execution_error}")
            log.end(LogAction.execute)
            log.end(LogAction.request)
            return {"errors": formatter.format([execution_error])}

        evaluation = await pending if isawaitable(pending) else pending
        return await self._finish(evaluation, cost_path, document, context, stack, descriptor, log, debug)

    async def _finish(
        self,
        evaluation: CostEvaluation,
        cost_path: CostBoundedExecutionPath,
        document: DocumentNode,
        context: Any,
        stack: Optional[ExtensionStack],
        descriptor: RequestDescriptor,
        log: LogEmitter,
        debug: bool,
    ) -> Any:
        if stack is not None:
            stack.calculation_did_end()
            stack.execution_did_start()

        cost_errors = evaluation.get_errors()
        if cost_errors:
            log.end(LogAction.request)
            return self.assembler.assemble(None, cost_errors, stack, descriptor, debug)

        log.start(LogAction.execute)
        if evaluation.declined:
            outcome = await self.direct_path.execute(
                descriptor, document, context, with_extensions=stack is not None
            )
        else:
            outcome = await cost_path.reconcile(evaluation)
        log.end(LogAction.execute)
        log.end(LogAction.request)

        return self.assembler.assemble(outcome.data, outcome.errors, stack, descriptor, debug)


_default_runner: Optional[QueryRunner] = None


def get_default_runner() -> QueryRunner:
    """Get or create the runner built from the process default config."""
    global _default_runner
    if _default_runner is None:
        _default_runner = QueryRunner()
    return _default_runner


async def run_query(descriptor: Optional[RequestDescriptor] = None, **options: Any) -> Any:
    """
    Run one query with the default runner.

    Usage:
        response = await run_query(query="{ hello }", schema=schema, tracing=True)
        response = await run_query(RequestDescriptor(query=document, schema=schema))
    """
    if descriptor is None:
        descriptor = RequestDescriptor.from_options(**options)
    elif options:
        raise TypeError("Pass either a RequestDescriptor or keyword options, not both")
    return await get_default_runner().run(descriptor)
