"""
Cost-bounded execution path.

Asks an injected cost evaluator whether a query can be answered within a
bound. The evaluator either declines (results is None), reports validation
errors it found while walking the query, or returns results that can be
materialized into a serialized data fragment. The fragment is wrapped in a
data envelope and parsed, so the outcome has the same shape as direct
execution.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from inspect import isawaitable
from typing import TYPE_CHECKING, Any, Awaitable, Optional, Protocol, Union

from graphql import DocumentNode, GraphQLError, GraphQLSchema, TypeInfo, ValidationContext

from ..core.defs import ExecutionOutcome
from ..core.errors import CostEvaluationError

if TYPE_CHECKING:
    from ..core.defs import RequestDescriptor

logger = logging.getLogger(__name__)


class CostValidationContext(ValidationContext):
    """ValidationContext that keeps the errors reported to it."""

    def __init__(self, schema: GraphQLSchema, document: DocumentNode, type_info: Optional[TypeInfo] = None):
        self.errors: list[GraphQLError] = []
        super().__init__(schema, document, type_info or TypeInfo(schema), self.errors.append)

    def get_errors(self) -> list[GraphQLError]:
        return list(self.errors)


@dataclass
class CostEvaluation:
    """
    Result of a cost evaluation.

    results is None when the evaluator declines; index is evaluator-specific
    bookkeeping handed back to materialize().
    """
    results: Any
    validation_context: CostValidationContext
    index: Any = None

    @property
    def declined(self) -> bool:
        return self.results is None

    def get_errors(self) -> list[GraphQLError]:
        return self.validation_context.get_errors()


class CostEvaluator(Protocol):
    """
    Interface of an external cost/size evaluator.

    Both methods may return their value directly or an awaitable of it.
    """

    def evaluate(
        self,
        loaders: Any,
        limit: int,
        validation_context: CostValidationContext,
        descriptor: "RequestDescriptor",
    ) -> Union[CostEvaluation, Awaitable[CostEvaluation]]:
        ...

    def materialize(self, results: Any, index: Any) -> Union[str, Awaitable[str]]:
        ...


class CostBoundedExecutionPath:
    """
    Adapter around an optional CostEvaluator.

    Usage:
        path = CostBoundedExecutionPath(descriptor.cost_evaluator, limit=config.cost_limit)
        pending = path.evaluate(path.create_loaders(descriptor), context, descriptor)
        evaluation = await pending if isawaitable(pending) else pending
        if not evaluation.declined:
            outcome = await path.reconcile(evaluation)
    """

    def __init__(self, evaluator: Optional[CostEvaluator], limit: int):
        self.evaluator = evaluator
        self.limit = limit

    def create_loaders(self, descriptor: "RequestDescriptor") -> Any:
        """Build the evaluator's per-request loaders."""
        factory = descriptor.loaders or dict
        return factory()

    def evaluate(
        self,
        loaders: Any,
        validation_context: CostValidationContext,
        descriptor: "RequestDescriptor",
    ) -> Union[CostEvaluation, Awaitable[CostEvaluation]]:
        """
        Start the evaluation.

        Without an evaluator the path declines immediately and nothing is
        invoked. Exceptions raised by the evaluator before it returns
        propagate synchronously to the caller.
        """
        if self.evaluator is None:
            return CostEvaluation(results=None, validation_context=validation_context)
        return self.evaluator.evaluate(loaders, self.limit, validation_context, descriptor)

    async def reconcile(self, evaluation: CostEvaluation) -> ExecutionOutcome:
        """Materialize the evaluation's fragment and parse it into an ExecutionOutcome."""
        fragment = self.evaluator.materialize(evaluation.results, evaluation.index)
        if isawaitable(fragment):
            fragment = await fragment

        envelope = '{"data":{' + fragment + "}}"
        try:
            payload = json.loads(envelope)
        except json.JSONDecodeError as e:
            logger.error(f"Cost evaluator produced an invalid fragment: {e}")
            raise CostEvaluationError(str(e), fragment=fragment)

        return ExecutionOutcome(data=payload.get("data"), errors=payload.get("errors"))
