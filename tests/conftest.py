"""
Shared fixtures: a small schema, a recording extension and fake cost evaluators.
"""

import asyncio
import functools

import pytest
from graphql import (
    GraphQLArgument,
    GraphQLField,
    GraphQLList,
    GraphQLObjectType,
    GraphQLSchema,
    GraphQLString,
)

from runquery import CostEvaluation, GraphQLExtension, QueryRunner, RunnerConfig


HEROES = {
    "1": {"id": "1", "name": "Luke", "friends": ["2"]},
    "2": {"id": "2", "name": "Leia", "friends": ["1"]},
}


def _resolve_failing(root, info):
    raise ValueError("boom")


async def _resolve_slow(root, info):
    await asyncio.sleep(0)
    return "slow"


def build_test_schema() -> GraphQLSchema:
    hero_type = GraphQLObjectType(
        "Hero",
        lambda: {
            "id": GraphQLField(GraphQLString),
            "name": GraphQLField(GraphQLString),
            "friends": GraphQLField(
                GraphQLList(hero_type),
                resolve=lambda hero, info: [HEROES[i] for i in hero["friends"]],
            ),
        },
    )
    query_type = GraphQLObjectType(
        "Query",
        {
            "hello": GraphQLField(
                GraphQLString,
                args={"name": GraphQLArgument(GraphQLString)},
                resolve=lambda root, info, name="stranger": f"Hello, {name}!",
            ),
            "hero": GraphQLField(
                hero_type,
                args={"id": GraphQLArgument(GraphQLString)},
                resolve=lambda root, info, id="1": HEROES.get(id),
            ),
            "failing": GraphQLField(GraphQLString, resolve=_resolve_failing),
            "slow": GraphQLField(GraphQLString, resolve=_resolve_slow),
            "viewer": GraphQLField(
                GraphQLString,
                resolve=lambda root, info: info.context.get("user"),
            ),
        },
    )
    return GraphQLSchema(query=query_type)


class RecordingExtension(GraphQLExtension):
    """Appends every lifecycle call to a shared list."""

    def __init__(self, calls: list, name: str = "recorder"):
        self.calls = calls
        self.name = name

    def request_did_start(self):
        self.calls.append("request_did_start")

    def calculation_did_start(self):
        self.calls.append("calculation_did_start")

    def calculation_did_end(self):
        self.calls.append("calculation_did_end")

    def execution_did_start(self):
        self.calls.append("execution_did_start")

    def will_resolve_field(self, source, args, context, info):
        self.calls.append(f"will_resolve_field:{info.field_name}")

        def did_resolve(error, result):
            self.calls.append(f"did_resolve_field:{info.field_name}")

        return did_resolve

    def execution_did_end(self):
        self.calls.append("execution_did_end")

    def request_did_end(self):
        self.calls.append("request_did_end")

    def format(self):
        self.calls.append("format")
        return (self.name, {"calls": len(self.calls)})


class FakeCostEvaluator:
    """Cost evaluator returning canned results and reporting canned errors."""

    def __init__(self, results=None, fragment="", errors=(), raise_on_evaluate=None):
        self.results = results
        self.fragment = fragment
        self.errors = list(errors)
        self.raise_on_evaluate = raise_on_evaluate
        self.calls = []

    def evaluate(self, loaders, limit, validation_context, descriptor):
        self.calls.append(("evaluate", loaders, limit))
        if self.raise_on_evaluate is not None:
            raise self.raise_on_evaluate
        for error in self.errors:
            validation_context.report_error(error)
        return CostEvaluation(results=self.results, validation_context=validation_context, index="index")

    def materialize(self, results, index):
        self.calls.append(("materialize", results, index))
        return self.fragment


class AsyncFakeCostEvaluator(FakeCostEvaluator):
    """Same as FakeCostEvaluator, but both calls are coroutines."""

    async def evaluate(self, loaders, limit, validation_context, descriptor):
        await asyncio.sleep(0)
        return FakeCostEvaluator.evaluate(self, loaders, limit, validation_context, descriptor)

    async def materialize(self, results, index):
        await asyncio.sleep(0)
        return FakeCostEvaluator.materialize(self, results, index)


@pytest.fixture
def schema():
    return build_test_schema()


@pytest.fixture
def runner():
    """Runner with debug off, independent of the process environment."""
    return QueryRunner(RunnerConfig(debug=False))


@pytest.fixture
def calls():
    return []


@pytest.fixture
def recorder(calls):
    """Extension factory bound to the shared calls list."""
    return functools.partial(RecordingExtension, calls)


@pytest.fixture
def events():
    return []


@pytest.fixture
def log_function(events):
    return events.append


def event_names(events):
    """Render LogEvents as 'action/step' strings (status events include their key)."""
    names = []
    for event in events:
        name = f"{event.action.value}/{event.step.value}"
        if event.key:
            name += f":{event.key}"
        names.append(name)
    return names
