"""
Tests for the extension stack and the built-in extensions.
"""

from types import MappingProxyType

import pytest
from graphql import build_schema, execute, parse

from conftest import RecordingExtension
from runquery.core.context import attach_extension_stack, get_extension_stack
from runquery.extensions import (
    CacheControlExtension,
    ExtensionStack,
    GraphQLExtension,
    TracingExtension,
    build_extension_stack,
    enable_extensions,
    extension_middleware,
    extensions_enabled,
)


CACHE_SDL = """
directive @cacheControl(maxAge: Int, scope: CacheControlScope) on FIELD_DEFINITION | OBJECT

enum CacheControlScope { PUBLIC PRIVATE }

type Post @cacheControl(maxAge: 240) {
    id: ID
    title: String
}

type Query {
    latest: Post @cacheControl(maxAge: 30, scope: PRIVATE)
    posts: [Post]
    motd: String
}
"""


def run_with_stack(schema, query, stack, root_value=None):
    context = {}
    attach_extension_stack(context, stack)
    return execute(schema, parse(query), root_value, context, middleware=[extension_middleware])


class TestExtensionStack:
    """ExtensionStack dispatch."""

    def test_calls_in_registration_order(self):
        calls = []
        stack = ExtensionStack([RecordingExtension(calls, "a"), RecordingExtension(calls, "b")])

        stack.request_did_start()
        stack.execution_did_end()

        assert calls == ["request_did_start", "request_did_start", "execution_did_end", "execution_did_end"]

    def test_base_extension_is_noop(self):
        stack = ExtensionStack([GraphQLExtension()])

        stack.request_did_start()
        stack.calculation_did_start()
        stack.calculation_did_end()
        stack.execution_did_start()
        stack.execution_did_end()
        stack.request_did_end()

        assert stack.format() == {}

    def test_empty_stack(self):
        stack = ExtensionStack([])

        stack.request_did_start()

        assert stack.format() == {}

    def test_format_merges_contributions(self):
        class Skipped(GraphQLExtension):
            def format(self):
                return None

        class Keyed(GraphQLExtension):
            def __init__(self, key, value):
                self.key = key
                self.value = value

            def format(self):
                return (self.key, self.value)

        stack = ExtensionStack([Keyed("a", 1), Skipped(), Keyed("b", {"x": 2})])

        assert stack.format() == {"a": 1, "b": {"x": 2}}

    def test_end_handlers_run_in_reverse(self):
        order = []

        class Named(GraphQLExtension):
            def __init__(self, name):
                self.name = name

            def will_resolve_field(self, source, args, context, info):
                order.append(f"start:{self.name}")
                return lambda error, result: order.append(f"end:{self.name}")

        stack = ExtensionStack([Named("a"), GraphQLExtension(), Named("b")])

        did_resolve = stack.will_resolve_field(None, {}, None, None)
        did_resolve(None, "value")

        assert order == ["start:a", "start:b", "end:b", "end:a"]

    def test_failures_are_not_caught(self):
        class Failing(GraphQLExtension):
            def request_did_end(self):
                raise RuntimeError("failed")

        stack = ExtensionStack([Failing()])

        with pytest.raises(RuntimeError):
            stack.request_did_end()

    def test_build_creates_fresh_instances(self):
        first = build_extension_stack([TracingExtension])
        second = build_extension_stack([TracingExtension])

        assert first.extensions[0] is not second.extensions[0]


class TestAttachExtensionStack:
    """Stack back-reference on the execution context."""

    def test_read_only_mapping_rejected(self):
        context = MappingProxyType({"user": "ada"})

        with pytest.raises(TypeError, match="mappingproxy"):
            attach_extension_stack(context, ExtensionStack([]))

    def test_object_without_attributes_rejected(self):
        class Frozen:
            __slots__ = ()

        with pytest.raises(TypeError, match="Frozen"):
            attach_extension_stack(Frozen(), ExtensionStack([]))

    def test_mapping_and_object_contexts(self):
        class Context:
            pass

        stack = ExtensionStack([])
        mapping, obj = {}, Context()

        attach_extension_stack(mapping, stack)
        attach_extension_stack(obj, stack)

        assert get_extension_stack(mapping) is stack
        assert get_extension_stack(obj) is stack
        assert get_extension_stack(MappingProxyType({})) is None


class TestEnableExtensions:
    """Schema marker."""

    def test_idempotent(self, schema):
        assert not extensions_enabled(schema)

        assert enable_extensions(schema) is schema
        enable_extensions(schema)

        assert extensions_enabled(schema)

    def test_resolvers_left_untouched(self, schema):
        resolvers = {name: field.resolve for name, field in schema.query_type.fields.items()}

        enable_extensions(schema)

        assert {name: field.resolve for name, field in schema.query_type.fields.items()} == resolvers


class TestExtensionMiddleware:
    """Field notifications during graphql execution."""

    def test_brackets_each_field(self, schema):
        calls = []
        stack = ExtensionStack([RecordingExtension(calls)])

        result = run_with_stack(schema, "{ hero { name } }", stack)

        assert result.data == {"hero": {"name": "Luke"}}
        assert calls == [
            "will_resolve_field:hero",
            "did_resolve_field:hero",
            "will_resolve_field:name",
            "did_resolve_field:name",
        ]

    def test_resolver_error_reaches_end_handler(self, schema):
        seen = []

        class Watcher(GraphQLExtension):
            def will_resolve_field(self, source, args, context, info):
                return lambda error, result: seen.append((info.field_name, error))

        result = run_with_stack(schema, "{ failing }", ExtensionStack([Watcher()]))

        assert result.errors[0].message == "boom"
        assert seen[0][0] == "failing"
        assert isinstance(seen[0][1], ValueError)

    @pytest.mark.asyncio
    async def test_async_resolver(self, schema):
        calls = []
        stack = ExtensionStack([RecordingExtension(calls)])

        result = await run_with_stack(schema, "{ slow }", stack)

        assert result.data == {"slow": "slow"}
        assert calls == ["will_resolve_field:slow", "did_resolve_field:slow"]

    def test_without_stack_passes_through(self, schema):
        result = execute(schema, parse("{ hello }"), None, {}, middleware=[extension_middleware])

        assert result.data == {"hello": "Hello, stranger!"}

    def test_introspection_not_reported(self, schema):
        calls = []

        run_with_stack(schema, "{ __schema { queryType { name } } }", ExtensionStack([RecordingExtension(calls)]))

        assert calls == []


class TestTracingExtension:
    """Tracing contribution."""

    def test_format(self, schema):
        tracing = TracingExtension()
        stack = ExtensionStack([tracing])

        stack.request_did_start()
        run_with_stack(schema, "{ hero { friends { name } } }", stack)
        stack.request_did_end()
        key, value = tracing.format()

        assert key == "tracing"
        assert value["version"] == 1
        assert value["startTime"].endswith("Z")
        assert value["endTime"].endswith("Z")
        assert value["duration"] >= 0

        resolvers = value["execution"]["resolvers"]
        assert [r["path"] for r in resolvers] == [
            ["hero"],
            ["hero", "friends"],
            ["hero", "friends", 0, "name"],
        ]
        assert resolvers[0]["parentType"] == "Query"
        assert resolvers[0]["returnType"] == "Hero"
        assert resolvers[1]["returnType"] == "[Hero]"
        assert all(r["duration"] >= 0 for r in resolvers)


class TestCacheControlExtension:
    """Cache hints."""

    def test_directive_hints(self):
        schema = build_schema(CACHE_SDL)
        cache_control = CacheControlExtension()
        root = {"latest": {"id": "1"}, "posts": [{"title": "hi"}], "motd": "hello"}

        run_with_stack(schema, "{ latest { id } posts { title } motd }", ExtensionStack([cache_control]), root)
        key, value = cache_control.format()

        assert key == "cacheControl"
        assert value == {
            "version": 1,
            "hints": [
                {"path": ["latest"], "maxAge": 30, "scope": "PRIVATE"},
                {"path": ["posts"], "maxAge": 240},
                {"path": ["motd"], "maxAge": 0},
            ],
        }

    def test_default_max_age(self, schema):
        cache_control = CacheControlExtension({"defaultMaxAge": 15})

        run_with_stack(schema, "{ hero { name } }", ExtensionStack([cache_control]))

        assert cache_control.hints == [{"path": ["hero"], "maxAge": 15}]
