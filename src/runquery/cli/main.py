#!/usr/bin/env python3
"""
runquery CLI - Main entry point.

Usage:
    runquery init                                      # Write default runquery.yaml
    runquery query app.schema:schema -q '{ hello }'    # Run one query, print the response
    runquery serve app.schema:schema --port 8000       # Serve /graphql with uvicorn
"""

from __future__ import annotations

import argparse
import asyncio
import importlib
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from graphql import GraphQLSchema, build_schema

from ..core.config import RunnerConfig, default_config, load_config
from ..core.defs import RequestDescriptor
from ..runtime.orchestrator import QueryRunner


def load_schema(target: str) -> GraphQLSchema:
    """
    Load a schema from 'package.module:attribute' or an SDL file path.

    The attribute may be a GraphQLSchema or a zero-argument callable
    returning one.
    """
    path = Path(target)
    if path.suffix in {".graphql", ".gql"} and path.exists():
        return build_schema(path.read_text())

    module_name, _, attribute = target.partition(":")
    if not attribute:
        raise ValueError(f"Schema target must look like 'module:attribute', got {target!r}")
    module = importlib.import_module(module_name)
    schema = getattr(module, attribute)
    if callable(schema) and not isinstance(schema, GraphQLSchema):
        schema = schema()
    if not isinstance(schema, GraphQLSchema):
        raise ValueError(f"{target} is not a GraphQLSchema")
    return schema


def _load_runner_config(args: argparse.Namespace) -> Optional[RunnerConfig]:
    """Load --config, or runquery.yaml when present, else the process default."""
    if not args.config:
        return load_config() or default_config

    config = load_config(args.config)
    if config is None:
        print(f"Error: config file {args.config} not found")
    return config


def cmd_init(args: argparse.Namespace) -> int:
    """Write a default configuration file."""
    config_path = Path(args.path)

    if config_path.exists() and not args.force:
        print(f"Error: {config_path} already exists. Use --force to overwrite.")
        return 1

    RunnerConfig().save(config_path)
    print(f"Created {config_path}")
    return 0


def cmd_query(args: argparse.Namespace) -> int:
    """Run a single query and print the response as JSON."""
    try:
        schema = load_schema(args.schema)
    except (ImportError, AttributeError, ValueError) as e:
        print(f"Error loading schema: {e}")
        return 1

    if args.file:
        query = Path(args.file).read_text()
    elif args.query:
        query = args.query
    else:
        print("Error: provide a query with --query or --file")
        return 1

    try:
        variables = json.loads(args.variables) if args.variables else None
    except ValueError as e:
        print(f"Error: variables are invalid JSON: {e}")
        return 1

    config = _load_runner_config(args)
    if config is None:
        return 1

    runner = QueryRunner(config)
    descriptor = RequestDescriptor(
        query=query,
        schema=schema,
        variables=variables,
        operation_name=args.operation_name,
        tracing=True if args.tracing else None,
    )
    response = asyncio.run(runner.run(descriptor))

    print(json.dumps(response, indent=2, default=str))
    if isinstance(response, dict) and response.get("errors") and "data" not in response:
        return 1
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Serve the schema over HTTP."""
    import uvicorn
    from fastapi import FastAPI

    from ..api import create_graphql_router

    try:
        schema = load_schema(args.schema)
    except (ImportError, AttributeError, ValueError) as e:
        print(f"Error loading schema: {e}")
        return 1

    config = _load_runner_config(args)
    if config is None:
        return 1

    app = FastAPI(title="runquery", description="GraphQL query runner")
    app.include_router(
        create_graphql_router(schema, path=args.path, runner=QueryRunner(config))
    )

    print(f"Serving {args.schema} at http://{args.host}:{args.port}{args.path}")
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="runquery",
        description="runquery - GraphQL request runner"
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument("--config", "-c", help="Path to runquery.yaml")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # init
    init_parser = subparsers.add_parser("init", help="Write default configuration")
    init_parser.add_argument("--path", default="runquery.yaml", help="Config file path")
    init_parser.add_argument("--force", "-f", action="store_true", help="Overwrite existing config")

    # query
    query_parser = subparsers.add_parser("query", help="Run a query and print the response")
    query_parser.add_argument("schema", help="Schema as module:attribute or .graphql file")
    query_parser.add_argument("--query", "-q", help="Query text")
    query_parser.add_argument("--file", help="Read query text from file")
    query_parser.add_argument("--variables", help="Variables as JSON")
    query_parser.add_argument("--operation-name", "-o", dest="operation_name", help="Operation to run")
    query_parser.add_argument("--tracing", action="store_true", help="Include tracing in extensions")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Serve the schema over HTTP")
    serve_parser.add_argument("schema", help="Schema as module:attribute or .graphql file")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind host")
    serve_parser.add_argument("--port", "-p", type=int, default=8000, help="Bind port")
    serve_parser.add_argument("--path", default="/graphql", help="Endpoint path")

    return parser


def app(args: Optional[List[str]] = None) -> int:
    """Main CLI application."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if not parsed.command:
        parser.print_help()
        return 0

    logging.basicConfig(level=logging.DEBUG if parsed.verbose else logging.WARNING)

    commands = {
        "init": cmd_init,
        "query": cmd_query,
        "serve": cmd_serve,
    }

    handler = commands.get(parsed.command)
    if handler:
        return handler(parsed)

    parser.print_help()
    return 1


def main() -> None:
    """Entry point for CLI."""
    sys.exit(app())


if __name__ == "__main__":
    main()
