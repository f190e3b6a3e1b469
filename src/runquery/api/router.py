"""
FastAPI binding for the query runner.

Endpoints (mounted at `path`, default /graphql):
- GET  ?query=...&variables=<json>&operationName=... - single query
- POST {"query": ..., "variables": {...}, "operationName": ...} - single query
- POST [{...}, {...}] - batch, answered with a list in the same order

A single response that carries errors but no data is returned with status
400; everything else is 200.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from graphql import GraphQLSchema
from pydantic import ValidationError as PydanticValidationError

from ..core.defs import RequestDescriptor
from ..core.query_types import GraphQLRequest
from ..runtime.orchestrator import QueryRunner, get_default_runner

logger = logging.getLogger(__name__)

MISSING_QUERY = "Must provide query string."


def _error_detail(message: str) -> dict[str, Any]:
    return {"errors": [{"message": message}]}


def _default_context(request: Request) -> dict[str, Any]:
    return {"request": request}


def create_graphql_router(
    schema: GraphQLSchema,
    *,
    path: str = "/graphql",
    runner: Optional[QueryRunner] = None,
    context_factory: Optional[Callable[[Request], Any]] = None,
    **options: Any,
) -> APIRouter:
    """
    Create a router answering GraphQL requests against one schema.

    Args:
        schema: Schema every request runs against
        path: URL path of the endpoint
        runner: Runner to use (default: process default runner)
        context_factory: Builds the per-request context from the HTTP request
        **options: Extra RequestDescriptor fields (tracing, format_error, ...)

    Returns:
        Configured FastAPI router
    """
    router = APIRouter()
    build_context = context_factory or _default_context

    async def run_one(graphql_request: GraphQLRequest, http_request: Request) -> Any:
        if not graphql_request.query:
            raise HTTPException(status_code=400, detail=_error_detail(MISSING_QUERY))
        descriptor = RequestDescriptor.from_options(
            query=graphql_request.query,
            schema=schema,
            context=build_context(http_request),
            variables=graphql_request.variables,
            operation_name=graphql_request.operation_name,
            **options,
        )
        return await (runner or get_default_runner()).run(descriptor)

    def respond(result: Any) -> JSONResponse:
        status_code = 200
        if isinstance(result, dict) and result.get("errors") and "data" not in result:
            status_code = 400
        return JSONResponse(content=result, status_code=status_code)

    @router.get(path)
    async def graphql_get(
        request: Request,
        query: Optional[str] = None,
        variables: Optional[str] = None,
        operationName: Optional[str] = None,
    ) -> JSONResponse:
        try:
            parsed_variables = json.loads(variables) if variables else None
        except ValueError:
            raise HTTPException(status_code=400, detail=_error_detail("Variables are invalid JSON."))

        try:
            graphql_request = GraphQLRequest(
                query=query,
                variables=parsed_variables,
                operationName=operationName,
            )
        except PydanticValidationError as e:
            raise HTTPException(status_code=400, detail=_error_detail(str(e)))
        return respond(await run_one(graphql_request, request))

    @router.post(path)
    async def graphql_post(request: Request) -> JSONResponse:
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail=_error_detail("POST body sent invalid JSON."))

        is_batch = isinstance(body, list)
        try:
            batch = [GraphQLRequest.model_validate(item) for item in (body if is_batch else [body])]
        except PydanticValidationError as e:
            raise HTTPException(status_code=400, detail=_error_detail(str(e)))

        if not is_batch:
            return respond(await run_one(batch[0], request))

        logger.debug(f"Running batch of {len(batch)} requests")
        results = [await run_one(item, request) for item in batch]
        return JSONResponse(content=results)

    return router
