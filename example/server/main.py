"""
Minimal server example.

Usage:
    uvicorn example.server.main:app

    curl -X POST localhost:8000/graphql \
        -H 'Content-Type: application/json' \
        -d '{"query": "{ hello(name: \"world\") }"}'
"""

from fastapi import FastAPI
from graphql import GraphQLArgument, GraphQLField, GraphQLObjectType, GraphQLSchema, GraphQLString

from runquery import create_graphql_router

schema = GraphQLSchema(
    query=GraphQLObjectType(
        "Query",
        {
            "hello": GraphQLField(
                GraphQLString,
                args={"name": GraphQLArgument(GraphQLString)},
                resolve=lambda root, info, name="stranger": f"Hello, {name}!",
            ),
        },
    )
)

app = FastAPI(title="runquery example")
app.include_router(create_graphql_router(schema, tracing=True))
