"""Database routes: connection test, query execution, introspection.

These routes are plain ``def`` so the blocking driver calls run in the
worker threadpool instead of on the event loop.
"""

from fastapi import APIRouter, Request
from loguru import logger

from query_backend.application.database_client import DatabaseClient
from query_backend.domain.models import ConnectionProfile, QueryResult, SchemaDocument
from query_backend.presentation.schemas import (
    ConnectionTestResponse,
    ErrorResponse,
    ExecuteQueryRequest,
    SchemaRequest,
)

router = APIRouter(tags=["database"], responses={400: {"model": ErrorResponse}})


def _client(request: Request) -> DatabaseClient:
    return request.app.state.client


@router.post("/connections/test", response_model=ConnectionTestResponse)
def check_connection(profile: ConnectionProfile, request: Request):
    """Open and close a connection to check that the profile works."""
    logger.info("POST /connections/test | connection={}", profile.name)
    return ConnectionTestResponse(message=_client(request).test_connection(profile))


@router.post("/query/execute", response_model=QueryResult)
def execute_query(body: ExecuteQueryRequest, request: Request):
    """Execute one SQL statement and return its rows as JSON-safe values."""
    logger.info("POST /query/execute | connection={} query={}", body.connection.name, body.query[:60])
    return _client(request).execute_query(body.connection, body.query)


@router.post("/schema", response_model=SchemaDocument)
def get_schema(body: SchemaRequest, request: Request):
    """Describe the tables and columns of one schema."""
    logger.info("POST /schema | connection={} schema={}", body.connection.name, body.schema_name)
    return _client(request).get_schema(body.connection, body.schema_name)


@router.post("/schemas", response_model=list[str])
def list_schemas(profile: ConnectionProfile, request: Request):
    """List the schemas available on the target database."""
    return _client(request).list_schemas(profile)
