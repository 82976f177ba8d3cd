"""Database client use cases.

Each operation opens its own connection, runs against it and releases it
before returning or raising.  Nothing is shared between calls, so calls may
run concurrently from different threads.
"""

from __future__ import annotations

from loguru import logger

from query_backend.domain.models import ConnectionProfile, QueryResult, SchemaDocument
from query_backend.infrastructure import executor, schema_walker
from query_backend.infrastructure.connection_factory import ConnectionFactory


class DatabaseClient:
    """Entry point for connection tests, query execution and introspection."""

    def __init__(self, factory: ConnectionFactory | None = None) -> None:
        self.factory = factory or ConnectionFactory()

    def test_connection(self, profile: ConnectionProfile) -> str:
        """Open and release a connection; return a human-readable confirmation."""
        with self.factory.connect(profile) as connection:
            target = connection.backend.describe_target(profile)
        logger.info("Connection test for '{}' succeeded", profile.name)
        return f"Successfully connected to {target}"

    def execute_query(self, profile: ConnectionProfile, sql_text: str) -> QueryResult:
        with self.factory.connect(profile) as connection:
            return executor.execute(connection, sql_text)

    def get_schema(self, profile: ConnectionProfile, schema: str | None = None) -> SchemaDocument:
        with self.factory.connect(profile) as connection:
            return schema_walker.introspect(connection, schema)

    def list_schemas(self, profile: ConnectionProfile) -> list[str]:
        with self.factory.connect(profile) as connection:
            return schema_walker.list_schemas(connection)
