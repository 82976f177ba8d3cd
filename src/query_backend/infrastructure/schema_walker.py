"""Schema introspection through the backend's catalog views."""

from __future__ import annotations

from contextlib import closing

from loguru import logger

from query_backend.domain.errors import IntrospectionError
from query_backend.domain.models import ColumnInfo, SchemaDocument, TableInfo
from query_backend.infrastructure.connection_factory import Connection


def introspect(connection: Connection, schema: str | None = None) -> SchemaDocument:
    """Build a schema document for *schema* (the backend default when None).

    Tables come back in the catalog's name order and columns in declaration
    order.  Rows are taken exactly as the catalog returns them; nothing is
    re-sorted here.  Any catalog failure aborts the whole walk.
    """
    backend = connection.backend
    schema_name = schema or backend.default_schema
    tables: list[TableInfo] = []
    try:
        with closing(connection.cursor()) as cursor:
            cursor.execute(*backend.tables_query(schema_name))
            table_names = [row[0] for row in cursor.fetchall()]

            for table_name in table_names:
                cursor.execute(*backend.columns_query(schema_name, table_name))
                columns = [
                    ColumnInfo(column_name=name, data_type=data_type, is_nullable=is_nullable)
                    for name, data_type, is_nullable in cursor.fetchall()
                ]
                tables.append(TableInfo(table_name=table_name, columns=columns))
    except backend.error_types as exc:
        logger.warning("Introspection of '{}' failed: {}", connection.profile_name, exc)
        raise IntrospectionError(str(exc)) from exc

    logger.info(
        "Introspected {} tables in schema '{}' on '{}'",
        len(tables),
        schema_name,
        connection.profile_name,
    )
    return SchemaDocument(tables=tables)


def list_schemas(connection: Connection) -> list[str]:
    """Return the schema names a user can browse, in catalog order."""
    backend = connection.backend
    try:
        with closing(connection.cursor()) as cursor:
            cursor.execute(*backend.schemas_query())
            return [row[0] for row in cursor.fetchall()]
    except backend.error_types as exc:
        logger.warning("Listing schemas on '{}' failed: {}", connection.profile_name, exc)
        raise IntrospectionError(str(exc)) from exc
