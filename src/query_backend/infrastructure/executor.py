"""Statement execution against an open connection."""

from __future__ import annotations

import time
from contextlib import closing

from loguru import logger

from query_backend.domain.errors import ExecutionError
from query_backend.domain.models import QueryResult
from query_backend.infrastructure.coercion import coerce_row
from query_backend.infrastructure.connection_factory import Connection


def execute(connection: Connection, sql_text: str) -> QueryResult:
    """Run *sql_text* verbatim and return its coerced rows.

    The text is not parsed or parameterized, so DDL and DML go through the
    same path as queries.  Column names come from the result metadata only
    when at least one row was returned.
    """
    started = time.perf_counter()
    try:
        with closing(connection.cursor()) as cursor:
            cursor.execute(sql_text)
            # Statements without a result set (DDL, most DML) have no description
            raw_rows = cursor.fetchall() if cursor.description is not None else []
            columns = [desc[0] for desc in cursor.description] if raw_rows else []
    except connection.backend.error_types as exc:
        logger.warning("Query on '{}' failed: {}", connection.profile_name, exc)
        raise ExecutionError(str(exc)) from exc

    rows = [coerce_row(row) for row in raw_rows]
    elapsed_ms = int((time.perf_counter() - started) * 1000)

    logger.info(
        "Query on '{}' returned {} rows in {} ms", connection.profile_name, len(rows), elapsed_ms
    )
    return QueryResult(
        columns=columns,
        rows=rows,
        row_count=len(rows),
        execution_time_ms=elapsed_ms,
    )
