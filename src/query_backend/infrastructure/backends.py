"""Database backends: PostgreSQL (psycopg) and SQLite (sqlite3).

Each backend knows how to open a DB-API connection from a profile, which
exceptions its driver raises, and which catalog queries describe its schema.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

import psycopg
from psycopg.conninfo import make_conninfo

from query_backend.constants import SQL_NULLABLE_NO, SQL_NULLABLE_YES
from query_backend.domain.models import ConnectionProfile
from query_backend.domain.protocols import CatalogQuery, DatabaseBackend

SQLITE_MEMORY = ":memory:"


def _quote_ident(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class PostgresBackend:
    """Server-style engine reached over the network with psycopg 3."""

    name = "postgres"
    default_schema = "public"
    error_types: tuple[type[BaseException], ...] = (psycopg.Error,)

    @staticmethod
    def conninfo(profile: ConnectionProfile) -> str:
        """Build a libpq connection string; an empty password is left out."""
        params: dict[str, object] = {
            "host": profile.host,
            "port": profile.port,
            "dbname": profile.database,
            "user": profile.username,
        }
        if profile.password:
            params["password"] = profile.password
        return make_conninfo(**params)

    def connect(self, profile: ConnectionProfile) -> psycopg.Connection:
        return psycopg.connect(self.conninfo(profile), autocommit=True)

    def describe_target(self, profile: ConnectionProfile) -> str:
        return f"{profile.host}:{profile.port}/{profile.database}"

    def tables_query(self, schema: str) -> CatalogQuery:
        return (
            """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = %s
              AND table_type = 'BASE TABLE'
            ORDER BY table_name
            """,
            (schema,),
        )

    def columns_query(self, schema: str, table: str) -> CatalogQuery:
        return (
            """
            SELECT column_name, data_type, is_nullable
            FROM information_schema.columns
            WHERE table_schema = %s
              AND table_name = %s
            ORDER BY ordinal_position
            """,
            (schema, table),
        )

    def schemas_query(self) -> CatalogQuery:
        return (
            """
            SELECT schema_name
            FROM information_schema.schemata
            WHERE left(schema_name, 3) <> 'pg_'
              AND schema_name <> 'information_schema'
            ORDER BY schema_name
            """,
            (),
        )


class SqliteBackend:
    """Local embedded engine; ``profile.database`` is the database file."""

    name = "sqlite"
    default_schema = "main"
    error_types: tuple[type[BaseException], ...] = (sqlite3.Error,)

    def connect(self, profile: ConnectionProfile) -> sqlite3.Connection:
        if profile.database == SQLITE_MEMORY:
            return sqlite3.connect(SQLITE_MEMORY, isolation_level=None)
        # mode=rw: a missing file is a connection failure, not a new empty database
        uri = Path(profile.database).expanduser().resolve().as_uri() + "?mode=rw"
        return sqlite3.connect(uri, uri=True, isolation_level=None)

    def describe_target(self, profile: ConnectionProfile) -> str:
        return profile.database

    def tables_query(self, schema: str) -> CatalogQuery:
        return (
            f"""
            SELECT name
            FROM {_quote_ident(schema)}.sqlite_master
            WHERE type = 'table'
              AND substr(name, 1, 7) <> 'sqlite_'
            ORDER BY name
            """,
            (),
        )

    def columns_query(self, schema: str, table: str) -> CatalogQuery:
        return (
            """
            SELECT name, type, CASE WHEN "notnull" THEN ? ELSE ? END
            FROM pragma_table_info(?, ?)
            ORDER BY cid
            """,
            (SQL_NULLABLE_NO, SQL_NULLABLE_YES, table, schema),
        )

    def schemas_query(self) -> CatalogQuery:
        return ("SELECT name FROM pragma_database_list ORDER BY seq", ())


BACKENDS: dict[str, DatabaseBackend] = {
    PostgresBackend.name: PostgresBackend(),
    SqliteBackend.name: SqliteBackend(),
}
