"""Domain service interfaces (ports).

These protocols define the contracts that infrastructure implementations
must satisfy.  The application layer depends on these abstractions,
not on concrete drivers.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from query_backend.domain.models import ConnectionProfile

# A catalog query: SQL text plus its parameters in the backend's paramstyle
CatalogQuery = tuple[str, tuple[Any, ...]]

# ---------------------------------------------------------------------------
# Database backends
# ---------------------------------------------------------------------------


@runtime_checkable
class DatabaseBackend(Protocol):
    """A database engine the client can talk to.

    Implementations: PostgresBackend (psycopg), SqliteBackend (sqlite3).
    ``connect`` returns a DB-API 2.0 connection.
    """

    name: str
    default_schema: str
    error_types: tuple[type[BaseException], ...]

    def connect(self, profile: ConnectionProfile) -> Any: ...

    def describe_target(self, profile: ConnectionProfile) -> str: ...

    def tables_query(self, schema: str) -> CatalogQuery: ...

    def columns_query(self, schema: str, table: str) -> CatalogQuery: ...

    def schemas_query(self) -> CatalogQuery: ...

