"""Domain entities and value objects.

These are the core data structures of the database client, independent of
any driver, storage or framework concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# JSON-safe cell value produced by the coercion engine
JSONValue = str | int | float | bool | None

Engine = Literal["postgres", "sqlite"]

# ---------------------------------------------------------------------------
# Connection profile (owned by the caller, persisted in connections.json)
# ---------------------------------------------------------------------------


class ConnectionProfile(BaseModel):
    """Named bundle of host/port/credentials/database for one target database.

    For the ``sqlite`` engine ``database`` is a file path and the network
    fields are ignored.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Profile name, unique within a profile list")
    host: str = "localhost"
    port: int = 5432
    database: str
    username: str = ""
    password: str = Field(default="", description="May be empty")
    engine: Engine = "postgres"


# ---------------------------------------------------------------------------
# Query execution
# ---------------------------------------------------------------------------


@dataclass
class QueryResult:
    """Uniformly-typed result of one statement.

    ``columns`` is empty whenever ``rows`` is empty.
    """

    columns: list[str]
    rows: list[list[JSONValue]]
    row_count: int
    execution_time_ms: int


# ---------------------------------------------------------------------------
# Schema introspection
# ---------------------------------------------------------------------------


@dataclass
class ColumnInfo:
    column_name: str
    data_type: str
    is_nullable: str


@dataclass
class TableInfo:
    table_name: str
    columns: list[ColumnInfo] = field(default_factory=list)


@dataclass
class SchemaDocument:
    tables: list[TableInfo] = field(default_factory=list)

    def table(self, name: str) -> TableInfo | None:
        """Return the table with the given name, or None if not present."""
        for table in self.tables:
            if table.table_name == name:
                return table
        return None


# ---------------------------------------------------------------------------
# Local storage entities
# ---------------------------------------------------------------------------


@dataclass
class QueryHistoryEntry:
    id: int
    query: str
    connection_name: str
    execution_time_ms: int
    row_count: int
    executed_at: str


@dataclass
class SavedQuery:
    id: int
    name: str
    query: str
    description: str | None
    is_pinned: bool
    created_at: str
    updated_at: str


class RecentProject(BaseModel):
    """A project directory the user opened before."""

    path: str
    name: str
    last_opened: str


class AppSettings(BaseModel):
    """Contents of ``settings.json``.

    Unknown keys are kept so a read-modify-write never drops them.
    """

    model_config = ConfigDict(extra="allow")

    project_path: str | None = None
    last_connection: str | None = None
    auto_connect_enabled: bool = False
    recent_projects: list[RecentProject] = Field(default_factory=list)
