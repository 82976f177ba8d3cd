"""HTTP request/response schemas (Pydantic models) for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from query_backend.domain.models import ConnectionProfile, RecentProject

# ---------------------------------------------------------------------------
# Database operations
# ---------------------------------------------------------------------------


class ExecuteQueryRequest(BaseModel):
    """Request body for POST /query/execute."""

    connection: ConnectionProfile
    query: str = Field(description="SQL text, submitted verbatim")


class SchemaRequest(BaseModel):
    """Request body for POST /schema."""

    connection: ConnectionProfile
    schema_name: str | None = Field(
        default=None, description="Schema to introspect. None uses the backend default."
    )


class ConnectionTestResponse(BaseModel):
    message: str


class ErrorBody(BaseModel):
    kind: str
    message: str


class ErrorResponse(BaseModel):
    """Body returned for failed database operations."""

    error: ErrorBody


# ---------------------------------------------------------------------------
# History and saved queries
# ---------------------------------------------------------------------------


class HistoryEntryRequest(BaseModel):
    """Request body for POST /history."""

    query: str
    connection_name: str
    execution_time_ms: int = Field(ge=0)
    row_count: int = Field(ge=0)


class SaveQueryRequest(BaseModel):
    """Request body for POST /saved-queries."""

    name: str = Field(min_length=1)
    query: str
    description: str | None = None


class PinResponse(BaseModel):
    id: int
    is_pinned: bool


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class ProjectPathRequest(BaseModel):
    path: str = Field(min_length=1)


class LastConnectionRequest(BaseModel):
    name: str


class AutoConnectRequest(BaseModel):
    enabled: bool


class SettingsResponse(BaseModel):
    """Current storage location and connection preferences."""

    project_path: str
    last_connection: str | None
    auto_connect_enabled: bool
    recent_projects: list[RecentProject]
