"""Error taxonomy for database operations and local storage.

Core operations raise these; the presentation layer is the only place that
turns them into strings or HTTP responses.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    CONNECTION = "connection_error"
    EXECUTION = "execution_error"
    INTROSPECTION = "introspection_error"


class DatabaseClientError(Exception):
    """Base class for failures of a single database operation.

    ``message`` carries the driver's message verbatim.
    """

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}


class DatabaseConnectionError(DatabaseClientError):
    """The connection could not be established (host, port, credentials, network)."""

    kind = ErrorKind.CONNECTION


class ExecutionError(DatabaseClientError):
    """The statement was submitted but failed, or row materialization failed."""

    kind = ErrorKind.EXECUTION


class IntrospectionError(DatabaseClientError):
    """A catalog query failed."""

    kind = ErrorKind.INTROSPECTION


class StorageError(Exception):
    """A local storage file could not be read, parsed or written."""


class SavedQueryNotFoundError(LookupError):
    """Raised when a saved query id does not exist."""

    def __init__(self, query_id: int) -> None:
        super().__init__(f"Saved query {query_id} not found")
        self.query_id = query_id
