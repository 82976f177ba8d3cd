"""Per-call connection lifecycle.

Every operation opens its own connection and releases it exactly once on
every exit path.  There is no pooling and no reuse across calls.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from loguru import logger

from query_backend.domain.errors import DatabaseConnectionError
from query_backend.domain.models import ConnectionProfile
from query_backend.domain.protocols import DatabaseBackend
from query_backend.infrastructure.backends import BACKENDS


class Connection:
    """An open DB-API connection together with the backend that opened it."""

    def __init__(self, backend: DatabaseBackend, raw: Any, profile_name: str) -> None:
        self.backend = backend
        self.raw = raw
        self.profile_name = profile_name
        self.closed = False

    def cursor(self) -> Any:
        return self.raw.cursor()

    def close(self) -> None:
        """Release the connection.  Safe to call more than once."""
        if self.closed:
            return
        self.closed = True
        try:
            self.raw.close()
        except self.backend.error_types as exc:
            # The connection may already be broken; release must not raise.
            logger.warning("Error while closing connection '{}': {}", self.profile_name, exc)
        else:
            logger.debug("Closed {} connection '{}'", self.backend.name, self.profile_name)


class ConnectionFactory:
    """Builds transient connections from connection profiles."""

    def __init__(self, backends: Mapping[str, DatabaseBackend] | None = None) -> None:
        self.backends: dict[str, DatabaseBackend] = dict(BACKENDS if backends is None else backends)

    def backend_for(self, profile: ConnectionProfile) -> DatabaseBackend:
        backend = self.backends.get(profile.engine)
        if backend is None:
            raise DatabaseConnectionError(f"Unsupported database engine: {profile.engine}")
        return backend

    def open(self, profile: ConnectionProfile) -> Connection:
        """Open a connection; the caller must ``close()`` it."""
        backend = self.backend_for(profile)
        logger.debug(
            "Opening {} connection '{}' to {}",
            backend.name,
            profile.name,
            backend.describe_target(profile),
        )
        try:
            raw = backend.connect(profile)
        except backend.error_types as exc:
            logger.warning("Connection '{}' failed: {}", profile.name, exc)
            raise DatabaseConnectionError(str(exc)) from exc
        return Connection(backend, raw, profile.name)

    @contextmanager
    def connect(self, profile: ConnectionProfile) -> Iterator[Connection]:
        """Open a connection for the duration of one logical operation."""
        connection = self.open(profile)
        try:
            yield connection
        finally:
            connection.close()
