"""FastAPI backend for the Query desktop database client.

This module is a thin **presentation layer**: it wires the database client
and the local storage services into HTTP routes and converts their errors
into responses.  Core errors become strings only here.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from query_backend import __version__
from query_backend.application.database_client import DatabaseClient
from query_backend.config import Settings, get_settings, load_storage_context
from query_backend.domain.errors import DatabaseClientError, SavedQueryNotFoundError, StorageError
from query_backend.logging_config import setup_logging
from query_backend.presentation.lifecycle import close_storage, open_storage
from query_backend.presentation.routes import database, settings, storage

# ---------------------------------------------------------------------------
# Lifespan: resolve storage once at startup
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Set up and tear down storage services around the application lifetime."""
    context = load_storage_context(app.state.settings)
    open_storage(app.state, context)
    logger.info("Application startup complete")
    yield
    close_storage(app.state)
    logger.info("Application shutdown complete")


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------


async def _database_error(request: Request, exc: DatabaseClientError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": exc.to_payload()})


async def _not_found(request: Request, exc: SavedQueryNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def _storage_error(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage failure on {} {}: {}", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)}
    )


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


def create_app(
    app_settings: Settings | None = None, client: DatabaseClient | None = None
) -> FastAPI:
    """Build the application.  Tests pass their own settings and client."""
    app_settings = app_settings or get_settings()
    setup_logging(level=app_settings.log_level, json=app_settings.log_json)

    app = FastAPI(
        title="Query",
        description="Query execution, schema introspection and local storage for the Query client.",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = app_settings
    app.state.client = client or DatabaseClient()

    app.add_exception_handler(DatabaseClientError, _database_error)
    app.add_exception_handler(SavedQueryNotFoundError, _not_found)
    app.add_exception_handler(StorageError, _storage_error)

    @app.get("/health")
    async def health():
        """Simple liveness / readiness check."""
        return {"status": "ok"}

    app.include_router(database.router)
    app.include_router(storage.router)
    app.include_router(settings.router)
    return app


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def run() -> None:
    import uvicorn

    app_settings = get_settings()
    uvicorn.run(
        "query_backend.main:create_app",
        factory=True,
        host=app_settings.api_host,
        port=app_settings.api_port,
    )


if __name__ == "__main__":
    run()
