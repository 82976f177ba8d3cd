"""Routes for locally stored data: connection profiles, history, saved queries."""

from fastapi import APIRouter, Query, Request, status
from loguru import logger

from query_backend.domain.models import ConnectionProfile, QueryHistoryEntry, SavedQuery
from query_backend.presentation.schemas import (
    HistoryEntryRequest,
    PinResponse,
    SaveQueryRequest,
)
from query_backend.services.connection_store import ConnectionStore
from query_backend.services.history_service import QueryHistoryService
from query_backend.services.saved_query_service import SavedQueryService

router = APIRouter(tags=["storage"])


# ---- Connection profiles -------------------------------------------------


@router.get("/connections", response_model=list[ConnectionProfile])
def load_connections(request: Request):
    store: ConnectionStore = request.app.state.connections
    return store.load()


@router.put("/connections", response_model=list[ConnectionProfile])
def save_connections(profiles: list[ConnectionProfile], request: Request):
    """Replace the whole profile list."""
    store: ConnectionStore = request.app.state.connections
    store.save(profiles)
    return profiles


@router.post("/connections", response_model=list[ConnectionProfile])
def upsert_connection(profile: ConnectionProfile, request: Request):
    """Add a profile, or replace the one with the same name."""
    store: ConnectionStore = request.app.state.connections
    return store.upsert(profile)


@router.delete("/connections/{name}", response_model=list[ConnectionProfile])
def delete_connection(name: str, request: Request):
    store: ConnectionStore = request.app.state.connections
    logger.info("DELETE /connections/{}", name)
    return store.delete(name)


# ---- Query history -------------------------------------------------------


@router.get("/history", response_model=list[QueryHistoryEntry])
def get_history(request: Request, limit: int | None = Query(default=None, ge=1)):
    """Most recent executed queries, newest first."""
    hist: QueryHistoryService = request.app.state.history
    if limit is None:
        limit = request.app.state.settings.history_limit
    return hist.recent(limit)


@router.post("/history", response_model=QueryHistoryEntry, status_code=status.HTTP_201_CREATED)
def add_history_entry(body: HistoryEntryRequest, request: Request):
    hist: QueryHistoryService = request.app.state.history
    return hist.add_entry(
        query=body.query,
        connection_name=body.connection_name,
        execution_time_ms=body.execution_time_ms,
        row_count=body.row_count,
    )


@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
def clear_history(request: Request):
    hist: QueryHistoryService = request.app.state.history
    hist.clear()


# ---- Saved queries -------------------------------------------------------


@router.get("/saved-queries", response_model=list[SavedQuery])
def list_saved_queries(request: Request):
    """Pinned queries first, then alphabetical."""
    saved: SavedQueryService = request.app.state.saved_queries
    return saved.list_all()


@router.post("/saved-queries", response_model=SavedQuery, status_code=status.HTTP_201_CREATED)
def save_query(body: SaveQueryRequest, request: Request):
    saved: SavedQueryService = request.app.state.saved_queries
    return saved.save(body.name, body.query, body.description)


@router.delete("/saved-queries/{query_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_saved_query(query_id: int, request: Request):
    saved: SavedQueryService = request.app.state.saved_queries
    saved.delete(query_id)


@router.post("/saved-queries/{query_id}/pin", response_model=PinResponse)
def toggle_pin(query_id: int, request: Request):
    saved: SavedQueryService = request.app.state.saved_queries
    return PinResponse(id=query_id, is_pinned=saved.toggle_pin(query_id))
