"""Open, swap and close the storage services bound to a storage context."""

from __future__ import annotations

from starlette.datastructures import State

from query_backend.config import StorageContext
from query_backend.services.connection_store import ConnectionStore
from query_backend.services.history_service import QueryHistoryService
from query_backend.services.saved_query_service import SavedQueryService


def open_storage(state: State, context: StorageContext) -> None:
    """Attach services for *context* to the application state."""
    history = QueryHistoryService(db_path=context.history_db_path)
    history.connect()
    saved = SavedQueryService(db_path=context.saved_queries_db_path)
    saved.connect()

    state.context = context
    state.history = history
    state.saved_queries = saved
    state.connections = ConnectionStore(context.connections_file)
    state.settings_store = context.settings_store()


def swap_storage(state: State, context: StorageContext) -> None:
    """Point the state at *context*, then release the previous services.

    The old history connection closes once any statement running on it
    finishes.
    """
    previous_history: QueryHistoryService | None = getattr(state, "history", None)
    previous_saved: SavedQueryService | None = getattr(state, "saved_queries", None)
    open_storage(state, context)
    _close(previous_history, previous_saved)


def close_storage(state: State) -> None:
    _close(getattr(state, "history", None), getattr(state, "saved_queries", None))


def _close(history: QueryHistoryService | None, saved: SavedQueryService | None) -> None:
    if history:
        history.close()
    if saved:
        saved.close()
