"""Settings routes: project directory and connection preferences."""

from fastapi import APIRouter, Request, status
from loguru import logger

from query_backend.config import StorageContext, switch_project
from query_backend.presentation.lifecycle import swap_storage
from query_backend.presentation.schemas import (
    AutoConnectRequest,
    LastConnectionRequest,
    ProjectPathRequest,
    SettingsResponse,
)
from query_backend.services.settings_store import SettingsStore

router = APIRouter(prefix="/settings", tags=["settings"])


def _settings_response(request: Request) -> SettingsResponse:
    context: StorageContext = request.app.state.context
    store: SettingsStore = request.app.state.settings_store
    current = store.load()
    return SettingsResponse(
        project_path=str(context.data_dir),
        last_connection=current.last_connection,
        auto_connect_enabled=current.auto_connect_enabled,
        recent_projects=current.recent_projects,
    )


@router.get("", response_model=SettingsResponse)
def get_settings(request: Request):
    return _settings_response(request)


@router.put("/project-path", response_model=SettingsResponse)
def set_project_path(body: ProjectPathRequest, request: Request):
    """Switch the project directory and reopen local storage there."""
    state = request.app.state
    new_context = switch_project(state.context, body.path)
    swap_storage(state, new_context)
    logger.info("PUT /settings/project-path | path={}", new_context.data_dir)
    return _settings_response(request)


@router.put("/last-connection", status_code=status.HTTP_204_NO_CONTENT)
def set_last_connection(body: LastConnectionRequest, request: Request):
    store: SettingsStore = request.app.state.settings_store
    store.set_last_connection(body.name)


@router.put("/auto-connect", status_code=status.HTTP_204_NO_CONTENT)
def set_auto_connect(body: AutoConnectRequest, request: Request):
    store: SettingsStore = request.app.state.settings_store
    store.set_auto_connect_enabled(body.enabled)
