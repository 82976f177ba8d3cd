"""Configuration for the backend using pydantic-settings.

Storage locations are carried in an explicit ``StorageContext`` instead of a
process-wide project path.  ``load_storage_context`` runs once at startup;
``switch_project`` returns a new context and leaves the old one untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from functools import lru_cache
from pathlib import Path

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict

from query_backend.constants import (
    APP_DIR_NAME,
    CONNECTIONS_FILENAME,
    HISTORY_DB_FILENAME,
    SAVED_QUERIES_DB_FILENAME,
    SETTINGS_FILENAME,
)
from query_backend.domain.errors import StorageError
from query_backend.services.settings_store import SettingsStore


class Settings(BaseSettings):
    """Process settings, loaded from ``QUERY_*`` environment variables and .env."""

    model_config = SettingsConfigDict(
        env_prefix="QUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Storage
    # settings.json always lives here; data files follow the project path.
    # ------------------------------------------------------------------
    app_dir: Path = Path.home() / APP_DIR_NAME

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = "INFO"
    log_json: bool = False

    # ------------------------------------------------------------------
    # HTTP API
    # ------------------------------------------------------------------
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    history_limit: int = 50


@lru_cache
def get_settings() -> Settings:
    """Return the cached Settings singleton."""
    return Settings()


# ---------------------------------------------------------------------------
# Storage context
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StorageContext:
    """Where local files are read and written."""

    app_dir: Path
    data_dir: Path

    @property
    def settings_file(self) -> Path:
        return self.app_dir / SETTINGS_FILENAME

    @property
    def history_db_path(self) -> Path:
        return self.data_dir / HISTORY_DB_FILENAME

    @property
    def saved_queries_db_path(self) -> Path:
        return self.data_dir / SAVED_QUERIES_DB_FILENAME

    @property
    def connections_file(self) -> Path:
        return self.data_dir / CONNECTIONS_FILENAME

    def settings_store(self) -> SettingsStore:
        return SettingsStore(self.settings_file)


def _ensure_dir(path: Path) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageError(f"Could not create directory {path}: {exc}") from exc
    return path


def load_storage_context(settings: Settings) -> StorageContext:
    """Resolve storage locations: the saved project path, or the app dir."""
    app_dir = _ensure_dir(settings.app_dir.expanduser())
    saved = SettingsStore(app_dir / SETTINGS_FILENAME).load()
    data_dir = Path(saved.project_path) if saved.project_path else app_dir
    context = StorageContext(app_dir=app_dir, data_dir=_ensure_dir(data_dir))
    logger.info("Using data directory {}", context.data_dir)
    return context


def switch_project(context: StorageContext, path: Path | str) -> StorageContext:
    """Persist *path* as the project directory and return the updated context."""
    project_dir = _ensure_dir(Path(path).expanduser().resolve())
    context.settings_store().set_project_path(project_dir)
    return replace(context, data_dir=project_dir)
