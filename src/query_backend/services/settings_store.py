"""Read-modify-write access to ``settings.json``."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from query_backend.constants import MAX_RECENT_PROJECTS
from query_backend.domain.errors import StorageError
from query_backend.domain.models import AppSettings, RecentProject


class SettingsStore:
    """Persists user settings.  Unknown keys in the file are preserved."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> AppSettings:
        if not self.path.exists():
            return AppSettings()
        try:
            return AppSettings.model_validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as exc:
            raise StorageError(f"Failed to parse settings: {exc}") from exc

    def save(self, settings: AppSettings) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(settings.model_dump_json(indent=2), encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Could not write settings: {exc}") from exc

    # ------------------------------------------------------------------
    # Project path
    # ------------------------------------------------------------------

    def set_project_path(self, path: Path) -> AppSettings:
        """Remember *path* as the current project and move it to the top of recents."""
        settings = self.load()
        path_str = str(path)
        recent = [p for p in settings.recent_projects if p.path != path_str]
        recent.insert(
            0,
            RecentProject(
                path=path_str,
                name=path.name or path_str,
                last_opened=datetime.now(UTC).isoformat(),
            ),
        )
        settings.project_path = path_str
        settings.recent_projects = recent[:MAX_RECENT_PROJECTS]
        self.save(settings)
        logger.info("Project path set to {}", path_str)
        return settings

    def recent_projects(self) -> list[RecentProject]:
        return self.load().recent_projects

    # ------------------------------------------------------------------
    # Connection preferences
    # ------------------------------------------------------------------

    def set_last_connection(self, connection_name: str) -> None:
        settings = self.load()
        settings.last_connection = connection_name
        self.save(settings)

    def get_last_connection(self) -> str | None:
        return self.load().last_connection

    def set_auto_connect_enabled(self, enabled: bool) -> None:
        settings = self.load()
        settings.auto_connect_enabled = enabled
        self.save(settings)

    def get_auto_connect_enabled(self) -> bool:
        return self.load().auto_connect_enabled
