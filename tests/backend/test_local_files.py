"""Tests for the JSON-backed stores and the storage context."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from starlette.datastructures import State

from query_backend.config import Settings, load_storage_context, switch_project
from query_backend.constants import MAX_RECENT_PROJECTS
from query_backend.domain.errors import StorageError
from query_backend.domain.models import ConnectionProfile
from query_backend.presentation.lifecycle import close_storage, open_storage, swap_storage
from query_backend.services.connection_store import ConnectionStore
from query_backend.services.settings_store import SettingsStore


def _profile(name: str, password: str = "") -> ConnectionProfile:
    return ConnectionProfile(name=name, database=f"{name}_db", username="queryuser", password=password)


class TestConnectionStore:
    def test_missing_file_loads_empty(self, tmp_path: Path):
        assert ConnectionStore(tmp_path / "connections.json").load() == []

    def test_save_and_load(self, tmp_path: Path):
        store = ConnectionStore(tmp_path / "connections.json")
        store.save([_profile("dev", "secret"), _profile("prod")])
        loaded = store.load()
        assert [p.name for p in loaded] == ["dev", "prod"]
        assert loaded[0].password == "secret"
        assert loaded[1].password == ""

    def test_empty_password_not_written(self, tmp_path: Path):
        path = tmp_path / "connections.json"
        ConnectionStore(path).save([_profile("dev")])
        assert "password" not in json.loads(path.read_text())[0]

    def test_upsert_replaces_by_name(self, tmp_path: Path):
        store = ConnectionStore(tmp_path / "connections.json")
        store.upsert(_profile("dev"))
        store.upsert(_profile("prod"))
        updated = store.upsert(_profile("dev").model_copy(update={"port": 5433}))
        assert [p.name for p in updated] == ["dev", "prod"]
        assert store.load()[0].port == 5433

    def test_delete(self, tmp_path: Path):
        store = ConnectionStore(tmp_path / "connections.json")
        store.save([_profile("dev"), _profile("prod")])
        assert [p.name for p in store.delete("dev")] == ["prod"]

    def test_corrupt_file(self, tmp_path: Path):
        path = tmp_path / "connections.json"
        path.write_text("{not json")
        with pytest.raises(StorageError):
            ConnectionStore(path).load()


class TestSettingsStore:
    def test_defaults(self, tmp_path: Path):
        store = SettingsStore(tmp_path / "settings.json")
        assert store.get_last_connection() is None
        assert store.get_auto_connect_enabled() is False

    def test_preferences_round_trip(self, tmp_path: Path):
        store = SettingsStore(tmp_path / "settings.json")
        store.set_last_connection("dev")
        store.set_auto_connect_enabled(True)
        assert store.get_last_connection() == "dev"
        assert store.get_auto_connect_enabled() is True

    def test_unknown_keys_preserved(self, tmp_path: Path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"theme": "dark"}))
        SettingsStore(path).set_last_connection("dev")
        data = json.loads(path.read_text())
        assert data["theme"] == "dark"
        assert data["last_connection"] == "dev"

    def test_recent_projects_most_recent_first_and_capped(self, tmp_path: Path):
        store = SettingsStore(tmp_path / "settings.json")
        for i in range(MAX_RECENT_PROJECTS + 2):
            store.set_project_path(tmp_path / f"p{i}")
        store.set_project_path(tmp_path / "p5")

        recent = store.recent_projects()
        assert len(recent) == MAX_RECENT_PROJECTS
        assert recent[0].path == str(tmp_path / "p5")
        assert recent[0].name == "p5"
        assert [p.path for p in recent].count(str(tmp_path / "p5")) == 1

    def test_corrupt_settings(self, tmp_path: Path):
        path = tmp_path / "settings.json"
        path.write_text("[]")
        with pytest.raises(StorageError, match="Failed to parse settings"):
            SettingsStore(path).load()


class TestStorageContext:
    def test_defaults_to_app_dir(self, tmp_path: Path):
        context = load_storage_context(Settings(_env_file=None, app_dir=tmp_path / "app"))
        assert context.data_dir == tmp_path / "app"
        assert context.history_db_path == tmp_path / "app" / "history.db"
        assert context.data_dir.is_dir()

    def test_switch_project_returns_new_context(self, tmp_path: Path):
        settings = Settings(_env_file=None, app_dir=tmp_path / "app")
        original = load_storage_context(settings)
        switched = switch_project(original, tmp_path / "project")

        assert original.data_dir == tmp_path / "app"
        assert switched.data_dir == (tmp_path / "project").resolve()
        assert switched.connections_file.parent == switched.data_dir
        assert switched.settings_file == original.settings_file

    def test_saved_project_is_loaded_at_startup(self, tmp_path: Path):
        settings = Settings(_env_file=None, app_dir=tmp_path / "app")
        switch_project(load_storage_context(settings), tmp_path / "project")

        reloaded = load_storage_context(settings)
        assert reloaded.data_dir == (tmp_path / "project").resolve()


class TestStorageSwap:
    def test_swap_opens_new_services_before_closing_old(self, tmp_path: Path):
        settings = Settings(_env_file=None, app_dir=tmp_path / "app")
        state = State()
        open_storage(state, load_storage_context(settings))
        old_history, old_saved = state.history, state.saved_queries

        swap_storage(state, switch_project(state.context, tmp_path / "project"))

        assert state.history is not old_history
        assert old_history.conn is None
        assert old_saved.engine is None
        assert state.history.db_path == (tmp_path / "project").resolve() / "history.db"
        state.saved_queries.save("q", "SELECT 1")
        assert [q.name for q in state.saved_queries.list_all()] == ["q"]

        close_storage(state)
        assert state.history.conn is None
