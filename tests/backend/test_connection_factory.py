"""Tests for connection lifecycle and the backend drivers."""

import sqlite3

import psycopg
import pytest

from query_backend.domain.errors import DatabaseConnectionError, ErrorKind
from query_backend.domain.models import ConnectionProfile
from query_backend.infrastructure.backends import PostgresBackend
from query_backend.infrastructure.connection_factory import Connection, ConnectionFactory


def _pg_profile(**overrides) -> ConnectionProfile:
    fields = {
        "name": "dev",
        "host": "db.example.internal",
        "port": 5432,
        "database": "querydb_dev",
        "username": "queryuser",
        "password": "querypass",
    }
    fields.update(overrides)
    return ConnectionProfile(**fields)


class TestPostgresBackend:
    def test_conninfo_contains_profile_fields(self):
        conninfo = PostgresBackend.conninfo(_pg_profile())
        for part in (
            "host=db.example.internal",
            "port=5432",
            "dbname=querydb_dev",
            "user=queryuser",
            "password=querypass",
        ):
            assert part in conninfo

    def test_empty_password_is_omitted(self):
        conninfo = PostgresBackend.conninfo(_pg_profile(password=""))
        assert "password" not in conninfo

    def test_connect_uses_autocommit(self, monkeypatch):
        calls = {}

        def fake_connect(conninfo, **kwargs):
            calls["conninfo"] = conninfo
            calls.update(kwargs)
            return object()

        monkeypatch.setattr(psycopg, "connect", fake_connect)
        PostgresBackend().connect(_pg_profile())
        assert calls["autocommit"] is True
        assert "dbname=querydb_dev" in calls["conninfo"]

    def test_unreachable_host_raises_connection_error(self, monkeypatch):
        def fake_connect(conninfo, **kwargs):
            raise psycopg.OperationalError(
                'could not translate host name "db.example.internal" to address'
            )

        monkeypatch.setattr(psycopg, "connect", fake_connect)
        with pytest.raises(DatabaseConnectionError) as exc_info:
            ConnectionFactory().open(_pg_profile())
        assert exc_info.value.kind is ErrorKind.CONNECTION
        assert "could not translate host name" in exc_info.value.message

    def test_describe_target(self):
        assert PostgresBackend().describe_target(_pg_profile()) == "db.example.internal:5432/querydb_dev"


class TestSqliteConnections:
    def test_missing_file_raises_connection_error(self, tmp_path):
        profile = ConnectionProfile(
            name="missing", database=str(tmp_path / "nope.sqlite"), engine="sqlite"
        )
        with pytest.raises(DatabaseConnectionError, match="unable to open database file"):
            ConnectionFactory().open(profile)
        assert not (tmp_path / "nope.sqlite").exists()

    def test_in_memory_database(self):
        profile = ConnectionProfile(name="mem", database=":memory:", engine="sqlite")
        with ConnectionFactory().connect(profile) as conn:
            assert conn.cursor().execute("SELECT 1").fetchone() == (1,)


class TestConnectionLifecycle:
    def test_unknown_engine(self, sqlite_profile):
        factory = ConnectionFactory(backends={})
        with pytest.raises(DatabaseConnectionError, match="Unsupported database engine"):
            factory.open(sqlite_profile)

    def test_context_manager_closes_on_success(self, counting_factory, counting_backend, sqlite_profile):
        with counting_factory.connect(sqlite_profile) as conn:
            assert not conn.closed
        assert conn.closed
        assert counting_backend.opens == counting_backend.closes == 1

    def test_context_manager_closes_on_error(self, counting_factory, counting_backend, sqlite_profile):
        with pytest.raises(RuntimeError):
            with counting_factory.connect(sqlite_profile):
                raise RuntimeError("boom")
        assert counting_backend.opens == counting_backend.closes == 1

    def test_close_is_idempotent(self, counting_factory, counting_backend, sqlite_profile):
        conn = counting_factory.open(sqlite_profile)
        conn.close()
        conn.close()
        assert counting_backend.closes == 1

    def test_close_swallows_driver_error(self, sqlite_profile):
        class BrokenRaw:
            def close(self):
                raise sqlite3.OperationalError("connection already broken")

        backend = ConnectionFactory().backend_for(sqlite_profile)
        conn = Connection(backend, BrokenRaw(), "broken")
        conn.close()
        assert conn.closed
