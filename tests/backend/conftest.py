"""Shared fixtures for backend tests."""

import sys
from pathlib import Path

# Add src/ to sys.path so `import query_backend` works without an editable install.
_SRC = str(Path(__file__).resolve().parent.parent.parent / "src")
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)

import sqlite3

import pytest

from query_backend.domain.models import ConnectionProfile
from query_backend.infrastructure.backends import SqliteBackend
from query_backend.infrastructure.connection_factory import ConnectionFactory


class CountingBackend(SqliteBackend):
    """SQLite backend that counts opened and closed connections."""

    def __init__(self) -> None:
        self.opens = 0
        self.closes = 0

    def connect(self, profile):
        raw = super().connect(profile)
        self.opens += 1
        backend = self

        class _Tracked:
            def cursor(self):
                return raw.cursor()

            def close(self):
                backend.closes += 1
                raw.close()

        return _Tracked()


@pytest.fixture()
def tmp_db(tmp_path: Path) -> Path:
    """A temporary SQLite database with two tables created in reverse name order."""
    db_path = tmp_path / "target.sqlite"
    conn = sqlite3.connect(str(db_path))
    conn.executescript(
        """
        CREATE TABLE b_table (
            zeta TEXT NOT NULL,
            alpha INTEGER,
            mid REAL
        );
        CREATE TABLE a_table (
            id INTEGER PRIMARY KEY,
            code TEXT,
            active BOOLEAN NOT NULL DEFAULT 1
        );
        INSERT INTO a_table (id, code, active) VALUES (1, '007', 1);
        INSERT INTO a_table (id, code, active) VALUES (2, 'abc', 0);
        INSERT INTO b_table (zeta, alpha, mid) VALUES ('z', 42, 1.5);
        """
    )
    conn.commit()
    conn.close()
    return db_path


@pytest.fixture()
def sqlite_profile(tmp_db: Path) -> ConnectionProfile:
    return ConnectionProfile(name="local", database=str(tmp_db), engine="sqlite")


@pytest.fixture()
def counting_backend() -> CountingBackend:
    return CountingBackend()


@pytest.fixture()
def counting_factory(counting_backend: CountingBackend) -> ConnectionFactory:
    return ConnectionFactory(backends={"sqlite": counting_backend})
