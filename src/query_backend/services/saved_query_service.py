"""Saved query library backed by SQLModel."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import Field, Session, SQLModel, col, create_engine, select

from query_backend.domain.errors import SavedQueryNotFoundError
from query_backend.domain.models import SavedQuery


class SavedQueryRecord(SQLModel, table=True):
    """Table row for a saved query."""

    __tablename__ = "saved_queries"

    id: int | None = Field(default=None, primary_key=True)
    name: str
    query: str
    description: str | None = None
    is_pinned: bool = Field(default=False)
    created_at: str
    updated_at: str


def _utcnow() -> str:
    return datetime.now(UTC).isoformat()


class SavedQueryService:
    """CRUD for named queries the user keeps around, with pinning."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.engine: Engine | None = None

    def connect(self) -> None:
        """Connect to the database and create the table if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.engine = create_engine(f"sqlite:///{self.db_path}", echo=False)
        SQLModel.metadata.create_all(self.engine, tables=[SavedQueryRecord.__table__])
        logger.info("Saved queries DB ready at {}", self.db_path)

    def close(self) -> None:
        if self.engine:
            self.engine.dispose()
            self.engine = None

    def _session(self) -> Session:
        # One session per call; requests run on the worker threadpool
        if not self.engine:
            raise RuntimeError("Database not connected. Call connect() first.")
        return Session(self.engine)

    def save(self, name: str, query: str, description: str | None = None) -> SavedQuery:
        """Store a new, unpinned query."""
        now = _utcnow()
        record = SavedQueryRecord(
            name=name,
            query=query,
            description=description,
            is_pinned=False,
            created_at=now,
            updated_at=now,
        )
        with self._session() as session:
            session.add(record)
            session.commit()
            session.refresh(record)
            saved = self._to_domain(record)
        logger.info("Saved query {} ({})", saved.id, name)
        return saved

    def list_all(self) -> list[SavedQuery]:
        """Pinned queries first, then by name."""
        with self._session() as session:
            records = session.exec(
                select(SavedQueryRecord).order_by(
                    col(SavedQueryRecord.is_pinned).desc(), col(SavedQueryRecord.name).asc()
                )
            ).all()
            return [self._to_domain(r) for r in records]

    def delete(self, query_id: int) -> None:
        """Delete a saved query.  Unknown ids are ignored."""
        with self._session() as session:
            record = session.get(SavedQueryRecord, query_id)
            if record:
                session.delete(record)
                session.commit()

    def toggle_pin(self, query_id: int) -> bool:
        """Flip the pin flag and return the new value."""
        with self._session() as session:
            record = session.get(SavedQueryRecord, query_id)
            if record is None:
                raise SavedQueryNotFoundError(query_id)
            pinned = not record.is_pinned
            record.is_pinned = pinned
            record.updated_at = _utcnow()
            session.add(record)
            session.commit()
        return pinned

    @staticmethod
    def _to_domain(record: SavedQueryRecord) -> SavedQuery:
        return SavedQuery(
            id=record.id or 0,
            name=record.name,
            query=record.query,
            description=record.description,
            is_pinned=record.is_pinned,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
