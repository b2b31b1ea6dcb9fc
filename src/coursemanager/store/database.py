"""SQLite engine and session management for the course store."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from coursemanager.store.models import Base

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


def _enable_pragmas(dbapi_connection: Any, _connection_record: Any) -> None:
    """Turn on WAL journaling and foreign key enforcement for a new connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(db_path: str) -> Engine:
    """Create a SQLite engine for a file path or ``:memory:``.

    In-memory databases use a single shared connection, so every session of
    the process sees the same data. File databases get their parent
    directory created.
    """
    connect_args = {"check_same_thread": False}
    if db_path == MEMORY_PATH:
        engine = create_engine("sqlite://", poolclass=StaticPool, connect_args=connect_args)
    else:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(f"sqlite:///{db_path}", connect_args=connect_args)
    event.listen(engine, "connect", _enable_pragmas)
    return engine


class Database:
    """Owns the engine and session factory of one course database.

    ``supports_transactions`` tells units of work whether they may open
    explicit transactions. When it is False every ``save()`` is committed
    at once and a rollback cannot undo it.
    """

    def __init__(self, db_path: str = "coursemanager.db", transactional: bool = True) -> None:
        """Prepare a database; the engine is created on first use.

        Args:
            db_path: SQLite file path, or ":memory:".
            transactional: Whether explicit transactions are supported.
        """
        self.db_path = db_path
        self.supports_transactions = transactional
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def in_memory(self) -> bool:
        return self.db_path == MEMORY_PATH

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = build_engine(self.db_path)
            logger.debug(
                "Engine created for %s (transactions %s)",
                self.db_path,
                "on" if self.supports_transactions else "off",
            )
        return self._engine

    @property
    def session_factory(self) -> sessionmaker[Session]:
        # Loaded rows stay readable after commit; services return them to callers
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        return self._session_factory

    def create_tables(self) -> None:
        """Create the department, student, course and enrollment tables if missing."""
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop every table, data included."""
        Base.metadata.drop_all(self.engine)

    def get_session(self) -> Session:
        """Open a new session bound to this database."""
        return self.session_factory()

    def journal_mode(self) -> str:
        """Current SQLite journal mode; in-memory databases report "memory"."""
        with self.engine.connect() as conn:
            return str(conn.execute(text("PRAGMA journal_mode")).scalar())

    def is_wal_mode(self) -> bool:
        return self.journal_mode() == "wal"

    def close(self) -> None:
        """Dispose of the engine; the next use creates a fresh one."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
