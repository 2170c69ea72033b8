"""SQLite engine and session factory for the entity store."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from catalogo.store.models import Base

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


def _pragma_listener(timeout: float) -> Callable[[Any, Any], None]:
    busy_timeout_ms = int(timeout * 1000)

    def on_connect(dbapi_connection: Any, _connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute(f"PRAGMA busy_timeout={busy_timeout_ms}")
        cursor.close()

    return on_connect


class Database:
    """Owns the engine for one SQLite file (or an in-memory database).

    Every connection runs in WAL mode with foreign keys enforced and a busy
    timeout: a call blocked on another writer for longer than ``timeout``
    seconds fails instead of waiting indefinitely.
    """

    def __init__(self, db_path: str = "catalogo.db", timeout: float = 5.0) -> None:
        """Initialize without connecting; the engine is created on first use.

        Args:
            db_path: SQLite file, or ":memory:".
            timeout: Seconds to wait on a locked database before failing.
        """
        self.db_path = db_path
        self.timeout = timeout
        self._engine: Engine | None = None
        self._sessions: sessionmaker[Session] | None = None

    @property
    def in_memory(self) -> bool:
        return self.db_path == MEMORY

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        connect_args = {"check_same_thread": False, "timeout": self.timeout}
        if self.in_memory:
            # One shared connection, visible from every thread (TestClient, worker threads)
            engine = create_engine("sqlite://", poolclass=StaticPool, connect_args=connect_args)
        else:
            path = Path(self.db_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(f"sqlite:///{path}", connect_args=connect_args)
        event.listen(engine, "connect", _pragma_listener(self.timeout))
        logger.debug("Opened SQLite engine for %s (timeout=%ss)", self.db_path, self.timeout)
        return engine

    def create_tables(self) -> None:
        """Create all catalog tables that don't exist yet."""
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        """Open a new session. Loaded objects stay usable after commit."""
        if self._sessions is None:
            self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)
        return self._sessions()

    def pragma(self, name: str) -> Any:
        """Read a SQLite pragma on a pooled connection."""
        with self.engine.connect() as conn:
            return conn.execute(text(f"PRAGMA {name}")).scalar()

    def foreign_keys_enabled(self) -> bool:
        return self.pragma("foreign_keys") == 1

    def close(self) -> None:
        """Dispose of the engine. A later call reconnects."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._sessions = None
