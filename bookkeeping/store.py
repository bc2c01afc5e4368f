"""
Ledger store: engine, session factory and write lock.

One LedgerStore is built at process start (the FastAPI lifespan
or a test fixture), handed to whoever needs sessions, and
disposed at shutdown. Nothing in the package keeps a store in a
module global.
"""

import logging
import threading
from contextlib import contextmanager, nullcontext
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from bookkeeping.models import Base

logger = logging.getLogger(__name__)


class LedgerStore:
    """
    Owns the database engine and serializes ledger writes.

    write_lock is re-entrant so a caller already holding it can
    open a nested write unit without deadlocking itself.
    """

    def __init__(self, database_url: str, **engine_kwargs):
        self.database_url = database_url

        if database_url.startswith("sqlite"):
            # Sessions are handed across threads by the web server
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})

        # pool_pre_ping tests connections before use, so a restarted
        # database does not fail the next posting.
        self.engine = create_engine(
            database_url, pool_pre_ping=True, **engine_kwargs
        )

        if database_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        # autoflush=False: nothing reaches the database until the
        # service flushes, so validation always runs first.
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
        )
        self.write_lock = threading.RLock()

    def create_schema(self) -> None:
        """Create any missing tables."""
        Base.metadata.create_all(bind=self.engine)

    def drop_schema(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    @contextmanager
    def unit_of_work(self, write: bool = False) -> Iterator[Session]:
        """
        Yield a session that commits on success and rolls back on error.

        With write=True the store's write lock is held from the
        first statement until after the commit, so two postings
        never interleave.
        """
        lock = self.write_lock if write else nullcontext()
        with lock:
            db = self.SessionLocal()
            try:
                yield db
                db.commit()
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
        logger.info("Ledger store disposed", extra={"database_url": self._safe_url()})

    def _safe_url(self) -> str:
        return self.engine.url.render_as_string(hide_password=True)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
