"""
FastAPI dependencies.

The store is created by the application lifespan and kept on
app.state; every request gets its own session from it.
"""

from typing import Iterator

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from bookkeeping.errors import LedgerError
from bookkeeping.store import LedgerStore


def get_store(request: Request) -> LedgerStore:
    return request.app.state.store


def get_db(store: LedgerStore = Depends(get_store)) -> Iterator[Session]:
    """
    Provide a database session for a single request.

    The try/finally guarantees the session is closed even if
    the endpoint raises, so connections never leak from the pool.
    """
    db = store.session()
    try:
        yield db
    finally:
        db.close()


def http_error(error: LedgerError) -> HTTPException:
    """Translate a ledger error into the matching HTTP response."""
    return HTTPException(status_code=error.status_code, detail=str(error))


def check_date_range(date_from, date_to) -> None:
    if date_from and date_to and date_from > date_to:
        raise HTTPException(
            status_code=400, detail="date_from must not be after date_to"
        )
