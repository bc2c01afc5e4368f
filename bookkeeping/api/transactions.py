"""
Transaction API endpoints.

The API layer is thin: it handles HTTP concerns and delegates
every ledger rule to LedgerService.
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from bookkeeping.api.dependencies import (
    check_date_range,
    get_db,
    get_store,
    http_error,
)
from bookkeeping.config import get_settings
from bookkeeping.errors import InvariantViolation, LedgerError
from bookkeeping.services.ledger_service import LedgerService
from bookkeeping.schemas.transaction import (
    TransactionCreate,
    TransactionFilter,
    TransactionResponse,
    TransactionValidation,
)
from bookkeeping.store import LedgerStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post("", response_model=TransactionResponse, status_code=201)
def post_transaction(
    request: TransactionCreate,
    db: Session = Depends(get_db),
    store: LedgerStore = Depends(get_store),
):
    """
    Post a balanced transaction.

    The write lock is held until the commit finishes, so no
    other posting interleaves with this one.
    """
    service = LedgerService(db)
    with store.write_lock:
        try:
            txn = service.post_transaction(request)
            db.commit()
        except LedgerError as e:
            db.rollback()
            raise http_error(e)
        except InvariantViolation:
            db.rollback()
            logger.exception("Posting aborted by invariant check")
            raise HTTPException(status_code=500, detail="Internal ledger error")

    return TransactionResponse.from_transaction(service.get_transaction(txn.id))


@router.post("/validate", response_model=TransactionValidation)
def validate_transaction(
    request: TransactionCreate,
    db: Session = Depends(get_db),
):
    """
    Check a transaction without posting it.

    Rule failures come back in the errors list, all of them at
    once, with status 200. Nothing is written.
    """
    return LedgerService(db).validate_transaction(request)


@router.get("", response_model=list[TransactionResponse])
def list_transactions(
    date_from: date | None = None,
    date_to: date | None = None,
    description_contains: str | None = None,
    account_id: int | None = None,
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    """List transactions, most recent first."""
    settings = get_settings()
    if limit is None:
        limit = settings.DEFAULT_PAGE_SIZE
    limit = min(limit, settings.MAX_PAGE_SIZE)

    check_date_range(date_from, date_to)

    service = LedgerService(db)
    transactions = service.list_transactions(TransactionFilter(
        date_from=date_from,
        date_to=date_to,
        description_contains=description_contains,
        account_id=account_id,
        limit=limit,
        offset=offset,
    ))
    return [TransactionResponse.from_transaction(t) for t in transactions]


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
):
    service = LedgerService(db)
    try:
        return TransactionResponse.from_transaction(
            service.get_transaction(transaction_id)
        )
    except LedgerError as e:
        raise http_error(e)
