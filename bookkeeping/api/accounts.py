"""
Chart of accounts API endpoints.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from bookkeeping.api.dependencies import get_db, http_error
from bookkeeping.errors import LedgerError
from bookkeeping.services.account_service import AccountService
from bookkeeping.services.ledger_service import LedgerService
from bookkeeping.schemas.account import (
    AccountCreate,
    AccountRename,
    AccountResponse,
)
from bookkeeping.schemas.transaction import JournalEntryResponse

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    db: Session = Depends(get_db),
):
    """
    Register a new account.

    Every account must exist before entries can be posted to it.
    """
    service = AccountService(db)
    try:
        account = service.create_account(request)
        db.commit()
        return account
    except LedgerError as e:
        db.rollback()
        raise http_error(e)


@router.get("", response_model=list[AccountResponse])
def list_accounts(
    account_type: str | None = None,
    db: Session = Depends(get_db),
):
    """List accounts in registration order, optionally of one type."""
    service = AccountService(db)
    try:
        return service.list_accounts(account_type)
    except LedgerError as e:
        raise http_error(e)


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int,
    db: Session = Depends(get_db),
):
    service = AccountService(db)
    try:
        return service.get_account(account_id)
    except LedgerError as e:
        raise http_error(e)


@router.get("/{account_id}/entries", response_model=list[JournalEntryResponse])
def get_account_entries(
    account_id: int,
    db: Session = Depends(get_db),
):
    """Every journal entry posted to an account, newest first."""
    service = LedgerService(db)
    try:
        entries = service.get_entries_by_account(account_id)
    except LedgerError as e:
        raise http_error(e)
    return [JournalEntryResponse.from_entry(entry) for entry in entries]


@router.patch("/{account_id}", response_model=AccountResponse)
def rename_account(
    account_id: int,
    request: AccountRename,
    db: Session = Depends(get_db),
):
    """Rename an account. Code and type cannot change."""
    service = AccountService(db)
    try:
        account = service.rename_account(account_id, request.name)
        db.commit()
        return account
    except LedgerError as e:
        db.rollback()
        raise http_error(e)


@router.delete("/{account_id}", status_code=204)
def delete_account(
    account_id: int,
    db: Session = Depends(get_db),
):
    """Delete an account that has no postings and no children."""
    service = AccountService(db)
    try:
        service.delete_account(account_id)
        db.commit()
    except LedgerError as e:
        db.rollback()
        raise http_error(e)
    return Response(status_code=204)
