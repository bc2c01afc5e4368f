"""
Report API endpoints.

All read-only. Each call builds the report from the ledger as
it stands at that moment.
"""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookkeeping.api.dependencies import check_date_range, get_db, http_error
from bookkeeping.errors import LedgerError
from bookkeeping.services.report_service import ReportService
from bookkeeping.schemas.report import (
    AccountStatement,
    BalanceSheet,
    IncomeStatement,
    Summary,
    TrialBalance,
)

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/trial-balance", response_model=TrialBalance)
def get_trial_balance(db: Session = Depends(get_db)):
    return ReportService(db).trial_balance()


@router.get("/balance-sheet", response_model=BalanceSheet)
def get_balance_sheet(db: Session = Depends(get_db)):
    return ReportService(db).balance_sheet()


@router.get("/income-statement", response_model=IncomeStatement)
def get_income_statement(
    date_from: date | None = None,
    date_to: date | None = None,
    db: Session = Depends(get_db),
):
    """Income statement, over a date range if one is given."""
    check_date_range(date_from, date_to)
    return ReportService(db).income_statement(date_from, date_to)


@router.get("/summary", response_model=Summary)
def get_summary(db: Session = Depends(get_db)):
    return ReportService(db).summary()


@router.get(
    "/accounts/{account_id}/statement",
    response_model=AccountStatement,
)
def get_account_statement(
    account_id: int,
    date_from: date | None = None,
    date_to: date | None = None,
    db: Session = Depends(get_db),
):
    """Entries for one account with opening and closing balances."""
    check_date_range(date_from, date_to)
    try:
        return ReportService(db).account_statement(account_id, date_from, date_to)
    except LedgerError as e:
        raise http_error(e)
