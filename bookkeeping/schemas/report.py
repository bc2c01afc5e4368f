"""
Pydantic schemas for financial reports.

Reports are values: built from a snapshot of the ledger,
returned, and never stored.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from bookkeeping.models.enums import AccountType
from bookkeeping.schemas.transaction import JournalEntryResponse


ZERO = Decimal("0")


# --- Trial balance ---

class TrialBalanceRow(BaseModel):
    account_id: int
    account_code: str
    account_name: str
    account_type: AccountType
    debit_balance: Decimal
    credit_balance: Decimal


class TrialBalance(BaseModel):
    entries: list[TrialBalanceRow]
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool


# --- Balance sheet and income statement ---

class ReportLine(BaseModel):
    """One account's contribution to a report section."""
    account_id: int
    code: str
    name: str
    amount: Decimal


class ReportSection(BaseModel):
    accounts: list[ReportLine] = []
    total: Decimal = ZERO


class BalanceSheet(BaseModel):
    assets: ReportSection
    liabilities: ReportSection
    equity: ReportSection
    total_assets: Decimal
    total_liabilities_and_equity: Decimal
    net_income: Decimal
    is_balanced: bool


class IncomeStatement(BaseModel):
    date_from: date | None = None
    date_to: date | None = None
    revenue: ReportSection
    expenses: ReportSection
    net_income: Decimal


class Summary(BaseModel):
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    total_revenue: Decimal
    total_expenses: Decimal
    net_income: Decimal
    is_balanced: bool


# --- Account statement ---

class StatementLine(BaseModel):
    transaction_id: int
    transaction_date: date
    transaction_description: str
    entry: JournalEntryResponse
    running_balance: Decimal


class AccountStatement(BaseModel):
    account_id: int
    account_code: str
    account_name: str
    account_type: AccountType
    date_from: date | None
    date_to: date | None
    opening_balance: Decimal
    lines: list[StatementLine]
    total_debits: Decimal
    total_credits: Decimal
    closing_balance: Decimal
