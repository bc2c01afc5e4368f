"""Shared enumerations for database models."""

import enum


class AccountType(str, enum.Enum):
    """The five fundamental accounting categories."""
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"

    @property
    def is_debit_normal(self) -> bool:
        return self in (AccountType.ASSET, AccountType.EXPENSE)


# Report ordering: balance sheet types first, then income statement types
ACCOUNT_TYPE_ORDER = {
    AccountType.ASSET: 1,
    AccountType.LIABILITY: 2,
    AccountType.EQUITY: 3,
    AccountType.REVENUE: 4,
    AccountType.EXPENSE: 5,
}


class EntryType(str, enum.Enum):
    """Direction of a journal entry."""
    DEBIT = "debit"
    CREDIT = "credit"
