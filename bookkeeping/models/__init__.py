"""
Database models package.

All models are imported here so that Base.metadata knows every
table before the store creates the schema.
"""

from bookkeeping.models.base import Base
from bookkeeping.models.enums import AccountType, EntryType
from bookkeeping.models.types import Money
from bookkeeping.models.account import Account
from bookkeeping.models.transaction import Transaction
from bookkeeping.models.journal_entry import JournalEntry

__all__ = [
    "Base",
    "AccountType",
    "EntryType",
    "Money",
    "Account",
    "Transaction",
    "JournalEntry",
]
