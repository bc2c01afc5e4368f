"""
Pydantic schemas for posting and querying transactions.

Amounts are Decimal end to end. JSON numbers and decimal
strings are both accepted on input; responses serialize
Decimal as a string so no client ever parses a float.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from bookkeeping.models.enums import EntryType


# --- Request Schemas ---

class JournalEntryCreate(BaseModel):
    """
    One line of a transaction as submitted by a client.

    Exactly one of debit_amount and credit_amount should be a
    positive amount. The rule is checked by the ledger service
    (via Posting.from_amounts) so the error can name the line.
    """
    account_id: int
    debit_amount: Decimal | None = None
    credit_amount: Decimal | None = None
    description: str | None = Field(default=None, max_length=255)


class TransactionCreate(BaseModel):
    """A complete transaction: header plus its journal entries."""
    description: str = Field(min_length=1, max_length=255)
    reference: str | None = Field(default=None, max_length=100)
    transaction_date: date
    journal_entries: list[JournalEntryCreate]

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("description must not be blank")
        return v


class TransactionFilter(BaseModel):
    """Filters for listing transactions. All given filters must match."""
    date_from: date | None = None
    date_to: date | None = None
    description_contains: str | None = None
    account_id: int | None = None
    limit: int | None = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def date_range_in_order(self):
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError("date_from must not be after date_to")
        return self


# --- Response Schemas ---

class TransactionValidation(BaseModel):
    """Result of a dry-run check of a TransactionCreate."""
    valid: bool
    errors: list[str]
    total_amount: Decimal | None = None


class JournalEntryResponse(BaseModel):
    id: int
    account_id: int
    account_code: str
    account_name: str
    entry_type: EntryType
    debit_amount: Decimal
    credit_amount: Decimal
    description: str | None

    @classmethod
    def from_entry(cls, entry) -> "JournalEntryResponse":
        return cls(
            id=entry.id,
            account_id=entry.account_id,
            account_code=entry.account.code,
            account_name=entry.account.name,
            entry_type=entry.entry_type,
            debit_amount=entry.debit_amount,
            credit_amount=entry.credit_amount,
            description=entry.description,
        )


class TransactionResponse(BaseModel):
    id: int
    description: str
    reference: str | None
    transaction_date: date
    created_at: datetime
    journal_entries: list[JournalEntryResponse]
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool
    net_amount: Decimal

    @classmethod
    def from_transaction(cls, txn) -> "TransactionResponse":
        return cls(
            id=txn.id,
            description=txn.description,
            reference=txn.reference,
            transaction_date=txn.transaction_date,
            created_at=txn.created_at,
            journal_entries=[
                JournalEntryResponse.from_entry(e) for e in txn.journal_entries
            ],
            total_debits=txn.total_debits,
            total_credits=txn.total_credits,
            is_balanced=txn.is_balanced,
            net_amount=txn.net_amount,
        )
