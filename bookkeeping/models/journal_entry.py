"""
Journal entry model.

Each entry is one line of a transaction: a debit or a credit
against a single account. Exactly one of debit_amount and
credit_amount is positive, the other is zero. That rule is
enforced by Posting when the entry is built, not by the table.
"""

from decimal import Decimal

from sqlalchemy import String, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookkeeping.models.base import Base
from bookkeeping.models.enums import EntryType
from bookkeeping.models.types import Money


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    transaction_id: Mapped[int] = mapped_column(
        ForeignKey("transactions.id"), nullable=False, index=True
    )
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    debit_amount: Mapped[Decimal] = mapped_column(
        Money, nullable=False, default=Decimal("0")
    )
    credit_amount: Mapped[Decimal] = mapped_column(
        Money, nullable=False, default=Decimal("0")
    )
    description: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )

    transaction: Mapped["Transaction"] = relationship(
        back_populates="journal_entries"
    )
    account: Mapped["Account"] = relationship()

    @property
    def entry_type(self) -> EntryType:
        return EntryType.DEBIT if self.debit_amount > 0 else EntryType.CREDIT

    @property
    def amount(self) -> Decimal:
        return self.debit_amount if self.debit_amount > 0 else self.credit_amount

    def __repr__(self) -> str:
        return f"<JournalEntry {self.entry_type.value} {self.amount}>"
