"""
Transaction model.

A transaction is the header of a balanced group of journal
entries. It is written once by LedgerService.post_transaction
and never modified afterwards.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import String, Date, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookkeeping.models.base import Base


class Transaction(Base):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    reference: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    transaction_date: Mapped[date] = mapped_column(
        Date, nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    journal_entries: Mapped[list["JournalEntry"]] = relationship(
        back_populates="transaction",
        order_by="JournalEntry.position",
    )

    @property
    def total_debits(self) -> Decimal:
        return sum(
            (e.debit_amount for e in self.journal_entries), Decimal("0")
        )

    @property
    def total_credits(self) -> Decimal:
        return sum(
            (e.credit_amount for e in self.journal_entries), Decimal("0")
        )

    @property
    def is_balanced(self) -> bool:
        return self.total_debits == self.total_credits

    @property
    def net_amount(self) -> Decimal:
        return max(self.total_debits, self.total_credits)

    def __repr__(self) -> str:
        return (
            f"<Transaction {self.id} {self.transaction_date} "
            f"{self.description!r}>"
        )
