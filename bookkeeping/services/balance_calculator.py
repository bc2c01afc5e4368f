"""
Balance calculator: sign conventions and the balancing rule.

Pure functions only. Nothing here touches the database, so the
posting engine and every report share exactly one definition of
which side increases which account type.

    ASSET, EXPENSE                 balance = debits - credits
    LIABILITY, EQUITY, REVENUE     balance = credits - debits
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from bookkeeping.errors import InvalidEntry
from bookkeeping.models.enums import AccountType, EntryType
from bookkeeping.models.types import MONEY_MAX, MONEY_SCALE

ZERO = Decimal("0")


@dataclass(frozen=True)
class Posting:
    """
    One side of a journal entry: Debit(amount) or Credit(amount).

    A Posting can only exist with a positive amount of at most
    MONEY_SCALE decimal places and no larger than MONEY_MAX, so code
    holding one never has to re-check the one-sided rule.
    """

    side: EntryType
    amount: Decimal

    def __post_init__(self):
        if isinstance(self.amount, int) and not isinstance(self.amount, bool):
            object.__setattr__(self, "amount", Decimal(self.amount))
        if not isinstance(self.amount, Decimal):
            raise InvalidEntry(
                f"amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite() or self.amount <= ZERO:
            raise InvalidEntry(f"{self.side.value} amount must be positive")
        scaled = self.amount.scaleb(MONEY_SCALE)
        if scaled != scaled.to_integral_value():
            raise InvalidEntry(
                f"{self.side.value} amount {self.amount} has more than "
                f"{MONEY_SCALE} decimal places"
            )
        if self.amount > MONEY_MAX:
            raise InvalidEntry(
                f"{self.side.value} amount {self.amount} exceeds the maximum "
                f"of {MONEY_MAX}"
            )

    @classmethod
    def debit(cls, amount: Decimal) -> "Posting":
        return cls(EntryType.DEBIT, amount)

    @classmethod
    def credit(cls, amount: Decimal) -> "Posting":
        return cls(EntryType.CREDIT, amount)

    @classmethod
    def from_amounts(
        cls, debit_amount: Decimal | None, credit_amount: Decimal | None
    ) -> "Posting":
        """
        Build a Posting from the two optional columns of a journal line.

        A missing amount and a zero amount mean the same thing.
        Raises InvalidEntry when both or neither side is populated.
        """
        has_debit = debit_amount is not None and debit_amount != ZERO
        has_credit = credit_amount is not None and credit_amount != ZERO

        if has_debit and has_credit:
            raise InvalidEntry(
                "journal entry cannot have both debit and credit amounts"
            )
        if not has_debit and not has_credit:
            raise InvalidEntry(
                "journal entry must have either a debit or a credit amount"
            )
        if has_debit:
            return cls.debit(debit_amount)
        return cls.credit(credit_amount)

    @property
    def debit_amount(self) -> Decimal:
        return self.amount if self.side == EntryType.DEBIT else ZERO

    @property
    def credit_amount(self) -> Decimal:
        return self.amount if self.side == EntryType.CREDIT else ZERO


def balance_delta(
    account_type: AccountType, debit_amount: Decimal, credit_amount: Decimal
) -> Decimal:
    """Signed change to an account's balance for one debit/credit pair."""
    if account_type.is_debit_normal:
        return debit_amount - credit_amount
    return credit_amount - debit_amount


def totals(entries: Iterable) -> tuple[Decimal, Decimal]:
    """Sum debit_amount and credit_amount over anything that has them."""
    total_debits = ZERO
    total_credits = ZERO
    for entry in entries:
        total_debits += entry.debit_amount or ZERO
        total_credits += entry.credit_amount or ZERO
    return total_debits, total_credits


def is_balanced(entries: Iterable) -> bool:
    """True iff debits equal credits exactly. No tolerance."""
    total_debits, total_credits = totals(entries)
    return total_debits == total_credits


def split_for_display(
    account_type: AccountType, balance: Decimal
) -> tuple[Decimal, Decimal]:
    """
    Project a signed balance onto (debit column, credit column).

    A positive balance lands on the account's normal side. A
    negative one (an overdrawn asset, say) lands on the opposite
    side as a positive figure, which keeps trial-balance columns
    equal whenever the ledger is.
    """
    if balance == ZERO:
        return ZERO, ZERO

    # Net debit position regardless of the account's normal side
    net_debit = balance if account_type.is_debit_normal else -balance
    if net_debit > ZERO:
        return net_debit, ZERO
    return ZERO, -net_debit
