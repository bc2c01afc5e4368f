"""
Ledger service: the posting engine.

This service enforces the fundamental rules:
1. A transaction has at least two journal entries
2. Every entry is exactly one positive debit or credit
3. Every entry references an existing account
4. Total debits equal total credits, exactly
5. No balance leaves the range the Money column can store
6. Posted transactions are never modified

No other service writes balances or journal entries. Every
rejection happens before the first write, so a failed posting
leaves the ledger exactly as it was.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy import select, update, exists
from sqlalchemy.orm import Session, selectinload

from bookkeeping.errors import (
    AccountNotFound,
    BalanceOutOfRange,
    EmptyTransaction,
    InvalidEntry,
    InvariantViolation,
    LedgerError,
    TransactionNotFound,
    UnbalancedTransaction,
    UnknownAccount,
)
from bookkeeping.models.account import Account
from bookkeeping.models.journal_entry import JournalEntry
from bookkeeping.models.transaction import Transaction
from bookkeeping.models.types import MONEY_MAX
from bookkeeping.schemas.transaction import (
    TransactionCreate,
    TransactionFilter,
    TransactionValidation,
)
from bookkeeping.services.balance_calculator import (
    ZERO,
    Posting,
    balance_delta,
    totals,
)

logger = logging.getLogger(__name__)

MIN_ENTRIES = 2


@dataclass
class _Checked:
    """Outcome of running every posting rule over a request."""
    postings: list[Posting] = field(default_factory=list)
    accounts: dict[int, Account] = field(default_factory=dict)
    deltas: dict[int, Decimal] = field(default_factory=dict)
    total: Decimal = ZERO
    errors: list[LedgerError] = field(default_factory=list)


class LedgerService:
    """
    All postings pass through this service.

    The service takes a database session as a constructor
    argument. The caller controls the transaction boundary and
    decides when to commit or roll back. Callers that may post
    concurrently hold LedgerStore.write_lock across post and
    commit.
    """

    def __init__(self, db: Session):
        self.db = db

    def _check(self, request: TransactionCreate) -> _Checked:
        """
        Run every posting rule and collect the failures in order.

        Rules that depend on earlier ones (balancing needs valid
        entries, the range check needs everything) only run when
        nothing before them failed.
        """
        checked = _Checked()
        entries = request.journal_entries

        # --- Shape ---
        if len(entries) < MIN_ENTRIES:
            checked.errors.append(EmptyTransaction(
                f"Transaction must have at least {MIN_ENTRIES} journal "
                f"entries, got {len(entries)}"
            ))

        for number, entry in enumerate(entries, start=1):
            try:
                checked.postings.append(
                    Posting.from_amounts(entry.debit_amount, entry.credit_amount)
                )
            except InvalidEntry as e:
                checked.errors.append(InvalidEntry(f"Journal entry {number}: {e}"))

        # --- Accounts ---
        account_ids = {entry.account_id for entry in entries}
        if account_ids:
            accounts = self.db.execute(
                select(Account).where(Account.id.in_(account_ids))
            ).scalars().all()
            checked.accounts = {a.id: a for a in accounts}

        for number, entry in enumerate(entries, start=1):
            if entry.account_id not in checked.accounts:
                checked.errors.append(UnknownAccount(
                    f"Journal entry {number}: account "
                    f"{entry.account_id} not found"
                ))

        if checked.errors or len(checked.postings) != len(entries):
            return checked

        # --- Balance rule ---
        total_debits, total_credits = totals(checked.postings)
        if total_debits != total_credits:
            checked.errors.append(UnbalancedTransaction(
                f"Transaction does not balance: "
                f"debits={total_debits}, credits={total_credits}"
            ))
            return checked
        checked.total = total_debits

        # --- Storable balances ---
        for posting, entry in zip(checked.postings, entries):
            account = checked.accounts[entry.account_id]
            delta = balance_delta(
                account.account_type, posting.debit_amount, posting.credit_amount
            )
            checked.deltas[account.id] = checked.deltas.get(account.id, ZERO) + delta
        for account_id in sorted(checked.deltas):
            account = checked.accounts[account_id]
            if abs(account.balance + checked.deltas[account_id]) > MONEY_MAX:
                checked.errors.append(BalanceOutOfRange(
                    f"Posting would take account {account.code} beyond "
                    f"the maximum balance of {MONEY_MAX}"
                ))

        return checked

    def validate_transaction(self, request: TransactionCreate) -> TransactionValidation:
        """
        Dry run of post_transaction: report every problem, write nothing.

        total_amount is the balanced total when the request would
        post, None otherwise.
        """
        checked = self._check(request)
        valid = not checked.errors
        return TransactionValidation(
            valid=valid,
            errors=[str(e) for e in checked.errors],
            total_amount=checked.total if valid else None,
        )

    def post_transaction(self, request: TransactionCreate) -> Transaction:
        """
        Validate and post a transaction as a single unit.

        Raises EmptyTransaction, InvalidEntry, UnknownAccount,
        UnbalancedTransaction or BalanceOutOfRange before anything
        is written. On success the transaction, its entries and
        every affected balance are flushed together; the caller
        commits.
        """
        checked = self._check(request)
        if checked.errors:
            error = checked.errors[0]
            self._reject(request, type(error).__name__)
            raise error

        # --- Build ---
        txn = Transaction(
            description=request.description,
            reference=request.reference,
            transaction_date=request.transaction_date,
        )
        entries = request.journal_entries
        for position, (entry, posting) in enumerate(zip(entries, checked.postings)):
            txn.journal_entries.append(JournalEntry(
                account_id=entry.account_id,
                position=position,
                debit_amount=posting.debit_amount,
                credit_amount=posting.credit_amount,
                description=entry.description,
            ))

        self._check_postconditions(txn, checked.postings)

        # --- Write ---
        self.db.add(txn)
        # Sorted so concurrent writers take row locks in the same order
        for account_id in sorted(checked.deltas):
            if checked.deltas[account_id] == 0:
                continue
            self.db.execute(
                update(Account)
                .where(Account.id == account_id)
                .values(balance=Account.balance + checked.deltas[account_id])
                .execution_options(synchronize_session="fetch")
            )
        self.db.flush()

        logger.info(
            "Transaction posted",
            extra={
                "transaction_id": txn.id,
                "entries": len(checked.postings),
                "amount": str(checked.total),
            },
        )
        return txn

    def _check_postconditions(
        self, txn: Transaction, postings: list[Posting]
    ) -> None:
        """
        Re-check the built transaction before it is written.

        Validation already proved the postings balance; a failure
        here means the build step itself is broken.
        """
        if len(txn.journal_entries) != len(postings) or not txn.is_balanced:
            logger.error(
                "Posting invariant violated",
                extra={
                    "description": txn.description,
                    "total_debits": str(txn.total_debits),
                    "total_credits": str(txn.total_credits),
                },
            )
            raise InvariantViolation(
                "built transaction does not match its validated postings"
            )

    def _reject(self, request: TransactionCreate, reason: str) -> None:
        logger.warning(
            "Transaction rejected",
            extra={"reason": reason, "description": request.description},
        )

    def get_transaction(self, transaction_id: int) -> Transaction:
        txn = self.db.execute(
            select(Transaction)
            .where(Transaction.id == transaction_id)
            .options(
                selectinload(Transaction.journal_entries)
                .selectinload(JournalEntry.account)
            )
        ).scalar_one_or_none()
        if not txn:
            raise TransactionNotFound(f"Transaction {transaction_id} not found")
        return txn

    def list_transactions(
        self, filters: TransactionFilter | None = None
    ) -> list[Transaction]:
        """
        Transactions matching every given filter, most recent first.

        Ties on transaction_date are broken by id, newest first.
        date_from and date_to are inclusive; description_contains
        is case-insensitive.
        """
        filters = filters or TransactionFilter()

        query = (
            select(Transaction)
            .options(
                selectinload(Transaction.journal_entries)
                .selectinload(JournalEntry.account)
            )
            .order_by(
                Transaction.transaction_date.desc(), Transaction.id.desc()
            )
        )
        if filters.date_from is not None:
            query = query.where(Transaction.transaction_date >= filters.date_from)
        if filters.date_to is not None:
            query = query.where(Transaction.transaction_date <= filters.date_to)
        if filters.description_contains:
            query = query.where(
                Transaction.description.icontains(
                    filters.description_contains, autoescape=True
                )
            )
        if filters.account_id is not None:
            query = query.where(
                exists().where(
                    JournalEntry.transaction_id == Transaction.id,
                    JournalEntry.account_id == filters.account_id,
                )
            )
        if filters.offset:
            query = query.offset(filters.offset)
        if filters.limit is not None:
            query = query.limit(filters.limit)

        return list(self.db.execute(query).scalars().all())

    def get_entries_by_account(self, account_id: int) -> list[JournalEntry]:
        """Return all entries for an account, newest first."""
        if self.db.get(Account, account_id) is None:
            raise AccountNotFound(f"Account {account_id} not found")

        entries = self.db.execute(
            select(JournalEntry)
            .join(Transaction)
            .where(JournalEntry.account_id == account_id)
            .options(selectinload(JournalEntry.account))
            .order_by(
                Transaction.transaction_date.desc(),
                Transaction.id.desc(),
                JournalEntry.position,
            )
        ).scalars().all()
        return list(entries)
