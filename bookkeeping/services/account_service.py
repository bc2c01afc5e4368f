"""
Account service: the chart of accounts.

Registers accounts, looks them up and renames them. Balances
are not touched here; only LedgerService moves money. An
account that has ever been posted to cannot be deleted.
"""

import logging

from sqlalchemy import select, exists
from sqlalchemy.orm import Session

from bookkeeping.errors import (
    AccountHasChildren,
    AccountHasPostings,
    AccountNotFound,
    DuplicateAccountCode,
    InvalidAccountType,
    UnknownParent,
)
from bookkeeping.models.account import Account
from bookkeeping.models.enums import AccountType
from bookkeeping.models.journal_entry import JournalEntry
from bookkeeping.schemas.account import AccountCreate

logger = logging.getLogger(__name__)


def parse_account_type(value: AccountType | str) -> AccountType:
    """Resolve a user-supplied account type, case-insensitively."""
    if isinstance(value, AccountType):
        return value
    try:
        return AccountType(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(t.value for t in AccountType)
        raise InvalidAccountType(
            f"Invalid account type '{value}' (expected one of: {valid})"
        ) from None


class AccountService:
    """
    Chart of accounts operations.

    Like every service here it works on the caller's session and
    never commits: the caller decides the transaction boundary.
    """

    def __init__(self, db: Session):
        self.db = db

    def create_account(self, request: AccountCreate) -> Account:
        """
        Register a new account with a zero balance.

        Raises InvalidAccountType, DuplicateAccountCode or
        UnknownParent. Nothing is written if any check fails.
        """
        account_type = parse_account_type(request.account_type)

        if self.get_account_by_code(request.code) is not None:
            raise DuplicateAccountCode(
                f"Account with code '{request.code}' already exists"
            )

        if request.parent_id is not None:
            if self.db.get(Account, request.parent_id) is None:
                raise UnknownParent(
                    f"Parent account {request.parent_id} not found"
                )

        account = Account(
            code=request.code,
            name=request.name,
            account_type=account_type,
            parent_id=request.parent_id,
        )
        self.db.add(account)
        self.db.flush()

        logger.info(
            "Account registered",
            extra={"account_code": account.code, "account_type": account_type.value},
        )
        return account

    def get_account(self, account_id: int) -> Account:
        account = self.db.get(Account, account_id)
        if not account:
            raise AccountNotFound(f"Account {account_id} not found")
        return account

    def get_account_by_code(self, code: str) -> Account | None:
        return self.db.execute(
            select(Account).where(Account.code == code)
        ).scalar_one_or_none()

    def list_accounts(
        self, account_type: AccountType | str | None = None
    ) -> list[Account]:
        """Accounts in registration order, optionally of one type."""
        query = select(Account).order_by(Account.id)
        if account_type is not None:
            query = query.where(
                Account.account_type == parse_account_type(account_type)
            )
        return list(self.db.execute(query).scalars().all())

    def rename_account(self, account_id: int, name: str) -> Account:
        """Change an account's display name. Nothing else is mutable."""
        account = self.get_account(account_id)
        account.name = name
        self.db.flush()
        return account

    def delete_account(self, account_id: int) -> None:
        """
        Remove an account that has never been used.

        A ledger cannot drop history, so any posted entry blocks
        deletion. Child accounts block it too.
        """
        account = self.get_account(account_id)

        has_postings = self.db.execute(
            select(exists().where(JournalEntry.account_id == account_id))
        ).scalar()
        if has_postings:
            raise AccountHasPostings(
                f"Account {account.code} has posted entries and cannot be deleted"
            )

        has_children = self.db.execute(
            select(exists().where(Account.parent_id == account_id))
        ).scalar()
        if has_children:
            raise AccountHasChildren(
                f"Account {account.code} has child accounts and cannot be deleted"
            )

        self.db.delete(account)
        self.db.flush()
        logger.info("Account deleted", extra={"account_code": account.code})
