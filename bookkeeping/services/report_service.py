"""
Report service: trial balance, balance sheet, income statement.

Reports read the ledger and never write it. Balance-based
reports load every account in a single SELECT, so a report
reflects one committed state of the ledger, never half of a
posting.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from bookkeeping.errors import AccountNotFound
from bookkeeping.models.account import Account
from bookkeeping.models.enums import AccountType, ACCOUNT_TYPE_ORDER
from bookkeeping.models.journal_entry import JournalEntry
from bookkeeping.models.transaction import Transaction
from bookkeeping.schemas.report import (
    AccountStatement,
    BalanceSheet,
    IncomeStatement,
    ReportLine,
    ReportSection,
    StatementLine,
    Summary,
    TrialBalance,
    TrialBalanceRow,
)
from bookkeeping.schemas.transaction import JournalEntryResponse
from bookkeeping.services.balance_calculator import (
    ZERO,
    balance_delta,
    split_for_display,
)


def _section(accounts: list[Account], amounts: dict[int, Decimal]) -> ReportSection:
    lines = [
        ReportLine(
            account_id=a.id,
            code=a.code,
            name=a.name,
            amount=amounts.get(a.id, ZERO),
        )
        for a in accounts
    ]
    return ReportSection(
        accounts=lines,
        total=sum((line.amount for line in lines), ZERO),
    )


class ReportService:

    def __init__(self, db: Session):
        self.db = db

    def _accounts(self) -> list[Account]:
        """All accounts, ordered by type then code."""
        accounts = self.db.execute(select(Account)).scalars().all()
        return sorted(
            accounts,
            key=lambda a: (ACCOUNT_TYPE_ORDER[a.account_type], a.code),
        )

    def trial_balance(self) -> TrialBalance:
        """
        Every account's balance split into debit and credit columns.

        If only balanced transactions were ever posted, the two
        column totals are equal. A mismatch means the stored
        balances have drifted from the journal.
        """
        rows = []
        total_debits = ZERO
        total_credits = ZERO
        for account in self._accounts():
            debit_balance, credit_balance = split_for_display(
                account.account_type, account.balance
            )
            total_debits += debit_balance
            total_credits += credit_balance
            rows.append(TrialBalanceRow(
                account_id=account.id,
                account_code=account.code,
                account_name=account.name,
                account_type=account.account_type,
                debit_balance=debit_balance,
                credit_balance=credit_balance,
            ))

        return TrialBalance(
            entries=rows,
            total_debits=total_debits,
            total_credits=total_credits,
            is_balanced=total_debits == total_credits,
        )

    def balance_sheet(self) -> BalanceSheet:
        """
        Assets against liabilities and equity.

        Until revenue and expense are closed into equity, the
        period's net income is what makes the two sides agree:
        assets = liabilities + equity + net income.
        """
        accounts = self._accounts()
        return self._balance_sheet(accounts, self._income_statement(accounts))

    def _balance_sheet(
        self, accounts: list[Account], income: IncomeStatement
    ) -> BalanceSheet:
        balances = {a.id: a.balance for a in accounts}
        by_type = _group_by_type(accounts)

        assets = _section(by_type[AccountType.ASSET], balances)
        liabilities = _section(by_type[AccountType.LIABILITY], balances)
        equity = _section(by_type[AccountType.EQUITY], balances)

        total_liabilities_and_equity = liabilities.total + equity.total
        return BalanceSheet(
            assets=assets,
            liabilities=liabilities,
            equity=equity,
            total_assets=assets.total,
            total_liabilities_and_equity=total_liabilities_and_equity,
            net_income=income.net_income,
            is_balanced=(
                assets.total == total_liabilities_and_equity + income.net_income
            ),
        )

    def income_statement(
        self, date_from: date | None = None, date_to: date | None = None
    ) -> IncomeStatement:
        """
        Revenue less expenses.

        Without a date range this uses current balances. With one,
        each account is valued by the entries of transactions
        dated inside the range (bounds inclusive).
        """
        accounts = self._accounts()
        if date_from is None and date_to is None:
            return self._income_statement(accounts)

        query = (
            select(
                JournalEntry.account_id,
                func.coalesce(func.sum(JournalEntry.debit_amount), 0),
                func.coalesce(func.sum(JournalEntry.credit_amount), 0),
            )
            .join(Transaction)
            .group_by(JournalEntry.account_id)
        )
        if date_from is not None:
            query = query.where(Transaction.transaction_date >= date_from)
        if date_to is not None:
            query = query.where(Transaction.transaction_date <= date_to)

        types = {a.id: a.account_type for a in accounts}
        amounts = {
            account_id: balance_delta(types[account_id], debits, credits)
            for account_id, debits, credits in self.db.execute(query).all()
            if account_id in types
        }
        return self._income_statement(accounts, amounts, date_from, date_to)

    def _income_statement(
        self,
        accounts: list[Account],
        amounts: dict[int, Decimal] | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> IncomeStatement:
        if amounts is None:
            amounts = {a.id: a.balance for a in accounts}
        by_type = _group_by_type(accounts)

        revenue = _section(by_type[AccountType.REVENUE], amounts)
        expenses = _section(by_type[AccountType.EXPENSE], amounts)
        return IncomeStatement(
            date_from=date_from,
            date_to=date_to,
            revenue=revenue,
            expenses=expenses,
            net_income=revenue.total - expenses.total,
        )

    def summary(self) -> Summary:
        """Headline totals of the three reports above."""
        accounts = self._accounts()
        income = self._income_statement(accounts)
        sheet = self._balance_sheet(accounts, income)

        return Summary(
            total_assets=sheet.total_assets,
            total_liabilities=sheet.liabilities.total,
            total_equity=sheet.equity.total,
            total_revenue=income.revenue.total,
            total_expenses=income.expenses.total,
            net_income=income.net_income,
            is_balanced=sheet.is_balanced,
        )

    def account_statement(
        self,
        account_id: int,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> AccountStatement:
        """
        An account's entries over a period with running balances.

        The opening balance is the sum of everything dated before
        date_from (zero when there is no lower bound).
        """
        account = self.db.get(Account, account_id)
        if account is None:
            raise AccountNotFound(f"Account {account_id} not found")

        rows = self.db.execute(
            select(JournalEntry, Transaction)
            .join(Transaction)
            .where(JournalEntry.account_id == account_id)
            .options(selectinload(JournalEntry.account))
            .order_by(
                Transaction.transaction_date,
                Transaction.id,
                JournalEntry.position,
            )
        ).all()

        opening_balance = ZERO
        running = ZERO
        total_debits = ZERO
        total_credits = ZERO
        lines = []
        for entry, txn in rows:
            delta = balance_delta(
                account.account_type, entry.debit_amount, entry.credit_amount
            )
            if date_from is not None and txn.transaction_date < date_from:
                opening_balance += delta
                running += delta
                continue
            if date_to is not None and txn.transaction_date > date_to:
                break

            running += delta
            total_debits += entry.debit_amount
            total_credits += entry.credit_amount
            lines.append(StatementLine(
                transaction_id=txn.id,
                transaction_date=txn.transaction_date,
                transaction_description=txn.description,
                entry=JournalEntryResponse.from_entry(entry),
                running_balance=running,
            ))

        return AccountStatement(
            account_id=account.id,
            account_code=account.code,
            account_name=account.name,
            account_type=account.account_type,
            date_from=date_from,
            date_to=date_to,
            opening_balance=opening_balance,
            lines=lines,
            total_debits=total_debits,
            total_credits=total_credits,
            closing_balance=running,
        )


def _group_by_type(accounts: list[Account]) -> dict[AccountType, list[Account]]:
    grouped: dict[AccountType, list[Account]] = {t: [] for t in AccountType}
    for account in accounts:
        grouped[account.account_type].append(account)
    return grouped
