"""
Ledger error taxonomy.

Every caller-facing error is detected before anything is
written, so a caught LedgerError always means the ledger is
unchanged. Each class carries the HTTP status the API layer
responds with.

    LedgerError
    ├── LedgerValidationError   malformed request, caller can fix it
    ├── NotFoundError           stale or unknown reference
    └── ConflictError           clashes with existing ledger state

InvariantViolation sits outside that tree: it signals a defect
in the posting engine, not bad input.
"""


class LedgerError(ValueError):
    """Base class for errors a caller can act on."""

    status_code = 400


# --- Validation ---

class LedgerValidationError(LedgerError):
    status_code = 400


class EmptyTransaction(LedgerValidationError):
    """A transaction needs at least two journal entries."""


class InvalidEntry(LedgerValidationError):
    """A journal entry is not exactly one positive debit or credit."""


class UnbalancedTransaction(LedgerValidationError):
    """Total debits differ from total credits."""


class InvalidAccountType(LedgerValidationError):
    """Account type is not one of the five accounting categories."""


class BalanceOutOfRange(LedgerValidationError):
    """A posting would push an account balance past what can be stored."""


# --- Not found ---

class NotFoundError(LedgerError):
    status_code = 404


class AccountNotFound(NotFoundError):
    pass


class TransactionNotFound(NotFoundError):
    pass


class UnknownAccount(NotFoundError):
    """A journal entry references an account that does not exist."""


class UnknownParent(NotFoundError):
    """A new account names a parent that does not exist."""


# --- Conflict ---

class ConflictError(LedgerError):
    status_code = 409


class DuplicateAccountCode(ConflictError):
    pass


class AccountHasPostings(ConflictError):
    pass


class AccountHasChildren(ConflictError):
    pass


# --- Internal ---

class InvariantViolation(RuntimeError):
    """A post-condition of the posting engine failed. This is a bug."""
