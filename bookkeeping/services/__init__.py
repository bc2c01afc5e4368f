"""Business logic services."""

from bookkeeping.services.account_service import AccountService
from bookkeeping.services.ledger_service import LedgerService
from bookkeeping.services.report_service import ReportService

__all__ = ["AccountService", "LedgerService", "ReportService"]
