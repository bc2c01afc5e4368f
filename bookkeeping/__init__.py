"""Double-entry bookkeeping ledger: posting engine and financial reports."""

__version__ = "0.1.0"
