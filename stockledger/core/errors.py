# stockledger/core/errors.py
from typing import Optional


class StockLedgerError(Exception):
    """Base class for errors raised by the reconciliation engine."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(StockLedgerError):
    """A request field is missing, non-numeric or out of range."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(StockLedgerError):
    """A referenced inventory item or ledger entry does not exist."""


class StoreError(StockLedgerError):
    """The underlying store failed; the unit of work was rolled back."""
