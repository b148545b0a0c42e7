"""
Ledger Error Taxonomy

Every failure a caller can see is one of these. Validation and not-found
errors block a single operation. Persistence errors never roll back the
in-memory ledger; they only tell the caller the latest change is not durable.
"""

from typing import Optional


class LedgerError(Exception):
    """Base exception for all ledger operations."""
    pass


class ValidationError(LedgerError, ValueError):
    """Form input rejected at submission time. Nothing was mutated."""

    def __init__(self, message: str, issues: Optional[list] = None):
        super().__init__(message)
        self.issues = issues or []


class NotFoundError(LedgerError, LookupError):
    """No transaction with the requested id."""

    def __init__(self, transaction_id: int):
        super().__init__(f"Transaction not found: {transaction_id}")
        self.transaction_id = transaction_id


class DuplicateIdError(LedgerError):
    """A transaction with this id is already in the store."""

    def __init__(self, transaction_id: int):
        super().__init__(f"Duplicate transaction id: {transaction_id}")
        self.transaction_id = transaction_id


class CorruptStateError(LedgerError):
    """Persisted ledger exists but cannot be parsed."""
    pass


class PersistenceError(LedgerError):
    """Underlying key-value storage read or write failed."""
    pass
