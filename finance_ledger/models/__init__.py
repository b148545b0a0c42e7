"""
Data Models Package

This package contains all Pydantic models used in the Finance Ledger.
All data flowing through the ledger must conform to these schemas.
"""

from finance_ledger.models.transaction import (
    BalanceSummary,
    Transaction,
    TransactionCategory,
    TransactionInput,
    TransactionKind,
    TransactionPatch,
    ValidationIssue,
)
from finance_ledger.models.audit import (
    AuditSeverity,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
)

__all__ = [
    # Transaction models
    "BalanceSummary",
    "Transaction",
    "TransactionCategory",
    "TransactionInput",
    "TransactionKind",
    "TransactionPatch",
    "ValidationIssue",
    # Audit models
    "AuditSeverity",
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventType",
]
