"""Validation package."""

from finance_ledger.validation.validator import TransactionValidator

__all__ = ["TransactionValidator"]
