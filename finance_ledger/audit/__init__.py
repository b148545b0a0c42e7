"""Audit logging package."""

from finance_ledger.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
