"""Ledger core: the transaction store, edit session and id generation."""

from finance_ledger.ledger.ids import MonotonicIdGenerator
from finance_ledger.ledger.session import IDLE, EditSession, EditState, Editing, Idle
from finance_ledger.ledger.store import TransactionStore

__all__ = [
    "EditSession",
    "EditState",
    "Editing",
    "IDLE",
    "Idle",
    "MonotonicIdGenerator",
    "TransactionStore",
]
