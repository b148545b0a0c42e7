"""
Finance Ledger - Source Package

A personal income/expense ledger with a running balance.

DESIGN PRINCIPLES:
1. The in-memory ledger is the source of truth for the session
2. Fail early, fail visibly
3. No silent data loss on load
4. Every mutation is audited
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Ledger Team"
