"""Shared fixtures for the Finance Ledger test suite."""

from decimal import Decimal

import pytest

from finance_ledger.audit import AuditLogger
from finance_ledger.config import AppSettings
from finance_ledger.ledger import MonotonicIdGenerator
from finance_ledger.models.transaction import (
    Transaction,
    TransactionCategory,
    TransactionInput,
    TransactionKind,
)
from finance_ledger.orchestrator import LedgerService
from finance_ledger.services.storage import (
    InMemoryKeyValueStore,
    KeyValueStoreInterface,
    PersistenceGateway,
)
from finance_ledger.validation import TransactionValidator


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "scenario: End-to-end ledger scenarios")


class FakeClock:
    """Frozen millisecond clock; tests move it by hand."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now


class FailingKeyValueStore(KeyValueStoreInterface):
    """Wraps a store and fails reads/writes while the flags are set."""

    def __init__(self, inner: KeyValueStoreInterface):
        self.inner = inner
        self.fail_reads = False
        self.fail_writes = False
        self.writes = 0

    async def get(self, key):
        if self.fail_reads:
            raise OSError("disk unreadable")
        return await self.inner.get(key)

    async def set(self, key, value):
        if self.fail_writes:
            raise OSError("disk full")
        self.writes += 1
        await self.inner.set(key, value)

    async def delete(self, key):
        return await self.inner.delete(key)


def make_transaction(
    id: int,
    kind: TransactionKind = TransactionKind.INCOME,
    amount: str = "10",
    description: str = "Test",
    category: TransactionCategory = None,
) -> Transaction:
    return Transaction(
        id=id,
        kind=kind,
        amount=Decimal(amount),
        description=description,
        category=category,
    )


def form(kind, amount_text, description_text, category=None) -> TransactionInput:
    return TransactionInput(
        kind=kind,
        amount_text=amount_text,
        description_text=description_text,
        category=category,
    )


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def failing_store(kv_store) -> FailingKeyValueStore:
    return FailingKeyValueStore(kv_store)


@pytest.fixture
def gateway(failing_store) -> PersistenceGateway:
    return PersistenceGateway(failing_store)


@pytest.fixture
def service(gateway, clock, app_settings) -> LedgerService:
    return LedgerService(
        gateway=gateway,
        validator=TransactionValidator(app_settings),
        id_generator=MonotonicIdGenerator(clock=clock),
        audit_logger=AuditLogger(),
    )
