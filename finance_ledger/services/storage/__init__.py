"""
Storage Services Package

Provides the abstract key-value interface, its backends, and the gateway
that persists the ledger under a single key.
"""

from finance_ledger.services.storage.interface import KeyValueStoreInterface
from finance_ledger.services.storage.memory import InMemoryKeyValueStore
from finance_ledger.services.storage.json_file import JsonFileKeyValueStore
from finance_ledger.services.storage.gateway import (
    DEFAULT_STORAGE_KEY,
    PersistenceGateway,
    deserialize_ledger,
    serialize_ledger,
)

__all__ = [
    # Interface
    "KeyValueStoreInterface",
    # Backends
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    # Gateway
    "DEFAULT_STORAGE_KEY",
    "PersistenceGateway",
    "deserialize_ledger",
    "serialize_ledger",
]
