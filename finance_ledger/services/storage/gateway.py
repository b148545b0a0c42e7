"""
Persistence Gateway

Serializes the whole ledger into one slot of a key-value store and reads it
back. There is no incremental log: every save replaces the slot.

Wire format (one JSON array, insertion order preserved):

    [{"id": 1, "kind": "income", "amount": 100.50, "description": "Salary",
      "category": "salary"}, ...]

``category`` is omitted when unset. Amounts are written as JSON numbers and
read back as Decimal.
"""

import asyncio
import json
from decimal import Decimal
from typing import Iterable

from pydantic import ValidationError as PydanticValidationError

from finance_ledger.exceptions import (
    CorruptStateError,
    LedgerError,
    PersistenceError,
)
from finance_ledger.models.transaction import Transaction
from finance_ledger.services.storage.interface import KeyValueStoreInterface


DEFAULT_STORAGE_KEY = "transactions"

# Canonical field order for a persisted transaction
TRANSACTION_FIELDS = ["id", "kind", "amount", "description", "category"]


def _serialize_record(tx: Transaction) -> str:
    # Amount is written as its exact decimal text so no float rounding happens
    fields = [
        ("id", json.dumps(tx.id)),
        ("kind", json.dumps(tx.kind.value)),
        ("amount", format(tx.amount, "f")),
        ("description", json.dumps(tx.description, ensure_ascii=False)),
    ]
    if tx.category is not None:
        fields.append(("category", json.dumps(tx.category.value)))
    return "{" + ", ".join(f'"{name}": {value}' for name, value in fields) + "}"


def serialize_ledger(ledger: Iterable[Transaction]) -> str:
    """Render transactions in canonical form."""
    return "[" + ", ".join(_serialize_record(tx) for tx in ledger) + "]"


def deserialize_ledger(raw: str) -> list[Transaction]:
    """
    Parse a persisted ledger.

    Raises:
        CorruptStateError: on malformed JSON, a non-list payload,
            records that fail the Transaction schema, or duplicate ids.
    """
    try:
        payload = json.loads(raw, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise CorruptStateError(f"Stored ledger is not valid JSON: {e}") from e

    if not isinstance(payload, list):
        raise CorruptStateError(
            f"Stored ledger must be a list, got {type(payload).__name__}"
        )

    transactions = []
    seen_ids = set()
    for index, record in enumerate(payload):
        if not isinstance(record, dict):
            raise CorruptStateError(f"Record {index} is not an object")

        unknown = set(record) - set(TRANSACTION_FIELDS)
        if unknown:
            raise CorruptStateError(
                f"Record {index} has unknown fields: {sorted(unknown)}"
            )

        # bool is an int subclass; an id of true/false is corruption
        if isinstance(record.get("id"), bool) or not isinstance(record.get("id"), int):
            raise CorruptStateError(f"Record {index} has a non-integer id")

        try:
            tx = Transaction.model_validate(record)
        except PydanticValidationError as e:
            raise CorruptStateError(f"Record {index} is invalid: {e}") from e

        if tx.id in seen_ids:
            raise CorruptStateError(f"Duplicate transaction id {tx.id} in stored ledger")
        seen_ids.add(tx.id)
        transactions.append(tx)

    return transactions


class PersistenceGateway:
    """
    Loads and saves the ledger under a single fixed key.

    Saves are serialized with a lock so two writes never race on the slot.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        key: str = DEFAULT_STORAGE_KEY,
    ):
        self._store = store
        self._key = key
        self._save_lock = asyncio.Lock()

    @property
    def key(self) -> str:
        return self._key

    async def save(self, ledger: Iterable[Transaction]) -> int:
        """
        Replace the stored ledger.

        Returns:
            Number of transactions written

        Raises:
            PersistenceError: If the storage write fails, including when the
                existing stored data is unreadable and is left in place
        """
        # Snapshot before awaiting so later mutations don't leak into this write
        snapshot = list(ledger)
        value = serialize_ledger(snapshot)

        async with self._save_lock:
            try:
                await self._store.set(self._key, value)
            except PersistenceError:
                raise
            except Exception as e:
                raise PersistenceError(f"Failed to save ledger: {e}") from e

        return len(snapshot)

    async def load(self) -> list[Transaction]:
        """
        Read the stored ledger.

        Returns:
            The transactions in stored order; empty if the key is absent

        Raises:
            CorruptStateError: If the stored value cannot be parsed
            PersistenceError: If the storage read fails
        """
        try:
            raw = await self._store.get(self._key)
        except LedgerError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to load ledger: {e}") from e

        if raw is None:
            return []

        return deserialize_ledger(raw)
