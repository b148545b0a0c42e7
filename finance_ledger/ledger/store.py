"""
Transaction Store

In-memory ordered collection of transactions, keyed by unique id.
Insertion order is the display order. Updates replace a record in place,
so position and id never change.
"""

from typing import Iterable, Iterator, Optional

from finance_ledger.exceptions import DuplicateIdError, NotFoundError
from finance_ledger.models.transaction import Transaction, TransactionPatch


class TransactionStore:
    """
    Ordered transactions plus an id -> position index.

    The store trusts its callers: amount and description rules are enforced
    at the validation boundary and by the Transaction model itself.
    """

    def __init__(self, transactions: Iterable[Transaction] = ()):
        self._items: list[Transaction] = []
        self._index: dict[int, int] = {}
        self.replace_all(transactions)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(tuple(self._items))

    def contains(self, transaction_id: int) -> bool:
        return transaction_id in self._index

    def insert(self, tx: Transaction) -> Transaction:
        """Append ``tx``. Raises DuplicateIdError if its id is taken."""
        if tx.id in self._index:
            raise DuplicateIdError(tx.id)
        self._index[tx.id] = len(self._items)
        self._items.append(tx)
        return tx

    def update(self, transaction_id: int, patch: TransactionPatch) -> Transaction:
        """
        Replace the patched fields of one transaction in place.

        Returns:
            The updated transaction

        Raises:
            NotFoundError: If no transaction has this id
        """
        position = self._index.get(transaction_id)
        if position is None:
            raise NotFoundError(transaction_id)
        updated = self._items[position].apply(patch)
        self._items[position] = updated
        return updated

    def remove(self, transaction_id: int) -> bool:
        """Delete by id. Unknown ids are ignored; returns whether anything was removed."""
        position = self._index.pop(transaction_id, None)
        if position is None:
            return False
        del self._items[position]
        for tx in self._items[position:]:
            self._index[tx.id] -= 1
        return True

    def get(self, transaction_id: int) -> Transaction:
        position = self._index.get(transaction_id)
        if position is None:
            raise NotFoundError(transaction_id)
        return self._items[position]

    def all(self) -> tuple[Transaction, ...]:
        """Read-only snapshot in insertion order."""
        return tuple(self._items)

    def max_id(self) -> Optional[int]:
        if not self._index:
            return None
        return max(self._index)

    def replace_all(self, transactions: Iterable[Transaction]) -> None:
        """
        Swap the whole contents, e.g. after a load.

        Raises DuplicateIdError and leaves the store untouched if
        ``transactions`` repeats an id.
        """
        items = list(transactions)
        index: dict[int, int] = {}
        for position, tx in enumerate(items):
            if tx.id in index:
                raise DuplicateIdError(tx.id)
            index[tx.id] = position
        self._items = items
        self._index = index
