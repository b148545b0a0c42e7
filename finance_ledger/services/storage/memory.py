"""In-memory key-value storage, used by tests and as a scratch backend."""

from typing import Optional

from finance_ledger.services.storage.interface import KeyValueStoreInterface


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Dict-backed store. Contents vanish with the process."""
    
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
    
    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)
    
    async def set(self, key: str, value: str) -> None:
        self._data[key] = value
    
    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None
    
    def snapshot(self) -> dict[str, str]:
        """Copy of the raw slots."""
        return dict(self._data)
