"""
Abstract Key-Value Storage Interface

DESIGN DECISION: The ledger is persisted as one value under one key.
The storage backend only needs to get, set and delete string slots.
This allows us to:
1. Use a local JSON file for the app
2. Use in-memory storage for testing
3. Swap in another key-value backend without touching the ledger

Backends raise PersistenceError for any read/write failure.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for string key-value storage.
    
    Any storage implementation must implement these methods.
    """
    
    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read a slot.
        
        Args:
            key: Slot name
            
        Returns:
            The stored value, or None if the key is absent
            
        Raises:
            PersistenceError: If the backend cannot be read
        """
        pass
    
    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Write a slot, fully replacing any prior value.
        
        Raises:
            PersistenceError: If the write fails
        """
        pass
    
    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Remove a slot.
        
        Returns:
            True if the key existed
        """
        pass
