"""
Storage Port - Interface for the host-provided key/value storage view.

Implementations:
- MemoryStorageAdapter: In-memory (testing/dev)
- VaultStorageAdapter: HashiCorp Vault KV v2
- RedisStorageAdapter: Redis
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any


class StoragePort(ABC):
    """
    Port: Namespaced JSON record storage.

    Keys are slash-separated paths such as "config" or "users/alice".
    Implementations raise StorageError when the backing store fails.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Read a record.

        Args:
            key: Record path

        Returns:
            Decoded record, or None if not found
        """
        pass

    @abstractmethod
    def put(self, key: str, value: Dict[str, Any]) -> None:
        """
        Write a record, replacing any existing one.

        Args:
            key: Record path
            value: JSON-serializable record
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Delete a record. Deleting a missing key is not an error.

        Args:
            key: Record path
        """
        pass

    @abstractmethod
    def list(self, prefix: str) -> list[str]:
        """
        List immediate children under a prefix.

        Args:
            prefix: Folder path ending in "/" (e.g., "users/")

        Returns:
            Child names relative to prefix; sub-folders end in "/"
        """
        pass
