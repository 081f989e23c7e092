"""Interface for device-local key/value storage."""

from abc import ABC, abstractmethod
from typing import List, Optional


class IKeyValueStorage(ABC):
    """
    Process-wide string key/value store that survives restarts.

    Writes may raise StorageQuotaExceeded.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value or None."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete a key if present."""

    @abstractmethod
    def keys(self) -> List[str]:
        """All stored keys."""
