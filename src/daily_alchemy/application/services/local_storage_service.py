"""Device-local key/value storage with file persistence."""

import json
import os
from pathlib import Path
from typing import Dict, List, Optional

from daily_alchemy.application.interfaces import IKeyValueStorage, ILoggingService
from daily_alchemy.errors import StorageQuotaExceeded


class LocalStorageService(IKeyValueStorage):
    """
    String key/value store backed by a single JSON file.

    Every write is flushed to disk immediately. With `file_path=None` the
    store lives in memory only. Writes that would push the total size of
    keys and values past `quota_bytes` raise StorageQuotaExceeded and leave
    the store unchanged.
    """

    def __init__(
        self,
        file_path: Optional[str],
        logging_service: ILoggingService,
        quota_bytes: Optional[int] = None,
    ):
        """
        Initialize storage service.

        Args:
            file_path: JSON file for persistence, or None for memory only
            logging_service: Service for logging operations
            quota_bytes: Maximum total size of stored data (None = unlimited)
        """
        self.file_path = file_path
        self.logger = logging_service
        self.quota_bytes = quota_bytes
        self._items: Dict[str, str] = {}

        if file_path:
            self.load_from_file(file_path)

    def load_from_file(self, file_path: str) -> None:
        """Load stored items, starting empty when the file is missing or corrupt."""
        if not os.path.exists(file_path):
            self.logger.info(f"📝 No storage file at {file_path}, starting fresh")
            return

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.error(f"❌ Failed to load storage: {e}")
            self._items = {}
            return

        if not isinstance(data, dict):
            self.logger.warning(f"⚠️ Ignoring malformed storage file {file_path}")
            return

        self._items = {str(key): str(value) for key, value in data.items()}
        self.logger.info(f"📥 Loaded {len(self._items)} stored keys from {file_path}")

    def _flush(self) -> None:
        if not self.file_path:
            return
        path = Path(self.file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self._items, f, indent=2, ensure_ascii=False)

    @staticmethod
    def _entry_size(key: str, value: str) -> int:
        return len(key.encode("utf-8")) + len(value.encode("utf-8"))

    def used_bytes(self) -> int:
        return sum(self._entry_size(key, value) for key, value in self._items.items())

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            current = self._items.get(key)
            freed = self._entry_size(key, current) if current is not None else 0
            projected = self.used_bytes() - freed + self._entry_size(key, value)
            if projected > self.quota_bytes:
                raise StorageQuotaExceeded(
                    f"Writing {key} needs {projected} bytes, quota is {self.quota_bytes}"
                )

        self._items[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._flush()

    def keys(self) -> List[str]:
        return list(self._items)
