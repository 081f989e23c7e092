"""Typed access to the device-local keys used by the game."""

import json
from typing import Any, Dict, Iterable, List, Optional, Union

from daily_alchemy.application.interfaces import IKeyValueStorage, ILoggingService
from daily_alchemy.domain.models import DailyProgress
from daily_alchemy.errors import StorageQuotaExceeded

SlotKey = Union[int, str]


class StorageKeys:
    """Device-local key names. Keys ending in `_` take a date suffix."""

    STATS = "soup_stats"
    PUZZLE_PROGRESS = "soup_puzzle_progress_"
    PUZZLE_ATTEMPTED = "soup_puzzle_attempted_"
    FAVORITE_ELEMENTS = "soup_favorite_elements"
    ELEMENT_USAGE = "soup_element_usage"
    CREATIVE_ACTIVE_SLOT = "soup_creative_active_slot"

    # Cleared on sign-out so the next account starts clean
    ANONYMOUS_SCOPED = (STATS, ELEMENT_USAGE, CREATIVE_ACTIVE_SLOT)

    @classmethod
    def progress(cls, puzzle_date: str) -> str:
        return f"{cls.PUZZLE_PROGRESS}{puzzle_date}"

    @classmethod
    def attempted(cls, puzzle_date: str) -> str:
        return f"{cls.PUZZLE_ATTEMPTED}{puzzle_date}"

    @classmethod
    def favorites(cls, slot: SlotKey) -> str:
        return f"{cls.FAVORITE_ELEMENTS}_slot_{slot}" if isinstance(slot, int) else f"{cls.FAVORITE_ELEMENTS}_{slot}"


class ProgressStore:
    """
    Reads and writes game state in device-local storage.

    The controller never touches raw keys; it goes through this store.
    Writes that hit the storage quota trigger an emergency cleanup of old
    puzzle progress and are retried once. A second failure is logged and
    the game carries on with in-memory state.
    """

    def __init__(self, storage: IKeyValueStorage, logging_service: ILoggingService):
        self.storage = storage
        self.logger = logging_service

    # Raw JSON helpers

    def _read_json(self, key: str, default: Any = None) -> Any:
        raw = self.storage.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            self.logger.warning(f"⚠️ Discarding unreadable value for {key}")
            return default

    def _write(self, key: str, value: Any) -> bool:
        payload = json.dumps(value, ensure_ascii=False)
        try:
            self.storage.set_item(key, payload)
            return True
        except StorageQuotaExceeded as e:
            self.logger.warning(f"⚠️ Storage quota hit writing {key}: {e}")

        removed = self.emergency_cleanup(keep=key)
        try:
            self.storage.set_item(key, payload)
            self.logger.info(f"🧹 Write of {key} succeeded after removing {removed} keys")
            return True
        except StorageQuotaExceeded as e:
            self.logger.error(f"❌ Could not write {key} after cleanup: {e}")
            return False

    def emergency_cleanup(self, keep: Optional[str] = None) -> int:
        """
        Free space by dropping stored puzzle progress.

        Completed records go first; in-progress ones are dropped only when
        no completed record exists. The key being written is kept.
        """
        candidates = [key for key in self.storage.keys() if key.startswith(StorageKeys.PUZZLE_PROGRESS) and key != keep]
        completed = [key for key in candidates if (self._read_json(key) or {}).get("completed")]
        victims = completed or candidates

        for key in victims:
            self.storage.remove_item(key)
        self.logger.debug(f"🧹 Emergency cleanup removed {len(victims)} progress records")
        return len(victims)

    # Daily progress

    def load_progress(self, puzzle_date: str) -> Optional[DailyProgress]:
        data = self._read_json(StorageKeys.progress(puzzle_date))
        if not isinstance(data, dict):
            return None
        try:
            return DailyProgress.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            self.logger.warning(f"⚠️ Ignoring corrupt progress for {puzzle_date}: {e}")
            return None

    def save_progress(self, puzzle_date: str, progress: DailyProgress) -> bool:
        saved = self._write(StorageKeys.progress(puzzle_date), progress.to_dict())
        if saved:
            self.logger.debug(f"💾 Progress saved for {puzzle_date} ({progress.elapsed_time}s, {progress.moves_count} moves)")
        return saved

    def clear_progress(self, puzzle_date: str) -> None:
        self.storage.remove_item(StorageKeys.progress(puzzle_date))

    def is_attempted(self, puzzle_date: str) -> bool:
        return self.storage.get_item(StorageKeys.attempted(puzzle_date)) is not None

    def mark_attempted(self, puzzle_date: str) -> None:
        if not self.is_attempted(puzzle_date):
            self._write(StorageKeys.attempted(puzzle_date), True)

    # Creative helpers

    def get_active_slot(self, default: int = 1) -> int:
        value = self._read_json(StorageKeys.CREATIVE_ACTIVE_SLOT, default)
        return value if isinstance(value, int) else default

    def set_active_slot(self, slot_number: int) -> None:
        self._write(StorageKeys.CREATIVE_ACTIVE_SLOT, slot_number)

    def load_favorites(self, slot: SlotKey) -> List[str]:
        names = self._read_json(StorageKeys.favorites(slot), [])
        return [name for name in names if isinstance(name, str)] if isinstance(names, list) else []

    def save_favorites(self, slot: SlotKey, names: Iterable[str]) -> None:
        self._write(StorageKeys.favorites(slot), list(names))

    # Usage counts

    def load_usage(self) -> Dict[str, int]:
        usage = self._read_json(StorageKeys.ELEMENT_USAGE, {})
        if not isinstance(usage, dict):
            return {}
        return {str(name).lower(): int(count) for name, count in usage.items() if isinstance(count, int)}

    def increment_usage(self, *names: str) -> Dict[str, int]:
        """Add one use per name (lowercased) and persist. Returns the new counts."""
        usage = self.load_usage()
        for name in names:
            key = name.lower().strip()
            usage[key] = usage.get(key, 0) + 1
        self._write(StorageKeys.ELEMENT_USAGE, usage)
        return usage

    # Aggregate stats

    def load_stats(self) -> Dict[str, Any]:
        stats = self._read_json(StorageKeys.STATS, {})
        return stats if isinstance(stats, dict) else {}

    def save_stats(self, stats: Dict[str, Any]) -> None:
        self._write(StorageKeys.STATS, stats)

    # Sign-out

    def clear_anonymous_keys(self) -> int:
        """Remove anonymous-scoped keys. Returns how many were removed."""
        doomed = [
            key
            for key in self.storage.keys()
            if key in StorageKeys.ANONYMOUS_SCOPED or key.startswith(StorageKeys.FAVORITE_ELEMENTS)
        ]
        for key in doomed:
            self.storage.remove_item(key)
        self.logger.info(f"🧽 Cleared {len(doomed)} anonymous storage keys")
        return len(doomed)
