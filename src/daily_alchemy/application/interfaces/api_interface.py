"""Interface for the Daily Alchemy HTTP API."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from daily_alchemy.domain.models import CreativeSave, OracleResult, Puzzle, SlotSummary


class IGameApi(ABC):
    """Remote collaborators: combination oracle, puzzles, stats, leaderboard, saves."""

    @abstractmethod
    async def combine(self, element_a: str, element_b: str, user_id: Optional[str], mode: str) -> OracleResult:
        """Ask the oracle for a result. Raises CombinationFailed."""

    @abstractmethod
    async def fetch_puzzle(self, puzzle_date: str) -> Puzzle:
        """Fetch one day's puzzle. Raises PuzzleUnavailable."""

    @abstractmethod
    async def record_completion(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Post a daily completion; returns rolling stats."""

    @abstractmethod
    async def submit_leaderboard(self, entry: Dict[str, Any]) -> None:
        """Post a first-attempt daily score."""

    @abstractmethod
    async def load_creative_save(self, slot_number: int) -> Optional[CreativeSave]:
        """Fetch one slot; None when the slot is empty."""

    @abstractmethod
    async def save_creative(self, save: CreativeSave) -> Optional[str]:
        """Persist a full slot; returns the server savedAt timestamp."""

    @abstractmethod
    async def rename_creative_save(self, slot_number: int, name: str) -> None:
        """Persist a slot name only."""

    @abstractmethod
    async def delete_creative_save(self, slot_number: int) -> None:
        """Clear one slot."""

    @abstractmethod
    async def list_creative_saves(self) -> List[SlotSummary]:
        """Lightweight summaries of every non-empty slot."""
