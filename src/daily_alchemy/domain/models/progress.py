"""Domain models for game state, running totals and persisted progress."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .combination import CombinationEntry
from .element import DEFAULT_EMOJI, Element, ElementSource


class GameState(Enum):
    """Top-level controller state."""

    WELCOME = "welcome"
    PLAYING = "playing"
    COMPLETE = "complete"
    GAME_OVER = "game_over"  # Time ran out


class Mode(Enum):
    """Which flavor of game the controller is running."""

    DAILY = "daily"
    CREATIVE = "creative"
    COOP = "coop"


@dataclass
class ProgressLedger:
    """
    Running totals for one game.

    Mutated only by the controller and the combination pipeline;
    snapshotted into DailyProgress / CreativeSave.
    """

    moves_count: int = 0
    new_discoveries: int = 0
    first_discoveries: int = 0
    hints_used: int = 0
    first_discovery_elements: List[str] = field(default_factory=list)
    combination_path: List[CombinationEntry] = field(default_factory=list)
    recent_elements: List[str] = field(default_factory=list)
    recent_capacity: int = 3

    def reset(self) -> None:
        self.moves_count = 0
        self.new_discoveries = 0
        self.first_discoveries = 0
        self.hints_used = 0
        self.first_discovery_elements = []
        self.combination_path = []
        self.recent_elements = []

    @property
    def next_step(self) -> int:
        return len(self.combination_path) + 1

    def record_new_discovery(self, name: str) -> None:
        self.new_discoveries += 1
        self.recent_elements = [name, *self.recent_elements][: self.recent_capacity]

    def record_first_discovery(self, name: str) -> bool:
        """Credit a first discovery once per element. Returns True if credited."""
        if any(existing.lower() == name.lower() for existing in self.first_discovery_elements):
            return False
        self.first_discoveries += 1
        self.first_discovery_elements.append(name)
        return True

    def get_ledger_summary(self) -> dict:
        """Get summary of ledger state for logging/debugging."""
        return {
            "moves": self.moves_count,
            "new_discoveries": self.new_discoveries,
            "first_discoveries": self.first_discoveries,
            "hints_used": self.hints_used,
            "path_length": len(self.combination_path),
        }


@dataclass
class DailyProgress:
    """Device-local progress record for one puzzle date."""

    element_bank: List[str] = field(default_factory=list)
    element_emojis: Dict[str, str] = field(default_factory=dict)
    combination_path: List[CombinationEntry] = field(default_factory=list)
    moves_count: int = 0
    elapsed_time: int = 0
    new_discoveries: int = 0
    first_discoveries: int = 0
    first_discovery_elements: List[str] = field(default_factory=list)
    hints_used: int = 0
    completed: bool = False
    saved_at: Optional[int] = None

    def elements(self) -> List[Element]:
        """Rebuild the saved bank (newest first) as Elements."""
        return [
            Element(name=name, emoji=self.element_emojis.get(name) or DEFAULT_EMOJI, source=ElementSource.IMPORTED)
            for name in self.element_bank
        ]

    def to_dict(self) -> dict:
        return {
            "elementBank": list(self.element_bank),
            "elementEmojis": dict(self.element_emojis),
            "combinationPath": [entry.to_dict() for entry in self.combination_path],
            "movesCount": self.moves_count,
            "elapsedTime": self.elapsed_time,
            "newDiscoveries": self.new_discoveries,
            "firstDiscoveries": self.first_discoveries,
            "firstDiscoveryElements": list(self.first_discovery_elements),
            "hintsUsed": self.hints_used,
            "completed": self.completed,
            "savedAt": self.saved_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DailyProgress":
        return cls(
            element_bank=list(data.get("elementBank") or []),
            element_emojis=dict(data.get("elementEmojis") or {}),
            combination_path=[CombinationEntry.from_dict(e) for e in data.get("combinationPath") or []],
            moves_count=int(data.get("movesCount") or 0),
            elapsed_time=int(data.get("elapsedTime") or 0),
            new_discoveries=int(data.get("newDiscoveries") or 0),
            first_discoveries=int(data.get("firstDiscoveries") or 0),
            first_discovery_elements=list(data.get("firstDiscoveryElements") or []),
            hints_used=int(data.get("hintsUsed") or 0),
            completed=bool(data.get("completed", False)),
            saved_at=data.get("savedAt"),
        )


@dataclass
class CreativeSave:
    """Remote creative-mode save for one user and slot (1..3)."""

    slot_number: int
    element_bank: List[Element] = field(default_factory=list)
    name: Optional[str] = None
    total_moves: int = 0
    total_discoveries: int = 0
    first_discoveries: int = 0
    first_discovery_elements: List[str] = field(default_factory=list)
    favorites: List[str] = field(default_factory=list)
    saved_at: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.element_bank

    def to_dict(self) -> dict:
        return {
            "slotNumber": self.slot_number,
            "name": self.name,
            "elementBank": [element.to_dict() for element in self.element_bank],
            "totalMoves": self.total_moves,
            "totalDiscoveries": self.total_discoveries,
            "firstDiscoveries": self.first_discoveries,
            "firstDiscoveryElements": list(self.first_discovery_elements),
            "favorites": list(self.favorites),
            "savedAt": self.saved_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], slot_number: Optional[int] = None) -> "CreativeSave":
        bank = []
        for raw in data.get("elementBank") or []:
            try:
                bank.append(Element.from_dict(raw))
            except ValueError:
                # Skip entries without a usable name
                continue
        return cls(
            slot_number=int(data.get("slotNumber") or slot_number or 1),
            element_bank=bank,
            name=data.get("name") or data.get("slotName"),
            total_moves=int(data.get("totalMoves") or 0),
            total_discoveries=int(data.get("totalDiscoveries") or 0),
            first_discoveries=int(data.get("firstDiscoveries") or 0),
            first_discovery_elements=list(data.get("firstDiscoveryElements") or []),
            favorites=list(data.get("favorites") or []),
            saved_at=data.get("savedAt") or data.get("lastPlayedAt"),
        )


@dataclass(frozen=True)
class SlotSummary:
    """Lightweight per-slot info for the saves list."""

    slot_number: int
    name: Optional[str] = None
    element_count: int = 0
    total_discoveries: int = 0
    saved_at: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.element_count == 0

    @classmethod
    def empty(cls, slot_number: int) -> "SlotSummary":
        return cls(slot_number=slot_number)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SlotSummary":
        return cls(
            slot_number=int(data["slotNumber"]),
            name=data.get("name"),
            element_count=int(data.get("elementCount") or 0),
            total_discoveries=int(data.get("totalDiscoveries") or 0),
            saved_at=data.get("savedAt"),
        )

    @classmethod
    def from_save(cls, save: CreativeSave) -> "SlotSummary":
        return cls(
            slot_number=save.slot_number,
            name=save.name,
            element_count=len(save.element_bank),
            total_discoveries=save.total_discoveries,
            saved_at=save.saved_at,
        )


@dataclass
class CompletionStats:
    """View model for the completion / game-over screens."""

    par_comparison: Optional[str] = None
    par_message: Optional[str] = None
    congrats_message: Optional[str] = None
    game_over_message: Optional[str] = None
    server_stats: Dict[str, Any] = field(default_factory=dict)
