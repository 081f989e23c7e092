"""Domain models for Daily Alchemy."""

from .catalog import ElementCatalog, SortOrder
from .coop import CoopMessage, CoopMessageKind, PartnerStatus
from .combination import (
    CombinationEntry,
    CombinationKey,
    CombinationResult,
    CombinationStatus,
    DiscoveryKind,
    OracleResult,
    Operator,
)
from .element import STARTER_ELEMENTS, Element, ElementSource, element_id_for, starter_elements
from .progress import CompletionStats, CreativeSave, DailyProgress, GameState, Mode, ProgressLedger, SlotSummary
from .puzzle import Puzzle, SolutionStep
from .selection import Selection, SelectionSlot, SelectorState

__all__ = [
    "CoopMessage",
    "CoopMessageKind",
    "PartnerStatus",
    "Element",
    "ElementSource",
    "STARTER_ELEMENTS",
    "element_id_for",
    "starter_elements",
    "ElementCatalog",
    "SortOrder",
    "CombinationEntry",
    "CombinationKey",
    "CombinationResult",
    "CombinationStatus",
    "DiscoveryKind",
    "OracleResult",
    "Operator",
    "CompletionStats",
    "CreativeSave",
    "DailyProgress",
    "GameState",
    "Mode",
    "ProgressLedger",
    "SlotSummary",
    "Puzzle",
    "SolutionStep",
    "Selection",
    "SelectionSlot",
    "SelectorState",
]
