"""Domain model for the two-slot element selector."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .combination import Operator
from .element import Element


class SelectionSlot(Enum):
    """Which selector slot the next selection fills."""

    NONE = "none"
    FIRST = "first"
    SECOND = "second"


class SelectorState(Enum):
    """Fill state of the selector."""

    EMPTY = "empty"
    PARTIAL = "partial"
    READY = "ready"


@dataclass
class Selection:
    """
    Two-slot selector with an active slot pointer.

    Mutable because the selection changes on every tap.
    """

    first: Optional[Element] = None
    second: Optional[Element] = None
    active_slot: SelectionSlot = SelectionSlot.NONE
    operator: Operator = Operator.COMBINE

    @property
    def state(self) -> SelectorState:
        if self.first is None and self.second is None:
            return SelectorState.EMPTY
        if self.first is not None and self.second is not None:
            return SelectorState.READY
        return SelectorState.PARTIAL

    @property
    def is_ready(self) -> bool:
        return self.state == SelectorState.READY

    def _get(self, slot: SelectionSlot) -> Optional[Element]:
        if slot == SelectionSlot.FIRST:
            return self.first
        if slot == SelectionSlot.SECOND:
            return self.second
        return None

    def _set(self, slot: SelectionSlot, element: Optional[Element]) -> None:
        if slot == SelectionSlot.FIRST:
            self.first = element
        elif slot == SelectionSlot.SECOND:
            self.second = element
        else:
            raise ValueError("Cannot fill the NONE slot")

    @staticmethod
    def _other(slot: SelectionSlot) -> SelectionSlot:
        if slot == SelectionSlot.FIRST:
            return SelectionSlot.SECOND
        if slot == SelectionSlot.SECOND:
            return SelectionSlot.FIRST
        raise ValueError("NONE has no counterpart slot")

    def select(self, element: Element) -> SelectionSlot:
        """
        Fill the active slot and return the slot that was filled.

        The pointer advances only when the other slot is still empty, so
        repeated selections with both slots full keep replacing one slot.
        The same element may occupy both slots.
        """
        target = self.active_slot if self.active_slot != SelectionSlot.NONE else SelectionSlot.FIRST
        self._set(target, element)

        other = self._other(target)
        if self._get(other) is None:
            self.active_slot = other
        else:
            self.active_slot = target
        return target

    def activate(self, slot: SelectionSlot) -> None:
        """Point the selector at a specific slot (tapping a slot to replace it)."""
        self.active_slot = slot

    def select_result(self, element: Element) -> None:
        """Put a combination result in slot A, empty slot B, point at B."""
        self.first = element
        self.second = None
        self.active_slot = SelectionSlot.SECOND

    def clear(self) -> None:
        self.first = None
        self.second = None
        self.active_slot = SelectionSlot.NONE

    def toggle_operator(self, allow_subtract: bool = True) -> Operator:
        """Flip the operator; modes without subtraction stay on COMBINE."""
        self.operator = self.operator.toggled() if allow_subtract else Operator.COMBINE
        return self.operator

    def get_summary(self) -> dict:
        """Get summary of selector state for logging/debugging."""
        return {
            "first": self.first.name if self.first else None,
            "second": self.second.name if self.second else None,
            "active_slot": self.active_slot.value,
            "operator": self.operator.value,
            "state": self.state.value,
        }
