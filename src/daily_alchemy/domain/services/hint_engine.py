"""Hint selection against a puzzle's solution path."""

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Set

from ..models.puzzle import SolutionStep
from .game_mechanics import GameMechanics


@dataclass(frozen=True)
class Hint:
    """A revealed intermediate element and the message shown for it."""

    element: str
    message: str
    step_index: int


class HintEngine:
    """
    Chooses which solution-path element to reveal next.

    Hints never touch the catalog or the move counter and have no budget.
    The engine remembers the pending hint so that producing it clears the
    hint message.
    """

    def __init__(self, message_factory: Callable[[str], str] = GameMechanics.hint_message):
        self._solution_path: List[SolutionStep] = []
        self._message_factory = message_factory
        self.current_hint_element: Optional[str] = None
        self.current_hint_message: Optional[str] = None

    def load_solution(self, solution_path: Iterable[SolutionStep]) -> None:
        self._solution_path = list(solution_path)
        self.clear()

    @property
    def has_solution(self) -> bool:
        return bool(self._solution_path)

    def clear(self) -> None:
        self.current_hint_element = None
        self.current_hint_message = None

    def request_hint(self, discovered: Set[str]) -> Optional[Hint]:
        """
        Pick the next element to reveal given the lowercased discovered names.

        Returns None when no step in the path can be advanced.
        """
        chosen = self._best_available_step(discovered)
        if chosen is None:
            chosen = self._step_toward_blocked(discovered)

        if chosen is None:
            self.clear()
            return None

        index, step = chosen
        self.current_hint_element = step.result
        self.current_hint_message = self._message_factory(step.result)
        return Hint(element=step.result, message=self.current_hint_message, step_index=index)

    def clear_if_produced(self, element_name: str) -> bool:
        """Drop the pending hint when its element was just produced."""
        if self.current_hint_element and self.current_hint_element.lower() == element_name.lower().strip():
            self.clear()
            return True
        return False

    @staticmethod
    def _known(name: str, discovered: Set[str]) -> bool:
        return name.lower().strip() in discovered

    def _is_available(self, step: SolutionStep, discovered: Set[str]) -> bool:
        return (
            not self._known(step.result, discovered)
            and self._known(step.element_a, discovered)
            and self._known(step.element_b, discovered)
        )

    def _best_available_step(self, discovered: Set[str]):
        available = [
            (index, step) for index, step in enumerate(self._solution_path) if self._is_available(step, discovered)
        ]
        if not available:
            return None
        # Closest to the target first, then fewer starter operands
        available.sort(key=lambda item: (-item[0], GameMechanics.count_starters(item[1].element_a, item[1].element_b)))
        return available[0]

    def _step_toward_blocked(self, discovered: Set[str]):
        """Walk back from the last unmade step to a producible missing operand."""
        blocked = None
        for index in range(len(self._solution_path) - 1, -1, -1):
            if not self._known(self._solution_path[index].result, discovered):
                blocked = self._solution_path[index]
                break
        if blocked is None:
            return None

        visited = set()
        while blocked is not None:
            if self._known(blocked.element_a, discovered):
                needed = blocked.element_b
            else:
                needed = blocked.element_a
            if self._known(needed, discovered) or needed.lower() in visited:
                return None
            visited.add(needed.lower())

            producer = None
            for index, step in enumerate(self._solution_path):
                if step.result.lower() == needed.lower():
                    producer = (index, step)
                    break
            if producer is None:
                return None
            if self._is_available(producer[1], discovered):
                return producer
            blocked = producer[1]
        return None
