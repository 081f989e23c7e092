"""Business logic for counting combinations toward par."""

from typing import Dict, Iterable, Set

from ..models.combination import CombinationEntry, CombinationKey, Operator


class CombinationLogic:
    """
    Tracks which input pairs have been combined in the current game.

    Only the first production of a CombinationKey counts as a move; repeats
    are still recorded in the path, flagged as duplicates.
    """

    def __init__(self):
        """Initialize combination logic."""
        self._made_keys: Set[CombinationKey] = set()
        self._duplicates = 0

    def record_combination(
        self, step: int, element_a: str, element_b: str, result: str, operator: Operator = Operator.COMBINE
    ) -> CombinationEntry:
        """
        Register a combination and build its path entry.

        The returned entry's `is_duplicate` tells the caller whether the
        move counter should stay unchanged.
        """
        key = CombinationKey.of(element_a, element_b, operator)
        is_duplicate = key in self._made_keys
        if is_duplicate:
            self._duplicates += 1
        else:
            self._made_keys.add(key)

        return CombinationEntry(
            step=step,
            element_a=element_a,
            element_b=element_b,
            result=result,
            operator=operator,
            is_duplicate=is_duplicate,
        )

    def load_from_path(self, path: Iterable[CombinationEntry]) -> None:
        """Rebuild the made-set from a restored combination path."""
        self.clear()
        for entry in path:
            if entry.key in self._made_keys:
                self._duplicates += 1
            else:
                self._made_keys.add(entry.key)

    def get_combination_stats(self) -> Dict[str, int]:
        """Get statistics about combinations made this game."""
        return {
            "unique": len(self._made_keys),
            "duplicates": self._duplicates,
        }

    def clear(self) -> None:
        self._made_keys.clear()
        self._duplicates = 0
