"""Domain model for the element catalog (the player's element bank)."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from .element import Element, starter_elements


class SortOrder(Enum):
    """Sort options for the element bank."""

    NEWEST = "newest"
    ALPHABETICAL = "alpha"
    FIRST_DISCOVERIES = "first_discoveries"
    MOST_USED = "most_used"


@dataclass
class ElementCatalog:
    """
    Indexed collection of every element available in the session.

    Elements are kept in insertion order (oldest first) with a
    case-insensitive index. The four starters are always present.
    Mutable because the catalog grows with every discovery.
    """

    max_favorites: int = 12
    _elements: List[Element] = field(default_factory=list, init=False, repr=False)
    _index: Dict[str, Element] = field(default_factory=dict, init=False, repr=False)
    _favorites: Dict[str, str] = field(default_factory=dict, init=False, repr=False)
    # Bumped whenever the contents are replaced wholesale (new game, slot load)
    generation: int = field(default=0, init=False)

    def __post_init__(self):
        if not self._elements:
            self.reset()

    # Membership

    def add(self, element: Element) -> bool:
        """Append an element unless its name is already present. Returns True if added."""
        if element.cache_key in self._index:
            return False
        self._elements.append(element)
        self._index[element.cache_key] = element
        return True

    def contains(self, name: str) -> bool:
        return name.lower().strip() in self._index

    def get(self, name: str) -> Optional[Element]:
        return self._index.get(name.lower().strip())

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[Element]:
        return iter(self._elements)

    @property
    def names(self) -> List[str]:
        return [element.name for element in self._elements]

    @property
    def discovered_keys(self) -> set:
        """Lowercased names of every element in the catalog."""
        return set(self._index)

    def reset(self) -> None:
        """Back to the four starters with no favorites."""
        self._elements = []
        self._index = {}
        self._favorites = {}
        self.generation += 1
        for starter in starter_elements():
            self.add(starter)

    def load_bank(self, bank_newest_first: Iterable[Element]) -> None:
        """
        Replace the catalog with a saved bank.

        Saved banks are stored newest first; starters are re-added when a
        bank lacks them.
        """
        bank = list(bank_newest_first)
        self.reset()
        for element in reversed(bank):
            self.add(element)

    def to_bank(self) -> List[Element]:
        """Elements newest first, the order used by saves."""
        return list(self._ordered_newest())

    # Views

    def _ordered_newest(self) -> Iterator[Element]:
        # Starters always sort last under NEWEST, even in restored banks
        for element in reversed(self._elements):
            if not element.is_starter:
                yield element
        for element in reversed(self._elements):
            if element.is_starter:
                yield element

    def view(
        self,
        sort: SortOrder = SortOrder.NEWEST,
        query: str = "",
        first_discoveries: Iterable[str] = (),
        usage: Optional[Mapping[str, int]] = None,
    ) -> Iterator[Element]:
        """
        Lazily yield a sorted, filtered view of the catalog.

        `query` matches the name (case-insensitive) or the emoji.
        Does not modify the catalog.
        """
        ordered = self._ordered_newest()
        if query:
            needle = query.lower()
            ordered = (el for el in ordered if needle in el.name.lower() or query in el.emoji)

        if sort == SortOrder.NEWEST:
            yield from ordered
        elif sort == SortOrder.ALPHABETICAL:
            yield from sorted(ordered, key=lambda el: (el.name.lower(), el.name))
        elif sort == SortOrder.FIRST_DISCOVERIES:
            pinned = {name.lower().strip() for name in first_discoveries}
            # sorted() is stable, so newest order is kept within each group
            yield from sorted(ordered, key=lambda el: el.cache_key not in pinned)
        elif sort == SortOrder.MOST_USED:
            counts = usage or {}
            yield from sorted(ordered, key=lambda el: (-counts.get(el.cache_key, 0), el.name.lower()))
        else:
            raise ValueError(f"Unknown sort order: {sort}")

    # Favorites

    @property
    def favorites(self) -> List[str]:
        return list(self._favorites.values())

    def is_favorite(self, name: str) -> bool:
        return name.lower().strip() in self._favorites

    def toggle_favorite(self, name: str) -> bool:
        """
        Toggle favorite membership. Returns the new membership state.

        Adding at capacity is silently ignored.
        """
        key = name.lower().strip()
        if key in self._favorites:
            del self._favorites[key]
            return False
        if len(self._favorites) >= self.max_favorites:
            return False
        self._favorites[key] = name
        return True

    def set_favorites(self, names: Iterable[str]) -> None:
        self._favorites = {}
        for name in names:
            if len(self._favorites) >= self.max_favorites:
                break
            self._favorites.setdefault(name.lower().strip(), name)

    def get_catalog_summary(self) -> dict:
        """Get summary of catalog state for logging/debugging."""
        return {
            "element_count": len(self._elements),
            "favorites": len(self._favorites),
            "newest": [el.display_name for el in list(self._ordered_newest())[:3]],
        }
