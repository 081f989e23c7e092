"""Domain model for alchemy elements."""

import hashlib
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional

# Starting elements, identical every day
STARTER_ELEMENTS = (
    ("Earth", "🌍"),
    ("Water", "💧"),
    ("Fire", "🔥"),
    ("Wind", "💨"),
)
STARTER_NAMES = frozenset(name.lower() for name, _ in STARTER_ELEMENTS)

DEFAULT_EMOJI = "✨"

_PLAIN_NAME = re.compile(r"^[a-z0-9 ]+$")
_NON_ALNUM = re.compile(r"[^a-z0-9_]")


def element_id_for(name: str) -> str:
    """
    Derive a stable element ID from a display name.

    Plain names (ASCII letters, digits and single spaces) become lowercase
    slugs with spaces mapped to underscores. Any name that loses characters
    in the slug gets a short digest suffix so "God Emperor" and "God-Emperor"
    never share an ID. The suffix separator cannot appear in a plain slug.
    """
    key = name.lower().strip()
    slug = _NON_ALNUM.sub("", re.sub(r"\s", "_", key))
    if _PLAIN_NAME.match(key):
        return slug
    digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:10]
    return f"{slug}-{digest}"


class ElementSource(Enum):
    """Where an element in the catalog came from."""

    STARTER = "starter"  # Earth, Water, Fire, Wind
    DISCOVERED = "discovered"  # Produced locally by a combination
    PARTNER = "partner"  # Received from a co-op partner
    IMPORTED = "imported"  # Restored from a save or progress record


@dataclass(frozen=True)
class Element:
    """
    Domain model representing an alchemy element.

    Immutable; names are unique within a catalog case-insensitively.
    """

    name: str
    emoji: str = DEFAULT_EMOJI
    source: ElementSource = ElementSource.DISCOVERED
    discovered_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate element data on creation."""
        if not self.name or not self.name.strip():
            raise ValueError("Element name cannot be empty")

        if not self.emoji:
            object.__setattr__(self, "emoji", DEFAULT_EMOJI)

        # Starters keep a fixed identity regardless of how they were loaded
        if self.name.lower().strip() in STARTER_NAMES and self.source != ElementSource.STARTER:
            object.__setattr__(self, "source", ElementSource.STARTER)

        if self.discovered_at is None and self.source != ElementSource.STARTER:
            object.__setattr__(self, "discovered_at", datetime.now())

    @property
    def element_id(self) -> str:
        return element_id_for(self.name)

    @property
    def cache_key(self) -> str:
        """Normalized lookup key (case-insensitive)."""
        return self.name.lower().strip()

    @property
    def is_starter(self) -> bool:
        return self.source == ElementSource.STARTER

    @property
    def from_partner(self) -> bool:
        return self.source == ElementSource.PARTNER

    @property
    def display_name(self) -> str:
        return f"{self.emoji} {self.name}" if self.emoji else self.name

    @classmethod
    def starter(cls, name: str, emoji: str) -> "Element":
        return cls(name=name, emoji=emoji, source=ElementSource.STARTER)

    @classmethod
    def from_dict(cls, data: dict, source: ElementSource = ElementSource.IMPORTED) -> "Element":
        """Create Element from the `{name, emoji, isStarter}` save format."""
        return cls(
            name=data.get("name", ""),
            emoji=data.get("emoji") or DEFAULT_EMOJI,
            source=ElementSource.STARTER if data.get("isStarter") else source,
        )

    def to_dict(self) -> dict:
        """Convert to the `{name, emoji, isStarter}` save format."""
        return {
            "name": self.name,
            "emoji": self.emoji,
            "isStarter": self.is_starter,
        }


def starter_elements() -> List[Element]:
    """Fresh list of the four starter elements."""
    return [Element.starter(name, emoji) for name, emoji in STARTER_ELEMENTS]
