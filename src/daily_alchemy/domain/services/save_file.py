"""Export / import format for creative saves (.da files)."""

import json
import re
from datetime import datetime
from typing import Any, Optional

from ...errors import SaveFileError
from ..models.progress import CreativeSave

SAVE_VERSION = 1
SAVE_GAME_ID = "daily-alchemy-creative"
FILE_EXTENSION = ".da"

MAX_BANK_SIZE = 10000
MAX_NAME_LENGTH = 200
MAX_SLOT_NAME_LENGTH = 30


class SaveFileCodec:
    """
    Serializes one CreativeSave into a portable, self-describing snapshot
    and validates snapshots on the way back in.

    Unknown fields are tolerated; structural problems raise SaveFileError.
    """

    @staticmethod
    def serialize(save: CreativeSave, slot_name: Optional[str] = None, now: Optional[datetime] = None) -> dict:
        exported_at = (now or datetime.now()).isoformat()
        return {
            "version": SAVE_VERSION,
            "exportedAt": exported_at,
            "game": SAVE_GAME_ID,
            "save": {
                "slotName": slot_name if slot_name is not None else save.name,
                "elementBank": [element.to_dict() for element in save.element_bank],
                "totalMoves": save.total_moves,
                "totalDiscoveries": save.total_discoveries,
                "firstDiscoveries": save.first_discoveries,
                "firstDiscoveryElements": list(save.first_discovery_elements),
                "favorites": list(save.favorites),
            },
        }

    @classmethod
    def dumps(cls, save: CreativeSave, slot_name: Optional[str] = None) -> str:
        return json.dumps(cls.serialize(save, slot_name), ensure_ascii=False, indent=2)

    @classmethod
    def loads(cls, text: str, slot_number: int) -> CreativeSave:
        """Parse file text into a CreativeSave targeted at `slot_number`."""
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as e:
            raise SaveFileError("Invalid file format. The file could not be parsed.") from e

        cls.validate(data)
        save = dict(data["save"])
        save["slotNumber"] = slot_number
        return CreativeSave.from_dict(save, slot_number=slot_number)

    @staticmethod
    def validate(data: Any) -> None:
        """Raise SaveFileError describing the first structural problem."""
        if not isinstance(data, dict):
            raise SaveFileError("Invalid file structure.")

        version = data.get("version")
        if not isinstance(version, int) or isinstance(version, bool) or version < 1:
            raise SaveFileError("Invalid or missing save version.")
        if version > SAVE_VERSION:
            raise SaveFileError(
                f"This save was created with a newer version (v{version}). Please update the app."
            )

        if data.get("game") != SAVE_GAME_ID:
            raise SaveFileError("This file is not a Daily Alchemy creative mode save.")

        save = data.get("save")
        if not isinstance(save, dict):
            raise SaveFileError("Save data is missing.")

        bank = save.get("elementBank")
        if not isinstance(bank, list) or not bank:
            raise SaveFileError("Element bank is empty or missing.")
        if len(bank) > MAX_BANK_SIZE:
            raise SaveFileError("Element bank is too large.")

        for i, element in enumerate(bank):
            if not isinstance(element, dict):
                raise SaveFileError(f"Invalid element at position {i}.")
            name = element.get("name")
            if not isinstance(name, str) or not name.strip():
                raise SaveFileError(f"Element at position {i} has an invalid name.")
            if len(name) > MAX_NAME_LENGTH:
                raise SaveFileError(f"Element name at position {i} is too long.")
            emoji = element.get("emoji")
            if not isinstance(emoji, str) or not emoji.strip():
                raise SaveFileError(f"Element at position {i} has an invalid emoji.")

        for field_name in ("totalMoves", "totalDiscoveries", "firstDiscoveries"):
            value = save.get(field_name)
            if value is not None and (not isinstance(value, (int, float)) or isinstance(value, bool) or value < 0):
                raise SaveFileError(f"Invalid value for {field_name}.")

        first = save.get("firstDiscoveryElements")
        if first is not None:
            if not isinstance(first, list) or not all(isinstance(name, str) for name in first):
                raise SaveFileError("Invalid entries in firstDiscoveryElements.")

        slot_name = save.get("slotName")
        if slot_name is not None and (not isinstance(slot_name, str) or len(slot_name) > MAX_SLOT_NAME_LENGTH):
            raise SaveFileError("Invalid slot name in save file.")

    @staticmethod
    def generate_file_name(slot_name: Optional[str], now: Optional[datetime] = None) -> str:
        """e.g. "Save-1 (Feb 10, 2026, 09-24 AM).da"."""
        name = re.sub(r"[^a-zA-Z0-9 _-]", "", slot_name or "Creative Save").strip() or "Creative Save"
        now = now or datetime.now()
        hour12 = now.hour % 12 or 12
        ampm = "PM" if now.hour >= 12 else "AM"
        stamp = f"{now.strftime('%b')} {now.day}, {now.year}, {hour12:02d}-{now.minute:02d} {ampm}"
        return f"{name} ({stamp}){FILE_EXTENSION}"
