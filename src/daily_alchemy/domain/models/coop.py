"""Messages exchanged between co-op partners."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class CoopMessageKind(Enum):
    """Message kinds carried by the co-op bus."""

    ELEMENT = "element"  # Partner discovered an element
    COMPLETION = "completion"  # Partner reached the target
    PARTNER_STATUS = "partner_status"  # connected / disconnected
    CONTINUE_OFFER = "continue_offer"  # Post-win "continue together?"
    CONTINUE_RESPONSE = "continue_response"  # accept / decline
    SESSION_ENDED = "session_ended"  # Partner left the session


class PartnerStatus(Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True)
class CoopMessage:
    """One bus message; `payload` holds kind-specific fields."""

    kind: CoopMessageKind
    payload: Dict[str, Any] = field(default_factory=dict)
    sender_id: Optional[str] = None

    @classmethod
    def element(cls, name: str, emoji: str, is_first_discovery: bool = False, sender_id: Optional[str] = None):
        return cls(
            CoopMessageKind.ELEMENT,
            {"name": name, "emoji": emoji, "isFirstDiscovery": is_first_discovery},
            sender_id,
        )

    @classmethod
    def completion(cls, target: str, sender_id: Optional[str] = None):
        return cls(CoopMessageKind.COMPLETION, {"target": target}, sender_id)

    @classmethod
    def status(cls, status: PartnerStatus, sender_id: Optional[str] = None):
        return cls(CoopMessageKind.PARTNER_STATUS, {"status": status.value}, sender_id)

    @classmethod
    def continue_offer(cls, sender_id: Optional[str] = None):
        return cls(CoopMessageKind.CONTINUE_OFFER, {}, sender_id)

    @classmethod
    def continue_response(cls, accept: bool, sender_id: Optional[str] = None):
        return cls(CoopMessageKind.CONTINUE_RESPONSE, {"accept": accept}, sender_id)

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "payload": dict(self.payload), "senderId": self.sender_id}

    @classmethod
    def from_dict(cls, data: dict) -> "CoopMessage":
        return cls(
            kind=CoopMessageKind(data["kind"]),
            payload=dict(data.get("payload") or {}),
            sender_id=data.get("senderId"),
        )
