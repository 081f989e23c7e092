"""
Signals from the engine to the presentation layer.

The engine emits signals, the UI subscribes to them for sounds, haptics and
animations. No game rule depends on which signals fire.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List


class GameSignal(Enum):
    """All signal types the engine emits."""

    # Combination pipeline
    COMBINE_PRESSED = auto()
    FIRST_DISCOVERY = auto()
    NEW_ELEMENT = auto()
    EXISTING_ELEMENT = auto()
    COMBINATION_ERROR = auto()

    # Game flow
    STATE_CHANGED = auto()
    HINT_REVEALED = auto()
    PUZZLE_COMPLETE = auto()
    GAME_OVER = auto()

    # Creative saves
    AUTOSAVED = auto()

    # Co-op
    PARTNER_ELEMENT = auto()
    PARTNER_STATUS = auto()
    CONTINUE_OFFER = auto()
    CONTINUE_RESOLVED = auto()


@dataclass
class SignalEvent:
    """A single signal with associated data."""

    type: GameSignal
    data: Dict[str, Any] = field(default_factory=dict)


class SignalBus:
    """
    Synchronous publish/subscribe hub.

    Usage:
        bus = SignalBus()
        bus.subscribe(GameSignal.FIRST_DISCOVERY, play_fanfare)
        bus.emit(GameSignal.FIRST_DISCOVERY, {"element": "Steam"})
    """

    def __init__(self, history_size: int = 100):
        self._subscribers: Dict[GameSignal, List[Callable[[SignalEvent], None]]] = {}
        self._global_subscribers: List[Callable[[SignalEvent], None]] = []
        self._history: List[SignalEvent] = []
        self._history_size = history_size

    def subscribe(self, signal: GameSignal, handler: Callable[[SignalEvent], None]) -> None:
        self._subscribers.setdefault(signal, []).append(handler)

    def subscribe_all(self, handler: Callable[[SignalEvent], None]) -> None:
        self._global_subscribers.append(handler)

    def unsubscribe(self, signal: GameSignal, handler: Callable) -> None:
        if signal in self._subscribers:
            self._subscribers[signal] = [h for h in self._subscribers[signal] if h != handler]

    def emit(self, signal: GameSignal, data: Dict[str, Any] = None) -> SignalEvent:
        """Deliver a signal to its subscribers, then to global subscribers."""
        event = SignalEvent(type=signal, data=data or {})

        for handler in self._subscribers.get(signal, []):
            handler(event)
        for handler in self._global_subscribers:
            handler(event)

        self._history.append(event)
        if len(self._history) > self._history_size:
            self._history.pop(0)
        return event

    def history(self, signal: GameSignal = None) -> List[SignalEvent]:
        """Recent signals, optionally filtered by type."""
        if signal is None:
            return list(self._history)
        return [event for event in self._history if event.type == signal]
