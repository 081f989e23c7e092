"""Application services package."""

from .api_client import GameApiClient
from .combination_service import CombinationService
from .coop_adapter import CoopAdapter, LocalCoopBus
from .creative_save_service import CreativeSaveService
from .game_controller import GameController
from .identity_service import SessionIdentity
from .local_storage_service import LocalStorageService
from .logging_service import LoggingService
from .progress_store import ProgressStore, StorageKeys
from .signal_bus import GameSignal, SignalBus, SignalEvent
from .timing_service import TimingService

__all__ = [
    "GameApiClient",
    "LocalStorageService",
    "LoggingService",
    "ProgressStore",
    "StorageKeys",
    "SessionIdentity",
    "TimingService",
    "GameSignal",
    "SignalBus",
    "SignalEvent",
    "CombinationService",
    "CreativeSaveService",
    "CoopAdapter",
    "LocalCoopBus",
    "GameController",
]
