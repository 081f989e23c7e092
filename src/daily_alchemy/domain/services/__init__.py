"""Domain services for Daily Alchemy."""

from .combination_logic import CombinationLogic
from .game_mechanics import GameMechanics
from .game_timer import GameTimer
from .hint_engine import Hint, HintEngine
from .save_file import SaveFileCodec

__all__ = [
    "GameMechanics",
    "CombinationLogic",
    "GameTimer",
    "Hint",
    "HintEngine",
    "SaveFileCodec",
]
