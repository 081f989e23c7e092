"""Shared fakes and fixtures for the Daily Alchemy tests."""

import asyncio
from datetime import datetime
from typing import Dict, List, Optional, Tuple

import pytest
import pytz

from daily_alchemy.application.interfaces import IGameApi, IIdentityProvider
from daily_alchemy.application.services import GameController, LocalStorageService, LoggingService
from daily_alchemy.config import Config
from daily_alchemy.domain.models import CombinationKey, CreativeSave, OracleResult, Operator, Puzzle, SlotSummary
from daily_alchemy.errors import CombinationFailed, PersistenceNetworkError, PuzzleUnavailable

TODAY = "2026-03-14"
# Noon in New York on TODAY
NOW = pytz.timezone("America/New_York").localize(datetime(2026, 3, 14, 12, 0))

STEAM_ENGINE_PUZZLE = {
    "date": TODAY,
    "number": 42,
    "targetElement": "SteamEngine",
    "targetEmoji": "🚂",
    "parMoves": 3,
    "solutionPath": [
        {"elementA": "Water", "elementB": "Fire", "result": "Steam"},
        {"elementA": "Earth", "elementB": "Fire", "result": "Metal"},
        {"elementA": "Steam", "elementB": "Metal", "result": "SteamEngine"},
    ],
}

RECIPES = {
    ("Water", "Fire"): ("Steam", "♨️"),
    ("Earth", "Fire"): ("Metal", "🔩"),
    ("Steam", "Metal"): ("SteamEngine", "🚂"),
    ("Earth", "Water"): ("Mud", "🟤"),
    ("Wind", "Fire"): ("Smoke", "💨"),
    ("Wind", "Water"): ("Wave", "🌊"),
    ("Earth", "Wind"): ("Dust", "🌫️"),
    ("Fire", "Fire"): ("Sun", "☀️"),
    ("Water", "Water"): ("Lake", "🏞️"),
    ("Earth", "Earth"): ("Mountain", "⛰️"),
    ("Wind", "Wind"): ("Tornado", "🌪️"),
    ("Mud", "Fire"): ("Brick", "🧱"),
}


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeIdentity(IIdentityProvider):
    def __init__(self, user_id: Optional[str] = "user-a", session_id: Optional[str] = "anonymous"):
        self._user_id = user_id
        self.session_id = session_id
        self.ensure_calls = 0

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    def set_user(self, user_id: Optional[str]) -> None:
        self._user_id = user_id

    async def ensure_session(self) -> Optional[str]:
        self.ensure_calls += 1
        if self._user_id is None:
            self._user_id = self.session_id
        return self._user_id


class FakeApi(IGameApi):
    """In-memory stand-in for the HTTP API that records every call."""

    def __init__(self, puzzle: Optional[dict] = None, recipes: Optional[Dict[Tuple[str, str], tuple]] = None):
        self.puzzle = dict(puzzle or STEAM_ENGINE_PUZZLE)
        self.recipes = {
            CombinationKey.of(a, b, Operator.COMBINE): result for (a, b), result in (recipes or RECIPES).items()
        }
        self.first_discoveries = set()
        self.saves: Dict[int, CreativeSave] = {}
        self.calls: List[tuple] = []

        self.fail_combine = False
        self.fail_puzzle_status: Optional[int] = None
        self.fail_persistence = False
        self.failing_calls = set()
        # When set, combine() waits on it so a test can act while the Oracle is pending
        self.combine_gate: Optional[asyncio.Event] = None

    def _persistence(self, *call) -> None:
        self.calls.append(call)
        if self.fail_persistence or call[0] in self.failing_calls:
            raise PersistenceNetworkError(f"{call[0]} failed", status_code=503)

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]

    async def combine(self, element_a, element_b, user_id, mode):
        self.calls.append(("combine", element_a, element_b, user_id, mode))
        if self.combine_gate is not None:
            await self.combine_gate.wait()
        if self.fail_combine:
            raise CombinationFailed("Combination service returned HTTP 500")
        operator = Operator.from_symbol(mode)
        found = self.recipes.get(CombinationKey.of(element_a, element_b, operator))
        if found is None:
            raise CombinationFailed("Invalid combination result")
        name, emoji = found
        return OracleResult(element=name, emoji=emoji, is_first_discovery=name in self.first_discoveries)

    async def fetch_puzzle(self, puzzle_date):
        self.calls.append(("fetch_puzzle", puzzle_date))
        if self.fail_puzzle_status is not None:
            raise PuzzleUnavailable("It seems our Puzzlemaster is a little behind.", self.fail_puzzle_status)
        return Puzzle.from_dict({**self.puzzle, "date": puzzle_date})

    async def record_completion(self, record):
        self._persistence("record_completion", record)
        return {"totalCompleted": 1, "currentStreak": 1}

    async def submit_leaderboard(self, entry):
        self._persistence("submit_leaderboard", entry)

    async def load_creative_save(self, slot_number):
        self._persistence("load_creative_save", slot_number)
        return self.saves.get(slot_number)

    async def save_creative(self, save):
        self._persistence("save_creative", save.slot_number, save.to_dict())
        self.saves[save.slot_number] = CreativeSave.from_dict(save.to_dict())
        return "2026-03-14T12:00:00Z"

    async def rename_creative_save(self, slot_number, name):
        self._persistence("rename_creative_save", slot_number, name)
        if slot_number in self.saves:
            self.saves[slot_number].name = name

    async def delete_creative_save(self, slot_number):
        self._persistence("delete_creative_save", slot_number)
        self.saves.pop(slot_number, None)

    async def list_creative_saves(self):
        self._persistence("list_creative_saves")
        return [SlotSummary.from_save(save) for save in self.saves.values()]


async def settle(rounds: int = 10) -> None:
    """Let scheduled tasks (debounced saves, co-op receive loops) run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


async def start_daily(controller, puzzle_date: Optional[str] = None) -> None:
    assert await controller.load_puzzle(puzzle_date)
    await controller.start_game()


async def combine(controller, element_a: str, element_b: str):
    controller.select(element_a)
    controller.select(element_b)
    return await controller.combine()


async def pending_combine(controller, api, element_a: str, element_b: str):
    """Start a combine that stays parked on the Oracle until the returned gate is set."""
    gate = asyncio.Event()
    api.combine_gate = gate
    task = asyncio.get_running_loop().create_task(combine(controller, element_a, element_b))
    await settle()
    assert controller.is_combining
    return task, gate


@pytest.fixture
def logger():
    return LoggingService(log_level="WARNING")


@pytest.fixture
def settings():
    settings = Config()
    settings.COMBINE_ANIMATION_SECONDS = 0
    settings.COMBINATION_ERROR_DISMISS_SECONDS = 0
    settings.PROGRESS_SAVE_DEBOUNCE_SECONDS = 0
    settings.SAVE_SUCCESS_INDICATOR_SECONDS = 0
    settings.COOP_CONTINUE_TIMEOUT_SECONDS = 0.05
    settings.TIME_LIMIT_SECONDS = 600
    settings.AUTOSAVE_DISCOVERY_INTERVAL = 5
    settings.MAX_FAVORITES = 12
    settings.RECENT_ELEMENTS_CAPACITY = 3
    settings.CREATIVE_SLOT_COUNT = 3
    return settings


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest.fixture
def storage(logger):
    return LocalStorageService(None, logger)


@pytest.fixture
def make_controller(api, storage, identity, logger, settings, clock):
    def factory(**overrides):
        kwargs = dict(
            api=api,
            storage=storage,
            identity=identity,
            logging_service=logger,
            settings=settings,
            clock=clock,
            now_provider=lambda: NOW,
        )
        kwargs.update(overrides)
        return GameController(**kwargs)

    return factory


@pytest.fixture
def controller(make_controller):
    return make_controller()
