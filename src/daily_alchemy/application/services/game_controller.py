"""Game controller - the state machine driving daily, creative and co-op play."""

import asyncio
import time
from datetime import datetime
from typing import Callable, Iterator, List, Optional, Union

from daily_alchemy.application.interfaces import (
    ANONYMOUS_USER_ID,
    ICoopBus,
    IGameApi,
    IIdentityProvider,
    IKeyValueStorage,
    ILoggingService,
)
from daily_alchemy.config import Config, config as default_config
from daily_alchemy.domain.models import (
    CombinationResult,
    CompletionStats,
    CreativeSave,
    DailyProgress,
    Element,
    ElementCatalog,
    GameState,
    Mode,
    Operator,
    ProgressLedger,
    Puzzle,
    Selection,
    SelectionSlot,
    SlotSummary,
    SortOrder,
)
from daily_alchemy.domain.services import CombinationLogic, GameMechanics, GameTimer, Hint, HintEngine
from daily_alchemy.errors import InvalidTransition, PersistenceNetworkError, PuzzleUnavailable

from .combination_service import CombinationService
from .coop_adapter import CoopAdapter
from .creative_save_service import CreativeSaveService
from .progress_store import ProgressStore
from .signal_bus import GameSignal, SignalBus
from .timing_service import TimingService


class GameController:
    """
    Orchestrates one player's game.

    RESPONSIBILITIES (Coordination Only):
    - Own the GameState / Mode state machine and the shared game records
      (catalog, ledger, selection, timer)
    - Decide when progress is saved, completion is recorded and the
      leaderboard is attempted

    WHAT IT DELEGATES:
    - Oracle calls and ledger bookkeeping (→ CombinationService)
    - Creative slots and autosave (→ CreativeSaveService)
    - Partner messages (→ CoopAdapter)
    - Device-local keys (→ ProgressStore)
    """

    def __init__(
        self,
        api: IGameApi,
        storage: IKeyValueStorage,
        identity: IIdentityProvider,
        logging_service: ILoggingService,
        settings: Optional[Config] = None,
        clock: Callable[[], float] = time.monotonic,
        now_provider: Optional[Callable[[], datetime]] = None,
        signals: Optional[SignalBus] = None,
    ):
        """
        Initialize controller with injected collaborators.

        Args:
            api: Oracle, puzzle and persistence endpoints
            storage: Device-local key/value store
            identity: Stable user id source
            logging_service: Service for logging
            settings: Configuration (global config by default)
            clock: Monotonic seconds for the game timer
            now_provider: Wall clock used for the puzzle date
            signals: Presentation signal bus
        """
        self.settings = settings or default_config
        self.api = api
        self.identity = identity
        self.logger = logging_service
        self.signals = signals or SignalBus()
        self._now_provider = now_provider

        # Shared game records, mutated in place by the services below
        self.catalog = ElementCatalog(max_favorites=self.settings.MAX_FAVORITES)
        self.ledger = ProgressLedger(recent_capacity=self.settings.RECENT_ELEMENTS_CAPACITY)
        self.selection = Selection()
        self.combination_logic = CombinationLogic()
        self.hint_engine = HintEngine()
        self.timer = GameTimer(time_limit=self.settings.TIME_LIMIT_SECONDS, clock=clock)

        self.progress_store = ProgressStore(storage, logging_service.child("Storage"))
        self.timing = TimingService(logging_service.child("Timing"), self.settings)
        self.combination_service = CombinationService(
            api,
            identity,
            self.catalog,
            self.ledger,
            self.selection,
            self.combination_logic,
            self.hint_engine,
            self.progress_store,
            self.timing,
            self.signals,
            logging_service.child("Combine"),
        )
        self.creative = CreativeSaveService(
            api,
            self.catalog,
            self.ledger,
            self.combination_logic,
            self.progress_store,
            self.timing,
            self.signals,
            logging_service.child("Creative"),
            autosave_interval=self.settings.AUTOSAVE_DISCOVERY_INTERVAL,
            slots=tuple(range(1, self.settings.CREATIVE_SLOT_COUNT + 1)),
        )
        self.coop: Optional[CoopAdapter] = None

        self.state = GameState.WELCOME
        self.mode = Mode.DAILY
        self.puzzle: Optional[Puzzle] = None
        self.puzzle_date: Optional[str] = None
        self.is_archive = False
        self.error_message: Optional[str] = None
        self.saved_progress: Optional[DailyProgress] = None
        self.completion_stats: Optional[CompletionStats] = None
        self.last_hint: Optional[Hint] = None

        self._save_task: Optional[asyncio.Task] = None
        self._known_user_id = identity.user_id

    # ================================
    # READ-ONLY VIEW
    # ================================

    @property
    def free_play_mode(self) -> bool:
        return self.mode == Mode.CREATIVE

    @property
    def is_complete(self) -> bool:
        return self.state == GameState.COMPLETE

    @property
    def elapsed_time(self) -> int:
        return self.timer.elapsed

    @property
    def remaining_time(self) -> Optional[int]:
        if self.mode != Mode.DAILY:
            return None
        return self.timer.remaining

    @property
    def has_saved_progress(self) -> bool:
        return self.saved_progress is not None

    @property
    def last_result(self) -> Optional[CombinationResult]:
        return self.combination_service.last_result

    @property
    def combination_error(self) -> Optional[str]:
        return self.combination_service.combination_error

    @property
    def current_hint_message(self) -> Optional[str]:
        return self.hint_engine.current_hint_message

    @property
    def is_combining(self) -> bool:
        return self.combination_service.in_progress

    def view(self, sort: SortOrder = SortOrder.NEWEST, query: str = "") -> Iterator[Element]:
        """Sorted, filtered element bank for display."""
        return self.catalog.view(
            sort=sort,
            query=query,
            first_discoveries=self.ledger.first_discovery_elements,
            usage=self.progress_store.load_usage(),
        )

    def get_game_summary(self) -> dict:
        """Get summary of game state for logging/debugging."""
        return {
            "state": self.state.value,
            "mode": self.mode.value,
            "puzzle_date": self.puzzle_date,
            "elapsed": self.timer.elapsed,
            **self.ledger.get_ledger_summary(),
            **self.catalog.get_catalog_summary(),
        }

    # ================================
    # INTERNAL HELPERS
    # ================================

    def _now(self) -> Optional[datetime]:
        return self._now_provider() if self._now_provider else None

    def _require_state(self, *states: GameState) -> None:
        if self.state not in states:
            allowed = ", ".join(state.value for state in states)
            raise InvalidTransition(f"Operation needs state {allowed}, controller is {self.state.value}")

    def _set_state(self, state: GameState) -> None:
        if state != self.state:
            self.logger.info(f"🔄 {self.state.value} → {state.value} ({self.mode.value})")
            self.state = state
            self.signals.emit(GameSignal.STATE_CHANGED, {"state": state.value, "mode": self.mode.value})

    def _cancel_scheduled_save(self) -> None:
        if self._save_task and not self._save_task.done():
            self._save_task.cancel()
        self._save_task = None

    def _reset_round(self) -> None:
        """Fresh catalog, ledger, selection and hint for a new game."""
        self._cancel_scheduled_save()
        self.catalog.reset()
        self.ledger.reset()
        self.selection.clear()
        self.selection.operator = Operator.COMBINE
        self.combination_logic.clear()
        self.hint_engine.clear()
        self.combination_service.reset()
        self.completion_stats = None
        self.last_hint = None

    def _configure_timer(self, mode: Mode) -> None:
        self.timer.reset()
        self.timer.enabled = mode == Mode.DAILY

    def _restore_progress(self, progress: DailyProgress) -> None:
        self.catalog.load_bank(progress.elements())
        self.ledger.reset()
        self.ledger.moves_count = progress.moves_count
        self.ledger.new_discoveries = progress.new_discoveries
        self.ledger.first_discoveries = progress.first_discoveries
        self.ledger.first_discovery_elements = list(progress.first_discovery_elements)
        self.ledger.hints_used = progress.hints_used
        self.ledger.combination_path = list(progress.combination_path)
        self.combination_logic.load_from_path(progress.combination_path)

    def _completion_view(self, congrats_pool) -> CompletionStats:
        moves, par = self.ledger.moves_count, self.puzzle.par_moves
        return CompletionStats(
            par_comparison=GameMechanics.get_par_comparison(moves, par),
            par_message=GameMechanics.get_par_message(moves, par),
            congrats_message=GameMechanics.random_message(congrats_pool),
        )

    def _snapshot_progress(self) -> DailyProgress:
        bank = self.catalog.to_bank()
        return DailyProgress(
            element_bank=[element.name for element in bank],
            element_emojis={element.name: element.emoji for element in bank},
            combination_path=list(self.ledger.combination_path),
            moves_count=self.ledger.moves_count,
            elapsed_time=self.timer.elapsed,
            new_discoveries=self.ledger.new_discoveries,
            first_discoveries=self.ledger.first_discoveries,
            first_discovery_elements=list(self.ledger.first_discovery_elements),
            hints_used=self.ledger.hints_used,
            completed=self.state == GameState.COMPLETE,
            saved_at=int(time.time() * 1000),
        )

    # ================================
    # DAILY PUZZLE FLOW
    # ================================

    async def load_puzzle(self, puzzle_date: Optional[str] = None) -> bool:
        """
        Fetch a puzzle (today's by default) and look for saved progress.

        A completed record restores the completion view without recording
        stats again; an unfinished one is offered through
        `has_saved_progress`. Returns False when the puzzle is unavailable,
        leaving the friendly message in `error_message`.
        """
        if self.state == GameState.PLAYING:
            raise InvalidTransition("Cannot load a puzzle while playing")

        puzzle_date = puzzle_date or GameMechanics.get_current_puzzle_date(self._now())
        self.error_message = None
        self.saved_progress = None

        try:
            puzzle = await self.api.fetch_puzzle(puzzle_date)
        except PuzzleUnavailable as e:
            self.logger.warning(f"⚠️ Puzzle {puzzle_date} unavailable (status={e.status_code})")
            self.puzzle = None
            self.error_message = str(e)
            self._set_state(GameState.WELCOME)
            return False

        self.puzzle = puzzle
        self.puzzle_date = puzzle_date
        self.is_archive = GameMechanics.is_archive_date(puzzle_date, self._now())
        self.mode = Mode.DAILY
        self._reset_round()
        self._configure_timer(Mode.DAILY)
        self.hint_engine.load_solution(puzzle.solution_path)
        self.logger.info(
            f"🧩 Puzzle #{puzzle.number} ({puzzle_date}{', archive' if self.is_archive else ''}): "
            f"{puzzle.target_emoji} {puzzle.target_element}, par {puzzle.par_moves}"
        )

        progress = self.progress_store.load_progress(puzzle_date)
        if progress and progress.completed:
            self._restore_progress(progress)
            self.timer.start(elapsed=progress.elapsed_time)
            self.timer.stop()
            self.completion_stats = self._completion_view(GameMechanics.CONGRATS_MESSAGES)
            self.state = GameState.COMPLETE
            self.logger.info("🏁 Puzzle already completed, showing results")
        else:
            self.saved_progress = progress
            self.state = GameState.WELCOME
        return True

    async def start_game(self) -> None:
        """Start the loaded daily puzzle from scratch."""
        self._require_state(GameState.WELCOME)
        if self.puzzle is None:
            raise InvalidTransition("No puzzle loaded")

        self.mode = Mode.DAILY
        self.creative.autosave_allowed = False
        if self.saved_progress is not None:
            self.discard_saved_progress()
        self._reset_round()
        self._configure_timer(Mode.DAILY)
        self.timer.start()
        self._set_state(GameState.PLAYING)
        self.schedule_progress_save()

    async def resume_game(self) -> None:
        """Continue saved daily progress without a jump in elapsed time."""
        self._require_state(GameState.WELCOME)
        if self.puzzle is None or self.saved_progress is None:
            raise InvalidTransition("No saved progress to resume")

        progress = self.saved_progress
        self.saved_progress = None
        self.mode = Mode.DAILY
        self.creative.autosave_allowed = False
        self._reset_round()
        self._restore_progress(progress)
        self._configure_timer(Mode.DAILY)
        self.timer.start(elapsed=progress.elapsed_time)
        self._set_state(GameState.PLAYING)
        self.logger.info(f"▶️ Resumed at {GameMechanics.format_time(progress.elapsed_time)}, {progress.moves_count} moves")
        await self.tick()

    def discard_saved_progress(self) -> None:
        if self.puzzle_date:
            self.progress_store.clear_progress(self.puzzle_date)
        self.saved_progress = None

    async def reset_game(self) -> None:
        """Wipe the daily game and restart the timer."""
        self._require_state(GameState.PLAYING, GameState.COMPLETE, GameState.GAME_OVER)
        if self.mode != Mode.DAILY or self.puzzle is None:
            raise InvalidTransition("Only a daily puzzle can be reset")

        self._reset_round()
        self.progress_store.clear_progress(self.puzzle_date)
        self._configure_timer(Mode.DAILY)
        self.timer.start()
        self._set_state(GameState.PLAYING)
        self.schedule_progress_save()

    # ================================
    # CREATIVE AND CO-OP ENTRY
    # ================================

    async def start_free_play(self, slot_number: Optional[int] = None) -> bool:
        """Enter creative mode and load a slot. Returns True if a save was restored."""
        self._require_state(GameState.WELCOME)

        self.mode = Mode.CREATIVE
        self._reset_round()
        self._configure_timer(Mode.CREATIVE)
        self.creative.autosave_allowed = True
        restored = await self.creative.enter(slot_number)
        self._set_state(GameState.PLAYING)
        return restored

    async def start_coop(
        self,
        bus: ICoopBus,
        element_bank: Optional[List[Element]] = None,
        favorites: Optional[List[str]] = None,
    ) -> CoopAdapter:
        """
        Attach a partner bus and start co-op play.

        With a puzzle loaded the pair plays toward its target; otherwise the
        session is open-ended. `element_bank` (newest first) seeds a shared
        session that is already in progress.
        """
        self._require_state(GameState.WELCOME)

        self.mode = Mode.COOP
        self._reset_round()
        self._configure_timer(Mode.COOP)
        self.creative.autosave_allowed = False
        if element_bank:
            self.catalog.load_bank(element_bank)
        self.catalog.set_favorites(favorites if favorites is not None else self.progress_store.load_favorites("coop"))

        self.coop = CoopAdapter(
            bus,
            self.catalog,
            self.ledger,
            self.signals,
            self.logger.child("Coop"),
            sender_id=self.identity.user_id,
            continue_timeout=self.settings.COOP_CONTINUE_TIMEOUT_SECONDS,
        )
        self.coop.on_partner_element = self._on_partner_element
        self.coop.start()
        self._set_state(GameState.PLAYING)
        return self.coop

    def _on_partner_element(self, element: Element) -> None:
        if self.state == GameState.PLAYING and self._target_reached():
            self._complete_coop(notify_partner=False)

    async def leave_coop(self) -> None:
        if self.coop is not None:
            await self.coop.stop()
            self.coop = None

    async def offer_coop_continue(self) -> bool:
        if self.coop is None:
            return False
        return await self.coop.offer_continue()

    async def respond_coop_continue(self, accept: bool) -> bool:
        if self.coop is None:
            return False
        return await self.coop.respond_continue(accept)

    # ================================
    # SELECTION
    # ================================

    def _resolve(self, element: Union[Element, str]) -> Element:
        name = element.name if isinstance(element, Element) else element
        found = self.catalog.get(name)
        if found is None:
            raise ValueError(f"{name} is not in the element bank")
        return found

    def select(self, element: Union[Element, str]) -> SelectionSlot:
        self._require_state(GameState.PLAYING)
        return self.selection.select(self._resolve(element))

    def activate_slot(self, slot: SelectionSlot) -> None:
        self.selection.activate(slot)

    def clear_selections(self) -> None:
        self.selection.clear()

    def select_result(self, element: Union[Element, str]) -> None:
        self._require_state(GameState.PLAYING)
        self.selection.select_result(self._resolve(element))

    def toggle_operator(self) -> Operator:
        return self.selection.toggle_operator(allow_subtract=self.mode != Mode.DAILY)

    def clear_last_result(self) -> None:
        self.combination_service.clear_last_result()

    def clear_combination_error(self) -> None:
        self.combination_service.clear_combination_error()

    def toggle_favorite(self, name: str) -> bool:
        """Toggle a favorite in creative or co-op play. Daily mode keeps none."""
        if self.mode == Mode.DAILY:
            return False
        is_favorite = self.catalog.toggle_favorite(self._resolve(name).name)
        slot_key = self.creative.active_slot if self.mode == Mode.CREATIVE else "coop"
        self.progress_store.save_favorites(slot_key, self.catalog.favorites)
        return is_favorite

    # ================================
    # COMBINING AND HINTS
    # ================================

    def _target_reached(self) -> bool:
        return self.puzzle is not None and self.catalog.contains(self.puzzle.target_element)

    async def combine(self) -> CombinationResult:
        """Combine the selected pair and apply every follow-up of a success."""
        self._require_state(GameState.PLAYING)
        result = await self.combination_service.combine(self.mode)
        if not result.is_successful or self.state != GameState.PLAYING:
            return result

        if self.mode == Mode.COOP and self.coop is not None and result.is_new:
            await self.coop.emit_element(result.element, result.emoji, result.is_first_discovery)

        if self.mode == Mode.DAILY:
            if self._target_reached():
                await self._complete_daily()
            else:
                self.schedule_progress_save()
        elif self.mode == Mode.COOP:
            if self._target_reached():
                self._complete_coop(notify_partner=True)
                await self.coop.emit_completion(self.puzzle.target_element)
        elif self.mode == Mode.CREATIVE:
            await self.creative.maybe_autosave()
        return result

    def request_hint(self) -> Optional[Hint]:
        """Reveal the next solution-path element. Free and unlimited."""
        self._require_state(GameState.PLAYING)
        if self.mode == Mode.CREATIVE or not self.hint_engine.has_solution:
            return None

        hint = self.hint_engine.request_hint(self.catalog.discovered_keys)
        self.last_hint = hint
        if hint is None:
            self.logger.debug("💡 No hint available")
            return None

        self.ledger.hints_used += 1
        self.logger.info(f"💡 Hint #{self.ledger.hints_used}: {hint.element}")
        self.signals.emit(GameSignal.HINT_REVEALED, {"element": hint.element, "message": hint.message})
        self.schedule_progress_save()
        return hint

    # ================================
    # COMPLETION AND GAME OVER
    # ================================

    async def _complete_daily(self) -> None:
        elapsed = self.timer.stop()
        first_attempt = not self.progress_store.is_attempted(self.puzzle_date)
        self.progress_store.mark_attempted(self.puzzle_date)
        self._set_state(GameState.COMPLETE)
        self.save_progress_now()

        stats = self._completion_view(GameMechanics.CONGRATS_MESSAGES)
        self.completion_stats = stats
        self.signals.emit(GameSignal.PUZZLE_COMPLETE, {"moves": self.ledger.moves_count, "elapsed": elapsed})
        self.logger.info(
            f"🎉 Solved in {GameMechanics.format_time(elapsed)} with {self.ledger.moves_count} moves "
            f"(par {stats.par_comparison})"
        )

        if self.is_archive:
            self.logger.info("📚 Archive puzzle, skipping stats and leaderboard")
            return

        record = {
            "puzzleDate": self.puzzle_date,
            "puzzleNumber": self.puzzle.number,
            "elapsedTime": elapsed,
            "movesCount": self.ledger.moves_count,
            "parMoves": self.puzzle.par_moves,
            "elementBank": [element.name for element in self.catalog.to_bank()],
            "combinationPath": [entry.to_dict() for entry in self.ledger.combination_path],
            "newDiscoveries": self.ledger.new_discoveries,
            "firstDiscoveries": self.ledger.first_discoveries,
        }
        try:
            server_stats = await self.api.record_completion(record)
            if server_stats:
                stats.server_stats = dict(server_stats)
                self.progress_store.save_stats({**self.progress_store.load_stats(), **server_stats})
        except PersistenceNetworkError as e:
            self.logger.warning(f"⚠️ Could not record completion stats: {e}")

        if not first_attempt:
            self.logger.info("🔁 Retry of an attempted puzzle, leaderboard skipped")
            return

        entry = {
            "gameType": GameMechanics.GAME_TYPE,
            "puzzleDate": self.puzzle_date,
            "score": elapsed,
            "metadata": {
                "movesCount": self.ledger.moves_count,
                "parMoves": self.puzzle.par_moves,
                "firstDiscoveries": self.ledger.first_discoveries,
                "hintsUsed": self.ledger.hints_used,
            },
        }
        try:
            await self.api.submit_leaderboard(entry)
            self.logger.info(f"🏆 Leaderboard entry submitted (score {elapsed})")
        except PersistenceNetworkError as e:
            self.logger.warning(f"⚠️ Leaderboard submission failed: {e}")

    def _complete_coop(self, notify_partner: bool) -> None:
        self._set_state(GameState.COMPLETE)
        self.completion_stats = self._completion_view(GameMechanics.COOP_CONGRATS_MESSAGES)
        self.signals.emit(GameSignal.PUZZLE_COMPLETE, {"moves": self.ledger.moves_count, "by_partner": not notify_partner})

    async def _game_over(self) -> None:
        self.timer.stop()
        self._cancel_scheduled_save()
        self.progress_store.mark_attempted(self.puzzle_date)
        self.progress_store.clear_progress(self.puzzle_date)
        self._set_state(GameState.GAME_OVER)
        self.completion_stats = CompletionStats(
            game_over_message=GameMechanics.random_message(GameMechanics.GAME_OVER_MESSAGES),
        )
        self.signals.emit(GameSignal.GAME_OVER, {"moves": self.ledger.moves_count})
        self.logger.info(f"⌛ Time is up after {self.ledger.moves_count} moves")

    def get_share_text(self) -> Optional[str]:
        if self.state != GameState.COMPLETE or self.puzzle is None:
            return None
        return GameMechanics.generate_share_text(
            self.puzzle_date,
            self.timer.elapsed,
            self.ledger.moves_count,
            self.puzzle.par_moves,
            first_discoveries=self.ledger.first_discoveries,
            hints_used=self.ledger.hints_used,
        )

    # ================================
    # TIMER AND VISIBILITY
    # ================================

    async def tick(self) -> Optional[int]:
        """Check the countdown. Returns the remaining seconds (None outside daily play)."""
        if self.state != GameState.PLAYING or self.mode != Mode.DAILY:
            return None
        if self.timer.is_expired:
            await self._game_over()
        return self.timer.remaining

    async def run_clock(self) -> None:
        """Tick once per interval until the game leaves PLAYING."""
        while self.state == GameState.PLAYING and self.mode == Mode.DAILY:
            await asyncio.sleep(self.settings.TIMER_INTERVAL_SECONDS)
            if not self.timer.is_paused:
                await self.tick()

    def pause(self) -> bool:
        """Freeze the daily timer and checkpoint progress immediately."""
        if self.state != GameState.PLAYING or self.mode != Mode.DAILY:
            return False
        if self.timer.pause() is None:
            return False
        self.save_progress_now()
        self.logger.debug(f"⏸️ Paused at {self.timer.elapsed}s")
        return True

    def resume(self) -> bool:
        if self.state != GameState.PLAYING or self.mode != Mode.DAILY:
            return False
        return self.timer.resume()

    def on_visibility_change(self, visible: bool) -> bool:
        return self.resume() if visible else self.pause()

    # ================================
    # DAILY PROGRESS PERSISTENCE
    # ================================

    def schedule_progress_save(self) -> None:
        """Debounced checkpoint of the daily game."""
        if self.mode != Mode.DAILY or self.state != GameState.PLAYING or not self.puzzle_date:
            return
        self._cancel_scheduled_save()
        self._save_task = asyncio.get_running_loop().create_task(self._debounced_save())

    async def _debounced_save(self) -> None:
        await self.timing.wait_for_progress_debounce()
        self._save_task = None
        if self.state == GameState.PLAYING:
            self.save_progress_now()

    def save_progress_now(self) -> bool:
        if self.mode != Mode.DAILY or not self.puzzle_date:
            return False
        self._cancel_scheduled_save()
        return self.progress_store.save_progress(self.puzzle_date, self._snapshot_progress())

    # ================================
    # CREATIVE SLOTS
    # ================================

    async def save_creative(self) -> bool:
        if self.mode != Mode.CREATIVE:
            return False
        return await self.creative.save()

    async def switch_slot(self, slot_number: int) -> bool:
        self._require_state(GameState.PLAYING)
        if self.mode != Mode.CREATIVE:
            raise InvalidTransition("Slots exist only in creative mode")
        if self.combination_service.in_progress or self.creative.is_saving or self.creative.is_auto_saving:
            self.logger.info(f"⏳ Busy combining or saving, slot {slot_number} not loaded")
            return False
        self.selection.clear()
        self.combination_service.reset()
        return await self.creative.switch_slot(slot_number)

    async def list_slots(self) -> List[SlotSummary]:
        return await self.creative.list_slots()

    async def import_save(self, text: str, slot_number: int) -> CreativeSave:
        return await self.creative.import_save(text, slot_number)

    # ================================
    # IDENTITY
    # ================================

    async def on_identity_changed(self, user_id: Optional[str]) -> bool:
        """
        React to a new stable user id. Returns True if state was reset.

        Any change except "no session → anonymous" discards in-memory
        creative state and returns to WELCOME with starters only.
        """
        previous = self._known_user_id
        self._known_user_id = user_id
        if previous == user_id or (previous is None and user_id == ANONYMOUS_USER_ID):
            return False

        self.logger.info(f"👤 Identity changed ({previous} → {user_id}), resetting in-memory state")
        await self.leave_coop()
        self.creative.reset()
        self._reset_round()
        self._configure_timer(Mode.DAILY)
        self.mode = Mode.DAILY
        self.saved_progress = None
        self._set_state(GameState.WELCOME)
        return True

    async def sign_out(self) -> None:
        self.progress_store.clear_anonymous_keys()
        await self.on_identity_changed(None)
