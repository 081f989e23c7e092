"""Service for running the select-and-combine pipeline."""

import asyncio
from typing import Optional

from daily_alchemy.application.interfaces import IGameApi, IIdentityProvider, ILoggingService
from daily_alchemy.domain.models import (
    CombinationResult,
    DiscoveryKind,
    Element,
    ElementCatalog,
    ElementSource,
    Mode,
    Operator,
    ProgressLedger,
    Selection,
)
from daily_alchemy.domain.models.element import DEFAULT_EMOJI
from daily_alchemy.domain.services import CombinationLogic, GameMechanics, HintEngine
from daily_alchemy.errors import CombinationFailed

from .logging_service import timing_decorator
from .progress_store import ProgressStore
from .signal_bus import GameSignal, SignalBus
from .timing_service import TimingService

OUTCOME_SIGNALS = {
    DiscoveryKind.FIRST_DISCOVERY: GameSignal.FIRST_DISCOVERY,
    DiscoveryKind.NEW: GameSignal.NEW_ELEMENT,
    DiscoveryKind.EXISTING: GameSignal.EXISTING_ELEMENT,
}

STALE_RESULT_REASON = "Game changed while combining"


class CombinationService:
    """
    Service responsible for combining the two selected elements.

    Owns the in-flight flags and the presentation-facing `last_result` /
    `combination_error`. The catalog, ledger, selection, made-set and hint
    engine are shared with the controller and mutated in place.
    """

    def __init__(
        self,
        api: IGameApi,
        identity: IIdentityProvider,
        catalog: ElementCatalog,
        ledger: ProgressLedger,
        selection: Selection,
        combination_logic: CombinationLogic,
        hint_engine: HintEngine,
        progress_store: ProgressStore,
        timing_service: TimingService,
        signals: SignalBus,
        logging_service: ILoggingService,
    ):
        """
        Initialize combination service with dependencies.

        Args:
            api: Oracle client
            identity: Source of the user id sent with each combination
            catalog: Element bank for the running game
            ledger: Running totals for the running game
            selection: Two-slot selector
            combination_logic: Made-set used to detect duplicate moves
            hint_engine: Pending hint, cleared when its element is produced
            progress_store: Device-local usage counts
            timing_service: Animation and error-dismiss delays
            signals: Presentation signals
            logging_service: Service for logging
        """
        self.api = api
        self.identity = identity
        self.catalog = catalog
        self.ledger = ledger
        self.selection = selection
        self.combination_logic = combination_logic
        self.hint_engine = hint_engine
        self.progress_store = progress_store
        self.timing = timing_service
        self.signals = signals
        self.logger = logging_service

        self.is_combining = False
        self.is_animating = False
        self.last_result: Optional[CombinationResult] = None
        self.combination_error: Optional[str] = None
        self._dismiss_task: Optional[asyncio.Task] = None

    @property
    def in_progress(self) -> bool:
        return self.is_combining or self.is_animating

    def clear_last_result(self) -> None:
        self.last_result = None

    def clear_combination_error(self) -> None:
        self.combination_error = None
        if self._dismiss_task and not self._dismiss_task.done():
            self._dismiss_task.cancel()
        self._dismiss_task = None

    def reset(self) -> None:
        """Forget per-game presentation state. In-flight flags are left to the running combine."""
        self.clear_last_result()
        self.clear_combination_error()

    def _is_stale(self, generation: int, element_a: Element, element_b: Element) -> bool:
        if self.catalog.generation == generation:
            return False
        self.logger.warning(f"🚫 Game replaced while combining {element_a.name} + {element_b.name}, result discarded")
        return True

    async def _resolve_user_id(self) -> Optional[str]:
        user_id = self.identity.user_id
        if user_id is None:
            user_id = await self.identity.ensure_session()
            if user_id is None:
                self.logger.warning("⚠️ No session, combining without a user id")
        return user_id

    def _show_error(self, message: str) -> None:
        self.clear_combination_error()
        self.combination_error = message
        self.signals.emit(GameSignal.COMBINATION_ERROR, {"message": message})
        self._dismiss_task = asyncio.get_running_loop().create_task(self._dismiss_error(message))

    async def _dismiss_error(self, message: str) -> None:
        await self.timing.wait_for_error_dismiss()
        if self.combination_error == message:
            self.combination_error = None

    @timing_decorator("combine")
    async def combine(self, mode: Mode) -> CombinationResult:
        """
        Combine the selected pair through the Oracle and update the ledger.

        Returns a REJECTED result without side effects when the selection is
        incomplete or another combination is in flight, and a FAILED result
        (inline error, slots cleared, counters untouched) when the Oracle
        call fails. If the game is replaced (slot load, identity change)
        while the call is pending, the result is discarded as REJECTED.
        """
        if self.in_progress:
            return CombinationResult.rejected("Combination already in progress")
        if not self.selection.is_ready:
            return CombinationResult.rejected("Select two elements first")

        element_a = self.selection.first
        element_b = self.selection.second
        operator = self.selection.operator if mode != Mode.DAILY else Operator.COMBINE
        generation = self.catalog.generation

        self.is_combining = True
        try:
            self.signals.emit(GameSignal.COMBINE_PRESSED)
            user_id = await self._resolve_user_id()
            self.logger.info(f"⚗️ {element_a.name} {operator.value} {element_b.name}")
            oracle = await self.api.combine(element_a.name, element_b.name, user_id, operator.api_mode)
        except CombinationFailed as e:
            self.logger.warning(f"❌ Combination failed: {e}")
            if not self._is_stale(generation, element_a, element_b):
                self.selection.clear()
                self._show_error(GameMechanics.COMBINATION_ERROR_MESSAGE)
            return CombinationResult.failed(element_a.name, element_b.name, operator, str(e))
        finally:
            self.is_combining = False

        if self._is_stale(generation, element_a, element_b):
            return CombinationResult.rejected(STALE_RESULT_REASON)

        # Catalog first so a racing combination of the same pair sees it as known
        is_new = not self.catalog.contains(oracle.element)
        if is_new:
            self.catalog.add(
                Element(
                    name=oracle.element,
                    emoji=oracle.emoji or DEFAULT_EMOJI,
                    source=ElementSource.DISCOVERED,
                )
            )

        kind = DiscoveryKind.FIRST_DISCOVERY if oracle.is_first_discovery else (
            DiscoveryKind.NEW if is_new else DiscoveryKind.EXISTING
        )
        payload = {"element": oracle.element, "emoji": oracle.emoji}
        if kind == DiscoveryKind.FIRST_DISCOVERY:
            payload["message"] = GameMechanics.random_message(GameMechanics.FIRST_DISCOVERY_MESSAGES)
        self.signals.emit(OUTCOME_SIGNALS[kind], payload)

        self.is_animating = True
        try:
            await self.timing.wait_for_combine_animation()
            if self._is_stale(generation, element_a, element_b):
                return CombinationResult.rejected(STALE_RESULT_REASON)

            entry = self.combination_logic.record_combination(
                self.ledger.next_step, element_a.name, element_b.name, oracle.element, operator
            )
            if not entry.is_duplicate:
                self.ledger.moves_count += 1
            self.progress_store.increment_usage(element_a.name, element_b.name)
            self.ledger.combination_path.append(entry)

            if is_new:
                self.ledger.record_new_discovery(oracle.element)
            if oracle.is_first_discovery:
                self.ledger.record_first_discovery(oracle.element)

            self.last_result = CombinationResult.success(
                element_a.name, element_b.name, operator, oracle, is_new=is_new, is_duplicate=entry.is_duplicate
            )
            self.selection.clear()
            self.hint_engine.clear_if_produced(oracle.element)
        finally:
            self.is_animating = False

        self.logger.info(
            f"✨ {entry.display_name} ({kind.value}{', duplicate' if entry.is_duplicate else ''}) "
            f"moves={self.ledger.moves_count}"
        )
        return self.last_result
