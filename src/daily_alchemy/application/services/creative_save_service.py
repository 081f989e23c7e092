"""Creative-mode save slots: load, autosave, slot switching, export/import."""

import asyncio
from typing import Dict, List, Optional, Tuple

from daily_alchemy.application.interfaces import IGameApi, ILoggingService
from daily_alchemy.domain.models import CreativeSave, ElementCatalog, ProgressLedger, SlotSummary
from daily_alchemy.domain.services import CombinationLogic, GameMechanics, SaveFileCodec
from daily_alchemy.domain.services.save_file import MAX_SLOT_NAME_LENGTH
from daily_alchemy.errors import PersistenceNetworkError, SaveFileError

from .progress_store import ProgressStore
from .signal_bus import GameSignal, SignalBus
from .timing_service import TimingService


class CreativeSaveService:
    """
    Keeps the in-memory creative game and its remote slot in step.

    Autosave stays inhibited until the active slot has finished loading, so
    a freshly entered slot can never overwrite its remote copy with the
    starter bank. At most one save (manual or automatic) is in flight.
    Remote failures are logged; in-memory state stays authoritative.
    """

    def __init__(
        self,
        api: IGameApi,
        catalog: ElementCatalog,
        ledger: ProgressLedger,
        combination_logic: CombinationLogic,
        progress_store: ProgressStore,
        timing_service: TimingService,
        signals: SignalBus,
        logging_service: ILoggingService,
        autosave_interval: int = GameMechanics.AUTOSAVE_DISCOVERY_INTERVAL,
        slots: Tuple[int, ...] = GameMechanics.CREATIVE_SLOTS,
    ):
        """
        Initialize creative save service.

        Args:
            api: Remote save endpoints
            catalog: Element bank shared with the controller
            ledger: Running totals shared with the controller
            combination_logic: Made-set, cleared when a slot is loaded
            progress_store: Active slot and favorites fallback
            timing_service: Save indicator delay
            signals: Presentation signals
            logging_service: Service for logging
            autosave_interval: New discoveries between autosaves
            slots: Valid slot numbers
        """
        self.api = api
        self.catalog = catalog
        self.ledger = ledger
        self.combination_logic = combination_logic
        self.progress_store = progress_store
        self.timing = timing_service
        self.signals = signals
        self.logger = logging_service
        self.autosave_interval = autosave_interval
        self.slots = tuple(slots)

        self.active_slot = self.slots[0]
        self.autosave_allowed = False  # True only while playing creative mode
        self.load_complete = False
        self.is_saving = False
        self.is_auto_saving = False
        self.is_slot_switching = False
        self.save_indicator = False
        self.slot_summaries: Dict[int, SlotSummary] = {slot: SlotSummary.empty(slot) for slot in self.slots}

        self._saved_discoveries = 0
        self._saved_first_discoveries = 0
        self._indicator_task: Optional[asyncio.Task] = None

    def _require_slot(self, slot_number: int) -> None:
        if slot_number not in self.slots:
            raise ValueError(f"Invalid creative slot: {slot_number}")

    def _sync_trackers(self) -> None:
        self._saved_discoveries = self.ledger.new_discoveries
        self._saved_first_discoveries = self.ledger.first_discoveries

    # Snapshot / rehydrate

    def build_save(self) -> CreativeSave:
        """Snapshot the running game into a save for the active slot."""
        return CreativeSave(
            slot_number=self.active_slot,
            element_bank=self.catalog.to_bank(),
            name=self.slot_summaries[self.active_slot].name,
            total_moves=self.ledger.moves_count,
            total_discoveries=self.ledger.new_discoveries,
            first_discoveries=self.ledger.first_discoveries,
            first_discovery_elements=list(self.ledger.first_discovery_elements),
            favorites=self.catalog.favorites,
        )

    def _apply(self, slot_number: int, save: Optional[CreativeSave]) -> None:
        """Replace catalog, counters and favorites with a slot's contents."""
        self.ledger.reset()
        self.combination_logic.clear()

        if save and not save.is_empty:
            self.catalog.load_bank(save.element_bank)
            self.ledger.moves_count = save.total_moves
            self.ledger.new_discoveries = save.total_discoveries
            self.ledger.first_discoveries = save.first_discoveries
            self.ledger.first_discovery_elements = list(save.first_discovery_elements)
            favorites = save.favorites or self.progress_store.load_favorites(slot_number)
            self.slot_summaries[slot_number] = SlotSummary.from_save(save)
        else:
            self.catalog.reset()
            favorites = self.progress_store.load_favorites(slot_number)

        self.catalog.set_favorites(favorites)
        self._sync_trackers()

    def reset(self) -> None:
        """Drop all in-memory creative state (identity change, leaving creative mode)."""
        self.autosave_allowed = False
        self.load_complete = False
        self.is_slot_switching = False
        self.active_slot = self.slots[0]
        self.slot_summaries = {slot: SlotSummary.empty(slot) for slot in self.slots}
        self._saved_discoveries = 0
        self._saved_first_discoveries = 0
        self.save_indicator = False
        if self._indicator_task and not self._indicator_task.done():
            self._indicator_task.cancel()
        self._indicator_task = None

    # Entry

    async def enter(self, slot_number: Optional[int] = None) -> bool:
        """
        Load a slot as the start of a creative session.

        Returns True if a remote save was restored. On a network failure the
        session starts from starters and autosave is still enabled.
        """
        slot_number = slot_number or self.progress_store.get_active_slot(self.slots[0])
        if slot_number not in self.slots:
            slot_number = self.slots[0]

        self.load_complete = False
        self._saved_discoveries = 0
        self._saved_first_discoveries = 0
        self.active_slot = slot_number
        self.progress_store.set_active_slot(slot_number)

        restored = False
        try:
            save = await self.api.load_creative_save(slot_number)
            self._apply(slot_number, save)
            restored = save is not None and not save.is_empty
        except PersistenceNetworkError as e:
            self.logger.error(f"❌ Could not load creative slot {slot_number}: {e}")
            self._apply(slot_number, None)
        finally:
            self.load_complete = True

        self.logger.info(
            f"🎨 Creative slot {slot_number} {'restored' if restored else 'started fresh'} "
            f"({len(self.catalog)} elements)"
        )
        return restored

    # Saving

    async def _post(self, save: CreativeSave) -> None:
        save.saved_at = await self.api.save_creative(save)
        self.slot_summaries[save.slot_number] = SlotSummary.from_save(save)

    async def save(self) -> bool:
        """Explicit save of the active slot."""
        if self.is_saving or self.is_auto_saving or not self.load_complete:
            return False

        self.is_saving = True
        try:
            snapshot = self.build_save()
            await self._post(snapshot)
            self._saved_discoveries = snapshot.total_discoveries
            self._saved_first_discoveries = snapshot.first_discoveries
            self.logger.info(f"💾 Creative slot {self.active_slot} saved ({len(snapshot.element_bank)} elements)")
            self._show_indicator()
            return True
        except PersistenceNetworkError as e:
            self.logger.error(f"❌ Failed to save creative slot {self.active_slot}: {e}")
            return False
        finally:
            self.is_saving = False

    def autosave_trigger(self) -> Optional[str]:
        """Name of the autosave rule that currently fires, or None."""
        if not self.autosave_allowed or not self.load_complete or self.is_slot_switching:
            return None
        if self.is_saving or self.is_auto_saving:
            return None

        since_last = self.ledger.new_discoveries - self._saved_discoveries
        if self.ledger.new_discoveries > 0 and since_last >= self.autosave_interval:
            return "every_interval"
        if self.ledger.first_discoveries > self._saved_first_discoveries:
            return "first_discovery"
        return None

    async def maybe_autosave(self) -> bool:
        """Autosave the active slot if a trigger fires. Returns True if a save was written."""
        trigger = self.autosave_trigger()
        if trigger is None:
            return False

        self.is_auto_saving = True
        try:
            snapshot = self.build_save()
            await self._post(snapshot)
            self._saved_discoveries = snapshot.total_discoveries
            self._saved_first_discoveries = snapshot.first_discoveries
            self.logger.info(f"💾 Creative slot {self.active_slot} autosaved (trigger: {trigger})")
            self.signals.emit(GameSignal.AUTOSAVED, {"slot": self.active_slot, "trigger": trigger})
            self._show_indicator()
            return True
        except PersistenceNetworkError as e:
            self.logger.error(f"❌ Autosave failed: {e}")
            return False
        finally:
            self.is_auto_saving = False

    def _show_indicator(self) -> None:
        self.save_indicator = True
        if self._indicator_task and not self._indicator_task.done():
            self._indicator_task.cancel()
        self._indicator_task = asyncio.get_running_loop().create_task(self._hide_indicator())

    async def _hide_indicator(self) -> None:
        await self.timing.wait_for_save_indicator()
        self.save_indicator = False

    # Slot management

    async def switch_slot(self, slot_number: int) -> bool:
        """
        Flush the active slot, then load another one.

        If the flush or the fetch fails the active slot and in-memory state
        are left as they were and autosave is re-enabled.
        """
        self._require_slot(slot_number)
        if self.is_slot_switching or slot_number == self.active_slot:
            return False

        self.is_slot_switching = True
        previous = self.active_slot
        try:
            if self.load_complete:
                try:
                    await self._post(self.build_save())
                except PersistenceNetworkError as e:
                    self.logger.error(f"❌ Could not save slot {previous} before switching: {e}")
                    return False

            self.load_complete = False
            try:
                save = await self.api.load_creative_save(slot_number)
            except PersistenceNetworkError as e:
                self.logger.error(f"❌ Could not load slot {slot_number}, staying on slot {previous}: {e}")
                return False

            self._apply(slot_number, save)
            self.active_slot = slot_number
            self.progress_store.set_active_slot(slot_number)
            self.logger.info(f"🔀 Switched creative slot {previous} → {slot_number} ({len(self.catalog)} elements)")
            return True
        finally:
            self.load_complete = True
            self.is_slot_switching = False

    async def rename_slot(self, slot_number: int, name: str) -> bool:
        self._require_slot(slot_number)
        clean = (name or "").strip()[:MAX_SLOT_NAME_LENGTH]
        try:
            await self.api.rename_creative_save(slot_number, clean)
        except PersistenceNetworkError as e:
            self.logger.error(f"❌ Could not rename slot {slot_number}: {e}")
            return False

        current = self.slot_summaries[slot_number]
        self.slot_summaries[slot_number] = SlotSummary(
            slot_number=slot_number,
            name=clean or None,
            element_count=current.element_count,
            total_discoveries=current.total_discoveries,
            saved_at=current.saved_at,
        )
        return True

    async def clear_slot(self, slot_number: int) -> bool:
        """Delete a slot remotely; the running game resets only if it is creative play on that slot."""
        self._require_slot(slot_number)
        try:
            await self.api.delete_creative_save(slot_number)
        except PersistenceNetworkError as e:
            self.logger.error(f"❌ Could not clear slot {slot_number}: {e}")
            return False

        self.slot_summaries[slot_number] = SlotSummary.empty(slot_number)
        self.progress_store.save_favorites(slot_number, [])
        if slot_number == self.active_slot and self.autosave_allowed:
            self._apply(slot_number, None)
        self.logger.info(f"🗑️ Creative slot {slot_number} cleared")
        return True

    async def list_slots(self) -> List[SlotSummary]:
        """Summaries for every slot, empty slots included."""
        try:
            remote = await self.api.list_creative_saves()
        except PersistenceNetworkError as e:
            self.logger.warning(f"⚠️ Could not list saves, showing cached summaries: {e}")
            return [self.slot_summaries[slot] for slot in self.slots]

        by_slot = {summary.slot_number: summary for summary in remote if summary.slot_number in self.slots}
        self.slot_summaries = {slot: by_slot.get(slot, SlotSummary.empty(slot)) for slot in self.slots}
        return [self.slot_summaries[slot] for slot in self.slots]

    # Export / import

    async def export_slot(self, slot_number: Optional[int] = None) -> Tuple[str, str]:
        """Return (file name, file text) for a slot's portable snapshot."""
        slot_number = slot_number or self.active_slot
        self._require_slot(slot_number)

        if slot_number == self.active_slot:
            save = self.build_save()
        else:
            save = await self.api.load_creative_save(slot_number)
            if save is None or save.is_empty:
                raise SaveFileError(f"Slot {slot_number} is empty.")

        slot_name = save.name or self.slot_summaries[slot_number].name
        return SaveFileCodec.generate_file_name(slot_name), SaveFileCodec.dumps(save, slot_name)

    async def import_save(self, text: str, slot_number: int) -> CreativeSave:
        """
        Write an exported snapshot into a slot.

        Raises SaveFileError for malformed files and PersistenceNetworkError
        when the slot cannot be written. An import into the active slot is
        applied to the running game immediately.
        """
        self._require_slot(slot_number)
        save = SaveFileCodec.loads(text, slot_number)

        await self._post(save)
        if save.name:
            await self.api.rename_creative_save(slot_number, save.name[:MAX_SLOT_NAME_LENGTH])

        if slot_number == self.active_slot and self.autosave_allowed:
            self.load_complete = False
            try:
                self._apply(slot_number, save)
            finally:
                self.load_complete = True
        self.logger.info(f"📥 Imported {len(save.element_bank)} elements into slot {slot_number}")
        return save

    def get_save_summary(self) -> dict:
        """Get summary of save state for logging/debugging."""
        return {
            "active_slot": self.active_slot,
            "load_complete": self.load_complete,
            "autosave_allowed": self.autosave_allowed,
            "saving": self.is_saving or self.is_auto_saving,
            "discoveries_since_save": self.ledger.new_discoveries - self._saved_discoveries,
        }
