"""Tests for creative mode: slot loading, autosave, switching, export/import."""

import asyncio
import json

import pytest

from daily_alchemy.application.services import GameSignal, StorageKeys
from daily_alchemy.domain.models import CombinationStatus, CreativeSave, Element, GameState, Mode, Operator
from daily_alchemy.errors import InvalidTransition, SaveFileError

from .conftest import combine, pending_combine, start_daily

FIVE_DISCOVERIES = [
    ("Water", "Fire"),
    ("Earth", "Fire"),
    ("Earth", "Water"),
    ("Wind", "Fire"),
    ("Wind", "Water"),
]
TEN_DISCOVERIES = FIVE_DISCOVERIES + [
    ("Fire", "Fire"),
    ("Water", "Water"),
    ("Earth", "Earth"),
    ("Wind", "Wind"),
    ("Mud", "Fire"),
]


def saved_slot(slot_number: int, *names: str, favorites=()) -> CreativeSave:
    return CreativeSave(
        slot_number=slot_number,
        element_bank=[Element(name=name) for name in names],
        total_moves=len(names),
        total_discoveries=len(names),
        favorites=list(favorites),
    )


def test_fresh_slot_starts_with_starters(controller, api):
    async def scenario():
        restored = await controller.start_free_play()

        assert not restored
        assert controller.state == GameState.PLAYING
        assert controller.free_play_mode
        assert len(controller.catalog) == 4
        assert controller.creative.load_complete
        assert controller.remaining_time is None
        assert api.call_names() == ["load_creative_save"]

    asyncio.run(scenario())


def test_saved_slot_is_restored(controller, api):
    api.saves[2] = saved_slot(2, "Steam", "Metal", favorites=["Steam"])

    async def scenario():
        assert await controller.start_free_play(2)

        assert controller.creative.active_slot == 2
        assert controller.catalog.contains("Metal")
        assert controller.ledger.new_discoveries == 2
        assert controller.catalog.favorites == ["Steam"]
        assert controller.progress_store.get_active_slot() == 2
        # Restoring is not a state change, so nothing is written back
        assert not await controller.creative.maybe_autosave()

    asyncio.run(scenario())


def test_stored_active_slot_is_used_by_default(controller, api, storage):
    storage.set_item(StorageKeys.CREATIVE_ACTIVE_SLOT, "3")
    api.saves[3] = saved_slot(3, "Mud")

    async def scenario():
        assert await controller.start_free_play()
        assert controller.creative.active_slot == 3

    asyncio.run(scenario())


def test_load_failure_starts_fresh_with_autosave_enabled(controller, api):
    api.failing_calls = {"load_creative_save"}

    async def scenario():
        assert not await controller.start_free_play()
        assert len(controller.catalog) == 4
        assert controller.creative.load_complete
        assert controller.creative.autosave_allowed

    asyncio.run(scenario())


def test_autosave_every_five_discoveries(controller, api):
    async def scenario():
        await controller.start_free_play()
        for a, b in FIVE_DISCOVERIES[:4]:
            await combine(controller, a, b)
        assert "save_creative" not in api.call_names()

        await combine(controller, *FIVE_DISCOVERIES[4])
        assert api.call_names().count("save_creative") == 1
        assert len(api.saves[1].element_bank) == 9
        assert controller.signals.history(GameSignal.AUTOSAVED)[0].data["trigger"] == "every_interval"

    asyncio.run(scenario())


def test_autosave_on_first_discovery(controller, api):
    api.first_discoveries = {"Steam"}

    async def scenario():
        await controller.start_free_play()
        await combine(controller, "Water", "Fire")
        assert api.call_names().count("save_creative") == 1
        assert api.saves[1].first_discovery_elements == ["Steam"]

        # Same state, no second write
        await combine(controller, "Earth", "Fire")
        assert api.call_names().count("save_creative") == 1

    asyncio.run(scenario())


def test_no_autosave_until_slot_has_loaded(controller):
    async def scenario():
        await controller.start_free_play()
        controller.ledger.new_discoveries = 10
        controller.creative.load_complete = False
        assert controller.creative.autosave_trigger() is None
        controller.creative.load_complete = True
        assert controller.creative.autosave_trigger() == "every_interval"

    asyncio.run(scenario())


def test_manual_save(controller, api):
    async def scenario():
        await controller.start_free_play()
        await combine(controller, "Water", "Fire")
        assert await controller.save_creative()

        assert [el.name for el in api.saves[1].element_bank][0] == "Steam"
        assert controller.creative.slot_summaries[1].element_count == 5
        assert controller.creative.slot_summaries[1].saved_at == "2026-03-14T12:00:00Z"

    asyncio.run(scenario())


def test_manual_save_failure_keeps_memory_state(controller, api):
    async def scenario():
        await controller.start_free_play()
        await combine(controller, "Water", "Fire")
        api.fail_persistence = True
        assert not await controller.save_creative()
        assert controller.catalog.contains("Steam")
        assert not controller.creative.is_saving

    asyncio.run(scenario())


def test_subtract_available_in_creative(controller, api):
    async def scenario():
        await controller.start_free_play()
        assert controller.toggle_operator() == Operator.SUBTRACT
        controller.select("Water")
        controller.select("Fire")
        await controller.combine()
        assert api.calls[-1][4] == "subtract"

    asyncio.run(scenario())


def test_hints_unavailable_in_creative(controller):
    async def scenario():
        await controller.load_puzzle()
        await controller.start_free_play()
        assert controller.request_hint() is None
        assert controller.ledger.hints_used == 0

    asyncio.run(scenario())


def test_slot_switch_flushes_then_loads(controller, api):
    async def scenario():
        await controller.start_free_play(1)
        for a, b in TEN_DISCOVERIES:
            await combine(controller, a, b)
        assert controller.ledger.new_discoveries == 10
        api.calls.clear()

        assert await controller.switch_slot(2)

        assert api.call_names() == ["save_creative", "load_creative_save"]
        assert api.calls[0][1] == 1
        assert api.calls[1][1] == 2
        assert len(api.saves[1].element_bank) == 14
        assert len(controller.catalog) == 4
        assert controller.ledger.new_discoveries == 0
        assert controller.ledger.moves_count == 0
        assert controller.creative.active_slot == 2
        assert controller.creative.load_complete
        assert controller.progress_store.get_active_slot() == 2

        # Nothing is written to slot 2 until it changes
        assert not await controller.creative.maybe_autosave()
        assert 2 not in api.saves

        assert await controller.switch_slot(1)
        assert controller.catalog.contains("Brick")

    asyncio.run(scenario())


def test_slot_switch_aborts_when_flush_fails(controller, api):
    async def scenario():
        await controller.start_free_play(1)
        await combine(controller, "Water", "Fire")
        api.failing_calls = {"save_creative"}

        assert not await controller.switch_slot(2)
        assert controller.creative.active_slot == 1
        assert controller.catalog.contains("Steam")
        assert controller.creative.load_complete
        assert not controller.creative.is_slot_switching

    asyncio.run(scenario())


def test_slot_switch_keeps_state_when_fetch_fails(controller, api):
    async def scenario():
        await controller.start_free_play(1)
        await combine(controller, "Water", "Fire")
        api.failing_calls = {"load_creative_save"}

        assert not await controller.switch_slot(2)
        assert controller.creative.active_slot == 1
        assert controller.catalog.contains("Steam")
        assert controller.creative.load_complete

    asyncio.run(scenario())


def test_switch_slot_outside_creative_is_rejected(controller):
    async def scenario():
        await controller.load_puzzle()
        await controller.start_game()
        with pytest.raises(InvalidTransition):
            await controller.switch_slot(2)

    asyncio.run(scenario())


def test_favorites_persist_per_slot(controller, api):
    async def scenario():
        await controller.start_free_play(1)
        assert controller.toggle_favorite("Fire")
        assert controller.progress_store.load_favorites(1) == ["Fire"]

        assert await controller.switch_slot(2)
        assert controller.catalog.favorites == []
        assert await controller.switch_slot(1)
        assert controller.catalog.favorites == ["Fire"]

    asyncio.run(scenario())


def test_rename_truncates_and_updates_summary(controller, api):
    async def scenario():
        await controller.start_free_play(1)
        assert await controller.creative.rename_slot(1, "  " + "x" * 40 + "  ")
        assert api.calls[-1] == ("rename_creative_save", 1, "x" * 30)
        assert controller.creative.slot_summaries[1].name == "x" * 30

    asyncio.run(scenario())


def test_clearing_active_slot_resets_game(controller, api):
    api.saves[1] = saved_slot(1, "Steam")

    async def scenario():
        await controller.start_free_play(1)
        assert await controller.creative.clear_slot(1)
        assert 1 not in api.saves
        assert len(controller.catalog) == 4
        assert controller.creative.slot_summaries[1].is_empty

    asyncio.run(scenario())


def test_list_slots_includes_empty_slots(controller, api):
    api.saves[2] = saved_slot(2, "Steam", "Metal")

    async def scenario():
        slots = await controller.list_slots()
        assert [slot.slot_number for slot in slots] == [1, 2, 3]
        assert [slot.is_empty for slot in slots] == [True, False, True]

        api.fail_persistence = True
        assert await controller.list_slots() == slots

    asyncio.run(scenario())


def test_export_active_slot(controller):
    async def scenario():
        await controller.start_free_play(1)
        await combine(controller, "Water", "Fire")
        file_name, text = await controller.creative.export_slot()

        assert file_name.startswith("Creative Save (") and file_name.endswith(".da")
        data = json.loads(text)
        assert data["save"]["elementBank"][0]["name"] == "Steam"

    asyncio.run(scenario())


def test_export_empty_inactive_slot_fails(controller):
    async def scenario():
        await controller.start_free_play(1)
        with pytest.raises(SaveFileError):
            await controller.creative.export_slot(3)

    asyncio.run(scenario())


def test_import_into_active_slot_applies_immediately(controller, api):
    async def scenario():
        await controller.start_free_play(1)
        _, text = await controller.creative.export_slot()
        data = json.loads(text)
        data["save"]["elementBank"].insert(0, {"name": "Dragon", "emoji": "🐉", "isStarter": False})
        data["save"]["slotName"] = "Imported"

        save = await controller.import_save(json.dumps(data), 1)

        assert save.name == "Imported"
        assert controller.catalog.contains("Dragon")
        assert api.saves[1].name == "Imported"
        assert ("rename_creative_save", 1, "Imported") in api.calls

    asyncio.run(scenario())


def test_import_into_other_slot_leaves_game_alone(controller, api):
    async def scenario():
        await controller.start_free_play(1)
        _, text = await controller.creative.export_slot()
        data = json.loads(text)
        data["save"]["elementBank"].insert(0, {"name": "Dragon", "emoji": "🐉"})

        await controller.import_save(json.dumps(data), 3)
        assert not controller.catalog.contains("Dragon")
        assert api.saves[3].element_bank[0].name == "Dragon"

    asyncio.run(scenario())


def test_identity_switch_resets_creative_state(controller, api, identity):
    async def scenario():
        await controller.start_free_play(1)
        recipes = TEN_DISCOVERIES[:9]
        for a, b in recipes:
            await combine(controller, a, b)
        saved_slot_one = api.saves[1].to_dict()
        assert controller.ledger.new_discoveries == 9

        identity.set_user(None)
        await controller.sign_out()
        identity.set_user("user-b")
        assert await controller.on_identity_changed("user-b")

        assert controller.state == GameState.WELCOME
        assert controller.mode == Mode.DAILY
        assert not controller.free_play_mode
        assert len(controller.catalog) == 4
        assert controller.ledger.new_discoveries == 0
        assert api.saves[1].to_dict() == saved_slot_one
        assert not controller.creative.autosave_allowed

    asyncio.run(scenario())


def test_anonymous_session_start_is_not_an_identity_change(make_controller, identity):
    identity.set_user(None)
    controller = make_controller()

    async def scenario():
        assert not await controller.on_identity_changed("anonymous")
        assert await controller.on_identity_changed("user-a")

    asyncio.run(scenario())


def test_slot_switch_refused_while_combining(controller, api):
    async def scenario():
        await controller.start_free_play(1)
        pending, gate = await pending_combine(controller, api, "Water", "Fire")

        assert not await controller.switch_slot(2)
        assert controller.is_combining
        assert api.call_names().count("load_creative_save") == 1

        gate.set()
        await pending
        assert controller.creative.active_slot == 1
        assert controller.catalog.contains("Steam")
        assert controller.ledger.moves_count == 1

    asyncio.run(scenario())


def test_slot_switch_refused_while_saving(controller):
    async def scenario():
        await controller.start_free_play(1)
        controller.creative.is_auto_saving = True
        assert not await controller.switch_slot(2)
        assert controller.creative.active_slot == 1

    asyncio.run(scenario())


def test_identity_change_discards_pending_combination(controller, api, identity):
    async def scenario():
        await controller.start_free_play(1)
        pending, gate = await pending_combine(controller, api, "Water", "Fire")

        identity.set_user("user-b")
        assert await controller.on_identity_changed("user-b")
        gate.set()
        result = await pending

        assert result.status == CombinationStatus.REJECTED
        assert not controller.catalog.contains("Steam")
        assert controller.ledger.moves_count == 0
        assert controller.ledger.new_discoveries == 0
        assert not controller.is_combining

    asyncio.run(scenario())


def test_clearing_slot_during_daily_game_keeps_the_daily_game(controller, api):
    async def scenario():
        await start_daily(controller)
        await combine(controller, "Water", "Fire")

        assert await controller.creative.clear_slot(1)

        assert "delete_creative_save" in api.call_names()
        assert controller.mode == Mode.DAILY
        assert controller.catalog.contains("Steam")
        assert controller.ledger.moves_count == 1

    asyncio.run(scenario())
