"""Tests for the select-and-combine pipeline, driven through the controller."""

import asyncio

import pytest

from daily_alchemy.application.services import GameSignal
from daily_alchemy.domain.models import CombinationKey, CombinationStatus, DiscoveryKind, Operator, SelectionSlot
from daily_alchemy.domain.services import GameMechanics

from .conftest import combine, pending_combine, settle, start_daily


def test_new_element_updates_catalog_and_ledger(controller, api):
    async def scenario():
        await start_daily(controller)
        result = await combine(controller, "Water", "Fire")

        assert result.status == CombinationStatus.SUCCESS
        assert result.discovery_kind == DiscoveryKind.NEW
        assert controller.catalog.contains("Steam")
        assert controller.ledger.moves_count == 1
        assert controller.ledger.new_discoveries == 1
        assert controller.ledger.recent_elements == ["Steam"]
        assert controller.selection.first is None and controller.selection.second is None
        assert controller.last_result.element == "Steam"
        assert api.calls[-1] == ("combine", "Water", "Fire", "user-a", "combine")
        assert controller.progress_store.load_usage() == {"water": 1, "fire": 1}
        assert controller.signals.history(GameSignal.NEW_ELEMENT)[0].data["element"] == "Steam"

    asyncio.run(scenario())


def test_duplicate_combination_does_not_count(controller):
    async def scenario():
        await start_daily(controller)
        await combine(controller, "Water", "Fire")
        again = await combine(controller, "Fire", "Water")

        assert again.discovery_kind == DiscoveryKind.EXISTING
        assert again.is_duplicate
        assert controller.ledger.moves_count == 1
        assert controller.ledger.new_discoveries == 1
        assert [entry.is_duplicate for entry in controller.ledger.combination_path] == [False, True]
        assert len(controller.signals.history(GameSignal.EXISTING_ELEMENT)) == 1

    asyncio.run(scenario())


def test_known_element_from_new_pair_still_counts_a_move(controller, api):
    api.recipes[CombinationKey.of("Fire", "Fire")] = ("Steam", "♨️")

    async def scenario():
        await start_daily(controller)
        await combine(controller, "Water", "Fire")
        result = await combine(controller, "Fire", "Fire")

        assert not result.is_new
        assert not result.is_duplicate
        assert controller.ledger.moves_count == 2
        assert controller.ledger.new_discoveries == 1

    asyncio.run(scenario())


def test_oracle_failure_leaves_ledger_untouched(controller, api):
    async def scenario():
        await start_daily(controller)
        api.fail_combine = True
        result = await combine(controller, "Water", "Fire")

        assert result.status == CombinationStatus.FAILED
        assert controller.combination_error == GameMechanics.COMBINATION_ERROR_MESSAGE
        assert controller.ledger.moves_count == 0
        assert controller.ledger.combination_path == []
        assert not controller.catalog.contains("Steam")
        assert controller.selection.first is None
        assert controller.signals.history(GameSignal.COMBINATION_ERROR)

        # Zero dismiss delay in tests
        await settle()
        assert controller.combination_error is None

    asyncio.run(scenario())


def test_unknown_recipe_is_a_failure(controller):
    async def scenario():
        await start_daily(controller)
        result = await combine(controller, "Earth", "Earth")
        assert result.is_successful
        result = await combine(controller, "Mountain", "Wind")
        assert result.status == CombinationStatus.FAILED

    asyncio.run(scenario())


def test_incomplete_selection_is_rejected_without_calling_oracle(controller, api):
    async def scenario():
        await start_daily(controller)
        controller.select("Water")
        result = await controller.combine()

        assert result.status == CombinationStatus.REJECTED
        assert "combine" not in api.call_names()
        assert controller.selection.active_slot == SelectionSlot.SECOND

    asyncio.run(scenario())


def test_first_discovery_is_credited(controller, api):
    api.first_discoveries = {"Steam"}

    async def scenario():
        await start_daily(controller)
        result = await combine(controller, "Water", "Fire")

        assert result.discovery_kind == DiscoveryKind.FIRST_DISCOVERY
        assert controller.ledger.first_discoveries == 1
        assert controller.ledger.first_discovery_elements == ["Steam"]
        signal = controller.signals.history(GameSignal.FIRST_DISCOVERY)[0]
        assert signal.data["message"] in GameMechanics.FIRST_DISCOVERY_MESSAGES
        assert not controller.signals.history(GameSignal.NEW_ELEMENT)

    asyncio.run(scenario())


def test_missing_user_id_starts_a_session(make_controller, identity, api):
    identity.set_user(None)
    controller = make_controller()

    async def scenario():
        await start_daily(controller)
        await combine(controller, "Water", "Fire")
        assert identity.ensure_calls == 1
        assert api.calls[-1][3] == "anonymous"

    asyncio.run(scenario())


def test_producing_the_hinted_element_clears_the_hint(controller):
    async def scenario():
        await start_daily(controller)
        hint = controller.request_hint()
        assert hint.element == "Metal"
        assert controller.current_hint_message

        await combine(controller, "Water", "Fire")
        assert controller.current_hint_message is not None
        await combine(controller, "Earth", "Fire")
        assert controller.current_hint_message is None

    asyncio.run(scenario())


def test_daily_mode_never_subtracts(controller, api):
    async def scenario():
        await start_daily(controller)
        assert controller.toggle_operator() == Operator.COMBINE
        controller.selection.operator = Operator.SUBTRACT
        await combine(controller, "Water", "Fire")
        assert api.calls[-1][4] == "combine"

    asyncio.run(scenario())


def test_select_requires_known_element(controller):
    async def scenario():
        await start_daily(controller)
        with pytest.raises(ValueError):
            controller.select("Steam")

    asyncio.run(scenario())


def test_second_combine_while_first_is_pending_is_rejected(controller, api):
    async def scenario():
        await start_daily(controller)
        first, gate = await pending_combine(controller, api, "Water", "Fire")

        second = await controller.combine()
        assert second.status == CombinationStatus.REJECTED
        assert api.call_names().count("combine") == 1

        gate.set()
        result = await first
        assert result.is_successful
        assert controller.ledger.moves_count == 1
        assert not controller.is_combining

    asyncio.run(scenario())


def test_element_is_in_catalog_before_it_is_revealed(controller):
    seen = []

    def on_reveal(event):
        seen.append((controller.catalog.contains(event.data["element"]), controller.ledger.moves_count))

    controller.signals.subscribe(GameSignal.NEW_ELEMENT, on_reveal)

    async def scenario():
        await start_daily(controller)
        await combine(controller, "Water", "Fire")

    asyncio.run(scenario())
    # Counted only after the reveal animation
    assert seen == [(True, 0)]
