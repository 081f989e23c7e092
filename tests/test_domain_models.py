"""Tests for the domain models: elements, catalog, selector, combinations, records."""

import pytest

from daily_alchemy.domain.models import (
    CombinationEntry,
    CombinationKey,
    CombinationResult,
    CoopMessage,
    CoopMessageKind,
    CreativeSave,
    DailyProgress,
    DiscoveryKind,
    Element,
    ElementCatalog,
    ElementSource,
    OracleResult,
    Operator,
    ProgressLedger,
    Puzzle,
    Selection,
    SelectionSlot,
    SelectorState,
    SortOrder,
    element_id_for,
)
from daily_alchemy.domain.models.element import DEFAULT_EMOJI


class TestElement:
    def test_plain_names_become_slugs(self):
        assert element_id_for("Water") == "water"
        assert element_id_for("God Emperor") == "god_emperor"

    def test_punctuated_names_never_collide_with_plain_ones(self):
        plain = element_id_for("God Emperor")
        dashed = element_id_for("God-Emperor")
        squashed = element_id_for("GodEmperor")
        assert len({plain, dashed, squashed}) == 3

    def test_ids_are_stable_and_case_insensitive(self):
        assert element_id_for("Steam Engine!") == element_id_for("steam engine!")
        assert Element(name="Steam Engine!").element_id == element_id_for("Steam Engine!")

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            Element(name="   ")

    def test_missing_emoji_gets_default(self):
        assert Element(name="Steam", emoji="").emoji == DEFAULT_EMOJI

    def test_starter_names_always_have_starter_source(self):
        element = Element.from_dict({"name": "fire", "emoji": "🔥"})
        assert element.is_starter

    def test_save_format(self):
        element = Element(name="Steam", emoji="♨️")
        assert element.to_dict() == {"name": "Steam", "emoji": "♨️", "isStarter": False}
        assert Element.from_dict({"name": "Steam", "emoji": "♨️"}).source == ElementSource.IMPORTED


class TestElementCatalog:
    def test_starts_with_four_starters(self):
        catalog = ElementCatalog()
        assert sorted(catalog.names) == ["Earth", "Fire", "Water", "Wind"]

    def test_generation_changes_only_when_contents_are_replaced(self):
        catalog = ElementCatalog()
        start = catalog.generation
        catalog.add(Element(name="Steam"))
        assert catalog.generation == start
        catalog.load_bank([Element(name="Mud")])
        assert catalog.generation == start + 1
        assert catalog.contains("Mud") and not catalog.contains("Steam")
        catalog.reset()
        assert catalog.generation == start + 2

    def test_names_are_unique_case_insensitively(self):
        catalog = ElementCatalog()
        assert catalog.add(Element(name="Steam"))
        assert not catalog.add(Element(name="STEAM"))
        assert len(catalog) == 5
        assert catalog.contains("steam")

    def test_newest_view_keeps_starters_last(self):
        catalog = ElementCatalog()
        catalog.add(Element(name="Steam"))
        catalog.add(Element(name="Metal"))
        names = [el.name for el in catalog.view()]
        assert names[:2] == ["Metal", "Steam"]
        assert set(names[2:]) == {"Earth", "Water", "Fire", "Wind"}

    def test_alphabetical_and_query(self):
        catalog = ElementCatalog()
        catalog.add(Element(name="Steam", emoji="♨️"))
        assert [el.name for el in catalog.view(SortOrder.ALPHABETICAL)] == [
            "Earth",
            "Fire",
            "Steam",
            "Water",
            "Wind",
        ]
        assert [el.name for el in catalog.view(query="WAT")] == ["Water"]
        assert [el.name for el in catalog.view(query="♨️")] == ["Steam"]

    def test_first_discoveries_pinned_to_top(self):
        catalog = ElementCatalog()
        catalog.add(Element(name="Steam"))
        catalog.add(Element(name="Metal"))
        names = [el.name for el in catalog.view(SortOrder.FIRST_DISCOVERIES, first_discoveries=["steam"])]
        assert names[:2] == ["Steam", "Metal"]

    def test_most_used(self):
        catalog = ElementCatalog()
        names = [el.name for el in catalog.view(SortOrder.MOST_USED, usage={"wind": 4, "earth": 2})]
        assert names[:2] == ["Wind", "Earth"]

    def test_view_does_not_modify_catalog(self):
        catalog = ElementCatalog()
        before = catalog.names
        list(catalog.view(SortOrder.ALPHABETICAL, query="e"))
        assert catalog.names == before

    def test_favorites_capped(self):
        catalog = ElementCatalog(max_favorites=2)
        assert catalog.toggle_favorite("Earth")
        assert catalog.toggle_favorite("Fire")
        assert not catalog.toggle_favorite("Water")
        assert catalog.favorites == ["Earth", "Fire"]
        assert not catalog.toggle_favorite("earth")
        assert catalog.favorites == ["Fire"]

    def test_bank_round_trip_keeps_order_and_restores_starters(self):
        catalog = ElementCatalog()
        catalog.load_bank([Element(name="Metal"), Element(name="Steam")])
        assert len(catalog) == 6
        assert [el.name for el in catalog.to_bank()][:2] == ["Metal", "Steam"]


class TestSelection:
    def test_pointer_advances_until_both_slots_full(self):
        selection = Selection()
        water, fire, earth = Element.starter("Water", "💧"), Element.starter("Fire", "🔥"), Element.starter("Earth", "🌍")

        assert selection.select(water) == SelectionSlot.FIRST
        assert selection.state == SelectorState.PARTIAL
        assert selection.select(fire) == SelectionSlot.SECOND
        assert selection.is_ready
        # Both full: keeps replacing the second slot
        assert selection.select(earth) == SelectionSlot.SECOND
        assert selection.first == water and selection.second == earth

    def test_same_element_may_fill_both_slots(self):
        selection = Selection()
        fire = Element.starter("Fire", "🔥")
        selection.select(fire)
        selection.select(fire)
        assert selection.is_ready

    def test_activate_replaces_chosen_slot(self):
        selection = Selection()
        selection.select(Element.starter("Water", "💧"))
        selection.select(Element.starter("Fire", "🔥"))
        selection.activate(SelectionSlot.FIRST)
        selection.select(Element.starter("Wind", "💨"))
        assert selection.first.name == "Wind"
        assert selection.second.name == "Fire"

    def test_select_result_fills_first_and_points_at_second(self):
        selection = Selection()
        selection.select_result(Element(name="Steam"))
        assert selection.first.name == "Steam"
        assert selection.second is None
        assert selection.active_slot == SelectionSlot.SECOND

    def test_operator_toggle(self):
        selection = Selection()
        assert selection.toggle_operator() == Operator.SUBTRACT
        assert selection.toggle_operator(allow_subtract=False) == Operator.COMBINE


class TestCombination:
    def test_combine_key_is_commutative(self):
        assert CombinationKey.of("Water", "Fire") == CombinationKey.of("fire", "WATER")

    def test_subtract_key_keeps_order(self):
        assert CombinationKey.of("Steam", "Water", Operator.SUBTRACT) != CombinationKey.of(
            "Water", "Steam", Operator.SUBTRACT
        )
        assert str(CombinationKey.of("Steam", "Water", Operator.SUBTRACT)) == "steam - water"

    def test_operator_symbols(self):
        assert Operator.from_symbol(None) == Operator.COMBINE
        assert Operator.from_symbol("subtract") == Operator.SUBTRACT
        assert Operator.SUBTRACT.api_mode == "subtract"
        with pytest.raises(ValueError):
            Operator.from_symbol("*")

    def test_result_status_consistency(self):
        with pytest.raises(ValueError):
            CombinationResult(element_a="a", element_b="b", status=CombinationResult.rejected("x").status, element="c")

    def test_discovery_kind_priority(self):
        oracle = OracleResult(element="Steam", emoji="♨️", is_first_discovery=True)
        result = CombinationResult.success("Water", "Fire", Operator.COMBINE, oracle, is_new=True, is_duplicate=False)
        assert result.discovery_kind == DiscoveryKind.FIRST_DISCOVERY

    def test_entry_dict_round_trip(self):
        entry = CombinationEntry(step=2, element_a="Steam", element_b="Water", result="Cloud", operator=Operator.SUBTRACT)
        assert CombinationEntry.from_dict(entry.to_dict()) == entry


class TestRecords:
    def test_ledger_credits_first_discovery_once(self):
        ledger = ProgressLedger()
        assert ledger.record_first_discovery("Steam")
        assert not ledger.record_first_discovery("steam")
        assert ledger.first_discoveries == 1

    def test_ledger_recent_elements_bounded(self):
        ledger = ProgressLedger(recent_capacity=2)
        for name in ("Steam", "Metal", "Mud"):
            ledger.record_new_discovery(name)
        assert ledger.recent_elements == ["Mud", "Metal"]
        assert ledger.new_discoveries == 3

    def test_daily_progress_from_partial_dict(self):
        progress = DailyProgress.from_dict({"elementBank": ["Steam"], "elementEmojis": {"Steam": "♨️"}})
        assert progress.moves_count == 0
        assert not progress.completed
        assert progress.elements()[0].emoji == "♨️"

    def test_creative_save_skips_nameless_elements(self):
        save = CreativeSave.from_dict(
            {"elementBank": [{"name": "Steam", "emoji": "♨️"}, {"name": "", "emoji": "x"}]}, slot_number=2
        )
        assert save.slot_number == 2
        assert [el.name for el in save.element_bank] == ["Steam"]

    def test_puzzle_validation(self):
        with pytest.raises(ValueError):
            Puzzle.from_dict({"date": "2026-03-14", "targetElement": "Steam", "parMoves": 0})
        puzzle = Puzzle.from_dict({"date": "2026-03-14", "targetElement": "Steam", "parMoves": 1})
        assert puzzle.is_target("STEAM")
        assert puzzle.solution_path == []

    def test_coop_message_round_trip(self):
        message = CoopMessage.element("Steam", "♨️", sender_id="user-a")
        restored = CoopMessage.from_dict(message.to_dict())
        assert restored.kind == CoopMessageKind.ELEMENT
        assert restored.payload["name"] == "Steam"
