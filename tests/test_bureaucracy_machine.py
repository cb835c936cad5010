"""Tests for the bureaucracy phase state machine."""

import pytest

from core.bureaucracy import FIVE_PLAYER_BUREAUCRACY_MENU
from core.constants import BureaucracyStep, Phase, PieceType
from core.game_state import GameState
from engine.bureaucracy import NO_MOVES_REASON
from engine.bureaucracy_machine import (
    INSUFFICIENT_KREDCOIN_REASON,
    NO_PROMOTION_REASON,
    BureaucracyMachine,
)
from engine.movement import move_piece


@pytest.fixture
def bureaucracy_state(make_player, make_piece) -> GameState:
    players = [
        make_player(1, banked=(24,)),  # 9 Kredcoin
        make_player(2, banked=(8,)),  # 5 Kredcoin
        make_player(3),
    ]
    pieces = [
        make_piece("m1", "community1"),
        make_piece("s1", "p1_seat1"),
        make_piece("h1", "community2", PieceType.HEEL),
    ]
    return GameState(player_count=3, players=players, pieces=pieces, phase=Phase.BUREAUCRACY)


@pytest.fixture
def machine(bureaucracy_state) -> BureaucracyMachine:
    machine = BureaucracyMachine(bureaucracy_state)
    machine.start()
    return machine


def locations(state: GameState) -> dict[str, str]:
    return {p.id: p.location_id for p in state.pieces}


# =============================================================================
# Start and Menu Tests
# =============================================================================


class TestStart:
    """Opening the phase."""

    def test_not_started(self, bureaucracy_state):
        """Queries before start() are errors."""
        machine = BureaucracyMachine(bureaucracy_state)
        with pytest.raises(RuntimeError, match="Call start"):
            machine.turn_order
        with pytest.raises(RuntimeError, match="Call start"):
            machine.get_player_state(1)
        assert not machine.is_phase_complete()

    def test_turn_order_and_kredcoin(self, machine, bureaucracy_state):
        """Richest player goes first."""
        assert machine.turn_order == [1, 2, 3]
        assert machine.current_player_id == 1
        assert bureaucracy_state.get_current_player().player_id == 1
        assert machine.get_player_state(1).initial_kredcoin == 9
        assert machine.get_player_state(2).remaining_kredcoin == 5
        assert machine.step == BureaucracyStep.MENU_SHOWN

    def test_available_items(self, machine):
        """Only affordable items are offered."""
        assert [i.id for i in machine.get_available_items()] == [
            "move_advance",
            "move_withdraw",
            "move_organize",
            "promote_seat",
            "credibility",
        ]

    def test_five_player_menu(self, make_player):
        state = GameState(player_count=5, players=[make_player(i) for i in range(1, 6)])
        assert BureaucracyMachine(state).menu is FIVE_PLAYER_BUREAUCRACY_MENU


class TestSelectItem:
    """Choosing a menu item."""

    def test_unknown_item(self, machine):
        result = machine.select_item("move_teleport")
        assert not result.success
        assert result.reason == "Unknown menu item: move_teleport"

    def test_unaffordable_item(self, machine):
        assert machine.select_item("move_assist").reason == INSUFFICIENT_KREDCOIN_REASON

    def test_one_purchase_at_a_time(self, machine):
        """A second selection waits for the first to finish."""
        assert machine.select_item("move_advance").success
        assert machine.step == BureaucracyStep.ITEM_SELECTED
        assert machine.current_purchase.item.id == "move_advance"
        assert machine.select_item("credibility").reason == "Finish or reset the current purchase first"
        assert machine.end_turn().reason == "Finish or reset the current purchase first"


# =============================================================================
# Purchase Tests
# =============================================================================


class TestMovePurchase:
    """Buying a move."""

    def test_complete_move_purchase(self, machine, bureaucracy_state):
        """A legal ADVANCE is paid for; spending everything ends the turn."""
        machine.select_item("move_advance")
        bureaucracy_state.pieces = move_piece(bureaucracy_state.pieces, "m1", "p1_seat2", 3)
        result = machine.complete_purchase()

        assert result.success
        player_state = machine.get_player_state(1)
        assert player_state.remaining_kredcoin == 0
        assert player_state.turn_complete
        assert [p.item.id for p in player_state.purchases] == ["move_advance"]
        assert bureaucracy_state.players[0].bureaucracy_tiles == []
        assert machine.current_player_id == 2

    def test_illegal_move_rolls_back(self, machine, bureaucracy_state):
        """A failed purchase puts the board back and shows the menu again."""
        machine.select_item("move_advance")
        bureaucracy_state.pieces = move_piece(bureaucracy_state.pieces, "h1", "p1_seat2", 3)
        result = machine.complete_purchase()

        assert not result.success
        assert result.reason.startswith("ADVANCE move validation failed")
        assert result.step == BureaucracyStep.MENU_SHOWN
        assert locations(bureaucracy_state)["h1"] == "community2"
        assert machine.get_player_state(1).remaining_kredcoin == 9

    def test_nothing_moved(self, machine):
        machine.select_item("move_organize")
        assert machine.complete_purchase().reason == NO_MOVES_REASON

    def test_reset(self, machine, bureaucracy_state):
        """Resetting restores the board without paying."""
        machine.select_item("move_advance")
        bureaucracy_state.pieces = move_piece(bureaucracy_state.pieces, "m1", "p1_seat2", 3)
        result = machine.reset_action()

        assert result.success
        assert locations(bureaucracy_state)["m1"] == "community1"
        assert machine.current_purchase is None
        assert machine.reset_action().reason == "No purchase selected"


class TestPromotionPurchase:
    """Buying a promotion."""

    def test_promote_seat(self, machine, bureaucracy_state):
        """A seated Mark is exchanged for a Heel from the community."""
        machine.select_item("promote_seat")
        assert machine.promote("s1").success
        result = machine.complete_purchase()

        assert result.success
        assert locations(bureaucracy_state)["s1"] == "community2"
        assert locations(bureaucracy_state)["h1"] == "p1_seat1"
        assert machine.get_player_state(1).remaining_kredcoin == 3

    def test_promote_needs_promotion_item(self, machine):
        assert machine.promote("s1").reason == "No purchase selected"
        machine.select_item("move_advance")
        assert machine.promote("s1").reason == "The selected item is not a promotion"

    def test_no_promotion_performed(self, machine):
        machine.select_item("promote_seat")
        assert machine.complete_purchase().reason == NO_PROMOTION_REASON

    def test_promote_pawn_refused(self, machine, bureaucracy_state, make_piece):
        bureaucracy_state.pieces.append(make_piece("p1", "p1_seat3", PieceType.PAWN))
        machine.select_item("promote_seat")
        assert machine.promote("p1").reason == "Pawns cannot be promoted further"


class TestCredibilityPurchase:
    """Buying back credibility."""

    def test_applies_on_selection(self, machine, bureaucracy_state):
        player = bureaucracy_state.players[0]
        player.credibility = 1
        machine.select_item("credibility")
        assert player.credibility == 2

        assert machine.complete_purchase().success
        assert player.credibility == 2
        assert machine.get_player_state(1).remaining_kredcoin == 6

    def test_reset_reverts(self, machine, bureaucracy_state):
        player = bureaucracy_state.players[0]
        player.credibility = 1
        machine.select_item("credibility")
        machine.reset_action()
        assert player.credibility == 1

    def test_capped(self, bureaucracy_state):
        machine = BureaucracyMachine(bureaucracy_state, max_credibility=3)
        machine.start()
        machine.select_item("credibility")
        assert bureaucracy_state.players[0].credibility == 3


# =============================================================================
# Turn Flow Tests
# =============================================================================


class TestTurnFlow:
    """Turns pass in order until everyone is done."""

    def test_full_phase(self, machine, bureaucracy_state):
        assert machine.end_turn().step == BureaucracyStep.MENU_SHOWN
        assert bureaucracy_state.get_current_player().player_id == 2
        machine.end_turn()
        result = machine.end_turn()

        assert result.step == BureaucracyStep.TURN_COMPLETE
        assert machine.is_phase_complete()
        assert machine.current_player_id is None
        assert machine.get_available_items() == []
        assert machine.select_item("credibility").reason == "The bureaucracy phase is complete"
        assert not machine.end_turn().success

    def test_no_winners(self, machine):
        assert machine.get_winners() == []
