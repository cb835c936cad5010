"""Tests for the pick-and-pass draft."""

import pytest

from core.game_state import GameState
from engine.drafting import (
    DraftManager,
    pass_hands,
    is_draft_complete,
    get_campaign_starting_player_id,
)


@pytest.fixture
def draft_state(make_player) -> GameState:
    players = [
        make_player(1, hand=(1, 2)),
        make_player(2, hand=(3, 4)),
        make_player(3, hand=(5, 6)),
    ]
    return GameState(player_count=3, players=players)


class TestPassHands:
    """Hands move to the next player."""

    def test_pass_hands(self, draft_state):
        """Player 1 receives the last player's hand."""
        pass_hands(draft_state.players)
        assert [[t.id for t in p.hand] for p in draft_state.players] == [[5, 6], [1, 2], [3, 4]]

    def test_draft_complete(self, make_player):
        """The draft is complete when every hand is empty."""
        assert is_draft_complete([make_player(1), make_player(2)])
        assert not is_draft_complete([make_player(1), make_player(2, hand=(1,))])


class TestStartingPlayer:
    """The holder of tile 3 opens the campaign."""

    def test_kept_tile(self, make_player):
        players = [make_player(1, kept=(1,)), make_player(2, kept=(3,))]
        assert get_campaign_starting_player_id(players) == 2

    def test_banked_tile(self, make_player):
        players = [make_player(1), make_player(2), make_player(3, banked=(3,))]
        assert get_campaign_starting_player_id(players) == 3

    def test_fallback(self, make_player):
        """Nobody holds it: the first player starts."""
        assert get_campaign_starting_player_id([make_player(4), make_player(5)]) == 4


class TestDraftManager:
    """Players pick in id order, then hands pass."""

    def test_pick_advances_player(self, draft_state):
        """A pick keeps the tile and moves to the next player."""
        manager = DraftManager(draft_state)
        result = manager.select_tile(1, 2)

        assert result.success
        assert not result.hands_passed
        assert draft_state.players[0].has_kept_tile(2)
        assert manager.get_current_picker_id() == 2

    def test_out_of_turn(self, draft_state):
        """Only the current player picks."""
        result = DraftManager(draft_state).select_tile(2, 3)
        assert not result.success
        assert result.reason == "It is not player 2's turn to pick"

    def test_tile_not_in_hand(self, draft_state):
        """Players pick from their own hand."""
        result = DraftManager(draft_state).select_tile(1, 5)
        assert not result.success
        assert "does not hold tile 5" in result.reason

    def test_full_draft(self, draft_state):
        """Hands pass after each round; the draft ends when they are empty."""
        manager = DraftManager(draft_state)
        manager.select_tile(1, 1)
        manager.select_tile(2, 3)
        result = manager.select_tile(3, 5)

        assert result.hands_passed
        assert not result.draft_complete
        assert draft_state.draft_round == 1
        assert manager.get_current_picker_id() == 1
        assert [t.id for t in draft_state.players[0].hand] == [6]

        manager.select_tile(1, 6)
        manager.select_tile(2, 2)
        result = manager.select_tile(3, 4)

        assert result.draft_complete
        assert [sorted(t.id for t in p.kept_tiles) for p in draft_state.players] == [
            [1, 6],
            [2, 3],
            [4, 5],
        ]
