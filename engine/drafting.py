"""Drafting phase for the KRED game engine.

Players draft by pick-and-pass: each player in turn keeps one tile from
their hand, and once everyone has picked, every hand passes to the next
player. Drafting ends when the hands are empty; the player who kept
tile 3 opens the campaign.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from core.constants import CAMPAIGN_STARTING_TILE_ID
from core.player import Player

if TYPE_CHECKING:
    from core.game_state import GameState

logger = logging.getLogger(__name__)


@dataclass
class DraftResult:
    """Result of a draft pick.

    Attributes:
        success: Whether the pick was made.
        reason: Why it was refused, if it was.
        hands_passed: True if this pick completed a round and hands moved on.
        draft_complete: True if every hand is now empty.
    """

    success: bool
    reason: Optional[str] = None
    hands_passed: bool = False
    draft_complete: bool = False


def pass_hands(players: list[Player]) -> None:
    """Pass every hand to the next player; the last player's goes to the first."""
    hands = [p.hand for p in players]
    for i, player in enumerate(players):
        player.hand = hands[i - 1]


def is_draft_complete(players: list[Player]) -> bool:
    return all(not p.hand for p in players)


def get_campaign_starting_player_id(
    players: list[Player], tile_id: int = CAMPAIGN_STARTING_TILE_ID
) -> int:
    """Find the player who opens a campaign round.

    The holder of the starting tile goes first, whether the tile is
    kept (first campaign) or banked (later campaigns). Falls back to the
    first player.
    """
    for player in players:
        if any(t.id == tile_id for t in player.kept_tiles + player.bureaucracy_tiles):
            return player.player_id
    return players[0].player_id


class DraftManager:
    """Runs the pick-and-pass draft on a GameState.

    Players pick in id order. After the last player picks, hands pass
    and state.draft_round advances.
    """

    def __init__(self, state: GameState):
        """Initialize the draft manager.

        Args:
            state: The game state to draft in.
        """
        self.state = state

    def get_current_picker_id(self) -> int:
        return self.state.get_current_player().player_id

    def select_tile(self, player_id: int, tile_id: int) -> DraftResult:
        """Keep one tile from the current player's hand.

        Args:
            player_id: The player picking. Must be the current player.
            tile_id: The tile to keep.

        Returns:
            DraftResult.
        """
        state = self.state
        if player_id != self.get_current_picker_id():
            return DraftResult(False, f"It is not player {player_id}'s turn to pick")

        player = state.get_player(player_id)
        try:
            player.keep_from_hand(tile_id)
        except ValueError as e:
            return DraftResult(False, str(e))

        if state.current_player_idx + 1 < len(state.players):
            state.advance_current_player()
            return DraftResult(True)

        pass_hands(state.players)
        state.current_player_idx = 0
        if is_draft_complete(state.players):
            logger.info("Draft complete after %d rounds", state.draft_round + 1)
            return DraftResult(True, hands_passed=True, draft_complete=True)

        state.draft_round += 1
        return DraftResult(True, hands_passed=True)
