"""Snapshots and challenge order for tile plays.

A snapshot is taken before a tile play or bureaucracy purchase so the
board can be put back if the play is rejected or the purchase fails.
"""

from __future__ import annotations

from typing import Iterable, Optional

from core.components import BoardTile, Piece
from core.game_state import GameStateSnapshot


def create_game_state_snapshot(
    pieces: Iterable[Piece], board_tiles: Iterable[BoardTile]
) -> GameStateSnapshot:
    """Capture pieces and board tiles.

    Pieces and board tiles are frozen, so the snapshot shares them.
    """
    return GameStateSnapshot(pieces=tuple(pieces), board_tiles=tuple(board_tiles))


def restore_snapshot(
    snapshot: GameStateSnapshot,
) -> tuple[list[Piece], list[BoardTile]]:
    """Get fresh piece and board tile lists from a snapshot."""
    return list(snapshot.pieces), list(snapshot.board_tiles)


def get_challenge_order(
    tile_player_id: int,
    player_count: int,
    receiving_player_id: Optional[int] = None,
) -> list[int]:
    """List the players who may challenge a tile play, in challenge order.

    Challenges go round from the player after the tile player. Neither the
    tile player nor the receiver may challenge.

    Args:
        tile_player_id: The player who played the tile.
        player_count: Number of players in the game.
        receiving_player_id: The player who received the tile.

    Returns:
        Player ids in the order they are offered the challenge.

    Example:
        >>> get_challenge_order(2, 4, 3)
        [4, 1]
    """
    order = []
    for offset in range(1, player_count):
        player_id = ((tile_player_id - 1 + offset) % player_count) + 1
        if player_id not in (tile_player_id, receiving_player_id):
            order.append(player_id)
    return order
