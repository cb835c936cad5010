"""Win condition checks for the KRED game engine.

A player wins by controlling their whole domain at the end of a
bureaucracy phase:
- a Pawn in the office
- a Heel in each rostrum
- a piece (of any tier) in all six seats
"""

from __future__ import annotations

from typing import Iterable

from core.board import ROSTRUM_SUPPORT_RULES
from core.components import Piece, PieceIndex
from core.constants import MAX_SEATS_PER_PLAYER, PieceType
from core.locations import seat_id
from core.player import Player


def check_player_win_condition(player_id: int, pieces: Iterable[Piece]) -> bool:
    """Check if a player's domain satisfies the win condition."""
    rules = ROSTRUM_SUPPORT_RULES.get(player_id)
    if rules is None:
        return False

    index = PieceIndex(pieces)

    office = index.at(rules.office)
    if office is None or office.name != PieceType.PAWN:
        return False

    for rule in rules.rostrums:
        piece = index.at(rule.rostrum)
        if piece is None or piece.name != PieceType.HEEL:
            return False

    return all(
        index.is_occupied(seat_id(player_id, seat))
        for seat in range(1, MAX_SEATS_PER_PLAYER + 1)
    )


def check_bureaucracy_win_condition(
    players: Iterable[Player], pieces: Iterable[Piece]
) -> list[int]:
    """Find every player who has won.

    Returns:
        Winning player ids in player order. More than one is a draw;
        an empty list means play continues.
    """
    pieces = list(pieces)
    return [
        player.player_id
        for player in players
        if check_player_win_condition(player.player_id, pieces)
    ]
