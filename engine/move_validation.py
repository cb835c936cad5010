"""Move legality rules for the KRED game engine.

One validator per move type. Each takes the proposed move, the acting
player, the pieces as they stand before the move (including the effect
of earlier moves in the same turn) and the player count, and returns
True if the move is legal.

Own-domain (M) moves:
- ADVANCE: community -> own seat, seat -> the rostrum it supports once
  all three supporting seats are full, rostrum -> office once both
  rostrums are full
- WITHDRAW: office -> rostrum, rostrum -> one of its supporting seats,
  seat -> community
- ORGANIZE: own seat -> adjacent seat (may cross into a neighbouring
  domain), own rostrum -> neighbouring rostrum

Opponent (O) moves:
- REMOVE: an opponent's Mark or Heel from a seat -> community
- INFLUENCE: another player's seat piece -> adjacent seat, or an
  opponent's rostrum piece -> neighbouring rostrum
- ASSIST: community -> an opponent's vacant seat

Destinations other than the community must be vacant.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import islice, permutations
from typing import Callable, Iterable, Optional, Sequence

from core.board import get_supported_rostrum, get_supporting_seats
from core.components import Piece, PieceIndex, TrackedMove
from core.constants import MAX_PLAYERS, MIN_PLAYERS, MoveType, PieceType
from core.locations import office_id, parse_location_id
from data.topology import get_topology

from .movement import (
    are_supporting_seats_full_for_rostrum,
    can_move_from_community,
    get_player_rostrum_ids,
    move_piece,
)

logger = logging.getLogger(__name__)

ADVANCE_NOT_AVAILABLE_REASON = (
    "This ADVANCE move is not available until support seats/rostrums are full"
)
UNKNOWN_MOVE_TYPE_REASON = "Unknown move type"
VALID_MOVE_REASON = "Valid move"

# Longest turn whose moves are tried in every order
MAX_ORDERED_MOVES = 3


@dataclass
class MoveValidationResult:
    """Result of validating a single move.

    Attributes:
        is_valid: Whether the move is legal.
        reason: Explanation suitable for showing to the player.
    """

    is_valid: bool
    reason: str


def _infer_player_count(pieces: Iterable[Piece]) -> int:
    # Highest domain seen on the board, never fewer than MIN_PLAYERS
    highest = MIN_PLAYERS
    for piece in pieces:
        location = parse_location_id(piece.location_id)
        if location is not None and location.player_id is not None:
            highest = max(highest, location.player_id)
    return min(highest, MAX_PLAYERS)


def _is_opponent(owner: Optional[int], player_id: int, player_count: int) -> bool:
    return owner is not None and owner != player_id and 1 <= owner <= player_count


# -----------------------------------------------------------------------------
# Own-domain moves
# -----------------------------------------------------------------------------


def validate_advance(
    move: TrackedMove,
    player_id: int,
    pieces: Iterable[Piece],
    player_count: Optional[int] = None,
) -> bool:
    """Validate an ADVANCE move.

    Args:
        move: The proposed move.
        player_id: The acting player.
        pieces: Pieces before the move.
        player_count: Unused; accepted for a uniform validator signature.

    Returns:
        True if the move is legal.
    """
    index = PieceIndex(pieces)
    source = parse_location_id(move.from_location_id)
    target = parse_location_id(move.to_location_id)
    if source is None or target is None or not target.belongs_to(player_id):
        return False
    if not index.is_vacant_for(move.to_location_id, move.piece_id):
        return False

    # Community -> own seat
    if source.is_community and target.is_seat:
        piece = index.get(move.piece_id)
        return piece is not None and can_move_from_community(piece, index)

    # Own seat -> the rostrum it supports
    if source.is_seat and target.is_rostrum:
        if not source.belongs_to(player_id):
            return False
        if get_supported_rostrum(move.from_location_id) != move.to_location_id:
            return False
        return are_supporting_seats_full_for_rostrum(move.to_location_id, index)

    # Own rostrum -> own office
    if source.is_rostrum and target.is_office:
        if not source.belongs_to(player_id):
            return False
        return all(
            index.is_occupied(rostrum)
            for rostrum in get_player_rostrum_ids(player_id, player_count or MAX_PLAYERS)
        )

    return False


def validate_withdraw(
    move: TrackedMove,
    player_id: int,
    pieces: Iterable[Piece],
    player_count: Optional[int] = None,
) -> bool:
    """Validate a WITHDRAW move.

    A rostrum piece withdraws to one of the seats supporting that rostrum.
    """
    index = PieceIndex(pieces)
    source = parse_location_id(move.from_location_id)
    target = parse_location_id(move.to_location_id)
    if source is None or target is None or not source.belongs_to(player_id):
        return False

    if source.is_seat:
        return target.is_community

    if not index.is_vacant_for(move.to_location_id, move.piece_id):
        return False

    if source.is_rostrum:
        return move.to_location_id in get_supporting_seats(move.from_location_id)

    if source.is_office:
        return target.is_rostrum and target.belongs_to(player_id)

    return False


def validate_organize(
    move: TrackedMove,
    player_id: int,
    pieces: Iterable[Piece],
    player_count: Optional[int] = None,
) -> bool:
    """Validate an ORGANIZE move."""
    pieces = list(pieces)
    index = PieceIndex(pieces)
    source = parse_location_id(move.from_location_id)
    target = parse_location_id(move.to_location_id)
    if source is None or target is None or not source.belongs_to(player_id):
        return False
    if not index.is_vacant_for(move.to_location_id, move.piece_id):
        return False

    topology = get_topology(player_count or _infer_player_count(pieces))
    if topology is None:
        return False

    if source.is_seat and target.is_seat:
        return topology.are_seats_adjacent(move.from_location_id, move.to_location_id)

    if source.is_rostrum and target.is_rostrum:
        return move.to_location_id in topology.get_rostrum_neighbours(move.from_location_id)

    return False


# -----------------------------------------------------------------------------
# Opponent moves
# -----------------------------------------------------------------------------


def validate_remove(
    move: TrackedMove,
    player_id: int,
    pieces: Iterable[Piece],
    player_count: Optional[int] = None,
) -> bool:
    """Validate a REMOVE move. Only Marks and Heels can be removed."""
    pieces = list(pieces)
    source = parse_location_id(move.from_location_id)
    target = parse_location_id(move.to_location_id)
    if source is None or target is None:
        return False
    if not (source.is_seat and target.is_community):
        return False

    count = player_count or _infer_player_count(pieces)
    if not _is_opponent(source.player_id, player_id, count):
        return False

    piece = PieceIndex(pieces).get(move.piece_id)
    return piece is not None and piece.name in (PieceType.MARK, PieceType.HEEL)


def validate_influence(
    move: TrackedMove,
    player_id: int,
    pieces: Iterable[Piece],
    player_count: Optional[int] = None,
) -> bool:
    """Validate an INFLUENCE move."""
    pieces = list(pieces)
    index = PieceIndex(pieces)
    source = parse_location_id(move.from_location_id)
    target = parse_location_id(move.to_location_id)
    if source is None or target is None:
        return False

    count = player_count or _infer_player_count(pieces)
    if not _is_opponent(source.player_id, player_id, count):
        return False
    if not index.is_vacant_for(move.to_location_id, move.piece_id):
        return False

    topology = get_topology(count)
    if topology is None:
        return False

    if source.is_seat and target.is_seat:
        return topology.are_seats_adjacent(move.from_location_id, move.to_location_id)

    if source.is_rostrum and target.is_rostrum:
        return move.to_location_id in topology.get_rostrum_neighbours(move.from_location_id)

    return False


def validate_assist(
    move: TrackedMove,
    player_id: int,
    pieces: Iterable[Piece],
    player_count: Optional[int] = None,
) -> bool:
    """Validate an ASSIST move."""
    pieces = list(pieces)
    index = PieceIndex(pieces)
    source = parse_location_id(move.from_location_id)
    target = parse_location_id(move.to_location_id)
    if source is None or target is None:
        return False
    if not (source.is_community and target.is_seat):
        return False

    count = player_count or _infer_player_count(pieces)
    if not _is_opponent(target.player_id, player_id, count):
        return False
    if index.is_occupied(move.to_location_id):
        return False

    piece = index.get(move.piece_id)
    return piece is not None and can_move_from_community(piece, index)


# -----------------------------------------------------------------------------
# Dispatch
# -----------------------------------------------------------------------------

MOVE_VALIDATORS: dict[
    MoveType, Callable[[TrackedMove, int, Iterable[Piece], Optional[int]], bool]
] = {
    MoveType.ADVANCE: validate_advance,
    MoveType.WITHDRAW: validate_withdraw,
    MoveType.ORGANIZE: validate_organize,
    MoveType.REMOVE: validate_remove,
    MoveType.INFLUENCE: validate_influence,
    MoveType.ASSIST: validate_assist,
}


def validate_single_move(
    move: TrackedMove,
    player_id: int,
    pieces: Iterable[Piece],
    player_count: Optional[int] = None,
) -> MoveValidationResult:
    """Validate a move against the rules for its claimed move type.

    Args:
        move: The proposed move.
        player_id: The acting player.
        pieces: Pieces before the move.
        player_count: Number of players in the game.

    Returns:
        MoveValidationResult. Unknown move types are reported as invalid
        rather than raised.
    """
    validator = MOVE_VALIDATORS.get(move.move_type)
    if validator is None:
        return MoveValidationResult(is_valid=False, reason=UNKNOWN_MOVE_TYPE_REASON)

    if validator(move, player_id, pieces, player_count):
        return MoveValidationResult(is_valid=True, reason=VALID_MOVE_REASON)

    if move.move_type == MoveType.ADVANCE:
        reason = ADVANCE_NOT_AVAILABLE_REASON
    else:
        reason = (
            f"{move.move_type.value} move from {move.from_location_id} "
            f"to {move.to_location_id} is not allowed"
        )
    logger.debug("Player %s: %s", player_id, reason)
    return MoveValidationResult(is_valid=False, reason=reason)


def _validate_in_order(
    moves: Sequence[TrackedMove],
    player_id: int,
    pieces: list[Piece],
    player_count: int,
) -> MoveValidationResult:
    current = pieces
    for move in moves:
        result = validate_single_move(move, player_id, current, player_count)
        if not result.is_valid:
            return MoveValidationResult(
                is_valid=False,
                reason=f"{move.move_type.value} move validation failed: {result.reason}",
            )
        if move.to_location_id is not None:
            current = move_piece(current, move.piece_id, move.to_location_id, player_count)
    return MoveValidationResult(is_valid=True, reason=VALID_MOVE_REASON)


def validate_move_sequence(
    moves: Iterable[TrackedMove],
    player_id: int,
    pieces: Iterable[Piece],
    player_count: int,
) -> MoveValidationResult:
    """Validate the moves of one turn, each against the layout left by the previous.

    Moves worked out by comparing two layouts carry no record of which
    came first, so the turn is legal if any ordering of its moves is.
    Turns longer than MAX_ORDERED_MOVES are only checked in the given
    order.

    Args:
        moves: The moves of one turn.
        player_id: The acting player.
        pieces: Pieces at the start of the turn.
        player_count: Number of players in the game.

    Returns:
        A valid result if some ordering is legal, otherwise the failure
        for the given order.
    """
    moves = list(moves)
    pieces = list(pieces)
    first = _validate_in_order(moves, player_id, pieces, player_count)
    if first.is_valid or len(moves) > MAX_ORDERED_MOVES:
        return first

    for ordering in islice(permutations(moves), 1, None):
        if _validate_in_order(ordering, player_id, pieces, player_count).is_valid:
            logger.debug(
                "Moves legal when reordered: %s", [m.piece_id for m in ordering]
            )
            return MoveValidationResult(is_valid=True, reason=VALID_MOVE_REASON)
    return first
