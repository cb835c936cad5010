"""Derive tracked moves from two piece layouts.

Players move pieces freely on the board; at the end of a tile play or a
purchased move the engine compares the layout before and after and works
out which defined move each displacement corresponds to.
"""

from __future__ import annotations

from typing import Iterable, Optional

from core.components import Piece, PieceIndex, TrackedMove
from core.constants import MoveType, PieceType
from core.locations import LocationId, LocationKind, parse_location_id
from core.moves import get_move_category
from data.topology import are_seats_adjacent

# (from kind, to kind) displacements that can be a defined move
_COUNTED_TRANSITIONS = {
    (LocationKind.COMMUNITY, LocationKind.SEAT),
    (LocationKind.COMMUNITY, LocationKind.ROSTRUM),
    (LocationKind.COMMUNITY, LocationKind.OFFICE),
    (LocationKind.SEAT, LocationKind.COMMUNITY),
    (LocationKind.SEAT, LocationKind.SEAT),
    (LocationKind.SEAT, LocationKind.ROSTRUM),
    (LocationKind.ROSTRUM, LocationKind.SEAT),
    (LocationKind.ROSTRUM, LocationKind.OFFICE),
    (LocationKind.ROSTRUM, LocationKind.ROSTRUM),
    (LocationKind.ROSTRUM, LocationKind.COMMUNITY),
    (LocationKind.OFFICE, LocationKind.ROSTRUM),
    (LocationKind.OFFICE, LocationKind.COMMUNITY),
}


def should_count_move(
    from_location_id: Optional[LocationId], to_location_id: Optional[LocationId]
) -> bool:
    """Check if a displacement between two locations can be a defined move."""
    source = parse_location_id(from_location_id)
    target = parse_location_id(to_location_id)
    if source is None or target is None:
        return False
    return (source.kind, target.kind) in _COUNTED_TRANSITIONS


def determine_move_type(
    from_location_id: Optional[LocationId],
    to_location_id: Optional[LocationId],
    player_id: int,
    pieces: Iterable[Piece],
    piece_id: str,
    player_count: int,
) -> Optional[MoveType]:
    """Work out which defined move a displacement is.

    Args:
        from_location_id: Where the piece was.
        to_location_id: Where the piece is now.
        player_id: The player who made the move.
        pieces: Current pieces, used to look up the moved piece's tier.
        piece_id: The moved piece.
        player_count: Number of players in the game.

    Returns:
        The move type, or None if the displacement is not a defined move.
    """
    source = parse_location_id(from_location_id)
    target = parse_location_id(to_location_id)
    if source is None or target is None:
        return None

    if source.is_community and target.is_seat:
        return MoveType.ADVANCE if target.belongs_to(player_id) else MoveType.ASSIST

    if source.is_seat and target.is_rostrum:
        return MoveType.ADVANCE
    if source.is_rostrum and target.is_office:
        return MoveType.ADVANCE
    if source.is_rostrum and target.is_seat:
        return MoveType.WITHDRAW
    if source.is_office and target.is_rostrum:
        return MoveType.WITHDRAW

    if source.is_seat and target.is_community:
        if source.belongs_to(player_id):
            return MoveType.WITHDRAW
        piece = PieceIndex(pieces).get(piece_id)
        if piece is not None and piece.name in (PieceType.MARK, PieceType.HEEL):
            return MoveType.REMOVE
        return None

    if source.is_seat and target.is_seat:
        if not are_seats_adjacent(from_location_id, to_location_id, player_count):
            return None
        return MoveType.ORGANIZE if source.belongs_to(player_id) else MoveType.INFLUENCE

    if source.is_rostrum and target.is_rostrum:
        return MoveType.ORGANIZE if source.belongs_to(player_id) else MoveType.INFLUENCE

    return None


def calculate_moves(
    original_pieces: Iterable[Piece],
    current_pieces: Iterable[Piece],
    player_id: int,
    player_count: int,
) -> list[TrackedMove]:
    """Compare two layouts and list the defined moves between them.

    Pieces that did not move, moved between locations that cannot be a
    defined move, or whose displacement matches no move type are skipped.

    Args:
        original_pieces: Layout at the start of the turn or purchase.
        current_pieces: Layout now.
        player_id: The player who moved the pieces.
        player_count: Number of players in the game.

    Returns:
        Tracked moves in current-piece order, timestamped by position.
    """
    before = PieceIndex(original_pieces)
    current = list(current_pieces)
    moves: list[TrackedMove] = []

    for piece in current:
        initial = before.get(piece.id)
        if initial is None or initial.location_id == piece.location_id:
            continue
        if not should_count_move(initial.location_id, piece.location_id):
            continue

        move_type = determine_move_type(
            initial.location_id,
            piece.location_id,
            player_id,
            current,
            piece.id,
            player_count,
        )
        if move_type is None:
            continue

        moves.append(
            TrackedMove(
                piece_id=piece.id,
                move_type=move_type,
                category=get_move_category(move_type),
                from_location_id=initial.location_id,
                to_location_id=piece.location_id,
                from_position=initial.position,
                to_position=piece.position,
                timestamp=float(len(moves)),
            )
        )

    return moves
