"""Piece movement helpers for the KRED game engine.

Board queries shared by the move validators (community priority, rostrum
support) and the operations that produce new piece lists when a piece is
moved. Nothing here mutates its inputs.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

from core.board import get_rostrum_support_rules, get_supporting_seats, ROSTRUM_SUPPORT_RULES
from core.components import Piece, PieceIndex, Position, TrackedMove
from core.constants import PieceType
from core.locations import LocationId, parse_location_id
from data.board_layouts import BOARD_CENTERS, get_drop_location

DEFAULT_BOARD_CENTER = Position(top=50.0, left=50.0)


def can_move_from_community(
    piece: Piece,
    pieces: Iterable[Piece],
    pending_piece_ids: Optional[set[str]] = None,
) -> bool:
    """Check the community priority rule for a piece leaving the community.

    Marks may always leave. A Heel may leave only while no Mark is in the
    community, and a Pawn only while neither Marks nor Heels are.

    Args:
        piece: The piece leaving the community.
        pieces: All pieces.
        pending_piece_ids: Pieces that just entered the community this turn
            and are not counted.

    Returns:
        True if the piece may leave the community.
    """
    if piece.name == PieceType.MARK:
        return True

    pending = pending_piece_ids or set()
    waiting = {
        p.name
        for p in PieceIndex(pieces).in_community()
        if p.id not in pending
    }

    if PieceType.MARK in waiting:
        return False
    if piece.name == PieceType.PAWN:
        return PieceType.HEEL not in waiting
    return True


def count_pieces_in_seats(seat_ids: Iterable[LocationId], pieces: Iterable[Piece]) -> int:
    seats = set(seat_ids)
    return sum(1 for p in pieces if p.location_id in seats)


def are_supporting_seats_full_for_rostrum(
    rostrum_id: LocationId, pieces: Iterable[Piece]
) -> bool:
    """Check if all three seats supporting a rostrum are occupied."""
    seats = get_supporting_seats(rostrum_id)
    if not seats:
        return False
    return count_pieces_in_seats(seats, pieces) == len(seats)


def count_pieces_in_player_rostrums(player_id: int, pieces: Iterable[Piece]) -> int:
    rules = ROSTRUM_SUPPORT_RULES.get(player_id)
    if rules is None:
        return 0
    rostrums = {r.rostrum for r in rules.rostrums}
    return sum(1 for p in pieces if p.location_id in rostrums)


def are_both_rostrums_filled_for_player(player_id: int, pieces: Iterable[Piece]) -> bool:
    rules = ROSTRUM_SUPPORT_RULES.get(player_id)
    if rules is None:
        return False
    index = PieceIndex(pieces)
    return all(index.is_occupied(r.rostrum) for r in rules.rostrums)


def calculate_piece_rotation(
    position: Position,
    player_count: int,
    location_id: Optional[LocationId] = None,
) -> float:
    """Calculate the rotation that makes a piece face away from the board center.

    Community and office pieces are not rotated.

    Args:
        position: Where the piece sits.
        player_count: Selects the board center.
        location_id: The location the piece sits on, if any.

    Returns:
        Rotation in degrees.
    """
    location = parse_location_id(location_id)
    if location is not None and (location.is_community or location.is_office):
        return 0.0

    center = BOARD_CENTERS.get(player_count, DEFAULT_BOARD_CENTER)
    dx = position.left - center.left
    dy = position.top - center.top
    return math.degrees(math.atan2(dy, dx)) + 90


def move_piece(
    pieces: Iterable[Piece],
    piece_id: str,
    to_location_id: LocationId,
    player_count: int,
) -> list[Piece]:
    """Move one piece to a drop location.

    The piece takes the location's position and the matching rotation.
    Unknown pieces or locations leave the layout unchanged.

    Returns:
        A new list of pieces.
    """
    drop = get_drop_location(player_count, to_location_id)
    result = []
    for piece in pieces:
        if piece.id == piece_id and drop is not None:
            rotation = calculate_piece_rotation(drop.position, player_count, drop.id)
            piece = piece.moved_to(drop.id, drop.position, rotation)
        result.append(piece)
    return result


def apply_moves(
    pieces: Iterable[Piece], moves: Iterable[TrackedMove], player_count: int
) -> list[Piece]:
    """Apply tracked moves in order, returning the resulting pieces."""
    result = list(pieces)
    for move in moves:
        if move.to_location_id is not None:
            result = move_piece(result, move.piece_id, move.to_location_id, player_count)
    return result


def get_player_rostrum_ids(player_id: int, player_count: int) -> list[LocationId]:
    rules = get_rostrum_support_rules(player_count).get(player_id)
    return [r.rostrum for r in rules.rostrums] if rules is not None else []
