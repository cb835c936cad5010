"""Tile play validation for the KRED game engine.

Checks the moves made during one tile play:
1. No more than two moves, and no two of the same category
2. Which of the tile's required moves were performed or are missing
3. Which missing moves are excused because the board made them
   impossible (an empty domain cannot WITHDRAW; nobody can ASSIST when
   every opponent seat is full)
4. Whether the receiver may reject the tile
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from core.components import Piece, TrackedMove
from core.constants import (
    MAX_MOVES_PER_TILE_PLAY,
    MAX_SEATS_PER_PLAYER,
    MoveCategory,
    MoveType,
)
from core.locations import parse_location_id
from core.player import Player
from core.tiles import TileKey, get_tile_requirements

logger = logging.getLogger(__name__)

TOO_MANY_MOVES_ERROR = "Maximum 2 moves allowed per tile play"
SAME_CATEGORY_ERROR = "You may NOT perform 2 actions of the same category"

MoveLike = Union[TrackedMove, MoveType]


@dataclass
class TilePlayValidationResult:
    """Result of checking the move count/category limits.

    Attributes:
        is_valid: Whether the moves respect the limits.
        error: Why they do not, if they do not.
    """

    is_valid: bool
    error: Optional[str] = None


@dataclass
class TileRequirementResult:
    """Result of checking a tile's required moves.

    Attributes:
        is_met: True when nothing required is missing.
        required_moves: Moves the tile requires.
        performed_moves: Move types performed, in order.
        missing_moves: Required moves neither performed nor excused.
        impossible_moves: Required moves excused by the board state.
    """

    is_met: bool
    required_moves: list[MoveType] = field(default_factory=list)
    performed_moves: list[MoveType] = field(default_factory=list)
    missing_moves: list[MoveType] = field(default_factory=list)
    impossible_moves: list[MoveType] = field(default_factory=list)


def _move_types(moves: Iterable[MoveLike]) -> list[MoveType]:
    return [m.move_type if isinstance(m, TrackedMove) else m for m in moves]


def validate_moves_for_tile_play(moves: Iterable[TrackedMove]) -> TilePlayValidationResult:
    """Check the move count and category limits of a tile play.

    Args:
        moves: Moves performed during the tile play.

    Returns:
        TilePlayValidationResult.
    """
    moves = list(moves)
    if len(moves) > MAX_MOVES_PER_TILE_PLAY:
        return TilePlayValidationResult(is_valid=False, error=TOO_MANY_MOVES_ERROR)

    for category in MoveCategory:
        if sum(1 for m in moves if m.category == category) > 1:
            return TilePlayValidationResult(is_valid=False, error=SAME_CATEGORY_ERROR)

    return TilePlayValidationResult(is_valid=True)


def validate_tile_requirements(
    tile_id: TileKey, moves: Iterable[MoveLike]
) -> TileRequirementResult:
    """Compare the moves performed with those the tile requires.

    Unknown tiles and the blank tile have no requirements and are always met.
    """
    performed = _move_types(moves)
    requirement = get_tile_requirements(tile_id)
    if requirement is None or not requirement.required_moves:
        return TileRequirementResult(is_met=True, performed_moves=performed)

    missing = [m for m in requirement.required_moves if m not in performed]
    return TileRequirementResult(
        is_met=not missing,
        required_moves=list(requirement.required_moves),
        performed_moves=performed,
        missing_moves=missing,
    )


def is_withdraw_impossible(tile_player_id: int, pieces_at_turn_start: Iterable[Piece]) -> bool:
    """Check if the player's domain was empty at the start of the turn."""
    for piece in pieces_at_turn_start:
        location = parse_location_id(piece.location_id)
        if location is not None and location.belongs_to(tile_player_id):
            return False
    return True


def is_assist_impossible(
    tile_player_id: int,
    current_pieces: Iterable[Piece],
    all_players: Iterable[Player],
) -> bool:
    """Check if every opponent has all of their seats occupied."""
    seats_filled: dict[int, int] = {}
    for piece in current_pieces:
        location = parse_location_id(piece.location_id)
        if location is not None and location.is_seat:
            seats_filled[location.player_id] = seats_filled.get(location.player_id, 0) + 1

    return all(
        seats_filled.get(p.player_id, 0) >= MAX_SEATS_PER_PLAYER
        for p in all_players
        if p.player_id != tile_player_id
    )


def validate_tile_requirements_with_impossible_move_exceptions(
    tile_id: TileKey,
    moves: Iterable[MoveLike],
    tile_player_id: int,
    pieces_at_turn_start: Iterable[Piece],
    current_pieces: Iterable[Piece],
    all_players: Iterable[Player],
    player_count: int,
) -> TileRequirementResult:
    """Compare performed and required moves, excusing impossible ones.

    Args:
        tile_id: The tile that was played.
        moves: Moves performed during the tile play.
        tile_player_id: The player who played the tile.
        pieces_at_turn_start: Layout before any move of this turn.
        current_pieces: Layout now.
        all_players: Every player in the game.
        player_count: Number of players in the game.

    Returns:
        TileRequirementResult with impossible_moves filled in.
    """
    performed = _move_types(moves)
    requirement = get_tile_requirements(tile_id)
    if requirement is None or not requirement.required_moves:
        return TileRequirementResult(is_met=True, performed_moves=performed)

    required = list(requirement.required_moves)
    impossible: list[MoveType] = []

    if (
        MoveType.WITHDRAW in required
        and MoveType.WITHDRAW not in performed
        and is_withdraw_impossible(tile_player_id, pieces_at_turn_start)
    ):
        impossible.append(MoveType.WITHDRAW)

    if (
        MoveType.ASSIST in required
        and MoveType.ASSIST not in performed
        and is_assist_impossible(tile_player_id, current_pieces, all_players)
    ):
        impossible.append(MoveType.ASSIST)

    missing = [m for m in required if m not in performed and m not in impossible]
    if impossible:
        logger.debug(
            "Tile %s by player %s: excused %s (%d players)",
            tile_id,
            tile_player_id,
            [m.value for m in impossible],
            player_count,
        )

    return TileRequirementResult(
        is_met=not missing,
        required_moves=required,
        performed_moves=performed,
        missing_moves=missing,
        impossible_moves=impossible,
    )


def are_all_tile_requirements_met(tile_id: TileKey, moves: Iterable[MoveLike]) -> bool:
    """Check if every required move of the tile was performed."""
    requirement = get_tile_requirements(tile_id)
    if requirement is None or not requirement.required_moves:
        return True
    performed = _move_types(moves)
    return all(m in performed for m in requirement.required_moves)


def can_tile_be_rejected(
    tile_id: TileKey,
    moves: Iterable[MoveLike],
    execution_was_possible: bool,
) -> bool:
    """Decide whether the receiver may reject a tile play.

    Args:
        tile_id: The tile that was played.
        moves: Moves performed during the tile play.
        execution_was_possible: False when the board prevented the
            tile's moves; such plays can never be rejected.

    Returns:
        True if the tile may be rejected.
    """
    if not execution_was_possible:
        return False

    performed = _move_types(moves)
    requirement = get_tile_requirements(tile_id)
    if requirement is None or not requirement.required_moves:
        # Blank or unknown tile: rejectable only if the player moved anything
        return len(performed) > 0

    return not are_all_tile_requirements_met(tile_id, performed)
