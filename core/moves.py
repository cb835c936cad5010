"""Move definitions and tile play options for the KRED game engine.

There are six defined moves. Three are category O (they act on an
opponent's domain and are optional), three are category M (they act on
the player's own domain and are mandatory when a tile asks for them).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .constants import (
    MoveCategory,
    MoveRequirement,
    MoveType,
    TilePlayOptionType,
)


@dataclass(frozen=True)
class DefinedMove:
    """Static description of a move type.

    Attributes:
        type: The move type.
        category: O (opponent) or M (own domain).
        requirement: Whether the move is mandatory when required by a tile.
        description: Rules text.
        options: The alternative ways the move can be carried out.
        can_target_own_domain: Whether the move may act on the mover's domain.
        can_target_opponent_domain: Whether the move may act on an opponent.
        affects_community: Whether pieces enter or leave the community.
    """

    type: MoveType
    category: MoveCategory
    requirement: MoveRequirement
    description: str
    options: tuple[str, ...]
    can_target_own_domain: bool
    can_target_opponent_domain: bool
    affects_community: bool


@dataclass(frozen=True)
class TilePlayOption:
    """A permitted combination of moves for a single tile play."""

    option_type: TilePlayOptionType
    description: str
    allowed_move_types: tuple[MoveType, ...]
    max_optional_moves: int
    max_mandatory_moves: int
    requires_action: bool


DEFINED_MOVES: dict[MoveType, DefinedMove] = {
    MoveType.REMOVE: DefinedMove(
        type=MoveType.REMOVE,
        category=MoveCategory.O,
        requirement=MoveRequirement.OPTIONAL,
        description=(
            "(O) Remove - Take a Mark or a Heel from a seat in an opponent's "
            "domain and return it to the community."
        ),
        options=(
            "a. Take a Mark or Heel from an opponent's seat",
            "b. Return the piece to the community",
        ),
        can_target_own_domain=False,
        can_target_opponent_domain=True,
        affects_community=True,
    ),
    MoveType.ADVANCE: DefinedMove(
        type=MoveType.ADVANCE,
        category=MoveCategory.M,
        requirement=MoveRequirement.MANDATORY,
        description="(M) Advance - Player's choice of ONE of the following",
        options=(
            "a. Take a piece from the community and add it to an open seat in their domain",
            "b. Take a piece from a seat in their domain and place it into the open "
            "Rostrum that that seat supports",
            "c. Take a piece from a Rostrum in their domain and place it into the "
            "office in their domain",
        ),
        can_target_own_domain=True,
        can_target_opponent_domain=False,
        affects_community=True,
    ),
    MoveType.INFLUENCE: DefinedMove(
        type=MoveType.INFLUENCE,
        category=MoveCategory.O,
        requirement=MoveRequirement.OPTIONAL,
        description=(
            "(O) Influence - A player may move another player's piece from a seat "
            "to an adjacent seat (even if that seat is in another player's domain), "
            "OR from an opponent's rostrum to an adjacent rostrum in another "
            "player's domain."
        ),
        options=(
            "a. Move another player's piece from a seat to an adjacent seat",
            "b. Move another player's piece from a rostrum to an adjacent rostrum "
            "in another player's domain",
        ),
        can_target_own_domain=False,
        can_target_opponent_domain=True,
        affects_community=False,
    ),
    MoveType.ASSIST: DefinedMove(
        type=MoveType.ASSIST,
        category=MoveCategory.O,
        requirement=MoveRequirement.OPTIONAL,
        description=(
            "(O) Assist - A player may add a piece from the community to an "
            "opponent's vacant seat."
        ),
        options=(
            "a. Take a piece from the community and add it to an opponent's vacant seat",
        ),
        can_target_own_domain=False,
        can_target_opponent_domain=True,
        affects_community=True,
    ),
    MoveType.WITHDRAW: DefinedMove(
        type=MoveType.WITHDRAW,
        category=MoveCategory.M,
        requirement=MoveRequirement.MANDATORY,
        description=(
            "(M) Withdraw - A player MUST do one of the following UNLESS they "
            "have 0 pieces in their domain"
        ),
        options=(
            "a. Move a piece from an office to a vacant rostrum in their domain",
            "b. Move a piece from a rostrum in their domain to a vacant seat in their domain",
            "c. Move a piece from a seat in their domain to the community",
        ),
        can_target_own_domain=True,
        can_target_opponent_domain=False,
        affects_community=True,
    ),
    MoveType.ORGANIZE: DefinedMove(
        type=MoveType.ORGANIZE,
        category=MoveCategory.M,
        requirement=MoveRequirement.MANDATORY,
        description="(M) Organize - A player must do one of the following",
        options=(
            "a. Move a piece from a seat in their domain to an adjacent seat, even if "
            "it ends up in an opponent's domain",
            "b. Move a piece from a rostrum in their domain to an adjacent rostrum in "
            "an opponent's domain",
        ),
        can_target_own_domain=True,
        can_target_opponent_domain=True,
        affects_community=False,
    ),
}

OPTIONAL_MOVE_TYPES = (MoveType.REMOVE, MoveType.INFLUENCE, MoveType.ASSIST)
MANDATORY_MOVE_TYPES = (MoveType.ADVANCE, MoveType.WITHDRAW, MoveType.ORGANIZE)

TILE_PLAY_OPTIONS: dict[TilePlayOptionType, TilePlayOption] = {
    TilePlayOptionType.NO_MOVE: TilePlayOption(
        option_type=TilePlayOptionType.NO_MOVE,
        description="Do nothing. The tile play is complete.",
        allowed_move_types=(),
        max_optional_moves=0,
        max_mandatory_moves=0,
        requires_action=False,
    ),
    TilePlayOptionType.ONE_OPTIONAL: TilePlayOption(
        option_type=TilePlayOptionType.ONE_OPTIONAL,
        description="Execute one Optional move (REMOVE, INFLUENCE, or ASSIST)",
        allowed_move_types=OPTIONAL_MOVE_TYPES,
        max_optional_moves=1,
        max_mandatory_moves=0,
        requires_action=True,
    ),
    TilePlayOptionType.ONE_MANDATORY: TilePlayOption(
        option_type=TilePlayOptionType.ONE_MANDATORY,
        description="Execute one Mandatory move (ADVANCE, WITHDRAW, or ORGANIZE)",
        allowed_move_types=MANDATORY_MOVE_TYPES,
        max_optional_moves=0,
        max_mandatory_moves=1,
        requires_action=True,
    ),
    TilePlayOptionType.ONE_OPTIONAL_AND_ONE_MANDATORY: TilePlayOption(
        option_type=TilePlayOptionType.ONE_OPTIONAL_AND_ONE_MANDATORY,
        description="Execute one Optional move AND one Mandatory move in any order",
        allowed_move_types=OPTIONAL_MOVE_TYPES + MANDATORY_MOVE_TYPES,
        max_optional_moves=1,
        max_mandatory_moves=1,
        requires_action=True,
    ),
}


def is_move_allowed_in_tile_play_option(
    move_type: MoveType, option_type: TilePlayOptionType
) -> bool:
    """Check if a move type may be used under a tile play option.

    Args:
        move_type: The move type to check.
        option_type: The tile play option in effect.

    Returns:
        True if the option lists the move type, False otherwise
        (including for unknown options).
    """
    option = TILE_PLAY_OPTIONS.get(option_type)
    if option is None:
        return False
    return move_type in option.allowed_move_types


def get_move_requirement(move_type: MoveType) -> MoveRequirement:
    """Get the requirement of a move type, OPTIONAL if it is unknown."""
    move = DEFINED_MOVES.get(move_type)
    return move.requirement if move is not None else MoveRequirement.OPTIONAL


def get_move_category(move_type: MoveType) -> Optional[MoveCategory]:
    """Get the category of a move type, None if it is unknown."""
    move = DEFINED_MOVES.get(move_type)
    return move.category if move is not None else None
