"""Bureaucracy phase rules for the KRED game engine.

Between campaign rounds every player spends the Kredcoin value of their
banked tiles on the bureaucracy menu. This module holds the pure rules:
- Kredcoin totals and the purchasing order
- Menu selection and affordability
- Promotion (exchange a seated piece with a higher tier from the community)
- Validation of purchased moves and promotions
- Paying for a purchase with banked tiles
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from core.bureaucracy import (
    FIVE_PLAYER_BUREAUCRACY_MENU,
    THREE_FOUR_PLAYER_BUREAUCRACY_MENU,
    BureaucracyMenuItem,
)
from core.components import Piece, PieceIndex
from core.constants import (
    NEXT_PIECE_TIER,
    TILE_KREDCOIN_VALUES,
    MoveType,
    PromotionLocation,
)
from core.locations import is_community
from core.player import Player

from .move_calculation import calculate_moves
from .move_validation import (
    UNKNOWN_MOVE_TYPE_REASON,
    VALID_MOVE_REASON,
    MoveValidationResult,
    validate_move_sequence,
)

logger = logging.getLogger(__name__)

VALID_PROMOTION_REASON = "Valid promotion"
NO_MOVES_REASON = "No moves were performed"

_PROMOTION_LOCATION_REASONS = {
    PromotionLocation.OFFICE: "Piece must be in the Office for this promotion",
    PromotionLocation.ROSTRUM: "Piece must be in a Rostrum for this promotion",
    PromotionLocation.SEAT: "Piece must be in a Seat for this promotion",
}

_PROMOTION_LOCATION_PREFIXES = {
    PromotionLocation.OFFICE: "office",
    PromotionLocation.ROSTRUM: "rostrum",
    PromotionLocation.SEAT: "seat",
}


@dataclass
class PromotionValidationResult:
    """Result of checking a promotion the player performed.

    Attributes:
        is_valid: Whether the promotion followed the rules.
        reason: Explanation suitable for showing to the player.
    """

    is_valid: bool
    reason: str


@dataclass
class PromotionResult:
    """Result of performing a promotion.

    Attributes:
        pieces: The pieces after the exchange (the input on failure).
        success: Whether the promotion was performed.
        reason: Why it failed, if it did.
    """

    pieces: list[Piece]
    success: bool
    reason: Optional[str] = None


# -----------------------------------------------------------------------------
# Kredcoin and turn order
# -----------------------------------------------------------------------------


def calculate_player_kredcoin(player: Player) -> int:
    """Sum the Kredcoin value of a player's banked tiles.

    Tiles with no listed value count as 0.
    """
    return sum(TILE_KREDCOIN_VALUES.get(tile.id, 0) for tile in player.bureaucracy_tiles)


def get_bureaucracy_turn_order(players: Iterable[Player]) -> list[int]:
    """Order players for the bureaucracy phase.

    Args:
        players: Every player in the game.

    Returns:
        Player ids, richest first; ties go to the lower id.
    """
    ranked = sorted(players, key=lambda p: (-calculate_player_kredcoin(p), p.player_id))
    return [p.player_id for p in ranked]


def get_bureaucracy_menu(player_count: int) -> tuple[BureaucracyMenuItem, ...]:
    """Get the menu for a game size. 5-player games use the cheaper menu."""
    if player_count == 5:
        return FIVE_PLAYER_BUREAUCRACY_MENU
    return THREE_FOUR_PLAYER_BUREAUCRACY_MENU


def get_available_purchases(
    menu: Iterable[BureaucracyMenuItem], remaining_kredcoin: int
) -> list[BureaucracyMenuItem]:
    """Filter a menu to the items a player can afford, keeping menu order."""
    return [item for item in menu if item.price <= remaining_kredcoin]


# -----------------------------------------------------------------------------
# Promotions
# -----------------------------------------------------------------------------


def validate_promotion(
    pieces: Sequence[Piece],
    piece_id: str,
    expected_location: PromotionLocation,
    player_id: int,
    before_pieces: Sequence[Piece],
) -> PromotionValidationResult:
    """Check that a promotion purchase was carried out correctly.

    The promoted piece must have sat in the expected part of the buyer's
    domain, been a Mark or Heel, ended in the community, and been replaced
    by a piece of the next tier.

    Args:
        pieces: Pieces after the promotion.
        piece_id: The piece that was promoted.
        expected_location: Where the purchased promotion applies.
        player_id: The buyer.
        before_pieces: Pieces before the promotion.

    Returns:
        PromotionValidationResult.
    """
    before = PieceIndex(before_pieces).get(piece_id)
    after = PieceIndex(pieces).get(piece_id)

    if before is None:
        return PromotionValidationResult(False, "Original piece not found")
    if after is None:
        return PromotionValidationResult(False, "Piece not found after promotion")
    if not before.location_id:
        return PromotionValidationResult(False, "Piece was not in a valid location")

    match = re.match(rf"^p{player_id}_(office|rostrum\d+|seat\d+)$", before.location_id)
    if match is None:
        return PromotionValidationResult(
            False, f"Piece must be in Player {player_id}'s domain"
        )

    if not match.group(1).startswith(_PROMOTION_LOCATION_PREFIXES[expected_location]):
        return PromotionValidationResult(
            False, _PROMOTION_LOCATION_REASONS[expected_location]
        )

    target_tier = NEXT_PIECE_TIER.get(before.name)
    if target_tier is None:
        return PromotionValidationResult(False, "Only Marks and Heels can be promoted")

    if not is_community(after.location_id):
        return PromotionValidationResult(False, "Promoted piece must move to community")

    replacement = PieceIndex(pieces).at(before.location_id)
    if replacement is None or replacement.name != target_tier:
        return PromotionValidationResult(
            False,
            f"A {target_tier.value} from the community must now occupy "
            f"the promoted piece's location",
        )

    return PromotionValidationResult(True, VALID_PROMOTION_REASON)


def perform_promotion(pieces: Sequence[Piece], piece_id: str) -> PromotionResult:
    """Exchange a piece with a community piece of the next tier.

    The two pieces trade location, position and rotation. Every other
    piece is returned as the same object.

    Args:
        pieces: Current pieces.
        piece_id: The piece to promote.

    Returns:
        PromotionResult with the new piece list.
    """
    pieces = list(pieces)
    index = PieceIndex(pieces)
    promoted = index.get(piece_id)
    if promoted is None:
        return PromotionResult(pieces, False, "Piece not found")

    target_tier = NEXT_PIECE_TIER.get(promoted.name)
    if target_tier is None:
        return PromotionResult(pieces, False, "Pawns cannot be promoted further")

    replacement = next(
        (p for p in index.in_community() if p.name == target_tier), None
    )
    if replacement is None:
        return PromotionResult(
            pieces,
            False,
            f"No {target_tier.value} available in community for promotion",
        )

    result = []
    for piece in pieces:
        if piece.id == promoted.id:
            piece = piece.moved_to(
                replacement.location_id, replacement.position, replacement.rotation
            )
        elif piece.id == replacement.id:
            piece = piece.moved_to(
                promoted.location_id, promoted.position, promoted.rotation
            )
        result.append(piece)

    logger.debug(
        "Promoted %s at %s: %s %s takes its place",
        promoted.id,
        promoted.location_id,
        target_tier.value,
        replacement.id,
    )
    return PromotionResult(result, True)


def find_promoted_pieces(
    before_pieces: Iterable[Piece], pieces: Iterable[Piece]
) -> list[str]:
    """List pieces that left the board for the community since a snapshot."""
    current = PieceIndex(pieces)
    moved = []
    for original in before_pieces:
        piece = current.get(original.id)
        if piece is None or original.location_id is None:
            continue
        if not is_community(original.location_id) and is_community(piece.location_id):
            moved.append(original.id)
    return moved


# -----------------------------------------------------------------------------
# Purchased moves
# -----------------------------------------------------------------------------


def validate_purchased_move(
    before_pieces: Sequence[Piece],
    after_pieces: Sequence[Piece],
    player_id: int,
    player_count: int,
    expected: Optional[MoveType],
) -> MoveValidationResult:
    """Check the moves made for a purchased move item.

    The moves found between the two layouts must be legal in some order,
    each against the layout left by the moves before it, and at least one
    must be of the purchased type.

    Args:
        before_pieces: Pieces when the purchase was selected.
        after_pieces: Pieces now.
        player_id: The buyer.
        player_count: Number of players in the game.
        expected: The purchased move type.

    Returns:
        MoveValidationResult.
    """
    if not isinstance(expected, MoveType):
        return MoveValidationResult(False, UNKNOWN_MOVE_TYPE_REASON)

    moves = calculate_moves(before_pieces, after_pieces, player_id, player_count)
    if not moves:
        return MoveValidationResult(False, NO_MOVES_REASON)

    legality = validate_move_sequence(moves, player_id, before_pieces, player_count)
    if not legality.is_valid:
        return legality

    if not any(m.move_type == expected for m in moves):
        return MoveValidationResult(
            False, f"Expected a {expected.value} move, but none was found"
        )

    return MoveValidationResult(True, VALID_MOVE_REASON)


# -----------------------------------------------------------------------------
# Payment
# -----------------------------------------------------------------------------


def pay_for_purchase(player: Player, price: int) -> int:
    """Discard banked tiles from the end of the bank until a price is covered.

    Change is not given: the last tile discarded may be worth more than
    the amount still owed.

    Args:
        player: The buyer. Its bureaucracy_tiles are modified.
        price: Kredcoin to pay.

    Returns:
        Number of tiles discarded.
    """
    owed = price
    discarded = 0
    while owed > 0 and player.bureaucracy_tiles:
        tile = player.bureaucracy_tiles.pop()
        owed -= TILE_KREDCOIN_VALUES.get(tile.id, 0)
        discarded += 1
    return discarded
