"""Bureaucracy menu and purchase models for the KRED game engine.

During the bureaucracy phase players spend the Kredcoin value of their
banked tiles on menu items: extra moves, promotions and credibility.
There are two price tiers, one for 3-4 player games and a cheaper one
for 5 player games.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .constants import BureaucracyItemType, MoveType, PromotionLocation


@dataclass(frozen=True)
class BureaucracyMenuItem:
    """An item that can be bought during the bureaucracy phase.

    Attributes:
        id: Stable identifier shared by both menus.
        type: Move, promotion or credibility.
        price: Cost in Kredcoin.
        description: Text shown to players.
        move_type: The move granted, for MOVE items.
        promotion_location: Where the promoted piece must sit, for PROMOTION items.
    """

    id: str
    type: BureaucracyItemType
    price: int
    description: str = ""
    move_type: Optional[MoveType] = None
    promotion_location: Optional[PromotionLocation] = None


@dataclass
class BureaucracyPurchase:
    """A menu item bought by a player.

    Attributes:
        player_id: The buyer.
        item: The item bought.
        timestamp: Caller-supplied ordering key.
        completed: True once the purchase has been validated and paid for.
    """

    player_id: int
    item: BureaucracyMenuItem
    timestamp: float = 0.0
    completed: bool = False


@dataclass
class BureaucracyPlayerState:
    """Per-player bookkeeping for one bureaucracy phase.

    Attributes:
        player_id: The player.
        initial_kredcoin: Kredcoin at the start of the phase.
        remaining_kredcoin: Kredcoin not yet spent.
        turn_complete: Whether the player has finished purchasing.
        purchases: Completed purchases, in order.
    """

    player_id: int
    initial_kredcoin: int
    remaining_kredcoin: int
    turn_complete: bool = False
    purchases: list[BureaucracyPurchase] = field(default_factory=list)


def _menu(
    office: int,
    o_move: int,
    rostrum: int,
    m_move: int,
    seat: int,
    credibility: int,
) -> tuple[BureaucracyMenuItem, ...]:
    # Both menus list the same items in the same price-descending order
    return (
        BureaucracyMenuItem(
            id="promote_office",
            type=BureaucracyItemType.PROMOTION,
            promotion_location=PromotionLocation.OFFICE,
            price=office,
            description="Promote a piece in the Office from Mark to Heel OR Heel to Pawn",
        ),
        BureaucracyMenuItem(
            id="move_assist",
            type=BureaucracyItemType.MOVE,
            move_type=MoveType.ASSIST,
            price=o_move,
        ),
        BureaucracyMenuItem(
            id="move_remove",
            type=BureaucracyItemType.MOVE,
            move_type=MoveType.REMOVE,
            price=o_move,
        ),
        BureaucracyMenuItem(
            id="move_influence",
            type=BureaucracyItemType.MOVE,
            move_type=MoveType.INFLUENCE,
            price=o_move,
        ),
        BureaucracyMenuItem(
            id="promote_rostrum",
            type=BureaucracyItemType.PROMOTION,
            promotion_location=PromotionLocation.ROSTRUM,
            price=rostrum,
            description="Promote a piece in a Rostrum from Mark to Heel OR Heel to Pawn",
        ),
        BureaucracyMenuItem(
            id="move_advance",
            type=BureaucracyItemType.MOVE,
            move_type=MoveType.ADVANCE,
            price=m_move,
        ),
        BureaucracyMenuItem(
            id="move_withdraw",
            type=BureaucracyItemType.MOVE,
            move_type=MoveType.WITHDRAW,
            price=m_move,
        ),
        BureaucracyMenuItem(
            id="move_organize",
            type=BureaucracyItemType.MOVE,
            move_type=MoveType.ORGANIZE,
            price=m_move,
        ),
        BureaucracyMenuItem(
            id="promote_seat",
            type=BureaucracyItemType.PROMOTION,
            promotion_location=PromotionLocation.SEAT,
            price=seat,
            description="Promote a piece in a Seat from Mark to Heel OR Heel to Pawn",
        ),
        BureaucracyMenuItem(
            id="credibility",
            type=BureaucracyItemType.CREDIBILITY,
            price=credibility,
            description="Restore one notch to your Credibility",
        ),
    )


THREE_FOUR_PLAYER_BUREAUCRACY_MENU = _menu(18, 15, 12, 9, 6, 3)
FIVE_PLAYER_BUREAUCRACY_MENU = _menu(12, 10, 8, 6, 4, 2)
