"""Credibility rules for the KRED game engine.

Players start with three notches of credibility. A notch is lost when a
dishonest tile play is caught or an honest one is wrongly challenged,
and can be bought back during the bureaucracy. A player with no
credibility left may neither challenge nor look at tiles they receive.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from core.constants import MAX_CREDIBILITY, CredibilityLossReason
from core.player import Player

logger = logging.getLogger(__name__)


def deduct_credibility(player: Player) -> int:
    """Remove one notch of credibility, never going below 0.

    Returns:
        The player's new credibility.
    """
    player.credibility = max(0, player.credibility - 1)
    return player.credibility


def restore_credibility(
    player: Player, amount: int = 1, maximum: int = MAX_CREDIBILITY
) -> int:
    """Give back credibility, capped at the maximum.

    Returns:
        The player's new credibility.
    """
    player.credibility = min(maximum, player.credibility + amount)
    return player.credibility


def get_penalized_player_id(
    reason: CredibilityLossReason,
    tile_player_id: int,
    challenger_id: Optional[int] = None,
    receiver_id: Optional[int] = None,
) -> Optional[int]:
    """Work out who loses credibility for an event.

    Args:
        reason: What happened.
        tile_player_id: The player who played the tile.
        challenger_id: The player who challenged, if anyone did.
        receiver_id: The player who received the tile.

    Returns:
        The penalized player's id, or None if nobody is penalized.
    """
    if reason in (
        CredibilityLossReason.TILE_REJECTED_BY_RECEIVER,
        CredibilityLossReason.TILE_FAILED_CHALLENGE,
    ):
        return tile_player_id
    if reason == CredibilityLossReason.UNSUCCESSFUL_CHALLENGE:
        return challenger_id
    if reason == CredibilityLossReason.DID_NOT_REJECT_WHEN_CHALLENGED:
        return receiver_id
    return None


def handle_credibility_loss(
    reason: CredibilityLossReason,
    players: Iterable[Player],
    tile_player_id: int,
    challenger_id: Optional[int] = None,
    receiver_id: Optional[int] = None,
) -> Optional[int]:
    """Apply the credibility loss for an event to the right player.

    Args:
        reason: What happened.
        players: Every player in the game.
        tile_player_id: The player who played the tile.
        challenger_id: The player who challenged, if anyone did.
        receiver_id: The player who received the tile.

    Returns:
        The id of the player who lost credibility, or None.
    """
    penalized = get_penalized_player_id(reason, tile_player_id, challenger_id, receiver_id)
    if penalized is None:
        return None

    for player in players:
        if player.player_id == penalized:
            remaining = deduct_credibility(player)
            logger.info(
                "Player %s loses credibility (%s), %d left",
                penalized,
                reason.value,
                remaining,
            )
            return penalized
    return None


def has_credibility(player: Player) -> bool:
    return player.credibility > 0


def can_challenge(player: Player) -> bool:
    """Check if a player may challenge a tile play."""
    return has_credibility(player)


def can_look_at_tile(player: Player) -> bool:
    """Check if a player may look at a tile played to them."""
    return has_credibility(player)
