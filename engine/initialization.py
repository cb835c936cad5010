"""Game setup for the KRED game engine.

Creates the objects a new game or a new campaign round starts from:
1. Players with shuffled, dealt hands (drafting)
2. The Marks shown on the board during drafting
3. The full set of pieces for a campaign round

Every function returns an empty list for unsupported player counts.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from core.components import Piece
from core.constants import (
    CAMPAIGN_MARK_SEATS_BY_PLAYER_COUNT,
    DEFAULT_CREDIBILITY,
    INITIAL_MARK_SEATS,
    PIECE_COUNTS_BY_PLAYER_COUNT,
    PIECE_IMAGE_URLS,
    PLAYER_OPTIONS,
    PieceType,
)
from core.locations import seat_id
from core.player import Player
from core.tiles import build_tile_deck
from data.board_layouts import get_community_location_ids, get_drop_location

from .movement import calculate_piece_rotation

logger = logging.getLogger(__name__)


def initialize_players(
    player_count: int,
    rng: Optional[random.Random] = None,
    credibility: int = DEFAULT_CREDIBILITY,
) -> list[Player]:
    """Create players and deal the shuffled deck round-robin.

    Args:
        player_count: Number of players (3-5).
        rng: Random source for the shuffle. A fresh one is used if None.
        credibility: Starting credibility for every player.

    Returns:
        Players 1..player_count. Hand sizes differ by at most one.
    """
    if player_count not in PLAYER_OPTIONS:
        return []

    rng = rng or random.Random()
    deck = build_tile_deck(player_count)
    rng.shuffle(deck)

    players = [
        Player(player_id=i + 1, credibility=credibility) for i in range(player_count)
    ]
    for i, tile in enumerate(deck):
        players[i % player_count].hand.append(tile)

    logger.debug("Dealt %d tiles to %d players", len(deck), player_count)
    return players


def _make_piece(
    piece_id: str, piece_type: PieceType, location_id: str, player_count: int
) -> Optional[Piece]:
    drop = get_drop_location(player_count, location_id)
    if drop is None:
        logger.warning("Could not find location for %s", location_id)
        return None
    return Piece(
        id=piece_id,
        name=piece_type,
        image_url=PIECE_IMAGE_URLS[piece_type],
        position=drop.position,
        rotation=calculate_piece_rotation(drop.position, player_count, drop.id),
        location_id=drop.id,
    )


def initialize_pieces(player_count: int) -> list[Piece]:
    """Place the drafting Marks on seats 1, 3 and 5 of every domain.

    Returns:
        3 x player_count Marks.
    """
    if player_count not in PLAYER_OPTIONS:
        return []

    pieces = []
    for player_id in range(1, player_count + 1):
        for seat in INITIAL_MARK_SEATS:
            piece = _make_piece(
                f"initial_p{player_id}_mark_seat{seat}",
                PieceType.MARK,
                seat_id(player_id, seat),
                player_count,
            )
            if piece is not None:
                pieces.append(piece)
    return pieces


def initialize_campaign_pieces(player_count: int) -> list[Piece]:
    """Create every piece for the start of a campaign round.

    Three Marks go on each domain's seats (2, 4, 6 in 4-player games,
    1, 3, 5 otherwise). The remaining Marks, then all Heels, then all
    Pawns fill the community slots in slot order.

    Returns:
        One piece per entry in PIECE_COUNTS_BY_PLAYER_COUNT.
    """
    if player_count not in PLAYER_OPTIONS:
        return []

    counts = PIECE_COUNTS_BY_PLAYER_COUNT[player_count]
    seats = CAMPAIGN_MARK_SEATS_BY_PLAYER_COUNT[player_count]
    pieces: list[Piece] = []
    counters = {piece_type: 0 for piece_type in PieceType}

    def add(piece_type: PieceType, location_id: str) -> None:
        counters[piece_type] += 1
        piece = _make_piece(
            f"campaign_{piece_type.value.lower()}_{counters[piece_type]}",
            piece_type,
            location_id,
            player_count,
        )
        if piece is not None:
            pieces.append(piece)

    for player_id in range(1, player_count + 1):
        for seat in seats:
            add(PieceType.MARK, seat_id(player_id, seat))

    community = iter(get_community_location_ids(player_count))
    queue = (
        [PieceType.MARK] * (counts[PieceType.MARK] - player_count * len(seats))
        + [PieceType.HEEL] * counts[PieceType.HEEL]
        + [PieceType.PAWN] * counts[PieceType.PAWN]
    )
    for piece_type, location_id in zip(queue, community):
        add(piece_type, location_id)

    logger.info(
        "Campaign pieces initialized: %d total (%d-player mode)",
        len(pieces),
        player_count,
    )
    return pieces


def deal_campaign_tiles(
    players: list[Player], rng: Optional[random.Random] = None
) -> None:
    """Deal a fresh deck straight into kept_tiles for a new campaign round.

    Banked tiles from the previous round are cleared and hands emptied.
    Does nothing for unsupported player counts.
    """
    player_count = len(players)
    if player_count not in PLAYER_OPTIONS:
        return

    rng = rng or random.Random()
    deck = build_tile_deck(player_count)
    rng.shuffle(deck)

    for player in players:
        player.hand = []
        player.kept_tiles = []
        player.bureaucracy_tiles = []
    for i, tile in enumerate(deck):
        players[i % player_count].kept_tiles.append(tile)

    logger.info("Dealt %d tiles for a new campaign round", len(deck))
