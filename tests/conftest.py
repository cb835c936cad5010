"""Shared fixtures for the KRED test suite."""

from typing import Callable, Optional

import pytest

from core.components import Piece, Position, Tile, TrackedMove
from core.constants import PIECE_IMAGE_URLS, MoveType, PieceType
from core.moves import get_move_category
from core.player import Player
from core.tiles import make_tile
from data.board_layouts import get_drop_location
from engine.movement import calculate_piece_rotation


def build_piece(
    piece_id: str,
    location_id: Optional[str],
    name: PieceType = PieceType.MARK,
    player_count: int = 3,
) -> Piece:
    """Create a piece sitting on a drop location of the bundled layout."""
    drop = get_drop_location(player_count, location_id)
    position = drop.position if drop is not None else Position(top=0.0, left=0.0)
    return Piece(
        id=piece_id,
        name=name,
        image_url=PIECE_IMAGE_URLS[name],
        position=position,
        rotation=calculate_piece_rotation(position, player_count, location_id),
        location_id=location_id,
    )


@pytest.fixture
def make_piece() -> Callable[..., Piece]:
    """Factory for pieces placed on the bundled layouts."""
    return build_piece


@pytest.fixture
def make_player() -> Callable[..., Player]:
    """Factory for players holding tiles by id."""

    def factory(
        player_id: int,
        kept: tuple[int, ...] = (),
        banked: tuple[int, ...] = (),
        hand: tuple[int, ...] = (),
        credibility: int = 3,
    ) -> Player:
        return Player(
            player_id=player_id,
            hand=[make_tile(t) for t in hand],
            kept_tiles=[make_tile(t) for t in kept],
            bureaucracy_tiles=[make_tile(t) for t in banked],
            credibility=credibility,
        )

    return factory


@pytest.fixture
def three_players(make_player) -> list[Player]:
    """Three players with no tiles."""
    return [make_player(i) for i in range(1, 4)]


@pytest.fixture
def tile() -> Callable[[int], Tile]:
    return make_tile


@pytest.fixture
def make_move() -> Callable[..., TrackedMove]:
    """Factory for tracked moves between two location ids."""

    def factory(
        piece_id: str,
        move_type: MoveType,
        from_location_id: Optional[str],
        to_location_id: Optional[str],
    ) -> TrackedMove:
        return TrackedMove(
            piece_id=piece_id,
            move_type=move_type,
            category=get_move_category(move_type),
            from_location_id=from_location_id,
            to_location_id=to_location_id,
        )

    return factory
