"""Tile reference data for the KRED game engine.

Each numbered tile names the moves its player must perform when the
tile is played. The blank tile (5-player games only) is wild: it carries
no requirements and is the only tile that may be rejected outright.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .components import Tile
from .constants import (
    BLANK_TILE_ID,
    BLANK_TILE_KEY,
    BLANK_TILE_URL,
    TOTAL_TILES,
    MoveType,
)
from .moves import DEFINED_MOVES


TileKey = Union[int, str]


@dataclass(frozen=True)
class TileRequirement:
    """Moves a tile obliges its player to perform.

    Attributes:
        tile_id: Zero-padded tile id ('01'..'24') or 'BLANK'.
        required_moves: Zero, one or two move types.
        description: Rules text shown to players.
        can_be_rejected: Whether the receiver may reject the tile outright.
    """

    tile_id: str
    required_moves: tuple[MoveType, ...]
    description: str
    can_be_rejected: bool = False


# Required moves per numbered tile, O move first
_REQUIRED_MOVES: dict[str, tuple[MoveType, ...]] = {
    "01": (MoveType.REMOVE, MoveType.ADVANCE),
    "02": (MoveType.REMOVE, MoveType.ADVANCE),
    "03": (MoveType.INFLUENCE, MoveType.ADVANCE),
    "04": (MoveType.INFLUENCE, MoveType.ADVANCE),
    "05": (MoveType.ADVANCE,),
    "06": (MoveType.ADVANCE,),
    "07": (MoveType.ASSIST, MoveType.ADVANCE),
    "08": (MoveType.ASSIST, MoveType.ADVANCE),
    "09": (MoveType.REMOVE, MoveType.ORGANIZE),
    "10": (MoveType.REMOVE, MoveType.ORGANIZE),
    "11": (MoveType.INFLUENCE,),
    "12": (MoveType.ORGANIZE,),
    "13": (MoveType.ASSIST, MoveType.ORGANIZE),
    "14": (MoveType.ASSIST, MoveType.ORGANIZE),
    "15": (MoveType.REMOVE,),
    "16": (MoveType.REMOVE,),
    "17": (MoveType.INFLUENCE, MoveType.WITHDRAW),
    "18": (MoveType.INFLUENCE, MoveType.WITHDRAW),
    "19": (MoveType.WITHDRAW,),
    "20": (MoveType.WITHDRAW,),
    "21": (MoveType.WITHDRAW,),
    "22": (MoveType.ASSIST, MoveType.WITHDRAW),
    "23": (MoveType.ASSIST, MoveType.WITHDRAW),
    "24": (MoveType.ASSIST, MoveType.WITHDRAW),
}

BLANK_TILE_DESCRIPTION = (
    'Blank - Wild tile. The player may perform one "O" move and/or one "M" '
    "move, or no move at all."
)


def _describe(moves: tuple[MoveType, ...]) -> str:
    # e.g. "(O) Remove and (M) Advance"
    return " and ".join(
        f"({DEFINED_MOVES[m].category.value}) {m.value.capitalize()}" for m in moves
    )


TILE_REQUIREMENTS: dict[str, TileRequirement] = {
    tile_id: TileRequirement(
        tile_id=tile_id, required_moves=moves, description=_describe(moves)
    )
    for tile_id, moves in _REQUIRED_MOVES.items()
}
TILE_REQUIREMENTS[BLANK_TILE_KEY] = TileRequirement(
    tile_id=BLANK_TILE_KEY,
    required_moves=(),
    description=BLANK_TILE_DESCRIPTION,
    can_be_rejected=True,
)


def normalize_tile_id(tile_id: Optional[TileKey]) -> Optional[str]:
    """Convert a numeric or string tile id to a TILE_REQUIREMENTS key.

    Args:
        tile_id: e.g. 3, "3", "03", 25 or "BLANK".

    Returns:
        The key ('03', 'BLANK', ...), or None if it cannot be interpreted.
    """
    if tile_id is None:
        return None
    if isinstance(tile_id, str):
        if tile_id.upper() == BLANK_TILE_KEY:
            return BLANK_TILE_KEY
        if not tile_id.isdigit():
            return None
        tile_id = int(tile_id)
    if tile_id == BLANK_TILE_ID:
        return BLANK_TILE_KEY
    return f"{tile_id:02d}"


def get_tile_requirements(tile_id: Optional[TileKey]) -> Optional[TileRequirement]:
    """Look up a tile's requirements, None for unknown tiles."""
    key = normalize_tile_id(tile_id)
    if key is None:
        return None
    return TILE_REQUIREMENTS.get(key)


def tile_has_requirements(tile_id: Optional[TileKey]) -> bool:
    """Check if a tile requires at least one move."""
    requirement = get_tile_requirements(tile_id)
    return requirement is not None and len(requirement.required_moves) > 0


# -----------------------------------------------------------------------------
# Tile deck
# -----------------------------------------------------------------------------


def tile_url(tile_id: int) -> str:
    """Get the asset url for a tile."""
    if tile_id == BLANK_TILE_ID:
        return BLANK_TILE_URL
    return f"./images/{tile_id:02d}.svg"


def make_tile(tile_id: int) -> Tile:
    return Tile(id=tile_id, url=tile_url(tile_id))


def build_tile_deck(player_count: int) -> list[Tile]:
    """Build the unshuffled deck for a game.

    Args:
        player_count: Number of players.

    Returns:
        Tiles 1..24, plus the blank tile for 5-player games.
    """
    deck = [make_tile(i) for i in range(1, TOTAL_TILES + 1)]
    if player_count == 5:
        deck.append(make_tile(BLANK_TILE_ID))
    return deck
