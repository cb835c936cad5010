"""Game components for the KRED game engine.

This module contains the piece, tile and move records that flow through
the rules engine, plus PieceIndex, a read-only lookup over a list of
pieces keyed by piece id and by location id.

Pieces are immutable. Anything that "moves" a piece builds a new Piece
with dataclasses.replace and a new list, so callers can keep snapshots.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from .constants import MoveCategory, MoveType, PieceType
from .locations import LocationId, parse_location_id


@dataclass(frozen=True)
class Position:
    """A point on the board in percentages of board width/height."""

    top: float
    left: float


@dataclass(frozen=True)
class Piece:
    """A Mark, Heel or Pawn on the board.

    Attributes:
        id: Unique identifier, stable for the whole game.
        name: The piece tier.
        image_url: Asset used by renderers.
        position: Current board position.
        rotation: Rotation in degrees, facing away from the board center.
        location_id: The drop location holding the piece, None if off-board.
    """

    id: str
    name: PieceType
    image_url: str
    position: Position
    rotation: float = 0.0
    location_id: Optional[LocationId] = None

    def moved_to(
        self,
        location_id: Optional[LocationId],
        position: Position,
        rotation: float = 0.0,
    ) -> Piece:
        """Return a copy of this piece at a new location."""
        return dataclasses.replace(
            self, location_id=location_id, position=position, rotation=rotation
        )


@dataclass(frozen=True)
class Tile:
    """A campaign tile. Ids run 1..24; id 25 is the 5-player blank tile."""

    id: int
    url: str


@dataclass(frozen=True)
class BoardTile:
    """A tile placed in a player's receiving space during a tile play.

    Attributes:
        id: Unique id for this placement.
        tile: The tile that was played.
        position: Receiving space position.
        rotation: Receiving space rotation.
        placer_id: Player who played the tile.
        owner_id: Player receiving the tile.
    """

    id: str
    tile: Tile
    position: Position
    rotation: float
    placer_id: int
    owner_id: int


@dataclass(frozen=True)
class TrackedMove:
    """A single piece movement made during a turn.

    Attributes:
        piece_id: The piece that moved.
        move_type: The defined move this movement is claimed as.
        category: O or M category of the move.
        from_location_id: Where the piece started.
        to_location_id: Where the piece ended.
        from_position: Board position before the move.
        to_position: Board position after the move.
        timestamp: Caller-supplied ordering key.
    """

    piece_id: str
    move_type: MoveType
    category: MoveCategory
    from_location_id: Optional[LocationId]
    to_location_id: Optional[LocationId]
    from_position: Optional[Position] = None
    to_position: Optional[Position] = None
    timestamp: float = 0.0


class PieceIndex:
    """Indexed view of a list of pieces.

    Built once per validation call. Provides lookups by piece id and by
    location id, and domain/community queries, without mutating the
    underlying list.
    """

    def __init__(self, pieces: Iterable[Piece]):
        """Build the index.

        Args:
            pieces: The pieces to index. The last piece wins if two
                claim the same location.
        """
        self._pieces: list[Piece] = list(pieces)
        self._by_id: dict[str, Piece] = {}
        self._by_location: dict[LocationId, Piece] = {}
        for piece in self._pieces:
            self._by_id[piece.id] = piece
            if piece.location_id is not None:
                self._by_location[piece.location_id] = piece

    def __iter__(self) -> Iterator[Piece]:
        return iter(self._pieces)

    def __len__(self) -> int:
        return len(self._pieces)

    def get(self, piece_id: str) -> Optional[Piece]:
        """Get a piece by id, or None."""
        return self._by_id.get(piece_id)

    def at(self, location_id: Optional[LocationId]) -> Optional[Piece]:
        """Get the piece at a location, or None if vacant."""
        if location_id is None:
            return None
        return self._by_location.get(location_id)

    def is_occupied(self, location_id: Optional[LocationId]) -> bool:
        return self.at(location_id) is not None

    def is_vacant_for(self, location_id: LocationId, piece_id: str) -> bool:
        """Check if a location is empty or holds only the given piece."""
        occupant = self.at(location_id)
        return occupant is None or occupant.id == piece_id

    def in_domain(self, player_id: int) -> list[Piece]:
        """Get all pieces in a player's seats, rostrums and office."""
        result = []
        for piece in self._pieces:
            location = parse_location_id(piece.location_id)
            if location is not None and location.belongs_to(player_id):
                result.append(piece)
        return result

    def in_community(self) -> list[Piece]:
        """Get all pieces currently in community slots."""
        result = []
        for piece in self._pieces:
            location = parse_location_id(piece.location_id)
            if location is not None and location.is_community:
                result.append(piece)
        return result

    def occupied_locations(self) -> set[LocationId]:
        return set(self._by_location)
