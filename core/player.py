"""Player model for the KRED game engine.

Each player holds tiles in three places over the course of a game:
- hand: tiles being drafted
- kept_tiles: tiles drafted and available to play in the campaign
- bureaucracy_tiles: tiles banked by receiving them, spent as Kredcoin
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .components import Tile
from .constants import DEFAULT_CREDIBILITY


@dataclass
class Player:
    """Represents a player in the KRED game.

    Attributes:
        player_id: Unique identifier for this player (1-indexed).
        hand: Tiles still being drafted.
        kept_tiles: Tiles kept during drafting, played during the campaign.
        bureaucracy_tiles: Tiles received and banked for the bureaucracy.
        credibility: Credibility notches remaining.
    """

    player_id: int
    hand: list[Tile] = field(default_factory=list)
    kept_tiles: list[Tile] = field(default_factory=list)
    bureaucracy_tiles: list[Tile] = field(default_factory=list)
    credibility: int = DEFAULT_CREDIBILITY

    def has_kept_tile(self, tile_id: int) -> bool:
        """Check if the player holds a tile in kept_tiles."""
        return any(t.id == tile_id for t in self.kept_tiles)

    def keep_from_hand(self, tile_id: int) -> Tile:
        """Move a tile from the hand to kept_tiles.

        Args:
            tile_id: The tile to keep.

        Returns:
            The kept tile.

        Raises:
            ValueError: If the tile is not in the player's hand.
        """
        for tile in self.hand:
            if tile.id == tile_id:
                self.hand.remove(tile)
                self.kept_tiles.append(tile)
                return tile
        raise ValueError(f"Player {self.player_id} does not hold tile {tile_id}")

    def take_kept_tile(self, tile_id: int) -> Tile:
        """Remove and return a tile from kept_tiles.

        Raises:
            ValueError: If the tile is not in kept_tiles.
        """
        for tile in self.kept_tiles:
            if tile.id == tile_id:
                self.kept_tiles.remove(tile)
                return tile
        raise ValueError(f"Player {self.player_id} has not kept tile {tile_id}")

    def bank_tile(self, tile: Tile) -> None:
        """Add a received tile to bureaucracy_tiles."""
        self.bureaucracy_tiles.append(tile)

    def __str__(self) -> str:
        return (
            f"Player {self.player_id}: hand={len(self.hand)}, "
            f"kept={len(self.kept_tiles)}, banked={len(self.bureaucracy_tiles)}, "
            f"credibility={self.credibility}"
        )
