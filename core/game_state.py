"""Game state for the KRED game engine.

GameState is the explicit application state a controller owns: players,
pieces, board tiles and phase bookkeeping. Rules functions never hold on
to it; they receive the pieces/players they need and return new values.

GameStateSnapshot captures pieces and board tiles so an uncommitted tile
play or bureaucracy purchase can be rolled back.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Optional

from .components import BoardTile, Piece
from .constants import (
    COMMUNITY_SLOTS_BY_PLAYER_COUNT,
    MAX_PLAYERS,
    MAX_SEATS_PER_PLAYER,
    MIN_PLAYERS,
    ROSTRUMS_PER_PLAYER,
    CampaignStep,
    Phase,
)
from .locations import LocationKind, parse_location_id
from .player import Player


@dataclass(frozen=True)
class GameStateSnapshot:
    """Pieces and board tiles captured at a point in time."""

    pieces: tuple[Piece, ...]
    board_tiles: tuple[BoardTile, ...]


@dataclass
class GameState:
    """The complete game state.

    Attributes:
        player_count: Number of players (3-5).
        players: Players ordered by id.
        pieces: Every piece in the game.
        board_tiles: Tiles currently sitting in receiving spaces.
        phase: Current game phase.
        campaign_step: Progress of the current tile play.
        current_player_idx: Index into players of the acting player.
        draft_round: Number of completed pick-and-pass rounds.
        round_number: Campaign/bureaucracy cycle, starting at 1.
        pieces_at_turn_start: Pieces when the current turn began.
    """

    player_count: int
    players: list[Player]
    pieces: list[Piece] = field(default_factory=list)
    board_tiles: list[BoardTile] = field(default_factory=list)
    phase: Phase = Phase.DRAFTING
    campaign_step: CampaignStep = CampaignStep.AWAITING_TILE
    current_player_idx: int = 0
    draft_round: int = 0
    round_number: int = 1
    pieces_at_turn_start: list[Piece] = field(default_factory=list)

    # -------------------------------------------------------------------------
    # Player access methods
    # -------------------------------------------------------------------------

    def get_current_player(self) -> Player:
        """Get the player whose turn it is."""
        return self.players[self.current_player_idx]

    def get_player(self, player_id: int) -> Player:
        """Get a player by id.

        Raises:
            ValueError: If no player has that id.
        """
        for player in self.players:
            if player.player_id == player_id:
                return player
        raise ValueError(f"Invalid player ID: {player_id}")

    def get_player_index(self, player_id: int) -> int:
        """Get the list index of a player.

        Raises:
            ValueError: If no player has that id.
        """
        for idx, player in enumerate(self.players):
            if player.player_id == player_id:
                return idx
        raise ValueError(f"Invalid player ID: {player_id}")

    def set_current_player(self, player_id: int) -> None:
        self.current_player_idx = self.get_player_index(player_id)

    def advance_current_player(self) -> None:
        """Move to the next player in id order, wrapping around."""
        self.current_player_idx = (self.current_player_idx + 1) % len(self.players)

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def snapshot(self) -> GameStateSnapshot:
        """Capture pieces and board tiles."""
        return GameStateSnapshot(
            pieces=tuple(self.pieces), board_tiles=tuple(self.board_tiles)
        )

    def restore(self, snapshot: GameStateSnapshot) -> None:
        """Replace pieces and board tiles with a snapshot's contents."""
        self.pieces = list(snapshot.pieces)
        self.board_tiles = list(snapshot.board_tiles)

    def begin_turn(self) -> None:
        """Record the current pieces as the start-of-turn layout."""
        self.pieces_at_turn_start = list(self.pieces)

    def clone(self) -> GameState:
        """Create a deep copy of the game state."""
        return copy.deepcopy(self)

    def is_game_over(self) -> bool:
        return self.phase == Phase.GAME_OVER

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> list[str]:
        """Validate the game state for consistency.

        Returns:
            List of validation error messages (empty if valid).
        """
        errors: list[str] = []

        if not MIN_PLAYERS <= self.player_count <= MAX_PLAYERS:
            errors.append(
                f"Invalid player count: {self.player_count} "
                f"(must be {MIN_PLAYERS}-{MAX_PLAYERS})"
            )
            return errors

        if len(self.players) != self.player_count:
            errors.append(
                f"Expected {self.player_count} players, found {len(self.players)}"
            )

        for i, player in enumerate(self.players):
            if player.player_id != i + 1:
                errors.append(
                    f"Player at index {i} has ID {player.player_id} (expected {i + 1})"
                )

        if self.players and not 0 <= self.current_player_idx < len(self.players):
            errors.append(f"Invalid current_player_idx: {self.current_player_idx}")

        seen_ids: set[str] = set()
        occupied: dict[str, str] = {}
        for piece in self.pieces:
            if piece.id in seen_ids:
                errors.append(f"Duplicate piece id: {piece.id}")
            seen_ids.add(piece.id)

            if piece.location_id is None:
                continue
            error = self._check_location(piece.location_id)
            if error:
                errors.append(f"Piece {piece.id}: {error}")
            if piece.location_id in occupied:
                errors.append(
                    f"Pieces {occupied[piece.location_id]} and {piece.id} "
                    f"share location {piece.location_id}"
                )
            occupied[piece.location_id] = piece.id

        return errors

    def _check_location(self, location_id: str) -> Optional[str]:
        location = parse_location_id(location_id)
        if location is None:
            return f"malformed location id {location_id}"

        if location.kind == LocationKind.COMMUNITY:
            limit = COMMUNITY_SLOTS_BY_PLAYER_COUNT[self.player_count]
            if not 1 <= location.index <= limit:
                return f"community slot {location.index} out of range"
            return None

        if not 1 <= location.player_id <= self.player_count:
            return f"location {location_id} belongs to no player"
        if location.kind == LocationKind.SEAT and not 1 <= location.index <= MAX_SEATS_PER_PLAYER:
            return f"seat {location.index} out of range"
        if location.kind == LocationKind.ROSTRUM and not 1 <= location.index <= ROSTRUMS_PER_PLAYER:
            return f"rostrum {location.index} out of range"
        return None

    # -------------------------------------------------------------------------
    # String representation
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        """Return a human-readable string representation."""
        lines = [
            f"GameState(phase={self.phase.value}, round={self.round_number})",
            f"  Campaign step: {self.campaign_step.value}",
            f"  Current player: {self.get_current_player().player_id}"
            if self.players
            else "  Current player: -",
            f"  Pieces on board: {sum(1 for p in self.pieces if p.location_id)}",
            f"  Players ({len(self.players)}):",
        ]
        for player in self.players:
            lines.append(f"    {player}")
        return "\n".join(lines)
