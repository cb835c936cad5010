"""Campaign phase tile play for the KRED game engine.

A campaign turn is one tile play:
1. The tile player places a kept tile face down in another player's
   receiving space, then performs up to two moves (TILE_PLAYED)
2. The receiver accepts or rejects the play (PENDING_ACCEPTANCE)
3. If accepted, the other players may challenge in turn (PENDING_CHALLENGE)
4. A successful rejection or challenge rolls the board back and the tile
   player must redo the play honestly (CORRECTION_REQUIRED)
5. The receiver banks the tile and takes the next turn

Credibility is lost by a tile player caught short, a receiver who let a
short play through, or a challenger who challenged an honest play.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from core.components import BoardTile, Position, Tile, TrackedMove
from core.constants import (
    BANK_SPACES_BY_PLAYER_COUNT,
    CampaignStep,
    CredibilityLossReason,
)
from core.locations import office_id
from core.player import Player
from core.tiles import normalize_tile_id
from data.board_layouts import get_drop_location

from .credibility import can_challenge, handle_credibility_loss
from .move_calculation import calculate_moves
from .move_validation import validate_move_sequence
from .snapshots import create_game_state_snapshot, get_challenge_order
from .tile_validation import (
    TileRequirementResult,
    can_tile_be_rejected,
    validate_moves_for_tile_play,
    validate_tile_requirements_with_impossible_move_exceptions,
)

if TYPE_CHECKING:
    from core.game_state import GameState, GameStateSnapshot

logger = logging.getLogger(__name__)


@dataclass
class PlacementResult:
    """Result of checking where a tile may be played.

    Attributes:
        valid: Whether the tile may be played to the receiver.
        reason: Why not, if it may not.
    """

    valid: bool
    reason: Optional[str] = None


@dataclass
class TilePlayResult:
    """Result of a step in a tile play.

    Attributes:
        success: Whether the action was carried out.
        step: The campaign step after the action.
        reason: Why the action was refused, if it was.
        credibility_lost_by: Player who lost credibility as a result.
        resolved: True once the tile has been banked.
    """

    success: bool
    step: CampaignStep
    reason: Optional[str] = None
    credibility_lost_by: Optional[int] = None
    resolved: bool = False


# -----------------------------------------------------------------------------
# Placement rules
# -----------------------------------------------------------------------------


def get_bank_capacity(player_count: int) -> int:
    """Tiles each player can bank in a campaign round."""
    return BANK_SPACES_BY_PLAYER_COUNT.get(player_count, 0)


def is_campaign_complete(players: list[Player]) -> bool:
    """Check if every kept tile has been played."""
    return all(not p.kept_tiles for p in players)


def validate_tile_placement(
    players: list[Player],
    placer_id: int,
    receiver_id: int,
    tile_id: int,
    player_count: int,
    board_tiles: Optional[list[BoardTile]] = None,
) -> PlacementResult:
    """Check whether a tile may be played to a receiver.

    Rules, in order:
    - The placer must hold the tile and the receiving space must be empty
    - Players may not play to themselves until everyone else is out of tiles
    - The receiver's bank must have room
    - The campaign's final tile goes to the player with one bank space left
    - Any other tile goes to a player who still holds tiles

    Args:
        players: Every player in the game.
        placer_id: The player playing the tile.
        receiver_id: The intended receiver.
        tile_id: The tile being played.
        player_count: Number of players in the game.
        board_tiles: Tiles currently sitting in receiving spaces.

    Returns:
        PlacementResult.
    """
    by_id = {p.player_id: p for p in players}
    placer = by_id.get(placer_id)
    receiver = by_id.get(receiver_id)
    if placer is None or receiver is None:
        return PlacementResult(False, "Unknown player")

    if not placer.has_kept_tile(tile_id):
        return PlacementResult(False, f"Player {placer_id} does not hold tile {tile_id}")

    if any(bt.owner_id == receiver_id for bt in board_tiles or []):
        return PlacementResult(False, f"Player {receiver_id}'s receiving space is occupied")

    if placer_id == receiver_id:
        others_out = all(not p.kept_tiles for p in players if p.player_id != placer_id)
        if not others_out:
            return PlacementResult(
                False,
                "You cannot play a tile for yourself until all other players "
                "have run out of tiles.",
            )

    capacity = get_bank_capacity(player_count)
    if len(receiver.bureaucracy_tiles) >= capacity:
        return PlacementResult(
            False,
            f"Player {receiver_id}'s bank is full. You cannot play a tile to them. "
            f"Choose a different player.",
        )

    total_banked = sum(len(p.bureaucracy_tiles) for p in players)
    is_last_tile = total_banked == capacity * player_count - 1

    if is_last_tile:
        if len(receiver.bureaucracy_tiles) != capacity - 1:
            eligible = next(
                (p for p in players if len(p.bureaucracy_tiles) == capacity - 1), None
            )
            if eligible is not None:
                return PlacementResult(
                    False,
                    f"This is the final tile of the campaign phase. It can only be "
                    f"played to Player {eligible.player_id}, who has one remaining "
                    f"bank space.",
                )
            return PlacementResult(
                False,
                "This is the final tile of the campaign phase, but no player has "
                "exactly one remaining bank space.",
            )
    elif not receiver.kept_tiles:
        return PlacementResult(
            False,
            f"You must play to a player who has at least 1 tile in their hand. "
            f"Player {receiver_id} has no tiles left.",
        )

    return PlacementResult(True)


def get_receiving_space(receiver_id: int, player_count: int) -> Position:
    """Get where a tile played to a player is shown: over their office."""
    drop = get_drop_location(player_count, office_id(receiver_id))
    return drop.position if drop is not None else Position(top=50.0, left=50.0)


# -----------------------------------------------------------------------------
# Tile play transaction
# -----------------------------------------------------------------------------


@dataclass
class _TransactionRecord:
    tile: Tile
    placer_id: int
    receiver_id: int
    board_tile: BoardTile
    snapshot: GameStateSnapshot
    moves: list[TrackedMove] = field(default_factory=list)
    challenge_order: list[int] = field(default_factory=list)
    challenger_index: int = 0
    rejected: bool = False


class TilePlayTransaction:
    """Drives a single tile play through to the tile being banked.

    The transaction mutates the GameState it is given: it removes the
    tile from the placer, adds a BoardTile, restores pieces on a
    successful rejection or challenge, and finally banks the tile with
    the receiver and makes the receiver the current player.

    Usage:
        txn = TilePlayTransaction(state)
        txn.play_tile(placer_id=1, receiver_id=2, tile_id=5)
        ...  # tile player moves pieces in state.pieces
        txn.finish_moves()
        txn.accept()            # or txn.reject()
        txn.pass_challenge()    # or txn.challenge(player_id)
    """

    def __init__(self, state: GameState):
        """Initialize the transaction.

        Args:
            state: The game state the tile play happens in.
        """
        self.state = state
        self._record: Optional[_TransactionRecord] = None

    @property
    def step(self) -> CampaignStep:
        return self.state.campaign_step

    @property
    def is_active(self) -> bool:
        return self._record is not None

    @property
    def tile_id(self) -> Optional[int]:
        return self._record.tile.id if self._record else None

    @property
    def placer_id(self) -> Optional[int]:
        return self._record.placer_id if self._record else None

    @property
    def receiver_id(self) -> Optional[int]:
        return self._record.receiver_id if self._record else None

    @property
    def moves(self) -> list[TrackedMove]:
        return list(self._record.moves) if self._record else []

    @property
    def current_challenger_id(self) -> Optional[int]:
        """The player currently offered the chance to challenge."""
        record = self._record
        if record is None or self.step != CampaignStep.PENDING_CHALLENGE:
            return None
        return record.challenge_order[record.challenger_index]

    def _refuse(self, reason: str) -> TilePlayResult:
        logger.warning("Tile play action refused: %s", reason)
        return TilePlayResult(success=False, step=self.step, reason=reason)

    def _expect(self, step: CampaignStep) -> Optional[TilePlayResult]:
        if self._record is None:
            return self._refuse("No tile play in progress")
        if self.step != step:
            return self._refuse(
                f"Expected step {step.value}, current step is {self.step.value}"
            )
        return None

    # -------------------------------------------------------------------------
    # Tile player
    # -------------------------------------------------------------------------

    def play_tile(self, placer_id: int, receiver_id: int, tile_id: int) -> TilePlayResult:
        """Place a kept tile face down in a receiver's space.

        The board is snapshotted so the play can be rolled back.
        """
        if self._record is not None:
            return self._refuse("A tile play is already in progress")

        state = self.state
        placement = validate_tile_placement(
            state.players, placer_id, receiver_id, tile_id, state.player_count, state.board_tiles
        )
        if not placement.valid:
            return self._refuse(placement.reason)

        placer = state.get_player(placer_id)
        snapshot = create_game_state_snapshot(state.pieces, state.board_tiles)
        tile = placer.take_kept_tile(tile_id)
        board_tile = BoardTile(
            id=f"boardtile_{state.round_number}_{placer_id}_{tile_id}",
            tile=tile,
            position=get_receiving_space(receiver_id, state.player_count),
            rotation=0.0,
            placer_id=placer_id,
            owner_id=receiver_id,
        )
        state.board_tiles.append(board_tile)

        self._record = _TransactionRecord(
            tile=tile,
            placer_id=placer_id,
            receiver_id=receiver_id,
            board_tile=board_tile,
            snapshot=snapshot,
        )
        state.campaign_step = CampaignStep.TILE_PLAYED
        logger.debug("Player %s played tile %s to player %s", placer_id, tile_id, receiver_id)
        return TilePlayResult(success=True, step=self.step)

    def _check_moves(self) -> tuple[list[TrackedMove], Optional[str]]:
        record = self._record
        state = self.state
        original = list(record.snapshot.pieces)
        moves = calculate_moves(original, state.pieces, record.placer_id, state.player_count)

        limits = validate_moves_for_tile_play(moves)
        if not limits.is_valid:
            return moves, limits.error

        legality = validate_move_sequence(moves, record.placer_id, original, state.player_count)
        if not legality.is_valid:
            return moves, legality.reason
        return moves, None

    def _requirements(self) -> TileRequirementResult:
        record = self._record
        state = self.state
        return validate_tile_requirements_with_impossible_move_exceptions(
            normalize_tile_id(record.tile.id),
            record.moves,
            record.placer_id,
            record.snapshot.pieces,
            state.pieces,
            state.players,
            state.player_count,
        )

    def finish_moves(self) -> TilePlayResult:
        """End the tile player's moves and hand the decision to the receiver.

        The moves are worked out from the board: at most two, one per
        category, each legal in turn.
        """
        refused = self._expect(CampaignStep.TILE_PLAYED)
        if refused:
            return refused

        moves, error = self._check_moves()
        if error:
            return self._refuse(error)

        self._record.moves = moves
        self.state.campaign_step = CampaignStep.PENDING_ACCEPTANCE
        self.state.set_current_player(self._record.receiver_id)
        return TilePlayResult(success=True, step=self.step)

    # -------------------------------------------------------------------------
    # Receiver
    # -------------------------------------------------------------------------

    def can_reject(self) -> bool:
        """Check if the receiver may reject the play as it stands."""
        if self._record is None or self.step != CampaignStep.PENDING_ACCEPTANCE:
            return False
        requirements = self._requirements()
        execution_was_possible = not (requirements.is_met and requirements.impossible_moves)
        return can_tile_be_rejected(
            normalize_tile_id(self._record.tile.id),
            self._record.moves,
            execution_was_possible,
        )

    def accept(self) -> TilePlayResult:
        """Receiver accepts the play; open it up to challenges."""
        refused = self._expect(CampaignStep.PENDING_ACCEPTANCE)
        if refused:
            return refused

        record = self._record
        record.challenge_order = get_challenge_order(
            record.placer_id, self.state.player_count, record.receiver_id
        )
        record.challenger_index = 0
        if not record.challenge_order:
            return self._finalize()

        self.state.campaign_step = CampaignStep.PENDING_CHALLENGE
        self.state.set_current_player(record.challenge_order[0])
        return TilePlayResult(success=True, step=self.step)

    def reject(self) -> TilePlayResult:
        """Receiver rejects the play.

        Only allowed when the play fell short of the tile. The tile player
        loses credibility, the board is rolled back and the tile player
        must redo the play.
        """
        refused = self._expect(CampaignStep.PENDING_ACCEPTANCE)
        if refused:
            return refused
        if not self.can_reject():
            return self._refuse("This tile play meets its requirements and cannot be rejected")

        record = self._record
        record.rejected = True
        penalized = handle_credibility_loss(
            CredibilityLossReason.TILE_REJECTED_BY_RECEIVER,
            self.state.players,
            record.placer_id,
            receiver_id=record.receiver_id,
        )
        self._require_correction()
        return TilePlayResult(success=True, step=self.step, credibility_lost_by=penalized)

    # -------------------------------------------------------------------------
    # Challengers
    # -------------------------------------------------------------------------

    def challenge(self, challenger_id: int) -> TilePlayResult:
        """The current challenger challenges the play.

        If the play fell short, the tile player and the receiver who let it
        through each lose credibility and the tile player must redo the
        play. Otherwise the challenger loses credibility and the tile is
        banked.
        """
        refused = self._expect(CampaignStep.PENDING_CHALLENGE)
        if refused:
            return refused
        if challenger_id != self.current_challenger_id:
            return self._refuse(f"Player {challenger_id} may not challenge now")

        challenger = self.state.get_player(challenger_id)
        if not can_challenge(challenger):
            return self._refuse(f"Player {challenger_id} has no credibility left to challenge")

        record = self._record
        if self._requirements().is_met:
            penalized = handle_credibility_loss(
                CredibilityLossReason.UNSUCCESSFUL_CHALLENGE,
                self.state.players,
                record.placer_id,
                challenger_id=challenger_id,
            )
            result = self._finalize()
            result.credibility_lost_by = penalized
            return result

        penalized = handle_credibility_loss(
            CredibilityLossReason.TILE_FAILED_CHALLENGE,
            self.state.players,
            record.placer_id,
            challenger_id=challenger_id,
        )
        handle_credibility_loss(
            CredibilityLossReason.DID_NOT_REJECT_WHEN_CHALLENGED,
            self.state.players,
            record.placer_id,
            receiver_id=record.receiver_id,
        )
        self._require_correction()
        return TilePlayResult(success=True, step=self.step, credibility_lost_by=penalized)

    def pass_challenge(self) -> TilePlayResult:
        """The current challenger declines; move on or bank the tile."""
        refused = self._expect(CampaignStep.PENDING_CHALLENGE)
        if refused:
            return refused

        record = self._record
        record.challenger_index += 1
        if record.challenger_index >= len(record.challenge_order):
            return self._finalize()

        self.state.set_current_player(record.challenge_order[record.challenger_index])
        return TilePlayResult(success=True, step=self.step)

    # -------------------------------------------------------------------------
    # Correction and resolution
    # -------------------------------------------------------------------------

    def _require_correction(self) -> None:
        record = self._record
        self.state.pieces = list(record.snapshot.pieces)
        record.moves = []
        self.state.campaign_step = CampaignStep.CORRECTION_REQUIRED
        self.state.set_current_player(record.placer_id)

    def complete_correction(self) -> TilePlayResult:
        """Tile player has redone the play; bank the tile if it now complies."""
        refused = self._expect(CampaignStep.CORRECTION_REQUIRED)
        if refused:
            return refused

        moves, error = self._check_moves()
        if error:
            return self._refuse(error)

        self._record.moves = moves
        requirements = self._requirements()
        if not requirements.is_met:
            missing = ", ".join(m.value for m in requirements.missing_moves)
            return self._refuse(f"Still missing {missing} move(s)")

        return self._finalize()

    def _finalize(self) -> TilePlayResult:
        record = self._record
        state = self.state

        receiver = state.get_player(record.receiver_id)
        receiver.bank_tile(record.tile)
        state.board_tiles = [bt for bt in state.board_tiles if bt.id != record.board_tile.id]

        state.set_current_player(record.receiver_id)
        state.campaign_step = CampaignStep.AWAITING_TILE
        state.begin_turn()
        self._record = None

        logger.info(
            "Tile %s from player %s banked by player %s%s",
            record.tile.id,
            record.placer_id,
            record.receiver_id,
            " after correction" if record.rejected else "",
        )
        return TilePlayResult(success=True, step=state.campaign_step, resolved=True)

    def rollback(self) -> Optional[GameStateSnapshot]:
        """Abandon the play, returning the tile to the placer.

        Returns:
            The snapshot the board was restored to, or None if no play
            was in progress.
        """
        record = self._record
        if record is None:
            return None
        self.state.restore(record.snapshot)
        self.state.get_player(record.placer_id).kept_tiles.append(record.tile)
        self.state.set_current_player(record.placer_id)
        self.state.campaign_step = CampaignStep.AWAITING_TILE
        self._record = None
        return record.snapshot
