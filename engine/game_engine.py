"""Main game engine for the KRED board game.

The GameEngine is the primary interface for playing the game. It provides:
- reset(): Initialize a new game
- step(): Execute an action and advance game state
- get_valid_action_types(): The kinds of action the current player may take

The engine owns the GameState and the controllers for the current phase
(draft manager, tile play transaction, bureaucracy machine) and moves
between phases when their end conditions are met. Illegal actions are
refused and never change the state.
"""

from __future__ import annotations

import copy
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from core.constants import BureaucracyItemType, BureaucracyStep, CampaignStep, Phase
from core.game_state import GameState
from core.player import Player
from data.board_layouts import is_valid_location

from .bureaucracy_machine import BureaucracyMachine
from .campaign import TilePlayTransaction
from .config import EngineConfig
from .drafting import DraftManager, get_campaign_starting_player_id
from .initialization import (
    deal_campaign_tiles,
    initialize_campaign_pieces,
    initialize_pieces,
    initialize_players,
)
from .movement import move_piece
from .phase_machine import PhaseMachine

logger = logging.getLogger(__name__)


class ActionType(Enum):
    """Types of actions a player can take."""

    # Drafting
    SELECT_TILE = "select_tile"

    # Campaign
    PLAY_TILE = "play_tile"
    MOVE_PIECE = "move_piece"
    END_MOVES = "end_moves"
    ACCEPT = "accept"
    REJECT = "reject"
    CHALLENGE = "challenge"
    PASS_CHALLENGE = "pass_challenge"
    COMPLETE_CORRECTION = "complete_correction"

    # Bureaucracy
    SELECT_PURCHASE = "select_purchase"
    PROMOTE = "promote"
    COMPLETE_PURCHASE = "complete_purchase"
    RESET_PURCHASE = "reset_purchase"
    END_BUREAUCRACY_TURN = "end_bureaucracy_turn"


@dataclass
class Action:
    """Represents an action to be executed.

    Attributes:
        action_type: The type of action.
        player_id: The player taking the action.
        params: Additional parameters for the action (context-dependent).
    """

    action_type: ActionType
    player_id: int
    params: dict[str, Any]

    def __str__(self) -> str:
        return f"Action({self.action_type.value}, player={self.player_id}, params={self.params})"


@dataclass
class StepResult:
    """Result of executing a step in the game.

    Attributes:
        success: Whether the action was executed successfully.
        state: The game state after the action.
        done: Whether the game has ended.
        info: Additional information about the step.
    """

    success: bool
    state: GameState
    done: bool
    info: dict[str, Any]


_CAMPAIGN_ACTIONS: dict[CampaignStep, list[ActionType]] = {
    CampaignStep.AWAITING_TILE: [ActionType.PLAY_TILE],
    CampaignStep.TILE_PLAYED: [ActionType.MOVE_PIECE, ActionType.END_MOVES],
    CampaignStep.PENDING_ACCEPTANCE: [ActionType.ACCEPT, ActionType.REJECT],
    CampaignStep.PENDING_CHALLENGE: [ActionType.CHALLENGE, ActionType.PASS_CHALLENGE],
    CampaignStep.CORRECTION_REQUIRED: [ActionType.MOVE_PIECE, ActionType.COMPLETE_CORRECTION],
}


class GameEngine:
    """Main engine for playing KRED.

    Usage:
        engine = GameEngine()
        engine.reset(num_players=3, seed=42)

        while not engine.is_game_over():
            action = choose_action(engine.state, engine.get_valid_action_types())
            result = engine.step(action)
    """

    def __init__(self):
        """Initialize the game engine."""
        self._state: Optional[GameState] = None
        self._config: Optional[EngineConfig] = None
        self._rng: Optional[random.Random] = None
        self._phase_machine: Optional[PhaseMachine] = None
        self._draft_manager: Optional[DraftManager] = None
        self._transaction: Optional[TilePlayTransaction] = None
        self._bureaucracy: Optional[BureaucracyMachine] = None
        self._winners: list[int] = []

    @property
    def state(self) -> GameState:
        """Get the current game state.

        Raises:
            RuntimeError: If the game has not been initialized.
        """
        if self._state is None:
            raise RuntimeError("Game not initialized. Call reset() first.")
        return self._state

    @property
    def config(self) -> EngineConfig:
        if self._config is None:
            raise RuntimeError("Game not initialized. Call reset() first.")
        return self._config

    @property
    def phase(self) -> Phase:
        """Get the current game phase."""
        return self.state.phase

    @property
    def transaction(self) -> Optional[TilePlayTransaction]:
        """The tile play controller while the campaign is running."""
        return self._transaction

    @property
    def bureaucracy(self) -> Optional[BureaucracyMachine]:
        """The bureaucracy controller while the bureaucracy is running."""
        return self._bureaucracy

    @property
    def winners(self) -> list[int]:
        return list(self._winners)

    def is_game_over(self) -> bool:
        """Check if the game has ended."""
        return self._phase_machine is not None and self._phase_machine.is_game_over()

    # -------------------------------------------------------------------------
    # Game Initialization
    # -------------------------------------------------------------------------

    def reset(
        self,
        num_players: Optional[int] = None,
        seed: Optional[int] = None,
        config: Optional[EngineConfig] = None,
    ) -> GameState:
        """Initialize a new game.

        Args:
            num_players: Number of players (3-5). Overrides config.
            seed: Seed for the tile shuffles. Overrides config.
            config: Engine configuration. Defaults to EngineConfig().

        Returns:
            The initial game state, in the drafting phase.

        Raises:
            ValueError: If the configuration is invalid.
        """
        config = config or EngineConfig()
        if num_players is not None or seed is not None:
            config = EngineConfig(
                player_count=num_players if num_players is not None else config.player_count,
                seed=seed if seed is not None else config.seed,
                starting_credibility=config.starting_credibility,
                max_credibility=config.max_credibility,
            )
        errors = config.validate()
        if errors:
            raise ValueError("; ".join(errors))

        self._config = config
        self._rng = random.Random(config.seed)

        count = config.player_count
        self._state = GameState(
            player_count=count,
            players=initialize_players(count, self._rng, config.starting_credibility),
            pieces=initialize_pieces(count),
        )
        self._phase_machine = PhaseMachine(initial_phase=Phase.DRAFTING)
        self._draft_manager = DraftManager(self._state)
        self._transaction = None
        self._bureaucracy = None
        self._winners = []

        logger.info("New %d-player game (seed=%s)", count, config.seed)
        return self._state

    # -------------------------------------------------------------------------
    # Action Execution
    # -------------------------------------------------------------------------

    def get_valid_action_types(self) -> list[ActionType]:
        """Get the kinds of action the current player may take.

        Returns:
            List of action types; empty once the game is over.
        """
        phase = self.state.phase

        if phase == Phase.DRAFTING:
            return [ActionType.SELECT_TILE]
        elif phase == Phase.CAMPAIGN:
            return list(_CAMPAIGN_ACTIONS.get(self.state.campaign_step, []))
        elif phase == Phase.BUREAUCRACY:
            return self._get_bureaucracy_action_types()
        return []

    def _get_bureaucracy_action_types(self) -> list[ActionType]:
        machine = self._bureaucracy
        if machine is None or machine.current_player_id is None:
            return []
        if machine.step == BureaucracyStep.MENU_SHOWN:
            actions = [ActionType.END_BUREAUCRACY_TURN]
            if machine.get_available_items():
                actions.insert(0, ActionType.SELECT_PURCHASE)
            return actions

        actions = [ActionType.COMPLETE_PURCHASE, ActionType.RESET_PURCHASE]
        item_type = machine.current_purchase.item.type
        if item_type == BureaucracyItemType.MOVE:
            actions.insert(0, ActionType.MOVE_PIECE)
        elif item_type == BureaucracyItemType.PROMOTION:
            actions.insert(0, ActionType.PROMOTE)
        return actions

    def _fail(self, reason: str) -> StepResult:
        logger.warning("Action refused: %s", reason)
        return StepResult(
            success=False,
            state=self.state,
            done=self.is_game_over(),
            info={"error": reason},
        )

    def step(self, action: Action) -> StepResult:
        """Execute an action and advance the game state.

        Args:
            action: The action to execute.

        Returns:
            StepResult with the outcome of the action.
        """
        if action.action_type not in self.get_valid_action_types():
            return self._fail(
                f"Invalid action in phase {self.state.phase.value}: {action}"
            )
        current_id = self.state.get_current_player().player_id
        if action.player_id != current_id:
            return self._fail(f"It is player {current_id}'s turn, not player {action.player_id}'s")

        try:
            success, reason, extra = self._execute(action)
        except (KeyError, ValueError) as e:
            return self._fail(f"Bad parameters for {action}: {e}")

        if not success:
            return self._fail(reason)

        self._check_phase_transition()

        info: dict[str, Any] = {
            "action": str(action),
            "phase": self.state.phase.value,
            "round": self.state.round_number,
        }
        info.update(extra)
        if self._winners:
            info["winners"] = list(self._winners)
        return StepResult(success=True, state=self.state, done=self.is_game_over(), info=info)

    def _execute(self, action: Action) -> tuple[bool, Optional[str], dict[str, Any]]:
        """Dispatch an action to the controller for the current phase."""
        action_type = action.action_type
        params = action.params

        if action_type == ActionType.SELECT_TILE:
            result = self._draft_manager.select_tile(action.player_id, int(params["tile_id"]))
            return result.success, result.reason, {"draft_complete": result.draft_complete}

        if action_type == ActionType.MOVE_PIECE:
            return self._execute_move_piece(params["piece_id"], params["to_location_id"])

        if action_type == ActionType.PLAY_TILE:
            result = self._transaction.play_tile(
                action.player_id, int(params["receiver_id"]), int(params["tile_id"])
            )
        elif action_type == ActionType.END_MOVES:
            result = self._transaction.finish_moves()
        elif action_type == ActionType.ACCEPT:
            result = self._transaction.accept()
        elif action_type == ActionType.REJECT:
            result = self._transaction.reject()
        elif action_type == ActionType.CHALLENGE:
            result = self._transaction.challenge(action.player_id)
        elif action_type == ActionType.PASS_CHALLENGE:
            result = self._transaction.pass_challenge()
        elif action_type == ActionType.COMPLETE_CORRECTION:
            result = self._transaction.complete_correction()
        else:
            return self._execute_bureaucracy(action)

        extra: dict[str, Any] = {"campaign_step": result.step.value}
        if result.credibility_lost_by is not None:
            extra["credibility_lost_by"] = result.credibility_lost_by
        return result.success, result.reason, extra

    def _execute_bureaucracy(self, action: Action) -> tuple[bool, Optional[str], dict[str, Any]]:
        machine = self._bureaucracy
        action_type = action.action_type

        if action_type == ActionType.SELECT_PURCHASE:
            result = machine.select_item(action.params["item_id"])
        elif action_type == ActionType.PROMOTE:
            result = machine.promote(action.params["piece_id"])
        elif action_type == ActionType.COMPLETE_PURCHASE:
            result = machine.complete_purchase()
        elif action_type == ActionType.RESET_PURCHASE:
            result = machine.reset_action()
        else:
            result = machine.end_turn()
        return result.success, result.reason, {"bureaucracy_step": result.step.value}

    def _execute_move_piece(
        self, piece_id: str, to_location_id: str
    ) -> tuple[bool, Optional[str], dict[str, Any]]:
        state = self.state
        if not any(p.id == piece_id for p in state.pieces):
            return False, f"Unknown piece: {piece_id}", {}
        if not is_valid_location(state.player_count, to_location_id):
            return False, f"Unknown location: {to_location_id}", {}

        state.pieces = move_piece(state.pieces, piece_id, to_location_id, state.player_count)
        logger.debug("Moved %s to %s", piece_id, to_location_id)
        return True, None, {}

    # -------------------------------------------------------------------------
    # Phase Transition Logic
    # -------------------------------------------------------------------------

    def _check_phase_transition(self) -> None:
        """Check and execute any necessary phase transitions."""
        machine = self._phase_machine
        state = self.state
        current_phase = state.phase

        if current_phase == Phase.DRAFTING:
            if machine.should_end_drafting_phase(state):
                self._transition_to_phase(Phase.CAMPAIGN)
                self._start_campaign()

        elif current_phase == Phase.CAMPAIGN:
            if not self._transaction.is_active and machine.should_end_campaign_phase(state):
                self._transition_to_phase(Phase.BUREAUCRACY)
                self._transaction = None
                self._bureaucracy = BureaucracyMachine(state, self.config.max_credibility)
                self._bureaucracy.start()

        elif current_phase == Phase.BUREAUCRACY:
            result = machine.compute_next_phase(
                state, bureaucracy_complete=self._bureaucracy.is_phase_complete()
            )
            if not result.success:
                return
            self._bureaucracy = None
            self._transition_to_phase(result.new_phase)
            if result.new_phase == Phase.GAME_OVER:
                self._winners = result.winners or []
                logger.info(result.reason)
            else:
                self._start_new_round()

    def _transition_to_phase(self, new_phase: Phase) -> None:
        """Transition to a new phase."""
        self._phase_machine.transition_to(new_phase)
        self.state.phase = new_phase
        logger.info("Phase: %s (round %d)", new_phase.value, self.state.round_number)

    def _start_campaign(self) -> None:
        state = self.state
        if state.round_number == 1:
            state.pieces = initialize_campaign_pieces(state.player_count)
        state.set_current_player(get_campaign_starting_player_id(state.players))
        state.campaign_step = CampaignStep.AWAITING_TILE
        state.begin_turn()
        self._transaction = TilePlayTransaction(state)

    def _start_new_round(self) -> None:
        """Deal a new round of tiles; the board carries over."""
        self.state.round_number += 1
        deal_campaign_tiles(self.state.players, self._rng)
        self._start_campaign()

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def get_current_player(self) -> Player:
        """Get the current player."""
        return self.state.get_current_player()

    def clone(self) -> GameEngine:
        """Create a deep copy of the engine for simulation.

        The controllers are copied along with the state so they keep
        pointing at the cloned state.
        """
        return copy.deepcopy(self)

    def get_game_summary(self) -> dict[str, Any]:
        """Get a summary of the current game state.

        Returns:
            Dictionary with game summary information.
        """
        state = self.state
        return {
            "phase": state.phase.value,
            "round": state.round_number,
            "campaign_step": state.campaign_step.value,
            "current_player": state.get_current_player().player_id,
            "players": [
                {
                    "id": p.player_id,
                    "hand": len(p.hand),
                    "kept_tiles": len(p.kept_tiles),
                    "banked_tiles": len(p.bureaucracy_tiles),
                    "credibility": p.credibility,
                }
                for p in state.players
            ],
            "pieces_on_board": sum(1 for p in state.pieces if p.location_id),
            "board_tiles": len(state.board_tiles),
            "winners": list(self._winners),
            "game_over": self.is_game_over(),
        }

    def __str__(self) -> str:
        """Return string representation of the engine."""
        if self._state is None:
            return "GameEngine(not initialized)"
        return f"GameEngine(phase={self.state.phase.value}, round={self.state.round_number})"
