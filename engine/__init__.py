"""Game engine for the KRED board game.

This module provides the game logic including:
- Move, tile-play and bureaucracy validators
- Controllers for drafting, tile plays and the bureaucracy
- Phase state machine for game flow control
- Game engine for coordinating game play
"""

from .movement import (
    can_move_from_community,
    are_supporting_seats_full_for_rostrum,
    count_pieces_in_player_rostrums,
    are_both_rostrums_filled_for_player,
    calculate_piece_rotation,
    move_piece,
    apply_moves,
)

from .move_validation import (
    MoveValidationResult,
    validate_advance,
    validate_withdraw,
    validate_organize,
    validate_remove,
    validate_influence,
    validate_assist,
    validate_single_move,
    validate_move_sequence,
)

from .move_calculation import determine_move_type, calculate_moves

from .tile_validation import (
    TilePlayValidationResult,
    TileRequirementResult,
    validate_moves_for_tile_play,
    validate_tile_requirements,
    validate_tile_requirements_with_impossible_move_exceptions,
    are_all_tile_requirements_met,
    can_tile_be_rejected,
)

from .bureaucracy import (
    PromotionValidationResult,
    PromotionResult,
    calculate_player_kredcoin,
    get_bureaucracy_turn_order,
    get_bureaucracy_menu,
    get_available_purchases,
    validate_promotion,
    perform_promotion,
    validate_purchased_move,
)

from .credibility import (
    deduct_credibility,
    restore_credibility,
    handle_credibility_loss,
    can_challenge,
    can_look_at_tile,
)

from .win_conditions import check_player_win_condition, check_bureaucracy_win_condition

from .snapshots import create_game_state_snapshot, restore_snapshot, get_challenge_order

from .initialization import (
    initialize_players,
    initialize_pieces,
    initialize_campaign_pieces,
    deal_campaign_tiles,
)

from .campaign import (
    PlacementResult,
    TilePlayResult,
    TilePlayTransaction,
    validate_tile_placement,
)

from .drafting import DraftManager, DraftResult

from .bureaucracy_machine import BureaucracyMachine, BureaucracyActionResult

from .phase_machine import (
    PhaseMachine,
    PhaseTransitionResult,
    PHASE_TRANSITIONS,
)

from .config import EngineConfig

from .game_engine import (
    GameEngine,
    Action,
    ActionType,
    StepResult,
)

__all__ = [
    # Movement
    "can_move_from_community",
    "are_supporting_seats_full_for_rostrum",
    "count_pieces_in_player_rostrums",
    "are_both_rostrums_filled_for_player",
    "calculate_piece_rotation",
    "move_piece",
    "apply_moves",
    # Move validation
    "MoveValidationResult",
    "validate_advance",
    "validate_withdraw",
    "validate_organize",
    "validate_remove",
    "validate_influence",
    "validate_assist",
    "validate_single_move",
    "validate_move_sequence",
    "determine_move_type",
    "calculate_moves",
    # Tile validation
    "TilePlayValidationResult",
    "TileRequirementResult",
    "validate_moves_for_tile_play",
    "validate_tile_requirements",
    "validate_tile_requirements_with_impossible_move_exceptions",
    "are_all_tile_requirements_met",
    "can_tile_be_rejected",
    # Bureaucracy
    "PromotionValidationResult",
    "PromotionResult",
    "calculate_player_kredcoin",
    "get_bureaucracy_turn_order",
    "get_bureaucracy_menu",
    "get_available_purchases",
    "validate_promotion",
    "perform_promotion",
    "validate_purchased_move",
    # Credibility and win conditions
    "deduct_credibility",
    "restore_credibility",
    "handle_credibility_loss",
    "can_challenge",
    "can_look_at_tile",
    "check_player_win_condition",
    "check_bureaucracy_win_condition",
    # Snapshots
    "create_game_state_snapshot",
    "restore_snapshot",
    "get_challenge_order",
    # Initialization
    "initialize_players",
    "initialize_pieces",
    "initialize_campaign_pieces",
    "deal_campaign_tiles",
    # Controllers
    "PlacementResult",
    "TilePlayResult",
    "TilePlayTransaction",
    "validate_tile_placement",
    "DraftManager",
    "DraftResult",
    "BureaucracyMachine",
    "BureaucracyActionResult",
    # Phase machine
    "PhaseMachine",
    "PhaseTransitionResult",
    "PHASE_TRANSITIONS",
    # Game engine
    "EngineConfig",
    "GameEngine",
    "Action",
    "ActionType",
    "StepResult",
]
