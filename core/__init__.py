"""Core data models and rule tables for the KRED game engine."""

from .constants import (
    Phase,
    CampaignStep,
    PieceType,
    MoveType,
    MoveCategory,
    MoveRequirement,
    TilePlayOptionType,
    BureaucracyItemType,
    PromotionLocation,
    BureaucracyStep,
    CredibilityLossReason,
    MIN_PLAYERS,
    MAX_PLAYERS,
    PLAYER_OPTIONS,
    MAX_SEATS_PER_PLAYER,
    ROSTRUMS_PER_PLAYER,
    SEATS_PER_ROSTRUM,
    COMMUNITY_SLOTS_BY_PLAYER_COUNT,
    CLOCKWISE_ORDER_BY_PLAYER_COUNT,
    DEFAULT_CREDIBILITY,
    MAX_CREDIBILITY,
    TOTAL_TILES,
    BLANK_TILE_ID,
    BANK_SPACES_BY_PLAYER_COUNT,
    MAX_MOVES_PER_TILE_PLAY,
    PIECE_COUNTS_BY_PLAYER_COUNT,
    TILE_KREDCOIN_VALUES,
)

from .locations import (
    LocationId,
    LocationKind,
    Location,
    make_location_id,
    parse_location_id,
    seat_id,
    rostrum_id,
    office_id,
    community_id,
)

from .components import Position, Piece, Tile, BoardTile, TrackedMove, PieceIndex

from .player import Player

from .moves import (
    DefinedMove,
    TilePlayOption,
    DEFINED_MOVES,
    TILE_PLAY_OPTIONS,
    is_move_allowed_in_tile_play_option,
    get_move_requirement,
    get_move_category,
)

from .tiles import (
    TileRequirement,
    TILE_REQUIREMENTS,
    normalize_tile_id,
    get_tile_requirements,
    tile_has_requirements,
    build_tile_deck,
)

from .bureaucracy import (
    BureaucracyMenuItem,
    BureaucracyPurchase,
    BureaucracyPlayerState,
    THREE_FOUR_PLAYER_BUREAUCRACY_MENU,
    FIVE_PLAYER_BUREAUCRACY_MENU,
)

from .board import (
    RostrumSupportRule,
    PlayerRostrumRules,
    ROSTRUM_SUPPORT_RULES,
    ROSTRUM_ADJACENCY_BY_PLAYER_COUNT,
    get_rostrum_support_rules,
    get_supporting_seats,
    get_supported_rostrum,
)

from .game_state import GameStateSnapshot, GameState

__all__ = [
    # Constants
    "Phase",
    "CampaignStep",
    "PieceType",
    "MoveType",
    "MoveCategory",
    "MoveRequirement",
    "TilePlayOptionType",
    "BureaucracyItemType",
    "PromotionLocation",
    "BureaucracyStep",
    "CredibilityLossReason",
    "MIN_PLAYERS",
    "MAX_PLAYERS",
    "PLAYER_OPTIONS",
    "MAX_SEATS_PER_PLAYER",
    "ROSTRUMS_PER_PLAYER",
    "SEATS_PER_ROSTRUM",
    "COMMUNITY_SLOTS_BY_PLAYER_COUNT",
    "CLOCKWISE_ORDER_BY_PLAYER_COUNT",
    "DEFAULT_CREDIBILITY",
    "MAX_CREDIBILITY",
    "TOTAL_TILES",
    "BLANK_TILE_ID",
    "BANK_SPACES_BY_PLAYER_COUNT",
    "MAX_MOVES_PER_TILE_PLAY",
    "PIECE_COUNTS_BY_PLAYER_COUNT",
    "TILE_KREDCOIN_VALUES",
    # Locations
    "LocationId",
    "LocationKind",
    "Location",
    "make_location_id",
    "parse_location_id",
    "seat_id",
    "rostrum_id",
    "office_id",
    "community_id",
    # Components
    "Position",
    "Piece",
    "Tile",
    "BoardTile",
    "TrackedMove",
    "PieceIndex",
    # Player
    "Player",
    # Moves
    "DefinedMove",
    "TilePlayOption",
    "DEFINED_MOVES",
    "TILE_PLAY_OPTIONS",
    "is_move_allowed_in_tile_play_option",
    "get_move_requirement",
    "get_move_category",
    # Tiles
    "TileRequirement",
    "TILE_REQUIREMENTS",
    "normalize_tile_id",
    "get_tile_requirements",
    "tile_has_requirements",
    "build_tile_deck",
    # Bureaucracy
    "BureaucracyMenuItem",
    "BureaucracyPurchase",
    "BureaucracyPlayerState",
    "THREE_FOUR_PLAYER_BUREAUCRACY_MENU",
    "FIVE_PLAYER_BUREAUCRACY_MENU",
    # Board
    "RostrumSupportRule",
    "PlayerRostrumRules",
    "ROSTRUM_SUPPORT_RULES",
    "ROSTRUM_ADJACENCY_BY_PLAYER_COUNT",
    "get_rostrum_support_rules",
    "get_supporting_seats",
    "get_supported_rostrum",
    # Game State
    "GameStateSnapshot",
    "GameState",
]
