"""Constants and enums for the KRED game engine."""

from enum import Enum


class Phase(Enum):
    """Top-level game phases."""

    DRAFTING = "drafting"
    CAMPAIGN = "campaign"
    BUREAUCRACY = "bureaucracy"
    GAME_OVER = "game_over"


class CampaignStep(Enum):
    """Sub-steps of a single tile play during the campaign phase."""

    AWAITING_TILE = "awaiting_tile"
    TILE_PLAYED = "tile_played"  # Tile placed, tile player performing moves
    PENDING_ACCEPTANCE = "pending_acceptance"  # Receiver deciding
    PENDING_CHALLENGE = "pending_challenge"  # Bystanders may challenge
    CORRECTION_REQUIRED = "correction_required"


class PieceType(Enum):
    """Piece tiers, lowest first. Promotion moves a piece one tier up."""

    MARK = "Mark"
    HEEL = "Heel"
    PAWN = "Pawn"


class MoveType(Enum):
    """The six defined move types."""

    REMOVE = "REMOVE"
    ADVANCE = "ADVANCE"
    INFLUENCE = "INFLUENCE"
    ASSIST = "ASSIST"
    WITHDRAW = "WITHDRAW"
    ORGANIZE = "ORGANIZE"


class MoveCategory(Enum):
    """Move categories. O moves target opponents, M moves the player's own domain."""

    O = "O"
    M = "M"


class MoveRequirement(Enum):
    """Whether a move type must be performed when a tile asks for it."""

    MANDATORY = "MANDATORY"
    OPTIONAL = "OPTIONAL"


class TilePlayOptionType(Enum):
    """Ways a tile play can combine moves."""

    NO_MOVE = "NO_MOVE"
    ONE_OPTIONAL = "ONE_OPTIONAL"
    ONE_MANDATORY = "ONE_MANDATORY"
    ONE_OPTIONAL_AND_ONE_MANDATORY = "ONE_OPTIONAL_AND_ONE_MANDATORY"


class BureaucracyItemType(Enum):
    """Kinds of items on the bureaucracy menu."""

    MOVE = "MOVE"
    PROMOTION = "PROMOTION"
    CREDIBILITY = "CREDIBILITY"


class PromotionLocation(Enum):
    """Where a piece must sit to be promoted by a promotion purchase."""

    OFFICE = "OFFICE"
    ROSTRUM = "ROSTRUM"
    SEAT = "SEAT"


class BureaucracyStep(Enum):
    """States of the per-player bureaucracy purchase loop."""

    MENU_SHOWN = "menu_shown"
    ITEM_SELECTED = "item_selected"
    TURN_COMPLETE = "turn_complete"


class CredibilityLossReason(Enum):
    """Events that cost a player one point of credibility."""

    TILE_REJECTED_BY_RECEIVER = "tile_rejected_by_receiver"
    TILE_FAILED_CHALLENGE = "tile_failed_challenge"
    UNSUCCESSFUL_CHALLENGE = "unsuccessful_challenge"
    DID_NOT_REJECT_WHEN_CHALLENGED = "did_not_reject_when_challenged"


# Player limits
MIN_PLAYERS = 3
MAX_PLAYERS = 5
PLAYER_OPTIONS = (3, 4, 5)

# Domain geometry (fixed for every player count)
MAX_SEATS_PER_PLAYER = 6
ROSTRUMS_PER_PLAYER = 2
SEATS_PER_ROSTRUM = 3

# Community slots per player count
COMMUNITY_SLOTS_BY_PLAYER_COUNT = {3: 18, 4: 27, 5: 40}

# Clockwise order of player domains around the board.
# The 3-player board seats player 3 between players 1 and 2.
CLOCKWISE_ORDER_BY_PLAYER_COUNT = {
    3: (1, 3, 2),
    4: (1, 2, 3, 4),
    5: (1, 2, 3, 4, 5),
}

# Credibility
DEFAULT_CREDIBILITY = 3
MAX_CREDIBILITY = 3

# Tiles
TOTAL_TILES = 24
BLANK_TILE_ID = 25  # Only dealt in 5-player games
BLANK_TILE_KEY = "BLANK"
CAMPAIGN_STARTING_TILE_ID = 3  # Holder of this tile opens the campaign
BLANK_TILE_URL = "data:image/svg+xml,%3csvg xmlns='http://www.w3.org/2000/svg'/%3e"

# Bank capacity (tiles a player may hold in bureaucracy_tiles)
BANK_SPACES_BY_PLAYER_COUNT = {3: 8, 4: 6, 5: 5}

# Moves allowed during one tile play
MAX_MOVES_PER_TILE_PLAY = 2

# Piece counts per player count
PIECE_COUNTS_BY_PLAYER_COUNT: dict[int, dict[PieceType, int]] = {
    3: {PieceType.MARK: 12, PieceType.HEEL: 9, PieceType.PAWN: 3},
    4: {PieceType.MARK: 14, PieceType.HEEL: 13, PieceType.PAWN: 4},
    5: {PieceType.MARK: 18, PieceType.HEEL: 17, PieceType.PAWN: 5},
}

PIECE_IMAGE_URLS = {
    PieceType.MARK: "./images/mark-transparent_bg.png",
    PieceType.HEEL: "./images/heel-transparent_bg.png",
    PieceType.PAWN: "./images/pawn-transparent_bg.png",
}

# Seats that receive a Mark at the start of the game and of each campaign
INITIAL_MARK_SEATS = (1, 3, 5)

# Kredcoin value of each tile when banked for the bureaucracy phase
TILE_KREDCOIN_VALUES: dict[int, int] = {
    1: 1,
    2: 2,
    3: 0,
    4: 1,
    5: 2,
    6: 3,
    7: 4,
    8: 5,
    9: 1,
    10: 2,
    11: 4,
    12: 5,
    13: 5,
    14: 6,
    15: 3,
    16: 4,
    17: 3,
    18: 4,
    19: 6,
    20: 7,
    21: 8,
    22: 7,
    23: 8,
    24: 9,
    25: 0,  # Blank
}

# Promotion ladder
NEXT_PIECE_TIER = {
    PieceType.MARK: PieceType.HEEL,
    PieceType.HEEL: PieceType.PAWN,
}

# Seats that receive a Mark when a campaign round begins
CAMPAIGN_MARK_SEATS_BY_PLAYER_COUNT = {
    3: (1, 3, 5),
    4: (2, 4, 6),
    5: (1, 3, 5),
}
