"""Tests for the core module (constants, locations, components and rule tables)."""

import pytest

from core.constants import (
    Phase,
    CampaignStep,
    PieceType,
    MoveType,
    MoveCategory,
    MoveRequirement,
    TilePlayOptionType,
    MIN_PLAYERS,
    MAX_PLAYERS,
    PLAYER_OPTIONS,
    COMMUNITY_SLOTS_BY_PLAYER_COUNT,
    PIECE_COUNTS_BY_PLAYER_COUNT,
    TILE_KREDCOIN_VALUES,
    BANK_SPACES_BY_PLAYER_COUNT,
    NEXT_PIECE_TIER,
)
from core.locations import (
    LocationKind,
    Location,
    make_location_id,
    parse_location_id,
    seat_id,
    rostrum_id,
    office_id,
    community_id,
    is_community,
    is_seat,
    is_rostrum,
    is_office,
    get_location_owner,
)
from core.components import Position, PieceIndex
from core.player import Player
from core.moves import (
    DEFINED_MOVES,
    TILE_PLAY_OPTIONS,
    is_move_allowed_in_tile_play_option,
    get_move_requirement,
    get_move_category,
)
from core.tiles import (
    TILE_REQUIREMENTS,
    normalize_tile_id,
    get_tile_requirements,
    tile_has_requirements,
    build_tile_deck,
    make_tile,
)
from core.bureaucracy import (
    THREE_FOUR_PLAYER_BUREAUCRACY_MENU,
    FIVE_PLAYER_BUREAUCRACY_MENU,
)
from core.board import (
    ROSTRUM_SUPPORT_RULES,
    ROSTRUM_ADJACENCY_BY_PLAYER_COUNT,
    get_rostrum_support_rules,
    get_supporting_seats,
    get_supported_rostrum,
)
from core.game_state import GameState


# =============================================================================
# Constants Tests
# =============================================================================


class TestConstants:
    """Test game constants and enums."""

    def test_player_limits(self):
        """Games have 3 to 5 players."""
        assert MIN_PLAYERS == 3
        assert MAX_PLAYERS == 5
        assert PLAYER_OPTIONS == (3, 4, 5)

    def test_phases(self):
        """Game has four top-level phases."""
        assert len(Phase) == 4
        assert Phase.DRAFTING.value == "drafting"

    def test_campaign_steps(self):
        """A tile play passes through five steps."""
        assert len(CampaignStep) == 5

    @pytest.mark.parametrize(
        "player_count,total", [(3, 24), (4, 31), (5, 40)]
    )
    def test_piece_counts(self, player_count, total):
        """Piece counts sum to the documented totals."""
        counts = PIECE_COUNTS_BY_PLAYER_COUNT[player_count]
        assert sum(counts.values()) == total
        assert counts[PieceType.PAWN] == player_count

    def test_community_slots(self):
        """Community has 18, 27 and 40 slots."""
        assert COMMUNITY_SLOTS_BY_PLAYER_COUNT == {3: 18, 4: 27, 5: 40}

    def test_kredcoin_values(self):
        """Tiles 1-24 are worth 100 Kredcoin in total; tile 3 and blank are free."""
        assert sum(TILE_KREDCOIN_VALUES[i] for i in range(1, 25)) == 100
        assert TILE_KREDCOIN_VALUES[3] == 0
        assert TILE_KREDCOIN_VALUES[25] == 0

    def test_bank_spaces_hold_every_tile(self):
        """Banks fill exactly when every tile has been played."""
        for count in PLAYER_OPTIONS:
            assert BANK_SPACES_BY_PLAYER_COUNT[count] * count == len(build_tile_deck(count))

    def test_promotion_ladder(self):
        """Marks become Heels, Heels become Pawns, Pawns stay."""
        assert NEXT_PIECE_TIER[PieceType.MARK] == PieceType.HEEL
        assert NEXT_PIECE_TIER[PieceType.HEEL] == PieceType.PAWN
        assert PieceType.PAWN not in NEXT_PIECE_TIER


# =============================================================================
# Location Tests
# =============================================================================


class TestLocations:
    """Test location id parsing and construction."""

    def test_parse_seat(self):
        """Seat ids parse to kind, owner and index."""
        location = parse_location_id("p2_seat4")
        assert location == Location(kind=LocationKind.SEAT, player_id=2, index=4)
        assert location.is_seat
        assert location.belongs_to(2)
        assert not location.belongs_to(1)

    def test_parse_office(self):
        """Offices have no index."""
        location = parse_location_id("p3_office")
        assert location.kind == LocationKind.OFFICE
        assert location.index is None

    def test_parse_community(self):
        """Community slots have no owner."""
        location = parse_location_id("community12")
        assert location.is_community
        assert location.player_id is None
        assert location.index == 12
        assert not location.belongs_to(1)

    @pytest.mark.parametrize(
        "bad", [None, "", "p1_seat", "p1_office2", "seat1", "p1_throne1", "community"]
    )
    def test_malformed_ids(self, bad):
        """Malformed ids parse to None."""
        assert parse_location_id(bad) is None

    def test_round_trip_through_str(self):
        """str(Location) gives the id back."""
        for loc_id in ("p1_seat6", "p4_rostrum2", "p5_office", "community40"):
            assert str(parse_location_id(loc_id)) == loc_id

    def test_constructors(self):
        """Convenience constructors build ids."""
        assert seat_id(1, 3) == "p1_seat3"
        assert rostrum_id(2, 1) == "p2_rostrum1"
        assert office_id(4) == "p4_office"
        assert community_id(7) == "community7"
        assert make_location_id(LocationKind.OFFICE, 1, 5) == "p1_office"

    def test_predicates(self):
        """Predicates handle None and malformed ids."""
        assert is_community("community1")
        assert is_seat("p1_seat1")
        assert is_rostrum("p1_rostrum2")
        assert is_office("p1_office")
        assert not is_community(None)
        assert not is_seat("nonsense")
        assert get_location_owner("p3_seat2") == 3
        assert get_location_owner("community3") is None


# =============================================================================
# Component Tests
# =============================================================================


class TestPieceIndex:
    """Test the piece lookup index."""

    def test_lookup_by_id_and_location(self, make_piece):
        """Pieces are found by id and by location."""
        a = make_piece("a", "p1_seat1")
        b = make_piece("b", "community1", PieceType.HEEL)
        index = PieceIndex([a, b])

        assert index.get("a") is a
        assert index.at("community1") is b
        assert index.at("p1_seat2") is None
        assert index.at(None) is None
        assert len(index) == 2

    def test_vacancy(self, make_piece):
        """A location is vacant for the piece already on it."""
        index = PieceIndex([make_piece("a", "p1_seat1")])
        assert index.is_vacant_for("p1_seat1", "a")
        assert not index.is_vacant_for("p1_seat1", "b")
        assert index.is_vacant_for("p1_seat2", "b")

    def test_domain_and_community(self, make_piece):
        """Domain and community queries split pieces by owner."""
        pieces = [
            make_piece("a", "p1_seat1"),
            make_piece("b", "p1_office"),
            make_piece("c", "p2_seat1"),
            make_piece("d", "community3"),
            make_piece("e", None),
        ]
        index = PieceIndex(pieces)
        assert [p.id for p in index.in_domain(1)] == ["a", "b"]
        assert [p.id for p in index.in_community()] == ["d"]
        assert index.occupied_locations() == {"p1_seat1", "p1_office", "p2_seat1", "community3"}

    def test_moved_to_returns_new_piece(self, make_piece):
        """Pieces are immutable; moved_to returns a copy."""
        piece = make_piece("a", "p1_seat1")
        moved = piece.moved_to("p1_seat2", Position(top=1.0, left=2.0), 45.0)
        assert piece.location_id == "p1_seat1"
        assert moved.location_id == "p1_seat2"
        assert moved.rotation == 45.0
        assert moved.id == piece.id


# =============================================================================
# Player Tests
# =============================================================================


class TestPlayer:
    """Test Player tile bookkeeping."""

    def test_defaults(self):
        """New players hold nothing and have full credibility."""
        player = Player(player_id=1)
        assert player.hand == []
        assert player.kept_tiles == []
        assert player.bureaucracy_tiles == []
        assert player.credibility == 3

    def test_keep_from_hand(self, make_player):
        """Keeping a tile moves it from hand to kept tiles."""
        player = make_player(1, hand=(4, 9))
        tile = player.keep_from_hand(9)
        assert tile.id == 9
        assert [t.id for t in player.hand] == [4]
        assert player.has_kept_tile(9)

    def test_keep_missing_tile_raises(self, make_player):
        """Keeping a tile not in hand is a bookkeeping error."""
        player = make_player(1, hand=(4,))
        with pytest.raises(ValueError):
            player.keep_from_hand(5)

    def test_take_kept_tile(self, make_player):
        """Taking a kept tile removes it."""
        player = make_player(1, kept=(2, 3))
        assert player.take_kept_tile(3).id == 3
        assert not player.has_kept_tile(3)
        with pytest.raises(ValueError):
            player.take_kept_tile(3)

    def test_bank_tile(self, make_player):
        """Banked tiles are appended."""
        player = make_player(1, banked=(1,))
        player.bank_tile(make_tile(7))
        assert [t.id for t in player.bureaucracy_tiles] == [1, 7]


# =============================================================================
# Move Definition Tests
# =============================================================================


class TestDefinedMoves:
    """Test the six defined moves and tile play options."""

    def test_six_moves_three_per_category(self):
        """Three O moves are optional, three M moves mandatory."""
        assert len(DEFINED_MOVES) == 6
        o_moves = [m for m in DEFINED_MOVES.values() if m.category == MoveCategory.O]
        m_moves = [m for m in DEFINED_MOVES.values() if m.category == MoveCategory.M]
        assert len(o_moves) == 3
        assert len(m_moves) == 3
        assert all(m.requirement == MoveRequirement.OPTIONAL for m in o_moves)
        assert all(m.requirement == MoveRequirement.MANDATORY for m in m_moves)

    def test_move_lookups(self):
        """Requirement and category lookups."""
        assert get_move_requirement(MoveType.ADVANCE) == MoveRequirement.MANDATORY
        assert get_move_requirement(MoveType.ASSIST) == MoveRequirement.OPTIONAL
        assert get_move_category(MoveType.INFLUENCE) == MoveCategory.O
        assert get_move_category(MoveType.ORGANIZE) == MoveCategory.M

    def test_unknown_move_lookups_degrade(self):
        """Unknown move types fall back instead of raising."""
        assert get_move_requirement("TELEPORT") == MoveRequirement.OPTIONAL
        assert get_move_category("TELEPORT") is None

    def test_tile_play_options(self):
        """Options list the moves they allow."""
        assert len(TILE_PLAY_OPTIONS) == 4
        assert not TILE_PLAY_OPTIONS[TilePlayOptionType.NO_MOVE].requires_action
        assert is_move_allowed_in_tile_play_option(
            MoveType.REMOVE, TilePlayOptionType.ONE_OPTIONAL
        )
        assert not is_move_allowed_in_tile_play_option(
            MoveType.ADVANCE, TilePlayOptionType.ONE_OPTIONAL
        )
        assert not is_move_allowed_in_tile_play_option(
            MoveType.ADVANCE, TilePlayOptionType.NO_MOVE
        )
        assert not is_move_allowed_in_tile_play_option(MoveType.ADVANCE, "BOGUS")
        combined = TILE_PLAY_OPTIONS[TilePlayOptionType.ONE_OPTIONAL_AND_ONE_MANDATORY]
        assert set(combined.allowed_move_types) == set(MoveType)


# =============================================================================
# Tile Tests
# =============================================================================


class TestTiles:
    """Test tile requirement data and the deck."""

    def test_twenty_five_entries(self):
        """'01'..'24' plus BLANK."""
        assert len(TILE_REQUIREMENTS) == 25
        assert "BLANK" in TILE_REQUIREMENTS

    def test_only_blank_is_rejectable(self):
        """Only the blank tile can be rejected outright and it requires nothing."""
        rejectable = [t for t in TILE_REQUIREMENTS.values() if t.can_be_rejected]
        assert [t.tile_id for t in rejectable] == ["BLANK"]
        assert TILE_REQUIREMENTS["BLANK"].required_moves == ()

    def test_requirements_at_most_two(self):
        """Tiles require zero, one or two moves of different categories."""
        for requirement in TILE_REQUIREMENTS.values():
            assert len(requirement.required_moves) <= 2
            categories = [get_move_category(m) for m in requirement.required_moves]
            assert len(categories) == len(set(categories))

    def test_tile_three(self):
        """Tile 03 requires INFLUENCE and ADVANCE."""
        requirement = get_tile_requirements(3)
        assert requirement.required_moves == (MoveType.INFLUENCE, MoveType.ADVANCE)
        assert requirement.description == "(O) Influence and (M) Advance"

    @pytest.mark.parametrize(
        "raw,key", [(3, "03"), ("3", "03"), ("03", "03"), (25, "BLANK"), ("blank", "BLANK")]
    )
    def test_normalize_tile_id(self, raw, key):
        """Numeric and string ids normalize to table keys."""
        assert normalize_tile_id(raw) == key

    def test_unknown_tiles(self):
        """Unknown tiles have no requirements."""
        assert normalize_tile_id(None) is None
        assert normalize_tile_id("x1") is None
        assert get_tile_requirements(99) is None
        assert not tile_has_requirements(99)
        assert not tile_has_requirements("BLANK")
        assert tile_has_requirements(1)

    @pytest.mark.parametrize("player_count,size", [(3, 24), (4, 24), (5, 25)])
    def test_deck_size(self, player_count, size):
        """Blank tile is only dealt in 5-player games."""
        deck = build_tile_deck(player_count)
        assert len(deck) == size
        assert len({t.id for t in deck}) == size


# =============================================================================
# Bureaucracy Menu Tests
# =============================================================================


class TestBureaucracyMenus:
    """Test the two bureaucracy menus."""

    def test_ten_items_price_descending(self):
        """Both menus have ten items in price-descending order."""
        for menu in (THREE_FOUR_PLAYER_BUREAUCRACY_MENU, FIVE_PLAYER_BUREAUCRACY_MENU):
            assert len(menu) == 10
            prices = [item.price for item in menu]
            assert prices == sorted(prices, reverse=True)

    def test_price_ratio(self):
        """The 3-4 player menu costs 1.5x the 5 player menu."""
        for big, small in zip(THREE_FOUR_PLAYER_BUREAUCRACY_MENU, FIVE_PLAYER_BUREAUCRACY_MENU):
            assert big.id == small.id
            assert big.price * 2 == small.price * 3

    def test_cheapest_is_credibility(self):
        """Credibility is the cheapest item."""
        assert THREE_FOUR_PLAYER_BUREAUCRACY_MENU[-1].id == "credibility"
        assert THREE_FOUR_PLAYER_BUREAUCRACY_MENU[-1].price == 3
        assert FIVE_PLAYER_BUREAUCRACY_MENU[-1].price == 2


# =============================================================================
# Board Rule Tests
# =============================================================================


class TestBoardRules:
    """Test rostrum support rules."""

    def test_support_seats(self):
        """Rostrum 1 is supported by seats 1-3, rostrum 2 by seats 4-6."""
        assert get_supporting_seats("p2_rostrum1") == ("p2_seat1", "p2_seat2", "p2_seat3")
        assert get_supporting_seats("p2_rostrum2") == ("p2_seat4", "p2_seat5", "p2_seat6")
        assert get_supporting_seats("p2_seat1") == ()

    def test_supported_rostrum(self):
        """Seats map back to their rostrum."""
        assert get_supported_rostrum("p1_seat3") == "p1_rostrum1"
        assert get_supported_rostrum("p1_seat4") == "p1_rostrum2"
        assert get_supported_rostrum("p1_office") is None

    def test_rules_per_player_count(self):
        """Rules cover the players in the game only."""
        assert set(get_rostrum_support_rules(4)) == {1, 2, 3, 4}
        assert get_rostrum_support_rules(6) == {}
        assert ROSTRUM_SUPPORT_RULES[1].office == "p1_office"

    def test_rostrum_ring_sizes(self):
        """One ring link per player."""
        for count in PLAYER_OPTIONS:
            assert len(ROSTRUM_ADJACENCY_BY_PLAYER_COUNT[count]) == count


# =============================================================================
# GameState Tests
# =============================================================================


@pytest.fixture
def state(three_players, make_piece) -> GameState:
    return GameState(
        player_count=3,
        players=three_players,
        pieces=[make_piece("a", "p1_seat1"), make_piece("b", "community1")],
    )


class TestGameState:
    """Test GameState access, snapshots and validation."""

    def test_player_access(self, state):
        """Players are found by id and index."""
        assert state.get_current_player().player_id == 1
        assert state.get_player(3).player_id == 3
        assert state.get_player_index(2) == 1
        with pytest.raises(ValueError):
            state.get_player(9)

    def test_current_player(self, state):
        """Current player can be set and advanced with wrap-around."""
        state.set_current_player(3)
        assert state.get_current_player().player_id == 3
        state.advance_current_player()
        assert state.get_current_player().player_id == 1

    def test_snapshot_restore(self, state, make_piece):
        """Restoring a snapshot puts the pieces back."""
        snapshot = state.snapshot()
        state.pieces = [make_piece("a", "p1_seat2")]
        state.restore(snapshot)
        assert [p.location_id for p in state.pieces] == ["p1_seat1", "community1"]

    def test_clone_is_deep(self, state):
        """Clones do not share players."""
        clone = state.clone()
        clone.players[0].credibility = 0
        assert state.players[0].credibility == 3

    def test_valid_state(self, state):
        """A consistent state has no errors."""
        assert state.validate() == []

    def test_validation_errors(self, state, make_piece):
        """Duplicates, shared locations and bad ids are reported."""
        state.pieces.append(make_piece("a", "p1_seat2"))
        state.pieces.append(make_piece("c", "p1_seat1"))
        state.pieces.append(make_piece("d", "p4_seat1"))
        state.pieces.append(make_piece("e", "community30"))
        errors = state.validate()
        assert any("Duplicate piece id" in e for e in errors)
        assert any("share location p1_seat1" in e for e in errors)
        assert any("belongs to no player" in e for e in errors)
        assert any("community slot 30" in e for e in errors)

    def test_invalid_player_count(self):
        """Player counts outside 3-5 are reported."""
        state = GameState(player_count=2, players=[])
        assert "Invalid player count" in state.validate()[0]

    def test_game_over(self, state):
        """is_game_over follows the phase."""
        assert not state.is_game_over()
        state.phase = Phase.GAME_OVER
        assert state.is_game_over()
