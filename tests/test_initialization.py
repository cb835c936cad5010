"""Tests for dealing tiles and placing pieces."""

import random
from collections import Counter

import pytest

from core.constants import (
    COMMUNITY_SLOTS_BY_PLAYER_COUNT,
    PIECE_COUNTS_BY_PLAYER_COUNT,
    PLAYER_OPTIONS,
    PieceType,
)
from core.locations import is_community, is_seat, parse_location_id
from engine.initialization import (
    initialize_players,
    initialize_pieces,
    initialize_campaign_pieces,
    deal_campaign_tiles,
)


class TestInitializePlayers:
    """Players and dealt hands."""

    @pytest.mark.parametrize("player_count,hand_size", [(3, 8), (4, 6), (5, 5)])
    def test_even_hands(self, player_count, hand_size):
        """The deck divides evenly between the players."""
        players = initialize_players(player_count, random.Random(1))
        assert [p.player_id for p in players] == list(range(1, player_count + 1))
        assert all(len(p.hand) == hand_size for p in players)
        assert all(p.kept_tiles == [] and p.bureaucracy_tiles == [] for p in players)

    def test_every_tile_dealt_once(self):
        """Tiles 1-25 are dealt exactly once in a 5-player game."""
        players = initialize_players(5, random.Random(2))
        ids = sorted(t.id for p in players for t in p.hand)
        assert ids == list(range(1, 26))

    def test_seed_is_reproducible(self):
        """The same seed deals the same hands."""
        first = initialize_players(4, random.Random(7))
        second = initialize_players(4, random.Random(7))
        assert [[t.id for t in p.hand] for p in first] == [[t.id for t in p.hand] for p in second]

    def test_starting_credibility(self):
        """Players start with the configured credibility."""
        assert all(p.credibility == 2 for p in initialize_players(3, credibility=2))

    def test_unsupported_count(self):
        """Unsupported player counts produce no players."""
        assert initialize_players(2) == []
        assert initialize_players(6) == []


class TestInitializePieces:
    """Pieces shown during the draft."""

    @pytest.mark.parametrize("player_count", PLAYER_OPTIONS)
    def test_marks_on_odd_seats(self, player_count):
        """Every domain shows Marks on seats 1, 3 and 5."""
        pieces = initialize_pieces(player_count)
        assert len(pieces) == 3 * player_count
        assert all(p.name == PieceType.MARK for p in pieces)
        seats = {parse_location_id(p.location_id).index for p in pieces}
        assert seats == {1, 3, 5}

    def test_unsupported_count(self):
        assert initialize_pieces(7) == []


class TestInitializeCampaignPieces:
    """Pieces at the start of a campaign round."""

    @pytest.mark.parametrize(
        "player_count,community_used", [(3, 15), (4, 19), (5, 25)]
    )
    def test_piece_counts(self, player_count, community_used):
        """Every piece is placed; the rest of the community stays empty."""
        pieces = initialize_campaign_pieces(player_count)
        counts = Counter(p.name for p in pieces)
        assert counts == Counter(PIECE_COUNTS_BY_PLAYER_COUNT[player_count])

        in_community = [p for p in pieces if is_community(p.location_id)]
        assert len(in_community) == community_used
        assert community_used <= COMMUNITY_SLOTS_BY_PLAYER_COUNT[player_count]

    def test_four_player_even_seats(self):
        """The 4-player board starts Marks on seats 2, 4 and 6."""
        pieces = initialize_campaign_pieces(4)
        seats = {parse_location_id(p.location_id).index for p in pieces if is_seat(p.location_id)}
        assert seats == {2, 4, 6}

    def test_community_order(self):
        """Marks fill the community first, then Heels, then Pawns."""
        pieces = initialize_campaign_pieces(3)
        community = sorted(
            (p for p in pieces if is_community(p.location_id)),
            key=lambda p: parse_location_id(p.location_id).index,
        )
        names = [p.name for p in community]
        assert names == [PieceType.MARK] * 3 + [PieceType.HEEL] * 9 + [PieceType.PAWN] * 3

    def test_unique_ids_and_locations(self):
        """No two pieces share an id or a location."""
        pieces = initialize_campaign_pieces(5)
        assert len({p.id for p in pieces}) == len(pieces)
        assert len({p.location_id for p in pieces}) == len(pieces)

    def test_unsupported_count(self):
        assert initialize_campaign_pieces(2) == []


class TestDealCampaignTiles:
    """A new campaign round deals straight into kept tiles."""

    def test_deal(self, make_player):
        """Old tiles are cleared and a fresh deck is dealt."""
        players = [make_player(i, kept=(1,), banked=(2, 3), hand=(4,)) for i in range(1, 4)]
        deal_campaign_tiles(players, random.Random(3))

        assert all(p.hand == [] and p.bureaucracy_tiles == [] for p in players)
        assert all(len(p.kept_tiles) == 8 for p in players)
        assert sorted(t.id for p in players for t in p.kept_tiles) == list(range(1, 25))

    def test_unsupported_count(self, make_player):
        """Two players are left untouched."""
        players = [make_player(1, kept=(1,)), make_player(2)]
        deal_campaign_tiles(players)
        assert [t.id for t in players[0].kept_tiles] == [1]
