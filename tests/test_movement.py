"""Tests for board queries and piece movement helpers."""

import pytest

from core.components import Position
from core.constants import MoveType, PieceType
from data.board_layouts import BOARD_CENTERS, get_drop_location
from engine.movement import (
    can_move_from_community,
    count_pieces_in_seats,
    are_supporting_seats_full_for_rostrum,
    count_pieces_in_player_rostrums,
    are_both_rostrums_filled_for_player,
    calculate_piece_rotation,
    move_piece,
    apply_moves,
    get_player_rostrum_ids,
)


# =============================================================================
# Community Priority Tests
# =============================================================================


class TestCommunityPriority:
    """Marks leave the community first, then Heels, then Pawns."""

    def test_mark_always_leaves(self, make_piece):
        """Marks are never blocked."""
        mark = make_piece("m", "community1")
        pieces = [mark, make_piece("m2", "community2")]
        assert can_move_from_community(mark, pieces)

    def test_heel_blocked_by_mark(self, make_piece):
        """A Heel waits while a Mark is in the community."""
        heel = make_piece("h", "community1", PieceType.HEEL)
        pieces = [heel, make_piece("m", "community2")]
        assert not can_move_from_community(heel, pieces)

    def test_heel_leaves_without_marks(self, make_piece):
        """A Heel leaves once no Mark is waiting."""
        heel = make_piece("h", "community1", PieceType.HEEL)
        pieces = [heel, make_piece("p", "community2", PieceType.PAWN), make_piece("m", "p1_seat1")]
        assert can_move_from_community(heel, pieces)

    def test_pawn_blocked_by_heel(self, make_piece):
        """A Pawn waits while a Heel is in the community."""
        pawn = make_piece("p", "community1", PieceType.PAWN)
        pieces = [pawn, make_piece("h", "community2", PieceType.HEEL)]
        assert not can_move_from_community(pawn, pieces)

    def test_pending_pieces_ignored(self, make_piece):
        """Pieces that just entered the community do not block."""
        heel = make_piece("h", "community1", PieceType.HEEL)
        pieces = [heel, make_piece("m", "community2")]
        assert can_move_from_community(heel, pieces, pending_piece_ids={"m"})


# =============================================================================
# Support Tests
# =============================================================================


class TestSupport:
    """Test seat and rostrum fill queries."""

    def test_count_pieces_in_seats(self, make_piece):
        """Only pieces on the listed seats count."""
        pieces = [make_piece("a", "p1_seat1"), make_piece("b", "p1_seat2"), make_piece("c", "p2_seat1")]
        assert count_pieces_in_seats(["p1_seat1", "p1_seat2", "p1_seat3"], pieces) == 2

    def test_supporting_seats_full(self, make_piece):
        """A rostrum is supported once seats 1-3 are all occupied."""
        pieces = [make_piece(f"s{i}", f"p1_seat{i}") for i in (1, 2, 3)]
        assert are_supporting_seats_full_for_rostrum("p1_rostrum1", pieces)
        assert not are_supporting_seats_full_for_rostrum("p1_rostrum2", pieces)
        assert not are_supporting_seats_full_for_rostrum("p1_seat1", pieces)

    def test_rostrum_counts(self, make_piece):
        """Rostrum fill is counted per player."""
        pieces = [make_piece("a", "p2_rostrum1")]
        assert count_pieces_in_player_rostrums(2, pieces) == 1
        assert not are_both_rostrums_filled_for_player(2, pieces)
        pieces.append(make_piece("b", "p2_rostrum2"))
        assert are_both_rostrums_filled_for_player(2, pieces)
        assert count_pieces_in_player_rostrums(9, pieces) == 0
        assert not are_both_rostrums_filled_for_player(9, pieces)

    def test_player_rostrum_ids(self):
        """Rostrum ids exist only for players in the game."""
        assert get_player_rostrum_ids(2, 3) == ["p2_rostrum1", "p2_rostrum2"]
        assert get_player_rostrum_ids(4, 3) == []


# =============================================================================
# Rotation Tests
# =============================================================================


class TestRotation:
    """Pieces face away from the board center."""

    def test_below_center(self):
        """A piece straight below the center faces down."""
        center = BOARD_CENTERS[3]
        position = Position(top=center.top + 10, left=center.left)
        assert calculate_piece_rotation(position, 3) == pytest.approx(180.0)

    def test_right_of_center(self):
        """A piece straight right of the center is turned a quarter."""
        center = BOARD_CENTERS[4]
        position = Position(top=center.top, left=center.left + 10)
        assert calculate_piece_rotation(position, 4) == pytest.approx(90.0)

    def test_community_and_office_unrotated(self):
        """Community and office pieces stay upright."""
        position = Position(top=90.0, left=90.0)
        assert calculate_piece_rotation(position, 3, "community4") == 0.0
        assert calculate_piece_rotation(position, 3, "p1_office") == 0.0

    def test_unknown_player_count_uses_default_center(self):
        """Boards without a layout rotate around (50, 50)."""
        assert calculate_piece_rotation(Position(top=50.0, left=40.0), 9) == pytest.approx(270.0)


# =============================================================================
# Move Application Tests
# =============================================================================


class TestMovePiece:
    """Test producing new piece lists."""

    def test_move_piece(self, make_piece):
        """The moved piece takes the drop location's position."""
        pieces = [make_piece("a", "community1"), make_piece("b", "p1_seat1")]
        result = move_piece(pieces, "a", "p1_seat2", 3)

        assert result is not pieces
        assert pieces[0].location_id == "community1"
        assert result[0].location_id == "p1_seat2"
        assert result[0].position == get_drop_location(3, "p1_seat2").position
        assert result[1] is pieces[1]

    def test_unknown_location_is_noop(self, make_piece):
        """Moving to an unknown location leaves the pieces unchanged."""
        pieces = [make_piece("a", "community1")]
        assert move_piece(pieces, "a", "p7_seat1", 3) == pieces

    def test_apply_moves_in_order(self, make_piece, make_move):
        """Moves are applied one after another."""
        pieces = [make_piece("a", "community1")]
        moves = [
            make_move("a", MoveType.ADVANCE, "community1", "p1_seat1"),
            make_move("a", MoveType.ORGANIZE, "p1_seat1", "p1_seat2"),
        ]
        result = apply_moves(pieces, moves, 3)
        assert result[0].location_id == "p1_seat2"
