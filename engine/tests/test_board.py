"""Tests for the board: turn push/pop, status and board building."""

import logging
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from checkers.core.bitboard import BitSet, SingleBitSet
from checkers.core.board import Board, BoardBuilder, BoardStatus
from checkers.core.errors import (
    DuplicateAssignments, GameConcluded, InvalidFormat, MoveError,
    NoPieceAtSource, WrongPlayerPiece, DestinationOccupied, IllegalDestination
)
from checkers.core.moves import Move
from checkers.core.square import Square
from checkers.core.state import (
    BoardState, Player, INITIAL_KINGS, INITIAL_RED_PIECES
)
from checkers.core.turn import Turn


class TestBoardInitialization:
    def test_default_board(self):
        board = Board()
        assert board.current_state == BoardState.initial()
        assert board.current_state.active_player is Player.BLACK
        assert board.status() == BoardStatus()
        assert board.status().ongoing
        assert len(board) == 1
        assert board.turns_played == 0

    def test_legal_moves(self):
        assert len(list(Board().legal_moves())) == 7


class TestPushTurn:
    def test_push_turn_with_single_move(self):
        board = Board()
        state = board.push_turn("11x15")

        assert state.active_player is Player.RED
        assert state.red_pieces == INITIAL_RED_PIECES
        assert state.black_pieces == BitSet(
            0b01010101_10101010_01010001_00001000_00000000_00000000_00000000_00000000)
        assert state.kings == INITIAL_KINGS
        assert state.occupied.count() == 24
        assert board.current_state is state

    def test_push_turn_with_many_turns(self):
        board = Board()

        state = board.push_turn("11x16")
        assert state.active_player is Player.RED
        assert state.black_pieces == BitSet(
            0b01010101_10101010_01010001_00000010_00000000_00000000_00000000_00000000)

        state = board.push_turn("24x19")
        assert state.active_player is Player.BLACK
        assert state.red_pieces == BitSet(
            0b00000000_00000000_00000000_00000000_00000100_10101000_01010101_10101010)
        assert state.black_pieces == BitSet(
            0b01010101_10101010_01010001_00000010_00000000_00000000_00000000_00000000)
        assert state.kings == INITIAL_KINGS
        assert board.turns_played == 2

    def test_push_accepts_turns_and_moves(self):
        board = Board()
        board.push_turn(Turn.from_notation("11-15"))
        board.push_turn([Move.from_notation("22-18")])
        board.push_turn([(15, 22)])
        assert board.current_state.red_pieces.count() == 11

    def test_capture(self):
        board = BoardBuilder().piece(Player.BLACK, 9).piece(Player.RED, 14).piece(Player.RED, 30).build()
        state = board.push_turn("9x18")

        assert not state.red_pieces.contains(Square.FOURTEEN.to_bitset())
        assert state.red_pieces == Square.THIRTY.to_bitset()
        assert state.black_pieces == Square.EIGHTEEN.to_bitset()
        assert state.active_player is Player.RED

    def test_multi_jump_turn(self):
        board = (BoardBuilder()
                 .piece(Player.BLACK, 9)
                 .piece(Player.RED, 14)
                 .piece(Player.RED, 23)
                 .build())
        state = board.push_turn("9x18,18x27")

        assert state.red_pieces.empty()
        assert state.black_pieces == Square.TWENTY_SEVEN.to_bitset()
        assert state.active_player is Player.RED
        assert board.status() == BoardStatus(winner=Player.BLACK)

    def test_promotion_through_turn(self):
        board = BoardBuilder().piece(Player.BLACK, 27).piece(Player.RED, 5).build()
        state = board.push_turn("27-32")
        assert state.kings == Square.THIRTY_TWO.to_bitset()

    def test_king_can_move_backwards(self):
        board = BoardBuilder().king(Player.BLACK, 18).piece(Player.RED, 32).build()
        state = board.push_turn("18-14")
        assert state.black_pieces == Square.FOURTEEN.to_bitset()
        assert state.kings == Square.FOURTEEN.to_bitset()


class TestPushTurnErrors:
    def test_destination_occupied(self):
        with pytest.raises(DestinationOccupied):
            Board().push_turn("1x6")

    def test_wrong_player_piece(self):
        with pytest.raises(WrongPlayerPiece):
            Board().push_turn("23x18")

    def test_no_player_piece(self):
        with pytest.raises(NoPieceAtSource):
            Board().push_turn("18x15")

    def test_illegal_destination(self):
        with pytest.raises(IllegalDestination):
            Board().push_turn("10-16")

    def test_bad_notation_is_not_a_move_error(self):
        board = Board()
        with pytest.raises(InvalidFormat):
            board.push_turn("eleven to fifteen")
        assert len(board) == 1

    def test_failed_turn_leaves_board_unchanged(self):
        board = Board()
        board.push_turn("11-15")
        before = board.current_state

        # First move is fine, second belongs to the wrong player
        with pytest.raises(WrongPlayerPiece):
            board.push_turn("22-18,9-13")

        assert board.current_state == before
        assert board.current_state is before
        assert len(board) == 2

    def test_later_moves_see_earlier_captures(self):
        board = (BoardBuilder()
                 .king(Player.BLACK, 9)
                 .piece(Player.RED, 14)
                 .build())
        # The king's return jump would pass over the square it just emptied
        with pytest.raises(IllegalDestination):
            board.push_turn("9x18,18x9")
        assert board.current_state.red_pieces == Square.FOURTEEN.to_bitset()

    def test_game_concluded(self):
        board = BoardBuilder().piece(Player.RED, 5).piece(Player.BLACK, 1).current_player(Player.RED).build()
        with pytest.raises(GameConcluded):
            board.push_turn("5-1")

    def test_move_errors_share_a_base_class(self):
        with pytest.raises(MoveError):
            Board().push_turn("18x15")

    def test_rejected_turn_is_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="checkers.core.board"):
            with pytest.raises(WrongPlayerPiece):
                Board().push_turn("23-18")
        assert "Rejected turn 23-18" in caplog.text

    def test_move_between_light_cells_is_rejected_as_move_error(self, caplog):
        board = Board()
        with caplog.at_level(logging.INFO, logger="checkers.core.board"):
            with pytest.raises(NoPieceAtSource):
                board.push_turn([Move(SingleBitSet(1), SingleBitSet(1 << 9))])
        assert "Rejected turn bit 0 -> bit 9" in caplog.text
        assert len(board) == 1


class TestPopTurn:
    def test_pop_turn(self):
        board = Board()
        pushed = board.push_turn("11x16")

        popped = board.pop_turn()

        assert popped is pushed
        assert popped.active_player is Player.RED
        assert board.current_state == BoardState.initial()

    def test_pop_turn_returns_none_when_no_turns_left_to_pop(self):
        board = Board()
        assert board.pop_turn() is None
        assert len(board) == 1

    def test_push_pop_sequence(self):
        board = Board()
        states = [board.current_state]
        for turn in ("11-15", "22-18", "15x22"):
            states.append(board.push_turn(turn))
        assert board.history == tuple(states)

        for expected in reversed(states[:-1]):
            board.pop_turn()
            assert board.current_state == expected
        assert board.pop_turn() is None


class TestStatus:
    def test_player_without_moves_loses(self):
        # Red's only man is blocked on square 5
        board = BoardBuilder().current_player(Player.RED).piece(Player.RED, 5).piece(Player.BLACK, 1).build()
        status = board.status()
        assert status == BoardStatus(winner=Player.BLACK)
        assert status.complete

    def test_empty_board_is_complete(self):
        board = BoardBuilder().build()
        assert board.status() == BoardStatus(winner=Player.RED)

    def test_opponent_pieces_do_not_count(self):
        board = BoardBuilder().current_player(Player.BLACK).piece(Player.RED, 22).build()
        assert board.status().winner is Player.RED


class TestBoardBuilder:
    def test_simple_board_creation(self):
        board = (BoardBuilder()
                 .current_player(Player.RED)
                 .piece(Player.RED, Square.SIX)
                 .piece(Player.BLACK, Square.EIGHTEEN)
                 .king(Player.BLACK, Square.EIGHT)
                 .build())

        state = board.current_state
        assert state.active_player is Player.RED
        assert state.black_pieces == BitSet(
            0b00000000_00000010_00000000_00000000_00010000_00000000_00000000_00000000)
        assert state.red_pieces == BitSet(
            0b00000000_00100000_00000000_00000000_00000000_00000000_00000000_00000000)
        assert state.kings == BitSet(
            0b00000000_00000010_00000000_00000000_00000000_00000000_00000000_00000000)
        assert len(board) == 1

    def test_multiple_placements_on_same_square(self):
        builder = BoardBuilder().piece(Player.RED, Square.SIX).piece(Player.BLACK, Square.SIX)
        with pytest.raises(DuplicateAssignments):
            builder.build()

    def test_king_and_piece_on_same_square(self):
        with pytest.raises(DuplicateAssignments):
            BoardBuilder().piece(Player.RED, 6).king(Player.RED, 6).build()

    def test_squares_by_number(self):
        state = BoardBuilder().piece(Player.RED, 6).piece(Player.BLACK, "18").build_state()
        assert state.piece_at(Square.SIX) == (Player.RED, False)
        assert state.piece_at(Square.EIGHTEEN) == (Player.BLACK, False)

    def test_current_player_is_independent_of_placements(self):
        board = BoardBuilder().current_player(Player.RED).piece(Player.BLACK, 1).build()
        assert board.current_state.active_player is Player.RED
