"""
Moves and move generation for checkers.

Pseudo-legal destinations are precomputed per cell and per piece kind at
module load. Legality against a concrete position is checked by
MoveValidator, and MoveIter combines both to enumerate legal moves lazily.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Union

from .bitboard import (
    NUM_CELLS, PLAYABLE_SQUARES, BitSet, SingleBitSet,
    bit, iter_bits, row_of, col_of, index_at, is_on_board
)
from .errors import (
    IdleMove, InvalidFormat, SquareConversionError,
    MoveError, NoPieceAtSource, WrongPlayerPiece, IllegalDestination, DestinationOccupied
)
from .square import Square
from .state import BoardState, Player

# "<src><sep><dst>", e.g. "11-15" or "18x25"
NOTATION_PATTERN = re.compile(r'^([1-9][0-9]*)([-xX])([1-9][0-9]*)$')

SquareLike = Union[Square, int, str]
MoveLike = Union['Move', str, Sequence[SquareLike]]


@dataclass(frozen=True)
class Move:
    """
    A piece moving from one cell to another.

    Moves carry no board context. A move of one diagonal step is a simple
    move, two diagonal steps is a jump; whether it is legal is decided by
    MoveValidator.
    """
    source: SingleBitSet
    destination: SingleBitSet

    def __post_init__(self):
        for name in ('source', 'destination'):
            value = getattr(self, name)
            if isinstance(value, Square):
                object.__setattr__(self, name, value.to_bitset())
            elif not isinstance(value, SingleBitSet):
                object.__setattr__(self, name, SingleBitSet(int(value)))
        if self.source == self.destination:
            raise IdleMove(f"Source and destination are the same cell (bit {self.source.index})")

    @classmethod
    def from_squares(cls, source: SquareLike, destination: SquareLike) -> Move:
        return cls(Square.coerce(source).to_bitset(), Square.coerce(destination).to_bitset())

    @classmethod
    def from_notation(cls, text: str) -> Move:
        """
        Parse checkers notation such as ``"11-15"`` or ``"18x25"``.

        The separator is not interpreted: ``-`` and ``x`` parse the same way.

        Raises:
            InvalidFormat: If text does not match ``<number><sep><number>``.
            OutOfRange: If either number is not a square.
            IdleMove: If both numbers are the same square.
        """
        match = NOTATION_PATTERN.fullmatch(text)
        if match is None:
            raise InvalidFormat(f"Invalid move notation: {text!r}")
        source = Square.from_text(match.group(1))
        destination = Square.from_text(match.group(3))
        return cls.from_squares(source, destination)

    @classmethod
    def convert(cls, value: MoveLike) -> Move:
        """Build a Move from a Move, notation text, or a (source, destination) pair."""
        if isinstance(value, Move):
            return value
        if isinstance(value, str):
            return cls.from_notation(value)
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return cls.from_squares(value[0], value[1])
        raise TypeError(f"Cannot convert {value!r} to a Move")

    @property
    def source_square(self) -> Square:
        return Square.from_bitset(self.source)

    @property
    def destination_square(self) -> Square:
        return Square.from_bitset(self.destination)

    @property
    def toggle_mask(self) -> BitSet:
        """Source and destination together; XOR it into a bitboard to move the piece."""
        return self.source | self.destination

    def _deltas(self) -> tuple[int, int]:
        return (
            abs(self.destination.row - self.source.row),
            abs(self.destination.col - self.source.col),
        )

    @property
    def is_simple(self) -> bool:
        return self._deltas() == (1, 1)

    @property
    def is_jump(self) -> bool:
        return self._deltas() == (2, 2)

    def midpoint(self) -> Optional[SingleBitSet]:
        """Cell jumped over by this move, or None if it is not a jump."""
        if not self.is_jump:
            return None
        return SingleBitSet(bit((self.source.index + self.destination.index) // 2))

    def capture(self) -> Optional[SingleBitSet]:
        """Cell whose piece this move would capture, or None."""
        return self.midpoint()

    def to_notation(self) -> str:
        """Canonical notation: ``"9x18"`` for jumps, ``"9-13"`` otherwise."""
        sep = 'x' if self.is_jump else '-'
        return f"{self.source_square.number}{sep}{self.destination_square.number}"

    def __str__(self) -> str:
        try:
            return self.to_notation()
        except SquareConversionError:
            return f"bit {self.source.index} -> bit {self.destination.index}"


# Diagonal directions (row_delta, col_delta)
FORWARD_DIRS = {
    player: ((player.forward, -1), (player.forward, 1)) for player in Player
}
KING_DIRS = ((1, -1), (1, 1), (-1, -1), (-1, 1))

# Table key for crowned pieces; men are keyed by their player
KING = None

# Precomputed tables (initialized at module load): [kind][cell index] -> destination mask
STEP_TABLE: dict[Optional[Player], list[int]] = {}
JUMP_TABLE: dict[Optional[Player], list[int]] = {}


def piece_kind(player: Player, king: bool) -> Optional[Player]:
    """Table key for a piece: KING for crowned pieces, else the owning player."""
    return KING if king else player


def _init_move_tables() -> None:
    """Precompute step and jump destinations for every playable cell."""
    for kind in (Player.RED, Player.BLACK, KING):
        directions = KING_DIRS if kind is KING else FORWARD_DIRS[kind]
        steps = [0] * NUM_CELLS
        jumps = [0] * NUM_CELLS
        for index in iter_bits(PLAYABLE_SQUARES.value):
            row, col = row_of(index), col_of(index)
            for dr, dc in directions:
                if is_on_board(row + dr, col + dc):
                    steps[index] |= bit(index_at(row + dr, col + dc))
                if is_on_board(row + 2 * dr, col + 2 * dc):
                    jumps[index] |= bit(index_at(row + 2 * dr, col + 2 * dc))
        STEP_TABLE[kind] = steps
        JUMP_TABLE[kind] = jumps


def _as_cell(cell: Union[SingleBitSet, Square]) -> SingleBitSet:
    return cell.to_bitset() if isinstance(cell, Square) else cell


class MoveGenerator:
    """Pseudo-legal moves from the static tables; blind to occupancy."""

    @staticmethod
    def step_destinations(cell: Union[SingleBitSet, Square], player: Player, king: bool = False) -> BitSet:
        return BitSet(STEP_TABLE[piece_kind(player, king)][_as_cell(cell).index])

    @staticmethod
    def jump_destinations(cell: Union[SingleBitSet, Square], player: Player, king: bool = False) -> BitSet:
        return BitSet(JUMP_TABLE[piece_kind(player, king)][_as_cell(cell).index])

    @staticmethod
    def destinations(cell: Union[SingleBitSet, Square], player: Player, king: bool = False) -> BitSet:
        """Every cell the piece could reach by a step or a jump."""
        return (
            MoveGenerator.step_destinations(cell, player, king)
            | MoveGenerator.jump_destinations(cell, player, king)
        )

    @staticmethod
    def by_cell(cell: Union[SingleBitSet, Square], player: Player, king: bool = False) -> Iterator[Move]:
        """
        Yield pseudo-legal moves for a piece on cell.

        Simple moves come first, then jumps, each in ascending bit order.
        """
        source = _as_cell(cell)
        for targets in (
            MoveGenerator.step_destinations(source, player, king),
            MoveGenerator.jump_destinations(source, player, king),
        ):
            for destination in targets.used_cells():
                yield Move(source, destination)


class MoveValidator:
    """Checks moves against a concrete position without modifying it."""

    def __init__(self, state: BoardState, player: Optional[Player] = None):
        self.state = state
        self.player = state.active_player if player is None else player

    def check(self, move: Move) -> Optional[MoveError]:
        """Return the first rule the move breaks, or None if it is legal."""
        state = self.state
        source, destination = move.source, move.destination

        if not state.occupied.contains(source):
            return NoPieceAtSource(move)
        if not state.pieces(self.player).contains(source):
            return WrongPlayerPiece(move)

        king = state.kings.contains(source)
        if not MoveGenerator.destinations(source, self.player, king).contains(destination):
            return IllegalDestination(move)

        captured = move.midpoint()
        if captured is not None and not state.pieces(self.player.opponent).contains(captured):
            return IllegalDestination(move, "A jump must pass over an opposing piece.")

        if state.occupied.contains(destination):
            return DestinationOccupied(move)

        return None

    def validate(self, move: MoveLike) -> Move:
        """
        Validate a move for the player.

        Returns:
            The validated Move.

        Raises:
            NoPieceAtSource, WrongPlayerPiece, IllegalDestination,
            DestinationOccupied: The first rule the move breaks.
        """
        move = Move.convert(move)
        error = self.check(move)
        if error is not None:
            raise error
        return move

    def is_legal(self, move: MoveLike) -> bool:
        return self.check(Move.convert(move)) is None


class MoveIter:
    """
    Lazily enumerate legal moves for a player.

    Pieces are visited in ascending bit order and each piece's moves in
    MoveGenerator order. The iterator is single-use.
    """

    def __init__(self, state: BoardState, player: Optional[Player] = None):
        self.state = state
        self.player = state.active_player if player is None else player
        self._moves = self._generate()

    def _generate(self) -> Iterator[Move]:
        validator = MoveValidator(self.state, self.player)
        kings = self.state.kings
        for cell in self.state.pieces(self.player).used_cells():
            for move in MoveGenerator.by_cell(cell, self.player, kings.contains(cell)):
                if validator.check(move) is None:
                    yield move

    def __iter__(self) -> MoveIter:
        return self

    def __next__(self) -> Move:
        return next(self._moves)

    def count(self) -> int:
        """Consume the iterator and return how many moves it produced."""
        return sum(1 for _ in self)


# Convenience functions
def get_legal_moves(state: BoardState, player: Optional[Player] = None) -> list[Move]:
    """Get all legal moves for the player (default: the player to move)."""
    return list(MoveIter(state, player))


def has_legal_moves(state: BoardState, player: Optional[Player] = None) -> bool:
    return next(MoveIter(state, player), None) is not None


def validate_move(state: BoardState, move: MoveLike) -> Move:
    """Validate a move for the player to move. See MoveValidator.validate."""
    return MoveValidator(state).validate(move)


# Initialize lookup tables at module load
_init_move_tables()
