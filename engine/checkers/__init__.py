"""Checkers rules engine: bitboard move generation, validation and turn history."""

from .core import (
    BitSet, SingleBitSet, Square, Player, BoardState,
    Move, MoveGenerator, MoveValidator, MoveIter, Turn,
    Board, BoardBuilder, BoardStatus,
)

__version__ = "0.1.0"
