"""
Exceptions raised by the checkers engine.

Two families:
- construction errors (notation, squares, bitboards, board setup) are raised
  before any board state exists
- move errors are raised while validating a turn and never leave a board
  partially updated
"""

from __future__ import annotations
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .moves import Move

__all__ = [
    'CheckersError',
    'NotationError', 'InvalidFormat', 'OutOfRange', 'IdleMove',
    'InvalidSingleBit', 'SquareConversionError',
    'BoardCreationError', 'DuplicateAssignments', 'InvalidPosition',
    'MoveError', 'NoPieceAtSource', 'WrongPlayerPiece', 'IllegalDestination',
    'DestinationOccupied', 'GameConcluded',
]


class CheckersError(Exception):
    """Base class for every error raised by the engine."""


# Notation

class NotationError(CheckersError, ValueError):
    """Checkers notation or a square number could not be understood."""


class InvalidFormat(NotationError):
    """Text did not match the expected notation format."""


class OutOfRange(NotationError):
    """Value lies outside the 1-32 squares of a classical checkers board."""


class IdleMove(NotationError):
    """Move would leave a piece standing still (source equals destination)."""


# Bitboards

class InvalidSingleBit(CheckersError, ValueError):
    """A single-bit bitboard was built from a value without exactly one bit set."""


class SquareConversionError(CheckersError, ValueError):
    """A single-bit bitboard does not correspond to a playable square."""


# Board setup

class BoardCreationError(CheckersError):
    """A board could not be assembled from the given placements."""


class DuplicateAssignments(BoardCreationError):
    """Two placements target the same square."""


class InvalidPosition(BoardCreationError):
    """Piece bitboards overlap or kings sit on empty squares."""


# Rules

class MoveError(CheckersError):
    """A move or turn breaks the rules for the current position."""

    default_message = "Illegal move."

    def __init__(self, move: Optional[Move] = None, message: Optional[str] = None):
        self.move = move
        text = message or self.default_message
        if move is not None:
            text = f"{text} ({move})"
        super().__init__(text)


class NoPieceAtSource(MoveError):
    default_message = "No piece occupies the source square."


class WrongPlayerPiece(MoveError):
    default_message = "The piece on the source square belongs to the other player."


class IllegalDestination(MoveError):
    default_message = "The piece cannot reach the destination square."


class DestinationOccupied(MoveError):
    default_message = "The destination square is already occupied."


class GameConcluded(MoveError):
    default_message = "The game is over; no further turns can be played."
