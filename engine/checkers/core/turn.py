"""
Turns: every move a player makes in one ply.

Checkers allows several chained jumps in a single turn, so a turn is an
ordered, non-empty sequence of moves. Turns are not checked against a board
until they are pushed onto one.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, Union

from .errors import InvalidFormat
from .moves import Move, MoveLike, SquareLike

TurnLike = Union['Turn', str, Iterable[MoveLike]]


@dataclass(frozen=True)
class Turn:
    moves: tuple[Move, ...]

    def __post_init__(self):
        moves = tuple(Move.convert(m) for m in self.moves)
        if not moves:
            raise InvalidFormat("A turn must contain at least one move")
        object.__setattr__(self, 'moves', moves)

    @classmethod
    def from_moves(cls, moves: Iterable[MoveLike]) -> Turn:
        """Create a turn from Moves, notation strings or square pairs."""
        return cls(tuple(moves))

    @classmethod
    def from_notation(cls, text: str) -> Turn:
        """
        Parse comma separated notation, e.g. ``"9x18,18x25"``.

        Whitespace around a segment is ignored. Parsing stops at the first
        bad segment and raises its error.
        """
        return cls(tuple(Move.from_notation(segment.strip()) for segment in text.split(',')))

    @classmethod
    def from_squares(cls, pairs: Iterable[tuple[SquareLike, SquareLike]]) -> Turn:
        return cls(tuple(Move.from_squares(source, destination) for source, destination in pairs))

    @classmethod
    def convert(cls, value: TurnLike) -> Turn:
        """Build a Turn from a Turn, notation text, a single Move, or an iterable of moves."""
        if isinstance(value, Turn):
            return value
        if isinstance(value, str):
            return cls.from_notation(value)
        if isinstance(value, Move):
            return cls((value,))
        return cls.from_moves(value)

    def to_notation(self) -> str:
        return ','.join(m.to_notation() for m in self.moves)

    def __iter__(self) -> Iterator[Move]:
        return iter(self.moves)

    def __len__(self) -> int:
        return len(self.moves)

    def __str__(self) -> str:
        return ','.join(str(m) for m in self.moves)
