"""
Playable squares of a classical checkers board.

Squares use the conventional 1-32 numbering, starting at the top-left dark
square and running row by row. Each square maps to one fixed bit of a
bitboard (see the layout in ``bitboard.py``). The table is part of the
notation contract and must not change.
"""

from __future__ import annotations
import re
from enum import IntEnum
from numbers import Integral
from typing import Union

from .bitboard import SingleBitSet, bit
from .errors import InvalidFormat, OutOfRange, SquareConversionError

DECIMAL_PATTERN = re.compile(r'[0-9]+')


class Square(IntEnum):
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    ELEVEN = 11
    TWELVE = 12
    THIRTEEN = 13
    FOURTEEN = 14
    FIFTEEN = 15
    SIXTEEN = 16
    SEVENTEEN = 17
    EIGHTEEN = 18
    NINETEEN = 19
    TWENTY = 20
    TWENTY_ONE = 21
    TWENTY_TWO = 22
    TWENTY_THREE = 23
    TWENTY_FOUR = 24
    TWENTY_FIVE = 25
    TWENTY_SIX = 26
    TWENTY_SEVEN = 27
    TWENTY_EIGHT = 28
    TWENTY_NINE = 29
    THIRTY = 30
    THIRTY_ONE = 31
    THIRTY_TWO = 32

    @classmethod
    def from_number(cls, number: int) -> Square:
        """
        Look up a square by its conventional number.

        Raises:
            OutOfRange: If number is not in 1..32.
        """
        if not isinstance(number, Integral) or not 1 <= number <= 32:
            raise OutOfRange(f"Square number out of range: {number!r}")
        return cls(int(number))

    @classmethod
    def from_text(cls, text: str) -> Square:
        """
        Parse a decimal square number.

        Raises:
            InvalidFormat: If text is not a decimal integer.
            OutOfRange: If the number is not in 1..32.
        """
        if DECIMAL_PATTERN.fullmatch(text) is None:
            raise InvalidFormat(f"Square must be a decimal number: {text!r}")
        return cls.from_number(int(text))

    @classmethod
    def from_bitset(cls, cell: SingleBitSet) -> Square:
        """Inverse of ``to_bitset``."""
        try:
            return _SQUARE_BY_INDEX[cell.index]
        except KeyError:
            raise SquareConversionError(
                f"Bit {cell.index} is not a playable square"
            ) from None

    @classmethod
    def coerce(cls, value: Union[Square, int, str]) -> Square:
        """Accept a Square, a square number or its text form."""
        if isinstance(value, Square):
            return value
        if isinstance(value, str):
            return cls.from_text(value)
        return cls.from_number(value)

    @property
    def number(self) -> int:
        return int(self.value)

    @property
    def bit_index(self) -> int:
        return SQUARE_BITS[self.value - 1]

    def to_bitset(self) -> SingleBitSet:
        """Single-bit bitboard for this square."""
        return _SQUARE_CELLS[self.value - 1]

    def __str__(self) -> str:
        return str(self.value)


# Bit index of squares 1..32
SQUARE_BITS: tuple[int, ...] = (
    62, 60, 58, 56,
    55, 53, 51, 49,
    46, 44, 42, 40,
    39, 37, 35, 33,
    30, 28, 26, 24,
    23, 21, 19, 17,
    14, 12, 10, 8,
    7, 5, 3, 1,
)

_SQUARE_CELLS: tuple[SingleBitSet, ...] = tuple(SingleBitSet(bit(i)) for i in SQUARE_BITS)
_SQUARE_BY_INDEX: dict[int, Square] = {i: Square(n) for n, i in enumerate(SQUARE_BITS, start=1)}
