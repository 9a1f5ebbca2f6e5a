"""
Bitboard utilities for checkers.

Board layout (8 rows x 8 cols = 64 cells, one bit each). Row 8 is the top
byte, and within a byte bit 7 is the leftmost column. Only the 32 dark cells
are playable; their conventional square numbers are shown:

  8 |  .  1  .  2  .  3  .  4      bits 63..56
  7 |  5  .  6  .  7  .  8  .      bits 55..48
  6 |  .  9  . 10  . 11  . 12      bits 47..40
  5 | 13  . 14  . 15  . 16  .      bits 39..32
  4 |  . 17  . 18  . 19  . 20      bits 31..24
  3 | 21  . 22  . 23  . 24  .      bits 23..16
  2 |  . 25  . 26  . 27  . 28      bits 15..8
  1 | 29  . 30  . 31  . 32  .      bits 7..0
    +------------------------
       a  b  c  d  e  f  g  h

Cell index = row * 8 + (7 - col) (row 0 = row 1, col 0 = file a)
"""

from __future__ import annotations
from dataclasses import dataclass
from numbers import Integral
from typing import Iterator, Optional

from .errors import InvalidSingleBit

__all__ = [
    'ROWS', 'COLS', 'NUM_CELLS', 'FULL_MASK',
    'bit', 'popcount', 'lsb', 'iter_bits', 'row_of', 'col_of', 'index_at', 'is_on_board',
    'BitSet', 'SingleBitSet',
    'PLAYABLE_SQUARES', 'DARK_SQUARES', 'LIGHT_SQUARES',
    'LEFT_SQUARES', 'RIGHT_SQUARES', 'LEFT_AND_RIGHT_SQUARES',
    'TOP_SQUARES', 'BOTTOM_SQUARES', 'TOP_AND_BOTTOM_SQUARES', 'CORNER_SQUARES',
]

# Board dimensions
ROWS = 8
COLS = 8
NUM_CELLS = ROWS * COLS  # 64

FULL_MASK = (1 << NUM_CELLS) - 1


def bit(index: int) -> int:
    """Return a value with a single bit set at index."""
    return 1 << index


def popcount(value: int) -> int:
    """Count number of set bits."""
    return bin(int(value)).count('1')


def lsb(value: int) -> int:
    """Return index of least significant bit (or -1 if empty)."""
    value = int(value)  # Handle numpy integers
    if value == 0:
        return -1
    return (value & -value).bit_length() - 1


def iter_bits(value: int) -> Iterator[int]:
    """Iterate over indices of set bits, lowest first."""
    value = int(value)  # Handle numpy integers
    while value:
        index = lsb(value)
        yield index
        value &= value - 1  # Clear LSB


def row_of(index: int) -> int:
    """Row (0 = bottom byte) of a cell index."""
    return index // COLS


def col_of(index: int) -> int:
    """Column (0 = file a, the leftmost) of a cell index."""
    return COLS - 1 - index % COLS


def index_at(row: int, col: int) -> int:
    """Convert (row, col) to a cell index."""
    return row * COLS + (COLS - 1 - col)


def is_on_board(row: int, col: int) -> bool:
    """Check if (row, col) is on the board."""
    return 0 <= row < ROWS and 0 <= col < COLS


def _value_of(other: object) -> Optional[int]:
    if isinstance(other, BitSet):
        return other.value
    if isinstance(other, Integral):
        return int(other) & FULL_MASK
    return None


@dataclass(frozen=True, eq=False)
class BitSet:
    """
    Set of board cells backed by a 64-bit unsigned value.

    Boolean operators mirror set algebra: ``&`` intersection, ``|`` union,
    ``^`` symmetric difference. The right-hand side may be another bitboard
    or a plain int. Results are always plain ``BitSet`` instances.
    """
    value: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'value', int(self.value) & FULL_MASK)

    def empty(self) -> bool:
        """True when no bit is set."""
        return self.value == 0

    def contains(self, cell: SingleBitSet) -> bool:
        """True when the given cell overlaps this bitboard."""
        return not (self & cell).empty()

    def count(self) -> int:
        """Number of set bits."""
        return popcount(self.value)

    def used_cells(self) -> Iterator[SingleBitSet]:
        """Yield one single-bit bitboard per set bit, in ascending bit order."""
        for index in iter_bits(self.value):
            yield SingleBitSet(bit(index))

    def __and__(self, other: object) -> BitSet:
        value = _value_of(other)
        if value is None:
            return NotImplemented
        return BitSet(self.value & value)

    def __or__(self, other: object) -> BitSet:
        value = _value_of(other)
        if value is None:
            return NotImplemented
        return BitSet(self.value | value)

    def __xor__(self, other: object) -> BitSet:
        value = _value_of(other)
        if value is None:
            return NotImplemented
        return BitSet(self.value ^ value)

    __rand__ = __and__
    __ror__ = __or__
    __rxor__ = __xor__

    def __invert__(self) -> BitSet:
        return BitSet(~self.value & FULL_MASK)

    def __bool__(self) -> bool:
        return self.value != 0

    def __int__(self) -> int:
        return self.value

    __index__ = __int__

    def __eq__(self, other: object) -> bool:
        value = _value_of(other)
        if value is None:
            return NotImplemented
        return self.value == value

    def __hash__(self) -> int:
        return hash(self.value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(0x{self.value:016x})"


@dataclass(frozen=True, eq=False, repr=False)
class SingleBitSet(BitSet):
    """Bitboard with exactly one bit set: one piece or one cell."""

    def __post_init__(self):
        super().__post_init__()
        value = self.value
        if value == 0 or value & (value - 1):
            raise InvalidSingleBit(
                f"Expected exactly one set bit, got 0x{value:016x}"
            )

    @classmethod
    def from_bitset(cls, bitset: BitSet) -> SingleBitSet:
        """Narrow a bitboard that is known to hold a single bit."""
        return cls(bitset.value)

    @classmethod
    def from_index(cls, index: int) -> SingleBitSet:
        return cls(bit(index))

    @property
    def index(self) -> int:
        """Bit position of the set bit."""
        return self.value.bit_length() - 1

    @property
    def row(self) -> int:
        return row_of(self.index)

    @property
    def col(self) -> int:
        return col_of(self.index)


# Board regions
PLAYABLE_SQUARES = BitSet(0x55AA55AA55AA55AA)
DARK_SQUARES = PLAYABLE_SQUARES
LIGHT_SQUARES = ~PLAYABLE_SQUARES
LEFT_SQUARES = BitSet(0x8080808080808080)
RIGHT_SQUARES = BitSet(0x0101010101010101)
LEFT_AND_RIGHT_SQUARES = LEFT_SQUARES | RIGHT_SQUARES
TOP_SQUARES = BitSet(0xFF00000000000000)
BOTTOM_SQUARES = BitSet(0x00000000000000FF)
TOP_AND_BOTTOM_SQUARES = TOP_SQUARES | BOTTOM_SQUARES
CORNER_SQUARES = BitSet(0x8100000000000081)
