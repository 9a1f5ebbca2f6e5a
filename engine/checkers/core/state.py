"""
Board state representation for checkers.

Uses bitboards for piece placement. A BoardState is immutable: applying a
move returns a new state and leaves the original untouched, so older states
can be shared freely (for undo, or by a search running on top of the engine).
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, TYPE_CHECKING
import numpy as np

from .bitboard import (
    ROWS, COLS, BitSet, LIGHT_SQUARES, TOP_SQUARES, BOTTOM_SQUARES,
    iter_bits, row_of, col_of
)
from .errors import InvalidPosition
from .square import Square

if TYPE_CHECKING:
    from .moves import Move


class Player(Enum):
    RED = 'red'
    BLACK = 'black'

    @property
    def opponent(self) -> Player:
        return Player.BLACK if self is Player.RED else Player.RED

    @property
    def forward(self) -> int:
        """Row delta of a forward step: Red climbs towards row 8, Black descends to row 1."""
        return 1 if self is Player.RED else -1

    @property
    def promotion_row(self) -> BitSet:
        """Far row on which this player's men are crowned."""
        return TOP_SQUARES if self is Player.RED else BOTTOM_SQUARES

    def __str__(self) -> str:
        return self.value


def _squares_mask(first: int, last: int) -> BitSet:
    mask = BitSet()
    for number in range(first, last + 1):
        mask = mask | Square(number).to_bitset()
    return mask


# Starting positions
# Black (top): squares 1-12, Red (bottom): squares 21-32
INITIAL_BLACK_PIECES = _squares_mask(1, 12)
INITIAL_RED_PIECES = _squares_mask(21, 32)
INITIAL_KINGS = BitSet(0)
INITIAL_PLAYER = Player.BLACK


@dataclass(frozen=True)
class BoardState:
    """
    Snapshot of a checkers position.

    Attributes:
        active_player: Player whose turn it is
        red_pieces: Bitboard of red pieces (men and kings)
        black_pieces: Bitboard of black pieces (men and kings)
        kings: Bitboard of crowned pieces of either colour
    """
    active_player: Player = INITIAL_PLAYER
    red_pieces: BitSet = INITIAL_RED_PIECES
    black_pieces: BitSet = INITIAL_BLACK_PIECES
    kings: BitSet = INITIAL_KINGS

    def __post_init__(self):
        for name in ('red_pieces', 'black_pieces', 'kings'):
            value = getattr(self, name)
            if type(value) is not BitSet:
                object.__setattr__(self, name, BitSet(int(value)))

        if not (self.red_pieces & self.black_pieces).empty():
            raise InvalidPosition("Red and black pieces overlap")
        if not (self.kings & ~self.occupied).empty():
            raise InvalidPosition("Kings must sit on occupied squares")
        if not (self.occupied & LIGHT_SQUARES).empty():
            raise InvalidPosition("Pieces must sit on playable squares")

    @classmethod
    def initial(cls) -> BoardState:
        """Create the standard starting position."""
        return cls()

    @classmethod
    def empty(cls, active_player: Player = INITIAL_PLAYER) -> BoardState:
        """Create a position with no pieces on the board."""
        return cls(active_player, BitSet(0), BitSet(0), BitSet(0))

    def pieces(self, player: Player) -> BitSet:
        """Bitboard of the given player's pieces."""
        return self.red_pieces if player is Player.RED else self.black_pieces

    def kings_of(self, player: Player) -> BitSet:
        return self.kings & self.pieces(player)

    def men_of(self, player: Player) -> BitSet:
        return self.pieces(player) & ~self.kings

    @property
    def occupied(self) -> BitSet:
        """Bitboard of all occupied squares."""
        return self.red_pieces | self.black_pieces

    @property
    def empty_cells(self) -> BitSet:
        """Bitboard of all empty playable squares."""
        return ~self.occupied & ~LIGHT_SQUARES

    def piece_at(self, square: Square) -> Optional[tuple[Player, bool]]:
        """Return (owner, is_king) for the piece on square, or None."""
        cell = square.to_bitset()
        for player in (Player.RED, Player.BLACK):
            if self.pieces(player).contains(cell):
                return player, self.kings.contains(cell)
        return None

    def apply_move(self, move: Move) -> BoardState:
        """
        Apply a single, already validated, move for the active player.

        The moving piece is toggled from source to destination, a jumped
        piece is removed, and a man reaching the far row is crowned. The
        active player does not change; a turn may chain several jumps.
        """
        player = self.active_player
        own = self.pieces(player) ^ move.toggle_mask
        opponent = self.pieces(player.opponent)
        kings = self.kings

        if kings.contains(move.source):
            kings = kings ^ move.toggle_mask

        captured = move.midpoint()
        if captured is not None:
            opponent = opponent & ~captured
            kings = kings & ~captured

        if player.promotion_row.contains(move.destination):
            kings = kings | move.destination

        if player is Player.RED:
            return replace(self, red_pieces=own, black_pieces=opponent, kings=kings)
        return replace(self, red_pieces=opponent, black_pieces=own, kings=kings)

    def pass_turn(self) -> BoardState:
        """Return this position with the other player to move."""
        return replace(self, active_player=self.active_player.opponent)

    def to_planes(self) -> np.ndarray:
        """
        Convert state to an array for external evaluators.

        Returns (5, 8, 8) float32 array, indexed [plane, row, col] with row 0
        at the bottom (row 1) and col 0 on file a:
          - Plane 0: Active player's men
          - Plane 1: Active player's kings
          - Plane 2: Opponent's men
          - Plane 3: Opponent's kings
          - Plane 4: Active player indicator (all 1s if Black, all 0s if Red)
        """
        planes = np.zeros((5, ROWS, COLS), dtype=np.float32)

        p = self.active_player
        opp = p.opponent
        layers = (self.men_of(p), self.kings_of(p), self.men_of(opp), self.kings_of(opp))

        for plane, bitboard in enumerate(layers):
            for index in iter_bits(bitboard.value):
                planes[plane, row_of(index), col_of(index)] = 1.0

        if p is Player.BLACK:
            planes[4, :, :] = 1.0

        return planes
