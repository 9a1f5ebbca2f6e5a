"""Core game logic: bitboards, squares, moves, turns and board state."""

from .bitboard import *
from .errors import *
from .square import Square
from .state import BoardState, Player, INITIAL_BLACK_PIECES, INITIAL_RED_PIECES, INITIAL_KINGS
from .moves import Move, MoveGenerator, MoveValidator, MoveIter, get_legal_moves, validate_move
from .turn import Turn
from .board import Board, BoardBuilder, BoardStatus
