"""
Game board: a history of immutable board states with turn push/pop.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Optional

from .bitboard import BitSet
from .errors import DuplicateAssignments, GameConcluded, MoveError
from .moves import MoveIter, MoveValidator, SquareLike, has_legal_moves
from .square import Square
from .state import BoardState, Player, INITIAL_PLAYER
from .turn import Turn, TurnLike

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoardStatus:
    """Game status. ``winner`` is None while the game is still going."""
    winner: Optional[Player] = None

    @property
    def complete(self) -> bool:
        return self.winner is not None

    @property
    def ongoing(self) -> bool:
        return self.winner is None


ONGOING = BoardStatus()


class Board:
    """
    Checkers board with undo history.

    The board keeps every state reached so far; the last one is current.
    The starting state is never removed.
    """

    def __init__(self, initial: Optional[BoardState] = None):
        self._states: list[BoardState] = [initial if initial is not None else BoardState.initial()]

    @property
    def current_state(self) -> BoardState:
        assert self._states, "Board history must never be empty"
        return self._states[-1]

    @property
    def history(self) -> tuple[BoardState, ...]:
        """Every state from the initial one to the current one."""
        return tuple(self._states)

    @property
    def turns_played(self) -> int:
        return len(self._states) - 1

    def __len__(self) -> int:
        return len(self._states)

    def status(self) -> BoardStatus:
        """A player with no legal move has lost."""
        state = self.current_state
        if has_legal_moves(state):
            return ONGOING
        return BoardStatus(winner=state.active_player.opponent)

    def legal_moves(self) -> MoveIter:
        """Legal moves for the player to move."""
        return MoveIter(self.current_state)

    def push_turn(self, turn: TurnLike) -> BoardState:
        """
        Validate and play a turn for the player to move.

        Moves are validated and applied one at a time on a working copy, so
        later moves see the effect of earlier captures. The board changes
        only if every move is legal.

        Returns:
            The new current state.

        Raises:
            GameConcluded: If the game is already over.
            MoveError: The first rule broken by a move of the turn.
        """
        turn = Turn.convert(turn)
        status = self.status()
        if status.complete:
            raise GameConcluded()

        state = self.current_state
        for move in turn:
            try:
                MoveValidator(state).validate(move)
            except MoveError as e:
                logger.info(f"Rejected turn {turn} for {state.active_player}: {e}")
                raise
            state = state.apply_move(move)

        state = state.pass_turn()
        self._states.append(state)
        logger.debug(f"Pushed turn {turn}; {state.active_player} to move")
        return state

    def pop_turn(self) -> Optional[BoardState]:
        """
        Undo the last turn.

        Returns:
            The removed state, or None if only the initial state is left.
        """
        assert self._states, "Board history must never be empty"
        if len(self._states) == 1:
            return None
        state = self._states.pop()
        logger.debug(f"Popped turn; {self.current_state.active_player} to move")
        return state


@dataclass
class BoardBuilder:
    """
    Assemble a board from explicit piece placements.

    Example:
        board = (BoardBuilder()
                 .current_player(Player.RED)
                 .piece(Player.RED, Square.SIX)
                 .king(Player.BLACK, Square.EIGHT)
                 .build())
    """
    player: Player = INITIAL_PLAYER
    placements: list[tuple[Player, Square, bool]] = field(default_factory=list)

    def current_player(self, player: Player) -> BoardBuilder:
        self.player = player
        return self

    def piece(self, player: Player, square: SquareLike) -> BoardBuilder:
        self.placements.append((player, Square.coerce(square), False))
        return self

    def king(self, player: Player, square: SquareLike) -> BoardBuilder:
        self.placements.append((player, Square.coerce(square), True))
        return self

    def build_state(self) -> BoardState:
        """
        Build the position described by the placements.

        Raises:
            DuplicateAssignments: If two placements share a square.
        """
        seen: set[Square] = set()
        pieces = {Player.RED: BitSet(0), Player.BLACK: BitSet(0)}
        kings = BitSet(0)

        for player, square, is_king in self.placements:
            if square in seen:
                raise DuplicateAssignments(f"Square {square} is assigned more than once")
            seen.add(square)
            cell = square.to_bitset()
            pieces[player] = pieces[player] | cell
            if is_king:
                kings = kings | cell

        return BoardState(
            active_player=self.player,
            red_pieces=pieces[Player.RED],
            black_pieces=pieces[Player.BLACK],
            kings=kings,
        )

    def build(self) -> Board:
        state = self.build_state()
        logger.debug(f"Built board with {len(self.placements)} pieces; {state.active_player} to move")
        return Board(state)
