"""Core rules and history handling for classic Tic-Tac-Toe."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple


class Mark(str, Enum):
    X = "X"
    O = "O"

    @property
    def other(self) -> "Mark":
        return Mark.O if self is Mark.X else Mark.X


Cell = Optional[Mark]
Board = Tuple[Cell, ...]

EMPTY: Cell = None
BOARD_SIZE = 9
EMPTY_BOARD: Board = (EMPTY,) * BOARD_SIZE

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


# ---------- Win detection ----------


def winning_line(board: Sequence[Cell]) -> Optional[Tuple[int, int, int]]:
    """Return the first completed triple on ``board``, or ``None``."""
    if len(board) != BOARD_SIZE:
        raise ValueError(f"Board must have {BOARD_SIZE} cells, got {len(board)}")
    for a, b, c in WINNING_LINES:
        v = board[a]
        if v is not EMPTY and v == board[b] == board[c]:
            return (a, b, c)
    return None


def detect_winner(board: Sequence[Cell]) -> Optional[Mark]:
    line = winning_line(board)
    if line is None:
        return None
    return board[line[0]]


def is_full(board: Sequence[Cell]) -> bool:
    return all(c is not EMPTY for c in board)


def is_draw(board: Sequence[Cell]) -> bool:
    return is_full(board) and detect_winner(board) is None


# ---------- Game state ----------


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of a game and its full move history.

    ``history[0]`` is always the empty board; ``current_step`` selects the
    board being displayed, which may lie in the past after ``jump_to``.
    """

    history: Tuple[Board, ...] = field(default_factory=lambda: (EMPTY_BOARD,))
    current_step: int = 0
    x_is_next: bool = True

    def __post_init__(self) -> None:
        if not self.history or self.history[0] != EMPTY_BOARD:
            raise ValueError("History must start with the empty board")
        if not 0 <= self.current_step < len(self.history):
            raise ValueError("Current step is outside history")
        if self.x_is_next != (self.current_step % 2 == 0):
            raise ValueError("x_is_next does not match current step parity")

    @property
    def current(self) -> Board:
        return self.history[self.current_step]

    @property
    def next_mark(self) -> Mark:
        return Mark.X if self.x_is_next else Mark.O

    @property
    def winner(self) -> Optional[Mark]:
        return detect_winner(self.current)


def initial_state() -> GameState:
    return GameState()


def apply_move(state: GameState, cell_index: int) -> GameState:
    """Place the next mark on ``cell_index`` of the active board.

    Occupied cells, out-of-range indices and finished games leave the state
    untouched: the same ``state`` object is returned.
    """
    board = state.current
    if not 0 <= cell_index < BOARD_SIZE:
        return state
    if detect_winner(board) is not None or board[cell_index] is not EMPTY:
        return state

    squares = list(board)
    squares[cell_index] = state.next_mark
    # Moving from a past step discards the future branch
    history = state.history[: state.current_step + 1] + (tuple(squares),)
    return GameState(
        history=history,
        current_step=len(history) - 1,
        x_is_next=not state.x_is_next,
    )


def jump_to(state: GameState, step: int) -> GameState:
    """Select ``history[step]`` as the active board without truncating."""
    if not 0 <= step < len(state.history):
        raise ValueError(
            f"Step {step} is outside history range 0..{len(state.history) - 1}"
        )
    return GameState(
        history=state.history, current_step=step, x_is_next=step % 2 == 0
    )


# ---------- Display helpers ----------


def status_text(state: GameState) -> str:
    winner = state.winner
    if winner is not None:
        return f"Winner: {winner.value}"
    return f"Next player: {state.next_mark.value}"


def move_label(step: int) -> str:
    if step == 0:
        return "Go to game start"
    return f"Go to move #{step}"


def history_labels(state: GameState) -> List[str]:
    return [move_label(step) for step in range(len(state.history))]
