from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

from tictactoe.errors import BadRequestError, MoveRejectedError

BOARD_SIZE = 3
DRAW: Literal["draw"] = "draw"


class Symbol(StrEnum):
    X = "X"
    O = "O"

    @property
    def other(self) -> Symbol:
        return Symbol.O if self is Symbol.X else Symbol.X


Cell = Symbol | None
Board = list[list[Cell]]
Outcome = Symbol | Literal["draw"]

# Scan order: rows top-to-bottom, columns left-to-right, main diagonal, anti-diagonal.
_LINES: tuple[tuple[tuple[int, int], ...], ...] = (
    *(tuple((r, c) for c in range(BOARD_SIZE)) for r in range(BOARD_SIZE)),
    *(tuple((r, c) for r in range(BOARD_SIZE)) for c in range(BOARD_SIZE)),
    tuple((i, i) for i in range(BOARD_SIZE)),
    tuple((i, BOARD_SIZE - 1 - i) for i in range(BOARD_SIZE)),
)


def empty_board() -> Board:
    return [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]


def check_winner(board: Sequence[Sequence[Cell]]) -> Outcome | None:
    """Return the owner of the first completed line, "draw" for a full board, else None."""

    for line in _LINES:
        first, *rest = (board[r][c] for r, c in line)
        if first is not None and all(cell == first for cell in rest):
            return Symbol(first)

    if all(cell is not None for row in board for cell in row):
        return DRAW
    return None


@dataclass(frozen=True, slots=True)
class MoveOutcome:
    board: Board
    winner: Outcome | None
    next_turn: Symbol


def evaluate(board: Sequence[Sequence[Cell]], row: int, col: int, symbol: Symbol) -> MoveOutcome:
    """Place `symbol` at (row, col) on a copy of `board`.

    Raises MoveRejectedError when the board already carries a result or the cell
    is taken; the input board is never modified.
    """

    if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
        raise BadRequestError(f"Move ({row}, {col}) is outside the board")
    if check_winner(board) is not None:
        raise MoveRejectedError("Game is already finished")
    if board[row][col] is not None:
        raise MoveRejectedError("Cell is already occupied")

    new_board: Board = [list(r) for r in board]
    new_board[row][col] = symbol
    winner = check_winner(new_board)

    # The turn only passes on while the game is still running.
    next_turn = symbol if winner is not None else symbol.other
    return MoveOutcome(board=new_board, winner=winner, next_turn=next_turn)
