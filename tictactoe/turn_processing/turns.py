from __future__ import annotations

from tictactoe.api.models import GameState
from tictactoe.core.board import evaluate


def apply_move(state: GameState, *, row: int, col: int) -> GameState:
    """Return a new GameState with the current player's symbol placed at (row, col).

    Turn legality (who is allowed to move) is checked by the validator pipeline
    before this is called; board legality is enforced by `evaluate`.
    """

    outcome = evaluate(state.board, row, col, state.current_player)
    return state.model_copy(
        update={
            "board": outcome.board,
            "winner": outcome.winner,
            "current_player": outcome.next_turn,
        },
        deep=True,
    )
