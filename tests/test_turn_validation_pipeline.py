from __future__ import annotations

import pytest

from tictactoe.api.models import GameState, SeatAssignments
from tictactoe.core.board import Symbol
from tictactoe.errors import BadRequestError, MoveRejectedError
from tictactoe.turn_processing.turns import apply_move
from tictactoe.turn_processing.validators import DEFAULT_MOVE_PIPELINE, MoveContext


def _state(**overrides) -> GameState:
    base = {
        "game_id": "g1",
        "players": SeatAssignments(X="alice", O="bob"),
    }
    base.update(overrides)
    return GameState.model_validate(base)


def _ctx(player_id: str, row: int = 0, col: int = 0) -> MoveContext:
    return MoveContext(game_id="g1", player_id=player_id, row=row, col=col)


def test_current_player_may_move() -> None:
    DEFAULT_MOVE_PIPELINE.validate(ctx=_ctx("alice"), state=_state())


def test_wrong_player_is_told_not_your_turn() -> None:
    with pytest.raises(MoveRejectedError) as e:
        DEFAULT_MOVE_PIPELINE.validate(ctx=_ctx("bob"), state=_state())
    assert str(e.value) == "Not your turn"


def test_unseated_player_is_told_not_your_turn() -> None:
    with pytest.raises(MoveRejectedError) as e:
        DEFAULT_MOVE_PIPELINE.validate(ctx=_ctx("mallory"), state=_state())
    assert str(e.value) == "Not your turn"


def test_finished_game_checked_before_turn() -> None:
    with pytest.raises(MoveRejectedError) as e:
        DEFAULT_MOVE_PIPELINE.validate(ctx=_ctx("bob"), state=_state(winner="draw"))
    assert str(e.value) == "Game is already finished"


def test_occupied_cell() -> None:
    board = [["O", None, None], [None, None, None], [None, None, None]]
    with pytest.raises(MoveRejectedError) as e:
        DEFAULT_MOVE_PIPELINE.validate(ctx=_ctx("alice"), state=_state(board=board))
    assert str(e.value) == "Cell is already occupied"


def test_out_of_range_is_bad_request() -> None:
    with pytest.raises(BadRequestError):
        DEFAULT_MOVE_PIPELINE.validate(ctx=_ctx("alice", row=-1), state=_state())


def test_apply_move_places_symbol_and_flips_turn() -> None:
    state = _state()
    updated = apply_move(state, row=1, col=1)

    assert updated.board[1][1] is Symbol.X
    assert updated.current_player is Symbol.O
    assert state.board[1][1] is None
