from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from tictactoe.api.models import GameState
from tictactoe.core.board import BOARD_SIZE
from tictactoe.errors import BadRequestError, MoveRejectedError


@dataclass(frozen=True, slots=True)
class MoveContext:
    """Inputs available to validators.

    Keep this tight and serializable-ish so we can safely log it.
    """

    game_id: str
    player_id: str
    row: int
    col: int


class MoveValidator(ABC):
    """A small, composable validation unit for an incoming move."""

    @abstractmethod
    def validate(self, *, ctx: MoveContext, state: GameState) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class BoundsValidator(MoveValidator):
    def validate(self, *, ctx: MoveContext, state: GameState) -> None:
        if not (0 <= ctx.row < BOARD_SIZE and 0 <= ctx.col < BOARD_SIZE):
            raise BadRequestError(f"Move ({ctx.row}, {ctx.col}) is outside the board")


@dataclass(frozen=True, slots=True)
class FinishedGameValidator(MoveValidator):
    """Deny every move once a winner or draw is recorded."""

    def validate(self, *, ctx: MoveContext, state: GameState) -> None:
        if state.winner is not None:
            raise MoveRejectedError("Game is already finished")


@dataclass(frozen=True, slots=True)
class TurnOrderValidator(MoveValidator):
    """Only the player seated on the current symbol may move.

    Players without a seat always fail this check.
    """

    def validate(self, *, ctx: MoveContext, state: GameState) -> None:
        if state.players.seat_of(ctx.player_id) != state.current_player:
            raise MoveRejectedError("Not your turn")


@dataclass(frozen=True, slots=True)
class VacantCellValidator(MoveValidator):
    def validate(self, *, ctx: MoveContext, state: GameState) -> None:
        if state.board[ctx.row][ctx.col] is not None:
            raise MoveRejectedError("Cell is already occupied")


@dataclass(frozen=True, slots=True)
class ValidatorPipeline:
    validators: tuple[MoveValidator, ...]

    def validate(self, *, ctx: MoveContext, state: GameState) -> None:
        for v in self.validators:
            v.validate(ctx=ctx, state=state)


# Order matters: it decides which reason a client sees when several apply.
DEFAULT_MOVE_PIPELINE = ValidatorPipeline(
    validators=(
        BoundsValidator(),
        FinishedGameValidator(),
        TurnOrderValidator(),
        VacantCellValidator(),
    )
)
