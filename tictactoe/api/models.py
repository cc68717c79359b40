from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tictactoe.core.board import BOARD_SIZE, Symbol, empty_board


class _CamelModel(BaseModel):
    # Wire format is camelCase (gameId, currentPlayer); python code uses snake_case.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionPhase(StrEnum):
    empty = "empty"
    waiting = "waiting"
    active = "active"
    finished = "finished"


class SeatAssignments(BaseModel):
    """The two seats of a game, keyed by the symbol they play."""

    X: str | None = None
    O: str | None = None

    def holder(self, symbol: Symbol) -> str | None:
        return getattr(self, symbol.value)

    def assign(self, symbol: Symbol, player_id: str | None) -> None:
        setattr(self, symbol.value, player_id)

    def seat_of(self, player_id: str) -> Symbol | None:
        for symbol in Symbol:
            if self.holder(symbol) == player_id:
                return symbol
        return None

    def first_free(self) -> Symbol | None:
        return next((s for s in Symbol if self.holder(s) is None), None)

    def is_empty(self) -> bool:
        return all(self.holder(s) is None for s in Symbol)


class GameState(_CamelModel):
    game_id: str
    board: list[list[Symbol | None]] = Field(default_factory=empty_board)
    current_player: Symbol = Symbol.X
    winner: Symbol | Literal["draw"] | None = None
    players: SeatAssignments = Field(default_factory=SeatAssignments)
    phase: SessionPhase = SessionPhase.empty

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


class MoveRequest(_CamelModel):
    game_id: str = Field(..., min_length=1)
    player_id: str = Field(..., min_length=1)
    row: int = Field(..., ge=0, lt=BOARD_SIZE)
    col: int = Field(..., ge=0, lt=BOARD_SIZE)


class CreateGameResponse(_CamelModel):
    game_id: str
    game: GameState
