from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from tictactoe.core.board import Symbol

if TYPE_CHECKING:
    from tictactoe.api.models import GameState

EventName = Literal[
    "gameState",
    "playerJoined",
    "playerDisconnected",
]


@dataclass(frozen=True, slots=True)
class GameEvent:
    name: EventName
    payload: dict[str, Any]

    @staticmethod
    def game_state(state: "GameState") -> "GameEvent":
        return GameEvent(name="gameState", payload=state.to_payload())

    @staticmethod
    def player_joined(symbol: Symbol, player_id: str) -> "GameEvent":
        return GameEvent(name="playerJoined", payload={"player": symbol.value, "playerId": player_id})

    @staticmethod
    def player_disconnected(player_id: str) -> "GameEvent":
        return GameEvent(name="playerDisconnected", payload={"playerId": player_id})
