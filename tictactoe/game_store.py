from __future__ import annotations

from uuid import uuid4

from tictactoe.api.models import GameState
from tictactoe.errors import ConflictError, GameNotFoundError


GAME_ID_LENGTH = 12


def new_game_id() -> str:
    return uuid4().hex[:GAME_ID_LENGTH]


class GameStore:
    """In-memory authoritative game states keyed by game id.

    States are copied on the way in and out: callers work on a private copy and
    only `put` changes what other requests see. There is no expiry; eviction is
    driven by the session service.
    """

    def __init__(self) -> None:
        self._games: dict[str, GameState] = {}

    def create(self, *, game_id: str | None = None) -> tuple[str, GameState]:
        if game_id is None:
            game_id = new_game_id()
            while game_id in self._games:
                game_id = new_game_id()
        elif game_id in self._games:
            raise ConflictError(f"Game {game_id} already exists")

        state = GameState(game_id=game_id)
        self._games[game_id] = state
        return game_id, state.model_copy(deep=True)

    def get(self, game_id: str) -> GameState | None:
        state = self._games.get(game_id)
        if state is None:
            return None
        return state.model_copy(deep=True)

    def require(self, game_id: str) -> GameState:
        state = self.get(game_id)
        if state is None:
            raise GameNotFoundError("Game not found")
        return state

    def put(self, state: GameState) -> None:
        self._games[state.game_id] = state.model_copy(deep=True)

    def delete(self, game_id: str) -> None:
        self._games.pop(game_id, None)

    def ids(self) -> list[str]:
        return sorted(self._games)

    def __contains__(self, game_id: object) -> bool:
        return game_id in self._games

    def __len__(self) -> int:
        return len(self._games)
