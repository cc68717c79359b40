from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from tictactoe.api.models import GameState
from tictactoe.core.board import Symbol
from tictactoe.errors import AlreadyConnectedError, GameFullError
from tictactoe.streams import SubscriberChannel

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SeatAssignment:
    symbol: Symbol
    reconnected: bool


class SessionRegistry:
    """Live subscribers per game and the player -> game bindings.

    Contract:
      - a player is bound to at most one game at a time; it may hold several
        channels (tabs) within that game.
      - seat changes are written onto the GameState passed in; persisting it is
        the caller's job.

    Not synchronized on its own: callers hold the game's lock.
    """

    def __init__(self) -> None:
        self._by_game: dict[str, set[SubscriberChannel]] = {}
        self._bindings: dict[str, str] = {}

    def open_game(self, game_id: str) -> None:
        self._by_game.setdefault(game_id, set())

    def drop_game(self, game_id: str) -> None:
        self._by_game.pop(game_id, None)
        for player_id in [p for p, g in self._bindings.items() if g == game_id]:
            del self._bindings[player_id]

    def bound_game(self, player_id: str) -> str | None:
        return self._bindings.get(player_id)

    def ensure_can_attach(self, *, player_id: str, game_id: str) -> None:
        existing = self._bindings.get(player_id)
        if existing is not None and existing != game_id:
            raise AlreadyConnectedError("Player already connected to a different game")

    def subscribe(self, *, state: GameState, channel: SubscriberChannel) -> SeatAssignment:
        """Admit `channel` to the game, seating its player if needed.

        Seat policy: a seated player reconnects in place; otherwise the first
        free seat (X, then O) is taken; with both seats held by others the game
        is full. Nothing is changed when this raises.
        """

        game_id, player_id = state.game_id, channel.player_id
        self.ensure_can_attach(player_id=player_id, game_id=game_id)

        symbol = state.players.seat_of(player_id)
        if symbol is not None:
            assignment = SeatAssignment(symbol=symbol, reconnected=True)
        else:
            free = state.players.first_free()
            if free is None:
                raise GameFullError("Game is full")
            state.players.assign(free, player_id)
            assignment = SeatAssignment(symbol=free, reconnected=False)

        self._by_game.setdefault(game_id, set()).add(channel)
        self._bindings[player_id] = game_id
        return assignment

    def unsubscribe(self, channel: SubscriberChannel) -> bool:
        """Remove `channel` from its game's live set.

        Returns True when its player has thereby left the game: no other live
        channel of theirs remains and they are still bound to it. Repeated calls
        for the same channel return False after the player has been released.
        """

        conns = self._by_game.get(channel.game_id, set())
        conns.discard(channel)
        if any(c.player_id == channel.player_id for c in conns):
            return False
        return self._bindings.get(channel.player_id) == channel.game_id

    def release(self, *, state: GameState | None, player_id: str) -> Symbol | None:
        """Unbind the player and vacate their seat in `state`, if any."""

        self._bindings.pop(player_id, None)
        if state is None:
            return None
        symbol = state.players.seat_of(player_id)
        if symbol is not None:
            state.players.assign(symbol, None)
        return symbol

    def subscribers(self, game_id: str) -> list[SubscriberChannel]:
        return list(self._by_game.get(game_id, ()))

    def discard(self, game_id: str, channels: Iterable[SubscriberChannel]) -> None:
        conns = self._by_game.get(game_id)
        if conns is None:
            return
        for channel in channels:
            conns.discard(channel)

    def is_idle(self, state: GameState) -> bool:
        """True when nobody is seated and nobody is listening: the game may be evicted."""

        return not self._by_game.get(state.game_id) and state.players.is_empty()

    def channels(self) -> list[SubscriberChannel]:
        return [c for conns in self._by_game.values() for c in conns]

    def __contains__(self, game_id: object) -> bool:
        return game_id in self._by_game
