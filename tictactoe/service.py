from __future__ import annotations

import logging

from tictactoe.api.models import GameState
from tictactoe.broadcaster import EventBroadcaster
from tictactoe.core.events import GameEvent
from tictactoe.errors import BadRequestError, GameNotFoundError
from tictactoe.fsm import advance
from tictactoe.game_store import GameStore
from tictactoe.lock import GameLocks
from tictactoe.registry import SessionRegistry
from tictactoe.settings import ServerSettings
from tictactoe.streams import QueueChannel, SubscriberChannel
from tictactoe.turn_processing.turns import apply_move
from tictactoe.turn_processing.validators import DEFAULT_MOVE_PIPELINE, MoveContext

logger = logging.getLogger(__name__)


class GameSessionService:
    """Orchestrates create/join/move/leave across store, registry and broadcaster.

    Every operation that reads and then writes a game runs under that game's
    lock, so two near-simultaneous moves can't both pass validation against the
    same pre-move state. Different games never wait on each other.
    """

    def __init__(
        self,
        *,
        settings: ServerSettings | None = None,
        store: GameStore | None = None,
        registry: SessionRegistry | None = None,
    ) -> None:
        self.settings = settings or ServerSettings()
        self.store = store or GameStore()
        self.registry = registry or SessionRegistry()
        self.broadcaster = EventBroadcaster(self.registry)
        self._locks = GameLocks()

    def open_channel(self, *, game_id: str, player_id: str) -> QueueChannel:
        return QueueChannel(
            game_id=game_id,
            player_id=player_id,
            max_pending=self.settings.channel_buffer_size,
            keepalive_seconds=self.settings.keepalive_seconds,
        )

    async def create_game(self) -> GameState:
        """Store a fresh game nobody is seated in yet.

        Games have no expiry: an unjoined game stays in the store until its
        first subscriber leaves and finds it idle.
        """

        game_id, state = self.store.create()
        self.registry.open_game(game_id)
        logger.info("Created game %s", game_id)
        return state

    def get_game(self, game_id: str) -> GameState:
        return self.store.require(game_id)

    async def join_game(
        self,
        *,
        game_id: str,
        player_id: str,
        channel: SubscriberChannel | None = None,
    ) -> SubscriberChannel:
        """Attach a subscriber to a game and announce it.

        Event order is a fixed contract: the first seat taken in a game with no
        seated players publishes gameState then playerJoined; every other join
        (second seat, reconnection, regaining a vacated seat) publishes
        playerJoined then gameState. The joining channel is live before
        publishing, so it receives both.
        """

        if not game_id or not player_id:
            raise BadRequestError("Missing gameId or playerId")

        channel = channel or self.open_channel(game_id=game_id, player_id=player_id)

        async with self._locks.hold(game_id):
            self.registry.ensure_can_attach(player_id=player_id, game_id=game_id)

            state = self.store.get(game_id)
            if state is None:
                if not self.settings.create_on_subscribe:
                    raise GameNotFoundError("Game not found")
                _, state = self.store.create(game_id=game_id)
                self.registry.open_game(game_id)
                logger.info("Created game %s on first subscribe", game_id)

            first_seat = state.players.is_empty()
            seat = self.registry.subscribe(state=state, channel=channel)
            if not seat.reconnected:
                advance(state, "seat")
            self.store.put(state)

            logger.info(
                "Player %s %s game %s as %s",
                player_id,
                "reconnected to" if seat.reconnected else "joined",
                game_id,
                seat.symbol.value,
            )

            joined = GameEvent.player_joined(seat.symbol, player_id)
            snapshot = GameEvent.game_state(state)
            if first_seat:
                order = (snapshot, joined)
            else:
                order = (joined, snapshot)
            for event in order:
                self.broadcaster.emit(game_id, event)

        return channel

    async def submit_move(self, *, game_id: str, player_id: str, row: int, col: int) -> GameState:
        async with self._locks.hold(game_id):
            state = self.store.require(game_id)
            ctx = MoveContext(game_id=game_id, player_id=player_id, row=row, col=col)
            DEFAULT_MOVE_PIPELINE.validate(ctx=ctx, state=state)

            updated = apply_move(state, row=row, col=col)
            if updated.winner is not None:
                advance(updated, "finish")
            self.store.put(updated)

            logger.debug("Game %s: %s played (%d, %d)", game_id, player_id, row, col)
            if updated.winner is not None:
                logger.info("Game %s finished: %s", game_id, updated.winner)

            self.broadcaster.emit(game_id, GameEvent.game_state(updated))
        return updated

    async def leave(self, channel: SubscriberChannel) -> None:
        """Disconnect handling for a closed channel.

        Only the player's last channel in the game counts as leaving: the seat
        is vacated, the binding cleared and the remaining subscribers told. An
        idle game is then evicted from the store.
        """

        game_id, player_id = channel.game_id, channel.player_id
        async with self._locks.hold(game_id):
            channel.close()
            if not self.registry.unsubscribe(channel):
                return

            state = self.store.get(game_id)
            symbol = self.registry.release(state=state, player_id=player_id)
            if state is None:
                return

            if symbol is not None:
                advance(state, "vacate")
            self.store.put(state)
            logger.info("Player %s left game %s", player_id, game_id)

            self.broadcaster.emit(game_id, GameEvent.player_disconnected(player_id))
            self.broadcaster.emit(game_id, GameEvent.game_state(state))

            if self.registry.is_idle(state):
                self.store.delete(game_id)
                self.registry.drop_game(game_id)
                logger.info("Evicted idle game %s", game_id)

    def close(self) -> None:
        """Close every live channel; their streams run the normal leave path."""

        for channel in self.registry.channels():
            channel.close()
