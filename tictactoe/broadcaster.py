from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from tictactoe.core.events import EventName, GameEvent
from tictactoe.registry import SessionRegistry
from tictactoe.streams import SubscriberChannel

logger = logging.getLogger(__name__)


class EventBroadcaster:
    """Fan-out of game events to every live subscriber of a game.

    Delivery is best-effort per subscriber: a channel whose `send` fails is
    dropped after the pass and closed, without retry, and without affecting
    delivery to the others. Callers publish while holding the game's lock,
    which keeps per-game event order identical for every subscriber.
    """

    def __init__(self, registry: SessionRegistry) -> None:
        self._registry = registry

    def publish(self, game_id: str, event: EventName, payload: Mapping[str, Any]) -> int:
        conns = self._registry.subscribers(game_id)
        if not conns:
            return 0

        delivered = 0
        dead: list[SubscriberChannel] = []
        for channel in conns:
            try:
                ok = channel.send(event, payload)
            except Exception:
                logger.exception("Error sending %s to player %s in game %s", event, channel.player_id, game_id)
                ok = False
            if ok:
                delivered += 1
            else:
                dead.append(channel)

        if dead:
            logger.warning("Dropping %d dead subscriber(s) of game %s", len(dead), game_id)
            self._registry.discard(game_id, dead)
            for channel in dead:
                channel.close()

        return delivered

    def emit(self, game_id: str, event: GameEvent) -> int:
        return self.publish(game_id, event.name, event.payload)
