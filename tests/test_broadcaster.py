from __future__ import annotations

import logging

from tictactoe.api.models import GameState
from tictactoe.broadcaster import EventBroadcaster
from tictactoe.core.events import GameEvent
from tictactoe.registry import SessionRegistry


def _setup(make_channel, *players_fail: tuple[str, bool]):
    registry = SessionRegistry()
    registry.open_game("g1")
    state = GameState(game_id="g1")
    channels = []
    for player_id, fail in players_fail:
        ch = make_channel("g1", player_id, fail=fail)
        registry.subscribe(state=state, channel=ch)
        channels.append(ch)
    return registry, EventBroadcaster(registry), channels


def test_publish_reaches_every_subscriber_in_order(make_channel) -> None:
    _, broadcaster, (a, b) = _setup(make_channel, ("alice", False), ("bob", False))

    broadcaster.publish("g1", "playerJoined", {"player": "O", "playerId": "bob"})
    broadcaster.emit("g1", GameEvent.player_disconnected("bob"))

    assert a.names == ["playerJoined", "playerDisconnected"]
    assert b.names == ["playerJoined", "playerDisconnected"]


def test_failing_subscriber_is_dropped_and_others_still_served(make_channel, caplog) -> None:
    registry, broadcaster, (good, bad) = _setup(make_channel, ("alice", False), ("bob", True))

    with caplog.at_level(logging.WARNING):
        delivered = broadcaster.publish("g1", "gameState", {"gameId": "g1"})

    assert delivered == 1
    assert good.names == ["gameState"]
    assert bad.closed
    assert registry.subscribers("g1") == [good]
    assert "Error sending gameState" in caplog.text


def test_closed_subscriber_is_pruned(make_channel) -> None:
    registry, broadcaster, (a, b) = _setup(make_channel, ("alice", False), ("bob", False))
    b.close()

    broadcaster.publish("g1", "gameState", {})

    assert registry.subscribers("g1") == [a]


def test_publish_to_game_without_subscribers_is_noop() -> None:
    broadcaster = EventBroadcaster(SessionRegistry())
    assert broadcaster.publish("nope", "gameState", {}) == 0
