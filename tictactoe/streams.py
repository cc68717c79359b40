from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from typing import Any

from fastapi.responses import StreamingResponse
from starlette.types import Receive, Scope, Send

logger = logging.getLogger(__name__)

KEEPALIVE_FRAME = ": keep-alive\n\n"

EVENT_STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    # Stops nginx-style proxies from buffering the stream.
    "X-Accel-Buffering": "no",
}


def format_sse(event: str, data: Any) -> str:
    """Frame one event as a text/event-stream record."""

    return f"event: {event}\ndata: {json.dumps(data, separators=(',', ':'))}\n\n"


class SubscriberChannel(ABC):
    """Push side of one live subscription to a game.

    Contract:
      - `send(event, payload)` returns False when the subscriber can no longer
        receive; it never blocks.
      - `close()` is idempotent.
    """

    def __init__(self, *, game_id: str, player_id: str) -> None:
        self.game_id = game_id
        self.player_id = player_id
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @abstractmethod
    def send(self, event: str, payload: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def close(self) -> None:
        self._closed = True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(game_id={self.game_id!r}, player_id={self.player_id!r})"


class QueueChannel(SubscriberChannel):
    """Buffers framed events until the HTTP response body pulls them.

    A subscriber that stops draining fills the buffer; the next `send` then
    fails and the broadcaster drops the channel.
    """

    def __init__(
        self,
        *,
        game_id: str,
        player_id: str,
        max_pending: int = 64,
        keepalive_seconds: float | None = None,
    ) -> None:
        super().__init__(game_id=game_id, player_id=player_id)
        self._queue: asyncio.Queue[str | None] = asyncio.Queue(maxsize=max_pending)
        self._keepalive_seconds = keepalive_seconds

    def send(self, event: str, payload: Mapping[str, Any]) -> bool:
        if self._closed:
            return False
        try:
            self._queue.put_nowait(format_sse(event, payload))
        except asyncio.QueueFull:
            logger.warning("Subscriber %s of game %s is not draining its stream", self.player_id, self.game_id)
            return False
        return True

    def close(self) -> None:
        if self._closed:
            return
        super().close()
        # Wake a waiting reader. With a full buffer the reader isn't waiting and
        # notices `closed` once it has drained.
        with contextlib.suppress(asyncio.QueueFull):
            self._queue.put_nowait(None)

    def pending(self) -> int:
        return self._queue.qsize()

    async def frames(self) -> AsyncIterator[str]:
        while True:
            if self._closed and self._queue.empty():
                return
            try:
                frame = await asyncio.wait_for(self._queue.get(), timeout=self._keepalive_seconds)
            except TimeoutError:
                yield KEEPALIVE_FRAME
                continue
            if frame is None:
                return
            yield frame


class EventStreamResponse(StreamingResponse):
    """text/event-stream response for one subscription.

    However the response ends (client went away before or during the body,
    server closed the channel, shutdown), `on_close` runs for the channel once
    the ASGI call is over. It is shielded so the cancellation that ends the
    response doesn't cut the cleanup short.
    """

    def __init__(
        self,
        channel: QueueChannel,
        *,
        on_close: Callable[[SubscriberChannel], Awaitable[None]],
    ) -> None:
        super().__init__(channel.frames(), media_type="text/event-stream", headers=EVENT_STREAM_HEADERS)
        self.channel = channel
        self._on_close = on_close

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            await asyncio.shield(self._on_close(self.channel))
