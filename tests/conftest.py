from __future__ import annotations

from collections.abc import Callable, Generator, Mapping
from typing import Any

import pytest
from fastapi.testclient import TestClient

from tictactoe.service import GameSessionService
from tictactoe.settings import ServerSettings
from tictactoe.streams import SubscriberChannel


class RecordingChannel(SubscriberChannel):
    """In-memory subscriber that records what it was sent.

    With `fail=True` every send raises, like a socket that went away mid-write.
    """

    def __init__(self, *, game_id: str, player_id: str, fail: bool = False) -> None:
        super().__init__(game_id=game_id, player_id=player_id)
        self.fail = fail
        self.events: list[tuple[str, dict[str, Any]]] = []

    def send(self, event: str, payload: Mapping[str, Any]) -> bool:
        if self.fail:
            raise ConnectionResetError("peer went away")
        if self.closed:
            return False
        self.events.append((event, dict(payload)))
        return True

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def last(self, name: str) -> dict[str, Any]:
        for event, payload in reversed(self.events):
            if event == name:
                return payload
        raise AssertionError(f"no {name} event received")


@pytest.fixture(autouse=True)
def _fresh_runtime() -> None:
    """Every test starts without a process-wide service."""

    from tictactoe.runtime import reset_service_for_tests

    reset_service_for_tests()


@pytest.fixture()
def settings() -> ServerSettings:
    return ServerSettings(keepalive_seconds=None)


@pytest.fixture()
def service(settings: ServerSettings) -> GameSessionService:
    return GameSessionService(settings=settings)


@pytest.fixture()
def make_channel() -> Callable[..., RecordingChannel]:
    def _make(game_id: str, player_id: str, *, fail: bool = False) -> RecordingChannel:
        return RecordingChannel(game_id=game_id, player_id=player_id, fail=fail)

    return _make


@pytest.fixture()
def client(service: GameSessionService) -> Generator[TestClient, None, None]:
    """TestClient wired to the per-test service instead of the process-wide one."""

    from tictactoe.api.deps import get_service
    from tictactoe.main import app

    app.dependency_overrides[get_service] = lambda: service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def http_scope() -> Callable[..., dict[str, Any]]:
    """Builds a minimal ASGI http scope for driving responses and the app directly.

    ASGI spec 2.3 makes Starlette listen for `http.disconnect` while streaming.
    """

    def _scope(path: str = "/", query_string: str = "") -> dict[str, Any]:
        return {
            "type": "http",
            "asgi": {"version": "3.0", "spec_version": "2.3"},
            "http_version": "1.1",
            "method": "GET",
            "scheme": "http",
            "path": path,
            "raw_path": path.encode(),
            "root_path": "",
            "query_string": query_string.encode(),
            "headers": [],
            "server": ("testserver", 80),
            "client": ("testclient", 50000),
        }

    return _scope


@pytest.fixture()
def asgi_app(service: GameSessionService) -> Generator[Any, None, None]:
    """The app itself, wired to the per-test service, for tests that speak raw ASGI."""

    from tictactoe.api.deps import get_service
    from tictactoe.main import app

    app.dependency_overrides[get_service] = lambda: service
    yield app
    app.dependency_overrides.clear()
