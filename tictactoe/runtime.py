from __future__ import annotations

from tictactoe.service import GameSessionService
from tictactoe.settings import ServerSettings


_SERVICE: GameSessionService | None = None


def init_service(*, settings: ServerSettings) -> GameSessionService:
    """Create the process-wide session service once.

    Safe to call multiple times; subsequent calls return the already created
    instance (game state is never silently re-initialized).
    """

    global _SERVICE
    if _SERVICE is None:
        _SERVICE = GameSessionService(settings=settings)
    return _SERVICE


def reset_service_for_tests() -> None:
    """Drop the cached service so each test starts from an empty process state."""

    global _SERVICE
    _SERVICE = None


def get_session_service() -> GameSessionService:
    if _SERVICE is None:
        raise RuntimeError("Session service not initialized. Call init_service() at startup.")
    return _SERVICE
