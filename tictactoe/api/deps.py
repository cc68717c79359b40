from __future__ import annotations

from tictactoe.runtime import get_session_service
from tictactoe.service import GameSessionService


def get_service() -> GameSessionService:
    return get_session_service()
