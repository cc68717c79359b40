from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from tictactoe.api.deps import get_service
from tictactoe.api.models import CreateGameResponse, GameState, MoveRequest
from tictactoe.errors import ConflictError, GameError, GameNotFoundError
from tictactoe.service import GameSessionService
from tictactoe.streams import EventStreamResponse

router = APIRouter()


def _http_error(e: GameError) -> HTTPException:
    if isinstance(e, GameNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(e, ConflictError):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(e))


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.put("/api/game", response_model=CreateGameResponse)
async def create_game_route(service: GameSessionService = Depends(get_service)) -> CreateGameResponse:
    state = await service.create_game()
    return CreateGameResponse(game_id=state.game_id, game=state)


@router.get("/api/game")
async def subscribe_route(
    game_id: str | None = Query(default=None, alias="gameId"),
    player_id: str | None = Query(default=None, alias="playerId"),
    service: GameSessionService = Depends(get_service),
) -> EventStreamResponse:
    """Open the push stream for one player of one game.

    Join errors are returned as plain HTTP errors before any stream bytes are sent.
    """

    gid, pid = game_id or "", player_id or ""
    channel = service.open_channel(game_id=gid, player_id=pid)
    try:
        await service.join_game(game_id=gid, player_id=pid, channel=channel)
    except GameError as e:
        raise _http_error(e) from e

    return EventStreamResponse(channel, on_close=service.leave)


@router.post("/api/game", response_model=GameState)
async def move_route(payload: MoveRequest, service: GameSessionService = Depends(get_service)) -> GameState:
    try:
        return await service.submit_move(
            game_id=payload.game_id,
            player_id=payload.player_id,
            row=payload.row,
            col=payload.col,
        )
    except GameError as e:
        raise _http_error(e) from e


@router.get("/api/game/{game_id}", response_model=GameState)
async def get_game_route(game_id: str, service: GameSessionService = Depends(get_service)) -> GameState:
    try:
        return service.get_game(game_id)
    except GameError as e:
        raise _http_error(e) from e
