"""HTTP routes for the App Clash API."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Header, Query, Request, status
from pydantic import BaseModel, Field

from appclash.api.runtime import ApiState, to_game_dict, to_move_dict

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]
CallerDep = Annotated[str | None, Header(alias="X-Player-Id")]


class CreateGameRequest(BaseModel):
    player_ids: list[str] = Field(min_length=1)
    player_names: dict[str, str] = Field(default_factory=dict)
    game_id: str | None = Field(default=None, min_length=1, pattern=r"^[A-Za-z0-9_-]+$")


class PlayCardRequest(BaseModel):
    hand_index: int
    card_type: str
    target_player_id: str | None = None


class DiscardRequest(BaseModel):
    hand_index: int


class DefendRequest(BaseModel):
    hand_index: int
    card_type: str


class MoveResponse(BaseModel):
    game: dict[str, Any] | None
    message: dict[str, Any] | None
    winner: str | None
    deleted: bool


class LeaderboardRow(BaseModel):
    player_id: str
    player_name: str
    wins: int


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {
        "status": "ok",
        "store_backend": state.settings.store_backend,
        "database": "connected" if state.database_ok() else "unavailable",
    }


@router.post("/games", status_code=status.HTTP_201_CREATED)
async def create_game(request: CreateGameRequest, state: ApiStateDep) -> dict[str, Any]:
    game = await state.games.create_game(
        request.player_ids, request.player_names, game_id=request.game_id
    )
    return to_game_dict(game, rules=state.rules)


@router.get("/games/{game_id}")
async def get_game(game_id: str, state: ApiStateDep) -> dict[str, Any]:
    game = await state.games.get_game(game_id)
    return to_game_dict(game, rules=state.rules)


@router.post("/games/{game_id}/play", response_model=MoveResponse)
async def play_card(
    game_id: str,
    request: PlayCardRequest,
    state: ApiStateDep,
    x_player_id: CallerDep = None,
) -> MoveResponse:
    result = await state.games.play_card(
        x_player_id,
        game_id,
        request.hand_index,
        request.card_type,
        request.target_player_id,
    )
    return MoveResponse.model_validate(to_move_dict(result, rules=state.rules))


@router.post("/games/{game_id}/discard", response_model=MoveResponse)
async def discard(
    game_id: str,
    request: DiscardRequest,
    state: ApiStateDep,
    x_player_id: CallerDep = None,
) -> MoveResponse:
    result = await state.games.discard(x_player_id, game_id, request.hand_index)
    return MoveResponse.model_validate(to_move_dict(result, rules=state.rules))


@router.post("/games/{game_id}/defend", response_model=MoveResponse)
async def defend(
    game_id: str,
    request: DefendRequest,
    state: ApiStateDep,
    x_player_id: CallerDep = None,
) -> MoveResponse:
    result = await state.games.defend(x_player_id, game_id, request.hand_index, request.card_type)
    return MoveResponse.model_validate(to_move_dict(result, rules=state.rules))


@router.post("/games/{game_id}/submit", response_model=MoveResponse)
async def submit_to_attack(
    game_id: str, state: ApiStateDep, x_player_id: CallerDep = None
) -> MoveResponse:
    result = await state.games.submit_to_attack(x_player_id, game_id)
    return MoveResponse.model_validate(to_move_dict(result, rules=state.rules))


@router.post("/games/{game_id}/resign", response_model=MoveResponse)
async def resign(game_id: str, state: ApiStateDep, x_player_id: CallerDep = None) -> MoveResponse:
    result = await state.games.resign(x_player_id, game_id)
    return MoveResponse.model_validate(to_move_dict(result, rules=state.rules))


@router.post("/games/{game_id}/return-to-lobby", response_model=MoveResponse)
async def return_to_lobby(
    game_id: str, state: ApiStateDep, x_player_id: CallerDep = None
) -> MoveResponse:
    result = await state.games.return_to_lobby(x_player_id, game_id)
    return MoveResponse.model_validate(to_move_dict(result, rules=state.rules))


@router.get("/leaderboard", response_model=list[LeaderboardRow])
async def leaderboard(
    state: ApiStateDep,
    limit: Annotated[int | None, Query(ge=1, le=1000)] = None,
) -> list[LeaderboardRow]:
    entries = await state.games.leaderboard(limit or state.settings.leaderboard_limit)
    return [
        LeaderboardRow(player_id=entry.player_id, player_name=entry.player_name, wins=entry.wins)
        for entry in entries
    ]
