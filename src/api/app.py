"""
FastAPI application exposing the chess engine.

Every route builds a ChessService around a fresh database session. Domain errors are translated into HTTP errors
by the exception handlers at the bottom, the routes themselves only pass requests on.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    MoveBody,
    MoveRequest,
    MoveResponse,
    PossibleMovesRequest,
    PossibleMovesResponse,
    PromotionBody,
    PromotionRequest,
)
from src.core import config
from src.core.exceptions import GameError, NotYourTurnError, RepositoryError
from src.db.database import get_db, init_db
from src.db.sql_repository import SQLGameRepository
from src.services.chess_service import ChessService

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
_log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_db()
    yield


app = FastAPI(title="Chess rules engine", version="0.1.0", lifespan=lifespan)


def get_service(db: Session = Depends(get_db)) -> ChessService:
    return ChessService(SQLGameRepository(db))


# --- ROUTES ---
@app.post("/games", response_model=GameResponse, status_code=status.HTTP_201_CREATED)
def create_game(
    request: CreateGameRequest, service: ChessService = Depends(get_service)
) -> GameResponse:
    return service.create_new_game(request)


@app.get("/games/{game_id}", response_model=GameResponse)
def get_game(game_id: UUID, service: ChessService = Depends(get_service)) -> GameResponse:
    """Current state of the game (this is also where checkmate gets detected)."""
    return service.get_game_state(GetGameRequest(game_id=game_id))


@app.get("/games/{game_id}/moves/{square}", response_model=PossibleMovesResponse)
def possible_moves(
    game_id: UUID, square: str, service: ChessService = Depends(get_service)
) -> PossibleMovesResponse:
    return service.possible_moves(PossibleMovesRequest(game_id=game_id, square=square))


@app.post("/games/{game_id}/moves", response_model=MoveResponse)
def make_move(
    game_id: UUID, body: MoveBody, service: ChessService = Depends(get_service)
) -> MoveResponse:
    return service.make_move(MoveRequest(game_id=game_id, **body.model_dump()))


@app.put("/games/{game_id}/promotion", response_model=GameResponse)
def set_promotion(
    game_id: UUID, body: PromotionBody, service: ChessService = Depends(get_service)
) -> GameResponse:
    return service.set_promotion(PromotionRequest(game_id=game_id, piece=body.piece))


@app.delete("/games/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_game(game_id: UUID, service: ChessService = Depends(get_service)) -> None:
    service.delete_game(DeleteGameRequest(game_id=game_id))


# --- ERROR HANDLING ---
@app.exception_handler(RepositoryError)
async def game_not_found(request: Request, exc: RepositoryError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(NotYourTurnError)
async def not_your_turn(request: Request, exc: NotYourTurnError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


@app.exception_handler(GameError)
async def game_error(request: Request, exc: GameError) -> JSONResponse:
    _log.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})
