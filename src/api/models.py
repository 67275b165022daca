"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.chess.square import Square
from src.core.exceptions import GameError, InvalidRequestError
from src.core.shared_types import Color, PromotionPiece, Status

PieceColor = str
PieceName = str


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    """Every game starts from the standard arrangement with white to move, so there is nothing to choose."""


class GetGameRequest(BaseModel):
    game_id: UUID


class PossibleMovesRequest(BaseModel):
    """NOTE: the square is not validated here. A malformed square simply has no moves (see Game.possible_moves)."""

    game_id: UUID
    square: str


class MoveBody(BaseModel):
    """Body of POST /games/{game_id}/moves, the squares get checked once the game id is attached (see MoveRequest)"""

    from_square: str
    to_square: str


class MoveRequest(MoveBody):
    game_id: UUID

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        try:
            square = Square.from_algebraic(value)
        except GameError as exc:
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name. {exc}"
            ) from exc
        return square.to_algebraic()


class PromotionBody(BaseModel):
    """Body of PUT /games/{game_id}/promotion"""

    piece: PromotionPiece

    @field_validator("piece", mode="before")
    @classmethod
    def lower_case_piece(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value


class PromotionRequest(PromotionBody):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    board_fen: str
    active_color: Color
    promotion: dict[PieceColor, PieceName]
    status: Status
    winner: Optional[Color] = None


class MoveResponse(GameResponse):
    captured: Optional[PieceName] = None


class PossibleMovesResponse(BaseModel):
    game_id: UUID
    square: str
    moves: Optional[list[str]]
