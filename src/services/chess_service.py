"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from threading import Lock
from typing import Optional
from uuid import UUID

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    MoveRequest,
    MoveResponse,
    PossibleMovesRequest,
    PossibleMovesResponse,
    PromotionRequest,
)
from src.chess.game import Game
from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.core.shared_types import Color
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)


class GameLocks:
    """
    One lock per game id.

    A Game is not safe to share between threads, so every read-modify-write of a stored game happens while holding its lock.
    Locks are only kept for games that exist: when the work inside `hold` finds no such game, its lock is dropped again.
    """

    def __init__(self) -> None:
        self._guard = Lock()
        self._locks: dict[UUID, Lock] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @contextmanager
    def hold(self, game_id: UUID) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(game_id, Lock())
        try:
            with lock:
                yield
        except RepositoryError:
            self.discard(game_id)
            raise

    def discard(self, game_id: UUID) -> None:
        with self._guard:
            self._locks.pop(game_id, None)


# Services are created per request, the locks must outlive them
GAME_LOCKS = GameLocks()


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(self, repository: GameRepository, locks: GameLocks = GAME_LOCKS) -> None:
        self.repo = repository
        self.locks = locks

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a new game from the standard starting position."""

        new_game = Game.new_game()

        # Store the GameModel in the repository
        _, game_id = self.repo.create_game(new_game.to_model())
        logger.info("Created game %s", game_id)

        return self._create_game_response(game_id, new_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Asking for the state is what detects checkmate, so a changed status gets persisted as well.
        """
        with self.locks.hold(request.game_id):
            game = Game.from_model(self._fetch_game(request.game_id))

            previous_status = game.status
            status = game.game_status()
            if status != previous_status:
                logger.info("Game %s status changed: %s -> %s", request.game_id, previous_status, status)
                self.repo.update_game(request.game_id, game.to_model())

        return self._create_game_response(request.game_id, game)

    def possible_moves(self, request: PossibleMovesRequest) -> PossibleMovesResponse:
        """retrieve the legal moves for the piece on the requested square."""
        with self.locks.hold(request.game_id):
            game = Game.from_model(self._fetch_game(request.game_id))
            moves = game.possible_moves(request.square)

        return PossibleMovesResponse(
            game_id=request.game_id, square=request.square, moves=moves
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt. Nothing is stored if the move is rejected."""
        with self.locks.hold(request.game_id):
            game = Game.from_model(self._fetch_game(request.game_id))

            # Attempt the move
            captured = game.make_move(request.from_square, request.to_square)

            # Capture updated state in GameModel and store in repository
            self.repo.update_game(request.game_id, game.to_model())

        logger.info(
            "Game %s: %s-%s played, status: %s",
            request.game_id,
            request.from_square,
            request.to_square,
            game.status,
        )
        response = self._create_game_response(request.game_id, game)
        return MoveResponse(
            **response.model_dump(), captured=captured.name if captured else None
        )

    def set_promotion(self, request: PromotionRequest) -> GameResponse:
        """Set the promotion piece of the player on move."""
        with self.locks.hold(request.game_id):
            game = Game.from_model(self._fetch_game(request.game_id))
            game.set_promotion(request.piece.value)
            self.repo.update_game(request.game_id, game.to_model())

        return self._create_game_response(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        with self.locks.hold(request.game_id):
            if self.repo.delete_game(request.game_id) is None:
                raise RepositoryError(f"Game with game_id={request.game_id} not found.")
        self.locks.discard(request.game_id)
        logger.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert the state of a Game into a GameResponse (for game with given ID.)"""
        model = game.to_model()
        winner: Optional[Color] = Color(game.winner.name.lower()) if game.winner else None
        return GameResponse(
            game_id=game_id,
            board_fen=model.board_fen,
            active_color=Color(model.active_color),
            promotion=model.promotion,
            status=model.status,
            winner=winner,
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
