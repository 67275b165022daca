"""Unit tests for src/services/chess_service.py"""

from threading import Thread
from typing import Generator
from uuid import UUID, uuid4

import pytest

from src.core.exceptions import (
    GameError,
    IllegalMoveError,
    NotYourTurnError,
    RepositoryError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, PromotionPiece, Status
from src.db.repository import InMemoryGameRepository
from src.services.chess_service import (
    ChessService,
    CreateGameRequest,
    DeleteGameRequest,
    GameLocks,
    GameResponse,
    GetGameRequest,
    MoveRequest,
    MoveResponse,
    PossibleMovesRequest,
    PromotionRequest,
)

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
FOOLS_MATE = [("f2", "f3"), ("e7", "e5"), ("g2", "g4"), ("d8", "h4")]


# --- MOCK DEPENDENCIES ----
class MockRepository(InMemoryGameRepository):
    """In-memory repository that also counts how often a stored game got overwritten."""

    def __init__(self) -> None:
        super().__init__()
        self.updates = 0

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        updated = super().update_game(game_id, game)
        if updated is not None:
            self.updates += 1
        return updated


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> ChessService:
    return ChessService(mock_repository, locks=GameLocks())


def play(service: ChessService, game_id: UUID, moves: list[tuple[str, str]]) -> None:
    for from_square, to_square in moves:
        service.make_move(MoveRequest(game_id=game_id, from_square=from_square, to_square=to_square))


# --- SERVICE - CREATE NEW GAME ----
def test_create_a_new_game(service: ChessService, mock_repository: MockRepository) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    response = service.create_new_game(CreateGameRequest())

    # Check response structure
    assert isinstance(response, GameResponse)
    assert isinstance(response.game_id, UUID)

    # Check response data
    assert response.board_fen == STARTING_POSITION
    assert response.active_color == Color.WHITE
    assert response.status == Status.IN_PROGRESS
    assert response.promotion == {"white": "queen", "black": "queen"}
    assert response.winner is None

    # Check persisted data
    stored_game = mock_repository.get_game(response.game_id)
    assert stored_game is not None
    assert stored_game.board_fen == STARTING_POSITION
    assert stored_game.active_color == "white"


def test_new_game_always_starts_from_the_standard_position(service: ChessService) -> None:
    request = CreateGameRequest.model_validate({"starting_fen": "4k3/8/8/8/8/8/8/4R2K", "active_color": "black"})
    response = service.create_new_game(request)
    assert response.board_fen == STARTING_POSITION
    assert response.active_color == Color.WHITE
    assert response.status == Status.IN_PROGRESS


# --- SERVICE - POSSIBLE MOVES ----
def test_possible_moves(service: ChessService) -> None:
    game_id = service.create_new_game(CreateGameRequest()).game_id
    response = service.possible_moves(PossibleMovesRequest(game_id=game_id, square="g1"))
    assert response.moves == ["f3", "h3"]


@pytest.mark.parametrize("square", ["e4", "z9", ""])
def test_possible_moves_absent(service: ChessService, square: str) -> None:
    """Empty or malformed squares have no list of moves at all"""
    game_id = service.create_new_game(CreateGameRequest()).game_id
    response = service.possible_moves(PossibleMovesRequest(game_id=game_id, square=square))
    assert response.moves is None


# --- SERVICE - MAKE MOVE ----
def test_make_move(service: ChessService, mock_repository: MockRepository) -> None:
    game_id = service.create_new_game(CreateGameRequest()).game_id
    response = service.make_move(MoveRequest(game_id=game_id, from_square="e2", to_square="e4"))

    assert isinstance(response, MoveResponse)
    assert response.board_fen == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR"
    assert response.active_color == Color.BLACK
    assert response.captured is None

    stored_game = mock_repository.get_game(game_id)
    assert stored_game is not None
    assert stored_game.board_fen == response.board_fen


def test_make_move_reports_capture(service: ChessService) -> None:
    game_id = service.create_new_game(CreateGameRequest()).game_id
    play(service, game_id, [("e2", "e4"), ("d7", "d5")])
    response = service.make_move(MoveRequest(game_id=game_id, from_square="e4", to_square="d5"))
    assert response.captured == "pawn"


@pytest.mark.parametrize(
    "from_square, to_square, error",
    [("e7", "e5", NotYourTurnError), ("e2", "e5", IllegalMoveError)],
)
def test_rejected_move_is_not_stored(
    service: ChessService,
    mock_repository: MockRepository,
    from_square: str,
    to_square: str,
    error: type[GameError],
) -> None:
    game_id = service.create_new_game(CreateGameRequest()).game_id
    before = mock_repository.get_game(game_id)
    with pytest.raises(error):
        service.make_move(MoveRequest(game_id=game_id, from_square=from_square, to_square=to_square))
    assert mock_repository.get_game(game_id) == before
    assert mock_repository.updates == 0


# --- SERVICE - GAME STATE ----
def test_checkmate_is_detected_and_stored(
    service: ChessService, mock_repository: MockRepository
) -> None:
    game_id = service.create_new_game(CreateGameRequest()).game_id
    play(service, game_id, FOOLS_MATE)

    stored_game = mock_repository.get_game(game_id)
    assert stored_game is not None
    assert stored_game.status == Status.CHECK

    response = service.get_game_state(GetGameRequest(game_id=game_id))
    assert response.status == Status.CHECKMATE
    assert response.winner == Color.BLACK

    stored_game = mock_repository.get_game(game_id)
    assert stored_game is not None
    assert stored_game.status == Status.CHECKMATE


def test_unchanged_status_is_not_stored_again(
    service: ChessService, mock_repository: MockRepository
) -> None:
    game_id = service.create_new_game(CreateGameRequest()).game_id
    response = service.get_game_state(GetGameRequest(game_id=game_id))
    assert response.status == Status.IN_PROGRESS
    assert mock_repository.updates == 0


def test_unknown_game(service: ChessService) -> None:
    with pytest.raises(RepositoryError):
        service.get_game_state(GetGameRequest(game_id=uuid4()))


# --- SERVICE - PROMOTION ----
def test_set_promotion(service: ChessService, mock_repository: MockRepository) -> None:
    game_id = service.create_new_game(CreateGameRequest()).game_id
    response = service.set_promotion(PromotionRequest(game_id=game_id, piece=PromotionPiece.KNIGHT))
    assert response.promotion == {"white": "knight", "black": "queen"}

    stored_game = mock_repository.get_game(game_id)
    assert stored_game is not None
    assert stored_game.promotion["white"] == "knight"


# --- SERVICE - DELETE ----
def test_delete_game(service: ChessService, mock_repository: MockRepository) -> None:
    game_id = service.create_new_game(CreateGameRequest()).game_id
    service.delete_game(DeleteGameRequest(game_id=game_id))
    assert mock_repository.get_game(game_id) is None


def test_delete_unknown_game(service: ChessService) -> None:
    with pytest.raises(RepositoryError):
        service.delete_game(DeleteGameRequest(game_id=uuid4()))
    assert len(service.locks) == 0


# --- CONCURRENCY ----
def test_concurrent_moves_on_same_game(service: ChessService, mock_repository: MockRepository) -> None:
    """Two threads try the same first move. Exactly one of them gets to play it."""
    game_id = service.create_new_game(CreateGameRequest()).game_id
    errors: list[Exception] = []

    def attempt() -> None:
        try:
            service.make_move(MoveRequest(game_id=game_id, from_square="e2", to_square="e4"))
        except GameError as exc:
            errors.append(exc)

    threads = [Thread(target=attempt) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(errors) == 1
    assert mock_repository.updates == 1


def test_no_locks_kept_for_unknown_games(service: ChessService) -> None:
    """Looking up games that do not exist must not leave a lock behind for each id asked about."""
    for _ in range(100):
        with pytest.raises(RepositoryError):
            service.get_game_state(GetGameRequest(game_id=uuid4()))
        with pytest.raises(RepositoryError):
            service.make_move(MoveRequest(game_id=uuid4(), from_square="e2", to_square="e4"))
    assert len(service.locks) == 0

    game_id = service.create_new_game(CreateGameRequest()).game_id
    service.get_game_state(GetGameRequest(game_id=game_id))
    assert len(service.locks) == 1
    service.delete_game(DeleteGameRequest(game_id=game_id))
    assert len(service.locks) == 0
