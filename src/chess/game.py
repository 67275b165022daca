"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of the board game -->
passes this information to the service layer, which can then pass it onwards to the API layer.

NOTE: A Game does no locking of its own. Whoever shares one between threads must make sure only one caller uses it at a time.
"""

import logging
from copy import deepcopy
from dataclasses import dataclass
from typing import Optional, Self

from src.chess.board import Board
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import Square
from src.core.exceptions import (
    CannotCaptureKingError,
    GameStateError,
    IllegalMoveError,
    InvalidPieceNameError,
    InvalidSquareError,
    MoveError,
    NoPieceError,
    NotYourTurnError,
    SelfCheckError,
)
from src.core.models import GameModel
from src.core.shared_types import Status

logger = logging.getLogger(__name__)

DEFAULT_PROMOTION = "queen"


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board
    active_color: Color
    promotion: dict[Color, Piece]
    status: Status

    @classmethod
    def new_game(cls) -> Self:
        """Standard starting position, white to move, both players promote into a queen."""
        return cls(
            board=Board.starting_position(),
            active_color=Color.WHITE,
            promotion={
                color: Piece.promotion(DEFAULT_PROMOTION, color) for color in Color
            },
            status=Status.IN_PROGRESS,
        )

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        color_name = model.active_color.upper()
        if color_name not in Color.__members__:
            raise GameStateError(
                f"Invalid color: {model.active_color!r}. \nPick one from {','.join([color.name.lower() for color in Color])}"
            )
        try:
            status = Status(model.status)
        except ValueError as exc:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(Status)}"
            ) from exc

        promotion: dict[Color, Piece] = {}
        for color in Color:
            name = model.promotion.get(color.name.lower(), DEFAULT_PROMOTION)
            try:
                promotion[color] = Piece.promotion(name, color)
            except InvalidPieceNameError as exc:
                raise GameStateError(str(exc)) from exc

        # create the Game
        board = Board.from_fen(model.board_fen)
        return cls(board, Color[color_name], promotion, status)

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            board_fen=self.board.to_fen(),
            active_color=self.active_color.name.lower(),
            promotion={
                color.name.lower(): piece.name for color, piece in self.promotion.items()
            },
            status=self.status.value,
        )

    @property
    def winner(self) -> Optional[Color]:
        """
        Given we know it is checkmate, the player who is requesting to move just got mated and the opponent must be the winner
        """
        if self.status != Status.CHECKMATE:
            return None
        return self.active_color.opponent

    def possible_moves(self, square_name: str) -> Optional[list[str]]:
        """
        Legal destinations (algebraic notation) for the piece on the given square.

        None if the square cannot be parsed or there is no piece on it. An empty list if the piece cannot move.
        """
        try:
            square = Square.from_algebraic(square_name)
        except InvalidSquareError:
            return None

        moves = self.legal_moves(square)
        if moves is None:
            return None
        return [move.to_algebraic() for move in moves]

    def legal_moves(self, square: Square) -> Optional[list[Square]]:
        """
        List of legal destinations for the piece on `square`
        ----

        ----
        **Combines the following**

        1. generate pseudo-legal moves (the board does this calculation)
        2. remove any square with a king on it --> kings never get captured, the game ends by checkmate instead.
        3. remove illegal options --> a move that would leave your own king under attack.
            Only done for the player on move. Asking about the other player's pieces is informational, and this is also
            what keeps the threat scan from recursing into itself.
        4. sort by square name, so the output is deterministic.
        """
        moves = self.board.pseudo_legal_moves(square)
        if moves is None:
            return None

        moves = {target for target in moves if not self._holds_king(target)}

        piece = self.board.piece(square)
        assert piece is not None
        if piece.color == self.active_color:
            moves = {
                target
                for target in moves
                if not self._is_putting_yourself_in_check(square, target)
            }

        return sorted(moves, key=lambda target: target.to_algebraic())

    def make_move(self, from_square_name: str, to_square_name: str) -> Optional[Piece]:
        """
        Attempt to make a move
        -----

        1. parse both squares
        2. there must be a piece of the player on move on the starting square
        3. the target square must be one of that piece's legal moves
        4. move the piece (promoting a pawn that reaches the last rank), flip the turn and update the status

        Returns the captured piece (if any). Any failure raises, and leaves the game exactly as it was.
        """
        from_square = Square.from_algebraic(from_square_name)
        to_square = Square.from_algebraic(to_square_name)

        try:
            self._validate_move(from_square, to_square)
            captured = self._apply_move(from_square, to_square)
        except MoveError as exc:
            logger.info("Rejected move %s-%s: %s", from_square_name, to_square_name, exc)
            raise

        logger.debug(
            "Moved %s-%s (captured: %s), status: %s",
            from_square.to_algebraic(),
            to_square.to_algebraic(),
            captured.name if captured else None,
            self.status,
        )
        return captured

    def set_promotion(self, piece_name: str) -> None:
        """Choose what the pawns of the player on move turn into. Applies to the player on move only."""
        self.promotion[self.active_color] = Piece.promotion(piece_name, self.active_color)

    def game_status(self) -> Status:
        """
        Current status of the game.

        NOTE: Making a move only detects check. Whether the player on move is actually mated is only evaluated here.
        """
        if self.is_checkmate(self.active_color):
            self.status = Status.CHECKMATE
        return self.status

    def is_checkmate(self, color: Color) -> bool:
        """No piece of `color` has a single legal move left"""
        for square in self.board.locate_color(color):
            if self.legal_moves(square):
                return False
        return True

    # -- PRIVATE HELPERS ---
    def _holds_king(self, square: Square) -> bool:
        piece = self.board.piece(square)
        return piece is not None and piece.type == PieceType.KING

    def _validate_move(self, from_square: Square, to_square: Square) -> None:
        """Preconditions, in the order they are checked. Each failure has its own exception."""
        piece = self.board.piece(from_square)
        if piece is None:
            raise NoPieceError(f"No piece on {from_square.to_algebraic()}.")

        if piece.color != self.active_color:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.active_color.name.lower()} to make a move first."
            )

        legal_moves = self.legal_moves(from_square) or []
        if to_square not in legal_moves:
            raise IllegalMoveError(
                f"Move not allowed: {from_square.to_algebraic()}{to_square.to_algebraic()}"
            )

        if self._holds_king(to_square):
            raise CannotCaptureKingError("Cannot capture the king.")

    def _apply_move(self, from_square: Square, to_square: Square) -> Optional[Piece]:
        """
        Update the board, the status and the turn.
        ----

        The board is snapshot first, so it can be restored if the move turns out to leave your own king under attack.
        """
        snapshot = deepcopy(self.board)
        moving_piece = self.board.piece(from_square)
        assert moving_piece is not None

        placed = self._promoted_piece(moving_piece, to_square)
        captured = self.board.move_piece(from_square, to_square, placed)

        if self.board.is_threatened(self.active_color):
            self.board = snapshot
            raise SelfCheckError("Move threatens own king.")

        self.status = Status.IN_PROGRESS
        if self.board.is_threatened(self.active_color.opponent):
            self.status = Status.CHECK

        self.active_color = self.active_color.opponent
        return captured

    def _promoted_piece(self, piece: Piece, to_square: Square) -> Optional[Piece]:
        """Pawns reaching the far rank become the player's chosen promotion piece"""
        if piece.type == PieceType.PAWN and to_square.rank == piece.color.promotion_rank:
            return self.promotion.get(piece.color, Piece(PieceType.QUEEN, piece.color))
        return None

    def _is_putting_yourself_in_check(self, from_square: Square, to_square: Square) -> bool:
        """Return True if the move puts you in check

        plan:
        1. Copy the game
        2. make the candidate move
        3. the move executor refuses it if your king is under attack on the new board
        """
        trial = deepcopy(self)
        try:
            trial._apply_move(from_square, to_square)
        except SelfCheckError:
            return True
        return False
