"""The Game board implements all rules that effect the `position` (in chess: the configuration of pieces on the board)"""

from dataclasses import dataclass
from typing import Optional, Self

from src.chess.moves import destinations, is_blocked
from src.chess.pieces import FEN_TO_PIECE, Color, Piece, PieceType
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import GameStateError

STARTING_POSITION_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


@dataclass
class Board:
    """
    Sparse mapping of occupied squares to the piece standing there.

    An empty square simply has no entry.
    """

    position: dict[Square, Piece]

    @classmethod
    def starting_position(cls) -> Self:
        """Back rank pieces on rank 1 (white) / 8 (black), pawns on rank 2 / 7"""
        position: dict[Square, Piece] = {}
        for color, back_rank in ((Color.WHITE, 1), (Color.BLACK, BOARD_DIMENSIONS[1])):
            for file, piece_type in enumerate(BACK_RANK, start=1):
                position[Square(file, back_rank)] = Piece(piece_type, color)
            for file in range(1, BOARD_DIMENSIONS[0] + 1):
                position[Square(file, color.home_rank)] = Piece(PieceType.PAWN, color)
        return cls(position)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, read from the a-file to the h-file
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.
        """
        fen_by_ranks = fen_str.strip().split("/")
        if len(fen_by_ranks) != BOARD_DIMENSIONS[1]:
            raise GameStateError(
                f"Board FEN {fen_str!r} should describe {BOARD_DIMENSIONS[1]} ranks."
            )

        position: dict[Square, Piece] = {}
        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = BOARD_DIMENSIONS[1] - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 1
            for character in fen_one_rank:
                if character.lower() in FEN_TO_PIECE:
                    position[Square(file, rank)] = Piece.from_fen(character)
                    file += 1
                elif character.isdigit():
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
                else:
                    raise GameStateError(
                        f"Unexpected character {character!r} in board FEN {fen_str!r}."
                    )
            if file != BOARD_DIMENSIONS[0] + 1:
                raise GameStateError(
                    f"Rank {rank} in board FEN {fen_str!r} does not cover exactly {BOARD_DIMENSIONS[0]} files."
                )
        return cls(position)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1], 0, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(1, BOARD_DIMENSIONS[0] + 1):
            piece = self.piece(Square(file, rank))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- OCCUPANCY ---
    def piece(self, square: Square) -> Optional[Piece]:
        return self.position.get(square)

    def is_occupied(self, square: Square) -> bool:
        return square in self.position

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square for square, piece in self.position.items() if piece.color == color
        ]

    def place_piece(self, piece: Piece, square: Square) -> Optional[Piece]:
        """Put a piece on the square, returning whatever was standing there before"""
        removed = self.position.get(square)
        self.position[square] = piece
        return removed

    def remove_piece(self, square: Square) -> Optional[Piece]:
        return self.position.pop(square, None)

    def move_piece(
        self, from_square: Square, to_square: Square, placed: Optional[Piece] = None
    ) -> Optional[Piece]:
        """
        Update the position on the board.

        `placed` replaces the moving piece on its target square (pawn promotion). Returns the captured piece, if any.
        """
        moving_piece = self.position.pop(from_square)
        return self.place_piece(placed or moving_piece, to_square)

    # --- PSEUDO-LEGAL MOVES ---
    def pseudo_legal_moves(self, square: Square) -> Optional[set[Square]]:
        """
        Destinations of the piece on `square` that respect occupancy, obstruction and capturing rules.
        ----

        ----
        A destination is kept if it is not blocked and
        * holds an opponent's piece (capture), unless a pawn would take straight ahead; or
        * is empty, unless a pawn would move diagonally without taking anything.

        NOTE: Does not care whether the move exposes your own king. Returns None if there is no piece on the square.
        """
        piece = self.piece(square)
        if piece is None:
            return None

        is_pawn = piece.type == PieceType.PAWN
        moves: set[Square] = set()
        for target in destinations(piece, square):
            target_piece = self.piece(target)
            straight_ahead = target.file == square.file
            if target_piece is not None:
                if is_pawn and straight_ahead:
                    continue
                if target_piece.color == piece.color:
                    continue
            elif is_pawn and not straight_ahead:
                continue

            if not is_blocked(piece, square, target, self):
                moves.add(target)
        return moves

    # --- THREATS ---
    def attacks_king(self, square: Square, king_color: Color) -> bool:
        """Could the piece standing on `square` move onto the king of `king_color`?"""
        moves = self.pseudo_legal_moves(square)
        if not moves:
            return False
        king = Piece(PieceType.KING, king_color)
        return any(self.piece(target) == king for target in moves)

    def is_threatened(self, color: Color) -> bool:
        """Is the king of `color` attacked by any of the opponent's pieces?"""
        return any(
            self.attacks_king(square, color)
            for square in self.locate_color(color.opponent)
        )
