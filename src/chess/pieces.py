"""Defines the types of chess pieces"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self

from src.core.exceptions import InvalidPieceNameError


class PieceType(Enum):
    KING = auto()
    QUEEN = auto()
    ROOK = auto()
    BISHOP = auto()
    KNIGHT = auto()
    PAWN = auto()


class Color(Enum):
    WHITE = auto()
    BLACK = auto()

    @property
    def direction(self) -> int:
        """White pawns move up the board, black pawns move down."""
        return 1 if self == Color.WHITE else -1

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE

    @property
    def home_rank(self) -> int:
        """The rank the pawns start on (and may push two squares from)."""
        return 2 if self == Color.WHITE else 7

    @property
    def promotion_rank(self) -> int:
        return 8 if self == Color.WHITE else 1


FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

# NOTE: filled glyphs for white, outlined glyphs for black. Reads well on a dark terminal.
PIECE_SYMBOLS: dict[tuple[PieceType, Color], str] = {
    (PieceType.KING, Color.WHITE): "♚",
    (PieceType.KING, Color.BLACK): "♔",
    (PieceType.QUEEN, Color.WHITE): "♛",
    (PieceType.QUEEN, Color.BLACK): "♕",
    (PieceType.ROOK, Color.WHITE): "♜",
    (PieceType.ROOK, Color.BLACK): "♖",
    (PieceType.BISHOP, Color.WHITE): "♝",
    (PieceType.BISHOP, Color.BLACK): "♗",
    (PieceType.KNIGHT, Color.WHITE): "♞",
    (PieceType.KNIGHT, Color.BLACK): "♘",
    (PieceType.PAWN, Color.WHITE): "♟",
    (PieceType.PAWN, Color.BLACK): "♙",
}

PROMOTION_OPTIONS: dict[str, PieceType] = {
    "queen": PieceType.QUEEN,
    "rook": PieceType.ROOK,
    "bishop": PieceType.BISHOP,
    "knight": PieceType.KNIGHT,
}


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    @classmethod
    def promotion(cls, name: str, color: Color) -> Self:
        """The piece a pawn of the given color turns into, by (case-insensitive) name."""
        piece_type = PROMOTION_OPTIONS.get(name.strip().lower())
        if piece_type is None:
            raise InvalidPieceNameError(
                f"Invalid promotion piece {name!r}. Pick one from {', '.join(PROMOTION_OPTIONS)}."
            )
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    @property
    def symbol(self) -> str:
        return PIECE_SYMBOLS[(self.type, self.color)]

    @property
    def name(self) -> str:
        return self.type.name.lower()
