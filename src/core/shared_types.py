"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    CHECK = "check"
    CHECKMATE = "checkmate"


# --- NOTE The domain layer has its own Color / PieceType enums (src/chess/pieces.py) that carry chess behaviour.
# --- These are the plain string versions that can safely travel through the API and the database.


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PromotionPiece(StrEnum):
    QUEEN = "queen"
    ROOK = "rook"
    BISHOP = "bishop"
    KNIGHT = "knight"
