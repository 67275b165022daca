"""
Geometry/Base movement and obstruction rules

Key idea: Use strategy pattern to define the reachable squares (and what can block them) for each piece type.

Both are purely geometric: occupancy / capture rules and king safety are checked later by Board and Game
"""

from typing import Callable, Protocol

from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import BOARD_DIMENSIONS, Square


class Board(Protocol):
    """Just the parts the obstruction rules need"""

    def is_occupied(self, square: Square) -> bool: ...


Vector = tuple[int, int]

KING_DELTAS: list[Vector] = [
    (df, dr) for df in (-1, 0, 1) for dr in (-1, 0, 1) if (df, dr) != (0, 0)
]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
DIAGONALS: list[Vector] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


# --- DESTINATION RULES ---
def offset_destinations(square: Square, deltas: list[Vector]) -> set[Square]:
    """Apply each delta once, dropping whatever falls off the board"""
    targets = (square.offset(df, dr) for df, dr in deltas)
    return {target for target in targets if target is not None}


def king_destinations(square: Square, color: Color) -> set[Square]:
    """The king can move by a single square at the time, in any direction."""
    return offset_destinations(square, KING_DELTAS)


def rook_destinations(square: Square, color: Color) -> set[Square]:
    """Rooks reach every square sharing their file or their rank"""
    reach = max(BOARD_DIMENSIONS)
    along_rank: list[Vector] = [(df, 0) for df in range(-reach, reach + 1)]
    along_file: list[Vector] = [(0, dr) for dr in range(-reach, reach + 1)]
    return offset_destinations(square, along_rank + along_file)


def bishop_destinations(square: Square, color: Color) -> set[Square]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    reach = max(BOARD_DIMENSIONS)
    deltas: list[Vector] = [
        (distance * df, distance * dr)
        for df, dr in DIAGONALS
        for distance in range(1, reach + 1)
    ]
    return offset_destinations(square, deltas)


def queen_destinations(square: Square, color: Color) -> set[Square]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return rook_destinations(square, color) | bishop_destinations(square, color)


def knight_destinations(square: Square, color: Color) -> set[Square]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return offset_destinations(square, KNIGHT_DELTAS)


def pawn_destinations(square: Square, color: Color) -> set[Square]:
    """
    A pawn:
    - moves by a single square forward.
    - It can move by two in their first move (so when on their starting rank)
    - takes diagonally (whether there is something to take is decided by the Board)
    """
    steps = 2 if square.rank == color.home_rank else 1
    pushes: list[Vector] = [(0, i * color.direction) for i in range(1, steps + 1)]
    takes: list[Vector] = [(-1, color.direction), (1, color.direction)]
    return offset_destinations(square, pushes + takes)


# -- STRATEGY PATTERN: DESTINATION RULES ---
DestinationsFn = Callable[[Square, Color], set[Square]]
DESTINATION_RULES: dict[PieceType, DestinationsFn] = {
    PieceType.KING: king_destinations,
    PieceType.QUEEN: queen_destinations,
    PieceType.ROOK: rook_destinations,
    PieceType.BISHOP: bishop_destinations,
    PieceType.KNIGHT: knight_destinations,
    PieceType.PAWN: pawn_destinations,
}


def destinations(piece: Piece, square: Square) -> set[Square]:
    """
    Every square the piece could reach from `square` on an otherwise empty board.

    NOTE: the origin is never part of its own destinations.
    """
    targets = DESTINATION_RULES[piece.type](square, piece.color)
    targets.discard(square)
    return targets


# --- OBSTRUCTION RULES ---
def never_blocked(from_square: Square, to_square: Square, board: Board) -> bool:
    """Knights jump, and the king only ever moves one square. Nothing can be in between."""
    return False


def diagonal_blocked(from_square: Square, to_square: Square, board: Board) -> bool:
    """Walk from one square towards the other (both ends excluded) and look for any piece in between"""
    delta_file = to_square.file - from_square.file
    delta_rank = to_square.rank - from_square.rank
    step_file, step_rank = _sign(delta_file), _sign(delta_rank)
    for distance in range(1, max(abs(delta_file), abs(delta_rank))):
        between = from_square.offset(distance * step_file, distance * step_rank)
        if between is not None and board.is_occupied(between):
            return True
    return False


def straight_blocked(from_square: Square, to_square: Square, board: Board) -> bool:
    """
    Same file: check the ranks in between. Same rank: check the files in between.

    Anything else (e.g. the diagonal step of a pawn) cannot be blocked by this rule.
    """
    if from_square.file == to_square.file:
        low, high = sorted((from_square.rank, to_square.rank))
        if any(
            board.is_occupied(Square(from_square.file, rank))
            for rank in range(low + 1, high)
        ):
            return True

    if from_square.rank == to_square.rank:
        low, high = sorted((from_square.file, to_square.file))
        if any(
            board.is_occupied(Square(file, from_square.rank))
            for file in range(low + 1, high)
        ):
            return True

    return False


def queen_blocked(from_square: Square, to_square: Square, board: Board) -> bool:
    return diagonal_blocked(from_square, to_square, board) or straight_blocked(
        from_square, to_square, board
    )


# --- STRATEGY PATTERN: OBSTRUCTION RULES ---
IsBlockedFn = Callable[[Square, Square, Board], bool]
OBSTRUCTION_RULES: dict[PieceType, IsBlockedFn] = {
    PieceType.KING: never_blocked,
    PieceType.QUEEN: queen_blocked,
    PieceType.ROOK: straight_blocked,
    PieceType.BISHOP: diagonal_blocked,
    PieceType.KNIGHT: never_blocked,
    PieceType.PAWN: straight_blocked,
}


def is_blocked(piece: Piece, from_square: Square, to_square: Square, board: Board) -> bool:
    """Is there a piece in the way for this move?"""
    return OBSTRUCTION_RULES[piece.type](from_square, to_square, board)
