"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.core.exceptions import (
    InvalidFileError,
    InvalidRankError,
    InvalidSquareFormatError,
)

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """
        Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)

        The file letter is case-insensitive, everything after it is read as the rank.
        """
        sq = sq.strip()
        if len(sq) < 2:
            raise InvalidSquareFormatError(
                f"Square {sq!r} should consist of a file and a rank (at least 2 characters)."
            )

        file_char, rank_str = sq[0].lower(), sq[1:]
        file = ord(file_char) - ord("a") + 1
        if not (file_char.isascii() and 1 <= file <= BOARD_DIMENSIONS[0]):
            raise InvalidFileError(f"Invalid file {sq[0]!r}, should be in range [a, h].")

        if not (rank_str.isascii() and rank_str.isdigit()):
            raise InvalidRankError(f"Invalid rank {rank_str!r}, should be a number.")
        rank = int(rank_str)
        if not 1 <= rank <= BOARD_DIMENSIONS[1]:
            raise InvalidRankError(f"Rank {rank} out of range: [1, 8].")

        return cls(file, rank)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    def is_within_bounds(self) -> bool:
        return (1 <= self.file <= BOARD_DIMENSIONS[0]) and (
            1 <= self.rank <= BOARD_DIMENSIONS[1]
        )

    def offset(self, file_delta: int, rank_delta: int) -> Optional[Square]:
        """The square shifted by the given deltas, or None when that falls off the board."""
        target = Square(self.file + file_delta, self.rank + rank_delta)
        return target if target.is_within_bounds() else None


def all_squares() -> list[Square]:
    """Every square on the board, a1, a2, ... h8"""
    return [
        Square(file, rank)
        for file in range(1, BOARD_DIMENSIONS[0] + 1)
        for rank in range(1, BOARD_DIMENSIONS[1] + 1)
    ]
