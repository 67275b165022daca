"""Unit tests for /src/chess/square.py"""

from string import ascii_lowercase

import pytest

from src.chess.square import BOARD_DIMENSIONS, Square, all_squares
from src.core.exceptions import (
    InvalidFileError,
    InvalidRankError,
    InvalidSquareError,
    InvalidSquareFormatError,
)


@pytest.mark.parametrize(
    "file, rank, notation",
    [
        (file, rank, f"{ascii_lowercase[file - 1]}{rank}")
        for file in range(1, 9)
        for rank in range(1, 9)
    ],
)
def test_creating_from_algebraic(file: int, rank: int, notation: str) -> None:
    """Simply checks if the notation for 'a1' indeed maps to file 1, rank 1, etc."""
    square = Square.from_algebraic(notation)
    assert square.file == file
    assert square.rank == rank


@pytest.mark.parametrize(
    "file, rank, notation",
    [
        (file, rank, f"{ascii_lowercase[file - 1]}{rank}")
        for file in range(1, 9)
        for rank in range(1, 9)
    ],
)
def test_to_algebraic_notation(file: int, rank: int, notation: str) -> None:
    """Test the reverse, so the square on the 1st file and 1st rank should be denoted as a1"""
    square = Square(file, rank)
    assert square.to_algebraic() == notation


@pytest.mark.parametrize("notation, normalized", [("E2", "e2"), (" d7 ", "d7"), ("H8", "h8")])
def test_upper_case_and_whitespace_are_normalized(notation: str, normalized: str) -> None:
    assert Square.from_algebraic(notation).to_algebraic() == normalized


@pytest.mark.parametrize(
    "notation, error",
    [
        ("", InvalidSquareFormatError),
        ("e", InvalidSquareFormatError),
        ("k15", InvalidFileError),
        ("i2", InvalidFileError),
        ("12", InvalidFileError),
        ("a9", InvalidRankError),
        ("a0", InvalidRankError),
        ("ax", InvalidRankError),
        ("a-1", InvalidRankError),
    ],
)
def test_invalid_notation(notation: str, error: type[InvalidSquareError]) -> None:
    """Every parse failure has its own error, and all of them are an InvalidSquareError"""
    with pytest.raises(error):
        Square.from_algebraic(notation)
    with pytest.raises(InvalidSquareError):
        Square.from_algebraic(notation)


def test_square_within_bounds() -> None:
    """happy case: pieces within the dimensions of the board"""
    for square in all_squares():
        assert square.is_within_bounds()
    assert len(all_squares()) == BOARD_DIMENSIONS[0] * BOARD_DIMENSIONS[1]


def test_square_out_of_bounds() -> None:
    square = Square(BOARD_DIMENSIONS[0] + 1, BOARD_DIMENSIONS[1] + 1)
    assert not square.is_within_bounds()

    square = Square(-1, -1)
    assert not square.is_within_bounds()


def test_offset_on_the_board() -> None:
    assert Square.from_algebraic("e4").offset(1, 2) == Square.from_algebraic("f6")
    assert Square.from_algebraic("e4").offset(-4, -3) == Square.from_algebraic("a1")


@pytest.mark.parametrize(
    "notation, delta",
    [("a1", (-1, 0)), ("a1", (0, -1)), ("h8", (1, 0)), ("h8", (0, 1)), ("d4", (5, 0))],
)
def test_offset_off_the_board(notation: str, delta: tuple[int, int]) -> None:
    """Falling off the board is a normal outcome: None, never an out of range square"""
    assert Square.from_algebraic(notation).offset(*delta) is None
