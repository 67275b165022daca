"""Human readable dump of the board (used by the terminal interface)"""

from string import ascii_lowercase

from src.chess.board import Board
from src.chess.pieces import Color, Piece
from src.chess.square import BOARD_DIMENSIONS, Square

ACTIVE_COLOR_MARKER: dict[Color, str] = {Color.WHITE: "W", Color.BLACK: "B"}


def _cell(piece: Piece | None, fancy: bool) -> str:
    if piece is None:
        return " "
    return piece.symbol if fancy else piece.to_fen()


def render_board(board: Board, active_color: Color, fancy: bool = False) -> str:
    """
    8 ranks x 8 files, 8th rank on top.

    The header shows whose turn it is (W/B) followed by the file letters, every rank starts with its number.
    `fancy` uses unicode chess glyphs, otherwise the FEN letters (upper case white, lower case black).
    """
    files = " ".join(ascii_lowercase[: BOARD_DIMENSIONS[0]])
    lines = [f"{ACTIVE_COLOR_MARKER[active_color]} {files}"]
    for rank in range(BOARD_DIMENSIONS[1], 0, -1):
        cells = "".join(
            f" {_cell(board.piece(Square(file, rank)), fancy)}"
            for file in range(1, BOARD_DIMENSIONS[0] + 1)
        )
        lines.append(f"{rank}{cells}")
    return "\n".join(lines) + "\n"
