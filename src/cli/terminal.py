"""
Interactive chess game through the terminal.

Reads one command per line. Either one square (list the moves of the piece on it), two squares (try to make that move),
or one of the named commands shown in HELP.
"""

import argparse
import logging
import sys
from typing import Iterable, Optional, TextIO

from src.chess.game import Game
from src.chess.pieces import PROMOTION_OPTIONS
from src.chess.render import render_board
from src.chess.square import Square
from src.core import config
from src.core.exceptions import GameError, InvalidSquareError
from src.core.shared_types import Status

logger = logging.getLogger(__name__)

HELP = """Possible commands:
Enter one coordinate (eg. "e2") to get possible moves
Enter two coordinates (eg. "e2 e3") to try to move piece
Type name of piece to be set as promotion piece for current player (eg. "knight")
Type "state" to get current game state
Type "color" to get which color's turn it is (also shown in upper left corner of board)
Type "restart" to restart the game
Type "help" to show this again
Type "q", "quit" or "exit" anytime to quit
Press enter to start game or update board"""

QUIT_COMMANDS = ("q", "quit", "exit", "\x04")
CLEAR_SCREEN = "\x1b[2J\x1b[1;1H"


def _parse_square(token: str) -> Optional[Square]:
    try:
        return Square.from_algebraic(token)
    except InvalidSquareError:
        return None


class Terminal:
    """Keeps the game being played and writes all feedback to `out`."""

    def __init__(self, out: TextIO, fancy: bool = False) -> None:
        self.out = out
        self.fancy = fancy
        self.game = Game.new_game()

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    def rerender(self) -> None:
        if self.fancy:
            self.out.write(CLEAR_SCREEN)
        self.out.write(render_board(self.game.board, self.game.active_color, self.fancy))

    def handle(self, line: str) -> bool:
        """Process one line of input. Returns False once the player wants to quit."""
        self.rerender()
        command = line.strip().lower()

        if command in QUIT_COMMANDS:
            return False
        if command in ("help", "?"):
            self._print(HELP)
        elif command == "restart":
            self.game = Game.new_game()
            self.rerender()
        elif command == "state":
            self._print(self.game.game_status().value)
        elif command == "color":
            self._print(self.game.active_color.name.lower())
        elif command in PROMOTION_OPTIONS:
            self.game.set_promotion(command)
            self._print(f"Promotion piece set to {command}")
        else:
            self._handle_squares(line.split())
        return True

    def _handle_squares(self, tokens: list[str]) -> None:
        squares = [_parse_square(token) for token in tokens]
        if len(squares) == 1 and squares[0] is not None:
            self._show_moves(squares[0])
        elif len(squares) == 2 and None not in squares:
            self._try_move(*squares)
        else:
            self._print()

    def _show_moves(self, square: Square) -> None:
        name = square.to_algebraic()
        moves = self.game.possible_moves(name)
        if moves is None:
            self._print(f"There is no piece on {name}")
        elif moves:
            self._print(f"Moves for {name}: [{', '.join(moves)}]")
        else:
            self._print(f"No valid moves for {name}")

    def _try_move(self, from_square: Square, to_square: Square) -> None:
        from_name, to_name = from_square.to_algebraic(), to_square.to_algebraic()
        try:
            self.game.make_move(from_name, to_name)
        except GameError as exc:
            self._print(f"Illegal move: {exc}")
            return

        self.rerender()
        message = f"Moved piece from {from_name} to {to_name}"
        status = self.game.game_status()
        if status != Status.IN_PROGRESS:
            message += f", new game state: {status.value}"
        self._print(message)


def run(lines: Iterable[str], out: TextIO, fancy: bool = False) -> Terminal:
    """Play a game from the given lines of input until they run out or the player quits."""
    print(HELP, file=out)
    terminal = Terminal(out, fancy)
    for line in lines:
        if not terminal.handle(line):
            break
    return terminal


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Play chess in the terminal.")
    parser.add_argument(
        "--fancy",
        action="store_true",
        help="Use unicode symbols for the pieces (and clear the screen between moves)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT, stream=sys.stderr)
    logger.debug("Starting terminal game (fancy=%s)", args.fancy)

    run(sys.stdin, sys.stdout, fancy=args.fancy)


if __name__ == "__main__":
    main()
