"""
Custom exceptions shared by all layers.

Everything derives from `GameError`, so the service / API layer can catch a single type
and translate it (the domain layer itself never decides how an error is presented).
"""


class GameError(Exception):
    """Top-level exception for anything that went wrong while handling a game."""


# --- PARSING ERRORS ---
class InvalidSquareError(GameError):
    """Text could not be interpreted as a square on the board."""


class InvalidSquareFormatError(InvalidSquareError):
    """Need at least a file and a rank (2 characters)."""


class InvalidFileError(InvalidSquareError):
    """File letter outside a-h."""


class InvalidRankError(InvalidSquareError):
    """Rank missing, not a number, or outside 1-8."""


class InvalidPieceNameError(GameError):
    """Not one of the pieces a pawn can promote into."""


# --- MOVE ERRORS ---
class MoveError(GameError):
    """A well-formed move request that the rules do not allow."""


class NoPieceError(MoveError):
    """There is nothing to move on the starting square."""


class NotYourTurnError(MoveError):
    """The piece belongs to the player that is not on move."""


class IllegalMoveError(MoveError):
    """Destination is not among the piece's moves."""


class CannotCaptureKingError(MoveError):
    """Kings are never removed from the board."""


class SelfCheckError(MoveError):
    """The move would leave your own king under attack."""


# --- OTHER LAYERS ---
class GameStateError(GameError):
    """Stored / transported game data cannot be turned back into a Game."""


class RepositoryError(GameError):
    """Persistence layer could not find or store the game."""


class InvalidRequestError(GameError):
    """Request data does not pass validation at the API boundary."""
