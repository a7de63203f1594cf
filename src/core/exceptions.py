"""
Custom exceptions shared across layers.

Every exception raised on purpose by this application derives from GameError, so the Service (or whoever sits on top of it)
can catch a single type. The more specific types tell which layer / which kind of input was at fault.
"""


class GameError(Exception):
    """Top-level exception of the application"""


class InvalidFENError(GameError):
    """A position string could not be interpreted as FEN"""


class InvalidPDNError(GameError):
    """Movetext could not be interpreted (or replayed) as PDN"""


class IllegalMoveError(GameError):
    """The requested move is not in the set of legal moves"""


class GameStateError(GameError):
    """The game is not in a state in which the request makes sense (e.g. it is already over)"""


class InvalidRequestError(GameError):
    """Request data failed validation at the boundary"""


class RepositoryError(GameError):
    """Record not found / could not be stored"""
