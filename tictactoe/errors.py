from __future__ import annotations


class GameError(ValueError):
    """Base class for errors reported back to the requesting client.

    Subclasses ValueError so callers can keep treating them as plain validation
    failures; routes map each subclass to an HTTP status.
    """


class BadRequestError(GameError):
    """A required parameter is missing or out of range."""


class GameNotFoundError(GameError):
    pass


class ConflictError(GameError):
    """The request is well-formed but not allowed in the game's current state."""


class MoveRejectedError(ConflictError):
    pass


class GameFullError(ConflictError):
    pass


class AlreadyConnectedError(ConflictError):
    pass
