"""Exceptions raised when a caller breaks the round contract."""


class GameError(ValueError):
    """Base class for every contract violation raised by the engine."""


class InvalidPhaseError(GameError):
    """The operation is not allowed in the current game phase."""


class IllegalActionError(GameError):
    """The requested action is not legal for the hand it targets."""


class InsufficientChipsError(GameError):
    """The player cannot cover the wager an operation requires."""


class AlreadySettledError(GameError):
    """Settlement has already run for this round."""


class PlayerError(GameError):
    """Missing or duplicate player, or an invalid chip amount."""


class DeckExhaustedError(GameError, IndexError):
    """Not enough cards remain in the deck."""
