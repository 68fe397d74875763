"""
Exception types raised by the tablejack engine.

Every failure is raised before a new state is built, so the state handed in
by the caller is never partially updated.
"""


class BlackjackError(Exception):
    """Base class for all errors raised by the engine."""

    pass


class InvalidArgument(BlackjackError, ValueError):
    """Raised when a constructor or helper receives malformed input."""

    pass


class InsufficientCards(BlackjackError):
    """Raised when a draw requests more cards than remain in the deck."""

    pass


class InvalidBet(BlackjackError, ValueError):
    """Raised when a bet is not positive, exceeds the table limit or the player's chips."""

    pass


class InsufficientFunds(BlackjackError):
    """Raised when a player does not have enough chips to increase a bet."""

    pass


class InvalidMove(BlackjackError):
    """Raised when a move is requested that is not currently eligible."""

    pass
