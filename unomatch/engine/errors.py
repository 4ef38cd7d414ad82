"""Errors raised by the UNO engine.

Every error is recoverable: the action that raised it was not applied.
"""


class EngineError(Exception):
    """Base class for engine errors."""


class IllegalMove(EngineError):
    """The card fails the legality check, or it is not the player's turn."""


class MissingColorChoice(EngineError):
    """A wild card was played without choosing a color."""


class InvalidIndex(EngineError):
    """The card index does not reference a card in the player's hand."""


class EmptyHand(InvalidIndex):
    """A card was requested from a hand that holds none."""


class ActionInProgress(EngineError):
    """Another action is still being applied to this engine."""


class MatchOver(EngineError):
    """The match already has a winner; no further hands can be dealt."""


class UnknownPlayer(EngineError):
    """The player id is not seated in this match."""
