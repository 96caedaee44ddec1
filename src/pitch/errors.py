"""
Rejection reasons for actions submitted to the engine.

All of these are recoverable: the action is refused and no state changes.
They subclass ValueError so callers that only know "bad move" can catch that.
"""
from __future__ import annotations


class PitchError(ValueError):
    """Base class for every rejected action."""


class WrongPhase(PitchError):
    """Action attempted outside its phase (e.g. a play during bidding)."""


class NotYourTurn(PitchError):
    """Action submitted by a seat other than the current player."""


class IllegalBid(PitchError):
    """Bid is not Pass and not strictly above the current high bid."""


class IllegalCard(PitchError):
    """Card not in hand, or disallowed by the follow-suit rule."""


class StaleResponse(PitchError):
    """A policy response tagged with a generation that is no longer live."""


__all__ = [
    "PitchError",
    "WrongPhase",
    "NotYourTurn",
    "IllegalBid",
    "IllegalCard",
    "StaleResponse",
]
