"""
Trump resolution and the three "holding" points (jack, low, high).

Trump is the suit of the first card the bid winner leads. The holding points
are then read off the hands as they were dealt, led card included.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .deal import team_of
from .deck import Card, Rank, Suit


@dataclass(frozen=True)
class Holdings:
    """Seat holding each of the trump jack, lowest trump and highest trump (None if nobody)."""

    jack: int | None = None
    low: int | None = None
    high: int | None = None

    def points_by_team(self) -> tuple[int, int]:
        """Points each team earns from holdings (0..3 combined)."""
        points = [0, 0]
        for seat in (self.jack, self.low, self.high):
            if seat is not None:
                points[team_of(seat)] += 1
        return (points[0], points[1])


def trump_from_lead(card: Card) -> Suit:
    return card.suit


def resolve_holdings(hands: Sequence[Sequence[Card]], trump: Suit) -> Holdings:
    """
    Scan every hand for trump cards.
    Cards are unique, so low and high are never tied; if nobody holds a trump
    all three stay None.
    """
    jack: int | None = None
    low: tuple[Rank, int] | None = None
    high: tuple[Rank, int] | None = None
    for seat, hand in enumerate(hands):
        for c in hand:
            if c.suit != trump:
                continue
            if c.rank == Rank.JACK:
                jack = seat
            if low is None or c.rank < low[0]:
                low = (c.rank, seat)
            if high is None or c.rank > high[0]:
                high = (c.rank, seat)
    return Holdings(
        jack=jack,
        low=low[1] if low is not None else None,
        high=high[1] if high is not None else None,
    )
