"""
Distribution (deal) for 4 players: 6 cards each, one at a time.
Only 24 of the 52 cards are dealt; the other 28 sit out the round.
Seats 0..3 clockwise; partners sit across (0/2 and 1/3).
"""
from __future__ import annotations

import random
from typing import NamedTuple

from .deck import Card, make_deck_52

NUM_PLAYERS = 4
HAND_SIZE = 6


class Deal4P(NamedTuple):
    """Result of a deal. Hands are lists (mutated during play)."""
    hands: tuple[list[Card], list[Card], list[Card], list[Card]]
    dealer: int  # 0..3


def deal_4p(
    deck: list[Card] | None = None,
    rng: random.Random | None = None,
    dealer: int = 0,
) -> Deal4P:
    """
    Shuffle and deal HAND_SIZE cards to each seat, round-robin from the top of the pack.
    The remaining cards are not used.
    """
    if deck is None:
        deck = make_deck_52()
    if rng is None:
        rng = random.Random()
    deck = list(deck)
    rng.shuffle(deck)

    hands: list[list[Card]] = [[], [], [], []]
    for i in range(HAND_SIZE * NUM_PLAYERS):
        hands[i % NUM_PLAYERS].append(deck[i])

    return Deal4P(hands=(hands[0], hands[1], hands[2], hands[3]), dealer=dealer)


def next_dealer(dealer: int) -> int:
    """Dealer rotates clockwise (0 -> 1 -> 2 -> 3 -> 0)."""
    return (dealer + 1) % NUM_PLAYERS


def first_to_bid(dealer: int) -> int:
    """The seat left of the dealer speaks first."""
    return (dealer + 1) % NUM_PLAYERS


def team_of(seat: int) -> int:
    """Team index: 0 for seats 0/2, 1 for seats 1/3."""
    return seat % 2


def team_seats(team: int) -> tuple[int, int]:
    return (team, team + 2)
