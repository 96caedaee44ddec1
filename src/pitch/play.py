"""
Trick-taking: legal moves and trick winner.
Follow the lead suit if you can; trump may be played at any time.
"""
from __future__ import annotations

from .deck import Card, Suit


def lead_suit(trick: list[tuple[int, Card]]) -> Suit | None:
    """Suit of the first card in play order (not seat order)."""
    if not trick:
        return None
    return trick[0][1].suit


def has_suit(hand: list[Card], suit: Suit) -> bool:
    return any(c.suit == suit for c in hand)


def legal_plays(
    hand: list[Card],
    trick: list[tuple[int, Card]],
    trump: Suit | None,
) -> list[Card]:
    """
    Return list of cards that can be legally played from hand given current trick.
    trick: list of (player_index, card) in order played.
    Never empty while the hand is not.
    """
    if not trick:
        return list(hand)

    led = lead_suit(trick)
    assert led is not None
    if not has_suit(hand, led):
        return list(hand)
    return [c for c in hand if c.suit == led or c.is_trump(trump)]


def beats(card: Card, other: Card, led: Suit, trump: Suit | None) -> bool:
    """True if card beats other in a trick led with ``led``."""
    card_trump = card.is_trump(trump)
    other_trump = other.is_trump(trump)
    if card_trump or other_trump:
        if card_trump and other_trump:
            return card.rank > other.rank
        return card_trump
    card_led = card.suit == led
    other_led = other.suit == led
    if card_led != other_led:
        return card_led
    # Same standing: both follow, or neither does (can't win, but stay deterministic).
    return card.rank > other.rank


def trick_winner(trick: list[tuple[int, Card]], trump: Suit | None) -> int:
    """
    Index of the player who wins the trick.
    First card is the provisional winner; each later card, in play order,
    replaces it only if it beats it.
    """
    led = lead_suit(trick)
    if led is None:
        raise ValueError("Cannot resolve an empty trick")
    best_player, best_card = trick[0]
    for p, c in trick[1:]:
        if beats(c, best_card, led, trump):
            best_card = c
            best_player = p
    return best_player
