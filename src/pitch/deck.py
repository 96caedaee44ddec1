"""
Pitch deck: 52 cards (4 suits × 13 ranks).
Rank order 2 < 3 < ... < A is used for trick comparisons; only T, J, Q, K, A
carry a "game" value (10, 1, 2, 3, 4).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class Suit(IntEnum):
    """Clubs, Diamonds, Hearts, Spades. Order used for encoding and display."""
    CLUBS = 0
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3

    @property
    def letter(self) -> str:
        return "CDHS"[self]

    @classmethod
    def from_letter(cls, letter: str) -> "Suit":
        idx = "CDHS".find(letter.upper())
        if idx < 0 or len(letter) != 1:
            raise ValueError(f"Unknown suit: {letter!r}")
        return cls(idx)


class Rank(IntEnum):
    """Card ranks; the integer value is the trick-comparison strength."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def letter(self) -> str:
        return RANK_LETTERS[self - 2]

    @classmethod
    def from_letter(cls, letter: str) -> "Rank":
        idx = RANK_LETTERS.find(letter.upper())
        if idx < 0 or len(letter) != 1:
            raise ValueError(f"Unknown rank: {letter!r}")
        return cls(idx + 2)


RANK_LETTERS = "23456789TJQKA"

# Game-point values; every other rank counts 0.
GAME_VALUES: dict[Rank, int] = {
    Rank.TEN: 10,
    Rank.JACK: 1,
    Rank.QUEEN: 2,
    Rank.KING: 3,
    Rank.ACE: 4,
}


@dataclass(frozen=True)
class Card:
    """A single card: rank + suit. Written as two characters, e.g. ``TH``."""

    rank: Rank
    suit: Suit

    def __post_init__(self) -> None:
        # Accept plain ints so Card(14, 2) works like Card(Rank.ACE, Suit.HEARTS).
        object.__setattr__(self, "rank", Rank(self.rank))
        object.__setattr__(self, "suit", Suit(self.suit))

    @classmethod
    def from_str(cls, text: str) -> "Card":
        """Parse a two-character card such as ``"AS"`` or ``"2c"``."""
        text = text.strip()
        if len(text) != 2:
            raise ValueError(f"Card must be two characters, got {text!r}")
        return cls(Rank.from_letter(text[0]), Suit.from_letter(text[1]))

    def is_trump(self, trump: Suit | None) -> bool:
        return trump is not None and self.suit == trump

    def game_value(self) -> int:
        return GAME_VALUES.get(self.rank, 0)

    def __str__(self) -> str:
        return f"{self.rank.letter}{self.suit.letter}"

    def __repr__(self) -> str:
        return str(self)


def make_card(text: str) -> Card:
    return Card.from_str(text)


def make_cards(text: str) -> list[Card]:
    """Space-separated card list, e.g. ``make_cards("AS KS 2H")``."""
    return [Card.from_str(t) for t in text.split()]


def make_deck_52() -> list[Card]:
    """Build a full 52-card deck, rank-major (2C, 2D, 2H, 2S, 3C, ...)."""
    return [Card(rank, suit) for rank in Rank for suit in Suit]


def game_value(cards: list[Card]) -> int:
    """Total game value of a set of cards."""
    return sum(c.game_value() for c in cards)


def hand_sort_key(card: Card) -> tuple[int, int]:
    """Display order: by suit (C, D, H, S), then by rank high to low."""
    return (int(card.suit), -int(card.rank))
