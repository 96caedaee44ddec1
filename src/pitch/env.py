"""
Observation / action encoding handed to a Policy Provider.

Two fixed-size flat observations:
- Bidding: which of the 52 cards are in the seat's hand + which seat it is.
- Playing: hand, trump, current trick, all cards played, bid winner, bid tier,
  previous trick and its winner.

Masks are over the action space of the phase: 4 bid actions (Pass, 2, 3, 4)
or 52 card actions. Observations are plain lists of floats, built from a
RoundState but never holding a reference to it.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence

from .bidding import BID_ACTIONS
from .deck import Card, Rank, Suit
from .errors import IllegalCard
from .game import RoundState


NUM_CARDS: int = 52
NUM_SEATS: int = 4
NUM_BID_ACTIONS: int = len(BID_ACTIONS)  # PASS, 2, 3, 4
NUM_CARD_ACTIONS: int = NUM_CARDS
BIDDING_OBS_SIZE: int = NUM_CARDS + NUM_SEATS  # 56
# hand, trump, trick, played, bid winner, bid tier, prev trick, prev winner
PLAY_OBS_SIZE: int = NUM_CARDS + 4 + NUM_CARDS + NUM_CARDS + NUM_SEATS + 4 + NUM_CARDS + NUM_SEATS  # 224
BID_TIER_UNSET: int = 3


def _one_hot(index: int | None, size: int) -> List[int]:
    vec = [0] * size
    if index is None:
        return vec
    if 0 <= index < size:
        vec[index] = 1
    return vec


def card_index(card: Card) -> int:
    """
    Stable index 0..51, rank-major then suit (2C=0, 2D=1, 2H=2, 2S=3, 3C=4, ..., AS=51).
    Matches make_deck_52() ordering.
    """
    return (int(card.rank) - 2) * 4 + int(card.suit)


def card_from_index(index: int) -> Card:
    if not (0 <= index < NUM_CARDS):
        raise IllegalCard(f"Card index out of range: {index}")
    return Card(Rank(index // 4 + 2), Suit(index % 4))


def encode_card_set(cards: Iterable[Card]) -> List[int]:
    """Binary 52-dim vector for a set of cards: 1 if card is present, else 0."""
    vec = [0] * NUM_CARDS
    for c in cards:
        vec[card_index(c)] = 1
    return vec


def encode_hand(hand: Iterable[Card]) -> List[int]:
    """Alias for encode_card_set when used specifically for a player's hand."""
    return encode_card_set(hand)


def bid_tier(amount: int) -> int:
    """One-hot slot for the bid amount: 2→0, 3→1, 4→2, unset→3."""
    if amount >= 2:
        return amount - 2
    return BID_TIER_UNSET


# ---- Bidding-phase observation ----


def encode_bidding_observation(hand: Sequence[Card], player_index: int) -> List[float]:
    """
    - 52 card bits: current player's hand
    - 4 bits: current player index
    """
    vec_int: List[int] = encode_hand(hand) + _one_hot(player_index, NUM_SEATS)
    assert len(vec_int) == BIDDING_OBS_SIZE
    return [float(x) for x in vec_int]


def legal_action_mask_bidding(state: RoundState) -> List[bool]:
    """Mask over (Pass, 2, 3, 4): Pass always, a number only above the current high bid."""
    return list(state.legal_bids())


# ---- Play-phase observation ----


def encode_play_observation(state: RoundState, player_index: int) -> List[float]:
    """
    Play-phase encoding (224 dims):
        [0:52)    : current player's hand
        [52:56)   : trump suit one-hot (all zeros before the first lead)
        [56:108)  : cards on the current trick
        [108:160) : every card played this round
        [160:164) : bid winner one-hot
        [164:168) : bid tier one-hot (2, 3, 4, unset)
        [168:220) : previous trick's cards
        [220:224) : previous trick's winner one-hot
    """
    vec_int: List[int] = []
    vec_int.extend(encode_hand(state.hands[player_index]))
    vec_int.extend(_one_hot(int(state.trump) if state.trump is not None else None, 4))
    vec_int.extend(encode_card_set(c for _, c in state.current_trick))
    vec_int.extend(encode_card_set(state.history))
    vec_int.extend(_one_hot(state.bid_winner, NUM_SEATS))
    vec_int.extend(_one_hot(bid_tier(state.bid_amount), 4))
    vec_int.extend(encode_card_set(c for _, c in state.prev_trick))
    vec_int.extend(_one_hot(state.prev_winner, NUM_SEATS))
    assert len(vec_int) == PLAY_OBS_SIZE
    return [float(x) for x in vec_int]


def legal_action_mask_play(state: RoundState, player_index: int) -> List[bool]:
    """Card action i is True iff card_from_index(i) is a legal play for the seat."""
    mask = [False] * NUM_CARD_ACTIONS
    for c in state.legal_cards(player_index):
        mask[card_index(c)] = True
    return mask


__all__ = [
    "NUM_CARDS",
    "NUM_BID_ACTIONS",
    "NUM_CARD_ACTIONS",
    "BIDDING_OBS_SIZE",
    "PLAY_OBS_SIZE",
    "card_index",
    "card_from_index",
    "encode_card_set",
    "encode_hand",
    "bid_tier",
    "encode_bidding_observation",
    "encode_play_observation",
    "legal_action_mask_bidding",
    "legal_action_mask_play",
]
