"""Tests for observation and action-mask encoding."""
import random

import pytest

from pitch.deal import Deal4P, deal_4p
from pitch.deck import Card, Rank, Suit, make_card, make_cards, make_deck_52
from pitch.env import (
    BIDDING_OBS_SIZE,
    NUM_CARDS,
    PLAY_OBS_SIZE,
    bid_tier,
    card_from_index,
    card_index,
    encode_bidding_observation,
    encode_play_observation,
    legal_action_mask_bidding,
    legal_action_mask_play,
)
from pitch.errors import IllegalCard
from pitch.game import RoundState


def test_card_index_matches_deck_order():
    assert card_index(make_card("2C")) == 0
    assert card_index(make_card("2S")) == 3
    assert card_index(make_card("3C")) == 4
    assert card_index(make_card("AS")) == 51
    assert [card_index(c) for c in make_deck_52()] == list(range(NUM_CARDS))
    assert card_from_index(42) == Card(Rank.QUEEN, Suit.HEARTS)


def test_card_from_index_out_of_range():
    with pytest.raises(IllegalCard):
        card_from_index(52)
    with pytest.raises(IllegalCard):
        card_from_index(-1)


def test_bid_tier():
    assert bid_tier(2) == 0
    assert bid_tier(4) == 2
    assert bid_tier(0) == 3


def test_bidding_observation():
    hand = make_cards("2C AS TH")
    obs = encode_bidding_observation(hand, 2)
    assert len(obs) == BIDDING_OBS_SIZE
    assert sum(obs[:NUM_CARDS]) == 3
    assert obs[0] == 1.0 and obs[51] == 1.0
    assert obs[NUM_CARDS:] == [0.0, 0.0, 1.0, 0.0]


def test_bidding_mask_follows_high_bid():
    state = RoundState(deal_4p(rng=random.Random(1), dealer=0))
    assert legal_action_mask_bidding(state) == [True, True, True, True]
    state.submit_bid(1, 3)
    assert legal_action_mask_bidding(state) == [True, False, False, True]


def test_play_observation_layout():
    hands = (make_cards("JH 5S"), make_cards("KC 4H"), make_cards("2D 3D"), make_cards("6C 7C"))
    state = RoundState(Deal4P(hands=hands, dealer=3))
    for player, amount in ((0, 3), (1, 0), (2, 0), (3, 0)):
        state.submit_bid(player, amount)

    before = encode_play_observation(state, 0)
    assert len(before) == PLAY_OBS_SIZE
    assert before[52:56] == [0.0] * 4  # trump unknown
    assert before[160:164] == [1.0, 0.0, 0.0, 0.0]
    assert before[164:168] == [0.0, 1.0, 0.0, 0.0]
    assert before[220:224] == [0.0] * 4

    state.play_card(0, make_card("JH"))
    obs = encode_play_observation(state, 1)
    jh = card_index(make_card("JH"))
    assert obs[card_index(make_card("KC"))] == 1.0
    assert obs[52:56] == [0.0, 0.0, 1.0, 0.0]
    assert obs[56 + jh] == 1.0
    assert obs[108 + jh] == 1.0
    assert sum(obs[168:220]) == 0.0

    mask = legal_action_mask_play(state, 1)
    assert len(mask) == NUM_CARDS
    assert [i for i, ok in enumerate(mask) if ok] == [card_index(make_card("4H"))]


def test_play_observation_previous_trick():
    hands = (make_cards("JH 5S"), make_cards("KC 4H"), make_cards("2D 3D"), make_cards("6C 7C"))
    state = RoundState(Deal4P(hands=hands, dealer=3))
    for player, amount in ((0, 2), (1, 0), (2, 0), (3, 0)):
        state.submit_bid(player, amount)
    for player, card in ((0, "JH"), (1, "4H"), (2, "2D"), (3, "6C")):
        state.play_card(player, make_card(card))

    obs = encode_play_observation(state, 0)
    assert sum(obs[56:108]) == 0.0
    assert sum(obs[108:160]) == 4.0
    assert sum(obs[168:220]) == 4.0
    assert obs[220:224] == [1.0, 0.0, 0.0, 0.0]
