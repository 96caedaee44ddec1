"""
Round and game orchestration: deal → bid → play (trump fixed by the first lead) → settle.
RoundState holds one deal; GameState carries team scores and dealer rotation across rounds.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .bidding import Auction, BiddingResult
from .deal import NUM_PLAYERS, Deal4P, deal_4p, next_dealer
from .deck import Card, Suit
from .errors import IllegalCard, NotYourTurn, WrongPhase
from .play import legal_plays, trick_winner
from .scoring import (
    WINNING_SCORE,
    RoundSettlement,
    apply_settlement,
    game_point_team,
    is_game_over,
    settle_round,
    team_game_points,
    winning_team,
)
from .trump import Holdings, resolve_holdings, trump_from_lead

logger = logging.getLogger(__name__)

MAX_SPECIAL_POINTS = 4


class Phase(str, Enum):
    WAITING = "waiting"
    BIDDING = "bidding"
    PLAYING = "playing"
    ROUND_SETTLED = "round-settled"
    GAME_OVER = "game-over"


@dataclass(frozen=True)
class RoundResults:
    """Who took each special point. ``game_team`` is None on a tie (or before the round ends)."""

    jack: int | None = None
    low: int | None = None
    high: int | None = None
    game_team: int | None = None
    game_points: tuple[int, int] | None = None


@dataclass(frozen=True)
class RoundSnapshot:
    dealer: int
    hands: tuple[tuple[Card, ...], ...]
    bids: tuple[int | None, ...]
    bid_winner: int | None
    bid_amount: int
    bidding_team: int | None
    dealer_stuck: bool
    trump: Suit | None
    current_player: int
    current_trick: tuple[tuple[int, Card], ...]
    history: tuple[Card, ...]
    trick_wins: tuple[int, ...]
    special_points: tuple[int, int]
    cards_won: tuple[tuple[Card, ...], ...]
    prev_trick: tuple[tuple[int, Card], ...]
    prev_winner: int | None
    results: RoundResults
    settlement: RoundSettlement | None


@dataclass(frozen=True)
class GameSnapshot:
    phase: Phase
    scores: tuple[int, int]
    dealer: int
    round_number: int
    winner: int | None
    round: RoundSnapshot | None
    last_settlement: RoundSettlement | None
    generation: int = 0


class RoundState:
    """Mutable state for one deal: hands, auction, trump, tricks, tallies."""

    def __init__(self, deal: Deal4P):
        self.dealer = deal.dealer
        self.hands: list[list[Card]] = [list(h) for h in deal.hands]
        self.original_hands: tuple[tuple[Card, ...], ...] = tuple(tuple(h) for h in deal.hands)
        self.auction = Auction(deal.dealer)
        self.bidding: BiddingResult | None = None
        self.trump: Suit | None = None
        self.holdings: Holdings | None = None
        # Special points per team (index 0 = seats 0/2, 1 = seats 1/3)
        self.special_points: list[int] = [0, 0]
        self.trick_wins: list[int] = [0] * NUM_PLAYERS
        self.cards_won: list[list[Card]] = [[] for _ in range(NUM_PLAYERS)]
        self.history: list[Card] = []
        self.current_trick: list[tuple[int, Card]] = []
        self.prev_trick: list[tuple[int, Card]] = []
        self.prev_winner: int | None = None
        self.current_player: int = self.auction.current_player
        self.game_points: tuple[int, int] | None = None
        self.game_team: int | None = None
        self.settlement: RoundSettlement | None = None

    # ---- Bidding ----

    @property
    def bid_amount(self) -> int:
        if self.bidding is not None:
            return self.bidding.amount
        return self.auction.amount

    @property
    def bid_winner(self) -> int | None:
        if self.bidding is not None:
            return self.bidding.winner
        return self.auction.winner

    @property
    def bidding_team(self) -> int | None:
        return self.bidding.team if self.bidding is not None else None

    def in_bidding(self) -> bool:
        return self.bidding is None

    def legal_bids(self) -> list[bool]:
        return self.auction.legal_bids()

    @property
    def move_count(self) -> int:
        """Bids plus cards played so far this round."""
        return len(self.auction.history) + len(self.history)

    def submit_bid(self, player: int, amount: int) -> BiddingResult | None:
        """Record a bid; returns the BiddingResult once the auction closes."""
        if not self.in_bidding():
            raise WrongPhase("Bidding is over")
        self.auction.submit(player, amount)
        self.current_player = self.auction.current_player
        if not self.auction.is_closed():
            return None
        self.bidding = self.auction.result()
        self.current_player = self.bidding.winner  # bid winner leads
        if self.bidding.dealer_stuck:
            logger.debug("All passed; dealer %d stuck at %d", self.dealer, self.bidding.amount)
        return self.bidding

    # ---- Play ----

    def is_complete(self) -> bool:
        return self.bidding is not None and all(not h for h in self.hands)

    def legal_cards(self, player: int) -> list[Card]:
        return legal_plays(self.hands[player], self.current_trick, self.trump)

    def play_card(self, player: int, card: Card) -> int | None:
        """Play a card; returns the trick winner when this card completes a trick."""
        if self.bidding is None or self.is_complete():
            raise WrongPhase("Not in the play phase")
        if player != self.current_player:
            raise NotYourTurn(f"Player {player} played out of turn; current player is {self.current_player}")
        hand = self.hands[player]
        if card not in hand:
            raise IllegalCard(f"Card {card} not in hand")
        legal = self.legal_cards(player)
        if card not in legal:
            raise IllegalCard(f"Illegal play {card}; legal {legal}")

        hand.remove(card)
        self.current_trick.append((player, card))
        self.history.append(card)
        if len(self.history) == 1 and player == self.bidding.winner:
            self._fix_trump(card)
        self.current_player = (player + 1) % NUM_PLAYERS

        if len(self.current_trick) < NUM_PLAYERS:
            return None
        return self._end_trick()

    def _fix_trump(self, lead: Card) -> None:
        assert self.trump is None
        self.trump = trump_from_lead(lead)
        self.holdings = resolve_holdings(self.original_hands, self.trump)
        jack_low_high = self.holdings.points_by_team()
        self.special_points = [jack_low_high[0], jack_low_high[1]]
        logger.debug("Trump %s set by player %d; holdings %s", self.trump.name, self.bidding.winner, self.holdings)

    def _end_trick(self) -> int:
        winner = trick_winner(self.current_trick, self.trump)
        assert sum(1 for p, _ in self.current_trick if p == winner) == 1
        self.trick_wins[winner] += 1
        self.cards_won[winner].extend(c for _, c in self.current_trick)
        self.prev_trick = list(self.current_trick)
        self.prev_winner = winner
        self.current_trick = []
        self.current_player = winner
        logger.debug("Trick %s won by player %d", self.prev_trick, winner)
        if self.is_complete():
            self._finish()
        return winner

    def _finish(self) -> None:
        self.game_points = team_game_points(self.cards_won)
        self.game_team = game_point_team(self.game_points)
        if self.game_team is not None:
            self.special_points[self.game_team] += 1
        assert sum(self.special_points) <= MAX_SPECIAL_POINTS, self.special_points
        assert self.bidding is not None
        self.settlement = settle_round(
            bidding_team=self.bidding.team,
            bid_amount=self.bidding.amount,
            trick_wins=self.trick_wins,
            special_points=self.special_points,
        )

    # ---- Views ----

    def results(self) -> RoundResults:
        h = self.holdings or Holdings()
        return RoundResults(
            jack=h.jack,
            low=h.low,
            high=h.high,
            game_team=self.game_team,
            game_points=self.game_points,
        )

    def snapshot(self) -> RoundSnapshot:
        return RoundSnapshot(
            dealer=self.dealer,
            hands=tuple(tuple(h) for h in self.hands),
            bids=tuple(self.auction.bids),
            bid_winner=self.bid_winner,
            bid_amount=self.bid_amount,
            bidding_team=self.bidding_team,
            dealer_stuck=bool(self.bidding and self.bidding.dealer_stuck),
            trump=self.trump,
            current_player=self.current_player,
            current_trick=tuple(self.current_trick),
            history=tuple(self.history),
            trick_wins=tuple(self.trick_wins),
            special_points=(self.special_points[0], self.special_points[1]),
            cards_won=tuple(tuple(c) for c in self.cards_won),
            prev_trick=tuple(self.prev_trick),
            prev_winner=self.prev_winner,
            results=self.results(),
            settlement=self.settlement,
        )


class GameState:
    """Scores and dealer rotation across rounds, plus the overall phase."""

    def __init__(self, winning_score: int = WINNING_SCORE, dealer: int = 0):
        self.winning_score = winning_score
        self.scores: list[int] = [0, 0]
        self.dealer = dealer
        self.round_number: int = 0
        self.round: RoundState | None = None
        self.phase: Phase = Phase.WAITING
        self.last_settlement: RoundSettlement | None = None

    def start_round(self, rng: random.Random | None = None) -> RoundState:
        """Deal a fresh round with the current dealer and open the auction."""
        if self.phase == Phase.GAME_OVER:
            raise WrongPhase("Game is over")
        self.round = RoundState(deal_4p(rng=rng, dealer=self.dealer))
        self.round_number += 1
        self.phase = Phase.BIDDING
        return self.round

    def continue_round(self, rng: random.Random | None = None) -> RoundState:
        """Leave the round-settled phase: rotate the dealer and deal again."""
        if self.phase != Phase.ROUND_SETTLED:
            raise WrongPhase(f"Cannot start the next round from {self.phase.value}")
        self.dealer = next_dealer(self.dealer)
        return self.start_round(rng)

    def _require(self, phase: Phase) -> RoundState:
        if self.phase != phase or self.round is None:
            raise WrongPhase(f"Action needs phase {phase.value}, game is {self.phase.value}")
        return self.round

    def submit_bid(self, player: int, amount: int) -> BiddingResult | None:
        rnd = self._require(Phase.BIDDING)
        result = rnd.submit_bid(player, amount)
        if result is not None:
            self.phase = Phase.PLAYING
        return result

    def play_card(self, player: int, card: Card) -> int | None:
        rnd = self._require(Phase.PLAYING)
        winner = rnd.play_card(player, card)
        if rnd.is_complete():
            self._settle(rnd)
        return winner

    def _settle(self, rnd: RoundState) -> None:
        assert rnd.settlement is not None
        apply_settlement(self.scores, rnd.settlement)
        self.last_settlement = rnd.settlement
        if is_game_over(self.scores, self.winning_score):
            self.phase = Phase.GAME_OVER
            logger.info("Game over after %d rounds: scores %s", self.round_number, self.scores)
        else:
            self.phase = Phase.ROUND_SETTLED

    def is_over(self) -> bool:
        return self.phase == Phase.GAME_OVER

    def winner(self) -> int | None:
        return winning_team(self.scores, self.winning_score)

    def snapshot(self, generation: int = 0) -> GameSnapshot:
        return GameSnapshot(
            phase=self.phase,
            scores=(self.scores[0], self.scores[1]),
            dealer=self.dealer,
            round_number=self.round_number,
            winner=self.winner(),
            round=self.round.snapshot() if self.round is not None else None,
            last_settlement=self.last_settlement,
            generation=generation,
        )


def play_one_round(
    get_bid: Callable[[RoundState, int], int],
    get_play: Callable[[RoundState, int], Card],
    dealer: int = 0,
    rng: random.Random | None = None,
) -> RoundState:
    """Deal, bid and play one round. The returned state carries its settlement."""
    if rng is None:
        rng = random.Random()
    state = RoundState(deal_4p(rng=rng, dealer=dealer))
    while state.in_bidding():
        player = state.current_player
        state.submit_bid(player, get_bid(state, player))
    while not state.is_complete():
        player = state.current_player
        state.play_card(player, get_play(state, player))
    return state


def run_game(
    get_bid: Callable[[RoundState, int], int],
    get_play: Callable[[RoundState, int], Card],
    rng: random.Random | None = None,
    winning_score: int = WINNING_SCORE,
    dealer: int | None = None,
    max_rounds: int = 1000,
) -> GameState:
    """
    Play rounds until a team reaches ``winning_score`` (or ``max_rounds`` is hit).
    Dealer starts random unless given, then rotates one seat per round.
    """
    if rng is None:
        rng = random.Random()
    if dealer is None:
        dealer = rng.randrange(NUM_PLAYERS)
    game = GameState(winning_score=winning_score, dealer=dealer)
    rnd = game.start_round(rng)
    while True:
        while game.phase == Phase.BIDDING:
            player = rnd.current_player
            game.submit_bid(player, get_bid(rnd, player))
        while game.phase == Phase.PLAYING:
            player = rnd.current_player
            game.play_card(player, get_play(rnd, player))
        if game.is_over() or game.round_number >= max_rounds:
            return game
        rnd = game.continue_round(rng)
