"""
Bidding (auction) for 4 players.
Order: Pass < 2 < 3 < 4. First to speak = left of dealer; each player speaks
exactly once; only a strictly higher bid replaces the current winner.
If all four pass, the dealer is stuck with the bid at 2.
"""
from __future__ import annotations

from enum import IntEnum
from typing import Callable

from .deal import NUM_PLAYERS, first_to_bid, team_of
from .errors import IllegalBid, NotYourTurn, WrongPhase


class Bid(IntEnum):
    """Bid amounts. PASS is 0 so ``amount > current`` works for every bid."""
    PASS = 0
    TWO = 2
    THREE = 3
    FOUR = 4


# Action index -> bid amount (index 0 = Pass).
BID_ACTIONS: tuple[Bid, ...] = (Bid.PASS, Bid.TWO, Bid.THREE, Bid.FOUR)
STUCK_BID = Bid.TWO


def bid_from_action(action: int) -> Bid:
    if not (0 <= action < len(BID_ACTIONS)):
        raise IllegalBid(f"Invalid bidding action {action}")
    return BID_ACTIONS[action]


def legal_bids(current_amount: int) -> list[bool]:
    """Mask over BID_ACTIONS: Pass always, a number only if above ``current_amount``."""
    return [b == Bid.PASS or b > current_amount for b in BID_ACTIONS]


class BiddingResult:
    """Result of the auction."""
    __slots__ = ("winner", "amount", "bids", "dealer_stuck")

    def __init__(self, winner: int, amount: int, bids: list[tuple[int, int]], dealer_stuck: bool = False):
        self.winner = winner
        self.amount = amount
        # bids: (player, amount) in speaking order, 0 for pass
        self.bids = bids
        self.dealer_stuck = dealer_stuck

    @property
    def team(self) -> int:
        return team_of(self.winner)

    def __repr__(self) -> str:
        return f"BiddingResult(winner={self.winner}, amount={self.amount}, stuck={self.dealer_stuck})"


class Auction:
    """Turn-by-turn auction state for one deal."""

    def __init__(self, dealer: int):
        self.dealer = dealer
        self.current_player: int = first_to_bid(dealer)
        self.bids: list[int | None] = [None] * NUM_PLAYERS
        self.history: list[tuple[int, int]] = []
        self.winner: int | None = None
        self.amount: int = 0

    def is_closed(self) -> bool:
        """Closed once the turn is back to the seat left of the dealer (4 bids)."""
        return len(self.history) == NUM_PLAYERS

    def legal_bids(self) -> list[bool]:
        return legal_bids(self.amount)

    def submit(self, player: int, amount: int) -> None:
        if self.is_closed():
            raise WrongPhase("Auction is closed")
        if player != self.current_player:
            raise NotYourTurn(f"Player {player} bid out of turn; current player is {self.current_player}")
        try:
            bid = Bid(amount)
        except ValueError:
            raise IllegalBid(f"Unknown bid amount {amount}") from None
        if bid != Bid.PASS and bid <= self.amount:
            raise IllegalBid(f"Bid {int(bid)} must be higher than {self.amount}")

        self.bids[player] = int(bid)
        self.history.append((player, int(bid)))
        if bid > self.amount:
            self.winner = player
            self.amount = int(bid)
        self.current_player = (player + 1) % NUM_PLAYERS

    def result(self) -> BiddingResult:
        """Resolve the closed auction, sticking the dealer when everyone passed."""
        if not self.is_closed():
            raise WrongPhase("Auction is still open")
        if self.winner is None:
            return BiddingResult(
                winner=self.dealer,
                amount=int(STUCK_BID),
                bids=list(self.history),
                dealer_stuck=True,
            )
        return BiddingResult(winner=self.winner, amount=self.amount, bids=list(self.history))


def run_bidding_4p(
    dealer: int,
    get_bid: Callable[[int, list[tuple[int, int]]], int],
) -> BiddingResult:
    """
    Run a whole auction. get_bid(player_index, history) returns a bid amount (0 = pass).
    history is list of (player, amount) so far. Never returns None: the dealer gets stuck.
    """
    auction = Auction(dealer)
    while not auction.is_closed():
        player = auction.current_player
        auction.submit(player, get_bid(player, list(auction.history)))
    return auction.result()
