"""
Score calculation: game point from captured card values, round settlement, game over.
Bidding team makes its bid if tricks + special points >= bid (scores what it made);
otherwise it is set and loses the bid. The other team's score never moves.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .deal import team_of, team_seats
from .deck import Card, game_value

logger = logging.getLogger(__name__)

WINNING_SCORE = 11


def team_game_points(cards_won: Sequence[Sequence[Card]]) -> tuple[int, int]:
    """Game value captured per team, from each seat's won cards."""
    totals = [0, 0]
    for seat, cards in enumerate(cards_won):
        totals[team_of(seat)] += game_value(list(cards))
    return (totals[0], totals[1])


def game_point_team(team_points: tuple[int, int]) -> int | None:
    """Team with the higher game total, or None on an exact tie."""
    t0, t1 = team_points
    if t0 > t1:
        return 0
    if t1 > t0:
        return 1
    return None


def team_tricks(trick_wins: Sequence[int]) -> tuple[int, int]:
    """Tricks per team, from the per-seat tally."""
    t0, t1 = (sum(trick_wins[s] for s in team_seats(team)) for team in (0, 1))
    return (t0, t1)


@dataclass(frozen=True)
class RoundSettlement:
    """Outcome of one round for the bidding team."""

    bidding_team: int
    bid_amount: int
    tricks: int
    special_points: int
    made: bool
    delta: int

    @property
    def total_points(self) -> int:
        return self.tricks + self.special_points


def settle_round(
    bidding_team: int,
    bid_amount: int,
    trick_wins: Sequence[int],
    special_points: Sequence[int],
) -> RoundSettlement:
    """
    trick_wins: per seat (4 values). special_points: per team (2 values).
    Returns the settlement; ``delta`` applies to the bidding team only.
    """
    tricks = team_tricks(trick_wins)[bidding_team]
    special = special_points[bidding_team]
    total = tricks + special
    made = total >= bid_amount
    delta = total if made else -bid_amount
    return RoundSettlement(
        bidding_team=bidding_team,
        bid_amount=bid_amount,
        tricks=tricks,
        special_points=special,
        made=made,
        delta=delta,
    )


def apply_settlement(scores: list[int], settlement: RoundSettlement) -> None:
    scores[settlement.bidding_team] += settlement.delta
    logger.info(
        "Team %d %s bid of %d with %d (delta %+d); scores now %s",
        settlement.bidding_team,
        "made" if settlement.made else "was set on",
        settlement.bid_amount,
        settlement.total_points,
        settlement.delta,
        scores,
    )


def is_game_over(scores: Sequence[int], winning_score: int = WINNING_SCORE) -> bool:
    return any(s >= winning_score for s in scores)


def winning_team(scores: Sequence[int], winning_score: int = WINNING_SCORE) -> int | None:
    """
    Team that reached the threshold. Only the bidding team scores in a round,
    so at most one team can cross it at a time; the higher score wins otherwise.
    """
    if not is_game_over(scores, winning_score):
        return None
    return 0 if scores[0] >= scores[1] else 1
