"""Pitch rules engine: four players, two partnerships, bid for trump, six tricks a round."""

__version__ = "0.1.0"

from .deck import Card, Rank, Suit, make_deck_52, make_card, make_cards
from .deal import deal_4p, Deal4P, next_dealer, first_to_bid, team_of
from .bidding import Bid, Auction, BiddingResult, legal_bids, run_bidding_4p
from .trump import Holdings, resolve_holdings
from .play import legal_plays, trick_winner, beats
from .scoring import (
    WINNING_SCORE,
    RoundSettlement,
    settle_round,
    team_game_points,
    game_point_team,
    is_game_over,
)
from .errors import (
    PitchError,
    WrongPhase,
    NotYourTurn,
    IllegalBid,
    IllegalCard,
    StaleResponse,
)
from .game import (
    Phase,
    RoundState,
    GameState,
    RoundResults,
    RoundSnapshot,
    GameSnapshot,
    play_one_round,
    run_game,
)
from .orchestrator import PitchConfig, PitchOrchestrator, ActionResult, BotAction
