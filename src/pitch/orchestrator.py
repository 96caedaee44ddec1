"""
Top-level state machine for a game of Pitch.

waiting --new_game--> bidding --auction closed--> playing --hands empty-->
round-settled --> bidding (next deal) | game-over

Human seats act through ``new_game`` / ``submit_bid`` / ``submit_play`` /
``reset``; each returns an ``ActionResult`` and never raises for a refused
action. Non-human seats are driven by ``step_bot`` / ``run_until_human``,
which ask a Policy Provider asynchronously. Every provider answer carries the
generation and move count it was computed for; a reset or a new deal bumps the
generation, and any accepted action bumps the move count, so late answers are
discarded instead of applied to the wrong position.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
import numbers
import random
from dataclasses import dataclass
from typing import Callable, List, Sequence

from .agents import Policy, RandomAgent
from .bidding import bid_from_action
from .deal import NUM_PLAYERS
from .deck import Card
from .env import (
    card_from_index,
    encode_bidding_observation,
    encode_play_observation,
    legal_action_mask_bidding,
    legal_action_mask_play,
)
from .errors import IllegalCard, PitchError, StaleResponse
from .game import GameSnapshot, GameState, Phase
from .scoring import WINNING_SCORE

logger = logging.getLogger(__name__)


@dataclass
class PitchConfig:
    """Settings for one orchestrated session."""

    winning_score: int = WINNING_SCORE
    human_seats: tuple[int, ...] = (0,)
    think_delay: float = 0.0  # seconds awaited before each non-human action
    auto_continue: bool = True  # False: wait in round-settled for continue_round()
    randomize_dealer: bool = True
    seed: int | None = None


@dataclass(frozen=True)
class ActionResult:
    """Outcome of an entry point: accepted, or refused with the reason."""

    accepted: bool
    snapshot: GameSnapshot
    error: PitchError | None = None

    @property
    def reason(self) -> str | None:
        return str(self.error) if self.error is not None else None


@dataclass(frozen=True)
class BotAction:
    """An action chosen for a seat, tagged with the generation and move it was computed for."""

    generation: int
    move: int
    seat: int
    phase: Phase
    action: int
    fallback: bool = False


class PitchOrchestrator:
    """Exclusive owner of the GameState; applies actions strictly one at a time."""

    def __init__(
        self,
        config: PitchConfig | None = None,
        bid_policy: Policy | None = None,
        play_policy: Policy | None = None,
        on_transition: Callable[[GameSnapshot], None] | None = None,
    ) -> None:
        self.config = config or PitchConfig()
        self.rng = random.Random(self.config.seed)
        self.bid_policy = bid_policy
        self.play_policy = play_policy
        self.on_transition = on_transition
        self._fallback = RandomAgent(seed=self.rng.randrange(2**32))
        self._missing_logged: set[Phase] = set()
        self.generation: int = 0
        self.game = GameState(winning_score=self.config.winning_score)

    # ---- Views ----

    @property
    def phase(self) -> Phase:
        return self.game.phase

    def snapshot(self) -> GameSnapshot:
        return self.game.snapshot(generation=self.generation)

    def is_human(self, seat: int) -> bool:
        return seat in self.config.human_seats

    def current_seat(self) -> int | None:
        if self.game.phase not in (Phase.BIDDING, Phase.PLAYING) or self.game.round is None:
            return None
        return self.game.round.current_player

    def _default_seat(self) -> int:
        if self.config.human_seats:
            return self.config.human_seats[0]
        return 0

    # ---- Human entry points ----

    def new_game(self) -> ActionResult:
        dealer = self.rng.randrange(NUM_PLAYERS) if self.config.randomize_dealer else 0
        self.game = GameState(winning_score=self.config.winning_score, dealer=dealer)
        return self._apply(self._deal)

    def reset(self) -> ActionResult:
        """Abandon everything (including pending provider calls) and go back to waiting."""
        self.generation += 1
        self.game = GameState(winning_score=self.config.winning_score)
        self._emit()
        return ActionResult(accepted=True, snapshot=self.snapshot())

    def submit_bid(self, amount: int, seat: int | None = None) -> ActionResult:
        player = self._default_seat() if seat is None else seat
        return self._apply(lambda: self.game.submit_bid(player, amount))

    def submit_play(self, card: Card | str, seat: int | None = None) -> ActionResult:
        player = self._default_seat() if seat is None else seat
        if isinstance(card, str):
            try:
                card = Card.from_str(card)
            except ValueError as exc:
                return self._reject(IllegalCard(str(exc)))
        played = card
        return self._apply(lambda: self.game.play_card(player, played))

    def continue_round(self) -> ActionResult:
        """Deal the next round after a settlement (only needed without auto_continue)."""
        return self._apply(self._next_deal)

    # ---- Non-human seats ----

    async def request_bot_action(self, autoplay: bool = False) -> BotAction | None:
        """
        Ask the provider for the seat on turn. Returns None when no non-human seat
        is on turn. With ``autoplay`` human seats are driven too (random choice).
        The state is read before the first await; the result is not applied here.
        """
        seat = self.current_seat()
        if seat is None:
            return None
        human = self.is_human(seat)
        if human and not autoplay:
            return None

        generation = self.generation
        phase = self.game.phase
        rnd = self.game.round
        assert rnd is not None
        move = rnd.move_count
        if phase == Phase.BIDDING:
            obs = encode_bidding_observation(rnd.hands[seat], seat)
            mask = legal_action_mask_bidding(rnd)
            policy = self.bid_policy
        else:
            obs = encode_play_observation(rnd, seat)
            mask = legal_action_mask_play(rnd, seat)
            policy = self.play_policy
        if human:
            policy = None

        if self.config.think_delay > 0:
            await asyncio.sleep(self.config.think_delay)
        action, fallback = await self._ask_policy(policy, obs, mask, phase, log_missing=not human)
        return BotAction(generation=generation, move=move, seat=seat, phase=phase, action=action, fallback=fallback)

    def apply_bot_action(self, bot_action: BotAction) -> ActionResult:
        """Apply a provider answer, discarding it if its generation or move is no longer live."""
        if bot_action.generation != self.generation:
            logger.debug(
                "Discarding stale action %s (generation %d, live %d)",
                bot_action.action, bot_action.generation, self.generation,
            )
            return self._reject(StaleResponse(
                f"Response for generation {bot_action.generation}; live generation is {self.generation}"
            ))
        rnd = self.game.round
        if rnd is None or bot_action.move != rnd.move_count:
            logger.debug("Discarding action %s computed for move %d", bot_action.action, bot_action.move)
            return self._reject(StaleResponse(
                f"Response for move {bot_action.move}; round has moved on"
            ))
        seat = bot_action.seat
        if bot_action.phase == Phase.BIDDING:
            return self._apply(lambda: self.game.submit_bid(seat, bid_from_action(bot_action.action)))
        return self._apply(lambda: self.game.play_card(seat, card_from_index(bot_action.action)))

    async def step_bot(self, autoplay: bool = False) -> ActionResult | None:
        bot_action = await self.request_bot_action(autoplay=autoplay)
        if bot_action is None:
            return None
        return self.apply_bot_action(bot_action)

    async def run_until_human(self, autoplay: bool = False) -> GameSnapshot:
        """Drive non-human seats until a human is on turn, the round waits, or the game ends."""
        while self.current_seat() is not None:
            result = await self.step_bot(autoplay=autoplay)
            if result is None or not result.accepted:
                break
        return self.snapshot()

    # ---- Internals ----

    async def _ask_policy(
        self,
        policy: Policy | None,
        obs: List[float],
        mask: List[bool],
        phase: Phase,
        log_missing: bool = True,
    ) -> tuple[int, bool]:
        if policy is None:
            if log_missing and phase not in self._missing_logged:
                logger.info("No %s policy configured; using random legal actions", phase.value)
                self._missing_logged.add(phase)
        else:
            try:
                if inspect.iscoroutinefunction(policy.act):
                    action = await policy.act(obs, mask)
                else:
                    action = await asyncio.to_thread(policy.act, obs, mask)
            except Exception:
                logger.warning("%s policy failed; falling back to random", phase.value, exc_info=True)
            else:
                if _is_legal_index(action, mask):
                    return int(action), False
                logger.warning("%s policy returned illegal action %r; falling back to random", phase.value, action)
        return self._fallback.act(obs, mask), True

    def _deal(self) -> None:
        self.generation += 1
        self.game.start_round(self.rng)

    def _next_deal(self) -> None:
        self.generation += 1
        self.game.continue_round(self.rng)

    def _apply(self, action: Callable[[], object]) -> ActionResult:
        try:
            action()
        except PitchError as exc:
            return self._reject(exc)
        self._emit()
        if self.game.phase == Phase.ROUND_SETTLED and self.config.auto_continue:
            self._next_deal()
            self._emit()
        return ActionResult(accepted=True, snapshot=self.snapshot())

    def _reject(self, error: PitchError) -> ActionResult:
        if not isinstance(error, StaleResponse):
            logger.debug("Rejected action: %s: %s", type(error).__name__, error)
        return ActionResult(accepted=False, snapshot=self.snapshot(), error=error)

    def _emit(self) -> None:
        if self.on_transition is not None:
            self.on_transition(self.snapshot())


def _is_legal_index(action: object, mask: Sequence[bool]) -> bool:
    if isinstance(action, bool) or not isinstance(action, numbers.Integral):
        return False
    return 0 <= action < len(mask) and bool(mask[action])


__all__ = ["PitchConfig", "ActionResult", "BotAction", "PitchOrchestrator"]
