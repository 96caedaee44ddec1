"""
Policy Provider interface and the uniform-random fallback.

The ``Policy`` protocol is the whole contract between the orchestrator and
whatever decides for a non-human seat: ``act(obs, legal_actions_mask) ->
action_index``. ``act`` may also be a coroutine function; the orchestrator
awaits it in that case.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Iterable, List, Protocol, Sequence

from .bidding import bid_from_action
from .deck import Card
from .env import (
    card_from_index,
    encode_bidding_observation,
    encode_play_observation,
    legal_action_mask_bidding,
    legal_action_mask_play,
)
from .game import RoundState


class Policy(Protocol):
    """Stateless or stateful decision policy working on flat observations."""

    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:
        """
        Choose an action index given an observation and a boolean legal-action mask.

        Implementations must only return indices where ``legal_actions_mask[i]`` is
        true; the orchestrator validates and falls back to random otherwise.
        """


def legal_indices(legal_actions_mask: Iterable[bool]) -> List[int]:
    return [i for i, ok in enumerate(legal_actions_mask) if ok]


@dataclass
class RandomAgent:
    """
    Baseline policy that samples uniformly among legal actions.

    Usage:
        agent = RandomAgent(seed=42)
        action = agent.act(obs, legal_actions_mask)
    """

    seed: int | None = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:
        """Pick a random legal action given an observation and a boolean mask."""
        indices = legal_indices(legal_actions_mask)
        if not indices:
            raise ValueError("No legal actions available for RandomAgent")
        return self._rng.choice(indices)


def policy_callbacks(
    bid_policy: Policy,
    play_policy: Policy,
) -> tuple[Callable[[RoundState, int], int], Callable[[RoundState, int], Card]]:
    """Adapt two policies to the (get_bid, get_play) callbacks of play_one_round / run_game."""

    def get_bid(state: RoundState, player: int) -> int:
        obs = encode_bidding_observation(state.hands[player], player)
        return int(bid_from_action(bid_policy.act(obs, legal_action_mask_bidding(state))))

    def get_play(state: RoundState, player: int) -> Card:
        obs = encode_play_observation(state, player)
        return card_from_index(play_policy.act(obs, legal_action_mask_play(state, player)))

    return get_bid, get_play


__all__ = ["Policy", "RandomAgent", "legal_indices", "policy_callbacks"]
