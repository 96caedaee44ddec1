"""
Neural network models for Pitch policies.

A small MLP maps a flat observation from ``pitch.env`` to logits over the
phase's action space: 4 bid actions for the bidding network, 52 card actions
for the playing network.
"""
from __future__ import annotations

from dataclasses import dataclass

import torch
from torch import nn

from .env import BIDDING_OBS_SIZE, NUM_BID_ACTIONS, NUM_CARD_ACTIONS, PLAY_OBS_SIZE


class PitchMLP(nn.Module):
    """Shared MLP backbone."""

    def __init__(self, input_dim: int, hidden_dim: int = 128) -> None:
        super().__init__()
        self.net = nn.Sequential(
            nn.Linear(input_dim, hidden_dim),
            nn.ReLU(),
            nn.Linear(hidden_dim, hidden_dim),
            nn.ReLU(),
        )

    def forward(self, x: torch.Tensor) -> torch.Tensor:  # type: ignore[override]
        return self.net(x)


class PitchPolicyNet(nn.Module):
    """
    Policy network.

    - Input: flat observation tensor of shape (batch, obs_dim)
    - Output: logits of shape (batch, num_actions)
    """

    def __init__(self, obs_dim: int, num_actions: int, hidden_dim: int = 128) -> None:
        super().__init__()
        self.backbone = PitchMLP(obs_dim, hidden_dim=hidden_dim)
        self.policy_head = nn.Linear(hidden_dim, num_actions)

    def forward(self, obs: torch.Tensor) -> torch.Tensor:  # type: ignore[override]
        return self.policy_head(self.backbone(obs))


@dataclass
class PolicyConfig:
    """Metadata describing a saved policy architecture."""

    arch_name: str = "pitch_play_mlp_v1"
    obs_dim: int = PLAY_OBS_SIZE
    num_actions: int = NUM_CARD_ACTIONS
    hidden_dim: int = 128


def bidding_policy_config(hidden_dim: int = 128) -> PolicyConfig:
    return PolicyConfig(
        arch_name="pitch_bid_mlp_v1",
        obs_dim=BIDDING_OBS_SIZE,
        num_actions=NUM_BID_ACTIONS,
        hidden_dim=hidden_dim,
    )


def playing_policy_config(hidden_dim: int = 128) -> PolicyConfig:
    return PolicyConfig(hidden_dim=hidden_dim)


def build_model(cfg: PolicyConfig) -> PitchPolicyNet:
    return PitchPolicyNet(cfg.obs_dim, cfg.num_actions, hidden_dim=cfg.hidden_dim)


__all__ = [
    "PitchMLP",
    "PitchPolicyNet",
    "PolicyConfig",
    "bidding_policy_config",
    "playing_policy_config",
    "build_model",
]
