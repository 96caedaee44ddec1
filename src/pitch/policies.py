"""
Statistical Policy Provider: torch networks wrapped as ``Policy`` objects.

A checkpoint directory holds:
  - policy.pt   : model state_dict
  - config.json : PolicyConfig + version metadata

``load_policy_from_checkpoint`` turns such a directory into an ``NNPolicy``.
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterable, List, Sequence

import numpy as np
import torch
from torch.distributions import Categorical

from . import __version__
from .agents import Policy
from .models import PitchPolicyNet, PolicyConfig, build_model


def _mask_logits(
    logits: torch.Tensor,
    legal_actions_mask: torch.Tensor,
) -> torch.Tensor:
    """Apply a boolean legal-actions mask to logits."""
    illegal = ~legal_actions_mask
    logits = logits.clone()
    logits[illegal] = -1e9
    return logits


def _pad_observation(obs: Sequence[float], target_dim: int) -> List[float]:
    """Pad with zeros or truncate an observation to ``target_dim``."""
    if len(obs) == target_dim:
        return list(obs)
    if len(obs) > target_dim:
        return list(obs)[:target_dim]
    return list(obs) + [0.0] * (target_dim - len(obs))


@dataclass
class NNPolicy(Policy):
    """
    Policy wrapper around a trained PitchPolicyNet.

    By default actions are sampled from the masked distribution; set
    ``deterministic=True`` to always pick the argmax action instead.
    """

    model: PitchPolicyNet
    policy_cfg: PolicyConfig
    device: torch.device
    deterministic: bool = False

    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:  # type: ignore[override]
        obs_vec = _pad_observation(obs, self.policy_cfg.obs_dim)
        obs_t = torch.tensor(obs_vec, dtype=torch.float32, device=self.device).unsqueeze(0)
        mask_np = np.array(list(legal_actions_mask), dtype=bool)
        if mask_np.shape[0] != self.policy_cfg.num_actions:
            raise ValueError(
                f"Mask has {mask_np.shape[0]} entries, model expects {self.policy_cfg.num_actions}"
            )
        if not mask_np.any():
            raise ValueError("Empty legal_actions_mask in NNPolicy.act")
        mask_t = torch.from_numpy(mask_np).to(self.device).unsqueeze(0)

        with torch.no_grad():
            logits = self.model(obs_t)
            masked_logits = _mask_logits(logits, mask_t)
            if self.deterministic:
                action = torch.argmax(masked_logits, dim=-1)
            else:
                action = Categorical(logits=masked_logits).sample()

        return int(action.item())


def save_checkpoint(model: PitchPolicyNet, policy_cfg: PolicyConfig, directory: str) -> None:
    """Save model weights and config to ``directory``."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)

    torch.save(model.state_dict(), out_dir / "policy.pt")

    meta = {
        "version": __version__,
        "policy_config": asdict(policy_cfg),
    }
    with (out_dir / "config.json").open("w", encoding="utf-8") as f:
        json.dump(meta, f, indent=2)


def load_model_from_checkpoint(
    directory: str,
    device: torch.device | None = None,
) -> tuple[PitchPolicyNet, PolicyConfig]:
    device = device or torch.device("cpu")
    ckpt_dir = Path(directory)
    with (ckpt_dir / "config.json").open("r", encoding="utf-8") as f:
        meta = json.load(f)

    policy_cfg = PolicyConfig(**meta.get("policy_config", {}))
    model = build_model(policy_cfg).to(device)
    state_dict = torch.load(ckpt_dir / "policy.pt", map_location=device)
    model.load_state_dict(state_dict)
    model.eval()
    return model, policy_cfg


def load_policy_from_checkpoint(
    directory: str,
    device: torch.device | None = None,
    deterministic: bool = False,
) -> NNPolicy:
    """Load a policy from a directory written by ``save_checkpoint``."""
    device = device or torch.device("cpu")
    model, policy_cfg = load_model_from_checkpoint(directory, device=device)
    return NNPolicy(model=model, policy_cfg=policy_cfg, device=device, deterministic=deterministic)


__all__ = ["NNPolicy", "save_checkpoint", "load_model_from_checkpoint", "load_policy_from_checkpoint"]
