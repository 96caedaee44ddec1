"""
Command-line interface for simulating and playing Pitch.

Usage examples:

    python -m pitch.cli simulate --games 100 --seed 0
    python -m pitch.cli simulate --games 20 --checkpoint-play checkpoints/play
    python -m pitch.cli play --seed 7
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import random
from typing import Optional

from .agents import Policy, RandomAgent, policy_callbacks
from .deck import hand_sort_key
from .game import GameSnapshot, Phase, run_game
from .orchestrator import PitchConfig, PitchOrchestrator


def _load_policy(checkpoint: Optional[str], seed: int, device: str) -> Policy:
    """NN policy from a checkpoint directory, or a seeded RandomAgent when none is given."""
    if not checkpoint:
        return RandomAgent(seed=seed)
    import torch

    from .policies import load_policy_from_checkpoint

    return load_policy_from_checkpoint(checkpoint, device=torch.device(device))


def _add_policy_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--checkpoint-bid",
        type=str,
        default=None,
        help="Checkpoint directory for the bidding policy (random if omitted).",
    )
    parser.add_argument(
        "--checkpoint-play",
        type=str,
        default=None,
        help="Checkpoint directory for the playing policy (random if omitted).",
    )
    parser.add_argument(
        "--device",
        type=str,
        default="cpu",
        help='Torch device string, e.g. "cpu" or "cuda".',
    )


def _add_simulate_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "simulate",
        help="Play full games between policy-driven seats and report results.",
    )
    parser.add_argument(
        "--games",
        type=int,
        default=10,
        help="Number of games to play.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for deals and random policies.",
    )
    parser.add_argument(
        "--winning-score",
        type=int,
        default=11,
        help="Score a team must reach to win.",
    )
    _add_policy_args(parser)
    parser.set_defaults(func=_cmd_simulate)


def _add_play_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "play",
        help="Play one game in the terminal as seat 0 against three policy seats.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (omit for a fresh game each time).",
    )
    _add_policy_args(parser)
    parser.set_defaults(func=_cmd_play)


def _cmd_simulate(args: argparse.Namespace) -> None:
    rng = random.Random(args.seed)
    bid_policy = _load_policy(args.checkpoint_bid, args.seed, args.device)
    play_policy = _load_policy(args.checkpoint_play, args.seed + 1, args.device)
    get_bid, get_play = policy_callbacks(bid_policy, play_policy)

    wins = [0, 0]
    total_rounds = 0
    for _ in range(args.games):
        game = run_game(get_bid, get_play, rng=rng, winning_score=args.winning_score)
        winner = game.winner()
        if winner is not None:
            wins[winner] += 1
        total_rounds += game.round_number

    avg_rounds = total_rounds / args.games if args.games else 0.0
    print(
        f"games={args.games} team0_wins={wins[0]} team1_wins={wins[1]} "
        f"avg_rounds={avg_rounds:.2f}"
    )


def _describe(snap: GameSnapshot, seat: int) -> str:
    rnd = snap.round
    lines = [f"Scores: team0={snap.scores[0]} team1={snap.scores[1]} (dealer: seat {snap.dealer})"]
    if rnd is None:
        return "\n".join(lines)
    trump = rnd.trump.name if rnd.trump is not None else "-"
    bid = f"{rnd.bid_amount} by seat {rnd.bid_winner}" if rnd.bid_winner is not None else "none"
    lines.append(f"Trump: {trump}  High bid: {bid}")
    if rnd.current_trick:
        lines.append("Trick: " + " ".join(f"{p}:{c}" for p, c in rnd.current_trick))
    hand = sorted(rnd.hands[seat], key=hand_sort_key)
    lines.append("Your hand: " + " ".join(str(c) for c in hand))
    return "\n".join(lines)


async def _play_interactive(orch: PitchOrchestrator) -> None:
    seat = orch.config.human_seats[0]
    orch.new_game()
    shown = None
    while True:
        snap = await orch.run_until_human()
        if snap.last_settlement is not None and snap.last_settlement is not shown:
            s = shown = snap.last_settlement
            print(f"Last round: team{s.bidding_team} {'made' if s.made else 'was set'} ({s.delta:+d})")
        if snap.phase == Phase.GAME_OVER:
            print(f"Game over. Final scores {snap.scores}; team{snap.winner} wins.")
            return
        print(_describe(snap, seat))
        if snap.phase == Phase.BIDDING:
            prompt = "Your bid (0=pass, 2, 3, 4; q to quit): "
        else:
            prompt = "Your card (e.g. AS, TH; q to quit): "
        text = (await asyncio.to_thread(input, prompt)).strip()
        if text.lower() == "q":
            return
        if snap.phase == Phase.BIDDING:
            if not text.isdigit():
                print("Enter a number.")
                continue
            result = orch.submit_bid(int(text))
        else:
            result = orch.submit_play(text)
        if not result.accepted:
            print(f"Rejected: {result.reason}")


def _cmd_play(args: argparse.Namespace) -> None:
    seed = args.seed if args.seed is not None else random.randrange(2**32)
    orch = PitchOrchestrator(
        PitchConfig(seed=seed),
        bid_policy=_load_policy(args.checkpoint_bid, seed, args.device),
        play_policy=_load_policy(args.checkpoint_play, seed + 1, args.device),
    )
    asyncio.run(_play_interactive(orch))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pitch", description="Pitch simulation and play CLI.")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_simulate_parser(subparsers)
    _add_play_parser(subparsers)
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
