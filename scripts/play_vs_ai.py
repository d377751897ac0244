#!/usr/bin/env python3
"""Play Tsuro against a baseline policy via the console, with optional logging & replay."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

from tsuro.core import BORDER_POSITIONS
from tsuro.env import TILE_ACTION_OFFSET, Phase, TsuroGymEnv, decode_tile_action
from tsuro.evaluation import Policy, RandomPolicy, SurvivalPolicy


def select_ai_action(policy: Policy, env: TsuroGymEnv, legal_mask: np.ndarray, temperature: float) -> int:
    probs = policy.act(env.game.copy(), legal_mask)
    probs = probs * legal_mask
    if probs.sum() <= 0:
        probs = legal_mask.astype(np.float32)
    probs = probs / probs.sum()
    if temperature <= 1e-6:
        return int(np.argmax(probs))
    adjusted = probs ** (1.0 / temperature)
    adjusted = adjusted / adjusted.sum()
    return int(np.random.choice(len(adjusted), p=adjusted))


def format_board(env: TsuroGymEnv) -> str:
    if env.render_mode == "ansi":
        return env.render()
    rows = []
    for player, position in enumerate(env.game.board.marker_positions()):
        rows.append(f"P{player}: {'out' if position is None else position.coords}")
    return "\n".join(rows)


def describe_action(env: TsuroGymEnv, action_index: int) -> str:
    if action_index < TILE_ACTION_OFFSET:
        return f"marker at {BORDER_POSITIONS[action_index].coords}"
    slot, rotation = decode_tile_action(action_index)
    tile = env.game.hands[env.game.active_player][slot].rotated(rotation)
    return f"tile {tile} (slot {slot}, rotation {rotation})"


def prompt_human_move(env: TsuroGymEnv, legal_mask: np.ndarray) -> int:
    indices = [int(idx) for idx in np.flatnonzero(legal_mask)]
    print("Legal moves:")
    for idx in indices:
        print(f"  {idx}: {describe_action(env, idx)}")
    while True:
        raw = input("Move index (q to quit): ").strip()
        if raw.lower() in {"q", "quit", "exit"}:
            print("Quitting.")
            sys.exit(0)
        if not raw.isdigit():
            print("Please enter a number.")
            continue
        idx = int(raw)
        if idx in indices:
            return idx
        print("Not a legal move, try again.")


def save_log(log: Dict, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(log, indent=2))
    print(f"Saved log to {path}.")


def replay_logged_game(log_path: Path, *, verbose: bool = True) -> Dict[str, object]:
    """Re-run a logged game from its seed and action indices."""
    data = json.loads(log_path.read_text())
    metadata = data.get("metadata", {})
    moves = data.get("moves", [])
    env = TsuroGymEnv(
        num_players=metadata.get("num_players", 2),
        hand_size=metadata.get("hand_size", 3),
        render_mode="ansi",
    )
    env.reset(seed=metadata.get("seed"))
    if verbose:
        print("Replaying logged game.")
        print(format_board(env))
    for entry in moves:
        idx = entry["action_index"]
        if verbose:
            actor = entry.get("actor", "unknown")
            print(f"{actor} (P{entry.get('player', '?')}): {describe_action(env, idx)}")
        env.step(idx)
        if verbose:
            print(format_board(env))
    game = env.game
    summary = {
        "moves": len(moves),
        "terminated": game.terminated,
        "remaining_players": game.remaining_players(),
        "tiles": [[None if tile is None else tile.code for tile in column] for column in game.board.tiles],
    }
    if verbose:
        print("Replay finished.")
        print(f"Remaining players: {summary['remaining_players']}")
    return summary


def play_interactive(args: argparse.Namespace) -> None:
    log_records: List[Dict] = []
    if args.policy == "survival":
        policy_ai: Policy = SurvivalPolicy(args.survival_temperature)
    else:
        policy_ai = RandomPolicy()

    env = TsuroGymEnv(num_players=args.num_players, hand_size=args.hand_size, render_mode="ansi")
    seed: Optional[int] = args.seed
    obs, info = env.reset(seed=seed)

    terminated = False
    move_index = 0
    while not terminated:
        legal_mask = info["legal_action_mask"]
        if legal_mask.sum() == 0:
            break
        player = env.game.active_player
        phase = env.game.phase

        print("\nBoard:")
        print(format_board(env))
        print(f"Turn: P{player} ({phase.name.lower()})")
        if player == args.human_player:
            print("Hand: " + " ".join(str(tile) for tile in env.game.hands[player]))
            action_index = prompt_human_move(env, legal_mask)
            actor = "human"
        else:
            action_index = select_ai_action(policy_ai, env, legal_mask, args.temperature)
            actor = "ai"
            print(f"AI (P{player}): {describe_action(env, action_index)}")

        log_records.append(
            {
                "move_index": move_index,
                "actor": actor,
                "player": player,
                "phase": int(phase == Phase.TILES),
                "action_index": int(action_index),
            }
        )

        obs, reward, terminated, truncated, info = env.step(action_index)
        move_index += 1
        if truncated:
            terminated = True

    print("\nFinal board:")
    print(format_board(env))
    survivors = env.game.remaining_players()
    if survivors == [args.human_player]:
        print("You win!")
    elif len(survivors) == 1:
        print(f"P{survivors[0]} wins.")
    else:
        print(f"Shared win: {survivors}")

    if args.log_file:
        metadata = {
            "num_players": args.num_players,
            "hand_size": args.hand_size,
            "seed": seed,
            "human_player": args.human_player,
            "policy": args.policy,
            "temperature": args.temperature,
            "remaining_players": survivors,
        }
        save_log({"metadata": metadata, "moves": log_records}, Path(args.log_file))


def main() -> None:
    parser = argparse.ArgumentParser(description="Play Tsuro in the console against a baseline policy.")
    parser.add_argument("--policy", choices=["random", "survival"], default="survival")
    parser.add_argument("--num-players", type=int, default=2)
    parser.add_argument("--hand-size", type=int, default=3)
    parser.add_argument("--human-player", type=int, default=0)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--temperature", type=float, default=0.8)
    parser.add_argument("--survival-temperature", type=float, default=0.5)
    parser.add_argument("--log-file", type=str)
    parser.add_argument("--replay-log", type=str, help="Replay a logged game and exit")
    parser.add_argument("--replay-quiet", action="store_true")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(name)s %(levelname)s %(message)s")

    if args.replay_log:
        replay_logged_game(Path(args.replay_log), verbose=not args.replay_quiet)
        return

    if args.seed is None:
        args.seed = int(np.random.default_rng().integers(0, 2**31 - 1))
    play_interactive(args)


if __name__ == "__main__":
    main()
