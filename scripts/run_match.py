#!/usr/bin/env python3
"""Play baseline policies against each other and print the results as JSON."""

import argparse
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Dict, List

import numpy as np
import yaml

from tsuro.env import TsuroEnvConfig, TsuroGymEnv, load_env_config
from tsuro.evaluation import Policy, RandomPolicy, SurvivalPolicy, evaluate_policies

POLICY_CHOICES = ("random", "survival")


def load_yaml_config(path_str: str) -> Dict:
    path = Path(path_str)
    if not path.exists():
        return {}
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def build_policies(names: List[str], *, seed: int, temperature: float) -> List[Policy]:
    policies: List[Policy] = []
    for offset, name in enumerate(names):
        rng = np.random.default_rng(seed + offset)
        if name == "random":
            policies.append(RandomPolicy(rng))
        elif name == "survival":
            policies.append(SurvivalPolicy(temperature, rng))
        else:
            raise ValueError(f"Unknown policy {name!r}, expected one of {POLICY_CHOICES}.")
    return policies


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a Tsuro match between baseline policies.")
    parser.add_argument("--config", type=str, default="configs/match.yaml")
    parser.add_argument("--episodes", type=int)
    parser.add_argument("--policies", nargs="+", choices=POLICY_CHOICES)
    parser.add_argument("--hand-size", type=int)
    parser.add_argument("--seed", type=int)
    parser.add_argument("--survival-temperature", type=float)
    parser.add_argument("--validate-graph", action="store_true")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")

    cfg = load_yaml_config(args.config)
    env_config = load_env_config(args.config) if cfg else TsuroEnvConfig()

    names = args.policies or cfg.get("policies", ["survival", "random"])
    episodes = args.episodes if args.episodes is not None else cfg.get("episodes", 20)
    seed = args.seed if args.seed is not None else cfg.get("seed", env_config.seed or 0)
    temperature = (
        args.survival_temperature
        if args.survival_temperature is not None
        else cfg.get("survival_temperature", 0.5)
    )
    env_config = replace(env_config, num_players=len(names))
    if args.hand_size is not None:
        env_config = replace(env_config, hand_size=args.hand_size)
    if args.validate_graph:
        env_config = replace(env_config, validate_graph=True)

    def env_factory() -> TsuroGymEnv:
        return TsuroGymEnv(
            num_players=env_config.num_players,
            hand_size=env_config.hand_size,
            validate_graph=env_config.validate_graph,
        )

    policies = build_policies(names, seed=seed, temperature=temperature)
    result = evaluate_policies(policies, episodes=episodes, env_factory=env_factory, seed=seed)

    output = {
        "games": result.games_played,
        "policies": names,
        "wins": result.wins,
        "winrates": [result.winrate(player) for player in range(len(names))],
        "draws": result.draws,
        "average_length": result.average_length,
    }
    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
