from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

import numpy as np

from tsuro.core import LATTICE_SIZE, Board
from tsuro.env import Phase, TsuroEnv, TsuroGymEnv, decode_tile_action

logger = logging.getLogger(__name__)

ELIMINATED_SCORE = -100.0


@dataclass
class EvaluationResult:
    games_played: int
    wins: List[int] = field(default_factory=list)
    draws: int = 0
    average_length: float = 0.0

    def winrate(self, player: int) -> float:
        return self.wins[player] / max(1, self.games_played)


class Policy:
    """Policy interface producing action probabilities over legal moves."""

    def act(self, game: TsuroEnv, legal_mask: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def spawn(self, seed: Optional[int] = None) -> "Policy":
        """Return a copy of this policy with its own random stream."""
        return self


class RandomPolicy(Policy):
    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        self.rng = rng or np.random.default_rng()

    def act(self, game: TsuroEnv, legal_mask: np.ndarray) -> np.ndarray:
        logits = legal_mask.astype(np.float64)
        if logits.sum() == 0:
            return logits
        probs = logits / logits.sum()
        return probs.astype(np.float32, copy=True)

    def spawn(self, seed: Optional[int] = None) -> "RandomPolicy":
        return RandomPolicy(np.random.default_rng(seed))


def distance_to_edge(board: Board, player: int) -> float:
    marker = board.markers[player]
    if marker is None:
        return ELIMINATED_SCORE
    x, y = marker.position.coords
    last = LATTICE_SIZE - 1
    return float(min(x, y, last - x, last - y))


class SurvivalPolicy(Policy):
    """Rule-based baseline: keep the own marker as far from the edge as possible.

    Marker placements are uniform. Tile actions are scored on the afterstate
    board and turned into probabilities with a softmax.
    """

    def __init__(self, temperature: float = 0.5, rng: Optional[np.random.Generator] = None) -> None:
        if temperature <= 0:
            raise ValueError("temperature must be positive.")
        self.temperature = temperature
        self.rng = rng or np.random.default_rng()

    def act(self, game: TsuroEnv, legal_mask: np.ndarray) -> np.ndarray:
        indices = np.flatnonzero(legal_mask)
        if len(indices) == 0:
            return legal_mask.astype(np.float32)
        if game.phase == Phase.MARKERS:
            result = np.zeros_like(legal_mask, dtype=np.float32)
            result[indices] = 1.0 / len(indices)
            return result

        player = game.active_player
        hand = game.hands[player]
        boards = dict(game.view_of(player).afterstates())
        scores = []
        for idx in indices:
            slot, rotation = decode_tile_action(int(idx))
            board = boards.get(hand[slot].rotated(rotation))
            scores.append(ELIMINATED_SCORE if board is None else distance_to_edge(board, player))

        scores = np.array(scores) / self.temperature
        scores -= scores.max()
        probs = np.exp(scores)
        probs /= probs.sum()

        result = np.zeros_like(legal_mask, dtype=np.float32)
        result[indices] = probs
        return result

    def spawn(self, seed: Optional[int] = None) -> "SurvivalPolicy":
        return SurvivalPolicy(self.temperature, np.random.default_rng(seed))


def evaluate_policies(
    policies: Sequence[Policy],
    *,
    episodes: int,
    env_factory: Optional[Callable[[], TsuroGymEnv]] = None,
    seed: Optional[int] = None,
) -> EvaluationResult:
    """Play ``episodes`` games, seat ``i`` controlled by ``policies[i]``.

    A game counts as a win for the last player standing and as a draw when it
    ends with several survivors.
    """
    if len(policies) < 2:
        raise ValueError("At least two policies are required.")
    env_factory = env_factory or (lambda: TsuroGymEnv(num_players=len(policies)))
    rng = np.random.default_rng(seed)

    wins = [0] * len(policies)
    draws = 0
    total_ply = 0

    for episode in range(episodes):
        env = env_factory()
        if env.num_players != len(policies):
            raise ValueError("env_factory must build an env with one seat per policy.")
        obs, info = env.reset(seed=None if seed is None else seed + episode)
        terminated = False
        ply = 0

        while not terminated:
            legal_mask = info["legal_action_mask"]
            if legal_mask.sum() == 0:
                break
            game = env.game
            policy = policies[game.active_player]
            probs = policy.act(game.copy(), legal_mask)
            if probs.sum() <= 0:
                probs = legal_mask.astype(np.float32)
            probs = probs / probs.sum()
            action_index = int(rng.choice(len(probs), p=probs))
            obs, reward, terminated, truncated, info = env.step(action_index)
            ply += 1
            if truncated:
                terminated = True

        total_ply += ply
        survivors = env.game.remaining_players()
        if len(survivors) == 1:
            wins[survivors[0]] += 1
        else:
            draws += 1
        logger.debug("Episode %d finished after %d plies, survivors %s", episode, ply, survivors)

    return EvaluationResult(
        games_played=episodes,
        wins=wins,
        draws=draws,
        average_length=total_ply / max(1, episodes),
    )
