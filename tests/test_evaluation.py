import numpy as np
import pytest

from tsuro.core import Board
from tsuro.env import TILE_ACTION_OFFSET, TsuroGymEnv
from tsuro.evaluation import RandomPolicy, SurvivalPolicy, distance_to_edge, evaluate_policies
from tsuro.evaluation.match import ELIMINATED_SCORE


def test_evaluate_random_vs_random_small():
    policies = [RandomPolicy(np.random.default_rng(0)), RandomPolicy(np.random.default_rng(1))]
    result = evaluate_policies(policies, episodes=2, seed=0)
    assert result.games_played == 2
    assert sum(result.wins) + result.draws == 2
    assert result.average_length > 0


def test_evaluate_is_reproducible_with_seed():
    def run():
        policies = [SurvivalPolicy(rng=np.random.default_rng(0)), RandomPolicy(np.random.default_rng(1))]
        return evaluate_policies(policies, episodes=2, seed=3)

    assert run() == run()


def test_evaluate_needs_two_policies():
    with pytest.raises(ValueError):
        evaluate_policies([RandomPolicy()], episodes=1)


def test_survival_policy_distribution():
    env = TsuroGymEnv()
    env.reset(seed=2)
    env.step(36)
    env.step(0)
    mask = env.legal_action_mask()
    probs = SurvivalPolicy().act(env.game, mask)
    assert probs.shape == mask.shape
    assert np.all(probs >= 0)
    assert np.isclose(probs.sum(), 1.0)
    assert np.all(probs[mask == 0] == 0)
    assert probs[:TILE_ACTION_OFFSET].sum() == 0


def test_survival_policy_is_uniform_for_markers():
    env = TsuroGymEnv()
    env.reset(seed=0)
    mask = env.legal_action_mask()
    probs = SurvivalPolicy().act(env.game, mask)
    assert np.allclose(probs[:48], 1.0 / 48)


def test_distance_to_edge():
    board = Board()
    board.place_marker(36)
    assert distance_to_edge(board, 0) == 0.0
    board.eliminate_player(0)
    assert distance_to_edge(board, 0) == ELIMINATED_SCORE
