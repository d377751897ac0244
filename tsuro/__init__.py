"""Tsuro board engine, game environment and baselines."""

from . import core, env, evaluation, features, validation
from .core import (
    ALL_TILES,
    Board,
    BoardGraph,
    InvariantError,
    MarkerPosition,
    Tile,
    View,
)
from .env import EnvReturn, Phase, TsuroEnv, TsuroEnvConfig, TsuroGymEnv, load_env_config
from .features import view_to_numpy, view_to_torch
from .evaluation import EvaluationResult, RandomPolicy, SurvivalPolicy, evaluate_policies

__all__ = [
    "core",
    "env",
    "evaluation",
    "features",
    "validation",
    "ALL_TILES",
    "Board",
    "BoardGraph",
    "InvariantError",
    "MarkerPosition",
    "Tile",
    "View",
    "EnvReturn",
    "Phase",
    "TsuroEnv",
    "TsuroEnvConfig",
    "TsuroGymEnv",
    "load_env_config",
    "view_to_numpy",
    "view_to_torch",
    "EvaluationResult",
    "RandomPolicy",
    "SurvivalPolicy",
    "evaluate_policies",
]
