"""Game session and gymnasium adapter built on the board engine."""

from .tsuro_env import EnvReturn, Phase, TsuroEnv, TsuroEnvConfig, load_env_config
from .gym_env import (
    TILE_ACTION_OFFSET,
    TsuroGymEnv,
    action_space_size,
    decode_tile_action,
    encode_tile_action,
)

__all__ = [
    "EnvReturn",
    "Phase",
    "TsuroEnv",
    "TsuroEnvConfig",
    "load_env_config",
    "TILE_ACTION_OFFSET",
    "TsuroGymEnv",
    "action_space_size",
    "decode_tile_action",
    "encode_tile_action",
]
