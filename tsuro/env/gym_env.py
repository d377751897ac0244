from __future__ import annotations

from typing import Dict, Optional, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from tsuro.core import BOARD_SIZE, BORDER_POSITIONS, NUM_BORDER_POSITIONS, NUM_ENTRY_POINTS, NUM_NODES, Tile
from tsuro.env.tsuro_env import EnvReturn, Phase, TsuroEnv
from tsuro.features import aux_vector_size, view_to_numpy

TILE_ACTION_OFFSET = NUM_BORDER_POSITIONS
ROTATIONS = 4


def action_space_size(hand_size: int) -> int:
    return TILE_ACTION_OFFSET + hand_size * ROTATIONS


def encode_tile_action(slot: int, rotation: int) -> int:
    return TILE_ACTION_OFFSET + slot * ROTATIONS + rotation


def decode_tile_action(index: int) -> Tuple[int, int]:
    if index < TILE_ACTION_OFFSET:
        raise ValueError(f"Action index {index} is a marker placement.")
    return divmod(index - TILE_ACTION_OFFSET, ROTATIONS)


class TsuroGymEnv(gym.Env):
    """Gymnasium wrapper with one flat discrete action space for both phases.

    Actions ``0..47`` claim a starting border position; ``48 + slot * 4 +
    rotation`` plays the hand tile in ``slot`` turned ``rotation`` quarter
    turns. Rewards are from the point of view of the player who acted.
    """

    metadata = {"render_modes": ["ansi"], "render_fps": 4}

    def __init__(
        self,
        *,
        num_players: int = 2,
        hand_size: int = 3,
        enforce_legal_actions: bool = True,
        validate_graph: bool = False,
        render_mode: Optional[str] = None,
    ) -> None:
        super().__init__()
        self._enforce_legal = enforce_legal_actions
        self.render_mode = render_mode
        self.num_players = num_players
        self.hand_size = hand_size

        self.observation_space = spaces.Dict(
            {
                "adjacency": spaces.Box(low=-1, high=1, shape=(NUM_NODES, NUM_NODES), dtype=np.int8),
                "markers": spaces.Box(low=0.0, high=1.0, shape=(num_players, NUM_NODES), dtype=np.float32),
                "hand": spaces.Box(
                    low=0.0,
                    high=1.0,
                    shape=(hand_size, NUM_ENTRY_POINTS, NUM_ENTRY_POINTS),
                    dtype=np.float32,
                ),
                "aux": spaces.Box(low=0.0, high=1.0, shape=(aux_vector_size(num_players),), dtype=np.float32),
            }
        )
        self.action_space = spaces.Discrete(action_space_size(hand_size))

        self._game = TsuroEnv(num_players, hand_size=hand_size, validate_graph=validate_graph)
        self._last_return: EnvReturn = self._game.reset()

    @property
    def game(self) -> TsuroEnv:
        return self._game

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        self._last_return = self._game.reset(seed=seed)
        return self._build_observation(), self._build_info()

    def step(self, action_index: int):
        if not self.action_space.contains(action_index):
            raise ValueError(f"Action index {action_index} out of bounds.")

        legal_mask = self.legal_action_mask()
        if self._enforce_legal and not legal_mask[action_index]:
            raise ValueError("Illegal action provided and enforce_legal_actions=True.")

        actor = self._game.active_player
        phase = self._game.phase
        result = self._apply(int(action_index))
        self._last_return = result

        observation = self._build_observation()
        info = self._build_info()
        info["move_is_valid"] = result.move_is_valid

        reward = self._compute_reward(actor, phase, result)
        terminated = result.terminated
        truncated = False

        return observation, reward, terminated, truncated, info

    def legal_action_mask(self) -> np.ndarray:
        mask = np.zeros(self.action_space.n, dtype=np.int8)
        game = self._game
        if game.terminated:
            return mask
        if game.phase == Phase.MARKERS:
            taken = set(game.board.marker_positions())
            for index in range(NUM_BORDER_POSITIONS):
                if BORDER_POSITIONS[index] not in taken:
                    mask[index] = 1
            return mask

        allowed = set(game.legal_tiles())
        for slot, tile in enumerate(game.hands[game.active_player]):
            for rotation in range(ROTATIONS):
                if tile.rotated(rotation) in allowed:
                    mask[encode_tile_action(slot, rotation)] = 1
        return mask

    def render(self):
        if self.render_mode != "ansi":
            raise NotImplementedError("Only 'ansi' render mode is supported.")
        return self._render_ascii()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _apply(self, action_index: int) -> EnvReturn:
        game = self._game
        if game.phase == Phase.MARKERS:
            if action_index >= TILE_ACTION_OFFSET:
                return game.current_return(False)
            return game.step_place_marker(action_index)

        if action_index < TILE_ACTION_OFFSET:
            return game.current_return(False)
        slot, rotation = decode_tile_action(action_index)
        hand = game.hands[game.active_player]
        if slot >= len(hand):
            return game.current_return(False)
        tile: Tile = hand[slot].rotated(rotation)
        return game.step_place_tile(tile)

    def _build_observation(self) -> Dict[str, np.ndarray]:
        view = self._last_return.view
        return view_to_numpy(
            view,
            self.num_players,
            hand_size=self.hand_size,
            phase=int(self._game.phase),
        )

    def _build_info(self) -> Dict[str, object]:
        return {
            "legal_action_mask": self.legal_action_mask(),
            "active_player": self._game.active_player,
            "remaining_players": list(self._last_return.remaining_players),
        }

    def _compute_reward(self, actor: int, phase: Phase, result: EnvReturn) -> float:
        if phase == Phase.TILES and actor not in result.remaining_players:
            return -1.0
        if result.terminated and result.remaining_players == [actor]:
            return 1.0
        return 0.0

    def _render_ascii(self) -> str:
        board = self._game.board
        rows = []
        for y in range(BOARD_SIZE):
            cells = []
            for x in range(BOARD_SIZE):
                tile = board.tiles[x][y]
                cells.append(tile.code if tile is not None else "..-..-..-..")
            rows.append(" ".join(cells))
        for player, position in enumerate(board.marker_positions()):
            rows.append(f"P{player}: {'out' if position is None else position.coords}")
        return "\n".join(rows)
