from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass, fields
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np
import yaml

from tsuro.core import (
    ALL_TILES,
    NUM_BORDER_POSITIONS,
    Board,
    InvariantError,
    Tile,
    View,
)
from tsuro.core import snapshot
from tsuro.validation import check_graph_consistency

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2
MAX_PLAYERS = 8


class Phase(IntEnum):
    MARKERS = 0
    TILES = 1


@dataclass
class EnvReturn:
    view: View
    terminated: bool
    move_is_valid: bool
    active_player: int
    remaining_players: List[int]
    phase: Phase


@dataclass
class TsuroEnvConfig:
    num_players: int = 2
    hand_size: int = 3
    seed: Optional[int] = None
    validate_graph: bool = False


def load_env_config(path: Union[str, Path]) -> TsuroEnvConfig:
    """Read a ``TsuroEnvConfig`` from the ``env`` section of a YAML file."""
    path = Path(path)
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    section = data.get("env", {}) or {}
    known = {f.name for f in fields(TsuroEnvConfig)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ValueError(f"Unknown env config keys: {unknown}")
    return TsuroEnvConfig(**section)


class TsuroEnv:
    """A full game: marker phase, then tile placement until one player is left.

    Owns the deck, the hands and the turn order, and drives the board through
    its public operations.
    """

    def __init__(
        self,
        num_players: int = 2,
        *,
        hand_size: int = 3,
        seed: Optional[int] = None,
        validate_graph: bool = False,
    ) -> None:
        if not MIN_PLAYERS <= num_players <= MAX_PLAYERS:
            raise ValueError(f"num_players must be between {MIN_PLAYERS} and {MAX_PLAYERS}.")
        if hand_size < 1 or hand_size * num_players > len(ALL_TILES):
            raise ValueError("hand_size does not fit the tile catalog.")
        self.num_players = num_players
        self.hand_size = hand_size
        self.validate_graph = validate_graph
        self._seed = seed
        self.reset()

    @classmethod
    def from_config(cls, config: TsuroEnvConfig) -> "TsuroEnv":
        return cls(
            config.num_players,
            hand_size=config.hand_size,
            seed=config.seed,
            validate_graph=config.validate_graph,
        )

    def reset(self, *, seed: Optional[int] = None) -> EnvReturn:
        self.rng = np.random.default_rng(self._seed if seed is None else seed)
        deck = list(ALL_TILES)
        self.rng.shuffle(deck)
        self.hands: List[List[Tile]] = []
        for _ in range(self.num_players):
            self.hands.append(deck[-self.hand_size:])
            del deck[-self.hand_size:]
        self.deck: List[Tile] = deck
        self.board = Board()
        self.phase = Phase.MARKERS
        self.active_player = 0
        self.num_markers_placed = 0
        self.num_players_left = self.num_players
        self.dragon_tile_owner: Optional[int] = None
        return self.current_return(True)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------
    def step_place_marker(self, border_index: int) -> EnvReturn:
        if self.num_markers_placed >= self.num_players:
            raise ValueError("All markers have already been placed.")
        if not 0 <= border_index < NUM_BORDER_POSITIONS:
            raise ValueError(f"Border index {border_index} out of range.")
        valid = self.board.place_marker(border_index)
        if valid:
            self.num_markers_placed += 1
        return self._end_turn(valid)

    def step_place_tile(self, tile: Tile) -> EnvReturn:
        if self.num_markers_placed != self.num_players:
            raise ValueError("Cannot place a tile before every marker is placed.")
        if self.terminated:
            raise ValueError("Cannot place a tile, the game has terminated.")
        if not self.move_is_allowed(tile):
            logger.debug("Tile %s rejected for player %d", tile, self.active_player)
            return self._end_turn(False)

        player = self.active_player
        coord = self.board.next_tile_of_player(player)
        self._remove_from_hand(player, tile)

        # collisions are checked before any marker moves
        for other in self.board.find_collisions(tile, coord):
            self._eliminate_player(other)
        if self.terminated:
            return self._end_turn(True)

        self.board.place_tile_at(tile, coord)
        for other in self.board.move_markers():
            self._eliminate_player(other)
        if self.validate_graph:
            check_graph_consistency(self.board)
        if not self.terminated:
            self._draw_tiles()
        return self._end_turn(True)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def terminated(self) -> bool:
        if self.num_players_left < 2:
            return True
        return not self.deck and all(not hand for hand in self.hands)

    def remaining_players(self) -> List[int]:
        if self.num_markers_placed < self.num_players:
            return list(range(self.num_players))
        return self.board.active_players()

    def view_of(self, player: int) -> View:
        return View(board=self.board.copy(), hand=list(self.hands[player]), active_player=self.active_player)

    def rotated_hand(self, player: int) -> List[Tile]:
        return sorted({tile.rotated(num) for tile in self.hands[player] for num in range(4)})

    def legal_tiles(self) -> List[Tile]:
        """Tiles the active player may place, every rotation listed once."""
        if self.phase != Phase.TILES or self.terminated:
            return []
        tiles = self.rotated_hand(self.active_player)
        suicide = [self.board.move_is_suicide(tile, self.active_player) for tile in tiles]
        if all(suicide):
            return tiles
        return [tile for tile, is_suicide in zip(tiles, suicide) if not is_suicide]

    def move_is_allowed(self, tile: Tile) -> bool:
        if self._hand_index_of(self.active_player, tile) is None:
            return False
        if not self.board.move_is_suicide(tile, self.active_player):
            return True
        # a suicidal tile is only allowed when nothing else is
        return all(
            self.board.move_is_suicide(other, self.active_player)
            for other in self.rotated_hand(self.active_player)
        )

    def get_deck(self) -> List[Tile]:
        return list(self.deck)

    def set_top_tile(self, tile: Tile) -> None:
        """Move ``tile`` to the top of the deck so it is drawn next."""
        if tile not in self.deck:
            raise ValueError(f"Tile {tile} is not in the deck.")
        self.deck.remove(tile)
        self.deck.append(tile)

    def copy(self) -> "TsuroEnv":
        clone = TsuroEnv.__new__(TsuroEnv)
        clone.num_players = self.num_players
        clone.hand_size = self.hand_size
        clone.validate_graph = self.validate_graph
        clone._seed = self._seed
        clone.rng = deepcopy(self.rng)
        clone.hands = [list(hand) for hand in self.hands]
        clone.deck = list(self.deck)
        clone.board = self.board.copy()
        clone.phase = self.phase
        clone.active_player = self.active_player
        clone.num_markers_placed = self.num_markers_placed
        clone.num_players_left = self.num_players_left
        clone.dragon_tile_owner = self.dragon_tile_owner
        return clone

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def to_state(self) -> Dict[str, Any]:
        return {
            "num_players": self.num_players,
            "hand_size": self.hand_size,
            "validate_graph": self.validate_graph,
            "seed": self._seed,
            "rng_state": self.rng.bit_generator.state,
            "hands": [[tile.code for tile in hand] for hand in self.hands],
            "deck": [tile.code for tile in self.deck],
            "board": snapshot.board_to_state(self.board),
            "phase": int(self.phase),
            "active_player": self.active_player,
            "num_markers_placed": self.num_markers_placed,
            "num_players_left": self.num_players_left,
            "dragon_tile_owner": self.dragon_tile_owner,
        }

    @classmethod
    def from_state(cls, state: Dict[str, Any]) -> "TsuroEnv":
        env = cls.__new__(cls)
        env.num_players = int(state["num_players"])
        env.hand_size = int(state["hand_size"])
        env.validate_graph = bool(state.get("validate_graph", False))
        env._seed = state.get("seed")
        env.rng = np.random.default_rng()
        env.rng.bit_generator.state = state["rng_state"]
        env.hands = [[Tile.from_code(code) for code in hand] for hand in state["hands"]]
        env.deck = [Tile.from_code(code) for code in state["deck"]]
        env.board = snapshot.board_from_state(state["board"])
        env.phase = Phase(state["phase"])
        env.active_player = int(state["active_player"])
        env.num_markers_placed = int(state["num_markers_placed"])
        env.num_players_left = int(state["num_players_left"])
        env.dragon_tile_owner = state.get("dragon_tile_owner")
        return env

    def to_bytes(self) -> bytes:
        return snapshot.encode(self.to_state())

    @classmethod
    def from_bytes(cls, data: bytes) -> "TsuroEnv":
        return cls.from_state(snapshot.decode(data))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TsuroEnv):
            return NotImplemented
        return self.to_state() == other.to_state()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _end_turn(self, move_is_valid: bool) -> EnvReturn:
        if move_is_valid and not self.terminated:
            self.active_player = self._next_active_player(self.active_player)
        if self.phase == Phase.MARKERS and self.num_markers_placed == self.num_players:
            self.phase = Phase.TILES
        return self.current_return(move_is_valid)

    def current_return(self, move_is_valid: bool = True) -> EnvReturn:
        """State of the game as returned by a step, without taking one."""
        return EnvReturn(
            view=self.view_of(self.active_player),
            terminated=self.terminated,
            move_is_valid=move_is_valid,
            active_player=self.active_player,
            remaining_players=self.remaining_players(),
            phase=self.phase,
        )

    def _player_after(self, player: int) -> int:
        nxt = (player + 1) % self.num_players
        if self.phase == Phase.MARKERS:
            return nxt
        for _ in range(self.num_players):
            if self.board.markers[nxt] is not None:
                return nxt
            nxt = (nxt + 1) % self.num_players
        raise InvariantError("every player has been eliminated")

    def _next_active_player(self, player: int) -> int:
        nxt = self._player_after(player)
        if self.phase == Phase.MARKERS:
            return nxt
        # players without tiles sit out until they can draw again
        candidate = nxt
        for _ in range(self.num_players):
            if self.hands[candidate]:
                return candidate
            candidate = self._player_after(candidate)
        return nxt

    def _hand_index_of(self, player: int, tile: Tile) -> Optional[int]:
        for idx, held in enumerate(self.hands[player]):
            if tile in held.all_rotations():
                return idx
        return None

    def _remove_from_hand(self, player: int, tile: Tile) -> None:
        idx = self._hand_index_of(player, tile)
        if idx is None:
            raise InvariantError(f"player {player} does not hold tile {tile}")
        del self.hands[player][idx]

    def _eliminate_player(self, player: int) -> None:
        self.board.eliminate_player(player)
        self.deck.extend(self.hands[player])
        self.hands[player] = []
        self.rng.shuffle(self.deck)
        self.num_players_left -= 1
        if self.dragon_tile_owner == player:
            self.dragon_tile_owner = None
        logger.info("Player %d eliminated, %d players left", player, self.num_players_left)
        if self.num_players_left < 2:
            logger.info("Game over, remaining players: %s", self.board.active_players())

    def _draw_tiles(self) -> None:
        current = self.dragon_tile_owner if self.dragon_tile_owner is not None else self.active_player
        if self.deck and self.dragon_tile_owner is not None:
            self.dragon_tile_owner = None
        if self.board.markers[current] is None:
            current = self._player_after(current)

        while self.deck and len(self.hands[current]) < self.hand_size:
            self.hands[current].append(self.deck.pop())
            current = self._player_after(current)

        if self.dragon_tile_owner is None and len(self.hands[current]) < self.hand_size:
            self.dragon_tile_owner = current
