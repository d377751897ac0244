from __future__ import annotations

from typing import Dict, Optional, Sequence

import numpy as np
import torch

from tsuro.core import NUM_ENTRY_POINTS, NUM_NODES, Board, Tile, View

NUM_PHASES = 2  # markers, tiles


def aux_vector_size(num_players: int) -> int:
    # active player one-hot + eliminated flags + phase one-hot
    return num_players * 2 + NUM_PHASES


def build_adjacency_matrix(board: Board) -> np.ndarray:
    """(168, 168) int8: 1 built path, -1 possible connection, 0 none."""
    return board.graph.adjacency_matrix()


def build_marker_planes(board: Board, num_players: int) -> np.ndarray:
    """One row per player, one-hot over node ids; eliminated players are all zero."""
    planes = np.zeros((num_players, NUM_NODES), dtype=np.float32)
    for player, position in enumerate(board.marker_positions()):
        if position is not None and player < num_players:
            planes[player, position.node_id()] = 1.0
    return planes


def build_hand_tensor(hand: Sequence[Tile], hand_size: int) -> np.ndarray:
    """Connection matrix per hand slot, shape (hand_size, 8, 8); empty slots are zero."""
    tensor = np.zeros((hand_size, NUM_ENTRY_POINTS, NUM_ENTRY_POINTS), dtype=np.float32)
    for slot, tile in enumerate(hand[:hand_size]):
        for entry_point, other in enumerate(tile.connections):
            tensor[slot, entry_point, other] = 1.0
    return tensor


def build_aux_vector(view: View, num_players: int, phase: int) -> np.ndarray:
    aux = np.zeros((aux_vector_size(num_players),), dtype=np.float32)
    aux[view.active_player] = 1.0
    markers = view.board.markers
    for player in range(min(num_players, len(markers))):
        if markers[player] is None:
            aux[num_players + player] = 1.0
    aux[num_players * 2 + phase] = 1.0
    return aux


def view_to_numpy(
    view: View,
    num_players: int,
    *,
    hand_size: int = 3,
    phase: int = 1,
) -> Dict[str, np.ndarray]:
    return {
        "adjacency": build_adjacency_matrix(view.board),
        "markers": build_marker_planes(view.board, num_players),
        "hand": build_hand_tensor(view.hand, hand_size),
        "aux": build_aux_vector(view, num_players, phase),
    }


def view_to_torch(
    view: View,
    num_players: int,
    *,
    hand_size: int = 3,
    phase: int = 1,
    device: Optional[torch.device] = None,
    dtype: torch.dtype = torch.float32,
) -> Dict[str, torch.Tensor]:
    arrays = view_to_numpy(view, num_players, hand_size=hand_size, phase=phase)
    return {
        key: torch.from_numpy(value).to(device=device, dtype=dtype)
        for key, value in arrays.items()
    }


def adjacency_tensor(board: Board, *, device: Optional[torch.device] = None) -> torch.Tensor:
    """Adjacency matrix as an int8 torch tensor."""
    return torch.from_numpy(build_adjacency_matrix(board)).to(device=device, dtype=torch.int8)
