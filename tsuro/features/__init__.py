"""Numeric encodings of board state for learning agents."""

from .observation import (
    NUM_PHASES,
    adjacency_tensor,
    aux_vector_size,
    build_adjacency_matrix,
    build_aux_vector,
    build_hand_tensor,
    build_marker_planes,
    view_to_numpy,
    view_to_torch,
)

__all__ = [
    "NUM_PHASES",
    "adjacency_tensor",
    "aux_vector_size",
    "build_adjacency_matrix",
    "build_aux_vector",
    "build_hand_tensor",
    "build_marker_planes",
    "view_to_numpy",
    "view_to_torch",
]
