import numpy as np
import torch

from tsuro.core import Board, NUM_NODES, MarkerPosition, Tile, View
from tsuro.features import (
    adjacency_tensor,
    aux_vector_size,
    build_adjacency_matrix,
    build_aux_vector,
    build_hand_tensor,
    build_marker_planes,
    view_to_numpy,
    view_to_torch,
)


def sample_view() -> View:
    board = Board()
    board.place_marker(36)
    board.place_marker(0)
    board.place_marker(12)
    board.eliminate_player(2)
    return View(board=board, hand=[Tile.from_code("12-34-56-78")], active_player=1)


def test_adjacency_matrix_on_empty_board():
    matrix = build_adjacency_matrix(Board())
    assert matrix.shape == (NUM_NODES, NUM_NODES)
    # 48 border nodes touch one slot, the other 120 touch two
    assert np.count_nonzero(matrix) == 48 * 7 + 120 * 14
    assert set(np.unique(matrix).tolist()) == {-1, 0}


def test_marker_planes():
    planes = build_marker_planes(sample_view().board, 3)
    assert planes.shape == (3, NUM_NODES)
    assert planes[0, MarkerPosition(0, 1).node_id()] == 1.0
    assert planes[1, MarkerPosition(1, 18).node_id()] == 1.0
    assert planes[2].sum() == 0.0


def test_hand_tensor_pads_missing_slots():
    tensor = build_hand_tensor([Tile.from_code("12-34-56-78")], 3)
    assert tensor.shape == (3, 8, 8)
    assert tensor[0, 0, 1] == 1.0
    assert tensor[0, 1, 0] == 1.0
    assert np.all(tensor[0].sum(axis=1) == 1.0)
    assert tensor[1:].sum() == 0.0


def test_aux_vector_layout():
    aux = build_aux_vector(sample_view(), 3, phase=1)
    assert aux.shape == (aux_vector_size(3),)
    assert list(aux) == [0, 1, 0, 0, 0, 1, 0, 1]


def test_view_to_numpy_and_torch_agree():
    view = sample_view()
    arrays = view_to_numpy(view, 3, hand_size=2)
    tensors = view_to_torch(view, 3, hand_size=2)
    assert set(arrays) == {"adjacency", "markers", "hand", "aux"}
    for key, value in arrays.items():
        assert isinstance(tensors[key], torch.Tensor)
        assert tensors[key].dtype == torch.float32
        assert np.allclose(tensors[key].numpy(), value)


def test_adjacency_tensor_dtype():
    tensor = adjacency_tensor(Board())
    assert tensor.dtype == torch.int8
    assert tensor.shape == (NUM_NODES, NUM_NODES)
