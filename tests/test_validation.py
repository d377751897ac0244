import pytest

from tsuro.core import Board, Tile
from tsuro.validation import GraphConsistencyError, check_graph_consistency, expected_adjacency


def test_empty_board_matches_expected_graph():
    board = Board()
    expected = expected_adjacency(board)
    assert expected == [sorted(edges) for edges in board.graph.adjacency_list]
    check_graph_consistency(board)


def test_consistent_after_placements():
    board = Board()
    for code, coord in [("14-27-36-58", (0, 0)), ("12-34-56-78", (1, 0)), ("16-25-38-47", (0, 1)), ("18-23-45-67", (1, 1))]:
        board.place_tile_at(Tile.from_code(code), coord)
        check_graph_consistency(board)


def test_missing_edge_is_reported():
    board = Board()
    board.graph.adjacency_list[0].pop()
    with pytest.raises(GraphConsistencyError):
        check_graph_consistency(board)


def test_stale_vertex_is_reported():
    board = Board()
    board.place_tile_at(Tile.from_code("15-26-37-48"), (0, 0))
    board.place_tile_at(Tile.from_code("15-26-37-48"), (0, 1))
    swallowed = next(i for i, edges in enumerate(expected_adjacency(board)) if edges is None)
    board.graph.vertices[swallowed] = Board().graph.vertices[swallowed]
    with pytest.raises(GraphConsistencyError):
        check_graph_consistency(board)
