import numpy as np

from tsuro.core import BoardGraph, MarkerPosition, NUM_NODES, find_tile_with_connection, Board
from tsuro.validation import check_graph_consistency


def node(x: int, y: int) -> int:
    return MarkerPosition(x, y).node_id()


def test_initial_degrees():
    graph = BoardGraph()
    for node_id in range(NUM_NODES):
        position = MarkerPosition.from_node_id(node_id)
        expected = 7 if position.is_edge() else 14
        assert graph.degree(node_id) == expected
        assert graph.neighbors(node_id, built=True) == []
    graph.check_invariants()


def test_placing_tile_builds_paths_between_entry_points():
    graph = BoardGraph()
    tile = find_tile_with_connection(0, 5)
    graph.place_tile(tile, (0, 0))

    assert node(1, 0) in graph.neighbors(node(1, 3), built=True)
    assert graph.degree(node(1, 0)) == 1
    # (1, 3) keeps its links into the empty slot below
    assert graph.degree(node(1, 3)) == 8
    graph.check_invariants()


def test_path_through_two_tiles_swallows_middle_node():
    graph = BoardGraph()
    tile = find_tile_with_connection(0, 5)
    graph.place_tile(tile, (0, 0))
    graph.place_tile(tile, (0, 1))

    assert graph.vertices[node(1, 3)] is None
    assert graph.degree(node(1, 3)) == 0
    assert graph.neighbors(node(1, 0)) == [node(1, 6)]
    assert node(1, 0) in graph.neighbors(node(1, 6), built=True)
    graph.check_invariants()


def test_copy_is_independent():
    graph = BoardGraph()
    clone = graph.copy()
    clone.place_tile(find_tile_with_connection(0, 5), (2, 2))
    assert clone != graph
    assert graph == BoardGraph()


def test_adjacency_matrix_values():
    board = Board()
    board.place_tile_at(find_tile_with_connection(0, 5), (0, 0))
    matrix = board.graph.adjacency_matrix()
    assert matrix.shape == (NUM_NODES, NUM_NODES)
    assert matrix.dtype == np.int8
    assert np.array_equal(matrix, matrix.T)
    assert matrix[node(1, 0), node(1, 3)] == 1
    assert matrix[node(1, 6), node(2, 6)] == -1
    check_graph_consistency(board)


def test_closed_loop_removes_nodes():
    board = Board()
    # four tiles turning around the shared corner at (3, 3)
    board.place_tile_at(find_tile_with_connection(2, 1), (0, 0))
    board.place_tile_at(find_tile_with_connection(4, 3), (0, 1))
    board.place_tile_at(find_tile_with_connection(6, 5), (1, 1))
    board.place_tile_at(find_tile_with_connection(0, 7), (1, 0))
    for coords in [(3, 2), (2, 3), (3, 4), (4, 3)]:
        assert board.graph.vertices[node(*coords)] is None
    board.graph.check_invariants()
    check_graph_consistency(board)


def test_bfs_reaches_every_node_on_empty_board():
    graph = BoardGraph()
    visits = graph.bfs_from(0)
    assert visits[0] == (0, 0)
    assert len(visits) == NUM_NODES
    assert max(dist for dist, _ in visits) > 1
