from __future__ import annotations

from typing import List, Optional, Tuple

from tsuro.core import NUM_ENTRY_POINTS, NUM_NODES, Board, MarkerPosition

Edge = Tuple[int, bool]


class GraphConsistencyError(ValueError):
    pass


def expected_adjacency(board: Board) -> List[Optional[List[Edge]]]:
    """Sorted edge lists the board graph should hold, computed from the tiles alone.

    ``None`` marks a node a path runs through, which should have been removed.
    """
    expected: List[Optional[List[Edge]]] = []
    for node_id in range(NUM_NODES):
        position = MarkerPosition.from_node_id(node_id)
        pairs = position.entry_point_indices()
        placed = [(coord, entry) for coord, entry in pairs if not board.is_empty(coord)]
        if len(pairs) == 2 and len(placed) == 2:
            expected.append(None)
            continue

        edges: List[Edge] = []
        for coord, own_entry in pairs:
            if not board.is_empty(coord):
                continue
            for entry_point in range(NUM_ENTRY_POINTS):
                if entry_point != own_entry:
                    neighbour = MarkerPosition.from_entry_point(coord, entry_point)
                    edges.append((neighbour.node_id(), False))
        if placed:
            coord, entry_point = placed[0]
            end = board.find_path_endpoint(coord, board.tile_at(coord).connections[entry_point])
            edges.append((end.node_id(), True))
        expected.append(sorted(edges))
    return expected


def check_graph_consistency(board: Board) -> None:
    graph = board.graph
    for node_id, edges in enumerate(expected_adjacency(board)):
        actual = graph.adjacency_list[node_id]
        if edges is None:
            if graph.vertices[node_id] is not None:
                raise GraphConsistencyError(f"node {node_id} lies inside a path but is still present")
            if actual:
                raise GraphConsistencyError(f"removed node {node_id} still has edges {actual}")
            continue
        if graph.vertices[node_id] != MarkerPosition.from_node_id(node_id):
            raise GraphConsistencyError(f"node {node_id} has position {graph.vertices[node_id]}")
        if sorted(actual) != edges:
            raise GraphConsistencyError(f"node {node_id} has edges {sorted(actual)}, expected {edges}")
