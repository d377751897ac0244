from __future__ import annotations

import logging
from collections import deque
from itertools import combinations
from typing import List, Optional, Tuple

import numpy as np

from .errors import InvariantError
from .geometry import ALL_NODES, NUM_ENTRY_POINTS, NUM_NODES, Coord, MarkerPosition
from .tile import Tile

logger = logging.getLogger(__name__)

Edge = Tuple[int, bool]


class BoardGraph:
    """Graph over every marker position, kept in step with the tile grid.

    ``adjacency_list[id]`` holds ``(other_id, built)`` pairs. Unbuilt edges join
    two entry points of a tile slot that is still empty; built edges join the
    two ends of a path made of placed tiles. Positions a path runs through are
    dropped from the graph (``vertices[id]`` becomes ``None``) so only the ends
    of each path remain.
    """

    def __init__(self) -> None:
        self.vertices: List[Optional[MarkerPosition]] = [None] * NUM_NODES
        self.adjacency_list: List[List[Edge]] = [[] for _ in range(NUM_NODES)]

        for position in ALL_NODES:
            self.vertices[position.node_id()] = position

        for node_id, position in enumerate(self.vertices):
            for coord, own_entry in position.entry_point_indices():
                for entry_point in range(NUM_ENTRY_POINTS):
                    if entry_point == own_entry:
                        continue
                    neighbour = MarkerPosition.from_entry_point(coord, entry_point)
                    self.adjacency_list[node_id].append((neighbour.node_id(), False))

    def copy(self) -> "BoardGraph":
        clone = BoardGraph.__new__(BoardGraph)
        clone.vertices = list(self.vertices)
        clone.adjacency_list = [list(edges) for edges in self.adjacency_list]
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoardGraph):
            return NotImplemented
        return self.vertices == other.vertices and self.adjacency_list == other.adjacency_list

    def degree(self, node_id: int) -> int:
        return len(self.adjacency_list[node_id])

    def neighbors(self, node_id: int, *, built: Optional[bool] = None) -> List[int]:
        return [
            other for other, is_built in self.adjacency_list[node_id] if built is None or is_built == built
        ]

    def place_tile(self, tile: Tile, coord: Coord) -> None:
        node_ids = [MarkerPosition.from_entry_point(coord, idx).node_id() for idx in range(NUM_ENTRY_POINTS)]

        # The slot is no longer empty, so its entry points can only be joined by
        # the tile's own paths from now on.
        for a, b in combinations(node_ids, 2):
            self._remove_edge(a, b, built=False)

        for entry_a, entry_b in tile.paths():
            ends = []
            for entry_point in (entry_a, entry_b):
                node_id = node_ids[entry_point]
                edges = self.adjacency_list[node_id]
                if len(edges) == 1:
                    # Node ends a path whose far side is already placed, the
                    # path now runs through it.
                    path_end = edges[0][0]
                    self.vertices[node_id] = None
                    self._remove_edge(path_end, node_id)
                else:
                    path_end = node_id
                ends.append(path_end)

            if ends[0] == ends[1]:
                # closed loop, nothing left to connect
                self.vertices[ends[0]] = None
                logger.debug("Tile %s at %s closed a loop through node %d", tile, coord, ends[0])
                continue
            self.adjacency_list[ends[0]].append((ends[1], True))
            self.adjacency_list[ends[1]].append((ends[0], True))

    def bfs_from(self, node_id: int) -> List[Tuple[int, int]]:
        """Breadth-first search over built and unbuilt edges.

        Returns ``(distance, node_id)`` pairs in visiting order, starting with
        ``(0, node_id)``.
        """
        visited = [False] * NUM_NODES
        visited[node_id] = True
        out = [(0, node_id)]
        queue = deque([(node_id, 0)])
        while queue:
            current, dist = queue.popleft()
            for other, _built in self.adjacency_list[current]:
                if visited[other]:
                    continue
                visited[other] = True
                queue.append((other, dist + 1))
                out.append((dist + 1, other))
        return out

    def adjacency_matrix(self) -> np.ndarray:
        """(168, 168) int8 matrix: 1 for built edges, -1 for unbuilt, 0 otherwise.

        A built edge wins when two nodes are joined both ways.
        """
        matrix = np.zeros((NUM_NODES, NUM_NODES), dtype=np.int8)
        for from_id, edges in enumerate(self.adjacency_list):
            for to_id, built in edges:
                if built:
                    matrix[from_id, to_id] = 1
                elif matrix[from_id, to_id] == 0:
                    matrix[from_id, to_id] = -1
        return matrix

    def check_invariants(self) -> None:
        for node_id, edges in enumerate(self.adjacency_list):
            if self.vertices[node_id] is None and edges:
                raise InvariantError(f"removed node {node_id} still has edges {edges}")
            for other, built in edges:
                if self.vertices[other] is None:
                    raise InvariantError(f"node {node_id} is joined to removed node {other}")
                if self.adjacency_list[other].count((node_id, built)) != edges.count((other, built)):
                    raise InvariantError(f"edge {node_id} -> {other} (built={built}) is not reciprocal")

    # ------------------------------------------------------------------
    def _remove_edge(self, a: int, b: int, *, built: Optional[bool] = None) -> None:
        for from_id, to_id in ((a, b), (b, a)):
            edges = self.adjacency_list[from_id]
            for idx, (other, is_built) in enumerate(edges):
                if other == to_id and (built is None or is_built == built):
                    # swap-remove, order inside a list carries no meaning
                    edges[idx] = edges[-1]
                    edges.pop()
                    break
            else:
                raise InvariantError(f"no edge between nodes {a} and {b} to remove")
