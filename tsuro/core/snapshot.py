"""Plain-data and byte snapshots of board state.

The byte format is UTF-8 JSON with sorted keys, so equal states always encode
to equal bytes. The board graph is stored as is rather than rebuilt from the
tiles on load.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from .board import Board, Marker
from .geometry import NUM_NODES, MarkerPosition
from .graph import BoardGraph
from .tile import Tile

FORMAT_VERSION = 1


def position_to_state(position: Optional[MarkerPosition]) -> Optional[List[int]]:
    if position is None:
        return None
    return [position.x, position.y]


def position_from_state(state: Optional[List[int]]) -> Optional[MarkerPosition]:
    if state is None:
        return None
    x, y = state
    return MarkerPosition(int(x), int(y))


def tile_to_state(tile: Optional[Tile]) -> Optional[str]:
    return None if tile is None else tile.code


def tile_from_state(state: Optional[str]) -> Optional[Tile]:
    return None if state is None else Tile.from_code(state)


def marker_to_state(marker: Optional[Marker]) -> Optional[Dict[str, Any]]:
    if marker is None:
        return None
    previous = marker.previous_tile
    return {
        "position": position_to_state(marker.position),
        "previous_tile": None if previous is None else [previous[0], previous[1]],
        "has_moved": marker.has_moved,
    }


def marker_from_state(state: Optional[Dict[str, Any]]) -> Optional[Marker]:
    if state is None:
        return None
    previous = state.get("previous_tile")
    return Marker(
        position=position_from_state(state["position"]),
        previous_tile=None if previous is None else (int(previous[0]), int(previous[1])),
        has_moved=bool(state.get("has_moved", False)),
    )


def graph_to_state(graph: BoardGraph) -> Dict[str, Any]:
    return {
        "vertices": [position_to_state(position) for position in graph.vertices],
        "adjacency": [[[other, built] for other, built in edges] for edges in graph.adjacency_list],
    }


def graph_from_state(state: Dict[str, Any]) -> BoardGraph:
    vertices = state["vertices"]
    adjacency = state["adjacency"]
    if len(vertices) != NUM_NODES or len(adjacency) != NUM_NODES:
        raise ValueError(f"Graph state must describe {NUM_NODES} nodes.")
    graph = BoardGraph.__new__(BoardGraph)
    graph.vertices = [position_from_state(position) for position in vertices]
    graph.adjacency_list = [[(int(other), bool(built)) for other, built in edges] for edges in adjacency]
    return graph


def board_to_state(board: Board) -> Dict[str, Any]:
    return {
        "tiles": [[tile_to_state(tile) for tile in column] for column in board.tiles],
        "markers": [marker_to_state(marker) for marker in board.markers],
        "graph": graph_to_state(board.graph),
    }


def board_from_state(state: Dict[str, Any]) -> Board:
    board = Board.__new__(Board)
    board.tiles = [[tile_from_state(code) for code in column] for column in state["tiles"]]
    board.markers = [marker_from_state(marker) for marker in state["markers"]]
    board.graph = graph_from_state(state["graph"])
    return board


def encode(state: Dict[str, Any]) -> bytes:
    payload = {"format": FORMAT_VERSION, "state": state}
    return json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")


def decode(data: bytes) -> Dict[str, Any]:
    payload = json.loads(data.decode("utf-8"))
    if not isinstance(payload, dict) or payload.get("format") != FORMAT_VERSION:
        raise ValueError("Unsupported snapshot format.")
    return payload["state"]


def board_to_bytes(board: Board) -> bytes:
    return encode(board_to_state(board))


def board_from_bytes(data: bytes) -> Board:
    return board_from_state(decode(data))
