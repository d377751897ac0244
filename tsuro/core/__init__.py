"""Core board engine for Tsuro."""

from .errors import InvariantError
from .geometry import (
    ALL_NODES,
    BOARD_SIZE,
    BORDER_POSITIONS,
    LATTICE_SIZE,
    NUM_BORDER_POSITIONS,
    NUM_ENTRY_POINTS,
    NUM_NODES,
    Coord,
    MarkerPosition,
    tile_positions,
)
from .tile import ALL_TILES, TILE_CODES, Tile, find_tile_with_connection
from .graph import BoardGraph
from .board import Board, Marker
from .view import View
from .snapshot import board_from_bytes, board_to_bytes

__all__ = [
    "InvariantError",
    "ALL_NODES",
    "BOARD_SIZE",
    "BORDER_POSITIONS",
    "LATTICE_SIZE",
    "NUM_BORDER_POSITIONS",
    "NUM_ENTRY_POINTS",
    "NUM_NODES",
    "Coord",
    "MarkerPosition",
    "tile_positions",
    "ALL_TILES",
    "TILE_CODES",
    "Tile",
    "find_tile_with_connection",
    "BoardGraph",
    "Board",
    "Marker",
    "View",
    "board_from_bytes",
    "board_to_bytes",
]
