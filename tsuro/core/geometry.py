from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .errors import InvariantError

Coord = Tuple[int, int]

BOARD_SIZE = 6
LATTICE_SIZE = BOARD_SIZE * 3 + 1
LATTICE_MAX = LATTICE_SIZE - 1
NUM_ENTRY_POINTS = 8
NODES_PER_LINE = BOARD_SIZE * 2
NUM_NODES = 2 * (BOARD_SIZE + 1) * NODES_PER_LINE
NUM_BORDER_POSITIONS = 4 * NODES_PER_LINE

# Lattice offset of each entry point inside its tile's 3x3 block.
# Entry 0 is the left point of the south side, numbering runs anticlockwise.
_ENTRY_OFFSET_X: Tuple[int, ...] = (1, 2, 3, 3, 2, 1, 0, 0)
_ENTRY_OFFSET_Y: Tuple[int, ...] = (3, 3, 2, 1, 0, 0, 1, 2)

# (x % 3, y % 3) -> entry point, for points on a block's north or west side
_LOCAL_ENTRY: Dict[Tuple[int, int], int] = {(2, 0): 4, (1, 0): 5, (0, 1): 6, (0, 2): 7}

# Entry point seen from the tile on the other side of a shared boundary.
_OPPOSITE_ENTRY: Dict[int, int] = {5: 0, 4: 1, 7: 2, 6: 3}


def is_valid_lattice_point(x: int, y: int) -> bool:
    if not (0 <= x <= LATTICE_MAX and 0 <= y <= LATTICE_MAX):
        return False
    return (x % 3 == 0) != (y % 3 == 0)


def in_board(coord: Coord) -> bool:
    return 0 <= coord[0] < BOARD_SIZE and 0 <= coord[1] < BOARD_SIZE


def _checked_coord(coord: Coord) -> Coord:
    if not in_board(coord):
        raise InvariantError(f"tile coordinate {coord} is off the board")
    return coord


@dataclass(frozen=True, order=True)
class MarkerPosition:
    """A point on the 19x19 lattice made by splitting each tile into 3x3 cells.

    The same point can also be read as a (tile, entry point) pair. Points inside
    the board sit on the boundary between two tiles and have two such pairs,
    points on the outer border have one.
    """

    x: int
    y: int

    def __post_init__(self) -> None:
        if not is_valid_lattice_point(self.x, self.y):
            raise InvariantError(f"({self.x}, {self.y}) is not a valid marker position")

    @property
    def coords(self) -> Coord:
        return (self.x, self.y)

    @staticmethod
    def from_entry_point(coord: Coord, entry_point: int) -> "MarkerPosition":
        if not 0 <= entry_point < NUM_ENTRY_POINTS:
            raise InvariantError(f"invalid entry point {entry_point}")
        tile_x, tile_y = _checked_coord(coord)
        return MarkerPosition(
            tile_x * 3 + _ENTRY_OFFSET_X[entry_point],
            tile_y * 3 + _ENTRY_OFFSET_Y[entry_point],
        )

    @staticmethod
    def from_border_index(index: int) -> "MarkerPosition":
        """Starting position by index; 0 is (1, 18), the bottom left corner."""
        if not 0 <= index < NUM_BORDER_POSITIONS:
            raise InvariantError(f"border index {index} out of range")
        return BORDER_POSITIONS[index]

    @staticmethod
    def from_node_id(node_id: int) -> "MarkerPosition":
        if not 0 <= node_id < NUM_NODES:
            raise InvariantError(f"node id {node_id} out of range")
        half = NUM_NODES // 2
        if node_id < half:
            line, offset = divmod(node_id, NODES_PER_LINE)
            return MarkerPosition(line * 3, offset + 1 + offset // 2)
        line, offset = divmod(node_id - half, NODES_PER_LINE)
        return MarkerPosition(offset + 1 + offset // 2, line * 3)

    def entry_point_indices(self) -> Tuple[Tuple[Coord, int], ...]:
        """Adjacent tiles with the entry point this position occupies on each.

        The tile whose 3x3 block contains the point comes first.
        """
        x, y = self.x, self.y
        if x == LATTICE_MAX:
            return (((BOARD_SIZE - 1, y // 3), 3 if y % 3 == 1 else 2),)
        if y == LATTICE_MAX:
            return (((x // 3, BOARD_SIZE - 1), 0 if x % 3 == 1 else 1),)

        tile = (x // 3, y // 3)
        entry_point = _LOCAL_ENTRY[(x % 3, y % 3)]
        if x == 0 or y == 0:
            return ((tile, entry_point),)

        if x % 3 == 0:
            neighbour = (tile[0] - 1, tile[1])
        else:
            neighbour = (tile[0], tile[1] - 1)
        return ((tile, entry_point), (neighbour, _OPPOSITE_ENTRY[entry_point]))

    def adjacent_tiles(self) -> Tuple[Coord, ...]:
        return tuple(coord for coord, _ in self.entry_point_indices())

    def entry_point_index_on(self, coord: Coord) -> Optional[int]:
        for tile, entry_point in self.entry_point_indices():
            if tile == coord:
                return entry_point
        return None

    def is_edge(self) -> bool:
        return self.x in (0, LATTICE_MAX) or self.y in (0, LATTICE_MAX)

    def node_id(self) -> int:
        x, y = self.x, self.y
        if x % 3 == 0:
            # points on vertical tile boundaries
            return (x // 3) * NODES_PER_LINE + (y - 1 - y // 3)
        # points on horizontal tile boundaries
        return NUM_NODES // 2 + (y // 3) * NODES_PER_LINE + (x - 1 - x // 3)

    def border_index(self) -> Optional[int]:
        return _BORDER_INDEX.get(self)


def _build_border_positions() -> Tuple[MarkerPosition, ...]:
    steps = [value for value in range(LATTICE_MAX) if value % 3 != 0]
    positions = []
    positions.extend(MarkerPosition(x, LATTICE_MAX) for x in steps)
    positions.extend(MarkerPosition(LATTICE_MAX, LATTICE_MAX - y) for y in steps)
    positions.extend(MarkerPosition(LATTICE_MAX - x, 0) for x in steps)
    positions.extend(MarkerPosition(0, y) for y in steps)
    return tuple(positions)


def _build_all_nodes() -> Tuple[MarkerPosition, ...]:
    return tuple(
        MarkerPosition(x, y)
        for x in range(LATTICE_SIZE)
        for y in range(LATTICE_SIZE)
        if is_valid_lattice_point(x, y)
    )


BORDER_POSITIONS: Tuple[MarkerPosition, ...] = _build_border_positions()
_BORDER_INDEX: Dict[MarkerPosition, int] = {pos: idx for idx, pos in enumerate(BORDER_POSITIONS)}
ALL_NODES: Tuple[MarkerPosition, ...] = _build_all_nodes()


def tile_positions(coord: Coord) -> Tuple[MarkerPosition, ...]:
    """The eight positions around a tile, indexed by entry point."""
    return tuple(MarkerPosition.from_entry_point(coord, idx) for idx in range(NUM_ENTRY_POINTS))
