from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .geometry import NUM_ENTRY_POINTS

Path = Tuple[int, int]


@dataclass(frozen=True, order=True)
class Tile:
    """Eight entry points paired up into four paths.

    ``connections[i]`` is the entry point joined to ``i``; it is an involution
    without fixed points.
    """

    connections: Tuple[int, ...]

    def __post_init__(self) -> None:
        conn = tuple(int(value) for value in self.connections)
        object.__setattr__(self, "connections", conn)
        if len(conn) != NUM_ENTRY_POINTS:
            raise ValueError(f"Tile needs {NUM_ENTRY_POINTS} connections, got {len(conn)}.")
        for idx, other in enumerate(conn):
            if not 0 <= other < NUM_ENTRY_POINTS:
                raise ValueError(f"Connection {idx} -> {other} is out of range.")
            if other == idx or conn[other] != idx:
                raise ValueError(f"Connections {conn} do not pair up entry point {idx}.")

    @staticmethod
    def from_code(code: str) -> "Tile":
        """Parse a code such as ``"12-34-56-78"`` (1-indexed entry point pairs)."""
        pairs = code.strip().split("-")
        if len(pairs) != NUM_ENTRY_POINTS // 2 or any(len(pair) != 2 for pair in pairs):
            raise ValueError(f"Malformed tile code {code!r}.")
        connections = [-1] * NUM_ENTRY_POINTS
        for pair in pairs:
            if not pair.isdigit():
                raise ValueError(f"Malformed tile code {code!r}.")
            a, b = int(pair[0]) - 1, int(pair[1]) - 1
            if not (0 <= a < NUM_ENTRY_POINTS and 0 <= b < NUM_ENTRY_POINTS):
                raise ValueError(f"Entry point out of range in tile code {code!r}.")
            if connections[a] != -1 or connections[b] != -1:
                raise ValueError(f"Entry point used twice in tile code {code!r}.")
            connections[a] = b
            connections[b] = a
        return Tile(tuple(connections))

    @property
    def code(self) -> str:
        return "-".join(f"{a + 1}{b + 1}" for a, b in self.paths())

    def rotated(self, num: int) -> "Tile":
        """Rotate by ``num`` quarter turns; entry point i moves to i + 2."""
        shift = (num % 4) * 2
        return Tile(
            tuple(
                (self.connections[(idx - shift) % NUM_ENTRY_POINTS] + shift) % NUM_ENTRY_POINTS
                for idx in range(NUM_ENTRY_POINTS)
            )
        )

    def all_rotations(self) -> List["Tile"]:
        rotations: List[Tile] = []
        for num in range(4):
            tile = self.rotated(num)
            if tile not in rotations:
                rotations.append(tile)
        return rotations

    def paths(self) -> Tuple[Path, ...]:
        used = [False] * NUM_ENTRY_POINTS
        out: List[Path] = []
        for a, b in enumerate(self.connections):
            if used[a] or used[b]:
                continue
            used[a] = True
            used[b] = True
            out.append((a, b))
        return tuple(out)

    def __str__(self) -> str:
        return self.code


TILE_CODES: Tuple[str, ...] = (
    "12-34-56-78",
    "14-27-36-58",
    "15-26-37-48",
    "16-25-38-47",
    "18-23-45-67",
    "12-37-48-56",
    "12-38-47-56",
    "16-25-37-48",
    "17-24-35-68",
    "15-27-36-48",
    "17-28-35-46",
    "18-26-37-45",
    "18-27-36-45",
    "13-26-48-57",
    "15-28-37-46",
    "12-35-47-68",
    "12-36-47-58",
    "12-38-45-67",
    "12-38-46-57",
    "17-24-36-58",
    "18-23-46-57",
    "12-34-57-68",
    "12-34-58-67",
    "16-23-47-58",
    "16-28-35-47",
    "17-23-46-58",
    "17-28-36-45",
    "12-36-48-57",
    "12-37-46-58",
    "12-37-45-68",
    "12-35-48-67",
    "13-26-47-58",
    "15-28-36-47",
    "13-25-48-67",
    "16-28-37-45",
)

ALL_TILES: Tuple[Tile, ...] = tuple(Tile.from_code(code) for code in TILE_CODES)


def find_tile_with_connection(entry: int, exit: int) -> Tile:
    """First catalog tile, in any rotation, joining ``entry`` to ``exit``."""
    for tile in ALL_TILES:
        for num in range(4):
            rotated = tile.rotated(num)
            if rotated.connections[entry] == exit:
                return rotated
    raise ValueError(f"No tile connects entry point {entry} to {exit}.")
