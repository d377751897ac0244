from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Set, Tuple

from .errors import InvariantError
from .geometry import BOARD_SIZE, Coord, MarkerPosition, in_board, tile_positions
from .graph import BoardGraph
from .tile import Tile

logger = logging.getLogger(__name__)

TileGrid = List[List[Optional[Tile]]]


@dataclass(frozen=True)
class Marker:
    position: MarkerPosition
    # tile the marker last left; None while it still sits on its starting point
    previous_tile: Optional[Coord] = None
    has_moved: bool = False


class Board:
    """Tile grid, player markers and the derived board graph.

    ``tiles`` is indexed ``tiles[x][y]``. ``markers[player]`` is ``None`` once the
    player has been eliminated.
    """

    def __init__(self) -> None:
        self.tiles: TileGrid = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        self.markers: List[Optional[Marker]] = []
        self.graph = BoardGraph()

    def copy(self) -> "Board":
        clone = Board.__new__(Board)
        clone.tiles = [list(column) for column in self.tiles]
        clone.markers = list(self.markers)
        clone.graph = self.graph.copy()
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.tiles == other.tiles and self.markers == other.markers and self.graph == other.graph

    def __repr__(self) -> str:
        placed = sum(tile is not None for column in self.tiles for tile in column)
        return f"Board(tiles_placed={placed}, markers={self.marker_positions()})"

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def tile_at(self, coord: Coord) -> Optional[Tile]:
        return self.tiles[coord[0]][coord[1]]

    def is_empty(self, coord: Coord) -> bool:
        return self.tile_at(coord) is None

    def marker_positions(self) -> List[Optional[MarkerPosition]]:
        return [marker.position if marker is not None else None for marker in self.markers]

    def active_players(self) -> List[int]:
        return [player for player, marker in enumerate(self.markers) if marker is not None]

    def marker_of(self, player: int) -> Marker:
        if not 0 <= player < len(self.markers) or self.markers[player] is None:
            raise InvariantError(
                f"player {player} has been eliminated or has not placed a marker yet"
            )
        return self.markers[player]

    def next_tile_of_player(self, player: int) -> Coord:
        """Tile slot the player's marker moves into next."""
        marker = self.marker_of(player)
        adjacent = marker.position.adjacent_tiles()
        if marker.previous_tile is None:
            if not marker.position.is_edge():
                raise InvariantError(f"unmoved marker of player {player} is off the border")
            return adjacent[0]
        if len(adjacent) != 2:
            raise InvariantError(f"marker of player {player} is on the border after moving")
        return adjacent[1] if adjacent[0] == marker.previous_tile else adjacent[0]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def place_marker(self, border_index: int) -> bool:
        """Claim a starting position; False if another marker already holds it."""
        position = MarkerPosition.from_border_index(border_index)
        if position in self.marker_positions():
            return False
        self.markers.append(Marker(position=position))
        return True

    def place_tile(self, tile: Tile, player: int) -> Coord:
        """Place ``tile`` in the slot the player faces; returns that slot."""
        coord = self.next_tile_of_player(player)
        self.place_tile_at(tile, coord)
        return coord

    def place_tile_at(self, tile: Tile, coord: Coord) -> None:
        if not in_board(coord):
            raise InvariantError(f"tile coordinate {coord} is off the board")
        if self.tiles[coord[0]][coord[1]] is not None:
            raise InvariantError(f"tile slot {coord} is already occupied")
        self.graph.place_tile(tile, coord)
        self.tiles[coord[0]][coord[1]] = tile
        logger.debug("Placed tile %s at %s", tile, coord)

    def eliminate_player(self, player: int) -> None:
        self.marker_of(player)
        self.markers[player] = None

    def move_markers(self) -> List[int]:
        """Move every marker to the end of its path.

        Returns the players whose path reached the edge of the board; their
        markers are left where they were so the caller can eliminate them.
        """
        eliminated: List[int] = []
        for player, marker in enumerate(self.markers):
            if marker is None:
                continue
            end, moved = self._find_player_path_end(player)
            if not moved:
                continue
            if end.is_edge():
                eliminated.append(player)
                continue

            # the path stops next to an empty slot, so exactly one neighbour is placed
            first, second = end.adjacent_tiles()
            first_empty, second_empty = self.is_empty(first), self.is_empty(second)
            if first_empty == second_empty:
                raise InvariantError(f"path of player {player} stopped at {end} between {first} and {second}")
            previous = second if first_empty else first
            self.markers[player] = replace(marker, position=end, previous_tile=previous, has_moved=True)
            logger.debug("Marker of player %d moved to %s", player, end.coords)
        return eliminated

    # ------------------------------------------------------------------
    # Legality
    # ------------------------------------------------------------------
    def find_collisions(self, tile: Tile, coord: Coord) -> List[int]:
        """Players on both ends of one of ``tile``'s paths if placed at ``coord``.

        Valid before the tile is placed, or after placing it as long as the
        markers have not moved yet.
        """
        positions = tile_positions(coord)
        marker_positions = self.marker_positions()

        def player_at(position: MarkerPosition) -> Optional[int]:
            for player, marker_position in enumerate(marker_positions):
                if marker_position == position:
                    return player
            return None

        collisions: Set[int] = set()
        for entry_a, entry_b in tile.paths():
            player_a = player_at(positions[entry_a])
            player_b = player_at(positions[entry_b])
            if player_a is not None and player_b is not None:
                collisions.update((player_a, player_b))
        return sorted(collisions)

    def move_is_suicide(self, tile: Tile, active_player: int) -> bool:
        """Whether placing ``tile`` would eliminate the active player.

        The board is not modified: the path is traced across the hypothetical
        tile and then across the real board.
        """
        marker = self.marker_of(active_player)
        coord = self.next_tile_of_player(active_player)

        # Positions of the candidate slot where the traced path does not really
        # end: both neighbours are placed once the candidate is counted.
        nonterminal = set()
        for position in tile_positions(coord):
            adjacent = position.adjacent_tiles()
            if len(adjacent) == 2 and all(not self.is_empty(other) or other == coord for other in adjacent):
                nonterminal.add(position)

        seen_entries: Set[int] = set()
        position = marker.position
        while True:
            entry_point = position.entry_point_index_on(coord)
            if entry_point is None or entry_point in seen_entries:
                raise InvariantError(f"path of player {active_player} loops through {coord}")
            seen_entries.add(entry_point)
            position = self.find_path_endpoint(coord, tile.connections[entry_point])
            if position not in nonterminal:
                break

        suicide = position.is_edge() or active_player in self.find_collisions(tile, coord)
        logger.debug("Tile %s for player %d ends at %s, suicide=%s", tile, active_player, position.coords, suicide)
        return suicide

    # ------------------------------------------------------------------
    # Path tracing
    # ------------------------------------------------------------------
    def find_path_endpoint(self, coord: Coord, exit_point: int) -> MarkerPosition:
        """Follow the path leaving ``coord`` at ``exit_point`` through placed tiles.

        Stops at the board edge or in front of an empty slot.
        """
        position = MarkerPosition.from_entry_point(coord, exit_point)
        last_coord = coord
        while True:
            adjacent = position.adjacent_tiles()
            if len(adjacent) == 1:
                break
            next_coord = adjacent[1] if adjacent[0] == last_coord else adjacent[0]
            next_tile = self.tile_at(next_coord)
            if next_tile is None:
                break
            entry_point = position.entry_point_index_on(next_coord)
            position = MarkerPosition.from_entry_point(next_coord, next_tile.connections[entry_point])
            last_coord = next_coord
        return position

    def _find_player_path_end(self, player: int) -> Tuple[MarkerPosition, bool]:
        """End of the player's path and whether it differs from where the marker is."""
        marker = self.marker_of(player)
        if marker.previous_tile is None:
            coord = self.next_tile_of_player(player)
            tile = self.tile_at(coord)
            if tile is None:
                return marker.position, False
            exit_point = tile.connections[marker.position.entry_point_index_on(coord)]
        else:
            coord = marker.previous_tile
            exit_point = marker.position.entry_point_index_on(coord)
        end = self.find_path_endpoint(coord, exit_point)
        return end, end != marker.position


