from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from .board import Board
from .tile import Tile


@dataclass
class View:
    """What a player sees: the board, their own hand and whose turn it is."""

    board: Board
    hand: List[Tile] = field(default_factory=list)
    active_player: int = 0

    def all_rotated_tiles(self) -> List[Tile]:
        return sorted({tile.rotated(num) for tile in self.hand for num in range(4)})

    def afterstates(self) -> List[Tuple[Tile, Board]]:
        """Boards reached by each allowed placement for the active player.

        Colliding players are eliminated, then markers are moved and players
        reaching the edge are eliminated on each resulting board. Suicidal tiles
        are left out unless all of them are.
        """
        tiles = self.all_rotated_tiles()
        suicide = [self.board.move_is_suicide(tile, self.active_player) for tile in tiles]
        all_suicide = all(suicide)
        coord = self.board.next_tile_of_player(self.active_player)

        out: List[Tuple[Tile, Board]] = []
        for tile, is_suicide in zip(tiles, suicide):
            if is_suicide and not all_suicide:
                continue
            board = self.board.copy()
            for player in board.find_collisions(tile, coord):
                board.eliminate_player(player)
            board.place_tile_at(tile, coord)
            for player in board.move_markers():
                board.eliminate_player(player)
            out.append((tile, board))
        return out
