import pytest

from tsuro.core import Board, InvariantError, MarkerPosition, Tile, find_tile_with_connection
from tsuro.validation import check_graph_consistency


def board_with_markers(*border_indices: int) -> Board:
    board = Board()
    for index in border_indices:
        assert board.place_marker(index)
    return board


def test_place_marker_rejects_taken_position():
    board = board_with_markers(36)
    assert not board.place_marker(36)
    assert board.marker_positions() == [MarkerPosition(0, 1)]


def test_next_tile_of_unmoved_marker():
    board = board_with_markers(0, 36, 28)
    assert board.next_tile_of_player(0) == (0, 5)
    assert board.next_tile_of_player(1) == (0, 0)
    assert board.next_tile_of_player(2) == (3, 0)


def test_unmoved_marker_stays_while_its_slot_is_empty():
    board = board_with_markers(0, 36)
    board.place_tile_at(Tile.from_code("14-27-36-58"), (0, 0))
    board.move_markers()
    marker = board.marker_of(0)
    assert marker.position == MarkerPosition(1, 18)
    assert not marker.has_moved
    assert marker.previous_tile is None


def test_find_path_endpoint_stops_before_empty_slot():
    board = Board()
    tile = Tile.from_code("14-27-36-58")
    board.place_tile_at(tile, (0, 0))
    assert board.find_path_endpoint((0, 0), tile.connections[0]) == MarkerPosition(3, 1)


def test_move_markers_follows_new_tile():
    board = board_with_markers(35, 36)
    board.place_tile_at(Tile.from_code("14-27-36-58"), (0, 0))
    assert board.move_markers() == []
    assert board.marker_positions() == [MarkerPosition(3, 2), MarkerPosition(2, 3)]
    for player in (0, 1):
        marker = board.marker_of(player)
        assert marker.previous_tile == (0, 0)
        assert marker.has_moved
    check_graph_consistency(board)


def test_marker_walks_along_corridor_and_leaves_board():
    board = board_with_markers(28, 0)
    assert board.place_tile(find_tile_with_connection(4, 2), 0) == (3, 0)
    assert board.move_markers() == []
    assert board.marker_of(0).position == MarkerPosition(12, 2)

    board.place_tile(find_tile_with_connection(7, 2), 0)
    assert board.move_markers() == []
    assert board.marker_of(0).position == MarkerPosition(15, 2)

    board.place_tile(find_tile_with_connection(7, 2), 0)
    assert board.move_markers() == [0]
    # eliminated markers stay put until removed
    assert board.marker_of(0).position == MarkerPosition(15, 2)
    board.eliminate_player(0)
    assert board.active_players() == [1]
    check_graph_consistency(board)


def test_suicide_when_path_reaches_edge():
    board = board_with_markers(36)
    assert board.move_is_suicide(Tile.from_code("12-34-56-78"), 0)
    assert not board.move_is_suicide(Tile.from_code("14-27-36-58"), 0)
    # the check never mutates the board
    assert board == board_with_markers(36)


def test_collision_is_detected_and_suicidal():
    board = board_with_markers(36, 33)
    board.place_tile(Tile.from_code("12-34-58-67"), 1)
    assert board.move_markers() == []
    assert board.marker_of(1).position == MarkerPosition(3, 1)
    assert board.marker_of(1).previous_tile == (1, 0)

    tile = Tile.from_code("16-25-38-47")
    assert board.find_collisions(tile, (0, 0)) == [0, 1]
    assert board.move_is_suicide(tile, 0)
    assert board.find_collisions(Tile.from_code("14-27-36-58"), (0, 0)) == []


def test_suicide_check_follows_path_back_through_candidate():
    board = board_with_markers(36)
    board.place_tile_at(Tile.from_code("12-34-56-78"), (1, 0))
    assert board.move_is_suicide(Tile.from_code("16-25-38-47"), 0)
    assert not board.move_is_suicide(Tile.from_code("16-23-47-58"), 0)

    board.place_tile_at(Tile.from_code("16-23-47-58"), (0, 0))
    assert board.move_markers() == []
    assert board.marker_of(0).position == MarkerPosition(2, 3)
    assert board.marker_of(0).previous_tile == (0, 0)
    check_graph_consistency(board)


def test_occupied_slot_raises():
    board = Board()
    board.place_tile_at(Tile.from_code("12-34-56-78"), (2, 2))
    with pytest.raises(InvariantError):
        board.place_tile_at(Tile.from_code("12-34-56-78"), (2, 2))
    with pytest.raises(InvariantError):
        board.place_tile_at(Tile.from_code("12-34-56-78"), (6, 0))


def test_eliminated_player_queries_raise():
    board = board_with_markers(0, 12)
    board.eliminate_player(1)
    assert board.marker_positions()[1] is None
    with pytest.raises(InvariantError):
        board.marker_of(1)
    with pytest.raises(InvariantError):
        board.next_tile_of_player(1)
    with pytest.raises(InvariantError):
        board.eliminate_player(1)
    with pytest.raises(InvariantError):
        board.marker_of(5)


def test_copy_is_deep():
    board = board_with_markers(36)
    clone = board.copy()
    clone.place_tile_at(Tile.from_code("14-27-36-58"), (0, 0))
    clone.move_markers()
    assert board.is_empty((0, 0))
    assert board.marker_of(0).position == MarkerPosition(0, 1)
    assert clone != board
