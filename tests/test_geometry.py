import pytest

from tsuro.core import ALL_NODES, BORDER_POSITIONS, NUM_NODES, InvariantError, MarkerPosition, tile_positions


def test_node_ids_cover_every_position_once():
    ids = [position.node_id() for position in ALL_NODES]
    assert sorted(ids) == list(range(NUM_NODES))
    for position in ALL_NODES:
        assert MarkerPosition.from_node_id(position.node_id()) == position


def test_border_index_round_trip():
    assert len(BORDER_POSITIONS) == 48
    for index, position in enumerate(BORDER_POSITIONS):
        assert position.is_edge()
        assert position.border_index() == index
        assert MarkerPosition.from_border_index(index) == position


def test_border_index_landmarks():
    assert MarkerPosition.from_border_index(0).coords == (1, 18)
    assert MarkerPosition.from_border_index(28).coords == (11, 0)
    assert MarkerPosition.from_border_index(35).coords == (1, 0)
    assert MarkerPosition.from_border_index(36).coords == (0, 1)


def test_interior_position_has_two_entry_points():
    position = MarkerPosition(3, 1)
    assert position.entry_point_indices() == (((1, 0), 6), ((0, 0), 3))
    assert not position.is_edge()
    assert position.border_index() is None


def test_entry_points_agree_from_both_tiles():
    for position in ALL_NODES:
        for coord, entry_point in position.entry_point_indices():
            assert MarkerPosition.from_entry_point(coord, entry_point) == position


def test_tile_positions_follow_entry_point_order():
    positions = tile_positions((0, 0))
    assert [p.coords for p in positions] == [(1, 3), (2, 3), (3, 2), (3, 1), (2, 0), (1, 0), (0, 1), (0, 2)]


@pytest.mark.parametrize("coords", [(0, 0), (1, 1), (3, 3), (19, 1), (-1, 2)])
def test_invalid_lattice_points_raise(coords):
    with pytest.raises(InvariantError):
        MarkerPosition(*coords)


def test_out_of_range_lookups_raise():
    with pytest.raises(InvariantError):
        MarkerPosition.from_border_index(48)
    with pytest.raises(InvariantError):
        MarkerPosition.from_node_id(NUM_NODES)
    with pytest.raises(InvariantError):
        MarkerPosition.from_entry_point((6, 0), 0)
