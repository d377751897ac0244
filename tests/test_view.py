from tsuro.core import Board, MarkerPosition, Tile, View


def view_with_hand(*codes: str) -> View:
    board = Board()
    board.place_marker(36)
    board.place_marker(0)
    return View(board=board, hand=[Tile.from_code(code) for code in codes], active_player=0)


def test_all_rotated_tiles_are_sorted_and_unique():
    view = view_with_hand("12-34-56-78", "12-38-47-56", "12-38-47-56")
    tiles = view.all_rotated_tiles()
    assert tiles == sorted(set(tiles))
    assert len(tiles) == 3


def test_afterstates_skip_suicidal_tiles():
    view = view_with_hand("12-34-56-78", "14-27-36-58")
    afterstates = view.afterstates()
    assert [tile.code for tile, _ in afterstates] == ["14-27-36-58"]
    _, board = afterstates[0]
    assert board.marker_of(0).position == MarkerPosition(2, 3)
    # the view's own board is untouched
    assert view.board.is_empty((0, 0))


def test_afterstates_keep_suicide_when_nothing_else_is_left():
    view = view_with_hand("12-34-56-78")
    afterstates = view.afterstates()
    assert len(afterstates) == 1
    _, board = afterstates[0]
    assert board.active_players() == [1]
    assert board.tile_at((0, 0)) == Tile.from_code("12-34-56-78")
