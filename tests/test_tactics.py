import random

import pytest

from domain.models import Arrow, ItemType, Point
from domain.tactics import TacticsBoard, parse_points, point_to_segment_distance


def make_board():
    return TacticsBoard(rng=random.Random(0))


def test_point_to_segment_distance_clamps_projection():
    a = Arrow(id="a", start_x=0, start_y=0, end_x=100, end_y=0)
    assert point_to_segment_distance(Point(50, 10), a) == pytest.approx(10)
    assert point_to_segment_distance(Point(-30, 40), a) == pytest.approx(50)
    assert point_to_segment_distance(Point(130, 40), a) == pytest.approx(50)


def test_zero_length_segment_uses_start_point():
    a = Arrow(id="a", start_x=10, start_y=10, end_x=10, end_y=10)
    assert point_to_segment_distance(Point(13, 14), a) == pytest.approx(5)


def test_arrow_erased_only_below_threshold():
    board = make_board()
    board.add_arrow(Point(0, 100), Point(100, 100))
    # Exactly on the threshold is not a hit
    assert board.erase_at(Point(50, 115)) is False
    assert len(board.arrows) == 1
    assert board.erase_at(Point(50, 114)) is True
    assert board.arrows == []


def test_erase_removes_nearest_arrow_only():
    board = make_board()
    far = board.add_arrow(Point(0, 100), Point(100, 100))
    near = board.add_arrow(Point(0, 110), Point(100, 110))
    board.erase_at(Point(50, 106))
    assert [a.id for a in board.arrows] == [far.id]
    assert near not in board.arrows


def test_path_erased_by_stored_points_only():
    board = make_board()
    board.add_path([Point(0, 0), Point(100, 0)])
    # Midpoint of the stroke is 50px from any stored point
    assert board.erase_at(Point(50, 0)) is False
    assert board.erase_at(Point(100, 20)) is False
    assert board.erase_at(Point(100, 19)) is True
    assert board.paths == []


def test_erase_nearest_path():
    board = make_board()
    keep = board.add_path([Point(0, 0), Point(10, 0)])
    board.add_path([Point(0, 15), Point(10, 15)])
    board.erase_at(Point(5, 10))
    assert [p.id for p in board.paths] == [keep.id]


def test_erase_item_under_click():
    board = make_board()
    item = board.add_item(ItemType.X, 300, 300)
    assert board.erase_at(Point(305, 300)) is True
    assert item not in board.items


def test_erase_miss_does_not_push_history():
    board = make_board()
    board.add_arrow(Point(0, 0), Point(100, 0))
    depth = len(board.history)
    assert board.erase_at(Point(400, 400)) is False
    assert len(board.history) == depth


def test_short_arrow_ignored():
    board = make_board()
    assert board.add_arrow(Point(0, 0), Point(20, 20)) is None
    assert board.history == []
    assert board.add_arrow(Point(0, 0), Point(21, 0)) is not None
    assert board.add_arrow(Point(0, 0), Point(0, -21)) is not None


def test_path_needs_two_points():
    board = make_board()
    assert board.add_path([Point(1, 1)]) is None
    assert board.paths == []


def test_history_keeps_last_twenty():
    board = make_board()
    for i in range(25):
        board.add_item(ItemType.O, i, i)
    assert len(board.history) == 20
    while board.undo():
        pass
    # The oldest five actions can no longer be undone
    assert len(board.items) == 5
    assert not board.can_undo


def test_undo_restores_erased_state():
    board = make_board()
    board.add_arrow(Point(0, 0), Point(100, 0))
    board.add_item(ItemType.FOOTBALL, 50, 50)
    board.clear()
    assert board.is_empty()
    assert board.undo() is True
    assert len(board.arrows) == 1 and len(board.items) == 1


def test_move_and_remove_item():
    board = make_board()
    item = board.add_item(ItemType.X)
    assert 200 <= item.x <= 400 and 150 <= item.y <= 250
    assert board.move_item(item.id, 10, 20)
    assert (board.items[0].x, board.items[0].y) == (10, 20)
    assert board.remove_item(item.id)
    assert board.items == []
    assert board.move_item("missing", 0, 0) is False
    board.undo()
    assert (board.items[0].x, board.items[0].y) == (10, 20)


def test_parse_points():
    pts = parse_points("10,20; 30.5, 40\n50,60")
    assert [(p.x, p.y) for p in pts] == [(10, 20), (30.5, 40), (50, 60)]
    assert parse_points("") == []
    with pytest.raises(ValueError):
        parse_points("10;20")
    with pytest.raises(ValueError):
        parse_points("a,b")
