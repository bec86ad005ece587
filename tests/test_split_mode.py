import pytest

from annotator_core.annotations import BboxAnnotations, BoxEdge, SplitMode
from annotator_core.geometry import BB, Shape


@pytest.fixture
def stacked():
    """Two boxes on top of each other sharing the edge y == 10."""
    return [BB.from_arr([0, 0, 10, 10]), BB.from_arr([0, 10, 10, 10])]


def test_horizontal_shift_max_moves_touching_edge(stacked, shape_100):
    bbs = SplitMode.HORIZONTAL.shift_max_bbs(0, 5, [True, False], stacked, shape_100)
    assert bbs[0] == BB.from_arr([0, 0, 10, 15])
    assert bbs[1] == BB.from_arr([0, 15, 10, 5])
    assert bbs[0].y_max == bbs[1].y


def test_horizontal_ignores_x(stacked, shape_100):
    assert SplitMode.HORIZONTAL.shift_max_bbs(3, 5, [True, False], stacked, shape_100) == (
        SplitMode.HORIZONTAL.shift_max_bbs(0, 5, [True, False], stacked, shape_100)
    )


def test_horizontal_shift_min_moves_touching_edge(stacked, shape_100):
    bbs = SplitMode.HORIZONTAL.shift_min_bbs(0, -5, [False, True], stacked, shape_100)
    assert bbs[0] == BB.from_arr([0, 0, 10, 5])
    assert bbs[1] == BB.from_arr([0, 5, 10, 15])


def test_vertical_shift_max_moves_touching_edge(shape_100):
    bbs = [BB.from_arr([0, 0, 10, 10]), BB.from_arr([10, 0, 10, 10])]
    shifted = SplitMode.VERTICAL.shift_max_bbs(5, 7, [True, False], bbs, shape_100)
    assert shifted[0] == BB.from_arr([0, 0, 15, 10])
    assert shifted[1] == BB.from_arr([15, 0, 5, 10])


def test_no_split_mode_leaves_neighbours(stacked, shape_100):
    bbs = SplitMode.NONE.shift_max_bbs(0, 5, [True, False], stacked, shape_100)
    assert bbs[0] == BB.from_arr([0, 0, 10, 15])
    assert bbs[1] == stacked[1]


def test_neighbour_of_two_selected_boxes_moves_once(shape_100):
    bbs = [
        BB.from_arr([0, 0, 10, 10]),
        BB.from_arr([10, 0, 10, 10]),
        BB.from_arr([0, 10, 20, 10]),
    ]
    shifted = SplitMode.HORIZONTAL.shift_max_bbs(0, 5, [True, True, False], bbs, shape_100)
    assert shifted[0] == BB.from_arr([0, 0, 10, 15])
    assert shifted[1] == BB.from_arr([10, 0, 10, 15])
    assert shifted[2] == BB.from_arr([0, 15, 20, 5])


def test_split_mode_resize_through_annotations(stacked, shape_100):
    annos = BboxAnnotations.from_bbs_cats(stacked, [0, 0])
    annos.select(0)
    annos.resize_selected(0, 5, shape_100, BoxEdge.MAX, SplitMode.HORIZONTAL)
    assert annos.bbs == [BB.from_arr([0, 0, 10, 15]), BB.from_arr([0, 15, 10, 5])]
    assert annos.selected_bbs == [True, False]


@pytest.mark.parametrize(
    "split_mode, bb, mp_from, mp_to, expected",
    [
        (SplitMode.HORIZONTAL, [0, 0, 10, 10], (0, 0), (3, 4), [0, 0, 10, 14]),
        (SplitMode.HORIZONTAL, [0, 90, 10, 10], (0, 10), (0, 5), [0, 85, 10, 15]),
        (SplitMode.HORIZONTAL, [0, 20, 10, 10], (0, 0), (7, 3), [0, 23, 10, 10]),
        (SplitMode.VERTICAL, [0, 0, 10, 10], (0, 0), (4, 3), [0, 0, 14, 10]),
        (SplitMode.VERTICAL, [90, 0, 10, 10], (10, 0), (5, 0), [85, 0, 15, 10]),
        (SplitMode.NONE, [10, 10, 10, 10], (0, 0), (7, 3), [17, 13, 10, 10]),
    ],
)
def test_follow_movement(split_mode, bb, mp_from, mp_to, expected, shape_100):
    moved, new_bb = split_mode.follow_movement(BB.from_arr(bb), mp_from, mp_to, shape_100)
    assert moved
    assert new_bb == BB.from_arr(expected)


def test_follow_movement_rejected(shape_100):
    bb = BB.from_arr([90, 0, 10, 10])
    assert SplitMode.NONE.follow_movement(bb, (0, 0), (5, 0), shape_100) == (False, bb)


def test_selected_follow_movement_in_split_mode(stacked, shape_100):
    annos = BboxAnnotations.from_bbs_cats(stacked, [0, 0])
    annos.select(1)
    assert annos.selected_follow_movement((0, 0), (3, 2), shape_100, SplitMode.HORIZONTAL)
    assert annos.bbs == [stacked[0], BB.from_arr([0, 12, 10, 10])]
