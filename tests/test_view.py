import numpy as np

from annotator_core.geometry import BB, Shape
from annotator_core.view import draw_bbs, make_view

RED = (255, 0, 0)


def zoomed_view():
    shape = Shape(w=100, h=100)
    zoom_box = BB.from_arr([50, 50, 50, 50])
    im_view = make_view(np.zeros((100, 100, 3), dtype=np.uint8), zoom_box, shape)
    return im_view, shape, zoom_box


def test_make_view_scales_zoom_box_to_window():
    im_view, _, _ = zoomed_view()
    assert im_view.shape == (100, 100, 3)


def test_box_outside_zoom_box_is_not_drawn():
    im_view, shape, zoom_box = zoomed_view()
    im_view = draw_bbs(im_view, shape, shape, zoom_box, [BB.from_arr([0, 60, 10, 10])], [False], [RED])
    assert not im_view.any()


def test_box_inside_zoom_box_is_drawn():
    im_view, shape, zoom_box = zoomed_view()
    im_view = draw_bbs(im_view, shape, shape, zoom_box, [BB.from_arr([60, 60, 10, 10])], [False], [RED])
    assert im_view[30, 30].any()
    assert not im_view[10, 10].any()
    assert not im_view[45, 45].any()
