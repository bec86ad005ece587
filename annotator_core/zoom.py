"""
Zoom box updates from zoom and pan gestures.
"""

from typing import Optional

from annotator_core.config import Config
from annotator_core.geometry import BB, Point, Shape
from annotator_core.transform import view_pos_to_orig_pos


def zoom_box_on_wheel(
    zoom_box: Optional[BB],
    shape_orig: Shape,
    y_delta: float,
    step: Optional[float] = None,
    clip_val: Optional[float] = None,
) -> BB:
    """
    Zoom in (positive delta) or out (negative delta) about the zoom box center.

    Args:
        zoom_box: Current zoom box, None for the full image
        shape_orig: Shape of the original image
        y_delta: Mouse wheel delta of one event
        step: Relative size change per unit of wheel delta
        clip_val: Maximum absolute wheel delta taken into account

    Returns:
        The new zoom box, always fitted into the original image
    """
    step = Config.ZOOM_STEP if step is None else step
    clip_val = Config.ZOOM_WHEEL_CLIP if clip_val is None else clip_val
    current_zb = zoom_box if zoom_box is not None else BB(
        x=0, y=0, w=shape_orig.w, h=shape_orig.h
    )
    y_delta_clipped = max(min(y_delta, clip_val), -clip_val)
    factor = 1.0 - y_delta_clipped * step
    return current_zb.center_scale(factor, shape_orig)


def zoom_box_from_drag(
    view_press: Point,
    view_release: Point,
    shape_orig: Shape,
    shape_win: Shape,
    zoom_box: Optional[BB],
    min_size: Optional[int] = None,
) -> Optional[BB]:
    """
    Zoom box spanned by a rectangle the user dragged in the view.

    Returns None if the rectangle is smaller than ``min_size`` along an axis
    in view coordinates or does not intersect the image.
    """
    min_size = Config.MIN_ZOOM_SIZE if min_size is None else min_size
    if (
        abs(view_press[0] - view_release[0]) < min_size
        or abs(view_press[1] - view_release[1]) < min_size
    ):
        return None
    p1 = view_pos_to_orig_pos(view_press, shape_orig, shape_win, zoom_box)
    p2 = view_pos_to_orig_pos(view_release, shape_orig, shape_win, zoom_box)
    x_min, y_min = min(p1[0], p2[0]), min(p1[1], p2[1])
    x_max = min(max(p1[0], p2[0]), shape_orig.w)
    y_max = min(max(p1[1], p2[1]), shape_orig.h)
    if x_max - x_min < 2 or y_max - y_min < 2:
        return None
    return BB.from_points((x_min, y_min), (x_max, y_max))


def zoom_box_follow_movement(
    zoom_box: Optional[BB], mp_from: Point, mp_to: Point, shape_orig: Shape
) -> Optional[BB]:
    """
    Pan the zoom box such that the image follows the mouse.

    Positions are in original image coordinates. Without a zoom box there is
    nothing to pan. A move that would leave the image keeps the old zoom box.
    """
    if zoom_box is None:
        return None
    moved = zoom_box.follow_movement(mp_to, mp_from, shape_orig)
    return moved if moved is not None else zoom_box
