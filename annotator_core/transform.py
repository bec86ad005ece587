"""
Coordinate transforms between view space and original image space.

The view is the (possibly zoomed) original image scaled to fit the window
while preserving the aspect ratio. Every position transform goes through
``pos_transform`` so that both axes are always treated the same way.
"""

from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Tuple

from annotator_core.geometry import BB, Point, Shape

# (coordinate, size of the scaled axis, size of the unscaled axis, offset)
CoordTransform = Callable[[int, int, int, int], int]


def shape_unscaled(zoom_box: Optional[BB], shape_orig: Shape) -> Shape:
    """Shape without scaling to the window."""
    return zoom_box.shape() if zoom_box is not None else shape_orig


def shape_scaled(shape_unscaled: Shape, shape_win: Shape) -> Shape:
    """Shape of the image that fits into the window."""
    w_ratio = shape_unscaled.w / shape_win.w
    h_ratio = shape_unscaled.h / shape_win.h
    ratio = max(w_ratio, h_ratio)
    return Shape(w=int(shape_unscaled.w / ratio), h=int(shape_unscaled.h / ratio))


def pos_transform(
    pos: Point,
    shape_orig: Shape,
    shape_win: Shape,
    zoom_box: Optional[BB],
    transform: CoordTransform,
) -> Point:
    unscaled = shape_unscaled(zoom_box, shape_orig)
    scaled = shape_scaled(unscaled, shape_win)
    x_off, y_off = (zoom_box.x, zoom_box.y) if zoom_box is not None else (0, 0)
    x, y = pos
    return (
        transform(x, scaled.w, unscaled.w, x_off),
        transform(y, scaled.h, unscaled.h, y_off),
    )


def coord_view_2_orig(x: int, n_transformed: int, n_orig: int, off: int) -> int:
    """
    Original pixel whose area contains the center of view pixel ``x``.

    The result is clamped to ``[off, off + n_orig - 1]``, so every visible view
    pixel maps into the zoom box.
    """
    tmp = ((2 * x + 1) * n_orig) // (2 * n_transformed)
    return off + min(max(tmp, 0), n_orig - 1)


def coord_orig_2_view(x: int, n_transformed: int, n_orig: int, off: int) -> int:
    """
    View pixel whose center is closest to the center of original pixel ``x``.

    Ties go to the lower view pixel. Together with ``coord_view_2_orig`` an
    original pixel maps back to itself when scaling up, and a view pixel maps
    back to itself when scaling down.
    """
    num = (2 * (x - off) + 1) * n_transformed - 2 * n_orig
    tmp = -(-num // (2 * n_orig))
    return min(max(tmp, 0), n_transformed - 1)


def coord_orig_2_view_edge(x: int, n_transformed: int, n_orig: int, off: int) -> int:
    """First view pixel that shows an original pixel at or behind the edge ``x``."""
    num = 2 * (x - off) * n_transformed - n_orig
    return max(-(-num // (2 * n_orig)), 0)


def view_pos_to_orig_pos(
    view_pos: Point, shape_orig: Shape, shape_win: Shape, zoom_box: Optional[BB]
) -> Point:
    """Converts the position of a pixel in the view to original image coordinates."""
    return pos_transform(view_pos, shape_orig, shape_win, zoom_box, coord_view_2_orig)


def orig_pos_to_view_pos(
    orig_pos: Point, shape_orig: Shape, shape_win: Shape, zoom_box: Optional[BB]
) -> Optional[Point]:
    """
    Converts the position of a pixel in the original image to view coordinates.

    Returns None if the position is not visible with the current zoom box.
    An original pixel maps back to itself when the view is scaled up. Going
    from the view to the original and back lands within half the size of an
    original pixel in the view, and on the same pixel when scaled down.
    """
    if zoom_box is not None and not zoom_box.contains(orig_pos):
        return None
    return pos_transform(orig_pos, shape_orig, shape_win, zoom_box, coord_orig_2_view)


def mouse_pos_to_orig_pos(
    mouse_pos: Optional[Point],
    shape_orig: Shape,
    shape_win: Shape,
    zoom_box: Optional[BB],
) -> Optional[Point]:
    """Original image position under the mouse, None if the mouse is off the image."""
    if mouse_pos is None:
        return None
    shape_view = shape_scaled(shape_unscaled(zoom_box, shape_orig), shape_win)
    if not (0 <= mouse_pos[0] < shape_view.w and 0 <= mouse_pos[1] < shape_view.h):
        return None
    return view_pos_to_orig_pos(mouse_pos, shape_orig, shape_win, zoom_box)


def orig_coord_to_view_coord(
    coord: int,
    n_coords: int,
    n_pixels_scaled: int,
    min_max: Optional[Tuple[int, int]],
) -> Optional[int]:
    if min_max is not None:
        mn, mx = min_max
        if coord < mn or mx <= coord:
            return None
        return coord_orig_2_view_edge(coord, n_pixels_scaled, mx - mn, mn)
    return coord_orig_2_view_edge(coord, n_pixels_scaled, n_coords, 0)


def project_on_bb(p: Point, bb: BB) -> Point:
    """Clamp a point to the pixels covered by ``bb``."""
    x = min(max(p[0], bb.x), bb.x + bb.w - 1)
    y = min(max(p[1], bb.y), bb.y + bb.h - 1)
    return (x, y)


@dataclass(frozen=True)
class ViewCorners:
    """Box edges in view coordinates. An edge that is out of view is None."""

    x_min: Optional[int]
    y_min: Optional[int]
    x_max: Optional[int]
    y_max: Optional[int]

    def to_tuple(self) -> Tuple[Optional[int], Optional[int], Optional[int], Optional[int]]:
        return (self.x_min, self.y_min, self.x_max, self.y_max)

    def to_bb(self) -> Optional[BB]:
        if None in self.to_tuple():
            return None
        return BB.from_points((self.x_min, self.y_min), (self.x_max, self.y_max))


def to_view_corners(
    bb: BB, shape_orig: Shape, shape_win: Shape, zoom_box: Optional[BB]
) -> ViewCorners:
    """Project the edges of ``bb`` into the view, clipped to the zoom box."""
    if zoom_box is not None:
        x_min = max(zoom_box.x, bb.x)
        y_min = max(zoom_box.y, bb.y)
        x_max = min(zoom_box.x_max, bb.x_max)
        y_max = min(zoom_box.y_max, bb.y_max)
        min_max_x: Optional[Tuple[int, int]] = zoom_box.min_max(0)
        min_max_y: Optional[Tuple[int, int]] = zoom_box.min_max(1)
    else:
        (x_min, y_min), (x_max, y_max) = bb.min(), bb.max()
        min_max_x = min_max_y = None
    s_unscaled = shape_unscaled(zoom_box, shape_orig)
    s_scaled = shape_scaled(s_unscaled, shape_win)

    def tf_x(x: int) -> Optional[int]:
        return orig_coord_to_view_coord(x, s_unscaled.w, s_scaled.w, min_max_x)

    def tf_y(y: int) -> Optional[int]:
        return orig_coord_to_view_coord(y, s_unscaled.h, s_scaled.h, min_max_y)

    return ViewCorners(tf_x(x_min), tf_y(y_min), tf_x(x_max), tf_y(y_max))


def view_corner_points(view_corners: ViewCorners) -> Iterator[Point]:
    """Corners that are in view, in the corner order of ``BB.corners``."""
    x_min, y_min, x_max, y_max = view_corners.to_tuple()
    for x, y in ((x_min, y_min), (x_min, y_max), (x_max, y_max), (x_max, y_min)):
        if x is not None and y is not None:
            yield (x, y)


def view_inner_points(view_corners: ViewCorners, shape_view: Shape) -> Iterator[Point]:
    """All view pixels covered by the box, row by row."""
    x_min, y_min, x_max, y_max = view_corners.to_tuple()
    x_min = 0 if x_min is None else x_min
    y_min = 0 if y_min is None else y_min
    x_max = shape_view.w if x_max is None else x_max
    y_max = shape_view.h if y_max is None else y_max
    for y in range(y_min, y_max):
        for x in range(x_min, x_max):
            yield (x, y)


def points_on_view(
    bb: BB,
    shape_view: Shape,
    shape_orig: Shape,
    shape_win: Shape,
    zoom_box: Optional[BB],
) -> Tuple[Iterator[Point], Iterator[Point]]:
    """Boundary corners and inner pixels of ``bb`` in view coordinates."""
    view_corners = to_view_corners(bb, shape_orig, shape_win, zoom_box)
    return view_corner_points(view_corners), view_inner_points(view_corners, shape_view)
