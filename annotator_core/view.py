"""
View image derivation and annotation drawing with OpenCV and numpy.

Images are ``numpy.ndarray`` of shape ``(height, width, 3)`` and dtype uint8
in RGB channel order.
"""

from typing import List, Optional, Sequence

import cv2
import numpy as np

from annotator_core.geometry import BB, Point, Shape
from annotator_core.transform import ViewCorners, orig_pos_to_view_pos, shape_scaled, to_view_corners

BBOX_ALPHA = 90
BBOX_ALPHA_SELECTED = 170
BRUSH_THICKNESS = 2


def orig_to_view(im_orig: np.ndarray, zoom_box: Optional[BB]) -> np.ndarray:
    """Crop the original image to the zoom box."""
    if zoom_box is None:
        return im_orig.copy()
    return im_orig[zoom_box.y:zoom_box.y_max, zoom_box.x:zoom_box.x_max].copy()


def scale_to_win(im: np.ndarray, shape_win: Shape) -> np.ndarray:
    """Scale an image to fit the window while keeping the aspect ratio."""
    shape_im = Shape.from_im(im)
    if shape_im.is_empty() or shape_win.is_empty():
        return im
    target = shape_scaled(shape_im, shape_win)
    if target == shape_im:
        return im
    return cv2.resize(
        im, (max(target.w, 1), max(target.h, 1)), interpolation=cv2.INTER_NEAREST
    )


def make_view(im_orig: np.ndarray, zoom_box: Optional[BB], shape_win: Shape) -> np.ndarray:
    return scale_to_win(orig_to_view(im_orig, zoom_box), shape_win)


def make_loading_image(shape: Shape, tile: int = 32) -> np.ndarray:
    """Checkerboard placeholder shown while the real image is loading."""
    ys, xs = np.mgrid[0:shape.h, 0:shape.w]
    checker = ((xs // tile + ys // tile) % 2).astype(np.uint8)
    gray = np.where(checker == 1, 96, 160).astype(np.uint8)
    return np.repeat(gray[:, :, None], 3, axis=2)


def apply_alpha(pixels: np.ndarray, color: Sequence[int], alpha: int) -> np.ndarray:
    """Blend ``color`` over ``pixels`` with an alpha in ``[0, 255]``."""
    clr = np.asarray(color, dtype=np.float32)
    blended = (alpha * clr + (255 - alpha) * pixels.astype(np.float32)) / 255.0
    return np.clip(np.round(blended), 0, 255).astype(np.uint8)


def draw_bx_on_image(
    im: np.ndarray, view_corners: ViewCorners, color: Sequence[int], alpha: int
) -> np.ndarray:
    """
    Draw a box given by its view corners.

    The inside is tinted with ``color``. Only edges that are in view are drawn
    as solid lines.
    """
    x_min, y_min, x_max, y_max = view_corners.to_tuple()
    if all(v is None for v in (x_min, y_min, x_max, y_max)):
        return im
    h_im, w_im = im.shape[:2]
    x0 = 0 if x_min is None else min(x_min, w_im)
    y0 = 0 if y_min is None else min(y_min, h_im)
    x1 = w_im if x_max is None else min(x_max, w_im)
    y1 = h_im if y_max is None else min(y_max, h_im)
    if x1 <= x0 or y1 <= y0:
        return im
    im[y0:y1, x0:x1] = apply_alpha(im[y0:y1, x0:x1], color, alpha)
    solid = np.asarray(color, dtype=np.uint8)
    if y_min is not None:
        im[y0, x0:x1] = solid
    if y_max is not None:
        im[y1 - 1, x0:x1] = solid
    if x_min is not None:
        im[y0:y1, x0] = solid
    if x_max is not None:
        im[y0:y1, x1 - 1] = solid
    return im


def draw_bbs(
    im_view: np.ndarray,
    shape_orig: Shape,
    shape_win: Shape,
    zoom_box: Optional[BB],
    bbs: Sequence[BB],
    selected: Sequence[bool],
    colors: Sequence[Sequence[int]],
) -> np.ndarray:
    """
    Draw boxes on the view, selected ones more opaque. One color per box.

    Boxes outside the zoom box are not drawn.
    """
    for bb, is_selected, color in zip(bbs, selected, colors):
        if zoom_box is not None and not bb.intersects(zoom_box):
            continue
        alpha = BBOX_ALPHA_SELECTED if is_selected else BBOX_ALPHA
        view_corners = to_view_corners(bb, shape_orig, shape_win, zoom_box)
        im_view = draw_bx_on_image(im_view, view_corners, color, alpha)
    return im_view


def draw_strokes(
    im_view: np.ndarray,
    shape_orig: Shape,
    shape_win: Shape,
    zoom_box: Optional[BB],
    strokes: Sequence[Sequence[Point]],
    selected: Sequence[bool],
    colors: Sequence[Sequence[int]],
) -> np.ndarray:
    """Draw strokes as poly lines. Parts outside the zoom box are skipped."""
    for stroke, is_selected, color in zip(strokes, selected, colors):
        thickness = BRUSH_THICKNESS * 2 if is_selected else BRUSH_THICKNESS
        segment: List[Point] = []
        for p in list(stroke) + [None]:
            view_p = None if p is None else orig_pos_to_view_pos(p, shape_orig, shape_win, zoom_box)
            if view_p is not None:
                segment.append(view_p)
                continue
            if segment:
                pts = np.asarray(segment, dtype=np.int32).reshape((-1, 1, 2))
                cv2.polylines(im_view, [pts], False, tuple(int(c) for c in color), thickness)
            segment = []
    return im_view
