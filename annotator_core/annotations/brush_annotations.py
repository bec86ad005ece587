"""
Freehand brush strokes of a single image.
"""

from typing import Iterator, List, Optional, Sequence

import numpy as np

from annotator_core.annotations.core import BrushStroke, selected_indices
from annotator_core.geometry import BB, Point, Shape, find_enclosing_bb
from annotator_core.view import draw_strokes


class BrushAnnotations:
    """Ordered collection of strokes. The last stroke is the one being drawn."""

    def __init__(self, strokes: Optional[List[BrushStroke]] = None):
        self._strokes: List[BrushStroke] = list(strokes) if strokes else []

    def __len__(self) -> int:
        return len(self._strokes)

    def __eq__(self, other) -> bool:
        if not isinstance(other, BrushAnnotations):
            return NotImplemented
        return self._strokes == other._strokes

    @property
    def strokes(self) -> List[List[Point]]:
        return [list(s.points) for s in self._strokes]

    @property
    def cat_idxs(self) -> List[int]:
        return [s.cat_idx for s in self._strokes]

    @property
    def selected(self) -> List[bool]:
        return [s.selected for s in self._strokes]

    def start_stroke(self, cat_idx: int):
        self._strokes.append(BrushStroke(cat_idx=cat_idx))

    def extend_stroke(self, point: Point):
        """Append a point to the current stroke, starting one if there is none."""
        if not self._strokes:
            self.start_stroke(0)
        self._strokes[-1].points.append(point)

    def add_stroke(self, points: Sequence[Point], cat_idx: int):
        self._strokes.append(BrushStroke(points=list(points), cat_idx=cat_idx))

    def remove(self, idx: int) -> List[Point]:
        return self._strokes.pop(idx).points

    def remove_selected(self):
        self._strokes = [s for s in self._strokes if not s.selected]

    def remove_empty(self):
        """Drop strokes without points, e.g. from a click without movement."""
        self._strokes = [s for s in self._strokes if s.points]

    def clear(self):
        self._strokes.clear()

    def select(self, idx: int):
        self._strokes[idx].selected = True

    def deselect(self, idx: int):
        self._strokes[idx].selected = False

    def toggle_selection(self, idx: int):
        self._strokes[idx].selected = not self._strokes[idx].selected

    def deselect_all(self):
        for stroke in self._strokes:
            stroke.selected = False

    def selected_indices(self) -> Iterator[int]:
        return selected_indices(self.selected)

    def set_cat_idx(self, idx: int, cat_idx: int):
        self._strokes[idx].cat_idx = cat_idx

    def reduce_cat_idxs(self, removed_cat_idx: int):
        threshold = max(removed_cat_idx, 1)
        for stroke in self._strokes:
            if stroke.cat_idx >= threshold:
                stroke.cat_idx -= 1

    def enclosing_bb(self, idx: int) -> BB:
        return find_enclosing_bb(self._strokes[idx].points)

    def draw_on_view(
        self,
        im_view: np.ndarray,
        zoom_box: Optional[BB],
        shape_orig: Shape,
        shape_win: Shape,
        colors: Sequence[Sequence[int]],
    ) -> np.ndarray:
        stroke_colors = [colors[c] for c in self.cat_idxs]
        return draw_strokes(
            im_view, shape_orig, shape_win, zoom_box, self.strokes, self.selected, stroke_colors
        )
