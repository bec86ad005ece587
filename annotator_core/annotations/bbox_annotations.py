"""
Bounding box annotations of a single image.
"""

from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from annotator_core.annotations.core import BboxAnnotation, selected_indices
from annotator_core.annotations.split_mode import SplitMode
from annotator_core.errors import ImportDataError
from annotator_core.geometry import BB, Point, Shape
from annotator_core.logging import get_logger
from annotator_core.view import draw_bbs

logger = get_logger(__name__)


class BoxEdge(str, Enum):
    """Which corner of the selected boxes a resize moves."""

    MIN = "min"
    MAX = "max"


class BboxAnnotations:
    """
    Ordered collection of boxes with category and selection state.

    Geometry is only changed through the selection-gated operations.
    """

    def __init__(self, annos: Optional[List[BboxAnnotation]] = None):
        self._annos: List[BboxAnnotation] = list(annos) if annos else []

    @classmethod
    def from_bbs_cats(cls, bbs: Sequence[BB], cat_idxs: Sequence[int]) -> "BboxAnnotations":
        """Create annotations from parallel lists of boxes and category indices."""
        if len(bbs) != len(cat_idxs):
            raise ImportDataError(
                f"got {len(bbs)} boxes but {len(cat_idxs)} category indices"
            )
        return cls([BboxAnnotation(bb=bb, cat_idx=c) for bb, c in zip(bbs, cat_idxs)])

    def __len__(self) -> int:
        return len(self._annos)

    def __eq__(self, other) -> bool:
        if not isinstance(other, BboxAnnotations):
            return NotImplemented
        return self._annos == other._annos

    def __repr__(self) -> str:
        return f"BboxAnnotations({[str(a.bb) for a in self._annos]})"

    @property
    def bbs(self) -> List[BB]:
        return [a.bb for a in self._annos]

    @property
    def cat_idxs(self) -> List[int]:
        return [a.cat_idx for a in self._annos]

    @property
    def selected_bbs(self) -> List[bool]:
        return [a.selected for a in self._annos]

    def to_data(self) -> Tuple[List[BB], List[int]]:
        return self.bbs, self.cat_idxs

    def _set_bbs(self, bbs: List[BB]):
        for anno, bb in zip(self._annos, bbs):
            anno.bb = bb

    def add_bb(self, bb: BB, cat_idx: int):
        self._annos.append(BboxAnnotation(bb=bb, cat_idx=cat_idx))

    def add_bbs(self, bbs: Sequence[BB], cat_idxs: Sequence[int]):
        for bb, cat_idx in zip(bbs, cat_idxs):
            self.add_bb(bb, cat_idx)

    def remove(self, box_idx: int) -> BB:
        return self._annos.pop(box_idx).bb

    def remove_selected(self):
        """Remove all selected boxes keeping the order of the others."""
        n_before = len(self._annos)
        self._annos = [a for a in self._annos if not a.selected]
        logger.debug(f"removed {n_before - len(self._annos)} selected boxes")

    def clear(self):
        self._annos.clear()

    def select(self, box_idx: int):
        self._annos[box_idx].selected = True

    def deselect(self, box_idx: int):
        self._annos[box_idx].selected = False

    def toggle_selection(self, box_idx: int):
        self._annos[box_idx].selected = not self._annos[box_idx].selected

    def select_all(self):
        for anno in self._annos:
            anno.selected = True

    def deselect_all(self):
        for anno in self._annos:
            anno.selected = False

    def selected_indices(self) -> Iterator[int]:
        return selected_indices(self.selected_bbs)

    def set_cat_idx(self, box_idx: int, cat_idx: int):
        self._annos[box_idx].cat_idx = cat_idx

    def label_selected(self, cat_idx: int):
        """Assign a category to all selected boxes."""
        for anno in self._annos:
            if anno.selected:
                anno.cat_idx = cat_idx

    def reduce_cat_idxs(self, removed_cat_idx: int):
        """Shift category indices after the category ``removed_cat_idx`` was deleted."""
        threshold = max(removed_cat_idx, 1)
        for anno in self._annos:
            if anno.cat_idx >= threshold:
                anno.cat_idx -= 1

    def find_closest_containing(self, p: Point) -> Optional[int]:
        """Index of the smallest box containing ``p``."""
        containing = [(a.bb.w * a.bb.h, i) for i, a in enumerate(self._annos) if a.bb.contains(p)]
        if not containing:
            return None
        return min(containing)[1]

    def shift_min_bbs(
        self, x_shift: int, y_shift: int, shape_orig: Shape, split_mode: SplitMode = SplitMode.NONE
    ):
        self._set_bbs(split_mode.shift_min_bbs(x_shift, y_shift, self.selected_bbs, self.bbs, shape_orig))

    def shift_max_bbs(
        self, x_shift: int, y_shift: int, shape_orig: Shape, split_mode: SplitMode = SplitMode.NONE
    ):
        self._set_bbs(split_mode.shift_max_bbs(x_shift, y_shift, self.selected_bbs, self.bbs, shape_orig))

    def resize_selected(
        self,
        x_shift: int,
        y_shift: int,
        shape_orig: Shape,
        edge: BoxEdge,
        split_mode: SplitMode = SplitMode.NONE,
    ):
        """Move the min or max corner of every selected box, neighbours follow in split mode."""
        if edge is BoxEdge.MIN:
            self.shift_min_bbs(x_shift, y_shift, shape_orig, split_mode)
        else:
            self.shift_max_bbs(x_shift, y_shift, shape_orig, split_mode)

    def selected_follow_movement(
        self,
        mp_from: Point,
        mp_to: Point,
        shape_orig: Shape,
        split_mode: SplitMode = SplitMode.NONE,
    ) -> bool:
        """
        Move every selected box by the mouse movement.

        Boxes that would leave the image stay where they are.

        Returns:
            True if at least one box moved
        """
        moved_any = False
        for anno in self._annos:
            if anno.selected:
                has_moved, anno.bb = split_mode.follow_movement(anno.bb, mp_from, mp_to, shape_orig)
                moved_any = moved_any or has_moved
        return moved_any

    def draw_on_view(
        self,
        im_view: np.ndarray,
        zoom_box: Optional[BB],
        shape_orig: Shape,
        shape_win: Shape,
        colors: Sequence[Sequence[int]],
    ) -> np.ndarray:
        box_colors = [colors[c] for c in self.cat_idxs]
        return draw_bbs(
            im_view, shape_orig, shape_win, zoom_box, self.bbs, self.selected_bbs, box_colors
        )
