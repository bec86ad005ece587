"""
Split mode couples adjacent boxes along a shared edge.

In horizontal split mode boxes are rows of an image: resizing the bottom edge
of one box also moves the top edge of every box that starts where the resized
box ends, so neighbouring rows neither overlap nor leave a gap. Vertical split
mode does the same for columns.
"""

from enum import Enum
from typing import Callable, List, Sequence, Tuple

from annotator_core.annotations.core import Resize, resize_bbs, resize_bbs_inds, selected_indices
from annotator_core.geometry import BB, Point, Shape

EdgeKey = Callable[[BB], int]


def resize_bbs_by_key(
    bbs: List[BB],
    selected: Sequence[bool],
    shiftee_key: EdgeKey,
    candidate_key: EdgeKey,
    resize: Resize,
) -> List[BB]:
    """
    Resize every box whose candidate edge touches the shiftee edge of a selected box.

    Edge values are taken before any box is moved.
    """
    opposite_shiftees: List[int] = []
    for shiftee_idx in selected_indices(selected):
        edge = shiftee_key(bbs[shiftee_idx])
        for i, candidate in enumerate(bbs):
            if candidate_key(candidate) == edge and i not in opposite_shiftees:
                opposite_shiftees.append(i)
    return resize_bbs_inds(bbs, opposite_shiftees, resize)


class SplitMode(str, Enum):
    """Constraint that couples resizes of adjacent boxes."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    NONE = "none"

    def zero_direction(self, x_shift: int, y_shift: int) -> Tuple[int, int]:
        """Restrict a shift to the split axis."""
        if self is SplitMode.HORIZONTAL:
            return (0, y_shift)
        if self is SplitMode.VERTICAL:
            return (x_shift, 0)
        return (x_shift, y_shift)

    def shift_min_bbs(
        self,
        x_shift: int,
        y_shift: int,
        selected: Sequence[bool],
        bbs: List[BB],
        shape_orig: Shape,
    ) -> List[BB]:
        """Move the minimum edges of the selected boxes."""
        x_shift, y_shift = self.zero_direction(x_shift, y_shift)

        def shift_neighbour(bb: BB):
            return bb.shift_max(x_shift, y_shift, shape_orig)

        if self is SplitMode.HORIZONTAL:
            bbs = resize_bbs_by_key(
                bbs, selected, lambda bb: bb.y, lambda bb: bb.y_max, shift_neighbour
            )
        elif self is SplitMode.VERTICAL:
            bbs = resize_bbs_by_key(
                bbs, selected, lambda bb: bb.x, lambda bb: bb.x_max, shift_neighbour
            )
        return resize_bbs(
            bbs, selected, lambda bb: bb.shift_min(x_shift, y_shift, shape_orig)
        )

    def shift_max_bbs(
        self,
        x_shift: int,
        y_shift: int,
        selected: Sequence[bool],
        bbs: List[BB],
        shape_orig: Shape,
    ) -> List[BB]:
        """Move the maximum edges of the selected boxes."""
        x_shift, y_shift = self.zero_direction(x_shift, y_shift)

        def shift_neighbour(bb: BB):
            return bb.shift_min(x_shift, y_shift, shape_orig)

        if self is SplitMode.HORIZONTAL:
            bbs = resize_bbs_by_key(
                bbs, selected, lambda bb: bb.y_max, lambda bb: bb.y, shift_neighbour
            )
        elif self is SplitMode.VERTICAL:
            bbs = resize_bbs_by_key(
                bbs, selected, lambda bb: bb.x_max, lambda bb: bb.x, shift_neighbour
            )
        return resize_bbs(
            bbs, selected, lambda bb: bb.shift_max(x_shift, y_shift, shape_orig)
        )

    def follow_movement(
        self, bb: BB, mp_from: Point, mp_to: Point, shape_orig: Shape
    ) -> Tuple[bool, BB]:
        """
        Move a box with the mouse.

        In split mode only the split axis moves. A box touching the image
        border with its leading edge stays pinned there and is resized
        instead of moved.

        Returns:
            Whether the box changed and the resulting box
        """
        x_shift, y_shift = self.zero_direction(
            mp_to[0] - mp_from[0], mp_to[1] - mp_from[1]
        )
        if self is SplitMode.HORIZONTAL and y_shift > 0 and bb.y == 0:
            moved = bb.shift_max(0, y_shift, shape_orig)
        elif self is SplitMode.HORIZONTAL and y_shift < 0 and bb.y_max == shape_orig.h:
            moved = bb.shift_min(0, y_shift, shape_orig)
        elif self is SplitMode.VERTICAL and x_shift > 0 and bb.x == 0:
            moved = bb.shift_max(x_shift, 0, shape_orig)
        elif self is SplitMode.VERTICAL and x_shift < 0 and bb.x_max == shape_orig.w:
            moved = bb.shift_min(x_shift, 0, shape_orig)
        else:
            moved = bb.translate(x_shift, y_shift, shape_orig)
        if moved is None:
            return False, bb
        return True, moved
