"""
Annotation records and selection-gated group transforms.
"""

from typing import Callable, Iterable, Iterator, List, Optional, Sequence

from pydantic import BaseModel, Field

from annotator_core.geometry import BB, Point

Resize = Callable[[BB], Optional[BB]]


class BboxAnnotation(BaseModel):
    """One bounding box with its category and transient selection state."""

    bb: BB
    cat_idx: int = Field(default=0, ge=0)
    selected: bool = False


class BrushStroke(BaseModel):
    """One freehand stroke as an ordered list of original image positions."""

    points: List[Point] = Field(default_factory=list)
    cat_idx: int = Field(default=0, ge=0)
    selected: bool = False


def selected_indices(selected: Sequence[bool]) -> Iterator[int]:
    return (i for i, is_selected in enumerate(selected) if is_selected)


def deselected_indices(selected: Sequence[bool]) -> Iterator[int]:
    return (i for i, is_selected in enumerate(selected) if not is_selected)


def resize_bbs_inds(bbs: List[BB], indices: Iterable[int], resize: Resize) -> List[BB]:
    """
    Apply ``resize`` to the boxes at ``indices``.

    A box whose resize is rejected keeps its geometry.
    """
    bbs = list(bbs)
    for idx in indices:
        resized = resize(bbs[idx])
        if resized is not None:
            bbs[idx] = resized
    return bbs


def resize_bbs(bbs: List[BB], selected: Sequence[bool], resize: Resize) -> List[BB]:
    """Apply ``resize`` to the selected boxes only."""
    return resize_bbs_inds(bbs, selected_indices(selected), resize)
