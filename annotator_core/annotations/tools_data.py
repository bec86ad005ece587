"""
Per-tool annotation data: the shared label table and the annotations of every file.

Labels and colors are global per tool, geometries are stored per image file.
"""

from typing import Callable, Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

import numpy as np
from pydantic import BaseModel, Field

from annotator_core.annotations.bbox_annotations import BboxAnnotations
from annotator_core.annotations.brush_annotations import BrushAnnotations
from annotator_core.annotations.split_mode import SplitMode
from annotator_core.colors import new_color
from annotator_core.config import Config
from annotator_core.errors import ImportDataError, LabelConflictError
from annotator_core.geometry import BB, Shape
from annotator_core.logging import get_logger

logger = get_logger(__name__)

A = TypeVar("A", BboxAnnotations, BrushAnnotations)

WHITE = [255, 255, 255]


class LabelTable(BaseModel):
    """Index aligned category labels, colors and external category ids."""

    labels: List[str] = Field(default_factory=list)
    colors: List[List[int]] = Field(default_factory=list)
    cat_ids: List[int] = Field(default_factory=list)

    @classmethod
    def with_default_label(cls) -> "LabelTable":
        return cls(labels=[Config.DEFAULT_LABEL], colors=[list(WHITE)], cat_ids=[1])

    def __len__(self) -> int:
        return len(self.labels)

    def index_of(self, label: str) -> Optional[int]:
        try:
            return self.labels.index(label)
        except ValueError:
            return None

    def push(
        self,
        label: str,
        color: Optional[List[int]] = None,
        cat_id: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Append a new category.

        Args:
            label: Unique label name
            color: Explicit color, a new distinct color is picked if None
            cat_id: Explicit category id, defaults to the largest id plus one

        Raises:
            LabelConflictError: If the label, the color or the category id exists
        """
        if label in self.labels:
            raise LabelConflictError(f"label '{label}' already exists")
        if color is not None and list(color) in self.colors:
            raise LabelConflictError(f"color '{list(color)}' already exists")
        if cat_id is not None and cat_id in self.cat_ids:
            raise LabelConflictError(f"cat id '{cat_id}' already exists")

        if color is None:
            color = new_color(self.colors, rng=rng)
        if cat_id is None:
            cat_id = max(self.cat_ids) + 1 if self.cat_ids else 1
        self.labels.append(label)
        self.colors.append([int(c) for c in color])
        self.cat_ids.append(cat_id)

    def remove(self, cat_idx: int):
        del self.labels[cat_idx]
        del self.colors[cat_idx]
        del self.cat_ids[cat_idx]


class AnnotationsMap(Generic[A]):
    """File path to annotations of that file and the shape of its image."""

    def __init__(self, factory: Callable[[], A]):
        self._factory = factory
        self._map: Dict[str, Tuple[A, Optional[Shape]]] = {}

    def __len__(self) -> int:
        return len(self._map)

    def __contains__(self, file_path: str) -> bool:
        return file_path in self._map

    def __eq__(self, other) -> bool:
        if not isinstance(other, AnnotationsMap):
            return NotImplemented
        return {k: v[0] for k, v in self._map.items()} == {
            k: v[0] for k, v in other._map.items()
        }

    def get_annos_mut(self, file_path: str, shape: Optional[Shape] = None) -> A:
        """Annotations of a file, created on first access."""
        if file_path not in self._map:
            self._map[file_path] = (self._factory(), shape)
        annos, known_shape = self._map[file_path]
        if known_shape is None and shape is not None:
            self._map[file_path] = (annos, shape)
        return annos

    def get_annos(self, file_path: str) -> Optional[A]:
        entry = self._map.get(file_path)
        return entry[0] if entry is not None else None

    def get_shape(self, file_path: str) -> Optional[Shape]:
        entry = self._map.get(file_path)
        return entry[1] if entry is not None else None

    def items(self) -> Iterator[Tuple[str, A]]:
        return ((k, v[0]) for k, v in self._map.items())

    def values(self) -> Iterator[A]:
        return (v[0] for v in self._map.values())

    def replace(self, annos_map: Dict[str, A]):
        self._map = {k: (v, None) for k, v in annos_map.items()}


class ToolData(Generic[A]):
    """Label table, current category and per file annotations of one tool."""

    def __init__(self, factory: Callable[[], A], label_table: Optional[LabelTable] = None):
        self.label_table = label_table if label_table is not None else LabelTable.with_default_label()
        self.cat_idx_current = 0
        self.annotations_map: AnnotationsMap[A] = AnnotationsMap(factory)
        self.annotations_visible = True

    def __eq__(self, other) -> bool:
        if not isinstance(other, ToolData):
            return NotImplemented
        return (
            self.label_table == other.label_table
            and self.cat_idx_current == other.cat_idx_current
            and self.annotations_map == other.annotations_map
        )

    @property
    def labels(self) -> List[str]:
        return self.label_table.labels

    @property
    def colors(self) -> List[List[int]]:
        return self.label_table.colors

    @property
    def cat_ids(self) -> List[int]:
        return self.label_table.cat_ids

    def get_annos_mut(self, file_path: str, shape: Optional[Shape] = None) -> A:
        return self.annotations_map.get_annos_mut(file_path, shape)

    def get_annos(self, file_path: str) -> Optional[A]:
        return self.annotations_map.get_annos(file_path)

    def anno_items(self) -> Iterator[Tuple[str, A]]:
        return self.annotations_map.items()

    def push(self, label: str, color: Optional[List[int]] = None, cat_id: Optional[int] = None):
        self.label_table.push(label, color, cat_id)
        logger.info(f"added label '{label}' with color {self.colors[-1]}")

    def ensure_label(self, label: str) -> int:
        """Category index of ``label``, creating the category if needed."""
        idx = self.label_table.index_of(label)
        if idx is None:
            self.push(label)
            idx = len(self.label_table) - 1
        return idx

    def set_label(self, file_path: str, anno_idx: int, label: str):
        """Assign a label to one annotation, reusing an existing category if possible."""
        cat_idx = self.ensure_label(label)
        annos = self.get_annos_mut(file_path)
        annos.set_cat_idx(anno_idx, cat_idx)

    def remove_catidx(self, cat_idx: int) -> bool:
        """
        Remove a category and re-index the annotations of every file.

        The last remaining category and indices out of range cannot be removed.

        Returns:
            True if the category was removed
        """
        if not 0 <= cat_idx < len(self.label_table):
            logger.warning(f"cannot remove category {cat_idx}, there are {len(self.label_table)}")
            return False
        if len(self.label_table) <= 1:
            logger.warning("cannot remove the last category")
            return False
        label = self.labels[cat_idx]
        self.label_table.remove(cat_idx)
        if self.cat_idx_current >= max(cat_idx, 1):
            self.cat_idx_current -= 1
        for annos in self.annotations_map.values():
            annos.reduce_cat_idxs(cat_idx)
        logger.info(f"removed label '{label}'")
        return True

    def set_annotations_map(self, annos_map: Dict[str, A]):
        """
        Replace all annotations.

        Raises:
            ImportDataError: If an annotation refers to a category that does not
                exist. The current annotations are kept in that case.
        """
        n_labels = len(self.label_table)
        for file_path, annos in annos_map.items():
            for cat_idx in annos.cat_idxs:
                if cat_idx >= n_labels:
                    raise ImportDataError(
                        f"cat idx {cat_idx} of '{file_path}' does not have a label, "
                        f"out of bounds, {n_labels}"
                    )
        self.annotations_map.replace(annos_map)


class ClipboardData(BaseModel):
    """Copied boxes with their categories."""

    bbs: List[BB] = Field(default_factory=list)
    cat_idxs: List[int] = Field(default_factory=list)

    @classmethod
    def from_annotations(cls, annos: BboxAnnotations) -> "ClipboardData":
        inds = list(annos.selected_indices())
        return cls(
            bbs=[annos.bbs[i] for i in inds],
            cat_idxs=[annos.cat_idxs[i] for i in inds],
        )


class BboxToolData(ToolData[BboxAnnotations]):
    """Bounding box tool data with clipboard and split mode."""

    def __init__(self, label_table: Optional[LabelTable] = None):
        super().__init__(BboxAnnotations, label_table)
        self.clipboard: Optional[ClipboardData] = None
        self.split_mode = SplitMode.NONE

    def copy_selected(self, file_path: str) -> int:
        """Copy the selected boxes of a file. Returns the number of copied boxes."""
        annos = self.get_annos(file_path)
        if annos is None:
            return 0
        self.clipboard = ClipboardData.from_annotations(annos)
        return len(self.clipboard.bbs)

    def paste(self, file_path: str, shape: Shape) -> int:
        """
        Add the copied boxes to a file.

        Boxes that do not fit into the image are skipped.

        Returns:
            Number of pasted boxes
        """
        if self.clipboard is None:
            return 0
        annos = self.get_annos_mut(file_path, shape)
        n_pasted = 0
        for bb, cat_idx in zip(self.clipboard.bbs, self.clipboard.cat_idxs):
            if bb.is_contained_in_image(shape) and cat_idx < len(self.label_table):
                annos.add_bb(bb, cat_idx)
                n_pasted += 1
        return n_pasted


class BrushToolData(ToolData[BrushAnnotations]):
    """Brush tool data."""

    def __init__(self, label_table: Optional[LabelTable] = None):
        super().__init__(BrushAnnotations, label_table)
