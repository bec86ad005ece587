"""
Annotation stores and per-tool annotation data.
"""

from .core import BboxAnnotation, BrushStroke, resize_bbs, resize_bbs_inds
from .split_mode import SplitMode
from .bbox_annotations import BboxAnnotations, BoxEdge
from .brush_annotations import BrushAnnotations
from .tools_data import (
    AnnotationsMap,
    BboxToolData,
    BrushToolData,
    ClipboardData,
    LabelTable,
    ToolData,
)

__all__ = [
    "BboxAnnotation",
    "BrushStroke",
    "resize_bbs",
    "resize_bbs_inds",
    "SplitMode",
    "BboxAnnotations",
    "BoxEdge",
    "BrushAnnotations",
    "AnnotationsMap",
    "BboxToolData",
    "BrushToolData",
    "ClipboardData",
    "LabelTable",
    "ToolData",
]
