"""
Geometry primitives for image annotations.

All coordinates are integer pixel positions. Boxes are half-open: a box
``[x, y, w, h]`` covers the pixels ``x <= px < x + w`` and ``y <= py < y + h``.
Operations that would move a box out of its image return ``None`` instead of
clamping, except for ``new_fit_to_image`` and ``center_scale`` which clip.
"""

import math
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from annotator_core.errors import BBParseError, GeometryError

Point = Tuple[int, int]


def _round(value: float) -> int:
    """Round half away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class Shape(BaseModel):
    """Width and height of an image, a view or a window."""

    model_config = ConfigDict(frozen=True)

    w: int = Field(ge=0)
    h: int = Field(ge=0)

    @classmethod
    def from_im(cls, im: np.ndarray) -> "Shape":
        """Shape of an image array in ``(height, width, ...)`` layout."""
        return cls(w=int(im.shape[1]), h=int(im.shape[0]))

    def is_empty(self) -> bool:
        return self.w == 0 or self.h == 0


class BB(BaseModel):
    """Axis aligned bounding box with a minimum extent of one pixel."""

    model_config = ConfigDict(frozen=True)

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    w: int = Field(ge=1)
    h: int = Field(ge=1)

    @classmethod
    def from_arr(cls, a: Iterable[int]) -> "BB":
        """Create a box from ``[x, y, w, h]``."""
        x, y, w, h = a
        return cls(x=int(x), y=int(y), w=int(w), h=int(h))

    @classmethod
    def from_points(cls, p1: Point, p2: Point) -> "BB":
        """
        Create the box spanned by two arbitrary corners.

        A zero extent along an axis is widened to one pixel, so two identical
        points yield the 1x1 box at that point.
        """
        x_min, x_max = min(p1[0], p2[0]), max(p1[0], p2[0])
        y_min, y_max = min(p1[1], p2[1]), max(p1[1], p2[1])
        return cls(
            x=x_min,
            y=y_min,
            w=max(x_max - x_min, 1),
            h=max(y_max - y_min, 1),
        )

    @classmethod
    def from_str(cls, s: str) -> "BB":
        """
        Parse the text format ``"[x, y, w, h]"``.

        Raises:
            BBParseError: If the string is not exactly four non-negative
                integers in square brackets or describes an empty box.
        """
        stripped = s.strip()
        if len(stripped) < 2 or stripped[0] != "[" or stripped[-1] != "]":
            raise BBParseError(f"could not parse '{s}' into a bounding box")
        fields = stripped[1:-1].split(",")
        if len(fields) != 4:
            raise BBParseError(f"could not parse '{s}' into a bounding box")
        values = []
        for field in fields:
            field = field.strip()
            if not (field.isascii() and field.isdigit()):
                raise BBParseError(f"could not parse '{s}' into a bounding box")
            values.append(int(field))
        try:
            return cls.from_arr(values)
        except ValidationError as e:
            raise BBParseError(f"could not parse '{s}' into a bounding box: {e}")

    @classmethod
    def new_shape_checked(
        cls, x: int, y: int, w: int, h: int, shape: Shape
    ) -> Optional["BB"]:
        """Create a box only if it is non-empty and lies inside ``shape``."""
        if x < 0 or y < 0 or w < 1 or h < 1:
            return None
        bb = cls(x=x, y=y, w=w, h=h)
        if bb.is_contained_in_image(shape):
            return bb
        return None

    @classmethod
    def new_fit_to_image(cls, x: int, y: int, w: int, h: int, shape: Shape) -> "BB":
        """Create a box clipped to ``shape``. The result is at least 1x1."""

        def clip(var: int, size_bx: int, size_im: int) -> Tuple[int, int]:
            if var < 0:
                start, size = 0, min(size_bx + var, size_im)
            else:
                start = min(var, max(size_im - 1, 0))
                size = min(size_bx + var, size_im) - start
            return start, max(size, 1)

        x, w = clip(x, w, shape.w)
        y, h = clip(y, h, shape.h)
        return cls(x=x, y=y, w=w, h=h)

    def __str__(self) -> str:
        return f"[{self.x}, {self.y}, {self.w}, {self.h}]"

    @property
    def x_max(self) -> int:
        return self.x + self.w

    @property
    def y_max(self) -> int:
        return self.y + self.h

    def min(self) -> Point:
        return (self.x, self.y)

    def max(self) -> Point:
        """Exclusive maximum corner."""
        return (self.x + self.w, self.y + self.h)

    def min_max(self, axis: int) -> Tuple[int, int]:
        if axis == 0:
            return (self.x, self.x + self.w)
        return (self.y, self.y + self.h)

    def shape(self) -> Shape:
        return Shape(w=self.w, h=self.h)

    def x_range(self) -> range:
        return range(self.x, self.x + self.w)

    def y_range(self) -> range:
        return range(self.y, self.y + self.h)

    def center(self) -> Point:
        return (self.x + self.w // 2, self.y + self.h // 2)

    def center_f(self) -> Tuple[float, float]:
        return (self.w * 0.5 + self.x, self.h * 0.5 + self.y)

    def corner(self, idx: int) -> Point:
        """
        Corner by index. Iteration order of corners::

            0   3
            v   ^
            1 > 2
        """
        x, y, w, h = self.x, self.y, self.w, self.h
        if idx == 0:
            return (x, y)
        if idx == 1:
            return (x, y + h)
        if idx == 2:
            return (x + w, y + h)
        if idx == 3:
            return (x + w, y)
        raise IndexError(f"bounding boxes only have 4 corners, {idx} is out of bounds")

    def opposite_corner(self, idx: int) -> Point:
        return self.corner((idx + 2) % 4)

    def corners(self) -> Iterator[Point]:
        return (self.corner(i) for i in range(4))

    def contains(self, p: Point) -> bool:
        return self.x <= p[0] < self.x + self.w and self.y <= p[1] < self.y + self.h

    def contains_bb(self, other: "BB") -> bool:
        """True if ``other`` lies completely inside this box."""
        return (
            self.x <= other.x
            and self.y <= other.y
            and other.x_max <= self.x_max
            and other.y_max <= self.y_max
        )

    def is_contained_in_image(self, shape: Shape) -> bool:
        return self.x + self.w <= shape.w and self.y + self.h <= shape.h

    def translate(self, x_shift: int, y_shift: int, shape: Shape) -> Optional["BB"]:
        return BB.new_shape_checked(
            self.x + x_shift, self.y + y_shift, self.w, self.h, shape
        )

    def follow_movement(self, mp_from: Point, mp_to: Point, shape: Shape) -> Optional["BB"]:
        x_shift = mp_to[0] - mp_from[0]
        y_shift = mp_to[1] - mp_from[1]
        return self.translate(x_shift, y_shift, shape)

    def shift_max(self, x_shift: int, y_shift: int, shape: Shape) -> Optional["BB"]:
        """Move the maximum corner, the minimum corner stays put."""
        return BB.new_shape_checked(
            self.x, self.y, self.w + x_shift, self.h + y_shift, shape
        )

    def shift_min(self, x_shift: int, y_shift: int, shape: Shape) -> Optional["BB"]:
        """Move the minimum corner, the maximum corner stays put."""
        return BB.new_shape_checked(
            self.x + x_shift,
            self.y + y_shift,
            self.w - x_shift,
            self.h - y_shift,
            shape,
        )

    def center_scale(self, factor: float, shape: Shape) -> "BB":
        """Scale the box about its center and clip the result to ``shape``."""
        x, y, w, h = float(self.x), float(self.y), float(self.w), float(self.h)
        cx, cy = w * 0.5 + x, h * 0.5 + y
        x_tl, y_tl = cx + factor * (x - cx), cy + factor * (y - cy)
        x_br, y_br = cx + factor * (x + w - cx), cy + factor * (y + h - cy)
        return BB.new_fit_to_image(
            _round(x_tl),
            _round(y_tl),
            _round(x_br - x_tl),
            _round(y_br - y_tl),
            shape,
        )

    def has_overlap(self, other: "BB") -> bool:
        """
        True if a corner of one box lies inside the other.

        Boxes crossing each other without any corner inside the other box are
        not detected.
        """
        if any(other.contains(c) for c in self.corners()):
            return True
        return any(self.contains(c) for c in other.corners())

    def intersects(self, other: "BB") -> bool:
        """True if both boxes share at least one pixel."""
        return (
            self.x < other.x_max
            and other.x < self.x_max
            and self.y < other.y_max
            and other.y < self.y_max
        )


def find_enclosing_bb(points: List[Point]) -> BB:
    """Smallest box whose corners span all points."""
    if not points:
        raise GeometryError("need points to compute enclosing bounding box")
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return BB.from_points((min(xs), min(ys)), (max(xs), max(ys)))
