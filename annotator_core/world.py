"""
The world: original image, annotations of all tools, zoom box and the derived view.
"""

import copy
from typing import Callable, Dict, Optional, Tuple, Union

import numpy as np

from annotator_core.annotations import BboxAnnotations, BrushAnnotations, ToolData
from annotator_core.config import Config
from annotator_core.geometry import BB, Point, Shape
from annotator_core.logging import get_logger
from annotator_core.transform import mouse_pos_to_orig_pos, orig_pos_to_view_pos
from annotator_core.view import make_loading_image, make_view

logger = get_logger(__name__)

# tool name -> data of that tool
ToolsDataMap = Dict[str, ToolData]
Annotations = Union[BboxAnnotations, BrushAnnotations]


class WorldData:
    """Editable state that is recorded in the history."""

    def __init__(
        self,
        im_background: np.ndarray,
        file_path: Optional[str] = None,
        tools_data_map: Optional[ToolsDataMap] = None,
    ):
        self.im_background = im_background
        self.file_path = file_path
        self.tools_data_map: ToolsDataMap = tools_data_map if tools_data_map is not None else {}

    def __eq__(self, other) -> bool:
        if not isinstance(other, WorldData):
            return NotImplemented
        return (
            self.file_path == other.file_path
            and np.array_equal(self.im_background, other.im_background)
            and self.tools_data_map == other.tools_data_map
        )

    def shape(self) -> Shape:
        return Shape.from_im(self.im_background)

    def apply(self, f: Callable[[np.ndarray], np.ndarray]):
        """Replace the background image by ``f`` of it."""
        self.im_background = f(self.im_background)

    def snapshot(self) -> "WorldData":
        return copy.deepcopy(self)


class World:
    """
    Everything needed to draw.

    The view image is the zoom box of the original image scaled into the window.
    It is recomputed whenever the image, the zoom box or the window changes.
    """

    def __init__(
        self,
        data: WorldData,
        zoom_box: Optional[BB] = None,
        shape_win: Optional[Shape] = None,
    ):
        self.data = data
        self._zoom_box = zoom_box
        self._shape_win = shape_win if shape_win is not None else Config.get_window_shape()
        self._im_view = self.render()

    @classmethod
    def from_real_im(
        cls,
        im: np.ndarray,
        tools_data_map: ToolsDataMap,
        file_path: str,
        shape_win: Optional[Shape] = None,
    ) -> "World":
        """World of a loaded image in contrast to the loading placeholder."""
        logger.info(f"opening {file_path} with shape {Shape.from_im(im)}")
        return cls(WorldData(im, file_path, tools_data_map), None, shape_win)

    @classmethod
    def loading(cls, shape_win: Optional[Shape] = None) -> "World":
        """Placeholder world shown while an image is being loaded."""
        shape_win = shape_win if shape_win is not None else Config.get_window_shape()
        return cls(WorldData(make_loading_image(shape_win)), None, shape_win)

    @property
    def file_path(self) -> Optional[str]:
        return self.data.file_path

    @property
    def zoom_box(self) -> Optional[BB]:
        return self._zoom_box

    @property
    def shape_win(self) -> Shape:
        return self._shape_win

    @property
    def im_view(self) -> np.ndarray:
        return self._im_view

    def shape_orig(self) -> Shape:
        return self.data.shape()

    def shape_view(self) -> Shape:
        return Shape.from_im(self._im_view)

    def set_zoom_box(self, zoom_box: Optional[BB]):
        """Set the zoom box. Boxes with a side of a single pixel or less are ignored."""
        if zoom_box is not None and (zoom_box.w <= 1 or zoom_box.h <= 1):
            logger.debug(f"ignoring degenerate zoom box {zoom_box}")
            return
        self._zoom_box = zoom_box
        self.render()

    def set_shape_win(self, shape_win: Shape):
        if shape_win != self._shape_win:
            self._shape_win = shape_win
            self.render()

    def apply(self, f: Callable[[np.ndarray], np.ndarray]):
        """Change the background image and update the view."""
        self.data.apply(f)
        self.render()

    def view_to_orig(self, view_pos: Optional[Point]) -> Optional[Point]:
        return mouse_pos_to_orig_pos(view_pos, self.shape_orig(), self._shape_win, self._zoom_box)

    def orig_to_view(self, orig_pos: Point) -> Optional[Point]:
        return orig_pos_to_view_pos(orig_pos, self.shape_orig(), self._shape_win, self._zoom_box)

    def status_readout(self, view_pos: Optional[Point]) -> Optional[Tuple[Point, Tuple[int, ...]]]:
        """Original position under the mouse and the pixel value there."""
        orig_pos = self.view_to_orig(view_pos)
        if orig_pos is None:
            return None
        x, y = orig_pos
        pixel = np.atleast_1d(self.data.im_background[y, x])
        return orig_pos, tuple(int(v) for v in pixel)

    def tools_data(self, tool_name: str) -> ToolData:
        try:
            return self.data.tools_data_map[tool_name]
        except KeyError:
            raise KeyError(f"no data for tool '{tool_name}'") from None

    def annos_mut(self, tool_name: str) -> Optional[Annotations]:
        """Annotations of the current file, created if needed. None without a file."""
        if self.file_path is None:
            return None
        return self.tools_data(tool_name).get_annos_mut(self.file_path, self.shape_orig())

    def annos(self, tool_name: str) -> Optional[Annotations]:
        if self.file_path is None or tool_name not in self.data.tools_data_map:
            return None
        return self.tools_data(tool_name).get_annos(self.file_path)

    def render(self) -> np.ndarray:
        """Recompute the view image and draw the visible annotations onto it."""
        im_view = make_view(self.data.im_background, self._zoom_box, self._shape_win)
        if self.file_path is not None:
            shape_orig = self.shape_orig()
            for tool_data in self.data.tools_data_map.values():
                annos = tool_data.get_annos(self.file_path)
                if annos is None or not tool_data.annotations_visible:
                    continue
                im_view = annos.draw_on_view(
                    im_view, self._zoom_box, shape_orig, self._shape_win, tool_data.colors
                )
        self._im_view = im_view
        return im_view
