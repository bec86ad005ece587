"""
Tools that turn input events into changes of the world.

Every tool implements ``on_event`` which takes the world and the history and
returns both, possibly changed. Discrete edits push a record to the history.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from annotator_core.annotations import (
    BboxAnnotations,
    BboxToolData,
    BoxEdge,
    BrushAnnotations,
    BrushToolData,
    SplitMode,
    ToolData,
)
from annotator_core.geometry import BB, Point
from annotator_core.history import History, Record
from annotator_core.logging import get_structured_logger
from annotator_core.models import EventKind, MouseButton, ToolEvent
from annotator_core.world import ToolsDataMap, World
from annotator_core.zoom import zoom_box_follow_movement, zoom_box_from_drag, zoom_box_on_wheel

logger = get_structured_logger(__name__)

ZOOM_NAME = "Zoom"
BBOX_NAME = "Bbox"
BRUSH_NAME = "Brush"

ARROW_SHIFTS = {"Left": (-1, 0), "Right": (1, 0), "Up": (0, -1), "Down": (0, 1)}
SPLIT_MODE_CYCLE = {
    SplitMode.NONE: SplitMode.HORIZONTAL,
    SplitMode.HORIZONTAL: SplitMode.VERTICAL,
    SplitMode.VERTICAL: SplitMode.NONE,
}


def record(world: World, history: History, actor: str) -> History:
    """Push a snapshot of the current world data."""
    history.push(Record(data=world.data.snapshot(), actor=actor))
    return history


def undo(world: World, history: History) -> Tuple[World, History]:
    restored = history.undo(Record(data=world.data, actor="undo"))
    world.data = restored.data
    world.render()
    return world, history


def redo(world: World, history: History) -> Tuple[World, History]:
    restored = history.redo(Record(data=world.data, actor="redo"))
    world.data = restored.data
    world.render()
    return world, history


class Tool(ABC):
    """Interface of all tools."""

    name: str = ""

    def coordinate_transform(self, world: World, view_pos: Optional[Point]) -> Optional[Point]:
        """Original image position of a view position, None if off the image."""
        return world.view_to_orig(view_pos)

    def make_data(self) -> Optional[ToolData]:
        """Fresh data of the tool, None for tools without annotations."""
        return None

    def ensure_data(self, world: World):
        if self.name not in world.data.tools_data_map:
            data = self.make_data()
            if data is not None:
                world.data.tools_data_map[self.name] = data

    @abstractmethod
    def on_event(self, world: World, history: History, event: ToolEvent) -> Tuple[World, History]:
        ...


class ZoomTool(Tool):
    """
    Wheel zooms about the center, a right button drag selects the zoom box,
    a left button drag pans and the key ``0`` shows the full image.
    """

    name = ZOOM_NAME
    reset_key = "0"

    def __init__(self):
        self._press_view_pos: Optional[Point] = None
        self._prev_view_pos: Optional[Point] = None

    def on_event(self, world: World, history: History, event: ToolEvent) -> Tuple[World, History]:
        if event.kind is EventKind.WHEEL:
            world.set_zoom_box(
                zoom_box_on_wheel(world.zoom_box, world.shape_orig(), event.wheel_delta)
            )
        elif event.kind is EventKind.PRESS and event.mouse_pos is not None:
            self._press_view_pos = event.mouse_pos
            self._prev_view_pos = event.mouse_pos
        elif event.kind is EventKind.HELD and event.button is MouseButton.LEFT:
            self._pan(world, event.mouse_pos)
        elif event.kind is EventKind.RELEASE:
            if event.button is MouseButton.RIGHT and self._press_view_pos is not None:
                zoom_box = zoom_box_from_drag(
                    self._press_view_pos,
                    event.mouse_pos,
                    world.shape_orig(),
                    world.shape_win,
                    world.zoom_box,
                )
                if zoom_box is not None:
                    world.set_zoom_box(zoom_box)
            self._press_view_pos = None
            self._prev_view_pos = None
        elif event.kind is EventKind.KEY and event.key == self.reset_key:
            world.set_zoom_box(None)
        return world, history

    def _pan(self, world: World, view_pos: Optional[Point]):
        mp_from = self.coordinate_transform(world, self._prev_view_pos)
        mp_to = self.coordinate_transform(world, view_pos)
        if mp_from is not None and mp_to is not None:
            world.set_zoom_box(
                zoom_box_follow_movement(world.zoom_box, mp_from, mp_to, world.shape_orig())
            )
        self._prev_view_pos = view_pos


class BboxTool(Tool):
    """
    Bounding box drawing and editing.

    Two left clicks span a new box. Ctrl-click toggles the selection of the
    smallest box under the mouse, dragging moves the selected boxes. Arrow
    keys grow the selected boxes at their max corner, with shift at their
    min corner. ``Delete`` removes the selected boxes, digits label them,
    ``s`` cycles through the split modes, ctrl-a/c/v select all, copy and
    paste.
    """

    name = BBOX_NAME

    def __init__(self):
        self._first_corner: Optional[Point] = None
        self._prev_orig_pos: Optional[Point] = None
        self._has_moved = False

    def make_data(self) -> BboxToolData:
        return BboxToolData()

    def _data(self, world: World) -> BboxToolData:
        return world.tools_data(self.name)

    def _annos(self, world: World) -> Optional[BboxAnnotations]:
        return world.annos_mut(self.name)

    def on_event(self, world: World, history: History, event: ToolEvent) -> Tuple[World, History]:
        self.ensure_data(world)
        if world.file_path is None:
            return world, history
        if event.button is MouseButton.LEFT and event.kind is EventKind.PRESS:
            self._prev_orig_pos = self.coordinate_transform(world, event.mouse_pos)
            self._has_moved = False
        elif event.button is MouseButton.LEFT and event.kind is EventKind.HELD:
            self._mouse_held(world, event)
        elif event.button is MouseButton.LEFT and event.kind is EventKind.RELEASE:
            history = self._mouse_released(world, history, event)
        elif event.kind is EventKind.KEY:
            history = self._key_pressed(world, history, event)
        return world, history

    def _mouse_held(self, world: World, event: ToolEvent):
        mp = self.coordinate_transform(world, event.mouse_pos)
        annos = self._annos(world)
        if mp is None or self._prev_orig_pos is None or annos is None:
            return
        if mp != self._prev_orig_pos and any(annos.selected_bbs):
            split_mode = self._data(world).split_mode
            if annos.selected_follow_movement(self._prev_orig_pos, mp, world.shape_orig(), split_mode):
                self._has_moved = True
                world.render()
        self._prev_orig_pos = mp

    def _mouse_released(self, world: World, history: History, event: ToolEvent) -> History:
        data = self._data(world)
        annos = self._annos(world)
        self._prev_orig_pos = None
        if self._has_moved:
            self._has_moved = False
            return record(world, history, self.name)
        mp = self.coordinate_transform(world, event.mouse_pos)
        if mp is None:
            return history
        if event.ctrl:
            idx = annos.find_closest_containing(mp)
            if idx is not None:
                annos.toggle_selection(idx)
                world.render()
        elif self._first_corner is None:
            self._first_corner = mp
        else:
            bb = BB.from_points(self._first_corner, mp)
            self._first_corner = None
            annos.deselect_all()
            annos.add_bb(bb, data.cat_idx_current)
            logger.info(f"added box {bb}", file_path=world.file_path, tool=self.name)
            world.render()
            return record(world, history, self.name)
        return history

    def _key_pressed(self, world: World, history: History, event: ToolEvent) -> History:
        data = self._data(world)
        annos = self._annos(world)
        key = event.key
        shape_orig = world.shape_orig()
        before = self._edit_state(data, annos)
        if key == "Escape":
            self._first_corner = None
            annos.deselect_all()
        elif key == "Delete":
            annos.remove_selected()
        elif key in ARROW_SHIFTS:
            x_shift, y_shift = ARROW_SHIFTS[key]
            edge = BoxEdge.MIN if event.shift else BoxEdge.MAX
            annos.resize_selected(x_shift, y_shift, shape_orig, edge, data.split_mode)
        elif event.ctrl and key == "a":
            annos.select_all()
        elif event.ctrl and key == "c":
            n_copied = data.copy_selected(world.file_path)
            logger.debug(f"copied {n_copied} boxes", file_path=world.file_path, tool=self.name)
            return history
        elif event.ctrl and key == "v":
            data.paste(world.file_path, shape_orig)
        elif key == "s":
            data.split_mode = SPLIT_MODE_CYCLE[data.split_mode]
            logger.info(f"split mode {data.split_mode.value}", tool=self.name)
            return history
        elif key is not None and key.isdigit() and 0 < int(key) <= len(data.labels):
            data.cat_idx_current = int(key) - 1
            annos.label_selected(data.cat_idx_current)
        else:
            return history
        if self._edit_state(data, annos) == before:
            return history
        world.render()
        return record(world, history, self.name)

    @staticmethod
    def _edit_state(data: BboxToolData, annos: BboxAnnotations) -> tuple:
        return annos.to_data(), annos.selected_bbs, data.cat_idx_current


class BrushTool(Tool):
    """
    Freehand strokes while the left button is held. Ctrl-click toggles the
    selection of a stroke, ``Delete`` removes the selected strokes and
    ``Backspace`` removes all strokes of the image.
    """

    name = BRUSH_NAME

    def make_data(self) -> BrushToolData:
        return BrushToolData()

    def _annos(self, world: World) -> Optional[BrushAnnotations]:
        return world.annos_mut(self.name)

    def on_event(self, world: World, history: History, event: ToolEvent) -> Tuple[World, History]:
        self.ensure_data(world)
        if world.file_path is None:
            return world, history
        annos = self._annos(world)
        data: BrushToolData = world.tools_data(self.name)
        if event.button is MouseButton.LEFT and not event.ctrl:
            mp = self.coordinate_transform(world, event.mouse_pos)
            if event.kind is EventKind.PRESS or (event.kind is EventKind.HELD and len(annos) == 0):
                annos.start_stroke(data.cat_idx_current)
            if event.kind in (EventKind.PRESS, EventKind.HELD) and mp is not None:
                strokes = annos.strokes
                if not strokes[-1] or strokes[-1][-1] != mp:
                    annos.extend_stroke(mp)
                    world.render()
            elif event.kind is EventKind.RELEASE:
                annos.remove_empty()
                return world, record(world, history, self.name)
        elif event.button is MouseButton.LEFT and event.kind is EventKind.RELEASE:
            mp = self.coordinate_transform(world, event.mouse_pos)
            if mp is not None:
                for idx in range(len(annos)):
                    if annos.enclosing_bb(idx).contains(mp):
                        annos.toggle_selection(idx)
                        world.render()
                        break
        elif event.kind is EventKind.KEY and event.key in ("Delete", "Backspace"):
            n_before = len(annos)
            if event.key == "Delete":
                annos.remove_selected()
            else:
                annos.clear()
            if len(annos) == n_before:
                return world, history
            world.render()
            return world, record(world, history, self.name)
        return world, history


def make_tools() -> Dict[str, Tool]:
    """All tools by name."""
    return {tool.name: tool for tool in (ZoomTool(), BboxTool(), BrushTool())}


def make_tools_data_map() -> ToolsDataMap:
    """Fresh data of all tools that annotate."""
    tools_data_map: ToolsDataMap = {}
    for tool in make_tools().values():
        data = tool.make_data()
        if data is not None:
            tools_data_map[tool.name] = data
    return tools_data_map


def dispatch(tool: Tool, world: World, history: History, event: ToolEvent) -> Tuple[World, History]:
    """Hand an event to a tool. Ctrl-z and ctrl-y undo and redo for every tool."""
    if event.kind is EventKind.KEY and event.ctrl and event.key in ("z", "y"):
        if event.key == "z":
            return undo(world, history)
        return redo(world, history)
    return tool.on_event(world, history, event)
