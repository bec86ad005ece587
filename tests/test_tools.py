import pytest

from annotator_core.annotations import SplitMode
from annotator_core.geometry import BB, Shape
from annotator_core.history import History
from annotator_core.models import MouseButton, ToolEvent
from annotator_core.tools import (
    BBOX_NAME,
    BRUSH_NAME,
    ZOOM_NAME,
    BboxTool,
    BrushTool,
    ZoomTool,
    dispatch,
    make_tools,
    make_tools_data_map,
)
from annotator_core.world import World


@pytest.fixture
def tools():
    return make_tools()


def click(tool, world, history, pos, **kwargs):
    world, history = dispatch(tool, world, history, ToolEvent.press(pos, **kwargs))
    return dispatch(tool, world, history, ToolEvent.release(pos, **kwargs))


def key(tool, world, history, k, **kwargs):
    return dispatch(tool, world, history, ToolEvent.key_pressed(k, **kwargs))


@pytest.fixture
def boxed(world, history, tools):
    """World with one box [10, 10, 20, 10] drawn by two clicks."""
    bbox = tools[BBOX_NAME]
    world, history = click(bbox, world, history, (10, 10))
    world, history = click(bbox, world, history, (30, 20))
    return world, history, bbox


def test_make_tools():
    tools = make_tools()
    assert set(tools) == {ZOOM_NAME, BBOX_NAME, BRUSH_NAME}
    assert isinstance(tools[ZOOM_NAME], ZoomTool)
    assert set(make_tools_data_map()) == {BBOX_NAME, BRUSH_NAME}


def test_draw_box_with_two_clicks(boxed):
    world, history, _ = boxed
    assert world.annos(BBOX_NAME).bbs == [BB.from_arr([10, 10, 20, 10])]
    assert len(history) == 2


def test_ctrl_click_toggles_selection(boxed):
    world, history, bbox = boxed
    world, history = click(bbox, world, history, (15, 15), ctrl=True)
    assert world.annos(BBOX_NAME).selected_bbs == [True]
    world, history = click(bbox, world, history, (15, 15), ctrl=True)
    assert world.annos(BBOX_NAME).selected_bbs == [False]


def test_drag_moves_selected_boxes(boxed):
    world, history, bbox = boxed
    world, history = click(bbox, world, history, (15, 15), ctrl=True)
    world, history = dispatch(bbox, world, history, ToolEvent.press((15, 15)))
    world, history = dispatch(bbox, world, history, ToolEvent.held((20, 18)))
    world, history = dispatch(bbox, world, history, ToolEvent.release((20, 18)))
    assert world.annos(BBOX_NAME).bbs == [BB.from_arr([15, 13, 20, 10])]
    assert len(history) == 3


def test_delete_undo_redo(boxed):
    world, history, bbox = boxed
    world, history = click(bbox, world, history, (15, 15), ctrl=True)
    world, history = key(bbox, world, history, "Delete")
    assert len(world.annos(BBOX_NAME)) == 0
    world, history = key(bbox, world, history, "z", ctrl=True)
    assert world.annos(BBOX_NAME).bbs == [BB.from_arr([10, 10, 20, 10])]
    world, history = key(bbox, world, history, "y", ctrl=True)
    assert len(world.annos(BBOX_NAME)) == 0


def test_arrow_keys_resize_selected(boxed):
    world, history, bbox = boxed
    world, history = click(bbox, world, history, (15, 15), ctrl=True)
    world, history = key(bbox, world, history, "Right")
    assert world.annos(BBOX_NAME).bbs == [BB.from_arr([10, 10, 21, 10])]
    world, history = key(bbox, world, history, "Right", shift=True)
    assert world.annos(BBOX_NAME).bbs == [BB.from_arr([11, 10, 20, 10])]


def test_split_mode_cycles(boxed):
    world, history, bbox = boxed
    data = world.tools_data(BBOX_NAME)
    n_records = len(history)
    for expected in (SplitMode.HORIZONTAL, SplitMode.VERTICAL, SplitMode.NONE):
        world, history = key(bbox, world, history, "s")
        assert data.split_mode is expected
    assert len(history) == n_records


def test_digit_labels_selected(boxed):
    world, history, bbox = boxed
    world.tools_data(BBOX_NAME).push("other")
    world, history = click(bbox, world, history, (15, 15), ctrl=True)
    world, history = key(bbox, world, history, "2")
    assert world.annos(BBOX_NAME).cat_idxs == [1]
    assert world.tools_data(BBOX_NAME).cat_idx_current == 1
    world, history = key(bbox, world, history, "9")
    assert world.annos(BBOX_NAME).cat_idxs == [1]


def test_select_all_copy_paste(boxed):
    world, history, bbox = boxed
    world, history = key(bbox, world, history, "a", ctrl=True)
    world, history = key(bbox, world, history, "c", ctrl=True)
    world, history = key(bbox, world, history, "v", ctrl=True)
    assert len(world.annos(BBOX_NAME)) == 2


def test_keys_without_effect_are_not_recorded(boxed):
    world, history, bbox = boxed
    n_records = len(history)
    for k in ("Delete", "Escape", "Left", "Down"):
        world, history = key(bbox, world, history, k)
    world, history = key(bbox, world, history, "v", ctrl=True)
    assert world.annos(BBOX_NAME).bbs == [BB.from_arr([10, 10, 20, 10])]
    assert len(history) == n_records
    world, history = click(bbox, world, history, (15, 15), ctrl=True)
    world, history = key(bbox, world, history, "Left")
    assert len(history) == n_records + 1


def test_brush_delete_without_selection_is_not_recorded(world, history, tools):
    brush = tools[BRUSH_NAME]
    world, history = click(brush, world, history, (10, 10))
    n_records = len(history)
    world, history = key(brush, world, history, "Delete")
    assert len(world.annos(BRUSH_NAME)) == 1
    assert len(history) == n_records


def test_escape_cancels_first_corner(world, history, tools):
    bbox = tools[BBOX_NAME]
    world, history = click(bbox, world, history, (10, 10))
    world, history = key(bbox, world, history, "Escape")
    world, history = click(bbox, world, history, (30, 20))
    world, history = click(bbox, world, history, (40, 30))
    assert world.annos(BBOX_NAME).bbs == [BB.from_arr([30, 20, 10, 10])]


def test_zoom_tool(world, history, tools):
    zoom = tools[ZOOM_NAME]
    world, history = dispatch(zoom, world, history, ToolEvent.wheel(1.0))
    assert world.zoom_box == BB.from_arr([5, 3, 90, 45])
    world, history = key(zoom, world, history, "0")
    assert world.zoom_box is None
    world, history = dispatch(zoom, world, history, ToolEvent.press((10, 10), MouseButton.RIGHT))
    world, history = dispatch(zoom, world, history, ToolEvent.release((60, 40), MouseButton.RIGHT))
    assert world.zoom_box == BB.from_arr([10, 10, 50, 30])
    assert len(history) == 1


def test_zoom_tool_pans(world, history, tools):
    zoom = tools[ZOOM_NAME]
    world.set_zoom_box(BB.from_arr([10, 10, 20, 10]))
    world, history = dispatch(zoom, world, history, ToolEvent.press((50, 20)))
    world, history = dispatch(zoom, world, history, ToolEvent.held((40, 20)))
    world, history = dispatch(zoom, world, history, ToolEvent.release((40, 20)))
    assert world.zoom_box == BB.from_arr([12, 10, 20, 10])


def test_brush_tool(world, history, tools):
    brush = tools[BRUSH_NAME]
    world, history = dispatch(brush, world, history, ToolEvent.press((10, 10)))
    world, history = dispatch(brush, world, history, ToolEvent.held((12, 10)))
    world, history = dispatch(brush, world, history, ToolEvent.held((12, 10)))
    world, history = dispatch(brush, world, history, ToolEvent.held((14, 12)))
    world, history = dispatch(brush, world, history, ToolEvent.release((14, 12)))
    assert world.annos(BRUSH_NAME).strokes == [[(10, 10), (12, 10), (14, 12)]]
    assert len(history) == 2
    world, history = click(brush, world, history, (12, 11), ctrl=True)
    assert world.annos(BRUSH_NAME).selected == [True]
    world, history = key(brush, world, history, "Backspace")
    assert len(world.annos(BRUSH_NAME)) == 0
    assert len(history) == 3


def test_tools_ignore_loading_world(tools):
    world = World.loading(Shape(w=32, h=32))
    history = History()
    for tool in (tools[BBOX_NAME], tools[BRUSH_NAME]):
        world, history = click(tool, world, history, (5, 5))
    assert len(history) == 0
    assert world.file_path is None


def test_tool_creates_missing_data(im_orig):
    world = World.from_real_im(im_orig, {}, "im.png", Shape(w=100, h=50))
    history = History()
    bbox = BboxTool()
    world, history = click(bbox, world, history, (5, 5))
    assert BBOX_NAME in world.data.tools_data_map
    assert BRUSH_NAME not in world.data.tools_data_map
    BrushTool().ensure_data(world)
    assert BRUSH_NAME in world.data.tools_data_map
