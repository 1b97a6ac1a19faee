import itertools

import pytest

from papirs.config import DEFAULT_CONFIG, load_board_settings
from papirs.errors import ConfigError
from papirs.state import BoardState, ColorEntry, ExclusiveGroup, Palette, Tool


def _state(default_tool=Tool.ERASER, default_pen_color="black"):
    settings = load_board_settings(DEFAULT_CONFIG)
    return BoardState(settings.tools, default_tool, settings.palette, default_pen_color)


def test_exclusive_group_requires_default_among_options():
    with pytest.raises(ConfigError):
        ExclusiveGroup(["a", "b"], "c")
    with pytest.raises(ConfigError):
        ExclusiveGroup([], None)
    with pytest.raises(ConfigError):
        ExclusiveGroup(["a", "a"], "a")


def test_exclusive_group_select_replaces_previous():
    group = ExclusiveGroup(["a", "b", "c"], "a")
    previous = group.select("c")
    assert previous == "a"
    assert group.active == "c"
    assert [option for option in group.options if group.is_active(option)] == ["c"]


def test_exclusive_group_rejects_unknown_option():
    group = ExclusiveGroup(["a", "b"], "a")
    with pytest.raises(KeyError):
        group.select("z")
    assert group.active == "a"


def test_exactly_one_tool_active_for_every_sequence():
    tools = [Tool.SELECTOR, Tool.PEN, Tool.ERASER]
    for sequence in itertools.product(tools, repeat=3):
        state = _state()
        for tool in sequence:
            state.select_tool(tool)
            active = [option for option in state.tools.options if state.tools.is_active(option)]
            assert active == [tool]


def test_drawer_visibility_follows_tool_only():
    state = _state()
    for tool in [Tool.PEN, Tool.SELECTOR, Tool.PEN, Tool.ERASER, Tool.ERASER, Tool.PEN]:
        state.select_tool(tool)
        assert state.drawer_visible == (state.tool is Tool.PEN)
        for color_id in ("red", "blue"):
            state.select_color(color_id)
            assert state.drawer_visible == (tool is Tool.PEN)


def test_pen_color_survives_tool_switches():
    state = _state()
    state.select_tool(Tool.PEN)
    state.select_color("red")
    state.select_tool(Tool.ERASER)
    assert not state.drawer_visible
    assert state.pen_color == "red"
    state.select_tool(Tool.PEN)
    assert state.drawer_visible
    assert state.pen_color == "red"


def test_listeners_see_the_new_state_inside_the_write():
    state = _state()
    seen = []
    state.subscribe(lambda s, field: seen.append((field, s.tool, s.drawer_visible)))

    state.select_tool(Tool.PEN)
    state.select_color("green")

    assert seen == [
        ("tool", Tool.PEN, True),
        ("pen_color", Tool.PEN, True),
    ]


def test_unsubscribe_stops_notifications():
    state = _state()
    calls = []
    unsubscribe = state.subscribe(lambda s, field: calls.append(field))
    state.select_tool(Tool.PEN)
    unsubscribe()
    state.select_tool(Tool.ERASER)
    assert calls == ["tool"]


def test_snapshot_is_what_the_engine_reads():
    state = _state()
    state.select_tool(Tool.PEN)
    state.select_color("sky_blue")
    snapshot = state.snapshot()
    assert snapshot.tool is Tool.PEN
    assert snapshot.pen_color == "sky_blue"
    assert snapshot.drawer_visible is True


def test_palette_generates_tokens_and_controls_in_lock_step():
    palette = Palette([ColorEntry("black", (0, 0, 0)), ColorEntry("sky_blue", (77, 196, 255))])
    assert list(palette.style_tokens) == list(palette.control_ids) == list(palette.ids)
    assert palette.control_ids["sky_blue"] == "radio-sky-blue"
    assert palette["sky_blue"].rgb == (77, 196, 255)
    with pytest.raises(TypeError):
        palette.style_tokens["black"] = (1, 1, 1)
