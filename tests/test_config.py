import copy

import pytest

from papirs.config import DEFAULT_CONFIG, ConfigError, load_board_settings, load_config
from papirs.state import Tool


def _config(**board_overrides):
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["board"].update(board_overrides)
    return config


def test_load_config_overrides(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "assets_root: /tmp/assets\nboard:\n  default_tool: eraser\n  sizes:\n    tool: 48\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("PAPIRS_CONFIG", str(config_path))

    config = load_config()
    assert config["assets_root"] == "/tmp/assets"
    assert config["board"]["default_tool"] == "eraser"
    assert config["board"]["sizes"]["tool"] == 48
    assert config["board"]["sizes"]["color"] == 22


def test_load_config_ignores_non_mapping_file(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv("PAPIRS_CONFIG", str(config_path))

    assert load_config() == DEFAULT_CONFIG


def test_default_settings_start_on_pen_with_black():
    settings = load_board_settings(DEFAULT_CONFIG)
    assert settings.tools == (Tool.SELECTOR, Tool.PEN, Tool.ERASER)
    assert settings.default_tool is Tool.PEN
    assert settings.default_pen_color == "black"
    assert settings.palette.ids == ("black", "red", "orange", "green", "blue", "sky_blue")
    assert settings.palette.style_tokens["red"] == (255, 75, 0)
    assert settings.layers == ("main", "sub", "temp")


def test_palette_extension_wires_control_and_token():
    palette = DEFAULT_CONFIG["board"]["palette"] + [{"id": "deep_pink", "rgb": [255, 20, 147]}]
    settings = load_board_settings(_config(palette=palette))
    assert settings.palette.ids[-1] == "deep_pink"
    assert settings.palette.style_tokens["deep_pink"] == (255, 20, 147)
    assert settings.palette.control_ids["deep_pink"] == "radio-deep-pink"


@pytest.mark.parametrize(
    "overrides",
    [
        {"tools": []},
        {"tools": ["pen", "brush"]},
        {"tools": ["pen", "pen"]},
        {"tools": ["selector", "eraser"], "default_tool": "pen"},
        {"default_tool": None},
        {"palette": []},
        {"palette": [{"id": "red", "rgb": [1, 2, 3]}, {"id": "red", "rgb": [4, 5, 6]}]},
        {"palette": [{"id": "dark-red", "rgb": [1, 2, 3]}]},
        {"palette": [{"id": "red", "rgb": [256, 0, 0]}], "default_pen_color": "red"},
        {"palette": [{"id": "red", "rgb": [0, 0]}], "default_pen_color": "red"},
        {"default_pen_color": "purple"},
        {"info": [{"id": "help"}]},
        {"info": [{"id": "help", "action": "clear", "url": "https://example.org"}]},
        {"info": [{"id": "undo", "action": "undo"}]},
        {"layers": []},
        {"layers": "main"},
        {"tools": "pen"},
        {"sizes": None},
        {"transitions": None},
        {"info": "clear"},
        {"info": [{"id": "x", "action": "clear"}, {"id": "x", "action": "quit"}]},
    ],
)
def test_load_board_settings_rejects_misconfiguration(overrides):
    with pytest.raises(ConfigError):
        load_board_settings(_config(**overrides))


def test_load_board_settings_rejects_empty_board_section():
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["board"] = None
    with pytest.raises(ConfigError):
        load_board_settings(config)


def test_empty_yaml_section_is_a_config_error(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("board:\n  sizes:\n", encoding="utf-8")
    monkeypatch.setenv("PAPIRS_CONFIG", str(config_path))

    with pytest.raises(ConfigError):
        load_board_settings(load_config())


def test_load_board_settings_rejects_non_positive_sizes():
    config = _config()
    config["board"]["sizes"]["color"] = 0
    with pytest.raises(ConfigError):
        load_board_settings(config)


def test_missing_pen_tool_is_allowed(caplog):
    settings = load_board_settings(_config(tools=["selector", "eraser"], default_tool="eraser"))
    assert Tool.PEN not in settings.tools
    assert "pen color drawer will never show" in caplog.text


def test_url_info_entry_is_accepted():
    settings = load_board_settings(_config(info=[{"id": "docs", "url": "https://example.org/docs"}]))
    assert settings.info[0].url == "https://example.org/docs"
    assert settings.info[0].action is None
