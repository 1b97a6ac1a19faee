from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from papirs.errors import ConfigError
from papirs.state import ColorEntry, Palette, Tool

logger = logging.getLogger(__name__)

INFO_ACTIONS = {"clear", "quit"}

DEFAULT_CONFIG: Dict[str, Any] = {
    "assets_root": "assets",
    "log_level": "INFO",
    "board": {
        "tools": ["selector", "pen", "eraser"],
        "default_tool": "pen",
        "palette": [
            {"id": "black", "rgb": [0, 0, 0]},
            {"id": "red", "rgb": [255, 75, 0]},
            {"id": "orange", "rgb": [246, 170, 0]},
            {"id": "green", "rgb": [3, 175, 122]},
            {"id": "blue", "rgb": [0, 90, 255]},
            {"id": "sky_blue", "rgb": [77, 196, 255]},
        ],
        "default_pen_color": "black",
        "info": [
            {"id": "clear", "action": "clear"},
            {"id": "quit", "action": "quit"},
        ],
        "layers": ["main", "sub", "temp"],
        "sizes": {
            "tool": 40,
            "color": 22,
            "info": 40,
            "spacing": 8,
            "inset": 6,
            "margin": 16,
        },
        "transitions": {
            "icon_invert": 0.4,
            "drawer": 0.1,
            "swatch_border": 0.1,
            "swatch_border_width": 3,
        },
    },
}


@dataclass(frozen=True)
class InfoEntry:
    id: str
    action: Optional[str] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class Sizes:
    tool: int
    color: int
    info: int
    spacing: int
    inset: int
    margin: int


@dataclass(frozen=True)
class Timings:
    icon_invert: float
    drawer: float
    swatch_border: float
    swatch_border_width: int


@dataclass(frozen=True)
class BoardSettings:
    tools: Tuple[Tool, ...]
    default_tool: Tool
    palette: Palette
    default_pen_color: str
    info: Tuple[InfoEntry, ...]
    layers: Tuple[str, ...]
    sizes: Sizes
    timings: Timings


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _candidate_config_paths() -> list[Path]:
    env_path = os.environ.get("PAPIRS_CONFIG")
    paths = []
    if env_path:
        paths.append(Path(env_path))
    paths.extend([
        Path("config.yaml"),
        Path("/etc/papirs/config.yaml"),
    ])
    return paths


def load_config() -> Dict[str, Any]:
    config = dict(DEFAULT_CONFIG)
    for path in _candidate_config_paths():
        if path.exists():
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
            if isinstance(data, dict):
                config = _deep_merge(config, data)
            else:
                logger.warning("Ignoring %s: top level is not a mapping", path)
            break
    return config


def _parse_tool(value: Any) -> Tool:
    try:
        return Tool(str(value))
    except ValueError:
        raise ConfigError(f"unknown tool {value!r}") from None


def _parse_rgb(color_id: str, value: Any) -> Tuple[int, int, int]:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ConfigError(f"color {color_id!r}: rgb must be three integers")
    channels = []
    for channel in value:
        if isinstance(channel, bool) or not isinstance(channel, int) or not 0 <= channel <= 255:
            raise ConfigError(f"color {color_id!r}: channel {channel!r} out of range 0..255")
        channels.append(channel)
    return tuple(channels)


def _parse_palette(raw: Any) -> Palette:
    if not isinstance(raw, list) or not raw:
        raise ConfigError("palette must be a non-empty list")
    entries = []
    seen = set()
    for item in raw:
        if not isinstance(item, dict):
            raise ConfigError(f"palette entry {item!r} must be a mapping")
        color_id = str(item.get("id", ""))
        if not color_id.isidentifier():
            raise ConfigError(f"palette id {color_id!r} is not a valid identifier")
        if color_id in seen:
            raise ConfigError(f"duplicate palette id {color_id!r}")
        seen.add(color_id)
        entries.append(ColorEntry(color_id, _parse_rgb(color_id, item.get("rgb"))))
    return Palette(entries)


def _parse_info(raw: Any) -> Tuple[InfoEntry, ...]:
    if raw is not None and not isinstance(raw, list):
        raise ConfigError(f"board.info must be a list, got {raw!r}")
    entries = []
    seen = set()
    for item in raw or []:
        if not isinstance(item, dict):
            raise ConfigError(f"info entry {item!r} must be a mapping")
        entry = InfoEntry(
            id=str(item.get("id", "")),
            action=item.get("action"),
            url=item.get("url"),
        )
        if not entry.id:
            raise ConfigError(f"info entry {item!r} has no id")
        if entry.id in seen:
            raise ConfigError(f"duplicate info id {entry.id!r}")
        seen.add(entry.id)
        if (entry.action is None) == (entry.url is None):
            raise ConfigError(f"info entry {entry.id!r} needs exactly one of action or url")
        if entry.action is not None and entry.action not in INFO_ACTIONS:
            raise ConfigError(f"info entry {entry.id!r}: unknown action {entry.action!r}")
        entries.append(entry)
    return tuple(entries)


def _section(parent: Dict[str, Any], key: str, name: str) -> Dict[str, Any]:
    value = parent.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"{name} must be a mapping, got {value!r}")
    return value


def _positive(section: str, key: str, value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{section}.{key} must be positive, got {value!r}")
    return value


def load_board_settings(config: Dict[str, Any]) -> BoardSettings:
    board = _section(config, "board", "board")

    raw_tools = board.get("tools") or []
    if not isinstance(raw_tools, list):
        raise ConfigError(f"board.tools must be a list, got {raw_tools!r}")
    tools = tuple(_parse_tool(tool) for tool in raw_tools)
    if not tools:
        raise ConfigError("at least one tool must be configured")
    if len(set(tools)) != len(tools):
        raise ConfigError(f"duplicate tools in {list(raw_tools)}")
    default_tool = _parse_tool(board.get("default_tool"))
    if default_tool not in tools:
        raise ConfigError(f"default tool {default_tool.value!r} is not among the configured tools")
    if Tool.PEN not in tools:
        logger.warning("Pen tool is not configured; the pen color drawer will never show")

    palette = _parse_palette(board.get("palette"))
    default_pen_color = str(board.get("default_pen_color"))
    if default_pen_color not in palette.ids:
        raise ConfigError(f"default pen color {default_pen_color!r} is not in the palette")

    raw_layers = board.get("layers") or []
    if not isinstance(raw_layers, list):
        raise ConfigError(f"board.layers must be a list, got {raw_layers!r}")
    layers = tuple(str(name) for name in raw_layers)
    if not layers:
        raise ConfigError("at least one drawing layer must be configured")

    raw_sizes = _section(board, "sizes", "board.sizes")
    sizes = Sizes(**{
        key: int(_positive("sizes", key, raw_sizes.get(key)))
        for key in ("tool", "color", "info", "spacing", "inset", "margin")
    })

    raw_timings = _section(board, "transitions", "board.transitions")
    timings = Timings(
        icon_invert=float(_positive("transitions", "icon_invert", raw_timings.get("icon_invert"))),
        drawer=float(_positive("transitions", "drawer", raw_timings.get("drawer"))),
        swatch_border=float(_positive("transitions", "swatch_border", raw_timings.get("swatch_border"))),
        swatch_border_width=int(
            _positive("transitions", "swatch_border_width", raw_timings.get("swatch_border_width"))
        ),
    )

    return BoardSettings(
        tools=tools,
        default_tool=default_tool,
        palette=palette,
        default_pen_color=default_pen_color,
        info=_parse_info(board.get("info")),
        layers=layers,
        sizes=sizes,
        timings=timings,
    )
